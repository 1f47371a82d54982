from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from perangkat_ajar.dependencies import get_synchronizer
from perangkat_ajar.schemas.planning_schema import BulkPullResponse, PullResponse, Semester
from perangkat_ajar.services.document_store import path_key
from perangkat_ajar.services.path_resolver import DocumentFamily
from perangkat_ajar.services.sync_service import PullResult, PullSynchronizer, PullTarget

router = APIRouter(prefix="/api/sync", tags=["sync"])


def to_response(result: PullResult) -> PullResponse:
    return PullResponse(
        family=result.family.value,
        source_path=path_key(result.source_path),
        target_path=path_key(result.target_path),
        used_fallback=result.used_fallback,
        data=result.data,
    )


# Tarik semua data induk untuk satu kelas
@router.post("/all", response_model=BulkPullResponse)
async def pull_all(year: str, class_level: str, teacher_id: str,
                   synchronizer: PullSynchronizer = Depends(get_synchronizer)):
    pulled, skipped = await synchronizer.pull_master_data(year, class_level, teacher_id)
    return BulkPullResponse(pulled=pulled, skipped=skipped)

@router.post("/{family}", response_model=PullResponse)
async def pull_document(family: DocumentFamily, year: str, teacher_id: str,
                        class_level: str = "", subject: Optional[str] = None, semester: Optional[Semester] = None,
                        synchronizer: PullSynchronizer = Depends(get_synchronizer)):
    if not teacher_id.strip():
        raise HTTPException(status_code=400, detail="teacher_id wajib diisi.")
    target = PullTarget(family, year, class_level, teacher_id, subject, semester.value if semester else None)
    result = await synchronizer.pull(target)
    return to_response(result)
