from fastapi import APIRouter, Depends
from typing import Optional

from perangkat_ajar.dependencies import get_suggestion_service
from perangkat_ajar.schemas.planning_schema import Semester, SuggestionResponse
from perangkat_ajar.services.suggestion_service import SuggestionService

router = APIRouter(prefix="/api/suggest", tags=["suggest"])


@router.post("/kktp", response_model=SuggestionResponse)
async def suggest_kktp(year: str, class_level: str, subject: str, semester: Semester,
                       teacher_id: Optional[str] = None, overwrite: bool = False,
                       service: SuggestionService = Depends(get_suggestion_service)):
    updated = await service.suggest_criteria(year, class_level, subject, semester, teacher_id, overwrite)
    return SuggestionResponse(updated_ids=updated)

@router.post("/prota", response_model=SuggestionResponse)
async def suggest_prota(year: str, class_level: str, subject: str, teacher_id: Optional[str] = None,
                        service: SuggestionService = Depends(get_suggestion_service)):
    updated = await service.suggest_annual_allocation(year, class_level, subject, teacher_id)
    return SuggestionResponse(updated_ids=updated)

@router.post("/kktp/bulk")
async def suggest_kktp_bulk(year: str, service: SuggestionService = Depends(get_suggestion_service)):
    summary = await service.suggest_criteria_for_all(year)
    return {"status": "success", **summary}

@router.post("/prosem", response_model=SuggestionResponse)
async def suggest_prosem(year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                         service: SuggestionService = Depends(get_suggestion_service)):
    updated = await service.suggest_semester_schedule(year, class_level, subject, semester, teacher_id)
    return SuggestionResponse(updated_ids=updated)
