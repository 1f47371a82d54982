"""
Tarik data dari induk (admin) ke salinan guru.

A pull reads the master document first and writes the teacher copy only when
something was found, so the teacher document is either fully replaced or left
untouched.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from perangkat_ajar.schemas.planning_schema import Semester, SubjectCatalog, SubjectEntry
from perangkat_ajar.services.document_store import path_key
from perangkat_ajar.services.path_resolver import (
    SEMESTER_KEYED,
    SUBJECT_KEYED,
    DocumentFamily,
    InvalidScope,
    entry_key,
    resolve,
    subject_key,
)

logger = logging.getLogger(__name__)


class MasterDataNotPopulated(Exception):
    def __init__(self, family: DocumentFamily, path: List[str]):
        self.family = family
        self.path = path
        super().__init__(
            f"Data induk admin belum diisi untuk cakupan ini ({DocumentFamily(family).value}): "
            "master data not populated for this scope."
        )


@dataclass
class PullTarget:
    family: DocumentFamily
    academic_year: str
    class_level: str
    teacher_id: str
    subject: Optional[str] = None
    semester: Optional[str] = None

    def master_path(self, subject: Optional[str] = None) -> List[str]:
        return resolve(self.family, self.academic_year, self.class_level, subject, self.semester)

    def teacher_path(self) -> List[str]:
        # Always the caller's own subject id, even when the master was found under another key
        return resolve(self.family, self.academic_year, self.class_level, self.subject, self.semester, self.teacher_id)


@dataclass
class PullResult:
    family: DocumentFamily
    source_path: List[str]
    target_path: List[str]
    used_fallback: bool
    data: dict


def catalog_entries(document: Optional[dict]) -> List[SubjectEntry]:
    if not document:
        return []
    return SubjectCatalog.model_validate(document).subjects


def _normalized_name(name: str) -> str:
    return (name or "").strip().lower()


# --- Resolution strategies: each returns a master address to try, or None ---
async def id_exact(store, target: PullTarget) -> Optional[List[str]]:
    return target.master_path(target.subject)


async def name_match(store, target: PullTarget) -> Optional[List[str]]:
    if not target.subject or target.family not in SUBJECT_KEYED:
        return None

    teacher_catalog = await store.read(
        resolve(DocumentFamily.SUBJECTS, target.academic_year, target.class_level, teacher_id=target.teacher_id)
    )
    own = next(
        (e for e in catalog_entries(teacher_catalog) if target.subject in (e.id, subject_key(e.code))),
        None,
    )
    if own is None or not _normalized_name(own.name):
        return None

    master_catalog = await store.read(
        resolve(DocumentFamily.SUBJECTS, target.academic_year, target.class_level)
    )
    wanted = _normalized_name(own.name)
    for entry in catalog_entries(master_catalog):
        if _normalized_name(entry.name) == wanted:
            logger.info(f"Subject '{target.subject}' matched master subject '{entry_key(entry)}' by name '{own.name}'")
            return target.master_path(entry_key(entry))
    return None


def check_target(target: PullTarget) -> None:
    if not target.teacher_id:
        raise InvalidScope("teacher_id wajib diisi untuk menarik data dari induk.")
    family = DocumentFamily(target.family)
    if family in SUBJECT_KEYED and not target.subject:
        raise InvalidScope(f"Mata pelajaran wajib diisi untuk {family.value}.")
    if family in SEMESTER_KEYED and not target.semester:
        raise InvalidScope(f"Semester wajib diisi untuk {family.value}.")


def _is_populated(family: DocumentFamily, document: Optional[dict]) -> bool:
    if not document:
        return False
    if family == DocumentFamily.SUBJECTS:
        return bool(document.get("subjects"))
    return True


class PullSynchronizer:
    strategies = [id_exact, name_match]

    def __init__(self, store):
        self.store = store

    async def pull(self, target: PullTarget) -> PullResult:
        check_target(target)

        tried = []
        document = None
        source = None
        for strategy in self.strategies:
            address = await strategy(self.store, target)
            if address is None or address in tried:
                continue
            tried.append(address)
            candidate = await self.store.read(address)
            if _is_populated(target.family, candidate):
                document, source = candidate, address
                break

        if document is None:
            logger.warning(f"Master data not populated: {[path_key(p) for p in tried]}")
            raise MasterDataNotPopulated(target.family, tried[0] if tried else target.master_path())

        destination = target.teacher_path()
        await self.store.write(destination, document)
        used_fallback = source != tried[0]
        logger.info(f"Pulled {path_key(source)} -> {path_key(destination)} (fallback={used_fallback})")
        return PullResult(
            family=target.family,
            source_path=source,
            target_path=destination,
            used_fallback=used_fallback,
            data=document,
        )

    async def pull_subjects(self, academic_year: str, class_level: str, teacher_id: str) -> PullResult:
        return await self.pull(PullTarget(DocumentFamily.SUBJECTS, academic_year, class_level, teacher_id))

    async def pull_calendar(self, academic_year: str, teacher_id: str) -> PullResult:
        return await self.pull(PullTarget(DocumentFamily.CALENDAR, academic_year, "", teacher_id))

    async def _copy_if_present(self, target: PullTarget, pulled: list, skipped: list) -> None:
        source = target.master_path(target.subject)
        document = await self.store.read(source)
        if not _is_populated(target.family, document):
            skipped.append(path_key(source))
            return
        await self.store.write(target.teacher_path(), document)
        pulled.append(path_key(source))

    async def pull_master_data(self, academic_year: str, class_level: str, teacher_id: str):
        """
        Best-effort copy of everything the master holds for one class: calendar,
        subject catalog, then per subject CP, ATP, KKTP, PROSEM and PROTA, then
        the phase's kokurikuler program. Missing master documents are skipped.
        Returns (pulled, skipped) lists of master paths.
        """
        if not teacher_id:
            raise InvalidScope("teacher_id wajib diisi untuk menarik data dari induk.")

        pulled, skipped = [], []
        semesters = [s.value for s in Semester]

        def target(family, subject=None, semester=None):
            return PullTarget(family, academic_year, class_level, teacher_id, subject, semester)

        logger.info("Menarik Kalender Pendidikan...")
        await self._copy_if_present(target(DocumentFamily.CALENDAR), pulled, skipped)

        logger.info("Mengambil daftar mata pelajaran...")
        await self._copy_if_present(target(DocumentFamily.SUBJECTS), pulled, skipped)
        subjects = catalog_entries(await self.store.read(target(DocumentFamily.SUBJECTS).master_path()))

        for entry in subjects:
            subject_id = entry_key(entry)
            logger.info(f"Menarik CP, TP, ATP, KKTP, PROSEM & PROTA: {entry.name}...")
            await self._copy_if_present(target(DocumentFamily.LEARNING_OUTCOMES, subject_id), pulled, skipped)
            await self._copy_if_present(target(DocumentFamily.LEARNING_OBJECTIVES, subject_id), pulled, skipped)
            for semester in semesters:
                for family in (DocumentFamily.ATP, DocumentFamily.KKTP, DocumentFamily.PROSEM):
                    await self._copy_if_present(target(family, subject_id, semester), pulled, skipped)
            await self._copy_if_present(target(DocumentFamily.PROTA, subject_id), pulled, skipped)

        for semester in semesters:
            logger.info(f"Menarik Program Kokurikuler ({semester})...")
            await self._copy_if_present(target(DocumentFamily.KOKURIKULER, semester=semester), pulled, skipped)

        logger.info(f"Sinkronisasi selesai! {len(pulled)} dokumen ditarik, {len(skipped)} dilewati.")
        return pulled, skipped
