import logging
from typing import List, Optional, Tuple

from perangkat_ajar.schemas.planning_schema import (
    AnnualPlanData,
    AnnualPlanRow,
    AtpData,
    CalendarData,
    ClassSchedule,
    CriteriaData,
    CriteriaRow,
    EffectiveDaysResponse,
    PeriodBudgetResponse,
    Semester,
    SemesterPlanData,
    SemesterPlanRow,
    SubjectCatalog,
    TeachingSession,
    YearlyCalendar,
)
from perangkat_ajar.services import effective_days
from perangkat_ajar.services.calendar_service import build_yearly_calendar
from perangkat_ajar.services.decomposition import (
    decompose_annual,
    decompose_criteria,
    decompose_semester,
)
from perangkat_ajar.services.override_merger import (
    extract_annual,
    extract_criteria,
    extract_semester,
    merge_annual,
    merge_criteria,
    merge_semester,
)
from perangkat_ajar.services.path_resolver import DocumentFamily, entry_key, resolve

logger = logging.getLogger(__name__)


class PlanningService:
    """
    Read-modify-write flows of the planning documents, one scope at a time.
    A missing document always reads as an empty skeleton.
    """

    def __init__(self, store):
        self.store = store

    # --- ATP ---
    async def get_atp(self, academic_year: str, class_level: str, subject: str, semester, teacher_id: Optional[str] = None) -> AtpData:
        document = await self.store.read(resolve(DocumentFamily.ATP, academic_year, class_level, subject, Semester(semester).value, teacher_id))
        return AtpData.model_validate(document or {})

    async def save_atp(self, academic_year: str, class_level: str, subject: str, semester, data: AtpData, teacher_id: Optional[str] = None) -> AtpData:
        path = resolve(DocumentFamily.ATP, academic_year, class_level, subject, Semester(semester).value, teacher_id)
        await self.store.write(path, data.model_dump(by_alias=True))
        return data

    # --- KKTP ---
    async def _criteria_skeleton(self, academic_year, class_level, subject, semester, teacher_id) -> List[CriteriaRow]:
        atp = await self.get_atp(academic_year, class_level, subject, semester, teacher_id)
        return decompose_criteria(atp.rows)

    async def get_criteria(self, academic_year: str, class_level: str, subject: str, semester, teacher_id: Optional[str] = None) -> CriteriaData:
        skeleton = await self._criteria_skeleton(academic_year, class_level, subject, semester, teacher_id)
        stored = await self.store.read(resolve(DocumentFamily.KKTP, academic_year, class_level, subject, Semester(semester).value, teacher_id))
        return merge_criteria(skeleton, stored)

    async def save_criteria(self, academic_year: str, class_level: str, subject: str, semester, data: CriteriaData, teacher_id: Optional[str] = None) -> CriteriaData:
        skeleton = await self._criteria_skeleton(academic_year, class_level, subject, semester, teacher_id)
        document = extract_criteria(data, skeleton)
        await self.store.write(resolve(DocumentFamily.KKTP, academic_year, class_level, subject, Semester(semester).value, teacher_id), document)
        logger.info(f"KKTP saved for {subject} ({Semester(semester).value}): {len(document['criteriaById'])} rows")
        return merge_criteria(skeleton, document)

    # --- PROTA ---
    async def _annual_skeleton(self, academic_year, class_level, subject, teacher_id) -> Tuple[List[AnnualPlanRow], List[AnnualPlanRow]]:
        ganjil = await self.get_atp(academic_year, class_level, subject, Semester.GANJIL, teacher_id)
        genap = await self.get_atp(academic_year, class_level, subject, Semester.GENAP, teacher_id)
        return decompose_annual(ganjil.rows), decompose_annual(genap.rows)

    async def get_annual_plan(self, academic_year: str, class_level: str, subject: str, teacher_id: Optional[str] = None) -> AnnualPlanData:
        ganjil, genap = await self._annual_skeleton(academic_year, class_level, subject, teacher_id)
        stored = await self.store.read(resolve(DocumentFamily.PROTA, academic_year, class_level, subject, teacher_id=teacher_id))
        return AnnualPlanData(ganjil_rows=merge_annual(ganjil, stored), genap_rows=merge_annual(genap, stored))

    async def save_annual_plan(self, academic_year: str, class_level: str, subject: str, data: AnnualPlanData, teacher_id: Optional[str] = None) -> AnnualPlanData:
        ganjil, genap = await self._annual_skeleton(academic_year, class_level, subject, teacher_id)
        # One map for the whole year
        document = extract_annual(data.ganjil_rows + data.genap_rows, ganjil + genap)
        await self.store.write(resolve(DocumentFamily.PROTA, academic_year, class_level, subject, teacher_id=teacher_id), document)
        logger.info(f"PROTA saved for {subject}: {len(document['allocatedPeriodsById'])} rows")
        return AnnualPlanData(ganjil_rows=merge_annual(ganjil, document), genap_rows=merge_annual(genap, document))

    # --- PROSEM ---
    async def _semester_skeleton(self, academic_year, class_level, subject, semester, teacher_id) -> List[SemesterPlanRow]:
        annual = await self.get_annual_plan(academic_year, class_level, subject, teacher_id)
        rows = annual.ganjil_rows if Semester(semester) == Semester.GANJIL else annual.genap_rows
        return decompose_semester(rows)

    async def get_semester_plan(self, academic_year: str, class_level: str, subject: str, semester, teacher_id: Optional[str] = None) -> SemesterPlanData:
        skeleton = await self._semester_skeleton(academic_year, class_level, subject, semester, teacher_id)
        stored = await self.store.read(resolve(DocumentFamily.PROSEM, academic_year, class_level, subject, Semester(semester).value, teacher_id))
        return SemesterPlanData(rows=merge_semester(skeleton, stored))

    async def save_semester_plan(self, academic_year: str, class_level: str, subject: str, semester, data: SemesterPlanData, teacher_id: Optional[str] = None) -> SemesterPlanData:
        skeleton = await self._semester_skeleton(academic_year, class_level, subject, semester, teacher_id)
        document = extract_semester(data.rows, skeleton)
        await self.store.write(resolve(DocumentFamily.PROSEM, academic_year, class_level, subject, Semester(semester).value, teacher_id), document)
        logger.info(f"PROSEM saved for {subject} ({Semester(semester).value}): {len(document)} rows")
        return SemesterPlanData(rows=merge_semester(skeleton, document))

    # --- Mata pelajaran & jadwal ---
    async def get_subjects(self, academic_year: str, class_level: str, teacher_id: Optional[str] = None) -> SubjectCatalog:
        document = await self.store.read(resolve(DocumentFamily.SUBJECTS, academic_year, class_level, teacher_id=teacher_id))
        return SubjectCatalog.model_validate(document or {})

    async def save_subjects(self, academic_year: str, class_level: str, data: SubjectCatalog, teacher_id: Optional[str] = None) -> SubjectCatalog:
        await self.store.write(resolve(DocumentFamily.SUBJECTS, academic_year, class_level, teacher_id=teacher_id), data.model_dump(by_alias=True))
        return data

    async def get_class_schedule(self, academic_year: str, class_level: str, teacher_id: Optional[str] = None) -> ClassSchedule:
        document = await self.store.read(resolve(DocumentFamily.CLASS_SCHEDULE, academic_year, class_level, teacher_id=teacher_id))
        return ClassSchedule.model_validate(document or {})

    async def save_class_schedule(self, academic_year: str, class_level: str, data: ClassSchedule, teacher_id: Optional[str] = None) -> ClassSchedule:
        await self.store.write(resolve(DocumentFamily.CLASS_SCHEDULE, academic_year, class_level, teacher_id=teacher_id), data.model_dump(by_alias=True))
        return data

    # --- Kalender ---
    async def get_calendar(self, academic_year: str, teacher_id: Optional[str] = None) -> CalendarData:
        document = await self.store.read(resolve(DocumentFamily.CALENDAR, academic_year, teacher_id=teacher_id))
        return CalendarData.model_validate(document or {})

    async def save_calendar(self, academic_year: str, data: CalendarData, teacher_id: Optional[str] = None) -> CalendarData:
        await self.store.write(resolve(DocumentFamily.CALENDAR, academic_year, teacher_id=teacher_id), data.model_dump(by_alias=True, mode="json"))
        return data

    async def get_yearly_calendar(self, academic_year: str, teacher_id: Optional[str] = None) -> YearlyCalendar:
        calendar_data = await self.get_calendar(academic_year, teacher_id)
        return build_yearly_calendar(calendar_data.events, academic_year)

    async def get_effective_days(self, academic_year: str, semester, teacher_id: Optional[str] = None) -> EffectiveDaysResponse:
        start, end = effective_days.semester_window(academic_year, semester)
        calendar_data = await self.get_calendar(academic_year, teacher_id)
        tally = effective_days.count_effective_days(start, end, effective_days.non_instructional_dates(calendar_data.events))
        return EffectiveDaysResponse(semester=Semester(semester), start=start, end=end, tally=tally, total=sum(tally.values()))

    async def subject_name(self, academic_year, class_level, subject, teacher_id) -> str:
        catalog = await self.get_subjects(academic_year, class_level, teacher_id)
        for entry in catalog.subjects:
            if entry_key(entry) == subject:
                return entry.name
        return subject

    async def get_period_budget(self, academic_year: str, class_level: str, subject: str, semester, teacher_id: Optional[str] = None) -> PeriodBudgetResponse:
        subject_name = await self.subject_name(academic_year, class_level, subject, teacher_id)
        schedule = await self.get_class_schedule(academic_year, class_level, teacher_id)
        days = await self.get_effective_days(academic_year, semester, teacher_id)
        periods = effective_days.weekly_periods(schedule, subject_name)
        return PeriodBudgetResponse(
            semester=Semester(semester),
            subject_name=subject_name,
            weekly_periods=periods,
            tally=days.tally,
            budget=effective_days.period_budget(days.tally, periods),
        )

    async def get_teaching_sessions(self, academic_year: str, class_level: str, subject: str, semester, teacher_id: Optional[str] = None) -> List[TeachingSession]:
        subject_name = await self.subject_name(academic_year, class_level, subject, teacher_id)
        schedule = await self.get_class_schedule(academic_year, class_level, teacher_id)
        calendar_data = await self.get_calendar(academic_year, teacher_id)
        start, end = effective_days.semester_window(academic_year, semester)
        return effective_days.teaching_sessions(
            start,
            end,
            effective_days.non_instructional_dates(calendar_data.events),
            effective_days.weekly_periods(schedule, subject_name),
        )
