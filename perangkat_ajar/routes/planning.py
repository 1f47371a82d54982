from fastapi import APIRouter, Depends
from typing import List, Optional

from perangkat_ajar.dependencies import get_planning_service
from perangkat_ajar.schemas.planning_schema import (
    AnnualPlanData,
    AtpData,
    ClassSchedule,
    CriteriaData,
    PeriodBudgetResponse,
    Semester,
    SemesterPlanData,
    SubjectCatalog,
    TeachingSession,
)
from perangkat_ajar.services.planning_service import PlanningService

router = APIRouter(prefix="/api/planning", tags=["planning"])


# --- ATP ---
@router.get("/atp", response_model=AtpData)
async def get_atp(year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                  service: PlanningService = Depends(get_planning_service)):
    return await service.get_atp(year, class_level, subject, semester, teacher_id)

@router.put("/atp", response_model=AtpData)
async def save_atp(data: AtpData, year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                   service: PlanningService = Depends(get_planning_service)):
    return await service.save_atp(year, class_level, subject, semester, data, teacher_id)

# --- KKTP ---
@router.get("/kktp", response_model=CriteriaData)
async def get_kktp(year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                   service: PlanningService = Depends(get_planning_service)):
    return await service.get_criteria(year, class_level, subject, semester, teacher_id)

@router.put("/kktp", response_model=CriteriaData)
async def save_kktp(data: CriteriaData, year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                    service: PlanningService = Depends(get_planning_service)):
    return await service.save_criteria(year, class_level, subject, semester, data, teacher_id)

# --- PROTA ---
@router.get("/prota", response_model=AnnualPlanData)
async def get_prota(year: str, class_level: str, subject: str, teacher_id: Optional[str] = None,
                    service: PlanningService = Depends(get_planning_service)):
    return await service.get_annual_plan(year, class_level, subject, teacher_id)

@router.put("/prota", response_model=AnnualPlanData)
async def save_prota(data: AnnualPlanData, year: str, class_level: str, subject: str, teacher_id: Optional[str] = None,
                     service: PlanningService = Depends(get_planning_service)):
    return await service.save_annual_plan(year, class_level, subject, data, teacher_id)

# --- PROSEM ---
@router.get("/prosem", response_model=SemesterPlanData)
async def get_prosem(year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                     service: PlanningService = Depends(get_planning_service)):
    return await service.get_semester_plan(year, class_level, subject, semester, teacher_id)

@router.put("/prosem", response_model=SemesterPlanData)
async def save_prosem(data: SemesterPlanData, year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                      service: PlanningService = Depends(get_planning_service)):
    return await service.save_semester_plan(year, class_level, subject, semester, data, teacher_id)

# --- Mata Pelajaran & Jadwal ---
@router.get("/subjects", response_model=SubjectCatalog)
async def get_subjects(year: str, class_level: str, teacher_id: Optional[str] = None,
                       service: PlanningService = Depends(get_planning_service)):
    return await service.get_subjects(year, class_level, teacher_id)

@router.put("/subjects", response_model=SubjectCatalog)
async def save_subjects(data: SubjectCatalog, year: str, class_level: str, teacher_id: Optional[str] = None,
                        service: PlanningService = Depends(get_planning_service)):
    return await service.save_subjects(year, class_level, data, teacher_id)

@router.get("/schedule", response_model=ClassSchedule)
async def get_schedule(year: str, class_level: str, teacher_id: Optional[str] = None,
                       service: PlanningService = Depends(get_planning_service)):
    return await service.get_class_schedule(year, class_level, teacher_id)

@router.put("/schedule", response_model=ClassSchedule)
async def save_schedule(data: ClassSchedule, year: str, class_level: str, teacher_id: Optional[str] = None,
                        service: PlanningService = Depends(get_planning_service)):
    return await service.save_class_schedule(year, class_level, data, teacher_id)

# --- Batas JP & sesi mengajar ---
@router.get("/period-budget", response_model=PeriodBudgetResponse)
async def get_period_budget(year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                            service: PlanningService = Depends(get_planning_service)):
    return await service.get_period_budget(year, class_level, subject, semester, teacher_id)

@router.get("/teaching-sessions", response_model=List[TeachingSession])
async def get_teaching_sessions(year: str, class_level: str, subject: str, semester: Semester, teacher_id: Optional[str] = None,
                                service: PlanningService = Depends(get_planning_service)):
    return await service.get_teaching_sessions(year, class_level, subject, semester, teacher_id)
