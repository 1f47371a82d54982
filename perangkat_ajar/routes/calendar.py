from fastapi import APIRouter, Depends
from typing import Optional

from perangkat_ajar.dependencies import get_planning_service
from perangkat_ajar.schemas.planning_schema import (
    CalendarData,
    EffectiveDaysResponse,
    Semester,
    YearlyCalendar,
)
from perangkat_ajar.services.planning_service import PlanningService

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


@router.get("/events", response_model=CalendarData)
async def get_events(year: str, teacher_id: Optional[str] = None,
                     service: PlanningService = Depends(get_planning_service)):
    return await service.get_calendar(year, teacher_id)

@router.put("/events", response_model=CalendarData)
async def save_events(data: CalendarData, year: str, teacher_id: Optional[str] = None,
                      service: PlanningService = Depends(get_planning_service)):
    return await service.save_calendar(year, data, teacher_id)

@router.get("/yearly", response_model=YearlyCalendar)
async def get_yearly(year: str, teacher_id: Optional[str] = None,
                     service: PlanningService = Depends(get_planning_service)):
    return await service.get_yearly_calendar(year, teacher_id)

@router.get("/effective-days", response_model=EffectiveDaysResponse)
async def get_effective_days(year: str, semester: Semester, teacher_id: Optional[str] = None,
                             service: PlanningService = Depends(get_planning_service)):
    return await service.get_effective_days(year, semester, teacher_id)
