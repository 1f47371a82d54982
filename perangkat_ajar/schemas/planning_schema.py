import enum
import datetime as dt
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# PROSEM week grid: bulan 1-6 x minggu 1-5
WEEK_KEYS = [f"b{month}_m{week}" for month in range(1, 7) for week in range(1, 6)]

WEEKDAYS = ["senin", "selasa", "rabu", "kamis", "jumat", "sabtu"]


def empty_week_selections() -> Dict[str, bool]:
    return {key: False for key in WEEK_KEYS}


class CamelModel(BaseModel):
    # Persisted documents use camelCase field names
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Semester(str, enum.Enum):
    GANJIL = "Ganjil"
    GENAP = "Genap"

    @classmethod
    def _missing_(cls, value):
        # "ganjil", " GENAP " ...
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class EventType(str, enum.Enum):
    HOLIDAY = "holiday"
    ASSESSMENT = "assessment"
    EVENT = "event"
    OTHER = "other"


# --- ATP (source rows) ---
class LearningPathwayRow(CamelModel):
    id: str
    element: str = ""
    learning_goal_pathway: str = Field("", examples=["1. Mengenal bilangan sampai 1.000\n2. Membandingkan bilangan"])
    material: str = ""
    material_scope: str = ""


class AtpData(CamelModel):
    rows: List[LearningPathwayRow] = []


# --- KKTP ---
class AchievementLevels(CamelModel):
    belum_tercapai: str = ""
    tercapai_sebagian: str = ""
    tuntas: str = ""
    tuntas_plus: str = ""


class CriteriaIntervals(CamelModel):
    interval1: str = "< 60"
    interval2: str = "60 - 72"
    interval3: str = "73 - 86"
    interval4: str = "87 - 100"


class CriteriaRow(CamelModel):
    id: str
    original_id: str
    material: str = ""
    pathway_line: str = ""
    display_line: str = ""
    criteria: AchievementLevels = Field(default_factory=AchievementLevels)


class CriteriaData(CamelModel):
    intervals: CriteriaIntervals = Field(default_factory=CriteriaIntervals)
    rows: List[CriteriaRow] = []


# --- PROTA ---
class AnnualPlanRow(CamelModel):
    id: str
    element: str = ""
    material: str = ""
    learning_goal_pathway: str = ""
    material_scope: str = ""
    allocated_periods: int = 0


class AnnualPlanData(CamelModel):
    ganjil_rows: List[AnnualPlanRow] = []
    genap_rows: List[AnnualPlanRow] = []


# --- PROSEM ---
class SemesterPlanRow(CamelModel):
    id: str
    annual_row_id: str
    material: str = ""
    learning_goal_pathway: str = ""
    scope_line: str = ""
    display_line: str = ""
    is_slm: bool = False
    allocated_periods: int = 0
    week_selections: Dict[str, bool] = Field(default_factory=empty_week_selections)
    notes: str = ""


class SemesterPlanData(CamelModel):
    rows: List[SemesterPlanRow] = []


# --- Kalender Pendidikan ---
class CalendarEvent(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    date: dt.date
    description: str = ""
    type: EventType = EventType.OTHER

    @field_validator("type", mode="before")
    @classmethod
    def unknown_type_is_other(cls, value):
        if isinstance(value, EventType):
            return value
        try:
            return EventType(str(value).strip().lower())
        except ValueError:
            return EventType.OTHER


class CalendarData(CamelModel):
    events: List[CalendarEvent] = []


class EffectiveDaysResponse(CamelModel):
    semester: Semester
    start: dt.date
    end: dt.date
    tally: Dict[str, int]
    total: int


class PeriodBudgetResponse(CamelModel):
    semester: Semester
    subject_name: str
    weekly_periods: Dict[str, int]
    tally: Dict[str, int]
    budget: int


class CalendarMonth(CamelModel):
    name: str
    year: int
    month: int
    # label ("LHB", "LU", ...) or running effective-day number; None past month end
    days: List[Union[str, int, None]]


class HolidayEntry(CamelModel):
    date: dt.date
    description: str


class YearlyCalendar(CamelModel):
    months: List[CalendarMonth]
    holidays: List[HolidayEntry]
    effective_days: Dict[str, int]


# --- Mata Pelajaran & Jadwal ---
class SubjectEntry(CamelModel):
    # empty when the catalog keys the subject by its code
    id: str = ""
    code: str = ""
    name: str = ""
    hours: int = 0


class SubjectCatalog(CamelModel):
    subjects: List[SubjectEntry] = []


class ScheduleTimeSlot(CamelModel):
    id: str = ""
    lesson_number: str = ""
    time_range: str = ""
    subjects: Dict[str, str] = {}  # weekday -> subject name


class ClassSchedule(CamelModel):
    time_slots: List[ScheduleTimeSlot] = []


# --- Sinkronisasi ---
class PullResponse(CamelModel):
    status: str = "success"
    family: str
    source_path: str
    target_path: str
    used_fallback: bool = False
    data: dict


class BulkPullResponse(CamelModel):
    status: str = "success"
    pulled: List[str] = []
    skipped: List[str] = []


class SuggestionResponse(CamelModel):
    status: str = "success"
    updated_ids: List[str] = []


class TeachingSession(CamelModel):
    date: dt.date
    periods: int
    week_key: str
