import enum
import calendar
import datetime as dt
from typing import Dict, Iterable, List, Optional, Tuple

from perangkat_ajar.schemas.planning_schema import (
    CalendarEvent,
    CalendarMonth,
    EventType,
    HolidayEntry,
    YearlyCalendar,
)
from perangkat_ajar.services.path_resolver import parse_academic_year
from perangkat_ajar.utils.time_utils import jakarta_today


class EventCategory(str, enum.Enum):
    LHB = "LHB"                  # libur hari besar (nasional/keagamaan)
    CUTI = "CUTI"                # cuti bersama
    LIBUR_BIASA = "LIBUR_BIASA"  # libur sekolah biasa
    PENILAIAN = "PENILAIAN"      # sumatif
    KEGIATAN = "KEGIATAN"        # kegiatan sekolah


SUNDAY = "SUNDAY"

PENILAIAN_KEYWORDS = ("sumatif tengah semester", "sumatif akhir semester", "sumatif akhir tahun")

# Checked in this order for holidays; first match wins
HOLIDAY_KEYWORD_TABLE: List[Tuple[Tuple[str, ...], EventCategory]] = [
    (("cuti bersama",), EventCategory.CUTI),
    (("libur semester", "libur sekitar hari raya"), EventCategory.LIBUR_BIASA),
    (
        (
            "hut", "maulid", "natal", "tahun baru masehi", "isra", "imlek", "nyepi",
            "idul fitri", "idul adha", "wafat yesus", "buruh internasional",
            "kenaikan yesus", "waisak", "lahir pancasila", "tahun baru islam",
        ),
        EventCategory.LHB,
    ),
]

# A single day shows one label: the first category present in this list
DAY_PRIORITY = [
    EventCategory.LHB,
    SUNDAY,
    EventCategory.CUTI,
    EventCategory.LIBUR_BIASA,
    EventCategory.PENILAIAN,
    EventCategory.KEGIATAN,
]

# (keywords, label) refinements of a category's label, checked in order
_LIBUR_LABELS = [
    (("libur semester genap",), "LS2"),
    (("libur semester ganjil",), "LS1"),
    (("libur sekitar hari raya",), "LHR"),
]
_PENILAIAN_LABELS = [
    (("sumatif akhir tahun",), "SAT"),
    (("sumatif akhir semester",), "SAS"),
    (("sumatif tengah semester",), "STS"),
]
_KEGIATAN_LABELS = [
    (("kegiatan permulaan puasa",), "KPP"),
    (("kegiatan tengah semester",), "KTS"),
    (("mpls", "masa pengenalan lingkungan sekolah"), "MPS"),
    (("koreksi", "pengolahan rapor", "pembagian rapor"), "KOR"),
]
_DEFAULT_LABELS = {
    EventCategory.LHB: "LHB",
    SUNDAY: "LU",
    EventCategory.CUTI: "CB",
    EventCategory.LIBUR_BIASA: "LB",
    EventCategory.PENILAIAN: "PNL",
    EventCategory.KEGIATAN: "KS",
}
_REFINED_LABELS = {
    EventCategory.LIBUR_BIASA: _LIBUR_LABELS,
    EventCategory.PENILAIAN: _PENILAIAN_LABELS,
    EventCategory.KEGIATAN: _KEGIATAN_LABELS,
}

MONTH_NAMES = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


def _matches(description: str, keywords: Iterable[str]) -> bool:
    return any(keyword in description for keyword in keywords)


def classify_event(event: CalendarEvent) -> Optional[EventCategory]:
    desc = event.description.lower()

    # Assessment wins over the event type: "Sumatif ..." can be entered as a holiday
    if event.type == EventType.ASSESSMENT or _matches(desc, PENILAIAN_KEYWORDS):
        return EventCategory.PENILAIAN

    if event.type == EventType.HOLIDAY:
        for keywords, category in HOLIDAY_KEYWORD_TABLE:
            if _matches(desc, keywords):
                return category
        return EventCategory.LIBUR_BIASA

    if event.type == EventType.EVENT:
        return EventCategory.KEGIATAN
    return None


def _events_on(day: dt.date, events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    return [event for event in events if event.date == day]


def day_category(day: dt.date, events: Iterable[CalendarEvent]):
    """
    Winning category of a day (an EventCategory or SUNDAY), or None for a
    countable instructional day. ``events`` may hold the whole calendar.
    """
    present = {classify_event(event) for event in _events_on(day, events)}
    if day.weekday() == calendar.SUNDAY:
        present.add(SUNDAY)
    for category in DAY_PRIORITY:
        if category in present:
            return category
    return None


def day_label(day: dt.date, events: Iterable[CalendarEvent]) -> Optional[str]:
    """Short calendar label of a day; None for an instructional day."""
    day_events = _events_on(day, events)
    category = day_category(day, day_events)
    if category is None:
        return None

    refinements = _REFINED_LABELS.get(category)
    if refinements:
        # The label follows the first event of the winning category
        source = next(event for event in day_events if classify_event(event) == category)
        desc = source.description.lower()
        for keywords, label in refinements:
            if _matches(desc, keywords):
                return label
    return _DEFAULT_LABELS[category]


def build_yearly_calendar(events: List[CalendarEvent], academic_year: str) -> YearlyCalendar:
    """
    Twelve months, July to June. Instructional days carry their running
    effective-day number within the semester.
    """
    parsed = parse_academic_year(academic_year)
    start_year = parsed[0] if parsed else jakarta_today().year

    events_by_day: Dict[dt.date, List[CalendarEvent]] = {}
    for event in events:
        events_by_day.setdefault(event.date, []).append(event)

    counters = {"ganjil": 0, "genap": 0}
    holidays: Dict[dt.date, str] = {}
    months = []

    for offset in range(12):
        month = (6 + offset) % 12 + 1
        year = start_year + (6 + offset) // 12
        semester = "ganjil" if month >= 7 else "genap"
        days_in_month = calendar.monthrange(year, month)[1]

        days = []
        for day_number in range(1, 32):
            if day_number > days_in_month:
                days.append(None)
                continue
            day = dt.date(year, month, day_number)
            day_events = events_by_day.get(day, [])
            label = day_label(day, day_events)
            if label is None:
                counters[semester] += 1
                days.append(counters[semester])
                continue
            if label == "LHB" and day not in holidays:
                holiday = next(e for e in day_events if classify_event(e) == EventCategory.LHB)
                holidays[day] = holiday.description
            days.append(label)

        months.append(CalendarMonth(name=MONTH_NAMES[month - 1], year=year, month=month, days=days))

    return YearlyCalendar(
        months=months,
        holidays=[HolidayEntry(date=day, description=desc) for day, desc in sorted(holidays.items())],
        effective_days=counters,
    )
