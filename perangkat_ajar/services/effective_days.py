import datetime as dt
from typing import Dict, Iterable, List, Set, Tuple

from perangkat_ajar.schemas.planning_schema import (
    WEEKDAYS,
    CalendarEvent,
    ClassSchedule,
    Semester,
    TeachingSession,
)
from perangkat_ajar.services.path_resolver import InvalidScope, parse_academic_year

SUNDAY = 6


def semester_window(academic_year: str, semester) -> Tuple[dt.date, dt.date]:
    """Ganjil: 1 Juli - 31 Desember tahun awal. Genap: 1 Januari - 30 Juni tahun berikutnya."""
    parsed = parse_academic_year(academic_year)
    if parsed is None:
        raise InvalidScope(f"Tahun ajaran tidak valid: {academic_year!r}")
    start_year = parsed[0]
    if Semester(semester) == Semester.GANJIL:
        return dt.date(start_year, 7, 1), dt.date(start_year, 12, 31)
    return dt.date(start_year + 1, 1, 1), dt.date(start_year + 1, 6, 30)


def non_instructional_dates(events: Iterable[CalendarEvent]) -> Set[dt.date]:
    # Any date carrying a calendar entry is not counted as a teaching day
    return {event.date for event in events}


def _instructional_days(start: dt.date, end: dt.date, excluded: Set[dt.date]):
    day = start
    while day <= end:
        if day.weekday() != SUNDAY and day not in excluded:
            yield day
        day += dt.timedelta(days=1)


def count_effective_days(start: dt.date, end: dt.date, excluded: Set[dt.date]) -> Dict[str, int]:
    tally = {weekday: 0 for weekday in WEEKDAYS}
    for day in _instructional_days(start, end, excluded):
        tally[WEEKDAYS[day.weekday()]] += 1
    return tally


def weekly_periods(schedule: ClassSchedule, subject_name: str) -> Dict[str, int]:
    """JP per weekday of one subject, counted from the class timetable slots."""
    wanted = (subject_name or "").strip().lower()
    periods = {weekday: 0 for weekday in WEEKDAYS}
    if not wanted:
        return periods
    for slot in schedule.time_slots:
        for weekday, name in slot.subjects.items():
            weekday = weekday.strip().lower()
            if weekday in periods and (name or "").strip().lower() == wanted:
                periods[weekday] += 1
    return periods


def period_budget(tally: Dict[str, int], periods: Dict[str, int]) -> int:
    """Maximum JP of a subject in a semester."""
    return sum(tally.get(weekday, 0) * periods.get(weekday, 0) for weekday in WEEKDAYS)


def week_key(day: dt.date, semester_start: dt.date) -> str:
    month_index = (day.month - semester_start.month) % 12 + 1
    return f"b{month_index}_m{(day.day - 1) // 7 + 1}"


def teaching_sessions(
    start: dt.date,
    end: dt.date,
    excluded: Set[dt.date],
    periods: Dict[str, int],
) -> List[TeachingSession]:
    """Dates the subject meets, with their PROSEM week column (days 29-31 fall in week 5)."""
    sessions = []
    for day in _instructional_days(start, end, excluded):
        jp = periods.get(WEEKDAYS[day.weekday()], 0)
        if jp <= 0:
            continue
        sessions.append(TeachingSession(date=day, periods=jp, week_key=week_key(day, start)))
    return sessions
