import datetime as dt

import pytest

from perangkat_ajar.schemas.planning_schema import CalendarEvent, ClassSchedule
from perangkat_ajar.services.path_resolver import InvalidScope
from perangkat_ajar.services.effective_days import (
    count_effective_days,
    non_instructional_dates,
    period_budget,
    semester_window,
    teaching_sessions,
    week_key,
    weekly_periods,
)


def _schedule():
    return ClassSchedule.model_validate({
        "timeSlots": [
            {"id": "1", "lessonNumber": "1", "timeRange": "07.00-07.35",
             "subjects": {"senin": "Matematika", "rabu": "matematika ", "kamis": "IPAS"}},
            {"id": "2", "lessonNumber": "2", "timeRange": "07.35-08.10",
             "subjects": {"senin": "Matematika", "selasa": "Bahasa Indonesia"}},
        ]
    })


def test_semester_windows():
    assert semester_window("2024/2025", "Ganjil") == (dt.date(2024, 7, 1), dt.date(2024, 12, 31))
    assert semester_window("2024/2025", "genap") == (dt.date(2025, 1, 1), dt.date(2025, 6, 30))


def test_semester_window_rejects_malformed_year():
    with pytest.raises(InvalidScope):
        semester_window("2024", "Ganjil")


def test_count_without_events_excludes_only_sundays():
    tally = count_effective_days(dt.date(2024, 7, 1), dt.date(2024, 12, 31), set())
    assert tally == {"senin": 27, "selasa": 27, "rabu": 26, "kamis": 26, "jumat": 26, "sabtu": 26}
    assert sum(tally.values()) == 158


def test_every_event_date_is_excluded_once():
    events = [
        CalendarEvent(date="2024-08-17", description="HUT RI", type="holiday"),
        CalendarEvent(date="2024-08-17", description="Upacara", type="event"),
        CalendarEvent(date="2024-07-07", description="Jalan sehat", type="event"),
        CalendarEvent(date="2024-07-20", description="Rapat", type="other"),
    ]
    excluded = non_instructional_dates(events)
    tally = count_effective_days(dt.date(2024, 7, 1), dt.date(2024, 12, 31), excluded)
    # 17 Agustus and 20 Juli are Saturdays; 7 Juli is already a Sunday
    assert tally["sabtu"] == 24
    assert sum(tally.values()) == 156


def test_weekly_periods_match_names_case_insensitively():
    periods = weekly_periods(_schedule(), "Matematika")
    assert periods == {"senin": 2, "selasa": 0, "rabu": 1, "kamis": 0, "jumat": 0, "sabtu": 0}
    assert weekly_periods(_schedule(), "") == dict.fromkeys(periods, 0)


def test_period_budget_is_sum_of_products():
    tally = count_effective_days(dt.date(2024, 7, 1), dt.date(2024, 12, 31), set())
    assert period_budget(tally, weekly_periods(_schedule(), "Matematika")) == 27 * 2 + 26 * 1


def test_week_key_columns():
    ganjil_start = dt.date(2024, 7, 1)
    assert week_key(dt.date(2024, 7, 1), ganjil_start) == "b1_m1"
    assert week_key(dt.date(2024, 7, 29), ganjil_start) == "b1_m5"
    assert week_key(dt.date(2024, 7, 31), ganjil_start) == "b1_m5"
    assert week_key(dt.date(2024, 8, 1), ganjil_start) == "b2_m1"
    assert week_key(dt.date(2024, 12, 15), ganjil_start) == "b6_m3"
    assert week_key(dt.date(2025, 6, 8), dt.date(2025, 1, 1)) == "b6_m2"


def test_teaching_sessions_follow_timetable():
    start, end = dt.date(2024, 7, 1), dt.date(2024, 7, 7)
    sessions = teaching_sessions(start, end, {dt.date(2024, 7, 3)}, weekly_periods(_schedule(), "Matematika"))

    # Monday only: Wednesday the 3rd is excluded
    assert [(s.date, s.periods, s.week_key) for s in sessions] == [(dt.date(2024, 7, 1), 2, "b1_m1")]
