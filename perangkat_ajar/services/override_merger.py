"""
Sparse override maps layered on top of regenerated skeletons.

``merge_*`` is a pure function of (skeleton, stored map). ``extract_*`` is the
save-path inverse for the editable fields only; it writes an entry for every
current skeleton id, empty ones included, and never carries ids that are no
longer part of the skeleton.
"""
from typing import Dict, Iterable, List, Optional

from perangkat_ajar.schemas.planning_schema import (
    WEEK_KEYS,
    AchievementLevels,
    AnnualPlanRow,
    CriteriaData,
    CriteriaIntervals,
    CriteriaRow,
    SemesterPlanRow,
)

SLM_DEFAULT_PERIODS = 2


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _as_periods(value, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return default


def _as_text(value) -> str:
    return value if isinstance(value, str) else ""


def _week_selections(value) -> Dict[str, bool]:
    stored = _as_dict(value)
    return {key: stored.get(key) is True for key in WEEK_KEYS}


def _by_id(rows) -> dict:
    return {row.id: row for row in rows}


# --- KKTP ---
def merge_criteria(skeleton: List[CriteriaRow], stored: Optional[dict]) -> CriteriaData:
    stored = _as_dict(stored)
    intervals = _as_dict(stored.get("intervals"))
    criteria_by_id = _as_dict(stored.get("criteriaById"))

    rows = []
    for row in skeleton:
        levels = _as_dict(criteria_by_id.get(row.id))
        criteria = AchievementLevels(**{
            name: _as_text(levels.get(field.alias))
            for name, field in AchievementLevels.model_fields.items()
        })
        rows.append(row.model_copy(update={"criteria": criteria}))

    defaults = CriteriaIntervals()
    return CriteriaData(
        intervals=CriteriaIntervals(**{
            name: _as_text(intervals.get(name)) or getattr(defaults, name)
            for name in CriteriaIntervals.model_fields
        }),
        rows=rows,
    )


def extract_criteria(data: CriteriaData, skeleton: Optional[List[CriteriaRow]] = None) -> dict:
    edited = _by_id(data.rows)
    current = skeleton if skeleton is not None else data.rows
    criteria_by_id = {}
    for row in current:
        source = edited.get(row.id)
        levels = source.criteria if source is not None else AchievementLevels()
        criteria_by_id[row.id] = levels.model_dump(by_alias=True)
    return {
        "intervals": data.intervals.model_dump(by_alias=True),
        "criteriaById": criteria_by_id,
    }


# --- PROTA ---
def merge_annual(skeleton: List[AnnualPlanRow], stored: Optional[dict]) -> List[AnnualPlanRow]:
    periods_by_id = _as_dict(_as_dict(stored).get("allocatedPeriodsById"))
    return [
        row.model_copy(update={"allocated_periods": _as_periods(periods_by_id.get(row.id))})
        for row in skeleton
    ]


def extract_annual(rows: Iterable[AnnualPlanRow], skeleton: Optional[Iterable[AnnualPlanRow]] = None) -> dict:
    rows = list(rows)
    edited = _by_id(rows)
    current = list(skeleton) if skeleton is not None else rows
    return {
        "allocatedPeriodsById": {
            row.id: _as_periods(edited[row.id].allocated_periods) if row.id in edited else 0
            for row in current
        }
    }


# --- PROSEM ---
def _default_periods(row: SemesterPlanRow) -> int:
    return SLM_DEFAULT_PERIODS if row.is_slm else 0


def merge_semester(skeleton: List[SemesterPlanRow], stored: Optional[dict]) -> List[SemesterPlanRow]:
    stored = _as_dict(stored)
    rows = []
    for row in skeleton:
        entry = _as_dict(stored.get(row.id))
        rows.append(row.model_copy(update={
            "allocated_periods": _as_periods(entry.get("allocatedPeriods"), _default_periods(row)),
            "week_selections": _week_selections(entry.get("weekSelections")),
            "notes": _as_text(entry.get("notes")),
        }))
    return rows


def extract_semester(rows: Iterable[SemesterPlanRow], skeleton: Optional[Iterable[SemesterPlanRow]] = None) -> dict:
    rows = list(rows)
    edited = _by_id(rows)
    current = list(skeleton) if skeleton is not None else rows
    document = {}
    for row in current:
        source = edited.get(row.id)
        if source is None:
            document[row.id] = {
                "allocatedPeriods": _default_periods(row),
                "weekSelections": _week_selections(None),
                "notes": "",
            }
            continue
        document[row.id] = {
            "allocatedPeriods": _as_periods(source.allocated_periods, _default_periods(row)),
            "weekSelections": _week_selections(source.week_selections),
            "notes": source.notes or "",
        }
    return document
