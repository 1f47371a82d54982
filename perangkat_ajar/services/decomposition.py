"""
Decomposition of ATP rows into the derived planning rows.

Every derived row id is built here (``composite_id`` / ``slm_id``) so the read
path and the save path can never disagree on keys.
"""
import re
from typing import Iterable, List

from perangkat_ajar.schemas.planning_schema import (
    AnnualPlanRow,
    CriteriaRow,
    LearningPathwayRow,
    SemesterPlanRow,
)

SLM_SUFFIX = "slm"
SLM_LABEL = "Sumatif Lingkup Materi (SLM)"

# "1.", "1.1.", "2)", "a.", "-", "*", "•" at the start of a line
_ENUMERATION_RE = re.compile(r"^\s*(?:(?:\d+\.)*\d+[.)](?!\d)|[a-zA-Z][.)](?!\d)|[-*•·‣▪])\s*")


def split_lines(text: str) -> List[str]:
    """Non-empty, trimmed lines in their original order."""
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def strip_enumeration(line: str) -> str:
    """Display text of a line without its leading list marker."""
    stripped = _ENUMERATION_RE.sub("", line, count=1).strip()
    return stripped or line.strip()


def composite_id(parent_id: str, index: int) -> str:
    return f"{parent_id}_{index}"


def slm_id(parent_id: str) -> str:
    return f"{parent_id}_{SLM_SUFFIX}"


def decompose_criteria(atp_rows: Iterable[LearningPathwayRow]) -> List[CriteriaRow]:
    """One KKTP row per non-empty line of each ATP row's learning goal pathway."""
    skeleton = []
    for atp_row in atp_rows:
        for index, line in enumerate(split_lines(atp_row.learning_goal_pathway)):
            skeleton.append(CriteriaRow(
                id=composite_id(atp_row.id, index),
                original_id=atp_row.id,
                material=atp_row.material,
                pathway_line=line,
                display_line=strip_enumeration(line),
            ))
    return skeleton


def decompose_annual(atp_rows: Iterable[LearningPathwayRow]) -> List[AnnualPlanRow]:
    return [
        AnnualPlanRow(
            id=row.id,
            element=row.element,
            material=row.material,
            learning_goal_pathway=row.learning_goal_pathway,
            material_scope=row.material_scope,
        )
        for row in atp_rows
    ]


def decompose_semester(annual_rows: Iterable[AnnualPlanRow]) -> List[SemesterPlanRow]:
    """
    One PROSEM row per material scope line, then the SLM trailer row of the
    material. The trailer is appended even when there are no scope lines.
    """
    skeleton = []
    for annual_row in annual_rows:
        for index, line in enumerate(split_lines(annual_row.material_scope)):
            skeleton.append(SemesterPlanRow(
                id=composite_id(annual_row.id, index),
                annual_row_id=annual_row.id,
                material=annual_row.material,
                learning_goal_pathway=annual_row.learning_goal_pathway,
                scope_line=line,
                display_line=strip_enumeration(line),
            ))
        skeleton.append(SemesterPlanRow(
            id=slm_id(annual_row.id),
            annual_row_id=annual_row.id,
            material=annual_row.material,
            learning_goal_pathway=annual_row.learning_goal_pathway,
            scope_line=SLM_LABEL,
            display_line=SLM_LABEL,
            is_slm=True,
        ))
    return skeleton
