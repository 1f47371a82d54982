import re
import enum
from typing import List, Optional, Tuple

from perangkat_ajar.config import Config

# Sentinel segments: malformed input addresses an empty scope instead of failing
UNKNOWN_YEAR = "unknown-year"
UNKNOWN_CLASS = "unknown-class"
UNKNOWN_PHASE = "fase-unknown"
UNKNOWN_SUBJECT = "unknown-subject"
UNKNOWN_SEMESTER = "unknown-semester"

ROMAN_LEVELS = {"I": 1, "II": 2, "III": 3, "IV": 4, "V": 5, "VI": 6}

# Kelas 1-2 -> Fase A, 3-4 -> Fase B, 5-6 -> Fase C
PHASE_BY_LEVEL = {1: "fase-a", 2: "fase-a", 3: "fase-b", 4: "fase-b", 5: "fase-c", 6: "fase-c"}

_YEAR_RE = re.compile(r"^\s*(\d{4})\s*[/\-]\s*(\d{4})\s*$")


class DocumentFamily(str, enum.Enum):
    SUBJECTS = "subjects"
    ATP = "atp"
    KKTP = "kktp"
    PROTA = "prota"
    PROSEM = "prosem"
    CALENDAR = "calendar"
    CLASS_SCHEDULE = "classSchedule"
    LEARNING_OUTCOMES = "learningOutcomes"
    LEARNING_OBJECTIVES = "learningObjectives"
    KOKURIKULER = "programKokurikuler"


# Families keyed by a subject id (the only ones the name-match fallback applies to)
SUBJECT_KEYED = {
    DocumentFamily.ATP,
    DocumentFamily.KKTP,
    DocumentFamily.PROTA,
    DocumentFamily.PROSEM,
    DocumentFamily.LEARNING_OUTCOMES,
    DocumentFamily.LEARNING_OBJECTIVES,
}

# Families shared by both classes of a phase instead of defined per class
PHASE_SCOPED = {
    DocumentFamily.LEARNING_OUTCOMES,
    DocumentFamily.LEARNING_OBJECTIVES,
    DocumentFamily.KOKURIKULER,
}

# Families stored once per semester
SEMESTER_KEYED = {
    DocumentFamily.ATP,
    DocumentFamily.KKTP,
    DocumentFamily.PROSEM,
    DocumentFamily.KOKURIKULER,
}


class InvalidScope(ValueError):
    """Request scope that cannot address a document."""


def parse_academic_year(academic_year: str) -> Optional[Tuple[int, int]]:
    """'2024/2025' -> (2024, 2025); None when the label is malformed."""
    match = _YEAR_RE.match(academic_year or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def year_segment(academic_year: str) -> str:
    parsed = parse_academic_year(academic_year)
    if parsed is None:
        return UNKNOWN_YEAR
    return f"{parsed[0]}-{parsed[1]}"


def class_segment(class_level: str) -> str:
    text = (class_level or "").strip().lower()
    if not text:
        return UNKNOWN_CLASS
    return re.sub(r"[\s/]+", "-", text)


def class_number(class_level: str) -> Optional[int]:
    """'Kelas IV' / 'kelas 4' / 'IV' -> 4."""
    text = re.sub(r"^\s*kelas\s*", "", class_level or "", flags=re.IGNORECASE).strip().upper()
    if text in ROMAN_LEVELS:
        return ROMAN_LEVELS[text]
    if text.isdigit():
        return int(text)
    return None


def phase_segment(class_level: str) -> str:
    return PHASE_BY_LEVEL.get(class_number(class_level), UNKNOWN_PHASE)


def subject_key(code: str) -> str:
    """Document id of a subject: 'PJOK (Olahraga)' -> 'pjok--olahraga-'."""
    return re.sub(r"[\s/()]", "-", (code or "").strip().lower())


def entry_key(entry) -> str:
    """Document id of a subject catalog entry: its id, or the key of its code."""
    return entry.id or subject_key(entry.code)


def semester_segment(semester: str) -> str:
    text = (semester or "").strip().lower()
    return text or UNKNOWN_SEMESTER


def scope_root(teacher_id: Optional[str] = None) -> List[str]:
    if teacher_id:
        return [Config.TEACHER_ROOT, teacher_id, Config.MASTER_ROOT]
    return [Config.MASTER_ROOT]


def resolve(
    family: DocumentFamily,
    academic_year: str,
    class_level: Optional[str] = None,
    subject: Optional[str] = None,
    semester: Optional[str] = None,
    teacher_id: Optional[str] = None,
) -> List[str]:
    """Ordered path segments of one document, in the master or a teacher scope."""
    family = DocumentFamily(family)
    root = scope_root(teacher_id)
    year = year_segment(academic_year)

    if family == DocumentFamily.CALENDAR:
        return root + [year, "calendarData", "events"]

    if family in PHASE_SCOPED:
        phase = phase_segment(class_level)
        if family == DocumentFamily.LEARNING_OUTCOMES:
            return root + [year, phase, "data", "subjects", subject or UNKNOWN_SUBJECT, "learningOutcomes", "main"]
        if family == DocumentFamily.LEARNING_OBJECTIVES:
            return root + [year, phase, "data", "subjects", subject or UNKNOWN_SUBJECT, "learningObjectives", "main"]
        return root + [year, phase, "data", "programKokurikuler", semester_segment(semester)]

    klass = class_segment(class_level)
    if family == DocumentFamily.SUBJECTS:
        return root + [year, klass, "data", "subjects"]
    if family == DocumentFamily.CLASS_SCHEDULE:
        return root + [year, klass, "classSchedule"]

    subject_id = subject or UNKNOWN_SUBJECT
    if family == DocumentFamily.PROTA:
        return root + [year, klass, "data", "prota", subject_id]

    # atp, kktp, prosem: one document per subject and semester
    return root + [year, klass, "data", family.value, f"{subject_id}_{semester_segment(semester)}"]
