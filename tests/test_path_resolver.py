from perangkat_ajar.schemas.planning_schema import SubjectEntry
from perangkat_ajar.services.path_resolver import (
    UNKNOWN_CLASS,
    UNKNOWN_PHASE,
    UNKNOWN_YEAR,
    DocumentFamily,
    class_number,
    class_segment,
    entry_key,
    parse_academic_year,
    phase_segment,
    resolve,
    subject_key,
    year_segment,
)


def test_year_segment_normalizes_slash_label():
    assert parse_academic_year("2024/2025") == (2024, 2025)
    assert year_segment("2024/2025") == "2024-2025"
    assert year_segment(" 2024 - 2025 ") == "2024-2025"


def test_malformed_labels_map_to_sentinels():
    assert year_segment("tahun ini") == UNKNOWN_YEAR
    assert year_segment("") == UNKNOWN_YEAR
    assert class_segment("") == UNKNOWN_CLASS
    assert phase_segment("Kelas Sembilan") == UNKNOWN_PHASE


def test_class_segment_and_phase():
    assert class_segment("Kelas IV") == "kelas-iv"
    assert class_number("Kelas IV") == 4
    assert class_number("kelas 2") == 2
    assert phase_segment("Kelas I") == "fase-a"
    assert phase_segment("Kelas IV") == "fase-b"
    assert phase_segment("Kelas VI") == "fase-c"


def test_subject_key_replaces_separators():
    assert subject_key("PJOK (Olahraga)") == "pjok--olahraga-"
    assert subject_key("Bahasa Indonesia") == "bahasa-indonesia"


def test_master_and_teacher_paths_differ_only_by_prefix():
    master = resolve(DocumentFamily.KKTP, "2024/2025", "Kelas IV", "mtk", "Ganjil")
    teacher = resolve(DocumentFamily.KKTP, "2024/2025", "Kelas IV", "mtk", "Ganjil", teacher_id="guru-1")

    assert master == ["schoolData", "2024-2025", "kelas-iv", "data", "kktp", "mtk_ganjil"]
    assert teacher == ["teachersData", "guru-1"] + master


def test_resolve_is_deterministic():
    first = resolve(DocumentFamily.PROSEM, "2024/2025", "Kelas IV", "mtk", "Genap", "guru-1")
    second = resolve(DocumentFamily.PROSEM, "2024/2025", "Kelas IV", "mtk", "Genap", "guru-1")
    assert first == second


def test_resolve_per_family_shapes():
    year = "2024/2025"
    assert resolve(DocumentFamily.CALENDAR, year) == ["schoolData", "2024-2025", "calendarData", "events"]
    assert resolve(DocumentFamily.SUBJECTS, year, "Kelas IV") == ["schoolData", "2024-2025", "kelas-iv", "data", "subjects"]
    assert resolve(DocumentFamily.CLASS_SCHEDULE, year, "Kelas IV") == ["schoolData", "2024-2025", "kelas-iv", "classSchedule"]
    assert resolve(DocumentFamily.PROTA, year, "Kelas IV", "mtk") == ["schoolData", "2024-2025", "kelas-iv", "data", "prota", "mtk"]
    assert resolve(DocumentFamily.LEARNING_OUTCOMES, year, "Kelas IV", "mtk") == [
        "schoolData", "2024-2025", "fase-b", "data", "subjects", "mtk", "learningOutcomes", "main",
    ]
    assert resolve(DocumentFamily.KOKURIKULER, year, "Kelas V", semester="Genap") == [
        "schoolData", "2024-2025", "fase-c", "data", "programKokurikuler", "genap",
    ]


def test_resolve_accepts_family_value():
    assert resolve("atp", "2024/2025", "Kelas I", "ipas", "Ganjil")[-1] == "ipas_ganjil"


def test_learning_objectives_are_phase_scoped():
    assert resolve(DocumentFamily.LEARNING_OBJECTIVES, "2024/2025", "Kelas II", "mtk", teacher_id="guru-1") == [
        "teachersData", "guru-1", "schoolData", "2024-2025", "fase-a", "data", "subjects", "mtk", "learningObjectives", "main",
    ]


def test_entry_key_falls_back_to_code():
    assert entry_key(SubjectEntry(id="mtk", code="MTK")) == "mtk"
    assert entry_key(SubjectEntry.model_validate({"code": "PJOK (Olahraga)", "name": "PJOK"})) == "pjok--olahraga-"
