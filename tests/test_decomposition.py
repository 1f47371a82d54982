from perangkat_ajar.schemas.planning_schema import AnnualPlanRow, LearningPathwayRow
from perangkat_ajar.services.decomposition import (
    SLM_LABEL,
    decompose_annual,
    decompose_criteria,
    decompose_semester,
    split_lines,
    strip_enumeration,
)


def _atp(row_id, pathway="", scope=""):
    return LearningPathwayRow(id=row_id, material="Bilangan", learning_goal_pathway=pathway, material_scope=scope)


def test_split_lines_drops_blank_lines():
    assert split_lines("1. satu\n\n  \n2. dua\n") == ["1. satu", "2. dua"]
    assert split_lines("") == []


def test_strip_enumeration_markers():
    assert strip_enumeration("1. Mengenal bilangan") == "Mengenal bilangan"
    assert strip_enumeration("2) Membandingkan") == "Membandingkan"
    assert strip_enumeration("a. Menulis") == "Menulis"
    assert strip_enumeration("- Membaca") == "Membaca"
    assert strip_enumeration("• Menyimak") == "Menyimak"
    assert strip_enumeration("1.1. Mengenal pecahan") == "Mengenal pecahan"
    assert strip_enumeration("2.3) Menyusun data") == "Menyusun data"
    # decimals are content, not a marker
    assert strip_enumeration("1.000 sebagai satuan") == "1.000 sebagai satuan"


def test_criteria_rows_follow_pathway_lines():
    rows = [
        _atp("r1", "1. Mengenal bilangan\n\n2. Membandingkan bilangan\n3. Mengurutkan"),
        _atp("r2", "Menjumlahkan"),
        _atp("r3", ""),
    ]
    skeleton = decompose_criteria(rows)

    assert [row.id for row in skeleton] == ["r1_0", "r1_1", "r1_2", "r2_0"]
    assert [row.original_id for row in skeleton] == ["r1", "r1", "r1", "r2"]
    assert skeleton[1].pathway_line == "2. Membandingkan bilangan"
    assert skeleton[1].display_line == "Membandingkan bilangan"
    assert skeleton[0].material == "Bilangan"


def test_criteria_count_matches_non_empty_lines():
    rows = [_atp("a", "x\ny\n\nz"), _atp("b", "\n\n"), _atp("c", "w")]
    expected = sum(len(split_lines(row.learning_goal_pathway)) for row in rows)
    assert len(decompose_criteria(rows)) == expected


def test_annual_rows_mirror_atp_rows():
    rows = decompose_annual([_atp("r1", "a", "s"), _atp("r2")])
    assert [row.id for row in rows] == ["r1", "r2"]
    assert rows[0].material_scope == "s"
    assert all(row.allocated_periods == 0 for row in rows)


def test_semester_rows_end_with_slm_trailer():
    annual = [
        AnnualPlanRow(id="r1", material="Bilangan", material_scope="1. Bilangan cacah\n2. Nilai tempat"),
        AnnualPlanRow(id="r2", material="Geometri", material_scope=""),
    ]
    skeleton = decompose_semester(annual)

    assert [row.id for row in skeleton] == ["r1_0", "r1_1", "r1_slm", "r2_slm"]
    assert skeleton[1].display_line == "Nilai tempat"
    trailer = skeleton[2]
    assert trailer.is_slm
    assert trailer.annual_row_id == "r1"
    assert trailer.scope_line == SLM_LABEL
    assert not skeleton[0].is_slm


def test_semester_rows_without_scope_lines_still_get_slm():
    skeleton = decompose_semester([AnnualPlanRow(id="only")])
    assert len(skeleton) == 1
    assert skeleton[0].id == "only_slm"
