import pytest
from fastapi.testclient import TestClient

from conftest import InMemoryDocumentStore, atp_document, atp_row
from perangkat_ajar.dependencies import get_store, get_suggestion_service
from perangkat_ajar.gemini_client import GeminiError
from perangkat_ajar.main import app
from perangkat_ajar.services.path_resolver import DocumentFamily, resolve
from perangkat_ajar.services.planning_service import PlanningService
from perangkat_ajar.services.suggestion_service import SuggestionService

SCOPE = {"year": "2024/2025", "class_level": "Kelas IV", "subject": "mtk", "semester": "Ganjil"}


class FailingGemini:
    async def generate_content(self, prompt):
        raise GeminiError("Kuota AI habis")


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def client(memory_store):
    app.dependency_overrides[get_store] = lambda: memory_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    assert client.get("/").json() == {"message": "Perangkat Ajar Sync Backend Online"}


def test_atp_put_then_kktp_get(client):
    body = {"rows": [atp_row("r1", "1. Mengenal bilangan\n2. Membandingkan")]}
    response = client.put("/api/planning/atp", params=SCOPE, json=body)
    assert response.status_code == 200

    response = client.get("/api/planning/kktp", params=SCOPE)
    assert response.status_code == 200
    data = response.json()
    assert [row["id"] for row in data["rows"]] == ["r1_0", "r1_1"]
    assert data["rows"][1]["displayLine"] == "Membandingkan"
    assert data["intervals"]["interval1"] == "< 60"


def test_kktp_put_stores_sparse_map(client, memory_store):
    memory_store.put(resolve(DocumentFamily.ATP, "2024/2025", "Kelas IV", "mtk", "Ganjil"), atp_document(atp_row("r1", "a")))
    rows = client.get("/api/planning/kktp", params=SCOPE).json()["rows"]
    rows[0]["criteria"]["tuntas"] = "Tuntas"

    response = client.put("/api/planning/kktp", params=SCOPE, json={"rows": rows})

    assert response.status_code == 200
    stored = memory_store.get(resolve(DocumentFamily.KKTP, "2024/2025", "Kelas IV", "mtk", "Ganjil"))
    assert stored["criteriaById"]["r1_0"]["tuntas"] == "Tuntas"


def test_prosem_get_has_week_grid(client, memory_store):
    memory_store.put(resolve(DocumentFamily.ATP, "2024/2025", "Kelas IV", "mtk", "Ganjil"), atp_document(atp_row("r1", "a", "x")))
    rows = client.get("/api/planning/prosem", params=SCOPE).json()["rows"]
    assert [row["id"] for row in rows] == ["r1_0", "r1_slm"]
    assert len(rows[0]["weekSelections"]) == 30
    assert rows[1]["isSlm"] is True


def test_invalid_semester_is_rejected(client):
    response = client.get("/api/planning/atp", params={**SCOPE, "semester": "Kemarau"})
    assert response.status_code == 422


def test_effective_days_with_malformed_year(client):
    response = client.get("/api/calendar/effective-days", params={"year": "dua ribu", "semester": "Ganjil"})
    assert response.status_code == 422


def test_effective_days(client):
    client.put("/api/calendar/events", params={"year": "2024/2025"}, json={
        "events": [{"id": "e1", "date": "2024-08-17", "description": "HUT RI", "type": "holiday"}],
    })
    response = client.get("/api/calendar/effective-days", params={"year": "2024/2025", "semester": "Ganjil"})
    assert response.status_code == 200
    assert response.json()["total"] == 157


def test_yearly_calendar(client):
    response = client.get("/api/calendar/yearly", params={"year": "2024/2025"})
    assert response.status_code == 200
    body = response.json()
    assert body["months"][0]["name"] == "Juli"
    assert body["effectiveDays"] == {"ganjil": 158, "genap": 155}


def test_pull_without_master_is_404(client, memory_store):
    response = client.post("/api/sync/atp", params={**SCOPE, "teacher_id": "guru-1"})
    assert response.status_code == 404
    assert "master data not populated" in response.json()["detail"]
    assert memory_store.writes == []


def test_pull_document(client, memory_store):
    memory_store.put(resolve(DocumentFamily.ATP, "2024/2025", "Kelas IV", "mtk", "Ganjil"), atp_document(atp_row("r1", "a")))

    response = client.post("/api/sync/atp", params={**SCOPE, "teacher_id": "guru-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["usedFallback"] is False
    assert body["targetPath"] == "teachersData/guru-1/schoolData/2024-2025/kelas-iv/data/atp/mtk_ganjil"
    assert body["data"]["rows"][0]["id"] == "r1"


def test_pull_all(client, memory_store):
    memory_store.put(resolve(DocumentFamily.CALENDAR, "2024/2025"), {"events": []})
    response = client.post("/api/sync/all", params={"year": "2024/2025", "class_level": "Kelas IV", "teacher_id": "guru-1"})
    assert response.status_code == 200
    body = response.json()
    assert body["pulled"] == ["schoolData/2024-2025/calendarData/events"]
    assert "schoolData/2024-2025/kelas-iv/data/subjects" in body["skipped"]


def test_suggestion_failure_is_502(client, memory_store):
    memory_store.put(resolve(DocumentFamily.ATP, "2024/2025", "Kelas IV", "mtk", "Ganjil"), atp_document(atp_row("r1", "a")))
    app.dependency_overrides[get_suggestion_service] = lambda: SuggestionService(PlanningService(memory_store), FailingGemini())

    response = client.post("/api/suggest/kktp", params=SCOPE)

    assert response.status_code == 502
    assert "Kuota AI habis" in response.json()["detail"]


def test_corrupt_stored_document_is_500(memory_store):
    memory_store.put(resolve(DocumentFamily.ATP, "2024/2025", "Kelas IV", "mtk", "Ganjil"), {"rows": [{"element": "no id"}]})
    app.dependency_overrides[get_store] = lambda: memory_store
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/planning/kktp", params=SCOPE)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal Server Error"


def test_pull_semester_document_without_semester_is_422(client, memory_store):
    params = {"year": "2024/2025", "class_level": "Kelas IV", "subject": "mtk", "teacher_id": "guru-1"}

    response = client.post("/api/sync/atp", params=params)

    assert response.status_code == 422
    assert "Semester wajib diisi" in response.json()["detail"]
    assert memory_store.writes == []


def test_pull_with_unknown_semester_is_422(client):
    response = client.post("/api/sync/kktp", params={**SCOPE, "semester": "Kemarau", "teacher_id": "guru-1"})
    assert response.status_code == 422


def test_suggest_prosem_without_sessions_is_502(client, memory_store):
    memory_store.put(resolve(DocumentFamily.ATP, "2024/2025", "Kelas IV", "mtk", "Ganjil"), atp_document(atp_row("r1", "a", "x")))
    app.dependency_overrides[get_suggestion_service] = lambda: SuggestionService(PlanningService(memory_store), FailingGemini())

    response = client.post("/api/suggest/prosem", params=SCOPE)

    assert response.status_code == 502
    assert "Tidak ada sesi mengajar" in response.json()["detail"]
