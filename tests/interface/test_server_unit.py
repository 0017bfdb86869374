from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from smartdefine.application.config import AppConfig
from smartdefine.consts import VERSION
from smartdefine.server import app, get_config

client = TestClient(app)


@pytest.fixture
def store_path(mock_home, tmp_path):
    path = tmp_path / "words.json"
    app.dependency_overrides[get_config] = lambda: AppConfig(store_path=path)
    yield path
    app.dependency_overrides.clear()


def _add(word, category="General"):
    response = client.post("/words", json={"word": word, "category": category})
    assert response.status_code == 200
    return response.json()["wordData"]


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version():
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_add_word(store_path):
    data = _add("Laconic", "GRE")

    assert data["word"] == "laconic"
    assert data["difficulty"] == "new"
    assert data["easeFactor"] == 2.5
    assert data["nextReview"].endswith("Z")
    assert store_path.exists()


def test_add_blank_word_is_422(store_path):
    response = client.post("/words", json={"word": "  "})
    assert response.status_code == 422


def test_due_lists_new_words(store_path):
    _add("laconic")
    _add("sonder", "Reading")

    response = client.get("/due", params={"reviewType": "new", "limit": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert {w["word"] for w in body["words"]} == {"laconic", "sonder"}
    assert {w["category"] for w in body["words"]} == {"General", "Reading"}


def test_due_limit_zero(store_path):
    _add("laconic")
    response = client.get("/due", params={"limit": 0})
    assert response.json()["words"] == []


def test_due_invalid_review_type(store_path):
    response = client.get("/due", params={"reviewType": "someday"})
    assert response.status_code == 422


def test_review_updates_word(store_path):
    _add("laconic")

    response = client.post(
        "/review",
        json={"word": "laconic", "isCorrect": True, "responseTime": 3000, "confidenceLevel": 0.9},
    )

    assert response.status_code == 200
    data = response.json()["wordData"]
    assert data["reviewCount"] == 1
    assert data["interval"] == 6
    assert data["easeFactor"] == pytest.approx(2.65)
    assert data["averageResponseTime"] == 3000

    stats = client.get("/stats").json()["stats"]
    assert stats["todayReviews"] == 1
    assert stats["currentStreak"] == 1


def test_review_unknown_word_is_404(store_path):
    response = client.post("/review", json={"word": "nothing", "isCorrect": False})
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_review_rejects_out_of_range_confidence(store_path):
    _add("laconic")
    response = client.post(
        "/review", json={"word": "laconic", "isCorrect": True, "confidenceLevel": 1.5}
    )
    assert response.status_code == 422


def test_stats_empty(store_path):
    response = client.get("/stats")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "stats": {
            "totalWords": 0,
            "newWords": 0,
            "learningWords": 0,
            "masteredWords": 0,
            "overdueWords": 0,
            "todayReviews": 0,
            "currentStreak": 0,
        },
    }


def test_recommendations(store_path):
    _add("laconic")

    response = client.get("/recommendations")

    assert response.status_code == 200
    recs = response.json()["recommendations"]
    assert [r["type"] for r in recs] == ["daily_goal", "overdue", "new_words"]
    assert recs[0]["count"] == 10


def test_delete_word(store_path):
    _add("laconic", "GRE")

    response = client.delete("/words/GRE/laconic")

    assert response.status_code == 200
    assert client.get("/stats").json()["stats"]["totalWords"] == 0


def test_delete_unknown_word_is_404(store_path):
    response = client.delete("/words/GRE/laconic")
    assert response.status_code == 404


@patch("smartdefine.server.SchedulingService.get_due", new_callable=AsyncMock)
def test_due_passes_query_to_service(mock_get_due, store_path):
    mock_get_due.return_value = []

    response = client.get("/due", params={"reviewType": "difficult", "limit": 3})

    assert response.status_code == 200
    args = mock_get_due.await_args.args
    assert args[0] == "difficult"
    assert args[1] == 3


@pytest.fixture
def memory_backend(mock_home, monkeypatch):
    monkeypatch.setenv("SMARTDEFINE_STORE_BACKEND", "memory")
    app.state.memory_store = None
    yield
    app.state.memory_store = None


def test_memory_backend_keeps_words_between_requests(memory_backend):
    _add("laconic")

    response = client.post("/review", json={"word": "laconic", "isCorrect": True})

    assert response.status_code == 200
    assert response.json()["wordData"]["reviewCount"] == 1
    assert client.get("/stats").json()["stats"]["totalWords"] == 1
