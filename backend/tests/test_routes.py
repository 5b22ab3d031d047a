"""HTTP surface: catalog, submissions, teacher dashboard and AI marking routes."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Sequence

import pytest
from fastapi.testclient import TestClient

from wavemark import marking_routes
from wavemark.config import get_settings
from wavemark.db.base import Base
from wavemark.db.session import dispose_engine, get_engine, init_db
from wavemark.errors import ConfigurationError, ExternalServiceError
from wavemark.images import EncodedImage
from wavemark.main import app
from wavemark.submissions import submission_store


def _setup_db(tmp_path: Path) -> None:
    db_path = tmp_path / "wavemark.db"
    os.environ["WAVEMARK_DATABASE_URL"] = f"sqlite:///{db_path}"
    get_settings.cache_clear()
    dispose_engine()
    init_db()
    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


def teardown_module() -> None:  # pragma: no cover - test cleanup
    dispose_engine()


class StubMarker:
    def __init__(self, replies: Sequence[object]) -> None:
        self.replies = list(replies)
        self.prompts: List[str] = []

    async def mark(self, images: Sequence[EncodedImage], prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return str(reply)


def _use_marker(monkeypatch, marker: StubMarker) -> None:
    monkeypatch.setattr(marking_routes, "get_vision_marker", lambda settings: marker)


def _create_drawing(client: TestClient, challenge_number: int = 3) -> str:
    response = client.post(
        "/api/submissions",
        json={
            "assessmentId": "waveform-octaves",
            "studentName": "Ava",
            "challengeNumber": challenge_number,
            "drawingImage": "data:image/png;base64,iVBORw0KGgo=",
            "originalShape": "square",
            "targetShape": "saw",
            "octaves": 1,
            "direction": "lower",
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_healthz_reports_vision_configuration(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "vision_configured" in response.json()


def test_assessment_listing_and_detail(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)

    listing = client.get("/api/assessments", params={"type": "drawing"})
    assert listing.status_code == 200
    assert {item["id"] for item in listing.json()} == {"waveform-octaves", "waveform-periods", "eq-filter-drawing"}

    grouped = client.get("/api/assessments/grouped").json()
    assert [group["topic"] for group in grouped][-1] == "2.5 Numeracy"

    detail = client.get("/api/assessments/waveform-periods")
    assert detail.status_code == 200
    assert len(detail.json()["period_challenges"]) == 10

    missing = client.get("/api/assessments/unknown")
    assert missing.status_code == 404
    assert "error" in missing.json()


def test_challenge_reference(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)

    octave = client.get("/api/assessments/waveform-octaves/challenges/6/reference").json()
    assert octave["kind"] == "octave"
    assert octave["expectedCycles"] == 2
    assert len(octave["target"]["samples"]) == 200

    period = client.get("/api/assessments/waveform-periods/challenges/6/reference").json()
    assert period["transitionPoints"] == [2, 4]
    assert period["derivedTransitionPoints"] == [2, 4]

    eq = client.get("/api/assessments/eq-filter-drawing/challenges/3/reference").json()
    assert eq["filterType"] == "lowshelf"

    assert client.get("/api/assessments/waveform-octaves/challenges/11/reference").status_code == 404


def test_quiz_responses_are_scored_and_stored(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    response = client.post(
        "/api/assessments/synthesis-fundamentals-quiz/responses",
        json={"studentName": "Ava", "answers": {"0": 1, "1": 2, "8": "An oscillator"}},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["score"] == {"correct": 2, "total": 8, "percentage": 25}
    assert body["feedback"]["autoScored"] is True

    stored = submission_store.get(body["submissionId"])
    assert stored is not None
    assert stored.ai_mark == 25
    assert stored.response_data is not None
    assert stored.response_data["questions"][0]["isCorrect"] is True

    rejected = client.post(
        "/api/assessments/waveform-octaves/responses",
        json={"studentName": "Ava", "answers": {}},
    )
    assert rejected.status_code == 400


def test_drawing_submission_validation(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    response = client.post(
        "/api/submissions",
        json={"assessmentId": "synthesis-fundamentals-quiz", "studentName": "Ava", "drawingImage": "AAAA"},
    )
    assert response.status_code == 400
    response = client.post(
        "/api/submissions",
        json={"assessmentId": "nope", "studentName": "Ava", "drawingImage": "AAAA"},
    )
    assert response.status_code == 404


def test_teacher_dashboard_groups_by_student(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    _create_drawing(client, 1)
    _create_drawing(client, 2)
    client.post(
        "/api/assessments/synthesis-fundamentals-quiz/responses",
        json={"studentName": "Ben", "answers": [1]},
    )

    payload = client.get("/api/teacher/submissions").json()
    assert payload["count"] == 3
    assert payload["students"] == ["Ava", "Ben"]
    assert len(payload["byStudent"]["Ava"]) == 2

    filtered = client.get("/api/teacher/submissions", params={"student": "Ava", "challenge": 2}).json()
    assert filtered["count"] == 1
    assert filtered["submissions"][0]["challenge_number"] == 2


def test_ai_mark_requires_submission_id(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    response = client.post("/api/ai-mark", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing submissionId"}


def test_ai_mark_unconfigured_credential(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    submission_id = _create_drawing(client)

    def _unconfigured(settings):
        raise ConfigurationError("OPENAI_API_KEY not configured. Add it to your environment variables.")

    monkeypatch.setattr(marking_routes, "get_vision_marker", _unconfigured)
    response = client.post("/api/ai-mark", json={"submissionId": submission_id})
    assert response.status_code == 500
    assert "OPENAI_API_KEY" in response.json()["error"]


def test_ai_mark_not_found(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path)
    _use_marker(monkeypatch, StubMarker([]))
    client = TestClient(app)
    response = client.post("/api/ai-mark", json={"submissionId": "missing"})
    assert response.status_code == 404
    assert response.json() == {"error": "Submission not found"}


def test_ai_mark_success_and_parse_failure(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path)
    reply = json.dumps({"cycleCount": {"correct": True}, "shapeAccuracy": {"correct": True}, "mark": 1, "feedback": "You nailed it."})
    marker = StubMarker([reply, "no json here"])
    _use_marker(monkeypatch, marker)
    client = TestClient(app)
    submission_id = _create_drawing(client)

    response = client.post("/api/ai-mark", json={"submissionId": submission_id})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["feedback"]["mark"] == 1
    assert body["markedAt"]

    failed = client.post("/api/ai-mark", json={"submissionId": submission_id})
    assert failed.status_code == 500
    assert failed.json()["rawResponse"] == "no json here"


def test_ai_mark_batch(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path)
    reply = json.dumps({"cycleCount": {"correct": True}, "shapeAccuracy": {"correct": True}, "mark": 1, "feedback": "Good"})
    marker = StubMarker([reply, ExternalServiceError("service unavailable")])
    _use_marker(monkeypatch, marker)
    client = TestClient(app)
    ids = [_create_drawing(client, 1), _create_drawing(client, 2)]

    response = client.post(
        "/api/ai-mark-batch",
        json={"submissionIds": ids, "correctAnswerImages": {"1": "data:image/png;base64,REF"}},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["results"]) == 1
    assert body["errors"] == [{"submissionId": ids[1], "challengeNumber": 2, "error": "service unavailable"}]
    assert body["summary"]["maxMark"] == 2
    assert body["summary"]["percentage"] == 50
    assert "SECOND IMAGE" in marker.prompts[0]


@pytest.mark.parametrize("payload", [{}, {"submissionIds": []}, {"submissionIds": "abc"}])
def test_ai_mark_batch_rejects_bad_id_lists(tmp_path: Path, payload) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    response = client.post("/api/ai-mark-batch", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing or empty submissionIds array"}


def test_ai_mark_batch_nothing_found(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path)
    _use_marker(monkeypatch, StubMarker([]))
    client = TestClient(app)
    response = client.post("/api/ai-mark-batch", json={"submissionIds": ["missing"]})
    assert response.status_code == 404
    assert response.json() == {"error": "No submissions found"}


@pytest.mark.parametrize(
    "fields",
    [
        {"assessmentId": "waveform-periods", "periodMs": -2},
        {"assessmentId": "waveform-periods", "periodMs": 1e-8},
        {"assessmentId": "waveform-octaves", "octaves": 2000, "direction": "higher"},
        {"assessmentId": "waveform-octaves", "octaves": 1, "direction": "sideways"},
    ],
)
def test_drawing_submission_rejects_out_of_range_fallbacks(tmp_path: Path, fields) -> None:
    _setup_db(tmp_path)
    client = TestClient(app)
    body = {
        "studentName": "Ava",
        "challengeNumber": 11,
        "drawingImage": "data:image/png;base64,iVBORw0KGgo=",
        "targetShape": "square",
    }
    body.update(fields)
    response = client.post("/api/submissions", json=body)
    assert response.status_code == 400
    assert response.json()["error"]


def test_ai_mark_rejects_stored_submission_with_bad_period(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path)
    marker = StubMarker([])
    _use_marker(monkeypatch, marker)
    stored = submission_store.record(
        "waveform-periods",
        "Ava",
        challenge_number=11,
        drawing_image="data:image/png;base64,iVBORw0KGgo=",
        target_shape="square",
        period_ms=-2,
    )
    client = TestClient(app)
    response = client.post("/api/ai-mark", json={"submissionId": stored.id})
    assert response.status_code == 400
    assert "Period" in response.json()["error"]
    assert marker.prompts == []


def test_unexpected_failures_return_json_error(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path)
    _use_marker(monkeypatch, StubMarker([RuntimeError("grader crashed")]))
    client = TestClient(app, raise_server_exceptions=False)
    submission_id = _create_drawing(client)

    response = client.post("/api/ai-mark", json={"submissionId": submission_id})
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "grader crashed"}
