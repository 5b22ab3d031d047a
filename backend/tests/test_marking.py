"""Single-item and batch marking against a scripted vision marker."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import List, Sequence, Tuple

import pytest

from wavemark.batch_marking import mark_batch
from wavemark.catalog import get_catalog
from wavemark.config import get_settings
from wavemark.db.base import Base
from wavemark.db.session import dispose_engine, get_engine, init_db
from wavemark.errors import ExternalServiceError, NotFoundError, ParseError, PersistenceError, ValidationError
from wavemark.images import EncodedImage
from wavemark.marking import mark_submission
from wavemark.submissions import Submission, SubmissionStore
from wavemark.telemetry import TelemetryEvent, clear_listeners, register_listener


def _setup_db(tmp_path: Path) -> None:
    db_path = tmp_path / "wavemark.db"
    os.environ["WAVEMARK_DATABASE_URL"] = f"sqlite:///{db_path}"
    get_settings.cache_clear()
    dispose_engine()
    init_db()
    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


def _reply(mark: int, feedback: str = "You drew it well.") -> str:
    payload = {
        "cycleCount": {"detected": 2, "expected": 2, "correct": bool(mark)},
        "shapeAccuracy": {"detected": "saw", "expected": "saw", "correct": True},
        "mark": mark,
        "feedback": feedback,
    }
    return f"Here is my assessment:\n{json.dumps(payload)}"


class ScriptedMarker:
    def __init__(self, replies: Sequence[object]) -> None:
        self.replies = list(replies)
        self.calls: List[Tuple[List[EncodedImage], str]] = []

    async def mark(self, images: Sequence[EncodedImage], prompt: str) -> str:
        self.calls.append((list(images), prompt))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return str(reply)


class FailingStore(SubmissionStore):
    def apply_marking(self, *args, **kwargs):
        raise PersistenceError("database unavailable")


@pytest.fixture
def events():
    captured: List[TelemetryEvent] = []
    clear_listeners()
    register_listener(captured.append)
    yield captured
    clear_listeners()


def _record(store: SubmissionStore, challenge_number: int, **fields) -> Submission:
    defaults = {
        "drawing_image": "data:image/png;base64,iVBORw0KGgo=",
        "original_shape": "square",
        "target_shape": "saw",
        "octaves": 1,
        "direction": "lower",
    }
    defaults.update(fields)
    return store.record("waveform-octaves", "Ava", challenge_number=challenge_number, **defaults)


def test_mark_submission_persists_feedback(tmp_path: Path, events) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    submission = _record(store, 3)
    marker = ScriptedMarker([_reply(1)])

    outcome = asyncio.run(mark_submission(submission, marker, catalog=get_catalog(), store=store))

    assert outcome.mark == 1
    assert outcome.recorded_mark == 1
    assert outcome.feedback["feedback"] == "You drew it well."
    images, prompt = marker.calls[0]
    assert len(images) == 1
    assert images[0].media_type == "image/png"
    assert "Expected: 2 cycles of a saw wave" in prompt

    stored = store.get(submission.id)
    assert stored is not None
    assert stored.ai_mark == 1
    assert stored.revision == 1
    assert [event.name for event in events] == ["submission_marked"]


def test_reference_image_is_sent_second(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    submission = _record(store, 3)
    marker = ScriptedMarker([_reply(0)])

    asyncio.run(
        mark_submission(
            submission,
            marker,
            catalog=get_catalog(),
            reference_image="data:image/jpeg;base64,/9j/",
            store=store,
        )
    )
    images, prompt = marker.calls[0]
    assert [image.media_type for image in images] == ["image/png", "image/jpeg"]
    assert "SECOND IMAGE (Correct Answer)" in prompt


def test_legacy_suggested_mark_is_recorded(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    submission = _record(store, 1)
    marker = ScriptedMarker(['{"suggestedMark": 1, "overallFeedback": "Good"}'])

    outcome = asyncio.run(mark_submission(submission, marker, catalog=get_catalog(), store=store))
    assert outcome.mark == 0
    assert outcome.recorded_mark == 1
    stored = store.get(submission.id)
    assert stored is not None
    assert stored.ai_mark == 1


def test_unparseable_reply_raises_parse_error() -> None:
    submission = Submission(id="s", assessment_id="waveform-octaves", student_name="Ava", drawing_image="AAAA")
    marker = ScriptedMarker(["I cannot see a drawing."])
    with pytest.raises(ParseError) as excinfo:
        asyncio.run(mark_submission(submission, marker, catalog=get_catalog()))
    assert excinfo.value.raw_response == "I cannot see a drawing."


def test_submission_without_drawing_rejected() -> None:
    submission = Submission(id="s", assessment_id="waveform-octaves", student_name="Ava")
    with pytest.raises(ValidationError):
        asyncio.run(mark_submission(submission, ScriptedMarker([]), catalog=get_catalog()))


def test_persistence_failure_still_returns_feedback(tmp_path: Path, events) -> None:
    _setup_db(tmp_path)
    submission = _record(SubmissionStore(), 2)
    marker = ScriptedMarker([_reply(1)])

    outcome = asyncio.run(mark_submission(submission, marker, catalog=get_catalog(), store=FailingStore()))

    assert outcome.mark == 1
    names = [event.name for event in events]
    assert "marking_persist_failed" in names
    assert "submission_marked" in names


def test_concurrent_marking_does_not_overwrite(tmp_path: Path, events) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    submission = _record(store, 3)

    asyncio.run(mark_submission(submission, ScriptedMarker([_reply(1)]), catalog=get_catalog(), store=store))
    # Second grader started from the same snapshot.
    outcome = asyncio.run(mark_submission(submission, ScriptedMarker([_reply(0)]), catalog=get_catalog(), store=store))

    assert outcome.mark == 0
    stored = store.get(submission.id)
    assert stored is not None
    assert stored.ai_mark == 1
    assert any(event.name == "marking_persist_failed" for event in events)


def test_batch_isolates_failures(tmp_path: Path, events) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    submissions = [_record(store, number) for number in (1, 2, 3)]
    ids = [submission.id for submission in submissions]
    marker = ScriptedMarker([_reply(1), ExternalServiceError("Vision marking call failed: timeout"), _reply(1)])

    result = asyncio.run(mark_batch(ids, marker, store=store, catalog=get_catalog()))

    assert len(marker.calls) == 3
    assert [outcome.submission_id for outcome in result.results] == [ids[0], ids[2]]
    assert len(result.errors) == 1
    assert result.errors[0].submission_id == ids[1]
    assert result.errors[0].challenge_number == 2
    assert "timeout" in result.errors[0].error
    assert result.summary.total_mark == 2
    assert result.summary.max_mark == 3
    assert result.summary.percentage == 67
    assert result.summary.marked_count == 2
    assert result.summary.error_count == 1

    payload = result.as_dict()
    assert payload["success"] is True
    assert payload["summary"] == {
        "totalMark": 2,
        "maxMark": 3,
        "percentage": 67,
        "markedCount": 2,
        "errorCount": 1,
    }
    assert payload["errors"][0]["submissionId"] == ids[1]
    names = [event.name for event in events]
    assert names.count("submission_marking_failed") == 1
    assert names[-1] == "batch_marking_completed"


def test_batch_counts_missing_ids_against_max_mark(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    submission = _record(store, 1)
    marker = ScriptedMarker([_reply(1)])

    result = asyncio.run(mark_batch([submission.id, "gone"], marker, store=store, catalog=get_catalog()))
    assert result.summary.max_mark == 2
    assert result.summary.percentage == 50


def test_batch_uses_reference_images_by_challenge(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    first = _record(store, 1)
    second = _record(store, 2)
    marker = ScriptedMarker([_reply(1), _reply(1)])

    asyncio.run(
        mark_batch(
            [first.id, second.id],
            marker,
            store=store,
            catalog=get_catalog(),
            reference_images={"2": "data:image/png;base64,REF"},
        )
    )
    assert len(marker.calls[0][0]) == 1
    assert len(marker.calls[1][0]) == 2
    assert marker.calls[1][0][1].data == "REF"


def test_batch_request_validation(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    marker = ScriptedMarker([])
    with pytest.raises(ValidationError):
        asyncio.run(mark_batch([], marker, store=store, catalog=get_catalog()))
    with pytest.raises(ValidationError):
        asyncio.run(mark_batch("abc", marker, store=store, catalog=get_catalog()))  # type: ignore[arg-type]
    with pytest.raises(NotFoundError):
        asyncio.run(mark_batch(["missing"], marker, store=store, catalog=get_catalog()))
    assert marker.calls == []
