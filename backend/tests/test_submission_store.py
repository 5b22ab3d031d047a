"""Tests for the database-backed submission log."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from wavemark.config import get_settings
from wavemark.db.base import Base
from wavemark.db.session import dispose_engine, get_engine, init_db
from wavemark.errors import ConcurrentUpdateError, NotFoundError, ValidationError
from wavemark.submissions import SubmissionStore


def _setup_db(tmp_path: Path) -> None:
    db_path = tmp_path / "wavemark.db"
    os.environ["WAVEMARK_DATABASE_URL"] = f"sqlite:///{db_path}"
    get_settings.cache_clear()
    dispose_engine()
    init_db()
    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)


def test_record_and_get_round_trip(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    stored = store.record(
        "waveform-octaves",
        "  Ava  ",
        challenge_number=3,
        drawing_image="data:image/png;base64,AAAA",
        original_shape="square",
        target_shape="saw",
        octaves=1,
        direction="lower",
    )
    assert stored.student_name == "Ava"
    assert stored.revision == 0
    assert not stored.is_marked

    fetched = store.get(stored.id)
    assert fetched is not None
    assert fetched.challenge_number == 3
    assert fetched.target_shape == "saw"
    assert store.get("missing") is None


def test_record_requires_student_name(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    with pytest.raises(ValidationError):
        SubmissionStore().record("waveform-octaves", "   ")


def test_fetch_by_ids_keeps_request_order_and_skips_missing(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    first = store.record("waveform-periods", "Ava", challenge_number=1, drawing_image="AAAA")
    second = store.record("waveform-periods", "Ava", challenge_number=2, drawing_image="BBBB")

    fetched = store.fetch_by_ids([second.id, "nope", first.id, second.id])
    assert [item.id for item in fetched] == [second.id, first.id]
    assert store.fetch_by_ids([]) == []


def test_apply_marking_bumps_revision(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    stored = store.record("waveform-octaves", "Ava", drawing_image="AAAA")

    marked = store.apply_marking(stored.id, {"mark": 1, "feedback": "Nice"}, 1, expected_revision=0)
    assert marked.revision == 1
    assert marked.ai_mark == 1
    assert marked.ai_feedback == {"mark": 1, "feedback": "Nice"}
    assert marked.is_marked


def test_stale_revision_is_rejected(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    stored = store.record("waveform-octaves", "Ava", drawing_image="AAAA")
    store.apply_marking(stored.id, {"mark": 1}, 1, expected_revision=stored.revision)

    with pytest.raises(ConcurrentUpdateError):
        store.apply_marking(stored.id, {"mark": 0}, 0, expected_revision=stored.revision)

    current = store.get(stored.id)
    assert current is not None
    assert current.ai_mark == 1

    # Without a revision the write is last-writer-wins.
    store.apply_marking(stored.id, {"mark": 0}, 0)
    current = store.get(stored.id)
    assert current is not None
    assert current.ai_mark == 0
    assert current.revision == 2


def test_apply_marking_missing_submission(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    with pytest.raises(NotFoundError):
        SubmissionStore().apply_marking("missing", {"mark": 1}, 1)


def test_list_filters_and_student_names(tmp_path: Path) -> None:
    _setup_db(tmp_path)
    store = SubmissionStore()
    store.record("waveform-octaves", "Ava", challenge_number=1, drawing_image="A")
    store.record("waveform-octaves", "ben", challenge_number=2, drawing_image="B")
    store.record("synthesis-fundamentals-quiz", "Ava", response_data={"answers": {}}, ai_feedback={"autoScored": True}, ai_mark=50)

    assert len(store.list_submissions()) == 3
    assert len(store.list_submissions(student="Ava")) == 2
    assert len(store.list_submissions(challenge=2)) == 1
    quiz = store.list_submissions(assessment_id="synthesis-fundamentals-quiz")
    assert len(quiz) == 1
    assert quiz[0].is_marked
    assert quiz[0].ai_mark == 50

    assert store.student_names() == ["Ava", "ben"]
    assert store.student_names("synthesis-fundamentals-quiz") == ["Ava"]
