"""Persistence for student submissions and their marking results."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError

from .db.models import SubmissionModel
from .db.session import session_scope
from .errors import ConcurrentUpdateError, NotFoundError, PersistenceError, ValidationError


logger = logging.getLogger(__name__)


class Submission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    assessment_id: str
    student_name: str
    challenge_number: int = 1
    drawing_image: Optional[str] = None
    original_shape: Optional[str] = None
    target_shape: Optional[str] = None
    octaves: Optional[int] = None
    direction: Optional[str] = None
    period_ms: Optional[float] = None
    filter_type: Optional[str] = None
    target_frequency: Optional[float] = None
    target_gain: Optional[float] = None
    response_data: Optional[Dict[str, Any]] = None
    ai_feedback: Optional[Dict[str, Any]] = None
    ai_mark: Optional[float] = None
    ai_marked_at: Optional[datetime] = None
    revision: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_marked(self) -> bool:
        return self.ai_marked_at is not None


class SubmissionStore:
    """Database-backed, append-only submission log."""

    def record(
        self,
        assessment_id: str,
        student_name: str,
        *,
        challenge_number: int = 1,
        drawing_image: Optional[str] = None,
        original_shape: Optional[str] = None,
        target_shape: Optional[str] = None,
        octaves: Optional[int] = None,
        direction: Optional[str] = None,
        period_ms: Optional[float] = None,
        filter_type: Optional[str] = None,
        target_frequency: Optional[float] = None,
        target_gain: Optional[float] = None,
        response_data: Optional[Dict[str, Any]] = None,
        ai_feedback: Optional[Dict[str, Any]] = None,
        ai_mark: Optional[float] = None,
    ) -> Submission:
        name = student_name.strip()
        if not name:
            raise ValidationError("Student name cannot be empty when recording submissions.")
        now = datetime.now(timezone.utc)
        model = SubmissionModel(
            assessment_id=assessment_id,
            student_name=name,
            challenge_number=challenge_number,
            drawing_image=drawing_image,
            original_shape=original_shape,
            target_shape=target_shape,
            octaves=octaves,
            direction=direction,
            period_ms=period_ms,
            filter_type=filter_type,
            target_frequency=target_frequency,
            target_gain=target_gain,
            response_data=response_data,
            ai_feedback=ai_feedback,
            ai_mark=ai_mark,
            ai_marked_at=now if ai_feedback is not None else None,
            revision=0,
            created_at=now,
        )
        try:
            with session_scope() as session:
                session.add(model)
                session.flush()
                logger.info(
                    "Stored %s submission %s for %s (challenge %s)",
                    assessment_id,
                    model.id,
                    name,
                    challenge_number,
                )
                return Submission.model_validate(model)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to save submission: {exc}") from exc

    def get(self, submission_id: str) -> Optional[Submission]:
        with session_scope(commit=False) as session:
            model = session.get(SubmissionModel, submission_id)
            return Submission.model_validate(model) if model is not None else None

    def fetch_by_ids(self, submission_ids: Sequence[str]) -> List[Submission]:
        """Load every requested submission in one query, preserving request order."""
        wanted = list(dict.fromkeys(str(value) for value in submission_ids))
        if not wanted:
            return []
        with session_scope(commit=False) as session:
            stmt = select(SubmissionModel).where(SubmissionModel.id.in_(wanted))
            rows = {row.id: row for row in session.execute(stmt).scalars().all()}
            return [Submission.model_validate(rows[key]) for key in wanted if key in rows]

    def apply_marking(
        self,
        submission_id: str,
        feedback: Dict[str, Any],
        mark: Optional[float],
        *,
        marked_at: Optional[datetime] = None,
        expected_revision: Optional[int] = None,
    ) -> Submission:
        """Attach marking output, bumping the row revision.

        With ``expected_revision`` the write only lands if nobody else marked
        the submission since it was read.
        """
        timestamp = marked_at or datetime.now(timezone.utc)
        try:
            with session_scope() as session:
                stmt = update(SubmissionModel).where(SubmissionModel.id == submission_id)
                if expected_revision is not None:
                    stmt = stmt.where(SubmissionModel.revision == expected_revision)
                stmt = stmt.values(
                    ai_feedback=feedback,
                    ai_mark=mark,
                    ai_marked_at=timestamp,
                    revision=SubmissionModel.revision + 1,
                ).execution_options(synchronize_session=False)
                result = session.execute(stmt)
                model = session.get(SubmissionModel, submission_id, populate_existing=True)
                if model is None:
                    raise NotFoundError(f"Submission '{submission_id}' was not found.")
                if result.rowcount == 0:
                    raise ConcurrentUpdateError(
                        f"Submission '{submission_id}' changed while it was being marked "
                        f"(expected revision {expected_revision}, found {model.revision})."
                    )
                logger.info("Attached marking result to submission %s (mark=%s)", submission_id, mark)
                return Submission.model_validate(model)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to save marking for '{submission_id}': {exc}") from exc

    def list_submissions(
        self,
        *,
        student: Optional[str] = None,
        challenge: Optional[int] = None,
        assessment_id: Optional[str] = None,
    ) -> List[Submission]:
        with session_scope(commit=False) as session:
            stmt = select(SubmissionModel)
            if student:
                stmt = stmt.where(SubmissionModel.student_name == student)
            if challenge is not None:
                stmt = stmt.where(SubmissionModel.challenge_number == challenge)
            if assessment_id:
                stmt = stmt.where(SubmissionModel.assessment_id == assessment_id)
            stmt = stmt.order_by(SubmissionModel.created_at.desc())
            rows = session.execute(stmt).scalars().all()
            return [Submission.model_validate(row) for row in rows]

    def student_names(self, assessment_id: Optional[str] = None) -> List[str]:
        with session_scope(commit=False) as session:
            stmt = select(SubmissionModel.student_name).group_by(SubmissionModel.student_name)
            if assessment_id:
                stmt = stmt.where(SubmissionModel.assessment_id == assessment_id)
            stmt = stmt.order_by(func.lower(SubmissionModel.student_name))
            return [name for name in session.execute(stmt).scalars().all()]


submission_store = SubmissionStore()

__all__ = [
    "Submission",
    "SubmissionStore",
    "submission_store",
]
