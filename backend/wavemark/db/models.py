"""ORM models backing the submission log."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from .base import Base


class SubmissionModel(Base):
    """One student attempt. Rows are appended and then marked once, never deleted."""

    __tablename__ = "submissions"
    __table_args__ = (
        Index("ix_submissions_assessment", "assessment_id"),
        Index("ix_submissions_student", "student_name"),
        Index("ix_submissions_created", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assessment_id: Mapped[str] = mapped_column(String(128), nullable=False)
    student_name: Mapped[str] = mapped_column(String(128), nullable=False)
    challenge_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    drawing_image: Mapped[Optional[str]] = mapped_column(Text)
    original_shape: Mapped[Optional[str]] = mapped_column(String(16))
    target_shape: Mapped[Optional[str]] = mapped_column(String(16))
    octaves: Mapped[Optional[int]] = mapped_column(Integer)
    direction: Mapped[Optional[str]] = mapped_column(String(16))
    period_ms: Mapped[Optional[float]] = mapped_column(Float)
    filter_type: Mapped[Optional[str]] = mapped_column(String(32))
    target_frequency: Mapped[Optional[float]] = mapped_column(Float)
    target_gain: Mapped[Optional[float]] = mapped_column(Float)
    response_data: Mapped[Optional[dict]] = mapped_column(JSON)
    ai_feedback: Mapped[Optional[dict]] = mapped_column(JSON)
    ai_mark: Mapped[Optional[float]] = mapped_column(Float)
    ai_marked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )


__all__ = ["SubmissionModel"]
