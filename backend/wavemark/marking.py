"""Marking a single drawing submission with the vision grader."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from .answer_key import derive_answer
from .catalog import ChallengeCatalog
from .errors import PersistenceError, ValidationError
from .feedback import (
    extract_json_object,
    feedback_consistency,
    parse_feedback,
    resolve_recorded_mark,
    resolve_result_mark,
)
from .images import EncodedImage, normalize_image
from .prompts import build_marking_prompt
from .submissions import Submission, SubmissionStore
from .telemetry import emit_event
from .vision import VisionMarker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkingOutcome:
    submission_id: str
    challenge_number: int
    feedback: Dict[str, Any]
    mark: float
    recorded_mark: Optional[float]
    marked_at: datetime

    def as_result(self) -> Dict[str, Any]:
        return {
            "submissionId": self.submission_id,
            "challengeNumber": self.challenge_number,
            "feedback": self.feedback,
            "mark": self.mark,
        }


async def mark_submission(
    submission: Submission,
    marker: VisionMarker,
    *,
    catalog: ChallengeCatalog,
    reference_image: Optional[str] = None,
    store: Optional[SubmissionStore] = None,
    window_ms: Optional[float] = None,
) -> MarkingOutcome:
    """Grade one drawing and attach the feedback to the stored submission.

    Storing the result is best-effort: a failed write is logged and reported
    through telemetry, and the computed feedback is still returned.
    """
    if not submission.drawing_image:
        raise ValidationError(f"Submission '{submission.id}' has no drawing to mark.")

    answer = derive_answer(catalog, submission, window_ms)
    images: List[EncodedImage] = [normalize_image(submission.drawing_image)]
    if reference_image:
        images.append(normalize_image(reference_image))
    prompt = build_marking_prompt(answer, with_reference=len(images) > 1)

    logger.info(
        "Marking submission %s (%s challenge %s, reference=%s)",
        submission.id,
        submission.assessment_id,
        submission.challenge_number,
        len(images) > 1,
    )
    reply = await marker.mark(images, prompt)
    payload = extract_json_object(reply)

    parsed = parse_feedback(payload)
    if parsed is not None:
        feedback_consistency(parsed)

    marked_at = datetime.now(timezone.utc)
    recorded_mark = resolve_recorded_mark(payload)
    if store is not None:
        try:
            store.apply_marking(
                submission.id,
                payload,
                recorded_mark,
                marked_at=marked_at,
                expected_revision=submission.revision,
            )
        except (PersistenceError, SQLAlchemyError) as exc:
            logger.exception("Failed to save feedback for submission %s", submission.id)
            emit_event("marking_persist_failed", submission_id=submission.id, error=str(exc))

    outcome = MarkingOutcome(
        submission_id=submission.id,
        challenge_number=submission.challenge_number,
        feedback=payload,
        mark=resolve_result_mark(payload),
        recorded_mark=recorded_mark,
        marked_at=marked_at,
    )
    emit_event(
        "submission_marked",
        submission_id=submission.id,
        assessment_id=submission.assessment_id,
        challenge_number=submission.challenge_number,
        mark=outcome.mark,
    )
    return outcome


__all__ = ["MarkingOutcome", "mark_submission"]
