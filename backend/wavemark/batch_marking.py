"""Sequential marking of a batch of drawing submissions.

Items are graded one at a time so a batch never puts more than one request in
flight against the vision service. A failure on one item is recorded and the
loop moves on; only a malformed request or an empty lookup fails the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .auto_scoring import percentage_of
from .catalog import ChallengeCatalog
from .errors import NotFoundError, ValidationError
from .marking import MarkingOutcome, mark_submission
from .submissions import SubmissionStore
from .telemetry import emit_event
from .vision import VisionMarker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchItemError:
    submission_id: str
    challenge_number: int
    error: str

    def as_dict(self) -> Dict[str, Any]:
        return {"submissionId": self.submission_id, "challengeNumber": self.challenge_number, "error": self.error}


@dataclass(frozen=True)
class BatchSummary:
    total_mark: float
    max_mark: int
    percentage: int
    marked_count: int
    error_count: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalMark": self.total_mark,
            "maxMark": self.max_mark,
            "percentage": self.percentage,
            "markedCount": self.marked_count,
            "errorCount": self.error_count,
        }


@dataclass
class BatchMarkingResult:
    results: List[MarkingOutcome]
    errors: List[BatchItemError]
    summary: BatchSummary
    marked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "results": [outcome.as_result() for outcome in self.results],
            "errors": [error.as_dict() for error in self.errors],
            "summary": self.summary.as_dict(),
            "markedAt": self.marked_at.isoformat(),
        }


def validate_submission_ids(submission_ids: Any) -> List[str]:
    if not isinstance(submission_ids, (list, tuple)) or not submission_ids:
        raise ValidationError("Missing or empty submissionIds array")
    return [str(value) for value in submission_ids]


def _reference_for(reference_images: Optional[Mapping[Any, str]], challenge_number: int) -> Optional[str]:
    if not reference_images:
        return None
    for key, value in reference_images.items():
        try:
            if int(key) == challenge_number:
                return value
        except (TypeError, ValueError):
            continue
    return None


def summarize(results: Sequence[MarkingOutcome], errors: Sequence[BatchItemError], requested: int) -> BatchSummary:
    total = sum(outcome.mark for outcome in results)
    return BatchSummary(
        total_mark=total,
        max_mark=requested,
        percentage=percentage_of(total, requested),
        marked_count=len(results),
        error_count=len(errors),
    )


async def mark_batch(
    submission_ids: Sequence[str],
    marker: VisionMarker,
    *,
    store: SubmissionStore,
    catalog: ChallengeCatalog,
    reference_images: Optional[Mapping[Any, str]] = None,
    window_ms: Optional[float] = None,
) -> BatchMarkingResult:
    ids = validate_submission_ids(submission_ids)
    submissions = store.fetch_by_ids(ids)
    if not submissions:
        raise NotFoundError("No submissions found")

    results: List[MarkingOutcome] = []
    errors: List[BatchItemError] = []
    for submission in submissions:
        try:
            outcome = await mark_submission(
                submission,
                marker,
                catalog=catalog,
                reference_image=_reference_for(reference_images, submission.challenge_number),
                store=store,
                window_ms=window_ms,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to mark submission %s", submission.id)
            message = str(exc) or "Marking failed"
            errors.append(
                BatchItemError(
                    submission_id=submission.id,
                    challenge_number=submission.challenge_number,
                    error=message,
                )
            )
            emit_event("submission_marking_failed", submission_id=submission.id, error=message)
            continue
        results.append(outcome)

    summary = summarize(results, errors, len(ids))
    batch = BatchMarkingResult(results=results, errors=errors, summary=summary)
    emit_event(
        "batch_marking_completed",
        requested=summary.max_mark,
        marked=summary.marked_count,
        failed=summary.error_count,
        total_mark=summary.total_mark,
        percentage=summary.percentage,
    )
    return batch


__all__ = [
    "BatchItemError",
    "BatchMarkingResult",
    "BatchSummary",
    "mark_batch",
    "summarize",
    "validate_submission_ids",
]
