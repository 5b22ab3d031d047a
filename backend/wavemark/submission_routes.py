"""Endpoints that record student attempts and list them for teachers."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from .answer_key import MAX_OCTAVE_SHIFT, MIN_PERIOD_MS
from .auto_scoring import auto_feedback, build_response_data, score_assessment
from .catalog import ChallengeCatalog, get_catalog
from .errors import NotFoundError, ValidationError
from .submissions import Submission, submission_store
from .telemetry import emit_event

router = APIRouter(tags=["submissions"])
logger = logging.getLogger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DrawingSubmissionRequest(_CamelModel):
    assessment_id: str = Field(..., alias="assessmentId", min_length=1)
    student_name: str = Field(..., alias="studentName")
    challenge_number: int = Field(1, alias="challengeNumber", ge=1)
    drawing_image: Optional[str] = Field(default=None, alias="drawingImage")
    original_shape: Optional[str] = Field(default=None, alias="originalShape")
    target_shape: Optional[str] = Field(default=None, alias="targetShape")
    octaves: Optional[int] = Field(default=None, ge=0, le=MAX_OCTAVE_SHIFT)
    direction: Optional[Literal["higher", "lower"]] = None
    period_ms: Optional[float] = Field(default=None, alias="periodMs", ge=MIN_PERIOD_MS)
    filter_type: Optional[str] = Field(default=None, alias="filterType")
    target_frequency: Optional[float] = Field(default=None, alias="targetFrequency", gt=0)
    target_gain: Optional[float] = Field(default=None, alias="targetGain")


class QuizResponseRequest(_CamelModel):
    student_name: str = Field(..., alias="studentName")
    answers: Union[Dict[str, Any], List[Any]] = Field(default_factory=dict)


def submission_payload(submission: Submission, *, include_image: bool = True) -> Dict[str, Any]:
    payload = submission.model_dump(mode="json")
    if not include_image:
        payload.pop("drawing_image", None)
        payload["has_drawing"] = bool(submission.drawing_image)
    return payload


@router.post("/api/submissions", status_code=status.HTTP_201_CREATED)
def create_submission(
    payload: DrawingSubmissionRequest,
    catalog: ChallengeCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    definition = catalog.get_assessment(payload.assessment_id)
    if definition is None:
        raise NotFoundError(f"Assessment '{payload.assessment_id}' was not found.")
    if definition.type != "drawing":
        raise ValidationError(f"Assessment '{definition.id}' does not accept drawings.")
    if not payload.drawing_image:
        raise ValidationError("A drawing image is required.")

    stored = submission_store.record(
        definition.id,
        payload.student_name,
        challenge_number=payload.challenge_number,
        drawing_image=payload.drawing_image,
        original_shape=payload.original_shape,
        target_shape=payload.target_shape,
        octaves=payload.octaves,
        direction=payload.direction,
        period_ms=payload.period_ms,
        filter_type=payload.filter_type,
        target_frequency=payload.target_frequency,
        target_gain=payload.target_gain,
    )
    emit_event(
        "submission_recorded",
        submission_id=stored.id,
        assessment_id=stored.assessment_id,
        challenge_number=stored.challenge_number,
    )
    return submission_payload(stored, include_image=False)


@router.post("/api/assessments/{assessment_id}/responses", status_code=status.HTTP_201_CREATED)
def submit_quiz_responses(
    assessment_id: str,
    payload: QuizResponseRequest,
    catalog: ChallengeCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    """Score a quiz or listening attempt and store it as one submission."""
    definition = catalog.get_assessment(assessment_id)
    if definition is None:
        raise NotFoundError(f"Assessment '{assessment_id}' was not found.")

    score = score_assessment(definition, payload.answers)
    feedback = auto_feedback(score)
    stored = submission_store.record(
        definition.id,
        payload.student_name,
        challenge_number=1,
        response_data=build_response_data(definition, payload.answers),
        ai_feedback=feedback,
        ai_mark=score.percentage,
    )
    emit_event(
        "quiz_auto_scored",
        submission_id=stored.id,
        assessment_id=definition.id,
        correct=score.correct,
        total=score.total,
        percentage=score.percentage,
    )
    return {"submissionId": stored.id, "score": score.as_dict(), "feedback": feedback}


@router.get("/api/teacher/submissions", status_code=status.HTTP_200_OK)
def teacher_submissions(
    student: Optional[str] = Query(default=None),
    challenge: Optional[int] = Query(default=None, ge=1),
    assessment_id: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    submissions = submission_store.list_submissions(
        student=student,
        challenge=challenge,
        assessment_id=assessment_id,
    )
    by_student: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict()
    for submission in submissions:
        by_student.setdefault(submission.student_name, []).append(submission_payload(submission))
    return {
        "count": len(submissions),
        "students": submission_store.student_names(assessment_id),
        "submissions": [submission_payload(submission) for submission in submissions],
        "byStudent": by_student,
    }


__all__ = ["router", "submission_payload"]
