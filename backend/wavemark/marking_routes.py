"""Teacher-triggered AI marking endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from .batch_marking import mark_batch, validate_submission_ids
from .catalog import ChallengeCatalog, get_catalog
from .config import Settings, get_settings
from .errors import NotFoundError, ValidationError
from .marking import mark_submission
from .submissions import submission_store
from .vision import VisionMarker, get_vision_marker

router = APIRouter(prefix="/api", tags=["marking"])
logger = logging.getLogger(__name__)


class MarkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    submission_id: Optional[str] = Field(default=None, alias="submissionId")
    reference_image: Optional[str] = Field(default=None, alias="referenceImage")
    correct_answer_image: Optional[str] = Field(default=None, alias="correctAnswerImage")


class BatchMarkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    submission_ids: Optional[Any] = Field(default=None, alias="submissionIds")
    reference_images: Optional[Dict[str, Optional[str]]] = Field(default=None, alias="referenceImages")
    correct_answer_images: Optional[Dict[str, Optional[str]]] = Field(default=None, alias="correctAnswerImages")


def get_marker(settings: Settings) -> VisionMarker:
    return get_vision_marker(settings)


@router.post("/ai-mark", status_code=status.HTTP_200_OK)
async def ai_mark(
    payload: MarkRequest,
    settings: Settings = Depends(get_settings),
    catalog: ChallengeCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    if not payload.submission_id:
        raise ValidationError("Missing submissionId")
    marker = get_marker(settings)
    submission = submission_store.get(payload.submission_id)
    if submission is None:
        raise NotFoundError("Submission not found")

    outcome = await mark_submission(
        submission,
        marker,
        catalog=catalog,
        reference_image=payload.reference_image or payload.correct_answer_image,
        store=submission_store,
    )
    return {"success": True, "feedback": outcome.feedback, "markedAt": outcome.marked_at.isoformat()}


@router.post("/ai-mark-batch", status_code=status.HTTP_200_OK)
async def ai_mark_batch(
    payload: BatchMarkRequest,
    settings: Settings = Depends(get_settings),
    catalog: ChallengeCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    ids: List[str] = validate_submission_ids(payload.submission_ids)
    marker = get_marker(settings)
    references = {
        key: value
        for key, value in (payload.reference_images or payload.correct_answer_images or {}).items()
        if value
    }
    result = await mark_batch(
        ids,
        marker,
        store=submission_store,
        catalog=catalog,
        reference_images=references,
    )
    logger.info(
        "Batch marking finished: %s marked, %s failed, %s%%",
        result.summary.marked_count,
        result.summary.error_count,
        result.summary.percentage,
    )
    return result.as_dict()


__all__ = ["get_marker", "router"]
