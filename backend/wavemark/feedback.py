"""Parsing of the grader's free-text reply into structured feedback."""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import ParseError

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> Dict[str, Any]:
    """Pull the outermost ``{...}`` span out of ``text`` and decode it."""
    match = _JSON_OBJECT.search(text or "")
    if match is None:
        raise ParseError("No JSON found in response", raw_response=text)
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ParseError(f"Failed to parse AI response: {exc.msg}", raw_response=text) from exc
    if not isinstance(payload, dict):
        raise ParseError("AI response JSON is not an object", raw_response=text)
    return payload


class _Check(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    correct: bool = False


class CycleCountCheck(_Check):
    detected: Optional[Union[float, str]] = None
    expected: Optional[float] = None


class ShapeAccuracyCheck(_Check):
    detected: Optional[str] = None
    expected: Optional[str] = None


class TransitionTimingCheck(_Check):
    expected_positions: List[float] = Field(default_factory=list, alias="expectedPositions")
    assessment: Optional[str] = None


class CriterionCheck(_Check):
    detected: Optional[Any] = None
    expected: Optional[Any] = None


class DrawingFeedback(BaseModel):
    """Structured view over the grader's JSON reply.

    Unknown keys are kept so older replies carrying ``drawingQuality``,
    ``strengths`` and friends round-trip unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    cycle_count: Optional[CycleCountCheck] = Field(default=None, alias="cycleCount")
    shape_accuracy: Optional[ShapeAccuracyCheck] = Field(default=None, alias="shapeAccuracy")
    transition_timing: Optional[TransitionTimingCheck] = Field(default=None, alias="transitionTiming")
    filter_type: Optional[CriterionCheck] = Field(default=None, alias="filterType")
    frequency_placement: Optional[CriterionCheck] = Field(default=None, alias="frequencyPlacement")
    gain_accuracy: Optional[CriterionCheck] = Field(default=None, alias="gainAccuracy")
    mark: Optional[float] = None
    suggested_mark: Optional[float] = Field(default=None, alias="suggestedMark")
    feedback: Optional[str] = None

    def criteria(self) -> List[_Check]:
        checks = (
            self.cycle_count,
            self.shape_accuracy,
            self.transition_timing,
            self.filter_type,
            self.frequency_placement,
            self.gain_accuracy,
        )
        return [check for check in checks if check is not None]


def binary_mark(feedback: DrawingFeedback) -> int:
    criteria = feedback.criteria()
    if not criteria:
        return 0
    return 1 if all(check.correct for check in criteria) else 0


def coerce_mark(value: Any) -> Optional[float]:
    """Numeric mark from a grader field, reading ``true`` as 1 and ``"1"`` as 1."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def resolve_recorded_mark(payload: Dict[str, Any]) -> Optional[float]:
    """Mark stored alongside the feedback; older replies only set ``suggestedMark``."""
    mark = coerce_mark(payload.get("mark"))
    if mark is not None:
        return mark
    return coerce_mark(payload.get("suggestedMark"))


def resolve_result_mark(payload: Dict[str, Any]) -> float:
    mark = coerce_mark(payload.get("mark"))
    return 0 if mark is None else mark


def feedback_consistency(feedback: DrawingFeedback) -> bool:
    if feedback.mark is None:
        return True
    expected = binary_mark(feedback)
    consistent = feedback.mark == expected
    if not consistent:
        logger.warning(
            "Grader awarded %s but its own criteria imply %s; keeping the grader's mark",
            feedback.mark,
            expected,
        )
    return consistent


def parse_feedback(payload: Dict[str, Any]) -> Optional[DrawingFeedback]:
    """Validate a decoded reply, or ``None`` when its shape is unusable."""
    try:
        return DrawingFeedback.model_validate(payload)
    except ValueError:
        logger.warning("Grader reply did not match the feedback schema", exc_info=True)
        return None


__all__ = [
    "CriterionCheck",
    "CycleCountCheck",
    "DrawingFeedback",
    "ShapeAccuracyCheck",
    "TransitionTimingCheck",
    "binary_mark",
    "coerce_mark",
    "extract_json_object",
    "feedback_consistency",
    "parse_feedback",
    "resolve_recorded_mark",
    "resolve_result_mark",
]
