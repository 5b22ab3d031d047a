"""Read-only catalog endpoints used by the assessment picker and drawing canvas."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from .answer_key import enumerate_transition_points, shift_cycles, time_window_for
from .catalog import ChallengeCatalog, get_catalog
from .catalog.models import AssessmentDefinition, AssessmentType
from .errors import NotFoundError
from .waveforms import sample_curve

router = APIRouter(prefix="/api/assessments", tags=["assessments"])
logger = logging.getLogger(__name__)

REFERENCE_POINTS = 200


def _summary(definition: AssessmentDefinition) -> Dict[str, Any]:
    return {
        "id": definition.id,
        "title": definition.title,
        "description": definition.description,
        "type": definition.type,
        "markingMethod": definition.marking_method,
        "topic": definition.topic,
        "icon": definition.icon,
        "estimatedTime": definition.estimated_time,
        "challengeCount": definition.challenge_count,
    }


def _require_assessment(catalog: ChallengeCatalog, assessment_id: str) -> AssessmentDefinition:
    definition = catalog.get_assessment(assessment_id)
    if definition is None:
        raise NotFoundError(f"Assessment '{assessment_id}' was not found.")
    return definition


@router.get("", status_code=status.HTTP_200_OK)
def list_assessments(
    assessment_type: Optional[AssessmentType] = Query(default=None, alias="type"),
    catalog: ChallengeCatalog = Depends(get_catalog),
) -> List[Dict[str, Any]]:
    return [_summary(definition) for definition in catalog.list_assessments(assessment_type)]


@router.get("/grouped", status_code=status.HTTP_200_OK)
def grouped_assessments(catalog: ChallengeCatalog = Depends(get_catalog)) -> List[Dict[str, Any]]:
    return [
        {"topic": topic, "assessments": [_summary(definition) for definition in definitions]}
        for topic, definitions in catalog.grouped_by_topic()
    ]


@router.get("/{assessment_id}", status_code=status.HTTP_200_OK)
def fetch_assessment(assessment_id: str, catalog: ChallengeCatalog = Depends(get_catalog)) -> Dict[str, Any]:
    return _require_assessment(catalog, assessment_id).model_dump(mode="json")


@router.get("/{assessment_id}/challenges/{challenge_number}/reference", status_code=status.HTTP_200_OK)
def challenge_reference(
    assessment_id: str,
    challenge_number: int,
    catalog: ChallengeCatalog = Depends(get_catalog),
) -> Dict[str, Any]:
    """Answer key and sampled reference curves for one drawing challenge."""
    definition = _require_assessment(catalog, assessment_id)

    for octave in definition.octave_challenges:
        if octave.id == challenge_number:
            expected = shift_cycles(octave.original_cycles, octave.octaves, octave.direction)
            return {
                "assessmentId": definition.id,
                "challengeNumber": octave.id,
                "kind": "octave",
                "expectedCycles": expected,
                "original": {
                    "shape": octave.original_shape.value,
                    "cycles": octave.original_cycles,
                    "samples": sample_curve(octave.original_shape, octave.original_cycles, REFERENCE_POINTS),
                },
                "target": {
                    "shape": octave.target_shape.value,
                    "cycles": expected,
                    "samples": sample_curve(octave.target_shape, expected, REFERENCE_POINTS),
                },
            }

    for period in definition.period_challenges:
        if period.id == challenge_number:
            window = time_window_for(catalog, definition.id)
            return {
                "assessmentId": definition.id,
                "challengeNumber": period.id,
                "kind": "period",
                "periodMs": period.period_ms,
                "timeWindowMs": window,
                "expectedCycles": period.expected_cycles,
                "transitionPoints": list(period.transition_points) if period.transition_points else None,
                "derivedTransitionPoints": _as_list(
                    enumerate_transition_points(period.shape, period.period_ms, window)
                ),
                "target": {
                    "shape": period.shape.value,
                    "cycles": period.expected_cycles,
                    "samples": sample_curve(period.shape, period.expected_cycles, REFERENCE_POINTS),
                },
            }

    for eq_filter in definition.filter_challenges:
        if eq_filter.id == challenge_number:
            return {
                "assessmentId": definition.id,
                "challengeNumber": eq_filter.id,
                "kind": "filter",
                "filterType": eq_filter.filter_type,
                "frequency": eq_filter.frequency,
                "gain": eq_filter.gain,
                "q": eq_filter.q,
            }

    raise NotFoundError(f"Challenge {challenge_number} is not a drawing challenge of '{assessment_id}'.")


def _as_list(points: Optional[tuple]) -> Optional[List[float]]:
    return list(points) if points is not None else None


__all__ = ["router"]
