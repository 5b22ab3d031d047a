"""Assessment registry and challenge lookup tables.

The catalog is built once per process by :func:`build_catalog` and handed to
the answer-key and marking code by reference. Unknown challenge ids resolve
to ``None`` so callers can apply their own fallbacks.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from .eq_filter_drawing import build_eq_filter_drawing
from .models import (
    AssessmentDefinition,
    AssessmentType,
    FilterChallenge,
    OctaveChallenge,
    PeriodChallenge,
    QuizQuestion,
)
from .polar_patterns_listening import build_polar_patterns_listening
from .synthesis_fundamentals_quiz import build_synthesis_fundamentals_quiz
from .waveform_octaves import build_waveform_octaves
from .waveform_periods import build_waveform_periods

_TOPIC_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def _topic_sort_key(topic: str) -> float:
    match = _TOPIC_NUMBER.match(topic)
    return float(match.group(1)) if match else 999.0


@dataclass(frozen=True)
class ChallengeCatalog:
    assessments: Mapping[str, AssessmentDefinition]
    octave_challenges: Mapping[int, OctaveChallenge] = field(default_factory=dict)
    period_challenges: Mapping[int, PeriodChallenge] = field(default_factory=dict)
    filter_challenges: Mapping[int, FilterChallenge] = field(default_factory=dict)

    @classmethod
    def from_assessments(cls, definitions: Sequence[AssessmentDefinition]) -> "ChallengeCatalog":
        assessments: Dict[str, AssessmentDefinition] = {}
        octave: Dict[int, OctaveChallenge] = {}
        period: Dict[int, PeriodChallenge] = {}
        filters: Dict[int, FilterChallenge] = {}
        for definition in definitions:
            if definition.id in assessments:
                raise ValueError(f"Duplicate assessment id '{definition.id}'")
            assessments[definition.id] = definition
            octave.update({entry.id: entry for entry in definition.octave_challenges})
            period.update({entry.id: entry for entry in definition.period_challenges})
            filters.update({entry.id: entry for entry in definition.filter_challenges})
        return cls(
            assessments=MappingProxyType(assessments),
            octave_challenges=MappingProxyType(octave),
            period_challenges=MappingProxyType(period),
            filter_challenges=MappingProxyType(filters),
        )

    def get_assessment(self, assessment_id: str) -> Optional[AssessmentDefinition]:
        return self.assessments.get(assessment_id)

    def get_octave_challenge(self, challenge_id: Optional[int]) -> Optional[OctaveChallenge]:
        if challenge_id is None:
            return None
        return self.octave_challenges.get(challenge_id)

    def get_period_challenge(self, challenge_id: Optional[int]) -> Optional[PeriodChallenge]:
        if challenge_id is None:
            return None
        return self.period_challenges.get(challenge_id)

    def get_filter_challenge(self, challenge_id: Optional[int]) -> Optional[FilterChallenge]:
        if challenge_id is None:
            return None
        return self.filter_challenges.get(challenge_id)

    def list_assessments(self, assessment_type: Optional[AssessmentType] = None) -> List[AssessmentDefinition]:
        return [
            definition
            for definition in self.assessments.values()
            if assessment_type is None or definition.type == assessment_type
        ]

    def grouped_by_type(self) -> Dict[str, List[AssessmentDefinition]]:
        grouped: Dict[str, List[AssessmentDefinition]] = {"drawing": [], "quiz": [], "listening": []}
        for definition in self.assessments.values():
            grouped[definition.type].append(definition)
        return grouped

    def grouped_by_topic(self) -> List[tuple[str, List[AssessmentDefinition]]]:
        grouped: Dict[str, List[AssessmentDefinition]] = {}
        for definition in self.assessments.values():
            grouped.setdefault(definition.topic or "Other", []).append(definition)
        topics = sorted(grouped, key=_topic_sort_key)
        return [(topic, grouped[topic]) for topic in topics]


def build_catalog() -> ChallengeCatalog:
    return ChallengeCatalog.from_assessments(
        [
            build_waveform_octaves(),
            build_waveform_periods(),
            build_synthesis_fundamentals_quiz(),
            build_polar_patterns_listening(),
            build_eq_filter_drawing(),
        ]
    )


@lru_cache
def get_catalog() -> ChallengeCatalog:
    return build_catalog()


__all__ = [
    "AssessmentDefinition",
    "ChallengeCatalog",
    "FilterChallenge",
    "OctaveChallenge",
    "PeriodChallenge",
    "QuizQuestion",
    "build_catalog",
    "get_catalog",
]
