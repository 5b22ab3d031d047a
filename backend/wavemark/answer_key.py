"""Expected answers for the drawing assessments.

Everything here is pure: given the catalog and a submission, work out what a
correct drawing looks like. Catalog rows always win over values carried on
the submission; unknown challenge ids fall back to the submission's own
fields so new challenges can be marked before the catalog learns about them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Tuple, Union

from .catalog import ChallengeCatalog
from .catalog.eq_filter_drawing import ASSESSMENT_ID as EQ_FILTER_ASSESSMENT_ID
from .catalog.waveform_periods import ASSESSMENT_ID as PERIOD_ASSESSMENT_ID
from .catalog.waveform_periods import TIME_WINDOW_MS
from .errors import ValidationError
from .submissions import Submission
from .waveforms import WaveformShape, parse_shape

logger = logging.getLogger(__name__)

DEFAULT_ORIGINAL_CYCLES = 4
MAX_OCTAVE_SHIFT = 8
MIN_PERIOD_MS = 0.05
DIRECTIONS = ("higher", "lower")
_EPSILON = 1e-9

Source = Literal["catalog", "fallback"]


@dataclass(frozen=True)
class ResolvedOctaveChallenge:
    original_cycles: int
    octaves: int
    direction: str
    source: Source


@dataclass(frozen=True)
class OctaveAnswer:
    challenge_number: int
    original_shape: str
    target_shape: str
    original_cycles: int
    octaves: int
    direction: str
    expected_cycles: float
    source: Source

    @property
    def factor(self) -> int:
        return 2 ** self.octaves


@dataclass(frozen=True)
class PeriodAnswer:
    challenge_number: int
    shape: WaveformShape
    period_ms: float
    expected_cycles: float
    transition_points: Optional[Tuple[float, ...]]
    window_ms: float
    source: Source

    @property
    def has_transitions(self) -> bool:
        return self.shape.has_transitions


@dataclass(frozen=True)
class FilterAnswer:
    challenge_number: int
    filter_type: str
    frequency: float
    gain: Optional[float]
    q: Optional[float]
    source: Source

    @property
    def has_gain(self) -> bool:
        return self.gain is not None


DrawingAnswer = Union[OctaveAnswer, PeriodAnswer, FilterAnswer]


def resolve_challenge_or_default(
    catalog: ChallengeCatalog,
    challenge_id: Optional[int],
    original_cycles: int = DEFAULT_ORIGINAL_CYCLES,
    octaves: Optional[int] = None,
    direction: Optional[str] = None,
) -> ResolvedOctaveChallenge:
    """Catalog values for a known id, otherwise the caller's fallbacks."""
    challenge = catalog.get_octave_challenge(challenge_id)
    if challenge is not None:
        return ResolvedOctaveChallenge(
            original_cycles=challenge.original_cycles,
            octaves=challenge.octaves,
            direction=challenge.direction,
            source="catalog",
        )
    if octaves is None or direction is None:
        raise ValidationError(
            f"Challenge {challenge_id} is not in the catalog and no octave shift was supplied."
        )
    if not 0 <= octaves <= MAX_OCTAVE_SHIFT:
        raise ValidationError(f"Octave shift must be between 0 and {MAX_OCTAVE_SHIFT}, got {octaves}.")
    if direction not in DIRECTIONS:
        raise ValidationError(f"Direction must be 'higher' or 'lower', got '{direction}'.")
    logger.debug("Octave challenge %s not in catalog; using submitted values", challenge_id)
    return ResolvedOctaveChallenge(
        original_cycles=original_cycles,
        octaves=octaves,
        direction=direction,
        source="fallback",
    )


def shift_cycles(cycles: float, octaves: int, direction: str) -> float:
    if direction == "higher":
        return cycles * 2 ** octaves
    return cycles / 2 ** octaves


def calculate_expected_cycles(
    catalog: ChallengeCatalog,
    challenge_id: Optional[int],
    original_cycles: int,
    octaves: Optional[int],
    direction: Optional[str],
) -> float:
    resolved = resolve_challenge_or_default(catalog, challenge_id, original_cycles, octaves, direction)
    return shift_cycles(resolved.original_cycles, resolved.octaves, resolved.direction)


def expected_cycles_for_period(period_ms: float, window_ms: float = TIME_WINDOW_MS) -> float:
    if period_ms <= 0:
        raise ValueError("Period must be positive.")
    return window_ms / period_ms


def enumerate_transition_points(
    shape: Union[str, WaveformShape],
    period_ms: float,
    window_ms: float = TIME_WINDOW_MS,
) -> Optional[Tuple[float, ...]]:
    """Discontinuity times for square and saw waves starting at t=0.

    Square waves flip every half period strictly inside the window. Saw waves
    reset every full period, including a reset landing exactly on the window
    end.
    """
    resolved = parse_shape(shape)
    if not resolved.has_transitions:
        return None
    if period_ms <= 0:
        raise ValueError("Period must be positive.")
    step = period_ms / 2 if resolved is WaveformShape.SQUARE else period_ms
    points = []
    index = 1
    while True:
        at = round(index * step, 9)
        if resolved is WaveformShape.SQUARE and at >= window_ms - _EPSILON:
            break
        if resolved is WaveformShape.SAW and at > window_ms + _EPSILON:
            break
        points.append(at)
        index += 1
    return tuple(points)


def derive_octave_answer(catalog: ChallengeCatalog, submission: Submission) -> OctaveAnswer:
    resolved = resolve_challenge_or_default(
        catalog,
        submission.challenge_number,
        DEFAULT_ORIGINAL_CYCLES,
        submission.octaves,
        submission.direction,
    )
    challenge = catalog.get_octave_challenge(submission.challenge_number)
    original_shape = challenge.original_shape.value if challenge else (submission.original_shape or "")
    target_shape = challenge.target_shape.value if challenge else (submission.target_shape or "")
    if not target_shape:
        raise ValidationError(f"Submission '{submission.id}' does not name a target waveform shape.")
    return OctaveAnswer(
        challenge_number=submission.challenge_number,
        original_shape=original_shape or "unknown",
        target_shape=target_shape,
        original_cycles=resolved.original_cycles,
        octaves=resolved.octaves,
        direction=resolved.direction,
        expected_cycles=shift_cycles(resolved.original_cycles, resolved.octaves, resolved.direction),
        source=resolved.source,
    )


def derive_period_answer(
    catalog: ChallengeCatalog,
    submission: Submission,
    window_ms: float = TIME_WINDOW_MS,
) -> PeriodAnswer:
    challenge = catalog.get_period_challenge(submission.challenge_number)
    if challenge is not None:
        return PeriodAnswer(
            challenge_number=submission.challenge_number,
            shape=challenge.shape,
            period_ms=challenge.period_ms,
            expected_cycles=challenge.expected_cycles,
            transition_points=challenge.transition_points,
            window_ms=window_ms,
            source="catalog",
        )
    period_ms = submission.period_ms or 1
    if period_ms < MIN_PERIOD_MS:
        raise ValidationError(f"Period must be at least {MIN_PERIOD_MS}ms, got {period_ms}ms.")
    try:
        shape = parse_shape(submission.target_shape or WaveformShape.SINE)
        expected_cycles = expected_cycles_for_period(period_ms, window_ms)
        transition_points = enumerate_transition_points(shape, period_ms, window_ms)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    return PeriodAnswer(
        challenge_number=submission.challenge_number,
        shape=shape,
        period_ms=period_ms,
        expected_cycles=expected_cycles,
        transition_points=transition_points,
        window_ms=window_ms,
        source="fallback",
    )


def derive_filter_answer(catalog: ChallengeCatalog, submission: Submission) -> FilterAnswer:
    challenge = catalog.get_filter_challenge(submission.challenge_number)
    if challenge is not None:
        return FilterAnswer(
            challenge_number=submission.challenge_number,
            filter_type=challenge.filter_type,
            frequency=challenge.frequency,
            gain=challenge.gain,
            q=challenge.q,
            source="catalog",
        )
    if not submission.filter_type or not submission.target_frequency:
        raise ValidationError(
            f"Filter challenge {submission.challenge_number} is not in the catalog and the submission "
            "does not describe the target filter."
        )
    return FilterAnswer(
        challenge_number=submission.challenge_number,
        filter_type=submission.filter_type,
        frequency=submission.target_frequency,
        gain=submission.target_gain,
        q=None,
        source="fallback",
    )


def time_window_for(catalog: ChallengeCatalog, assessment_id: str) -> float:
    definition = catalog.get_assessment(assessment_id)
    if definition is not None and definition.time_window_ms:
        return definition.time_window_ms
    return TIME_WINDOW_MS


def derive_answer(
    catalog: ChallengeCatalog,
    submission: Submission,
    window_ms: Optional[float] = None,
) -> DrawingAnswer:
    if window_ms is None:
        window_ms = time_window_for(catalog, submission.assessment_id)
    if submission.assessment_id == PERIOD_ASSESSMENT_ID:
        return derive_period_answer(catalog, submission, window_ms)
    if submission.assessment_id == EQ_FILTER_ASSESSMENT_ID:
        return derive_filter_answer(catalog, submission)
    return derive_octave_answer(catalog, submission)


__all__ = [
    "DEFAULT_ORIGINAL_CYCLES",
    "DIRECTIONS",
    "MAX_OCTAVE_SHIFT",
    "MIN_PERIOD_MS",
    "DrawingAnswer",
    "FilterAnswer",
    "OctaveAnswer",
    "PeriodAnswer",
    "ResolvedOctaveChallenge",
    "calculate_expected_cycles",
    "derive_answer",
    "derive_filter_answer",
    "derive_octave_answer",
    "derive_period_answer",
    "enumerate_transition_points",
    "expected_cycles_for_period",
    "resolve_challenge_or_default",
    "shift_cycles",
    "time_window_for",
]
