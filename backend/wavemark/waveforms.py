"""Reference waveform evaluators for the drawing assessments.

Each shape maps a normalised position along the time window (``progress`` in
``[0, 1)``) and a cycle count to an amplitude in ``[-1, 1]``. One full
oscillation spans ``1 / cycles`` of the window.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, List, Union


class WaveformShape(str, Enum):
    SINE = "sine"
    SQUARE = "square"
    SAW = "saw"
    TRIANGLE = "triangle"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def has_transitions(self) -> bool:
        """Square and saw waves jump discontinuously; sine and triangle do not."""
        return self in (WaveformShape.SQUARE, WaveformShape.SAW)


def _sine(progress: float, cycles: float) -> float:
    return math.sin(progress * cycles * 2 * math.pi)


def _square(progress: float, cycles: float) -> float:
    value = math.sin(progress * cycles * 2 * math.pi)
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0


def _saw(progress: float, cycles: float) -> float:
    phase = (progress * cycles) % 1
    return 2 * phase - 1


def _triangle(progress: float, cycles: float) -> float:
    phase = (progress * cycles) % 1
    return 4 * abs(phase - 0.5) - 1


_EVALUATORS: Dict[WaveformShape, Callable[[float, float], float]] = {
    WaveformShape.SINE: _sine,
    WaveformShape.SQUARE: _square,
    WaveformShape.SAW: _saw,
    WaveformShape.TRIANGLE: _triangle,
}


def parse_shape(value: Union[str, WaveformShape]) -> WaveformShape:
    if isinstance(value, WaveformShape):
        return value
    normalized = str(value).strip().lower()
    try:
        return WaveformShape(normalized)
    except ValueError as exc:
        raise ValueError(f"Unknown waveform shape '{value}'.") from exc


def evaluate(shape: Union[str, WaveformShape], progress: float, cycles: float) -> float:
    """Amplitude of ``shape`` at ``progress`` when ``cycles`` oscillations fill the window."""
    if cycles < 0:
        raise ValueError("Cycle count cannot be negative.")
    return _EVALUATORS[parse_shape(shape)](progress, cycles)


def sample_curve(shape: Union[str, WaveformShape], cycles: float, points: int = 200) -> List[float]:
    if points <= 0:
        raise ValueError("At least one sample point is required.")
    resolved = parse_shape(shape)
    return [evaluate(resolved, index / points, cycles) for index in range(points)]


__all__ = [
    "WaveformShape",
    "evaluate",
    "parse_shape",
    "sample_curve",
]
