"""Immutable definitions for assessments, drawing challenges and quiz questions."""

from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..waveforms import WaveformShape


Direction = Literal["higher", "lower"]
AssessmentType = Literal["drawing", "quiz", "listening"]
MarkingMethod = Literal["ai", "auto"]
QuestionType = Literal["multiple-choice", "short-answer", "identification"]
FilterType = Literal["highpass", "lowpass", "lowshelf", "highshelf", "bell", "notch"]

AUTO_SCORED_QUESTION_TYPES = frozenset({"multiple-choice", "identification"})


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class OctaveChallenge(_Frozen):
    """Redraw a reference waveform one or more octaves higher or lower."""

    id: int = Field(ge=1)
    name: str
    original_cycles: int = Field(ge=1)
    target_cycles: float
    original_shape: WaveformShape
    target_shape: WaveformShape
    octaves: int = Field(ge=1)
    direction: Direction
    description: str = ""
    hint: str = ""
    color_key: str = "amber"
    exam_style: bool = False


class PeriodChallenge(_Frozen):
    """Draw a waveform with a given period across the fixed time window."""

    id: int = Field(ge=1)
    name: str
    shape: WaveformShape
    period_ms: float = Field(gt=0)
    expected_cycles: float
    transition_points: Optional[Tuple[float, ...]] = None
    description: str = ""
    hint: str = ""
    color_key: str = "amber"
    exam_style: bool = False

    @model_validator(mode="after")
    def _check_transitions(self) -> "PeriodChallenge":
        if self.shape.has_transitions and self.transition_points is None:
            raise ValueError(f"{self.shape.value} challenges must list their transition points")
        if not self.shape.has_transitions and self.transition_points is not None:
            raise ValueError(f"{self.shape.value} challenges have no transition points")
        return self


class FilterChallenge(_Frozen):
    """Sketch an EQ filter response curve on a log-frequency grid."""

    id: int = Field(ge=1)
    name: str
    filter_type: FilterType
    frequency: float = Field(gt=0)
    gain: Optional[float] = None
    q: Optional[float] = Field(default=None, gt=0)
    description: str = ""
    hint: str = ""
    color_key: str = "amber"


class QuizQuestion(_Frozen):
    id: int
    type: QuestionType
    question: str
    options: Optional[Tuple[str, ...]] = None
    correct_answer: Optional[int] = None
    explanation: Optional[str] = None
    hint: Optional[str] = None
    context: Optional[str] = None
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def auto_scored(self) -> bool:
        return self.type in AUTO_SCORED_QUESTION_TYPES and self.correct_answer is not None

    @model_validator(mode="after")
    def _check_answer_index(self) -> "QuizQuestion":
        if self.correct_answer is not None:
            if not self.options:
                raise ValueError(f"Question {self.id} has a correct answer but no options")
            if not 0 <= self.correct_answer < len(self.options):
                raise ValueError(f"Question {self.id} correct answer is out of range")
        return self


class FilterCanvas(_Frozen):
    width: int = 700
    height: int = 350
    frequency_min_hz: float = 20
    frequency_max_hz: float = 20000
    gain_min_db: float = -24
    gain_max_db: float = 24


class AssessmentDefinition(_Frozen):
    id: str
    title: str
    description: str
    type: AssessmentType
    marking_method: MarkingMethod
    topic: str = "Other"
    icon: Optional[str] = None
    estimated_time: Optional[str] = None
    time_window_ms: Optional[float] = None
    octave_challenges: Tuple[OctaveChallenge, ...] = ()
    period_challenges: Tuple[PeriodChallenge, ...] = ()
    filter_challenges: Tuple[FilterChallenge, ...] = ()
    questions: Tuple[QuizQuestion, ...] = ()
    audio_file: Optional[str] = None
    canvas: Optional[FilterCanvas] = None

    @property
    def challenge_count(self) -> int:
        if self.questions:
            return len(self.questions)
        return len(self.octave_challenges) + len(self.period_challenges) + len(self.filter_challenges)


__all__ = [
    "AUTO_SCORED_QUESTION_TYPES",
    "AssessmentDefinition",
    "AssessmentType",
    "Direction",
    "FilterCanvas",
    "FilterChallenge",
    "FilterType",
    "MarkingMethod",
    "OctaveChallenge",
    "PeriodChallenge",
    "QuestionType",
    "QuizQuestion",
]
