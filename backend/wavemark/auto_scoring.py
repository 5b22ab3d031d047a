"""Automatic scoring for quiz and listening assessments."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .catalog.models import AssessmentDefinition, QuizQuestion
from .errors import ValidationError

Answers = Union[Mapping[Any, Any], Sequence[Any]]


@dataclass(frozen=True)
class QuizScore:
    correct: int
    total: int
    percentage: int

    def as_dict(self) -> Dict[str, int]:
        return {"correct": self.correct, "total": self.total, "percentage": self.percentage}


@dataclass(frozen=True)
class QuestionReview:
    id: int
    type: str
    question: str
    student_answer: Any
    correct_answer: Optional[int] = None
    is_correct: Optional[bool] = None
    options: Optional[List[str]] = None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "question": self.question,
            "studentAnswer": self.student_answer,
        }
        if self.correct_answer is not None:
            payload["correctAnswer"] = self.correct_answer
            payload["isCorrect"] = self.is_correct
            payload["options"] = self.options
        return payload


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage_of(part: float, whole: float) -> int:
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


def normalize_answers(answers: Optional[Answers]) -> Dict[int, Any]:
    """Key answers by question index whatever shape the client sent."""
    if answers is None:
        return {}
    if isinstance(answers, Mapping):
        normalized: Dict[int, Any] = {}
        for key, value in answers.items():
            try:
                index = int(key)
            except (TypeError, ValueError) as exc:
                raise ValidationError(f"Answer key {key!r} is not a question index.") from exc
            normalized[index] = value
        return normalized
    if isinstance(answers, (str, bytes)):
        raise ValidationError("Answers must be a mapping or a list.")
    return dict(enumerate(answers))


def _matches(answer: Any, correct: int) -> bool:
    return type(answer) is int and answer == correct


def score_answers(questions: Sequence[QuizQuestion], answers: Optional[Answers]) -> QuizScore:
    by_index = normalize_answers(answers)
    correct = 0
    total = 0
    for index, question in enumerate(questions):
        if not question.auto_scored:
            continue
        total += 1
        if _matches(by_index.get(index), question.correct_answer):
            correct += 1
    return QuizScore(correct=correct, total=total, percentage=percentage_of(correct, total))


def review_answers(questions: Sequence[QuizQuestion], answers: Optional[Answers]) -> List[QuestionReview]:
    by_index = normalize_answers(answers)
    reviews = []
    for index, question in enumerate(questions):
        answer = by_index.get(index)
        if question.auto_scored:
            reviews.append(
                QuestionReview(
                    id=question.id,
                    type=question.type,
                    question=question.question,
                    student_answer=answer,
                    correct_answer=question.correct_answer,
                    is_correct=_matches(answer, question.correct_answer),
                    options=list(question.options or ()),
                )
            )
        else:
            reviews.append(
                QuestionReview(id=question.id, type=question.type, question=question.question, student_answer=answer)
            )
    return reviews


def auto_feedback(score: QuizScore) -> Dict[str, Any]:
    return {
        "autoScored": True,
        "correctAnswers": score.correct,
        "totalQuestions": score.total,
        "percentage": score.percentage,
    }


def score_assessment(assessment: AssessmentDefinition, answers: Optional[Answers]) -> QuizScore:
    if assessment.marking_method != "auto" or not assessment.questions:
        raise ValidationError(f"Assessment '{assessment.id}' is not automatically scored.")
    return score_answers(assessment.questions, answers)


def build_response_data(assessment: AssessmentDefinition, answers: Optional[Answers]) -> Dict[str, Any]:
    """Payload persisted with a quiz attempt so teachers can review each answer."""
    score = score_assessment(assessment, answers)
    return {
        "answers": {str(key): value for key, value in normalize_answers(answers).items()},
        "score": score.as_dict(),
        "questions": [review.as_dict() for review in review_answers(assessment.questions, answers)],
    }


__all__ = [
    "QuestionReview",
    "QuizScore",
    "auto_feedback",
    "build_response_data",
    "normalize_answers",
    "percentage_of",
    "review_answers",
    "round_half_up",
    "score_answers",
    "score_assessment",
]
