"""
Scoring for a finished (or in-progress) story quiz.

Each question is worth 100 / total points. Only correct entries earn points;
skipped and incomplete entries earn nothing. The raw score is rounded half
away from zero before grading.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from story_trainer.content.models import QuestionProgress

# (minimum rounded score, grade, label), checked top down
GRADE_BANDS: tuple[tuple[int, str, str], ...] = (
    (90, "A", "Excellent"),
    (80, "B", "Good"),
    (70, "C", "Needs Practice"),
)
FAILING_GRADE = ("Unsatisfactory", "Keep Working!")

PERFECT_SCORE = 100


@dataclass(frozen=True)
class ScoreReport:
    """Score and grade for one pass through a story's questions."""

    raw_score: float
    score: int
    grade: str
    label: str

    @property
    def can_retry(self) -> bool:
        """A quiz can be retried unless it was perfect."""
        return self.score < PERFECT_SCORE


def round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def grade_for(score: int) -> tuple[str, str]:
    """Map a rounded score to (grade, label)."""
    for minimum, grade, label in GRADE_BANDS:
        if score >= minimum:
            return grade, label
    return FAILING_GRADE


def compute_score(progress: Sequence[QuestionProgress], total_questions: int) -> ScoreReport | None:
    """
    Score a progress sequence.

    Args:
        progress: One entry per question
        total_questions: Number of questions in the story

    Returns:
        ScoreReport, or None when there are no questions to score
    """
    if total_questions <= 0 or not progress:
        return None

    points_per_question = 100.0 / total_questions
    raw = sum(points_per_question for entry in progress if entry.is_correct and not entry.skipped)
    score = round_half_away_from_zero(raw)
    grade, label = grade_for(score)
    return ScoreReport(raw_score=raw, score=score, grade=grade, label=label)


def display_attempts(entry: QuestionProgress) -> int:
    """Attempts shown to the learner; a correct answer always shows as 1."""
    if entry.is_correct and entry.attempts > 1:
        return 1
    return entry.attempts


def entry_status(entry: QuestionProgress) -> str:
    if entry.skipped:
        return "Skipped (0 pts)"
    if entry.is_correct:
        return "Correct"
    return "Incomplete"


def completed_count(progress: Sequence[QuestionProgress]) -> int:
    """Number of entries that are correct or skipped."""
    return sum(1 for entry in progress if entry.is_terminal)
