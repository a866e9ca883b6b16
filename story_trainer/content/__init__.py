"""
Story content: the model types and the fallback story pool.
"""

from .fallback import FALLBACK_STORIES, clamp_paragraph_count, pick_fallback_story
from .models import (
    MultipleChoice,
    Question,
    QuestionKind,
    QuestionProgress,
    Story,
    fresh_progress,
)

__all__ = [
    "FALLBACK_STORIES",
    "MultipleChoice",
    "Question",
    "QuestionKind",
    "QuestionProgress",
    "Story",
    "clamp_paragraph_count",
    "fresh_progress",
    "pick_fallback_story",
]
