"""
Content model for story trainer: stories, questions and per-question progress.

Story and Question are frozen pydantic models because they arrive as JSON from
the story worker. QuestionProgress is plain session state, so it is a frozen
dataclass that is replaced rather than mutated.

Wire format of a question (kind fields are flattened into the question):

    {"text": "...", "paragraph_index": 0, "kind": "multiple_choice",
     "choices": ["...", "..."], "correct_index": 1}
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

# Keys that belong to the question kind when the payload is flattened
_KIND_FIELDS = ("choices", "correct_index")


class MultipleChoice(BaseModel):
    """Single-best-answer multiple choice."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["multiple_choice"] = "multiple_choice"
    choices: tuple[str, ...] = Field(..., description="Options in display order")
    correct_index: int = Field(..., ge=0, description="Index into choices")

    def check(self, choice: int | None) -> bool:
        """Return True if the selected choice is the correct one."""
        return choice is not None and choice == self.correct_index


# Question kinds. Multiple choice is the only variant today; new kinds join
# this alias as a discriminated union on "kind".
QuestionKind = MultipleChoice


class Question(BaseModel):
    """A comprehension question about one paragraph of a story."""

    model_config = ConfigDict(frozen=True)

    text: str
    paragraph_index: int = Field(..., ge=0, description="Advisory paragraph reference")
    kind: QuestionKind

    @model_validator(mode="before")
    @classmethod
    def _nest_flattened_kind(cls, data: Any) -> Any:
        """Accept the flattened worker format by nesting the kind fields."""
        if isinstance(data, dict) and isinstance(data.get("kind"), str):
            data = dict(data)
            kind = {"kind": data.pop("kind")}
            for key in _KIND_FIELDS:
                if key in data:
                    kind[key] = data.pop(key)
            data["kind"] = kind
        return data

    @model_serializer(mode="wrap")
    def _flatten_kind(self, handler) -> dict[str, Any]:
        data = handler(self)
        kind = data.pop("kind", {}) or {}
        data.update(kind)
        return data

    @property
    def choices(self) -> tuple[str, ...]:
        return self.kind.choices

    def is_answer_correct(self, choice: int | None) -> bool:
        """Check a selected choice index against this question."""
        return self.kind.check(choice)


class Story(BaseModel):
    """A titled story with ordered paragraphs and questions."""

    model_config = ConfigDict(frozen=True)

    title: str
    paragraphs: tuple[str, ...]
    questions: tuple[Question, ...] = Field(..., min_length=1)

    def truncated(self, paragraph_count: int) -> Story:
        """Return a copy keeping only the first paragraph_count paragraphs.

        Questions are left as they are, so a question's paragraph_index may
        point past the remaining paragraphs.
        """
        if len(self.paragraphs) <= paragraph_count:
            return self
        return self.model_copy(update={"paragraphs": self.paragraphs[:paragraph_count]})


@dataclass(frozen=True)
class QuestionProgress:
    """Per-question progress: attempts plus correct/skipped flags."""

    attempts: int = 0
    is_correct: bool = False
    skipped: bool = False

    @property
    def is_terminal(self) -> bool:
        """A correct or skipped entry accepts no further changes."""
        return self.is_correct or self.skipped

    def record_attempt(self, correct: bool) -> QuestionProgress:
        return replace(self, attempts=self.attempts + 1, is_correct=correct)

    def mark_skipped(self) -> QuestionProgress:
        return replace(self, skipped=True)


def fresh_progress(story: Story | None) -> tuple[QuestionProgress, ...]:
    """One zeroed progress entry per question of the story."""
    if story is None:
        return ()
    return tuple(QuestionProgress() for _ in story.questions)
