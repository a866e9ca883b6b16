"""
Session state and the event vocabulary for story trainer.

A Session is a frozen value. Every user action is an event, and the
transition functions in story_trainer.session.transitions turn
(Session, event) into the next Session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from story_trainer.content.models import Question, QuestionProgress, Story

DEFAULT_PARAGRAPH_COUNT = 3


class SessionPhase(str, Enum):
    """Coarse stage of a session."""

    SELECT_TOPIC = "select_topic"
    LOADING_STORY = "loading_story"
    READ_STORY = "read_story"
    QUESTIONING = "questioning"
    FINISHED = "finished"


class ContentProvenance(str, Enum):
    """Where the installed story came from."""

    REMOTE = "remote"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Session:
    """Full state of one learner's run through a story."""

    topic: str = ""
    requested_paragraph_count: int = DEFAULT_PARAGRAPH_COUNT
    story: Story | None = None
    progress: tuple[QuestionProgress, ...] = ()
    current_index: int = 0
    selected_choice: int | None = None
    phase: SessionPhase = SessionPhase.SELECT_TOPIC
    content_source: ContentProvenance = ContentProvenance.FALLBACK
    last_error: str | None = None
    pending_token: int | None = None

    @property
    def current_question(self) -> Question | None:
        """The question being asked, or None outside a valid index."""
        if self.story is None or not 0 <= self.current_index < len(self.story.questions):
            return None
        return self.story.questions[self.current_index]

    @property
    def current_progress(self) -> QuestionProgress | None:
        if not 0 <= self.current_index < len(self.progress):
            return None
        return self.progress[self.current_index]

    @property
    def is_loading(self) -> bool:
        return self.phase is SessionPhase.LOADING_STORY

    @property
    def total_questions(self) -> int:
        return len(self.story.questions) if self.story is not None else 0


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class SetTopic:
    topic: str


@dataclass(frozen=True)
class SetParagraphCount:
    count: int


@dataclass(frozen=True)
class GenerateStory:
    """Start loading a story. The token identifies this request."""

    token: int


@dataclass(frozen=True)
class ContentResolved:
    """Result of a generation request, remote or fallback."""

    token: int
    story: Story
    provenance: ContentProvenance
    diagnostic: str | None = None


@dataclass(frozen=True)
class AcknowledgeRead:
    pass


@dataclass(frozen=True)
class ReviewStory:
    pass


@dataclass(frozen=True)
class SelectChoice:
    index: int


@dataclass(frozen=True)
class SubmitAnswer:
    pass


@dataclass(frozen=True)
class SkipQuestion:
    pass


@dataclass(frozen=True)
class RetryStory:
    pass


@dataclass(frozen=True)
class Restart:
    pass


SessionEvent = (
    SetTopic
    | SetParagraphCount
    | GenerateStory
    | ContentResolved
    | AcknowledgeRead
    | ReviewStory
    | SelectChoice
    | SubmitAnswer
    | SkipQuestion
    | RetryStory
    | Restart
)
