"""
Story session: state, events, transitions, scoring and the controller.

Components:
- state: Session value, phases and the event vocabulary
- transitions: pure (Session, event) -> Session functions
- scoring: score, grade and display helpers
- controller: single-writer actor with the async generation step
"""

from .controller import SessionController
from .scoring import ScoreReport, compute_score, display_attempts
from .state import (
    AcknowledgeRead,
    ContentProvenance,
    ContentResolved,
    GenerateStory,
    Restart,
    RetryStory,
    ReviewStory,
    SelectChoice,
    Session,
    SessionPhase,
    SetParagraphCount,
    SetTopic,
    SkipQuestion,
    SubmitAnswer,
)
from .transitions import transition

__all__ = [
    "AcknowledgeRead",
    "ContentProvenance",
    "ContentResolved",
    "GenerateStory",
    "Restart",
    "RetryStory",
    "ReviewStory",
    "ScoreReport",
    "SelectChoice",
    "Session",
    "SessionController",
    "SessionPhase",
    "SetParagraphCount",
    "SetTopic",
    "SkipQuestion",
    "SubmitAnswer",
    "compute_score",
    "display_attempts",
    "transition",
]
