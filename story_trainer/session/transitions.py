"""
Pure transition functions for the story session state machine.

    SELECT_TOPIC --GenerateStory--> LOADING_STORY --ContentResolved--> READ_STORY
    READ_STORY --AcknowledgeRead--> QUESTIONING --SubmitAnswer/SkipQuestion--> FINISHED
    FINISHED --RetryStory--> QUESTIONING
    any --Restart--> SELECT_TOPIC

transition() never raises on a malformed or out-of-phase event: the event is
ignored and the same session is returned. Input validation failures only set
last_error. A successful action clears last_error.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from loguru import logger

from story_trainer.content.fallback import clamp_paragraph_count
from story_trainer.content.models import fresh_progress

from .scoring import compute_score
from .state import (
    AcknowledgeRead,
    ContentResolved,
    GenerateStory,
    RetryStory,
    Restart,
    ReviewStory,
    SelectChoice,
    Session,
    SessionPhase,
    SetParagraphCount,
    SetTopic,
    SkipQuestion,
    SubmitAnswer,
)

EMPTY_TOPIC_MESSAGE = "Please enter a story topic first."
NO_STORY_MESSAGE = "No story is loaded yet."
NO_CHOICE_MESSAGE = "Please choose an answer before checking."

# Transition registry - populated by @handles decorator
TRANSITIONS: dict[type, Callable[[Session, object], Session]] = {}


def handles(event_type: type):
    """Decorator to register the transition for an event type."""
    def decorator(func):
        TRANSITIONS[event_type] = func
        return func
    return decorator


def transition(session: Session, event: object) -> Session:
    """Apply one event and return the next session."""
    handler = TRANSITIONS.get(type(event))
    if handler is None:
        logger.warning(f"Ignoring unknown session event: {event!r}")
        return session
    return handler(session, event)


def _with_error(session: Session, message: str) -> Session:
    return replace(session, last_error=message)


def _advance(session: Session, progress) -> Session:
    """Move past the current question, finishing after the last one."""
    next_index = session.current_index + 1
    if next_index < session.total_questions:
        return replace(
            session,
            progress=progress,
            current_index=next_index,
            selected_choice=None,
            phase=SessionPhase.QUESTIONING,
            last_error=None,
        )
    return replace(
        session,
        progress=progress,
        selected_choice=None,
        phase=SessionPhase.FINISHED,
        last_error=None,
    )


def _restart_quiz(session: Session, phase: SessionPhase) -> Session:
    return replace(
        session,
        progress=fresh_progress(session.story),
        current_index=0,
        selected_choice=None,
        phase=phase,
        last_error=None,
    )


# =============================================================================
# Topic selection and loading
# =============================================================================


@handles(SetTopic)
def _set_topic(session: Session, event: SetTopic) -> Session:
    return replace(session, topic=event.topic)


@handles(SetParagraphCount)
def _set_paragraph_count(session: Session, event: SetParagraphCount) -> Session:
    return replace(session, requested_paragraph_count=clamp_paragraph_count(event.count))


@handles(GenerateStory)
def _generate_story(session: Session, event: GenerateStory) -> Session:
    if session.is_loading:
        # One outstanding request at a time
        return session

    topic = session.topic.strip()
    if not topic:
        return _with_error(session, EMPTY_TOPIC_MESSAGE)

    return replace(
        session,
        topic=topic,
        story=None,
        progress=(),
        current_index=0,
        selected_choice=None,
        phase=SessionPhase.LOADING_STORY,
        last_error=None,
        pending_token=event.token,
    )


@handles(ContentResolved)
def _content_resolved(session: Session, event: ContentResolved) -> Session:
    if not session.is_loading or session.pending_token != event.token:
        logger.debug(
            f"Discarding stale story result (token={event.token}, pending={session.pending_token})"
        )
        return session

    return replace(
        session,
        story=event.story,
        progress=fresh_progress(event.story),
        current_index=0,
        selected_choice=None,
        phase=SessionPhase.READ_STORY,
        content_source=event.provenance,
        last_error=event.diagnostic,
        pending_token=None,
    )


# =============================================================================
# Reading
# =============================================================================


@handles(AcknowledgeRead)
def _acknowledge_read(session: Session, event: AcknowledgeRead) -> Session:
    if session.story is None:
        return _with_error(session, NO_STORY_MESSAGE)
    if session.phase is not SessionPhase.READ_STORY:
        return session
    return replace(session, phase=SessionPhase.QUESTIONING, last_error=None)


@handles(ReviewStory)
def _review_story(session: Session, event: ReviewStory) -> Session:
    if session.story is None:
        return _with_error(session, NO_STORY_MESSAGE)
    if session.phase not in (SessionPhase.READ_STORY, SessionPhase.QUESTIONING, SessionPhase.FINISHED):
        return session
    return _restart_quiz(session, SessionPhase.READ_STORY)


# =============================================================================
# Questioning
# =============================================================================


@handles(SelectChoice)
def _select_choice(session: Session, event: SelectChoice) -> Session:
    if session.story is None:
        return _with_error(session, NO_STORY_MESSAGE)
    if session.phase is not SessionPhase.QUESTIONING:
        return session

    question = session.current_question
    entry = session.current_progress
    if question is None or entry is None or entry.is_terminal:
        return session
    if not 0 <= event.index < len(question.choices):
        return session

    return replace(session, selected_choice=event.index, last_error=None)


@handles(SubmitAnswer)
def _submit_answer(session: Session, event: SubmitAnswer) -> Session:
    if session.story is None:
        return _with_error(session, NO_STORY_MESSAGE)
    if session.phase is not SessionPhase.QUESTIONING:
        return session

    question = session.current_question
    entry = session.current_progress
    if question is None or entry is None or entry.is_terminal:
        return session

    if session.selected_choice is None:
        return _with_error(session, NO_CHOICE_MESSAGE)

    correct = question.is_answer_correct(session.selected_choice)
    progress = list(session.progress)
    progress[session.current_index] = entry.record_attempt(correct)
    progress = tuple(progress)

    if correct:
        return _advance(session, progress)

    # Wrong answer: stay on this question, keep the selection
    return replace(session, progress=progress, last_error=None)


@handles(SkipQuestion)
def _skip_question(session: Session, event: SkipQuestion) -> Session:
    if session.story is None:
        return _with_error(session, NO_STORY_MESSAGE)
    if session.phase is not SessionPhase.QUESTIONING:
        return session

    entry = session.current_progress
    if entry is None or entry.is_terminal:
        return session

    progress = list(session.progress)
    progress[session.current_index] = entry.mark_skipped()
    return _advance(session, tuple(progress))


# =============================================================================
# Retry / restart
# =============================================================================


@handles(RetryStory)
def _retry_story(session: Session, event: RetryStory) -> Session:
    if not session.progress or session.story is None:
        return session

    if session.phase is SessionPhase.FINISHED:
        report = compute_score(session.progress, session.total_questions)
        if report is not None and not report.can_retry:
            return session

    return _restart_quiz(session, SessionPhase.QUESTIONING)


@handles(Restart)
def _restart(session: Session, event: Restart) -> Session:
    return Session()
