"""
Session controller: the single writer for one learner's session.

Owns the current Session, applies events through the pure transitions, and
runs the one asynchronous step (story generation). Every generation request
gets a token from a counter that survives Restart, so a result that arrives
after the learner restarted or started another request is discarded.
"""

from __future__ import annotations

import itertools
import random
from typing import Optional

from loguru import logger

from story_trainer.content.fallback import pick_fallback_story
from story_trainer.content.models import Story
from story_trainer.integrations.story_client import (
    ContentRequestError,
    ContentSourceError,
    StoryClient,
    StoryRequest,
)

from .scoring import ScoreReport, compute_score
from .state import (
    ContentProvenance,
    ContentResolved,
    GenerateStory,
    Session,
    SessionPhase,
)
from .transitions import transition

OFFLINE_MESSAGE = "AI generation is not configured; using fallback."


class SessionController:
    """
    Mediates all session transitions.

    Events are applied one at a time and each produces a complete new
    Session, so observers never see a half-applied update.
    """

    def __init__(
        self,
        story_client: Optional[StoryClient] = None,
        grade_level: int = 5,
        question_count: int = 4,
        rng: Optional[random.Random] = None,
    ):
        self.story_client = story_client
        self.grade_level = grade_level
        self.question_count = question_count
        self.rng = rng or random.Random()
        self.session = Session()
        self._tokens = itertools.count(1)

    # =========================================================================
    # Synchronous events
    # =========================================================================

    def dispatch(self, event: object) -> Session:
        """Apply an event and return the resulting session."""
        self.session = transition(self.session, event)
        return self.session

    @property
    def score(self) -> ScoreReport | None:
        """Score report, only available once the quiz is finished."""
        if self.session.phase is not SessionPhase.FINISHED:
            return None
        return compute_score(self.session.progress, self.session.total_questions)

    # =========================================================================
    # Story generation
    # =========================================================================

    def begin_generation(self) -> int | None:
        """
        Move the session into LOADING_STORY.

        Returns:
            The request token, or None if the request was rejected
            (empty topic, or a request is already outstanding)
        """
        token = next(self._tokens)
        self.dispatch(GenerateStory(token=token))
        if not self.session.is_loading or self.session.pending_token != token:
            return None
        return token

    def resolve(
        self,
        token: int,
        story: Story,
        provenance: ContentProvenance,
        diagnostic: str | None = None,
    ) -> Session:
        """Install a generation result if it is still the one being waited for."""
        return self.dispatch(
            ContentResolved(token=token, story=story, provenance=provenance, diagnostic=diagnostic)
        )

    async def fetch_content(
        self, topic: str, paragraph_count: int
    ) -> tuple[Story, ContentProvenance, str | None]:
        """
        Ask the story worker for a story, falling back to the canned pool.

        Returns:
            (story, provenance, diagnostic); diagnostic is None on remote success
        """
        if self.story_client is None:
            logger.info("No story worker configured, using fallback pool")
            return pick_fallback_story(paragraph_count, rng=self.rng), ContentProvenance.FALLBACK, OFFLINE_MESSAGE

        request = StoryRequest(
            topic=topic,
            paragraph_count=paragraph_count,
            target_audience_level=self.grade_level,
            question_count=self.question_count,
        )
        try:
            story = await self.story_client.fetch_story(request)
        except ContentSourceError as e:
            logger.warning(f"Story generation failed, using fallback: {e}")
            return pick_fallback_story(paragraph_count, rng=self.rng), ContentProvenance.FALLBACK, str(e)
        except Exception as e:
            logger.error(f"Unexpected story worker failure, using fallback: {e!r}")
            diagnostic = str(ContentRequestError(str(e) or type(e).__name__))
            return pick_fallback_story(paragraph_count, rng=self.rng), ContentProvenance.FALLBACK, diagnostic

        logger.info(f"Generated story {story.title!r} for topic {topic!r}")
        return story, ContentProvenance.REMOTE, None

    async def generate_story(self) -> Session:
        """
        Run a full GenerateStory cycle: start loading, fetch, install.

        The session may be restarted while the fetch is pending; the result
        is then dropped by the token check.
        """
        token = self.begin_generation()
        if token is None:
            return self.session

        topic = self.session.topic
        paragraph_count = self.session.requested_paragraph_count
        logger.debug(f"Generating story #{token}: topic={topic!r}, paragraphs={paragraph_count}")

        story, provenance, diagnostic = await self.fetch_content(topic, paragraph_count)
        return self.resolve(token, story, provenance, diagnostic)

    async def close(self) -> None:
        if self.story_client is not None:
            await self.story_client.close()
