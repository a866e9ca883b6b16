"""
Story worker API client.

Handles HTTP communication with the remote story generator. Any failure is
raised as a ContentSourceError whose message is the diagnostic shown to the
learner; the session controller falls back to a canned story.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from story_trainer.content.models import Story


class ContentSourceError(Exception):
    """Raised when the story worker cannot provide a story."""
    pass


class ContentRequestError(ContentSourceError):
    """Network failure or timeout talking to the worker."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Could not reach AI Worker; using fallback. ({detail})")


class ContentStatusError(ContentSourceError):
    """Worker answered with a non-success status."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"AI story request failed with status {status_code}; using fallback.")


class ContentParseError(ContentSourceError):
    """Worker answered 200 but the body is not a story."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"AI response parse error; using fallback. ({detail})")


@dataclass
class StoryRequest:
    """Request payload for story generation."""

    topic: str
    paragraph_count: int
    target_audience_level: int = 5
    question_count: int = 4

    def to_dict(self) -> dict[str, Any]:
        """Convert request to the worker's payload format."""
        return {
            "topic": self.topic,
            "gradeLevel": self.target_audience_level,
            "numParagraphs": self.paragraph_count,
            "numQuestions": self.question_count,
        }


def parse_story(data: Any) -> Story:
    """Validate a decoded worker response into a Story."""
    try:
        return Story.model_validate(data)
    except ValidationError as e:
        raise ContentParseError(f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}") from e


class StoryClient:
    """HTTP client for the story worker."""

    def __init__(
        self,
        api_url: str,
        timeout_ms: int = 15000,
        retry_attempts: int = 2,
        backoff_seconds: float = 1.0,
    ):
        """
        Initialize story client.

        Args:
            api_url: Full URL of the story endpoint
            timeout_ms: Request timeout in milliseconds
            retry_attempts: Number of attempts on retryable failures
            backoff_seconds: Base delay for exponential backoff
        """
        self.api_url = api_url
        self.timeout_seconds = timeout_ms / 1000.0
        self.retry_attempts = max(1, retry_attempts)
        self.backoff_seconds = backoff_seconds
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def _wait(self, attempt: int) -> None:
        if attempt < self.retry_attempts - 1:
            await asyncio.sleep(self.backoff_seconds * (2 ** attempt))

    async def fetch_story(self, request: StoryRequest) -> Story:
        """
        Generate a story, retrying timeouts, network errors and 5xx.

        Args:
            request: Story generation request

        Returns:
            The generated story

        Raises:
            ContentSourceError: When no story could be obtained
        """
        last_error: ContentSourceError | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = await self.client.post(self.api_url, json=request.to_dict())
            except httpx.TimeoutException as e:
                last_error = ContentRequestError(f"timeout: {e}")
                logger.warning(
                    f"Story worker timeout on attempt {attempt + 1}/{self.retry_attempts}"
                )
                await self._wait(attempt)
                continue
            except httpx.RequestError as e:
                last_error = ContentRequestError(str(e) or type(e).__name__)
                logger.warning(
                    f"Story worker request error on attempt {attempt + 1}/{self.retry_attempts}: {e}"
                )
                await self._wait(attempt)
                continue
            except httpx.InvalidURL as e:
                # Misconfigured worker URL; retrying cannot help
                logger.error(f"Invalid story worker URL {self.api_url!r}: {e}")
                raise ContentRequestError(f"invalid URL: {e}") from e

            if response.status_code >= 500:
                last_error = ContentStatusError(response.status_code)
                logger.warning(
                    f"Story worker server error {response.status_code} on attempt "
                    f"{attempt + 1}/{self.retry_attempts}"
                )
                await self._wait(attempt)
                continue

            if response.status_code != 200:
                # Don't retry on 4xx / unexpected statuses
                logger.error(f"Story worker client error: {response.status_code}")
                raise ContentStatusError(response.status_code)

            try:
                data = response.json()
            except ValueError as e:
                raise ContentParseError(f"invalid JSON: {e}") from e
            return parse_story(data)

        logger.error(f"Story generation failed after {self.retry_attempts} attempts: {last_error}")
        raise last_error or ContentRequestError("no attempts made")
