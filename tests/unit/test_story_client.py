"""
Unit tests for the story worker API client.
"""

import httpx
import pytest
import pytest_asyncio
from httpx import Request, Response

from story_trainer.integrations.story_client import (
    ContentParseError,
    ContentRequestError,
    ContentSourceError,
    ContentStatusError,
    StoryClient,
    StoryRequest,
    parse_story,
)

WORKER_URL = "http://localhost:8787/api/story"


@pytest.fixture
def sample_request():
    """Sample story request for testing."""
    return StoryRequest(topic="Volcanoes", paragraph_count=2)


@pytest_asyncio.fixture
async def client():
    """Story client instance with no backoff delay."""
    client = StoryClient(
        api_url=WORKER_URL,
        timeout_ms=5000,
        retry_attempts=3,
        backoff_seconds=0,
    )
    yield client
    await client.close()


class TestStoryRequest:
    """Tests for StoryRequest dataclass."""

    def test_to_dict(self, sample_request):
        """Payload uses the worker's field names."""
        assert sample_request.to_dict() == {
            "topic": "Volcanoes",
            "gradeLevel": 5,
            "numParagraphs": 2,
            "numQuestions": 4,
        }


class TestParseStory:

    def test_valid_payload(self, sample_story_payload):
        story = parse_story(sample_story_payload)

        assert story.title == "Volcano Day"
        assert len(story.questions) == 2

    def test_invalid_payload(self):
        with pytest.raises(ContentParseError) as exc_info:
            parse_story({"title": "No paragraphs"})

        assert str(exc_info.value).startswith("AI response parse error; using fallback.")

    def test_missing_questions(self, sample_story_payload):
        del sample_story_payload["questions"]

        with pytest.raises(ContentParseError):
            parse_story(sample_story_payload)

    def test_empty_questions(self, sample_story_payload):
        sample_story_payload["questions"] = []

        with pytest.raises(ContentParseError):
            parse_story(sample_story_payload)


class TestErrorMessages:
    """Each failure renders as the diagnostic shown to the learner."""

    def test_request_error_message(self):
        assert str(ContentRequestError("refused")) == "Could not reach AI Worker; using fallback. (refused)"

    def test_status_error_message(self):
        error = ContentStatusError(404)

        assert str(error) == "AI story request failed with status 404; using fallback."
        assert error.status_code == 404

    def test_all_errors_share_base(self):
        for error in (ContentRequestError("x"), ContentStatusError(500), ContentParseError("y")):
            assert isinstance(error, ContentSourceError)


class TestStoryClient:
    """Tests for StoryClient.fetch_story()."""

    @pytest.mark.asyncio
    async def test_fetch_story_success(self, client, sample_request, sample_story_payload, monkeypatch):
        """Test successful story generation."""
        seen = {}

        async def mock_post(url, **kwargs):
            seen["url"] = url
            seen["json"] = kwargs.get("json")
            return Response(200, json=sample_story_payload, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        story = await client.fetch_story(sample_request)

        assert story.title == "Volcano Day"
        assert seen["url"] == WORKER_URL
        assert seen["json"]["numParagraphs"] == 2

    @pytest.mark.asyncio
    async def test_timeout_retry(self, client, sample_request, sample_story_payload, monkeypatch):
        """Test retry logic on timeout."""
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise httpx.TimeoutException("Timeout")
            return Response(200, json=sample_story_payload, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        story = await client.fetch_story(sample_request)

        assert call_count == 2
        assert story.title == "Volcano Day"

    @pytest.mark.asyncio
    async def test_server_error_retry(self, client, sample_request, sample_story_payload, monkeypatch):
        """Test retry logic on 5xx server errors."""
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                return Response(500, json={"error": "Internal server error"}, request=Request("POST", url))
            return Response(200, json=sample_story_payload, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        story = await client.fetch_story(sample_request)

        assert call_count == 2
        assert story.title == "Volcano Day"

    @pytest.mark.asyncio
    async def test_client_error_no_retry(self, client, sample_request, monkeypatch):
        """Test that 4xx errors don't trigger retries."""
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            return Response(400, json={"error": "Bad request"}, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        with pytest.raises(ContentStatusError) as exc_info:
            await client.fetch_story(sample_request)

        assert call_count == 1
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, client, sample_request, monkeypatch):
        """Test failure after all attempts hit network errors."""
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            raise httpx.ConnectError("Connection refused", request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        with pytest.raises(ContentRequestError) as exc_info:
            await client.fetch_story(sample_request)

        assert call_count == 3
        assert "Connection refused" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_persistent_server_error(self, client, sample_request, monkeypatch):
        async def mock_post(url, **kwargs):
            return Response(502, text="Bad gateway", request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        with pytest.raises(ContentStatusError) as exc_info:
            await client.fetch_story(sample_request)

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, client, sample_request, monkeypatch):
        call_count = 0

        async def mock_post(url, **kwargs):
            nonlocal call_count
            call_count += 1
            return Response(200, text="<html>not json</html>", request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        with pytest.raises(ContentParseError):
            await client.fetch_story(sample_request)

        assert call_count == 1

    @pytest.mark.asyncio
    async def test_wrong_shape_body(self, client, sample_request, monkeypatch):
        async def mock_post(url, **kwargs):
            return Response(200, json={"story": "just text"}, request=Request("POST", url))

        monkeypatch.setattr(client.client, "post", mock_post)

        with pytest.raises(ContentParseError):
            await client.fetch_story(sample_request)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("api_url", ["http://a:bad/x", "http://[::1", "http://exa\x00mple.com"])
    async def test_invalid_worker_url(self, sample_request, api_url):
        """A malformed URL is reported as a request error, without retries."""
        client = StoryClient(api_url=api_url, retry_attempts=3, backoff_seconds=0)
        try:
            with pytest.raises(ContentRequestError) as exc_info:
                await client.fetch_story(sample_request)
        finally:
            await client.close()

        assert "invalid URL" in str(exc_info.value)
