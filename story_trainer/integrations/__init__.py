"""
External integrations for story trainer.

Modules:
- story_client: HTTP client for the remote story worker
"""
from .story_client import (
    ContentParseError,
    ContentRequestError,
    ContentSourceError,
    ContentStatusError,
    StoryClient,
    StoryRequest,
)

__all__ = [
    "ContentParseError",
    "ContentRequestError",
    "ContentSourceError",
    "ContentStatusError",
    "StoryClient",
    "StoryRequest",
]
