"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from story_trainer.content.models import MultipleChoice, Question, Story


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def make_story(question_count: int = 4, paragraph_count: int = 3, correct_index: int = 1) -> Story:
    """Build a story whose every question has the same correct index."""
    return Story(
        title="The Test Story",
        paragraphs=tuple(f"Paragraph {i + 1}." for i in range(paragraph_count)),
        questions=tuple(
            Question(
                text=f"Question {i + 1}?",
                paragraph_index=min(i, paragraph_count - 1),
                kind=MultipleChoice(choices=("zero", "one", "two", "three"), correct_index=correct_index),
            )
            for i in range(question_count)
        ),
    )


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def sample_story():
    """A four-question story; the correct choice is always index 1."""
    return make_story(question_count=4)


@pytest.fixture
def sample_story_payload():
    """A story as the worker returns it (flattened question kind)."""
    return {
        "title": "Volcano Day",
        "paragraphs": [
            "Lena's class visited a museum about volcanoes.",
            "A guide showed them how lava cools into rock.",
        ],
        "questions": [
            {
                "text": "Where did Lena's class go?",
                "paragraph_index": 0,
                "kind": "multiple_choice",
                "choices": ["A beach", "A museum", "A farm"],
                "correct_index": 1,
            },
            {
                "text": "What does lava turn into when it cools?",
                "paragraph_index": 1,
                "kind": "multiple_choice",
                "choices": ["Rock", "Water", "Sand"],
                "correct_index": 0,
            },
        ],
    }


@pytest.fixture
def story_factory():
    """Factory for stories with a chosen number of questions/paragraphs."""
    return make_story
