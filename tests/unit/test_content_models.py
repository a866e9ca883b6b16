"""
Unit tests for the story content model.

Covers the worker wire format (flattened question kind), immutability and
QuestionProgress helpers.
"""

import pytest
from pydantic import ValidationError

from story_trainer.content.models import (
    MultipleChoice,
    Question,
    QuestionProgress,
    Story,
    fresh_progress,
)


class TestQuestionWireFormat:
    """Tests for parsing and serialising questions."""

    def test_parses_flattened_kind(self, sample_story_payload):
        story = Story.model_validate(sample_story_payload)

        question = story.questions[0]
        assert isinstance(question.kind, MultipleChoice)
        assert question.choices == ("A beach", "A museum", "A farm")
        assert question.kind.correct_index == 1
        assert question.paragraph_index == 0

    def test_parses_nested_kind(self):
        question = Question.model_validate(
            {
                "text": "Nested?",
                "paragraph_index": 0,
                "kind": {"kind": "multiple_choice", "choices": ["a", "b"], "correct_index": 0},
            }
        )

        assert question.choices == ("a", "b")

    def test_dump_is_flattened(self, sample_story_payload):
        story = Story.model_validate(sample_story_payload)

        dumped = story.model_dump(mode="json")

        assert dumped["questions"][0]["kind"] == "multiple_choice"
        assert dumped["questions"][0]["choices"] == ["A beach", "A museum", "A farm"]
        assert dumped["questions"][0]["correct_index"] == 1

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            Question.model_validate(
                {"text": "Q", "paragraph_index": 0, "kind": "free_text", "answer": "x"}
            )

    def test_missing_choices_rejected(self):
        with pytest.raises(ValidationError):
            Question.model_validate(
                {"text": "Q", "paragraph_index": 0, "kind": "multiple_choice", "correct_index": 0}
            )

    def test_story_requires_title(self, sample_story_payload):
        del sample_story_payload["title"]

        with pytest.raises(ValidationError):
            Story.model_validate(sample_story_payload)

    def test_story_requires_questions(self, sample_story_payload):
        del sample_story_payload["questions"]

        with pytest.raises(ValidationError):
            Story.model_validate(sample_story_payload)

    def test_story_rejects_empty_questions(self, sample_story_payload):
        sample_story_payload["questions"] = []

        with pytest.raises(ValidationError):
            Story.model_validate(sample_story_payload)

    def test_question_requires_paragraph_index(self):
        with pytest.raises(ValidationError):
            Question.model_validate(
                {"text": "Q", "kind": "multiple_choice", "choices": ["a", "b"], "correct_index": 0}
            )


class TestAnswerChecking:
    """Tests for checking a selected choice."""

    def test_correct_choice(self, sample_story):
        assert sample_story.questions[0].is_answer_correct(1) is True

    def test_wrong_choice(self, sample_story):
        assert sample_story.questions[0].is_answer_correct(2) is False

    def test_no_choice(self, sample_story):
        assert sample_story.questions[0].is_answer_correct(None) is False


class TestStory:
    """Tests for Story immutability and truncation."""

    def test_story_is_frozen(self, sample_story):
        with pytest.raises(ValidationError):
            sample_story.title = "Changed"

    def test_truncated_keeps_leading_paragraphs_and_all_questions(self, story_factory):
        story = story_factory(question_count=3, paragraph_count=3)

        short = story.truncated(1)

        assert short.paragraphs == ("Paragraph 1.",)
        assert short.questions == story.questions
        # Advisory paragraph_index is left pointing past the end
        assert short.questions[2].paragraph_index == 2
        assert len(story.paragraphs) == 3

    def test_truncated_longer_than_story_is_unchanged(self, story_factory):
        story = story_factory(paragraph_count=2)

        assert story.truncated(6) == story


class TestQuestionProgress:
    """Tests for the per-question progress record."""

    def test_defaults(self):
        entry = QuestionProgress()

        assert entry.attempts == 0
        assert entry.is_correct is False
        assert entry.skipped is False
        assert entry.is_terminal is False

    def test_record_attempt(self):
        entry = QuestionProgress().record_attempt(False).record_attempt(True)

        assert entry.attempts == 2
        assert entry.is_correct is True
        assert entry.is_terminal is True

    def test_mark_skipped(self):
        entry = QuestionProgress(attempts=1).mark_skipped()

        assert entry.skipped is True
        assert entry.is_correct is False
        assert entry.attempts == 1
        assert entry.is_terminal is True

    def test_fresh_progress_matches_question_count(self, sample_story):
        progress = fresh_progress(sample_story)

        assert len(progress) == 4
        assert all(entry == QuestionProgress() for entry in progress)

    def test_fresh_progress_without_story(self):
        assert fresh_progress(None) == ()
