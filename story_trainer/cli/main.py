"""
Typer CLI for story-trainer.

Commands:
    story-trainer play                  - Interactive story + quiz session
    story-trainer play --offline        - Use only the fallback story pool
    story-trainer play -t "Volcanoes" -p 2
    story-trainer pool                  - List the fallback stories

Usage:
    story-trainer --help
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Optional

# Fix Windows encoding issues for Unicode characters (box drawing)
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from config import Settings, get_settings
from story_trainer.content.fallback import FALLBACK_STORIES
from story_trainer.delivery import visuals as ui
from story_trainer.integrations.story_client import StoryClient
from story_trainer.logging_setup import configure_logging
from story_trainer.session.controller import SessionController
from story_trainer.session.state import (
    AcknowledgeRead,
    Restart,
    RetryStory,
    ReviewStory,
    SelectChoice,
    SessionPhase,
    SetParagraphCount,
    SetTopic,
    SkipQuestion,
    SubmitAnswer,
)

app = typer.Typer(
    help="story-trainer: read a short story, then answer comprehension questions",
    no_args_is_help=True,
)

console = Console()

QUIT = "q"


def build_controller(settings: Settings, offline: bool = False) -> SessionController:
    """Create a controller, with a story client unless offline or unconfigured."""
    client = None
    if not offline and settings.has_ai_configured():
        client = StoryClient(**settings.get_story_client_config())
    else:
        logger.info("Running offline: stories come from the fallback pool")
    return SessionController(
        story_client=client,
        grade_level=settings.story_grade_level,
        question_count=settings.story_question_count,
    )


def _ask(prompt: str) -> str:
    return Prompt.ask(prompt, default="", show_default=False, console=console).strip()


def _show_error(controller: SessionController) -> None:
    if controller.session.last_error:
        console.print(ui.render_error(controller.session.last_error))


async def _select_topic(
    controller: SessionController,
    topic: Optional[str],
    paragraphs: Optional[int],
    default_paragraphs: int,
) -> bool:
    """Collect topic and paragraph count, then generate. Returns False to quit."""
    _show_error(controller)
    if topic is None:
        topic = _ask(f"Story topic ('{QUIT}' to quit)")
        if topic.lower() == QUIT:
            return False
    if paragraphs is None:
        paragraphs = IntPrompt.ask(
            "Paragraphs (1-6)", default=default_paragraphs, console=console
        )

    controller.dispatch(SetTopic(topic))
    controller.dispatch(SetParagraphCount(paragraphs))
    with console.status("Generating story..."):
        await controller.generate_story()
    return True


def _question_turn(controller: SessionController) -> bool:
    """Handle one input on the question screen. Returns False to quit."""
    panel = ui.render_question_panel(controller.session)
    if panel is not None:
        console.print(panel)
    _show_error(controller)

    answer = _ask("Choice number, Enter to check again, 's' skip, 'r' re-read, 'q' quit").lower()
    if answer == QUIT:
        return False
    if answer == "s":
        controller.dispatch(SkipQuestion())
    elif answer == "r":
        controller.dispatch(ReviewStory())
    elif answer.isdigit():
        before = controller.session
        controller.dispatch(SelectChoice(int(answer) - 1))
        if controller.session is before:
            console.print(ui.render_error("That is not one of the choices."))
        else:
            controller.dispatch(SubmitAnswer())
    elif answer:
        console.print(ui.render_error("Please enter a choice number, 's', 'r' or 'q'."))
    else:
        controller.dispatch(SubmitAnswer())
    return True


def _results_turn(controller: SessionController) -> bool:
    """Show results and handle retry / new story. Returns False to quit."""
    report = controller.score
    console.print(ui.render_results_panel(controller.session, report))
    console.print(ui.render_footer(controller.session))

    options = ["'n' new story", "'b' back to story", "'q' quit"]
    if report is not None and report.can_retry:
        options.insert(0, "'r' retry this story")
    answer = _ask(", ".join(options)).lower()

    if answer == QUIT:
        return False
    if answer == "r":
        controller.dispatch(RetryStory())
    elif answer == "b":
        controller.dispatch(ReviewStory())
    elif answer == "n":
        controller.dispatch(Restart())
    return True


async def run_session(
    controller: SessionController,
    topic: Optional[str] = None,
    paragraphs: Optional[int] = None,
    default_paragraphs: int = 3,
) -> None:
    """Drive the controller from terminal input until the learner quits."""
    console.print(ui.render_header())
    try:
        while True:
            phase = controller.session.phase

            if phase is SessionPhase.SELECT_TOPIC:
                if not await _select_topic(controller, topic, paragraphs, default_paragraphs):
                    break
                # Command-line values only seed the first story
                topic = paragraphs = None

            elif phase is SessionPhase.READ_STORY:
                console.print(ui.render_story_panel(controller.session.story))
                _show_error(controller)
                console.print(ui.render_footer(controller.session))
                if _ask("Press Enter when you have read the story · 'q' quit").lower() == QUIT:
                    break
                controller.dispatch(AcknowledgeRead())

            elif phase is SessionPhase.QUESTIONING:
                if not _question_turn(controller):
                    break

            elif phase is SessionPhase.FINISHED:
                if not _results_turn(controller):
                    break

            else:
                # LOADING_STORY only exists while generate_story() is awaited
                logger.error(f"Unexpected phase in terminal loop: {phase}")
                break
    finally:
        await controller.close()


@app.command()
def play(
    topic: Optional[str] = typer.Option(None, "--topic", "-t", help="Story topic"),
    paragraphs: Optional[int] = typer.Option(
        None, "--paragraphs", "-p", min=1, max=6, help="Number of paragraphs (1-6)"
    ),
    offline: bool = typer.Option(False, "--offline", help="Skip the AI worker, use fallback stories"),
) -> None:
    """Start an interactive reading session."""
    settings = get_settings()
    controller = build_controller(settings, offline=offline)
    asyncio.run(
        run_session(
            controller,
            topic=topic,
            paragraphs=paragraphs,
            default_paragraphs=settings.default_paragraph_count,
        )
    )
    console.print("Bye!")


@app.command()
def pool() -> None:
    """List the fallback stories used when AI generation is unavailable."""
    console.print(ui.render_pool_table(FALLBACK_STORIES))


@app.callback()
def _configure() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
