"""
Story Trainer Visual Components.

Rich renderables for each session phase. Functions here only read a Session
(or a ScoreReport) and build panels/tables; they never change state.
"""

from __future__ import annotations

from rich import box
from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from story_trainer.content.models import Story
from story_trainer.session.scoring import (
    ScoreReport,
    completed_count,
    display_attempts,
    entry_status,
)
from story_trainer.session.state import ContentProvenance, Session

# =============================================================================
# COLOR THEME
# =============================================================================

THEME = {
    "primary": "#4FC3F7",  # Sky blue - titles
    "secondary": "#9575CD",  # Lavender - secondary accent
    "success": "#66BB6A",  # Green - correct answers
    "warning": "#FFCA28",  # Amber - skips, retries
    "error": "#EF5350",  # Red - errors
    "dim": "#78909C",  # Blue-grey - secondary text
    "white": "#ECEFF1",  # Primary text
}

STYLES = {
    "primary": Style(color=THEME["primary"], bold=True),
    "secondary": Style(color=THEME["secondary"]),
    "success": Style(color=THEME["success"], bold=True),
    "warning": Style(color=THEME["warning"], bold=True),
    "error": Style(color=THEME["error"], bold=True),
    "dim": Style(color=THEME["dim"]),
}

GRADE_COLORS = {
    "A": THEME["success"],
    "B": THEME["primary"],
    "C": THEME["warning"],
}


def render_header() -> Panel:
    intro = Text(
        "Pick a topic, let the app (or the AI worker) write a story, then practice "
        "comprehension with multiple-choice questions.",
        style=STYLES["dim"],
    )
    return Panel(
        intro,
        title=Text("Story Trainer", style=STYLES["primary"]),
        border_style=Style(color=THEME["primary"]),
        box=box.ROUNDED,
        padding=(0, 2),
    )


def render_error(message: str) -> Text:
    return Text(f"! {message}", style=STYLES["error"])


def render_story_panel(story: Story) -> Panel:
    """
    Create the reading panel for a story.

    Args:
        story: The story to show

    Returns:
        Rich Panel with the title and one block per paragraph
    """
    body = Text()
    for i, paragraph in enumerate(story.paragraphs):
        if i:
            body.append("\n\n")
        body.append(paragraph, style=Style(color=THEME["white"]))

    return Panel(
        body,
        title=Text(story.title, style=STYLES["primary"]),
        title_align="left",
        border_style=Style(color=THEME["primary"]),
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_question_panel(session: Session) -> Panel | None:
    """
    Create the panel for the current question, with numbered choices.

    Returns:
        Rich Panel, or None when the session has no current question
    """
    question = session.current_question
    entry = session.current_progress
    if question is None or entry is None:
        return None

    total = session.total_questions
    header = Text()
    header.append(f"Question {session.current_index + 1} of {total}", style=STYLES["primary"])
    header.append(f" · Completed: {completed_count(session.progress)}/{total}", style=STYLES["dim"])
    header.append(f" · Attempts: {display_attempts(entry)}", style=STYLES["dim"])

    table = Table(box=box.MINIMAL, show_header=False)
    table.add_column("Index", style=Style(color=THEME["secondary"]), justify="right", width=4)
    table.add_column("Choice", style=Style(color=THEME["white"]))
    for i, choice in enumerate(question.choices):
        marker = "●" if session.selected_choice == i else " "
        table.add_row(Text(f"{marker}[{i + 1}]"), Text(choice))

    status = Text()
    if entry.is_correct:
        status.append("Correct!", style=STYLES["success"])
    elif entry.skipped:
        status.append("This question was skipped (0 points).", style=STYLES["warning"])
    elif entry.attempts:
        status.append("Not quite. Try again or skip.", style=STYLES["warning"])

    return Panel(
        Group(Text(question.text, style=Style(color=THEME["white"], bold=True)), table, status),
        title=header,
        title_align="left",
        border_style=Style(color=THEME["secondary"]),
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_results_panel(session: Session, report: ScoreReport | None) -> Panel:
    """
    Create the results panel: grade badge plus per-question status.

    Args:
        session: A finished session
        report: Score report (None when there is nothing to score)
    """
    if report is None:
        badge = Text("No score · Try generating a story first.", style=STYLES["dim"])
        color = THEME["dim"]
    else:
        color = GRADE_COLORS.get(report.grade, THEME["error"])
        badge = Text()
        badge.append(f"Grade: {report.grade} ({report.score}%)", style=Style(color=color, bold=True))
        badge.append(f" · {report.label}", style=STYLES["dim"])

    table = Table(box=box.SIMPLE, show_header=True, header_style=STYLES["dim"])
    table.add_column("Q", justify="right")
    table.add_column("Status")
    table.add_column("Attempts", justify="right")
    for i, entry in enumerate(session.progress):
        table.add_row(f"Q{i + 1}", entry_status(entry), str(display_attempts(entry)))

    return Panel(
        Group(Align.left(badge), table),
        title=Text("Results", style=Style(color=color, bold=True)),
        title_align="left",
        border_style=Style(color=color),
        box=box.HEAVY,
        padding=(1, 2),
    )


def render_footer(session: Session) -> Text:
    source = "AI story" if session.content_source is ContentProvenance.REMOTE else "Fallback story"
    return Text(f"Story Trainer · MC-only · {source}", style=STYLES["dim"])


def render_pool_table(stories: tuple[Story, ...] | list[Story]) -> Table:
    """List stories with their paragraph and question counts."""
    table = Table(title="Fallback stories", box=box.ROUNDED, header_style=STYLES["primary"])
    table.add_column("#", justify="right", style=STYLES["dim"])
    table.add_column("Title")
    table.add_column("Paragraphs", justify="right")
    table.add_column("Questions", justify="right")
    for i, story in enumerate(stories, start=1):
        table.add_row(str(i), story.title, str(len(story.paragraphs)), str(len(story.questions)))
    return table
