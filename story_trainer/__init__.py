"""
Story Trainer: reading comprehension practice in the terminal.

A learner reads a short story (from the AI story worker or the fallback
pool), answers multiple-choice questions one at a time, and gets a score
and letter grade.

Components:
- content: Story / Question / QuestionProgress models and the fallback pool
- session: session state machine, scoring and the controller
- integrations: story worker HTTP client
- delivery: rich renderables
- cli: typer commands
"""

__version__ = "0.7.2"
