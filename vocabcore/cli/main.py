"""
CLI entry point for vocabcore.
"""

# Standard library imports
import logging
from pathlib import Path
from typing import Optional

# Third-party imports
import typer
from rich.console import Console
from rich.table import Table

# Local application imports
from vocabcore.cli._review_logic import review_logic
from vocabcore.config import get_settings
from vocabcore.exceptions import DeckFileError, EmptyDeckError, InvalidInputError
from vocabcore.progress import lesson_score, stars_for_score, xp_for_score
from vocabcore.scheduler import SM2Scheduler


console = Console()

app = typer.Typer(
    name="vocabcore",
    help="vocabcore: SM-2 review scheduling and flashcard sessions.",
    add_completion=False,
    rich_markup_mode="markdown",
)


@app.callback()
def _configure_logging() -> None:
    """Configure the root logger from VOCABCORE_LOG_LEVEL."""
    level = get_settings().log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Next review
# ---------------------------------------------------------------------------


@app.command("next-review")
def next_review(
    quality: int = typer.Argument(  # noqa: B008
        ..., help="Recall quality, 0 (blackout) to 5 (perfect)."
    ),
    interval: int = typer.Option(
        0, "--interval", help="Current interval in days (0 for a new item)."
    ),
    ease: Optional[float] = typer.Option(
        None,
        "--ease",
        help="Current ease factor. Defaults to VOCABCORE_DEFAULT_EASE_FACTOR.",
    ),
):
    """
    Compute the next SM-2 interval and ease factor for one item.
    """
    settings = get_settings()
    scheduler = SM2Scheduler(settings.scheduler_config())
    previous_ease = ease if ease is not None else settings.default_ease_factor

    try:
        result = scheduler.compute_next_review(quality, interval, previous_ease)
    except InvalidInputError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Next review")
    table.add_column("", style="bold")
    table.add_column("Before", justify="right")
    table.add_column("After", justify="right")
    table.add_row("Interval (days)", str(interval), str(result.interval))
    table.add_row(
        "Ease factor", f"{previous_ease:.2f}", f"{result.ease_factor:.2f}"
    )
    console.print(table)


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------


@app.command()
def review(
    deck_file: Path = typer.Argument(  # noqa: B008
        ..., help="YAML vocabulary deck to review."
    ),
    user: str = typer.Option(
        "local", "--user", help="Learner identifier for this session."
    ),
):
    """Starts an interactive flashcard session over a deck file."""
    try:
        review_logic(deck_file=deck_file, user_id=user, settings=get_settings())
    except DeckFileError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e
    except EmptyDeckError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e
    except Exception as e:
        console.print(f"[bold]An unexpected error occurred:[/bold] {e}")
        raise typer.Exit(code=1) from e


# ---------------------------------------------------------------------------
# Lesson score
# ---------------------------------------------------------------------------


@app.command("lesson-score")
def lesson_score_command(
    correct: int = typer.Argument(..., help="Correct answers."),  # noqa: B008
    total: int = typer.Argument(..., help="Questions in the lesson."),  # noqa: B008
):
    """Show the score, stars and XP a lesson result is worth."""
    try:
        score = lesson_score(correct, total)
    except InvalidInputError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    stars = stars_for_score(score)
    console.print(f"Score: [bold]{score}%[/bold]")
    console.print(f"Stars: [bold yellow]{'*' * stars}[/bold yellow] ({stars})")
    console.print(f"XP earned: [bold green]+{xp_for_score(score)}[/bold green]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    """
    Run the CLI application.

    If an unexpected exception occurs, print a bold red error message to the console and exit the process with status code 1.
    """
    try:
        app()
    except Exception as e:
        console.print(f"[bold red]UNEXPECTED ERROR: {e}[/bold red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
