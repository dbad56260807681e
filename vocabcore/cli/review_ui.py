"""
Command-line interface for reviewing flashcards.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from vocabcore.models import DispositionCounts, SessionItem, VocabularyWord
from vocabcore.session_queue import SessionQueueEngine

logger = logging.getLogger(__name__)
console = Console()

_CHOICES = {
    "k": "know",
    "l": "still_learning",
}


def _get_judgment() -> Optional[str]:
    """
    Prompt for a judgment until a valid key is entered.

    Returns:
        "know", "still_learning", or None if the user chose to quit.
    """
    while True:
        choice = (
            console.input("[bold](k) Know  (l) Still learning  (q) Quit: [/bold]")
            .strip()
            .lower()
        )
        if choice == "q":
            return None
        if choice in _CHOICES:
            return _CHOICES[choice]
        console.print("[bold red]Invalid choice. Enter k, l or q.[/bold red]")


def _display_item(item: SessionItem) -> None:
    """Show the word, wait for Enter, then reveal the definition."""
    word = item.payload
    if isinstance(word, VocabularyWord):
        front = f"[bold]{word.word}[/bold]\n[italic]{word.part_of_speech}[/italic]"
        back = word.definition
        if word.example_sentence:
            back += f'\n\n[italic]"{word.example_sentence}"[/italic]'
    else:
        front = str(item.content_id or item.id)
        back = str(word)
    console.print(Panel(front, title="Word", border_style="green"))
    console.input("[italic]Press Enter to see the definition...[/italic]")
    console.print(Panel(back, title="Definition", border_style="blue"))


def _format_counts(counts: DispositionCounts) -> str:
    return (
        f"[yellow]Still learning: {counts.still_learning}[/yellow]  "
        f"[green]Know: {counts.know}[/green]  "
        f"[dim]Pending: {counts.pending}[/dim]"
    )


def start_review_flow(engine: SessionQueueEngine) -> None:
    """
    Drive an already-initialized engine until it finishes or the user quits.

    Args:
        engine: A SessionQueueEngine with a deck loaded.
    """
    console.print("[bold cyan]Starting review session...[/bold cyan]")

    if engine.is_finished():
        console.print("[bold yellow]Every word in this deck is already known.[/bold yellow]")
        return

    while (item := engine.current_item()) is not None:
        position, queue_length = engine.queue_position()
        console.rule(
            f"[bold]Round {engine.round_number()}: "
            f"{position} / {queue_length}[/bold]"
        )
        console.print(_format_counts(engine.counts()))

        _display_item(item)
        outcome = _get_judgment()
        if outcome is None:
            logger.info(f"Review paused at {item.id} in round {engine.round_number()}")
            console.print("[bold cyan]Session paused.[/bold cyan]")
            break

        failures_before = len(engine.failed_writes)
        engine.judge(item.id, outcome)
        if len(engine.failed_writes) > failures_before:
            console.print(
                "[bold red]Progress could not be saved; continuing locally.[/bold red]"
            )
        console.print("")

    counts = engine.counts()
    console.print(_format_counts(counts))
    if engine.is_finished():
        console.print(
            f"[bold cyan]Session complete after {engine.round_number()} "
            f"round(s). Well done![/bold cyan]"
        )
