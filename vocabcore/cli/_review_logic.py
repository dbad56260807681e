from pathlib import Path

from vocabcore.cli.review_ui import start_review_flow
from vocabcore.config import Settings
from vocabcore.deck_file import load_deck_file
from vocabcore.review_processor import ReviewProcessor
from vocabcore.scheduler import SM2Scheduler
from vocabcore.session_queue import SessionQueueEngine
from vocabcore.store import InMemoryDeckStore


def review_logic(deck_file: Path, user_id: str, settings: Settings) -> SessionQueueEngine:
    """
    Set up and start a review session for the words in a deck file.

    Loads the deck, provisions an in-memory store for the user from it,
    creates the scheduler, review processor and session engine, and launches
    the interactive review flow.

    Parameters:
        deck_file (Path): YAML deck file to review.
        user_id (str): Identifier of the learner.
        settings (Settings): Scheduler and session settings.

    Returns:
        SessionQueueEngine: The engine after the flow ends.
    """
    deck = load_deck_file(deck_file)

    store = InMemoryDeckStore(
        corpus=deck.words, default_ease_factor=settings.default_ease_factor
    )
    scheduler = SM2Scheduler(settings.scheduler_config())

    engine = SessionQueueEngine(
        store=store,
        user_id=user_id,
        review_processor=ReviewProcessor(scheduler=scheduler, store=store),
        settings=settings,
    )
    engine.load_session(expected_size=len(deck.words))

    start_review_flow(engine)
    return engine
