"""
This module defines the SessionQueueEngine class, which drives one
interactive flashcard or lesson review session. It keeps missed items in
rotation until they are judged "know", writes each judgment through to an
injected deck store, and optionally feeds judgments to the scheduler.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from .config import Settings
from .constants import MAX_QUALITY, MIN_QUALITY
from .exceptions import (
    EmptyDeckError,
    InvalidInputError,
    OutOfOrderJudgmentError,
    PersistenceWriteError,
)
from .models import Disposition, DispositionCounts, SessionItem, SessionState
from .review_processor import ReviewProcessor
from .store import DeckStore, write_through

logger = logging.getLogger(__name__)

PersistenceErrorHandler = Callable[[PersistenceWriteError], None]


@dataclass(frozen=True)
class JudgmentRecord:
    item_id: str
    outcome: Disposition
    round_number: int
    quality: Optional[int] = None


class SessionQueueEngine:
    """
    Manages one review session over a fixed deck of SessionItems.

    The engine owns the working queue, the cursor and the round counter.
    Dispositions are kept in an authoritative in-memory map that is updated
    optimistically on every judgment; write-through to the store happens
    afterwards and a failed write is reported, never rolled back.

    A round is one pass over the queue. When the cursor runs off the end of
    the queue, the queue is rebuilt from every item not yet judged "know".
    There is no retry cap: an item stays in rotation until it is known.
    """

    def __init__(
        self,
        store: Optional[DeckStore] = None,
        user_id: Optional[str] = None,
        review_processor: Optional[ReviewProcessor] = None,
        settings: Optional[Settings] = None,
        on_persistence_error: Optional[PersistenceErrorHandler] = None,
    ):
        """
        Create an engine, optionally bound to a deck store and user.

        Parameters:
            store (DeckStore): Persistence collaborator for write-through. When
                omitted the engine is purely in-memory.
            user_id (str): Owner of the deck; needed for load/reset calls.
            review_processor (ReviewProcessor): When set, judgments on items
                carrying a ReviewItem are also run through the scheduler.
            settings (Settings): Supplies default qualities for judgments.
            on_persistence_error (callable): Called with every failed write.
        """
        self.store = store
        self.user_id = user_id
        self.review_processor = review_processor
        self.settings = settings or Settings()
        self.on_persistence_error = on_persistence_error

        self._deck: Dict[str, SessionItem] = {}
        self._queue: List[str] = []
        self._cursor = 0
        self._round = 1
        self._state = SessionState.Empty
        self.history: List[JudgmentRecord] = []
        self.failed_writes: List[PersistenceWriteError] = []

    # --- Loading ---

    def load_session(
        self, user_id: Optional[str] = None, expected_size: Optional[int] = None
    ) -> None:
        """
        Load the user's deck from the store and initialize a session from it.

        If the stored deck holds fewer than `expected_size` items, the store is
        asked to provision the missing records and the deck is reloaded.
        A store that cannot provision leaves the session on the deck it has.
        Load failures propagate and leave the engine untouched.
        """
        if self.store is None:
            raise InvalidInputError("load_session() requires a deck store.")
        uid = user_id or self.user_id
        if not uid:
            raise InvalidInputError("load_session() requires a user id.")
        if expected_size is None:
            expected_size = self.settings.expected_deck_size

        deck = self.store.load_deck(uid)
        if expected_size is not None and len(deck) < expected_size:
            logger.info(
                f"Deck for {uid} has {len(deck)} of {expected_size} items; "
                f"provisioning."
            )
            try:
                self.store.provision_deck(uid)
            except NotImplementedError:
                logger.warning(
                    f"{type(self.store).__name__} cannot provision decks; "
                    f"starting {uid} with {len(deck)} of {expected_size} items."
                )
            else:
                deck = self.store.load_deck(uid)

        self.user_id = uid
        self.initialize_session(deck)

    def initialize_session(self, items: Iterable[SessionItem]) -> None:
        """
        Hard-reset the engine onto a new deck.

        Builds the first round's queue from every item whose disposition is
        not "know". A deck that is entirely known starts out finished.

        Raises:
            EmptyDeckError: If `items` is empty. The engine is left empty.
            InvalidInputError: If two items share an id.
        """
        items = list(items)
        if not items:
            self._clear()
            raise EmptyDeckError("Cannot start a review session with an empty deck.")

        seen = set()
        for item in items:
            if item.id in seen:
                raise InvalidInputError(f"Duplicate session item id {item.id!r}.")
            seen.add(item.id)

        self._deck = {item.id: item.model_copy(deep=True) for item in items}
        self._round = 1
        self.history = []
        self._populate()
        logger.info(
            f"Initialized session with {len(self._deck)} items, "
            f"{len(self._queue)} active."
        )

    def _clear(self) -> None:
        self._deck = {}
        self._queue = []
        self._cursor = 0
        self._round = 1
        self._state = SessionState.Empty
        self.history = []

    def _active_ids(self) -> List[str]:
        return [
            item_id
            for item_id, item in self._deck.items()
            if item.disposition != Disposition.Know
        ]

    def _populate(self) -> None:
        self._queue = self._active_ids()
        self._cursor = 0
        if self._queue:
            self._state = SessionState.Populated
        else:
            self._state = SessionState.Finished
            logger.info("Every item is already known. Session finished.")

    # --- Judging ---

    def _coerce_outcome(self, outcome: Union[Disposition, str]) -> Disposition:
        try:
            outcome = Disposition(outcome)
        except ValueError:
            raise InvalidInputError(f"Invalid outcome: {outcome!r}.") from None
        if outcome == Disposition.Pending:
            raise InvalidInputError(
                "Outcome must be 'know' or 'still_learning', not 'pending'."
            )
        return outcome

    def _check_quality(self, quality: Optional[int]) -> None:
        if quality is None:
            return
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise InvalidInputError(f"Invalid quality: {quality!r}.")
        if not (MIN_QUALITY <= quality <= MAX_QUALITY):
            raise InvalidInputError(
                f"Invalid quality: {quality}. Must be {MIN_QUALITY}-{MAX_QUALITY}."
            )

    def _default_quality(self, outcome: Disposition) -> int:
        if outcome == Disposition.Know:
            return self.settings.know_quality
        return self.settings.still_learning_quality

    def judge(
        self,
        item_id: str,
        outcome: Union[Disposition, str],
        quality: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
    ) -> SessionItem:
        """
        Record a judgment for the item at the head of the queue.

        Parameters:
            item_id (str): Must equal current_item().id.
            outcome (Disposition | str): "know" or "still_learning".
            quality (int): Optional 0-5 rating for the scheduler. Defaults to
                the configured quality for the outcome.
            reviewed_at (datetime): Review timestamp passed to the scheduler.

        Returns:
            SessionItem: A copy of the judged item after the update.

        Raises:
            InvalidInputError: For an invalid outcome or quality.
            OutOfOrderJudgmentError: If `item_id` is not at the cursor. No
                state changes in that case.
        """
        outcome = self._coerce_outcome(outcome)
        self._check_quality(quality)

        head_id = self._head_id()
        if head_id is None or head_id != item_id:
            raise OutOfOrderJudgmentError(
                f"Judgment for {item_id!r} rejected; current item is {head_id!r}.",
                expected_id=head_id,
                received_id=item_id,
            )

        item = self._deck[item_id]
        used_quality = (
            quality if quality is not None else self._default_quality(outcome)
        )

        # A scheduler rejection must leave the engine untouched.
        review_outcome = None
        if self.review_processor is not None and item.review is not None:
            review_outcome = self.review_processor.compute_review(
                item.review, used_quality, reviewed_at=reviewed_at
            )

        if review_outcome is not None:
            item.review = review_outcome.item
        item.disposition = outcome
        self.history.append(
            JudgmentRecord(
                item_id=item_id,
                outcome=outcome,
                round_number=self._round,
                quality=used_quality,
            )
        )
        logger.debug(f"Judged {item_id} as {outcome.value} in round {self._round}")

        self._advance()

        errors = []
        if review_outcome is not None:
            errors.append(self.review_processor.persist_review(item.review))
        if self.store is not None:
            errors.append(
                write_through(
                    self.store, "save_disposition", item_id, item_id, outcome
                )
            )
        self._report(*errors)

        return item.model_copy(deep=True)

    def record_answer(
        self,
        item_id: str,
        correct: bool,
        quality: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
    ) -> SessionItem:
        """Judge a lesson exercise: correct answers are known."""
        outcome = Disposition.Know if correct else Disposition.StillLearning
        return self.judge(item_id, outcome, quality=quality, reviewed_at=reviewed_at)

    def _advance(self) -> None:
        if self._cursor < len(self._queue) - 1:
            self._cursor += 1
            self._state = SessionState.InProgress
        else:
            self._end_round()

    def _end_round(self) -> None:
        self._state = SessionState.RoundBoundary
        active = self._active_ids()
        if not active:
            self._queue = []
            self._cursor = 0
            self._state = SessionState.Finished
            logger.info(f"Session finished after {self._round} round(s).")
            return

        self._round += 1
        self._queue = active
        self._cursor = 0
        self._state = SessionState.Populated
        logger.info(f"Starting round {self._round} with {len(active)} item(s).")

    def _report(self, *errors: Optional[PersistenceWriteError]) -> None:
        failed = [error for error in errors if error is not None]
        self.failed_writes.extend(failed)
        if self.on_persistence_error is not None:
            for error in failed:
                self.on_persistence_error(error)

    # --- Reset ---

    def reset_session(self) -> None:
        """
        Put every item back to pending and restart at round 1.

        Raises:
            EmptyDeckError: If no deck has been loaded.
        """
        if not self._deck:
            raise EmptyDeckError("No deck loaded; nothing to reset.")

        for item in self._deck.values():
            item.disposition = Disposition.Pending
        self._round = 1
        self.history = []
        self._populate()
        logger.info(f"Session reset with {len(self._deck)} items.")

        if self.store is not None and self.user_id:
            self._report(
                write_through(self.store, "reset_deck", None, self.user_id)
            )

    # --- Read accessors ---

    @property
    def state(self) -> SessionState:
        return self._state

    def _head_id(self) -> Optional[str]:
        if self._state in (SessionState.Empty, SessionState.Finished):
            return None
        return self._queue[self._cursor]

    def current_item(self) -> Optional[SessionItem]:
        """
        Returns the item awaiting judgment, or None if the session is empty
        or finished.
        """
        head_id = self._head_id()
        if head_id is None:
            return None
        return self._deck[head_id].model_copy(deep=True)

    def is_finished(self) -> bool:
        return self._state == SessionState.Finished

    def round_number(self) -> int:
        return self._round

    def queue_position(self) -> Tuple[int, int]:
        """Returns (1-based position, queue length) for the current round."""
        if self._head_id() is None:
            return 0, len(self._queue)
        return self._cursor + 1, len(self._queue)

    def counts(self) -> DispositionCounts:
        """Disposition tallies over the whole deck, not just this round."""
        tally = Counter(item.disposition for item in self._deck.values())
        return DispositionCounts(
            pending=tally[Disposition.Pending],
            still_learning=tally[Disposition.StillLearning],
            know=tally[Disposition.Know],
        )

    def items(self) -> List[SessionItem]:
        """Copies of every item in the deck, in deck order."""
        return [item.model_copy(deep=True) for item in self._deck.values()]
