"""
Persistence collaborator contract for the session engine.

The engine never reaches into storage itself. It calls a DeckStore at session
boundaries only: loading a deck, writing through each judgment and review
state update, and resetting a deck. Every call may fail independently;
failures are raised as exceptions.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from .exceptions import PersistenceWriteError
from .models import Disposition, ReviewItem, SessionItem, VocabularyWord

logger = logging.getLogger(__name__)


def session_item_id(user_id: str, content_id: str) -> str:
    """Builds the per-user session record id for a content item."""
    return f"{user_id}:{content_id}"


def build_session_items(
    words: Iterable[VocabularyWord],
    user_id: str,
    default_ease_factor: Optional[float] = None,
) -> List[SessionItem]:
    """
    Create one pending SessionItem per vocabulary word.

    Each item gets a fresh ReviewItem so judgments can drive the scheduler.
    """
    items = []
    for word in words:
        record_id = session_item_id(user_id, word.id)
        review = ReviewItem(item_id=record_id)
        if default_ease_factor is not None:
            review.ease_factor = default_ease_factor
        items.append(
            SessionItem(
                id=record_id,
                content_id=word.id,
                payload=word,
                review=review,
            )
        )
    return items


class DeckStore(ABC):
    """
    Abstract persistence collaborator for per-user review decks.
    """

    @abstractmethod
    def load_deck(self, user_id: str) -> List[SessionItem]:
        """Returns the user's deck as last durably recorded."""
        pass

    @abstractmethod
    def save_disposition(self, item_id: str, disposition: Disposition) -> None:
        """Persists a session item's disposition."""
        pass

    @abstractmethod
    def save_review_state(
        self, item_id: str, interval: int, ease_factor: float
    ) -> None:
        """Persists long-term scheduling state for a review item."""
        pass

    @abstractmethod
    def reset_deck(self, user_id: str) -> None:
        """Sets every item in the user's deck back to pending."""
        pass

    def provision_deck(self, user_id: str) -> None:
        """
        (Re)creates any missing session records for the user's deck.

        Stores that cannot provision decks leave this unimplemented.
        """
        raise NotImplementedError(
            f"{type(self).__name__} cannot provision decks."
        )


class InMemoryDeckStore(DeckStore):
    """
    Dictionary-backed DeckStore.

    Optionally seeded with a corpus of vocabulary words, in which case
    provision_deck() creates a session record for every corpus word the user
    is missing. Writes can be forced to fail for exercising the engine's
    write-through error path.
    """

    def __init__(
        self,
        corpus: Optional[Iterable[VocabularyWord]] = None,
        decks: Optional[Dict[str, List[SessionItem]]] = None,
        default_ease_factor: Optional[float] = None,
    ):
        self.corpus: List[VocabularyWord] = list(corpus or [])
        self.default_ease_factor = default_ease_factor
        self._decks: Dict[str, Dict[str, SessionItem]] = {}
        self._owner: Dict[str, str] = {}
        self.fail_writes = False
        for user_id, items in (decks or {}).items():
            self.add_items(user_id, items)

    def add_items(self, user_id: str, items: Iterable[SessionItem]) -> None:
        deck = self._decks.setdefault(user_id, {})
        for item in items:
            deck[item.id] = item.model_copy(deep=True)
            self._owner[item.id] = user_id

    def _check_writable(self, operation: str, item_id: Optional[str]) -> None:
        if self.fail_writes:
            raise PersistenceWriteError(
                f"Store rejected {operation}.",
                operation=operation,
                item_id=item_id,
            )

    def _find(self, item_id: str) -> SessionItem:
        user_id = self._owner.get(item_id)
        if user_id is None:
            raise KeyError(f"Unknown session item {item_id!r}")
        return self._decks[user_id][item_id]

    def load_deck(self, user_id: str) -> List[SessionItem]:
        deck = self._decks.get(user_id, {})
        return [item.model_copy(deep=True) for item in deck.values()]

    def save_disposition(self, item_id: str, disposition: Disposition) -> None:
        self._check_writable("save_disposition", item_id)
        self._find(item_id).disposition = disposition

    def save_review_state(
        self, item_id: str, interval: int, ease_factor: float
    ) -> None:
        self._check_writable("save_review_state", item_id)
        item = self._find(item_id)
        if item.review is None:
            item.review = ReviewItem(item_id=item_id)
        item.review = item.review.model_copy(
            update={"interval": interval, "ease_factor": ease_factor}
        )

    def reset_deck(self, user_id: str) -> None:
        self._check_writable("reset_deck", None)
        for item in self._decks.get(user_id, {}).values():
            item.disposition = Disposition.Pending

    def provision_deck(self, user_id: str) -> None:
        self._check_writable("provision_deck", None)
        deck = self._decks.get(user_id, {})
        existing = {item.content_id for item in deck.values()}
        missing = [word for word in self.corpus if word.id not in existing]
        logger.info(
            f"Provisioning {len(missing)} missing items for user {user_id}"
        )
        self.add_items(
            user_id,
            build_session_items(missing, user_id, self.default_ease_factor),
        )


def write_through(
    store: DeckStore, operation: str, item_id: Optional[str], *args
) -> Optional[PersistenceWriteError]:
    """
    Call `store.<operation>(*args)` and report, rather than raise, failure.

    Returns the PersistenceWriteError describing the failure, or None on
    success. In-memory state owned by the caller is never touched here.
    """
    try:
        getattr(store, operation)(*args)
    except PersistenceWriteError as e:
        logger.warning(f"Write-through {operation} failed for {item_id}: {e}")
        return e
    except Exception as e:
        logger.warning(f"Write-through {operation} failed for {item_id}: {e}")
        return PersistenceWriteError(
            f"{operation} failed for {item_id}: {e}",
            operation=operation,
            item_id=item_id,
            original_exception=e,
        )
    return None
