"""
Shared review processing logic for vocabcore.

The ReviewProcessor turns a quality rating into updated long-term scheduling
state for one ReviewItem:
1. Timestamp handling
2. Scheduler computation
3. Derived next-review timestamp
4. Optimistic write-through to the deck store

Steps 1-3 are pure (compute_review); step 4 is separate (persist_review) so
callers can apply their own in-memory transition before anything is written.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .exceptions import PersistenceWriteError
from .models import ReviewItem
from .scheduler import BaseScheduler, SchedulerOutput, SM2Scheduler
from .store import DeckStore, write_through

logger = logging.getLogger(__name__)


@dataclass
class ReviewOutcome:
    item: ReviewItem
    scheduler_output: SchedulerOutput
    write_error: Optional[PersistenceWriteError] = None


class ReviewProcessor:
    """
    Processes review ratings with consistent logic across flashcard and
    lesson workflows.

    The returned ReviewItem always reflects the new schedule, whether or not
    the store accepted the write. A failed write is reported on the outcome
    and never rolls the item back.
    """

    def __init__(
        self,
        scheduler: Optional[BaseScheduler] = None,
        store: Optional[DeckStore] = None,
    ):
        """
        Initialize the ReviewProcessor.

        Args:
            scheduler: Scheduler used to compute next states (SM-2 by default)
            store: Optional deck store receiving review-state write-through
        """
        self.scheduler = scheduler or SM2Scheduler()
        self.store = store

    def compute_review(
        self,
        item: ReviewItem,
        quality: int,
        reviewed_at: Optional[datetime] = None,
    ) -> ReviewOutcome:
        """
        Compute the rescheduled item without touching the store.

        Args:
            item: The item being reviewed (not mutated)
            quality: Recall quality, 0-5
            reviewed_at: Review timestamp (defaults to current UTC time)

        Raises:
            InvalidInputError: If quality is out of range or the item's state
                is outside the scheduler's domain
        """
        ts = reviewed_at or datetime.now(timezone.utc)

        logger.debug(f"Processing review for {item.item_id} with quality {quality}")

        output = self.scheduler.compute_next_state(item, quality)
        updated = item.model_copy(
            update={
                "interval": output.interval,
                "ease_factor": output.ease_factor,
                "last_reviewed_at": ts,
                "next_review_at": ts + timedelta(days=output.interval),
            }
        )

        logger.debug(
            f"Review computed for {item.item_id}. "
            f"Next review: {updated.next_review_at}, interval: {updated.interval}"
        )
        return ReviewOutcome(item=updated, scheduler_output=output)

    def persist_review(self, item: ReviewItem) -> Optional[PersistenceWriteError]:
        """Writes an item's schedule through to the store, if one is attached."""
        if self.store is None:
            return None
        return write_through(
            self.store,
            "save_review_state",
            item.item_id,
            item.item_id,
            item.interval,
            item.ease_factor,
        )

    def process_review(
        self,
        item: ReviewItem,
        quality: int,
        reviewed_at: Optional[datetime] = None,
    ) -> ReviewOutcome:
        """
        Compute and persist a review rating for one item.

        Returns:
            ReviewOutcome with the updated item, the raw scheduler output and
            the write-through error, if any.
        """
        outcome = self.compute_review(item, quality, reviewed_at=reviewed_at)
        outcome.write_error = self.persist_review(outcome.item)
        return outcome
