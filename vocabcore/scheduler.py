# vocabcore/scheduler.py

"""
Defines the BaseScheduler abstract class and the SM-2 scheduler used to
compute review intervals and ease factors.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    EASE_BONUS,
    EASE_PENALTY_LINEAR,
    EASE_PENALTY_QUADRATIC,
    FIRST_INTERVAL,
    MAX_QUALITY,
    MIN_QUALITY,
    MINIMUM_EASE_FACTOR,
    PASSING_QUALITY,
    SECOND_INTERVAL,
)
from .exceptions import InvalidInputError
from .models import ReviewItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulerOutput:
    interval: int
    ease_factor: float


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, ties upward."""
    return int(math.floor(value + 0.5))


class BaseScheduler(ABC):
    """
    Abstract base class for all schedulers in vocabcore.
    """

    @abstractmethod
    def compute_next_review(
        self, quality: int, previous_interval: int, previous_ease_factor: float
    ) -> SchedulerOutput:
        """
        Computes the next interval and ease factor for one item.

        Args:
            quality: Recall quality for this review (0=blackout .. 5=perfect).
            previous_interval: The item's current interval in days (0 if new).
            previous_ease_factor: The item's current ease factor.

        Returns:
            A SchedulerOutput with the new interval and ease factor.

        Raises:
            InvalidInputError: If any argument is outside its domain.
        """
        pass

    def compute_next_state(self, item: ReviewItem, quality: int) -> SchedulerOutput:
        """Computes the next state of a ReviewItem for the given quality."""
        return self.compute_next_review(
            quality, item.interval, item.ease_factor
        )


class SM2SchedulerConfig(BaseModel):
    """Configuration for the SM-2 Scheduler."""

    model_config = ConfigDict(extra="forbid")

    # The repetition ladder (1 -> 6 days, 1 day after a failure) is fixed;
    # only the ease floor is tunable.
    minimum_ease_factor: float = Field(
        default=MINIMUM_EASE_FACTOR, ge=MINIMUM_EASE_FACTOR, allow_inf_nan=False
    )


class SM2Scheduler(BaseScheduler):
    """
    SuperMemo-2 scheduler.

    Failed reviews (quality < 3) restart the repetition ladder at one day.
    Successful reviews walk the ladder 1 -> 6 days, then scale the previous
    interval by the updated ease factor. Out-of-range input is rejected,
    never clamped.
    """

    def __init__(self, config: Optional[SM2SchedulerConfig] = None):
        if config is None:
            config = SM2SchedulerConfig()
        self.config = config

    def _validate(
        self, quality: int, previous_interval: int, previous_ease_factor: float
    ) -> None:
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise InvalidInputError(
                f"Invalid quality: {quality!r}. Must be an integer."
            )
        if not (MIN_QUALITY <= quality <= MAX_QUALITY):
            raise InvalidInputError(
                f"Invalid quality: {quality}. Must be {MIN_QUALITY}-{MAX_QUALITY}."
            )
        if isinstance(previous_interval, bool) or not isinstance(
            previous_interval, int
        ):
            raise InvalidInputError(
                f"Invalid interval: {previous_interval!r}. Must be an integer."
            )
        if previous_interval < 0:
            raise InvalidInputError(
                f"Invalid interval: {previous_interval}. Must be >= 0."
            )
        if isinstance(previous_ease_factor, bool) or not isinstance(
            previous_ease_factor, (int, float)
        ):
            raise InvalidInputError(
                f"Invalid ease factor: {previous_ease_factor!r}. Must be a number."
            )
        if not math.isfinite(previous_ease_factor):
            raise InvalidInputError(
                f"Invalid ease factor: {previous_ease_factor}. Must be finite."
            )
        if previous_ease_factor < self.config.minimum_ease_factor:
            raise InvalidInputError(
                f"Invalid ease factor: {previous_ease_factor}. "
                f"Must be >= {self.config.minimum_ease_factor}."
            )

    def _next_ease_factor(self, quality: int, previous_ease_factor: float) -> float:
        miss = MAX_QUALITY - quality
        delta = EASE_BONUS - miss * (
            EASE_PENALTY_LINEAR + miss * EASE_PENALTY_QUADRATIC
        )
        return max(self.config.minimum_ease_factor, previous_ease_factor + delta)

    def _next_interval(
        self, quality: int, previous_interval: int, new_ease_factor: float
    ) -> int:
        if quality < PASSING_QUALITY:
            return FIRST_INTERVAL
        if previous_interval == 0:
            return FIRST_INTERVAL
        if previous_interval == 1:
            return SECOND_INTERVAL
        return max(1, round_half_up(previous_interval * new_ease_factor))

    def compute_next_review(
        self, quality: int, previous_interval: int, previous_ease_factor: float
    ) -> SchedulerOutput:
        self._validate(quality, previous_interval, previous_ease_factor)

        new_ease_factor = self._next_ease_factor(quality, previous_ease_factor)
        new_interval = self._next_interval(
            quality, previous_interval, new_ease_factor
        )

        logger.debug(
            f"SM-2 q={quality} interval {previous_interval}->{new_interval} "
            f"ease {previous_ease_factor:.4f}->{new_ease_factor:.4f}"
        )
        return SchedulerOutput(interval=new_interval, ease_factor=new_ease_factor)

    def compute_next_state(self, item: ReviewItem, quality: int) -> SchedulerOutput:
        """
        Computes the next state of a stored ReviewItem.

        An item saved under a lower ease floor than the configured one is
        lifted to the configured floor instead of being rejected.
        """
        ease_factor = item.ease_factor
        if ease_factor < self.config.minimum_ease_factor:
            logger.debug(
                f"Lifting ease factor of {item.item_id} from {ease_factor} "
                f"to floor {self.config.minimum_ease_factor}"
            )
            ease_factor = self.config.minimum_ease_factor
        return self.compute_next_review(quality, item.interval, ease_factor)


_default_scheduler = SM2Scheduler()


def compute_next_review(
    quality: int, previous_interval: int, previous_ease_factor: float
) -> SchedulerOutput:
    """Module-level shortcut using the default SM-2 configuration."""
    return _default_scheduler.compute_next_review(
        quality, previous_interval, previous_ease_factor
    )
