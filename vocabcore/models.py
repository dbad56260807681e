"""
Pydantic records exchanged between the scheduler, the session engine and the
persistence collaborator.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_EASE_FACTOR, MINIMUM_EASE_FACTOR


class Quality(IntEnum):
    """
    Self-reported recall performance, highest = easiest.
    """

    Blackout = 0
    Incorrect = 1
    IncorrectFamiliar = 2
    Difficult = 3
    Hesitant = 4
    Perfect = 5


class Disposition(str, Enum):
    """
    Session-scoped judgment tag, distinct from long-term scheduler state.
    """

    Pending = "pending"
    StillLearning = "still_learning"
    Know = "know"


class SessionState(str, Enum):
    """
    States of the review-session queue engine.
    """

    Empty = "empty"
    Populated = "populated"
    InProgress = "in_progress"
    RoundBoundary = "round_boundary"
    Finished = "finished"


class ReviewItem(BaseModel):
    """
    Long-term scheduling state for one learnable unit.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    item_id: str = Field(
        ...,
        min_length=1,
        description="Opaque identifier, unique within a learner's deck.",
    )
    interval: int = Field(
        default=0,
        ge=0,
        description="Days until next review. 0 = never successfully reviewed.",
    )
    ease_factor: float = Field(
        default=DEFAULT_EASE_FACTOR,
        ge=MINIMUM_EASE_FACTOR,
        allow_inf_nan=False,
        description="Multiplier applied to interval growth.",
    )
    last_reviewed_at: Optional[datetime] = Field(
        default=None,
        description="UTC timestamp of the most recent review.",
    )
    next_review_at: Optional[datetime] = Field(
        default=None,
        description="last_reviewed_at + interval days (set by the caller).",
    )

    @property
    def is_new(self) -> bool:
        return self.interval == 0


class VocabularyWord(BaseModel):
    """A vocabulary entry used as flashcard payload."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    word: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)
    part_of_speech: str = ""
    example_sentence: str = ""
    synonyms: List[str] = Field(default_factory=list)
    difficulty_level: int = Field(default=1, ge=1, le=5)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, v: Any) -> Any:
        """YAML decks often use bare integers as ids."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class SessionItem(BaseModel):
    """
    One item's transient position within an active review session.

    `id` identifies the per-user session record and is distinct from
    `content_id`, the identifier of the underlying vocabulary entry.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str = Field(
        ...,
        min_length=1,
        description="Session record identifier.",
    )
    content_id: Optional[str] = Field(
        default=None,
        description="Identifier of the underlying content item.",
    )
    disposition: Disposition = Field(
        default=Disposition.Pending,
        description="pending / still_learning / know.",
    )
    payload: Any = Field(
        default=None,
        description="Opaque content. Never inspected by the engine.",
    )
    review: Optional[ReviewItem] = Field(
        default=None,
        description="Long-term scheduling state, if judgments should drive "
        "the scheduler.",
    )


class DispositionCounts(BaseModel):
    """Whole-deck disposition tallies for progress indicators."""

    model_config = ConfigDict(frozen=True)

    pending: int = Field(default=0, ge=0)
    still_learning: int = Field(default=0, ge=0)
    know: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.pending + self.still_learning + self.know


class Lesson(BaseModel):
    """
    A lesson on the learning path.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: str = Field(..., min_length=1)
    title: str = ""
    section: int = Field(default=1, ge=1)
    unit: int = Field(default=1, ge=1)
    word_count: int = Field(default=0, ge=0)
    required_xp: int = Field(default=0, ge=0)
    is_locked: bool = True
    completed: bool = False
    score: Optional[int] = Field(default=None, ge=0, le=100)
    stars: Optional[int] = Field(default=None, ge=1, le=5)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()
