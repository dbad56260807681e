"""vocabcore - SM-2 review scheduling and review-session queues for vocabulary learning."""

from .models import (
    Disposition,
    DispositionCounts,
    Lesson,
    Quality,
    ReviewItem,
    SessionItem,
    SessionState,
    VocabularyWord,
)
from .constants import DEFAULT_EASE_FACTOR, MINIMUM_EASE_FACTOR
from .scheduler import SM2Scheduler, SM2SchedulerConfig, compute_next_review
from .session_queue import SessionQueueEngine
from .store import DeckStore, InMemoryDeckStore

__all__ = [
    "Disposition",
    "DispositionCounts",
    "Lesson",
    "Quality",
    "ReviewItem",
    "SessionItem",
    "SessionState",
    "VocabularyWord",
    "DEFAULT_EASE_FACTOR",
    "MINIMUM_EASE_FACTOR",
    "SM2Scheduler",
    "SM2SchedulerConfig",
    "compute_next_review",
    "SessionQueueEngine",
    "DeckStore",
    "InMemoryDeckStore",
]
