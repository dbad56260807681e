"""
Lesson scoring and learning-path progression.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .constants import (
    LESSON_BASE_XP,
    MINIMUM_STARS,
    PERFECT_SCORE_STARS,
    STAR_THRESHOLDS,
)
from .exceptions import InvalidInputError
from .models import Disposition, Lesson
from .scheduler import round_half_up
from .session_queue import JudgmentRecord

logger = logging.getLogger(__name__)


@dataclass
class LessonCompletion:
    lessons: List[Lesson]
    xp_gained: int
    unlocked_lesson_id: Optional[str] = None


def lesson_score(correct: int, total: int) -> int:
    """Percentage of correct answers, rounded to the nearest whole number."""
    if total <= 0:
        raise InvalidInputError(f"Invalid total: {total}. Must be > 0.")
    if not (0 <= correct <= total):
        raise InvalidInputError(
            f"Invalid correct count: {correct}. Must be 0-{total}."
        )
    return round_half_up(correct * 100 / total)


def stars_for_score(score: int) -> int:
    """Maps a 0-100 score to a 1-5 star rating."""
    if not (0 <= score <= 100):
        raise InvalidInputError(f"Invalid score: {score}. Must be 0-100.")
    if score == 100:
        return PERFECT_SCORE_STARS
    for threshold, stars in STAR_THRESHOLDS:
        if score > threshold:
            return stars
    return MINIMUM_STARS


def xp_for_score(score: int) -> int:
    if not (0 <= score <= 100):
        raise InvalidInputError(f"Invalid score: {score}. Must be 0-100.")
    return LESSON_BASE_XP + score // 2


def first_attempt_accuracy(history: Iterable[JudgmentRecord]) -> Tuple[int, int]:
    """
    Count first-attempt results from a session's judgment log.

    Returns:
        (correct, total) where total is the number of distinct items judged
        and correct is how many of them were known on their first judgment.
    """
    first: Dict[str, Disposition] = {}
    for record in history:
        first.setdefault(record.item_id, record.outcome)
    correct = sum(1 for outcome in first.values() if outcome == Disposition.Know)
    return correct, len(first)


def complete_lesson(
    lessons: List[Lesson], lesson_id: str, score: int, stars: int
) -> LessonCompletion:
    """
    Mark a lesson completed and unlock the one after it.

    The input list is not modified; updated copies are returned together
    with the XP earned for the score.

    Raises:
        InvalidInputError: If `lesson_id` is not in `lessons` or the score or
            stars are out of range.
    """
    index = next(
        (i for i, lesson in enumerate(lessons) if lesson.id == lesson_id), None
    )
    if index is None:
        raise InvalidInputError(f"Unknown lesson {lesson_id!r}.")
    if not (MINIMUM_STARS <= stars <= PERFECT_SCORE_STARS):
        raise InvalidInputError(f"Invalid stars: {stars}. Must be 1-5.")
    xp_gained = xp_for_score(score)

    updated = [lesson.model_copy() for lesson in lessons]
    updated[index] = updated[index].model_copy(
        update={"completed": True, "score": score, "stars": stars}
    )

    unlocked_id = None
    if index + 1 < len(updated):
        updated[index + 1] = updated[index + 1].model_copy(
            update={"is_locked": False}
        )
        unlocked_id = updated[index + 1].id

    logger.info(
        f"Completed lesson {lesson_id} with score {score} ({stars} stars), "
        f"+{xp_gained} XP"
    )
    return LessonCompletion(
        lessons=updated, xp_gained=xp_gained, unlocked_lesson_id=unlocked_id
    )
