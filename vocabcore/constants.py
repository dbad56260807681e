"""
SM-2 scheduling and gamification constants.

This module contains static parameters only. Runtime overrides live in
vocabcore.config.
"""
from typing import Tuple

# Quality ratings accepted by the scheduler (0 = blackout, 5 = perfect recall).
MIN_QUALITY: int = 0
MAX_QUALITY: int = 5

# Ratings below this restart the repetition ladder.
PASSING_QUALITY: int = 3

# Ease factor for items that have never been reviewed.
DEFAULT_EASE_FACTOR: float = 2.5

# Ease factor floor. No update may push an item below it.
MINIMUM_EASE_FACTOR: float = 1.3

# Fixed steps of the SM-2 ladder (days) before intervals become ease-scaled.
FIRST_INTERVAL: int = 1
SECOND_INTERVAL: int = 6

# Coefficients of the SM-2 ease update:
#   EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
EASE_BONUS: float = 0.1
EASE_PENALTY_LINEAR: float = 0.08
EASE_PENALTY_QUADRATIC: float = 0.02

# Qualities used when a know / still-learning judgment drives the scheduler
# without an explicit rating.
DEFAULT_KNOW_QUALITY: int = 4
DEFAULT_STILL_LEARNING_QUALITY: int = 1

# --- Lesson progress ---

# Flat XP for finishing a lesson, plus half the percentage score.
LESSON_BASE_XP: int = 50

# (exclusive lower bound on score, stars awarded), checked in order.
STAR_THRESHOLDS: Tuple[Tuple[int, int], ...] = (
    (90, 4),
    (80, 3),
    (60, 2),
)
PERFECT_SCORE_STARS: int = 5
MINIMUM_STARS: int = 1
