import math

import pytest
from pydantic import ValidationError

from vocabcore.exceptions import InvalidInputError
from vocabcore.models import Quality, ReviewItem
from vocabcore.scheduler import (
    SM2Scheduler,
    SM2SchedulerConfig,
    SchedulerOutput,
    compute_next_review,
    round_half_up,
)


@pytest.fixture
def scheduler() -> SM2Scheduler:
    """Provides an SM2Scheduler with the default configuration."""
    return SM2Scheduler()


# --- Repetition ladder ---


def test_first_successful_review_is_one_day():
    result = compute_next_review(quality=5, previous_interval=0, previous_ease_factor=2.5)

    assert result.interval == 1
    assert result.ease_factor == pytest.approx(2.6)


def test_second_successful_review_is_six_days():
    result = compute_next_review(quality=5, previous_interval=1, previous_ease_factor=2.5)

    assert result.interval == 6


def test_second_step_is_not_ease_scaled():
    """The 1 -> 6 step is fixed regardless of the ease factor."""
    low = compute_next_review(3, 1, 1.3)
    high = compute_next_review(5, 1, 3.5)

    assert low.interval == high.interval == 6


def test_quality_four_keeps_ease_and_scales_interval():
    """Quality 4 has a zero ease delta under SM-2; the interval scales by it."""
    result = compute_next_review(quality=4, previous_interval=6, previous_ease_factor=2.5)

    assert result.ease_factor >= 2.5
    assert result.ease_factor == pytest.approx(2.5)
    assert result.interval == round_half_up(6 * result.ease_factor) == 15


def test_perfect_recall_grows_interval_by_new_ease():
    result = compute_next_review(quality=5, previous_interval=6, previous_ease_factor=2.5)

    assert result.ease_factor == pytest.approx(2.6)
    assert result.interval == 16  # 6 * 2.6 = 15.6


def test_difficult_recall_lowers_ease():
    result = compute_next_review(quality=3, previous_interval=6, previous_ease_factor=2.5)

    assert result.ease_factor == pytest.approx(2.36)
    assert result.interval == 14  # 6 * 2.36 = 14.16


def test_interval_rounding_is_half_up():
    """5 * 2.5 = 12.5 rounds up to 13, not to the even 12."""
    result = compute_next_review(quality=4, previous_interval=5, previous_ease_factor=2.5)

    assert result.interval == 13


@pytest.mark.parametrize(
    "value, expected", [(0.0, 0), (0.49, 0), (0.5, 1), (2.5, 3), (14.16, 14)]
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


# --- Failure resets ---


@pytest.mark.parametrize("quality", [0, 1, 2])
@pytest.mark.parametrize("previous_interval", [0, 1, 2, 6, 15, 365])
def test_failed_recall_resets_interval_to_one(quality, previous_interval):
    result = compute_next_review(quality, previous_interval, 2.5)

    assert result.interval == 1


def test_blackout_drops_ease_by_point_eight():
    result = compute_next_review(quality=0, previous_interval=10, previous_ease_factor=2.5)

    assert result.ease_factor == pytest.approx(1.7)


def test_ease_factor_never_drops_below_floor():
    result = compute_next_review(quality=0, previous_interval=10, previous_ease_factor=1.3)

    assert result.ease_factor == 1.3


@pytest.mark.parametrize("quality", range(0, 6))
@pytest.mark.parametrize("previous_interval", [0, 1, 2, 10, 100])
@pytest.mark.parametrize("previous_ease", [1.3, 1.35, 1.8, 2.5, 3.2])
def test_output_invariants(quality, previous_interval, previous_ease):
    result = compute_next_review(quality, previous_interval, previous_ease)

    assert result.ease_factor >= 1.3
    assert result.interval >= 1
    if quality < 3:
        assert result.interval == 1


def test_repeated_failures_converge_on_floor():
    ease = 2.5
    for _ in range(10):
        result = compute_next_review(0, 1, ease)
        ease = result.ease_factor

    assert ease == 1.3


def test_successful_streak_walks_the_ladder():
    interval, ease = 0, 2.5
    intervals = []
    for _ in range(4):
        result = compute_next_review(5, interval, ease)
        interval, ease = result.interval, result.ease_factor
        intervals.append(interval)

    assert intervals[:2] == [1, 6]
    assert intervals[2] > 6
    assert intervals[3] > intervals[2]


def test_accepts_quality_enum(scheduler: SM2Scheduler):
    result = scheduler.compute_next_review(Quality.Perfect, 0, 2.5)

    assert result.interval == 1


def test_is_pure(scheduler: SM2Scheduler):
    first = scheduler.compute_next_review(4, 6, 2.5)
    second = scheduler.compute_next_review(4, 6, 2.5)

    assert first == second
    assert isinstance(first, SchedulerOutput)


# --- Invalid input ---


@pytest.mark.parametrize("quality", [-1, 6, 100])
def test_out_of_range_quality_is_rejected(scheduler: SM2Scheduler, quality):
    with pytest.raises(InvalidInputError, match=r"Invalid quality: -?\d+\. Must be 0-5"):
        scheduler.compute_next_review(quality, 0, 2.5)


@pytest.mark.parametrize("quality", [2.5, "3", None, True])
def test_non_integer_quality_is_rejected(scheduler: SM2Scheduler, quality):
    with pytest.raises(InvalidInputError, match="Invalid quality"):
        scheduler.compute_next_review(quality, 0, 2.5)


@pytest.mark.parametrize("interval", [-1, 1.5, "6", False])
def test_invalid_interval_is_rejected(scheduler: SM2Scheduler, interval):
    with pytest.raises(InvalidInputError, match="Invalid interval"):
        scheduler.compute_next_review(4, interval, 2.5)


@pytest.mark.parametrize("ease", [1.29, 0.0, -2.5, math.nan, math.inf, "2.5"])
def test_invalid_ease_factor_is_rejected(scheduler: SM2Scheduler, ease):
    with pytest.raises(InvalidInputError, match="Invalid ease factor"):
        scheduler.compute_next_review(4, 6, ease)


def test_invalid_input_is_a_value_error(scheduler: SM2Scheduler):
    with pytest.raises(ValueError):
        scheduler.compute_next_review(9, 0, 2.5)


# --- Configuration ---


def test_compute_next_state_reads_review_item(scheduler: SM2Scheduler):
    item = ReviewItem(item_id="u1:1", interval=6, ease_factor=2.5)

    result = scheduler.compute_next_state(item, 5)

    assert result.interval == 16
    assert item.interval == 6, "Scheduler must not mutate its input."


def test_custom_minimum_ease_factor():
    scheduler = SM2Scheduler(SM2SchedulerConfig(minimum_ease_factor=1.5))

    result = scheduler.compute_next_review(0, 6, 2.0)

    assert result.ease_factor == 1.5


def test_custom_minimum_rejects_ease_below_it():
    scheduler = SM2Scheduler(SM2SchedulerConfig(minimum_ease_factor=1.5))

    with pytest.raises(InvalidInputError):
        scheduler.compute_next_review(4, 6, 1.4)


def test_config_rejects_floor_below_1_3():
    with pytest.raises(ValidationError):
        SM2SchedulerConfig(minimum_ease_factor=1.0)


@pytest.mark.parametrize(
    "key", ["first_interval", "second_interval", "default_ease_factor"]
)
def test_config_rejects_unknown_keys(key):
    with pytest.raises(ValidationError):
        SM2SchedulerConfig(**{key: 3})


@pytest.mark.parametrize("quality", [0, 1, 2])
@pytest.mark.parametrize("previous_interval", [0, 1, 10])
def test_failed_recall_is_one_day_under_custom_floor(quality, previous_interval):
    scheduler = SM2Scheduler(SM2SchedulerConfig(minimum_ease_factor=1.5))

    result = scheduler.compute_next_review(quality, previous_interval, 2.5)

    assert result.interval == 1


def test_compute_next_state_lifts_ease_below_configured_floor():
    scheduler = SM2Scheduler(SM2SchedulerConfig(minimum_ease_factor=1.5))
    item = ReviewItem(item_id="u1:1", interval=6, ease_factor=1.3)

    result = scheduler.compute_next_state(item, 4)

    assert result.ease_factor == pytest.approx(1.5)
    assert result.interval == 9  # 6 * 1.5
    assert item.ease_factor == 1.3
