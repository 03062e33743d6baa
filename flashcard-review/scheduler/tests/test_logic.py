import pytest
from datetime import timedelta

from scheduler.config import MIN_EASE_FACTOR
from scheduler.domain.enums import Grade
from scheduler.domain.logic import (
    _round_half_up,
    apply_outcome,
    grade_from_performance,
    schedule_next,
)
from .conftest import NOW, make_card


@pytest.mark.parametrize(
    "correct, time_spent_ms, expected",
    [
        (False, 3000, Grade.AGAIN),
        (False, 100, Grade.AGAIN),
        (True, 4999, Grade.EASY),
        (True, 5000, Grade.GOOD),
        (True, 20000, Grade.GOOD),
        (True, 20001, Grade.HARD),
    ],
)
def test_grade_from_performance(correct, time_spent_ms, expected):
    assert grade_from_performance(correct, time_spent_ms) == expected


def test_ease_factor_never_below_floor():
    """The ease floor holds for every grade, from any starting ease."""
    for ease in (1.3, 1.31, 1.5, 2.0, 2.5, 3.5):
        for interval in (1, 2, 6, 40):
            card = make_card("c", ease_factor=ease, interval=interval)
            for grade in Grade:
                update = schedule_next(card, grade, NOW)
                assert update.ease_factor >= MIN_EASE_FACTOR


def test_again_resets_interval():
    for interval in (1, 6, 15, 200):
        update = schedule_next(make_card("c", interval=interval), Grade.AGAIN, NOW)
        assert update.interval == 1
        assert update.next_review == NOW + timedelta(days=1)


@pytest.mark.parametrize("grade", [Grade.HARD, Grade.GOOD, Grade.EASY])
def test_first_success_jumps_to_six_days(grade):
    update = schedule_next(make_card("c", interval=1), grade, NOW)
    assert update.interval == 6
    assert update.next_review == NOW + timedelta(days=6)


def test_later_success_grows_by_new_ease():
    card = make_card("c", ease_factor=2.5, interval=10)

    hard = schedule_next(card, Grade.HARD, NOW)
    assert hard.ease_factor == pytest.approx(1.835)
    assert hard.interval == 18

    good = schedule_next(card, Grade.GOOD, NOW)
    assert good.ease_factor == pytest.approx(1.96)
    assert good.interval == 20


def test_interval_rounds_half_up():
    assert _round_half_up(2.5) == 3
    assert _round_half_up(3.5) == 4
    assert _round_half_up(18.35) == 18


def test_easy_loses_less_ease_than_good():
    card = make_card("c", ease_factor=2.5, interval=6)
    easy = schedule_next(card, Grade.EASY, NOW)
    good = schedule_next(card, Grade.GOOD, NOW)
    assert easy.ease_factor > good.ease_factor


def test_missing_schedule_fields_fall_back_to_defaults():
    card = make_card("c", ease_factor=None, interval=None)
    update = schedule_next(card, Grade.GOOD, NOW)
    assert update.interval == 6
    assert update.ease_factor == pytest.approx(1.96)


def test_apply_outcome_incorrect_never_reviewed_card():
    """A wrong answer resets the interval, lowers ease and counts the miss."""
    card = make_card("c")

    updated = apply_outcome(card, False, 3000, NOW)

    assert updated.interval == 1
    assert updated.ease_factor < 2.5
    assert updated.incorrect_count == 1
    assert updated.correct_count == 0
    assert updated.review_count == 1
    assert updated.last_reviewed == NOW
    assert updated.next_review == NOW + timedelta(days=1)


def test_apply_outcome_good_answer_from_initial_interval():
    card = make_card("c", interval=1)
    updated = apply_outcome(card, True, 5000, NOW)
    assert updated.interval == 6
    assert updated.correct_count == 1
    assert updated.incorrect_count == 0


def test_apply_outcome_leaves_input_card_untouched():
    card = make_card("c", review_count=3, correct_count=2, incorrect_count=1)
    updated = apply_outcome(card, True, 1000, NOW)

    assert card.review_count == 3
    assert card.last_reviewed is None
    assert updated.review_count == 4
    assert updated.correct_count == 3
    assert updated.incorrect_count == 1
