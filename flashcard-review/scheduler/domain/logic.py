import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from .cards import Flashcard
from .enums import Grade
from ..config import (
    AVERAGE_ANSWER_MS,
    EASY_BELOW,
    FIRST_SUCCESS_INTERVAL,
    HARD_ABOVE,
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL,
    MIN_EASE_FACTOR,
    PASSING_WEIGHT,
)
from ..utils.time import utc_now


@dataclass(frozen=True)
class ScheduleUpdate:
    next_review: datetime
    ease_factor: float
    interval: int


def grade_from_performance(correct: bool, time_spent_ms: float) -> Grade:
    # Answer latency stands in for difficulty: slow is hard, fast is easy.
    if not correct:
        return Grade.AGAIN

    normalized = (time_spent_ms or 0) / AVERAGE_ANSWER_MS
    if normalized > HARD_ABOVE:
        return Grade.HARD
    if normalized < EASY_BELOW:
        return Grade.EASY
    return Grade.GOOD


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def schedule_next(card: Flashcard, grade: Grade, now: datetime = None) -> ScheduleUpdate:
    now = now or utc_now()
    weight = grade.weight
    ease = card.ease_factor or INITIAL_EASE_FACTOR
    interval = card.interval or INITIAL_INTERVAL

    new_ease = max(
        MIN_EASE_FACTOR,
        ease + (0.1 - (5 - weight) * (0.08 + (5 - weight) * 0.02)),
    )

    if weight < PASSING_WEIGHT:
        new_interval = INITIAL_INTERVAL
    elif interval == INITIAL_INTERVAL:
        new_interval = FIRST_SUCCESS_INTERVAL
    else:
        new_interval = _round_half_up(interval * new_ease)

    return ScheduleUpdate(
        next_review=now + timedelta(days=new_interval),
        ease_factor=new_ease,
        interval=new_interval,
    )


def apply_outcome(card: Flashcard, correct: bool, time_spent_ms: float,
                  now: datetime = None) -> Flashcard:
    """
    Grade one answer and return the rescheduled card.
    The input card is left untouched; persisting the result is up to the caller.
    """
    now = now or utc_now()
    grade = grade_from_performance(correct, time_spent_ms)
    update = schedule_next(card, grade, now)

    return replace(
        card,
        last_reviewed=now,
        next_review=update.next_review,
        ease_factor=update.ease_factor,
        interval=update.interval,
        review_count=(card.review_count or 0) + 1,
        correct_count=(card.correct_count or 0) + (1 if correct else 0),
        incorrect_count=(card.incorrect_count or 0) + (0 if correct else 1),
    )
