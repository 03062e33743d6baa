from dataclasses import dataclass

INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
INITIAL_INTERVAL = 1        # days
FIRST_SUCCESS_INTERVAL = 6  # days
GRADE_WEIGHTS = {
    "AGAIN": 0,
    "HARD": 0.5,
    "GOOD": 1,
    "EASY": 1.3,
}
PASSING_WEIGHT = 0.5

# Answer time normalised against a 10s average answer
AVERAGE_ANSWER_MS = 10_000
HARD_ABOVE = 2
EASY_BELOW = 0.5

# Daily review priority
RECENT_CARD_DAYS = 7
NEVER_REVIEWED_BONUS = 5
MISS_WEIGHT = 10

DEFAULT_CARD_REVIEW_LIMIT = 20
MULTIPLE_DECKS = "multiple"


@dataclass(frozen=True)
class ReviewConfig:
    card_review_limit: int = DEFAULT_CARD_REVIEW_LIMIT
    enable_spaced_repetition: bool = True

    def __post_init__(self):
        if self.card_review_limit < 1:
            raise ValueError("card_review_limit must be at least 1")
