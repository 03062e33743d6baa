from enum import Enum, IntEnum

from ..config import GRADE_WEIGHTS


class Grade(IntEnum):
    AGAIN = 0
    HARD = 1
    GOOD = 2
    EASY = 3

    @property
    def weight(self) -> float:
        return GRADE_WEIGHTS[self.name]


GRADE_LABELS = {
    Grade.AGAIN: "Again",
    Grade.HARD: "Hard",
    Grade.GOOD: "Good",
    Grade.EASY: "Easy",
}


class SessionState(str, Enum):
    LOADING = "loading"
    QUESTION_SHOWN = "question_shown"
    ANSWER_SHOWN = "answer_shown"
    FINISHED = "finished"
    NOTHING_DUE = "nothing_due"
    FAILED = "failed"
