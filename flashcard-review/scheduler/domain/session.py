import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..config import MULTIPLE_DECKS
from ..exceptions import InvariantViolation


@dataclass(frozen=True)
class ReviewResult:
    card_id: str
    correct: bool
    time_spent_ms: int


@dataclass(frozen=True)
class SessionSummary:
    session_id: str
    total_cards: int
    correct_cards: int
    accuracy: float
    failed_card_ids: Tuple[str, ...] = ()


@dataclass
class ReviewSession:
    card_ids: Tuple[str, ...]
    created_at: datetime
    deck_id: str = MULTIPLE_DECKS
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    results: Dict[str, ReviewResult] = field(default_factory=dict)
    completed_at: Optional[datetime] = None
    failed_card_ids: List[str] = field(default_factory=list)

    def next_card_id(self) -> Optional[str]:
        for card_id in self.card_ids:
            if card_id not in self.results:
                return card_id
        return None

    def record(self, result: ReviewResult):
        if result.card_id not in self.card_ids:
            raise InvariantViolation(f"card {result.card_id} is not part of session {self.session_id}")
        if result.card_id in self.results:
            raise InvariantViolation(f"card {result.card_id} was already graded in session {self.session_id}")
        self.results[result.card_id] = result

    def summary(self) -> SessionSummary:
        total = len(self.results)
        correct = sum(1 for r in self.results.values() if r.correct)
        accuracy = (correct / total) * 100 if total else 0
        return SessionSummary(
            session_id=self.session_id,
            total_cards=total,
            correct_cards=correct,
            accuracy=accuracy,
            failed_card_ids=tuple(self.failed_card_ids),
        )
