from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ..config import INITIAL_EASE_FACTOR, INITIAL_INTERVAL


@dataclass(frozen=True)
class Flashcard:
    card_id: str
    question: str
    answer: str
    created_at: datetime
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None
    review_count: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    ease_factor: float = INITIAL_EASE_FACTOR
    interval: int = INITIAL_INTERVAL

    @property
    def never_reviewed(self) -> bool:
        return self.last_reviewed is None

    @property
    def struggling(self) -> bool:
        # Lifetime misses outnumber hits
        return (self.incorrect_count or 0) > (self.correct_count or 0)


@dataclass(frozen=True)
class Deck:
    deck_id: str
    title: str
    created_at: datetime
    cards: tuple = field(default_factory=tuple)
    last_reviewed: Optional[datetime] = None

    def get_card(self, card_id: str) -> Optional[Flashcard]:
        for card in self.cards:
            if card.card_id == card_id:
                return card
        return None

    def with_card(self, card: Flashcard, reviewed_at: Optional[datetime] = None) -> "Deck":
        """
        Return a copy with ``card`` replacing the card of the same id.
        ``reviewed_at`` also rewrites the deck's ``last_reviewed``.
        """
        cards = tuple(card if c.card_id == card.card_id else c for c in self.cards)
        changes = {"cards": cards}
        if reviewed_at is not None:
            changes["last_reviewed"] = reviewed_at
        return replace(self, **changes)
