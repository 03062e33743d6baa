from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List

from .cards import Deck, Flashcard
from ..config import (
    DEFAULT_CARD_REVIEW_LIMIT,
    MISS_WEIGHT,
    NEVER_REVIEWED_BONUS,
    RECENT_CARD_DAYS,
)
from ..utils.time import days_between


@dataclass(frozen=True)
class ReviewEntry:
    card: Flashcard
    deck_id: str
    score: float


def is_due(card: Flashcard, now: datetime) -> bool:
    return (
        card.never_reviewed
        or (card.next_review is not None and card.next_review <= now)
        or card.struggling
    )


def due_cards(deck: Deck, now: datetime) -> List[Flashcard]:
    return [card for card in deck.cards if is_due(card, now)]


def priority_score(card: Flashcard, now: datetime) -> float:
    score = 0.0

    if card.next_review is not None and card.next_review < now:
        score += days_between(now, card.next_review)

    if card.struggling:
        score += MISS_WEIGHT * ((card.incorrect_count or 0) - (card.correct_count or 0))

    if card.never_reviewed:
        score += NEVER_REVIEWED_BONUS

    age_days = days_between(now, card.created_at)
    if age_days < RECENT_CARD_DAYS:
        score += RECENT_CARD_DAYS - age_days

    return score


def build_daily_review(decks: Iterable[Deck], now: datetime,
                       max_cards: int = DEFAULT_CARD_REVIEW_LIMIT,
                       only_due: bool = True) -> List[ReviewEntry]:
    """
    Rank the due cards of every deck, highest priority first, and keep at
    most ``max_cards`` of them. Equal scores keep deck order.

    ``only_due=False`` ranks every card, for callers that have spaced
    repetition switched off.
    """
    entries = []
    for deck in decks:
        cards = due_cards(deck, now) if only_due else list(deck.cards)
        entries.extend(
            ReviewEntry(card=card, deck_id=deck.deck_id, score=priority_score(card, now))
            for card in cards
        )

    # sorted() is stable, also with reverse=True
    ranked = sorted(entries, key=lambda entry: entry.score, reverse=True)
    return ranked[:max(max_cards, 0)]
