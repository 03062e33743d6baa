from datetime import datetime, timedelta, timezone

import pytest

from scheduler.domain.cards import Deck, Flashcard
from scheduler.exceptions import StorageError
from scheduler.services.reviews import sessions

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


def make_card(card_id, created_days_ago=30, **fields):
    return Flashcard(
        card_id=card_id,
        question=f"question {card_id}",
        answer=f"answer {card_id}",
        created_at=NOW - timedelta(days=created_days_ago),
        **fields,
    )


def make_deck(deck_id, cards):
    return Deck(
        deck_id=deck_id,
        title=f"deck {deck_id}",
        created_at=NOW - timedelta(days=60),
        cards=tuple(cards),
    )


class InMemoryDeckStore:
    def __init__(self, decks=()):
        self.decks = {deck.deck_id: deck for deck in decks}
        self.saved = []
        self.fail_load = False
        self.fail_saves = set()

    async def get_all_decks(self):
        if self.fail_load:
            raise StorageError("storage offline")
        return list(self.decks.values())

    async def get_deck(self, deck_id):
        return self.decks.get(deck_id)

    async def save_deck(self, deck):
        if deck.deck_id in self.fail_saves:
            raise StorageError(f"cannot write deck {deck.deck_id}")
        self.decks[deck.deck_id] = deck
        self.saved.append(deck)

    async def save_card(self, deck_id, card, reviewed_at):
        if deck_id in self.fail_saves:
            raise StorageError(f"cannot write deck {deck_id}")
        deck = self.decks.get(deck_id)
        if deck is None:
            raise StorageError(f"deck {deck_id} no longer exists")
        if deck.get_card(card.card_id) is None:
            raise StorageError(f"card {card.card_id} no longer exists in deck {deck_id}")
        deck = deck.with_card(card, reviewed_at=reviewed_at)
        self.decks[deck_id] = deck
        self.saved.append(deck)

    async def delete_deck(self, deck_id):
        self.decks.pop(deck_id, None)


class FakeClock:
    def __init__(self):
        self.seconds = 1000.0

    def advance(self, seconds):
        self.seconds += seconds

    def __call__(self):
        return self.seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_sessions():
    sessions.reset()
    yield
    sessions.reset()
