from datetime import datetime
from typing import List, Optional, Protocol

from asgiref.sync import sync_to_async
from django.db import DatabaseError, transaction

from decks.models import Card as CardRecord, Deck as DeckRecord
from ..domain.cards import Deck, Flashcard
from ..exceptions import StorageError


class DeckStore(Protocol):
    async def get_all_decks(self) -> List[Deck]: ...

    async def get_deck(self, deck_id: str) -> Optional[Deck]: ...

    async def save_deck(self, deck: Deck) -> None: ...

    async def save_card(self, deck_id: str, card: Flashcard, reviewed_at: datetime) -> None: ...

    async def delete_deck(self, deck_id: str) -> None: ...


def card_from_record(record: CardRecord) -> Flashcard:
    return Flashcard(
        card_id=record.card_id,
        question=record.question,
        answer=record.answer,
        created_at=record.created_at,
        last_reviewed=record.last_reviewed,
        next_review=record.next_review,
        review_count=record.review_count,
        correct_count=record.correct_count,
        incorrect_count=record.incorrect_count,
        ease_factor=record.ease_factor,
        interval=record.interval,
    )


def deck_from_record(record: DeckRecord) -> Deck:
    return Deck(
        deck_id=record.deck_id,
        title=record.title,
        created_at=record.created_at,
        last_reviewed=record.last_reviewed,
        cards=tuple(card_from_record(c) for c in record.cards.all()),
    )


def load_decks() -> List[Deck]:
    return [deck_from_record(d) for d in DeckRecord.objects.prefetch_related("cards")]


def load_deck(deck_id: str) -> Optional[Deck]:
    record = DeckRecord.objects.prefetch_related("cards").filter(deck_id=deck_id).first()
    return deck_from_record(record) if record else None


def write_deck(deck: Deck):
    """
    Upsert a deck and make its stored cards match ``deck.cards`` exactly.
    """
    with transaction.atomic():
        record, _ = DeckRecord.objects.update_or_create(
            deck_id=deck.deck_id,
            defaults={
                "title": deck.title,
                "created_at": deck.created_at,
                "last_reviewed": deck.last_reviewed,
            },
        )
        keep = [card.card_id for card in deck.cards]
        record.cards.exclude(card_id__in=keep).delete()
        for position, card in enumerate(deck.cards):
            CardRecord.objects.update_or_create(
                deck=record,
                card_id=card.card_id,
                defaults={
                    "question": card.question,
                    "answer": card.answer,
                    "created_at": card.created_at,
                    "position": position,
                    "last_reviewed": card.last_reviewed,
                    "next_review": card.next_review,
                    "review_count": card.review_count,
                    "correct_count": card.correct_count,
                    "incorrect_count": card.incorrect_count,
                    "ease_factor": card.ease_factor,
                    "interval": card.interval,
                },
            )


def write_card(deck_id: str, card: Flashcard, reviewed_at: datetime):
    """
    Store one graded card and stamp its deck's ``last_reviewed``. Other cards
    of the deck are left as they are in the database.
    """
    with transaction.atomic():
        if not DeckRecord.objects.filter(deck_id=deck_id).update(last_reviewed=reviewed_at):
            raise StorageError(f"deck {deck_id} no longer exists")
        updated = CardRecord.objects.filter(deck_id=deck_id, card_id=card.card_id).update(
            last_reviewed=card.last_reviewed,
            next_review=card.next_review,
            review_count=card.review_count,
            correct_count=card.correct_count,
            incorrect_count=card.incorrect_count,
            ease_factor=card.ease_factor,
            interval=card.interval,
        )
        if not updated:
            # Roll back the deck stamp as well
            raise StorageError(f"card {card.card_id} no longer exists in deck {deck_id}")


def remove_deck(deck_id: str):
    DeckRecord.objects.filter(deck_id=deck_id).delete()


class DjangoDeckStore:
    """DeckStore over the ``decks`` tables. Database errors surface as StorageError."""

    async def _run(self, func, *args):
        try:
            return await sync_to_async(func)(*args)
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc

    async def get_all_decks(self) -> List[Deck]:
        return await self._run(load_decks)

    async def get_deck(self, deck_id: str) -> Optional[Deck]:
        return await self._run(load_deck, deck_id)

    async def save_deck(self, deck: Deck) -> None:
        await self._run(write_deck, deck)

    async def save_card(self, deck_id: str, card: Flashcard, reviewed_at: datetime) -> None:
        await self._run(write_card, deck_id, card, reviewed_at)

    async def delete_deck(self, deck_id: str) -> None:
        await self._run(remove_deck, deck_id)
