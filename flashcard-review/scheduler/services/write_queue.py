import asyncio
from collections import defaultdict

import structlog

from ..domain.cards import Flashcard

logger = structlog.get_logger()


class DeckWriteQueue:
    """
    Serializes writes per deck id: a write for a deck waits until the previous
    write to the same deck has finished. Writes to different decks do not wait
    on each other.
    """

    def __init__(self, store):
        self.store = store
        self._locks = defaultdict(asyncio.Lock)

    def busy(self, deck_id: str) -> bool:
        lock = self._locks.get(deck_id)
        return bool(lock and lock.locked())

    async def submit_card(self, deck_id: str, card: Flashcard, reviewed_at):
        async with self._locks[deck_id]:
            logger.debug("card_write_started", deck_id=deck_id, card_id=card.card_id)
            await self.store.save_card(deck_id, card, reviewed_at)
            logger.debug("card_write_finished", deck_id=deck_id, card_id=card.card_id)
