import time
from typing import Dict, Optional

import structlog

from ..config import MULTIPLE_DECKS, ReviewConfig
from ..domain.cards import Deck, Flashcard
from ..domain.enums import SessionState
from ..domain.logic import apply_outcome
from ..domain.selection import ReviewEntry, build_daily_review
from ..domain.session import ReviewResult, ReviewSession, SessionSummary
from ..exceptions import DeckNotFound, InvariantViolation, StorageError
from ..utils.time import utc_now
from .write_queue import DeckWriteQueue

logger = structlog.get_logger()


class ReviewSessionController:
    """
    Drives one daily review: builds the session once, shows one card at a
    time, records each grade and persists the graded card.

    The card list is fixed when the session starts. The next card is always
    the first listed card without a result; due status is never re-evaluated
    mid-session.
    """

    def __init__(self, store, config: ReviewConfig = None,
                 write_queue: DeckWriteQueue = None,
                 clock=time.monotonic, now=utc_now, deck_id: str = None):
        self.store = store
        self.deck_id = deck_id
        self.config = config or ReviewConfig()
        self.write_queue = write_queue or DeckWriteQueue(store)
        self._clock = clock
        self._now = now

        self.state = SessionState.LOADING
        self.session: Optional[ReviewSession] = None
        self.current_card: Optional[Flashcard] = None
        self._decks: Dict[str, Deck] = {}
        self._owners: Dict[str, str] = {}
        self._shown_at = None

    @property
    def progress(self):
        if self.session is None:
            return 0, 0
        return len(self.session.results), len(self.session.card_ids)

    async def start(self) -> Optional[ReviewSession]:
        self.state = SessionState.LOADING
        try:
            if self.deck_id is None:
                decks = await self.store.get_all_decks()
            else:
                deck = await self.store.get_deck(self.deck_id)
                if deck is None:
                    self.state = SessionState.FAILED
                    raise DeckNotFound(self.deck_id)
                decks = [deck]
        except StorageError as exc:
            self.state = SessionState.FAILED
            logger.error("session_load_failed", deck_id=self.deck_id, error=str(exc))
            raise

        now = self._now()
        self._decks = {deck.deck_id: deck for deck in decks}
        if self.deck_id is None:
            entries = build_daily_review(
                decks,
                now,
                max_cards=self.config.card_review_limit,
                only_due=self.config.enable_spaced_repetition,
            )
        else:
            # Quiz over one deck: every card, in deck order
            entries = [ReviewEntry(card, self.deck_id, 0.0) for card in decks[0].cards]

        card_ids = []
        self._owners = {}
        for entry in entries:
            card_id = entry.card.card_id
            if card_id in self._owners:
                # Card ids are only unique per deck; keep the higher ranked one
                logger.warning("duplicate_card_id_skipped",
                    card_id=card_id,
                    deck_id=entry.deck_id,
                    kept_deck_id=self._owners[card_id],
                )
                continue
            self._owners[card_id] = entry.deck_id
            card_ids.append(card_id)

        if not card_ids:
            self.state = SessionState.NOTHING_DUE
            logger.info("session_nothing_due", deck_count=len(decks))
            return None

        self.session = ReviewSession(
            card_ids=tuple(card_ids),
            created_at=now,
            deck_id=self.deck_id or MULTIPLE_DECKS,
        )
        logger.info("session_started",
            session_id=self.session.session_id,
            deck_id=self.session.deck_id,
            card_count=len(card_ids),
            deck_count=len(decks),
            spaced_repetition=self.config.enable_spaced_repetition,
        )
        self._show_next()
        return self.session

    def flip(self) -> SessionState:
        if self.state == SessionState.QUESTION_SHOWN:
            self.state = SessionState.ANSWER_SHOWN
        elif self.state == SessionState.ANSWER_SHOWN:
            self.state = SessionState.QUESTION_SHOWN
        else:
            raise InvariantViolation(f"cannot flip a card in state {self.state.value}")
        return self.state

    async def grade(self, correct: bool, card_id: str = None,
                    time_spent_ms: int = None) -> Flashcard:
        """
        Grade the card on show and move on. Returns the rescheduled card.

        Raises InvariantViolation, leaving the session untouched, when the
        answer is not showing or ``card_id`` is not the card on show.
        """
        self._check_gradable(card_id)
        card = self.current_card
        if time_spent_ms is None:
            time_spent_ms = int((self._clock() - self._shown_at) * 1000)

        logger.info("review_received",
            session_id=self.session.session_id,
            card_id=card.card_id,
            correct=correct,
            time_spent_ms=time_spent_ms,
        )

        now = self._now()
        deck_id = self._owners[card.card_id]
        updated = apply_outcome(card, correct, time_spent_ms, now)
        self.session.record(ReviewResult(card.card_id, correct, time_spent_ms))

        try:
            await self.write_queue.submit_card(deck_id, updated, now)
        except StorageError as exc:
            # Keep the last persisted version in memory and carry on unsynced
            self.session.failed_card_ids.append(card.card_id)
            logger.warning("card_persist_failed",
                session_id=self.session.session_id,
                deck_id=deck_id,
                card_id=card.card_id,
                error=str(exc),
            )
        else:
            self._decks[deck_id] = self._decks[deck_id].with_card(updated, reviewed_at=now)
            logger.info("review_scheduled",
                session_id=self.session.session_id,
                deck_id=deck_id,
                card_id=card.card_id,
                interval_days=updated.interval,
                ease_factor=round(updated.ease_factor, 4),
                next_review_utc=updated.next_review.isoformat(),
            )

        self._show_next()
        return updated

    @property
    def summary(self) -> SessionSummary:
        if self.state != SessionState.FINISHED:
            raise InvariantViolation(f"no summary in state {self.state.value}")
        return self.session.summary()

    def abandon(self):
        if self.session is not None and self.state != SessionState.FINISHED:
            answered, total = self.progress
            logger.info("session_abandoned",
                session_id=self.session.session_id,
                answered=answered,
                total=total,
            )
        self.current_card = None
        self.session = None
        self.state = SessionState.LOADING

    def _check_gradable(self, card_id):
        if self.state != SessionState.ANSWER_SHOWN:
            reason = f"cannot grade in state {self.state.value}"
        elif card_id is None or card_id == self.current_card.card_id:
            return
        elif card_id in self.session.results:
            reason = f"card {card_id} was already graded"
        elif card_id not in self.session.card_ids:
            reason = f"card {card_id} is not part of this session"
        else:
            reason = f"card {card_id} is not the card on show"

        logger.warning("grade_rejected",
            session_id=self.session.session_id if self.session else None,
            card_id=card_id,
            reason=reason,
        )
        raise InvariantViolation(reason)

    def _show_next(self):
        next_id = self.session.next_card_id()
        if next_id is None:
            self.current_card = None
            self.state = SessionState.FINISHED
            self.session.completed_at = self._now()
            summary = self.session.summary()
            logger.info("session_finished",
                session_id=summary.session_id,
                total_cards=summary.total_cards,
                correct_cards=summary.correct_cards,
                accuracy=summary.accuracy,
                failed_writes=len(summary.failed_card_ids),
            )
            return

        self.current_card = self._decks[self._owners[next_id]].get_card(next_id)
        self.state = SessionState.QUESTION_SHOWN
        self._shown_at = self._clock()


class SessionRegistry:
    """Holds the one active review session for the HTTP API."""

    def __init__(self, store=None):
        self._store = store
        self._write_queue = None
        self._active: Optional[ReviewSessionController] = None

    @property
    def store(self):
        if self._store is None:
            from ..data.repos import DjangoDeckStore
            self._store = DjangoDeckStore()
        return self._store

    @property
    def write_queue(self) -> DeckWriteQueue:
        if self._write_queue is None:
            self._write_queue = DeckWriteQueue(self.store)
        return self._write_queue

    async def start(self, config: ReviewConfig, deck_id: str = None) -> ReviewSessionController:
        self.discard()
        controller = ReviewSessionController(
            self.store, config, self.write_queue, deck_id=deck_id
        )
        await controller.start()
        if controller.session is not None:
            self._active = controller
        return controller

    def get(self, session_id: str) -> Optional[ReviewSessionController]:
        active = self._active
        if active is not None and active.session is not None \
                and active.session.session_id == session_id:
            return active
        return None

    def discard(self, session_id: str = None):
        active = self._active
        if active is None:
            return
        if session_id is None or (active.session and active.session.session_id == session_id):
            active.abandon()
            self._active = None

    def reset(self):
        self._active = None
        self._write_queue = None


sessions = SessionRegistry()
