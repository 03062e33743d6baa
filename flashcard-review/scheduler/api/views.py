from asgiref.sync import async_to_sync
from rest_framework import views, status
from rest_framework.response import Response
import structlog
import uuid
from django.db import DatabaseError
from decks.models import ReviewPreferences
from ..data.repos import DjangoDeckStore
from ..domain.enums import GRADE_LABELS, SessionState
from ..domain.logic import grade_from_performance
from ..domain.selection import build_daily_review, due_cards
from ..exceptions import DeckNotFound, InvariantViolation, StorageError
from ..services.reviews import sessions
from ..utils.time import utc_now
from .serializers import (
    DailyReviewQuerySerializer,
    DueQuerySerializer,
    GradeInSerializer,
    SessionStartSerializer,
    card_schedule_data,
    session_data,
)

base_logger = structlog.get_logger()


def load_config():
    try:
        return ReviewPreferences.load().to_config()
    except DatabaseError as exc:
        raise StorageError(str(exc)) from exc


def storage_unavailable(logger, exc):
    logger.error("storage_error", error=str(exc))
    return Response(
        {"error": "Could not load your decks. Please try again.", "retry": True},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


class DueCardsView(views.APIView):
    def get(self, request, deck_id):
        # Create a unique request_id
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        at = qs.validated_data.get("at") or utc_now()

        try:
            deck = async_to_sync(DjangoDeckStore().get_deck)(deck_id)
        except StorageError as exc:
            return storage_unavailable(logger, exc)
        if deck is None:
            return Response({"error": "Deck not found"}, status=status.HTTP_404_NOT_FOUND)

        results = [card.card_id for card in due_cards(deck, at)]

        logger.info(
            "due_cards_api_response",
            deck_id=deck_id,
            at_utc=at.isoformat(),
            card_count=len(results),
        )

        return Response(
            {
                "deck_id": deck_id,
                "at_utc": at.isoformat(),
                "card_ids": results,
            }
        )


class DailyReviewView(views.APIView):
    def get(self, request):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        qs = DailyReviewQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        at = qs.validated_data.get("at") or utc_now()
        try:
            config = load_config()
            decks = async_to_sync(DjangoDeckStore().get_all_decks)()
        except StorageError as exc:
            return storage_unavailable(logger, exc)

        limit = qs.validated_data.get("limit") or config.card_review_limit
        entries = build_daily_review(
            decks, at, max_cards=limit, only_due=config.enable_spaced_repetition
        )

        logger.info(
            "daily_review_api_response",
            at_utc=at.isoformat(),
            limit=limit,
            card_count=len(entries),
        )

        return Response(
            {
                "at_utc": at.isoformat(),
                "limit": limit,
                "cards": [
                    {
                        "deck_id": entry.deck_id,
                        "card_id": entry.card.card_id,
                        "question": entry.card.question,
                        "score": round(entry.score, 4),
                    }
                    for entry in entries
                ],
            }
        )


class ReviewSessionListView(views.APIView):
    def post(self, request):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        s = SessionStartSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        deck_id = s.validated_data.get("deck_id")

        try:
            config = load_config()
            controller = async_to_sync(sessions.start)(config, deck_id=deck_id)
        except StorageError as exc:
            return storage_unavailable(logger, exc)
        except DeckNotFound:
            return Response({"error": "Deck not found"}, status=status.HTTP_404_NOT_FOUND)

        if controller.state == SessionState.NOTHING_DUE:
            logger.info("review_session_api_response", state=controller.state.value)
            return Response(
                {"session_id": None, "state": controller.state.value, "card": None},
                status=status.HTTP_200_OK,
            )

        data = session_data(controller)
        logger.info(
            "review_session_api_response",
            session_id=data["session_id"],
            deck_id=data["deck_id"],
            state=data["state"],
            total=data["total"],
        )
        return Response(data, status=status.HTTP_201_CREATED)


class ReviewSessionDetailView(views.APIView):
    def get(self, request, session_id):
        controller = sessions.get(session_id)
        if controller is None:
            return Response({"error": "Session not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(session_data(controller))

    def delete(self, request, session_id):
        if sessions.get(session_id) is None:
            return Response({"error": "Session not found"}, status=status.HTTP_404_NOT_FOUND)
        sessions.discard(session_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class FlipView(views.APIView):
    def post(self, request, session_id):
        controller = sessions.get(session_id)
        if controller is None:
            return Response({"error": "Session not found"}, status=status.HTTP_404_NOT_FOUND)
        try:
            controller.flip()
        except InvariantViolation as exc:
            return Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(session_data(controller))


class GradeView(views.APIView):
    def post(self, request, session_id):
        request_id = str(uuid.uuid4())
        logger = base_logger.bind(request_id=request_id)

        controller = sessions.get(session_id)
        if controller is None:
            return Response({"error": "Session not found"}, status=status.HTTP_404_NOT_FOUND)

        s = GradeInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            updated = async_to_sync(controller.grade)(
                s.validated_data["correct"],
                card_id=s.validated_data.get("card_id"),
                time_spent_ms=s.validated_data.get("time_spent_ms"),
            )
        except InvariantViolation as exc:
            return Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)

        result = controller.session.results[updated.card_id]
        data = session_data(controller)
        data["graded"] = card_schedule_data(updated)
        data["graded"]["grade_label"] = GRADE_LABELS[
            grade_from_performance(result.correct, result.time_spent_ms)
        ]

        logger.info(
            "grade_api_response",
            session_id=session_id,
            card_id=updated.card_id,
            interval_days=updated.interval,
            state=data["state"],
        )
        if controller.state == SessionState.FINISHED:
            # Finished sessions are dropped once their summary is served
            sessions.discard(session_id)
        return Response(data, status=status.HTTP_201_CREATED)
