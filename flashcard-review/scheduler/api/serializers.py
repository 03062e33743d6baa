from rest_framework import serializers

from ..domain.enums import SessionState


class DueQuerySerializer(serializers.Serializer):
    at = serializers.DateTimeField(required=False)  # ISO-8601, defaults to now


class DailyReviewQuerySerializer(serializers.Serializer):
    at = serializers.DateTimeField(required=False)
    limit = serializers.IntegerField(min_value=1, required=False)


class SessionStartSerializer(serializers.Serializer):
    deck_id = serializers.CharField(max_length=64, required=False)  # omit for the daily review


class GradeInSerializer(serializers.Serializer):
    correct = serializers.BooleanField()
    card_id = serializers.CharField(max_length=64, required=False)
    time_spent_ms = serializers.IntegerField(min_value=0, required=False)


def card_schedule_data(card):
    return {
        "card_id": card.card_id,
        "last_reviewed": card.last_reviewed.isoformat() if card.last_reviewed else None,
        "next_review": card.next_review.isoformat() if card.next_review else None,
        "review_count": card.review_count,
        "correct_count": card.correct_count,
        "incorrect_count": card.incorrect_count,
        "ease_factor": card.ease_factor,
        "interval": card.interval,
    }


def summary_data(summary):
    return {
        "session_id": summary.session_id,
        "total_cards": summary.total_cards,
        "correct_cards": summary.correct_cards,
        "accuracy": summary.accuracy,
        "failed_card_ids": list(summary.failed_card_ids),
    }


def session_data(controller):
    answered, total = controller.progress
    data = {
        "session_id": controller.session.session_id if controller.session else None,
        "deck_id": controller.session.deck_id if controller.session else None,
        "state": controller.state.value,
        "answered": answered,
        "total": total,
        "card": None,
    }
    card = controller.current_card
    if card is not None:
        data["card"] = {
            "card_id": card.card_id,
            "question": card.question,
            "answer": card.answer if controller.state == SessionState.ANSWER_SHOWN else None,
        }
    if controller.state == SessionState.FINISHED:
        data["summary"] = summary_data(controller.summary)
    return data
