import os

from rest_framework import serializers

from scheduler.config import INITIAL_EASE_FACTOR, INITIAL_INTERVAL, MIN_EASE_FACTOR
from .models import Card, Deck, ReviewPreferences


class CardSerializer(serializers.ModelSerializer):
    class Meta:
        model = Card
        fields = [
            "card_id",
            "question",
            "answer",
            "created_at",
            "last_reviewed",
            "next_review",
            "review_count",
            "correct_count",
            "incorrect_count",
            "ease_factor",
            "interval",
        ]
        read_only_fields = [
            "card_id",
            "created_at",
            "last_reviewed",
            "next_review",
            "review_count",
            "correct_count",
            "incorrect_count",
            "ease_factor",
            "interval",
        ]


class DeckSerializer(serializers.ModelSerializer):
    cards = CardSerializer(many=True, read_only=True)

    class Meta:
        model = Deck
        fields = ["deck_id", "title", "created_at", "last_reviewed", "cards"]
        read_only_fields = ["deck_id", "created_at", "last_reviewed", "cards"]


class CardInSerializer(serializers.Serializer):
    question = serializers.CharField()
    answer = serializers.CharField()


class DeckInSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    cards = CardInSerializer(many=True, required=False)


class ImportInSerializer(serializers.Serializer):
    text = serializers.CharField(trim_whitespace=False)
    title = serializers.CharField(max_length=200, required=False)


class PreferencesSerializer(serializers.ModelSerializer):
    class Meta:
        model = ReviewPreferences
        fields = ["card_review_limit", "enable_spaced_repetition", "show_answer_timer"]
        extra_kwargs = {"card_review_limit": {"min_value": 1}}


class InitializeInSerializer(serializers.Serializer):
    file = serializers.CharField(max_length=200, default="INITIAL_DECKS.json")

    def validate_file(self, value):
        # Seed files live next to the init_data command
        if os.path.basename(value) != value or value in (os.curdir, os.pardir):
            raise serializers.ValidationError("Must be a plain file name.")
        return value


class CardBackupSerializer(serializers.Serializer):
    card_id = serializers.CharField(max_length=64)
    question = serializers.CharField()
    answer = serializers.CharField()
    created_at = serializers.DateTimeField()
    last_reviewed = serializers.DateTimeField(allow_null=True, default=None)
    next_review = serializers.DateTimeField(allow_null=True, default=None)
    review_count = serializers.IntegerField(min_value=0, default=0)
    correct_count = serializers.IntegerField(min_value=0, default=0)
    incorrect_count = serializers.IntegerField(min_value=0, default=0)
    ease_factor = serializers.FloatField(min_value=MIN_EASE_FACTOR, default=INITIAL_EASE_FACTOR)
    interval = serializers.IntegerField(min_value=1, default=INITIAL_INTERVAL)


class DeckBackupSerializer(serializers.Serializer):
    deck_id = serializers.CharField(max_length=64)
    title = serializers.CharField(max_length=200)
    created_at = serializers.DateTimeField()
    last_reviewed = serializers.DateTimeField(allow_null=True, default=None)
    cards = CardBackupSerializer(many=True, default=list)

    def validate_cards(self, cards):
        ids = [card["card_id"] for card in cards]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Card ids must be unique within a deck.")
        return cards


class BackupSerializer(serializers.Serializer):
    """The document written by the export endpoint."""

    decks = DeckBackupSerializer(many=True, required=False)
    preferences = PreferencesSerializer(required=False)

    def validate_decks(self, decks):
        ids = [deck["deck_id"] for deck in decks]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Deck ids must be unique.")
        return decks
