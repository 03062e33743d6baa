from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from scheduler.config import (
    DEFAULT_CARD_REVIEW_LIMIT,
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL,
    ReviewConfig,
)


class Deck(models.Model):
    deck_id = models.CharField(max_length=64, primary_key=True)
    title = models.CharField(max_length=200)
    created_at = models.DateTimeField(default=timezone.now)
    last_reviewed = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at", "deck_id"]

    def __str__(self):
        return self.title


class Card(models.Model):
    deck = models.ForeignKey(Deck, on_delete=models.CASCADE, related_name="cards")
    card_id = models.CharField(max_length=64)
    question = models.TextField()
    answer = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)
    # Insertion order within the deck
    position = models.PositiveIntegerField(default=0)

    last_reviewed = models.DateTimeField(null=True, blank=True)
    next_review = models.DateTimeField(null=True, blank=True)
    review_count = models.PositiveIntegerField(default=0)
    correct_count = models.PositiveIntegerField(default=0)
    incorrect_count = models.PositiveIntegerField(default=0)
    ease_factor = models.FloatField(default=INITIAL_EASE_FACTOR)
    interval = models.PositiveIntegerField(default=INITIAL_INTERVAL)

    class Meta:
        ordering = ["position", "id"]
        unique_together = (("deck", "card_id"),)

    def __str__(self):
        return self.question


def default_review_limit():
    return getattr(settings, "FLASHCARDS_CARD_REVIEW_LIMIT", DEFAULT_CARD_REVIEW_LIMIT)


class ReviewPreferences(models.Model):
    """Single-row store for the learner's review settings."""

    card_review_limit = models.PositiveIntegerField(
        default=default_review_limit, validators=[MinValueValidator(1)]
    )
    enable_spaced_repetition = models.BooleanField(default=True)
    show_answer_timer = models.BooleanField(default=False)

    @classmethod
    def load(cls):
        prefs, _ = cls.objects.get_or_create(pk=1)
        return prefs

    def to_config(self) -> ReviewConfig:
        return ReviewConfig(
            card_review_limit=self.card_review_limit,
            enable_spaced_repetition=self.enable_spaced_repetition,
        )
