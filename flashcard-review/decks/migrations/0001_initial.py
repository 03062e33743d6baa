import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import decks.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Deck",
            fields=[
                ("deck_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("last_reviewed", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["created_at", "deck_id"],
            },
        ),
        migrations.CreateModel(
            name="ReviewPreferences",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "card_review_limit",
                    models.PositiveIntegerField(
                        default=decks.models.default_review_limit,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("enable_spaced_repetition", models.BooleanField(default=True)),
                ("show_answer_timer", models.BooleanField(default=False)),
            ],
        ),
        migrations.CreateModel(
            name="Card",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("card_id", models.CharField(max_length=64)),
                ("question", models.TextField()),
                ("answer", models.TextField()),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("position", models.PositiveIntegerField(default=0)),
                ("last_reviewed", models.DateTimeField(blank=True, null=True)),
                ("next_review", models.DateTimeField(blank=True, null=True)),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("correct_count", models.PositiveIntegerField(default=0)),
                ("incorrect_count", models.PositiveIntegerField(default=0)),
                ("ease_factor", models.FloatField(default=2.5)),
                ("interval", models.PositiveIntegerField(default=1)),
                (
                    "deck",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cards",
                        to="decks.deck",
                    ),
                ),
            ],
            options={
                "ordering": ["position", "id"],
                "unique_together": {("deck", "card_id")},
            },
        ),
    ]
