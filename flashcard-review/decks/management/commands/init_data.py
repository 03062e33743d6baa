import json
import os
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone
from decks.models import Card, Deck


class Command(BaseCommand):
    help = "Replace all decks with the sample decks from a JSON file"

    def add_arguments(self, parser):
        parser.add_argument(
            "--file", default="INITIAL_DECKS.json", help="JSON file name to load decks from"
        )

    def handle(self, *args, **options):
        file_name = options.get("file", "INITIAL_DECKS.json")
        if os.path.basename(file_name) != file_name or file_name in (os.curdir, os.pardir):
            raise CommandError(f"Not a plain file name: {file_name}")
        json_file_path = os.path.join(os.path.dirname(__file__), file_name)

        try:
            with open(json_file_path, encoding="utf-8") as json_file:
                data = json.load(json_file)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error loading data: {e}") from e

        now = timezone.now()
        with transaction.atomic():
            Deck.objects.all().delete()
            self.stdout.write(self.style.SUCCESS("All existing deck data has been deleted"))

            for item in data:
                deck = Deck.objects.create(
                    deck_id=item["id"], title=item["title"], created_at=now
                )
                Card.objects.bulk_create(
                    Card(
                        deck=deck,
                        card_id=card["id"],
                        question=card["question"],
                        answer=card["answer"],
                        created_at=now,
                        position=position,
                    )
                    for position, card in enumerate(item.get("cards", []))
                )

        self.stdout.write(
            self.style.SUCCESS(f"{len(data)} decks loaded successfully from {file_name}")
        )
