import uuid

import structlog
from django.core.management import call_command
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status, views
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .importer import CardImportError, parse_card_text
from .models import Card, Deck, ReviewPreferences
from .serializers import (
    BackupSerializer,
    CardInSerializer,
    CardSerializer,
    DeckInSerializer,
    DeckSerializer,
    ImportInSerializer,
    InitializeInSerializer,
    PreferencesSerializer,
)

logger = structlog.get_logger()


def new_id():
    return uuid.uuid4().hex


def create_deck(title, cards):
    with transaction.atomic():
        deck = Deck.objects.create(deck_id=new_id(), title=title)
        Card.objects.bulk_create(
            Card(
                deck=deck,
                card_id=new_id(),
                question=card["question"],
                answer=card["answer"],
                position=position,
            )
            for position, card in enumerate(cards)
        )
    return deck


def export_data():
    return {
        "decks": DeckSerializer(Deck.objects.prefetch_related("cards"), many=True).data,
        "preferences": PreferencesSerializer(ReviewPreferences.load()).data,
    }


@api_view(["POST"])
def initialize_data(request):
    s = InitializeInSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    file_name = s.validated_data["file"]
    logger.info("initialize_data", file=file_name)
    try:
        call_command("init_data", file=file_name)
    except Exception as e:
        logger.error("initialize_data_failed", file=file_name, error=str(e))
        return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(
        {"message": f"Data initialized successfully from {file_name}"},
        status=status.HTTP_200_OK,
    )


class DeckListView(views.APIView):
    def get(self, request):
        decks = Deck.objects.prefetch_related("cards")
        return Response(DeckSerializer(decks, many=True).data)

    def post(self, request):
        s = DeckInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        deck = create_deck(s.validated_data["title"], s.validated_data.get("cards", []))
        logger.info("deck_created", deck_id=deck.deck_id, card_count=deck.cards.count())
        return Response(DeckSerializer(deck).data, status=status.HTTP_201_CREATED)


class DeckDetailView(views.APIView):
    def get(self, request, deck_id):
        deck = get_object_or_404(Deck, deck_id=deck_id)
        return Response(DeckSerializer(deck).data)

    def patch(self, request, deck_id):
        deck = get_object_or_404(Deck, deck_id=deck_id)
        s = DeckSerializer(deck, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(s.data)

    def delete(self, request, deck_id):
        deck = get_object_or_404(Deck, deck_id=deck_id)
        deck.delete()
        logger.info("deck_deleted", deck_id=deck_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CardListView(views.APIView):
    def post(self, request, deck_id):
        deck = get_object_or_404(Deck, deck_id=deck_id)
        s = CardInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        position = deck.cards.count()
        card = Card.objects.create(
            deck=deck,
            card_id=new_id(),
            position=position,
            **s.validated_data,
        )
        logger.info("card_created", deck_id=deck_id, card_id=card.card_id)
        return Response(CardSerializer(card).data, status=status.HTTP_201_CREATED)


class CardDetailView(views.APIView):
    def patch(self, request, deck_id, card_id):
        card = get_object_or_404(Card, deck_id=deck_id, card_id=card_id)
        s = CardSerializer(card, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(s.data)

    def delete(self, request, deck_id, card_id):
        card = get_object_or_404(Card, deck_id=deck_id, card_id=card_id)
        card.delete()
        logger.info("card_deleted", deck_id=deck_id, card_id=card_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class DeckImportView(views.APIView):
    def post(self, request):
        s = ImportInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            imported = parse_card_text(s.validated_data["text"])
        except CardImportError as exc:
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        deck = create_deck(
            s.validated_data.get("title") or imported.title,
            [{"question": t.term, "answer": t.definition} for t in imported.terms],
        )
        logger.info("deck_imported", deck_id=deck.deck_id, card_count=len(imported.terms))
        return Response(DeckSerializer(deck).data, status=status.HTTP_201_CREATED)


class PreferencesView(views.APIView):
    def get(self, request):
        return Response(PreferencesSerializer(ReviewPreferences.load()).data)

    def patch(self, request):
        s = PreferencesSerializer(ReviewPreferences.load(), data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        logger.info("preferences_updated", **s.validated_data)
        return Response(s.data)


class ExportView(views.APIView):
    def get(self, request):
        return Response(export_data())


class ClearDataView(views.APIView):
    def delete(self, request):
        with transaction.atomic():
            deleted, _ = Deck.objects.all().delete()
            ReviewPreferences.objects.all().delete()
        logger.info("data_cleared", deleted_rows=deleted)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ImportDataView(views.APIView):
    """Restore a document produced by the export endpoint."""

    def post(self, request):
        s = BackupSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        decks = s.validated_data.get("decks")
        preferences = s.validated_data.get("preferences")

        with transaction.atomic():
            if decks is not None:
                Deck.objects.all().delete()
                for item in decks:
                    cards = item.pop("cards")
                    deck = Deck.objects.create(**item)
                    Card.objects.bulk_create(
                        Card(deck=deck, position=position, **card)
                        for position, card in enumerate(cards)
                    )
            if preferences is not None:
                ReviewPreferences.objects.all().delete()
                ReviewPreferences.objects.create(pk=1, **preferences)

        logger.info(
            "data_imported",
            deck_count=len(decks) if decks is not None else None,
            preferences=preferences is not None,
        )
        return Response(export_data(), status=status.HTTP_201_CREATED)
