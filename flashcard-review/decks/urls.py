from django.urls import path
from .views import (
    CardDetailView,
    CardListView,
    ClearDataView,
    DeckDetailView,
    DeckImportView,
    DeckListView,
    ExportView,
    ImportDataView,
    PreferencesView,
    initialize_data,
)

urlpatterns = [
    path("decks", DeckListView.as_view(), name="decks"),
    path("decks/import", DeckImportView.as_view(), name="deck-import"),
    path("decks/<str:deck_id>", DeckDetailView.as_view(), name="deck"),
    path("decks/<str:deck_id>/cards", CardListView.as_view(), name="cards"),
    path("decks/<str:deck_id>/cards/<str:card_id>", CardDetailView.as_view(), name="card"),
    path("preferences", PreferencesView.as_view(), name="preferences"),
    path("export", ExportView.as_view(), name="export"),
    path("import-data", ImportDataView.as_view(), name="import-data"),
    path("data", ClearDataView.as_view(), name="clear-data"),
    path("initialize", initialize_data, name="initialize"),
]
