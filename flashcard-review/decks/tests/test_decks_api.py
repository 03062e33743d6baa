import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.urls import reverse

from decks.models import Card, Deck, ReviewPreferences


def create_deck(client, title="Spanish", cards=None):
    payload = {"title": title, "cards": cards or []}
    return client.post(reverse("decks"), data=payload, content_type="application/json")


@pytest.mark.django_db
def test_create_and_list_decks(client):
    resp = create_deck(client, cards=[{"question": "Hola", "answer": "Hello"}])
    assert resp.status_code == 201
    deck = resp.json()
    assert deck["title"] == "Spanish"
    assert deck["cards"][0]["question"] == "Hola"
    assert deck["cards"][0]["ease_factor"] == 2.5
    assert deck["cards"][0]["interval"] == 1

    listed = client.get(reverse("decks")).json()
    assert [d["deck_id"] for d in listed] == [deck["deck_id"]]


@pytest.mark.django_db
def test_add_update_and_delete_card(client):
    deck_id = create_deck(client).json()["deck_id"]
    url = reverse("cards", kwargs={"deck_id": deck_id})

    first = client.post(url, data={"question": "Uno", "answer": "One"}, content_type="application/json")
    second = client.post(url, data={"question": "Dos", "answer": "Two"}, content_type="application/json")
    assert first.status_code == 201
    card_id = second.json()["card_id"]
    assert Card.objects.get(card_id=card_id).position == 1

    card_url = reverse("card", kwargs={"deck_id": deck_id, "card_id": card_id})
    patched = client.patch(card_url, data={"answer": "2", "interval": 99}, content_type="application/json")
    assert patched.json()["answer"] == "2"
    assert patched.json()["interval"] == 1

    assert client.delete(card_url).status_code == 204
    assert Card.objects.filter(deck_id=deck_id).count() == 1


@pytest.mark.django_db
def test_rename_and_delete_deck(client):
    deck_id = create_deck(client, cards=[{"question": "q", "answer": "a"}]).json()["deck_id"]
    url = reverse("deck", kwargs={"deck_id": deck_id})

    assert client.patch(url, data={"title": "Renamed"}, content_type="application/json").json()["title"] == "Renamed"
    assert client.delete(url).status_code == 204
    assert client.get(url).status_code == 404
    assert not Card.objects.exists()


@pytest.mark.django_db
def test_import_deck(client):
    resp = client.post(
        reverse("deck-import"),
        data={"text": "perro\tdog\ngato\tcat"},
        content_type="application/json",
    )
    assert resp.status_code == 201
    deck = resp.json()
    assert deck["title"] == "Imported Deck (perro...)"
    assert [(c["question"], c["answer"]) for c in deck["cards"]] == [("perro", "dog"), ("gato", "cat")]


@pytest.mark.django_db
def test_import_rejects_unusable_text(client):
    resp = client.post(reverse("deck-import"), data={"text": "just one line"}, content_type="application/json")
    assert resp.status_code == 400
    assert "valid flashcards" in resp.json()["error"]
    assert not Deck.objects.exists()


@pytest.mark.django_db
def test_preferences(client):
    url = reverse("preferences")
    assert client.get(url).json() == {
        "card_review_limit": 20,
        "enable_spaced_repetition": True,
        "show_answer_timer": False,
    }

    resp = client.patch(url, data={"card_review_limit": 5, "enable_spaced_repetition": False},
                        content_type="application/json")
    assert resp.status_code == 200
    config = ReviewPreferences.load().to_config()
    assert config.card_review_limit == 5
    assert config.enable_spaced_repetition is False

    bad = client.patch(url, data={"card_review_limit": 0}, content_type="application/json")
    assert bad.status_code == 400


@pytest.mark.django_db
def test_export_and_clear(client):
    create_deck(client, cards=[{"question": "q", "answer": "a"}])
    client.patch(reverse("preferences"), data={"card_review_limit": 7}, content_type="application/json")

    exported = client.get(reverse("export")).json()
    assert len(exported["decks"]) == 1
    assert exported["preferences"]["card_review_limit"] == 7

    assert client.delete(reverse("clear-data")).status_code == 204
    assert not Deck.objects.exists()
    assert ReviewPreferences.load().card_review_limit == 20


@pytest.mark.django_db
def test_init_data_loads_sample_decks(client):
    create_deck(client, title="Mine")

    call_command("init_data")

    assert Deck.objects.count() == 4
    assert Card.objects.count() == 12
    assert not Deck.objects.filter(title="Mine").exists()
    capitals = Deck.objects.get(deck_id="world-capitals")
    assert [c.card_id for c in capitals.cards.all()] == ["capital-1", "capital-2", "capital-3"]


@pytest.mark.django_db
def test_initialize_endpoint(client):
    resp = client.post(reverse("initialize"), data={}, content_type="application/json")
    assert resp.status_code == 200
    assert Deck.objects.count() == 4

    missing = client.post(reverse("initialize"), data={"file": "nope.json"}, content_type="application/json")
    assert missing.status_code == 500


@pytest.mark.django_db
@pytest.mark.parametrize("file_name", ["../settings.py", "/etc/passwd", "sub/INITIAL_DECKS.json", ".."])
def test_initialize_rejects_paths(client, file_name):
    create_deck(client, title="Mine")

    resp = client.post(reverse("initialize"), data={"file": file_name}, content_type="application/json")

    assert resp.status_code == 400
    assert "file" in resp.json()
    assert Deck.objects.filter(title="Mine").exists()


@pytest.mark.django_db
def test_init_data_command_rejects_paths():
    with pytest.raises(CommandError, match="Not a plain file name"):
        call_command("init_data", file="../../settings.py")


@pytest.mark.django_db
def test_import_data_restores_an_export(client):
    deck_id = create_deck(client, cards=[{"question": "q1", "answer": "a1"}, {"question": "q2", "answer": "a2"}]).json()["deck_id"]
    Card.objects.filter(deck_id=deck_id, position=0).update(review_count=3, ease_factor=1.9, interval=4)
    client.patch(reverse("preferences"), data={"card_review_limit": 7, "enable_spaced_repetition": False}, content_type="application/json")
    exported = client.get(reverse("export")).json()

    client.delete(reverse("clear-data"))
    resp = client.post(reverse("import-data"), data=exported, content_type="application/json")

    assert resp.status_code == 201
    assert client.get(reverse("export")).json() == exported
    assert [c.question for c in Card.objects.filter(deck_id=deck_id)] == ["q1", "q2"]
    assert ReviewPreferences.load().card_review_limit == 7


@pytest.mark.django_db
def test_import_data_replaces_only_sections_present(client):
    create_deck(client, title="Old")
    client.patch(reverse("preferences"), data={"card_review_limit": 5}, content_type="application/json")

    backup = {
        "decks": [{
            "deck_id": "d1",
            "title": "New",
            "created_at": "2026-01-01T00:00:00Z",
            "cards": [{"card_id": "c1", "question": "q", "answer": "a", "created_at": "2026-01-01T00:00:00Z"}],
        }],
    }
    resp = client.post(reverse("import-data"), data=backup, content_type="application/json")

    assert resp.status_code == 201
    assert list(Deck.objects.values_list("title", flat=True)) == ["New"]
    card = Card.objects.get(deck_id="d1", card_id="c1")
    assert card.ease_factor == 2.5
    assert card.interval == 1
    assert ReviewPreferences.load().card_review_limit == 5


@pytest.mark.django_db
def test_import_data_rejects_bad_documents(client):
    create_deck(client, title="Keep")
    card = {"card_id": "c1", "question": "q", "answer": "a", "created_at": "2026-01-01T00:00:00Z"}
    deck = {"deck_id": "d1", "title": "t", "created_at": "2026-01-01T00:00:00Z"}

    low_ease = {"decks": [dict(deck, cards=[dict(card, ease_factor=1.0)])]}
    duplicate_cards = {"decks": [dict(deck, cards=[card, card])]}
    duplicate_decks = {"decks": [deck, deck]}

    for backup in (low_ease, duplicate_cards, duplicate_decks):
        resp = client.post(reverse("import-data"), data=backup, content_type="application/json")
        assert resp.status_code == 400
    assert list(Deck.objects.values_list("title", flat=True)) == ["Keep"]
