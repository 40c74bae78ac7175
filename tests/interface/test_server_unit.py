from datetime import date

import pytest
from fastapi.testclient import TestClient

from mindflash.application.deck_service import DeckService
from mindflash.consts import VERSION
from mindflash.domain.constants import DATA_KEY
from mindflash.server import app, get_library


@pytest.fixture
def library(context, repo):
    service = DeckService(context)
    deck = service.create_deck("Capitals", "World capitals")
    service.create_card(deck.id, "France?", "Paris")
    service.create_card(deck.id, "Peru?", "Lima")
    repo.save(context)
    return context, repo, deck


@pytest.fixture
def client(library):
    context, repo, _ = library
    app.dependency_overrides[get_library] = lambda: (context, repo)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_get_version(client):
    response = client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": VERSION}


def test_list_decks(client, library):
    _, _, deck = library
    response = client.get("/decks")
    assert response.status_code == 200
    assert response.json() == [
        {"id": deck.id, "name": "Capitals", "description": "World capitals", "cards": 2, "due": 2}
    ]
    assert client.get("/decks", params={"search": "zzz"}).json() == []


def test_due_cards_payload_shape(client, library):
    _, _, deck = library
    response = client.get(f"/decks/{deck.id}/due")
    assert response.status_code == 200
    cards = response.json()
    assert [c["front"] for c in cards] == ["France?", "Peru?"]
    assert cards[0]["nextDue"] == "2024-12-30"
    assert cards[0]["box"] == 1


def test_due_unknown_deck(client):
    response = client.get("/decks/missing/due")
    assert response.status_code == 404
    assert "missing" in response.json()["detail"]


def test_grade_card_persists(client, library, store):
    context, _, deck = library
    card = deck.cards[0]

    response = client.post(f"/decks/{deck.id}/cards/{card.id}/grade", json={"grade": "good"})

    assert response.status_code == 200
    data = response.json()
    assert data["box"] == 2
    assert data["nextDue"] == "2024-12-31"
    assert data["timesReviewed"] == 1
    assert context.review_log.count_on(date(2024, 12, 30)) == 1
    assert '"box": 2' in store.get(DATA_KEY)

    due = client.get(f"/decks/{deck.id}/due").json()
    assert [c["id"] for c in due] == [deck.cards[1].id]


def test_grade_unknown_card(client, library):
    _, _, deck = library
    response = client.post(f"/decks/{deck.id}/cards/nope/grade", json={"grade": "good"})
    assert response.status_code == 404


def test_grade_unknown_token_strict(client, library):
    context, _, deck = library
    context.config.strict_grades = True
    response = client.post(
        f"/decks/{deck.id}/cards/{deck.cards[0].id}/grade", json={"grade": "meh"}
    )
    assert response.status_code == 400


def test_grade_unknown_token_permissive(client, library):
    _, _, deck = library
    response = client.post(
        f"/decks/{deck.id}/cards/{deck.cards[0].id}/grade", json={"grade": "meh"}
    )
    assert response.status_code == 200
    assert response.json()["box"] == 1
    assert response.json()["timesReviewed"] == 1


def test_stats(client, library):
    _, _, deck = library
    client.post(f"/decks/{deck.id}/cards/{deck.cards[0].id}/grade", json={"grade": "easy"})

    data = client.get("/stats").json()

    assert data == {
        "total": 2,
        "due_today": 1,
        "mastered": 0,
        "streak": 1,
        "boxes": {"1": 1, "2": 0, "3": 1, "4": 0, "5": 0},
    }
    assert client.get("/stats", params={"deck": "missing"}).status_code == 404


def test_reviews_window(client, library):
    _, _, deck = library
    client.post(f"/decks/{deck.id}/cards/{deck.cards[0].id}/grade", json={"grade": "hard"})

    data = client.get("/reviews", params={"days": 2}).json()

    assert data == [{"date": "2024-12-29", "count": 0}, {"date": "2024-12-30", "count": 1}]
    assert client.get("/reviews", params={"days": 0}).status_code == 422


def test_lifespan_loads_library_from_config(mock_home, tmp_path, monkeypatch):
    data_file = tmp_path / "server.json"
    monkeypatch.setenv("MINDFLASH_DATA_FILE", str(data_file))

    with TestClient(app) as client:
        context, repo = app.state.library
        assert repo.store.path == data_file
        assert context.decks == []
        response = client.get("/decks")

    assert response.status_code == 200
    assert response.json() == []
