from __future__ import annotations

import pytest
from conftest import FakeGenerator, FakePlaces, make_details, make_place, pipeline_responder, ranking_lines
from fastapi.testclient import TestClient

from dishfinder.app import app, get_generator, get_places_client
from dishfinder.llm.config import LLMConfig
from dishfinder.llm.groq_client import GroqTextGenerator

client = TestClient(app)

NEARBY_BODY = {
    "dish": "Nashville Hot Chicken",
    "restaurant": {"name": "KFC, Austin TX", "address": "Austin, TX"},
    "latitude": 30.27,
    "longitude": -97.74,
    "radius": 5000,
}


def _install(generator, places=None):
    app.dependency_overrides[get_generator] = lambda: generator
    app.dependency_overrides[get_places_client] = lambda: places or FakePlaces()


@pytest.fixture(autouse=True)
def clear_overrides():
    yield
    app.dependency_overrides.clear()


def _places_with(n: int) -> FakePlaces:
    return FakePlaces(
        search_results={"restaurant": [make_place(f"p{i}", f"Spot {i}", rating=4.0 + i / 10) for i in range(1, n + 1)]},
        details={f"p{i}": make_details(["Spicy chicken sandwich was great"]) for i in range(1, n + 1)},
    )


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ── POST /nearby ─────────────────────────────────────────────────────────


def test_nearby_returns_camel_case_results():
    _install(FakeGenerator(pipeline_responder(ranking_lines([70, 80, 80]))), _places_with(3))
    resp = client.post("/nearby", json=NEARBY_BODY)
    assert resp.status_code == 200
    body = resp.json()

    assert body["originalDish"] == "Nashville Hot Chicken"
    assert body["sourceRestaurant"] == "KFC, Austin TX"
    assert body["searchRadius"] == 5000
    assert body["dishProfile"]["cuisineType"] == "American"
    assert "rawAnalysisText" not in body["dishProfile"]

    names = [r["name"] for r in body["restaurants"]]
    assert names == ["Spot 3", "Spot 2", "Spot 1"]
    first = body["restaurants"][0]
    assert set(first["dishAvailability"]) == {"hasExactDish", "hasSimilarDish", "confidence", "reasoning"}
    assert first["placeId"] == "p3"
    assert first["menuInsights"]["confidence"] == 20
    assert "reviewTexts" not in first


def test_nearby_empty_result_has_note():
    _install(FakeGenerator(pipeline_responder("")), FakePlaces())
    resp = client.post("/nearby", json=NEARBY_BODY)
    assert resp.status_code == 200
    body = resp.json()
    assert body["restaurants"] == []
    assert body["note"]


def test_nearby_missing_dish_is_400():
    _install(FakeGenerator())
    resp = client.post("/nearby", json={"latitude": 1.0, "longitude": 2.0})
    assert resp.status_code == 400
    assert "Dish name" in resp.json()["detail"]


def test_nearby_missing_location_is_400():
    _install(FakeGenerator())
    resp = client.post("/nearby", json={"dish": "Pho"})
    assert resp.status_code == 400
    assert "Location" in resp.json()["detail"]


def test_nearby_non_positive_radius_is_400():
    _install(FakeGenerator())
    resp = client.post("/nearby", json=dict(NEARBY_BODY, radius=-10))
    assert resp.status_code == 400
    assert "radius" in resp.json()["detail"]


def test_nearby_missing_places_key_is_500():
    _install(FakeGenerator(), FakePlaces(api_key=""))
    resp = client.post("/nearby", json=NEARBY_BODY)
    assert resp.status_code == 500
    assert "GOOGLE_PLACES_API_KEY" in resp.json()["detail"]


def test_nearby_missing_groq_key_is_500():
    _install(GroqTextGenerator(config=LLMConfig(api_key="")), _places_with(1))
    resp = client.post("/nearby", json=NEARBY_BODY)
    assert resp.status_code == 500
    assert "GROQ_API_KEY" in resp.json()["detail"]


def test_nearby_incomplete_ranking_is_500():
    _install(FakeGenerator(pipeline_responder(ranking_lines([70]))), _places_with(3))
    resp = client.post("/nearby", json=NEARBY_BODY)
    assert resp.status_code == 500
    assert "Spot 2" in resp.json()["detail"]


def test_nearby_ranking_call_error_is_500():
    def respond(prompt):
        if "RESTAURANT PROFILES" in prompt:
            raise RuntimeError("rate limited")
        return pipeline_responder("")(prompt)

    _install(FakeGenerator(respond), _places_with(2))
    resp = client.post("/nearby", json=NEARBY_BODY)
    assert resp.status_code == 500
    assert "rate limited" in resp.json()["detail"]


# ── POST /analyze-dish ───────────────────────────────────────────────────


def test_analyze_dish():
    _install(FakeGenerator("Crispy, fiery and balanced by pickles."))
    resp = client.post(
        "/analyze-dish",
        json={"dishName": "Hot Chicken", "restaurantName": "Hattie B's", "restaurantAddress": "Nashville"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"analysis": "Crispy, fiery and balanced by pickles."}


def test_analyze_dish_requires_names():
    _install(FakeGenerator("unused"))
    resp = client.post("/analyze-dish", json={"dishName": "Hot Chicken"})
    assert resp.status_code == 400


def test_analyze_dish_upstream_failure_is_500():
    def boom(prompt):
        raise RuntimeError("down")

    _install(FakeGenerator(boom))
    resp = client.post("/analyze-dish", json={"dishName": "Pho", "restaurantName": "Pho 79"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to analyze dish"


# ── POST /similarity ─────────────────────────────────────────────────────

SIMILARITY_BODY = {
    "dish": "Hot Chicken",
    "restaurant": {"name": "Hattie B's", "address": "Nashville"},
    "userLocation": {"latitude": 36.16, "longitude": -86.78},
}


def test_similarity_returns_suggestions():
    reply = '[{"name": "Chicken 65", "cuisine": "Indian", "similarity_reason": "Fiery and fried"}]'
    _install(FakeGenerator(reply))
    resp = client.post("/similarity", json=SIMILARITY_BODY)
    assert resp.status_code == 200
    body = resp.json()
    assert body["originalDish"] == "Hot Chicken"
    assert body["originalRestaurant"] == {"name": "Hattie B's", "address": "Nashville"}
    assert body["userLocation"] == {"latitude": 36.16, "longitude": -86.78}
    assert body["suggestions"] == [
        {"name": "Chicken 65", "cuisine": "Indian", "similarity_reason": "Fiery and fried", "characteristics": ""},
    ]


def test_similarity_unusable_reply_returns_default_suggestion():
    _install(FakeGenerator("Sorry, no ideas today."))
    resp = client.post("/similarity", json=SIMILARITY_BODY)
    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()["suggestions"]] == ["Similar spicy chicken dishes"]


@pytest.mark.parametrize(
    "body",
    [
        {"restaurant": {"name": "Hattie B's"}},
        {"dish": "Hot Chicken"},
        {"dish": "Hot Chicken", "restaurant": {"address": "Nashville"}},
    ],
)
def test_similarity_requires_dish_and_restaurant(body):
    _install(FakeGenerator("unused"))
    resp = client.post("/similarity", json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Dish and restaurant information are required"


def test_similarity_upstream_failure_is_500():
    def boom(prompt):
        raise RuntimeError("down")

    _install(FakeGenerator(boom))
    resp = client.post("/similarity", json=SIMILARITY_BODY)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to analyze dish similarity"


def test_similarity_missing_groq_key_is_500():
    _install(GroqTextGenerator(config=LLMConfig(api_key="")))
    resp = client.post("/similarity", json=SIMILARITY_BODY)
    assert resp.status_code == 500
    assert "GROQ_API_KEY" in resp.json()["detail"]


# ── GET /nearby (mock) ───────────────────────────────────────────────────


def test_mock_nearby():
    resp = client.get("/nearby", params={"lat": "30.27", "lng": "-97.74"})
    assert resp.status_code == 200
    body = resp.json()
    assert [r["name"] for r in body["restaurants"]] == ["Spice House", "Dragon Garden"]
    assert body["searchLocation"] == {"latitude": 30.27, "longitude": -97.74}
    assert body["restaurants"][0]["suggestion"]["dishName"] == "Spicy Chicken Wings"
    assert "mock data" in body["note"]


def test_mock_nearby_requires_coordinates():
    assert client.get("/nearby", params={"lat": "30.27"}).status_code == 400
    assert client.get("/nearby", params={"lat": "abc", "lng": "1"}).status_code == 400
