from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from dishfinder.places.client import PlacesError
from dishfinder.places.config import PlacesConfig


def make_place(place_id: str, name: str, rating: float | None = 4.0, **extra: Any) -> dict[str, Any]:
    place = {
        "place_id": place_id,
        "name": name,
        "formatted_address": f"{place_id} Main St",
        "rating": rating,
        "price_level": 2,
        "geometry": {"location": {"lat": 30.27, "lng": -97.74}},
        "types": ["restaurant", "food"],
        "photos": [
            {"photo_reference": f"{place_id}-a", "height": 100, "width": 100},
            {"photo_reference": f"{place_id}-b", "height": 100, "width": 100},
        ],
    }
    place.update(extra)
    return place


def make_details(reviews: list[str] | None = None) -> dict[str, Any]:
    return {
        "formatted_phone_number": "(512) 555-0100",
        "website": "https://example.com",
        "editorial_summary": {"overview": "Neighbourhood favourite."},
        "reviews": [{"text": t, "rating": 5} for t in (reviews or [])],
    }


class FakeGenerator:
    """Stands in for GroqTextGenerator; ``responder`` maps a prompt to a reply."""

    def __init__(self, responder: Callable[[str], str] | str = "") -> None:
        self.responder = responder
        self.prompts: list[str] = []

    async def generate(self, prompt: str, *, max_tokens: int = 300, temperature: float = 0.3) -> str:
        self.prompts.append(prompt)
        if callable(self.responder):
            return self.responder(prompt)
        return self.responder

    def prompts_containing(self, needle: str) -> list[str]:
        return [p for p in self.prompts if needle in p]


class FakePlaces:
    """Stands in for PlacesClient with canned search results and details."""

    def __init__(
        self,
        search_results: dict[str, list[dict[str, Any]]] | None = None,
        details: dict[str, dict[str, Any]] | None = None,
        failing_queries: set[str] | None = None,
        failing_details: set[str] | None = None,
        api_key: str = "test-key",
    ) -> None:
        self.config = PlacesConfig(api_key=api_key)
        self.search_results = search_results or {}
        self.details = details or {}
        self.failing_queries = failing_queries or set()
        self.failing_details = failing_details or set()
        self.queries: list[str] = []
        self.detail_calls: list[str] = []

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    async def text_search(self, query: str, latitude: float, longitude: float, radius: int) -> list[dict[str, Any]]:
        self.queries.append(query)
        if query in self.failing_queries:
            raise PlacesError("OVER_QUERY_LIMIT")
        return self.search_results.get(query, [])

    async def place_details(self, place_id: str) -> dict[str, Any]:
        self.detail_calls.append(place_id)
        if place_id in self.failing_details:
            raise PlacesError("NOT_FOUND")
        return self.details.get(place_id, make_details())


def pipeline_responder(ranking_reply: Callable[[str], str] | str) -> Callable[[str], str]:
    """Route each pipeline prompt to a plausible canned reply."""

    def respond(prompt: str) -> str:
        if "RESTAURANT PROFILES" in prompt:
            return ranking_reply(prompt) if callable(ranking_reply) else ranking_reply
        if "extract specific menu items" in prompt:
            return 'Here you go: ["Nashville Hot Chicken - fiery", "Mac and cheese - creamy"]'
        if "taste/flavor profile" in prompt:
            return json.dumps({"flavors": ["spicy", "savory"], "style": "Southern comfort food"})
        if "Analyze this specific dish" in prompt:
            return "A Southern American fried chicken dish, spicy and crispy with cayenne oil."
        return ""

    return respond


def ranking_lines(confidences: list[int]) -> str:
    return "\n".join(
        f"Restaurant {i}: hasExact=false, hasSimilar=true, confidence={c}, reason=Spicy fried chicken on menu"
        for i, c in enumerate(confidences, start=1)
    )


@pytest.fixture
def fake_places() -> FakePlaces:
    return FakePlaces()
