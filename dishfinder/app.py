from __future__ import annotations

import logging
from collections.abc import AsyncIterator

import httpx
from fastapi import Depends, FastAPI, HTTPException

from .llm.groq_client import GroqTextGenerator, TextGenerator
from .logging_config import setup_logging
from .pipeline.errors import MissingConfigError, PipelineError
from .pipeline.models import (
    AnalyzeDishRequest,
    AnalyzeDishResponse,
    LatLng,
    MockNearbyResponse,
    MockRestaurant,
    MockSuggestion,
    NearbyRequest,
    NearbyResponse,
    SimilarityRequest,
    SimilarityResponse,
    UserLocation,
)
from .pipeline.orchestrator import find_nearby_dishes
from .pipeline.profiler import analyze_dish, suggest_similar_dishes
from .places.client import PlacesClient
from .places.config import DEFAULT_PLACES_CONFIG

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Dish Finder API", version="1.0.0")


# ── Dependencies ─────────────────────────────────────────────────────────


def get_generator() -> TextGenerator:
    return GroqTextGenerator()


async def get_places_client() -> AsyncIterator[PlacesClient]:
    async with httpx.AsyncClient(timeout=DEFAULT_PLACES_CONFIG.timeout) as http:
        yield PlacesClient(http, DEFAULT_PLACES_CONFIG)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/nearby", response_model=NearbyResponse)
async def nearby(
    body: NearbyRequest,
    generator: TextGenerator = Depends(get_generator),
    places: PlacesClient = Depends(get_places_client),
) -> NearbyResponse:
    try:
        return await find_nearby_dishes(generator, places, body)
    except PipelineError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@app.post("/analyze-dish", response_model=AnalyzeDishResponse)
async def analyze_dish_endpoint(
    body: AnalyzeDishRequest,
    generator: TextGenerator = Depends(get_generator),
) -> AnalyzeDishResponse:
    if not body.dish_name or not body.restaurant_name:
        raise HTTPException(status_code=400, detail="Dish name and restaurant name are required")

    try:
        analysis = await analyze_dish(
            generator, body.dish_name, body.restaurant_name, body.restaurant_address,
        )
    except MissingConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except Exception as exc:
        logger.error("Error in analyze-dish", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to analyze dish") from exc

    return AnalyzeDishResponse(analysis=analysis)


@app.post("/similarity", response_model=SimilarityResponse)
async def similarity(
    body: SimilarityRequest,
    generator: TextGenerator = Depends(get_generator),
) -> SimilarityResponse:
    if not body.dish or body.restaurant is None or not body.restaurant.name:
        raise HTTPException(status_code=400, detail="Dish and restaurant information are required")

    try:
        suggestions = await suggest_similar_dishes(generator, body.dish, body.restaurant.name)
    except MissingConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except Exception as exc:
        logger.error("Error in similarity", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to analyze dish similarity") from exc

    return SimilarityResponse(
        original_dish=body.dish,
        original_restaurant=body.restaurant,
        suggestions=suggestions,
        user_location=body.user_location,
    )


# ── Demo fallback ────────────────────────────────────────────────────────


@app.get("/nearby", response_model=MockNearbyResponse)
def nearby_mock(lat: str | None = None, lng: str | None = None) -> MockNearbyResponse:
    """Fixed sample data for when the Places integration is not set up."""
    try:
        latitude = float(lat) if lat else None
        longitude = float(lng) if lng else None
    except ValueError:
        latitude = longitude = None
    if latitude is None or longitude is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")

    restaurants = [
        MockRestaurant(
            name="Spice House",
            address="123 Main St, Your City",
            rating=4.5,
            price_level=2,
            place_id="mock_1",
            location=LatLng(lat=latitude, lng=longitude),
            types=["restaurant", "food"],
            suggestion=MockSuggestion(
                dish_name="Spicy Chicken Wings",
                cuisine="American",
                similarity_reason="Similar spice level and preparation method",
            ),
        ),
        MockRestaurant(
            name="Dragon Garden",
            address="456 Oak Ave, Your City",
            rating=4.2,
            price_level=2,
            place_id="mock_2",
            location=LatLng(lat=latitude + 0.001, lng=longitude + 0.001),
            types=["restaurant", "chinese"],
            suggestion=MockSuggestion(
                dish_name="Kung Pao Chicken",
                cuisine="Chinese",
                similarity_reason="Bold flavors with similar heat profile",
            ),
        ),
    ]

    return MockNearbyResponse(
        restaurants=restaurants,
        search_location=UserLocation(latitude=latitude, longitude=longitude),
        search_radius=5000,
        note="Using mock data - configure Google Places API for real results",
    )
