from __future__ import annotations

import logging
import time

from ..llm.groq_client import GroqTextGenerator, TextGenerator
from ..places.client import PlacesClient
from .config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from .enricher import enrich_candidates, exclude_source_restaurant
from .errors import InvalidQueryError, MissingConfigError, PipelineError
from .locator import locate_candidates
from .models import (
    DishProfile,
    DishQuery,
    NearbyRequest,
    NearbyResponse,
    RankedResult,
    UserLocation,
)
from .profiler import profile_source_dish, should_profile
from .ranker import rank_restaurants
from .result import StageResult

logger = logging.getLogger(__name__)

NO_RESULTS_NOTE = "No restaurants found with sufficient data for analysis"


def build_dish_query(
    request: NearbyRequest,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> DishQuery:
    """Validate a raw /nearby body into a DishQuery, raising InvalidQueryError."""
    if not request.dish or not request.dish.strip():
        raise InvalidQueryError("Dish name is required")
    if request.latitude is None or request.longitude is None:
        raise InvalidQueryError("Location is required")
    radius = config.default_radius_meters if request.radius is None else request.radius
    if radius <= 0:
        raise InvalidQueryError("Search radius must be a positive number of meters")

    return DishQuery(
        dish_name=request.dish.strip(),
        origin_restaurant=request.restaurant,
        user_location=UserLocation(latitude=request.latitude, longitude=request.longitude),
        search_radius_meters=radius,
    )


def ensure_configured(generator: TextGenerator, places: PlacesClient) -> None:
    if not places.is_configured:
        raise MissingConfigError("GOOGLE_PLACES_API_KEY")
    if isinstance(generator, GroqTextGenerator) and not generator.is_configured:
        raise MissingConfigError("GROQ_API_KEY")


def sort_results(results: list[RankedResult], limit: int) -> list[RankedResult]:
    """Highest verdict confidence first, ties broken by rating (missing = 0)."""
    ordered = sorted(
        results,
        key=lambda r: (r.dish_availability.confidence, r.rating or 0.0),
        reverse=True,
    )
    return ordered[:limit]


async def _profile_stage(
    generator: TextGenerator,
    query: DishQuery,
) -> StageResult[DishProfile]:
    origin = query.origin_restaurant
    if origin is None or not should_profile(origin.name):
        return StageResult.failure("profile", "no source restaurant")
    try:
        return StageResult.success(
            await profile_source_dish(generator, query.dish_name, origin.name)
        )
    except Exception as exc:
        logger.warning(
            "Could not analyze source dish, proceeding with general search", exc_info=True,
        )
        return StageResult.failure("profile", str(exc))


async def find_nearby_dishes(
    generator: TextGenerator,
    places: PlacesClient,
    request: NearbyRequest,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> NearbyResponse:
    start_time = time.time()

    query = build_dish_query(request, config)
    ensure_configured(generator, places)

    location = query.user_location
    source_name = query.origin_restaurant.name if query.origin_restaurant else None

    # --- Source dish profile (best effort) ---
    profiled = await _profile_stage(generator, query)
    dish_profile = profiled.value if profiled.ok else None

    # --- Candidates & enrichment ---
    candidates = await locate_candidates(
        places, query, dish_profile.cuisine_type if dish_profile else None, config,
    )
    enriched = await enrich_candidates(places, generator, candidates, config)
    restaurants = exclude_source_restaurant(enriched, source_name)

    base = {
        "search_location": f"{location.latitude}, {location.longitude}",
        "search_radius": query.search_radius_meters,
        "original_dish": query.dish_name,
        "source_restaurant": source_name or None,
        "dish_profile": dish_profile,
    }

    if not restaurants:
        logger.info("No analysable restaurants for %r", query.dish_name)
        return NearbyResponse(restaurants=[], note=NO_RESULTS_NOTE, **base)

    # --- Batched ranking (hard failure) ---
    try:
        verdicts = await rank_restaurants(
            generator, restaurants, query.dish_name, dish_profile, config,
        )
    except PipelineError:
        logger.error("Ranking failed for %r", query.dish_name, exc_info=True)
        raise
    except Exception as exc:
        logger.error("Ranking call failed for %r", query.dish_name, exc_info=True)
        raise PipelineError(f"AI Analysis Failed: {exc}") from exc

    ranked = [
        RankedResult(**r.model_dump(), dish_availability=v)
        for r, v in zip(restaurants, verdicts)
    ]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Dish search for %r: %d candidates, %d ranked in %sms",
        query.dish_name, len(candidates), len(ranked), elapsed_ms,
    )

    return NearbyResponse(restaurants=sort_results(ranked, config.max_results), **base)
