from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from ..places.client import PlacesClient
from .config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from .models import DishQuery, PlaceCandidate

logger = logging.getLogger(__name__)


def build_search_queries(dish_name: str, cuisine_type: str | None = None) -> list[str]:
    queries = [f'"{dish_name}" restaurant', f"{dish_name} food"]
    if cuisine_type:
        queries.append(f"{cuisine_type} restaurant")
    # Catch-all so the candidate set is not only exact-name hits
    queries.append("restaurant")
    return queries


def to_candidate(place: dict[str, Any]) -> PlaceCandidate | None:
    """Map a raw Text Search result onto a PlaceCandidate, or ``None`` if unusable."""
    try:
        return PlaceCandidate(
            place_id=place["place_id"],
            name=place["name"],
            address=place.get("formatted_address", ""),
            rating=place.get("rating"),
            price_level=place.get("price_level"),
            location=place["geometry"]["location"],
            types=place.get("types", []),
            photos=place.get("photos", []),
        )
    except (KeyError, TypeError, ValidationError):
        logger.debug("Skipping malformed place record: %r", place.get("place_id"))
        return None


def dedupe_candidates(candidates: list[PlaceCandidate], limit: int) -> list[PlaceCandidate]:
    """Drop repeated place ids (first occurrence wins) and keep at most ``limit``."""
    seen: set[str] = set()
    unique: list[PlaceCandidate] = []
    for candidate in candidates:
        if candidate.place_id in seen:
            continue
        seen.add(candidate.place_id)
        unique.append(candidate)
    return unique[:limit]


async def _run_query(places: PlacesClient, query: str, dish_query: DishQuery) -> list[dict[str, Any]]:
    try:
        results = await places.text_search(
            query,
            dish_query.user_location.latitude,
            dish_query.user_location.longitude,
            dish_query.search_radius_meters,
        )
    except Exception:
        logger.warning("Places search failed for %r, skipping", query, exc_info=True)
        return []
    return results[: places.config.results_per_query]


async def locate_candidates(
    places: PlacesClient,
    dish_query: DishQuery,
    cuisine_type: str | None = None,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> list[PlaceCandidate]:
    queries = build_search_queries(dish_query.dish_name, cuisine_type)

    async with asyncio.TaskGroup() as tg:
        tasks = [tg.create_task(_run_query(places, q, dish_query)) for q in queries]

    merged: list[PlaceCandidate] = []
    for task in tasks:
        for place in task.result():
            candidate = to_candidate(place)
            if candidate is not None:
                merged.append(candidate)

    candidates = dedupe_candidates(merged, config.max_candidates)
    logger.info(
        "Located %d unique candidates from %d queries for %r",
        len(candidates), len(queries), dish_query.dish_name,
    )
    return candidates
