from __future__ import annotations

import asyncio
import logging

from ..llm.groq_client import TextGenerator
from ..places.client import PlacesClient
from .config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from .models import EnrichedRestaurant, PlaceCandidate
from .result import StageResult
from .review_miner import extract_menu_from_reviews, extract_taste_profile, review_texts

logger = logging.getLogger(__name__)


async def enrich_candidate(
    places: PlacesClient,
    generator: TextGenerator,
    candidate: PlaceCandidate,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> StageResult[EnrichedRestaurant]:
    # Anything going wrong for this candidate drops it, never its siblings.
    try:
        details = await places.place_details(candidate.place_id)

        reviews = review_texts(details.get("reviews") or [])
        async with asyncio.TaskGroup() as tg:
            menu_task = tg.create_task(extract_menu_from_reviews(generator, reviews, config))
            taste_task = tg.create_task(extract_taste_profile(generator, reviews, candidate.name, config))

        editorial = details.get("editorial_summary") or {}
        restaurant = EnrichedRestaurant(
            **candidate.model_dump(exclude={"photos"}),
            photos=candidate.photos[:1],
            phone=details.get("formatted_phone_number"),
            website=details.get("website"),
            editorial_summary=editorial.get("overview"),
            review_texts=reviews,
            menu_insights=menu_task.result(),
            taste_profile=taste_task.result(),
        )
    except Exception as exc:
        logger.warning("Could not enrich %s, dropping it", candidate.name, exc_info=True)
        return StageResult.failure("enrich", f"{candidate.name}: {exc}")

    return StageResult.success(restaurant)


async def enrich_candidates(
    places: PlacesClient,
    generator: TextGenerator,
    candidates: list[PlaceCandidate],
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> list[EnrichedRestaurant]:
    """
    Enrich the first ``config.max_enriched`` candidates concurrently.

    Candidates whose details lookup fails are dropped; the rest keep their
    original relative order.
    """
    selected = candidates[: config.max_enriched]
    async with asyncio.TaskGroup() as tg:
        tasks = [tg.create_task(enrich_candidate(places, generator, c, config)) for c in selected]

    enriched = [task.result().value for task in tasks if task.result().ok]
    if len(enriched) < len(selected):
        logger.info("Enriched %d of %d candidates", len(enriched), len(selected))
    return enriched


def exclude_source_restaurant(
    restaurants: list[EnrichedRestaurant],
    source_name: str | None,
) -> list[EnrichedRestaurant]:
    # Substring match also removes other branches of the same chain.
    if not source_name or not source_name.strip():
        return restaurants
    needle = source_name.strip().lower()
    return [r for r in restaurants if needle not in r.name.lower()]
