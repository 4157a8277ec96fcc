from __future__ import annotations

import logging
import re

from ..llm.groq_client import TextGenerator
from .config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from .errors import RankingError
from .models import DishAvailabilityVerdict, DishProfile, EnrichedRestaurant
from .result import StageResult

logger = logging.getLogger(__name__)

_CONFIDENCE_RE = re.compile(r"confidence\s*=\s*(-?\d+)")
_REASON_RE = re.compile(r"reason\s*=(.+)$")

RANKING_PROMPT = """\
You are analyzing restaurants to find where someone could get "{dish}" or very similar dishes.{dish_context}

RESTAURANT PROFILES:
{profiles}

Your task: For each restaurant, analyze if they likely serve "{dish}" or dishes with very similar taste profiles.

Consider:
- Specific menu items mentioned in reviews
- Flavor profiles (spicy, savory, sweet, etc.)
- Cooking styles and cuisine types
- Texture and preparation methods
- Cultural/regional cuisine matches{profile_rule}

For each restaurant (1-{count}), respond in this EXACT format:
Restaurant 1: hasExact=false, hasSimilar=true, confidence=75, reason=Serves spicy Asian dishes with similar flavor profile
Restaurant 2: hasExact=true, hasSimilar=true, confidence=90, reason=Menu reviews mention this exact dish

Rules:
- hasExact: true only if reviews mention the exact dish name or very close variations
- hasSimilar: true if flavor/style profiles suggest similar dishes are available
- confidence: 0-100 based on strength of menu/taste evidence
- reason: specific evidence from menu items or taste profile (15 words max)

You MUST analyze ALL {count} restaurants. Do not skip any.

Analysis:"""

DISH_CONTEXT = """

SOURCE DISH ANALYSIS:
The user had "{dish}" at a restaurant and wants to find similar versions elsewhere.
{analysis}

Key characteristics to match:
- Cuisine: {cuisine}
- Flavors: {flavors}
- Cooking style: {style}
"""


def _restaurant_block(index: int, restaurant: EnrichedRestaurant, menu_items: int) -> str:
    menu = ", ".join(restaurant.menu_insights.dishes[:menu_items]) or "Not specified in reviews"
    flavors = ", ".join(restaurant.taste_profile.flavors) or "unknown"
    style = restaurant.taste_profile.style or "unknown style"
    return (
        f"{index}. {restaurant.name}\n"
        f"   - Menu items: {menu}\n"
        f"   - Taste profile: {flavors} flavors, {style}\n"
        f"   - Restaurant type: {', '.join(restaurant.types)}"
    )


def build_ranking_prompt(
    restaurants: list[EnrichedRestaurant],
    dish_name: str,
    dish_profile: DishProfile | None = None,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> str:
    profiles = "\n\n".join(
        _restaurant_block(i, r, config.ranking_menu_items)
        for i, r in enumerate(restaurants, start=1)
    )
    dish_context = ""
    if dish_profile is not None:
        dish_context = DISH_CONTEXT.format(
            dish=dish_name,
            analysis=dish_profile.raw_analysis_text,
            cuisine=dish_profile.cuisine_type,
            flavors=", ".join(dish_profile.flavor_tags) or "unknown",
            style=dish_profile.cooking_style,
        )
    return RANKING_PROMPT.format(
        dish=dish_name,
        dish_context=dish_context,
        profiles=profiles,
        count=len(restaurants),
        profile_rule="\n- How well they match the reference dish characteristics" if dish_profile else "",
    )


def _parse_line(line: str) -> StageResult[DishAvailabilityVerdict]:
    confidence_match = _CONFIDENCE_RE.search(line)
    if confidence_match is None:
        return StageResult.failure("rank", "missing confidence")
    reason_match = _REASON_RE.search(line)
    reasoning = reason_match.group(1).strip() if reason_match else ""
    if not reasoning:
        return StageResult.failure("rank", "missing reason")

    confidence = min(max(int(confidence_match.group(1)), 0), 100)
    return StageResult.success(
        DishAvailabilityVerdict(
            has_exact_dish="hasExact=true" in line,
            has_similar_dish="hasSimilar=true" in line,
            confidence=confidence,
            reasoning=reasoning,
        )
    )


def parse_ranking_response(
    text: str,
    restaurants: list[EnrichedRestaurant],
) -> list[DishAvailabilityVerdict]:
    """
    Turn the model's ``Restaurant <i>: ...`` lines into one verdict per restaurant.

    Raises RankingError on the first restaurant whose line is missing or
    unparseable; a partial list is never returned.
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    verdicts: list[DishAvailabilityVerdict] = []

    for index, restaurant in enumerate(restaurants, start=1):
        marker = f"Restaurant {index}:"
        line = next((l for l in lines if marker in l), None)
        if line is None:
            raise RankingError(index, restaurant.name, None, "Missing from response.")

        parsed = _parse_line(line)
        if not parsed.ok:
            raise RankingError(index, restaurant.name, line, parsed.error.message)
        verdicts.append(parsed.value)

    return verdicts


async def rank_restaurants(
    generator: TextGenerator,
    restaurants: list[EnrichedRestaurant],
    dish_name: str,
    dish_profile: DishProfile | None = None,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> list[DishAvailabilityVerdict]:
    if not restaurants:
        raise ValueError("rank_restaurants requires at least one restaurant")

    prompt = build_ranking_prompt(restaurants, dish_name, dish_profile, config)
    text = await generator.generate(prompt, max_tokens=600, temperature=0.1)
    verdicts = parse_ranking_response(text, restaurants)
    logger.info("Ranked %d restaurants for %r", len(verdicts), dish_name)
    return verdicts
