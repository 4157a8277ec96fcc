from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from ..llm.groq_client import TextGenerator
from .config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from .models import MenuInsight, TasteProfile
from .parsing import extract_json_array, extract_json_object, validate_payload

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# LLM Prompts
# ---------------------------------------------------------------------------

MENU_EXTRACTION_PROMPT = """\
Analyze these restaurant reviews to extract specific menu items and dishes mentioned.

Reviews:
{reviews}

Extract ONLY specific dish names, menu items, and food descriptions mentioned in the reviews.
Return a JSON array of dishes with their descriptions:

Example format:
["Spicy chicken sandwich - crispy and flavorful", "Fish tacos - fresh with tangy sauce", "Caesar salad - large portion"]

Focus on:
- Specific dish names (not just "food" or "meal")
- Descriptive adjectives about taste/texture
- Menu items that reviewers specifically named
- Signature dishes or chef recommendations

Return only the JSON array, no other text:"""

TASTE_PROFILE_PROMPT = """\
Analyze these restaurant reviews to create a taste/flavor profile for "{restaurant_name}".

Reviews:
{reviews}

Based on the reviews, determine:
1. Primary flavors commonly mentioned (spicy, sweet, savory, salty, umami, tangy, etc.)
2. Cooking styles (grilled, fried, steamed, roasted, etc.)
3. Cuisine characteristics (authentic, fusion, comfort food, etc.)
4. Texture descriptions (crispy, tender, creamy, etc.)

Return ONLY a JSON object in this format:
{{
  "flavors": ["spicy", "savory", "umami"],
  "style": "Asian fusion with bold flavors",
  "textures": ["crispy", "tender"],
  "specialties": ["spicy dishes", "grilled items"]
}}"""


class _TasteProfilePayload(BaseModel):
    flavors: list[str] = []
    style: str = "Unknown"
    textures: list[str] | None = None
    specialties: list[str] | None = None


def review_texts(reviews: list[dict[str, Any]]) -> list[str]:
    """Pull the non-empty ``text`` field out of raw Places review dicts."""
    return [str(r.get("text", "")).strip() for r in reviews if str(r.get("text", "")).strip()]


# ---------------------------------------------------------------------------
# Fallbacks
# ---------------------------------------------------------------------------


def _fallback_menu() -> MenuInsight:
    return MenuInsight(dishes=[], confidence=10)


def _fallback_taste() -> TasteProfile:
    return TasteProfile(flavors=[], style="Unknown", confidence=20)


# ---------------------------------------------------------------------------
# LLM Calls
# ---------------------------------------------------------------------------


async def extract_menu_from_reviews(
    generator: TextGenerator,
    reviews: list[str],
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> MenuInsight:
    """
    Ask the LLM which concrete dishes the reviews mention.

    Never raises: a failed call or unusable output yields a low-confidence
    empty insight.
    """
    if not reviews:
        return MenuInsight(dishes=[], confidence=0)

    prompt = MENU_EXTRACTION_PROMPT.format(
        reviews="\n\n".join(reviews[: config.menu_review_limit])
    )
    try:
        text = await generator.generate(prompt, max_tokens=300, temperature=0.2)
    except Exception:
        logger.warning("Menu extraction call failed, using fallback", exc_info=True)
        return _fallback_menu()

    found = extract_json_array(text)
    if not found.ok:
        logger.warning("Menu extraction returned no JSON array: %s", found.error.message)
        return _fallback_menu()

    checked = validate_payload(found.value, list[str])
    if not checked.ok:
        logger.warning("Menu extraction payload rejected: %s", checked.error.message)
        return _fallback_menu()

    dishes = [d.strip() for d in checked.value if d.strip()][: config.max_menu_items]
    confidence = min(len(dishes) * 10, 90) if dishes else 10
    return MenuInsight(dishes=dishes, confidence=confidence)


async def extract_taste_profile(
    generator: TextGenerator,
    reviews: list[str],
    restaurant_name: str,
    config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
) -> TasteProfile:
    """Infer a restaurant-level flavor/style profile from its reviews. Never raises."""
    if not reviews:
        return TasteProfile(flavors=[], style="Unknown", confidence=0)

    prompt = TASTE_PROFILE_PROMPT.format(
        restaurant_name=restaurant_name,
        reviews="\n\n".join(reviews[: config.taste_review_limit]),
    )
    try:
        text = await generator.generate(prompt, max_tokens=200, temperature=0.2)
    except Exception:
        logger.warning("Taste profile call failed for %s, using fallback", restaurant_name, exc_info=True)
        return _fallback_taste()

    found = extract_json_object(text)
    if not found.ok:
        logger.warning("Taste profile for %s: %s", restaurant_name, found.error.message)
        return _fallback_taste()

    checked = validate_payload(found.value, _TasteProfilePayload)
    if not checked.ok:
        logger.warning("Taste profile for %s rejected: %s", restaurant_name, checked.error.message)
        return _fallback_taste()

    return TasteProfile(
        **checked.value.model_dump(),
        confidence=80 if len(reviews) > 3 else 50,
    )
