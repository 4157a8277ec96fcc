from __future__ import annotations

import logging

from ..llm.groq_client import TextGenerator
from .models import DishProfile, SimilarDish
from .parsing import extract_json_array, validate_payload

logger = logging.getLogger(__name__)

# Sentinel the UI sends when the user picked a dish without a real restaurant.
NO_RESTAURANT_SENTINEL = "address not specified"

CUISINES = [
    "American", "Chinese", "Italian", "Mexican", "Thai",
    "Indian", "Japanese", "Korean", "Mediterranean", "French",
]
FLAVORS = [
    "spicy", "sweet", "savory", "tangy", "sour",
    "bitter", "umami", "smoky", "crispy", "tender",
]
COOKING_STYLES = ["fried", "grilled", "baked", "roasted", "steamed", "sautéed", "braised"]

DEFAULT_CUISINE = "American"
DEFAULT_COOKING_STYLE = "prepared"

SOURCE_DISH_PROMPT = """\
Analyze this specific dish at this restaurant:

Dish: {dish_name}
Restaurant: {restaurant_name}

Provide a detailed profile of this dish including:
- Flavor profile (spicy, sweet, savory, etc.)
- Cooking style and preparation method
- Key ingredients and seasonings
- Texture and presentation
- What makes this version unique
- Cuisine type

Format as a structured analysis."""

CRITIC_PROMPT = """\
Provide a detailed flavor profile analysis for the dish "{dish_name}" from the \
restaurant "{restaurant_name}" located at "{restaurant_address}".

Describe its likely:
- Key ingredients and components
- Primary flavors (e.g., sweet, spicy, savory, umami, sour, bitter)
- Texture profile (e.g., crispy, tender, creamy)
- Cooking method (e.g., fried, grilled, stewed)
- A note on its authenticity or style (e.g., traditional, modern fusion)
- A possible drink pairing suggestion

Keep the analysis concise, engaging, and informative, as if you are a food critic."""


def should_profile(restaurant_name: str | None) -> bool:
    if not restaurant_name or not restaurant_name.strip():
        return False
    return restaurant_name.strip().lower() != NO_RESTAURANT_SENTINEL


def extract_cuisine_type(analysis: str) -> str:
    lower = analysis.lower()
    for cuisine in CUISINES:
        if cuisine.lower() in lower:
            return cuisine
    return DEFAULT_CUISINE


def extract_flavor_tags(analysis: str) -> list[str]:
    lower = analysis.lower()
    return [flavor for flavor in FLAVORS if flavor in lower]


def extract_cooking_style(analysis: str) -> str:
    lower = analysis.lower()
    for style in COOKING_STYLES:
        if style in lower:
            return style
    return DEFAULT_COOKING_STYLE


async def profile_source_dish(
    generator: TextGenerator,
    dish_name: str,
    restaurant_name: str,
) -> DishProfile:
    """
    Profile ``dish_name`` as served at ``restaurant_name``.

    Errors from the generation call propagate; callers decide whether a
    missing profile is fatal.
    """
    prompt = SOURCE_DISH_PROMPT.format(dish_name=dish_name, restaurant_name=restaurant_name)
    analysis = await generator.generate(prompt, max_tokens=300, temperature=0.3)

    return DishProfile(
        raw_analysis_text=analysis,
        cuisine_type=extract_cuisine_type(analysis),
        flavor_tags=extract_flavor_tags(analysis),
        cooking_style=extract_cooking_style(analysis),
    )


async def analyze_dish(
    generator: TextGenerator,
    dish_name: str,
    restaurant_name: str,
    restaurant_address: str | None = None,
) -> str:
    """Free-text, food-critic style write-up of a single dish."""
    prompt = CRITIC_PROMPT.format(
        dish_name=dish_name,
        restaurant_name=restaurant_name,
        restaurant_address=restaurant_address or "an unspecified address",
    )
    return await generator.generate(prompt, max_tokens=400, temperature=0.4)


# ---------------------------------------------------------------------------
# Similar dish suggestions
# ---------------------------------------------------------------------------

SIMILARITY_PROMPT = """\
You are a food expert analyzing the dish "{dish_name}" from "{restaurant_name}".

Based on this dish, suggest 5-7 similar dishes that someone could find at other restaurants nearby. Consider:
- Similar flavor profiles and spice levels
- Comparable cooking methods and textures
- Different cuisines that share similar characteristics
- Dishes with similar ingredients or preparation styles

For each suggestion, provide:
- Dish name
- Restaurant type/cuisine where you'd find it
- Why it's similar to "{dish_name}"
- Key characteristics that make it comparable

Format as a JSON array with objects containing: name, cuisine, similarity_reason, characteristics.

Example format:
[
  {{
    "name": "Korean Fried Chicken",
    "cuisine": "Korean",
    "similarity_reason": "Similar crispy coating and spicy flavor profile",
    "characteristics": "Crispy, spicy, savory with bold seasoning"
  }}
]"""

DEFAULT_SUGGESTION = SimilarDish(
    name="Similar spicy chicken dishes",
    cuisine="Various",
    similarity_reason="Similar flavor profile and spice level",
    characteristics="Spicy, savory, with bold flavors",
)

# Label prefixes for replies that ignore the JSON instruction.
_NAME_LABELS = ("Dish:", "Name:")
_CUISINE_LABELS = ("Cuisine:", "Type:")
_REASON_LABELS = ("Similar because:", "Similarity:")
_CHARACTERISTICS_LABELS = ("Characteristics:",)


def _label_value(line: str) -> str:
    return line.partition(":")[2].strip()


def parse_similarity_text(text: str) -> list[SimilarDish]:
    """Recover suggestions from a labelled ``Dish: ... / Cuisine: ...`` reply."""
    suggestions: list[SimilarDish] = []
    current: dict[str, str] | None = None

    for line in (l.strip() for l in text.splitlines()):
        if not line:
            continue
        if any(label in line for label in _NAME_LABELS):
            if current and current["name"]:
                suggestions.append(SimilarDish(**current))
            current = {"name": _label_value(line), "cuisine": "", "similarity_reason": "", "characteristics": ""}
        elif current is None:
            continue
        elif any(label in line for label in _CUISINE_LABELS):
            current["cuisine"] = _label_value(line)
        elif any(label in line for label in _REASON_LABELS):
            current["similarity_reason"] = _label_value(line)
        elif any(label in line for label in _CHARACTERISTICS_LABELS):
            current["characteristics"] = _label_value(line)

    if current and current["name"]:
        suggestions.append(SimilarDish(**current))
    return suggestions


async def suggest_similar_dishes(
    generator: TextGenerator,
    dish_name: str,
    restaurant_name: str,
) -> list[SimilarDish]:
    """
    Ask for 5-7 dishes comparable to ``dish_name``.

    The reply is read as a JSON array first, then as labelled text; if
    neither yields anything a generic suggestion is returned. Errors from
    the generation call propagate.
    """
    prompt = SIMILARITY_PROMPT.format(dish_name=dish_name, restaurant_name=restaurant_name)
    text = await generator.generate(prompt, max_tokens=600, temperature=0.3)

    found = extract_json_array(text)
    if found.ok:
        checked = validate_payload(found.value, list[SimilarDish])
        if checked.ok and checked.value:
            return checked.value
        if not checked.ok:
            logger.warning("Similarity payload rejected: %s", checked.error.message)

    suggestions = parse_similarity_text(text)
    if suggestions:
        return suggestions

    logger.warning("No usable suggestions for %r, returning default", dish_name)
    return [DEFAULT_SUGGESTION]
