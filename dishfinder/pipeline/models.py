from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Requests ─────────────────────────────────────────────────────────────


class OriginRestaurant(CamelModel):
    name: str | None = None
    address: str | None = None


class NearbyRequest(CamelModel):
    dish: str | None = None
    restaurant: OriginRestaurant | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius: int | None = None


class AnalyzeDishRequest(CamelModel):
    dish_name: str | None = None
    restaurant_name: str | None = None
    restaurant_address: str | None = None


class UserLocation(CamelModel):
    latitude: float
    longitude: float


class DishQuery(CamelModel):
    model_config = ConfigDict(frozen=True)

    dish_name: str = Field(..., min_length=1)
    origin_restaurant: OriginRestaurant | None = None
    user_location: UserLocation
    search_radius_meters: int = Field(default=5000, gt=0)


# ── Pipeline entities ────────────────────────────────────────────────────


class DishProfile(CamelModel):
    raw_analysis_text: str = Field(default="", exclude=True)
    cuisine_type: str
    flavor_tags: list[str] = Field(default_factory=list)
    cooking_style: str


class LatLng(CamelModel):
    lat: float
    lng: float


class PhotoRef(CamelModel):
    photo_reference: str
    height: int | None = None
    width: int | None = None


class PlaceCandidate(CamelModel):
    place_id: str
    name: str
    address: str = ""
    rating: float | None = None
    price_level: int | None = None
    location: LatLng
    types: list[str] = Field(default_factory=list)
    photos: list[PhotoRef] = Field(default_factory=list)


class MenuInsight(CamelModel):
    dishes: list[str] = Field(default_factory=list)
    confidence: int = Field(default=0, ge=0, le=100)


class TasteProfile(CamelModel):
    flavors: list[str] = Field(default_factory=list)
    style: str = "Unknown"
    textures: list[str] | None = None
    specialties: list[str] | None = None
    confidence: int = Field(default=0, ge=0, le=100)


class EnrichedRestaurant(PlaceCandidate):
    phone: str | None = None
    website: str | None = None
    editorial_summary: str | None = None
    review_texts: list[str] = Field(default_factory=list, exclude=True)
    menu_insights: MenuInsight = Field(default_factory=MenuInsight)
    taste_profile: TasteProfile = Field(default_factory=TasteProfile)


class DishAvailabilityVerdict(CamelModel):
    has_exact_dish: bool
    has_similar_dish: bool
    confidence: int = Field(..., ge=0, le=100)
    reasoning: str


class RankedResult(EnrichedRestaurant):
    dish_availability: DishAvailabilityVerdict


# ── Responses ────────────────────────────────────────────────────────────


class NearbyResponse(CamelModel):
    restaurants: list[RankedResult]
    search_location: str
    search_radius: int
    original_dish: str
    source_restaurant: str | None = None
    dish_profile: DishProfile | None = None
    note: str | None = None


class AnalyzeDishResponse(CamelModel):
    analysis: str


class SimilarityRequest(CamelModel):
    dish: str | None = None
    restaurant: OriginRestaurant | None = None
    user_location: dict[str, Any] | None = None


class SimilarDish(BaseModel):
    # Keys stay snake_case on the wire, matching what the model is asked to emit.
    name: str = Field(..., min_length=1)
    cuisine: str = ""
    similarity_reason: str = ""
    characteristics: str = ""


class SimilarityResponse(CamelModel):
    original_dish: str
    original_restaurant: OriginRestaurant
    suggestions: list[SimilarDish]
    user_location: dict[str, Any] | None = None


class MockSuggestion(CamelModel):
    dish_name: str
    cuisine: str
    similarity_reason: str


class MockRestaurant(CamelModel):
    name: str
    address: str
    rating: float
    price_level: int
    place_id: str
    location: LatLng
    types: list[str]
    photos: list[PhotoRef] = Field(default_factory=list)
    suggestion: MockSuggestion


class MockNearbyResponse(CamelModel):
    restaurants: list[MockRestaurant]
    search_location: UserLocation
    search_radius: int
    note: str
