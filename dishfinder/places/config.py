from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class PlacesConfig:
    api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
    # Browser-side Maps key; served to the UI, never used by the pipeline.
    maps_client_key: str = os.getenv("NEXT_PUBLIC_GOOGLE_MAPS_API_KEY", "")
    base_url: str = "https://maps.googleapis.com/maps/api/place"
    timeout: float = 10.0
    results_per_query: int = 5
    details_fields: str = "name,formatted_phone_number,website,reviews,types,editorial_summary"


DEFAULT_PLACES_CONFIG = PlacesConfig()
