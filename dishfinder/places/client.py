"""Async client for the Google Places web service."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from ..pipeline.errors import MissingConfigError
from .config import DEFAULT_PLACES_CONFIG, PlacesConfig

logger = logging.getLogger(__name__)

_OK_STATUSES = {"OK", "ZERO_RESULTS"}


class PlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


class PlacesClient:
    def __init__(self, http: httpx.AsyncClient, config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> None:
        self.http = http
        self.config = config

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.is_configured:
            raise MissingConfigError("GOOGLE_PLACES_API_KEY")
        response = await self.http.get(
            f"{self.config.base_url}/{endpoint}/json",
            params={**params, "key": self.config.api_key},
            timeout=self.config.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        status = payload.get("status")
        if status not in _OK_STATUSES:
            logger.error("%s failed: status=%s, error_message=%s", endpoint, status, payload.get("error_message"))
            raise PlacesError(payload.get("error_message") or status)
        return payload

    async def text_search(
        self,
        query: str,
        latitude: float,
        longitude: float,
        radius: int,
    ) -> list[dict[str, Any]]:
        payload = await self._get(
            "textsearch",
            {
                "query": query,
                "location": f"{latitude},{longitude}",
                "radius": radius,
                "type": "restaurant",
            },
        )
        return payload.get("results", [])

    async def place_details(self, place_id: str) -> dict[str, Any]:
        payload = await self._get(
            "details",
            {"place_id": place_id, "fields": self.config.details_fields},
        )
        return payload.get("result", {})
