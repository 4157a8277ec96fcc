from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    max_candidates: int = 12
    max_enriched: int = 8
    max_results: int = 15
    menu_review_limit: int = 10
    taste_review_limit: int = 8
    max_menu_items: int = 15
    ranking_menu_items: int = 5
    default_radius_meters: int = 5000


DEFAULT_PIPELINE_CONFIG = PipelineConfig()
