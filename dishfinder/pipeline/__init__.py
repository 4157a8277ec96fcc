"""
Dish discovery pipeline.

Responsibilities:
- Profile the source dish at the restaurant the user named.
- Locate nearby restaurant candidates through the Places API.
- Enrich candidates with details, review-mined menu items and taste profiles.
- Ask the LLM, in one batched call, which candidates serve the dish.
- Sort and shape the ranked results for API serialisation.
"""
