"""
Google Places integration.

Responsibilities:
- Manage Places API configuration and credentials.
- Run Text Search and Place Details requests over a shared async HTTP client.
- Raise a single error type for non-successful Places statuses.
"""
