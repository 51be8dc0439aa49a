"""
Typed failures for the landing page pipeline.

Every error names a ``reason`` used as the log field and metrics label, so
the outer boundary can tell a misconfigured deployment from an upstream
outage even though both degrade the page the same way.
"""

from __future__ import annotations


class LandingError(Exception):
    """Base class for failures that degrade the landing page."""

    reason = "internal_error"


class ConfigurationError(LandingError):
    """A required environment variable is missing or empty."""

    reason = "configuration"

    def __init__(self, name: str):
        super().__init__(f"Missing environment variable: {name}")
        self.name = name


class FlagServiceError(LandingError):
    """The flag Decision API could not produce decisions."""

    reason = "flag_service_unavailable"


class RecommendationServiceError(LandingError):
    """The recommendation API call failed (status, transport or body)."""

    reason = "recommendation_unavailable"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidInputError(LandingError):
    """A query parameter cannot become a visitor context entry."""

    reason = "invalid_input"
