"""
recoflag adapters layer.

External service wrappers: the Flagship Decision API client and the
recommendation API client.
"""

from recoflag.adapters.flagship import (
    FlagshipClient,
    SdkStatus,
    Visitor,
    parse_decisions,
)
from recoflag.adapters.recommendations import RecommendationClient

__all__ = [
    # Flagship
    "FlagshipClient",
    "SdkStatus",
    "Visitor",
    "parse_decisions",
    # Recommendations
    "RecommendationClient",
]
