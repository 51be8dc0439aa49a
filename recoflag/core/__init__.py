"""
recoflag core layer.

Pure domain logic: models, typed errors, query coercion and display
formatting. Nothing here performs I/O.
"""

from recoflag.core.display import clean_price, format_log_timestamp
from recoflag.core.errors import (
    ConfigurationError,
    FlagServiceError,
    InvalidInputError,
    LandingError,
    RecommendationServiceError,
)
from recoflag.core.models import (
    Account,
    ContextValue,
    Credentials,
    Flag,
    FlagMetadata,
    FlagMetadataView,
    LandingPage,
    LogEntry,
    LogEntryView,
    Product,
    RecommendationBlock,
)
from recoflag.core.query import (
    LandingQuery,
    coerce_context_value,
    parse_landing_query,
    parse_number,
)

__all__ = [
    # Models
    "Account",
    "ContextValue",
    "Credentials",
    "Flag",
    "FlagMetadata",
    "FlagMetadataView",
    "LandingPage",
    "LogEntry",
    "LogEntryView",
    "Product",
    "RecommendationBlock",
    # Errors
    "LandingError",
    "ConfigurationError",
    "FlagServiceError",
    "RecommendationServiceError",
    "InvalidInputError",
    # Query
    "LandingQuery",
    "coerce_context_value",
    "parse_landing_query",
    "parse_number",
    # Display
    "clean_price",
    "format_log_timestamp",
]
