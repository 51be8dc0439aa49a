"""
recoflag configuration module.

Central configuration for the landing page service.
Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


# ---------------------------------------------------------------------------
# Recommendation API
# ---------------------------------------------------------------------------

RECS_API_URL = os.getenv("RECS_API_URL", "https://uc-info.eu.abtasty.com")

# Fixed query sent with every recommendation request
RECS_VARIABLES = {"viewing_item": "456"}
RECS_FIELDS = ["id", "name", "img_link", "price"]

FALLBACK_BLOCK_NAME = "Our Top Picks For You"


# ---------------------------------------------------------------------------
# Flagship Decision API
# ---------------------------------------------------------------------------

FS_DECISION_API_URL = os.getenv(
    "FS_DECISION_API_URL", "https://decision.flagship.io/v2"
)

# Environment variable names per credential set: (env id, api key)
FS_CREDENTIAL_VARS = {
    "account-1": ("FS_ENV_ID", "FS_API_KEY"),
    "account-2": ("FS_ENV_ID_DAVID", "FS_API_KEY_DAVID"),
    "account-3": ("FS_ENV_ID_ED", "FS_API_KEY_ED"),
}


# ---------------------------------------------------------------------------
# Landing page
# ---------------------------------------------------------------------------

RECO_FLAG_KEY = "flagProductRecs"
DEFAULT_RECO_ID = "07275641-4a2e-49b2-aa5d-bb4b7b8b2a4c"
BASE_VISITOR_CONTEXT = {"Session": "Returning"}

# Preset recommendation ids offered by the override form
RECO_PRESETS = [
    "9174ac6d-6b74-4234-b412-7d2d0d4acdad",
    "b7c76816-dcf3-4c0c-9023-a80a3a348151",
    "b24cc1cb-bf79-4784-b23b-0a66b3593509",
    "e5570bbc-9f91-48ec-b0ec-5d6ab941e402",
    "875bb146-4a9c-4e26-ab67-02b2ccb87ca1",
    "07275641-4a2e-49b2-aa5d-bb4b7b8b2a4c",
    "2e2c9992-2c5d-466a-bded-71cb2a059730",
]
CUSTOM_RECO_PLACEHOLDER = "2e2c9992-2c5d-466a-bded-71cb2a059730"

CACHE_CONTROL = "public, max-age=15, stale-while-revalidate=15"

LOG_SINK_SIZE = int(os.getenv("RECOFLAG_LOG_SINK_SIZE", "1000"))

GA_MEASUREMENT_ID = os.getenv("GA_MEASUREMENT_ID")


# ---------------------------------------------------------------------------
# Settings snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Per-app settings, injectable in tests.

    Credentials are not stored here; providers read them lazily through
    ``env`` so a missing key only fails the request that needs it.
    """

    site_id: str | None = None
    recs_bearer: str | None = None
    recs_api_url: str = RECS_API_URL
    decision_api_url: str = FS_DECISION_API_URL
    log_sink_size: int = LOG_SINK_SIZE
    ga_measurement_id: str | None = None
    env: dict[str, str] | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            site_id=os.getenv("SITE_ID"),
            recs_bearer=os.getenv("RECS_BEARER"),
            recs_api_url=RECS_API_URL,
            decision_api_url=FS_DECISION_API_URL,
            log_sink_size=LOG_SINK_SIZE,
            ga_measurement_id=GA_MEASUREMENT_ID,
        )

    def lookup(self, name: str) -> str | None:
        """Read a variable from the injected mapping, else the process env."""
        if self.env is not None:
            return self.env.get(name)
        return os.getenv(name)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

from recoflag.config.logging import (  # noqa: E402
    LOG_FORMAT,
    LOG_LEVEL,
    configure_logging,
    get_logger,
)


__all__ = [
    # Recommendation API
    "RECS_API_URL",
    "RECS_VARIABLES",
    "RECS_FIELDS",
    "FALLBACK_BLOCK_NAME",
    # Flagship
    "FS_DECISION_API_URL",
    "FS_CREDENTIAL_VARS",
    # Landing page
    "RECO_FLAG_KEY",
    "DEFAULT_RECO_ID",
    "BASE_VISITOR_CONTEXT",
    "RECO_PRESETS",
    "CUSTOM_RECO_PLACEHOLDER",
    "CACHE_CONTROL",
    "LOG_SINK_SIZE",
    "GA_MEASUREMENT_ID",
    "Settings",
    # Logging
    "get_logger",
    "configure_logging",
    "LOG_LEVEL",
    "LOG_FORMAT",
]
