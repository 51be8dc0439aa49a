"""
recoflag services layer.

Orchestration between the core domain and the adapters: the flag-client
log sink, per-account client providers, and the landing page service.
"""

from recoflag.services.accounts import (
    FlagProvider,
    FreshFlagProvider,
    SharedFlagProvider,
    build_providers,
    credentials_for,
)
from recoflag.services.landing import LandingResult, LandingService
from recoflag.services.log_sink import LogSink

__all__ = [
    # Accounts
    "FlagProvider",
    "SharedFlagProvider",
    "FreshFlagProvider",
    "build_providers",
    "credentials_for",
    # Landing
    "LandingService",
    "LandingResult",
    # Logs
    "LogSink",
]
