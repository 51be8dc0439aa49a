"""
FastAPI application factory.

The lifespan builds one ``LandingContext`` per app (settings, account
providers, flag-client log sink, landing service) and stores it on
``app.state.landing``, so no request touches module-level mutable state.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from recoflag import __version__
from recoflag.adapters import flagship
from recoflag.api.middleware import LatencyMiddleware
from recoflag.api.routes import router
from recoflag.config import Settings, get_logger
from recoflag.core.models import Account
from recoflag.services.accounts import FlagProvider, build_providers
from recoflag.services.landing import LandingService, RecommendationsFactory
from recoflag.services.log_sink import LogSink

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")]

logger = get_logger(__name__)


@dataclass
class LandingContext:
    """Application-scoped collaborators shared by all requests."""

    settings: Settings
    providers: dict[Account, FlagProvider]
    log_sink: LogSink
    service: LandingService

    async def aclose(self) -> None:
        for provider in self.providers.values():
            await provider.aclose()


def build_context(
    settings: Settings | None = None,
    providers: dict[Account, FlagProvider] | None = None,
    recommendations_factory: RecommendationsFactory | None = None,
) -> LandingContext:
    settings = settings or Settings.from_env()
    providers = providers or build_providers(settings)
    log_sink = LogSink(settings.log_sink_size)
    service = LandingService(providers, log_sink, settings, recommendations_factory)
    return LandingContext(settings, providers, log_sink, service)


def create_app(
    settings: Settings | None = None,
    providers: dict[Account, FlagProvider] | None = None,
    recommendations_factory: RecommendationsFactory | None = None,
) -> FastAPI:
    """Application factory."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        logger.info("Starting recoflag...")
        landing = build_context(settings, providers, recommendations_factory)

        if not landing.settings.site_id or not landing.settings.recs_bearer:
            logger.warning(
                "SITE_ID or RECS_BEARER is not set -- every page will use the fallback view"
            )

        landing.log_sink.attach(flagship.logger)
        app.state.landing = landing
        logger.info("recoflag ready")
        yield
        logger.info("recoflag shutting down")
        landing.log_sink.detach(flagship.logger)
        await landing.aclose()

    app = FastAPI(
        title="recoflag",
        description="Flag-driven product recommendation landing page",
        version=__version__,
        lifespan=_lifespan,
    )
    app.add_middleware(LatencyMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app
