"""
Landing page orchestration.

Per request: parse the query, resolve a visitor against the selected flag
account, pick the recommendation id (override, flag value, or the default
id), fetch the recommendation block, and assemble the view-model with the
captured flag-client logs.

``LandingService.build_page`` is the single failure boundary: any error in
the pipeline yields the all-default page, with the failure kept on the
result so callers can log and count it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Callable, Iterable

from recoflag.adapters.recommendations import RecommendationClient
from recoflag.config import (
    BASE_VISITOR_CONTEXT,
    DEFAULT_RECO_ID,
    RECO_FLAG_KEY,
    Settings,
    get_logger,
)
from recoflag.core.errors import ConfigurationError, LandingError
from recoflag.core.models import (
    Account,
    FlagMetadataView,
    LandingPage,
    LogEntryView,
    RecommendationBlock,
)
from recoflag.core.query import parse_landing_query
from recoflag.services.accounts import FlagProvider
from recoflag.services.log_sink import LogSink

logger = get_logger(__name__)

RecommendationsFactory = Callable[[str, str], RecommendationClient]


@dataclass
class LandingResult:
    """A rendered view-model plus what went wrong while building it."""

    page: LandingPage
    error: Exception | None = None
    recommendation_error: Exception | None = None
    fetched_recommendations: bool = False

    @property
    def degraded(self) -> bool:
        return self.error is not None

    @property
    def reason(self) -> str | None:
        if self.error is None:
            return None
        return getattr(self.error, "reason", "internal_error")


class LandingService:
    """Builds the landing page view-model for one request."""

    def __init__(
        self,
        providers: dict[Account, FlagProvider],
        log_sink: LogSink,
        settings: Settings,
        recommendations_factory: RecommendationsFactory | None = None,
    ):
        self.providers = providers
        self.log_sink = log_sink
        self.settings = settings
        self.recommendations_factory = recommendations_factory or self._default_recommendations

    def _default_recommendations(self, site_id: str, bearer: str) -> RecommendationClient:
        return RecommendationClient(site_id, bearer, base_url=self.settings.recs_api_url)

    async def build_page(self, query_items: Iterable[tuple[str, str]]) -> LandingResult:
        """Build the page, degrading to the default page on any failure."""
        try:
            return await self._build(query_items)
        except LandingError as e:
            logger.warning("Landing page degraded: %s", e, extra={"reason": e.reason})
            return LandingResult(page=LandingPage.fallback(), error=e)
        except Exception as e:
            logger.exception("Landing page failed unexpectedly")
            return LandingResult(page=LandingPage.fallback(), error=e)

    async def _build(self, query_items: Iterable[tuple[str, str]]) -> LandingResult:
        query = parse_landing_query(query_items)
        visitor_id = str(uuid.uuid4())

        if not self.settings.site_id:
            raise ConfigurationError("SITE_ID")
        if not self.settings.recs_bearer:
            raise ConfigurationError("RECS_BEARER")

        account = Account.from_param(query.account_value)
        provider = self.providers[account]

        async with provider.session() as client:
            visitor = client.new_visitor(
                visitor_id, has_consented=True, context=BASE_VISITOR_CONTEXT
            )
            await visitor.fetch_flags()

            if query.context:
                visitor.update_context(query.context)
                await visitor.fetch_flags()

            flag = visitor.get_flag(RECO_FLAG_KEY)

        flag_value = query.flag_value or flag.value(DEFAULT_RECO_ID)

        if flag_value:
            recommendations = self.recommendations_factory(
                self.settings.site_id, self.settings.recs_bearer
            )
            block = await recommendations.fetch(str(flag_value))
        else:
            block = RecommendationBlock.fallback()

        page = LandingPage(
            products=block.products,
            flag_value=flag_value,
            block_name=block.name,
            visitor_id=visitor_id,
            custom_account_value=query.account_value,
            flag_key=flag.key or "unknown",
            user_context=visitor.context,
            flag_metadata=FlagMetadataView.from_metadata(flag.metadata),
            flagship_logs=[
                LogEntryView(**entry.to_dict()) for entry in self.log_sink.entries()
            ],
        )
        logger.info(
            "Landing page built",
            extra={"account": account.value, "reco_id": flag_value, "products": len(block.products)},
        )
        return LandingResult(
            page=page,
            recommendation_error=block.error,
            fetched_recommendations=bool(flag_value),
        )
