"""
Recommendation API client.

One unauthenticated-except-for-bearer GET per page view:

    GET {base}/v1/reco/{siteId}/recos/{recoId}?variables=<json>&fields=<json>

Any failure (status, transport, body) degrades to an empty block with the
fallback title. The failure is kept on the block for logging; it is never
raised to the caller.
"""

from __future__ import annotations

import json
from urllib.parse import quote

import httpx

from recoflag.config import (
    FALLBACK_BLOCK_NAME,
    RECS_API_URL,
    RECS_FIELDS,
    RECS_VARIABLES,
    get_logger,
)
from recoflag.core.errors import RecommendationServiceError
from recoflag.core.models import Product, RecommendationBlock

logger = get_logger(__name__)


class RecommendationClient:
    """Fetches a recommendation block for a reco id."""

    def __init__(
        self,
        site_id: str,
        bearer: str,
        *,
        base_url: str = RECS_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.site_id = site_id
        self.base_url = base_url.rstrip("/")
        self._bearer = bearer
        self._transport = transport

    def build_url(self, reco_id: str) -> str:
        return (
            f"{self.base_url}/v1/reco/{quote(self.site_id, safe='')}"
            f"/recos/{quote(reco_id, safe='')}"
        )

    def build_params(self) -> dict[str, str]:
        return {
            "variables": json.dumps(RECS_VARIABLES, separators=(",", ":")),
            "fields": json.dumps(RECS_FIELDS, separators=(",", ":")),
        }

    async def fetch(self, reco_id: str) -> RecommendationBlock:
        """Return the block for ``reco_id``, or the fallback block on failure."""
        try:
            products, name = await self._request(reco_id)
        except RecommendationServiceError as e:
            logger.warning("Recommendations unavailable for %s: %s", reco_id, e)
            return RecommendationBlock.fallback(error=e)

        logger.info("Fetched %d recommendations for %s", len(products), reco_id)
        return RecommendationBlock(products=products, name=name or FALLBACK_BLOCK_NAME)

    async def _request(self, reco_id: str) -> tuple[list[Product], str | None]:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    self.build_url(reco_id),
                    params=self.build_params(),
                    headers={"Authorization": f"Bearer {self._bearer}"},
                )
        except httpx.HTTPError as e:
            raise RecommendationServiceError(f"Request failed: {e}") from e

        if not response.is_success:
            raise RecommendationServiceError(
                f"Recommendation API returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RecommendationServiceError(f"Unreadable response body: {e}") from e
        if not isinstance(data, dict):
            raise RecommendationServiceError("Unreadable response body: not an object")

        items = data.get("items")
        products = []
        for item in items if isinstance(items, list) else []:
            if not isinstance(item, dict):
                logger.warning("Skipping recommendation item that is not an object: %r", item)
                continue
            products.append(Product.model_validate(item))

        name = data.get("name")
        return products, name if isinstance(name, str) else None
