"""Shared fixtures: settings and fake upstream APIs built on httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from recoflag.adapters.flagship import FlagshipClient
from recoflag.adapters.recommendations import RecommendationClient
from recoflag.config import Settings

DECISION_URL = "https://decision.test/v2"
RECO_URL = "https://reco.test"

FLAG_ENV = {
    "FS_ENV_ID": "env-1",
    "FS_API_KEY": "key-1",
    "FS_ENV_ID_DAVID": "env-2",
    "FS_API_KEY_DAVID": "key-2",
    "FS_ENV_ID_ED": "env-3",
    "FS_API_KEY_ED": "key-3",
}


def make_settings(**overrides) -> Settings:
    values = {
        "site_id": "site-42",
        "recs_bearer": "secret-token",
        "recs_api_url": RECO_URL,
        "decision_api_url": DECISION_URL,
        "log_sink_size": 100,
        "env": dict(FLAG_ENV),
    }
    values.update(overrides)
    return Settings(**values)


def decision_body(value="reco-from-flag", key="flagProductRecs", campaign_id="c1") -> dict:
    return {
        "visitorId": "visitor",
        "campaigns": [
            {
                "id": campaign_id,
                "name": "Reco block test",
                "type": "ab",
                "slug": "reco-block",
                "variationGroupId": "vg1",
                "variationGroupName": "Everyone",
                "variation": {
                    "id": "var1",
                    "name": "Variation 1",
                    "reference": False,
                    "modifications": {"type": "JSON", "value": {key: value}},
                },
            }
        ],
    }


class FakeApi:
    """Records requests and answers with a fixed status/body."""

    def __init__(self, status: int = 200, body=None, error: Exception | None = None):
        self.status = status
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status, content=self.body)
        return httpx.Response(self.status, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def json_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def decision_api() -> FakeApi:
    return FakeApi(body=decision_body())


@pytest.fixture
def reco_api() -> FakeApi:
    return FakeApi(
        body={
            "name": "Trending now",
            "items": [
                {"id": "p1", "name": "Lamp", "img_link": "https://img.test/1.png", "price": "19.99"},
                {"id": 2, "name": "Chair", "img_link": "https://img.test/2.png", "price": 120},
            ],
        }
    )


@pytest.fixture
def client_factory(settings, decision_api):
    def factory(credentials):
        return FlagshipClient(
            credentials,
            base_url=settings.decision_api_url,
            transport=decision_api.transport,
        )

    return factory


@pytest.fixture
def recommendations_factory(reco_api):
    def factory(site_id, bearer):
        return RecommendationClient(
            site_id, bearer, base_url=RECO_URL, transport=reco_api.transport
        )

    return factory
