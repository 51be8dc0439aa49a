"""Tests for recoflag.adapters.flagship — Decision API client and visitor."""

import asyncio

import httpx
import pytest

from recoflag.adapters.flagship import FlagshipClient, SdkStatus, parse_decisions
from recoflag.core.errors import FlagServiceError
from recoflag.core.models import Credentials

from conftest import DECISION_URL, FakeApi, decision_body

CREDENTIALS = Credentials(env_id="env-1", api_key="key-1")


def _client(api: FakeApi) -> FlagshipClient:
    return FlagshipClient(CREDENTIALS, base_url=DECISION_URL, transport=api.transport)


def _resolve(api: FakeApi, context=None, update=None):
    """Start a client, create a visitor, fetch flags (and refetch after update)."""

    async def run():
        client = await _client(api).start()
        try:
            visitor = client.new_visitor("visitor-1", has_consented=True, context=context)
            await visitor.fetch_flags()
            if update:
                visitor.update_context(update)
                await visitor.fetch_flags()
            return visitor
        finally:
            await client.aclose()

    return asyncio.run(run())


class TestParseDecisions:
    def test_flags_with_metadata(self):
        flags = parse_decisions(decision_body(value="reco-9"))
        flag = flags["flagProductRecs"]
        assert flag.exists
        assert flag.value("x") == "reco-9"
        assert flag.metadata.campaign_id == "c1"
        assert flag.metadata.campaign_name == "Reco block test"
        assert flag.metadata.campaign_type == "ab"
        assert flag.metadata.variation_id == "var1"
        assert flag.metadata.slug == "reco-block"
        assert flag.metadata.is_reference is False

    def test_first_campaign_wins(self):
        body = decision_body(value="first", campaign_id="c1")
        body["campaigns"] += decision_body(value="second", campaign_id="c2")["campaigns"]
        flag = parse_decisions(body)["flagProductRecs"]
        assert flag.value("x") == "first"
        assert flag.metadata.campaign_id == "c1"

    def test_panic_mode_has_no_flags(self):
        assert parse_decisions({"panic": True}) == {}

    def test_no_campaigns(self):
        assert parse_decisions({"visitorId": "v", "campaigns": []}) == {}

    def test_non_object_body(self):
        with pytest.raises(FlagServiceError):
            parse_decisions(["not", "a", "decision"])


class TestFlagshipClient:
    def test_start_and_close_status(self):
        async def run():
            client = _client(FakeApi(body=decision_body()))
            assert client.status is SdkStatus.NOT_INITIALIZED
            await client.start()
            started = client.status
            await client.aclose()
            return started, client.status

        started, closed = asyncio.run(run())
        assert started is SdkStatus.READY
        assert closed is SdkStatus.NOT_INITIALIZED

    def test_fetch_before_start_fails(self):
        async def run():
            client = _client(FakeApi(body=decision_body()))
            visitor = client.new_visitor("v")
            await visitor.fetch_flags()

        with pytest.raises(FlagServiceError):
            asyncio.run(run())

    def test_request_shape(self):
        api = FakeApi(body=decision_body())
        _resolve(api, context={"Session": "Returning"})

        [request] = api.requests
        assert request.method == "POST"
        assert request.url.path == "/v2/env-1/campaigns"
        assert request.url.params["exposeAllKeys"] == "true"
        assert request.headers["x-api-key"] == "key-1"

        body = api.json_bodies()[0]
        assert body["visitorId"] == "visitor-1"
        assert body["visitor_consent"] is True
        assert body["trigger_hit"] is False
        assert body["context"]["Session"] == "Returning"
        assert body["context"]["fs_users"] == "visitor-1"

    def test_visitor_flags(self):
        visitor = _resolve(FakeApi(body=decision_body(value="reco-1")))
        assert visitor.get_flag("flagProductRecs").value("default") == "reco-1"

    def test_missing_flag_uses_default(self):
        visitor = _resolve(FakeApi(body={"campaigns": []}))
        flag = visitor.get_flag("flagProductRecs")
        assert not flag.exists
        assert flag.key == "flagProductRecs"
        assert flag.value("default") == "default"

    def test_update_context_then_refetch(self):
        api = FakeApi(body=decision_body())
        visitor = _resolve(api, context={"Session": "Returning"}, update={"foo": 3, "bar": True})

        assert len(api.requests) == 2
        first, second = api.json_bodies()
        assert "foo" not in first["context"]
        assert second["context"]["foo"] == 3
        assert second["context"]["bar"] is True
        assert visitor.context["Session"] == "Returning"

    def test_predefined_context_cannot_be_overwritten(self):
        visitor = _resolve(FakeApi(body=decision_body()), update={"fs_users": "someone-else"})
        assert visitor.context["fs_users"] == "visitor-1"

    def test_server_error_raises(self):
        with pytest.raises(FlagServiceError):
            _resolve(FakeApi(status=503, body={"message": "down"}))

    def test_invalid_json_raises(self):
        with pytest.raises(FlagServiceError):
            _resolve(FakeApi(body=b"<html>oops</html>"))

    def test_network_error_raises(self):
        api = FakeApi(error=httpx.ConnectError("connection refused"))
        with pytest.raises(FlagServiceError):
            _resolve(api)
