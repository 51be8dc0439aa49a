"""
Flagship Decision API client.

Wraps the Decision API (``POST /{envId}/campaigns``) behind a small
client/visitor interface: start a client for one environment, create a
visitor with a context, fetch its flags, read a flag. Campaign targeting and
allocation happen server-side; this module only carries context in and
decisions out.

The Flagship Python SDK is not used: it keeps its configuration in
process-global state, so it cannot serve three credential sets side by side.

Every line logged here goes to this module's logger with a ``tag`` (the
operation) and, for decision payloads, a ``payload`` extra. The page's log
viewer captures exactly this logger.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping

import httpx

from recoflag import __version__
from recoflag.config import FS_DECISION_API_URL, get_logger
from recoflag.core.errors import FlagServiceError
from recoflag.core.models import ContextValue, Credentials, Flag, FlagMetadata

logger = get_logger(__name__)

# Decision API timeout (seconds)
DECISION_TIMEOUT = 2.0

SDK_CLIENT = "python"

# Context keys the client sets itself; visitors cannot overwrite them
PREDEFINED_CONTEXT_KEYS = frozenset({"fs_client", "fs_version", "fs_users"})


class SdkStatus(Enum):
    """Lifecycle of a FlagshipClient."""

    NOT_INITIALIZED = "NOT_INITIALIZED"
    STARTING = "STARTING"
    READY = "READY"


def _log(level: int, tag: str, message: str, payload: Any = None) -> None:
    extra: dict[str, Any] = {"tag": tag}
    if payload is not None:
        extra["payload"] = payload
    logger.log(level, message, extra=extra)


# ---------------------------------------------------------------------------
# Decision parsing
# ---------------------------------------------------------------------------


def parse_decisions(data: Any) -> dict[str, Flag]:
    """Turn a Decision API body into flags keyed by flag name.

    When two campaigns expose the same key, the first one wins.

    Raises:
        FlagServiceError: If the body is not a decision object.
    """
    if not isinstance(data, dict):
        raise FlagServiceError("Decision API returned a non-object body")

    if data.get("panic"):
        _log(logging.WARNING, "fetchFlags", "Panic mode is enabled: all flags use defaults")
        return {}

    flags: dict[str, Flag] = {}
    for campaign in data.get("campaigns") or []:
        variation = campaign.get("variation") or {}
        modifications = (variation.get("modifications") or {}).get("value") or {}
        metadata = FlagMetadata(
            campaign_id=campaign.get("id") or "",
            campaign_name=campaign.get("name") or "",
            campaign_type=campaign.get("type") or "",
            variation_group_id=campaign.get("variationGroupId") or "",
            variation_group_name=campaign.get("variationGroupName") or "",
            variation_id=variation.get("id") or "",
            variation_name=variation.get("name") or "",
            is_reference=bool(variation.get("reference")),
            slug=campaign.get("slug") or "",
        )
        for key, value in modifications.items():
            if key in flags:
                continue
            flags[key] = Flag(key=key, raw_value=value, exists=True, metadata=metadata)
    return flags


# ---------------------------------------------------------------------------
# Visitor
# ---------------------------------------------------------------------------


class Visitor:
    """A visitor bound to one FlagshipClient for the length of a request."""

    def __init__(
        self,
        client: "FlagshipClient",
        visitor_id: str,
        has_consented: bool,
        context: Mapping[str, ContextValue] | None = None,
    ):
        self.visitor_id = visitor_id
        self.has_consented = has_consented
        self._client = client
        self._context: dict[str, ContextValue] = {
            "fs_client": SDK_CLIENT,
            "fs_version": __version__,
            "fs_users": visitor_id,
        }
        self._flags: dict[str, Flag] = {}
        if context:
            self.update_context(context)

    @property
    def context(self) -> dict[str, ContextValue]:
        return dict(self._context)

    @property
    def flags(self) -> dict[str, Flag]:
        return dict(self._flags)

    def update_context(self, context: Mapping[str, ContextValue]) -> None:
        """Merge ``context`` into the visitor context.

        Predefined keys and non-primitive values are skipped with a log line.
        New decisions need a following ``fetch_flags()``.
        """
        for key, value in context.items():
            if key in PREDEFINED_CONTEXT_KEYS:
                _log(logging.WARNING, "updateContext", f"Context key {key} is predefined and cannot be overwritten")
                continue
            if not isinstance(value, (bool, int, float, str)):
                _log(logging.ERROR, "updateContext", f"Context value for {key} must be a string, number or boolean")
                continue
            self._context[key] = value
        _log(logging.DEBUG, "updateContext", f"Visitor {self.visitor_id} context updated", self.context)

    async def fetch_flags(self) -> None:
        """Replace this visitor's flags with fresh decisions."""
        self._flags = await self._client.fetch_decisions(self)

    def get_flag(self, key: str) -> Flag:
        """Return the flag named ``key``; an absent flag has no value."""
        flag = self._flags.get(key)
        if flag is None:
            _log(logging.WARNING, "getFlag", f"Flag {key} not found for visitor {self.visitor_id}, default value will be used")
            return Flag(key=key)
        return flag


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class FlagshipClient:
    """Decision API client for one Flagship environment."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = FS_DECISION_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DECISION_TIMEOUT,
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.status = SdkStatus.NOT_INITIALIZED
        self._transport = transport
        self._timeout = timeout
        self._http: httpx.AsyncClient | None = None

    async def start(self) -> "FlagshipClient":
        """Open the HTTP client and mark the client ready."""
        self._set_status(SdkStatus.STARTING)
        _log(
            logging.INFO,
            "start",
            f"Flagship SDK (version: {__version__}) is starting in DECISION_API mode "
            f"for environment {self.credentials.env_id}",
        )
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            transport=self._transport,
            timeout=self._timeout,
            headers={
                "x-api-key": self.credentials.api_key,
                "x-sdk-client": SDK_CLIENT,
                "x-sdk-version": __version__,
            },
        )
        self._set_status(SdkStatus.READY)
        return self

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
        self._set_status(SdkStatus.NOT_INITIALIZED)

    def new_visitor(
        self,
        visitor_id: str,
        has_consented: bool = True,
        context: Mapping[str, ContextValue] | None = None,
    ) -> Visitor:
        visitor = Visitor(self, visitor_id, has_consented, context)
        _log(logging.DEBUG, "newVisitor", f"Visitor {visitor_id} created", visitor.context)
        return visitor

    async def fetch_decisions(self, visitor: Visitor) -> dict[str, Flag]:
        """POST the visitor context to the Decision API and parse the flags.

        Raises:
            FlagServiceError: On a non-started client, a transport error, a
                non-2xx status or an unreadable body.
        """
        if self.status is not SdkStatus.READY or self._http is None:
            raise FlagServiceError("Flagship client is not started")

        body = {
            "visitorId": visitor.visitor_id,
            "anonymousId": None,
            "trigger_hit": False,
            "context": visitor.context,
            "visitor_consent": visitor.has_consented,
        }
        _log(logging.DEBUG, "fetchFlags", f"Fetching flags for visitor {visitor.visitor_id}", body)

        try:
            response = await self._http.post(
                f"/{self.credentials.env_id}/campaigns",
                params={"exposeAllKeys": "true"},
                json=body,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            _log(logging.ERROR, "fetchFlags", f"Decision API returned {e.response.status_code}")
            raise FlagServiceError(
                f"Decision API returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            _log(logging.ERROR, "fetchFlags", f"Decision API request failed: {e}")
            raise FlagServiceError(f"Decision API request failed: {e}") from e
        except ValueError as e:
            _log(logging.ERROR, "fetchFlags", "Decision API returned invalid JSON")
            raise FlagServiceError("Decision API returned invalid JSON") from e

        flags = parse_decisions(data)
        _log(
            logging.INFO,
            "fetchFlags",
            f"Fetched {len(flags)} flags for visitor {visitor.visitor_id}",
            data,
        )
        return flags

    def _set_status(self, status: SdkStatus) -> None:
        if status is not self.status:
            self.status = status
            _log(logging.DEBUG, "start", f"SDK status changed: {status.value}")
