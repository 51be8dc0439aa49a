"""
Core domain models for the recoflag landing page.

Dataclasses cover values the service builds itself (flags, log lines,
recommendation blocks). Pydantic models cover what crosses the HTTP
boundary: products received from the recommendation API and the page
view-model sent to the browser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from recoflag.config import FALLBACK_BLOCK_NAME

ContextValue = Union[bool, int, float, str]


# ============================================================================
# ACCOUNTS
# ============================================================================


class Account(Enum):
    """Flag credential sets selectable with the ``accountValue`` parameter."""

    PRIMARY = "account-1"
    SECONDARY = "account-2"
    TERTIARY = "account-3"

    @classmethod
    def from_param(cls, value: str | None) -> "Account":
        """Map a query value to an account; anything unknown is PRIMARY."""
        for account in cls:
            if account.value == value:
                return account
        return cls.PRIMARY


@dataclass(frozen=True)
class Credentials:
    """Environment id and API key for one Flagship environment."""

    env_id: str
    api_key: str


# ============================================================================
# FLAG MODELS
# ============================================================================


@dataclass(frozen=True)
class FlagMetadata:
    """Campaign information attached to a flag decision.

    All fields are empty strings when the flag was not part of any
    campaign for the visitor.
    """

    campaign_id: str = ""
    campaign_name: str = ""
    campaign_type: str = ""
    variation_group_id: str = ""
    variation_group_name: str = ""
    variation_id: str = ""
    variation_name: str = ""
    is_reference: bool = False
    slug: str = ""


@dataclass(frozen=True)
class Flag:
    """A named decision resolved for a visitor."""

    key: str
    raw_value: Any = None
    exists: bool = False
    metadata: FlagMetadata = field(default_factory=FlagMetadata)

    def value(self, default: Any = None) -> Any:
        """Return the flag value, or ``default`` when it can't be used.

        The default wins when the flag is absent, its value is null, or
        the value's type differs from a non-null default's type.
        """
        if not self.exists or self.raw_value is None:
            return default
        if default is not None and not _same_kind(self.raw_value, default):
            return default
        return self.raw_value


def _same_kind(value: Any, default: Any) -> bool:
    # bool is an int subclass; JSON numbers are int or float
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(value, bool) and isinstance(default, bool)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


# ============================================================================
# LOG MODELS
# ============================================================================


@dataclass(frozen=True)
class LogEntry:
    """A captured flag-client log line."""

    timestamp: str
    level: str
    message: str
    data: Any = None

    def to_dict(self) -> dict:
        entry = {
            "timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
        }
        if self.data is not None:
            entry["data"] = self.data
        return entry


# ============================================================================
# RECOMMENDATION MODELS
# ============================================================================


class Product(BaseModel):
    """A recommended product, kept as the recommendation API returned it.

    Fields are not validated; values are coerced only when rendered.
    """

    model_config = ConfigDict(extra="allow")

    id: Any = None
    name: Any = None
    img_link: Any = None
    price: Any = None


@dataclass
class RecommendationBlock:
    """Products plus the title to show above them.

    ``error`` holds the failure that forced the fallback title, if any.
    """

    products: list[Product] = field(default_factory=list)
    name: str = FALLBACK_BLOCK_NAME
    error: Exception | None = None

    @classmethod
    def fallback(cls, error: Exception | None = None) -> "RecommendationBlock":
        return cls(products=[], name=FALLBACK_BLOCK_NAME, error=error)


# ============================================================================
# VIEW MODEL
# ============================================================================


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FlagMetadataView(_CamelModel):
    campaign_id: str | None = Field(None, alias="campaignId")
    campaign_name: str | None = Field(None, alias="campaignName")
    campaign_type: str | None = Field(None, alias="campaignType")

    @classmethod
    def from_metadata(cls, metadata: FlagMetadata) -> "FlagMetadataView":
        return cls(
            campaign_id=metadata.campaign_id,
            campaign_name=metadata.campaign_name,
            campaign_type=metadata.campaign_type,
        )


class LogEntryView(_CamelModel):
    timestamp: str
    level: str
    message: str
    data: Any = None


class LandingPage(_CamelModel):
    """View-model rendered by the landing page and the JSON endpoint."""

    products: list[Product] = Field(default_factory=list)
    flag_value: str | None = Field(None, alias="flagValue")
    block_name: str = Field(FALLBACK_BLOCK_NAME, alias="blockName")
    visitor_id: str = Field("", alias="visitorId")
    custom_account_value: str | None = Field(None, alias="customAccountValue")
    flag_key: str = Field("", alias="flagKey")
    user_context: dict[str, ContextValue] = Field(
        default_factory=dict, alias="userContext"
    )
    flag_metadata: FlagMetadataView | None = Field(None, alias="flagMetadata")
    flagship_logs: list[LogEntryView] = Field(
        default_factory=list, alias="flagshipLogs"
    )

    @classmethod
    def fallback(cls) -> "LandingPage":
        """All-default page served when the pipeline fails."""
        return cls()

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=False)
