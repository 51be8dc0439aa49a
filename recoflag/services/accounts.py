"""
Flag client providers, one per account.

Each account hands out a started FlagshipClient through the same interface,
``FlagProvider.session()``. The primary account keeps a process-lifetime
client; the secondary and tertiary accounts build a client per request and
close it afterwards.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from recoflag.adapters.flagship import FlagshipClient, SdkStatus
from recoflag.config import FS_CREDENTIAL_VARS, Settings, get_logger
from recoflag.core.errors import ConfigurationError
from recoflag.core.models import Account, Credentials

logger = get_logger(__name__)

ClientFactory = Callable[[Credentials], FlagshipClient]


def require_env(settings: Settings, name: str) -> str:
    """Return a required variable or raise ConfigurationError."""
    value = settings.lookup(name)
    if not value:
        raise ConfigurationError(name)
    return value


def credentials_for(account: Account, settings: Settings) -> Credentials:
    env_var, key_var = FS_CREDENTIAL_VARS[account.value]
    return Credentials(
        env_id=require_env(settings, env_var),
        api_key=require_env(settings, key_var),
    )


class FlagProvider(ABC):
    """Hands out a started client for one account."""

    def __init__(self, account: Account, settings: Settings, factory: ClientFactory):
        self.account = account
        self.settings = settings
        self.factory = factory

    @abstractmethod
    def session(self) -> "AsyncIterator[FlagshipClient]":
        """Async context manager yielding a started client."""

    async def aclose(self) -> None:
        """Release long-lived resources (no-op by default)."""


class SharedFlagProvider(FlagProvider):
    """Process-lifetime client.

    Concurrent first use awaits one in-flight start instead of starting
    twice. A failed start is not cached; the next request retries.
    """

    def __init__(self, account: Account, settings: Settings, factory: ClientFactory):
        super().__init__(account, settings, factory)
        self._client: FlagshipClient | None = None
        self._starting: asyncio.Future[FlagshipClient] | None = None

    async def get_client(self) -> FlagshipClient:
        if self._client is not None and self._client.status is not SdkStatus.NOT_INITIALIZED:
            return self._client

        if self._starting is None:
            credentials = credentials_for(self.account, self.settings)
            self._starting = asyncio.ensure_future(self._start(credentials))

        starting = self._starting
        try:
            return await asyncio.shield(starting)
        except BaseException:
            if self._starting is starting and starting.done():
                self._starting = None
            raise

    async def _start(self, credentials: Credentials) -> FlagshipClient:
        client = await self.factory(credentials).start()
        self._client = client
        logger.info("Shared flag client ready for %s", self.account.value)
        return client

    @asynccontextmanager
    async def session(self) -> AsyncIterator[FlagshipClient]:
        yield await self.get_client()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
        self._client = None
        self._starting = None


class FreshFlagProvider(FlagProvider):
    """A new client per request, closed when the request is done."""

    @asynccontextmanager
    async def session(self) -> AsyncIterator[FlagshipClient]:
        client = self.factory(credentials_for(self.account, self.settings))
        await client.start()
        try:
            yield client
        finally:
            await client.aclose()


def default_client_factory(settings: Settings) -> ClientFactory:
    def factory(credentials: Credentials) -> FlagshipClient:
        return FlagshipClient(credentials, base_url=settings.decision_api_url)

    return factory


def build_providers(
    settings: Settings,
    factory: ClientFactory | None = None,
) -> dict[Account, FlagProvider]:
    """Map every account to its provider."""
    factory = factory or default_client_factory(settings)
    return {
        Account.PRIMARY: SharedFlagProvider(Account.PRIMARY, settings, factory),
        Account.SECONDARY: FreshFlagProvider(Account.SECONDARY, settings, factory),
        Account.TERTIARY: FreshFlagProvider(Account.TERTIARY, settings, factory),
    }
