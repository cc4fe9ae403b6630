"""QuoteSource interface and the shared httpx plumbing for HTTP providers."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import httpx

from market_signals.models import AssetClass, Quote


class ProviderError(Exception):
    """The provider answered, but with something we can't use."""


class ProviderUnavailable(ProviderError):
    """The provider is unreachable or not configured."""


def checked_price(provider: str, symbol: str, value: Any) -> float:
    """Parse an upstream price; non-finite or non-positive values are rejected."""
    try:
        price = float(value)
    except (TypeError, ValueError) as exc:
        raise ProviderError(f"{provider}: unparseable price for {symbol}: {value!r}") from exc
    if not math.isfinite(price) or price <= 0:
        raise ProviderError(f"{provider}: unusable price for {symbol}: {value!r}")
    return price


class QuoteSource(ABC):
    """Fetches a current price/volume for a symbol of a given asset class."""

    name: str

    @abstractmethod
    async def fetch(self, symbol: str, asset_class: AssetClass) -> Quote:
        """Return a fresh quote or raise ProviderError / ProviderUnavailable."""
        ...

    async def close(self) -> None:
        """Release any held connections."""


class HttpQuoteSource(QuoteSource):
    """Base for REST providers — lazily-created httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport)
        return self._http

    async def close(self) -> None:
        if self._http and not self._http.is_closed:
            await self._http.aclose()

    async def _get_json(
        self,
        path: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        http = await self._get_http()
        try:
            resp = await http.get(f"{self.base_url}{path}", params=params, headers=headers)
        except httpx.TransportError as exc:
            raise ProviderUnavailable(f"{self.name}: {exc!r}") from exc
        if resp.is_error:
            raise ProviderError(f"{self.name}: HTTP {resp.status_code} {resp.reason_phrase}")
        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(f"{self.name}: invalid JSON payload") from exc
