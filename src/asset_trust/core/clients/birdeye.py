"""Birdeye public API client for OHLCV volume history and 24h volume.

API docs: https://docs.birdeye.so/
BIRDEYE_API_KEY is sent as X-API-KEY. Free tier: 100 requests/day.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx

from .http import DEFAULT_TIMEOUT, HttpProvider

logger = logging.getLogger(__name__)

API_BASE = "https://public-api.birdeye.so"

WINDOW_SECONDS: dict[str, int] = {
    "1D": 86_400,
    "1W": 604_800,
    "1M": 2_592_000,
    "3M": 7_776_000,
    "1Y": 31_536_000,
}

WINDOW_INTERVAL: dict[str, str] = {
    "1D": "15m",
    "1W": "1H",
    "1M": "4H",
    "3M": "1D",
    "1Y": "1D",
}


class BirdeyeClient(HttpProvider):
    provider_name = "birdeye"

    def __init__(
        self,
        api_key: Optional[str] = None,
        chain: str = "solana",
        base_url: str = API_BASE,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"x-chain": chain}
        if api_key:
            headers["X-API-KEY"] = api_key
        super().__init__(base_url, headers=headers, timeout=timeout, transport=transport)

    def _payload(self, data: Any) -> Any:
        if not isinstance(data, dict) or not data.get("success"):
            raise self.invalid("request was not successful")
        return data.get("data")

    async def get_volume_series(self, asset_id: str, window: str) -> list[float]:
        """Per-candle USD volume over the window, oldest first."""
        if window not in WINDOW_SECONDS:
            raise ValueError(f"Invalid window: {window}. Use one of {', '.join(WINDOW_SECONDS)}")

        now = int(time.time())
        params = {
            "address": asset_id,
            "type": WINDOW_INTERVAL[window],
            "time_from": now - WINDOW_SECONDS[window],
            "time_to": now,
        }
        payload = self._payload(await self.get_json("/defi/ohlcv", params=params))
        if not isinstance(payload, dict):
            raise self.invalid(f"no OHLCV data for {asset_id}")
        items = payload.get("items")
        if items is None:
            logger.info("No Birdeye OHLCV data for %s (%s)", asset_id, window)
            return []
        if not isinstance(items, list):
            raise self.invalid("items is not a list")

        candles = []
        for item in items:
            try:
                volume = item["v"] if "v" in item else item["volume"]
                candles.append((int(item["unixTime"]), float(volume or 0)))
            except (KeyError, TypeError, ValueError) as exc:
                raise self.invalid(f"malformed candle: {exc}") from exc

        candles.sort()
        logger.debug("Birdeye returned %d candles for %s (%s)", len(candles), asset_id, window)
        return [volume for _, volume in candles]

    async def get_volume_24h(self, asset_id: str) -> float:
        payload = self._payload(await self.get_json("/defi/token_overview", params={"address": asset_id}))
        value = payload.get("v24hUSD") if isinstance(payload, dict) else None
        if value is None:
            raise self.invalid(f"no 24h volume for {asset_id}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise self.invalid(f"v24hUSD is not a number: {value!r}") from None
