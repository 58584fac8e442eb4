"""DexScreener API client for pooled liquidity and 24h volume.

API docs: https://docs.dexscreener.com/api/reference
Public API, no key required. Rate limit: 300 requests/minute.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import httpx

from .http import DEFAULT_TIMEOUT, HttpProvider

logger = logging.getLogger(__name__)

API_BASE = "https://api.dexscreener.com"


def _sort_key(pair: dict) -> float:
    try:
        return float((pair.get("liquidity") or {}).get("usd") or 0)
    except (AttributeError, TypeError, ValueError):
        return 0.0


class DexScreenerClient(HttpProvider):
    """Liquidity and volume summed across every pair that trades the token."""

    provider_name = "dexscreener"

    def __init__(
        self,
        base_url: str = API_BASE,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)

    async def fetch_pairs(self, mint: str) -> list[dict]:
        """All pairs for a token, deepest pool first."""
        data = await self.get_json(f"/latest/dex/tokens/{mint}")
        if not isinstance(data, dict):
            raise self.invalid("unexpected response shape")
        pairs = data.get("pairs") or []
        if not isinstance(pairs, list):
            raise self.invalid("pairs is not a list")
        pairs = [p for p in pairs if isinstance(p, dict)]
        if not pairs:
            raise self.invalid(f"no trading pairs for {mint}")
        pairs.sort(key=_sort_key, reverse=True)
        logger.debug("DexScreener returned %d pairs for %s", len(pairs), mint)
        return pairs

    def _sum_field(self, pairs: list[dict], section: str, key: str, mint: str) -> float:
        """Sum section.key over the pairs that report it.

        Pairs without the field are skipped. A present but non-numeric value,
        or no pair reporting the field at all, is invalid data.
        """
        total = 0.0
        reported = 0
        for pair in pairs:
            block = pair.get(section)
            if not isinstance(block, dict) or block.get(key) is None:
                continue
            try:
                value = float(block[key])
            except (TypeError, ValueError):
                raise self.invalid(f"{section}.{key} is not a number: {block[key]!r}") from None
            if not math.isfinite(value) or value < 0:
                raise self.invalid(f"{section}.{key} out of range: {value}")
            total += value
            reported += 1
        if not reported:
            raise self.invalid(f"no {section} data for {mint}")
        return total

    async def get_liquidity(self, asset_id: str) -> float:
        pairs = await self.fetch_pairs(asset_id)
        return self._sum_field(pairs, "liquidity", "usd", asset_id)

    async def get_volume_24h(self, asset_id: str) -> float:
        pairs = await self.fetch_pairs(asset_id)
        return self._sum_field(pairs, "volume", "h24", asset_id)
