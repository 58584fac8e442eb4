"""Jupiter Price API v3 client.

API docs: https://dev.jup.ag/docs/price-api
JUPITER_API_KEY is sent as x-api-key when set; without it the keyless
lite endpoint is used.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .http import DEFAULT_TIMEOUT, HttpProvider

logger = logging.getLogger(__name__)

API_BASE = "https://api.jup.ag"
LITE_API_BASE = "https://lite-api.jup.ag"


class JupiterPriceClient(HttpProvider):
    provider_name = "jupiter"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"x-api-key": api_key} if api_key else {}
        super().__init__(base_url or (API_BASE if api_key else LITE_API_BASE), headers=headers, timeout=timeout, transport=transport)

    async def get_price(self, asset_id: str) -> float:
        data = await self.get_json("/price/v3", params={"ids": asset_id})
        entry = data.get(asset_id) if isinstance(data, dict) else None
        if not isinstance(entry, dict) or entry.get("usdPrice") is None:
            raise self.invalid(f"no price for {asset_id}")
        try:
            price = float(entry["usdPrice"])
        except (TypeError, ValueError):
            raise self.invalid(f"usdPrice is not a number: {entry['usdPrice']!r}") from None
        if price <= 0:
            raise self.invalid(f"non-positive price for {asset_id}: {price}")
        logger.debug("Jupiter price %s = %.6f", asset_id, price)
        return price
