"""Helius RPC client for the largest token holders.

API docs: https://docs.helius.dev/
Requires HELIUS_API_KEY. Uses the standard Solana JSON-RPC method
getTokenLargestAccounts, which returns at most 20 accounts.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..errors import ProviderUnavailable
from ..models import HolderBalance
from .http import DEFAULT_TIMEOUT, HttpProvider

logger = logging.getLogger(__name__)

RPC_BASE = "https://mainnet.helius-rpc.com"


class HeliusClient(HttpProvider):
    provider_name = "helius"

    def __init__(
        self,
        api_key: str,
        base_url: str = RPC_BASE,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, headers={"Content-Type": "application/json"}, timeout=timeout, transport=transport)
        self.api_key = api_key

    async def _rpc(self, method: str, params: list) -> dict:
        payload = {"jsonrpc": "2.0", "id": f"asset-trust-{method}", "method": method, "params": params}
        data = await self.post_json("/", payload, params={"api-key": self.api_key})
        if not isinstance(data, dict):
            raise self.invalid("unexpected response shape")
        if data.get("error"):
            err = data["error"]
            message = err.get("message", "") if isinstance(err, dict) else str(err)
            raise ProviderUnavailable(self.provider_name, f"{method} failed: {message}")
        return data

    async def get_top_holders(self, asset_id: str, n: int) -> list[HolderBalance]:
        """The n largest token accounts by UI amount, largest first."""
        data = await self._rpc("getTokenLargestAccounts", [asset_id])
        result = data.get("result")
        accounts = result.get("value") if isinstance(result, dict) else None
        if not isinstance(accounts, list):
            raise self.invalid("missing result.value")

        holders = []
        for account in accounts:
            try:
                holders.append(HolderBalance(address=account["address"], balance=float(account.get("uiAmount") or 0)))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise self.invalid(f"malformed token account: {exc}") from exc

        holders.sort(key=lambda h: h.balance, reverse=True)
        if holders:
            logger.debug("Helius top holder for %s: %s (%.4f)", asset_id, holders[0].address, holders[0].balance)
        return holders[:n]
