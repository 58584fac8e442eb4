"""Shared httpx plumbing for provider clients.

Translates transport failures into the provider error taxonomy so every
client fails the same way.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ..errors import ProviderDataInvalid, ProviderTimeout, ProviderUnavailable

DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)


class HttpProvider:
    """Base for providers that speak JSON over HTTP."""

    provider_name = "http"

    def __init__(
        self,
        base_url: str,
        headers: Optional[dict[str, str]] = None,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = {"Accept": "application/json", **(headers or {})}
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as exc:
            raise ProviderTimeout(self.provider_name, str(exc) or "request timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailable(self.provider_name, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailable(self.provider_name, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise ProviderDataInvalid(self.provider_name, "response is not JSON") from exc

    async def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request_json("GET", path, params=params)

    async def post_json(self, path: str, payload: Any, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request_json("POST", path, json=payload, params=params)

    def invalid(self, message: str) -> ProviderDataInvalid:
        return ProviderDataInvalid(self.provider_name, message)
