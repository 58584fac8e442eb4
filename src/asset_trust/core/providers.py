"""Provider capabilities consumed by the scoring engine.

Implementations raise ProviderError subclasses on failure. They own any
caching or staleness policy; the engine never caches.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from .models import HolderBalance


@runtime_checkable
class PriceProvider(Protocol):
    async def get_price(self, asset_id: str) -> float:
        """USD price of the asset."""
        ...


@runtime_checkable
class LiquidityProvider(Protocol):
    async def get_liquidity(self, asset_id: str) -> float:
        """Aggregate USD liquidity across every known venue."""
        ...


@runtime_checkable
class HolderProvider(Protocol):
    async def get_top_holders(self, asset_id: str, n: int) -> Sequence[HolderBalance]:
        """The n largest holders, largest first."""
        ...


@runtime_checkable
class VolumeHistoryProvider(Protocol):
    async def get_volume_series(self, asset_id: str, window: str) -> Sequence[float]:
        """Time-ordered USD volume samples over the window ('1D', '1W', '1M', '3M', '1Y')."""
        ...

    async def get_volume_24h(self, asset_id: str) -> float:
        """Trailing 24h USD volume."""
        ...


class Volume24hProvider(Protocol):
    async def get_volume_24h(self, asset_id: str) -> float:
        ...


class VolumeSeriesProvider(Protocol):
    async def get_volume_series(self, asset_id: str, window: str) -> Sequence[float]:
        ...


class SplitVolumeProvider:
    """Combine one source for 24h volume with another for the history series."""

    def __init__(self, daily: Volume24hProvider, series: VolumeSeriesProvider):
        self.daily = daily
        self.series = series

    async def get_volume_24h(self, asset_id: str) -> float:
        return await self.daily.get_volume_24h(asset_id)

    async def get_volume_series(self, asset_id: str, window: str) -> Sequence[float]:
        return await self.series.get_volume_series(asset_id, window)
