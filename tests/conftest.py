"""
Pytest configuration and fixtures for the asset trust engine.

Providers are replaced by in-memory fakes that return frozen responses or
raise a configured error, so engine tests never touch the network.
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from asset_trust.core.config import EngineSettings
from asset_trust.core.engine import ScoringEngine
from asset_trust.core.models import AssetProfile, CustodyType, HolderBalance
from asset_trust.core.registry import AssetRegistry

ASSET_ID = "AssetMint1111111111111111111111111111111111"
ANCHOR_ID = "AnchorMint111111111111111111111111111111111"


# =============================================================================
# FAKE PROVIDERS
# =============================================================================

class _Fake:
    """Return `value`, raise `error`, or sleep `delay` seconds first."""

    def __init__(self, value: Any = None, error: Optional[BaseException] = None, delay: float = 0.0):
        self.value = value
        self.error = error
        self.delay = delay
        self.calls: List[tuple] = []

    async def _answer(self, *args):
        self.calls.append(args)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.value


class FakeLiquidity(_Fake):
    async def get_liquidity(self, asset_id):
        return await self._answer(asset_id)


class FakeHolders(_Fake):
    async def get_top_holders(self, asset_id, n):
        return await self._answer(asset_id, n)


class FakeVolume:
    def __init__(self, volume_24h: Any = None, series: Any = None,
                 volume_error: Optional[BaseException] = None,
                 series_error: Optional[BaseException] = None,
                 delay: float = 0.0):
        self.daily = _Fake(volume_24h, volume_error, delay)
        self.history = _Fake(series, series_error, delay)

    async def get_volume_24h(self, asset_id):
        return await self.daily._answer(asset_id)

    async def get_volume_series(self, asset_id, window):
        return await self.history._answer(asset_id, window)


class FakePrices:
    """Per-asset prices; an entry may be an exception to raise."""

    def __init__(self, prices: Dict[str, Any], delay: float = 0.0):
        self.prices = prices
        self.delay = delay
        self.calls: List[str] = []

    async def get_price(self, asset_id):
        self.calls.append(asset_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        value = self.prices.get(asset_id)
        if isinstance(value, BaseException):
            raise value
        return value


# =============================================================================
# SERIES HELPERS
# =============================================================================

def series_with_cv(cv: float, n: int = 10, mean: float = 1000.0) -> List[float]:
    """Alternating samples mean±mean*cv, whose population CV is exactly `cv` for even n."""
    return [mean * (1 + cv) if i % 2 == 0 else mean * (1 - cv) for i in range(n)]


def holders_with_top_share(top_pct: float, n: int = 50) -> List[HolderBalance]:
    """n holders where the largest holds `top_pct` percent of the sampled total.

    The largest share of a k-holder sample is at least 100/k percent, so
    shares under 5% need more than 20 holders.
    """
    rest = (100.0 - top_pct) / (n - 1)
    holders = [HolderBalance(address="holder0", balance=top_pct)]
    holders += [HolderBalance(address=f"holder{i}", balance=rest) for i in range(1, n)]
    return holders


# =============================================================================
# PROFILE FIXTURES
# =============================================================================

@pytest.fixture
def decentralized_profile() -> AssetProfile:
    return AssetProfile(
        asset_id=ASSET_ID,
        symbol="xBTC",
        name="Example BTC",
        custody_type=CustodyType.DECENTRALIZED,
        custodian="Example Guardians",
        redemption_latency_hours=6,
        anchor_asset_id=ANCHOR_ID,
    )


@pytest.fixture
def registry(decentralized_profile) -> AssetRegistry:
    return AssetRegistry([decentralized_profile])


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(
        liquidity_timeout=0.2,
        holders_timeout=0.2,
        trading_timeout=0.2,
        price_timeout=0.2,
        top_holder_count=50,
    )


# =============================================================================
# PROVIDER FIXTURES
# =============================================================================

@pytest.fixture
def healthy_providers() -> Dict[str, Any]:
    """$12M liquidity, 3% top holder, $1.2M volume, CV 0.2, 0.1% peg deviation."""
    return {
        "liquidity": FakeLiquidity(12_000_000),
        "holders": FakeHolders(holders_with_top_share(3.0)),
        "volume": FakeVolume(volume_24h=1_200_000, series=series_with_cv(0.2)),
        "prices": FakePrices({ASSET_ID: 100_100.0, ANCHOR_ID: 100_000.0}),
    }


@pytest.fixture
def make_engine(registry, settings):
    """Factory: build an engine from a provider dict, overriding any entry."""
    def _make(providers: Dict[str, Any], **overrides) -> ScoringEngine:
        merged = {**providers, **overrides}
        return ScoringEngine(
            liquidity=merged["liquidity"],
            holders=merged["holders"],
            volume=merged["volume"],
            prices=merged["prices"],
            registry=registry,
            settings=settings,
        )
    return _make
