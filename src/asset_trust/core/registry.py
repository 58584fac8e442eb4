"""Asset registry keyed by stable asset identifier.

Display symbols are not unique or stable, so they are only a convenience
lookup on top of the id index.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from .errors import UnknownAssetError
from .models import AssetProfile, CustodyType

logger = logging.getLogger(__name__)

# Solana mint addresses for the wrapped-BTC family
BTC_MINTS: dict[str, str] = {
    "cbBTC": "cbbtcf3aa214zXHbiAZQwf4122FBYbraNdFqgw4iMij",
    "WBTC": "3NZ9JMVBmGAqocybic2c7LQCJScmgsAZ6vQqTDzcqmJh",
    "zBTC": "zBTCug3er3tLyffELcvDNrKkCymbPWysGcWihESYfLg",
    "tBTC": "6DNSN2BJsaPFdFFc1zP37kkeNe4Usc1Sqkzr9C9vPWcU",
}

# WBTC is the most liquid wrapper and serves as the family's peg anchor
BTC_ANCHOR = BTC_MINTS["WBTC"]

DEFAULT_ASSETS: tuple[AssetProfile, ...] = (
    AssetProfile(
        asset_id=BTC_MINTS["cbBTC"],
        symbol="cbBTC",
        name="Coinbase Wrapped BTC",
        custody_type=CustodyType.CENTRALIZED,
        custodian="Coinbase",
        redemption_latency_hours=0.5,
        anchor_asset_id=BTC_ANCHOR,
    ),
    AssetProfile(
        asset_id=BTC_MINTS["WBTC"],
        symbol="WBTC",
        name="Wrapped Bitcoin",
        custody_type=CustodyType.CENTRALIZED,
        custodian="BitGo",
        redemption_latency_hours=2,
        anchor_asset_id=BTC_ANCHOR,
    ),
    AssetProfile(
        asset_id=BTC_MINTS["zBTC"],
        symbol="zBTC",
        name="Zeus Network BTC",
        custody_type=CustodyType.DECENTRALIZED,
        custodian="Zeus Guardians",
        redemption_latency_hours=6,
        anchor_asset_id=BTC_ANCHOR,
    ),
    AssetProfile(
        asset_id=BTC_MINTS["tBTC"],
        symbol="tBTC",
        name="Threshold BTC",
        custody_type=CustodyType.DECENTRALIZED,
        custodian="Threshold Network",
        redemption_latency_hours=12,
        anchor_asset_id=BTC_ANCHOR,
    ),
)


class AssetRegistry:
    """Maps asset identifiers to their configured profiles."""

    def __init__(self, profiles: Iterable[AssetProfile] = ()):
        self._by_id: dict[str, AssetProfile] = {}
        for profile in profiles:
            self.register(profile)

    def register(self, profile: AssetProfile) -> None:
        if profile.asset_id in self._by_id:
            raise ValueError(f"Asset already registered: {profile.asset_id} ({profile.symbol})")
        self._by_id[profile.asset_id] = profile
        logger.debug("Registered asset %s (%s)", profile.symbol, profile.asset_id)

    def get(self, asset_id: str) -> AssetProfile:
        try:
            return self._by_id[asset_id]
        except KeyError:
            raise UnknownAssetError(asset_id) from None

    def resolve(self, key: str) -> AssetProfile:
        """Look up by asset id, then by display symbol if it is unambiguous."""
        profile = self._by_id.get(key)
        if profile is not None:
            return profile

        matches = [p for p in self._by_id.values() if p.symbol == key]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            raise UnknownAssetError(key, reason=f"symbol matches {len(matches)} assets, use the asset id")
        raise UnknownAssetError(key)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._by_id

    def __iter__(self) -> Iterator[AssetProfile]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)


def default_registry() -> AssetRegistry:
    """A fresh registry holding the built-in wrapped-BTC profiles."""
    return AssetRegistry(DEFAULT_ASSETS)
