"""Pydantic data models — the shared business objects.

The engine, the provider clients, and the MCP server all exchange these
models. Profiles and results are frozen: a scoring call never mutates them.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CustodyType(str, Enum):
    """Who controls the reserve backing a wrapped asset."""

    CENTRALIZED = "centralized"
    DECENTRALIZED = "decentralized"


class Component(str, Enum):
    """I/O-backed score components, as named in the degraded set."""

    LIQUIDITY = "liquidity"
    HOLDERS = "holders"
    TRADING = "trading"
    PEG = "peg"


class ScoringState(str, Enum):
    """Lifecycle of a single scoring request. There is no failure state."""

    PENDING = "pending"
    COLLECTING = "collecting"
    AGGREGATING = "aggregating"
    COMPLETE = "complete"


COMPONENT_MAXIMA: dict[str, int] = {
    "custody_security": 25,
    "liquidity_depth": 25,
    "holder_distribution": 15,
    "trading_activity": 15,
    "peg_stability": 10,
    "redemption_speed": 10,
}


class AssetProfile(BaseModel):
    """Static, configured facts about a tokenized asset."""

    model_config = ConfigDict(frozen=True)

    asset_id: str = Field(min_length=1, description="Stable identifier (mint or contract address)")
    symbol: str = Field(description="Display symbol; not guaranteed unique")
    name: str = ""
    custody_type: CustodyType
    custodian: str
    redemption_latency_hours: float = Field(ge=0.0, description="Typical time to redeem for the underlying")
    anchor_asset_id: str = Field(min_length=1, description="Reference asset for peg deviation")


class HolderBalance(BaseModel):
    """One ranked holder returned by a holder provider."""

    model_config = ConfigDict(frozen=True)

    address: str
    balance: float = Field(ge=0.0)


class RawMetricSet(BaseModel):
    """Raw measurements gathered during one scoring call. None = not measured."""

    model_config = ConfigDict(frozen=True)

    liquidity_usd: Optional[float] = None
    holder_concentration_pct: Optional[float] = None
    volume_24h_usd: Optional[float] = None
    volume_consistency_coefficient: Optional[float] = None
    price_usd: Optional[float] = None
    anchor_price_usd: Optional[float] = None
    price_deviation_pct: Optional[float] = None


class ScoreBreakdown(BaseModel):
    """Points per component. The six maxima sum to 100."""

    model_config = ConfigDict(frozen=True)

    custody_security: int = Field(ge=0, le=COMPONENT_MAXIMA["custody_security"])
    liquidity_depth: int = Field(ge=0, le=COMPONENT_MAXIMA["liquidity_depth"])
    holder_distribution: int = Field(ge=0, le=COMPONENT_MAXIMA["holder_distribution"])
    trading_activity: int = Field(ge=0, le=COMPONENT_MAXIMA["trading_activity"])
    peg_stability: int = Field(ge=0, le=COMPONENT_MAXIMA["peg_stability"])
    redemption_speed: int = Field(ge=0, le=COMPONENT_MAXIMA["redemption_speed"])

    def total(self) -> float:
        return float(
            self.custody_security
            + self.liquidity_depth
            + self.holder_distribution
            + self.trading_activity
            + self.peg_stability
            + self.redemption_speed
        )


class ScoreResult(BaseModel):
    """Composite trust score for one asset.

    Carries no timestamps so that identical provider responses produce
    identical serialized results.
    """

    model_config = ConfigDict(frozen=True)

    asset_id: str
    symbol: str
    total_score: int = Field(ge=0, le=100)
    grade: str
    label: str
    breakdown: ScoreBreakdown
    metrics: RawMetricSet = Field(default_factory=RawMetricSet)
    degraded: tuple[Component, ...] = Field(default=(), description="Components that used a fallback value")
    degraded_reasons: dict[str, str] = Field(default_factory=dict, description="Component -> error kind")

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded)
