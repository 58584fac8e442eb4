"""Collectors call one provider, validate and normalize the answer, and apply the failure policy.

Each collector returns a ComponentOutcome and never raises. Liquidity,
holders and trading fail closed (0 points). Peg fails open (neutral 5):
an unreachable price feed is not evidence of a broken peg.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from . import normalizers
from .errors import InsufficientSample, ProviderDataInvalid, ProviderError, ProviderTimeout
from .models import Component, HolderBalance
from .providers import HolderProvider, LiquidityProvider, PriceProvider, VolumeHistoryProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_POINTS: dict[Component, int] = {
    Component.LIQUIDITY: 0,
    Component.HOLDERS: 0,
    Component.TRADING: 0,
    Component.PEG: normalizers.PEG_NEUTRAL,
}


class ComponentOutcome(BaseModel):
    """Points for one component plus the raw values that produced them."""

    model_config = ConfigDict(frozen=True)

    component: Component
    points: int
    degraded_reason: Optional[str] = None
    metrics: dict[str, Optional[float]] = {}

    @property
    def degraded(self) -> bool:
        return self.degraded_reason is not None


class PriceOutcome(BaseModel):
    """Result of one price lookup; price is None when the lookup failed."""

    model_config = ConfigDict(frozen=True)

    asset_id: str
    price: Optional[float] = None
    failure: Optional[str] = None


def fallback(component: Component, reason: str, **metrics: Optional[float]) -> ComponentOutcome:
    return ComponentOutcome(
        component=component,
        points=FALLBACK_POINTS[component],
        degraded_reason=reason,
        metrics=metrics,
    )


def _provider_name(provider: Any) -> str:
    return type(provider).__name__


async def _call(awaitable: Awaitable[T], provider: str, timeout: float) -> T:
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        raise ProviderTimeout(provider, f"no answer within {timeout:.1f}s") from None


def _amount(value: Any, provider: str, what: str) -> float:
    """Coerce a provider value to a finite, non-negative float."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ProviderDataInvalid(provider, f"{what} is not a number: {value!r}") from None
    if not math.isfinite(amount) or amount < 0:
        raise ProviderDataInvalid(provider, f"{what} out of range: {amount}")
    return amount


def _reason(exc: BaseException) -> str:
    return type(exc).__name__


def _log_failure(component: Component, asset_id: str, exc: BaseException) -> None:
    if isinstance(exc, ProviderError):
        logger.warning("%s collector degraded for %s: %s", component.value, asset_id, exc)
    else:
        logger.error("%s collector crashed for %s: %r", component.value, asset_id, exc, exc_info=exc)


async def collect_liquidity(provider: LiquidityProvider, asset_id: str, timeout: float) -> ComponentOutcome:
    """Aggregate pooled liquidity, bucketed to 0-25 points."""
    name = _provider_name(provider)
    try:
        raw = await _call(provider.get_liquidity(asset_id), name, timeout)
        liquidity = _amount(raw, name, "liquidity")
    except Exception as exc:
        _log_failure(Component.LIQUIDITY, asset_id, exc)
        return fallback(Component.LIQUIDITY, _reason(exc), liquidity_usd=None)

    return ComponentOutcome(
        component=Component.LIQUIDITY,
        points=normalizers.liquidity_points(liquidity),
        metrics={"liquidity_usd": liquidity},
    )


def _balances(holders: Any, provider: str, n: int) -> list[float]:
    balances = []
    try:
        for holder in holders:
            raw = holder.balance if isinstance(holder, HolderBalance) else holder[1]
            balances.append(_amount(raw, provider, "holder balance"))
    except (TypeError, IndexError, KeyError):
        raise ProviderDataInvalid(provider, "holder list is malformed") from None
    balances.sort(reverse=True)
    return balances[:n]


async def collect_holders(provider: HolderProvider, asset_id: str, n: int, timeout: float) -> ComponentOutcome:
    """Top-holder concentration, bucketed to 0-15 points.

    An empty holder list is absence of data, not decentralization: it scores
    zero and marks the component degraded.
    """
    name = _provider_name(provider)
    try:
        holders = await _call(provider.get_top_holders(asset_id, n), name, timeout)
        balances = _balances(holders, name, n)
    except Exception as exc:
        _log_failure(Component.HOLDERS, asset_id, exc)
        return fallback(Component.HOLDERS, _reason(exc), holder_concentration_pct=None)

    if not balances or sum(balances) <= 0:
        logger.warning("holders collector degraded for %s: no holder balances returned", asset_id)
        return fallback(Component.HOLDERS, ProviderDataInvalid.__name__, holder_concentration_pct=0.0)

    concentration = normalizers.concentration_pct(balances)
    return ComponentOutcome(
        component=Component.HOLDERS,
        points=normalizers.holder_points(concentration),
        metrics={"holder_concentration_pct": concentration},
    )


async def collect_trading(
    provider: VolumeHistoryProvider,
    asset_id: str,
    window: str,
    min_samples: int,
    timeout: float,
) -> ComponentOutcome:
    """24h volume (0-10) plus volume consistency (0-5), capped at 15.

    A failed volume call zeroes both parts. A short or failed history only
    zeroes the consistency part, and still marks the component degraded.
    """
    name = _provider_name(provider)
    try:
        raw = await _call(provider.get_volume_24h(asset_id), name, timeout)
        volume = _amount(raw, name, "24h volume")
    except Exception as exc:
        _log_failure(Component.TRADING, asset_id, exc)
        return fallback(Component.TRADING, _reason(exc), volume_24h_usd=None, volume_consistency_coefficient=None)

    coefficient = None
    reason = None
    try:
        series = await _call(provider.get_volume_series(asset_id, window), name, timeout)
        samples = [s for s in (_amount(v, name, "volume sample") for v in series) if s > 0]
        if len(samples) < min_samples:
            raise InsufficientSample(name, required=min_samples, available=len(samples))
        coefficient = normalizers.coefficient_of_variation(samples)
    except Exception as exc:
        _log_failure(Component.TRADING, asset_id, exc)
        reason = _reason(exc)

    return ComponentOutcome(
        component=Component.TRADING,
        points=normalizers.trading_points(volume, coefficient),
        degraded_reason=reason,
        metrics={"volume_24h_usd": volume, "volume_consistency_coefficient": coefficient},
    )


async def fetch_price(provider: PriceProvider, asset_id: str, timeout: float) -> PriceOutcome:
    """One USD price lookup. A zero price is treated as missing."""
    name = _provider_name(provider)
    try:
        raw = await _call(provider.get_price(asset_id), name, timeout)
        price = _amount(raw, name, "price")
        if price == 0:
            raise ProviderDataInvalid(name, f"no price for {asset_id}")
    except Exception as exc:
        _log_failure(Component.PEG, asset_id, exc)
        return PriceOutcome(asset_id=asset_id, failure=_reason(exc))
    return PriceOutcome(asset_id=asset_id, price=price)


def combine_peg(price: PriceOutcome, anchor: PriceOutcome) -> ComponentOutcome:
    """Peg deviation against the anchor, bucketed to 1-10 points; neutral 5 if either price is missing."""
    if price.price is None or anchor.price is None:
        reason = price.failure or anchor.failure or ProviderDataInvalid.__name__
        return fallback(
            Component.PEG,
            reason,
            price_usd=price.price,
            anchor_price_usd=anchor.price,
            price_deviation_pct=None,
        )

    deviation = normalizers.price_deviation_pct(price.price, anchor.price)
    return ComponentOutcome(
        component=Component.PEG,
        points=normalizers.peg_points(deviation),
        metrics={
            "price_usd": price.price,
            "anchor_price_usd": anchor.price,
            "price_deviation_pct": deviation,
        },
    )
