"""Trust score engine. Fans out the collectors and aggregates one ScoreResult.

A request moves PENDING -> COLLECTING -> AGGREGATING -> COMPLETE and always
completes. Up to five provider tasks run concurrently (liquidity, holders,
trading, asset price, anchor price), each with its own timeout. An overall
deadline or cancel event stops the wait; whatever is still pending is
cancelled and scored as a timeout.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Union

from . import normalizers
from .collectors import (
    ComponentOutcome,
    PriceOutcome,
    collect_holders,
    collect_liquidity,
    collect_trading,
    combine_peg,
    fallback,
    fetch_price,
)
from .config import EngineSettings
from .errors import ProviderTimeout
from .models import (
    AssetProfile,
    Component,
    RawMetricSet,
    ScoreBreakdown,
    ScoreResult,
    ScoringState,
)
from .providers import HolderProvider, LiquidityProvider, PriceProvider, VolumeHistoryProvider
from .registry import AssetRegistry, default_registry

logger = logging.getLogger(__name__)

TIMEOUT_REASON = ProviderTimeout.__name__

_PRICE = "price"
_ANCHOR_PRICE = "anchor_price"


class ScoringEngine:
    """Computes trust scores from injected providers.

    Holds no per-request state; one engine can serve concurrent score calls.
    """

    def __init__(
        self,
        liquidity: LiquidityProvider,
        holders: HolderProvider,
        volume: VolumeHistoryProvider,
        prices: PriceProvider,
        registry: Optional[AssetRegistry] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.liquidity = liquidity
        self.holders = holders
        self.volume = volume
        self.prices = prices
        self.registry = registry if registry is not None else default_registry()
        self.settings = settings or EngineSettings()

    def resolve(self, asset: Union[AssetProfile, str]) -> AssetProfile:
        if isinstance(asset, AssetProfile):
            return asset
        return self.registry.resolve(asset)

    async def score(
        self,
        asset: Union[AssetProfile, str],
        *,
        deadline: Optional[float] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> ScoreResult:
        """Score an asset. Raises UnknownAssetError only for an unregistered id or symbol.

        Args:
            asset: A profile, or an asset id / unique symbol from the registry.
            deadline: Overall budget in seconds for the collection phase.
            cancel: When set, pending provider calls are abandoned as timeouts.
        """
        profile = self.resolve(asset)
        _enter(profile, ScoringState.PENDING)

        _enter(profile, ScoringState.COLLECTING)
        outcomes, prices = await self._collect(profile, deadline, cancel)

        _enter(profile, ScoringState.AGGREGATING)
        outcomes[Component.PEG] = combine_peg(prices[_PRICE], prices[_ANCHOR_PRICE])
        result = self._aggregate(profile, outcomes)

        _enter(profile, ScoringState.COMPLETE)
        return result

    async def quick_score(self, asset: Union[AssetProfile, str]) -> int:
        """Total score only; 0 if the asset cannot be scored at all."""
        try:
            result = await self.score(asset)
        except Exception as exc:
            logger.error("Quick score failed for %s: %s", asset if isinstance(asset, str) else asset.symbol, exc)
            return 0
        return result.total_score

    async def _collect(
        self,
        profile: AssetProfile,
        deadline: Optional[float],
        cancel: Optional[asyncio.Event],
    ) -> tuple[dict[Component, ComponentOutcome], dict[str, PriceOutcome]]:
        s = self.settings
        jobs: dict[str, Awaitable] = {
            Component.LIQUIDITY.value: collect_liquidity(self.liquidity, profile.asset_id, s.liquidity_timeout),
            Component.HOLDERS.value: collect_holders(self.holders, profile.asset_id, s.top_holder_count, s.holders_timeout),
            Component.TRADING.value: collect_trading(
                self.volume, profile.asset_id, s.volume_window, s.min_volume_samples, s.trading_timeout
            ),
            _PRICE: fetch_price(self.prices, profile.asset_id, s.price_timeout),
            _ANCHOR_PRICE: fetch_price(self.prices, profile.anchor_asset_id, s.price_timeout),
        }
        tasks = {key: asyncio.ensure_future(job) for key, job in jobs.items()}

        try:
            await _wait_all(list(tasks.values()), deadline, cancel)
        finally:
            pending = [t for t in tasks.values() if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        outcomes: dict[Component, ComponentOutcome] = {}
        for component in (Component.LIQUIDITY, Component.HOLDERS, Component.TRADING):
            task = tasks[component.value]
            if task.cancelled():
                logger.warning("%s collector abandoned for %s: deadline or cancellation", component.value, profile.symbol)
                outcomes[component] = fallback(component, TIMEOUT_REASON)
            else:
                outcomes[component] = task.result()

        prices: dict[str, PriceOutcome] = {}
        for key, asset_id in ((_PRICE, profile.asset_id), (_ANCHOR_PRICE, profile.anchor_asset_id)):
            task = tasks[key]
            if task.cancelled():
                logger.warning("price lookup abandoned for %s: deadline or cancellation", asset_id)
                prices[key] = PriceOutcome(asset_id=asset_id, failure=TIMEOUT_REASON)
            else:
                prices[key] = task.result()

        return outcomes, prices

    def _aggregate(self, profile: AssetProfile, outcomes: dict[Component, ComponentOutcome]) -> ScoreResult:
        breakdown = ScoreBreakdown(
            custody_security=normalizers.custody_points(
                profile.custody_type, profile.custodian, self.settings.trusted_custodians
            ),
            liquidity_depth=outcomes[Component.LIQUIDITY].points,
            holder_distribution=outcomes[Component.HOLDERS].points,
            trading_activity=outcomes[Component.TRADING].points,
            peg_stability=outcomes[Component.PEG].points,
            redemption_speed=normalizers.redemption_points(profile.redemption_latency_hours),
        )
        total_score = int(round(breakdown.total()))
        grade, label = normalizers.grade_for(total_score)

        metrics: dict[str, Optional[float]] = {}
        for outcome in outcomes.values():
            metrics.update(outcome.metrics)

        degraded = tuple(c for c in Component if outcomes[c].degraded)
        reasons = {c.value: outcomes[c].degraded_reason for c in degraded}

        logger.info("Trust score %s: %d/100 (%s)", profile.symbol, total_score, grade)
        logger.info(
            "Breakdown %s: custody=%d liquidity=%d holders=%d trading=%d peg=%d redemption=%d degraded=%s",
            profile.symbol,
            breakdown.custody_security,
            breakdown.liquidity_depth,
            breakdown.holder_distribution,
            breakdown.trading_activity,
            breakdown.peg_stability,
            breakdown.redemption_speed,
            ",".join(c.value for c in degraded) or "none",
        )

        return ScoreResult(
            asset_id=profile.asset_id,
            symbol=profile.symbol,
            total_score=total_score,
            grade=grade,
            label=label,
            breakdown=breakdown,
            metrics=RawMetricSet(**metrics),
            degraded=degraded,
            degraded_reasons=reasons,
        )


def _enter(profile: AssetProfile, state: ScoringState) -> None:
    logger.debug("Scoring %s (%s): %s", profile.symbol, profile.asset_id, state.value)


async def _wait_all(
    tasks: list[asyncio.Future],
    deadline: Optional[float],
    cancel: Optional[asyncio.Event],
) -> None:
    """Wait for every task, the deadline, or the cancel event, whichever comes first."""
    if cancel is None:
        await asyncio.wait(tasks, timeout=deadline)
        return

    if cancel.is_set():
        return
    cancel_waiter = asyncio.ensure_future(cancel.wait())
    try:
        remaining = set(tasks)
        loop = asyncio.get_running_loop()
        stop_at = loop.time() + deadline if deadline is not None else None
        while remaining:
            timeout = None if stop_at is None else max(0.0, stop_at - loop.time())
            done, _ = await asyncio.wait(remaining | {cancel_waiter}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
            if not done or cancel_waiter in done:
                return
            remaining -= done
    finally:
        cancel_waiter.cancel()
        await asyncio.gather(cancel_waiter, return_exceptions=True)
