"""Asset Trust MCP Server.

FastMCP server exposing the trust score engine as read-only tools.
Run: asset-trust-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .core.clients.birdeye import BirdeyeClient
from .core.clients.dexscreener import DexScreenerClient
from .core.clients.helius import HeliusClient
from .core.clients.jupiter import JupiterPriceClient
from .core.config import EngineSettings
from .core.engine import ScoringEngine
from .core.models import ScoreResult
from .core.providers import SplitVolumeProvider
from .core.registry import default_registry

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)

VOLUME_SOURCES = ("dexscreener", "birdeye")


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging for the server process."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("Asset Trust server starting with %d registered assets", len(default_registry()))
    yield


mcp = FastMCP(
    "Asset Trust",
    instructions="Ask for the trust score of a wrapped or tokenized asset. Scores combine custody, liquidity, holder concentration, trading activity, peg stability, and redemption speed into a 0-100 grade.",
    lifespan=lifespan,
)


def _get_helius_key() -> str:
    key = os.environ.get("HELIUS_API_KEY", "")
    if not key:
        raise ValueError("HELIUS_API_KEY environment variable is required. Get a key at https://dashboard.helius.dev")
    return key


def build_engine() -> ScoringEngine:
    """Wire the production providers from environment configuration."""
    dexscreener = DexScreenerClient()
    birdeye = BirdeyeClient(api_key=os.environ.get("BIRDEYE_API_KEY") or None)

    source = os.environ.get("TRUST_VOLUME_SOURCE", "dexscreener").lower()
    if source not in VOLUME_SOURCES:
        raise ValueError(f"TRUST_VOLUME_SOURCE must be one of {', '.join(VOLUME_SOURCES)}, got {source!r}")
    daily = birdeye if source == "birdeye" else dexscreener

    return ScoringEngine(
        liquidity=dexscreener,
        holders=HeliusClient(api_key=_get_helius_key()),
        volume=SplitVolumeProvider(daily=daily, series=birdeye),
        prices=JupiterPriceClient(api_key=os.environ.get("JUPITER_API_KEY") or None),
        registry=default_registry(),
        settings=EngineSettings.from_env(),
    )


def _score_summary(result: ScoreResult) -> str:
    summary = f"{result.symbol} trust score: {result.total_score}/100 ({result.grade}, {result.label})."
    if result.degraded:
        summary += " Fallback values used for: " + ", ".join(c.value for c in result.degraded) + "."
    return summary


# ─── Tool 1: Trust Score ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def asset_trust_score(asset: str) -> dict:
    """Full trust score with per-component breakdown, raw metrics, and degraded components.

    Args:
        asset: Asset mint address, or a registered symbol such as 'cbBTC', 'WBTC', 'zBTC', 'tBTC'.
    """
    engine = build_engine()
    result = await engine.score(asset)
    return {
        "title": f"{result.symbol} Trust Score",
        **result.model_dump(mode="json"),
        "summary": _score_summary(result),
    }


# ─── Tool 2: Quick Score ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def asset_quick_score(asset: str) -> dict:
    """Total trust score only. Returns 0 when the asset cannot be scored.

    Args:
        asset: Asset mint address or registered symbol.
    """
    try:
        engine = build_engine()
    except ValueError as exc:
        logger.error("Quick score unavailable for %s: %s", asset, exc)
        return {"asset": asset, "total_score": 0}
    total = await engine.quick_score(asset)
    return {"asset": asset, "total_score": total}


# ─── Tool 3: Asset List ──────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def asset_list() -> dict:
    """Every asset with a registered profile, with its custody model and peg anchor."""
    assets = [p.model_dump(mode="json") for p in default_registry()]
    return {
        "title": "Registered Assets",
        "assets": assets,
        "count": len(assets),
        "summary": f"{len(assets)} assets registered: " + ", ".join(a["symbol"] for a in assets),
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
