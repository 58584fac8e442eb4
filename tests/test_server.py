"""
Tests for the MCP server wiring.

Tool functions are called directly with a stubbed engine factory so no
provider is contacted.
"""

import pytest

from asset_trust import server
from asset_trust.core.clients.birdeye import BirdeyeClient
from asset_trust.core.clients.dexscreener import DexScreenerClient
from asset_trust.core.engine import ScoringEngine
from asset_trust.core.providers import SplitVolumeProvider

from conftest import ASSET_ID, FakeHolders, FakeLiquidity, FakePrices, FakeVolume, ANCHOR_ID


class TestBuildEngine:

    @pytest.mark.unit
    def test_requires_helius_key(self, monkeypatch):
        monkeypatch.delenv("HELIUS_API_KEY", raising=False)

        with pytest.raises(ValueError, match="HELIUS_API_KEY"):
            server.build_engine()

    @pytest.mark.unit
    def test_default_volume_source(self, monkeypatch):
        monkeypatch.setenv("HELIUS_API_KEY", "k")
        monkeypatch.delenv("TRUST_VOLUME_SOURCE", raising=False)

        engine = server.build_engine()

        assert isinstance(engine, ScoringEngine)
        assert isinstance(engine.volume, SplitVolumeProvider)
        assert isinstance(engine.volume.daily, DexScreenerClient)
        assert isinstance(engine.volume.series, BirdeyeClient)
        assert len(engine.registry) == 4

    @pytest.mark.unit
    def test_birdeye_volume_source(self, monkeypatch):
        monkeypatch.setenv("HELIUS_API_KEY", "k")
        monkeypatch.setenv("TRUST_VOLUME_SOURCE", "Birdeye")

        engine = server.build_engine()

        assert isinstance(engine.volume.daily, BirdeyeClient)

    @pytest.mark.unit
    def test_unknown_volume_source(self, monkeypatch):
        monkeypatch.setenv("HELIUS_API_KEY", "k")
        monkeypatch.setenv("TRUST_VOLUME_SOURCE", "coingecko")

        with pytest.raises(ValueError, match="TRUST_VOLUME_SOURCE"):
            server.build_engine()


class TestTools:

    @pytest.fixture
    def stub_engine(self, monkeypatch, make_engine):
        providers = {
            "liquidity": FakeLiquidity(12_000_000),
            "holders": FakeHolders([]),
            "volume": FakeVolume(volume_24h=1_200_000, series=[1000.0] * 10),
            "prices": FakePrices({ASSET_ID: 100_000.0, ANCHOR_ID: 100_000.0}),
        }
        engine = make_engine(providers)
        monkeypatch.setattr(server, "build_engine", lambda: engine)
        return engine

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_trust_score_tool(self, stub_engine):
        out = await server.asset_trust_score("xBTC")

        assert out["title"] == "xBTC Trust Score"
        assert out["asset_id"] == ASSET_ID
        assert out["breakdown"]["holder_distribution"] == 0
        assert out["degraded"] == ["holders"]
        assert "Fallback values used for: holders." in out["summary"]
        assert out["total_score"] == 25 + 25 + 0 + 15 + 10 + 8

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quick_score_tool(self, stub_engine):
        out = await server.asset_quick_score("nope")

        assert out == {"asset": "nope", "total_score": 0}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_asset_list_tool(self):
        out = await server.asset_list()

        assert out["count"] == 4
        assert {a["symbol"] for a in out["assets"]} == {"cbBTC", "WBTC", "zBTC", "tBTC"}
        assert all(a["custody_type"] in ("centralized", "decentralized") for a in out["assets"])

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quick_score_without_configuration(self, monkeypatch):
        monkeypatch.delenv("HELIUS_API_KEY", raising=False)

        out = await server.asset_quick_score("cbBTC")

        assert out == {"asset": "cbBTC", "total_score": 0}
