"""Core business logic — scoring engine, provider clients, and data models.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
or any server framework. The FastMCP server and any other caller build a
ScoringEngine from here with whichever providers they need.
"""

from .engine import ScoringEngine
from .errors import (
    InsufficientSample,
    ProviderDataInvalid,
    ProviderError,
    ProviderTimeout,
    ProviderUnavailable,
    TrustScoreError,
    UnknownAssetError,
)
from .models import AssetProfile, Component, CustodyType, ScoreBreakdown, ScoreResult
from .registry import AssetRegistry, default_registry
