"""Asset Trust MCP Server.

Composite 0-100 trust scores for tokenized assets, built from DexScreener,
Helius, Jupiter, and Birdeye data.
"""

__version__ = "0.1.0"

from .core import ScoringEngine, ScoreResult
