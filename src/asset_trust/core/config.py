"""Engine settings, read from the environment.

Timeouts are per provider call, in seconds. Each collector carries its own
budget so a slow provider cannot stall the fast ones.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROVIDER_TIMEOUT = 5.0
DEFAULT_TOP_HOLDERS = 20
DEFAULT_MIN_VOLUME_SAMPLES = 7
DEFAULT_VOLUME_WINDOW = "1M"
DEFAULT_TRUSTED_CUSTODIANS = ("Coinbase", "BitGo", "Kraken")
VOLUME_WINDOWS = ("1D", "1W", "1M", "3M", "1Y")


class EngineSettings(BaseModel):
    """Tunables for a ScoringEngine. Read-only once constructed."""

    model_config = ConfigDict(frozen=True)

    liquidity_timeout: float = Field(DEFAULT_PROVIDER_TIMEOUT, gt=0)
    holders_timeout: float = Field(DEFAULT_PROVIDER_TIMEOUT, gt=0)
    trading_timeout: float = Field(DEFAULT_PROVIDER_TIMEOUT, gt=0)
    price_timeout: float = Field(DEFAULT_PROVIDER_TIMEOUT, gt=0)
    top_holder_count: int = Field(DEFAULT_TOP_HOLDERS, ge=1)
    min_volume_samples: int = Field(DEFAULT_MIN_VOLUME_SAMPLES, ge=2)
    volume_window: str = DEFAULT_VOLUME_WINDOW
    trusted_custodians: tuple[str, ...] = DEFAULT_TRUSTED_CUSTODIANS

    @field_validator("volume_window")
    @classmethod
    def _known_window(cls, value: str) -> str:
        if value not in VOLUME_WINDOWS:
            raise ValueError(f"Invalid volume window: {value}. Use one of {', '.join(VOLUME_WINDOWS)}")
        return value

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Build settings from TRUST_* environment variables, falling back to defaults."""
        return cls(
            liquidity_timeout=_env_float("TRUST_LIQUIDITY_TIMEOUT", DEFAULT_PROVIDER_TIMEOUT),
            holders_timeout=_env_float("TRUST_HOLDERS_TIMEOUT", DEFAULT_PROVIDER_TIMEOUT),
            trading_timeout=_env_float("TRUST_TRADING_TIMEOUT", DEFAULT_PROVIDER_TIMEOUT),
            price_timeout=_env_float("TRUST_PRICE_TIMEOUT", DEFAULT_PROVIDER_TIMEOUT),
            top_holder_count=_env_int("TRUST_TOP_HOLDERS", DEFAULT_TOP_HOLDERS),
            min_volume_samples=_env_int("TRUST_MIN_VOLUME_SAMPLES", DEFAULT_MIN_VOLUME_SAMPLES),
            volume_window=os.environ.get("TRUST_VOLUME_WINDOW", DEFAULT_VOLUME_WINDOW),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number, got {raw!r}") from None
