"""Error taxonomy for provider failures and configuration mistakes.

Provider errors never escape the engine: collectors turn them into the
component's fallback value. UnknownAssetError is the one error a caller sees.
"""

from __future__ import annotations


class TrustScoreError(Exception):
    """Base class for all errors raised by this package."""


class ProviderError(TrustScoreError):
    """A data provider could not deliver a usable value."""

    def __init__(self, provider: str, message: str = ""):
        self.provider = provider
        super().__init__(f"{provider}: {message}" if message else provider)


class ProviderTimeout(ProviderError):
    """The provider did not answer within its time budget."""


class ProviderUnavailable(ProviderError):
    """Network or HTTP failure talking to the provider."""


class ProviderDataInvalid(ProviderError):
    """The provider answered, but the payload was malformed or empty."""


class InsufficientSample(ProviderError):
    """A history series was shorter than the required window."""

    def __init__(self, provider: str, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(provider, f"need {required} samples, got {available}")


class UnknownAssetError(TrustScoreError, KeyError):
    """No AssetProfile is registered for the requested identifier."""

    def __init__(self, key: str, reason: str = "no registered asset"):
        self.key = key
        super().__init__(f"{reason}: {key}")

    def __str__(self) -> str:
        return str(self.args[0])
