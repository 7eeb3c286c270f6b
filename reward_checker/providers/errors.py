"""
Error taxonomy for reward checks.

Adapters raise these inside their own boundary; BaseRewardProvider.execute
re-raises everything as ProviderError prefixed with the display name, and the
registry turns whatever escapes into a failed ProviderResult.
"""
from __future__ import annotations

from typing import Optional

TIMEOUT_MESSAGE = "Request timeout"


class RewardCheckError(Exception):
    """Base class for every error raised by reward_checker."""


class ValidationError(RewardCheckError):
    """Malformed or empty wallet address. Raised before any network call."""


class TransportError(RewardCheckError):
    """Non-2xx HTTP status or a failure to reach the endpoint at all."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def from_status(cls, status_code: int, reason: str) -> "TransportError":
        return cls(f"HTTP {status_code}: {reason}", status_code=status_code)


class ApplicationError(RewardCheckError):
    """Provider answered 2xx but reported an error in its payload."""


class ProviderTimeoutError(RewardCheckError):
    def __init__(self, message: str = TIMEOUT_MESSAGE) -> None:
        super().__init__(message)


class ProviderError(RewardCheckError):
    """Failure wrapped at the adapter boundary: '<provider name>: <cause>'."""

    def __init__(self, provider_name: str, cause: str) -> None:
        super().__init__(f"{provider_name}: {cause}")
        self.provider_name = provider_name
        self.cause = cause
