"""Fake reward providers and fixtures for registry/controller tests (no live network)."""

from .providers import (
    VALID_ADDRESS,
    VALID_STAKE_ADDRESS,
    FakeRewardProvider,
    FakeRewardProviderAlwaysFail,
    FakeRewardProviderNeverSettles,
    fake_summary,
)

__all__ = [
    "VALID_ADDRESS",
    "VALID_STAKE_ADDRESS",
    "FakeRewardProvider",
    "FakeRewardProviderAlwaysFail",
    "FakeRewardProviderNeverSettles",
    "fake_summary",
]
