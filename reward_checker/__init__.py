"""
Top-level public API surface.
Canonical entrypoint: import reward_checker; use reward_checker.providers for
adapters and the registry, reward_checker.controller for ordered checks.
Does not import cli or app.
"""

from __future__ import annotations

from ._version import __version__
from .addresses import is_valid_address, is_valid_stake_capable_address
from .controller import RewardCheckController, sort_results_by_priority
from .providers import (
    ProviderRegistry,
    ProviderResult,
    RewardSummary,
    TokenAmount,
    create_default_registry,
)

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "ProviderRegistry",
    "ProviderResult",
    "RewardCheckController",
    "RewardSummary",
    "TokenAmount",
    "create_default_registry",
    "is_valid_address",
    "is_valid_stake_capable_address",
    "sort_results_by_priority",
]
