"""
Reward provider architecture.

Each provider adapts one third-party reward API to the RewardProvider
protocol. The registry fans a single-address check out to all selected
providers concurrently, with a per-provider timeout, and streams or batches
the normalized results.
"""

from __future__ import annotations

from .base import (
    AddressValidation,
    BaseRewardProvider,
    MarketData,
    ProviderDescriptor,
    ProviderResult,
    RewardProvider,
    RewardSummary,
    TokenAmount,
)
from .cardano_staking import CardanoStakingProvider
from .defaults import BUILTIN_PROVIDERS, create_default_registry
from .errors import (
    ApplicationError,
    ProviderError,
    ProviderTimeoutError,
    RewardCheckError,
    TransportError,
    ValidationError,
)
from .minswap import MinswapProvider
from .nuvola_digital import NuvolaDigitalProvider
from .registry import ProviderRegistry
from .strike_finance import StrikeFinanceProvider
from .sundae_general import SundaeGeneralProvider
from .sundae_liqwid import SundaeLiqwidProvider
from .transport import CorsRelayTransport, HttpTransport, Transport

__all__ = [
    "AddressValidation",
    "ApplicationError",
    "BaseRewardProvider",
    "BUILTIN_PROVIDERS",
    "CardanoStakingProvider",
    "CorsRelayTransport",
    "HttpTransport",
    "MarketData",
    "MinswapProvider",
    "NuvolaDigitalProvider",
    "ProviderDescriptor",
    "ProviderError",
    "ProviderRegistry",
    "ProviderResult",
    "ProviderTimeoutError",
    "RewardCheckError",
    "RewardProvider",
    "RewardSummary",
    "StrikeFinanceProvider",
    "SundaeGeneralProvider",
    "SundaeLiqwidProvider",
    "TokenAmount",
    "Transport",
    "TransportError",
    "ValidationError",
    "create_default_registry",
]
