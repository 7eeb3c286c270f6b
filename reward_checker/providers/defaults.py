"""
Default provider registry configuration.

Registers built-in providers in the order given by config.yaml
(providers.enabled). To add a new provider, add it to BUILTIN_PROVIDERS and
to the enabled list.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Type

from .base import BaseRewardProvider
from .cardano_staking import CardanoStakingProvider
from .minswap import MinswapProvider
from .nuvola_digital import NuvolaDigitalProvider
from .registry import ProviderRegistry
from .strike_finance import StrikeFinanceProvider
from .sundae_general import SundaeGeneralProvider
from .sundae_liqwid import SundaeLiqwidProvider
from .transport import HttpTransport, Transport

logger = logging.getLogger(__name__)

BUILTIN_PROVIDERS: Dict[str, Type[BaseRewardProvider]] = {
    cls.DESCRIPTOR.id: cls
    for cls in (
        SundaeLiqwidProvider,
        SundaeGeneralProvider,
        NuvolaDigitalProvider,
        MinswapProvider,
        CardanoStakingProvider,
        StrikeFinanceProvider,
    )
}

# Strike Finance is available but off unless config.yaml enables it.
DEFAULT_ENABLED = [
    "sundae-liqwid",
    "sundae-general",
    "nuvola-digital",
    "minswap",
    "cardano-staking",
]


def load_provider_config() -> Dict[str, object]:
    """
    Load provider settings from config.yaml.

    Expected YAML structure:
        providers:
          enabled: ["sundae-liqwid", "minswap"]
          cors_relay: "https://proxy.cors.sh/"
          http_timeout_s: 30
    """
    from reward_checker import config

    return {
        "enabled": config.enabled_providers(),
        "cors_relay": config.cors_relay_base(),
        "http_timeout_s": config.http_timeout_s(),
    }


def create_default_registry(
    enabled: Optional[List[str]] = None,
    transport: Optional[Transport] = None,
    relay_base: Optional[str] = None,
    *,
    use_config: bool = True,
) -> ProviderRegistry:
    """
    Build a registry of built-in providers.

    Explicit arguments win over config.yaml; with use_config=False the
    module defaults are used and no relay is applied unless relay_base is given.
    """
    cfg = load_provider_config() if use_config else {}
    order = enabled or cfg.get("enabled") or DEFAULT_ENABLED
    relay = relay_base if relay_base is not None else cfg.get("cors_relay")
    shared = transport or HttpTransport(timeout_s=float(cfg.get("http_timeout_s", 30.0)))

    unknown = [pid for pid in order if pid not in BUILTIN_PROVIDERS]
    if unknown:
        raise KeyError(
            f"Unknown reward provider(s) {unknown}. Available: {list(BUILTIN_PROVIDERS)}"
        )

    registry = ProviderRegistry()
    for pid in order:
        registry.register(BUILTIN_PROVIDERS[pid](shared, relay_base=relay))
    logger.debug("Default registry: %s (relay=%s)", registry.provider_ids, relay)
    return registry
