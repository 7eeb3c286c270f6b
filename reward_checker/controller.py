"""
Aggregation controller: drives one reward check per user action.

Results stream in from the registry; after every arrival the whole
accumulated set is re-sorted by priority and handed to the renderer, so the
visible list can reorder until the last provider settles.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .config import check_timeout_ms
from .preferences import LAST_ADDRESS_KEY, Preferences
from .providers.base import ProviderResult
from .providers.errors import ValidationError
from .providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

EMPTY_ADDRESS_MESSAGE = "Please enter a wallet address"
INVALID_ADDRESS_MESSAGE = "Please enter a valid Cardano address"

Renderer = Callable[[List[ProviderResult]], None]


def sort_results_by_priority(results: Sequence[ProviderResult]) -> List[ProviderResult]:
    """
    Stable three-way partition: results holding a token with a positive
    amount, then other successes, then failures.
    """
    with_rewards: List[ProviderResult] = []
    no_rewards: List[ProviderResult] = []
    failed: List[ProviderResult] = []
    for result in results:
        if not result.success:
            failed.append(result)
        elif result.has_rewards():
            with_rewards.append(result)
        else:
            no_rewards.append(result)
    return with_rewards + no_rewards + failed


class RewardCheckController:
    def __init__(
        self,
        registry: ProviderRegistry,
        preferences: Optional[Preferences] = None,
        renderer: Optional[Renderer] = None,
        *,
        timeout_ms: Optional[float] = None,
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> None:
        self.registry = registry
        self.preferences = preferences
        self.renderer = renderer
        self.timeout_ms = timeout_ms if timeout_ms is not None else check_timeout_ms()
        self.include = include
        self.exclude = exclude
        self._results: List[ProviderResult] = []

    @property
    def current_results(self) -> List[ProviderResult]:
        """Results in arrival order."""
        return list(self._results)

    def sorted_results(self) -> List[ProviderResult]:
        return sort_results_by_priority(self._results)

    def restore_address(self) -> Optional[str]:
        if self.preferences is None:
            return None
        return self.preferences.get(LAST_ADDRESS_KEY)

    def save_address(self, address: Optional[str]) -> None:
        if self.preferences is None or not address or not address.strip():
            return
        self.preferences.set(LAST_ADDRESS_KEY, address.strip())

    def validate(self, address: Optional[str]) -> str:
        """Return the trimmed address or raise ValidationError."""
        address = (address or "").strip()
        if not address:
            raise ValidationError(EMPTY_ADDRESS_MESSAGE)
        if not self.registry.validate_addresses(address).valid:
            raise ValidationError(INVALID_ADDRESS_MESSAGE)
        return address

    async def check(self, address: Optional[str]) -> List[ProviderResult]:
        """
        Validate, then check every selected provider in streaming mode.

        Raises ValidationError before any network activity. Returns the final
        priority-sorted results.
        """
        address = self.validate(address)
        self.save_address(address)
        self._results = []
        await self.registry.check_all(
            address,
            timeout_ms=self.timeout_ms,
            include=self.include,
            exclude=self.exclude,
            on_result=self._on_result,
        )
        logger.info(
            "Checked %d providers: %d with rewards, %d failed",
            len(self._results),
            sum(1 for r in self._results if r.has_rewards()),
            sum(1 for r in self._results if not r.success),
        )
        return self.sorted_results()

    def _on_result(self, result: ProviderResult) -> None:
        self._results.append(result)
        if self.renderer is not None:
            self.renderer(self.sorted_results())
