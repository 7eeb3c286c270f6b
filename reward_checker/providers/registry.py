"""
Provider registry: owns the reward providers and fans a check out to them.

Providers are kept in registration order, keyed by id (re-registering an id
replaces the provider in place). check_all() runs one independent task per
selected provider, each raced against a per-provider timeout, and delivers
results either as they settle (streaming, via on_result) or all at once
(batch, successes first).
"""
from __future__ import annotations

import asyncio
import logging
from typing import (
    AsyncIterator,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
)

from ..addresses import is_valid_address
from .base import (
    Addresses,
    AddressValidation,
    ProviderDescriptor,
    ProviderResult,
    RewardProvider,
    as_address_list,
)
from .errors import ProviderTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000

ResultSink = Callable[[ProviderResult], None]


class ProviderRegistry:
    """
    Ordered catalog of reward providers plus concurrent dispatch.

    Usage:
        registry = ProviderRegistry([SundaeLiqwidProvider(), MinswapProvider()])
        results = await registry.check_all(address, timeout_ms=10_000)

        # or stream results as each provider settles
        await registry.check_all(address, on_result=print)
    """

    def __init__(self, providers: Optional[Iterable[RewardProvider]] = None) -> None:
        self._providers: Dict[str, RewardProvider] = {}
        for provider in providers or ():
            self.register(provider)

    def register(self, provider: RewardProvider) -> None:
        if provider.id in self._providers:
            logger.debug("Replacing reward provider: %s", provider.id)
        self._providers[provider.id] = provider
        logger.debug("Registered reward provider: %s", provider.id)

    def remove(self, provider_id: str) -> bool:
        return self._providers.pop(provider_id, None) is not None

    def get(self, provider_id: str) -> Optional[RewardProvider]:
        return self._providers.get(provider_id)

    def get_all(self) -> List[RewardProvider]:
        return list(self._providers.values())

    def descriptors(self) -> List[ProviderDescriptor]:
        return [p.descriptor for p in self._providers.values()]

    @property
    def provider_ids(self) -> List[str]:
        return list(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def filtered(
        self,
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> List[RewardProvider]:
        """Registration-ordered subset: restrict to `include`, then drop `exclude`."""
        excluded = set(exclude or ())
        return [
            p
            for p in self._providers.values()
            if (include is None or p.id in include) and p.id not in excluded
        ]

    def validate_addresses(self, addresses: Addresses) -> AddressValidation:
        """Check every address with the first provider's validator."""
        address_list = as_address_list(addresses)
        first = next(iter(self._providers.values()), None)
        check = first.is_valid_address if first is not None else is_valid_address
        invalid = tuple(a for a in address_list if not check(a))
        return AddressValidation(
            valid=not invalid,
            invalid_addresses=invalid,
            valid_count=len(address_list) - len(invalid),
            total_count=len(address_list),
        )

    def stats(self) -> Dict[str, object]:
        providers = self.get_all()
        return {
            "total_providers": len(providers),
            "provider_names": [p.name for p in providers],
            "provider_ids": [p.id for p in providers],
        }

    async def check_single(
        self,
        provider: RewardProvider,
        addresses: Addresses,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> ProviderResult:
        """Run one provider against the timeout. Never raises for provider failures."""
        try:
            data = await asyncio.wait_for(provider.execute(addresses), timeout=timeout_ms / 1000.0)
        except asyncio.TimeoutError:
            logger.warning("Provider %s timed out after %d ms", provider.id, timeout_ms)
            return ProviderResult.failed(provider.id, str(ProviderTimeoutError()))
        except Exception as exc:
            logger.warning("Provider %s failed: %s", provider.id, exc)
            return ProviderResult.failed(provider.id, str(exc) or type(exc).__name__)
        return ProviderResult.ok(provider.id, data)

    async def check_all(
        self,
        addresses: Addresses,
        *,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
        on_result: Optional[ResultSink] = None,
    ) -> List[ProviderResult]:
        """
        Check every selected provider concurrently.

        With `on_result`, each result is handed to the sink as soon as its
        provider settles (completion order, exactly once per provider) and an
        empty list is returned. Without it, all results are returned with
        successes first, each partition in registration order.
        """
        providers = self.filtered(include, exclude)
        logger.debug("Dispatching %d providers", len(providers))
        if on_result is not None:
            await self._check_streaming(addresses, providers, timeout_ms, on_result)
            return []
        return await self._check_batch(addresses, providers, timeout_ms)

    async def stream(
        self,
        addresses: Addresses,
        *,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> AsyncIterator[ProviderResult]:
        """Yield results in completion order. Closing early cancels unfinished checks."""
        tasks = [
            asyncio.ensure_future(self.check_single(p, addresses, timeout_ms))
            for p in self.filtered(include, exclude)
        ]
        try:
            for next_done in asyncio.as_completed(tasks):
                yield await next_done
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

    async def _check_streaming(
        self,
        addresses: Addresses,
        providers: List[RewardProvider],
        timeout_ms: float,
        on_result: ResultSink,
    ) -> None:
        async def run(provider: RewardProvider) -> None:
            result = await self.check_single(provider, addresses, timeout_ms)
            try:
                on_result(result)
            except Exception:
                logger.exception("Result sink raised for provider %s", provider.id)

        await asyncio.gather(*(run(p) for p in providers))

    async def _check_batch(
        self,
        addresses: Addresses,
        providers: List[RewardProvider],
        timeout_ms: float,
    ) -> List[ProviderResult]:
        results = await asyncio.gather(
            *(self.check_single(p, addresses, timeout_ms) for p in providers)
        )
        return [r for r in results if r.success] + [r for r in results if not r.success]
