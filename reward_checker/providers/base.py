"""
Provider interfaces and data contracts.

Every reward provider satisfies the RewardProvider protocol: static
descriptor fields, a pure build_request, an async execute that performs the
network I/O, and a pure format_response that reshapes the raw JSON into a
RewardSummary.

Data is returned via frozen dataclasses; results are built fresh per check
and never persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    ClassVar,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Union,
    runtime_checkable,
)

from ..addresses import is_valid_address
from .errors import ProviderError, RewardCheckError, ValidationError
from .transport import CorsRelayTransport, HttpTransport, Transport

Addresses = Union[str, Sequence[str]]


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static identity of one external reward service."""

    id: str
    name: str
    icon: Optional[str] = None
    platform_url: Optional[str] = None


@dataclass(frozen=True)
class MarketData:
    price: float = 0.0
    price_change_24h: float = 0.0
    market_cap: float = 0.0
    volume_24h: float = 0.0


@dataclass(frozen=True)
class TokenAmount:
    """One normalized reward line item. `amount` is human scale, never minor units."""

    symbol: str
    name: str
    amount: float
    decimals: int = 6
    policy_id: Optional[str] = None
    asset_name: Optional[str] = None
    verified: Optional[bool] = None
    market_data: Optional[MarketData] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RewardSummary:
    """Normalized outcome of one successful provider check."""

    provider_name: str
    tokens: Tuple[TokenAmount, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    def has_rewards(self) -> bool:
        return any(t.amount > 0 for t in self.tokens)

    @property
    def claim_url(self) -> Optional[str]:
        return self.metadata.get("claim_url")


@dataclass(frozen=True)
class ProviderResult:
    """Terminal state of one provider for one check: data on success, error otherwise."""

    provider_id: str
    success: bool
    data: Optional[RewardSummary] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, provider_id: str, data: RewardSummary) -> "ProviderResult":
        return cls(provider_id=provider_id, success=True, data=data)

    @classmethod
    def failed(cls, provider_id: str, error: str) -> "ProviderResult":
        return cls(provider_id=provider_id, success=False, error=error)

    def has_rewards(self) -> bool:
        return self.success and self.data is not None and self.data.has_rewards()


@dataclass(frozen=True)
class AddressValidation:
    valid: bool
    invalid_addresses: Tuple[str, ...]
    valid_count: int
    total_count: int


def as_address_list(addresses: Addresses) -> List[str]:
    if isinstance(addresses, str):
        return [addresses]
    return list(addresses)


@runtime_checkable
class RewardProvider(Protocol):
    """Protocol for reward provider adapters."""

    @property
    def descriptor(self) -> ProviderDescriptor: ...

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    def is_valid_address(self, address: str) -> bool: ...

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]: ...

    async def execute(self, addresses: Addresses) -> RewardSummary:
        """Fetch and normalize rewards; raises ProviderError on any failure."""
        ...

    def format_response(self, raw: Any) -> RewardSummary: ...


class BaseRewardProvider:
    """
    Shared plumbing for HTTP-backed providers.

    Subclasses set DESCRIPTOR, ENDPOINT, METHOD, HEADERS and USE_CORS_RELAY,
    and override build_request / format_response. Providers whose transport
    is not a single JSON POST override fetch().
    """

    DESCRIPTOR: ClassVar[ProviderDescriptor]
    ENDPOINT: ClassVar[str] = ""
    METHOD: ClassVar[str] = "POST"
    HEADERS: ClassVar[Mapping[str, str]] = {"content-type": "application/json"}
    USE_CORS_RELAY: ClassVar[bool] = False

    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        relay_base: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> None:
        inner = transport or HttpTransport()
        if self.USE_CORS_RELAY and relay_base:
            inner = CorsRelayTransport(inner, relay_base)
        self.transport: Transport = inner
        self.endpoint = endpoint or self.ENDPOINT
        self.method = self.METHOD
        self.headers: Dict[str, str] = dict(self.HEADERS)

    @property
    def descriptor(self) -> ProviderDescriptor:
        return self.DESCRIPTOR

    @property
    def id(self) -> str:
        return self.DESCRIPTOR.id

    @property
    def name(self) -> str:
        return self.DESCRIPTOR.name

    @property
    def icon(self) -> Optional[str]:
        return self.DESCRIPTOR.icon

    @property
    def platform_url(self) -> Optional[str]:
        return self.DESCRIPTOR.platform_url

    def is_valid_address(self, address: str) -> bool:
        return is_valid_address(address)

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]:
        return {"addresses": list(addresses)}

    async def fetch(self, addresses: Sequence[str]) -> Any:
        return await self.transport.request_json(
            self.method,
            self.endpoint,
            headers=self.headers,
            body=self.build_request(addresses),
        )

    def format_response(self, raw: Any) -> RewardSummary:
        return RewardSummary(provider_name=self.name)

    async def execute(self, addresses: Addresses) -> RewardSummary:
        address_list = as_address_list(addresses)
        try:
            if not address_list:
                raise ValidationError("No address provided")
            raw = await self.fetch(address_list)
            return self.format_response(raw)
        except RewardCheckError as exc:
            raise ProviderError(self.name, str(exc)) from exc
        except Exception as exc:
            raise ProviderError(self.name, f"{type(exc).__name__}: {exc}") from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, endpoint={self.endpoint!r})"
