"""
Normalization helpers shared by the provider adapters.

Raw reward quantities arrive in on-chain minor units; everything that leaves
an adapter is a human-scale float. Repeated symbols within one response are
merged and dust below DUST_THRESHOLD is dropped.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, List, Optional

from .base import TokenAmount

DEFAULT_DECIMALS = 6
DUST_THRESHOLD = 1e-6
POLICY_ID_LENGTH = 56

ADA_SYMBOL = "ADA"
ADA_NAME = "Cardano"


def safe_get(d: Any, path: str, default: Any = None) -> Any:
    cur: Any = d
    for key in path.split("."):
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur


def to_float(x: Any, default: Optional[float] = None) -> Optional[float]:
    if x is None:
        return default
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def to_int(x: Any, default: Optional[int] = None) -> Optional[int]:
    if x is None:
        return default
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def to_human_amount(raw: Any, decimals: Optional[int] = None) -> float:
    """Divide a minor-unit quantity by 10**decimals (6 when unspecified)."""
    places = DEFAULT_DECIMALS if decimals is None else int(decimals)
    return (to_float(raw) or 0.0) / (10 ** places)


def lovelace_to_ada(raw: Any) -> float:
    return to_human_amount(raw, DEFAULT_DECIMALS)


def is_dust(amount: float) -> bool:
    return amount < DUST_THRESHOLD


def parse_token_id(token_id: Optional[str]) -> Dict[str, object]:
    """Split a concatenated unit into its 56-char policy id and hex asset name."""
    if not token_id or token_id == "lovelace":
        return {"policy_id": "", "asset_name": "", "is_ada": True}
    return {
        "policy_id": token_id[:POLICY_ID_LENGTH],
        "asset_name": token_id[POLICY_ID_LENGTH:],
        "is_ada": False,
    }


def hex_to_string(hex_asset_name: Optional[str]) -> str:
    """Decode a hex asset name if every byte is printable ASCII; otherwise return it unchanged."""
    if not hex_asset_name:
        return ""
    try:
        raw = bytes.fromhex(hex_asset_name)
    except ValueError:
        return hex_asset_name
    if all(32 <= b <= 126 for b in raw):
        return raw.decode("ascii")
    return hex_asset_name


class TokenAccumulator:
    """
    Ordered collection of TokenAmount keyed by symbol.

    Adding a symbol that is already present sums the amounts and keeps the
    first entry's descriptive fields. tokens() drops dust.
    """

    def __init__(self) -> None:
        self._by_symbol: Dict[str, TokenAmount] = {}

    def add(self, token: TokenAmount) -> None:
        existing = self._by_symbol.get(token.symbol)
        if existing is None:
            self._by_symbol[token.symbol] = token
        else:
            self._by_symbol[token.symbol] = replace(existing, amount=existing.amount + token.amount)

    def __len__(self) -> int:
        return len(self._by_symbol)

    def tokens(self) -> List[TokenAmount]:
        return [t for t in self._by_symbol.values() if not is_dust(t.amount)]

    def total(self) -> float:
        return sum(t.amount for t in self.tokens())
