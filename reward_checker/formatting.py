"""Display helpers for token amounts and icons."""
from __future__ import annotations

from typing import Optional

from .providers.base import TokenAmount

ICON_BASE_URL = "https://storage.googleapis.com/dexhunter-images/tokens"
ADA_ICON_URL = f"{ICON_BASE_URL}/cardano.png"

_ADA_IDS = frozenset({"", "ada", "lovelace"})


def format_amount(amount: float) -> str:
    if amount == 0:
        return "0"
    if amount < 0.000001:
        return repr(amount)
    if amount < 1:
        return f"{amount:.6f}"
    if amount < 1000:
        return f"{amount:.3f}"
    return f"{amount:,.3f}".rstrip("0").rstrip(".")


def is_ada(policy_id: Optional[str], symbol: str = "") -> bool:
    return (policy_id or "").lower() in _ADA_IDS or symbol.lower() in ("ada", "lovelace")


def token_icon_url(policy_id: Optional[str], asset_name: Optional[str] = "", symbol: str = "") -> str:
    if is_ada(policy_id, symbol):
        return ADA_ICON_URL
    asset = asset_name or ""
    if asset.startswith("0x"):
        asset = asset[2:]
    return f"{ICON_BASE_URL}/{policy_id}{asset}.webp"


def icon_for_token(token: TokenAmount) -> str:
    return token_icon_url(token.policy_id, token.asset_name, token.symbol)

