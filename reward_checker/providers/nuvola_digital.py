"""
Nuvola Digital staking rewards.

  POST https://us-central1-anvil-6fe83.cloudfunctions.net/getStakesV2
  body: {"stakeCollectionId": 60, "changeAddress": <addr>}
  reply: {"success": true, "stakes": [{"result": {"total": [{"unit", "quantity"}]}}]}

Quantities are summed per unit across all stakes. Units are mapped to
tickers through a fixed table; other units are labelled by their decoded
asset name and always stay separate tokens.
"""
from __future__ import annotations

from typing import Any, Dict, Sequence

from .base import BaseRewardProvider, ProviderDescriptor, RewardSummary, TokenAmount
from .normalize import (
    ADA_NAME,
    ADA_SYMBOL,
    DEFAULT_DECIMALS,
    TokenAccumulator,
    hex_to_string,
    parse_token_id,
    to_float,
    to_human_amount,
)

STAKE_COLLECTION_ID = 60
PLATFORM_URL = "https://app.nuvoladigital.io"
UNKNOWN_TOKEN = "Unknown Token"

TOKEN_UNITS: Dict[str, str] = {
    "5d16cc1a177b5d9ba9cfa9793b07e60f1fb70fea1f8aef064415d114494147": "IAG",
    "b6a7467ea1deb012808ef4e87b5ff371e85f7142d7b356a40d9b42a0436f726e75636f70696173205b76696120436861696e506f72742e696f5d": "COPI",
    "c48cbb3d5e57ed56e276bc45f99ab39abe94e6cd7ac39fb402da47ad0014df105553444d": "USDM",
    "a3931691f5c4e65d01c429e473d0dd24c51afdb6daf88e632a6c1e516f7263666178746f6b656e": "FACT",
}


def token_symbol(unit: str) -> str:
    """Known ticker, else the decoded asset name, else the raw unit."""
    if unit == "lovelace":
        return ADA_SYMBOL
    if not unit:
        return UNKNOWN_TOKEN
    if unit in TOKEN_UNITS:
        return TOKEN_UNITS[unit]
    parts = parse_token_id(unit)
    decoded = hex_to_string(parts["asset_name"])
    if decoded and decoded != parts["asset_name"]:
        return decoded
    return unit


class NuvolaDigitalProvider(BaseRewardProvider):
    DESCRIPTOR = ProviderDescriptor(
        id="nuvola-digital",
        name="Nuvola Digital",
        icon=(
            "https://app.nuvoladigital.io/_next/image/?url=https%3A%2F%2Fik.imagekit.io"
            "%2Fpizzli%2FCMS%2Fproduction%2Fsites%2F359%2Flogo.png&w=256&q=75"
        ),
        platform_url=PLATFORM_URL,
    )
    ENDPOINT = "https://us-central1-anvil-6fe83.cloudfunctions.net/getStakesV2"
    HEADERS = {
        "accept": "application/json, text/plain, */*",
        "content-type": "application/json",
        "origin": PLATFORM_URL,
    }
    USE_CORS_RELAY = True

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]:
        return {"stakeCollectionId": STAKE_COLLECTION_ID, "changeAddress": addresses[0]}

    def format_response(self, raw: Any) -> RewardSummary:
        stakes = raw.get("stakes") if isinstance(raw, dict) and raw.get("success") else None
        if not isinstance(stakes, list):
            stakes = []

        totals: Dict[str, float] = {}
        for stake in stakes:
            result = stake.get("result") if isinstance(stake, dict) else None
            for reward in (result or {}).get("total") or []:
                unit = reward.get("unit")
                totals[unit] = totals.get(unit, 0.0) + to_float(reward.get("quantity"), 0.0)

        acc = TokenAccumulator()
        units_by_symbol: Dict[str, str] = {}
        for unit, quantity in totals.items():
            parts = parse_token_id(unit)
            is_ada = unit == "lovelace"
            symbol = token_symbol(unit)
            if units_by_symbol.setdefault(symbol, unit) != unit:
                # two distinct units share a label
                symbol = f"{symbol} ({str(parts['policy_id'])[:8]})"
            acc.add(
                TokenAmount(
                    symbol=symbol,
                    name=ADA_NAME if is_ada else symbol,
                    amount=to_human_amount(quantity, DEFAULT_DECIMALS),
                    decimals=DEFAULT_DECIMALS,
                    policy_id=ADA_SYMBOL if is_ada else str(parts["policy_id"]),
                    asset_name=str(parts["asset_name"]),
                    extra={"unit": unit, "raw_quantity": quantity},
                )
            )
        return RewardSummary(
            provider_name=self.name,
            tokens=tuple(acc.tokens()),
            metadata={"stake_count": len(stakes), "claim_url": PLATFORM_URL},
        )
