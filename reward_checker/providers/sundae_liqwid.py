"""
Liqwid rewards, served by the SundaeSwap rewards API.

  POST https://api.sundae-rewards.sundaeswap.finance/api/v1/liqwid/rewards
  body: {"addresses": [...]}
  reply: {"rewards": {"<address>": [{"amount": <LQ minor units>}, ...]}}
"""
from __future__ import annotations

from typing import Any, Dict, Sequence

from .base import BaseRewardProvider, ProviderDescriptor, RewardSummary, TokenAmount
from .normalize import TokenAccumulator, to_human_amount

LQ_POLICY_ID = "5d16cc1a177b5d9ba9cfa9793b07e60f1fb70fea1f8aef064415d114"
LQ_ASSET_NAME = "494147"
LQ_DECIMALS = 6
CLAIM_URL = "https://liqwid-rewards.sundaeswap.finance"


class SundaeLiqwidProvider(BaseRewardProvider):
    """All addresses in one request; every reward line is LQ."""

    DESCRIPTOR = ProviderDescriptor(
        id="sundae-liqwid",
        name="Liqwid",
        icon="https://v2.liqwid.finance/favicon.png",
        platform_url=CLAIM_URL,
    )
    ENDPOINT = "https://api.sundae-rewards.sundaeswap.finance/api/v1/liqwid/rewards"
    HEADERS = {
        "accept": "application/json, text/plain, */*",
        "content-type": "application/json",
        "origin": CLAIM_URL,
    }

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]:
        return {"addresses": list(addresses)}

    def format_response(self, raw: Any) -> RewardSummary:
        total_lq = 0.0
        reward_count = 0
        rewards = raw.get("rewards") if isinstance(raw, dict) else None
        if isinstance(rewards, dict):
            for address_rewards in rewards.values():
                if not isinstance(address_rewards, list):
                    continue
                for reward in address_rewards:
                    total_lq += to_human_amount(reward.get("amount"), LQ_DECIMALS)
                    reward_count += 1

        acc = TokenAccumulator()
        if total_lq > 0:
            acc.add(
                TokenAmount(
                    symbol="LQ",
                    name="Liqwid Token",
                    amount=total_lq,
                    decimals=LQ_DECIMALS,
                    policy_id=LQ_POLICY_ID,
                    asset_name=LQ_ASSET_NAME,
                    extra={"reward_count": reward_count},
                )
            )
        return RewardSummary(
            provider_name=self.name,
            tokens=tuple(acc.tokens()),
            metadata={"total_rewards": reward_count, "claim_url": CLAIM_URL},
        )
