"""
Strike Finance staking rewards.

  GET https://app.strikefinance.org/api/staking/getStake?address=<addr>
  reply: {"rewards": <ADA>, "stakedAmount": <ADA>}

Amounts are already denominated in ADA. The origin blocks direct browser
calls, so the request goes through the CORS relay when one is configured.
"""
from __future__ import annotations

from typing import Any, Dict, Sequence

from .base import BaseRewardProvider, ProviderDescriptor, RewardSummary, TokenAmount
from .normalize import ADA_NAME, ADA_SYMBOL, TokenAccumulator, to_float

PLATFORM_URL = "https://app.strikefinance.org/staking"


class StrikeFinanceProvider(BaseRewardProvider):
    DESCRIPTOR = ProviderDescriptor(
        id="strikefinance",
        name="Strike Finance",
        icon="https://app.strikefinance.org/favicon.png",
        platform_url=PLATFORM_URL,
    )
    ENDPOINT = "https://app.strikefinance.org/api/staking/getStake"
    METHOD = "GET"
    HEADERS = {
        "accept": "*/*",
        "accept-language": "en-GB,en-US;q=0.9,en;q=0.8",
        "cache-control": "no-cache",
        "pragma": "no-cache",
        "origin": "https://app.strikefinance.org",
    }
    USE_CORS_RELAY = True

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]:
        # Query parameters, one address per call.
        return {"address": addresses[0]}

    async def fetch(self, addresses: Sequence[str]) -> Any:
        return await self.transport.request_json(
            self.method,
            self.endpoint,
            headers=self.headers,
            params=self.build_request(addresses),
        )

    def format_response(self, raw: Any) -> RewardSummary:
        raw = raw if isinstance(raw, dict) else {}
        rewards = to_float(raw.get("rewards"), 0.0)
        staked = to_float(raw.get("stakedAmount"), 0.0)

        acc = TokenAccumulator()
        if rewards > 0:
            acc.add(
                TokenAmount(
                    symbol=ADA_SYMBOL,
                    name=ADA_NAME,
                    amount=rewards,
                    policy_id=ADA_SYMBOL,
                    asset_name="",
                    extra={"type": "rewards", "status": "claimable"},
                )
            )
        return RewardSummary(
            provider_name=self.name,
            tokens=tuple(acc.tokens()),
            metadata={
                "total_staked_ada": staked,
                "total_rewards_ada": rewards,
                "claim_url": PLATFORM_URL,
            },
        )
