"""
Classic proof-of-stake delegation rewards from the Koios public API.

Two sequential calls:
  POST {base}/address_info   {"_addresses": [<payment addr>]}   -> stake_address
  POST {base}/account_info   {"_stake_addresses": [<stake addr>]} -> rewards

A stake1... input skips the first call. The account lookup is only built
after the address lookup has answered.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from ..addresses import is_stake_address, is_valid_stake_capable_address
from .base import BaseRewardProvider, ProviderDescriptor, RewardSummary, TokenAmount
from .errors import TransportError
from .normalize import ADA_NAME, ADA_SYMBOL, DEFAULT_DECIMALS, TokenAccumulator, lovelace_to_ada, to_float

logger = logging.getLogger(__name__)

CLAIM_URL = "https://eternl.io/app/mainnet/dashboard"

# account_info fields reported in ADA alongside the reward balance
_BALANCE_FIELDS = {
    "total_balance": "total_balance",
    "utxo": "utxo_balance",
    "deposit": "deposit",
    "reserves": "reserves",
    "treasury": "treasury",
}


class CardanoStakingProvider(BaseRewardProvider):
    DESCRIPTOR = ProviderDescriptor(
        id="cardano-staking",
        name="Cardano Staking",
        icon="https://cardano.org/img/favicon.ico",
        platform_url="https://cardano.org",
    )
    ENDPOINT = "https://api.koios.rest/api/v1"
    HEADERS = {"content-type": "application/json", "accept": "application/json"}
    USE_CORS_RELAY = True

    def is_valid_address(self, address: str) -> bool:
        return is_valid_stake_capable_address(address)

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]:
        return {"_addresses": list(addresses)}

    def build_account_request(self, stake_address: str) -> Dict[str, Any]:
        return {"_stake_addresses": [stake_address]}

    async def resolve_stake_address(self, address: str) -> Optional[str]:
        if is_stake_address(address):
            return address
        info = await self.transport.request_json(
            "POST",
            f"{self.endpoint}/address_info",
            headers=self.headers,
            body=self.build_request([address]),
        )
        if not isinstance(info, list) or not info or not isinstance(info[0], dict):
            return None
        return info[0].get("stake_address") or None

    async def account_info(self, stake_address: str) -> Optional[Dict[str, Any]]:
        try:
            rows = await self.transport.request_json(
                "POST",
                f"{self.endpoint}/account_info",
                headers=self.headers,
                body=self.build_account_request(stake_address),
            )
        except TransportError as exc:
            if exc.status_code == 404:
                return None
            raise
        if isinstance(rows, list) and rows and isinstance(rows[0], dict):
            return rows[0]
        return None

    async def fetch(self, addresses: Sequence[str]) -> Any:
        stake_address = await self.resolve_stake_address(addresses[0])
        if not stake_address:
            logger.debug("No stake address registered for %s", addresses[0])
            return {"account": None, "stake_address": None}
        account = await self.account_info(stake_address)
        return {"account": account, "stake_address": stake_address}

    def format_response(self, raw: Any) -> RewardSummary:
        account = raw.get("account") if isinstance(raw, dict) else None
        stake_address = raw.get("stake_address") if isinstance(raw, dict) else None

        rewards_available = to_float((account or {}).get("rewards_available"), 0.0)
        total_rewards = to_float((account or {}).get("rewards"), 0.0)
        withdrawals = to_float((account or {}).get("withdrawals"), 0.0)

        acc = TokenAccumulator()
        if rewards_available > 0:
            acc.add(
                TokenAmount(
                    symbol=ADA_SYMBOL,
                    name=ADA_NAME,
                    amount=lovelace_to_ada(rewards_available),
                    decimals=DEFAULT_DECIMALS,
                    policy_id=ADA_SYMBOL,
                    asset_name="",
                )
            )

        metadata: Dict[str, Any] = {
            "stake_address": stake_address,
            "rewards_available_lovelace": rewards_available,
            "rewards_available_ada": lovelace_to_ada(rewards_available),
            "total_rewards_lovelace": total_rewards,
            "total_rewards_ada": lovelace_to_ada(total_rewards),
            "withdrawals_lovelace": withdrawals,
            "withdrawals_ada": lovelace_to_ada(withdrawals),
            "claim_url": CLAIM_URL,
        }
        if account:
            metadata["delegated_pool"] = account.get("delegated_pool")
            metadata["delegated_drep"] = account.get("delegated_drep")
            metadata["status"] = account.get("status")
            for source, target in _BALANCE_FIELDS.items():
                metadata[target] = lovelace_to_ada(account.get(source))

        return RewardSummary(provider_name=self.name, tokens=tuple(acc.tokens()), metadata=metadata)
