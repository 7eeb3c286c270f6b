"""
Minswap staking and liquid-staking pending rewards.

  POST https://monorepo-mainnet-prod.minswap.org/graphql

The API answers for one address per request, so only the first address is
sent. Pending rewards from both position kinds are merged per ticker.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from .base import BaseRewardProvider, MarketData, ProviderDescriptor, RewardSummary, TokenAmount
from .errors import ValidationError
from .graphql import graphql_payload, raise_for_graphql_errors
from .normalize import (
    ADA_NAME,
    ADA_SYMBOL,
    DEFAULT_DECIMALS,
    TokenAccumulator,
    safe_get,
    to_float,
    to_human_amount,
    to_int,
)

logger = logging.getLogger(__name__)

POSITION_KEYS = ("portfolioMinStakingPosition", "portfolioLiquidStakingPosition")

PORTFOLIO_POSITIONS_QUERY = """query PortfolioMinStakingPosition($address: String!) {
  portfolioMinStakingPosition(address: $address) {
    __typename
    id
    version
    amountAsset {
      amount
      asset {
        ...allMetadata
      }
    }
    duration {
      duration
      multiplier
    }
    endAt
    rewardPercent
    netAdaValue
    pendingRewards {
      asset {
        ...allMetadata
        ...marketData
      }
      reward
    }
    stakedAssetAdaValue
    pnl24H
  }
  portfolioLiquidStakingPosition(address: $address) {
    __typename
    amountAsset {
      amount
      asset {
        ...allMetadata
      }
    }
    id
    netAdaValue
    pendingRewards {
      reward
      asset {
        ...allMetadata
        ...marketData
      }
    }
    stakeAt
    rewardPercent
    stakedAssetAdaValue
    pnl24H
  }
}

fragment allMetadata on Asset {
  __typename
  currencySymbol
  tokenName
  metadata {
    decimals
    description
    name
    ticker
    url
    isVerified
  }
}

fragment marketData on Asset {
  marketData {
    marketCap
    volume24h
    price
    priceChange24h
  }
}"""


def _market_data(asset: Dict[str, Any]) -> Optional[MarketData]:
    raw = asset.get("marketData")
    if not isinstance(raw, dict):
        return None
    return MarketData(
        price=to_float(raw.get("price"), 0.0),
        price_change_24h=to_float(raw.get("priceChange24h"), 0.0),
        market_cap=to_float(raw.get("marketCap"), 0.0),
        volume_24h=to_float(raw.get("volume24h"), 0.0),
    )


def _pending_reward_token(reward: Any) -> Optional[TokenAmount]:
    quantity = to_float(safe_get(reward, "reward"), 0.0)
    if quantity <= 0:
        return None
    asset = reward.get("asset") or {}
    meta = asset.get("metadata") or {}
    decimals = to_int(meta.get("decimals")) or DEFAULT_DECIMALS

    symbol = meta.get("ticker") or meta.get("name")
    name = meta.get("name")
    if not asset.get("currencySymbol") and not asset.get("tokenName"):
        symbol, name = ADA_SYMBOL, ADA_NAME

    return TokenAmount(
        symbol=symbol or "UNKNOWN",
        name=name or symbol or "UNKNOWN",
        amount=to_human_amount(quantity, decimals),
        decimals=decimals,
        policy_id=asset.get("currencySymbol") or ADA_SYMBOL,
        asset_name=asset.get("tokenName") or "",
        verified=meta.get("isVerified"),
        market_data=_market_data(asset),
        extra={k: meta[k] for k in ("description", "url") if meta.get(k)},
    )


class MinswapProvider(BaseRewardProvider):
    DESCRIPTOR = ProviderDescriptor(
        id="minswap",
        name="Minswap",
        icon="https://minswap.org/favicon.ico",
        platform_url="https://minswap.org",
    )
    ENDPOINT = "https://monorepo-mainnet-prod.minswap.org/graphql"
    HEADERS = {"content-type": "application/json", "accept": "application/json"}
    USE_CORS_RELAY = True

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]:
        return graphql_payload(PORTFOLIO_POSITIONS_QUERY, {"address": addresses[0]})

    async def fetch(self, addresses: Sequence[str]) -> Any:
        if not self.is_valid_address(addresses[0]):
            raise ValidationError("Invalid Cardano address format")
        logger.debug("Minswap: querying positions for %s", addresses[0])
        return raise_for_graphql_errors(await super().fetch(addresses[:1]))

    def format_response(self, raw: Any) -> RewardSummary:
        acc = TokenAccumulator()
        position_count = 0
        data = raw.get("data") if isinstance(raw, dict) else None
        for key in POSITION_KEYS:
            for position in (data or {}).get(key) or []:
                position_count += 1
                for reward in position.get("pendingRewards") or []:
                    token = _pending_reward_token(reward)
                    if token is not None:
                        acc.add(token)

        tokens = acc.tokens()
        return RewardSummary(
            provider_name=self.name,
            tokens=tuple(tokens),
            metadata={
                "claim_url": self.platform_url,
                "total_positions": position_count,
                "total_rewards": acc.total(),
            },
        )
