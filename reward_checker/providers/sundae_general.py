"""
SundaeSwap liquidity-position fees.

  POST https://api.sundae.fi/graphql   (operation fetchPositions)

Each liquidity position carries accrued fees for both pool assets. Fees with
a positive quantity are merged per ticker and scaled by the asset's own
decimals field.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from .base import BaseRewardProvider, ProviderDescriptor, RewardSummary, TokenAmount
from .graphql import graphql_payload, raise_for_graphql_errors
from .normalize import (
    ADA_SYMBOL,
    DEFAULT_DECIMALS,
    TokenAccumulator,
    safe_get,
    to_float,
    to_human_amount,
    to_int,
)

CLAIM_URL = "https://app.sundae.fi/"

FETCH_POSITIONS_QUERY = """query fetchPositions($address: String!) {
  portfolio(address: $address) {
    liquidity {
      ...LiquidityBrambleFragment
    }
  }
}

fragment LiquidityBrambleFragment on Liquidity {
  fees {
    assetA {
      asset {
        ...AssetBrambleFragment
      }
      quantity
    }
    assetB {
      asset {
        ...AssetBrambleFragment
      }
      quantity
    }
  }
  pool {
    ...PoolBrambleFragment
  }
  quantity {
    asset {
      ...AssetBrambleFragment
    }
    quantity
  }
}

fragment AssetBrambleFragment on Asset {
  id
  assetId: id
  policyId
  decimals
  ticker
  name
  logo
  assetName
}

fragment PoolBrambleFragment on Pool {
  id
  assetA {
    ...AssetBrambleFragment
  }
  assetB {
    ...AssetBrambleFragment
  }
  version
}"""


def _fee_token(fee: Any) -> Optional[TokenAmount]:
    if not isinstance(fee, dict):
        return None
    quantity = to_float(fee.get("quantity"), 0.0)
    if quantity <= 0:
        return None
    asset = fee.get("asset") or {}
    ticker = asset.get("ticker") or asset.get("name") or asset.get("assetName") or "UNKNOWN"
    decimals = to_int(asset.get("decimals"), DEFAULT_DECIMALS)
    return TokenAmount(
        symbol=ticker,
        name=asset.get("name") or ticker,
        amount=to_human_amount(quantity, decimals),
        decimals=decimals,
        policy_id=asset.get("policyId") or ADA_SYMBOL,
        asset_name=asset.get("assetName") or "",
        extra={"logo": asset.get("logo")} if asset.get("logo") else {},
    )


class SundaeGeneralProvider(BaseRewardProvider):
    DESCRIPTOR = ProviderDescriptor(
        id="sundae-general",
        name="SundaeSwap",
        icon="https://app.sundae.fi/images/favicon.png",
        platform_url="https://sundaeswap.finance",
    )
    ENDPOINT = "https://api.sundae.fi/graphql"
    HEADERS = {
        "accept": "*/*",
        "content-type": "application/json",
        "origin": "https://app.sundae.fi",
        "referer": "https://app.sundae.fi/",
    }

    def build_request(self, addresses: Sequence[str]) -> Dict[str, Any]:
        return graphql_payload(
            FETCH_POSITIONS_QUERY, {"address": addresses[0]}, operation_name="fetchPositions"
        )

    async def fetch(self, addresses: Sequence[str]) -> Any:
        return raise_for_graphql_errors(await super().fetch(addresses))

    def format_response(self, raw: Any) -> RewardSummary:
        positions = safe_get(raw, "data.portfolio.liquidity")
        if not isinstance(positions, list):
            return RewardSummary(
                provider_name=self.name,
                metadata={"claim_url": CLAIM_URL, "total_positions": 0},
            )

        total_positions = 0
        acc = TokenAccumulator()
        for position in positions:
            fees = position.get("fees") if isinstance(position, dict) else None
            if not fees:
                continue
            total_positions += 1
            for side in ("assetA", "assetB"):
                token = _fee_token(fees.get(side))
                if token is not None:
                    acc.add(token)

        return RewardSummary(
            provider_name=self.name,
            tokens=tuple(acc.tokens()),
            metadata={
                "claim_url": CLAIM_URL,
                "total_positions": total_positions,
                "liquidity_positions": len(positions),
            },
        )
