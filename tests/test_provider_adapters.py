"""
Tests for each adapter's request building and response normalization.

format_response is pure: no network, no clock, identical output for identical
input.
"""
from __future__ import annotations

import copy

import pytest

from reward_checker.providers.cardano_staking import CardanoStakingProvider
from reward_checker.providers.minswap import MinswapProvider
from reward_checker.providers.nuvola_digital import NuvolaDigitalProvider
from reward_checker.providers.strike_finance import StrikeFinanceProvider
from reward_checker.providers.sundae_general import SundaeGeneralProvider
from reward_checker.providers.sundae_liqwid import LQ_POLICY_ID, SundaeLiqwidProvider
from tests.fakes.providers import VALID_ADDRESS

IAG_UNIT = "5d16cc1a177b5d9ba9cfa9793b07e60f1fb70fea1f8aef064415d114494147"


def _minswap_reward(reward, *, ticker="MIN", decimals=6, currency="29d222ce", token="4d494e", market=None):
    asset = {
        "currencySymbol": currency,
        "tokenName": token,
        "metadata": {"decimals": decimals, "ticker": ticker, "name": ticker.title(), "isVerified": True},
    }
    if market is not None:
        asset["marketData"] = market
    return {"reward": reward, "asset": asset}


MINSWAP_RAW = {
    "data": {
        "portfolioMinStakingPosition": [
            {"pendingRewards": [_minswap_reward(2_000_000), _minswap_reward(0)]},
        ],
        "portfolioLiquidStakingPosition": [
            {
                "pendingRewards": [
                    _minswap_reward(3_500_000, market={"price": "0.02", "marketCap": "1000"}),
                    _minswap_reward(4_000_000, ticker="", currency="", token="", decimals=None),
                ]
            },
        ],
    }
}


class TestSundaeLiqwid:
    def test_build_request_sends_all_addresses(self):
        p = SundaeLiqwidProvider()
        assert p.build_request(["a", "b"]) == {"addresses": ["a", "b"]}

    def test_sums_rewards_across_addresses(self):
        raw = {"rewards": {"addr_a": [{"amount": 1_000_000}, {"amount": 500_000}], "addr_b": [{"amount": 250_000}]}}
        summary = SundaeLiqwidProvider().format_response(raw)
        assert summary.provider_name == "Liqwid"
        assert len(summary.tokens) == 1
        lq = summary.tokens[0]
        assert lq.symbol == "LQ"
        assert lq.amount == pytest.approx(1.75)
        assert lq.policy_id == LQ_POLICY_ID
        assert summary.metadata["total_rewards"] == 3
        assert summary.claim_url == "https://liqwid-rewards.sundaeswap.finance"

    def test_no_rewards(self):
        summary = SundaeLiqwidProvider().format_response({"rewards": {}})
        assert summary.tokens == ()
        assert not summary.has_rewards()

    def test_idempotent(self):
        raw = {"rewards": {"addr_a": [{"amount": 3_000_000}]}}
        p = SundaeLiqwidProvider()
        assert p.format_response(raw) == p.format_response(raw)


class TestSundaeGeneral:
    RAW = {
        "data": {
            "portfolio": {
                "liquidity": [
                    {
                        "fees": {
                            "assetA": {"asset": {"ticker": "ADA", "decimals": 6, "policyId": ""}, "quantity": "2000000"},
                            "assetB": {"asset": {"ticker": "SUNDAE", "decimals": 6, "policyId": "9a9693a9"}, "quantity": "0"},
                        }
                    },
                    {
                        "fees": {
                            "assetA": {"asset": {"ticker": "ADA", "decimals": 6}, "quantity": "3500000"},
                            "assetB": {"asset": {"name": "Hosky", "decimals": 0, "policyId": "a0028f35"}, "quantity": "12"},
                        }
                    },
                    {"fees": None},
                ]
            }
        }
    }

    def test_build_request_is_graphql(self):
        payload = SundaeGeneralProvider().build_request([VALID_ADDRESS, "ignored"])
        assert payload["operationName"] == "fetchPositions"
        assert payload["variables"] == {"address": VALID_ADDRESS}
        assert "portfolio(address: $address)" in payload["query"]

    def test_duplicate_symbols_merge(self):
        summary = SundaeGeneralProvider().format_response(self.RAW)
        by_symbol = {t.symbol: t for t in summary.tokens}
        assert set(by_symbol) == {"ADA", "Hosky"}
        assert by_symbol["ADA"].amount == pytest.approx(5.5)
        assert by_symbol["Hosky"].amount == 12.0
        assert by_symbol["ADA"].policy_id == "ADA"
        assert summary.metadata["total_positions"] == 2
        assert summary.metadata["liquidity_positions"] == 3

    def test_fee_without_decimals_scales_by_six(self):
        raw = {"data": {"portfolio": {"liquidity": [{"fees": {
            "assetA": {"asset": {"ticker": "SUNDAE"}, "quantity": "1500000"},
            "assetB": {"asset": {"ticker": "RAW", "decimals": 0}, "quantity": "42"},
        }}]}}}
        by_symbol = {t.symbol: t for t in SundaeGeneralProvider().format_response(raw).tokens}
        assert by_symbol["SUNDAE"].amount == pytest.approx(1.5)
        assert by_symbol["SUNDAE"].decimals == 6
        assert by_symbol["RAW"].amount == 42.0
        assert by_symbol["RAW"].decimals == 0

    def test_missing_portfolio(self):
        summary = SundaeGeneralProvider().format_response({"data": {"portfolio": None}})
        assert summary.tokens == ()
        assert summary.metadata["total_positions"] == 0

    def test_idempotent(self):
        raw = copy.deepcopy(self.RAW)
        p = SundaeGeneralProvider()
        assert p.format_response(raw) == p.format_response(raw)
        assert raw == self.RAW


class TestNuvolaDigital:
    def test_build_request(self):
        assert NuvolaDigitalProvider().build_request([VALID_ADDRESS]) == {
            "stakeCollectionId": 60,
            "changeAddress": VALID_ADDRESS,
        }

    def test_sums_units_across_stakes(self):
        raw = {
            "success": True,
            "stakes": [
                {"result": {"total": [{"unit": IAG_UNIT, "quantity": 1_000_000}, {"unit": "lovelace", "quantity": 500_000}]}},
                {"result": {"total": [{"unit": IAG_UNIT, "quantity": 2_500_000}]}},
                {"result": None},
            ],
        }
        summary = NuvolaDigitalProvider().format_response(raw)
        by_symbol = {t.symbol: t for t in summary.tokens}
        assert by_symbol["IAG"].amount == pytest.approx(3.5)
        assert by_symbol["IAG"].policy_id == IAG_UNIT[:56]
        assert by_symbol["IAG"].asset_name == "494147"
        assert by_symbol["ADA"].amount == pytest.approx(0.5)
        assert summary.metadata["stake_count"] == 3

    def test_unknown_units_stay_separate(self):
        mine = "a" * 56 + "4d594b"
        opaque = "b" * 56 + "00ff"
        twin = "c" * 56 + "4d594b"
        raw = {"success": True, "stakes": [{"result": {"total": [
            {"unit": mine, "quantity": 1_000_000},
            {"unit": opaque, "quantity": 2_000_000},
            {"unit": twin, "quantity": 3_000_000},
        ]}}]}
        tokens = NuvolaDigitalProvider().format_response(raw).tokens
        assert [(t.symbol, t.amount, t.policy_id) for t in tokens] == [
            ("MYK", pytest.approx(1.0), "a" * 56),
            (opaque, pytest.approx(2.0), "b" * 56),
            ("MYK (cccccccc)", pytest.approx(3.0), "c" * 56),
        ]
        assert tokens[0].asset_name == "4d594b"

    def test_missing_unit_label(self):
        raw = {"success": True, "stakes": [{"result": {"total": [{"quantity": 7_000_000}]}}]}
        summary = NuvolaDigitalProvider().format_response(raw)
        assert summary.tokens[0].symbol == "Unknown Token"

    def test_unsuccessful_payload_has_no_tokens(self):
        summary = NuvolaDigitalProvider().format_response({"success": False, "stakes": [{"result": {}}]})
        assert summary.tokens == ()
        assert summary.metadata["stake_count"] == 0

    def test_dust_is_dropped(self):
        raw = {"success": True, "stakes": [{"result": {"total": [{"unit": "lovelace", "quantity": 0.1}]}}]}
        assert NuvolaDigitalProvider().format_response(raw).tokens == ()


class TestMinswap:
    def test_build_request_uses_first_address(self):
        payload = MinswapProvider().build_request([VALID_ADDRESS, "other"])
        assert payload["variables"] == {"address": VALID_ADDRESS}
        assert "portfolioLiquidStakingPosition" in payload["query"]

    def test_pending_rewards_merge_and_ada_detection(self):
        summary = MinswapProvider().format_response(MINSWAP_RAW)
        by_symbol = {t.symbol: t for t in summary.tokens}
        assert set(by_symbol) == {"MIN", "ADA"}
        assert by_symbol["MIN"].amount == pytest.approx(5.5)
        assert by_symbol["MIN"].verified is True
        assert by_symbol["ADA"].name == "Cardano"
        assert by_symbol["ADA"].policy_id == "ADA"
        assert by_symbol["ADA"].amount == pytest.approx(4.0)
        assert summary.metadata["total_positions"] == 2
        assert summary.metadata["total_rewards"] == pytest.approx(9.5)

    def test_market_data_parsed(self):
        raw = {"data": {"portfolioMinStakingPosition": [{"pendingRewards": [
            _minswap_reward(1_000_000, market={"price": "0.02", "priceChange24h": "-1.5", "marketCap": "1000", "volume24h": None})
        ]}]}}
        token = MinswapProvider().format_response(raw).tokens[0]
        assert token.market_data.price == pytest.approx(0.02)
        assert token.market_data.price_change_24h == pytest.approx(-1.5)
        assert token.market_data.volume_24h == 0.0

    def test_empty_data(self):
        summary = MinswapProvider().format_response({"data": None})
        assert summary.tokens == ()

    def test_idempotent(self):
        p = MinswapProvider()
        assert p.format_response(MINSWAP_RAW) == p.format_response(MINSWAP_RAW)


class TestCardanoStaking:
    def test_accepts_stake_addresses(self):
        p = CardanoStakingProvider()
        assert p.is_valid_address("stake1" + "u" * 53)
        assert p.is_valid_address(VALID_ADDRESS)

    def test_rewards_available_becomes_ada_token(self):
        raw = {
            "stake_address": "stake1uxyz",
            "account": {
                "rewards_available": "1500000",
                "rewards": "9000000",
                "withdrawals": "7500000",
                "delegated_pool": "pool1abc",
                "status": "registered",
                "total_balance": "101500000",
                "utxo": "100000000",
            },
        }
        summary = CardanoStakingProvider().format_response(raw)
        assert len(summary.tokens) == 1
        assert summary.tokens[0].symbol == "ADA"
        assert summary.tokens[0].amount == pytest.approx(1.5)
        md = summary.metadata
        assert md["stake_address"] == "stake1uxyz"
        assert md["total_rewards_ada"] == pytest.approx(9.0)
        assert md["withdrawals_ada"] == pytest.approx(7.5)
        assert md["delegated_pool"] == "pool1abc"
        assert md["total_balance"] == pytest.approx(101.5)
        assert md["deposit"] == 0.0

    def test_no_account(self):
        summary = CardanoStakingProvider().format_response({"account": None, "stake_address": None})
        assert summary.tokens == ()
        assert summary.metadata["rewards_available_ada"] == 0.0
        assert "delegated_pool" not in summary.metadata


class TestStrikeFinance:
    def test_build_request_is_query_params(self):
        assert StrikeFinanceProvider().build_request([VALID_ADDRESS]) == {"address": VALID_ADDRESS}

    def test_rewards_are_already_ada(self):
        summary = StrikeFinanceProvider().format_response({"rewards": 12.5, "stakedAmount": 1000})
        assert summary.tokens[0].symbol == "ADA"
        assert summary.tokens[0].amount == 12.5
        assert summary.metadata["total_staked_ada"] == 1000.0

    def test_staked_without_rewards(self):
        summary = StrikeFinanceProvider().format_response({"rewards": 0, "stakedAmount": 50})
        assert summary.tokens == ()
        assert summary.metadata["total_rewards_ada"] == 0.0
