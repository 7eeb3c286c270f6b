"""
Shallow shape checks for Cardano wallet identifiers.

No bech32 decoding or checksum verification happens here: a string that
passes is merely shaped like an address. Input is not trimmed or
case-folded; callers normalize before validating.
"""
from __future__ import annotations

from typing import Optional

PAYMENT_PREFIX = "addr1"
STAKE_PREFIX = "stake1"
MIN_PAYMENT_LENGTH = 100
MIN_STAKE_LENGTH = 50


def is_payment_address(address: Optional[str]) -> bool:
    return bool(address) and address.startswith(PAYMENT_PREFIX) and len(address) >= MIN_PAYMENT_LENGTH


def is_stake_address(address: Optional[str]) -> bool:
    return bool(address) and address.startswith(STAKE_PREFIX) and len(address) >= MIN_STAKE_LENGTH


def is_valid_address(address: Optional[str]) -> bool:
    """True for payment addresses (addr1..., at least 100 chars)."""
    return is_payment_address(address)


def is_valid_stake_capable_address(address: Optional[str]) -> bool:
    """Relaxed check for providers that also accept stake1... accounts."""
    return is_payment_address(address) or is_stake_address(address)
