"""
Input checks run by the client before any network or signing work.

Each helper raises :class:`~und_core.errors.ValidationError` with a message
that names the offending parameter.
"""

from __future__ import annotations

from typing import Any

from und_core.crypto_utils import check_address
from und_core.errors import ValidationError
from und_core.precision import to_decimal

MAX_INT64 = 2 ** 63


def check_number(value: Any, name: str = "input number") -> None:
    """Require 0 < value < 2^63 (the chain's signed 64-bit amount ceiling)."""
    dec = to_decimal(value, name)
    if dec <= 0:
        raise ValidationError(f"{name} should be a positive number")
    if dec >= MAX_INT64:
        raise ValidationError(f"{name} should be less than 2^63")


def check_coins(coins: list[dict] | None) -> None:
    for coin in coins or []:
        check_number(coin.get("amount"), "coin amount")
        if not coin.get("denom"):
            raise ValidationError("invalid denom")


def check_fee(fee: Any) -> None:
    """A fee is ``{"amount": [coin, ...], "gas": "<int>"}``; zero-amount coins are allowed."""
    if not isinstance(fee, dict):
        raise ValidationError("fee should be an object with amount and gas")
    amounts = fee.get("amount")
    if not isinstance(amounts, list):
        raise ValidationError("fee.amount should be a list of coins")
    for coin in amounts:
        if not isinstance(coin, dict) or not coin.get("denom"):
            raise ValidationError("fee.amount contains an invalid coin")
        if to_decimal(coin.get("amount"), "fee amount") < 0:
            raise ValidationError("fee amount should not be negative")
    if "gas" not in fee:
        raise ValidationError("fee.gas should not be empty")
    check_number(fee["gas"], "fee.gas")


def check_address_param(address: str | None, prefix: str, name: str) -> str:
    """Require a non-empty Bech32 address with *prefix*; returns it unchanged."""
    if not address:
        raise ValidationError(f"{name} should not be empty")
    if not check_address(address, prefix):
        raise ValidationError(f"invalid {name}")
    return address


def check_not_empty(value: Any, name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} should not be empty")
