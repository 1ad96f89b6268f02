"""
Denomination constants and helpers for UND amounts.

UND uses 9 decimal places:

    1 UND = 1,000,000,000 nund (smallest indivisible unit)

Amounts are scaled with :class:`decimal.Decimal`, never ``float``:
``2.001770112 * 10**9`` is not exactly representable in binary floating
point, and the chain compares amounts as exact integers.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

from und_core.config import ChainConfig
from und_core.errors import ValidationError

_DEFAULT_CHAIN = ChainConfig()

# Number of decimal places between the display and base denominations.
UND_DECIMALS: int = 9

# Smallest representable unit: 1 nund = 0.000000001 UND.
NUND_PER_UND: int = 10 ** UND_DECIMALS


def to_decimal(value: int | float | str | Decimal, name: str = "amount") -> Decimal:
    """Exact Decimal for *value*; floats go through their shortest repr."""
    if isinstance(value, bool):
        raise ValidationError(f"{name} should be a number")
    if isinstance(value, float):
        value = repr(value)
    try:
        dec = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except InvalidOperation:
        raise ValidationError(f"{name} should be a number") from None
    if not dec.is_finite():
        raise ValidationError(f"{name} should be a finite number")
    return dec


def to_base_units(
    amount: int | float | str | Decimal,
    denom: str,
    chain: ChainConfig = _DEFAULT_CHAIN,
) -> tuple[str, str]:
    """
    Normalise *amount* of *denom* to the chain's base denomination.

    Display denominations (``und``, ``fund``) are multiplied by
    ``chain.base_number`` and renamed to ``chain.base_denom``; any other
    denomination passes through unchanged.

    >>> to_base_units("2.001770112", "und")
    ('2001770112', 'nund')
    """
    dec = to_decimal(amount)
    if denom in chain.display_denoms:
        with localcontext() as ctx:
            ctx.prec = 80
            dec = dec * chain.base_number
        denom = chain.base_denom
    if dec != dec.to_integral_value():
        raise ValidationError(
            f"amount {amount} {denom} is finer than the smallest unit",
        )
    return str(int(dec)), denom


def from_base_units(amount: int | str, chain: ChainConfig = _DEFAULT_CHAIN) -> Decimal:
    """Convert a base-unit integer amount to display units."""
    return to_decimal(amount) / chain.base_number


def format_amount(amount: int | str, chain: ChainConfig = _DEFAULT_CHAIN,
                  currency: str = "UND") -> str:
    """Human-readable string with 9 decimal places, e.g. ``2.001770112 UND``."""
    value = from_base_units(amount, chain)
    return f"{value:.{UND_DECIMALS}f} {currency}"
