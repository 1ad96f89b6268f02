"""
Tests for und_core.precision — display/base unit conversion.
"""

from decimal import Decimal

import pytest

from und_core.config import ChainConfig
from und_core.errors import ValidationError
from und_core.precision import (
    NUND_PER_UND,
    UND_DECIMALS,
    format_amount,
    from_base_units,
    to_base_units,
    to_decimal,
)


class TestConstants:
    def test_decimals(self):
        assert UND_DECIMALS == 9
        assert NUND_PER_UND == 1_000_000_000


class TestToBaseUnits:
    def test_display_amount_scaled(self):
        assert to_base_units("2.001770112", "und") == ("2001770112", "nund")

    def test_float_amount_scaled_exactly(self):
        # 2.001770112 * 1e9 in binary floating point is 2001770111.9999998
        assert to_base_units(2.001770112, "und") == ("2001770112", "nund")

    def test_base_amount_unchanged(self):
        assert to_base_units(2001770112, "nund") == ("2001770112", "nund")
        assert to_base_units("2001770112", "nund") == ("2001770112", "nund")

    def test_fund_alias(self):
        assert to_base_units("1", "fund") == ("1000000000", "nund")

    def test_other_denom_passes_through(self):
        assert to_base_units("42", "stake") == ("42", "stake")

    def test_large_amount_no_precision_loss(self):
        assert to_base_units("9223372036.854775807", "und") == ("9223372036854775807", "nund")

    def test_fraction_of_base_unit_rejected(self):
        with pytest.raises(ValidationError):
            to_base_units("0.0000000001", "und")
        with pytest.raises(ValidationError):
            to_base_units("1.5", "nund")

    def test_configurable_display_denoms(self):
        chain = ChainConfig(display_denoms=("UND",), base_denom="nund")
        assert to_base_units("1", "UND", chain) == ("1000000000", "nund")
        assert to_base_units("1", "und", chain) == ("1", "und")

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError):
            to_base_units("lots", "und")


class TestToDecimal:
    def test_decimal_passthrough(self):
        assert to_decimal(Decimal("1.25")) == Decimal("1.25")

    def test_bool_rejected(self):
        with pytest.raises(ValidationError):
            to_decimal(True)

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError):
            to_decimal("NaN")
        with pytest.raises(ValidationError):
            to_decimal(float("inf"))


class TestFromBaseUnits:
    def test_from_base_units(self):
        assert from_base_units("2001770112") == Decimal("2.001770112")

    def test_format_amount(self):
        assert format_amount(2001770112) == "2.001770112 UND"
        assert format_amount("1") == "0.000000001 UND"
