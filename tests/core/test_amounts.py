"""Tests for amount conversion and validation helpers."""

from decimal import Decimal

import pytest

from aggregator.core.amounts import (
    UINT256_MAX,
    from_token_amount,
    is_native_token,
    is_valid_address,
    is_wrapped_token,
    to_token_amount,
    validate_amount,
    validate_tokens,
)
from conftest import MEME, NATIVE_BTC, OTHER, PBTC, make_token


class TestFromTokenAmount:
    def test_scales_by_decimals(self):
        assert from_token_amount("1.5", 18) == 1_500_000_000_000_000_000
        assert from_token_amount("2", 6) == 2_000_000
        assert from_token_amount("0.000001", 6) == 1

    def test_truncates_extra_precision(self):
        # 7th decimal is dropped for a 6-decimal token
        assert from_token_amount("1.2345679", 6) == 1_234_567

    def test_accepts_decimal_and_int(self):
        assert from_token_amount(Decimal("0.25"), 4) == 2500
        assert from_token_amount(3, 0) == 3

    def test_rejects_non_numeric(self):
        with pytest.raises(ValueError, match="Invalid token amount"):
            from_token_amount("abc", 18)
        with pytest.raises(ValueError):
            from_token_amount("NaN", 18)

    def test_large_amounts_are_exact(self):
        assert from_token_amount("100000000000", 18) == 10**29
        assert (
            from_token_amount("12345678901.123456789012345679", 18)
            == 12345678901_123456789012345679
        )

    def test_large_amounts_truncate_instead_of_rounding(self):
        assert (
            from_token_amount("99999999999.9999999999999999999", 18)
            == 99999999999_999999999999999999
        )

    def test_tiny_exponent_is_zero(self):
        assert from_token_amount("1e-30", 18) == 0
        assert from_token_amount("1e-999999999", 18) == 0

    def test_uint256_bound(self):
        assert from_token_amount(str(UINT256_MAX), 0) == UINT256_MAX
        with pytest.raises(ValueError, match="out of range"):
            from_token_amount(str(UINT256_MAX + 1), 0)
        with pytest.raises(ValueError, match="out of range"):
            from_token_amount("1e60", 18)
        with pytest.raises(ValueError, match="out of range"):
            from_token_amount("1e999999999", 18)

    def test_back_conversion(self):
        assert to_token_amount(1_500_000, 6) == Decimal("1.5")
        assert to_token_amount(10**29 + 1, 18) == Decimal(
            "100000000000.000000000000000001"
        )
        assert to_token_amount(UINT256_MAX, 0) == Decimal(UINT256_MAX)


class TestValidation:
    @pytest.mark.parametrize("amount", ["1", "0.5", "1000000", " 2.5 "])
    def test_valid_amounts(self, amount):
        assert validate_amount(amount)

    @pytest.mark.parametrize("amount", ["0", "-1", "", "abc", "inf", "NaN", "0.0"])
    def test_invalid_amounts(self, amount):
        assert not validate_amount(amount)

    def test_same_token_is_invalid_regardless_of_case(self):
        src = make_token(PBTC)
        dst = make_token(PBTC.lower())
        assert not validate_tokens(src, dst)

    def test_malformed_address_is_invalid(self):
        assert not validate_tokens(make_token("0xNative"), make_token(MEME))
        assert not validate_tokens(make_token(MEME), make_token("not-an-address"))

    def test_distinct_well_formed_tokens_are_valid(self):
        assert validate_tokens(make_token(MEME), make_token(OTHER))

    def test_is_valid_address(self):
        assert is_valid_address(NATIVE_BTC)
        assert not is_valid_address("0x123")


def test_native_and_wrapped_checks_ignore_case():
    btc = make_token(NATIVE_BTC.lower())
    pbtc = make_token(PBTC.upper().replace("0X", "0x"))

    assert is_native_token(btc, NATIVE_BTC)
    assert is_wrapped_token(pbtc, PBTC)
    assert not is_native_token(pbtc, NATIVE_BTC)
