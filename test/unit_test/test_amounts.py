"""
Amount Codec Unit Tests
"""

import pytest

from clmm_swap.errors import InvalidAmount, ErrorCode
from clmm_swap.math.amounts import (
    parse_amount,
    parse_amount_or_zero,
    format_amount,
    is_positive_amount,
)
from clmm_swap.types import TokenInfo


class TestParseAmount:
    """Tests for parse_amount (transaction-building path)"""

    def test_whole_amount(self):
        assert parse_amount("10", 18) == 10 * 10 ** 18
        assert parse_amount("1", 0) == 1
        assert parse_amount("0", 6) == 0

    def test_fractional_amount_is_exact(self):
        assert parse_amount("9.85", 18) == 9_850_000_000_000_000_000
        assert parse_amount("0.000000000000000001", 18) == 1
        assert parse_amount("1.5", 6) == 1_500_000

    def test_loose_decimal_forms(self):
        assert parse_amount(".5", 1) == 5
        assert parse_amount("10.", 2) == 1000
        assert parse_amount("  2.5 ", 1) == 25

    def test_trailing_zeros_do_not_count_as_precision(self):
        assert parse_amount("1.50", 1) == 15
        assert parse_amount("3.000", 0) == 3

    def test_too_precise_raises(self):
        with pytest.raises(InvalidAmount) as exc_info:
            parse_amount("1.234", 2)
        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT
        assert exc_info.value.decimals == 2

    def test_negative_raises(self):
        with pytest.raises(InvalidAmount):
            parse_amount("-1", 18)

    @pytest.mark.parametrize("value", ["", " ", ".", "abc", "1e5", "1.2.3", "0x10", "1,5", "+1"])
    def test_malformed_raises(self, value):
        with pytest.raises(InvalidAmount):
            parse_amount(value, 18)

    def test_non_string_raises(self):
        with pytest.raises(InvalidAmount):
            parse_amount(1.5, 18)

    @pytest.mark.parametrize("decimals", [-1, 256, 1.5, True, None])
    def test_bad_decimals_raise(self, decimals):
        with pytest.raises(InvalidAmount):
            parse_amount("1", decimals)

    def test_large_decimals(self):
        assert parse_amount("1", 255) == 10 ** 255


class TestParseAmountOrZero:
    """Tests for the display-path parse"""

    @pytest.mark.parametrize("value", ["", "abc", "-1", "1.0000001"])
    def test_malformed_is_zero(self, value):
        assert parse_amount_or_zero(value, 6) == 0

    def test_valid_amount(self):
        assert parse_amount_or_zero("2.5", 6) == 2_500_000


class TestFormatAmount:
    """Tests for format_amount"""

    def test_minimal_representation(self):
        assert format_amount(9_850_000_000_000_000_000, 18) == "9.85"
        assert format_amount(10 ** 18, 18) == "1"
        assert format_amount(1, 18) == "0.000000000000000001"
        assert format_amount(0, 18) == "0"

    def test_zero_decimals(self):
        assert format_amount(5, 0) == "5"

    def test_integer_string(self):
        assert format_amount("1500", 3) == "1.5"

    def test_negative_keeps_sign(self):
        assert format_amount(-15, 1) == "-1.5"

    @pytest.mark.parametrize("raw", ["abc", "1.5", None, 1.5, True, ""])
    def test_garbage_renders_zero(self, raw):
        assert format_amount(raw, 18) == "0"

    def test_bad_decimals_render_zero(self):
        assert format_amount(100, -1) == "0"

    @pytest.mark.parametrize("raw,decimals", [(0, 18), (1, 18), (123456789, 6), (10 ** 30 + 7, 18), (42, 0)])
    def test_parse_inverts_format(self, raw, decimals):
        assert parse_amount(format_amount(raw, decimals), decimals) == raw


class TestIsPositiveAmount:

    def test_positive(self):
        assert is_positive_amount("0.01") is True
        assert is_positive_amount("9.85") is True

    def test_not_positive(self):
        assert is_positive_amount("0") is False
        assert is_positive_amount("") is False
        assert is_positive_amount("abc") is False


class TestTokenInfoCodec:
    """TokenInfo delegates to the codec with its own decimals"""

    def test_usdc_like_token(self):
        usdc = TokenInfo(address="0x" + "ab" * 20, name="USD Coin", symbol="USDC", decimals=6)
        assert usdc.parse("2.5") == 2_500_000
        assert usdc.format(2_500_000) == "2.5"
        assert usdc.parse_or_zero("2.5000001") == 0
        assert str(usdc) == "USDC"
