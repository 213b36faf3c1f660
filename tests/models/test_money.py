import pytest

from errors import InvalidAmount
from models.money import format_cents, parse_amount
from models.spending_entry import SpendingEntry


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("12.50", 1250),
            ("12.5", 1250),
            ("12", 1200),
            ("0", 0),
            ("0.01", 1),
            ("123.41", 12341),
            ("7,25", 725),
            (" 3.10 ", 310),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_amount(text) == expected

    def test_no_float_rounding_drift(self):
        """0.1 + 0.2 style values stay exact."""
        assert parse_amount("0.1") + parse_amount("0.2") == parse_amount("0.3")

    @pytest.mark.parametrize("text", ["abc", "", "NaN", "Infinity", "1.2.3"])
    def test_not_a_number(self, text):
        with pytest.raises(InvalidAmount):
            parse_amount(text)

    def test_negative(self):
        with pytest.raises(InvalidAmount, match="negative"):
            parse_amount("-5")

    def test_fractional_cents(self):
        with pytest.raises(InvalidAmount, match="fractional cents"):
            parse_amount("1.005")


class TestFormatCents:
    """Tests for format_cents."""

    @pytest.mark.parametrize(
        "cents, expected",
        [(0, "0.00"), (1, "0.01"), (1250, "12.50"), (100000, "1000.00")],
    )
    def test_format(self, cents, expected):
        assert format_cents(cents) == expected


class TestSpendingEntry:
    """Tests for the SpendingEntry model."""

    def test_str(self):
        entry = SpendingEntry(id=7, occurred_at=1738368000, category_id=1, amount_cents=1250)

        assert str(entry) == "#7 2025-02-01 12.50"
