"""Tests for spelling receipt amounts in words."""

from decimal import Decimal

import pytest

from frontdesk.core.exceptions import ValidationError
from frontdesk.services.amount_words import number_to_words


class TestNumberToWords:
    """Wording printed on receipts must stay exactly as issued."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "Zero Naira Only"),
            (7, "Seven Naira Only"),
            (15, "Fifteen Naira Only"),
            (40, "Forty Naira Only"),
            (99, "Ninety Nine Naira Only"),
            (100, "One Hundred Naira Only"),
            (305, "Three Hundred and Five Naira Only"),
            (1000, "One Thousand Naira Only"),
            (2019, "Two Thousand Nineteen Naira Only"),
            (125000, "One Hundred and Twenty Five Thousand Naira Only"),
            (1000000, "One Million Naira Only"),
            (1000250, "One Million Two Hundred and Fifty Naira Only"),
            (2500000, "Two Million Five Hundred Thousand Naira Only"),
        ],
    )
    def test_known_amounts(self, amount, expected):
        """Test wording for representative amounts."""
        assert number_to_words(amount) == expected

    def test_kobo_is_dropped(self):
        """Test fractional amounts are floored to whole naira."""
        assert number_to_words(Decimal("112500.99")) == number_to_words(112500)
        assert number_to_words("0.75") == "Zero Naira Only"

    def test_largest_supported_amount(self):
        """Test the top of the supported range spells out fully."""
        words = number_to_words(999_999_999)
        assert words.startswith("Nine Hundred and Ninety Nine Million")
        assert words.endswith("Naira Only")

    def test_custom_currency(self):
        """Test the currency name is configurable."""
        assert number_to_words(5, currency="Dollars") == "Five Dollars Only"

    def test_negative_rejected(self):
        """Test negative amounts raise a validation error."""
        with pytest.raises(ValidationError):
            number_to_words(-1)

    def test_one_billion_rejected(self):
        """Test amounts of one billion and above are rejected."""
        with pytest.raises(ValidationError):
            number_to_words(1_000_000_000)
