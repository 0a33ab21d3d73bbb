"""Spell payment amounts in English words for printed receipts.

The wording is part of a legal payment document and must stay stable:
"Zero Naira Only", "One Hundred and Twenty Five Thousand Naira Only",
"One Million Naira Only".
"""

from decimal import ROUND_FLOOR
from typing import Union

from frontdesk.core.exceptions import ValidationError
from frontdesk.services.tax import to_decimal

ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen",
    "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

MAX_AMOUNT = 999_999_999


def _below_thousand(n: int) -> str:
    if n == 0:
        return ""
    if n < 10:
        return ONES[n]
    if n < 20:
        return TEENS[n - 10]
    if n < 100:
        ten, one = divmod(n, 10)
        return TENS[ten] + (" " + ONES[one] if one else "")
    hundred, rest = divmod(n, 100)
    words = ONES[hundred] + " Hundred"
    if rest:
        words += " and " + _below_thousand(rest)
    return words


def number_to_words(amount: Union[int, float, str], currency: str = "Naira") -> str:
    """Spell the whole-currency part of *amount*.

    Fractional parts (kobo) are dropped. Amounts from one billion upward are
    rejected.
    """
    whole = int(to_decimal(amount).to_integral_value(rounding=ROUND_FLOOR))
    if whole < 0:
        raise ValidationError("Amount cannot be negative", field="amount")
    if whole > MAX_AMOUNT:
        raise ValidationError(f"Amount {whole} is too large to spell", field="amount")

    suffix = f" {currency} Only"
    if whole == 0:
        return "Zero" + suffix
    if whole < 1000:
        return _below_thousand(whole) + suffix
    if whole < 1_000_000:
        thousands, rest = divmod(whole, 1000)
        words = _below_thousand(thousands) + " Thousand"
        if rest:
            words += " " + _below_thousand(rest)
        return words + suffix

    millions, rest = divmod(whole, 1_000_000)
    words = _below_thousand(millions) + " Million"
    if rest >= 1000:
        thousands, remainder = divmod(rest, 1000)
        words += " " + _below_thousand(thousands) + " Thousand"
        if remainder:
            words += " " + _below_thousand(remainder)
    elif rest:
        words += " " + _below_thousand(rest)
    return words + suffix
