"""
Amount in words, Indian numbering system.

    1,23,45,678.50 -> "INR One Crore Twenty Three Lakh Forty Five Thousand
                       Six Hundred Seventy Eight and Fifty Paise Only"
"""
from decimal import ROUND_HALF_UP, Decimal

from .tax import to_decimal

ONES = [
    "", "One", "Two", "Three", "Four",
    "Five", "Six", "Seven", "Eight", "Nine",
]
TEENS = [
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen",
    "Fifteen", "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]
TENS = [
    "", "", "Twenty", "Thirty", "Forty",
    "Fifty", "Sixty", "Seventy", "Eighty", "Ninety",
]

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000

CENT = Decimal("0.01")


def _two_digits(n: int) -> str:
    # 0..99, zero renders as empty
    if n >= 20:
        return " ".join(w for w in (TENS[n // 10], ONES[n % 10]) if w)
    if n >= 10:
        return TEENS[n - 10]
    return ONES[n]


def _three_digits(n: int) -> str:
    # 0..999
    hundreds, rest = divmod(n, 100)
    words = []
    if hundreds:
        words.append(f"{ONES[hundreds]} Hundred")
    if rest:
        words.append(_two_digits(rest))
    return " ".join(words)


def number_to_words(n: int) -> str:
    """Whole number to words: crore / lakh / thousand / hundred groups."""
    if n < 0:
        raise ValueError("number_to_words() expects a non-negative integer")
    if n == 0:
        return "Zero"

    # Only the crore group can exceed 99 (e.g. "One Hundred Fifty Crore")
    crores, n = divmod(n, CRORE)
    lakhs, n = divmod(n, LAKH)
    thousands, n = divmod(n, THOUSAND)
    hundreds, remainder = divmod(n, 100)

    parts = []
    if crores:
        # groups beyond 999 crore read as crores of crores
        crore_words = number_to_words(crores) if crores > 999 else _three_digits(crores)
        parts.append(f"{crore_words} Crore")
    if lakhs:
        parts.append(f"{_two_digits(lakhs)} Lakh")
    if thousands:
        parts.append(f"{_two_digits(thousands)} Thousand")
    if hundreds:
        parts.append(f"{ONES[hundreds]} Hundred")
    if remainder:
        parts.append(_two_digits(remainder))
    return " ".join(parts)


def amount_in_words(amount, currency_label: str = "INR", minor_unit_label: str = "Paise") -> str:
    """
    "<currency_label> <rupees in words> [and <paise in words> <minor_unit_label>] Only"

    The amount is rounded half-up to whole paise first, so 0.995 reads as one rupee.
    """
    value = to_decimal(amount)
    if value < 0:
        raise ValueError("amount_in_words() expects a non-negative amount")
    value = value.quantize(CENT, rounding=ROUND_HALF_UP)

    rupees = int(value)
    paise = int((value - rupees) * 100)

    words = [currency_label, number_to_words(rupees)] if currency_label else [number_to_words(rupees)]
    if paise > 0:
        words.append(f"and {_two_digits(paise)} {minor_unit_label}")
    words.append("Only")
    return " ".join(words)
