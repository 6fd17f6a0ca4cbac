from decimal import Decimal

import pytest
from django.test import SimpleTestCase

from invoicing_core.services.words import amount_in_words, number_to_words


class AmountInWordsTests(SimpleTestCase):

    def test_zero(self):
        self.assertEqual(amount_in_words(0), "INR Zero Only")

    def test_lakh_with_paise(self):
        self.assertEqual(
            amount_in_words(Decimal("1234567.50")),
            "INR Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven "
            "and Fifty Paise Only",
        )

    def test_crore_with_lower_groups(self):
        self.assertEqual(
            amount_in_words(Decimal("12345678.50")),
            "INR One Crore Twenty Three Lakh Forty Five Thousand Six Hundred "
            "Seventy Eight and Fifty Paise Only",
        )

    def test_whole_amount_has_no_paise_clause(self):
        self.assertEqual(amount_in_words(Decimal("236.00")), "INR Two Hundred Thirty Six Only")

    def test_paise_only(self):
        self.assertEqual(amount_in_words(Decimal("0.07")), "INR Zero and Seven Paise Only")

    def test_rounds_half_up_to_paise(self):
        self.assertEqual(amount_in_words(Decimal("0.995")), "INR One Only")
        self.assertEqual(amount_in_words(Decimal("10.125")), "INR Ten and Thirteen Paise Only")

    def test_custom_labels(self):
        self.assertEqual(
            amount_in_words(Decimal("5.25"), currency_label="Rupees", minor_unit_label="Paisa"),
            "Rupees Five and Twenty Five Paisa Only",
        )

    def test_negative_amount_raises(self):
        with self.assertRaises(ValueError):
            amount_in_words(Decimal("-1"))


@pytest.mark.parametrize(
    "n, words",
    [
        (7, "Seven"),
        (10, "Ten"),
        (13, "Thirteen"),
        (19, "Nineteen"),
        (20, "Twenty"),
        (90, "Ninety"),
        (99, "Ninety Nine"),
        (100, "One Hundred"),
        (101, "One Hundred One"),
        (1000, "One Thousand"),
        (1005, "One Thousand Five"),
        (100000, "One Lakh"),
        (1000000, "Ten Lakh"),
        (10000000, "One Crore"),
        (100001005, "Ten Crore One Thousand Five"),
        (1500000000, "One Hundred Fifty Crore"),
        (99999999999, "Nine Thousand Nine Hundred Ninety Nine Crore Ninety Nine Lakh "
                       "Ninety Nine Thousand Nine Hundred Ninety Nine"),
    ],
)
def test_number_to_words_groups(n, words):
    assert number_to_words(n) == words


def test_number_to_words_rejects_negative():
    with pytest.raises(ValueError):
        number_to_words(-5)
