# tests/test_money.py

"""Tests for exact money parsing and formatting."""

import unittest
from decimal import Decimal

from src.models.money import (
    display_money,
    format_money,
    from_minor_units,
    parse_money,
    parse_optional_money,
    to_minor_units,
)
from src.services.errors import InvalidArgument


class TestParseMoney(unittest.TestCase):
    """parse_money accepts decimal strings, ints and Decimals."""

    def test_string_keeps_two_places(self) -> None:
        self.assertEqual(parse_money("999.99"), Decimal("999.99"))
        self.assertEqual(str(parse_money("10")), "10.00")

    def test_int_and_decimal(self) -> None:
        self.assertEqual(parse_money(1500), Decimal("1500.00"))
        self.assertEqual(parse_money(Decimal("0.1")), Decimal("0.10"))

    def test_rounds_half_up(self) -> None:
        self.assertEqual(parse_money("0.005"), Decimal("0.01"))
        self.assertEqual(parse_money("2.345"), Decimal("2.35"))

    def test_strips_whitespace(self) -> None:
        self.assertEqual(parse_money(" 42.5 "), Decimal("42.50"))

    def test_rejects_float(self) -> None:
        """Floats carry binary rounding error and are refused."""
        with self.assertRaises(InvalidArgument):
            parse_money(999.99)

    def test_rejects_bool(self) -> None:
        with self.assertRaises(InvalidArgument):
            parse_money(True)

    def test_rejects_garbage(self) -> None:
        for value in ("abc", "", None, [1], "NaN", "Infinity"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidArgument):
                    parse_money(value)

    def test_error_names_the_field(self) -> None:
        with self.assertRaises(InvalidArgument) as ctx:
            parse_money("x", "shippingCost")
        self.assertIn("shippingCost", str(ctx.exception))

    def test_optional_passes_none(self) -> None:
        self.assertIsNone(parse_optional_money(None, "originalPrice"))
        self.assertEqual(
            parse_optional_money("5", "originalPrice"), Decimal("5.00")
        )


class TestMinorUnits(unittest.TestCase):
    """Conversion between rupees and integer paise."""

    def test_to_minor_units(self) -> None:
        self.assertEqual(to_minor_units(Decimal("999.99")), 99999)
        self.assertEqual(to_minor_units(Decimal("0")), 0)

    def test_from_minor_units(self) -> None:
        self.assertEqual(from_minor_units(99999), Decimal("999.99"))
        self.assertEqual(str(from_minor_units(100000)), "1000.00")

    def test_minor_units_preserve_order(self) -> None:
        self.assertLess(
            to_minor_units(Decimal("999.99")),
            to_minor_units(Decimal("1000.00")),
        )


class TestFormatting(unittest.TestCase):
    """Wire and display formats."""

    def test_format_money(self) -> None:
        self.assertEqual(format_money(Decimal("5")), "5.00")
        self.assertEqual(format_money(Decimal("129999.5")), "129999.50")

    def test_display_money(self) -> None:
        self.assertEqual(display_money(Decimal("1234.5")), "₹1,234.50")
        self.assertEqual(display_money(Decimal("0")), "₹0.00")


if __name__ == "__main__":
    unittest.main()
