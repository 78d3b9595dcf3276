import base64
import unittest

from invoicy_pdf.formatting import (
    decode_data_uri,
    fmt_date,
    fmt_money,
    fmt_qty,
    is_data_uri_image,
    safe_float,
    wrap_text,
)


class CharWidthFonts:
    """Every character is half the font size wide."""

    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        return len(text) * size * 0.5


class FormattingTests(unittest.TestCase):
    def test_fmt_money_uses_two_decimals_without_grouping(self) -> None:
        self.assertEqual(fmt_money(50), "$50.00")
        self.assertEqual(fmt_money(1234567.5), "$1234567.50")
        self.assertEqual(fmt_money(0), "$0.00")

    def test_fmt_money_handles_very_large_amounts(self) -> None:
        self.assertEqual(fmt_money(1e30), "$1" + "0" * 30 + ".00")
        self.assertEqual(fmt_money(-1e20), "$-1" + "0" * 20 + ".00")

    def test_fmt_money_rounds_half_up(self) -> None:
        self.assertEqual(fmt_money(19.995), "$20.00")
        self.assertEqual(fmt_money(1.005), "$1.01")
        self.assertEqual(fmt_money(2.004), "$2.00")

    def test_fmt_money_treats_garbage_as_zero(self) -> None:
        self.assertEqual(fmt_money(None), "$0.00")
        self.assertEqual(fmt_money("abc"), "$0.00")
        self.assertEqual(fmt_money(float("nan")), "$0.00")

    def test_fmt_qty_handles_integer_and_float_values(self) -> None:
        self.assertEqual(fmt_qty(3), "3")
        self.assertEqual(fmt_qty(2.0), "2")
        self.assertEqual(fmt_qty(2.5), "2.5")

    def test_safe_float_uses_default_for_non_numeric_values(self) -> None:
        self.assertEqual(safe_float("abc", 7.5), 7.5)
        self.assertEqual(safe_float("inf"), 0.0)
        self.assertEqual(safe_float("12.5"), 12.5)

    def test_fmt_date_is_verbatim_without_pattern(self) -> None:
        self.assertEqual(fmt_date("2026-01-15"), "2026-01-15")
        self.assertEqual(fmt_date("next week"), "next week")

    def test_fmt_date_applies_pattern(self) -> None:
        self.assertEqual(fmt_date("2026-01-15", "%b %d, %Y"), "Jan 15, 2026")
        self.assertEqual(fmt_date("not-a-date", "%b %d, %Y"), "not-a-date")

    def test_is_data_uri_image(self) -> None:
        self.assertTrue(is_data_uri_image("data:image/png;base64,AAAA"))
        self.assertFalse(is_data_uri_image("https://example.com/x.png"))
        self.assertFalse(is_data_uri_image(None))

    def test_decode_data_uri(self) -> None:
        encoded = base64.b64encode(b"\x89PNG").decode("ascii")
        self.assertEqual(decode_data_uri(f"data:image/png;base64,{encoded}"), b"\x89PNG")
        self.assertEqual(decode_data_uri("data:image/svg+xml,%3Csvg%3E"), b"<svg>")
        with self.assertRaises(ValueError):
            decode_data_uri("data:image/png;base64")
        with self.assertRaises(ValueError):
            decode_data_uri("data:image/png;base64,!!not base64!!")


class WrapTextTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fonts = CharWidthFonts()

    def test_breaks_at_whitespace(self) -> None:
        # size 10 -> 5 units per char, 50 units -> 10 chars per line
        lines = wrap_text(self.fonts, "aaaa bbbb cccc", 50, 10)
        self.assertEqual(lines, ["aaaa bbbb", "cccc"])

    def test_keeps_explicit_newlines(self) -> None:
        lines = wrap_text(self.fonts, "one\ntwo", 50, 10)
        self.assertEqual(lines, ["one", "two"])

    def test_splits_words_wider_than_the_column(self) -> None:
        lines = wrap_text(self.fonts, "ab " + "x" * 25, 50, 10)
        self.assertEqual(lines, ["ab", "x" * 10, "x" * 10, "x" * 5])

    def test_empty_text_is_one_empty_line(self) -> None:
        self.assertEqual(wrap_text(self.fonts, "", 50, 10), [""])


if __name__ == "__main__":
    unittest.main()
