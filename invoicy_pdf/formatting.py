"""Formatting and text helpers shared by the layout and the canvas."""

from __future__ import annotations

import base64
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, List, Protocol
from urllib.parse import unquote_to_bytes

from dateutil import parser as dateutil_parser

CENTS = Decimal("0.01")


class TextWidthProvider(Protocol):
    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        ...


def safe_float(value: Any, default: float = 0.0) -> float:
    try:
        number = float(value)
    except Exception:
        return default
    return number if math.isfinite(number) else default


def fmt_money(amount: Any, symbol: str = "$") -> str:
    """Two decimals, half-up on the decimal text of the value, no grouping."""
    value = Decimal(str(safe_float(amount)))
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"{symbol}{value}"


def fmt_qty(qty: Any) -> str:
    try:
        quantity = float(qty)
        if quantity.is_integer():
            return str(int(quantity))
        return str(quantity)
    except Exception:
        return str(qty)


def fmt_date(raw: str, pattern: str = "") -> str:
    """Reformat ``raw`` with ``pattern`` when both are set and ``raw`` parses."""
    if not pattern or not raw.strip():
        return raw
    try:
        return dateutil_parser.parse(raw.strip()).strftime(pattern)
    except (ValueError, OverflowError):
        return raw


def is_data_uri_image(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("data:image")


def decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ValueError("data URI has no payload separator")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=True)
    return unquote_to_bytes(payload)


def wrap_text(
    fonts_obj: TextWidthProvider,
    text: str,
    max_width: float,
    font_size: float,
    bold: bool = False,
) -> List[str]:
    def line_width(value: str) -> float:
        return fonts_obj.text_width(value, font_size, bold=bold)

    def wrap_paragraph(paragraph: str) -> List[str]:
        words = paragraph.split()
        if not words:
            return [paragraph]

        lines: List[str] = []
        current = ""
        for word in words:
            candidate = word if not current else f"{current} {word}"
            if line_width(candidate) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            if line_width(word) <= max_width:
                current = word
                continue

            chunk = ""
            for char in word:
                candidate_chunk = chunk + char
                if chunk and line_width(candidate_chunk) > max_width:
                    lines.append(chunk)
                    chunk = char
                else:
                    chunk = candidate_chunk
            current = chunk

        if current:
            lines.append(current)
        return lines

    result: List[str] = []
    for paragraph in text.split("\n"):
        result.extend(wrap_paragraph(paragraph))
    return result if result else [text]
