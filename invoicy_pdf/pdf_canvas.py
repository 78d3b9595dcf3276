"""fpdf2 implementation of the :class:`~invoicy_pdf.canvas.Canvas` protocol."""

from __future__ import annotations

import io
from typing import List, Tuple

from fpdf import FPDF  # type: ignore

from .canvas import TextLines
from .fonts import FontManager
from .formatting import wrap_text


class RenderError(RuntimeError):
    """Raised when the PDF engine produces unusable output."""


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"Unsupported colour value: {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class FpdfCanvas:
    DEFAULT_FONT_SIZE = 16.0
    LINE_HEIGHT_FACTOR = 1.15

    def __init__(self, page_format: str = "A4", unit: str = "pt") -> None:
        self.pdf = FPDF(unit=unit, format=page_format)
        self.pdf.set_auto_page_break(False)
        self.pdf.add_page()

        self.fonts = FontManager(self.pdf)
        self.font_size = self.DEFAULT_FONT_SIZE
        self.bold = False
        self.fonts.set_font(self.font_size)

    @property
    def page_width(self) -> float:
        return self.pdf.w

    @property
    def page_height(self) -> float:
        return self.pdf.h

    def set_font(self, size: float, bold: bool = False) -> None:
        self.font_size = size
        self.bold = bold
        self.fonts.set_font(size, bold=bold)

    def set_text_color(self, color: str) -> None:
        self.pdf.set_text_color(*hex_to_rgb(color))

    def set_draw_color(self, color: str) -> None:
        self.pdf.set_draw_color(*hex_to_rgb(color))

    def set_fill_color(self, color: str) -> None:
        self.pdf.set_fill_color(*hex_to_rgb(color))

    def set_line_width(self, width: float) -> None:
        self.pdf.set_line_width(width)

    def text(self, lines: TextLines, x: float, y: float, align: str = "left") -> None:
        if isinstance(lines, str):
            lines = [lines]
        line_height = self.font_size * self.LINE_HEIGHT_FACTOR / self.pdf.k

        for index, line in enumerate(lines):
            if not line:
                continue
            left = x
            if align in ("right", "center"):
                width = self.fonts.text_width(line, self.font_size, bold=self.bold)
                left = x - width if align == "right" else x - width / 2.0
            self.fonts.draw_text(left, y + index * line_height, line, bold=self.bold)

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.pdf.line(x1, y1, x2, y2)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.pdf.rect(x, y, width, height, style="F")

    def add_image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        self.pdf.image(io.BytesIO(data), x=x, y=y, w=width, h=height)

    def split_text(self, text: str, max_width: float) -> List[str]:
        return wrap_text(self.fonts, text, max_width, self.font_size, bold=self.bold)

    def output(self) -> bytes:
        pdf_blob = self.pdf.output()
        if isinstance(pdf_blob, (bytes, bytearray)):
            return bytes(pdf_blob)
        raise RenderError(f"Unexpected PDF output type: {type(pdf_blob).__name__}")
