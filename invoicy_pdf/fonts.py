"""Font discovery and text measurement helpers."""

from __future__ import annotations

import os
import threading
from typing import Iterable, List, Optional

from fpdf import FPDF  # type: ignore

_PACKAGE_ROOT = os.path.dirname(os.path.abspath(__file__))

# Helvetica (core font) only covers Latin-1; common typographic characters
# get an ASCII stand-in, anything else becomes "?".
CORE_SUBSTITUTES = str.maketrans(
    {
        "‘": "'",
        "’": "'",
        "‚": ",",
        "“": '"',
        "”": '"',
        "„": '"',
        "–": "-",
        "—": "-",
        "−": "-",
        "…": "...",
        "•": "*",
        "\u2009": " ",
        "\u202f": " ",
        "€": "EUR",
    }
)


def find_font_path(env_var: str, candidates: Iterable[str] = ()) -> Optional[str]:
    override = os.getenv(env_var)
    if override and os.path.exists(override):
        return override

    for path in candidates:
        if os.path.exists(path):
            return path
    return None


def core_safe(text: str) -> str:
    return text.translate(CORE_SUBSTITUTES).encode("latin-1", "replace").decode("latin-1")


FONT_INIT_LOCK = threading.Lock()


class FontManager:
    """Selects the document font family.

    A Unicode TrueType font is embedded when one is found: the file named by
    ``INVOICY_FONT_PATH``, the DejaVu Sans copy bundled with the package, or
    a system DejaVu install. Without one the core Helvetica font is used and
    text is reduced to what Latin-1 can encode. Without a bold face the bold
    style is simulated by overprinting.
    """

    CORE_FAMILY = "helvetica"
    FAMILY = "InvoicyFont"
    BUNDLED_REGULAR = os.path.join(_PACKAGE_ROOT, "fonts", "DejaVuSans.ttf")
    BUNDLED_BOLD = os.path.join(_PACKAGE_ROOT, "fonts", "DejaVuSans-Bold.ttf")
    SYSTEM_REGULAR_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/DejaVuSans.ttf",
    ]
    SYSTEM_BOLD_CANDIDATES = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
        "/Library/Fonts/DejaVuSans-Bold.ttf",
    ]

    def __init__(self, pdf: FPDF) -> None:
        self.pdf = pdf
        self.family = self.CORE_FAMILY
        self.has_bold = True
        self.embedded = False

        regular_path = find_font_path("INVOICY_FONT_PATH", self.regular_candidates())
        if not regular_path:
            return

        bold_path = find_font_path("INVOICY_FONT_BOLD_PATH", self.bold_candidates())
        with FONT_INIT_LOCK:
            self.pdf.add_font(self.FAMILY, "", regular_path)
            if bold_path:
                self.pdf.add_font(self.FAMILY, "B", bold_path)
        self.family = self.FAMILY
        self.has_bold = bool(bold_path)
        self.embedded = True

    def regular_candidates(self) -> List[str]:
        return [self.BUNDLED_REGULAR, *self.SYSTEM_REGULAR_CANDIDATES]

    def bold_candidates(self) -> List[str]:
        return [self.BUNDLED_BOLD, *self.SYSTEM_BOLD_CANDIDATES]

    def printable(self, text: str) -> str:
        return text if self.embedded else core_safe(text)

    def style(self, bold: bool) -> str:
        return "B" if bold and self.has_bold else ""

    def set_font(self, size: float, bold: bool = False) -> None:
        self.pdf.set_font(self.family, self.style(bold), size)

    def text_width(self, text: str, size: float, bold: bool = False) -> float:
        self.pdf.set_font(self.family, self.style(bold), size)
        return self.pdf.get_string_width(self.printable(text))

    def draw_text(self, x: float, y: float, text: str, bold: bool = False) -> None:
        """Draw at the current font size; ``y`` is the baseline."""
        text = self.printable(text)
        if bold and not self.has_bold:
            self.pdf.text(x, y, text)
            self.pdf.text(x + 0.4, y, text)
        else:
            self.pdf.text(x, y, text)
