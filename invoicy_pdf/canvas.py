"""Drawing surface used by document templates.

Templates only talk to the :class:`Canvas` protocol: points, a top-left
origin and text positioned on its baseline.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence, Union

TextLines = Union[str, Sequence[str]]


class Canvas(Protocol):
    @property
    def page_width(self) -> float:
        ...

    @property
    def page_height(self) -> float:
        ...

    def set_font(self, size: float, bold: bool = False) -> None:
        ...

    def set_text_color(self, color: str) -> None:
        ...

    def set_draw_color(self, color: str) -> None:
        ...

    def set_fill_color(self, color: str) -> None:
        ...

    def set_line_width(self, width: float) -> None:
        ...

    def text(self, lines: TextLines, x: float, y: float, align: str = "left") -> None:
        ...

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def add_image(self, data: bytes, x: float, y: float, width: float, height: float) -> None:
        ...

    def split_text(self, text: str, max_width: float) -> List[str]:
        ...
