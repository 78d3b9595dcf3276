"""The Modern document template.

A single top-to-bottom pass over a :class:`~invoicy_pdf.canvas.Canvas`. The
vertical cursor lives on a per-call :class:`LayoutCursor`; the type label and
the notes band are positioned from the page edges rather than the cursor, so
a tall header or a long item table can overlap them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .canvas import Canvas
from .config import DATE_FORMAT
from .formatting import decode_data_uri, fmt_date, fmt_money, fmt_qty, is_data_uri_image
from .models import CompanyInfo, DocumentData, DocumentItem
from .pdf_constants import (
    BILLING_END_GAP,
    BILLING_GAP,
    COLOR_ACCENT,
    COLOR_BAND_TEXT,
    COLOR_BODY,
    COLOR_CUSTOMER,
    COLOR_HEADING,
    COLOR_MUTED,
    COLOR_RULE,
    COLOR_TITLE,
    COMPANY_ADDRESS_GAP,
    COMPANY_ADDRESS_WIDTH,
    COMPANY_NAME_Y,
    COMPANY_NAME_Y_WITH_LOGO,
    CUSTOMER_ADDRESS_GAP,
    CUSTOMER_ADDRESS_WIDTH,
    CUSTOMER_NAME_GAP,
    DATE_LABEL_OFFSET,
    DATE_ROW_H,
    DESCRIPTION_INSET,
    DESCRIPTION_WIDTH,
    DOC_NUMBER_Y,
    FONT_SIZE_COMPANY,
    FONT_SIZE_CUSTOMER,
    FONT_SIZE_NORMAL,
    FONT_SIZE_TOTAL,
    FONT_SIZE_TOTALS,
    FONT_SIZE_TYPE,
    HEADER_RULE_GAP,
    HEADER_RULE_WIDTH,
    LOGO_SIZE,
    LOGO_Y,
    MARGIN,
    NOTES_BODY_GAP,
    NOTES_BOTTOM_OFFSET,
    NOTES_LABEL_GAP,
    QTY_OFFSET,
    ROW_LINE_H,
    ROW_PADDING,
    ROW_RULE_RAISE,
    ROW_RULE_WIDTH,
    TABLE_BODY_GAP,
    TABLE_HEADER_H,
    TABLE_HEADER_TEXT_Y,
    TOTAL_BASELINE_GAP,
    TOTAL_OFFSET,
    TOTAL_RULE_GAP,
    TOTALS_GAP,
    TOTALS_LABEL_OFFSET,
    TOTALS_ROW_H,
    TOTALS_RULE_INDENT,
    TOTALS_RULE_WIDTH,
    TYPE_LABEL_Y,
    UNIT_PRICE_OFFSET,
    WRAPPED_LINE_H,
)

logger = logging.getLogger(__name__)


@dataclass
class LayoutCursor:
    y: float = 0.0

    def advance(self, delta: float) -> float:
        self.y += delta
        return self.y


class ModernTemplate:
    def __init__(
        self,
        canvas: Canvas,
        document: DocumentData,
        company_info: CompanyInfo,
        date_format: str = DATE_FORMAT,
    ) -> None:
        self.canvas = canvas
        self.document = document
        self.company = company_info
        self.date_format = date_format

        self.page_w = canvas.page_width
        self.page_h = canvas.page_height
        self.right = self.page_w - MARGIN
        self.content_w = self.page_w - MARGIN * 2
        self.cursor = LayoutCursor()

    def _wrapped(self, text: str, x: float, y: float, max_width: float, align: str = "left") -> float:
        """Draw ``text`` wrapped to ``max_width`` and return the Y below it."""
        if not text:
            return y
        lines = self.canvas.split_text(text, max_width)
        self.canvas.text(lines, x, y, align=align)
        return y + len(lines) * WRAPPED_LINE_H

    def _draw_logo(self) -> bool:
        logo = self.company.logo
        if not is_data_uri_image(logo):
            return False
        try:
            image = decode_data_uri(logo)
            self.canvas.add_image(image, self.right - LOGO_SIZE, LOGO_Y, LOGO_SIZE, LOGO_SIZE)
        except Exception:
            logger.warning("Skipping unreadable company logo", exc_info=True)
            return False
        return True

    def _draw_header(self) -> float:
        canvas = self.canvas
        name_y = COMPANY_NAME_Y_WITH_LOGO if self._draw_logo() else COMPANY_NAME_Y

        canvas.set_font(FONT_SIZE_COMPANY, bold=True)
        canvas.set_text_color(COLOR_HEADING)
        canvas.text(self.company.name, self.right, name_y, align="right")

        canvas.set_font(FONT_SIZE_NORMAL)
        canvas.set_text_color(COLOR_MUTED)
        address_y = self._wrapped(
            self.company.address,
            self.right,
            name_y + COMPANY_ADDRESS_GAP,
            COMPANY_ADDRESS_WIDTH,
            align="right",
        )
        if self.company.abn:
            canvas.text(f"ABN: {self.company.abn}", self.right, address_y, align="right")

        rule_y = address_y + HEADER_RULE_GAP
        canvas.set_draw_color(COLOR_ACCENT)
        canvas.set_line_width(HEADER_RULE_WIDTH)
        canvas.line(MARGIN, rule_y, self.right, rule_y)
        return rule_y

    def _draw_title(self) -> None:
        canvas = self.canvas
        canvas.set_font(FONT_SIZE_TYPE, bold=True)
        canvas.set_text_color(COLOR_TITLE)
        canvas.text(self.document.type.upper(), MARGIN, TYPE_LABEL_Y)

        canvas.set_font(FONT_SIZE_NORMAL)
        canvas.set_text_color(COLOR_MUTED)
        canvas.text(self.document.doc_number or "DRAFT", MARGIN, DOC_NUMBER_Y)

    def _draw_billing(self, top: float) -> None:
        canvas = self.canvas
        customer = self.document.customer

        canvas.set_font(FONT_SIZE_NORMAL, bold=True)
        canvas.set_text_color(COLOR_MUTED)
        canvas.text("BILL TO", MARGIN, top)

        canvas.set_font(FONT_SIZE_CUSTOMER, bold=True)
        canvas.set_text_color(COLOR_CUSTOMER)
        canvas.text(customer.name, MARGIN, top + CUSTOMER_NAME_GAP)

        canvas.set_font(FONT_SIZE_NORMAL)
        canvas.set_text_color(COLOR_BODY)
        customer_y = self._wrapped(
            customer.address,
            MARGIN,
            top + CUSTOMER_ADDRESS_GAP,
            CUSTOMER_ADDRESS_WIDTH,
        )
        canvas.text(customer.email, MARGIN, customer_y)

        label_x = self.right - DATE_LABEL_OFFSET
        canvas.set_font(FONT_SIZE_NORMAL, bold=True)
        canvas.set_text_color(COLOR_MUTED)
        canvas.text("Issue Date:", label_x, top)
        canvas.text("Due Date:", label_x, top + DATE_ROW_H)

        canvas.set_font(FONT_SIZE_NORMAL)
        canvas.set_text_color(COLOR_BODY)
        issue_date = fmt_date(self.document.issue_date, self.date_format)
        due_date = fmt_date(self.document.due_date, self.date_format)
        canvas.text(issue_date, self.right, top, align="right")
        canvas.text(due_date, self.right, top + DATE_ROW_H, align="right")

        self.cursor.y = max(customer_y, top + DATE_ROW_H) + BILLING_END_GAP

    def _draw_table_header(self) -> None:
        canvas = self.canvas
        y = self.cursor.y

        canvas.set_fill_color(COLOR_ACCENT)
        canvas.fill_rect(MARGIN, y, self.content_w, TABLE_HEADER_H)

        canvas.set_font(FONT_SIZE_NORMAL, bold=True)
        canvas.set_text_color(COLOR_BAND_TEXT)
        text_y = y + TABLE_HEADER_TEXT_Y
        canvas.text("DESCRIPTION", MARGIN + DESCRIPTION_INSET, text_y)
        canvas.text("QTY", self.right - QTY_OFFSET, text_y, align="center")
        canvas.text("UNIT PRICE", self.right - UNIT_PRICE_OFFSET, text_y, align="right")
        canvas.text("TOTAL", self.right - TOTAL_OFFSET, text_y, align="right")

        self.cursor.advance(TABLE_BODY_GAP)

    def _draw_row(self, item: DocumentItem) -> None:
        canvas = self.canvas
        row_y = self.cursor.y

        description = canvas.split_text(item.description, DESCRIPTION_WIDTH)
        canvas.text(description, MARGIN + DESCRIPTION_INSET, row_y)
        canvas.text(fmt_qty(item.quantity), self.right - QTY_OFFSET, row_y, align="center")
        canvas.text(fmt_money(item.price), self.right - UNIT_PRICE_OFFSET, row_y, align="right")
        canvas.text(fmt_money(item.line_total), self.right - TOTAL_OFFSET, row_y, align="right")

        rule_y = self.cursor.advance(len(description) * ROW_LINE_H + ROW_PADDING) - ROW_RULE_RAISE
        canvas.set_draw_color(COLOR_RULE)
        canvas.set_line_width(ROW_RULE_WIDTH)
        canvas.line(MARGIN, rule_y, self.right, rule_y)

    def _draw_items(self) -> None:
        self.canvas.set_font(FONT_SIZE_NORMAL)
        self.canvas.set_text_color(COLOR_HEADING)
        for item in self.document.items:
            self._draw_row(item)

    def _draw_totals(self) -> None:
        canvas = self.canvas
        document = self.document
        label_x = self.right - TOTALS_LABEL_OFFSET

        y = self.cursor.advance(TOTALS_GAP)
        canvas.set_font(FONT_SIZE_TOTALS)
        canvas.set_text_color(COLOR_BODY)
        canvas.text("Subtotal", label_x, y, align="right")
        canvas.text(fmt_money(document.subtotal), self.right, y, align="right")

        y = self.cursor.advance(TOTALS_ROW_H)
        canvas.text(f"Tax ({fmt_qty(document.tax)}%)", label_x, y, align="right")
        canvas.text(fmt_money(document.tax_amount), self.right, y, align="right")

        y = self.cursor.advance(TOTALS_ROW_H)
        canvas.set_draw_color(COLOR_ACCENT)
        canvas.set_line_width(TOTALS_RULE_WIDTH)
        canvas.line(self.page_w / 2 + TOTALS_RULE_INDENT, y, self.right, y)

        y = self.cursor.advance(TOTAL_RULE_GAP) + TOTAL_BASELINE_GAP
        canvas.set_font(FONT_SIZE_TOTAL, bold=True)
        canvas.set_text_color(COLOR_TITLE)
        canvas.text("Total", label_x, y, align="right")
        canvas.text(fmt_money(document.total), self.right, y, align="right")

    def _draw_notes(self) -> None:
        notes = self.document.notes
        if not notes:
            return

        canvas = self.canvas
        self.cursor.y = self.page_h - NOTES_BOTTOM_OFFSET
        canvas.set_draw_color(COLOR_RULE)
        canvas.set_line_width(ROW_RULE_WIDTH)
        canvas.line(MARGIN, self.cursor.y, self.right, self.cursor.y)

        y = self.cursor.advance(NOTES_LABEL_GAP)
        canvas.set_font(FONT_SIZE_NORMAL, bold=True)
        canvas.set_text_color(COLOR_BODY)
        canvas.text("Notes", MARGIN, y)

        canvas.set_font(FONT_SIZE_NORMAL)
        canvas.set_text_color(COLOR_MUTED)
        self._wrapped(notes, MARGIN, y + NOTES_BODY_GAP, self.content_w)

    def draw(self) -> None:
        rule_y = self._draw_header()
        self._draw_title()
        self._draw_billing(rule_y + BILLING_GAP)
        self._draw_table_header()
        self._draw_items()
        self._draw_totals()
        self._draw_notes()


def draw_modern_template(canvas: Canvas, document: DocumentData, company_info: CompanyInfo) -> None:
    ModernTemplate(canvas, document, company_info).draw()
