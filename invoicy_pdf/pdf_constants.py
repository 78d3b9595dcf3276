"""Geometry, colours and font sizes of the Modern template (points)."""

MARGIN = 40

# Header band
LOGO_SIZE = 40
LOGO_Y = 40
COMPANY_NAME_Y = 50
COMPANY_NAME_Y_WITH_LOGO = 90
COMPANY_ADDRESS_GAP = 15
COMPANY_ADDRESS_WIDTH = 150
HEADER_RULE_GAP = 10
HEADER_RULE_WIDTH = 2

# Type label and number are anchored to the page, not the header band.
TYPE_LABEL_Y = 60
DOC_NUMBER_Y = 80

# Billing band
BILLING_GAP = 30
CUSTOMER_NAME_GAP = 15
CUSTOMER_ADDRESS_GAP = 28
CUSTOMER_ADDRESS_WIDTH = 200
DATE_LABEL_OFFSET = 120
DATE_ROW_H = 15
BILLING_END_GAP = 30

# Table
TABLE_HEADER_H = 25
TABLE_HEADER_TEXT_Y = 16
TABLE_BODY_GAP = 35
DESCRIPTION_INSET = 10
DESCRIPTION_WIDTH = 250
QTY_OFFSET = 200
UNIT_PRICE_OFFSET = 120
TOTAL_OFFSET = 10
ROW_LINE_H = 12
ROW_PADDING = 8
ROW_RULE_RAISE = 4
ROW_RULE_WIDTH = 0.5

# Totals
TOTALS_GAP = 20
TOTALS_ROW_H = 18
TOTALS_LABEL_OFFSET = 80
TOTALS_RULE_INDENT = 60
TOTALS_RULE_WIDTH = 1.5
TOTAL_RULE_GAP = 5
TOTAL_BASELINE_GAP = 12

# Notes band, anchored to the page bottom
NOTES_BOTTOM_OFFSET = 80
NOTES_LABEL_GAP = 20
NOTES_BODY_GAP = 12

# Line height of wrapped header, billing and notes text
WRAPPED_LINE_H = 10

FONT_SIZE_COMPANY = 16
FONT_SIZE_TYPE = 36
FONT_SIZE_NORMAL = 10
FONT_SIZE_CUSTOMER = 14
FONT_SIZE_TOTALS = 11
FONT_SIZE_TOTAL = 16

COLOR_HEADING = "#1e293b"
COLOR_MUTED = "#64748b"
COLOR_ACCENT = "#3b82f6"
COLOR_TITLE = "#2563eb"
COLOR_CUSTOMER = "#1d4ed8"
COLOR_BODY = "#334155"
COLOR_RULE = "#e2e8f0"
COLOR_BAND_TEXT = "#ffffff"
