"""
PDF Generator for the Daily Barcode Report

Builds a portrait A4 document in memory: a centered title line followed by one table
row per scan record. The header row repeats on every page and each page carries a
"Page N" footer.

IMPORTANT:
- The PDF is returned as bytes and is NOT written to disk unless the caller asks.
- Output is deterministic: reportlab's invariant mode pins the creation date and
  document ID, so the same records and title give byte-identical PDFs.
- Rendering errors propagate to the caller; no partial document is returned.
"""

import io
from xml.sax.saxutils import escape
from datetime import date
from typing import List, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from barcode_reporting.config import REPORT_COLUMNS, BARCODE_COLUMN, REPORT_TITLE_PREFIX
from barcode_reporting.models import ScanRecord
from barcode_reporting.logger import get_logger

logger = get_logger(__name__)

# ============================================================================
# PDF Generation Constants
# ============================================================================

PAGE_WIDTH, PAGE_HEIGHT = A4  # portrait, points

MARGIN = 10 * mm

TITLE_FONT_SIZE = 14
TABLE_FONT_SIZE = 9
FOOTER_FONT_SIZE = 8

TITLE_SPACING = 6 * mm

HEADER_BACKGROUND = colors.HexColor("#2980B9")
ALTERNATE_ROW_BACKGROUND = colors.HexColor("#F5F5F5")


# ============================================================================
# Helper Functions
# ============================================================================

def format_report_date(report_date: date) -> str:
    """
    Format a date for the report title and email subject (M/D/YYYY).

    Example: date(2024, 3, 5) -> "3/5/2024"
    """
    return f"{report_date.month}/{report_date.day}/{report_date.year}"


def build_report_title(report_date: date) -> str:
    return f"{REPORT_TITLE_PREFIX} - {format_report_date(report_date)}"


def report_columns(records: Sequence[ScanRecord]) -> List[str]:
    """Fixed header; Barcode is included when any record carries one."""
    columns = list(REPORT_COLUMNS)
    if any(record.barcode not in (None, "") for record in records):
        columns.append(BARCODE_COLUMN)
    return columns


def _draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", FOOTER_FONT_SIZE)
    canvas.drawRightString(PAGE_WIDTH - MARGIN, MARGIN / 2, f"Page {doc.page}")
    canvas.restoreState()


# ============================================================================
# Main PDF Generation Function
# ============================================================================

def render_report(records: Sequence[ScanRecord], title: str) -> bytes:
    """
    Render scan records into a paginated PDF table.

    Args:
        records: Filtered scan records, rendered in the given order
        title: Title line shown centered above the table

    Returns:
        PDF document as bytes

    Raises:
        ValueError: If records is empty
        Exception: Any reportlab failure is propagated unchanged
    """
    if not records:
        raise ValueError("Cannot render a report without records")

    columns = report_columns(records)
    include_barcode = BARCODE_COLUMN in columns

    logger.info(f"Rendering PDF report: {len(records)} rows, columns: {', '.join(columns)}")

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=title,
        author="",
        creator="",
        invariant=1,
    )

    title_style = ParagraphStyle(
        "ReportTitle",
        fontName="Helvetica-Bold",
        fontSize=TITLE_FONT_SIZE,
        leading=TITLE_FONT_SIZE + 4,
        alignment=TA_CENTER,
    )

    table_data = [columns] + [record.as_row(include_barcode=include_barcode) for record in records]
    table = Table(table_data, repeatRows=1, hAlign="CENTER")
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), TABLE_FONT_SIZE),
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BACKGROUND),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, ALTERNATE_ROW_BACKGROUND]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))

    story = [Paragraph(escape(title), title_style), Spacer(1, TITLE_SPACING), table]
    doc.build(story, onFirstPage=_draw_page_number, onLaterPages=_draw_page_number)

    pdf_bytes = buffer.getvalue()
    logger.info(f"PDF generated successfully ({len(pdf_bytes)} bytes, {doc.page} page(s))")
    return pdf_bytes
