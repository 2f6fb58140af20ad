"""
Email Body Generator Module

Subject line, plain-text body and an HTML alternative for the daily report email.
The PDF attachment carries the detail; the body only summarizes the count.
"""

from datetime import date
from html import escape

from barcode_reporting.config import EMAIL_SUBJECT_TEMPLATE
from barcode_reporting.pdf_generator import format_report_date


def generate_email_subject(report_date: date) -> str:
    """Example: "Daily Barcode Report - 3/5/2024"."""
    return EMAIL_SUBJECT_TEMPLATE.format(date=format_report_date(report_date))


def generate_email_text(item_count: int) -> str:
    return f"Attached is the daily barcode report with {item_count} items."


def generate_email_html(item_count: int, report_date: date) -> str:
    """HTML alternative of the text body (email-client safe, no external assets)."""
    date_str = escape(format_report_date(report_date))
    return f"""<html>
<body style="font-family: Arial, Helvetica, sans-serif; font-size: 14px;">
<p>Attached is the daily barcode report for <strong>{date_str}</strong>
with <strong>{item_count}</strong> items.</p>
<p style="color: #777777; font-size: 12px;">This email was generated automatically.</p>
</body>
</html>
"""
