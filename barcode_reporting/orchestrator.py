"""
Main Orchestrator Module

Runs the daily barcode report pipeline:
1. Fetch the scanner feed
2. Filter records to today (reference timezone)
3. Render the PDF report (skipped when nothing matched)
4. Send the report email

This is pure orchestration/glue code and the outermost failure boundary:
every path ends in a logged (success, message) result, never an unhandled exception.
Fetch and filter problems degrade to "no data today"; render and delivery problems
end the run as a failure. Nothing is retried within a run.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from barcode_reporting.config import ConfigurationError, ReportSettings
from barcode_reporting.date_normalizer import today_in_timezone
from barcode_reporting.daily_filter import filter_today
from barcode_reporting.email_body_generator import (
    generate_email_html,
    generate_email_subject,
    generate_email_text,
)
from barcode_reporting.email_sender import send_report
from barcode_reporting.feed_fetcher import fetch_scan_records
from barcode_reporting.pdf_generator import build_report_title, render_report
from barcode_reporting.logger import get_logger

logger = get_logger(__name__)

NO_DATA_MESSAGE = "No data for today. Email will not be sent."


def _save_pdf_copy(pdf_bytes: bytes, save_pdf_path: str) -> None:
    path = Path(save_pdf_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf_bytes)
    logger.info(f"Saved PDF copy: {path} ({len(pdf_bytes)} bytes)")


def run_daily_report_pipeline(
    settings: ReportSettings,
    now: Optional[datetime] = None,
    dry_run_email: bool = False,
    save_pdf_path: Optional[str] = None
) -> Tuple[bool, str]:
    """
    Run the complete daily report pipeline end-to-end.

    Args:
        settings: Run configuration from load_settings()
        now: Timezone-aware "current time" override (tests); defaults to the wall clock
        dry_run_email: If True, render the report but skip email delivery
        save_pdf_path: Optional path to also write the PDF to disk

    Returns:
        Tuple of (success: bool, message: str)
        - success: False only for render/configuration/delivery failures
        - message: delivery confirmation, no-data notice, or error description

    Example:
        success, message = run_daily_report_pipeline(load_settings(), dry_run_email=True)
    """
    try:
        today = today_in_timezone(settings.reference_timezone, now)
        recipients = settings.active_recipients

        logger.info("=" * 70)
        logger.info("Starting Daily Barcode Report Pipeline")
        logger.info("=" * 70)
        logger.info(f"Report date: {today.isoformat()} ({settings.reference_timezone})")
        logger.info(f"Dry run email: {dry_run_email}")
        logger.info(f"Test mode: {settings.test_mode}")
        logger.info(f"SMTP credentials present: {settings.has_credentials}")
        logger.info("=" * 70)

        # Step 1: Fetch
        logger.info("STEP 1: Fetching scanner feed...")
        records = fetch_scan_records(settings.feed_url, timeout=settings.feed_timeout)
        logger.info(f"✓ Step 1 completed: {len(records)} records fetched")

        # Step 2: Filter
        logger.info("STEP 2: Filtering records to today...")
        today_records = filter_today(records, settings.reference_timezone, today=today)
        logger.info(f"✓ Step 2 completed: {len(today_records)} records for today")

        if not today_records:
            logger.info(NO_DATA_MESSAGE)
            return True, NO_DATA_MESSAGE

        # Step 3: Render
        logger.info("STEP 3: Rendering PDF report...")
        title = build_report_title(today)
        try:
            pdf_bytes = render_report(today_records, title)
        except Exception as e:
            error_msg = f"Failed to render PDF report: {str(e)}"
            logger.error(error_msg, exc_info=True)
            return False, error_msg
        logger.info("✓ Step 3 completed: PDF report rendered")

        if save_pdf_path:
            try:
                _save_pdf_copy(pdf_bytes, save_pdf_path)
            except OSError as e:
                logger.warning(f"Could not save PDF copy to {save_pdf_path}: {str(e)}")

        # Step 4: Dispatch
        logger.info("STEP 4: Sending email...")
        subject = generate_email_subject(today)
        body_text = generate_email_text(len(today_records))

        if dry_run_email:
            logger.info("DRY RUN MODE: Email sending skipped (dry_run_email=True)")
            logger.info(f"Would send email to {len(recipients)} recipient(s)")
            logger.info(f"Subject: {subject}")
            logger.info(f"Attachment: {settings.attachment_name} ({len(pdf_bytes)} bytes)")
            return True, f"Dry run: report with {len(today_records)} items rendered, email not sent"

        try:
            result = send_report(
                document=pdf_bytes,
                recipients=recipients,
                subject=subject,
                body_text=body_text,
                settings=settings,
                body_html=generate_email_html(len(today_records), today)
            )
        except ConfigurationError as e:
            error_msg = f"Configuration error, email not sent: {str(e)}"
            logger.error(error_msg)
            logger.error(
                "Provide GMAIL_USER and GMAIL_PASS (scheduler secrets, or a local .env file "
                "when not running under GITHUB_ACTIONS) and at least one recipient."
            )
            return False, error_msg

        if not result.sent:
            error_msg = f"Email delivery failed: {result.detail}"
            logger.error(error_msg)
            return False, error_msg

        logger.info("✓ Step 4 completed: Email sent")
        logger.info("=" * 70)
        logger.info("Pipeline completed successfully")
        logger.info(f"Items reported: {len(today_records)}")
        logger.info(f"SMTP info: {result.detail}")
        logger.info("=" * 70)
        return True, result.detail

    except Exception as e:
        error_msg = f"Unexpected error in daily report pipeline: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return False, error_msg
