#!/usr/bin/env python3
"""
Cron Runner Script for the Daily Barcode Report

Runs the complete pipeline once: fetch the scanner feed, keep today's records
(Asia/Manila), render the PDF and email it.

CRON CONFIGURATION:
-------------------
# Run every day at 6:00 PM Manila time (10:00 AM UTC)
# PHT = UTC + 8, so 18:00 PHT = 10:00 UTC
0 10 * * * /usr/bin/python3 /path/to/project/scripts/run_daily_report.py >> /path/to/project/logs/cron.log 2>&1

Overlapping runs are not guarded against; schedule at most one run per day.

ENVIRONMENT VARIABLES:
----------------------
Under the CI scheduler (GITHUB_ACTIONS=true) values come from the job secrets.
Anywhere else a local .env file is loaded first.

REQUIRED:
- GMAIL_USER
- GMAIL_PASS
- EMAIL_RECIPIENTS (comma-separated)

OPTIONAL:
- SCANNER_FEED_URL, FEED_TIMEOUT
- SMTP_SERVER (default: smtp.gmail.com), SMTP_PORT (default: 587), SMTP_TIMEOUT
- SMTP_VERIFY_BEFORE_SEND (default: true)
- REPORT_TEST_MODE, TEST_EMAIL_RECIPIENTS
- REPORT_TIMEZONE (default: Asia/Manila)
- REPORT_LOGS_DIR (default: logs)

LOGGING:
--------
- Cron output: logs/cron.log (stdout/stderr from this script)
- Application logs: logs/daily_report.log (from barcode_reporting modules)
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from barcode_reporting.config import load_settings
from barcode_reporting.orchestrator import run_daily_report_pipeline


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Email today's barcode scans as a PDF report.")
    parser.add_argument("--dry-run", action="store_true", help="Render the report but do not send email")
    parser.add_argument("--save-pdf", metavar="PATH", help="Also write the rendered PDF to PATH")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main entry point for scheduled execution.

    Returns:
        Exit code: 0 when the pipeline succeeded (including "no data today"), 1 otherwise
    """
    args = parse_args(argv)

    print("=" * 70)
    print("CRON: Starting Daily Barcode Report Pipeline")
    print("=" * 70)

    try:
        settings = load_settings()
        success, result = run_daily_report_pipeline(
            settings,
            dry_run_email=args.dry_run,
            save_pdf_path=args.save_pdf
        )
    except Exception as e:
        print("CRON: Unexpected error in pipeline execution")
        print(f"Error: {str(e)}")
        print("=" * 70)
        return 1

    print("=" * 70)
    if success:
        print("CRON: Pipeline completed successfully")
        print(f"Result: {result}")
    else:
        print("CRON: Pipeline failed")
        print(f"Error: {result}")
    print("=" * 70)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
