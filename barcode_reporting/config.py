"""
Configuration for the daily barcode report.

Static values live in this module as constants - no hardcoded values in logic files.
Sensitive and per-deployment values (SMTP credentials, recipients, feed URL) are read
from environment variables by load_settings(), which is called once at process start.
The resulting ReportSettings object is passed explicitly into the pipeline.

When not running under the automated scheduler (GITHUB_ACTIONS != "true"), a local
.env file is loaded first so developers can keep credentials out of their shell.
"""

import os
import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

# Set up logger for configuration warnings
_logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when required run configuration (e.g. SMTP credentials) is missing."""


# ============================================================================
# Feed Configuration
# ============================================================================

# Remote JSON array of scan records, fetched once per run
DEFAULT_FEED_URL = "https://dashproduction.x10.mx/masterfile/scanner/machining/barcode/scanner.json"

# HTTP timeout in seconds for the feed request
DEFAULT_FEED_TIMEOUT = 30

# ============================================================================
# Timezone Configuration
# ============================================================================

# "Today" and every record date are evaluated in this timezone,
# independent of the host's local timezone
REFERENCE_TIMEZONE = "Asia/Manila"

# ============================================================================
# Report Configuration
# ============================================================================

# Title and subject prefix; the formatted report date is appended
REPORT_TITLE_PREFIX = "Daily Barcode Report"

# Subject template, {date} is replaced with the report date (M/D/YYYY)
EMAIL_SUBJECT_TEMPLATE = "Daily Barcode Report - {date}"

# Name of the single PDF attachment
PDF_ATTACHMENT_NAME = "daily-report.pdf"

# Table header, fixed column order. Barcode is appended when the feed carries it.
REPORT_COLUMNS = ["Date", "Item", "Client", "Department", "Quantity"]
BARCODE_COLUMN = "Barcode"


# ============================================================================
# SMTP Configuration
# ============================================================================

# SMTP settings are read from environment variables for security:
# - GMAIL_USER: SMTP username, also used as the From address
# - GMAIL_PASS: SMTP password or app-specific password
# - SMTP_SERVER / SMTP_PORT: relay override (defaults to Gmail STARTTLS)

DEFAULT_SMTP_SERVER = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT = 30

# ============================================================================
# File Paths and Directories
# ============================================================================

# Environment variables read by the logger when each logger is first built,
# so values from a local .env file apply
LOGS_DIR_ENV = "REPORT_LOGS_DIR"
LOG_LEVEL_ENV = "REPORT_LOG_LEVEL"

# Directory for log files, relative to the working directory
DEFAULT_LOGS_DIR = "logs"

# Log file name
LOG_FILENAME = "daily_report.log"

# Console handler level (the file log always records DEBUG)
DEFAULT_CONSOLE_LOG_LEVEL = "INFO"

# ============================================================================
# Scheduler Detection
# ============================================================================

# Set to "true" by the CI scheduler; credentials then come from the ambient
# environment instead of a local .env file
SCHEDULER_FLAG_ENV = "GITHUB_ACTIONS"


@dataclass(frozen=True)
class ReportSettings:
    """Run configuration, constructed once and passed to every stage that needs it."""

    feed_url: str = DEFAULT_FEED_URL
    feed_timeout: int = DEFAULT_FEED_TIMEOUT
    reference_timezone: str = REFERENCE_TIMEZONE
    smtp_server: str = DEFAULT_SMTP_SERVER
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_timeout: int = DEFAULT_SMTP_TIMEOUT
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_verify_before_send: bool = True
    email_recipients: Tuple[str, ...] = ()
    test_mode: bool = False
    test_recipients: Tuple[str, ...] = ()
    attachment_name: str = PDF_ATTACHMENT_NAME

    @property
    def has_credentials(self) -> bool:
        return bool(self.smtp_user) and bool(self.smtp_password)

    @property
    def active_recipients(self) -> Tuple[str, ...]:
        """Recipients for this run: the test list in test mode, the regular list otherwise."""
        if self.test_mode:
            return self.test_recipients
        return self.email_recipients

    def require_credentials(self) -> None:
        missing = []
        if not self.smtp_user:
            missing.append("GMAIL_USER")
        if not self.smtp_password:
            missing.append("GMAIL_PASS")
        if missing:
            raise ConfigurationError(
                f"Missing SMTP credentials: {', '.join(missing)}. "
                "Set them in the scheduler secrets or in a local .env file."
            )


def is_running_under_scheduler(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get(SCHEDULER_FLAG_ENV, "").strip().lower() == "true"


def load_local_env_file() -> bool:
    """
    Load a .env file from the working directory (or a parent) into os.environ.

    Variables already set in the environment are not overridden.

    Returns:
        True if a .env file was found and loaded
    """
    env_path = find_dotenv(usecwd=True)
    if not env_path:
        return False
    load_dotenv(env_path)
    _logger.debug(f"Loaded local .env file: {env_path}")
    return True


def parse_recipients(value: Optional[str]) -> List[str]:
    """
    Split a comma-separated address list.

    Values are stripped of whitespace and empty values are ignored.
    Expected format: abc@company.com,xyz@company.com
    """
    if not value:
        return []
    return [email.strip() for email in value.split(",") if email.strip()]


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("true", "1", "yes")


def _parse_int(name: str, value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        _logger.warning(f"Invalid {name} value '{value}'. Using default: {default}.")
        return default


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    load_env_file: Optional[bool] = None
) -> ReportSettings:
    """
    Build ReportSettings from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)
        load_env_file: Whether to load a local .env first. If None, the .env file is
            loaded only when not running under the automated scheduler.

    Returns:
        ReportSettings instance

    Missing SMTP credentials are not an error here; they are checked right before
    delivery so that fetch and filter still run (and dry runs work without them).
    """
    if load_env_file is None:
        load_env_file = environ is None and not is_running_under_scheduler()

    if load_env_file:
        load_local_env_file()

    env = os.environ if environ is None else environ

    email_recipients = parse_recipients(env.get("EMAIL_RECIPIENTS"))
    test_mode = _parse_bool(env.get("REPORT_TEST_MODE"), False)
    test_recipients = parse_recipients(env.get("TEST_EMAIL_RECIPIENTS"))

    if test_mode:
        _logger.info(f"REPORT_TEST_MODE is enabled. Using {len(test_recipients)} test recipient(s).")
        if not test_recipients:
            _logger.warning("REPORT_TEST_MODE is enabled but TEST_EMAIL_RECIPIENTS is empty.")
    elif not email_recipients:
        # Don't log actual email addresses
        _logger.warning(
            "EMAIL_RECIPIENTS environment variable is not set or is empty. "
            "Set EMAIL_RECIPIENTS (comma-separated list of email addresses)."
        )
    else:
        _logger.info(f"Loaded {len(email_recipients)} email recipient(s) from environment variable")

    return ReportSettings(
        feed_url=env.get("SCANNER_FEED_URL") or DEFAULT_FEED_URL,
        feed_timeout=_parse_int("FEED_TIMEOUT", env.get("FEED_TIMEOUT"), DEFAULT_FEED_TIMEOUT),
        reference_timezone=env.get("REPORT_TIMEZONE") or REFERENCE_TIMEZONE,
        smtp_server=env.get("SMTP_SERVER") or DEFAULT_SMTP_SERVER,
        smtp_port=_parse_int("SMTP_PORT", env.get("SMTP_PORT"), DEFAULT_SMTP_PORT),
        smtp_timeout=_parse_int("SMTP_TIMEOUT", env.get("SMTP_TIMEOUT"), DEFAULT_SMTP_TIMEOUT),
        smtp_user=env.get("GMAIL_USER") or None,
        smtp_password=env.get("GMAIL_PASS") or None,
        smtp_verify_before_send=_parse_bool(env.get("SMTP_VERIFY_BEFORE_SEND"), True),
        email_recipients=tuple(email_recipients),
        test_mode=test_mode,
        test_recipients=tuple(test_recipients),
    )


# Local runs: apply .env before any logger reads REPORT_LOGS_DIR / REPORT_LOG_LEVEL
if not is_running_under_scheduler():
    load_local_env_file()
