"""
Email Sender Module

Delivers the rendered report as a single PDF attachment through an authenticated
SMTP relay (STARTTLS). This is a pure infrastructure module - no content generation.

- Credentials come from the ReportSettings passed in; the environment is never read here.
- Missing credentials or recipients raise ConfigurationError before any connection.
- Transport failures never raise: they come back as a failed DeliveryResult carrying
  the SMTP response code and text when the server provided one.
"""

import smtplib
import socket
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional, Sequence, Tuple

from barcode_reporting.config import ConfigurationError, ReportSettings
from barcode_reporting.models import DeliveryResult
from barcode_reporting.logger import get_logger

logger = get_logger(__name__)


def describe_smtp_error(error: Exception) -> str:
    """
    Render an SMTP/socket exception with any server-provided diagnostic text.

    Example: "SMTPAuthenticationError (535): 5.7.8 Username and Password not accepted"
    """
    if isinstance(error, smtplib.SMTPResponseException):
        server_text = error.smtp_error
        if isinstance(server_text, bytes):
            server_text = server_text.decode("utf-8", errors="replace")
        return f"{type(error).__name__} ({error.smtp_code}): {server_text}"
    if isinstance(error, smtplib.SMTPRecipientsRefused):
        refused = ", ".join(sorted(error.recipients))
        return f"SMTPRecipientsRefused: all recipients refused ({refused})"
    return f"{type(error).__name__}: {str(error)}"


def _open_connection(settings: ReportSettings) -> smtplib.SMTP:
    server = smtplib.SMTP(settings.smtp_server, settings.smtp_port, timeout=settings.smtp_timeout)
    try:
        server.starttls()  # Enable TLS encryption
        server.login(settings.smtp_user, settings.smtp_password)
    except Exception:
        server.close()
        raise
    return server


def verify_smtp_connection(settings: ReportSettings) -> Tuple[bool, Optional[str]]:
    """
    Connect and authenticate against the relay without sending anything.

    Returns:
        Tuple of (success: bool, error_msg: Optional[str])
    """
    settings.require_credentials()
    logger.info(f"Verifying SMTP connection: {settings.smtp_server}:{settings.smtp_port}")

    try:
        server = _open_connection(settings)
        server.quit()
    except (smtplib.SMTPException, socket.error) as e:
        error_msg = f"SMTP verification failed: {describe_smtp_error(e)}"
        logger.error(error_msg)
        return False, error_msg

    logger.info("SMTP connection verified")
    return True, None


def build_report_message(
    sender: str,
    recipients: Sequence[str],
    subject: str,
    body_text: str,
    document: bytes,
    attachment_name: str,
    body_html: Optional[str] = None
) -> EmailMessage:
    """
    Build the RFC-compliant message:

    multipart/mixed
    ├── multipart/alternative (text/plain, optional text/html)
    └── application/pdf (attachment)
    """
    message = EmailMessage()
    message['From'] = sender
    message['To'] = ", ".join(recipients)
    message['Subject'] = subject
    message['Message-ID'] = make_msgid()

    message.set_content(body_text)
    if body_html:
        message.add_alternative(body_html, subtype='html')

    message.add_attachment(
        document,
        maintype='application',
        subtype='pdf',
        filename=attachment_name
    )
    return message


def send_report(
    document: bytes,
    recipients: Sequence[str],
    subject: str,
    body_text: str,
    settings: ReportSettings,
    body_html: Optional[str] = None
) -> DeliveryResult:
    """
    Send the report PDF to all recipients in one message.

    Args:
        document: Rendered PDF bytes
        recipients: Recipient email addresses
        subject: Email subject line
        body_text: Plain-text body
        settings: Run configuration (SMTP relay and credentials)
        body_html: Optional HTML alternative body

    Returns:
        DeliveryResult - sent with confirmation text, or failed with diagnostics

    Raises:
        ConfigurationError: If SMTP credentials or recipients are missing
    """
    settings.require_credentials()

    recipients = [r for r in recipients if r]
    if not recipients:
        raise ConfigurationError(
            "Email recipient list is empty. Set EMAIL_RECIPIENTS "
            "(or TEST_EMAIL_RECIPIENTS when REPORT_TEST_MODE is enabled)."
        )

    logger.info(f"Preparing to send email to {len(recipients)} recipient(s)")
    logger.info(f"Subject: {subject}")
    logger.info(f"Attachment: {settings.attachment_name} ({len(document)} bytes)")

    if settings.smtp_verify_before_send:
        ok, error = verify_smtp_connection(settings)
        if not ok:
            return DeliveryResult.failure(error, recipients)

    message = build_report_message(
        sender=settings.smtp_user,
        recipients=recipients,
        subject=subject,
        body_text=body_text,
        document=document,
        attachment_name=settings.attachment_name,
        body_html=body_html
    )

    logger.info(f"SMTP Configuration: {settings.smtp_server}:{settings.smtp_port}")
    logger.debug(f"SMTP User: {settings.smtp_user}")

    try:
        server = _open_connection(settings)
    except (smtplib.SMTPException, socket.error) as e:
        error_msg = f"Failed to send email: {describe_smtp_error(e)}"
        logger.error(error_msg, exc_info=True)
        return DeliveryResult.failure(error_msg, recipients)

    try:
        refused = server.send_message(message, to_addrs=list(recipients))
    except (smtplib.SMTPException, socket.error) as e:
        error_msg = f"Failed to send email: {describe_smtp_error(e)}"
        logger.error(error_msg, exc_info=True)
        server.close()
        return DeliveryResult.failure(error_msg, recipients)

    # The message is already accepted; a failed QUIT does not change the result
    try:
        server.quit()
    except (smtplib.SMTPException, socket.error) as e:
        logger.warning(f"SMTP QUIT failed after the message was accepted: {describe_smtp_error(e)}")
        server.close()

    accepted = len(recipients) - len(refused)
    confirmation = f"Message {message['Message-ID']} accepted for {accepted} recipient(s)"
    if refused:
        refused_desc = ", ".join(
            f"{address} ({code})" for address, (code, _text) in sorted(refused.items())
        )
        confirmation += f"; refused: {refused_desc}"
        logger.warning(f"Some recipients were refused: {refused_desc}")

    logger.info(f"Email sent successfully: {confirmation}")
    return DeliveryResult.success(confirmation, recipients)
