from __future__ import annotations

import os
import smtplib
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import ClassVar
from zoneinfo import ZoneInfo

import pytest

# Ensure the package is importable when running tests directly via pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep test runs from writing into the project's logs/ directory.
os.environ.setdefault("REPORT_LOGS_DIR", tempfile.mkdtemp(prefix="daily-report-logs-"))

from barcode_reporting.config import ReportSettings  # noqa: E402
from barcode_reporting.models import ScanRecord  # noqa: E402

MANILA = ZoneInfo("Asia/Manila")


@pytest.fixture
def manila_noon() -> datetime:
    return datetime(2024, 3, 5, 12, 0, tzinfo=MANILA)


@pytest.fixture
def settings() -> ReportSettings:
    return ReportSettings(
        feed_url="https://feed.example.com/scanner.json",
        smtp_server="smtp.example.com",
        smtp_port=587,
        smtp_user="reports@example.com",
        smtp_password="app-password",
        email_recipients=("plant@example.com", "office@example.com"),
    )


@pytest.fixture
def bolt_record() -> ScanRecord:
    return ScanRecord(date="2024-03-05", item="Bolt", client="Acme", department="Mach", qty=10, barcode="B1")


class DummySMTP:
    instances: ClassVar[list[DummySMTP]] = []
    login_error: ClassVar[Exception | None] = None
    send_error: ClassVar[Exception | None] = None
    quit_error: ClassVar[Exception | None] = None
    refused: ClassVar[dict] = {}

    def __init__(self, host: str, port: int, timeout: float | None = None, **_kwargs) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self.starttls_called = False
        self.login_args: tuple[str, str] | None = None
        self.sent: tuple[object, list[str]] | None = None
        self.quit_called = False
        DummySMTP.instances.append(self)

    def starttls(self, *_args: object, **_kwargs: object) -> None:
        self.starttls_called = True

    def login(self, username: str, password: str) -> None:
        if DummySMTP.login_error is not None:
            raise DummySMTP.login_error
        self.login_args = (username, password)

    def send_message(self, message: object, to_addrs: list[str]) -> dict:
        if DummySMTP.send_error is not None:
            raise DummySMTP.send_error
        self.sent = (message, to_addrs)
        return dict(DummySMTP.refused)

    def quit(self) -> None:
        if DummySMTP.quit_error is not None:
            raise DummySMTP.quit_error
        self.quit_called = True

    def close(self) -> None:
        return None


@pytest.fixture
def dummy_smtp(monkeypatch: pytest.MonkeyPatch) -> type[DummySMTP]:
    DummySMTP.instances = []
    DummySMTP.login_error = None
    DummySMTP.send_error = None
    DummySMTP.quit_error = None
    DummySMTP.refused = {}
    monkeypatch.setattr(smtplib, "SMTP", DummySMTP)
    return DummySMTP


class DummyResponse:
    def __init__(self, payload: object = None, status_code: int = 200, json_error: Exception | None = None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self) -> None:
        import requests

        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> object:
        if self.json_error is not None:
            raise self.json_error
        return self.payload
