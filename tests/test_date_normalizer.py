from __future__ import annotations

import time
from datetime import date, datetime, timezone

import pytest

from barcode_reporting.date_normalizer import clean_date_string, normalize_date, today_in_timezone

MANILA = "Asia/Manila"


@pytest.mark.parametrize(
    "raw",
    [
        "2024-03-05",
        "03/05/2024",
        "3/5/2024",
        "03\\/05\\/2024",
        "2024\\-03\\-05",
        "  2024-03-05  ",
    ],
)
def test_recognized_shapes_normalize_to_same_day(raw: str) -> None:
    assert normalize_date(raw, MANILA) == (date(2024, 3, 5), None)


def test_month_comes_first_in_slash_format() -> None:
    parsed, error = normalize_date("12/01/2024", MANILA)
    assert error is None
    assert parsed == date(2024, 12, 1)


@pytest.mark.parametrize(
    "raw",
    [
        "13/40/2024",
        "02/30/2024",
        "not-a-date",
        "",
        "   ",
        "2024-3-5",
        "2024/03/05",
        "05-03-2024",
        "2024-03-05T10:00:00Z",
        "3/5/24",
        "２０２４-０３-０５",
        "٣/٥/٢٠٢٤",
    ],
)
def test_malformed_strings_return_failure(raw: str) -> None:
    parsed, error = normalize_date(raw, MANILA)
    assert parsed is None
    assert error


@pytest.mark.parametrize("raw", [None, 20240305, 3.5, ["2024-03-05"]])
def test_non_string_values_return_failure(raw: object) -> None:
    parsed, error = normalize_date(raw, MANILA)
    assert parsed is None
    assert "not a string" in error


def test_unknown_timezone_returns_failure_instead_of_raising() -> None:
    parsed, error = normalize_date("2024-03-05", "Mars/Olympus_Mons")
    assert parsed is None
    assert "Unknown timezone" in error


def test_leap_day_is_accepted() -> None:
    assert normalize_date("2/29/2024", MANILA) == (date(2024, 2, 29), None)


@pytest.fixture
def far_west_host_timezone(monkeypatch: pytest.MonkeyPatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "Pacific/Honolulu")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.mark.usefixtures("far_west_host_timezone")
def test_result_does_not_depend_on_host_timezone() -> None:
    assert normalize_date("2024-03-05", MANILA) == (date(2024, 3, 5), None)
    assert normalize_date("03/05/2024", MANILA) == (date(2024, 3, 5), None)


def test_clean_date_string_strips_backslashes_and_whitespace() -> None:
    assert clean_date_string(" 03\\/05\\/2024\n") == "03/05/2024"


def test_today_uses_reference_timezone() -> None:
    # 20:00 UTC on March 4th is already March 5th in Manila (UTC+8)
    now = datetime(2024, 3, 4, 20, 0, tzinfo=timezone.utc)
    assert today_in_timezone(MANILA, now) == date(2024, 3, 5)
    assert today_in_timezone("UTC", now) == date(2024, 3, 4)


def test_today_rejects_naive_datetime() -> None:
    with pytest.raises(ValueError):
        today_in_timezone(MANILA, datetime(2024, 3, 5, 12, 0))
