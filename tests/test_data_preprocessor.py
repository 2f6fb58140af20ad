from __future__ import annotations

import pytest

from barcode_reporting.data_preprocessor import records_from_payload
from barcode_reporting.models import ScanRecord


def test_records_keep_feed_order_and_values() -> None:
    payload = [
        {"date": "2024-03-05", "item": "Bolt", "client": "Acme", "department": "Mach", "qty": 10, "barcode": "B1"},
        {"date": "03/05/2024", "item": "Nut", "client": "Beta", "department": "Weld", "qty": "4", "barcode": "B2"},
    ]

    records = records_from_payload(payload)

    assert records == [
        ScanRecord(date="2024-03-05", item="Bolt", client="Acme", department="Mach", qty=10, barcode="B1"),
        ScanRecord(date="03/05/2024", item="Nut", client="Beta", department="Weld", qty="4", barcode="B2"),
    ]
    assert records[1].qty == "4"


def test_missing_fields_become_none() -> None:
    payload = [
        {"date": "2024-03-05", "item": "Bolt", "qty": 10},
        {"item": "Washer", "client": "Acme"},
    ]

    records = records_from_payload(payload)

    assert records[0].barcode is None
    assert records[0].client is None
    assert records[1].date is None
    assert records[1].qty is None


def test_column_names_are_standardized() -> None:
    payload = [{" Date ": "2024-03-05", "ITEM": "Bolt", "Quantity": 3, "Dept": "Mach", "BARCODE": "X9"}]

    (record,) = records_from_payload(payload)

    assert record.date == "2024-03-05"
    assert record.item == "Bolt"
    assert record.qty == 3
    assert record.department == "Mach"
    assert record.barcode == "X9"


def test_alias_spellings_in_different_rows_are_merged() -> None:
    payload = [
        {"date": "2024-03-05", "item": "Bolt", "qty": 1},
        {"date": "2024-03-05", "item": "Nut", "Quantity": 7},
        {"date": "2024-03-05", "item": "Washer", "dept": "Weld", "department": None},
    ]

    records = records_from_payload(payload)

    assert [record.qty for record in records] == [1, 7, None]
    assert records[2].department == "Weld"


def test_duplicate_records_are_not_collapsed() -> None:
    row = {"date": "2024-03-05", "item": "Bolt", "client": "Acme", "department": "Mach", "qty": 1}
    assert len(records_from_payload([row, dict(row)])) == 2


def test_non_object_entries_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    payload = [{"date": "2024-03-05", "item": "Bolt"}, "garbage", 42, None]

    records = records_from_payload(payload)

    assert [r.item for r in records] == ["Bolt"]
    assert "Skipped 3 feed entries" in caplog.text


def test_empty_payload_gives_no_records() -> None:
    assert records_from_payload([]) == []


@pytest.mark.parametrize("payload", [{"date": "2024-03-05"}, "text", None])
def test_non_array_payload_is_rejected(payload: object) -> None:
    with pytest.raises(ValueError, match="JSON array"):
        records_from_payload(payload)
