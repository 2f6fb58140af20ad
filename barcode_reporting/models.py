"""
Data structures passed between pipeline stages.

ScanRecord is built once at the fetch boundary; everything downstream reads its
attributes instead of poking at raw JSON dicts.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

Quantity = Union[int, float, str, None]


@dataclass(frozen=True)
class ScanRecord:
    """One scanned-barcode entry from the upstream feed."""

    date: Optional[str]
    item: Optional[str] = None
    client: Optional[str] = None
    department: Optional[str] = None
    qty: Quantity = None
    barcode: Optional[str] = None

    def as_row(self, include_barcode: bool = True) -> list:
        """Table row in report column order, values verbatim (None -> empty cell)."""
        values = [self.date, self.item, self.client, self.department, self.qty]
        if include_barcode:
            values.append(self.barcode)
        return ["" if value is None else str(value) for value in values]


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a single dispatch attempt. Never retried, never stored."""

    sent: bool
    detail: str
    recipients: Tuple[str, ...] = ()

    @classmethod
    def success(cls, detail: str, recipients: Sequence[str] = ()) -> "DeliveryResult":
        return cls(sent=True, detail=detail, recipients=tuple(recipients))

    @classmethod
    def failure(cls, detail: str, recipients: Sequence[str] = ()) -> "DeliveryResult":
        return cls(sent=False, detail=detail, recipients=tuple(recipients))
