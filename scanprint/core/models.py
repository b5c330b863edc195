# scanprint/core/models.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

# ------- Print status labels -------
STATUS_PRINTING = "Printing..."
STATUS_DONE = "Done"
FAILED_PREFIX = "Failed: "


@dataclass
class ProductRecord:
    """One row of the scan table."""
    qrcode: str
    product_name: str
    lot: str
    expired_date: str
    unit_name: str
    uniq: str
    status: Optional[str] = None  # only set when printing is enabled

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["status"] is None:
            data.pop("status")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductRecord":
        if not isinstance(data, dict):
            raise ValueError(f"record must be an object, got {type(data).__name__}")
        status = data.get("status")
        if status is not None and not isinstance(status, str):
            raise ValueError(f"record status must be a string, got {type(status).__name__}")
        try:
            return cls(
                qrcode=str(data["qrcode"]),
                product_name=str(data["product_name"]),
                lot=str(data["lot"]),
                expired_date=str(data["expired_date"]),
                unit_name=str(data["unit_name"]),
                uniq=str(data["uniq"]),
                status=status,
            )
        except KeyError as e:
            raise ValueError(f"record is missing field {e}") from e

    def print_payload(self) -> Dict[str, str]:
        # body expected by the print service
        return {
            "QRCode": self.qrcode,
            "Product_Name": self.product_name,
            "Lot": self.lot,
            "Expired_Date": self.expired_date,
            "Unit": self.unit_name,
            "Uniq": self.uniq,
        }


@dataclass
class SubmitResult:
    """
    Outcome of a scan or reprint:
      - ok:             record appended (or reprinted)
      - ignored:        blank input, nothing happened
      - lookup_failed:  lookup service error, nothing appended
      - busy:           another scan still in flight
      - not_found:      reprint of an unknown row
      - print_disabled: reprint while printing is off
    """
    outcome: str
    record: Optional[ProductRecord] = None
    index: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == "ok"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome,
            "record": self.record.to_dict() if self.record else None,
            "index": self.index,
            "error": self.error,
        }
