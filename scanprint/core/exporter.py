# scanprint/core/exporter.py
from __future__ import annotations

import io
from datetime import date
from typing import Iterable, List, Optional

from openpyxl import Workbook

from scanprint.core.models import ProductRecord

SHEET_NAME = "Products"
# Spaced headers; older exports of this table used Product_Name and Expired_Date.
COLUMNS = ["QRCode", "Product Name", "Lot", "Expired Date", "Unit", "Uniq"]
STATUS_COLUMN = "Status"


def columns(include_status: bool) -> List[str]:
    return COLUMNS + [STATUS_COLUMN] if include_status else list(COLUMNS)


def _row(record: ProductRecord, include_status: bool) -> List[str]:
    row = [
        record.qrcode,
        record.product_name,
        record.lot,
        record.expired_date,
        record.unit_name,
        record.uniq,
    ]
    if include_status:
        row.append(record.status or "")
    return row


def build_workbook(records: Iterable[ProductRecord], include_status: bool = True) -> Optional[Workbook]:
    """Single "Products" sheet: header + one row per record. None when there is nothing to export."""
    rows = list(records)
    if not rows:
        return None

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME
    ws.append(columns(include_status))
    for record in rows:
        ws.append(_row(record, include_status))
    return wb


def export_bytes(records: Iterable[ProductRecord], include_status: bool = True) -> Optional[bytes]:
    wb = build_workbook(records, include_status)
    if wb is None:
        return None
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def export_filename(today: Optional[date] = None) -> str:
    return f"products_{(today or date.today()).isoformat()}.xlsx"
