"""Helper sinks that reshape the exported order sheet for other destinations."""
from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any, Dict, Iterable, List

import gspread
from openpyxl import Workbook


def csv_to_rows(csv_text: str) -> List[Dict[str, Any]]:
    """Parse exported CSV text into one dictionary per row."""

    return list(csv.DictReader(io.StringIO(csv_text)))


def push_to_google_sheets(
    rows: Iterable[Dict[str, Any]],
    spreadsheet_id: str,
    worksheet_title: str = "Sheet1",
    service_account_path: Path | None = None,
) -> None:
    """Replace a Google Sheets worksheet's contents with ``rows`` using a service account."""

    rows = list(rows)
    if not rows:
        return

    client = (
        gspread.service_account(filename=str(service_account_path))
        if service_account_path
        else gspread.service_account()
    )
    worksheet = client.open_by_key(spreadsheet_id).worksheet(worksheet_title)
    worksheet.clear()
    headers: List[str] = list(rows[0].keys())
    worksheet.append_rows([headers] + [[row.get(h, "") for h in headers] for row in rows])


def excel_bytes(rows: Iterable[Dict[str, Any]], title: str = "purchase_orders") -> bytes:
    """Render rows as an in-memory Excel workbook using openpyxl."""

    rows = list(rows)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title
    if rows:
        headers: List[str] = list(rows[0].keys())
        sheet.append(headers)
        for row in rows:
            sheet.append([row.get(header, "") for header in headers])

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
