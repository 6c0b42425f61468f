"""Purchase-order run triggered when a mapping job completes."""
from __future__ import annotations

import logging
from typing import List, Tuple

from importflow.core.config import Settings
from importflow.core.errors import SheetNotFoundError
from importflow.core.models import Record, SheetRef
from importflow.export.mailer import MailTransportFactory, send_purchase_order
from importflow.export.sinks import csv_to_rows, push_to_google_sheets
from importflow.platform.client import PlatformClient
from importflow.platform.events import Event
from importflow.processing.purchase_orders import STOCK_FIELD, PurchaseOrderBatch, build_purchase_order

logger = logging.getLogger(__name__)


def _flag_rejected(client: PlatformClient, sheet_id: str, batch: PurchaseOrderBatch) -> None:
    """Write each stock rejection back onto its source record."""

    flagged: List[Record] = []
    for error in batch.rejected:
        if error.record_id is None:
            continue
        record = Record.from_values({STOCK_FIELD: error.value}, record_id=error.record_id)
        record.add_error(STOCK_FIELD, str(error))
        flagged.append(record)
    if flagged:
        client.update_records(sheet_id, flagged)


def resolve_sheets(client: PlatformClient, workbook_id: str, settings: Settings) -> Tuple[SheetRef, SheetRef]:
    """Find the inventory and order sheets by slug, whatever order the platform lists them in."""

    sheets = {sheet.slug: sheet for sheet in client.get_sheets(workbook_id)}
    found = []
    for slug in (settings.inventory_sheet_slug, settings.order_sheet_slug):
        if slug not in sheets:
            raise SheetNotFoundError(slug, workbook_id)
        found.append(sheets[slug])
    return found[0], found[1]


def update_purchase_order(
    client: PlatformClient,
    inventory: SheetRef,
    orders: SheetRef,
    reorder_target: int,
) -> PurchaseOrderBatch:
    """Read the inventory sheet and append the resulting lines to the order sheet.

    Running this twice against the same inventory inserts the lines twice;
    the order sheet is not de-duplicated here.
    """

    records = client.get_records(inventory.id)
    batch = build_purchase_order(records, reorder_target)
    logger.info(
        "Computed %d purchase lines from %d inventory records (%d at target, %d rejected)",
        len(batch.lines),
        len(records),
        batch.skipped,
        len(batch.rejected),
    )

    if batch.rejected:
        _flag_rejected(client, inventory.id, batch)
    if batch.lines:
        client.insert_records(orders.id, batch.to_insert_payload())
        logger.info("Inserted %d lines into sheet %s", len(batch.lines), orders.slug)
    return batch


def run_purchase_order_job(
    event: Event,
    client: PlatformClient,
    settings: Settings,
    transport_factory: MailTransportFactory | None = None,
) -> PurchaseOrderBatch:
    """Update the order sheet and email it to the warehouse.

    Credentials are resolved before anything is written, so a missing
    secret leaves both sheets and the mailbox untouched.
    """

    sender = event.require_secret("email")
    password = event.require_secret("password")

    workbook_id = event.context["workbookId"]
    logger.info("Purchase order run starting for workbook %s", workbook_id)
    inventory, orders = resolve_sheets(client, workbook_id, settings)
    batch = update_purchase_order(client, inventory, orders, settings.reorder_target)

    csv_text = client.get_records_as_csv(orders.id)
    send_purchase_order(
        csv_text,
        sender=sender,
        password=password,
        settings=settings,
        transport_factory=transport_factory,
    )
    logger.info("Sent purchase order to %s", settings.order_recipient)

    if settings.sheets_spreadsheet_id:
        push_to_google_sheets(
            csv_to_rows(csv_text),
            spreadsheet_id=settings.sheets_spreadsheet_id,
            worksheet_title=settings.sheets_worksheet,
            service_account_path=settings.service_account_path,
        )
        logger.info(
            "Mirrored purchase order to Google Sheets document %s (worksheet %s)",
            settings.sheets_spreadsheet_id,
            settings.sheets_worksheet,
        )
    return batch
