"""Turn inventory rows into purchase-order lines."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List

from importflow.core.errors import StockValueError
from importflow.core.models import PurchaseOrderLine, Record

logger = logging.getLogger(__name__)

STOCK_FIELD = "stock"
PURCHASE_FIELD = "purchase"
DEFAULT_REORDER_TARGET = 3


@dataclass
class PurchaseOrderBatch:
    """Outcome of one transform pass over an inventory sheet."""

    lines: List[PurchaseOrderLine] = field(default_factory=list)
    rejected: List[StockValueError] = field(default_factory=list)
    skipped: int = 0

    def to_insert_payload(self) -> List[dict]:
        return [line.to_values() for line in self.lines]


def parse_stock(value: Any, record_id: str | None = None) -> int:
    """Read a stock count, refusing anything that is not a whole number."""

    if value is None or (isinstance(value, str) and not value.strip()):
        raise StockValueError("stock is missing", record_id, value)
    if isinstance(value, bool):
        raise StockValueError(f"stock must be a number, got {value!r}", record_id, value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise StockValueError(f"stock must be a whole number, got {value!r}", record_id, value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise StockValueError(f"stock must be a number, got {value!r}", record_id, value)


def purchase_quantity(stock: int, reorder_target: int = DEFAULT_REORDER_TARGET) -> int:
    """Units needed to bring ``stock`` back up to ``reorder_target``; never negative."""

    return max(reorder_target - stock, 0)


def to_purchase_line(record: Record, reorder_target: int = DEFAULT_REORDER_TARGET) -> PurchaseOrderLine:
    """Project a record into an order line: drop ``stock``, keep the rest."""

    stock = parse_stock(record.get(STOCK_FIELD), record.id)
    fields = {
        key: cell
        for key, cell in record.values.items()
        if key not in {STOCK_FIELD, PURCHASE_FIELD}
    }
    return PurchaseOrderLine(
        fields=fields,
        quantity=purchase_quantity(stock, reorder_target),
        source_id=record.id,
    )


def build_purchase_order(
    records: Iterable[Record], reorder_target: int = DEFAULT_REORDER_TARGET
) -> PurchaseOrderBatch:
    """Compute order lines for every record and keep the ones with something to buy.

    Lines keep the source order. Records whose stock cannot be read are
    collected in ``rejected`` instead of producing a quantity.
    """

    batch = PurchaseOrderBatch()
    for record in records:
        try:
            line = to_purchase_line(record, reorder_target)
        except StockValueError as exc:
            logger.warning("Rejected record %s: %s", record.id, exc)
            batch.rejected.append(exc)
            continue
        if line.quantity > 0:
            batch.lines.append(line)
        else:
            batch.skipped += 1
    return batch
