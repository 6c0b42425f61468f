"""Inventory-to-purchase-order processing."""
from importflow.processing.pipeline import resolve_sheets, run_purchase_order_job, update_purchase_order
from importflow.processing.purchase_orders import (
    PurchaseOrderBatch,
    build_purchase_order,
    parse_stock,
    purchase_quantity,
    to_purchase_line,
)

__all__ = [
    "PurchaseOrderBatch",
    "build_purchase_order",
    "parse_stock",
    "purchase_quantity",
    "resolve_sheets",
    "run_purchase_order_job",
    "to_purchase_line",
    "update_purchase_order",
]
