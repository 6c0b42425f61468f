"""Egress destinations for the purchase-order sheet."""
from importflow.export.mailer import MailTransport, build_order_message, send_purchase_order
from importflow.export.sinks import csv_to_rows, excel_bytes, push_to_google_sheets

__all__ = [
    "MailTransport",
    "build_order_message",
    "csv_to_rows",
    "excel_bytes",
    "push_to_google_sheets",
    "send_purchase_order",
]
