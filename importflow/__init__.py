"""Event listener for a hosted data-import platform."""
from importflow.core import (
    Record,
    Settings,
    configure_logging,
    load_settings,
)
from importflow.handlers import build_listener, create_customer_workbook, event_from_payload
from importflow.platform import Event, Listener, PlatformClient
from importflow.processing import build_purchase_order, purchase_quantity, run_purchase_order_job
from importflow.validation import normalize_author

__all__ = [
    "Event",
    "Listener",
    "PlatformClient",
    "Record",
    "Settings",
    "build_listener",
    "build_purchase_order",
    "configure_logging",
    "create_customer_workbook",
    "event_from_payload",
    "load_settings",
    "normalize_author",
    "purchase_quantity",
    "run_purchase_order_job",
]
