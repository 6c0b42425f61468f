"""Core building blocks for the importflow package."""
from importflow.core.config import Settings, load_env_file, load_settings
from importflow.core.errors import (
    ImportFlowError,
    MissingSecretError,
    NameFormatError,
    PlatformAPIError,
    SheetNotFoundError,
    StockValueError,
)
from importflow.core.logging import configure_logging
from importflow.core.models import Cell, CellMessage, PurchaseOrderLine, Record, SheetRef

__all__ = [
    "Cell",
    "CellMessage",
    "ImportFlowError",
    "MissingSecretError",
    "NameFormatError",
    "PlatformAPIError",
    "PurchaseOrderLine",
    "Record",
    "Settings",
    "SheetNotFoundError",
    "SheetRef",
    "StockValueError",
    "configure_logging",
    "load_env_file",
    "load_settings",
]
