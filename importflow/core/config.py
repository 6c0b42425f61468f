"""Runtime configuration read from the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/importflow.env")
DEFAULT_BASE_URL = "https://platform.flatfile.com/api/v1"


@dataclass
class Settings:
    """Values the handlers need that are not part of an event."""

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    reorder_target: int = 3
    order_recipient: str = "warehouse@books.com"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    inventory_sheet_slug: str = "inventory"
    order_sheet_slug: str = "purchase-orders"
    attach_excel: bool = False
    sheets_spreadsheet_id: Optional[str] = None
    sheets_worksheet: str = "Purchase Orders"
    service_account_path: Optional[Path] = None


def load_env_file(path: Path) -> List[str]:
    """Seed ``os.environ`` from a ``KEY=value`` file and return the keys it set.

    Keys already in the environment win over the file. A missing file
    loads nothing.
    """
    if not path.exists():
        return []

    loaded: List[str] = []
    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
                loaded.append(key)
    except OSError as exc:
        logger.warning("Could not read env file %s: %s", path, exc)
    # Key names only, never values.
    logger.debug("Loaded %d setting(s) from %s: %s", len(loaded), path, ", ".join(loaded) or "-")
    return loaded


def get_config_value(key: str, default: str = "") -> str:
    """Get a configuration value from the environment."""
    return os.getenv(key, default)


def _int_value(key: str, default: int) -> int:
    raw = get_config_value(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def _float_value(key: str, default: float) -> float:
    raw = get_config_value(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc


def _flag_value(key: str) -> bool:
    return get_config_value(key, "0").strip().lower() in {"1", "true", "yes"}


def load_settings(env_file: Path | None = None) -> Settings:
    """Build ``Settings`` from the environment, reading an optional env file first."""

    env_path = env_file or Path(get_config_value("IMPORTFLOW_ENV_FILE") or DEFAULT_ENV_FILE)
    load_env_file(env_path)

    account = get_config_value("GOOGLE_SERVICE_ACCOUNT")
    return Settings(
        api_key=get_config_value("PLATFORM_API_KEY"),
        base_url=get_config_value("PLATFORM_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout=_float_value("PLATFORM_TIMEOUT", 30.0),
        reorder_target=_int_value("REORDER_TARGET", 3),
        order_recipient=get_config_value("ORDER_RECIPIENT", "warehouse@books.com"),
        smtp_host=get_config_value("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=_int_value("SMTP_PORT", 465),
        inventory_sheet_slug=get_config_value("INVENTORY_SHEET_SLUG", "inventory"),
        order_sheet_slug=get_config_value("ORDER_SHEET_SLUG", "purchase-orders"),
        attach_excel=_flag_value("ORDER_ATTACH_EXCEL"),
        sheets_spreadsheet_id=get_config_value("ORDER_SHEETS_SPREADSHEET_ID") or None,
        sheets_worksheet=get_config_value("ORDER_SHEETS_WORKSHEET", "Purchase Orders"),
        service_account_path=Path(account) if account else None,
    )
