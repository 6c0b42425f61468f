"""Listener wiring: which handler runs for which platform event."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Optional

from importflow.core.config import Settings
from importflow.export.mailer import MailTransportFactory
from importflow.platform.client import PlatformClient
from importflow.platform.events import Event, Listener
from importflow.processing.pipeline import run_purchase_order_job
from importflow.schema import workbook_name, workbook_sheets
from importflow.validation.hooks import record_hook
from importflow.validation.names import normalize_author

logger = logging.getLogger(__name__)

MAP_JOB = "workbook:map"
CUSTOMERS_SLUG = "customers"


def create_customer_workbook(event: Event, client: PlatformClient, today: date | None = None) -> Dict[str, Any]:
    """Create the dated Customers workbook in the space that was just created."""

    space_id = event.context["spaceId"]
    environment_id = event.context["environmentId"]
    name = workbook_name(today)
    workbook = client.create_workbook(space_id, environment_id, name, workbook_sheets())
    logger.info("Created workbook %r in space %s", name, space_id)
    return workbook


def secret_resolver(client: PlatformClient, context: Dict[str, Any]) -> Callable[[str], Optional[str]]:
    """Resolve secrets against the event's environment and space on every call."""

    def _resolve(name: str) -> Optional[str]:
        return client.get_secret(name, context["environmentId"], context.get("spaceId"))

    return _resolve


def event_from_payload(raw: Dict[str, Any], client: PlatformClient) -> Event:
    """Build an ``Event`` whose secrets come from the platform's secret store."""

    context = dict(raw.get("context") or {})
    resolver = secret_resolver(client, context) if context.get("environmentId") else None
    return Event.from_dict({**raw, "context": context}, secret_resolver=resolver)


def build_listener(
    client: PlatformClient,
    settings: Settings,
    transport_factory: MailTransportFactory | None = None,
) -> Listener:
    """Register every handler on a new listener."""

    listener = Listener()

    def on_space_created(event: Event) -> None:
        create_customer_workbook(event, client)

    def on_map_completed(event: Event) -> None:
        run_purchase_order_job(event, client, settings, transport_factory=transport_factory)

    listener.on("space:created", on_space_created)
    listener.use(record_hook(CUSTOMERS_SLUG, normalize_author, client))
    listener.on("job:completed", on_map_completed, {"job": MAP_JOB})
    return listener
