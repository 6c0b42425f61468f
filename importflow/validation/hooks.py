"""Record hooks: per-record callbacks run whenever a sheet receives a commit."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from importflow.core.models import Record
from importflow.platform.client import PlatformClient
from importflow.platform.events import Event, Listener

logger = logging.getLogger(__name__)

RecordCallback = Callable[[Record], Optional[Record]]


def apply_record_hook(records: List[Record], callback: RecordCallback) -> List[Record]:
    """Run ``callback`` over each record and return the ones it changed.

    The callback sees one record at a time and must not rely on any other
    record, so batches can be split or re-run freely.
    """

    changed: List[Record] = []
    for record in records:
        result = callback(record)
        if result is not None:
            changed.append(result)
    return changed


def record_hook(sheet_slug: str, callback: RecordCallback, client: PlatformClient) -> Callable[[Listener], None]:
    """Build a plugin that runs ``callback`` on the records of ``sheet_slug`` after each commit."""

    def _on_commit(event: Event) -> None:
        sheet_id = event.context["sheetId"]
        records = client.get_records(sheet_id)
        changed = apply_record_hook(records, callback)
        logger.info(
            "Record hook on %s: %d of %d records changed", sheet_slug, len(changed), len(records)
        )
        if changed:
            client.update_records(sheet_id, changed)

    _on_commit.__name__ = f"record_hook[{sheet_slug}]"

    def _plugin(listener: Listener) -> None:
        listener.on("commit:created", _on_commit, {"sheetSlug": sheet_slug})

    return _plugin
