"""HTTP client for the hosted import platform's REST API."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from importflow.core.config import Settings
from importflow.core.errors import PlatformAPIError
from importflow.core.models import Record, SheetRef

logger = logging.getLogger(__name__)

RECORDS_PAGE_SIZE = 1000


class PlatformClient:
    """Thin wrapper around the platform API used by every handler.

    The client holds no per-event state, so one instance can serve any
    number of events. Failed calls raise ``PlatformAPIError``; nothing is
    retried here.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Authorization": f"Bearer {api_key}", "Accept": "application/json"}
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlatformClient":
        if not settings.api_key:
            raise ValueError("PLATFORM_API_KEY is required to call the import platform")
        return cls(settings.api_key, settings.base_url, timeout=settings.timeout)

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise PlatformAPIError(f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 400:
            raise PlatformAPIError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    def _data(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._request(method, path, **kwargs)
        if not response.content:
            return None
        return response.json().get("data")

    # Workbooks -----------------------------------------------------------

    def create_workbook(
        self, space_id: str, environment_id: str, name: str, sheets: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """Create a workbook with the given sheet blueprints inside a space."""

        body = {
            "spaceId": space_id,
            "environmentId": environment_id,
            "name": name,
            "sheets": sheets,
        }
        return self._data("POST", "workbooks", json=body)

    def get_sheets(self, workbook_id: str) -> List[SheetRef]:
        """Return the workbook's sheets in the order the platform reports them."""

        data = self._data("GET", f"workbooks/{workbook_id}") or {}
        return [SheetRef.from_dict(sheet) for sheet in data.get("sheets") or []]

    # Records -------------------------------------------------------------

    def get_records(self, sheet_id: str) -> List[Record]:
        """Fetch every record of a sheet, following pages until exhausted."""

        records: List[Record] = []
        page = 1
        while True:
            data = self._data(
                "GET",
                f"sheets/{sheet_id}/records",
                params={"pageSize": RECORDS_PAGE_SIZE, "pageNumber": page},
            ) or {}
            batch = data.get("records") or []
            records.extend(Record.from_dict(raw) for raw in batch)
            if len(batch) < RECORDS_PAGE_SIZE:
                break
            page += 1
        logger.debug("Fetched %d records from sheet %s", len(records), sheet_id)
        return records

    def insert_records(self, sheet_id: str, values: Iterable[Dict[str, Any]]) -> Any:
        """Append new records given as ``{field: {"value": ...}}`` mappings."""

        return self._data("POST", f"sheets/{sheet_id}/records", json=list(values))

    def update_records(self, sheet_id: str, records: Iterable[Record]) -> Any:
        """Write back existing records, matched by their ids."""

        return self._data("PUT", f"sheets/{sheet_id}/records", json=[r.to_dict() for r in records])

    def get_records_as_csv(self, sheet_id: str) -> str:
        """Export a sheet's current records as CSV text."""

        response = self._request("GET", f"sheets/{sheet_id}/download", headers={"Accept": "text/csv"})
        return response.text

    # Secrets -------------------------------------------------------------

    def get_secret(self, name: str, environment_id: str, space_id: str | None = None) -> Optional[str]:
        """Return a secret's value for the environment (and space), or ``None``."""

        params = {"environmentId": environment_id}
        if space_id:
            params["spaceId"] = space_id
        secrets = self._data("GET", "secrets", params=params) or []
        for secret in secrets:
            if secret.get("name") == name:
                return secret.get("value")
        return None
