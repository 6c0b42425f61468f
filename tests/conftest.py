"""Pytest configuration and in-memory stand-ins for the platform and mail relay."""
import copy
import csv
import io
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from importflow.core.config import Settings
from importflow.core.models import Record, SheetRef
from importflow.platform.events import Event


class FakePlatformClient:
    """Keeps workbooks, sheets, and secrets in memory and records every call."""

    def __init__(self) -> None:
        self.sheets: Dict[str, List[SheetRef]] = {}
        self.records: Dict[str, List[Record]] = {}
        self.secrets: Dict[str, str] = {}
        self.created_workbooks: List[Dict[str, Any]] = []
        self.inserted: List[tuple] = []
        self.updated: List[tuple] = []
        self.calls: List[str] = []

    def add_sheet(self, workbook_id: str, sheet_id: str, slug: str, records: List[Record] | None = None) -> None:
        self.sheets.setdefault(workbook_id, []).append(SheetRef(id=sheet_id, slug=slug, name=slug.title()))
        self.records[sheet_id] = list(records or [])

    def create_workbook(self, space_id, environment_id, name, sheets):
        self.calls.append("create_workbook")
        workbook = {"spaceId": space_id, "environmentId": environment_id, "name": name, "sheets": sheets}
        self.created_workbooks.append(workbook)
        return {"id": f"wb_{len(self.created_workbooks)}", **workbook}

    def get_sheets(self, workbook_id: str) -> List[SheetRef]:
        self.calls.append("get_sheets")
        return list(self.sheets.get(workbook_id, []))

    def get_records(self, sheet_id: str) -> List[Record]:
        self.calls.append("get_records")
        return copy.deepcopy(self.records.get(sheet_id, []))

    def insert_records(self, sheet_id: str, values) -> None:
        self.calls.append("insert_records")
        values = list(values)
        self.inserted.append((sheet_id, values))
        for item in values:
            self.records.setdefault(sheet_id, []).append(Record.from_dict({"values": item}))

    def update_records(self, sheet_id: str, records) -> None:
        self.calls.append("update_records")
        records = list(records)
        self.updated.append((sheet_id, records))
        by_id = {record.id: record for record in records}
        for stored in self.records.get(sheet_id, []):
            if stored.id in by_id:
                stored.values.update(copy.deepcopy(by_id[stored.id].values))

    def get_records_as_csv(self, sheet_id: str) -> str:
        self.calls.append("get_records_as_csv")
        records = self.records.get(sheet_id, [])
        headers: List[str] = []
        for record in records:
            for key in record.values:
                if key not in headers:
                    headers.append(key)
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(headers)
        for record in records:
            writer.writerow(["" if record.get(key) is None else record.get(key) for key in headers])
        return buffer.getvalue()

    def get_secret(self, name: str, environment_id: str, space_id: str | None = None) -> Optional[str]:
        self.calls.append("get_secret")
        return self.secrets.get(name)


class FakeTransport:
    """Mail transport that keeps sent messages instead of talking SMTP."""

    instances: List["FakeTransport"] = []

    def __init__(self, host: str, port: int, username: str, password: str) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sent: List[Any] = []
        FakeTransport.instances.append(self)

    def __enter__(self) -> "FakeTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        return None

    def send(self, message) -> None:
        self.sent.append(message)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's local env file and settings out of the tests."""

    monkeypatch.setenv("IMPORTFLOW_ENV_FILE", str(tmp_path / "missing.env"))
    for key in (
        "PLATFORM_API_KEY",
        "PLATFORM_BASE_URL",
        "PLATFORM_TIMEOUT",
        "REORDER_TARGET",
        "ORDER_RECIPIENT",
        "SMTP_HOST",
        "SMTP_PORT",
        "INVENTORY_SHEET_SLUG",
        "ORDER_SHEET_SLUG",
        "ORDER_ATTACH_EXCEL",
        "ORDER_SHEETS_SPREADSHEET_ID",
        "ORDER_SHEETS_WORKSHEET",
        "GOOGLE_SERVICE_ACCOUNT",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="test-key")


@pytest.fixture
def fake_client() -> FakePlatformClient:
    return FakePlatformClient()


@pytest.fixture
def transport():
    """Provide the fake transport class with a clean list of instances."""

    FakeTransport.instances = []
    return FakeTransport


@pytest.fixture
def inventory_client(fake_client: FakePlatformClient) -> FakePlatformClient:
    """A workbook with an inventory sheet and an empty order sheet plus mail secrets."""

    fake_client.add_sheet(
        "wb_1",
        "sheet_inventory",
        "inventory",
        [
            Record.from_values({"title": "Dune", "author": "Herbert, Frank", "stock": 1}, record_id="r1"),
            Record.from_values({"title": "Emma", "author": "Austen, Jane", "stock": 5}, record_id="r2"),
            Record.from_values({"title": "Ulysses", "author": "Joyce, James", "stock": 0}, record_id="r3"),
        ],
    )
    fake_client.add_sheet("wb_1", "sheet_orders", "purchase-orders")
    fake_client.secrets.update({"email": "buyer@books.com", "password": "hunter2"})
    return fake_client


@pytest.fixture
def make_event(fake_client: FakePlatformClient):
    """Build events whose secrets are served by the fake client."""

    def _make(topic: str, **context: Any) -> Event:
        context.setdefault("environmentId", "env_1")
        context.setdefault("spaceId", "space_1")
        return Event(
            topic=topic,
            context=context,
            secret_resolver=lambda name: fake_client.get_secret(name, context["environmentId"]),
        )

    return _make
