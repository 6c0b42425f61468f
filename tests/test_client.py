"""Platform client requests and error mapping, using a scripted session."""
import json

import pytest
import requests

from importflow.core.config import Settings
from importflow.core.errors import PlatformAPIError
from importflow.core.models import Record
from importflow.platform import client as client_module
from importflow.platform.client import PlatformClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else (json.dumps(payload) if payload is not None else "")
        self.content = self.text.encode("utf-8")

    def json(self):
        return self._payload


class ScriptedSession:
    """Returns queued responses and remembers each request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []
        self.headers = {}

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append({"method": method, "url": url, "timeout": timeout, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(*responses):
    session = ScriptedSession(*responses)
    return PlatformClient("key-123", "https://api.example.com/v1/", timeout=5, session=session), session


def test_client_sets_bearer_token_and_strips_base_url():
    """The session authenticates with a bearer token against a normalized base URL."""

    client, session = _client()

    assert session.headers["Authorization"] == "Bearer key-123"
    assert client.base_url == "https://api.example.com/v1"


def test_from_settings_requires_api_key():
    """Building a client without an API key is a configuration error."""

    with pytest.raises(ValueError, match="PLATFORM_API_KEY"):
        PlatformClient.from_settings(Settings())


def test_get_sheets_keeps_platform_order():
    """Sheets come back in the order the platform lists them."""

    client, session = _client(
        FakeResponse(payload={"data": {"sheets": [
            {"id": "s2", "slug": "purchase-orders", "name": "Orders"},
            {"id": "s1", "slug": "inventory", "name": "Inventory"},
        ]}})
    )

    sheets = client.get_sheets("wb_1")

    assert [sheet.slug for sheet in sheets] == ["purchase-orders", "inventory"]
    assert session.requests[0]["url"] == "https://api.example.com/v1/workbooks/wb_1"
    assert session.requests[0]["timeout"] == 5


def test_get_records_follows_pages(monkeypatch):
    """Record listing keeps requesting pages until a short page arrives."""

    monkeypatch.setattr(client_module, "RECORDS_PAGE_SIZE", 2)
    page = lambda ids: FakeResponse(payload={"data": {"records": [
        {"id": i, "values": {"stock": {"value": 1, "valid": True}}} for i in ids
    ]}})
    client, session = _client(page(["a", "b"]), page(["c"]))

    records = client.get_records("sheet_1")

    assert [record.id for record in records] == ["a", "b", "c"]
    assert records[0].get("stock") == 1
    assert [r["params"]["pageNumber"] for r in session.requests] == [1, 2]


def test_insert_and_update_send_json_bodies():
    """Inserts and updates send the platform's record shapes as JSON."""

    client, session = _client(FakeResponse(payload={"data": {}}), FakeResponse(payload={"data": {}}))
    record = Record.from_values({"author": "Smith, John"}, record_id="r1")

    client.insert_records("sheet_1", [{"title": {"value": "Dune"}}])
    client.update_records("sheet_1", [record])

    insert, update = session.requests
    assert (insert["method"], insert["json"]) == ("POST", [{"title": {"value": "Dune"}}])
    assert update["method"] == "PUT"
    assert update["json"] == [{"id": "r1", "values": {"author": {"value": "Smith, John", "valid": True}}}]


def test_get_records_as_csv_returns_text():
    """CSV downloads are returned as plain text."""

    client, session = _client(FakeResponse(text="title,purchase\nDune,2\n"))

    assert client.get_records_as_csv("sheet_1") == "title,purchase\nDune,2\n"
    assert session.requests[0]["url"].endswith("/sheets/sheet_1/download")


def test_get_secret_scopes_to_environment_and_space():
    """Secret lookups are scoped to the event's environment and space."""

    client, session = _client(
        FakeResponse(payload={"data": [{"name": "email", "value": "a@b.com"}]}),
        FakeResponse(payload={"data": []}),
    )

    assert client.get_secret("email", "env_1", "space_1") == "a@b.com"
    assert client.get_secret("password", "env_1") is None
    assert session.requests[0]["params"] == {"environmentId": "env_1", "spaceId": "space_1"}
    assert session.requests[1]["params"] == {"environmentId": "env_1"}


def test_http_errors_raise_platform_api_error():
    """HTTP error responses surface as PlatformAPIError with the status code."""

    client, _ = _client(FakeResponse(status_code=404, text="not found"))

    with pytest.raises(PlatformAPIError) as excinfo:
        client.get_sheets("missing")

    assert excinfo.value.status_code == 404
    assert excinfo.value.response_body == "not found"


def test_network_errors_raise_platform_api_error():
    """Connection failures surface as PlatformAPIError too."""

    client, _ = _client(requests.ConnectionError("refused"))

    with pytest.raises(PlatformAPIError, match="refused"):
        client.get_records_as_csv("sheet_1")


def test_create_workbook_posts_blueprint():
    """Workbook creation posts the sheet blueprint into the right space."""

    client, session = _client(FakeResponse(payload={"data": {"id": "wb_9"}}))

    workbook = client.create_workbook("space_1", "env_1", "Customers", [{"slug": "customers"}])

    assert workbook == {"id": "wb_9"}
    assert session.requests[0]["json"] == {
        "spaceId": "space_1",
        "environmentId": "env_1",
        "name": "Customers",
        "sheets": [{"slug": "customers"}],
    }
