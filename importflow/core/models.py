"""Data models for platform records, sheets, and purchase-order lines."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class CellMessage:
    """A note attached to a single field, shown to the reviewer in the sheet."""

    type: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class Cell:
    """The value of one field of a record together with its validity state."""

    value: Any = None
    valid: bool = True
    messages: List[CellMessage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Cell":
        messages = [
            CellMessage(type=item.get("type", "info"), message=item.get("message", ""))
            for item in raw.get("messages") or []
        ]
        return cls(value=raw.get("value"), valid=raw.get("valid", True), messages=messages)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"value": self.value, "valid": self.valid}
        if self.messages:
            payload["messages"] = [message.to_dict() for message in self.messages]
        return payload


@dataclass
class Record:
    """One row of a sheet, keyed by field."""

    id: Optional[str] = None
    values: Dict[str, Cell] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Record":
        """Build a record from the platform's ``{"id", "values"}`` shape."""

        values = {key: Cell.from_dict(cell or {}) for key, cell in (raw.get("values") or {}).items()}
        return cls(id=raw.get("id"), values=values)

    @classmethod
    def from_values(cls, values: Dict[str, Any], record_id: Optional[str] = None) -> "Record":
        """Build a record from plain field values (handy for tests and fixtures)."""

        return cls(id=record_id, values={key: Cell(value=value) for key, value in values.items()})

    def get(self, key: str) -> Any:
        cell = self.values.get(key)
        return cell.value if cell else None

    def set(self, key: str, value: Any) -> None:
        cell = self.values.setdefault(key, Cell())
        cell.value = value

    def add_comment(self, key: str, message: str) -> None:
        """Attach an informational note to a field."""

        self.values.setdefault(key, Cell()).messages.append(CellMessage("info", message))

    def add_error(self, key: str, message: str) -> None:
        """Flag a field as invalid with a reviewer-facing message."""

        cell = self.values.setdefault(key, Cell())
        cell.valid = False
        cell.messages.append(CellMessage("error", message))

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"values": {key: cell.to_dict() for key, cell in self.values.items()}}
        if self.id is not None:
            payload["id"] = self.id
        return payload


@dataclass
class SheetRef:
    """A sheet inside a workbook as reported by the platform."""

    id: str
    slug: str
    name: str = ""

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SheetRef":
        return cls(id=raw["id"], slug=raw.get("slug") or "", name=raw.get("name") or "")


@dataclass
class PurchaseOrderLine:
    """A source record projected into the order sheet with its computed quantity."""

    fields: Dict[str, Cell]
    quantity: int
    source_id: Optional[str] = None

    def to_values(self) -> Dict[str, Any]:
        """Return the insert payload: every passthrough field plus ``purchase``."""

        values = {key: cell.to_dict() for key, cell in self.fields.items()}
        values["purchase"] = {"value": self.quantity, "valid": True}
        return values
