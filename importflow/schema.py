"""Workbook blueprint created for every new space."""
from __future__ import annotations

from copy import deepcopy
from datetime import date
from typing import Any, Dict, List

# Declared only. The platform's dedupe plugin runs this job (match on
# customerId, keep the last record); importflow registers no handler for it.
DEDUPE_ACTION = "dedupe-customers"

CUSTOMERS_SHEET: Dict[str, Any] = {
    "name": "Customers",
    "slug": "customers",
    "fields": [
        {
            "key": "customerID",
            "type": "string",
            "label": "Customer ID",
            "constraints": [{"type": "required"}, {"type": "unique"}],
        },
        {
            "key": "parentCustomerID",
            "type": "reference",
            "label": "Parent Customer",
            "config": {"ref": "customers", "key": "customerId", "relationship": "has-one"},
        },
        {"key": "firstName", "type": "string", "label": "First Name"},
        {"key": "lastName", "type": "string", "label": "Last Name"},
        {"key": "email", "type": "string", "label": "Email"},
        {"key": "verified", "type": "boolean", "label": "Verified"},
    ],
    "actions": [
        {
            "operation": DEDUPE_ACTION,
            "mode": "background",
            "label": "Dedupe customer records",
            "description": "Remove duplicate customers",
        }
    ],
}

PAYMENT_PROFILES_SHEET: Dict[str, Any] = {
    "name": "Payment Profiles",
    "slug": "profiles",
    "fields": [
        {
            "key": "customerId",
            "type": "reference",
            "label": "Customer",
            "config": {"ref": "customers", "key": "customerId", "relationship": "has-one"},
        },
    ],
}


def workbook_name(today: date | None = None) -> str:
    """Name workbooks after their creation date, e.g. ``10/18/2026 Customers``."""

    today = today or date.today()
    return f"{today.strftime('%m/%d/%Y')} Customers"


def workbook_sheets() -> List[Dict[str, Any]]:
    """Return fresh copies of the sheet blueprints so callers can't mutate the defaults."""

    return [deepcopy(CUSTOMERS_SHEET), deepcopy(PAYMENT_PROFILES_SHEET)]
