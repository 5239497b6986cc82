from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from finance_tracker.domain.errors import ValidationError
from finance_tracker.models import DEFAULT_CATEGORY, Transaction

TRANSACTION_TYPES = ("income", "expense")


def parse_date(value: str | date | datetime | None) -> date | None:
    """Calendar date from a date, datetime or ISO string; None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        try:
            return date.fromisoformat(raw)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def parse_amount(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def normalize_category(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_CATEGORY


def validate_transaction(payload: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    amount = parse_amount(payload.get("amount"))
    if amount is None or amount <= 0:
        errors.append("Amount must be greater than 0")

    raw_date = payload.get("date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        errors.append("Date is required")
    elif parse_date(raw_date) is None:
        errors.append("Invalid date format")

    description = payload.get("description")
    if not isinstance(description, str) or not description.strip():
        errors.append("Description is required")

    if payload.get("type") not in TRANSACTION_TYPES:
        errors.append("Type must be either income or expense")

    return errors


def build_transaction_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """Validated, storable fields for a create or update payload."""
    errors = validate_transaction(payload)
    if errors:
        raise ValidationError(errors)
    return {
        "amount": float(payload["amount"]),
        "date": str(parse_date(payload["date"])),
        "description": str(payload["description"]).strip(),
        "category": normalize_category(payload.get("category")),
        "type": payload["type"],
    }


def transaction_from_document(document: dict[str, Any]) -> Transaction:
    """Every transaction read from the store passes through here before aggregation."""
    data = dict(document)
    data["category"] = normalize_category(data.get("category"))
    parsed_date = parse_date(data.get("date"))
    if parsed_date is not None:
        data["date"] = parsed_date
    return Transaction.model_validate(data)
