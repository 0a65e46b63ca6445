"""Formatting of material change history."""

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal

from bakery_costing.domain.materials import FieldChange

PLACEHOLDER = "-"
DATE_FORMAT = "%Y/%m/%d %H:%M"

FIELD_LABELS = {
    "name": "Material name",
    "category": "Category",
    "price_per_gram": "Price per gram",
    "notes": "Notes",
    "purchase_amount": "Purchase amount",
    "purchase_weight": "Purchase weight",
    "management_fee_rate": "Management fee rate",
    "purchase_time": "Purchase time",
    "purchase_location": "Purchase location",
}

_DATE_FIELDS = {"purchase_time", "created_at", "updated_at"}


def format_changes(
    previous: Mapping[str, object] | None,
    new: Mapping[str, object] | None,
    changed_fields: Iterable[str],
) -> list[FieldChange]:
    """Return label and before/after display values for each changed field."""
    before = previous or {}
    after = new or {}
    return [
        FieldChange(
            label=FIELD_LABELS.get(name, name),
            previous=format_value(name, before.get(name)),
            new=format_value(name, after.get(name)),
        )
        for name in changed_fields
    ]


def format_value(name: str, value: object) -> str:
    """Render a snapshot value for display."""
    if value is None:
        return PLACEHOLDER
    if isinstance(value, datetime):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, str):
        if name in _DATE_FIELDS and value:
            try:
                return datetime.fromisoformat(value).strftime(DATE_FORMAT)
            except ValueError:
                return value
        return value
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, int | float | Decimal):
        return str(value)
    return json.dumps(value, default=str, ensure_ascii=False)


def detect_changed_fields(
    original: Mapping[str, object], updates: Mapping[str, object]
) -> list[str]:
    """Return the update keys whose value differs from the original."""
    return [key for key, value in updates.items() if original.get(key) != value]
