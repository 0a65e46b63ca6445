"""Material management with change history."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from bakery_costing.domain.errors import NotFoundError
from bakery_costing.domain.materials import (
    NUTRIENT_FIELDS,
    Material,
    MaterialHistoryEntry,
    NutritionFacts,
)
from bakery_costing.domain.numbers import parse_decimal
from bakery_costing.services.costing import derive_price_per_gram
from bakery_costing.services.history import detect_changed_fields, format_changes

ACTION_CREATE = "CREATE"
ACTION_UPDATE = "UPDATE"
ACTION_DELETE = "DELETE"

PURCHASE_FIELDS = ("purchase_amount", "purchase_weight", "management_fee_rate")

_logger = logging.getLogger(__name__)


class MaterialRepository(Protocol):
    """Persistence interface for materials and their nutrition facts."""

    def get_material(self, material_id: int) -> Material | None:
        """Return a material with its nutrition facts, if present."""

    def list_materials(self) -> list[Material]:
        """Return all materials in display order."""

    def create_material(self, payload: dict[str, object]) -> Material:
        """Create a material and return it."""

    def update_material(self, material_id: int, payload: dict[str, object]) -> Material:
        """Update a material and return it."""

    def delete_material(self, material_id: int) -> None:
        """Delete a material."""

    def upsert_nutrition(
        self, material_id: int, payload: dict[str, object]
    ) -> NutritionFacts:
        """Create or replace the nutrition facts of a material."""


class MaterialHistoryRepository(Protocol):
    """Persistence interface for material change history."""

    def create_entry(  # noqa: PLR0913
        self,
        material_id: int,
        action: str,
        previous_data: dict[str, object] | None,
        new_data: dict[str, object] | None,
        changed_fields: list[str],
        change_description: str,
    ) -> None:
        """Record a history entry."""

    def list_entries(self, material_id: int) -> list[MaterialHistoryEntry]:
        """Return history entries for a material, newest first."""


@dataclass
class MaterialService:
    """Application service for material CRUD that records history."""

    repository: MaterialRepository
    history_repository: MaterialHistoryRepository

    def get_material(self, material_id: int) -> Material:
        """Return a material or raise when it does not exist."""
        material = self.repository.get_material(material_id)
        if material is None:
            raise NotFoundError("Material", material_id)
        return material

    def create_material(self, payload: dict[str, object]) -> Material:
        """Create a material, deriving its unit price from purchase data."""
        created = self.repository.create_material(_with_derived_price(payload))
        self.history_repository.create_entry(
            material_id=created.id,
            action=ACTION_CREATE,
            previous_data=None,
            new_data=material_snapshot(created),
            changed_fields=[],
            change_description="Material created",
        )
        _logger.info("Material created: id=%s name=%s", created.id, created.name)
        return created

    def update_material(self, material_id: int, payload: dict[str, object]) -> Material:
        """Update a material and record which fields changed."""
        original = self.get_material(material_id)
        resolved = _with_derived_price(payload, original)
        updated = self.repository.update_material(material_id, resolved)

        before = material_snapshot(original)
        after = material_snapshot(updated)
        changed = detect_changed_fields(
            before, {key: after.get(key) for key in resolved if key in after}
        )
        if changed:
            self.history_repository.create_entry(
                material_id=material_id,
                action=ACTION_UPDATE,
                previous_data=before,
                new_data=after,
                changed_fields=changed,
                change_description=f"Updated fields: {', '.join(changed)}",
            )
            _logger.info("Material updated: id=%s fields=%s", material_id, changed)
        return updated

    def delete_material(self, material_id: int) -> None:
        """Delete a material, recording its last state first."""
        original = self.get_material(material_id)
        self.history_repository.create_entry(
            material_id=material_id,
            action=ACTION_DELETE,
            previous_data=material_snapshot(original),
            new_data=None,
            changed_fields=[],
            change_description="Material deleted",
        )
        self.repository.delete_material(material_id)
        _logger.info("Material deleted: id=%s", material_id)

    def set_nutrition(
        self, material_id: int, payload: dict[str, object]
    ) -> NutritionFacts:
        """Store per-100 g nutrition facts for a material."""
        self.get_material(material_id)
        cleaned = {name: payload.get(name) for name in NUTRIENT_FIELDS}
        return self.repository.upsert_nutrition(material_id, cleaned)

    def get_history(self, material_id: int) -> list[dict[str, object]]:
        """Return display-ready history entries for a material."""
        entries = self.history_repository.list_entries(material_id)
        return [
            {
                "id": entry.id,
                "action": entry.action,
                "created_at": entry.created_at.isoformat()
                if entry.created_at
                else None,
                "description": entry.change_description,
                "changes": [
                    {
                        "label": change.label,
                        "previous": change.previous,
                        "new": change.new,
                    }
                    for change in format_changes(
                        entry.previous_data, entry.new_data, entry.changed_fields
                    )
                ],
            }
            for entry in entries
        ]


def material_snapshot(material: Material) -> dict[str, object]:
    """Return the JSON-friendly editable fields of a material."""
    return {
        "name": material.name,
        "category": material.category,
        "price_per_gram": _decimal_text(material.price_per_gram),
        "notes": material.notes,
        "purchase_amount": _decimal_text(material.purchase_amount),
        "purchase_weight": _decimal_text(material.purchase_weight),
        "management_fee_rate": _decimal_text(material.management_fee_rate),
        "purchase_time": _datetime_text(material.purchase_time),
        "purchase_location": material.purchase_location,
    }


def _with_derived_price(
    payload: dict[str, object], original: Material | None = None
) -> dict[str, object]:
    """Fill price_per_gram from purchase fields when it is not given.

    On update, purchase fields missing from the payload come from the stored
    material, and an update that touches no purchase field keeps its price.
    """
    if payload.get("price_per_gram") not in (None, ""):
        return payload
    if original is not None and not any(name in payload for name in PURCHASE_FIELDS):
        return payload
    values = {
        name: parse_decimal(payload[name], field=name)
        if name in payload
        else getattr(original, name, None)
        for name in PURCHASE_FIELDS
    }
    price = derive_price_per_gram(
        values["purchase_amount"],
        values["purchase_weight"],
        values["management_fee_rate"],
    )
    if price is None:
        return payload
    return {**payload, "price_per_gram": str(price.quantize(Decimal("0.0001")))}


def _decimal_text(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


def _datetime_text(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
