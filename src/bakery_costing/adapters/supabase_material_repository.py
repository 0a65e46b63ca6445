"""Supabase implementation for materials and nutrition facts."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from bakery_costing.domain.materials import NUTRIENT_FIELDS, Material, NutritionFacts
from bakery_costing.domain.numbers import parse_decimal
from bakery_costing.services.materials import MaterialRepository


@dataclass
class SupabaseMaterialRepository(MaterialRepository):
    """Supabase-backed repository for materials."""

    client: Client

    def get_material(self, material_id: int) -> Material | None:
        """Return a material with its nutrition facts, if present."""
        return load_materials(self.client, [material_id]).get(material_id)

    def list_materials(self) -> list[Material]:
        """Return all materials in display order."""
        response = (
            self.client.table("materials")
            .select("*")
            .order("sort_order")
            .order("updated_at", desc=True)
            .execute()
        )
        rows = response.data or []
        nutrition = _load_nutrition(self.client, [row["id"] for row in rows])
        return [parse_material(row, nutrition.get(row["id"])) for row in rows]

    def create_material(self, payload: dict[str, object]) -> Material:
        """Create a material and return it."""
        response = self.client.table("materials").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create material")
        return parse_material(response.data[0], None)

    def update_material(self, material_id: int, payload: dict[str, object]) -> Material:
        """Update a material and return it."""
        response = (
            self.client.table("materials")
            .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", material_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update material")
        nutrition = _load_nutrition(self.client, [material_id])
        return parse_material(response.data[0], nutrition.get(material_id))

    def delete_material(self, material_id: int) -> None:
        """Delete a material; ingredient lines and nutrition cascade."""
        self.client.table("materials").delete().eq("id", material_id).execute()

    def upsert_nutrition(
        self, material_id: int, payload: dict[str, object]
    ) -> NutritionFacts:
        """Create or replace the nutrition facts of a material."""
        existing = (
            self.client.table("nutrition_facts")
            .select("id")
            .eq("material_id", material_id)
            .limit(1)
            .execute()
        )
        if existing.data:
            response = (
                self.client.table("nutrition_facts")
                .update(payload)
                .eq("id", existing.data[0]["id"])
                .execute()
            )
        else:
            response = (
                self.client.table("nutrition_facts")
                .insert({"material_id": material_id, **payload})
                .execute()
            )
        if not response.data:
            raise RuntimeError("Failed to save nutrition facts")
        return parse_nutrition(response.data[0])


def load_materials(client: Client, material_ids: list[int]) -> dict[int, Material]:
    """Load materials with nutrition facts keyed by id."""
    if not material_ids:
        return {}
    response = (
        client.table("materials").select("*").in_("id", material_ids).execute()
    )
    rows = response.data or []
    nutrition = _load_nutrition(client, [row["id"] for row in rows])
    return {row["id"]: parse_material(row, nutrition.get(row["id"])) for row in rows}


def _load_nutrition(
    client: Client, material_ids: list[int]
) -> dict[int, NutritionFacts]:
    if not material_ids:
        return {}
    response = (
        client.table("nutrition_facts")
        .select("*")
        .in_("material_id", material_ids)
        .execute()
    )
    return {row["material_id"]: parse_nutrition(row) for row in response.data or []}


def parse_nutrition(row: dict[str, object]) -> NutritionFacts:
    """Parse a nutrition_facts row into per-100 g values."""
    return NutritionFacts(
        **{name: parse_decimal(row.get(name), field=name) for name in NUTRIENT_FIELDS}
    )


def parse_material(
    row: dict[str, object], nutrition: NutritionFacts | None
) -> Material:
    """Parse a materials row into a domain model."""
    purchase_raw = row.get("purchase_time")
    purchase_time = (
        datetime.fromisoformat(purchase_raw)
        if isinstance(purchase_raw, str) and purchase_raw
        else None
    )
    return Material(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        category=str(row.get("category", "")),
        price_per_gram=parse_decimal(
            row.get("price_per_gram"), field="price_per_gram"
        ),
        nutrition=nutrition,
        notes=row.get("notes"),
        purchase_amount=parse_decimal(
            row.get("purchase_amount"), field="purchase_amount"
        ),
        purchase_weight=parse_decimal(
            row.get("purchase_weight"), field="purchase_weight"
        ),
        management_fee_rate=parse_decimal(
            row.get("management_fee_rate"), field="management_fee_rate"
        ),
        purchase_time=purchase_time,
        purchase_location=row.get("purchase_location"),
    )
