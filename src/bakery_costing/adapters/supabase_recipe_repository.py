"""Supabase implementation for recipes."""

import logging
from dataclasses import dataclass

from supabase import Client

from bakery_costing.adapters.supabase_material_repository import load_materials
from bakery_costing.domain.numbers import parse_portions, require_decimal
from bakery_costing.domain.recipes import Recipe, RecipeIngredient
from bakery_costing.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository resolving ingredient materials."""

    client: Client

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe with its ingredients, if present."""
        return self.load_recipes([recipe_id]).get(recipe_id)

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes with their ingredients."""
        response = (
            self.client.table("recipes")
            .select("*")
            .order("sort_order")
            .order("updated_at", desc=True)
            .execute()
        )
        rows = response.data or []
        return self._build(rows)

    def load_recipes(self, recipe_ids: list[int]) -> dict[int, Recipe]:
        """Load recipes keyed by id."""
        if not recipe_ids:
            return {}
        response = (
            self.client.table("recipes").select("*").in_("id", recipe_ids).execute()
        )
        return {recipe.id: recipe for recipe in self._build(response.data or [])}

    def _build(self, rows: list[dict[str, object]]) -> list[Recipe]:
        if not rows:
            return []
        ingredients_response = (
            self.client.table("recipe_ingredients")
            .select("*")
            .in_("recipe_id", [row["id"] for row in rows])
            .order("id")
            .execute()
        )
        ingredient_rows = ingredients_response.data or []
        materials = load_materials(
            self.client, sorted({row["material_id"] for row in ingredient_rows})
        )

        by_recipe: dict[int, list[RecipeIngredient]] = {}
        for row in ingredient_rows:
            material = materials.get(row["material_id"])
            if material is None:
                _logger.warning(
                    "Recipe %s skips ingredient with unknown material %s",
                    row["recipe_id"],
                    row["material_id"],
                )
                continue
            by_recipe.setdefault(row["recipe_id"], []).append(
                RecipeIngredient(
                    material=material,
                    quantity=require_decimal(row.get("quantity"), field="quantity"),
                )
            )

        return [
            Recipe(
                id=int(row["id"]),
                name=str(row.get("name", "")),
                category=str(row.get("category", "")),
                total_weight=require_decimal(
                    row.get("total_weight"), field="total_weight"
                ),
                total_portions=parse_portions(row.get("total_portions")),
                ingredients=by_recipe.get(row["id"], []),
                description=row.get("description"),
            )
            for row in rows
        ]
