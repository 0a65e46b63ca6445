"""Recipe cost and nutrition reporting."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from bakery_costing.domain.aggregates import (
    LabelNutrition,
    NutritionAggregate,
    RecipeCost,
)
from bakery_costing.domain.errors import (
    InvalidRecipeError,
    MissingPriceError,
    NotFoundError,
)
from bakery_costing.domain.recipes import Recipe
from bakery_costing.services.costing import calculate_recipe_cost
from bakery_costing.services.nutrition import aggregate_nutrition, combine_for_label

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes with resolved ingredient materials."""

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Return a recipe with its ingredients, if present."""

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes with their ingredients."""


@dataclass
class RecipeService:
    """Application service combining the cost and nutrition calculators."""

    repository: RecipeRepository

    def get_recipe(self, recipe_id: int) -> Recipe:
        """Return a recipe or raise when it does not exist."""
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    def get_summary(self, recipe_id: int) -> dict[str, object]:
        """Return cost and nutrition for a stored recipe."""
        return summarize_recipe(self.get_recipe(recipe_id))

    def list_nutrition(self) -> list[dict[str, object]]:
        """Return per-serving nutrition for every recipe that can be computed."""
        results = []
        for recipe in self.repository.list_recipes():
            try:
                aggregate = aggregate_nutrition(recipe)
            except InvalidRecipeError as exc:
                _logger.warning("Skipping recipe %s: %s", recipe.id, exc)
                continue
            results.append(
                {
                    "recipe_id": recipe.id,
                    "recipe_name": recipe.name,
                    "portion_weight": recipe.total_weight / recipe.total_portions,
                    "per_serving": aggregate.per_serving,
                    "is_partial": aggregate.is_partial,
                }
            )
        return results

    def calculate_label(
        self,
        recipe_ids: list[int],
        serving_size: Decimal,
        servings_per_package: int,
    ) -> LabelNutrition:
        """Combine the nutrition of several recipes for a packaged label."""
        aggregates = [
            aggregate_nutrition(self.get_recipe(recipe_id)) for recipe_id in recipe_ids
        ]
        return combine_for_label(aggregates, serving_size, servings_per_package)


def summarize_recipe(recipe: Recipe) -> dict[str, object]:
    """Compute cost and nutrition for a recipe.

    A missing unit price does not block the nutrition report: the cost entry is
    replaced by the affected material ids and the total of the priced lines.
    """
    nutrition = aggregate_nutrition(recipe)
    summary: dict[str, object] = {
        "recipe_id": recipe.id,
        "name": recipe.name,
        "total_weight": recipe.total_weight,
        "total_portions": recipe.total_portions,
        "nutrition": serialize_nutrition(nutrition),
    }
    try:
        summary["cost"] = serialize_cost(calculate_recipe_cost(recipe))
    except MissingPriceError as exc:
        summary["cost"] = None
        summary["missing_prices"] = {
            "material_ids": list(exc.material_ids),
            "partial_total": exc.partial_total,
        }
    return summary


def serialize_cost(cost: RecipeCost) -> dict[str, object]:
    return {
        "total_cost": cost.total_cost,
        "cost_per_portion": cost.cost_per_portion,
        "cost_per_gram": cost.cost_per_gram,
    }


def serialize_nutrition(aggregate: NutritionAggregate) -> dict[str, object]:
    return {
        "per_batch": aggregate.per_batch,
        "per_serving": aggregate.per_serving,
        "per_100g": aggregate.per_100g,
        "coverage": aggregate.coverage,
        "is_partial": aggregate.is_partial,
        "missing_material_ids": list(aggregate.missing_material_ids),
    }
