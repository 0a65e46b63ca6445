"""Nutrition aggregation for recipes and packaged labels.

All arithmetic uses ``Decimal`` at full precision; rounding for display lives
in ``bakery_costing.services.labels``.
"""

from collections.abc import Sequence
from decimal import Decimal

from bakery_costing.domain.aggregates import LabelNutrition, NutritionAggregate
from bakery_costing.domain.errors import InvalidRecipeError
from bakery_costing.domain.materials import NUTRIENT_FIELDS
from bakery_costing.domain.recipes import Recipe

_HUNDRED = Decimal(100)


def aggregate_nutrition(recipe: Recipe) -> NutritionAggregate:
    """Aggregate per-100 g material nutrition into recipe totals.

    Each field is summed independently over ingredient lines with a positive
    quantity whose material has a value for that field. Lines without a value
    are left out of the sum and reported through the coverage ratios.
    """
    if recipe.total_portions < 1:
        raise InvalidRecipeError(
            f"total_portions must be at least 1, got {recipe.total_portions}"
        )

    per_batch = _zeros()
    covered_mass = _zeros()
    ingredient_mass = Decimal(0)
    missing: list[int] = []

    for ingredient in recipe.ingredients:
        if not ingredient.contributes:
            continue
        ingredient_mass += ingredient.quantity
        facts = ingredient.material.nutrition
        if facts is None:
            if ingredient.material.id not in missing:
                missing.append(ingredient.material.id)
            continue
        factor = ingredient.quantity / _HUNDRED
        for name in NUTRIENT_FIELDS:
            value = facts.value(name)
            if value is None:
                continue
            per_batch[name] += factor * value
            covered_mass[name] += ingredient.quantity

    portions = Decimal(recipe.total_portions)
    per_serving = {name: per_batch[name] / portions for name in NUTRIENT_FIELDS}
    per_100g = None
    if recipe.total_weight > 0:
        per_100g = {
            name: per_batch[name] * _HUNDRED / recipe.total_weight
            for name in NUTRIENT_FIELDS
        }

    return NutritionAggregate(
        per_batch=per_batch,
        per_serving=per_serving,
        per_100g=per_100g,
        covered_mass=covered_mass,
        ingredient_mass=ingredient_mass,
        total_weight=recipe.total_weight,
        total_portions=recipe.total_portions,
        missing_material_ids=tuple(missing),
    )


def combine_for_label(
    aggregates: Sequence[NutritionAggregate],
    serving_size: Decimal,
    servings_per_package: int,
) -> LabelNutrition:
    """Blend recipe aggregates into label values for a given serving size."""
    if not aggregates:
        raise InvalidRecipeError("At least one recipe is required")
    if serving_size <= 0:
        raise InvalidRecipeError(f"serving_size must be above 0, got {serving_size}")
    if servings_per_package < 1:
        raise InvalidRecipeError(
            f"servings_per_package must be at least 1, got {servings_per_package}"
        )

    total_weight = sum((agg.total_weight for agg in aggregates), Decimal(0))
    if total_weight <= 0:
        raise InvalidRecipeError("Combined recipe weight must be above 0")

    per_batch = _zeros()
    covered_mass = _zeros()
    for agg in aggregates:
        for name in NUTRIENT_FIELDS:
            per_batch[name] += agg.per_batch[name]
            covered_mass[name] += agg.covered_mass[name]

    per_100g = {
        name: per_batch[name] * _HUNDRED / total_weight for name in NUTRIENT_FIELDS
    }
    per_serving = {
        name: per_100g[name] * serving_size / _HUNDRED for name in NUTRIENT_FIELDS
    }
    return LabelNutrition(
        per_serving=per_serving,
        per_100g=per_100g,
        serving_size=serving_size,
        servings_per_package=servings_per_package,
        total_weight=serving_size * servings_per_package,
        covered_mass=covered_mass,
        ingredient_mass=sum((agg.ingredient_mass for agg in aggregates), Decimal(0)),
    )


def _zeros() -> dict[str, Decimal]:
    return {name: Decimal(0) for name in NUTRIENT_FIELDS}
