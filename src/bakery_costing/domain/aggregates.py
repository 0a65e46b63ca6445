"""Derived cost and nutrition results; computed on demand, never persisted."""

from dataclasses import dataclass
from decimal import Decimal

from bakery_costing.domain.errors import InvalidRecipeError
from bakery_costing.domain.materials import NUTRIENT_FIELDS


@dataclass(frozen=True)
class RecipeCost:
    """Cost totals for one recipe batch."""

    total_cost: Decimal
    cost_per_portion: Decimal
    cost_per_gram: Decimal | None

    def require_cost_per_gram(self) -> Decimal:
        """Return cost per gram or fail when the recipe has no weight."""
        if self.cost_per_gram is None:
            raise InvalidRecipeError("Cost per gram requires a total weight above 0")
        return self.cost_per_gram


@dataclass(frozen=True)
class NutritionAggregate:
    """Nutrition totals of a recipe in three normalized views.

    ``covered_mass`` holds, per field, the grams of contributing ingredients
    whose material had a value for that field; ``ingredient_mass`` is the
    grams of all contributing ingredients.

    Coverage divides by ``ingredient_mass`` rather than ``total_weight``: the
    finished batch weighs less than its inputs after baking loss, and dividing
    by it would push complete data above a ratio of 1.
    """

    per_batch: dict[str, Decimal]
    per_serving: dict[str, Decimal]
    per_100g: dict[str, Decimal] | None
    covered_mass: dict[str, Decimal]
    ingredient_mass: Decimal
    total_weight: Decimal
    total_portions: int
    missing_material_ids: tuple[int, ...] = ()

    @property
    def coverage(self) -> dict[str, Decimal]:
        """Fraction of ingredient mass with source data, per field."""
        return _coverage(self.covered_mass, self.ingredient_mass)

    @property
    def is_partial(self) -> bool:
        """True when any field was computed from incomplete data."""
        return any(ratio < 1 for ratio in self.coverage.values())

    def require_per_100g(self) -> dict[str, Decimal]:
        """Return per-100 g values or fail when the recipe has no weight."""
        if self.per_100g is None:
            raise InvalidRecipeError("Per 100 g values require a total weight above 0")
        return self.per_100g


@dataclass(frozen=True)
class LabelNutrition:
    """Nutrition of one or more recipes expressed for a packaged label."""

    per_serving: dict[str, Decimal]
    per_100g: dict[str, Decimal]
    serving_size: Decimal
    servings_per_package: int
    total_weight: Decimal
    covered_mass: dict[str, Decimal]
    ingredient_mass: Decimal

    @property
    def coverage(self) -> dict[str, Decimal]:
        """Fraction of ingredient mass with source data, per field."""
        return _coverage(self.covered_mass, self.ingredient_mass)

    @property
    def is_partial(self) -> bool:
        """True when any field was computed from incomplete data."""
        return any(ratio < 1 for ratio in self.coverage.values())


def _coverage(covered: dict[str, Decimal], mass: Decimal) -> dict[str, Decimal]:
    if mass <= 0:
        return {name: Decimal(0) for name in NUTRIENT_FIELDS}
    return {name: covered[name] / mass for name in NUTRIENT_FIELDS}
