"""Domain models for recipes."""

from dataclasses import dataclass, field
from decimal import Decimal

from bakery_costing.domain.materials import Material


@dataclass(frozen=True)
class RecipeIngredient:
    """One ingredient line of a recipe, quantity in grams."""

    material: Material
    quantity: Decimal

    @property
    def contributes(self) -> bool:
        """Only positive quantities count towards totals."""
        return self.quantity > 0


@dataclass(frozen=True)
class Recipe:
    """A batch formula yielding total_weight grams split into total_portions."""

    id: int
    name: str
    category: str
    total_weight: Decimal
    total_portions: int
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    description: str | None = None
