"""Domain models for sellable products and their packaging."""

from dataclasses import dataclass, field
from decimal import Decimal

from bakery_costing.domain.recipes import Recipe

UNIT_PORTIONS = "portions"
UNIT_GRAMS = "grams"


@dataclass(frozen=True)
class Packaging:
    """A packaging material with a cost per unit."""

    id: int
    name: str
    type: str
    unit_cost: Decimal


@dataclass(frozen=True)
class ProductRecipe:
    """Amount of a recipe used by a product, in portions or grams."""

    recipe: Recipe
    quantity: Decimal
    unit: str = UNIT_PORTIONS


@dataclass(frozen=True)
class ProductPackaging:
    """Packaging units used by a product."""

    packaging: Packaging
    quantity: int


@dataclass(frozen=True)
class Product:
    """A sellable product made from recipes and packaging."""

    id: int
    name: str
    category: str
    selling_price: Decimal
    management_fee_percentage: Decimal = Decimal("3.00")
    recipes: list[ProductRecipe] = field(default_factory=list)
    packaging: list[ProductPackaging] = field(default_factory=list)


@dataclass(frozen=True)
class CustomProductItem:
    """A product bundled into a custom product."""

    product: Product
    quantity: Decimal


@dataclass(frozen=True)
class CustomProduct:
    """A bundle of products sold together with its own packaging."""

    id: int
    name: str
    category: str
    selling_price: Decimal
    management_fee_percentage: Decimal = Decimal("3.00")
    items: list[CustomProductItem] = field(default_factory=list)
    packaging: list[ProductPackaging] = field(default_factory=list)


@dataclass(frozen=True)
class ProductCost:
    """Cost, fee and profit breakdown for a product or custom product."""

    ingredient_cost: Decimal
    packaging_cost: Decimal
    total_cost: Decimal
    management_fee: Decimal
    adjusted_cost: Decimal
    selling_price: Decimal
    profit: Decimal
    profit_margin: Decimal
    margin_band: str
