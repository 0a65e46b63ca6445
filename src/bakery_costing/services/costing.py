"""Recipe, product and material cost calculations."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from bakery_costing.domain.aggregates import RecipeCost
from bakery_costing.domain.errors import InvalidRecipeError, MissingPriceError
from bakery_costing.domain.products import (
    UNIT_GRAMS,
    UNIT_PORTIONS,
    CustomProduct,
    Product,
    ProductCost,
    ProductPackaging,
)
from bakery_costing.domain.recipes import Recipe

_HUNDRED = Decimal(100)


@dataclass(frozen=True)
class CostLine:
    """Unit price and quantity of one ingredient line."""

    material_id: int
    unit_price: Decimal | None
    quantity: Decimal


@dataclass(frozen=True)
class MarginThresholds:
    """Profit margin percentages separating the low, medium and high bands."""

    low: Decimal = Decimal(20)
    high: Decimal = Decimal(40)

    def band(self, margin: Decimal) -> str:
        """Classify a profit margin percentage."""
        if margin < self.low:
            return "low"
        if margin >= self.high:
            return "high"
        return "medium"


def calculate_cost(
    lines: Iterable[CostLine], total_portions: int, total_weight: Decimal
) -> RecipeCost:
    """Sum line costs and normalize them per portion and per gram."""
    if total_portions < 1:
        raise InvalidRecipeError(
            f"total_portions must be at least 1, got {total_portions}"
        )

    total = Decimal(0)
    missing: list[int] = []
    for line in lines:
        if line.quantity <= 0:
            continue
        if line.unit_price is None or line.unit_price < 0:
            if line.material_id not in missing:
                missing.append(line.material_id)
            continue
        total += line.quantity * line.unit_price

    if missing:
        raise MissingPriceError(tuple(missing), partial_total=total)

    return RecipeCost(
        total_cost=total,
        cost_per_portion=total / total_portions,
        cost_per_gram=total / total_weight if total_weight > 0 else None,
    )


def calculate_recipe_cost(recipe: Recipe) -> RecipeCost:
    """Compute the cost of a recipe from its materials' unit prices."""
    lines = [
        CostLine(
            material_id=ingredient.material.id,
            unit_price=ingredient.material.price_per_gram,
            quantity=ingredient.quantity,
        )
        for ingredient in recipe.ingredients
    ]
    return calculate_cost(lines, recipe.total_portions, recipe.total_weight)


def derive_price_per_gram(
    purchase_amount: Decimal | None,
    purchase_weight: Decimal | None,
    management_fee_rate: Decimal | None = None,
) -> Decimal | None:
    """Return the unit price of a purchase including its management fee."""
    if purchase_amount is None or purchase_weight is None or purchase_weight <= 0:
        return None
    rate = management_fee_rate or Decimal(0)
    return purchase_amount * (1 + rate / _HUNDRED) / purchase_weight


def calculate_product_cost(
    product: Product, thresholds: MarginThresholds | None = None
) -> ProductCost:
    """Compute cost, management fee and profit for a product."""
    ingredient_cost = Decimal(0)
    for line in product.recipes:
        recipe_cost = calculate_recipe_cost(line.recipe)
        if line.unit == UNIT_PORTIONS:
            ingredient_cost += recipe_cost.cost_per_portion * line.quantity
        elif line.unit == UNIT_GRAMS:
            ingredient_cost += recipe_cost.require_cost_per_gram() * line.quantity
        else:
            raise InvalidRecipeError(f"Unsupported recipe unit: {line.unit}")

    return _summarize(
        ingredient_cost,
        _packaging_cost(product.packaging),
        product.selling_price,
        product.management_fee_percentage,
        thresholds or MarginThresholds(),
    )


def calculate_custom_product_cost(
    custom_product: CustomProduct, thresholds: MarginThresholds | None = None
) -> ProductCost:
    """Compute cost and profit for a bundle of products."""
    resolved = thresholds or MarginThresholds()
    products_cost = Decimal(0)
    for item in custom_product.items:
        item_cost = calculate_product_cost(item.product, resolved)
        products_cost += item_cost.adjusted_cost * item.quantity

    return _summarize(
        products_cost,
        _packaging_cost(custom_product.packaging),
        custom_product.selling_price,
        custom_product.management_fee_percentage,
        resolved,
    )


def _packaging_cost(lines: list[ProductPackaging]) -> Decimal:
    return sum(
        (line.packaging.unit_cost * line.quantity for line in lines), Decimal(0)
    )


def _summarize(
    ingredient_cost: Decimal,
    packaging_cost: Decimal,
    selling_price: Decimal,
    fee_percentage: Decimal,
    thresholds: MarginThresholds,
) -> ProductCost:
    total_cost = ingredient_cost + packaging_cost
    management_fee = total_cost * fee_percentage / _HUNDRED
    adjusted_cost = total_cost + management_fee
    profit = selling_price - adjusted_cost
    margin = profit / selling_price * _HUNDRED if selling_price > 0 else Decimal(0)
    return ProductCost(
        ingredient_cost=ingredient_cost,
        packaging_cost=packaging_cost,
        total_cost=total_cost,
        management_fee=management_fee,
        adjusted_cost=adjusted_cost,
        selling_price=selling_price,
        profit=profit,
        profit_margin=margin,
        margin_band=thresholds.band(margin),
    )
