"""Admin service for dashboard reporting."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from bakery_costing.domain.errors import InvalidRecipeError, MissingPriceError
from bakery_costing.services.costing import MarginThresholds, calculate_product_cost
from bakery_costing.services.materials import MaterialRepository
from bakery_costing.services.products import ProductRepository
from bakery_costing.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)


@dataclass
class AdminService:
    """Service for admin dashboards."""

    material_repository: MaterialRepository
    recipe_repository: RecipeRepository
    product_repository: ProductRepository
    thresholds: MarginThresholds = field(default_factory=MarginThresholds)

    def dashboard_stats(self) -> dict[str, object]:
        """Return record counts and the average product profit margin."""
        materials = self.material_repository.list_materials()
        recipes = self.recipe_repository.list_recipes()
        products = self.product_repository.list_products()

        margins: list[Decimal] = []
        uncosted: list[int] = []
        for product in products:
            try:
                cost = calculate_product_cost(product, self.thresholds)
            except (InvalidRecipeError, MissingPriceError) as exc:
                _logger.warning("Cannot cost product %s: %s", product.id, exc)
                uncosted.append(product.id)
                continue
            margins.append(cost.profit_margin)

        average = sum(margins, Decimal(0)) / len(margins) if margins else Decimal(0)
        return {
            "materials_count": len(materials),
            "recipes_count": len(recipes),
            "products_count": len(products),
            "average_profit_margin": average,
            "average_margin_band": self.thresholds.band(average),
            "uncosted_product_ids": uncosted,
            "materials_without_nutrition": sum(
                1 for material in materials if material.nutrition is None
            ),
        }
