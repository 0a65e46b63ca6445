"""Product and custom product cost reporting."""

from dataclasses import dataclass, field
from typing import Protocol

from bakery_costing.domain.errors import NotFoundError
from bakery_costing.domain.products import CustomProduct, Product, ProductCost
from bakery_costing.services.costing import (
    MarginThresholds,
    calculate_custom_product_cost,
    calculate_product_cost,
)


class ProductRepository(Protocol):
    """Persistence interface for products with resolved recipes and packaging."""

    def get_product(self, product_id: int) -> Product | None:
        """Return a product, if present."""

    def list_products(self) -> list[Product]:
        """Return all products."""

    def get_custom_product(self, custom_product_id: int) -> CustomProduct | None:
        """Return a custom product with its bundled products, if present."""


@dataclass
class ProductService:
    """Application service for product cost breakdowns."""

    repository: ProductRepository
    thresholds: MarginThresholds = field(default_factory=MarginThresholds)

    def get_product_costs(self, product_id: int) -> ProductCost:
        """Return the cost breakdown of a product."""
        product = self.repository.get_product(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return calculate_product_cost(product, self.thresholds)

    def get_custom_product_costs(self, custom_product_id: int) -> ProductCost:
        """Return the cost breakdown of a custom product."""
        custom_product = self.repository.get_custom_product(custom_product_id)
        if custom_product is None:
            raise NotFoundError("Custom product", custom_product_id)
        return calculate_custom_product_cost(custom_product, self.thresholds)


def serialize_product_cost(cost: ProductCost) -> dict[str, object]:
    return {
        "ingredient_cost": cost.ingredient_cost,
        "packaging_cost": cost.packaging_cost,
        "total_cost": cost.total_cost,
        "management_fee": cost.management_fee,
        "adjusted_cost": cost.adjusted_cost,
        "selling_price": cost.selling_price,
        "profit": cost.profit,
        "profit_margin": cost.profit_margin,
        "margin_band": cost.margin_band,
    }
