"""Supabase implementation for products and custom products."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from supabase import Client

from bakery_costing.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from bakery_costing.domain.numbers import parse_decimal, require_decimal
from bakery_costing.domain.products import (
    UNIT_PORTIONS,
    CustomProduct,
    CustomProductItem,
    Packaging,
    Product,
    ProductPackaging,
    ProductRecipe,
)
from bakery_costing.services.products import ProductRepository

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseProductRepository(ProductRepository):
    """Supabase-backed repository resolving recipes and packaging."""

    client: Client
    default_fee_percentage: Decimal = Decimal("3.00")

    def get_product(self, product_id: int) -> Product | None:
        """Return a product, if present."""
        return self._load_products([product_id]).get(product_id)

    def list_products(self) -> list[Product]:
        """Return all products."""
        response = (
            self.client.table("products").select("id").order("sort_order").execute()
        )
        ids = [row["id"] for row in response.data or []]
        products = self._load_products(ids)
        return [products[product_id] for product_id in ids if product_id in products]

    def get_custom_product(self, custom_product_id: int) -> CustomProduct | None:
        """Return a custom product with its bundled products, if present."""
        response = (
            self.client.table("custom_products")
            .select("*")
            .eq("id", custom_product_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]

        items_response = (
            self.client.table("custom_product_items")
            .select("*")
            .eq("custom_product_id", custom_product_id)
            .execute()
        )
        item_rows = items_response.data or []
        products = self._load_products(
            sorted({item["product_id"] for item in item_rows})
        )
        items: list[CustomProductItem] = []
        for item in item_rows:
            product = products.get(item["product_id"])
            if product is None:
                _logger.warning(
                    "Custom product %s skips unknown product %s",
                    custom_product_id,
                    item["product_id"],
                )
                continue
            items.append(
                CustomProductItem(
                    product=product,
                    quantity=require_decimal(item.get("quantity"), field="quantity"),
                )
            )
        packaging = self._load_packaging_lines(
            "custom_product_packaging", "custom_product_id", [custom_product_id]
        )
        return CustomProduct(
            id=int(row["id"]),
            name=str(row.get("name", "")),
            category=str(row.get("category", "")),
            selling_price=require_decimal(
                row.get("selling_price"), field="selling_price"
            ),
            management_fee_percentage=self._fee_percentage(row),
            items=items,
            packaging=packaging.get(custom_product_id, []),
        )

    def _load_products(self, product_ids: list[int]) -> dict[int, Product]:
        if not product_ids:
            return {}
        response = (
            self.client.table("products").select("*").in_("id", product_ids).execute()
        )
        rows = response.data or []

        recipe_links = (
            self.client.table("product_recipes")
            .select("*")
            .in_("product_id", product_ids)
            .execute()
        ).data or []
        recipes = SupabaseRecipeRepository(self.client).load_recipes(
            sorted({link["recipe_id"] for link in recipe_links})
        )
        recipe_lines: dict[int, list[ProductRecipe]] = {}
        for link in recipe_links:
            recipe = recipes.get(link["recipe_id"])
            if recipe is None:
                _logger.warning(
                    "Product %s skips unknown recipe %s",
                    link["product_id"],
                    link["recipe_id"],
                )
                continue
            recipe_lines.setdefault(link["product_id"], []).append(
                ProductRecipe(
                    recipe=recipe,
                    quantity=require_decimal(link.get("quantity"), field="quantity"),
                    unit=str(link.get("unit") or UNIT_PORTIONS),
                )
            )

        packaging = self._load_packaging_lines(
            "product_packaging", "product_id", product_ids
        )
        return {
            row["id"]: Product(
                id=int(row["id"]),
                name=str(row.get("name", "")),
                category=str(row.get("category", "")),
                selling_price=require_decimal(
                    row.get("selling_price"), field="selling_price"
                ),
                management_fee_percentage=self._fee_percentage(row),
                recipes=recipe_lines.get(row["id"], []),
                packaging=packaging.get(row["id"], []),
            )
            for row in rows
        }

    def _fee_percentage(self, row: dict[str, object]) -> Decimal:
        fee = parse_decimal(
            row.get("management_fee_percentage"), field="management_fee_percentage"
        )
        return self.default_fee_percentage if fee is None else fee

    def _load_packaging_lines(
        self, table: str, owner_column: str, owner_ids: list[int]
    ) -> dict[int, list[ProductPackaging]]:
        links = (
            self.client.table(table).select("*").in_(owner_column, owner_ids).execute()
        ).data or []
        if not links:
            return {}
        packaging_rows = (
            self.client.table("packaging")
            .select("*")
            .in_("id", sorted({link["packaging_id"] for link in links}))
            .execute()
        ).data or []
        packaging = {row["id"]: _parse_packaging(row) for row in packaging_rows}

        lines: dict[int, list[ProductPackaging]] = {}
        for link in links:
            item = packaging.get(link["packaging_id"])
            if item is None:
                _logger.warning(
                    "%s %s skips unknown packaging %s",
                    table,
                    link[owner_column],
                    link["packaging_id"],
                )
                continue
            lines.setdefault(link[owner_column], []).append(
                ProductPackaging(packaging=item, quantity=int(link.get("quantity", 0)))
            )
        return lines


def _parse_packaging(row: dict[str, object]) -> Packaging:
    return Packaging(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        type=str(row.get("type", "")),
        unit_cost=require_decimal(row.get("unit_cost"), field="unit_cost"),
    )
