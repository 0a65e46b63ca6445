"""Tests for product cost reporting."""

from decimal import Decimal

import pytest

from bakery_costing.domain.errors import MissingPriceError, NotFoundError
from bakery_costing.domain.products import (
    CustomProduct,
    CustomProductItem,
    Product,
    ProductRecipe,
)
from bakery_costing.services.costing import MarginThresholds
from bakery_costing.services.products import ProductService, serialize_product_cost
from tests.conftest import (
    InMemoryProductRepository,
    flour,
    make_material,
    make_recipe,
    sugar,
)


def _product(product_id: int = 1, price: str = "10") -> Product:
    return Product(
        id=product_id,
        name="Sweet loaf",
        category="bread",
        selling_price=Decimal(price),
        management_fee_percentage=Decimal("0"),
        recipes=[
            ProductRecipe(
                recipe=make_recipe([(flour(), "600"), (sugar(), "400")]),
                quantity=Decimal("1"),
            )
        ],
    )


def test_get_product_costs(product_repository: InMemoryProductRepository) -> None:
    product_repository.products[1] = _product()
    service = ProductService(product_repository)

    cost = service.get_product_costs(1)

    assert cost.total_cost == Decimal("4.2")
    assert cost.profit == Decimal("5.8")
    assert cost.profit_margin == Decimal("58")
    assert cost.margin_band == "high"


def test_get_product_costs_uses_configured_thresholds(
    product_repository: InMemoryProductRepository,
) -> None:
    product_repository.products[1] = _product()
    service = ProductService(
        product_repository,
        thresholds=MarginThresholds(low=Decimal(60), high=Decimal(80)),
    )

    assert service.get_product_costs(1).margin_band == "low"


def test_get_product_costs_unknown_product(
    product_repository: InMemoryProductRepository,
) -> None:
    service = ProductService(product_repository)

    with pytest.raises(NotFoundError, match="Product 5 not found"):
        service.get_product_costs(5)


def test_get_product_costs_propagates_missing_price(
    product_repository: InMemoryProductRepository,
) -> None:
    unpriced = make_material(9, "Vanilla", None)
    product_repository.products[1] = Product(
        id=1,
        name="Vanilla loaf",
        category="bread",
        selling_price=Decimal("10"),
        recipes=[
            ProductRecipe(recipe=make_recipe([(unpriced, "5")]), quantity=Decimal(1))
        ],
    )
    service = ProductService(product_repository)

    with pytest.raises(MissingPriceError):
        service.get_product_costs(1)


def test_get_custom_product_costs(
    product_repository: InMemoryProductRepository,
) -> None:
    product_repository.custom_products[3] = CustomProduct(
        id=3,
        name="Duo",
        category="gift",
        selling_price=Decimal("20"),
        management_fee_percentage=Decimal("0"),
        items=[CustomProductItem(product=_product(), quantity=Decimal(2))],
    )
    service = ProductService(product_repository)

    cost = service.get_custom_product_costs(3)

    assert cost.ingredient_cost == Decimal("8.4")
    assert cost.profit == Decimal("11.6")


def test_get_custom_product_costs_unknown(
    product_repository: InMemoryProductRepository,
) -> None:
    service = ProductService(product_repository)

    with pytest.raises(NotFoundError, match="Custom product 3 not found"):
        service.get_custom_product_costs(3)


def test_serialize_product_cost_lists_every_figure(
    product_repository: InMemoryProductRepository,
) -> None:
    product_repository.products[1] = _product()
    cost = ProductService(product_repository).get_product_costs(1)

    payload = serialize_product_cost(cost)

    assert set(payload) == {
        "ingredient_cost",
        "packaging_cost",
        "total_cost",
        "management_fee",
        "adjusted_cost",
        "selling_price",
        "profit",
        "profit_margin",
        "margin_band",
    }
