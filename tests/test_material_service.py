"""Tests for material management and change history."""

from decimal import Decimal

import pytest

from bakery_costing.domain.errors import NotFoundError
from bakery_costing.services.materials import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    MaterialService,
)
from tests.conftest import InMemoryMaterialHistoryRepository, InMemoryMaterialRepository


@pytest.fixture
def history_repository() -> InMemoryMaterialHistoryRepository:
    return InMemoryMaterialHistoryRepository()


@pytest.fixture
def service(
    material_repository: InMemoryMaterialRepository,
    history_repository: InMemoryMaterialHistoryRepository,
) -> MaterialService:
    return MaterialService(
        repository=material_repository, history_repository=history_repository
    )


def _create(service: MaterialService):
    return service.create_material(
        {
            "name": "Flour",
            "category": "dry goods",
            "purchase_amount": "100",
            "purchase_weight": "1000",
            "management_fee_rate": "5",
        }
    )


def test_create_material_derives_price_and_records_history(
    service: MaterialService, history_repository: InMemoryMaterialHistoryRepository
) -> None:
    material = _create(service)

    assert material.price_per_gram == Decimal("0.1050")
    entry = history_repository.entries[0]
    assert entry.action == ACTION_CREATE
    assert entry.previous_data is None
    assert entry.new_data["price_per_gram"] == "0.1050"


def test_create_material_keeps_explicit_price(service: MaterialService) -> None:
    material = service.create_material(
        {
            "name": "Butter",
            "category": "dairy",
            "price_per_gram": "0.2",
            "purchase_amount": "100",
            "purchase_weight": "1000",
        }
    )

    assert material.price_per_gram == Decimal("0.2")


def test_update_material_records_changed_fields(
    service: MaterialService, history_repository: InMemoryMaterialHistoryRepository
) -> None:
    material = _create(service)

    updated = service.update_material(
        material.id, {"name": "Flour", "price_per_gram": "0.12"}
    )

    assert updated.price_per_gram == Decimal("0.12")
    entry = history_repository.entries[-1]
    assert entry.action == ACTION_UPDATE
    assert entry.changed_fields == ["price_per_gram"]
    assert entry.previous_data["price_per_gram"] == "0.1050"


def test_update_without_changes_skips_history(
    service: MaterialService, history_repository: InMemoryMaterialHistoryRepository
) -> None:
    material = _create(service)

    service.update_material(material.id, {"name": "Flour"})

    assert len(history_repository.entries) == 1


def test_update_missing_material_raises(service: MaterialService) -> None:
    with pytest.raises(NotFoundError):
        service.update_material(404, {"name": "Ghost"})


def test_delete_material_records_last_state(
    service: MaterialService,
    material_repository: InMemoryMaterialRepository,
    history_repository: InMemoryMaterialHistoryRepository,
) -> None:
    material = _create(service)

    service.delete_material(material.id)

    assert material.id not in material_repository.materials
    entry = history_repository.entries[-1]
    assert entry.action == ACTION_DELETE
    assert entry.previous_data["name"] == "Flour"
    assert entry.new_data is None


def test_set_nutrition_keeps_missing_values(
    service: MaterialService, material_repository: InMemoryMaterialRepository
) -> None:
    material = _create(service)

    facts = service.set_nutrition(
        material.id, {"calories": "364", "protein": 10, "unknown": 1}
    )

    assert facts.calories == Decimal("364")
    assert facts.protein == Decimal("10")
    assert facts.sugar is None
    assert material_repository.materials[material.id].nutrition == facts


def test_set_nutrition_for_missing_material_raises(service: MaterialService) -> None:
    with pytest.raises(NotFoundError):
        service.set_nutrition(404, {"calories": "1"})


def test_get_history_formats_changes_newest_first(service: MaterialService) -> None:
    material = _create(service)
    service.update_material(material.id, {"notes": "stone ground"})

    history = service.get_history(material.id)

    assert [entry["action"] for entry in history] == [ACTION_UPDATE, ACTION_CREATE]
    assert history[0]["changes"] == [
        {"label": "Notes", "previous": "-", "new": "stone ground"}
    ]
    assert history[0]["created_at"] == "2024-03-01T09:30:00+00:00"


def test_update_purchase_amount_rederives_price(
    service: MaterialService, history_repository: InMemoryMaterialHistoryRepository
) -> None:
    material = service.create_material(
        {
            "name": "Rye",
            "category": "dry goods",
            "purchase_amount": "100",
            "purchase_weight": "1000",
            "management_fee_rate": "0",
        }
    )

    updated = service.update_material(material.id, {"purchase_amount": "200"})

    assert updated.price_per_gram == Decimal("0.2000")
    assert updated.purchase_weight == Decimal("1000")
    assert history_repository.entries[-1].changed_fields == [
        "purchase_amount",
        "price_per_gram",
    ]


def test_update_fee_rate_uses_stored_purchase_data(service: MaterialService) -> None:
    material = _create(service)

    updated = service.update_material(material.id, {"management_fee_rate": "10"})

    assert updated.price_per_gram == Decimal("0.1100")


def test_update_with_explicit_price_keeps_it(service: MaterialService) -> None:
    material = _create(service)

    updated = service.update_material(
        material.id, {"purchase_amount": "300", "price_per_gram": "0.5"}
    )

    assert updated.price_per_gram == Decimal("0.5")
