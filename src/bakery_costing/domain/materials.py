"""Domain models for materials and their nutrition facts."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",
    "protein",
    "fat",
    "saturated_fat",
    "trans_fat",
    "carbohydrates",
    "sugar",
    "sodium",
)


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrition values per 100 g of a material; any value may be missing."""

    calories: Decimal | None = None
    protein: Decimal | None = None
    fat: Decimal | None = None
    saturated_fat: Decimal | None = None
    trans_fat: Decimal | None = None
    carbohydrates: Decimal | None = None
    sugar: Decimal | None = None
    sodium: Decimal | None = None

    def value(self, name: str) -> Decimal | None:
        """Return the per-100 g value for a nutrient field."""
        if name not in NUTRIENT_FIELDS:
            raise KeyError(name)
        return getattr(self, name)


@dataclass(frozen=True)
class Material:
    """A raw ingredient with a unit price and optional nutrition facts."""

    id: int
    name: str
    category: str
    price_per_gram: Decimal | None
    nutrition: NutritionFacts | None = None
    notes: str | None = None
    purchase_amount: Decimal | None = None
    purchase_weight: Decimal | None = None
    management_fee_rate: Decimal | None = None
    purchase_time: datetime | None = None
    purchase_location: str | None = None


@dataclass(frozen=True)
class MaterialHistoryEntry:
    """A recorded create, update or delete of a material."""

    id: int
    material_id: int
    action: str
    previous_data: dict[str, object] | None
    new_data: dict[str, object] | None
    changed_fields: list[str] = field(default_factory=list)
    change_description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class FieldChange:
    """Display triple for one changed field."""

    label: str
    previous: str
    new: str
