"""Display formatting for nutrition labels."""

from decimal import ROUND_HALF_UP, Decimal

from bakery_costing.domain.aggregates import LabelNutrition
from bakery_costing.domain.materials import NUTRIENT_FIELDS

NUTRIENT_LABELS = {
    "calories": "Calories",
    "protein": "Protein",
    "fat": "Fat",
    "saturated_fat": "  Saturated fat",
    "trans_fat": "  Trans fat",
    "carbohydrates": "Carbohydrates",
    "sugar": "  Sugar",
    "sodium": "Sodium",
}

NUTRIENT_UNITS = {
    "calories": "kcal",
    "sodium": "mg",
}

_WHOLE = Decimal("1")
_TENTH = Decimal("0.1")


def round_nutrient(name: str, value: Decimal) -> Decimal:
    """Round to label precision: whole kcal and mg, tenths of a gram."""
    quantum = _WHOLE if name in NUTRIENT_UNITS else _TENTH
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def format_nutrient(name: str, value: Decimal) -> str:
    """Format a nutrient value with its unit."""
    unit = NUTRIENT_UNITS.get(name, "g")
    return f"{round_nutrient(name, value)} {unit}"


def label_rows(label: LabelNutrition) -> list[tuple[str, str, str]]:
    """Return (nutrient, per serving, per 100 g) display rows in label order."""
    return [
        (
            NUTRIENT_LABELS[name],
            format_nutrient(name, label.per_serving[name]),
            format_nutrient(name, label.per_100g[name]),
        )
        for name in NUTRIENT_FIELDS
    ]


def label_payload(name: str, label: LabelNutrition) -> dict[str, object]:
    """Flat, field-keyed label values ready for an exporter."""
    return {
        "name": name,
        "serving_size": label.serving_size,
        "servings_per_package": label.servings_per_package,
        "total_weight": label.total_weight,
        "per_serving": {
            field: round_nutrient(field, label.per_serving[field])
            for field in NUTRIENT_FIELDS
        },
        "per_100g": {
            field: round_nutrient(field, label.per_100g[field])
            for field in NUTRIENT_FIELDS
        },
        "coverage": label.coverage,
        "is_partial": label.is_partial,
    }
