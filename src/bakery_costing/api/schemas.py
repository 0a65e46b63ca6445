"""Pydantic models for API request payloads."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from bakery_costing.domain.materials import Material, NutritionFacts
from bakery_costing.domain.recipes import Recipe, RecipeIngredient


class NutritionFactsPayload(BaseModel):
    """Nutrition values per 100 g; omitted values stay missing."""

    calories: Decimal | None = None
    protein: Decimal | None = None
    fat: Decimal | None = None
    saturated_fat: Decimal | None = None
    trans_fat: Decimal | None = None
    carbohydrates: Decimal | None = None
    sugar: Decimal | None = None
    sodium: Decimal | None = None

    def to_domain(self) -> NutritionFacts:
        return NutritionFacts(**self.model_dump())


class IngredientPayload(BaseModel):
    """Ingredient line with inline material data."""

    material_id: int
    name: str = ""
    quantity: Decimal
    price_per_gram: Decimal | None = Field(default=None, ge=0)
    nutrition: NutritionFactsPayload | None = None

    def to_domain(self) -> RecipeIngredient:
        material = Material(
            id=self.material_id,
            name=self.name,
            category="",
            price_per_gram=self.price_per_gram,
            nutrition=self.nutrition.to_domain() if self.nutrition else None,
        )
        return RecipeIngredient(material=material, quantity=self.quantity)


class RecipeCalculationRequest(BaseModel):
    """Ad-hoc recipe to cost and aggregate without storing it."""

    name: str = ""
    total_weight: Decimal
    total_portions: int
    ingredients: list[IngredientPayload] = Field(default_factory=list)

    def to_domain(self) -> Recipe:
        return Recipe(
            id=0,
            name=self.name,
            category="",
            total_weight=self.total_weight,
            total_portions=self.total_portions,
            ingredients=[ingredient.to_domain() for ingredient in self.ingredients],
        )


class LabelCalculationRequest(BaseModel):
    """Recipes and package layout for a nutrition label."""

    name: str = ""
    recipe_ids: list[int] = Field(min_length=1)
    serving_size: Decimal
    servings_per_package: int


class MaterialCreate(BaseModel):
    """Payload for creating a material."""

    name: str
    category: str
    price_per_gram: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None
    purchase_amount: Decimal | None = None
    purchase_weight: Decimal | None = None
    management_fee_rate: Decimal | None = None
    purchase_time: datetime | None = None
    purchase_location: str | None = None


class MaterialUpdate(BaseModel):
    """Partial update of a material."""

    name: str | None = None
    category: str | None = None
    price_per_gram: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None
    purchase_amount: Decimal | None = None
    purchase_weight: Decimal | None = None
    management_fee_rate: Decimal | None = None
    purchase_time: datetime | None = None
    purchase_location: str | None = None
