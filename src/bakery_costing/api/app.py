"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from bakery_costing.api.admin import router as admin_router
from bakery_costing.api.schemas import (
    LabelCalculationRequest,
    MaterialCreate,
    MaterialUpdate,
    NutritionFactsPayload,
    RecipeCalculationRequest,
)
from bakery_costing.app_logging import configure_logging
from bakery_costing.containers import AppContainer
from bakery_costing.domain.errors import (
    InvalidRecipeError,
    MissingPriceError,
    NotFoundError,
)
from bakery_costing.domain.materials import NUTRIENT_FIELDS, Material, NutritionFacts
from bakery_costing.services.labels import label_payload, label_rows
from bakery_costing.services.materials import material_snapshot
from bakery_costing.services.products import serialize_product_cost
from bakery_costing.services.recipes import summarize_recipe


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(MissingPriceError)
    async def missing_price(request: Request, exc: MissingPriceError) -> JSONResponse:
        logger.warning("Missing unit prices for materials %s", exc.material_ids)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                "detail": str(exc),
                "material_ids": list(exc.material_ids),
                "partial_total": str(exc.partial_total),
            },
        )

    @app.exception_handler(InvalidRecipeError)
    async def invalid_recipe(
        request: Request, exc: InvalidRecipeError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ValueError)
    async def invalid_value(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("Rejected invalid value: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/recipes/calculate")
    async def calculate_recipe(payload: RecipeCalculationRequest) -> dict[str, object]:
        """Cost and aggregate an unsaved recipe."""
        return summarize_recipe(payload.to_domain())

    @app.get("/recipes/{recipe_id}/summary")
    async def recipe_summary(recipe_id: int, request: Request) -> dict[str, object]:
        """Return cost and nutrition for a stored recipe."""
        state_container: AppContainer = request.app.state.container
        return state_container.recipe_service.get_summary(recipe_id)

    @app.get("/nutrition/recipes")
    async def recipe_nutrition(request: Request) -> list[dict[str, object]]:
        """Return per-serving nutrition for all recipes."""
        state_container: AppContainer = request.app.state.container
        return state_container.recipe_service.list_nutrition()

    @app.post("/nutrition-labels/calculate")
    async def calculate_label(
        payload: LabelCalculationRequest, request: Request
    ) -> dict[str, object]:
        """Combine recipes into label values for a package."""
        state_container: AppContainer = request.app.state.container
        label = state_container.recipe_service.calculate_label(
            payload.recipe_ids, payload.serving_size, payload.servings_per_package
        )
        return {
            **label_payload(payload.name, label),
            "rows": [
                {"nutrient": nutrient, "per_serving": serving, "per_100g": per_100g}
                for nutrient, serving, per_100g in label_rows(label)
            ],
        }

    @app.post("/materials", status_code=status.HTTP_201_CREATED)
    async def create_material(
        payload: MaterialCreate, request: Request
    ) -> dict[str, object]:
        """Create a material."""
        state_container: AppContainer = request.app.state.container
        material = state_container.material_service.create_material(
            payload.model_dump(mode="json", exclude_unset=True)
        )
        return _material_response(material)

    @app.put("/materials/{material_id}")
    async def update_material(
        material_id: int, payload: MaterialUpdate, request: Request
    ) -> dict[str, object]:
        """Update a material."""
        state_container: AppContainer = request.app.state.container
        material = state_container.material_service.update_material(
            material_id, payload.model_dump(mode="json", exclude_unset=True)
        )
        return _material_response(material)

    @app.delete("/materials/{material_id}")
    async def delete_material(material_id: int, request: Request) -> dict[str, str]:
        """Delete a material."""
        state_container: AppContainer = request.app.state.container
        state_container.material_service.delete_material(material_id)
        return {"status": "ok"}

    @app.put("/materials/{material_id}/nutrition")
    async def set_nutrition(
        material_id: int, payload: NutritionFactsPayload, request: Request
    ) -> dict[str, object]:
        """Store per-100 g nutrition facts for a material."""
        state_container: AppContainer = request.app.state.container
        facts = state_container.material_service.set_nutrition(
            material_id, payload.model_dump(mode="json")
        )
        return _nutrition_response(facts)

    @app.get("/materials/{material_id}/history")
    async def material_history(
        material_id: int, request: Request
    ) -> list[dict[str, object]]:
        """Return the change history of a material."""
        state_container: AppContainer = request.app.state.container
        return state_container.material_service.get_history(material_id)

    @app.get("/products/{product_id}/costs")
    async def product_costs(product_id: int, request: Request) -> dict[str, object]:
        """Return the cost breakdown of a product."""
        state_container: AppContainer = request.app.state.container
        cost = state_container.product_service.get_product_costs(product_id)
        return serialize_product_cost(cost)

    @app.get("/custom-products/{custom_product_id}/costs")
    async def custom_product_costs(
        custom_product_id: int, request: Request
    ) -> dict[str, object]:
        """Return the cost breakdown of a custom product."""
        state_container: AppContainer = request.app.state.container
        cost = state_container.product_service.get_custom_product_costs(
            custom_product_id
        )
        return serialize_product_cost(cost)

    return app


def _material_response(material: Material) -> dict[str, object]:
    return {
        "id": material.id,
        **material_snapshot(material),
        "nutrition": _nutrition_response(material.nutrition)
        if material.nutrition
        else None,
    }


def _nutrition_response(facts: NutritionFacts) -> dict[str, object]:
    return {name: facts.value(name) for name in NUTRIENT_FIELDS}
