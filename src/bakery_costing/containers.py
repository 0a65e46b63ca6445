"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from bakery_costing.adapters.supabase_material_history_repository import (
    SupabaseMaterialHistoryRepository,
)
from bakery_costing.adapters.supabase_material_repository import (
    SupabaseMaterialRepository,
)
from bakery_costing.adapters.supabase_product_repository import (
    SupabaseProductRepository,
)
from bakery_costing.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from bakery_costing.config import Settings, parse_margin_thresholds
from bakery_costing.services.admin import AdminService
from bakery_costing.services.materials import MaterialService
from bakery_costing.services.products import ProductService
from bakery_costing.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    material_service: MaterialService
    recipe_service: RecipeService
    product_service: ProductService
    admin_service: AdminService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    thresholds = parse_margin_thresholds(
        resolved_settings.profit_margin_low, resolved_settings.profit_margin_high
    )
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    material_repository = SupabaseMaterialRepository(supabase_client)
    history_repository = SupabaseMaterialHistoryRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    product_repository = SupabaseProductRepository(
        supabase_client,
        default_fee_percentage=resolved_settings.default_management_fee_percentage,
    )

    return AppContainer(
        settings=resolved_settings,
        material_service=MaterialService(
            repository=material_repository,
            history_repository=history_repository,
        ),
        recipe_service=RecipeService(recipe_repository),
        product_service=ProductService(product_repository, thresholds=thresholds),
        admin_service=AdminService(
            material_repository=material_repository,
            recipe_repository=recipe_repository,
            product_repository=product_repository,
            thresholds=thresholds,
        ),
    )
