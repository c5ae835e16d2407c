"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from intake_tracker.adapters.event_bus_client import HttpxEventBus
from intake_tracker.adapters.food_catalog_client import HttpxFoodCatalogClient
from intake_tracker.adapters.supabase_intake_repository import (
    SupabaseIntakeRepository,
)
from intake_tracker.adapters.supabase_template_repository import (
    SupabaseMealTemplateRepository,
)
from intake_tracker.config import Settings
from intake_tracker.services.cache import InMemoryCache, SafeCache
from intake_tracker.services.calculators import UnitStrategyRegistry
from intake_tracker.services.catalog import FoodCatalogGateway
from intake_tracker.services.intakes import IntakeService
from intake_tracker.services.template_sync import TemplateSynchronizer
from intake_tracker.services.templates import MealTemplateService
from intake_tracker.services.user_cleanup import UserCleanupService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    intake_service: IntakeService
    template_service: MealTemplateService
    user_cleanup_service: UserCleanupService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    intake_repository = SupabaseIntakeRepository(supabase_client)
    template_repository = SupabaseMealTemplateRepository(supabase_client)
    catalog_client = HttpxFoodCatalogClient.create(
        base_url=resolved_settings.food_catalog_base_url,
        timeout_seconds=resolved_settings.food_catalog_timeout_seconds,
    )
    event_bus = HttpxEventBus.create(
        url=resolved_settings.event_bus_url,
        token=resolved_settings.event_token,
    )
    catalog = FoodCatalogGateway(catalog_client)
    registry = UnitStrategyRegistry()
    cache = SafeCache(InMemoryCache())
    intake_service = IntakeService(
        catalog=catalog,
        repository=intake_repository,
        cache=cache,
        registry=registry,
        list_ttl_seconds=resolved_settings.intake_cache_ttl_seconds,
    )
    template_service = MealTemplateService(
        repository=template_repository,
        intake_repository=intake_repository,
        synchronizer=TemplateSynchronizer(catalog=catalog, registry=registry),
        cache=cache,
        list_ttl_seconds=resolved_settings.template_cache_ttl_seconds,
    )
    user_cleanup_service = UserCleanupService(
        repository=intake_repository,
        event_bus=event_bus,
        batch_size=resolved_settings.delete_batch_size,
    )

    async def close_resources() -> None:
        await catalog_client.close()
        await event_bus.close()

    return AppContainer(
        settings=resolved_settings,
        intake_service=intake_service,
        template_service=template_service,
        user_cleanup_service=user_cleanup_service,
        close_resources=close_resources,
    )
