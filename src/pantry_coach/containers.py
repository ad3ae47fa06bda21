"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pantry_coach.adapters.json_file_store import JsonFileStore
from pantry_coach.adapters.openai_scan_client import OpenAIScanClient
from pantry_coach.adapters.supabase_store import SupabaseKeyValueStore
from pantry_coach.config import Settings
from pantry_coach.services.consumption import ConsumptionService
from pantry_coach.services.history import HistoryService
from pantry_coach.services.inventory import InventoryService
from pantry_coach.services.profile import ProfileService
from pantry_coach.services.progress import ProgressService
from pantry_coach.services.scan import PantryScanService
from pantry_coach.services.storage import KeyValueStore
from pantry_coach.services.suggestions import SuggestionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    profile_service: ProfileService
    inventory_service: InventoryService
    history_service: HistoryService
    consumption_service: ConsumptionService
    progress_service: ProgressService
    suggestion_service: SuggestionService
    scan_service: PantryScanService | None
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store for the configured backend."""
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise RuntimeError("Supabase storage requires URL and service key")
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, settings.supabase_table)
    return JsonFileStore(settings.data_dir)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    profile_service = ProfileService(store)
    inventory_service = InventoryService(store)
    history_service = HistoryService(
        store,
        timezone=resolved_settings.timezone,
        history_limit=resolved_settings.history_limit,
    )
    consumption_service = ConsumptionService(
        profile_service=profile_service,
        inventory_service=inventory_service,
        history_service=history_service,
    )
    progress_service = ProgressService(history_service)
    suggestion_service = SuggestionService(
        profile_service=profile_service,
        inventory_service=inventory_service,
        history_service=history_service,
        suggestion_limit=resolved_settings.suggestion_limit,
    )

    scan_client: OpenAIScanClient | None = None
    scan_service: PantryScanService | None = None
    if resolved_settings.openai_api_key:
        scan_client = OpenAIScanClient.create(resolved_settings.openai_api_key)
        scan_service = PantryScanService(
            client=scan_client,
            inventory_service=inventory_service,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )

    async def close_resources() -> None:
        if scan_client is not None:
            await scan_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        profile_service=profile_service,
        inventory_service=inventory_service,
        history_service=history_service,
        consumption_service=consumption_service,
        progress_service=progress_service,
        suggestion_service=suggestion_service,
        scan_service=scan_service,
        close_resources=close_resources,
    )
