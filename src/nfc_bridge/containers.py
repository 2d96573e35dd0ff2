"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from nfc_bridge.adapters.database import Database
from nfc_bridge.adapters.jellyfin_client import HttpxJellyfinClient
from nfc_bridge.adapters.settings_file import JsonSettingsFile
from nfc_bridge.adapters.sqlalchemy_catalog_repository import (
    SqlAlchemyCatalogRepository,
)
from nfc_bridge.config import Settings
from nfc_bridge.services.active_sessions import ActiveSessionRegistry
from nfc_bridge.services.catalog import CatalogService
from nfc_bridge.services.devices import DeviceService
from nfc_bridge.services.playback import PlaybackDispatcher
from nfc_bridge.services.triggers import TriggerResolver


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    registry: ActiveSessionRegistry
    trigger_resolver: TriggerResolver
    playback_dispatcher: PlaybackDispatcher
    catalog_service: CatalogService
    device_service: DeviceService
    startup: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Raises ConfigurationError when the settings file is missing or invalid.
    """
    resolved_settings = settings or Settings()
    settings_file = JsonSettingsFile(Path(resolved_settings.settings_path))
    bridge_config = settings_file.load()
    registry = ActiveSessionRegistry.load(settings_file, bridge_config.active_refs())

    jellyfin_client = HttpxJellyfinClient.create(
        base_url=bridge_config.media_server_base_url,
        api_key=bridge_config.api_key,
        timeout=resolved_settings.request_timeout_seconds,
    )
    database = Database(resolved_settings.database_url)
    catalog_repository = SqlAlchemyCatalogRepository(database)
    catalog_service = CatalogService(
        repository=catalog_repository,
        client=jellyfin_client,
        target_username=bridge_config.target_username,
    )

    async def startup() -> None:
        await database.create_all()
        if resolved_settings.seed_examples:
            await catalog_service.seed_examples()

    async def close_resources() -> None:
        await jellyfin_client.close()
        await database.dispose()

    return AppContainer(
        settings=resolved_settings,
        registry=registry,
        trigger_resolver=TriggerResolver(catalog_repository),
        playback_dispatcher=PlaybackDispatcher(
            registry=registry, client=jellyfin_client
        ),
        catalog_service=catalog_service,
        device_service=DeviceService(jellyfin_client),
        startup=startup,
        close_resources=close_resources,
    )
