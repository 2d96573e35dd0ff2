"""Shared test fixtures."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from nfc_bridge.adapters.jellyfin_client import MediaDirectoryClient
from nfc_bridge.config import Settings
from nfc_bridge.containers import AppContainer
from nfc_bridge.domain.catalog import CatalogEntry, MediaKind
from nfc_bridge.domain.errors import MediaServerError
from nfc_bridge.domain.sessions import SessionRef
from nfc_bridge.services.active_sessions import (
    ActiveSessionRegistry,
    ActiveSessionStore,
)
from nfc_bridge.services.catalog import CatalogRepository, CatalogService
from nfc_bridge.services.devices import DeviceService
from nfc_bridge.services.playback import PlaybackDispatcher
from nfc_bridge.services.triggers import TriggerResolver

TARGET_USERNAME = "family"


@dataclass
class FakeMediaClient(MediaDirectoryClient):
    """Fake media server client that records calls."""

    users: list[dict[str, object]] = field(
        default_factory=lambda: [
            {"Name": "someone-else", "Id": "user-0"},
            {"Name": TARGET_USERNAME, "Id": "user-1"},
        ]
    )
    items: list[dict[str, object]] = field(default_factory=list)
    sessions: list[dict[str, object]] = field(default_factory=list)
    play_error: MediaServerError | None = None
    list_error: MediaServerError | None = None
    searches: list[tuple[str, str, str]] = field(default_factory=list)
    played: list[tuple[str, list[str]]] = field(default_factory=list)

    async def list_users(self) -> list[dict[str, object]]:
        if self.list_error:
            raise self.list_error
        return self.users

    async def search_items(
        self, user_id: str, search_term: str, item_type: str
    ) -> list[dict[str, object]]:
        if self.list_error:
            raise self.list_error
        self.searches.append((user_id, search_term, item_type))
        return self.items

    async def list_sessions(self) -> list[dict[str, object]]:
        if self.list_error:
            raise self.list_error
        return self.sessions

    async def play_now(self, session_id: str, item_ids: list[str]) -> None:
        if self.play_error:
            raise self.play_error
        self.played.append((session_id, item_ids))


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog store enforcing per-kind uniqueness."""

    entries: dict[MediaKind, dict[int, CatalogEntry]] = field(
        default_factory=lambda: {kind: {} for kind in MediaKind}
    )
    next_id: int = 1

    async def find_by_trigger(
        self, kind: MediaKind, trigger_word: str
    ) -> CatalogEntry | None:
        for entry in self.entries[kind].values():
            if entry.trigger_word == trigger_word:
                return entry
        return None

    async def insert_entry(
        self,
        kind: MediaKind,
        display_name: str,
        trigger_word: str,
        external_item_id: str,
    ) -> CatalogEntry | None:
        for entry in self.entries[kind].values():
            if (
                entry.trigger_word == trigger_word
                or entry.external_item_id == external_item_id
            ):
                return None
        entry = CatalogEntry(
            id=self.next_id,
            display_name=display_name,
            trigger_word=trigger_word,
            external_item_id=external_item_id,
        )
        self.entries[kind][entry.id] = entry
        self.next_id += 1
        return entry

    async def list_entries(self, kind: MediaKind) -> list[CatalogEntry]:
        return sorted(self.entries[kind].values(), key=lambda e: e.display_name)

    async def count_entries(self, kind: MediaKind) -> int:
        return len(self.entries[kind])

    async def delete_entry(self, kind: MediaKind, entry_id: int) -> None:
        self.entries[kind].pop(entry_id, None)


@dataclass
class InMemoryActiveSessionStore(ActiveSessionStore):
    """Active session store that keeps every saved snapshot."""

    saved: list[dict[MediaKind, SessionRef | None]] = field(default_factory=list)
    fail: bool = False

    def save_active_sessions(
        self, sessions: Mapping[MediaKind, SessionRef | None]
    ) -> None:
        if self.fail:
            raise OSError("disk full")
        self.saved.append(dict(sessions))


def write_settings_file(path: Path, **overrides: object) -> Path:
    document: dict[str, object] = {
        "jellyfinBaseUrl": "http://jellyfin.local:8096",
        "apiKey": "secret-key",
        "targetUsername": TARGET_USERNAME,
    }
    document.update(overrides)
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    settings_path = write_settings_file(tmp_path / "settings.json")
    return Settings(
        settings_path=str(settings_path),
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
    )


@pytest.fixture
def media_client() -> FakeMediaClient:
    return FakeMediaClient()


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def session_store() -> InMemoryActiveSessionStore:
    return InMemoryActiveSessionStore()


@pytest.fixture
def container(
    settings: Settings,
    media_client: FakeMediaClient,
    catalog_repository: InMemoryCatalogRepository,
    session_store: InMemoryActiveSessionStore,
) -> AppContainer:
    registry = ActiveSessionRegistry.load(session_store)
    catalog_service = CatalogService(
        repository=catalog_repository,
        client=media_client,
        target_username=TARGET_USERNAME,
    )

    async def startup() -> None:
        return None

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        registry=registry,
        trigger_resolver=TriggerResolver(catalog_repository),
        playback_dispatcher=PlaybackDispatcher(registry=registry, client=media_client),
        catalog_service=catalog_service,
        device_service=DeviceService(media_client),
        startup=startup,
        close_resources=close_resources,
    )
