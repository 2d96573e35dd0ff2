"""Catalog ingestion: searching the media server and binding trigger words."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nfc_bridge.adapters.jellyfin_client import MediaDirectoryClient
from nfc_bridge.domain.catalog import (
    Candidate,
    CatalogEntry,
    CommitResult,
    CommitStatus,
    MediaKind,
    RejectReason,
    normalize_trigger,
)
from nfc_bridge.domain.errors import UserNotFoundError, ValidationError

_logger = logging.getLogger(__name__)

RESERVED_TRIGGER_WORDS = frozenset({"sessions", "health"})

EXAMPLE_ENTRIES: dict[MediaKind, tuple[str, str, str]] = {
    MediaKind.MOVIE: (
        "Example Movie (2000)",
        "examplemovie",
        "1234567890abcdef1234567890abcdef",
    ),
    MediaKind.ALBUM: (
        "Example Album (Artist)",
        "examplealbum",
        "abcdef1234567890abcdef1234567890",
    ),
}


class CatalogRepository(Protocol):
    """Persistence interface for trigger bindings, one collection per kind."""

    async def find_by_trigger(
        self, kind: MediaKind, trigger_word: str
    ) -> CatalogEntry | None:
        """Return the entry bound to a trigger word, if present."""

    async def insert_entry(
        self,
        kind: MediaKind,
        display_name: str,
        trigger_word: str,
        external_item_id: str,
    ) -> CatalogEntry | None:
        """Insert a binding; return None if the trigger or item is already bound."""

    async def list_entries(self, kind: MediaKind) -> list[CatalogEntry]:
        """Return all entries of a kind ordered by display name."""

    async def count_entries(self, kind: MediaKind) -> int:
        """Return the number of entries of a kind."""

    async def delete_entry(self, kind: MediaKind, entry_id: int) -> None:
        """Delete an entry by id, ignoring unknown ids."""


@dataclass
class CatalogService:
    """Application service for catalog search and binding."""

    repository: CatalogRepository
    client: MediaDirectoryClient
    target_username: str

    async def search(self, kind: MediaKind, text: str) -> list[Candidate]:
        """Search the target user's library for items of a kind."""
        user_id = await self._resolve_user_id()
        items = await self.client.search_items(user_id, text, kind.item_type)
        candidates = [
            Candidate(
                display_name=_display_name(kind, item),
                external_item_id=str(item["Id"]),
            )
            for item in items
            if item.get("Id")
        ]
        _logger.info(
            "Catalog search: kind=%s query=%s results=%s", kind, text, len(candidates)
        )
        return candidates

    async def commit(
        self, kind: MediaKind, candidate: Candidate, trigger_word: str
    ) -> CommitResult:
        """Bind a candidate to a trigger word unless either is already bound."""
        normalized = validate_trigger_word(trigger_word)
        if not candidate.display_name or not candidate.external_item_id:
            raise ValidationError("Missing display name or item id")
        entry = await self.repository.insert_entry(
            kind, candidate.display_name, normalized, candidate.external_item_id
        )
        if entry is None:
            _logger.info(
                "%s with JellyfinID %s or trigger %s already exists",
                kind.capitalize(),
                candidate.external_item_id,
                normalized,
            )
            return CommitResult(
                status=CommitStatus.REJECTED, reason=RejectReason.ALREADY_EXISTS
            )
        _logger.info('Successfully added "%s" to the catalog', candidate.display_name)
        return CommitResult(status=CommitStatus.COMMITTED, entry=entry)

    async def list_entries(self, kind: MediaKind) -> list[CatalogEntry]:
        """Return the bindings of a kind."""
        return await self.repository.list_entries(kind)

    async def delete(self, kind: MediaKind, entry_id: int) -> None:
        """Remove a binding; its trigger word and item become free again."""
        await self.repository.delete_entry(kind, entry_id)

    async def seed_examples(self) -> None:
        """Insert an example binding into each empty collection."""
        for kind, (name, trigger_word, item_id) in EXAMPLE_ENTRIES.items():
            if await self.repository.count_entries(kind):
                continue
            _logger.info("%s catalog is empty, inserting example entry", kind)
            await self.repository.insert_entry(kind, name, trigger_word, item_id)

    async def _resolve_user_id(self) -> str:
        users = await self.client.list_users()
        for user in users:
            if user.get("Name") == self.target_username and user.get("Id"):
                return str(user["Id"])
        raise UserNotFoundError(self.target_username)


def validate_trigger_word(trigger_word: str) -> str:
    """Return the normalized trigger word or raise ValidationError."""
    normalized = normalize_trigger(trigger_word)
    if not normalized:
        raise ValidationError("Trigger word must not be empty")
    if any(char in normalized for char in "/?#"):
        raise ValidationError("Trigger word must not contain '/', '?' or '#'")
    if normalized in RESERVED_TRIGGER_WORDS:
        raise ValidationError(f"Trigger word '{normalized}' is reserved")
    return normalized


def _display_name(kind: MediaKind, item: dict[str, object]) -> str:
    name = item.get("Name") or ""
    if kind is MediaKind.MOVIE:
        detail = item.get("ProductionYear") or "N/A"
    else:
        detail = item.get("AlbumArtist") or "N/A"
    return f"{name} ({detail})"
