"""Trigger word resolution."""

from dataclasses import dataclass

from nfc_bridge.domain.catalog import MediaKind, ResolvedTrigger, normalize_trigger
from nfc_bridge.services.catalog import CatalogRepository

# Movies are checked before albums, so a word bound in both resolves to the movie.
RESOLUTION_ORDER = (MediaKind.MOVIE, MediaKind.ALBUM)


@dataclass
class TriggerResolver:
    """Maps a trigger token to the catalog entry it is bound to."""

    repository: CatalogRepository

    async def resolve(self, token: str) -> ResolvedTrigger | None:
        """Return the bound entry and its kind, or None when nothing matches."""
        trigger_word = normalize_trigger(token)
        if not trigger_word:
            return None
        for kind in RESOLUTION_ORDER:
            entry = await self.repository.find_by_trigger(kind, trigger_word)
            if entry:
                return ResolvedTrigger(entry=entry, kind=kind)
        return None
