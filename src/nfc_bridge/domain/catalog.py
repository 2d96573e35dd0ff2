"""Domain models for the trigger catalog."""

from dataclasses import dataclass
from enum import StrEnum

from nfc_bridge.domain.errors import ValidationError


class MediaKind(StrEnum):
    """Kind of media a trigger word can be bound to."""

    MOVIE = "movie"
    ALBUM = "album"

    @property
    def session_slot(self) -> str:
        """Return the active-session slot that serves this kind."""
        return _SESSION_SLOTS[self]

    @property
    def item_type(self) -> str:
        """Return the Jellyfin item type searched for this kind."""
        return _ITEM_TYPES[self]

    @classmethod
    def from_slot(cls, slot: str | None) -> "MediaKind":
        """Return the kind for an active-session slot name."""
        for kind, name in _SESSION_SLOTS.items():
            if name == slot:
                return kind
        raise ValidationError(f"Unknown media type: {slot!r}")


_SESSION_SLOTS = {MediaKind.MOVIE: "movie", MediaKind.ALBUM: "music"}
_ITEM_TYPES = {MediaKind.MOVIE: "Movie", MediaKind.ALBUM: "MusicAlbum"}


@dataclass(frozen=True)
class CatalogEntry:
    """A stored binding between a trigger word and a media server item."""

    id: int
    display_name: str
    trigger_word: str
    external_item_id: str


@dataclass(frozen=True)
class Candidate:
    """A search result that has not been bound to a trigger word yet."""

    display_name: str
    external_item_id: str


@dataclass(frozen=True)
class ResolvedTrigger:
    """Catalog entry matched by a trigger word, tagged with its kind."""

    entry: CatalogEntry
    kind: MediaKind


class CommitStatus(StrEnum):
    COMMITTED = "committed"
    REJECTED = "rejected"


class RejectReason(StrEnum):
    ALREADY_EXISTS = "already_exists"


@dataclass(frozen=True)
class CommitResult:
    """Outcome of binding a candidate to a trigger word."""

    status: CommitStatus
    entry: CatalogEntry | None = None
    reason: RejectReason | None = None

    @property
    def committed(self) -> bool:
        return self.status is CommitStatus.COMMITTED


def normalize_trigger(token: str) -> str:
    """Return the stored and lookup form of a trigger word."""
    return token.strip().lower()
