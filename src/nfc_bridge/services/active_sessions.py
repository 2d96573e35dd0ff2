"""Registry of the playback device selected for each media kind."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from nfc_bridge.domain.catalog import MediaKind
from nfc_bridge.domain.sessions import RegistryUpdate, SessionRef

_logger = logging.getLogger(__name__)

PERSIST_WARNING = (
    "The device selection was applied but could not be saved; "
    "it may not survive a restart."
)


class ActiveSessionStore(Protocol):
    """Durable storage for the active device selection."""

    def save_active_sessions(
        self, sessions: Mapping[MediaKind, SessionRef | None]
    ) -> None:
        """Persist the full selection, replacing what was stored."""


@dataclass
class ActiveSessionRegistry:
    """Holds at most one active device per media kind.

    Every mutation is written through to the store before it returns. The
    write is synchronous, so no other request can observe the in-memory value
    before the store has been updated. A failed write still leaves the new
    value in memory and is reported back as a warning.
    """

    store: ActiveSessionStore
    _sessions: dict[MediaKind, SessionRef | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._sessions = {kind: self._sessions.get(kind) for kind in MediaKind}

    @classmethod
    def load(
        cls,
        store: ActiveSessionStore,
        saved: Mapping[MediaKind, SessionRef | None] | None = None,
    ) -> "ActiveSessionRegistry":
        """Create a registry seeded with previously saved selections."""
        registry = cls(store=store, _sessions=dict(saved or {}))
        for kind, ref in registry._sessions.items():
            if ref:
                _logger.info(
                    "Restored active %s session: %s",
                    kind.session_slot.upper(),
                    ref.device_name,
                )
        return registry

    def get(self, kind: MediaKind) -> SessionRef | None:
        """Return the active device for a kind, if one is selected."""
        return self._sessions[kind]

    def snapshot(self) -> dict[MediaKind, SessionRef | None]:
        """Return a copy of the current selection."""
        return dict(self._sessions)

    def select(self, kind: MediaKind, ref: SessionRef) -> RegistryUpdate:
        """Make a device the active one for a kind."""
        self._sessions[kind] = ref
        _logger.info(
            "Active %s session set to: %s (%s)",
            kind.session_slot.upper(),
            ref.device_name,
            ref.id,
        )
        return self._persist(kind)

    def clear(self, kind: MediaKind) -> RegistryUpdate:
        """Remove the active device for a kind."""
        self._sessions[kind] = None
        _logger.info("Active %s session cleared", kind.session_slot.upper())
        return self._persist(kind)

    def persist(self) -> bool:
        """Write the current selection to the store; return True on success."""
        try:
            self.store.save_active_sessions(self.snapshot())
        except Exception:
            _logger.exception("Failed to persist active sessions")
            return False
        return True

    def _persist(self, kind: MediaKind) -> RegistryUpdate:
        persisted = self.persist()
        return RegistryUpdate(
            kind=kind,
            ref=self._sessions[kind],
            persisted=persisted,
            warning=None if persisted else PERSIST_WARNING,
        )
