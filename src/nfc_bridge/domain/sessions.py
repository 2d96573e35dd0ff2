"""Domain models for playback sessions and device selection."""

from dataclasses import dataclass
from enum import StrEnum

from nfc_bridge.domain.catalog import MediaKind


@dataclass(frozen=True)
class PlaybackSession:
    """A client session currently connected to the media server."""

    id: str
    device_name: str
    client_name: str
    user_name: str

    def to_ref(self) -> "SessionRef":
        return SessionRef(
            id=self.id, device_name=self.device_name, client_name=self.client_name
        )


@dataclass(frozen=True)
class SessionRef:
    """The device selected to receive play commands for a media kind."""

    id: str
    device_name: str
    client_name: str


@dataclass(frozen=True)
class RegistryUpdate:
    """Result of mutating the active session registry."""

    kind: MediaKind
    ref: SessionRef | None
    persisted: bool
    warning: str | None = None


class DispatchStatus(StrEnum):
    SENT = "sent"
    NO_ACTIVE_DEVICE = "no_active_device"
    UPSTREAM_FAILURE = "upstream_failure"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of sending a play command for a catalog entry."""

    status: DispatchStatus
    kind: MediaKind
    session: SessionRef | None = None
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.status is DispatchStatus.SENT
