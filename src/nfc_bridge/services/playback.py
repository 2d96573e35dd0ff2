"""Dispatch of play commands to the active device."""

import logging
from dataclasses import dataclass

from nfc_bridge.adapters.jellyfin_client import MediaDirectoryClient
from nfc_bridge.domain.catalog import CatalogEntry, MediaKind
from nfc_bridge.domain.errors import MediaServerError
from nfc_bridge.domain.sessions import DispatchResult, DispatchStatus
from nfc_bridge.services.active_sessions import ActiveSessionRegistry

_logger = logging.getLogger(__name__)


@dataclass
class PlaybackDispatcher:
    """Sends a catalog entry to the device selected for its kind.

    Failed commands are reported, not retried: the user can scan the tag again,
    and a retry would hide an unavailable device.
    """

    registry: ActiveSessionRegistry
    client: MediaDirectoryClient

    async def dispatch(self, entry: CatalogEntry, kind: MediaKind) -> DispatchResult:
        """Start playback of an entry on the active device for its kind."""
        session = self.registry.get(kind)
        if session is None or not session.id:
            _logger.info(
                "No active %s device selected", kind.session_slot, extra={"kind": kind}
            )
            return DispatchResult(status=DispatchStatus.NO_ACTIVE_DEVICE, kind=kind)

        _logger.info(
            'Sending play command for "%s" (%s) to device "%s"',
            entry.display_name,
            kind,
            session.device_name,
        )
        try:
            await self.client.play_now(session.id, [entry.external_item_id])
        except MediaServerError as exc:
            _logger.exception(
                "Jellyfin playback command failed",
                extra={"session_id": session.id, "item_id": entry.external_item_id},
            )
            return DispatchResult(
                status=DispatchStatus.UPSTREAM_FAILURE,
                kind=kind,
                session=session,
                error=str(exc),
            )
        return DispatchResult(status=DispatchStatus.SENT, kind=kind, session=session)
