"""Listing of devices that can be selected for playback."""

from dataclasses import dataclass

from nfc_bridge.adapters.jellyfin_client import MediaDirectoryClient
from nfc_bridge.domain.sessions import PlaybackSession


@dataclass
class DeviceService:
    """Reads the sessions currently connected to the media server."""

    client: MediaDirectoryClient

    async def list_sessions(self) -> list[PlaybackSession]:
        """Return connected sessions that can receive play commands."""
        raw_sessions = await self.client.list_sessions()
        return [
            PlaybackSession(
                id=str(raw["Id"]),
                device_name=str(raw.get("DeviceName") or ""),
                client_name=str(raw.get("Client") or ""),
                user_name=str(raw.get("UserName") or ""),
            )
            for raw in raw_sessions
            if raw.get("Id")
        ]
