"""JSON settings file holding media server access and active devices."""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from nfc_bridge.domain.catalog import MediaKind
from nfc_bridge.domain.errors import ConfigurationError
from nfc_bridge.domain.sessions import SessionRef

_logger = logging.getLogger(__name__)


class StoredSessionRef(BaseModel):
    """Active device as written to the settings file."""

    id: str
    name: str = ""
    client: str = ""

    @classmethod
    def from_ref(cls, ref: SessionRef) -> "StoredSessionRef":
        return cls(id=ref.id, name=ref.device_name, client=ref.client_name)

    def to_ref(self) -> SessionRef:
        return SessionRef(id=self.id, device_name=self.name, client_name=self.client)


class StoredActiveSessions(BaseModel):
    """Active device per session slot."""

    movie: StoredSessionRef | None = None
    music: StoredSessionRef | None = None


class BridgeConfig(BaseModel):
    """Contents of the settings file."""

    model_config = ConfigDict(extra="allow")

    media_server_base_url: str = Field(
        validation_alias=AliasChoices("mediaServerBaseUrl", "jellyfinBaseUrl")
    )
    api_key: str = Field(validation_alias="apiKey")
    target_username: str = Field(validation_alias="targetUsername")
    active_sessions: StoredActiveSessions = Field(
        default_factory=StoredActiveSessions, validation_alias="activeSessions"
    )

    def active_refs(self) -> dict[MediaKind, SessionRef | None]:
        """Return the saved active device for every media kind."""
        refs: dict[MediaKind, SessionRef | None] = {}
        for kind in MediaKind:
            stored = getattr(self.active_sessions, kind.session_slot)
            refs[kind] = stored.to_ref() if stored else None
        return refs


@dataclass
class JsonSettingsFile:
    """Reads and rewrites the settings file, keeping unrelated keys intact."""

    path: Path
    _document: dict[str, object] = field(default_factory=dict, repr=False)

    def load(self) -> BridgeConfig:
        """Read and validate the settings file."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(
                f"Cannot read settings file {self.path}: {exc}"
            ) from exc
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Settings file {self.path} is not valid JSON: {exc}"
            ) from exc
        if not isinstance(document, dict):
            raise ConfigurationError(f"Settings file {self.path} must hold an object")
        try:
            config = BridgeConfig.model_validate(document)
        except pydantic.ValidationError as exc:
            raise ConfigurationError(
                f"Settings file {self.path} is invalid: {exc}"
            ) from exc
        self._document = document
        return config

    def save_active_sessions(
        self, sessions: Mapping[MediaKind, SessionRef | None]
    ) -> None:
        """Rewrite the settings file with the given active devices."""
        document = dict(self._document)
        document["activeSessions"] = {
            kind.session_slot: (
                StoredSessionRef.from_ref(ref).model_dump() if ref else None
            )
            for kind, ref in sessions.items()
        }
        temp_path = self.path.with_name(f"{self.path.name}.tmp")
        temp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        os.replace(temp_path, self.path)
        self._document = document
        _logger.info("Settings saved to %s", self.path)
