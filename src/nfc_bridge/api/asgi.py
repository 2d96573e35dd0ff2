"""ASGI entrypoint for the NFC bridge API."""

from nfc_bridge.api.app import create_app
from nfc_bridge.containers import build_container

app = create_app(build_container())
