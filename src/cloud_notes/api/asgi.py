"""ASGI entrypoint for the notes API."""

from cloud_notes.api.app import create_app
from cloud_notes.containers import build_container

app = create_app(build_container())
