"""ASGI entrypoint for the footprints API."""

from footprints.api.app import create_app
from footprints.containers import build_container

app = create_app(build_container())
