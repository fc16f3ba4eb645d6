"""ASGI entrypoint for the memory calendar API."""

from memory_calendar.api.app import create_app
from memory_calendar.containers import build_container

app = create_app(build_container())
