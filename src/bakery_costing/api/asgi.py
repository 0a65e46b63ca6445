"""ASGI entrypoint for the bakery costing API."""

from bakery_costing.api.app import create_app
from bakery_costing.containers import build_container

app = create_app(build_container())
