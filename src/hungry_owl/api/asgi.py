"""ASGI entrypoint for the Hungry Owl API."""

from hungry_owl.api.app import create_app
from hungry_owl.containers import build_container

app = create_app(build_container())
