"""ASGI entrypoint for the PKU insights API."""

from pku_insights.api.app import create_app
from pku_insights.containers import build_container

app = create_app(build_container())
