"""ASGI entrypoint for the BillTick API."""

from billtick.api.app import create_app
from billtick.containers import build_container

app = create_app(build_container())
