"""ASGI entrypoint for the contacts gateway."""

from erp_contacts.api.app import create_app
from erp_contacts.containers import build_container

app = create_app(build_container())
