"""MQTT topic names shared by clients and the server."""

from __future__ import annotations

import uuid as _uuid

TRIGGER = "/trigger"
"""Software trigger for cameras; every client listens to this topic."""


def uuid_string(uuid: _uuid.UUID | str) -> str:
    """Client identifier as a lower-case UUID without braces."""
    if not isinstance(uuid, _uuid.UUID):
        uuid = _uuid.UUID(str(uuid))
    return str(uuid)


def client_prefix(uuid: _uuid.UUID | str) -> str:
    """Prefix of every topic that belongs to one client."""
    return "/client-" + uuid_string(uuid)


def pixels(uuid: _uuid.UUID | str) -> str:
    """Topic on which a client publishes detected marker centres."""
    return client_prefix(uuid) + "/pixels"