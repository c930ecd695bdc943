"""Simulation projects: saved virtual cameras and the virtual marker scene."""

from __future__ import annotations

import json
import time
import uuid as _uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rpimocap.camera import Intrinsics
from rpimocap.frame import Frame, Marker
from rpimocap.wand import SimMarker, VirtualFloorWand, VirtualWand

WAND_SIZE_CM = 50.0
WAND_MIDDLE_OFFSET_CM = 10.0
FLOOR_WAND_SIZE_CM = 30.0

_ZERO3 = (0.0, 0.0, 0.0)


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_uuid(value: Any) -> _uuid.UUID:
    try:
        return _uuid.UUID(str(value))
    except ValueError:
        return _uuid.UUID(int=0)


def _vec3(values: Iterable[float]) -> tuple[float, float, float]:
    x, y, z = (float(v) for v in values)
    return (x, y, z)


@dataclass(eq=False)
class ClientConfig:
    """One simulated camera: its id, intrinsics and pose."""

    id: _uuid.UUID
    params: Intrinsics
    rotation: tuple[float, float, float] = _ZERO3
    translation: tuple[float, float, float] = _ZERO3

    def __post_init__(self) -> None:
        self.rotation = _vec3(self.rotation)
        self.translation = _vec3(self.translation)

    def to_dict(self) -> dict[str, Any]:
        data = self.params.to_dict()
        data["id"] = "{" + str(self.id) + "}"
        data["rx"], data["ry"], data["rz"] = self.rotation
        data["tx"], data["ty"], data["tz"] = self.translation
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClientConfig":
        """Build from a saved mapping; missing values count as zero."""
        return cls(
            id=_to_uuid(data.get("id", "")),
            params=Intrinsics.from_dict(data),
            rotation=tuple(_to_float(data.get(key)) for key in ("rx", "ry", "rz")),
            translation=tuple(_to_float(data.get(key)) for key in ("tx", "ty", "tz")),
        )


def save_project(path: str | Path, clients: Iterable[ClientConfig]) -> None:
    """Write the clients to an indented JSON project file."""
    data = {"clients": [client.to_dict() for client in clients]}
    Path(path).write_text(json.dumps(data, indent=4), encoding="utf-8")


def load_project(path: str | Path) -> list[ClientConfig]:
    """Clients of a project file; an unreadable document holds no clients."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        return []
    if not isinstance(data, dict):
        return []
    clients = data.get("clients", [])
    if not isinstance(clients, list):
        return []
    return [ClientConfig.from_dict(item if isinstance(item, dict) else {}) for item in clients]


def new_client_config() -> ClientConfig:
    """A fresh camera v1 client at the origin with a new id."""
    return ClientConfig(id=_uuid.uuid4(), params=Intrinsics.rpi_camera_v1())


def compose_markers(wand_transform=None, floor_transform=None) -> list[SimMarker]:
    """Markers of the wand and of the floor cross; a None transform hides that wand."""
    markers: list[SimMarker] = []
    if wand_transform is not None:
        markers.extend(VirtualWand(WAND_SIZE_CM, WAND_MIDDLE_OFFSET_CM).markers(wand_transform))
    if floor_transform is not None:
        markers.extend(VirtualFloorWand(FLOOR_WAND_SIZE_CM).markers(floor_transform))
    return markers


def frame_from_markers(markers: Iterable[SimMarker]) -> Frame:
    """A frame stamped now holding the simulated markers, all with id 0."""
    return Frame(
        time=time.time_ns(),
        lines=[],
        markers=[Marker(id=0, position=marker.translation.copy()) for marker in markers],
    )