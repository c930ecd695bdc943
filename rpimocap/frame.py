"""A captured frame: reconstructed markers and camera rays at one instant."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from rpimocap.geometry import Line3D


def _zero_vec3() -> np.ndarray:
    return np.zeros(3, dtype=np.float64)


@dataclass
class Marker:
    """A marker with its identifier and 3D position."""

    id: int = 0
    position: np.ndarray = field(default_factory=_zero_vec3)

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64).reshape(3)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Marker):
            return NotImplemented
        return self.id == other.id and bool(np.array_equal(self.position, other.position))


@dataclass
class LineSegment:
    """A camera ray limited to a length in centimetres."""

    line: Line3D
    length_cm: float = 100.0


@dataclass
class Frame:
    """Everything captured in one set of synchronised camera images.

    ``time`` is the capture time in nanoseconds since the epoch.
    """

    time: int
    lines: list[LineSegment] = field(default_factory=list)
    markers: list[Marker] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.lines = list(self.lines)
        self.markers = list(self.markers)