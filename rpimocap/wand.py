"""Virtual calibration wands that place simulated markers in a scene."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _zero_vec3() -> np.ndarray:
    return np.zeros(3, dtype=np.float64)


@dataclass
class SimMarker:
    """A simulated marker at an absolute 3D position."""

    id: int = 0
    size_mm: int = 0
    translation: np.ndarray = field(default_factory=_zero_vec3)

    def __post_init__(self) -> None:
        self.translation = np.asarray(self.translation, dtype=np.float64).reshape(3)


def _apply(transform, point: np.ndarray) -> np.ndarray:
    matrix = np.asarray(transform, dtype=np.float64)
    if matrix.shape not in ((4, 4), (3, 4)):
        raise ValueError(f"transform must be a 4x4 or 3x4 affine matrix, got {matrix.shape}")
    return matrix[:3, :3] @ point + matrix[:3, 3]


def _markers(transform, points) -> list[SimMarker]:
    return [SimMarker(translation=_apply(transform, point)) for point in points]


class VirtualWand:
    """A straight wand with markers at both ends and one offset from the middle."""

    wand_point_count = 3

    def __init__(self, size_cm: float, middle_point_offset_cm: float) -> None:
        self._points = (
            np.array([-size_cm / 2.0, 0.0, 0.0]),
            np.array([middle_point_offset_cm, 0.0, 0.0]),
            np.array([size_cm / 2.0, 0.0, 0.0]),
        )

    def markers(self, transform) -> list[SimMarker]:
        """Left, middle and right markers placed by an affine transform."""
        return _markers(transform, self._points)


class VirtualFloorWand:
    """A cross lying on the floor: a centre marker and four arms."""

    def __init__(self, size_cm: float) -> None:
        self._points = (
            np.array([0.0, 0.0, 0.0]),
            np.array([size_cm, 0.0, 0.0]),
            np.array([-size_cm, 0.0, 0.0]),
            np.array([0.0, 0.0, -size_cm]),
            np.array([0.0, 0.0, size_cm]),
        )

    def markers(self, transform) -> list[SimMarker]:
        """Centre, left, right, near and far markers placed by an affine transform."""
        return _markers(transform, self._points)