"""Parametric 3D rays and the geometry used to triangulate markers."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

_PARALLEL_EPSILON = 1e-7


def _vec3(values) -> np.ndarray:
    array = np.asarray(values, dtype=np.float64).reshape(3)
    return array


@dataclass
class Line3D:
    """A ray in 3D space: origin plus a non-negative multiple of direction."""

    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self) -> None:
        self.origin = _vec3(self.origin)
        self.direction = _vec3(self.direction)

    def point_at(self, t: float) -> np.ndarray:
        """Return origin + t * direction."""
        return self.origin + self.direction * t

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line3D):
            return NotImplemented
        return bool(
            np.array_equal(self.origin, other.origin)
            and np.array_equal(self.direction, other.direction)
        )


def closest_points(line1: Line3D, line2: Line3D) -> tuple[np.ndarray, np.ndarray] | None:
    """Closest pair of points on two rays.

    Returns None when the rays are parallel or when either closest point lies
    behind its ray's origin.
    """
    a = float(np.dot(line1.direction, line1.direction))
    b = float(np.dot(line1.direction, line2.direction))
    e = float(np.dot(line2.direction, line2.direction))
    d = a * e - b * b

    if abs(d) <= _PARALLEL_EPSILON:
        return None

    r = line1.origin - line2.origin
    c = float(np.dot(line1.direction, r))
    f = float(np.dot(line2.direction, r))

    coeff1 = (b * f - c * e) / d
    coeff2 = (a * f - c * b) / d

    if coeff1 < 0.0 or coeff2 < 0.0:
        return None

    return line1.point_at(coeff1), line2.point_at(coeff2)


def line_angle(v1, v2) -> float:
    """Angle between two 3D vectors in radians."""
    a = _vec3(v1)
    b = _vec3(v2)
    return math.atan2(float(np.linalg.norm(np.cross(a, b))), float(np.dot(a, b)))