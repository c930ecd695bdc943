"""A simulated scene of markers and its projection into virtual cameras."""

from __future__ import annotations

import math
import threading
from collections.abc import Iterable

import numpy as np

from rpimocap.camera import Intrinsics
from rpimocap.wand import SimMarker

_MARKER_RADIUS = 3
_MARKER_VALUE = 255


def rodrigues(rvec) -> np.ndarray:
    """Rotation matrix of a rotation vector (axis times angle)."""
    r = np.asarray(rvec, dtype=np.float64).reshape(3)
    theta = float(np.linalg.norm(r))
    if theta < np.finfo(np.float64).eps:
        return np.eye(3)
    kx, ky, kz = r / theta
    k = np.array([kx, ky, kz])
    cross = np.array([[0.0, -kz, ky], [kz, 0.0, -kx], [-ky, kx, 0.0]])
    c, s = math.cos(theta), math.sin(theta)
    return c * np.eye(3) + (1.0 - c) * np.outer(k, k) + s * cross


def project_points(points, camera_matrix, distortion_coeffs) -> np.ndarray:
    """Pixels of camera-space 3D points under the pinhole model with distortion.

    Distortion takes 0, 4, 5 or 8 coefficients: k1, k2, p1, p2[, k3[, k4, k5, k6]].
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    matrix = np.asarray(camera_matrix, dtype=np.float64)
    dist = np.ravel(np.asarray(distortion_coeffs, dtype=np.float64))
    if dist.size not in (0, 4, 5, 8):
        raise ValueError(f"unsupported number of distortion coefficients: {dist.size}")
    k = np.zeros(8)
    k[: dist.size] = dist
    k1, k2, p1, p2, k3, k4, k5, k6 = k

    z = pts[:, 2]
    inv_z = np.divide(1.0, z, out=np.ones_like(z), where=z != 0)
    x = pts[:, 0] * inv_z
    y = pts[:, 1] * inv_z

    r2 = x * x + y * y
    r4 = r2 * r2
    r6 = r4 * r2
    radial = (1 + k1 * r2 + k2 * r4 + k3 * r6) / (1 + k4 * r2 + k5 * r4 + k6 * r6)
    xd = x * radial + 2 * p1 * x * y + p2 * (r2 + 2 * x * x)
    yd = y * radial + p1 * (r2 + 2 * y * y) + 2 * p2 * x * y

    u = matrix[0, 0] * xd + matrix[0, 2]
    v = matrix[1, 1] * yd + matrix[1, 2]
    return np.stack([u, v], axis=1)


def _draw_disc(image: np.ndarray, cx: int, cy: int, radius: int, value: int) -> None:
    height, width = image.shape
    for dy in range(-radius, radius + 1):
        y = cy + dy
        if not 0 <= y < height:
            continue
        half = int(math.isqrt(radius * radius - dy * dy))
        x0, x1 = max(cx - half, 0), min(cx + half, width - 1)
        if x0 <= x1:
            image[y, x0 : x1 + 1] = value


class SimScene:
    """Markers at absolute positions, shared safely between camera threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._markers: list[SimMarker] = []

    def set_markers(self, markers: Iterable[SimMarker]) -> None:
        """Replace the markers of the scene."""
        markers = list(markers)
        with self._lock:
            self._markers = markers

    def project_scene(self, params: Intrinsics, rvec, tvec) -> np.ndarray:
        """Simulated grayscale image of the scene seen from a camera pose."""
        rotation = rodrigues(rvec)
        translation = np.asarray(tvec, dtype=np.float64).reshape(3)

        with self._lock:
            positions = [marker.translation for marker in self._markers]

        width, height = params.image_size
        image = np.zeros((int(height), int(width)), dtype=np.uint8)
        if not positions:
            return image

        world = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        in_camera = (world - translation) @ rotation
        pixels = project_points(in_camera, params.camera_matrix, params.distortion_coeffs)

        for point, (u, v) in zip(in_camera, pixels):
            if point[2] > 0.0 and math.isfinite(u) and math.isfinite(v):
                _draw_disc(image, int(round(u)), int(round(v)), _MARKER_RADIUS, _MARKER_VALUE)
        return image