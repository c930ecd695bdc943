"""Intrinsic camera parameters and presets for Raspberry Pi camera modules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np

DEG_TO_RAD = math.pi / 180.0

_V1_FOV_RAD = (53.5 * DEG_TO_RAD, 41.41 * DEG_TO_RAD)
_V2_FOV_RAD = (62.2 * DEG_TO_RAD, 48.8 * DEG_TO_RAD)

_PREVIEW_SIZE = (640, 480)
_PRINCIPAL_POINT = (320.0, 240.0)
_PRESET_MAX_FPS = 90


def _eye() -> np.ndarray:
    return np.eye(3, dtype=np.float32)


def _zero_distortion() -> np.ndarray:
    return np.zeros((1, 4), dtype=np.float32)


def _invert(matrix: np.ndarray) -> np.ndarray:
    """Invert a camera matrix; a singular matrix yields all zeros."""
    try:
        return np.linalg.inv(matrix).astype(np.float32)
    except np.linalg.LinAlgError:
        return np.zeros_like(matrix, dtype=np.float32)


@dataclass
class Intrinsics:
    """Pinhole camera model: image size, camera matrix and distortion."""

    max_fps: int = 0
    image_size: tuple[int, int] = (0, 0)
    camera_matrix: np.ndarray = field(default_factory=_eye)
    camera_matrix_inv: np.ndarray = field(default_factory=_eye)
    distortion_coeffs: np.ndarray = field(default_factory=_zero_distortion)

    @property
    def width(self) -> int:
        return self.image_size[0]

    @property
    def height(self) -> int:
        return self.image_size[1]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the flat mapping used in service descriptions and projects."""
        data: dict[str, Any] = {
            "imageWidth": int(self.image_size[0]),
            "imageHeight": int(self.image_size[1]),
            "maxFPS": int(self.max_fps),
            "fx": float(self.camera_matrix[0, 0]),
            "fy": float(self.camera_matrix[1, 1]),
            "cx": float(self.camera_matrix[0, 2]),
            "cy": float(self.camera_matrix[1, 2]),
        }
        for index, coeff in enumerate(np.ravel(self.distortion_coeffs)):
            data[f"dist{index}"] = float(coeff)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Intrinsics":
        """Build parameters from a mapping; missing values count as zero.

        Distortion coefficients are not read and stay zero.
        """
        params = cls()
        params.image_size = (int(data.get("imageWidth", 0)), int(data.get("imageHeight", 0)))
        params.max_fps = int(data.get("maxFPS", 0))
        params.camera_matrix[0, 0] = float(data.get("fx", 0.0))
        params.camera_matrix[1, 1] = float(data.get("fy", 0.0))
        params.camera_matrix[0, 2] = float(data.get("cx", 0.0))
        params.camera_matrix[1, 2] = float(data.get("cy", 0.0))
        params.camera_matrix_inv = _invert(params.camera_matrix)
        return params

    @classmethod
    def _preset(cls, fov_width: float, fov_height: float) -> "Intrinsics":
        params = cls()
        params.max_fps = _PRESET_MAX_FPS
        params.image_size = _PREVIEW_SIZE
        width, height = _PREVIEW_SIZE
        params.camera_matrix[0, 0] = width / math.tan(fov_width / 2.0)
        params.camera_matrix[1, 1] = height / math.tan(fov_height / 2.0)
        params.camera_matrix[0, 2] = _PRINCIPAL_POINT[0]
        params.camera_matrix[1, 2] = _PRINCIPAL_POINT[1]
        params.camera_matrix_inv = _invert(params.camera_matrix)
        return params

    @classmethod
    def rpi_camera_v1(cls, full_fov_rad: tuple[float, float] | None = None) -> "Intrinsics":
        """Parameters of the camera module v1 at 640x480 from its full field of view."""
        fov_width, fov_height = full_fov_rad if full_fov_rad is not None else _V1_FOV_RAD
        return cls._preset(fov_width, fov_height)

    @classmethod
    def rpi_camera_v2(cls, full_fov_rad: tuple[float, float] | None = None) -> "Intrinsics":
        """Parameters of the camera module v2 at 640x480, binned and cropped from full resolution."""
        fov_width, fov_height = full_fov_rad if full_fov_rad is not None else _V2_FOV_RAD

        full_resolution = (3280, 2464)
        binned_resolution = (1280, 960)
        left_right_crop = 1000
        top_bottom_crop = 752
        assert binned_resolution[0] + 2 * left_right_crop == full_resolution[0]
        assert binned_resolution[1] + 2 * top_bottom_crop == full_resolution[1]

        cropped_width = binned_resolution[0] * fov_width / full_resolution[0]
        cropped_height = binned_resolution[1] * fov_height / full_resolution[1]
        return cls._preset(cropped_width, cropped_height)