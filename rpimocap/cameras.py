"""Camera sources: the common interface and a simulated camera."""

from __future__ import annotations

import abc
import time
from collections.abc import Callable
from typing import Any

import numpy as np

from rpimocap.camera import Intrinsics
from rpimocap.simscene import SimScene


class Camera(abc.ABC):
    """A source of grayscale images."""

    @property
    @abc.abstractmethod
    def opened(self) -> bool:
        """Whether the camera is open."""

    @abc.abstractmethod
    def open(self) -> bool:
        """Open the camera; return whether it is open."""

    @abc.abstractmethod
    def close(self) -> None:
        """Close the camera."""

    @abc.abstractmethod
    def pull_data(self) -> np.ndarray:
        """Capture one image."""

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class SimCamera(Camera):
    """A camera that renders a simulated scene, paced to its frame rate."""

    def __init__(
        self,
        params: Intrinsics,
        scene: SimScene,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.params = params
        self.scene = scene
        self.translation = np.zeros(3, dtype=np.float64)
        self.rotation = np.zeros(3, dtype=np.float64)
        self._opened = False
        self._clock = clock
        self._sleep = sleep
        self._last = clock()

    @property
    def opened(self) -> bool:
        return self._opened

    def open(self) -> bool:
        self._opened = True
        return self._opened

    def close(self) -> None:
        self._opened = False

    def _restart(self) -> int:
        now = self._clock()
        elapsed_ms = int((now - self._last) * 1000.0)
        self._last = now
        return elapsed_ms

    def pull_data(self) -> np.ndarray:
        """Wait out the rest of the frame period, then render the scene."""
        elapsed_ms = self._restart()
        if self.params.max_fps > 0:
            wait_ms = int(1000.0 / self.params.max_fps - elapsed_ms)
            if wait_ms > 0:
                self._sleep(wait_ms / 1000.0)
                self._restart()
        return self.scene.project_scene(self.params, self.rotation, self.translation)