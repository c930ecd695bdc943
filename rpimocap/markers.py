"""Detection of bright marker centres in grayscale camera images."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from itertools import groupby

import numpy as np

# (row, column) offsets, counter-clockwise on screen starting east.
_DIRECTIONS = ((0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1), (1, 0), (1, 1))
_WEST = 4
_EAST = 0


@dataclass
class DetectorParams:
    """Threshold and contour size limits of the detector."""

    image_threshold: int = 220
    min_contour_size: int = 5
    max_contour_size: int = 500


def _follow(grid: list[list[int]], r0: int, c0: int, start: int, nbd: int) -> list[tuple[int, int]]:
    """Follow one border starting at (r0, c0); return its points as (x, y)."""
    found = None
    for step in range(1, 9):
        direction = (start - step) % 8
        dr, dc = _DIRECTIONS[direction]
        if grid[r0 + dr][c0 + dc] != 0:
            found = direction
            break
    if found is None:
        grid[r0][c0] = -nbd
        return [(c0 - 1, r0 - 1)]

    s = found
    r1, c1 = r0 + _DIRECTIONS[s][0], c0 + _DIRECTIONS[s][1]
    r3, c3 = r0, c0
    points = []
    while True:
        previous = s
        east_zero = False
        for step in range(1, 9):
            direction = (previous + step) % 8
            dr, dc = _DIRECTIONS[direction]
            if grid[r3 + dr][c3 + dc] != 0:
                s = direction
                break
            if direction == _EAST:
                east_zero = True
        if east_zero:
            grid[r3][c3] = -nbd
        elif grid[r3][c3] == 1:
            grid[r3][c3] = nbd
        points.append((c3 - 1, r3 - 1))

        dr, dc = _DIRECTIONS[s]
        r4, c4 = r3 + dr, c3 + dc
        if (r4, c4) == (r0, c0) and (r3, c3) == (r1, c1):
            return points
        r3, c3 = r4, c4
        s = (s + 4) % 8


def _find_contours(mask: np.ndarray) -> list[list[tuple[int, int]]]:
    """All outer and hole borders of a binary image, every border pixel kept."""
    height, width = mask.shape
    padded = np.zeros((height + 2, width + 2), dtype=np.int8)
    padded[1:-1, 1:-1] = mask
    edges = np.diff(padded, axis=1)
    rows, cols = np.nonzero(edges)
    signs = edges[rows, cols]

    candidates = (
        (int(r), int(c) + 1 if sign > 0 else int(c))
        for r, c, sign in zip(rows.tolist(), cols.tolist(), signs.tolist())
    )

    grid = padded.astype(np.int64).tolist()
    nbd = 1
    contours = []
    for row, group in groupby(candidates, key=lambda item: item[0]):
        for col in sorted({c for _, c in group}):
            value = grid[row][col]
            if value == 1 and grid[row][col - 1] == 0:
                nbd += 1
                contours.append(_follow(grid, row, col, _WEST, nbd))
            elif value >= 1 and grid[row][col + 1] == 0:
                nbd += 1
                contours.append(_follow(grid, row, col, _EAST, nbd))
    contours.reverse()
    return contours


class MarkerDetector:
    """Finds centres of bright blobs in a grayscale image."""

    def __init__(self, params: DetectorParams | None = None) -> None:
        self.params = params if params is not None else DetectorParams()

    def _rejected(self, contour: Sequence) -> bool:
        size = len(contour)
        return size > self.params.max_contour_size and size < self.params.min_contour_size

    def detect_markers(self, image) -> list[tuple[float, float]]:
        """Centres (x, y) of every contour above the threshold."""
        array = np.asarray(image)
        if array.size == 0:
            return []
        if array.ndim != 2:
            raise ValueError(f"expected a single-channel image, got shape {array.shape}")
        mask = array > self.params.image_threshold
        contours = [c for c in _find_contours(mask) if not self._rejected(c)]
        return [self.find_point(contour) for contour in contours]

    @staticmethod
    def find_point(contour: Sequence) -> tuple[float, float]:
        """Mean position of the contour points."""
        points = list(contour)
        if not points:
            raise ValueError("contour has no points")
        sum_x = sum(int(x) for x, _ in points)
        sum_y = sum(int(y) for _, y in points)
        return float(sum_x) / len(points), float(sum_y) / len(points)