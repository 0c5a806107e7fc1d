"""
Local maxima detection with a noise tolerance.

A pixel is reported as a maximum when it is the highest point of the
8-connected area of pixels lying within the noise tolerance below it, and
that area does not overlap an area claimed by a brighter maximum.
"""

from typing import List

import numpy as np
import structlog
from scipy import ndimage

from .field import BrightnessField, Coordinate

logger = structlog.get_logger()

_NEIGHBORS_8 = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


def find_maxima(
    field: BrightnessField,
    noise_tolerance: float,
    exclude_edges: bool = False,
) -> List[Coordinate]:
    """
    Find prominent local maxima.

    Args:
        field: Brightness field to search
        noise_tolerance: How far below a peak its surroundings must drop
            before another peak can be told apart from it
        exclude_edges: Drop maxima whose tolerance area touches the image border

    Returns:
        (x, y) coordinates ordered by descending brightness, ties in raster order
    """
    if noise_tolerance < 0:
        raise ValueError(f"noise_tolerance must be >= 0, got {noise_tolerance}")

    values = field.values
    height, width = values.shape

    local_max = values == ndimage.maximum_filter(values, size=3, mode="nearest")
    ys, xs = np.nonzero(local_max)
    order = np.argsort(-values[ys, xs], kind="stable")

    claimed = np.zeros(values.shape, dtype=bool)
    settled = np.zeros(values.shape, dtype=bool)
    visited = np.zeros(values.shape, dtype=np.int64)
    maxima: List[Coordinate] = []

    for stamp, idx in enumerate(order, start=1):
        x, y = int(xs[idx]), int(ys[idx])
        if claimed[y, x] or settled[y, x]:
            continue

        peak = values[y, x]
        floor = peak - noise_tolerance
        is_max = True
        touches_edge = False
        area = [(x, y)]
        visited[y, x] = stamp
        stack = [(x, y)]

        # DFS over the tolerance area, stamped so each candidate gets a clean pass
        while stack:
            cx, cy = stack.pop()
            if cx == 0 or cy == 0 or cx == width - 1 or cy == height - 1:
                touches_edge = True
            for dx, dy in _NEIGHBORS_8:
                nx, ny = cx + dx, cy + dy
                if nx < 0 or ny < 0 or nx >= width or ny >= height:
                    continue
                if visited[ny, nx] == stamp or values[ny, nx] < floor:
                    continue
                if values[ny, nx] > peak or claimed[ny, nx]:
                    is_max = False
                visited[ny, nx] = stamp
                area.append((nx, ny))
                stack.append((nx, ny))

        if exclude_edges and touches_edge:
            is_max = False

        if is_max:
            for ax, ay in area:
                claimed[ay, ax] = True
            maxima.append((x, y))
        else:
            # Equal plateau pixels would repeat the same rejected flood
            for ax, ay in area:
                if values[ay, ax] == peak:
                    settled[ay, ax] = True

    logger.info(
        "Maxima found",
        candidates=len(order),
        maxima=len(maxima),
        noise_tolerance=noise_tolerance,
        exclude_edges=exclude_edges,
    )
    return maxima
