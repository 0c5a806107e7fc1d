"""
Mask post-processing: hole filling, selections and region statistics.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from scipy import ndimage

from .field import MountainMask


@dataclass
class RegionStatistics:
    """Pixel statistics over a selection."""

    count: int
    mean: float
    min: float
    max: float


def fill_holes(mask: MountainMask) -> MountainMask:
    """
    Fill enclosed holes in a mountain mask.

    Returns a new mask; pixels set in the input stay set.
    """
    filled = MountainMask(mask.width, mask.height)
    filled.values = ndimage.binary_fill_holes(mask.values) | mask.values
    return filled


class Selection:
    """The pixels of a finished mask, in the form the inversion works on."""

    def __init__(self, pixels: np.ndarray):
        self.pixels = np.asarray(pixels, dtype=bool)

    @classmethod
    def from_mask(cls, mask: MountainMask) -> "Selection":
        return cls(mask.values.copy())

    @property
    def is_empty(self) -> bool:
        return not self.pixels.any()

    @property
    def count(self) -> int:
        return int(np.count_nonzero(self.pixels))

    @property
    def bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """Bounding box as (x, y, width, height), or None for an empty selection."""
        if self.is_empty:
            return None
        ys, xs = np.nonzero(self.pixels)
        x0, y0 = int(xs.min()), int(ys.min())
        return x0, y0, int(xs.max()) - x0 + 1, int(ys.max()) - y0 + 1

    def outline(self) -> np.ndarray:
        """Boundary pixels: selected pixels with an unselected 4-neighbour."""
        eroded = ndimage.binary_erosion(self.pixels, border_value=0)
        return self.pixels & ~eroded


def region_statistics(values: np.ndarray, selection: Selection) -> RegionStatistics:
    """
    Count, mean, min and max of the selected values.

    Raises:
        ValueError: If the selection is empty
    """
    region = values[selection.pixels]
    if region.size == 0:
        raise ValueError("Cannot compute statistics over an empty selection")
    return RegionStatistics(
        count=int(region.size),
        mean=float(region.mean(dtype=np.float64)),
        min=float(region.min()),
        max=float(region.max()),
    )
