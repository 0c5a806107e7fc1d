"""
Brightness field and mountain mask.

The field is a read-only view of a 2-D image, addressed by (x, y) pixel
coordinates. The mask records which pixels belong to some mountain and
only ever grows while the flood runs.
"""

from typing import Tuple

import numpy as np

Coordinate = Tuple[int, int]


def is_interior(x: int, y: int, width: int, height: int) -> bool:
    """True when (x, y) is strictly inside the one-pixel border frame."""
    return 0 < x < width - 1 and 0 < y < height - 1


class BrightnessField:
    """Read-only brightness lookup with explicit width/height bounds."""

    def __init__(self, values):
        """
        Wrap a 2-D array of brightness values.

        Args:
            values: Array-like of shape (height, width)

        Raises:
            ValueError: If the array is not 2-D, is empty or holds non-finite values
        """
        data = np.array(values, dtype=np.float32)
        if data.ndim != 2:
            raise ValueError(f"Brightness field must be 2-D, got {data.ndim} dimensions")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"Brightness field must not be empty, got shape {data.shape}")
        if not np.all(np.isfinite(data)):
            raise ValueError("Brightness field contains NaN or infinite values")

        data.flags.writeable = False
        self.values = data
        self.height, self.width = data.shape

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    def brightness(self, x: int, y: int) -> float:
        """Brightness at (x, y). Callers guarantee the coordinate is in range."""
        return float(self.values[y, x])

    def is_interior(self, x: int, y: int) -> bool:
        return is_interior(x, y, self.width, self.height)


class MountainMask:
    """Boolean grid marking pixels that belong to a mountain."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.values = np.zeros((height, width), dtype=bool)

    @classmethod
    def like(cls, field: BrightnessField) -> "MountainMask":
        return cls(field.width, field.height)

    def is_set(self, x: int, y: int) -> bool:
        # Outside the image counts as "not part of any mountain"
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        return bool(self.values[y, x])

    def set(self, x: int, y: int) -> None:
        self.values[y, x] = True

    def count(self) -> int:
        return int(np.count_nonzero(self.values))

    def coordinates(self):
        """Masked pixels as a list of (x, y) tuples in raster order."""
        ys, xs = np.nonzero(self.values)
        return [(int(x), int(y)) for x, y in zip(xs, ys)]
