"""Shared test fields."""

import numpy as np
import pytest

CONE_PEAKS = ((4, 4), (14, 4))


def two_cone_field():
    """
    Two square cones walled in by a brighter plateau.

    Each cone peaks at 100 and drops by 10 per ring (Chebyshev distance) down
    to 70 at distance 3; everything else, the border included, is 90.
    """
    field = np.full((9, 19), 90.0, dtype=np.float32)
    for px, py in CONE_PEAKS:
        for y in range(py - 3, py + 4):
            for x in range(px - 3, px + 4):
                field[y, x] = 100 - 10 * max(abs(x - px), abs(y - py))
    return field


def cone_mask():
    """Expected mountain mask for two_cone_field: a 7x7 square per cone."""
    mask = np.zeros((9, 19), dtype=bool)
    for px, py in CONE_PEAKS:
        mask[py - 3:py + 4, px - 3:px + 4] = True
    return mask


@pytest.fixture
def cone_peaks():
    return list(CONE_PEAKS)


@pytest.fixture
def cone_field():
    return two_cone_field()


@pytest.fixture
def expected_cone_mask():
    return cone_mask()
