"""
Adaptive region growing for mountain detection.

This module implements:
- Scan-line flood fill driven by a LIFO seed worklist
- Per-step tolerance that only tightens as the flood moves away from a peak
- Forced inclusion of very bright pixels in horizontal runs (sanity threshold)

Each popped seed is extended into a horizontal run on its row, then the run
seeds the rows directly above and below. Pixels are never unmasked, so runs
started from different peaks merge into a single mask.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import structlog

from .field import BrightnessField, Coordinate, MountainMask
from .worklist import SeedWorklist

logger = structlog.get_logger()

# Already-masked neighbours that cap the starting tolerance of a run
_TIGHTENING_NEIGHBORS = ((0, -1), (1, -1), (-1, -1), (0, 1), (1, 1), (-1, 1))


@dataclass
class GrowthReport:
    """Summary of one region-growing run."""

    seeds_popped: int = 0
    pixels_masked: int = 0


class FloodContext:
    """
    State owned by a single region-growing invocation.

    Bundles the read-only field with the mask and worklist it populates;
    a fresh context is created for every image.
    """

    def __init__(self, field: BrightnessField, seeds: Optional[Iterable[Coordinate]] = None):
        self.field = field
        self.mask = MountainMask.like(field)
        self.worklist = SeedWorklist(field.width, field.height)
        if seeds is not None:
            self.worklist.extend(seeds)


class RegionGrower:
    """Drains a flood context's worklist into its mask."""

    def __init__(self, context: FloodContext, flood_tolerance: float, sanity_threshold: float):
        """
        Args:
            context: Flood state for the current image
            flood_tolerance: Brightness increase allowed between adjacent pixels
            sanity_threshold: Pixels brighter than this join horizontal runs regardless of tolerance
        """
        if flood_tolerance < 0:
            raise ValueError(f"flood_tolerance must be >= 0, got {flood_tolerance}")

        self.context = context
        self.flood_tolerance = float(flood_tolerance)
        self.sanity_threshold = float(sanity_threshold)
        self.report = GrowthReport()

    def run(self) -> GrowthReport:
        """Process seeds until the worklist is empty."""
        logger.info(
            "Growing mountain regions",
            seeds=len(self.context.worklist),
            flood_tolerance=self.flood_tolerance,
            sanity_threshold=self.sanity_threshold,
        )
        while self.step():
            pass

        self.report.pixels_masked = self.context.mask.count()
        logger.info(
            "Mountain regions grown",
            seeds_popped=self.report.seeds_popped,
            pixels_masked=self.report.pixels_masked,
        )
        return self.report

    def step(self) -> bool:
        """
        Pop one seed and grow it.

        Returns:
            False when the worklist was already empty, True otherwise
        """
        seed = self.context.worklist.pop()
        if seed is None:
            return False

        self.report.seeds_popped += 1
        x, y = seed
        x1, x2 = self._scan_row(x, y)

        if y > 1:
            self._seed_row(x1, x2, y, y - 1)
        if y < self.context.field.height - 1:
            self._seed_row(x1, x2, y, y + 1)
        return True

    def _scan_row(self, x: int, y: int):
        """Mask the seed and extend it left and right; returns the run extent."""
        field = self.context.field
        mask = self.context.mask
        tolerance = self.flood_tolerance

        mask.set(x, y)
        start = field.brightness(x, y) + tolerance

        limit = start
        for dx, dy in _TIGHTENING_NEIGHBORS:
            if mask.is_set(x + dx, y + dy):
                limit = min(limit, field.brightness(x + dx, y + dy) + tolerance)

        x1 = x
        while x1 > 1:
            value = field.brightness(x1 - 1, y)
            if mask.is_set(x1 - 1, y) or not self._admits(value, limit):
                break
            x1 -= 1
            mask.set(x1, y)
            limit = min(limit, value + tolerance)

        limit = start
        x2 = x
        while x2 < field.width - 2:
            value = field.brightness(x2 + 1, y)
            if mask.is_set(x2 + 1, y) or not self._admits(value, limit):
                break
            x2 += 1
            mask.set(x2, y)
            limit = min(limit, value + tolerance)

        return x1, x2

    def _admits(self, value: float, limit: float) -> bool:
        return value <= limit or value > self.sanity_threshold

    def _seed_row(self, x1: int, x2: int, y: int, target_y: int) -> None:
        """Push unmasked pixels of target_y that sit within tolerance of the run."""
        field = self.context.field
        mask = self.context.mask
        worklist = self.context.worklist

        for i in range(x1, x2 + 1):
            limit = field.brightness(i, y) + self.flood_tolerance
            for nx in (i, i + 1, i - 1):
                # No sanity override when moving between rows
                if not mask.is_set(nx, target_y) and field.brightness(nx, target_y) <= limit:
                    worklist.push(nx, target_y)


def grow_regions(
    field: BrightnessField,
    seeds: Iterable[Coordinate],
    flood_tolerance: float,
    sanity_threshold: float,
) -> MountainMask:
    """
    Flood outward from every seed and return the merged mountain mask.

    Args:
        field: Brightness field to flood
        seeds: Peak coordinates as (x, y); border coordinates are ignored
        flood_tolerance: Brightness increase allowed between adjacent pixels
        sanity_threshold: Forced-include ceiling for horizontal runs

    Returns:
        MountainMask with every pixel reached by the flood set
    """
    context = FloodContext(field, seeds)
    RegionGrower(context, flood_tolerance, sanity_threshold).run()
    return context.mask
