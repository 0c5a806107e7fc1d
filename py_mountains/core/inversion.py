"""
Reflection of selected brightness values about an inflection point.

The raw inversion behaves like an unsigned pixel-format invert: it flips the
selected range and anchors the flipped range at a fixed floor. The offset
computed here undoes that anchoring and moves the flipped range so that the
end result is a true reflection, v -> 2 * inflection_point - v.
"""

from dataclasses import dataclass

import numpy as np
import structlog

from .selection import RegionStatistics, Selection, region_statistics

logger = structlog.get_logger()


@dataclass
class InversionResult:
    """Outcome of reflecting a selection."""

    values: np.ndarray
    offset: float
    before: RegionStatistics
    after: RegionStatistics


def clamped_invert(values: np.ndarray, selection: Selection, floor: float = 0.0) -> None:
    """
    Invert the selected values in place, re-basing the result onto floor.

    Each selected value v becomes max + min - v, then the inverted range is
    shifted so its minimum equals floor (max - v + floor overall).
    """
    if selection.is_empty:
        return
    region = values[selection.pixels]
    lo, hi = region.min(), region.max()
    inverted = hi + lo - region
    values[selection.pixels] = inverted - (inverted.min() - floor)


def inversion_offset(
    before: RegionStatistics, after: RegionStatistics, inflection_point: float
) -> float:
    """
    Correction to add after a clamped inversion.

    (min - min2) cancels the re-basing of the raw inversion; the second term
    moves the reflected range so that it is centred on inflection_point.
    """
    return (before.min - after.min) + (2.0 * inflection_point - (before.max + before.min))


def invert_about(
    values: np.ndarray,
    selection: Selection,
    inflection_point: float,
    floor: float = 0.0,
) -> InversionResult:
    """
    Reflect the selected values about inflection_point, in place.

    Args:
        values: Working array, modified in place
        selection: Pixels to reflect
        inflection_point: Centre of the reflection
        floor: Floor used by the raw inversion

    Returns:
        InversionResult with the offset and statistics before/after the raw inversion
    """
    if selection.is_empty:
        logger.warning("Empty selection, nothing to invert")
        empty = RegionStatistics(count=0, mean=0.0, min=0.0, max=0.0)
        return InversionResult(values=values, offset=0.0, before=empty, after=empty)

    before = region_statistics(values, selection)
    clamped_invert(values, selection, floor)
    after = region_statistics(values, selection)

    offset = inversion_offset(before, after, inflection_point)
    values[selection.pixels] += offset

    logger.info(
        "Selection inverted",
        pixels=before.count,
        min=before.min,
        max=before.max,
        min_inverted=after.min,
        max_inverted=after.max,
        offset=offset,
        inflection_point=inflection_point,
    )
    return InversionResult(values=values, offset=offset, before=before, after=after)
