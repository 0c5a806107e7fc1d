"""
Mountain inversion pipeline.

Finds prominent maxima, grows a mountain around each one, optionally fills
holes in the resulting mask and reflects every masked pixel about the
inflection point. Stacks are processed slice by slice.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog

from .field import BrightnessField, Coordinate, MountainMask
from .inversion import InversionResult, invert_about
from .maxima import find_maxima
from .region_growing import FloodContext, GrowthReport, RegionGrower
from .selection import Selection, fill_holes

logger = structlog.get_logger()


@dataclass
class MountainOptions:
    """Parameters for mountain detection and inversion."""

    inflection_point: float = 128.0  # Centre of the reflection
    maxima_noise_tolerance: float = 10.0  # Passed to the maxima finder only
    exclude_edge_maxima: bool = True  # Passed to the maxima finder only
    flood_tolerance: float = 5.0  # Brightness increase allowed per flood step
    sanity_threshold: float = 250.0  # Forced-include ceiling in horizontal runs
    fill_holes: bool = True
    inversion_floor: float = 0.0  # Floor the raw inversion anchors its minimum to

    def __post_init__(self):
        for name in (
            "inflection_point",
            "maxima_noise_tolerance",
            "flood_tolerance",
            "sanity_threshold",
            "inversion_floor",
        ):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)}")
        if self.maxima_noise_tolerance < 0:
            raise ValueError(
                f"maxima_noise_tolerance must be >= 0, got {self.maxima_noise_tolerance}"
            )
        if self.flood_tolerance < 0:
            raise ValueError(f"flood_tolerance must be >= 0, got {self.flood_tolerance}")

    @classmethod
    def from_settings(cls, settings) -> "MountainOptions":
        """Build options from the configured defaults."""
        return cls(
            inflection_point=settings.inflection_point,
            maxima_noise_tolerance=settings.maxima_noise_tolerance,
            exclude_edge_maxima=settings.exclude_edge_maxima,
            flood_tolerance=settings.flood_tolerance,
            sanity_threshold=settings.sanity_threshold,
            fill_holes=settings.fill_holes,
            inversion_floor=settings.inversion_floor,
        )


@dataclass
class MountainResult:
    """Everything produced for one image."""

    mask: MountainMask
    selection: Selection
    corrected: np.ndarray
    maxima: List[Coordinate]
    growth: GrowthReport
    inversion: InversionResult

    @property
    def offset(self) -> float:
        return self.inversion.offset


class MountainInverter:
    """Detects mountains in an image and reflects them about the inflection point."""

    def __init__(self, options: Optional[MountainOptions] = None):
        self.options = options or MountainOptions()

    def detect(self, field: BrightnessField, maxima: List[Coordinate]):
        """Grow the mountain mask from the given maxima."""
        context = FloodContext(field, maxima)
        growth = RegionGrower(
            context, self.options.flood_tolerance, self.options.sanity_threshold
        ).run()

        mask = context.mask
        if self.options.fill_holes:
            mask = fill_holes(mask)
            logger.info(
                "Holes filled",
                pixels_before=growth.pixels_masked,
                pixels_after=mask.count(),
            )
        return mask, growth

    def process(self, image) -> MountainResult:
        """
        Run the full pipeline on a single 2-D image.

        Args:
            image: Array-like of shape (height, width)

        Returns:
            MountainResult; the input is left untouched
        """
        field = BrightnessField(image)
        logger.info("Processing image", width=field.width, height=field.height)

        maxima = find_maxima(
            field,
            self.options.maxima_noise_tolerance,
            exclude_edges=self.options.exclude_edge_maxima,
        )
        mask, growth = self.detect(field, maxima)
        selection = Selection.from_mask(mask)

        corrected = field.values.copy()
        inversion = invert_about(
            corrected,
            selection,
            self.options.inflection_point,
            floor=self.options.inversion_floor,
        )

        return MountainResult(
            mask=mask,
            selection=selection,
            corrected=corrected,
            maxima=maxima,
            growth=growth,
            inversion=inversion,
        )

    def process_stack(self, stack) -> List[MountainResult]:
        """
        Process every slice of a (slices, height, width) stack independently.

        Raises:
            ValueError: If the stack is not 3-D or has no slices
        """
        data = np.asarray(stack)
        if data.ndim != 3:
            raise ValueError(f"Stack must be 3-D, got {data.ndim} dimensions")
        if data.shape[0] == 0:
            raise ValueError("Stack has no slices")

        results = []
        for index in range(data.shape[0]):
            logger.info("Processing slice", slice=index + 1, slices=data.shape[0])
            results.append(self.process(data[index]))
        return results
