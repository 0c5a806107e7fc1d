"""
Core mountain detection and inversion functionality.
"""

from .field import BrightnessField, MountainMask
from .worklist import SeedWorklist
from .region_growing import FloodContext, RegionGrower, GrowthReport, grow_regions
from .maxima import find_maxima
from .selection import Selection, RegionStatistics, fill_holes, region_statistics
from .inversion import InversionResult, clamped_invert, inversion_offset, invert_about
from .mountains import MountainInverter, MountainOptions, MountainResult

__all__ = ['BrightnessField', 'MountainMask', 'SeedWorklist',
           'FloodContext', 'RegionGrower', 'GrowthReport', 'grow_regions',
           'find_maxima', 'Selection', 'RegionStatistics', 'fill_holes', 'region_statistics',
           'InversionResult', 'clamped_invert', 'inversion_offset', 'invert_about',
           'MountainInverter', 'MountainOptions', 'MountainResult']
