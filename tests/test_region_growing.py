"""Tests for the mountain region-growing engine."""

import pytest
import numpy as np
from py_mountains.core.field import BrightnessField
from py_mountains.core.maxima import find_maxima
from py_mountains.core.region_growing import FloodContext, RegionGrower, grow_regions


def basin_field(neighbor=None):
    """
    9x9 field at 60 with a 3x3 block at 50 centred on (4, 4).

    If given, neighbor sets the pixel just right of the block, (6, 4).
    """
    field = np.full((9, 9), 60.0)
    field[3:6, 3:6] = 50.0
    if neighbor is not None:
        field[4, 6] = neighbor
    return BrightnessField(field)


def block_mask():
    mask = np.zeros((9, 9), dtype=bool)
    mask[3:6, 3:6] = True
    return mask


class TestRunGrowth:
    """Test horizontal runs and vertical seeding."""

    def test_block_bounded_by_brightness_rise(self):
        """Runs stop where brightness rises by more than the tolerance."""
        mask = grow_regions(basin_field(), [(4, 4)], flood_tolerance=5, sanity_threshold=1000)

        np.testing.assert_array_equal(mask.values, block_mask())

    def test_sanity_threshold_forces_inclusion(self):
        mask = grow_regions(basin_field(neighbor=80), [(4, 4)], flood_tolerance=5, sanity_threshold=70)

        assert mask.is_set(6, 4)
        assert np.all(mask.values[block_mask()])

    def test_sanity_threshold_above_neighbor_excludes_it(self):
        mask = grow_regions(basin_field(neighbor=80), [(4, 4)], flood_tolerance=5, sanity_threshold=90)

        assert not mask.is_set(6, 4)
        np.testing.assert_array_equal(mask.values, block_mask())

    def test_sanity_threshold_not_used_for_vertical_seeding(self):
        """A bright pixel directly above a run is not seeded from it."""
        values = np.full((7, 7), 60.0)
        values[3, 2:5] = 50.0
        values[2, 3] = 200.0
        mask = grow_regions(BrightnessField(values), [(3, 3)], flood_tolerance=5, sanity_threshold=100)

        assert not mask.is_set(3, 2)
        assert mask.values[3, 2:5].all()
        assert mask.count() == 3

    def test_darker_surroundings_are_flooded(self):
        """A plateau on a flat darker background floods the whole interior."""
        values = np.full((7, 7), 10.0)
        values[2:5, 2:5] = 100.0
        mask = grow_regions(BrightnessField(values), [(3, 3)], flood_tolerance=5, sanity_threshold=1000)

        assert mask.values[1:-1, 1:-1].all()
        assert mask.count() == 25

    def test_running_limit_tightens_along_run(self):
        """48 is within tolerance of the seed but not of the 44 before it."""
        values = np.zeros((3, 8))
        values[1, 1:7] = [50, 47, 49, 44, 48, 30]
        mask = grow_regions(BrightnessField(values), [(1, 1)], flood_tolerance=3, sanity_threshold=1000)

        assert mask.coordinates() == [(1, 1), (2, 1), (3, 1), (4, 1)]

    def test_sanity_threshold_bridges_run(self):
        values = np.zeros((3, 8))
        values[1, 1:7] = [50, 47, 49, 44, 200, 30]
        mask = grow_regions(BrightnessField(values), [(1, 1)], flood_tolerance=3, sanity_threshold=100)

        assert mask.coordinates() == [(x, 1) for x in range(1, 7)]

    def test_masked_neighbors_tighten_starting_limit(self):
        """
        A seed next to an already-masked dark pixel inherits its lower limit.

        (2, 2) is 10; the seed (2, 1) above it would otherwise admit (1, 1) at 30.
        """
        values = np.full((5, 5), 100.0)
        values[2, 1:4] = [90, 10, 90]
        values[1, 1:4] = [30, 20, 100]
        field = BrightnessField(values)

        context = FloodContext(field)
        context.mask.set(2, 2)
        context.worklist.push(2, 1)
        RegionGrower(context, flood_tolerance=15, sanity_threshold=1000).step()

        assert context.mask.is_set(2, 1)
        assert not context.mask.is_set(1, 1)

        untightened = FloodContext(field, [(2, 1)])
        RegionGrower(untightened, flood_tolerance=15, sanity_threshold=1000).step()
        assert untightened.mask.is_set(1, 1)

    def test_negative_tolerance_rejected(self):
        context = FloodContext(basin_field(), [(4, 4)])
        with pytest.raises(ValueError, match="flood_tolerance"):
            RegionGrower(context, flood_tolerance=-1, sanity_threshold=100)


class TestGrowthInvariants:
    """Test properties that hold for every run."""

    @pytest.fixture
    def noisy_field(self):
        rng = np.random.default_rng(7)
        yy, xx = np.mgrid[0:24, 0:32]
        hills = 80 * np.exp(-((xx - 10) ** 2 + (yy - 8) ** 2) / 30.0)
        hills += 60 * np.exp(-((xx - 24) ** 2 + (yy - 16) ** 2) / 20.0)
        return BrightnessField(hills + rng.normal(0, 2, size=hills.shape))

    def test_border_never_masked(self, noisy_field):
        seeds = [(x, y) for y in range(noisy_field.height) for x in range(noisy_field.width)]
        mask = grow_regions(noisy_field, seeds, flood_tolerance=3, sanity_threshold=70)

        assert mask.count() > 0
        assert not mask.values[0, :].any()
        assert not mask.values[-1, :].any()
        assert not mask.values[:, 0].any()
        assert not mask.values[:, -1].any()

    def test_worklist_never_holds_border(self, noisy_field):
        context = FloodContext(noisy_field, find_maxima(noisy_field, 5))
        grower = RegionGrower(context, flood_tolerance=3, sanity_threshold=70)

        while True:
            for x, y in context.worklist._stack:
                assert noisy_field.is_interior(x, y)
            if not grower.step():
                break

    def test_mask_grows_monotonically(self, noisy_field):
        context = FloodContext(noisy_field, find_maxima(noisy_field, 5))
        grower = RegionGrower(context, flood_tolerance=3, sanity_threshold=1000)

        previous = context.mask.values.copy()
        while grower.step():
            current = context.mask.values
            assert np.all(current[previous])
            assert current.sum() >= previous.sum()
            previous = current.copy()

        assert context.worklist.pop() is None

    def test_report_counts(self, noisy_field):
        context = FloodContext(noisy_field, find_maxima(noisy_field, 5))
        report = RegionGrower(context, flood_tolerance=3, sanity_threshold=1000).run()

        assert report.seeds_popped > 0
        assert report.pixels_masked == context.mask.count()


class TestSeedOrder:
    """Test how seed order affects the merged mask."""

    def test_cones_grow_to_squares(self, cone_field, cone_peaks, expected_cone_mask):
        mask = grow_regions(BrightnessField(cone_field), cone_peaks, flood_tolerance=5, sanity_threshold=1000)

        np.testing.assert_array_equal(mask.values, expected_cone_mask)

    def test_seed_order_independent_for_separate_mountains(self, cone_field, cone_peaks):
        """Cones separated by a dark valley give the same mask in any seed order."""
        field = BrightnessField(cone_field)
        seeds = list(cone_peaks) + [(3, 4), (15, 5)]

        forward = grow_regions(field, seeds, flood_tolerance=5, sanity_threshold=1000)
        backward = grow_regions(field, seeds[::-1], flood_tolerance=5, sanity_threshold=1000)

        np.testing.assert_array_equal(forward.values, backward.values)

    def test_seed_order_can_change_mask(self):
        """
        A run started next to an already masked dark pixel inherits its tight
        limit, so the order in which touching seeds are popped matters.
        """
        field = BrightnessField(np.array([
            [100, 100, 100, 100, 100, 100],
            [100, 100, 40, 50, 60, 100],
            [100, 30, 30, 5, 30, 100],
            [100, 100, 100, 100, 100, 100],
        ]))

        # The last seed is popped first
        dark_first = grow_regions(field, [(3, 1), (3, 2)], flood_tolerance=1, sanity_threshold=1000)
        bright_first = grow_regions(field, [(3, 2), (3, 1)], flood_tolerance=1, sanity_threshold=1000)

        assert dark_first.coordinates() == [(3, 1), (1, 2), (2, 2), (3, 2), (4, 2)]
        assert bright_first.coordinates() == [(2, 1), (3, 1), (1, 2), (2, 2), (3, 2), (4, 2)]
        assert not dark_first.is_set(2, 1)
        assert bright_first.is_set(2, 1)

    def test_duplicate_seeds_harmless(self, cone_field, cone_peaks, expected_cone_mask):
        field = BrightnessField(cone_field)
        seeds = list(cone_peaks) * 3

        mask = grow_regions(field, seeds, flood_tolerance=5, sanity_threshold=1000)

        np.testing.assert_array_equal(mask.values, expected_cone_mask)

    def test_no_seeds_gives_empty_mask(self, cone_field):
        mask = grow_regions(BrightnessField(cone_field), [], flood_tolerance=5, sanity_threshold=1000)

        assert mask.count() == 0
