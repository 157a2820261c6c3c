"""Unit tests for bounding box tile enumeration."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from tilegrid.geometry import AABB2
from tilegrid.tiling.grid import TilingGrid


@pytest.fixture
def grid():
    return TilingGrid(AABB2(0.0, 0.0, 100.0, 100.0), 10.0)


def brute_force(grid, box):
    """All tiles whose bounds intersect ``box``, by scanning the grid."""
    return {tile_id for tile_id, bbox in grid.iter_tiles() if bbox.intersects(box)}


class TestTileList:
    """Test suite for TilingGrid.tile_list."""

    def test_small_query(self, grid):
        """Test a box spanning two rows and two columns."""
        tiles = grid.tile_list(AABB2(15, 15, 25, 25))
        assert sorted(tiles) == [11, 12, 21, 22]

    def test_seed_is_first(self, grid):
        """Test that the tile under the box centre comes first."""
        tiles = grid.tile_list(AABB2(15, 15, 25, 25))
        assert tiles[0] == 22

    def test_query_outside_grid(self, grid):
        """Test that a disjoint box yields no tiles."""
        assert grid.tile_list(AABB2(200, 200, 210, 210)) == []

    def test_whole_grid(self, grid):
        """Test a box covering the full extent."""
        tiles = grid.tile_list(AABB2(0, 0, 100, 100))
        assert len(tiles) == 100
        assert sorted(tiles) == list(range(100))

    def test_box_larger_than_grid(self, grid):
        """Test a box that contains the whole grid."""
        tiles = grid.tile_list(AABB2(-1000, -1000, 1000, 1000))
        assert sorted(tiles) == list(range(100))

    def test_max_tiles_one(self, grid):
        """Test that a cap of one returns only the seed tile."""
        tiles = grid.tile_list(AABB2(0, 0, 100, 100), max_tiles=1)
        assert tiles == [grid.tile_id(AABB2(0, 0, 100, 100).center())]

    def test_max_tiles_zero(self, grid):
        """Test that a non-positive cap returns nothing."""
        assert grid.tile_list(AABB2(0, 0, 100, 100), max_tiles=0) == []

    def test_cap_returns_prefix(self, grid):
        """Test that a capped query is a prefix of the uncapped search."""
        box = AABB2(0, 0, 100, 100)
        full = grid.tile_list(box)
        capped = grid.tile_list(box, max_tiles=17)
        assert len(capped) == 17
        assert capped == full[:17]

    def test_touching_edges_count(self, grid):
        """Test that tiles sharing only an edge with the box are included."""
        tiles = grid.tile_list(AABB2(10, 10, 20, 20))
        assert sorted(tiles) == [0, 1, 2, 10, 11, 12, 20, 21, 22]

    def test_degenerate_point_box(self, grid):
        """Test a zero-area box inside a single tile."""
        assert grid.tile_list(AABB2(15, 15, 15, 15)) == [11]

    def test_center_outside_corner_inside(self, grid):
        """Test a box whose centre is off the grid but one corner is on it."""
        tiles = grid.tile_list(AABB2(-50, -50, 15, 5))
        assert sorted(tiles) == [0, 1]

    def test_band_crossing_grid(self, grid):
        """Test a box whose centre and corners are all off the grid."""
        tiles = grid.tile_list(AABB2(-50, 95, 150, 300))
        assert sorted(tiles) == list(range(90, 100))

    def test_box_touching_outer_edge(self, grid):
        """Test a box that only touches the right edge of the grid."""
        assert grid.tile_list(AABB2(100, 0, 110, 5)) == [9]

    def test_nan_box(self, grid):
        """Test that a box with NaN coordinates yields no tiles."""
        assert grid.tile_list(AABB2(float("nan"), 0, 5, 5)) == []
        assert grid.tile_list(AABB2(float("nan"), float("nan"), float("nan"), float("nan"))) == []

    def test_wrap_does_not_leak(self, grid):
        """Test that wrapped neighbours outside the box are pruned."""
        tiles = grid.tile_list(AABB2(0, 0, 5, 5))
        assert tiles == [0]

    def test_no_wrap_grid(self):
        """Test enumeration on a grid without horizontal wrap."""
        grid = TilingGrid(AABB2(0.0, 0.0, 100.0, 100.0), 10.0, wrap_columns=False)
        assert sorted(grid.tile_list(AABB2(85, 0, 100, 15))) == [8, 9, 18, 19]

    def test_matches_brute_force(self, grid):
        """Test random boxes against a full scan of the grid."""
        rng = np.random.default_rng(42)
        for _ in range(200):
            xs = np.sort(rng.uniform(-30.0, 130.0, 2))
            ys = np.sort(rng.uniform(-30.0, 130.0, 2))
            box = AABB2(float(xs[0]), float(ys[0]), float(xs[1]), float(ys[1]))
            tiles = grid.tile_list(box)
            assert len(tiles) == len(set(tiles))
            assert set(tiles) == brute_force(grid, box)

    def test_cap_respected_on_random_boxes(self, grid):
        """Test that capped results are bounded and still intersect the box."""
        rng = np.random.default_rng(3)
        for _ in range(100):
            xs = np.sort(rng.uniform(-30.0, 130.0, 2))
            ys = np.sort(rng.uniform(-30.0, 130.0, 2))
            box = AABB2(float(xs[0]), float(ys[0]), float(xs[1]), float(ys[1]))
            cap = int(rng.integers(1, 20))
            tiles = grid.tile_list(box, max_tiles=cap)
            expected = brute_force(grid, box)
            assert len(tiles) == min(cap, len(expected))
            assert set(tiles) <= expected

    def test_large_grid_stays_local(self):
        """Test that a small query on a large grid touches only nearby tiles."""
        grid = TilingGrid(AABB2(-180.0, -90.0, 180.0, 90.0), 0.25)
        tiles = grid.tile_list(AABB2(4.0, 52.0, 5.0, 52.5))
        # Tiles touching the box edges count: 6 columns (3.75 .. 5.25) by
        # 4 rows (51.75 .. 52.75)
        assert len(tiles) == 24
        for tile_id in tiles:
            assert grid.tile_bounds(tile_id).intersects(AABB2(4.0, 52.0, 5.0, 52.5))

    def test_concurrent_queries(self, grid):
        """Test that parallel queries on a shared grid do not interfere."""
        boxes = [AABB2(i, i, i + 25, i + 25) for i in range(0, 75, 5)]
        expected = [grid.tile_list(box) for box in boxes]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(grid.tile_list, boxes * 4))
        assert results == expected * 4
