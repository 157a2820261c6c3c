"""Demo script for the tiling grid with a synthetic trajectory.

This script builds a quarter-degree world grid, simulates a vehicle
trajectory, and shows which tiles a viewport, a corridor along the
trajectory and the raw GNSS fixes touch.

Usage:
    python examples/demo_tile_queries.py
"""

import numpy as np

from tilegrid import AABB2, Point2, TilingGrid, tile_frame, tile_ids_for_points, tiles_along_path


def create_synthetic_trajectory(
    n_points: int = 2000,
    origin: tuple = (4.9, 52.37),
    heading_deg: float = 30.0,
    step: float = 0.0005,
) -> np.ndarray:
    """Create a noisy straight-ish trajectory in lon/lat degrees.

    Returns
    -------
    np.ndarray
        Array of shape (n_points, 2) with longitude and latitude.
    """
    heading = np.radians(heading_deg)
    t = np.arange(n_points) * step
    lon = origin[0] + t * np.cos(heading) + np.random.normal(0, 1e-5, n_points)
    lat = origin[1] + t * np.sin(heading) + np.random.normal(0, 1e-5, n_points)
    return np.column_stack([lon, lat])


def main():
    grid = TilingGrid(AABB2(-180.0, -90.0, 180.0, 90.0), 0.25)
    print(f"Grid: {grid.num_rows} rows x {grid.num_cols} cols ({grid.tile_count():,} tiles)")

    start = Point2(4.9, 52.37)
    tile_id = grid.tile_id(start)
    print(f"\nTile under {start}: {tile_id}")
    print(f"  - Bounds: {grid.tile_bounds(tile_id).as_tuple()}")
    print(f"  - Centre: {grid.center(tile_id)}")
    print(f"  - Right neighbour: {grid.right_neighbor(tile_id)}")

    viewport = AABB2(4.5, 52.0, 5.5, 52.8)
    tiles = grid.tile_list(viewport)
    print(f"\nViewport {viewport.as_tuple()}: {len(tiles)} tiles")
    print(tile_frame(grid, tiles).to_string(index=False))

    trajectory = create_synthetic_trajectory()
    fix_tiles = np.unique(tile_ids_for_points(grid, trajectory))
    corridor = tiles_along_path(grid, trajectory[::100], buffer=0.05)
    print(f"\nTrajectory fixes fall in {len(fix_tiles)} tiles: {fix_tiles.tolist()}")
    print(f"Corridor (0.05 deg buffer) needs {len(corridor)} tiles: {corridor}")


if __name__ == "__main__":
    main()
