"""Batch tile lookups over numpy arrays.

The scalar methods on :class:`TilingGrid` are convenient for single
coordinates.  Trajectories and point sets usually arrive as numpy
arrays, so this module computes tile ids for whole arrays at once and
summarises tiles as pandas DataFrames.  Results always agree with the
scalar methods.
"""

from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..geometry import AABB2
from .grid import DEFAULT_MAX_TILES, NOT_FOUND, TilingGrid

TILE_FRAME_COLUMNS = [
    "tile_id",
    "row",
    "col",
    "bbox_x_min",
    "bbox_y_min",
    "bbox_x_max",
    "bbox_y_max",
    "center_x",
    "center_y",
]


def _as_xy(points: np.ndarray) -> np.ndarray:
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or pts.shape[1] < 2:
        raise ValueError(f"expected an (N, 2+) array of x, y; got shape {pts.shape}")
    return pts


def _axis_index(v: np.ndarray, origin: float, tile_size: float, count: int) -> np.ndarray:
    idx = np.floor((v - origin) / tile_size).astype(np.int64)
    # Points on the upper/right edge belong to the last row/column
    idx = np.minimum(idx, count - 1)
    # Agree with the tile edges computed by TilingGrid.base()
    down = (idx > 0) & (v < origin + idx * tile_size)
    up = ~down & (idx + 1 < count) & (v >= origin + (idx + 1) * tile_size)
    return idx - down.astype(np.int64) + up.astype(np.int64)


def tile_ids_for_points(grid: TilingGrid, points: np.ndarray) -> np.ndarray:
    """Compute the tile id of every point.

    Parameters
    ----------
    grid : TilingGrid
        Tiling system to look points up in.
    points : numpy.ndarray
        Array of shape (N, M) with X and Y in columns 0 and 1.

    Returns
    -------
    numpy.ndarray
        int64 array of length N; -1 for points outside the grid.
    """
    if len(points) == 0:
        return np.empty(0, dtype=np.int64)
    pts = _as_xy(points)
    x = pts[:, 0]
    y = pts[:, 1]
    b = grid.bounds

    inside = (x >= b.min_x) & (x <= b.max_x) & (y >= b.min_y) & (y <= b.max_y)
    # Park outside (and NaN) values on the origin so the int cast is safe
    x = np.where(inside, x, b.min_x)
    y = np.where(inside, y, b.min_y)

    col = _axis_index(x, b.min_x, grid.tile_size, grid.num_cols)
    row = _axis_index(y, b.min_y, grid.tile_size, grid.num_rows)

    return np.where(inside, row * grid.num_cols + col, NOT_FOUND).astype(np.int64)


def group_points_by_tile(grid: TilingGrid, points: np.ndarray) -> Dict[int, np.ndarray]:
    """Group point indices by the tile they fall in.

    Points outside the grid are dropped.

    Returns
    -------
    dict
        Mapping of tile id to an array of row indices into ``points``,
        in ascending order.
    """
    ids = tile_ids_for_points(grid, points)
    idx = np.nonzero(ids != NOT_FOUND)[0]
    if idx.size == 0:
        return {}
    order = idx[np.argsort(ids[idx], kind="stable")]
    tile_ids, starts = np.unique(ids[order], return_index=True)
    chunks = np.split(order, starts[1:])
    return {int(tile_id): chunk for tile_id, chunk in zip(tile_ids, chunks)}


def tile_frame(grid: TilingGrid, tile_ids: Optional[Iterable[int]] = None) -> pd.DataFrame:
    """Describe tiles as a DataFrame.

    Parameters
    ----------
    grid : TilingGrid
        Tiling system the ids belong to.
    tile_ids : iterable of int, optional
        Tiles to describe, in output order.  Defaults to every tile of
        the grid.

    Returns
    -------
    pandas.DataFrame
        One row per tile with id, row, column, bounds and centre.

    Raises
    ------
    ValueError
        If an id is outside ``[0, tile_count)``.
    """
    if tile_ids is None:
        tile_ids = range(grid.tile_count())

    records = []
    for tile_id in tile_ids:
        tile_id = int(tile_id)
        if tile_id < 0 or tile_id >= grid.tile_count():
            raise ValueError(f"tile id {tile_id} is not in this grid")
        row, col = grid.row_col(tile_id)
        bbox = grid.tile_bounds(tile_id)
        center = grid.center(tile_id)
        records.append({
            "tile_id": tile_id,
            "row": row,
            "col": col,
            "bbox_x_min": bbox.min_x,
            "bbox_y_min": bbox.min_y,
            "bbox_x_max": bbox.max_x,
            "bbox_y_max": bbox.max_y,
            "center_x": center.x,
            "center_y": center.y,
        })
    return pd.DataFrame(records, columns=TILE_FRAME_COLUMNS)


def tiles_along_path(
    grid: TilingGrid,
    path: np.ndarray,
    buffer: float = 0.0,
    max_tiles: int = DEFAULT_MAX_TILES,
) -> List[int]:
    """Tiles touched by a corridor around a polyline.

    Each segment is replaced by its bounding box grown by ``buffer`` on
    every side, and the tiles of those boxes are collected in path
    order without duplicates.

    Parameters
    ----------
    grid : TilingGrid
        Tiling system.
    path : numpy.ndarray
        Array of shape (N, 2+) with the polyline vertices.
    buffer : float, optional
        Corridor half-width in grid units.
    max_tiles : int, optional
        Cap on the total number of ids returned.

    Returns
    -------
    list of int
        Tile ids ordered by first contact along the path.
    """
    if buffer < 0:
        raise ValueError(f"buffer must be >= 0, got {buffer}")
    if len(path) == 0 or max_tiles <= 0:
        return []
    pts = _as_xy(path)
    if len(pts) == 1:
        pts = np.vstack([pts, pts])

    seen = set()
    result: List[int] = []
    for start, end in zip(pts[:-1], pts[1:]):
        box = AABB2(
            float(np.minimum(start[0], end[0])) - buffer,
            float(np.minimum(start[1], end[1])) - buffer,
            float(np.maximum(start[0], end[0])) + buffer,
            float(np.maximum(start[1], end[1])) + buffer,
        )
        for tile_id in grid.tile_list(box, max_tiles):
            if tile_id not in seen:
                seen.add(tile_id)
                result.append(tile_id)
                if len(result) == max_tiles:
                    return result
    return result
