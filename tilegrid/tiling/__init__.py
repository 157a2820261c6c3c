"""Tiling package.

Contains the uniform square tiling system (:class:`TilingGrid`) and
numpy/pandas helpers that apply it to whole arrays of coordinates.
"""

from .grid import DEFAULT_MAX_TILES, NOT_FOUND, InvalidConfiguration, TilingGrid
from .vectorized import group_points_by_tile, tile_frame, tile_ids_for_points, tiles_along_path

__all__ = [
    "DEFAULT_MAX_TILES",
    "NOT_FOUND",
    "InvalidConfiguration",
    "TilingGrid",
    "group_points_by_tile",
    "tile_frame",
    "tile_ids_for_points",
    "tiles_along_path",
]
