"""Uniform square tiling spatial index."""

from .geometry import AABB2, Point2
from .tiling import (
    DEFAULT_MAX_TILES,
    NOT_FOUND,
    InvalidConfiguration,
    TilingGrid,
    group_points_by_tile,
    tile_frame,
    tile_ids_for_points,
    tiles_along_path,
)

__version__ = "0.1.0"

__all__ = [
    "AABB2",
    "Point2",
    "DEFAULT_MAX_TILES",
    "NOT_FOUND",
    "InvalidConfiguration",
    "TilingGrid",
    "group_points_by_tile",
    "tile_frame",
    "tile_ids_for_points",
    "tiles_along_path",
]
