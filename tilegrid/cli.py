"""Command-line access to a tiling grid.

Usage:
    python -m tilegrid.cli --bounds 0 0 100 100 --tile-size 10 --point 5 5
    python -m tilegrid.cli --config grid.yml --bbox 15 15 25 25
    python -m tilegrid.cli --config grid.yml
"""

import argparse
import sys
from typing import List, Optional

from .geometry import AABB2, Point2
from .tiling.grid import DEFAULT_MAX_TILES, InvalidConfiguration, TilingGrid
from .utils.config import grid_from_config, load_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Look up tile ids in a uniform square tiling system"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML file with a 'grid' section (bounds, tile_size, wrap_columns)"
    )
    parser.add_argument(
        "--bounds",
        type=float,
        nargs=4,
        metavar=("MIN_X", "MIN_Y", "MAX_X", "MAX_Y"),
        help="Grid extent (overrides the config file)"
    )
    parser.add_argument(
        "--tile-size",
        type=float,
        help="Tile edge length (overrides the config file)"
    )
    parser.add_argument(
        "--no-wrap",
        action="store_true",
        help="Do not wrap left/right neighbours around the grid"
    )
    query = parser.add_mutually_exclusive_group()
    query.add_argument(
        "--point",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        help="Print the id of the tile containing this point"
    )
    query.add_argument(
        "--bbox",
        type=float,
        nargs=4,
        metavar=("MIN_X", "MIN_Y", "MAX_X", "MAX_Y"),
        help="Print the ids of the tiles intersecting this box"
    )
    parser.add_argument(
        "--max-tiles",
        type=int,
        default=DEFAULT_MAX_TILES,
        help=f"Maximum number of tiles printed for --bbox (default: {DEFAULT_MAX_TILES})"
    )
    return parser


def grid_from_args(args: argparse.Namespace) -> TilingGrid:
    """Combine config file values with command-line overrides."""
    cfg = load_config(args.config) if args.config else {}
    section = cfg.get("grid", cfg)
    if not isinstance(section, dict):
        raise InvalidConfiguration("'grid' must be a mapping")
    section = dict(section)
    if args.bounds is not None:
        section["bounds"] = list(args.bounds)
    if args.tile_size is not None:
        section["tile_size"] = args.tile_size
    if args.no_wrap:
        section["wrap_columns"] = False
    return grid_from_config(section)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    try:
        grid = grid_from_args(args)
    except InvalidConfiguration as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.point is not None:
        print(grid.tile_id(Point2(*args.point)))
    elif args.bbox is not None:
        for tile_id in grid.tile_list(AABB2(*args.bbox), args.max_tiles):
            print(tile_id)
    else:
        print(f"Bounds:     {grid.bounds.as_tuple()}")
        print(f"Tile size:  {grid.tile_size}")
        print(f"Rows:       {grid.num_rows}")
        print(f"Columns:    {grid.num_cols}")
        print(f"Tile count: {grid.tile_count():,}")
        print(f"Wrap:       {grid.wrap_columns}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
