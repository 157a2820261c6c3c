"""Uniform square tiling of a bounding box.

A :class:`TilingGrid` partitions a bounding box into square tiles of a
fixed edge length and numbers them as follows:

- tile 0 is the lower-left tile, the one containing ``bounds.min``;
- ids increase by column (increasing x) along a row, then by row
  (increasing y), so ``tile_id = row * num_cols + col``.

The grid converts between coordinates, tile ids and row/column pairs,
resolves neighbours and enumerates the tiles that intersect a query
box.  Lookups that fall outside the grid return ``NOT_FOUND`` (-1)
instead of raising.
"""

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, List, Set, Tuple

from ..geometry import AABB2, Point2
from ..utils.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND = -1
"""Sentinel returned for coordinates, rows or columns outside the grid."""

DEFAULT_MAX_TILES = 4096


class InvalidConfiguration(ValueError):
    """Raised when a grid cannot be built from the given parameters."""


def _tile_count(extent: float, tile_size: float) -> int:
    """Number of tiles needed to cover ``extent``.

    Quotients within 1e-9 of an integer are snapped so that e.g. an
    extent of 1.1 with 0.1 tiles gives 11 tiles, not 12.
    """
    quotient = extent / tile_size
    nearest = round(quotient)
    if abs(quotient - nearest) <= 1e-9 * max(1.0, abs(nearest)):
        return max(int(nearest), 1)
    return int(math.ceil(quotient))


@dataclass(frozen=True)
class TilingGrid:
    """Square tiling system over a fixed bounding box.

    The grid is immutable once built and can be shared between threads.
    """

    bounds: AABB2
    """Extent covered by the tiles."""

    tile_size: float
    """Edge length of each tile, in the units of ``bounds``."""

    wrap_columns: bool = True
    """Whether left/right neighbours wrap around the grid (e.g. a full
    longitude band).  Rows never wrap."""

    num_rows: int = field(init=False)
    num_cols: int = field(init=False)

    def __post_init__(self) -> None:
        try:
            tile_size = float(self.tile_size)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"tile_size must be a number, got {self.tile_size!r}") from exc
        if not math.isfinite(tile_size) or tile_size <= 0:
            raise InvalidConfiguration(f"tile_size must be a finite number > 0, got {tile_size}")
        object.__setattr__(self, "tile_size", tile_size)

        if not isinstance(self.bounds, AABB2):
            try:
                object.__setattr__(self, "bounds", AABB2.from_tuple(self.bounds))
            except (TypeError, ValueError) as exc:
                raise InvalidConfiguration(f"bounds must be an AABB2 or 4-tuple, got {self.bounds!r}") from exc
        b = self.bounds
        if not all(math.isfinite(v) for v in b.as_tuple()):
            raise InvalidConfiguration(f"bounds must be finite, got {b.as_tuple()}")
        if not (b.max_x > b.min_x and b.max_y > b.min_y):
            raise InvalidConfiguration(f"degenerate bounds {b.as_tuple()}")

        num_rows = _tile_count(b.max_y - b.min_y, tile_size)
        num_cols = _tile_count(b.max_x - b.min_x, tile_size)
        object.__setattr__(self, "num_rows", num_rows)
        object.__setattr__(self, "num_cols", num_cols)
        logger.debug(
            "Tiling grid %s with tile size %s: %d rows x %d cols",
            b.as_tuple(), self.tile_size, num_rows, num_cols,
        )

    # -- Coordinate -> grid -------------------------------------------------
    def _index(self, v: float, origin: float, count: int) -> int:
        idx = min(int(math.floor((v - origin) / self.tile_size)), count - 1)
        # Agree with the tile edges computed by base() under float round-off
        if idx > 0 and v < origin + idx * self.tile_size:
            idx -= 1
        elif idx + 1 < count and v >= origin + (idx + 1) * self.tile_size:
            idx += 1
        return idx

    def row(self, y: float) -> int:
        """Return the row containing ``y`` or -1 if outside the bounds.

        A ``y`` on the upper edge belongs to the last row.  NaN is outside.
        """
        if not (self.bounds.min_y <= y <= self.bounds.max_y):
            return NOT_FOUND
        return self._index(y, self.bounds.min_y, self.num_rows)

    def col(self, x: float) -> int:
        """Return the column containing ``x`` or -1 if outside the bounds."""
        if not (self.bounds.min_x <= x <= self.bounds.max_x):
            return NOT_FOUND
        return self._index(x, self.bounds.min_x, self.num_cols)

    def tile_id(self, point: Point2) -> int:
        """Return the id of the tile containing ``point`` or -1."""
        return self.tile_id_xy(point.x, point.y)

    def tile_id_xy(self, x: float, y: float) -> int:
        """Bare-float form of :meth:`tile_id`."""
        row = self.row(y)
        col = self.col(x)
        if row == NOT_FOUND or col == NOT_FOUND:
            return NOT_FOUND
        return row * self.num_cols + col

    def tile_id_at(self, col: int, row: int) -> int:
        """Return the id of the tile at ``(col, row)`` or -1 if off the grid."""
        if col < 0 or col >= self.num_cols or row < 0 or row >= self.num_rows:
            return NOT_FOUND
        return row * self.num_cols + col

    def row_col(self, tile_id: int) -> Tuple[int, int]:
        """Unpack a tile id into ``(row, col)``."""
        return divmod(tile_id, self.num_cols)

    # -- Grid -> coordinate -------------------------------------------------
    def base(self, tile_id: int) -> Point2:
        """Lower-left corner of a tile.

        ``tile_id`` must come from this grid; it is not range checked.
        """
        row, col = self.row_col(tile_id)
        return Point2(
            self.bounds.min_x + col * self.tile_size,
            self.bounds.min_y + row * self.tile_size,
        )

    def tile_bounds(self, tile_id: int) -> AABB2:
        base = self.base(tile_id)
        return AABB2(base.x, base.y, base.x + self.tile_size, base.y + self.tile_size)

    def tile_bounds_at(self, col: int, row: int) -> AABB2:
        x = self.bounds.min_x + col * self.tile_size
        y = self.bounds.min_y + row * self.tile_size
        return AABB2(x, y, x + self.tile_size, y + self.tile_size)

    def center(self, tile_id: int) -> Point2:
        base = self.base(tile_id)
        half = self.tile_size * 0.5
        return Point2(base.x + half, base.y + half)

    # -- Relative addressing ------------------------------------------------
    def get_relative_tile_id(self, start: int, delta_rows: int, delta_cols: int) -> int:
        """Offset ``start`` by whole rows and columns.

        Returns -1 if the result is off the grid.  Columns do not wrap
        here, regardless of ``wrap_columns``.
        """
        row, col = self.row_col(start)
        return self.tile_id_at(col + delta_cols, row + delta_rows)

    def tile_offsets(self, initial: int, other: int) -> Tuple[int, int]:
        """Return ``(delta_rows, delta_cols)`` leading from ``initial`` to ``other``."""
        row_a, col_a = self.row_col(initial)
        row_b, col_b = self.row_col(other)
        return row_b - row_a, col_b - col_a

    def tile_count(self) -> int:
        return self.num_rows * self.num_cols

    # -- Neighbours ---------------------------------------------------------
    def right_neighbor(self, tile_id: int) -> int:
        row, col = self.row_col(tile_id)
        if col + 1 < self.num_cols:
            return tile_id + 1
        return row * self.num_cols if self.wrap_columns else NOT_FOUND

    def left_neighbor(self, tile_id: int) -> int:
        row, col = self.row_col(tile_id)
        if col > 0:
            return tile_id - 1
        return row * self.num_cols + self.num_cols - 1 if self.wrap_columns else NOT_FOUND

    def top_neighbor(self, tile_id: int) -> int:
        row, _ = self.row_col(tile_id)
        return tile_id + self.num_cols if row + 1 < self.num_rows else NOT_FOUND

    def bottom_neighbor(self, tile_id: int) -> int:
        row, _ = self.row_col(tile_id)
        return tile_id - self.num_cols if row > 0 else NOT_FOUND

    def neighbors(self, tile_id: int) -> List[int]:
        """Valid right, left, top and bottom neighbours, in that order.

        On a single-column wrapping grid the left and right neighbour is
        the tile itself and is reported once per side.
        """
        candidates = (
            self.right_neighbor(tile_id),
            self.left_neighbor(tile_id),
            self.top_neighbor(tile_id),
            self.bottom_neighbor(tile_id),
        )
        return [t for t in candidates if t != NOT_FOUND]

    # -- Enumeration --------------------------------------------------------
    def iter_tiles(self) -> Iterator[Tuple[int, AABB2]]:
        """Yield ``(tile_id, bounds)`` for every tile in id order."""
        for row in range(self.num_rows):
            for col in range(self.num_cols):
                yield row * self.num_cols + col, self.tile_bounds_at(col, row)

    def _seed_tile(self, query_box: AABB2) -> int:
        tile_id = self.tile_id(query_box.center())
        if tile_id != NOT_FOUND:
            return tile_id
        for corner in query_box.corners():
            tile_id = self.tile_id(corner)
            if tile_id != NOT_FOUND:
                return tile_id
        # Box crosses the grid with its center and corners all outside.
        if not query_box.intersects(self.bounds):
            return NOT_FOUND
        clipped = AABB2(
            max(query_box.min_x, self.bounds.min_x),
            max(query_box.min_y, self.bounds.min_y),
            min(query_box.max_x, self.bounds.max_x),
            min(query_box.max_y, self.bounds.max_y),
        )
        return self.tile_id(clipped.center())

    def tile_list(self, query_box: AABB2, max_tiles: int = DEFAULT_MAX_TILES) -> List[int]:
        """Return the ids of the tiles whose bounds intersect ``query_box``.

        The search starts at the tile under the centre of the box (or a
        corner, when the centre is off the grid) and expands breadth
        first through neighbouring tiles, never past a tile that misses
        the box.  Touching edges count as intersecting.

        Parameters
        ----------
        query_box : AABB2
            Area of interest; may extend beyond the grid.
        max_tiles : int, optional
            Upper bound on the number of ids returned (default 4096).
            When reached, the ids nearest the seed in search order are
            returned.

        Returns
        -------
        list of int
            Tile ids in breadth-first order from the seed; empty when
            the box does not overlap the grid.
        """
        result: List[int] = []
        if max_tiles <= 0:
            return result

        seed = self._seed_tile(query_box)
        if seed == NOT_FOUND:
            return result

        frontier: Deque[int] = deque([seed])
        visited: Set[int] = {seed}
        while frontier and len(result) < max_tiles:
            tile_id = frontier.popleft()
            if not self.tile_bounds(tile_id).intersects(query_box):
                continue
            result.append(tile_id)
            for neighbor in self.neighbors(tile_id):
                if neighbor not in visited:
                    visited.add(neighbor)
                    frontier.append(neighbor)

        if frontier and len(result) >= max_tiles:
            logger.debug(
                "Tile list for %s truncated at %d tiles", query_box.as_tuple(), max_tiles
            )
        return result
