"""Grid configuration loader.

Reads tiling system definitions from YAML files.  A configuration looks
like::

    grid:
      bounds: [-180.0, -90.0, 180.0, 90.0]
      tile_size: 0.25
      wrap_columns: true

The ``grid`` key is optional; a flat mapping with the same keys is
accepted as well.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from ..geometry import AABB2
from ..tiling.grid import InvalidConfiguration, TilingGrid
from .logging import get_logger

logger = get_logger(__name__)


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML configuration file into a dictionary.

    Parameters
    ----------
    path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.  Returns an empty dict if the
        file does not exist or is empty.  Malformed YAML raises
        ``yaml.YAMLError``.
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        logger.debug("Config file %s not found", cfg_path)
        return {}
    with open(cfg_path, 'r', encoding='utf-8') as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise InvalidConfiguration(f"{cfg_path}: expected a mapping at top level")
    logger.debug("Loaded config from %s", cfg_path)
    return cfg


def grid_from_config(cfg: Mapping[str, Any]) -> TilingGrid:
    """Build a :class:`TilingGrid` from a configuration mapping.

    Raises
    ------
    InvalidConfiguration
        If ``bounds`` or ``tile_size`` is missing or malformed, or the
        resulting grid is invalid.
    """
    section = cfg.get("grid", cfg)
    if not isinstance(section, Mapping):
        raise InvalidConfiguration("'grid' must be a mapping")

    bounds = section.get("bounds")
    if bounds is None or "tile_size" not in section:
        raise InvalidConfiguration("grid config requires 'bounds' and 'tile_size'")
    if isinstance(bounds, Mapping):
        try:
            bounds = (bounds["min_x"], bounds["min_y"], bounds["max_x"], bounds["max_y"])
        except KeyError as exc:
            raise InvalidConfiguration(f"bounds is missing {exc}") from exc
    if not isinstance(bounds, (list, tuple)) or len(bounds) != 4:
        raise InvalidConfiguration(
            f"bounds must have 4 values (min_x, min_y, max_x, max_y), got {bounds!r}"
        )

    try:
        box = AABB2.from_tuple(bounds)
        tile_size = float(section["tile_size"])
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"non-numeric grid value: {exc}") from exc

    return TilingGrid(
        bounds=box,
        tile_size=tile_size,
        wrap_columns=bool(section.get("wrap_columns", True)),
    )
