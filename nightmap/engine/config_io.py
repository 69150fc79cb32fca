"""Load city configurations from JSON files.

Provides helpers for reading a city JSON file into a typed ``CityConfig``
(via ``types.py``) or a raw dict, plus a path helper for the built-in
cities under ``nightmap/data/``.

Used by ``frontend/app.py`` at startup and by the engine tests.
"""

from __future__ import annotations

import json
from pathlib import Path

from .boundary import BoundaryMask
from .field import FieldParams
from .types import CityConfig
from .zones import ZoneIndex

# nightmap/data/ is one level up from nightmap/engine/config_io.py
_DATA_DIR = Path(__file__).parent.parent / "data"

DEFAULT_CITY = "manhattan"


def builtin_config_path(name: str = DEFAULT_CITY) -> Path:
    """Return the path to a built-in city JSON file.

    Args:
        name: City name without extension (e.g. "manhattan").

    Returns:
        Path to ``nightmap/data/{name}.json``.
    """
    return _DATA_DIR / f"{name}.json"


def load_city_config_dict(path: Path | str) -> dict:
    """Load a city JSON file and return the raw dict."""
    with open(path) as f:
        return json.load(f)


def load_city_config(path: Path | str) -> CityConfig:
    """Load a city JSON file and return a typed ``CityConfig``.

    Raises ValueError or KeyError for malformed data, so a bad file fails
    at startup rather than on the first click.
    """
    config = CityConfig.from_dict(load_city_config_dict(path))
    BoundaryMask(config.boundary)
    ZoneIndex(config.zones)
    FieldParams.from_dict(config.field_params)
    return config
