"""Spatial interaction core of the night map.

No UI dependencies: everything here can be driven headless (tests, scripts)
as well as from the tkinter viewer in ``frontend/``.
"""

from .boundary import BoundaryMask, point_in_polygon
from .camera import (
    CameraPhase,
    CameraTransitionController,
    SceneNavigator,
    ViewMode,
)
from .config_io import builtin_config_path, load_city_config
from .field import FieldParams, generate_window_field
from .illumination import IlluminationParams, brightness_at
from .timeline import TimelineMapper, TimelineSlider, VenueState, venue_state
from .zones import ZoneIndex, distance

__all__ = [
    "BoundaryMask",
    "CameraPhase",
    "CameraTransitionController",
    "FieldParams",
    "IlluminationParams",
    "SceneNavigator",
    "TimelineMapper",
    "TimelineSlider",
    "VenueState",
    "ViewMode",
    "ZoneIndex",
    "brightness_at",
    "builtin_config_path",
    "distance",
    "generate_window_field",
    "load_city_config",
    "point_in_polygon",
    "venue_state",
]
