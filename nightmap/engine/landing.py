"""Landing skyline controller.

Holds the explicit interaction state of the opening screen: cursor, hovered
zone, hovered window, and the camera zoom. The frontend feeds it pointer
events in container pixels and reads back brightness, labels and the layer
transform when drawing a frame.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from .boundary import BoundaryMask
from .camera import CameraTransitionController, LayerTransform, ZoomParams
from .field import FieldParams, generate_window_field
from .illumination import (
    IlluminationParams,
    WindowShade,
    brightness_at,
    brightness_field,
    window_shade,
)
from .prng import PCG32
from .types import CityConfig, Point, WindowCell, Zone
from .zones import ZoneIndex


def to_percent(
    px: float, py: float, width: float, height: float
) -> Point | None:
    """Container pixels -> clamped canvas percent. None if degenerate."""
    if width <= 0 or height <= 0:
        return None
    return Point(px / width * 100.0, py / height * 100.0).clamped()


class LandingScene:
    def __init__(
        self,
        config: CityConfig,
        rng: PCG32,
        field_params: FieldParams | None = None,
        illumination: IlluminationParams | None = None,
        zoom: ZoomParams | None = None,
        on_arrived: Callable[[Point], None] | None = None,
    ) -> None:
        self.config = config
        self.mask = BoundaryMask(config.boundary)
        self.zones = ZoneIndex(config.zones)
        self.field_params = field_params or FieldParams.from_dict(
            config.field_params
        )
        self.illumination = illumination or IlluminationParams()
        self.camera = CameraTransitionController(
            self.zones, zoom, on_arrived=on_arrived
        )
        places = config.landmarks or config.venues
        self._place_names = {p.id: p.name for p in places}
        self.windows: list[WindowCell] = generate_window_field(
            self.mask, self.field_params, places, rng
        )
        self._xs = np.array([w.position.x for w in self.windows])
        self._ys = np.array([w.position.y for w in self.windows])

        self.cursor: Point | None = None
        self.hovered_zone: Zone | None = None
        self.hovered_window: WindowCell | None = None

    # -- pointer events --

    def pointer_move(self, px: float, py: float, width: float, height: float):
        p = to_percent(px, py, width, height)
        if p is None:
            return
        self.cursor = p
        self.hovered_zone = self.zones.zone_at(p)
        self.hovered_window = self.window_at(p)

    def pointer_leave(self) -> None:
        self.hovered_zone = None
        self.hovered_window = None

    def click(self, p: Point) -> bool:
        return self.camera.select(p)

    def tick(self, dt: float) -> None:
        self.camera.tick(dt)

    # -- queries --

    def window_at(self, p: Point) -> WindowCell | None:
        """Topmost (last drawn) window whose rectangle covers ``p``."""
        for w in reversed(self.windows):
            if (
                w.position.x <= p.x <= w.position.x + w.width
                and w.position.y <= p.y <= w.position.y + w.height
            ):
                return w
        return None

    def brightness(self, cell: WindowCell) -> float:
        return brightness_at(
            cell.position, self.cursor, self.hovered_zone, self.illumination
        )

    def brightness_all(self) -> np.ndarray:
        return brightness_field(
            self._xs,
            self._ys,
            self.cursor,
            self.hovered_zone,
            self.illumination,
        )

    def shades(self) -> list[WindowShade]:
        levels = self.brightness_all()
        return [
            window_shade(w.base_opacity, float(b))
            for w, b in zip(self.windows, levels)
        ]

    def in_hovered_zone(self, cell: WindowCell) -> bool:
        return self.hovered_zone is not None and self.hovered_zone.contains(
            cell.position
        )

    def label(self) -> str | None:
        """Hover caption: zone name first, else the window's place name."""
        if self.camera.busy:
            return None
        if self.hovered_zone is not None:
            return self.hovered_zone.name
        w = self.hovered_window
        if w is not None and w.associated_venue_id is not None:
            return self._place_names.get(w.associated_venue_id)
        return None

    @property
    def show_title(self) -> bool:
        return not self.camera.busy

    def transform(self) -> LayerTransform:
        return self.camera.transform()
