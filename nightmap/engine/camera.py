"""Camera transitions: zooming from the skyline into a neighborhood.

Two state machines cooperate when the user clicks a window:

  * ``CameraTransitionController``: the landing layer's own zoom. ``IDLE``
    accepts one ``select(point)``; the point resolves to a zone (the zone
    containing it, else the nearest one), and the controller moves to
    ``TARGETING``. The layer scales toward the zone's ``target_scale`` about
    the zone center and fades out. When the animation ends the controller
    moves to ``ARRIVED`` and emits the zone center, once.
  * ``SceneNavigator``: the outer two-layer hand-off started by that
    emission. The skyline (background) layer scales by a fixed factor and
    translates so the configured focus centroid lands mid-screen, while the
    map (foreground) layer fades in from about halfway through. When the
    background finishes, the view mode flips to ``MAP``, once.

The navigator always recenters on one fixed focus point. Whatever zone the
click resolved to, every transition ends on the same neighborhood view; the
emitted zone center is accepted and ignored.

Both machines are advanced by ``tick(dt)`` from the frontend's frame loop.
Completion is latched: extra completion signals, or ticks after the end,
never re-fire a hand-off. There is no cancel path.

Timing curves are CSS-style cubic Béziers (``cubic_bezier``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from .types import Point, Zone
from .zones import ZoneIndex

CANVAS_CENTER = Point(50.0, 50.0)

EASE_STANDARD = (0.4, 0.0, 0.2, 1.0)
EASE_IN_OUT = (0.42, 0.0, 0.58, 1.0)

Easing = Callable[[float], float]


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> Easing:
    """Timing function through (0,0), (x1,y1), (x2,y2), (1,1).

    Solves x(s) = t for the curve parameter with Newton steps, falling back
    to bisection, then returns y(s).
    """
    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError("Bezier control x values must lie in [0, 1]")

    def _coord(s: float, a: float, b: float) -> float:
        inv = 1.0 - s
        return 3 * inv * inv * s * a + 3 * inv * s * s * b + s * s * s

    def _slope(s: float, a: float, b: float) -> float:
        inv = 1.0 - s
        return 3 * inv * inv * a + 6 * inv * s * (b - a) + 3 * s * s * (1 - b)

    def ease(t: float) -> float:
        if t <= 0.0:
            return 0.0
        if t >= 1.0:
            return 1.0
        s = t
        for _ in range(8):
            err = _coord(s, x1, x2) - t
            if abs(err) < 1e-7:
                return _coord(s, y1, y2)
            d = _slope(s, x1, x2)
            if abs(d) < 1e-6:
                break
            s = min(1.0, max(0.0, s - err / d))
        lo, hi = 0.0, 1.0
        s = t
        for _ in range(60):
            x = _coord(s, x1, x2)
            if abs(x - t) < 1e-7:
                break
            if x < t:
                lo = s
            else:
                hi = s
            s = (lo + hi) / 2
        return _coord(s, y1, y2)

    return ease


def linear(t: float) -> float:
    return max(0.0, min(1.0, t))


@dataclass
class Tween:
    start: float
    end: float
    duration: float
    delay: float = 0.0
    easing: Easing = linear

    @property
    def end_time(self) -> float:
        return self.delay + self.duration

    def progress(self, t: float) -> float:
        if t <= self.delay:
            return 0.0
        if self.duration <= 0 or t >= self.end_time:
            return 1.0
        return (t - self.delay) / self.duration

    def value_at(self, t: float) -> float:
        return self.start + (self.end - self.start) * self.easing(
            self.progress(t)
        )


@dataclass(frozen=True)
class LayerTransform:
    """How to draw a layer: scale about ``origin`` (percent of the layer),
    then shift by ``translate_x``/``translate_y`` (percent of the layer
    size), at ``opacity``."""

    origin: Point = CANVAS_CENTER
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0
    opacity: float = 1.0


IDENTITY = LayerTransform()


class CameraPhase(Enum):
    IDLE = "idle"
    TARGETING = "targeting"
    ARRIVED = "arrived"


@dataclass
class CameraState:
    phase: CameraPhase = CameraPhase.IDLE
    origin: Point = CANVAS_CENTER
    target: Zone | None = None
    elapsed: float = 0.0


@dataclass
class ZoomParams:
    duration: float = 1.5
    fade_delay: float = 0.8
    fade_duration: float = 1.5
    easing: tuple[float, float, float, float] = EASE_STANDARD
    fade_easing: tuple[float, float, float, float] = EASE_IN_OUT


class CameraTransitionController:
    def __init__(
        self,
        zones: ZoneIndex,
        params: ZoomParams | None = None,
        on_arrived: Callable[[Point], None] | None = None,
    ) -> None:
        self.zones = zones
        self.params = params or ZoomParams()
        self.on_arrived = on_arrived
        self.state = CameraState()
        self._scale: Tween | None = None
        self._fade = Tween(
            1.0,
            0.0,
            self.params.fade_duration,
            self.params.fade_delay,
            cubic_bezier(*self.params.fade_easing),
        )

    @property
    def phase(self) -> CameraPhase:
        return self.state.phase

    @property
    def busy(self) -> bool:
        """True once a transition has started (no further selections)."""
        return self.state.phase is not CameraPhase.IDLE

    @property
    def duration(self) -> float:
        """Time until both the zoom and the fade have finished."""
        return max(self.params.duration, self._fade.end_time)

    def select(self, p: Point) -> bool:
        """Start zooming toward the zone at ``p``. Ignored unless idle."""
        if self.state.phase is not CameraPhase.IDLE:
            return False
        zone = self.zones.resolve(p.clamped())
        self.state = CameraState(
            phase=CameraPhase.TARGETING,
            origin=zone.center,
            target=zone,
            elapsed=0.0,
        )
        self._scale = Tween(
            1.0,
            zone.target_scale,
            self.params.duration,
            easing=cubic_bezier(*self.params.easing),
        )
        return True

    def tick(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        if self.state.phase is not CameraPhase.TARGETING:
            return
        self.state.elapsed = min(self.state.elapsed + dt, self.duration)
        if self.state.elapsed >= self.duration:
            self.complete()

    def complete(self) -> None:
        """Animation-complete signal. Only the first one in TARGETING counts."""
        if self.state.phase is not CameraPhase.TARGETING:
            return
        self.state.phase = CameraPhase.ARRIVED
        self.state.elapsed = self.duration
        target = self.state.target
        assert target is not None
        if self.on_arrived is not None:
            self.on_arrived(target.center)

    def transform(self) -> LayerTransform:
        if self.state.phase is CameraPhase.IDLE or self._scale is None:
            return IDENTITY
        t = self.state.elapsed
        return LayerTransform(
            origin=self.state.origin,
            scale=self._scale.value_at(t),
            opacity=self._fade.value_at(t),
        )


class ViewMode(Enum):
    LANDING = "landing"
    MAP = "map"


@dataclass
class SceneTransitionParams:
    duration: float = 1.8
    scale: float = 15.0
    end_opacity: float = 0.4
    easing: tuple[float, float, float, float] = EASE_IN_OUT
    foreground_delay: float = 0.8
    foreground_duration: float = 1.0


@dataclass
class _NavigatorState:
    view_mode: ViewMode = ViewMode.LANDING
    zooming: bool = False
    elapsed: float = 0.0
    flipped: bool = False
    requested: list[Point] = field(default_factory=list)


class SceneNavigator:
    def __init__(
        self,
        focus: Point,
        params: SceneTransitionParams | None = None,
        on_view_changed: Callable[[ViewMode], None] | None = None,
    ) -> None:
        self.focus = focus
        self.params = params or SceneTransitionParams()
        self.on_view_changed = on_view_changed
        self._state = _NavigatorState()
        ease = cubic_bezier(*self.params.easing)
        self._bg = Tween(0.0, 1.0, self.params.duration, easing=ease)
        self._fg = Tween(
            0.0,
            1.0,
            self.params.foreground_duration,
            self.params.foreground_delay,
            cubic_bezier(*EASE_IN_OUT),
        )

    @property
    def view_mode(self) -> ViewMode:
        return self._state.view_mode

    @property
    def zooming(self) -> bool:
        return self._state.zooming

    @property
    def elapsed(self) -> float:
        return self._state.elapsed

    @property
    def requested(self) -> list[Point]:
        """Destinations passed to ``begin`` (kept for inspection only)."""
        return list(self._state.requested)

    @property
    def foreground_visible(self) -> bool:
        return self._state.zooming or self._state.view_mode is ViewMode.MAP

    def begin(self, destination: Point) -> bool:
        """Start the hand-off. The destination does not move the camera."""
        if self._state.zooming:
            return False
        self._state.zooming = True
        self._state.requested.append(destination)
        return True

    def tick(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        if not self._state.zooming:
            return
        end = max(self._bg.end_time, self._fg.end_time)
        self._state.elapsed = min(self._state.elapsed + dt, end)
        if self._state.elapsed >= self._bg.end_time:
            self.complete_background()

    def complete_background(self) -> None:
        """Background-complete signal. Flips the view exactly once."""
        if not self._state.zooming or self._state.flipped:
            return
        self._state.flipped = True
        self._state.elapsed = max(self._state.elapsed, self._bg.end_time)
        self._state.view_mode = ViewMode.MAP
        if self.on_view_changed is not None:
            self.on_view_changed(ViewMode.MAP)

    def background_transform(self) -> LayerTransform:
        if not self._state.zooming:
            return IDENTITY
        k = self._bg.value_at(self._state.elapsed)
        s = self.params.scale
        return LayerTransform(
            origin=CANVAS_CENTER,
            scale=1.0 + (s - 1.0) * k,
            translate_x=(CANVAS_CENTER.x - self.focus.x) * s * k,
            translate_y=(CANVAS_CENTER.y - self.focus.y) * s * k,
            opacity=1.0 + (self.params.end_opacity - 1.0) * k,
        )

    def foreground_opacity(self) -> float:
        if not self.foreground_visible:
            return 0.0
        return self._fg.value_at(self._state.elapsed)
