"""Hover illumination of the landing skyline.

Brightness is a multiplier >= 1.0 applied to a window's base opacity.
A hovered zone lights every window inside it at a fixed level; otherwise
windows near the cursor brighten with a linear falloff out to
``max_distance``.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .types import Point, Zone
from .zones import distance

BASELINE = 1.0
MAX_OPACITY = 0.95

# Window flicker: opacity multipliers at evenly spaced keyframes.
FLICKER_KEYFRAMES = (1.0, 1.5, 0.7, 1.0)
# Skyline windows share one cycle length and differ by their start offset.
WINDOW_FLICKER_PERIOD = 4.0


@dataclass
class IlluminationParams:
    max_distance: float = 12.0
    amplitude: float = 2.5
    zone_brightness: float = 2.5

    def __post_init__(self) -> None:
        if self.max_distance <= 0:
            raise ValueError(
                f"max_distance must be positive, got {self.max_distance}"
            )


@dataclass(frozen=True)
class WindowShade:
    opacity: float
    tier: str  # "bright", "warm" or "dim"
    lit: bool


def brightness_at(
    cell: Point,
    cursor: Point | None,
    hovered_zone: Zone | None,
    params: IlluminationParams | None = None,
) -> float:
    params = params or IlluminationParams()
    if hovered_zone is not None and hovered_zone.contains(cell):
        return params.zone_brightness
    if cursor is None:
        return BASELINE
    d = distance(cell, cursor)
    if d < params.max_distance:
        return BASELINE + (1.0 - d / params.max_distance) * params.amplitude
    return BASELINE


def brightness_field(
    xs,
    ys,
    cursor: Point | None,
    hovered_zone: Zone | None,
    params: IlluminationParams | None = None,
) -> np.ndarray:
    """Vectorized ``brightness_at`` over window coordinate arrays."""
    params = params or IlluminationParams()
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    out = np.full(xs.shape, BASELINE, dtype=np.float64)
    if cursor is not None:
        d = np.hypot(xs - cursor.x, ys - cursor.y)
        near = d < params.max_distance
        out = np.where(
            near,
            BASELINE + (1.0 - d / params.max_distance) * params.amplitude,
            out,
        )
    if hovered_zone is not None:
        c = hovered_zone.center
        in_zone = np.hypot(xs - c.x, ys - c.y) <= hovered_zone.radius
        out = np.where(in_zone, params.zone_brightness, out)
    return out


def window_shade(base_opacity: float, brightness: float) -> WindowShade:
    if brightness > 1.8:
        tier = "bright"
    elif brightness > 1.3:
        tier = "warm"
    else:
        tier = "dim"
    return WindowShade(
        opacity=min(base_opacity * brightness, MAX_OPACITY),
        tier=tier,
        lit=brightness > 1.5,
    )


def flicker_opacity(base: float, t: float, duration: float) -> float:
    """Window opacity at time ``t`` within a repeating cycle."""
    if duration <= 0:
        return base
    phase = (t % duration) / duration
    segments = len(FLICKER_KEYFRAMES) - 1
    pos = phase * segments
    i = min(int(pos), segments - 1)
    frac = pos - i
    a = FLICKER_KEYFRAMES[i]
    b = FLICKER_KEYFRAMES[i + 1]
    return base * (a + (b - a) * frac)


def window_flicker(shade: WindowShade, phase: float, t: float) -> float:
    """Skyline window opacity at time ``t``, offset by its flicker phase."""
    return min(
        flicker_opacity(shade.opacity, t + phase, WINDOW_FLICKER_PERIOD),
        MAX_OPACITY,
    )
