"""Procedural window field generation.

The landing skyline is built once per session:

  1. Walk a regular grid over [0,100) x [0,100) in row-major order.
  2. Jitter each grid point independently per axis by [0, jitter_max).
  3. Keep the sample only if it falls inside the city ``BoundaryMask``.
  4. Give each kept sample a random size, base opacity and flicker phase,
     and tag it with a nearby venue or landmark if one lies strictly within
     ``association_radius``.

Randomness comes from an injected ``PCG32``. The draw order per grid point
is fixed (jitter x, jitter y, then width, height, opacity, phase for kept
samples only), so a given seed always yields the same field.

When several venues are within range, the first one in iteration order wins
rather than the closest. The venue lists are small and hand-placed, so the
difference only shows where two venues sit within a few percent of each
other.

``generate_backdrop_windows`` produces the dimmer, larger windows drawn
behind the map view; those ignore the silhouette.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, Sequence

from .boundary import BoundaryMask
from .prng import PCG32
from .types import BackdropWindow, Point, WindowCell
from .zones import distance


class Locatable(Protocol):
    id: str
    position: Point


@dataclass
class FieldParams:
    grid_spacing: float = 3.0
    jitter_max: float = 1.5
    association_radius: float = 3.0
    width_range: tuple[float, float] = (1.2, 1.8)
    height_range: tuple[float, float] = (1.8, 2.8)
    opacity_range: tuple[float, float] = (0.06, 0.26)
    flicker_phase_range: tuple[float, float] = (0.0, 4.0)

    def __post_init__(self) -> None:
        if self.grid_spacing <= 0:
            raise ValueError(
                f"grid_spacing must be positive, got {self.grid_spacing}"
            )
        if self.jitter_max < 0:
            raise ValueError(
                f"jitter_max must be non-negative, got {self.jitter_max}"
            )

    @property
    def max_cells(self) -> int:
        """Upper bound on the number of generated windows."""
        return math.ceil(100.0 / self.grid_spacing) ** 2

    @staticmethod
    def from_dict(d: dict) -> FieldParams:
        defaults = FieldParams()
        return FieldParams(
            grid_spacing=d.get("grid_spacing", defaults.grid_spacing),
            jitter_max=d.get("jitter_max", defaults.jitter_max),
            association_radius=d.get(
                "association_radius", defaults.association_radius
            ),
            width_range=tuple(d.get("width_range", defaults.width_range)),
            height_range=tuple(d.get("height_range", defaults.height_range)),
            opacity_range=tuple(
                d.get("opacity_range", defaults.opacity_range)
            ),
            flicker_phase_range=tuple(
                d.get("flicker_phase_range", defaults.flicker_phase_range)
            ),
        )


def associate_venue(
    p: Point, venues: Sequence[Locatable], radius: float
) -> str | None:
    """Id of the first venue strictly within ``radius`` of ``p``, or None."""
    for venue in venues:
        if distance(p, venue.position) < radius:
            return venue.id
    return None


def _grid_coords(spacing: float) -> list[float]:
    n = math.ceil(100.0 / spacing)
    # Guard against i * spacing rounding up to exactly 100.
    return [i * spacing for i in range(n) if i * spacing < 100.0]


def generate_window_field(
    mask: BoundaryMask,
    params: FieldParams,
    venues: Sequence[Locatable],
    rng: PCG32,
) -> list[WindowCell]:
    """Sample the silhouette into a list of windows (see module docstring)."""
    coords = _grid_coords(params.grid_spacing)
    cells: list[WindowCell] = []
    for gy in coords:
        for gx in coords:
            sample = Point(
                gx + rng.next_float() * params.jitter_max,
                gy + rng.next_float() * params.jitter_max,
            )
            if not mask.contains(sample):
                continue
            cells.append(
                WindowCell(
                    id=len(cells),
                    position=sample,
                    width=rng.uniform(*params.width_range),
                    height=rng.uniform(*params.height_range),
                    base_opacity=rng.uniform(*params.opacity_range),
                    flicker_phase=rng.uniform(*params.flicker_phase_range),
                    associated_venue_id=associate_venue(
                        sample, venues, params.association_radius
                    ),
                )
            )
    return cells


def generate_backdrop_windows(count: int, rng: PCG32) -> list[BackdropWindow]:
    """Dim background windows for the map view, clustered mid-canvas."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    result: list[BackdropWindow] = []
    for i in range(count):
        x = 20.0 + rng.next_float() * 60.0
        y = 15.0 + rng.next_float() * 70.0
        result.append(
            BackdropWindow(
                id=i,
                position=Point(x, y),
                width=rng.uniform(3.0, 6.0),
                height=rng.uniform(6.0, 12.0),
                opacity=rng.uniform(0.03, 0.15),
                flicker_duration=rng.uniform(3.0, 7.0),
                ambient=rng.next_float() > 0.7,
            )
        )
    return result
