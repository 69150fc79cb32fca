"""Year scrubbing and venue visibility by year."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .types import Venue

MIN_YEAR = 1920
MAX_YEAR = 2020
DEFAULT_YEAR = 1969
YEAR_HIDE_DELAY = 0.8

DECADES = (
    (1920, "1920s"),
    (1940, "1940s"),
    (1960, "1960s"),
    (1980, "1980s"),
    (2000, "2000s"),
    (2020, "2020"),
)


class VenueState(Enum):
    HIDDEN = "hidden"
    ACTIVE = "active"
    GHOST = "ghost"


def venue_state(year: int, venue: Venue) -> VenueState:
    if year < venue.start_year:
        return VenueState.HIDDEN
    if venue.end_year is not None and year > venue.end_year:
        return VenueState.GHOST
    return VenueState.ACTIVE


class TimelineMapper:
    """Linear map between a year and a slider position in [0, 1]."""

    def __init__(self, min_year: int = MIN_YEAR, max_year: int = MAX_YEAR):
        if max_year <= min_year:
            raise ValueError(
                f"max_year ({max_year}) must exceed min_year ({min_year})"
            )
        self.min_year = min_year
        self.max_year = max_year

    @property
    def span(self) -> int:
        return self.max_year - self.min_year

    def clamp(self, year: int) -> int:
        return max(self.min_year, min(self.max_year, int(year)))

    def position_of(self, year: int) -> float:
        return (self.clamp(year) - self.min_year) / self.span

    def year_at(self, pct: float) -> int:
        pct = max(0.0, min(1.0, pct))
        # Half-up rounding; round() would send 1950.5 to 1950.
        return math.floor(self.min_year + pct * self.span + 0.5)

    def year_from_pointer(
        self, offset: float, extent: float, current: int
    ) -> int:
        """Year under a pointer ``offset`` pixels along a track ``extent`` long.

        A collapsed track (extent <= 0) keeps ``current``.
        """
        if extent <= 0:
            return current
        return self.year_at(offset / extent)


@dataclass
class TimelineState:
    current_year: int
    dragging: bool = False


class TimelineSlider:
    """Vertical year scrubber: drag, wheel, and the big-year overlay.

    ``current_year`` has one writer (this slider). Every committed write is
    clamped first and then reported to ``on_year_change``.
    """

    def __init__(
        self,
        mapper: TimelineMapper | None = None,
        initial_year: int = DEFAULT_YEAR,
        on_year_change: Callable[[int], None] | None = None,
        hide_delay: float = YEAR_HIDE_DELAY,
    ) -> None:
        self.mapper = mapper or TimelineMapper()
        self.on_year_change = on_year_change
        self.hide_delay = hide_delay
        self.state = TimelineState(self.mapper.clamp(initial_year))
        self.show_year = False
        self._hide_in: float | None = None

    @property
    def current_year(self) -> int:
        return self.state.current_year

    @property
    def dragging(self) -> bool:
        return self.state.dragging

    @property
    def position(self) -> float:
        return self.mapper.position_of(self.state.current_year)

    def set_year(self, year: int) -> int:
        self.state.current_year = self.mapper.clamp(year)
        if self.on_year_change is not None:
            self.on_year_change(self.state.current_year)
        return self.state.current_year

    def pointer_down(self, offset: float, extent: float) -> None:
        self._hide_in = None
        self.state.dragging = True
        self.show_year = True
        self.set_year(
            self.mapper.year_from_pointer(
                offset, extent, self.state.current_year
            )
        )

    def pointer_move(self, offset: float, extent: float) -> None:
        if not self.state.dragging:
            return
        self.set_year(
            self.mapper.year_from_pointer(
                offset, extent, self.state.current_year
            )
        )

    def pointer_up(self) -> None:
        if not self.state.dragging:
            return
        self.state.dragging = False
        self._hide_in = self.hide_delay

    def wheel(self, delta: float) -> None:
        """One year per wheel event; only the sign of ``delta`` matters."""
        if delta == 0:
            return
        step = 1 if delta > 0 else -1
        self.set_year(self.state.current_year + step)
        self.show_year = True
        # Mid-drag the overlay stays up; pointer_up starts the hide timer.
        if not self.state.dragging:
            self._hide_in = self.hide_delay

    def tick(self, dt: float) -> None:
        """Advance the overlay hide timer."""
        if self._hide_in is None:
            return
        self._hide_in -= dt
        if self._hide_in <= 0:
            self._hide_in = None
            self.show_year = False
