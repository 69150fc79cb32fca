"""Neighborhood map state: which venues show, and which one is open."""

from __future__ import annotations

from .timeline import VenueState, venue_state
from .types import Venue

CATEGORY_LABELS = {
    "bar": "Bar",
    "club": "Club",
    "bookstore": "Bookstore",
    "community": "Community Space",
    "activism": "Activism",
}

NIGHTLIFE = frozenset({"bar", "club"})


def glow_for(venue: Venue) -> str:
    return "pink" if venue.category in NIGHTLIFE else "gold"


def format_years(venue: Venue) -> str:
    end = venue.end_year if venue.end_year is not None else "Present"
    return f"{venue.start_year} — {end}"


class MapView:
    """Receives year changes and keeps per-venue classifications current."""

    def __init__(self, venues: list[Venue], year: int) -> None:
        self.venues = list(venues)
        self._by_id = {v.id: v for v in self.venues}
        self.year = year
        self.states: dict[str, VenueState] = {}
        self.selected: Venue | None = None
        self.on_year_changed(year)

    def on_year_changed(self, year: int) -> None:
        self.year = year
        self.states = {v.id: venue_state(year, v) for v in self.venues}

    def state_of(self, venue_id: str) -> VenueState:
        return self.states[venue_id]

    def visible_venues(self) -> list[tuple[Venue, VenueState]]:
        return [
            (v, self.states[v.id])
            for v in self.venues
            if self.states[v.id] is not VenueState.HIDDEN
        ]

    def open_venue(self, venue_id: str) -> bool:
        """Open the detail card. Hidden and ghost venues don't respond."""
        venue = self._by_id.get(venue_id)
        if venue is None or self.state_of(venue_id) is not VenueState.ACTIVE:
            return False
        self.selected = venue
        return True

    def close_venue(self) -> None:
        self.selected = None
