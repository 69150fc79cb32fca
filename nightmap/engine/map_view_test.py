import pytest

from .map_view import MapView, format_years, glow_for
from .timeline import TimelineSlider, VenueState
from .types import Point, Venue


def _venue(id, start, end=None, category="bar"):
    return Venue(
        id=id,
        name=id.title(),
        start_year=start,
        end_year=end,
        position=Point(50, 50),
        category=category,
    )


@pytest.fixture
def venues():
    return [
        _venue("stonewall", 1967),
        _venue("oscar-wilde", 1967, 2009, "bookstore"),
        _venue("cafe-cino", 1958, 1968, "community"),
        _venue("archives", 1974, None, "community"),
    ]


class TestMapView:
    def test_initial_states(self, venues):
        view = MapView(venues, 1969)
        assert view.state_of("stonewall") is VenueState.ACTIVE
        assert view.state_of("cafe-cino") is VenueState.GHOST
        assert view.state_of("archives") is VenueState.HIDDEN

    def test_visible_skips_hidden(self, venues):
        view = MapView(venues, 1969)
        ids = [v.id for v, _ in view.visible_venues()]
        assert ids == ["stonewall", "oscar-wilde", "cafe-cino"]

    def test_year_change_reclassifies(self, venues):
        view = MapView(venues, 1969)
        view.on_year_changed(2010)
        assert view.year == 2010
        assert view.state_of("oscar-wilde") is VenueState.GHOST
        assert view.state_of("archives") is VenueState.ACTIVE

    def test_follows_slider(self, venues):
        view = MapView(venues, 1969)
        slider = TimelineSlider(on_year_change=view.on_year_changed)
        slider.pointer_down(0, 400)
        assert view.year == 1920
        assert view.visible_venues() == []

    def test_open_active_venue(self, venues):
        view = MapView(venues, 1969)
        assert view.open_venue("stonewall")
        assert view.selected.id == "stonewall"
        view.close_venue()
        assert view.selected is None

    def test_ghost_and_hidden_do_not_open(self, venues):
        view = MapView(venues, 1969)
        assert not view.open_venue("cafe-cino")
        assert not view.open_venue("archives")
        assert not view.open_venue("nope")
        assert view.selected is None


class TestFormatting:
    def test_years(self):
        assert format_years(_venue("a", 1967, 2009)) == "1967 — 2009"
        assert format_years(_venue("a", 1967)) == "1967 — Present"

    def test_glow(self):
        assert glow_for(_venue("a", 1967, category="club")) == "pink"
        assert glow_for(_venue("a", 1967, category="bookstore")) == "gold"
