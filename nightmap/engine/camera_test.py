"""Tests for the zoom state machine, the outer hand-off, and easing."""

import pytest

from .camera import (
    EASE_IN_OUT,
    EASE_STANDARD,
    IDENTITY,
    CameraPhase,
    CameraTransitionController,
    SceneNavigator,
    SceneTransitionParams,
    Tween,
    ViewMode,
    ZoomParams,
    cubic_bezier,
)
from .types import Point, Zone
from .zones import ZoneIndex

GREENWICH = Zone("Greenwich Village", Point(45, 55), 8, 18)
CHELSEA = Zone("Chelsea", Point(42, 42), 7, 16)
HARLEM = Zone("Harlem", Point(50, 18), 8, 16)
FOCUS = Point(45, 55)


@pytest.fixture
def zones():
    return ZoneIndex([GREENWICH, CHELSEA, HARLEM])


@pytest.fixture
def arrivals():
    return []


@pytest.fixture
def camera(zones, arrivals):
    return CameraTransitionController(zones, on_arrived=arrivals.append)


# -- Easing ---------------------------------------------------------


class TestCubicBezier:
    @pytest.mark.parametrize("curve", [EASE_STANDARD, EASE_IN_OUT])
    def test_endpoints(self, curve):
        ease = cubic_bezier(*curve)
        assert ease(0.0) == 0.0
        assert ease(1.0) == 1.0
        assert ease(-0.5) == 0.0
        assert ease(2.0) == 1.0

    @pytest.mark.parametrize("curve", [EASE_STANDARD, EASE_IN_OUT])
    def test_monotonic(self, curve):
        ease = cubic_bezier(*curve)
        values = [ease(i / 100) for i in range(101)]
        for a, b in zip(values, values[1:]):
            assert b >= a - 1e-9

    def test_in_out_is_symmetric(self):
        ease = cubic_bezier(*EASE_IN_OUT)
        assert ease(0.5) == pytest.approx(0.5, abs=1e-5)
        assert ease(0.25) == pytest.approx(1 - ease(0.75), abs=1e-5)

    def test_slow_start_slow_end(self):
        ease = cubic_bezier(*EASE_IN_OUT)
        assert ease(0.1) < 0.1
        assert ease(0.9) > 0.9

    def test_linear_control_points(self):
        ease = cubic_bezier(1 / 3, 1 / 3, 2 / 3, 2 / 3)
        for t in (0.1, 0.3, 0.7):
            assert ease(t) == pytest.approx(t, abs=1e-5)

    def test_rejects_out_of_range_x(self):
        with pytest.raises(ValueError):
            cubic_bezier(1.5, 0, 0.5, 1)


class TestTween:
    def test_delay_and_end(self):
        tw = Tween(0.0, 10.0, duration=2.0, delay=1.0)
        assert tw.value_at(0.5) == 0.0
        assert tw.value_at(2.0) == pytest.approx(5.0)
        assert tw.value_at(3.0) == 10.0
        assert tw.value_at(99.0) == 10.0
        assert tw.end_time == 3.0

    def test_zero_duration(self):
        tw = Tween(1.0, 0.0, duration=0.0)
        assert tw.value_at(0.0) == 1.0
        assert tw.value_at(0.01) == 0.0


# -- CameraTransitionController -------------------------------------


class TestCameraTransitionController:
    def test_starts_idle(self, camera):
        assert camera.phase is CameraPhase.IDLE
        assert camera.transform() == IDENTITY
        assert not camera.busy

    def test_select_targets_containing_zone(self, camera):
        assert camera.select(Point(43, 41))
        assert camera.phase is CameraPhase.TARGETING
        assert camera.state.target is CHELSEA
        assert camera.state.origin == Point(42, 42)

    def test_select_outside_uses_nearest(self, camera):
        assert camera.select(Point(95, 10))
        assert camera.state.target is HARLEM

    def test_select_clamps_point(self, camera):
        # Clamped to (45, 100): nearest center is Greenwich Village.
        camera.select(Point(45, 500))
        assert camera.state.target is GREENWICH

    def test_second_select_ignored_while_targeting(self, camera):
        camera.select(Point(43, 41))
        assert not camera.select(Point(50, 18))
        assert camera.state.target is CHELSEA

    def test_second_select_ignored_after_arrival(self, camera):
        camera.select(Point(43, 41))
        camera.complete()
        assert not camera.select(Point(50, 18))
        assert camera.state.target is CHELSEA
        assert camera.phase is CameraPhase.ARRIVED

    def test_tick_reaches_arrived(self, camera, arrivals):
        camera.select(Point(43, 41))
        steps = 0
        while camera.phase is CameraPhase.TARGETING:
            camera.tick(1 / 60)
            steps += 1
            assert steps < 1000
        assert camera.phase is CameraPhase.ARRIVED
        assert arrivals == [Point(42, 42)]
        assert camera.state.elapsed == pytest.approx(camera.duration)

    def test_arrival_emits_zone_center_not_click(self, camera, arrivals):
        camera.select(Point(43.7, 40.2))
        camera.tick(10.0)
        assert arrivals == [CHELSEA.center]

    def test_completion_is_idempotent(self, camera, arrivals):
        camera.select(Point(43, 41))
        camera.complete()
        camera.complete()
        camera.tick(5.0)
        camera.complete()
        assert arrivals == [Point(42, 42)]

    def test_complete_while_idle_does_nothing(self, camera, arrivals):
        camera.complete()
        camera.tick(5.0)
        assert camera.phase is CameraPhase.IDLE
        assert arrivals == []

    def test_not_done_before_duration(self, camera, arrivals):
        camera.select(Point(43, 41))
        camera.tick(camera.duration - 0.05)
        assert camera.phase is CameraPhase.TARGETING
        assert arrivals == []

    def test_duration_covers_zoom_and_fade(self, zones):
        ctl = CameraTransitionController(zones)
        assert ctl.duration == pytest.approx(0.8 + 1.5)
        short = CameraTransitionController(
            zones, ZoomParams(duration=3.0, fade_delay=0.0, fade_duration=1.0)
        )
        assert short.duration == 3.0

    def test_transform_progression(self, camera):
        camera.select(Point(43, 41))
        start = camera.transform()
        assert start.origin == CHELSEA.center
        assert start.scale == pytest.approx(1.0)
        assert start.opacity == pytest.approx(1.0)
        camera.tick(1.5)
        mid = camera.transform()
        assert mid.scale == pytest.approx(16.0)
        assert 0.0 < mid.opacity < 1.0
        camera.tick(5.0)
        end = camera.transform()
        assert end.scale == pytest.approx(16.0)
        assert end.opacity == pytest.approx(0.0)

    def test_negative_dt_rejected(self, camera):
        with pytest.raises(ValueError):
            camera.tick(-0.1)

    def test_without_listener(self, zones):
        ctl = CameraTransitionController(zones)
        ctl.select(Point(43, 41))
        ctl.complete()
        assert ctl.phase is CameraPhase.ARRIVED


# -- SceneNavigator -------------------------------------------------


@pytest.fixture
def flips():
    return []


@pytest.fixture
def navigator(flips):
    return SceneNavigator(FOCUS, on_view_changed=flips.append)


class TestSceneNavigator:
    def test_initial(self, navigator):
        assert navigator.view_mode is ViewMode.LANDING
        assert not navigator.foreground_visible
        assert navigator.foreground_opacity() == 0.0
        assert navigator.background_transform() == IDENTITY

    def test_ticks_before_begin_do_nothing(self, navigator, flips):
        navigator.tick(10.0)
        assert navigator.view_mode is ViewMode.LANDING
        assert flips == []

    def test_flip_after_background_completes(self, navigator, flips):
        navigator.begin(Point(42, 42))
        navigator.tick(1.0)
        assert navigator.view_mode is ViewMode.LANDING
        assert flips == []
        navigator.tick(0.9)
        assert navigator.view_mode is ViewMode.MAP
        assert flips == [ViewMode.MAP]

    def test_flip_fires_once(self, navigator, flips):
        navigator.begin(Point(42, 42))
        navigator.tick(2.0)
        navigator.complete_background()
        navigator.tick(2.0)
        navigator.complete_background()
        assert flips == [ViewMode.MAP]

    def test_completion_before_begin_ignored(self, navigator, flips):
        navigator.complete_background()
        assert flips == []
        assert navigator.view_mode is ViewMode.LANDING

    def test_reentry_ignored(self, navigator):
        assert navigator.begin(Point(42, 42))
        navigator.tick(0.5)
        assert not navigator.begin(Point(50, 18))
        assert navigator.elapsed == pytest.approx(0.5)
        assert navigator.requested == [Point(42, 42)]

    @pytest.mark.parametrize(
        "destination", [Point(42, 42), Point(50, 18), Point(55, 88)]
    )
    def test_always_recenters_on_focus(self, navigator, destination):
        navigator.begin(destination)
        navigator.tick(5.0)
        t = navigator.background_transform()
        assert t.scale == pytest.approx(15.0)
        assert t.translate_x == pytest.approx((50 - 45) * 15)
        assert t.translate_y == pytest.approx((50 - 55) * 15)
        assert t.opacity == pytest.approx(0.4)

    def test_foreground_fades_in_from_midpoint(self, navigator):
        navigator.begin(Point(42, 42))
        assert navigator.foreground_visible
        navigator.tick(0.7)
        assert navigator.foreground_opacity() == 0.0
        navigator.tick(0.5)
        assert 0.0 < navigator.foreground_opacity() < 1.0
        navigator.tick(1.0)
        assert navigator.foreground_opacity() == pytest.approx(1.0)

    def test_custom_params(self, flips):
        nav = SceneNavigator(
            Point(50, 50),
            SceneTransitionParams(duration=0.5, scale=4.0),
            on_view_changed=flips.append,
        )
        nav.begin(Point(0, 0))
        nav.tick(0.5)
        assert flips == [ViewMode.MAP]
        t = nav.background_transform()
        assert t.scale == pytest.approx(4.0)
        assert t.translate_x == pytest.approx(0.0)


# -- Composed hand-off ----------------------------------------------


class TestHandOff:
    def test_click_to_map_view(self, zones, flips):
        navigator = SceneNavigator(FOCUS, on_view_changed=flips.append)
        camera = CameraTransitionController(zones, on_arrived=navigator.begin)
        camera.select(Point(43, 41))
        assert camera.state.target.name == "Chelsea"
        for _ in range(600):
            camera.tick(1 / 60)
            navigator.tick(1 / 60)
        assert camera.phase is CameraPhase.ARRIVED
        assert navigator.requested == [Point(42, 42)]
        assert navigator.view_mode is ViewMode.MAP
        assert flips == [ViewMode.MAP]

    def test_view_does_not_flip_before_arrival(self, zones, flips):
        navigator = SceneNavigator(FOCUS, on_view_changed=flips.append)
        camera = CameraTransitionController(zones, on_arrived=navigator.begin)
        camera.select(Point(43, 41))
        for _ in range(60):
            camera.tick(1 / 60)
            navigator.tick(1 / 60)
        assert camera.phase is CameraPhase.TARGETING
        assert not navigator.zooming
        assert flips == []
