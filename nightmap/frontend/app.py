"""Tkinter viewer for the night map.

Wires the engine controllers to a single Tk canvas. The major pieces are:

  * ``LandingScene``: the opening skyline. Pointer motion drives hover
    illumination; clicking a window starts the camera zoom.
  * ``SceneNavigator``: the two-layer hand-off from skyline to map, started
    by the zoom's arrival. When the background layer finishes, the view
    switches to the map, once.
  * ``MapView`` + ``TimelineSlider``: the destination. Venues are shown, ghosted
    or hidden by year, scrubbed by dragging or wheeling over the left strip.
    Clicking an active venue opens a detail card (``VenuePopup``).

Frames are scheduled with ``root.after``; every frame advances the
controllers by the elapsed wall time and redraws through
``render.SkylineRenderer``. The canvas is the only event source, so each
handler runs to completion before the next one.
"""

import argparse
import sys
import time
import tkinter as tk
from tkinter import messagebox, ttk

from PIL import Image, ImageTk

from ..engine.camera import SceneNavigator, ViewMode
from ..engine.config_io import builtin_config_path, load_city_config
from ..engine.field import generate_backdrop_windows
from ..engine.landing import LandingScene
from ..engine.map_view import CATEGORY_LABELS, MapView, format_years
from ..engine.prng import PCG32
from ..engine.timeline import DEFAULT_YEAR, TimelineSlider
from ..engine.types import CityConfig
from .render import (
    CANVAS_BG,
    TIMELINE_WIDTH,
    SkylineRenderer,
    apply_transform,
    composite,
    render_timeline,
    timeline_track,
    venue_at_pixel,
)

FRAME_MS = 33
BACKDROP_COUNT = 80


class VenuePopup:
    """Detail card for one venue. Closing it clears the map selection."""

    def __init__(self, parent, venue, on_close):
        self._on_close = on_close
        self.top = tk.Toplevel(parent)
        self.top.title(venue.name)
        self.top.configure(bg=CANVAS_BG)
        self.top.transient(parent)
        self.top.protocol("WM_DELETE_WINDOW", self.close)
        frame = ttk.Frame(self.top, padding=16)
        frame.pack(fill=tk.BOTH, expand=True)
        ttk.Label(
            frame, text=CATEGORY_LABELS[venue.category].upper()
        ).pack(anchor="w")
        ttk.Label(frame, text=venue.name, font=("Georgia", 18)).pack(
            anchor="w", pady=(4, 2)
        )
        ttk.Label(frame, text=format_years(venue)).pack(anchor="w")
        ttk.Label(frame, text=venue.description, wraplength=420).pack(
            anchor="w", pady=(12, 12)
        )
        ttk.Button(frame, text="Close", command=self.close).pack(anchor="e")

    def close(self):
        if self.top is not None:
            self.top.destroy()
            self.top = None
            self._on_close()


class App:
    def __init__(self, config: CityConfig, seed=None):
        self.root = tk.Tk()
        self.root.title(f"Night Map: {config.name}")
        self.root.geometry("1100x800")
        self.root.configure(bg=CANVAS_BG)

        style = ttk.Style()
        style.theme_use("clam")

        self.canvas = tk.Canvas(self.root, bg=CANVAS_BG, highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)

        self.config = config
        rng = PCG32(seed) if seed is not None else PCG32.from_entropy()
        self.navigator = SceneNavigator(
            config.focus, on_view_changed=self._on_view_changed
        )
        self.landing = LandingScene(
            config, rng, on_arrived=self.navigator.begin
        )
        self.map_view = MapView(config.venues, DEFAULT_YEAR)
        self.slider = TimelineSlider(
            initial_year=DEFAULT_YEAR,
            on_year_change=self.map_view.on_year_changed,
        )
        self.backdrop = generate_backdrop_windows(BACKDROP_COUNT, rng)

        self._photo = None  # prevent GC
        self._popup = None
        self._started = time.monotonic()
        self._last_frame = self._started

        self.canvas.bind("<Motion>", self._on_motion)
        self.canvas.bind("<Leave>", self._on_leave)
        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_drag)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<MouseWheel>", self._on_wheel)
        self.canvas.bind("<Button-4>", self._on_wheel_up)
        self.canvas.bind("<Button-5>", self._on_wheel_down)

        print(
            f"Loaded {config.name}: {len(self.landing.windows)} windows, "
            f"{len(config.zones)} zones, {len(config.venues)} venues "
            f"(seed {rng.seed})"
        )
        self.root.after(FRAME_MS, self._frame)

    # -- geometry --

    def _size(self):
        return self.canvas.winfo_width(), self.canvas.winfo_height()

    def _map_active(self):
        return self.navigator.foreground_visible

    def _in_timeline(self, x):
        return self._map_active() and x < TIMELINE_WIDTH

    # -- pointer events --

    def _on_motion(self, event):
        if self._map_active():
            return
        w, h = self._size()
        self.landing.pointer_move(event.x, event.y, w, h)

    def _on_leave(self, _event):
        self.landing.pointer_leave()

    def _on_press(self, event):
        w, h = self._size()
        if not self._map_active():
            self.landing.pointer_move(event.x, event.y, w, h)
            window = self.landing.hovered_window
            if window is not None:
                self.landing.click(window.position)
            return
        if self._in_timeline(event.x):
            top, extent = timeline_track(h)
            self.slider.pointer_down(event.y - top, extent)
            return
        if self._popup is not None:
            return
        venue = venue_at_pixel(
            self.map_view,
            event.x - TIMELINE_WIDTH,
            event.y,
            w - TIMELINE_WIDTH,
            h,
        )
        if venue is not None and self.map_view.open_venue(venue.id):
            self._popup = VenuePopup(self.root, venue, self._on_popup_closed)

    def _on_drag(self, event):
        if not self.slider.dragging:
            return
        _w, h = self._size()
        top, extent = timeline_track(h)
        self.slider.pointer_move(event.y - top, extent)

    def _on_release(self, _event):
        self.slider.pointer_up()

    def _on_wheel(self, event):
        if self._in_timeline(event.x):
            # Tk reports positive delta for wheel-up; scrolling down moves
            # forward in time.
            self.slider.wheel(-event.delta)

    def _on_wheel_up(self, event):
        if self._in_timeline(event.x):
            self.slider.wheel(-1)

    def _on_wheel_down(self, event):
        if self._in_timeline(event.x):
            self.slider.wheel(1)

    def _on_popup_closed(self):
        self._popup = None
        self.map_view.close_venue()

    def _on_view_changed(self, mode):
        if mode is ViewMode.MAP:
            print(f"Entered map view: {self.config.focus_label}")

    # -- frame loop --

    def _frame(self):
        now = time.monotonic()
        dt = now - self._last_frame
        self._last_frame = now
        self.landing.tick(dt)
        self.navigator.tick(dt)
        self.slider.tick(dt)
        self._render(now - self._started)
        self.root.after(FRAME_MS, self._frame)

    def _render(self, t_seconds):
        w, h = self._size()
        if w < 20 or h < 20:
            return
        renderer = SkylineRenderer(w, h)
        img = renderer.render_landing(
            self.landing, t_seconds, self.slider.mapper
        )
        img = apply_transform(img, self.landing.transform())
        img = apply_transform(img, self.navigator.background_transform())

        if self.navigator.foreground_visible:
            fg = Image.new("RGB", (w, h), CANVAS_BG)
            map_w = w - TIMELINE_WIDTH
            if map_w > 0:
                map_img = SkylineRenderer(map_w, h).render_map(
                    self.map_view,
                    self.backdrop,
                    t_seconds,
                    label=self.config.focus_label,
                )
                fg.paste(map_img, (TIMELINE_WIDTH, 0))
            fg.paste(render_timeline(self.slider, h), (0, 0))
            img = composite(img, fg, self.navigator.foreground_opacity())
            if self.slider.show_year:
                renderer.draw_year_overlay(
                    img, self.slider.current_year, self.slider.dragging
                )

        self._photo = ImageTk.PhotoImage(img)
        self.canvas.delete("all")
        self.canvas.create_image(0, 0, image=self._photo, anchor="nw")

    def run(self):
        self.root.mainloop()


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Night Map viewer")
    parser.add_argument(
        "--config",
        default=str(builtin_config_path()),
        help="City configuration JSON (default: built-in Manhattan)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the window field (default: random each launch)",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)
    try:
        config = load_city_config(args.config)
    except (OSError, ValueError, KeyError) as e:
        print(f"Could not load {args.config}: {e}", file=sys.stderr)
        messagebox.showerror("Load Error", f"Could not load {args.config}:\n{e}")
        sys.exit(1)
    App(config, seed=args.seed).run()


if __name__ == "__main__":
    main()
