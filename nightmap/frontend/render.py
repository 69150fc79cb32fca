"""Pillow rendering of the skyline, the neighborhood map and the timeline.

Everything here draws from engine state and never mutates it. Coordinates
in the engine are percentages of the canvas; ``_to_px`` converts them for
the image size being drawn.
"""

from __future__ import annotations

from PIL import Image, ImageDraw, ImageFont

from ..engine.camera import LayerTransform
from ..engine.illumination import flicker_opacity, window_flicker
from ..engine.landing import LandingScene
from ..engine.map_view import MapView, glow_for
from ..engine.timeline import (
    DECADES,
    TimelineMapper,
    TimelineSlider,
    VenueState,
)
from ..engine.types import BackdropWindow, Point, Venue

# -- Visual constants --

CANVAS_BG = "#000000"
PANEL_BG = "#0b0b0d"
PANEL_BORDER = "#27272a"
TEXT_MUTED = "#71717a"
TEXT_DIM = "#52525b"
TEXT_BRIGHT = "#e4e4e7"

TIER_COLORS = {
    "bright": "#f5cf5b",
    "warm": "#d9b24a",
    "dim": "#7d6a3a",
}
GLOW = "#e8bf3a"
GLOW_COLORS = {
    "pink": "#f05fa8",
    "gold": "#f1c232",
}
GHOST_FILL = "#1c1c1c"
GHOST_OUTLINE = "#3a3a3a"
BACKDROP_AMBIENT = "#5c4a26"
BACKDROP_PLAIN = "#2b2b2b"

GHOST_OPACITY = 0.3
ZONE_WINDOW_SCALE = 1.15
MARKER_W = 20
MARKER_H = 32

TIMELINE_WIDTH = 128
TIMELINE_TOP = 48
TIMELINE_BOTTOM = 40


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    c = color.lstrip("#")
    return int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16)


def rgba(color: str, alpha: float) -> tuple[int, int, int, int]:
    r, g, b = hex_to_rgb(color)
    a = max(0, min(255, round(alpha * 255)))
    return r, g, b, a


def _to_px(p: Point, width: int, height: int) -> tuple[float, float]:
    return p.x / 100.0 * width, p.y / 100.0 * height


def _font(size: int):
    return ImageFont.load_default(size=size)


def layer_crop_box(
    width: int, height: int, t: LayerTransform
) -> tuple[float, float, float, float]:
    """Region of the source layer visible on screen under ``t``.

    A layer point p lands on screen at o + shift + (p - o) * scale, so the
    screen rectangle [0, W] x [0, H] maps back to
    p = o + (screen - o - shift) / scale.
    """
    ox = t.origin.x / 100.0 * width
    oy = t.origin.y / 100.0 * height
    sx = t.translate_x / 100.0 * width
    sy = t.translate_y / 100.0 * height
    s = t.scale
    return (
        ox + (0 - ox - sx) / s,
        oy + (0 - oy - sy) / s,
        ox + (width - ox - sx) / s,
        oy + (height - oy - sy) / s,
    )


def apply_transform(img: Image.Image, t: LayerTransform) -> Image.Image:
    """Zoom/shift ``img`` per ``t`` and fade it toward black."""
    w, h = img.size
    out = img.convert("RGB")
    if t.scale != 1.0 or t.translate_x or t.translate_y:
        box = tuple(round(v) for v in layer_crop_box(w, h, t))
        out = out.crop(box).resize((w, h), Image.Resampling.BILINEAR)
    if t.opacity < 1.0:
        black = Image.new("RGB", (w, h), CANVAS_BG)
        out = Image.blend(black, out, max(0.0, t.opacity))
    return out


def composite(
    background: Image.Image, foreground: Image.Image, opacity: float
) -> Image.Image:
    if opacity <= 0:
        return background
    if opacity >= 1:
        return foreground
    return Image.blend(background, foreground, opacity)


def marker_box(
    venue: Venue, width: int, height: int
) -> tuple[float, float, float, float]:
    """Pixel rectangle of a venue marker, centered on the venue."""
    cx, cy = _to_px(venue.position, width, height)
    return (
        cx - MARKER_W / 2,
        cy - MARKER_H / 2,
        cx + MARKER_W / 2,
        cy + MARKER_H / 2,
    )


def venue_at_pixel(
    view: MapView, x: float, y: float, width: int, height: int
) -> Venue | None:
    """Topmost visible venue marker under a pixel, if any."""
    for venue, _state in reversed(view.visible_venues()):
        x0, y0, x1, y1 = marker_box(venue, width, height)
        if x0 <= x <= x1 and y0 <= y <= y1:
            return venue
    return None


def year_span(mapper: TimelineMapper) -> str:
    return f"{mapper.min_year} — {mapper.max_year}"


def timeline_track(height: int) -> tuple[float, float]:
    """(top, extent) of the scrub track inside the timeline panel."""
    return TIMELINE_TOP, max(0, height - TIMELINE_TOP - TIMELINE_BOTTOM)


class SkylineRenderer:
    """Renders landing and map layers to Pillow images."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def _rect(self, p: Point, w_pct: float, h_pct: float, scale=1.0):
        x, y = _to_px(p, self.width, self.height)
        w = w_pct / 100.0 * self.width
        h = h_pct / 100.0 * self.height
        if scale != 1.0:
            cx, cy = x + w / 2, y + h / 2
            w, h = w * scale, h * scale
            x, y = cx - w / 2, cy - h / 2
        return [x, y, x + w, y + h]

    def render_landing(
        self,
        scene: LandingScene,
        t_seconds: float = 0.0,
        mapper: TimelineMapper | None = None,
    ) -> Image.Image:
        img = Image.new("RGB", (self.width, self.height), CANVAS_BG)
        draw = ImageDraw.Draw(img, "RGBA")

        # 1. Windows
        for cell, shade in zip(scene.windows, scene.shades()):
            scale = ZONE_WINDOW_SCALE if scene.in_hovered_zone(cell) else 1.0
            box = self._rect(cell.position, cell.width, cell.height, scale)
            if shade.lit:
                glow = [box[0] - 2, box[1] - 2, box[2] + 2, box[3] + 2]
                draw.rectangle(glow, fill=rgba(GLOW, 0.25))
            alpha = window_flicker(shade, cell.flicker_phase, t_seconds)
            draw.rectangle(box, fill=rgba(TIER_COLORS[shade.tier], alpha))

        # 2. Title and hint
        if scene.show_title:
            draw.text(
                (self.width / 2, 48),
                scene.config.title,
                fill=TEXT_BRIGHT,
                font=_font(36),
                anchor="mt",
            )
            draw.text(
                (self.width / 2, 96),
                year_span(mapper or TimelineMapper()),
                fill=TEXT_MUTED,
                font=_font(16),
                anchor="mt",
            )
            draw.text(
                (self.width / 2, self.height - 32),
                "CLICK A WINDOW TO ENTER",
                fill=TEXT_MUTED,
                font=_font(12),
                anchor="mb",
            )

        # 3. Hover caption
        label = scene.label()
        if label:
            if scene.hovered_zone is not None:
                anchor_pt = scene.hovered_zone.center
            else:
                anchor_pt = scene.cursor or Point(50.0, 50.0)
            x, y = _to_px(anchor_pt, self.width, self.height)
            self._caption(draw, x + 60, y, label)
        return img

    def _caption(self, draw, x, y, text):
        font = _font(18)
        l, t, r, b = draw.textbbox((x, y), text, font=font, anchor="lm")
        draw.rectangle(
            [l - 12, t - 8, r + 12, b + 8],
            fill=rgba(CANVAS_BG, 0.95),
            outline=rgba(GLOW, 0.6),
        )
        draw.text((x, y), text, fill=GLOW, font=font, anchor="lm")

    def render_map(
        self,
        view: MapView,
        backdrop: list[BackdropWindow],
        t_seconds: float,
        label: str = "",
    ) -> Image.Image:
        img = Image.new("RGB", (self.width, self.height), CANVAS_BG)
        draw = ImageDraw.Draw(img, "RGBA")

        # 1. Backdrop windows
        for win in backdrop:
            alpha = flicker_opacity(win.opacity, t_seconds, win.flicker_duration)
            color = BACKDROP_AMBIENT if win.ambient else BACKDROP_PLAIN
            draw.rectangle(
                self._rect(win.position, win.width, win.height),
                fill=rgba(color, min(1.0, alpha * 4)),
            )

        # 2. Venue markers
        for venue, state in view.visible_venues():
            box = marker_box(venue, self.width, self.height)
            if state is VenueState.GHOST:
                draw.rectangle(
                    box,
                    fill=rgba(GHOST_FILL, GHOST_OPACITY),
                    outline=rgba(GHOST_OUTLINE, GHOST_OPACITY),
                )
                continue
            color = GLOW_COLORS[glow_for(venue)]
            for grow, alpha in ((16, 0.12), (8, 0.25)):
                draw.rectangle(
                    [box[0] - grow, box[1] - grow, box[2] + grow, box[3] + grow],
                    fill=rgba(color, alpha),
                )
            draw.rectangle(box, fill=color, outline=rgba(CANVAS_BG, 0.6))
            draw.rectangle(
                [box[0] + 4, box[1] + 4, box[2] - 4, box[3] - 4],
                outline=rgba("#ffffff", 0.2),
            )

        # 3. Neighborhood label
        if label:
            draw.text(
                (self.width / 2, 16),
                label.upper(),
                fill=TEXT_DIM,
                font=_font(14),
                anchor="mt",
            )

        # 4. Legend
        self._legend(draw)
        return img

    def _legend(self, draw):
        entries = (
            (GLOW_COLORS["pink"], 1.0, "Bars & Clubs"),
            (GLOW_COLORS["gold"], 1.0, "Community Spaces"),
            (GHOST_FILL, GHOST_OPACITY, "Closed / Lost"),
        )
        font = _font(13)
        x = self.width - 200
        y = self.height - 32 - len(entries) * 40
        for color, alpha, text in entries:
            draw.rectangle([x, y, x + MARKER_W, y + MARKER_H], fill=rgba(color, alpha))
            draw.text(
                (x + MARKER_W + 12, y + MARKER_H / 2),
                text,
                fill=TEXT_MUTED,
                font=font,
                anchor="lm",
            )
            y += 40

    def draw_year_overlay(
        self, img: Image.Image, year: int, dragging: bool
    ) -> Image.Image:
        draw = ImageDraw.Draw(img, "RGBA")
        alpha = 0.2 if dragging else 0.1
        draw.text(
            (self.width / 2, self.height / 2),
            str(year),
            fill=rgba(GLOW, alpha),
            font=_font(max(48, self.height // 3)),
            anchor="mm",
        )
        return img


def render_timeline(slider: TimelineSlider, height: int) -> Image.Image:
    """Draw the vertical scrub control as a TIMELINE_WIDTH-wide strip."""
    w = TIMELINE_WIDTH
    img = Image.new("RGB", (w, height), PANEL_BG)
    draw = ImageDraw.Draw(img, "RGBA")
    draw.line([(w - 1, 0), (w - 1, height)], fill=PANEL_BORDER)
    top, extent = timeline_track(height)
    cx = w / 2
    small = _font(10)

    draw.text((cx, 24), "YEAR", fill=TEXT_DIM, font=small, anchor="mm")
    if extent <= 0:
        return img

    # Track, ticks and decade labels
    draw.line([(cx, top), (cx, top + extent)], fill="#3f3f46")
    line_count = max(2, int(extent // 10))
    for i in range(line_count):
        y = top + extent * i / (line_count - 1)
        half = 12 if i % 5 == 0 else 6
        color = "#52525b" if i % 5 == 0 else "#27272a"
        draw.line([(cx - half, y), (cx + half, y)], fill=color)
    mapper = slider.mapper
    for year, text in DECADES:
        y = top + extent * mapper.position_of(year)
        draw.text((cx + 12, y), text, fill=TEXT_MUTED, font=small, anchor="lm")

    # Handle
    hy = top + extent * slider.position
    if slider.dragging:
        draw.rectangle(
            [cx - 40, hy - 10, cx + 40, hy + 10], fill=rgba(GLOW_COLORS["gold"], 0.3)
        )
    draw.rectangle([cx - 32, hy - 4, cx + 32, hy + 4], fill=GLOW_COLORS["gold"])

    draw.text(
        (cx, height - 18),
        str(slider.current_year),
        fill="#a1a1aa",
        font=_font(12),
        anchor="mm",
    )
    return img
