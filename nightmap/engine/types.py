"""Data types matching the night map JSON configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

CANVAS_MIN = 0.0
CANVAS_MAX = 100.0

VENUE_CATEGORIES = ("bar", "club", "bookstore", "community", "activism")


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0

    def clamped(self) -> Point:
        """Clamp into the [0,100] x [0,100] virtual canvas."""
        return Point(
            _clamp(self.x, CANVAS_MIN, CANVAS_MAX),
            _clamp(self.y, CANVAS_MIN, CANVAS_MAX),
        )

    @staticmethod
    def from_dict(d: dict | None) -> Point:
        if not d:
            return Point()
        return Point(x=float(d.get("x", 0.0)), y=float(d.get("y", 0.0)))

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Zone:
    name: str
    center: Point
    radius: float
    target_scale: float

    def contains(self, p: Point) -> bool:
        return (
            math.hypot(p.x - self.center.x, p.y - self.center.y)
            <= self.radius
        )

    @staticmethod
    def from_dict(d: dict) -> Zone:
        radius = float(d["radius"])
        scale = float(d["target_scale"])
        if radius <= 0:
            raise ValueError(f"Zone {d['name']!r} radius must be positive")
        if scale <= 0:
            raise ValueError(
                f"Zone {d['name']!r} target_scale must be positive"
            )
        return Zone(
            name=d["name"],
            center=Point.from_dict(d["center"]),
            radius=radius,
            target_scale=scale,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "center": self.center.to_dict(),
            "radius": self.radius,
            "target_scale": self.target_scale,
        }


@dataclass(frozen=True)
class Venue:
    id: str
    name: str
    start_year: int
    position: Point
    category: str
    end_year: int | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.end_year is not None and self.end_year < self.start_year:
            raise ValueError(
                f"Venue {self.id!r} ends ({self.end_year}) before it "
                f"starts ({self.start_year})"
            )
        if self.category not in VENUE_CATEGORIES:
            raise ValueError(
                f"Venue {self.id!r} has unknown category {self.category!r}"
            )

    @staticmethod
    def from_dict(d: dict) -> Venue:
        end = d.get("end_year")
        return Venue(
            id=d["id"],
            name=d["name"],
            description=d.get("description", ""),
            start_year=int(d["start_year"]),
            end_year=int(end) if end is not None else None,
            position=Point.from_dict(d["position"]),
            category=d["category"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "start_year": self.start_year,
            "end_year": self.end_year,
            "position": self.position.to_dict(),
            "category": self.category,
        }


@dataclass(frozen=True)
class Landmark:
    """A named place on the landing skyline. Windows near it carry its name."""

    id: str
    name: str
    position: Point

    @staticmethod
    def from_dict(d: dict) -> Landmark:
        return Landmark(
            id=d["id"],
            name=d["name"],
            position=Point.from_dict(d["position"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position.to_dict(),
        }


@dataclass(frozen=True)
class WindowCell:
    id: int
    position: Point
    width: float
    height: float
    base_opacity: float
    flicker_phase: float
    associated_venue_id: str | None = None


@dataclass(frozen=True)
class BackdropWindow:
    id: int
    position: Point
    width: float
    height: float
    opacity: float
    flicker_duration: float
    ambient: bool = False


@dataclass
class CityConfig:
    name: str
    boundary: list[Point]
    zones: list[Zone]
    venues: list[Venue] = field(default_factory=list)
    landmarks: list[Landmark] = field(default_factory=list)
    focus: Point = field(default_factory=lambda: Point(50.0, 50.0))
    focus_label: str = ""
    title: str = ""
    # Raw "field" block; engine.field.FieldParams.from_dict fills defaults.
    field_params: dict = field(default_factory=dict)

    @staticmethod
    def from_dict(d: dict) -> CityConfig:
        venues = [Venue.from_dict(v) for v in d.get("venues", [])]
        seen: set[str] = set()
        for v in venues:
            if v.id in seen:
                raise ValueError(f"Duplicate venue id {v.id!r}")
            seen.add(v.id)
        return CityConfig(
            name=d["name"],
            boundary=[Point.from_dict(p) for p in d["boundary"]],
            zones=[Zone.from_dict(z) for z in d["zones"]],
            venues=venues,
            landmarks=[Landmark.from_dict(lm) for lm in d.get("landmarks", [])],
            focus=Point.from_dict(d.get("focus", {"x": 50.0, "y": 50.0})),
            focus_label=d.get("focus_label", ""),
            title=d.get("title") or d["name"],
            field_params=dict(d.get("field", {})),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "boundary": [p.to_dict() for p in self.boundary],
            "zones": [z.to_dict() for z in self.zones],
            "venues": [v.to_dict() for v in self.venues],
            "landmarks": [lm.to_dict() for lm in self.landmarks],
            "focus": self.focus.to_dict(),
            "focus_label": self.focus_label,
            "field": dict(self.field_params),
        }
