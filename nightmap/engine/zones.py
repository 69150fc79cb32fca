"""Named neighborhood circles: hover hit-testing and click resolution."""

from __future__ import annotations

import math

from .types import Point, Zone


def distance(a: Point, b: Point) -> float:
    """Euclidean distance in percentage space (no aspect correction)."""
    return math.hypot(a.x - b.x, a.y - b.y)


class ZoneIndex:
    """Ordered, read-only zone list.

    Zones may overlap. ``zone_at`` resolves overlaps by declaration order,
    not by distance, so the first zone listed wins.
    """

    def __init__(self, zones: list[Zone]) -> None:
        if not zones:
            raise ValueError("ZoneIndex needs at least one zone")
        names: set[str] = set()
        for z in zones:
            if z.name in names:
                raise ValueError(f"Duplicate zone name {z.name!r}")
            names.add(z.name)
        self._zones: tuple[Zone, ...] = tuple(zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self):
        return iter(self._zones)

    def zone_at(self, p: Point) -> Zone | None:
        for zone in self._zones:
            if distance(p, zone.center) <= zone.radius:
                return zone
        return None

    def nearest_zone(self, p: Point) -> Zone:
        nearest = self._zones[0]
        best = math.inf
        for zone in self._zones:
            d = distance(p, zone.center)
            if d < best:
                best = d
                nearest = zone
        return nearest

    def resolve(self, p: Point) -> Zone:
        """Zone containing ``p``, falling back to the nearest one."""
        zone = self.zone_at(p)
        if zone is None:
            zone = self.nearest_zone(p)
        return zone

    def by_name(self, name: str) -> Zone:
        for zone in self._zones:
            if zone.name == name:
                return zone
        raise KeyError(f"No zone named {name!r}")
