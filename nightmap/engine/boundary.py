"""City silhouette containment.

The landing skyline is a grid of windows cut to the outline of the city.
``BoundaryMask`` answers "is this sample inside the outline?" with the
even-odd rule: cast a ray in the +x direction and count the edges it
crosses. An odd count means inside.

Points lying exactly on an edge can land on either side depending on the
floating-point intercept. That is accepted: the answer is still a pure
function of the input, so repeated calls agree.

The outline is checked once at construction with shapely. A
self-intersecting or zero-area ring is a configuration error and raises
``ValueError`` before any interaction happens.
"""

from __future__ import annotations

from shapely.geometry import Polygon as ShapelyPolygon

from .types import Point

Vertices = list[tuple[float, float]]


def point_in_polygon(px: float, py: float, vertices: Vertices) -> bool:
    """Ray-casting point-in-polygon test."""
    n = len(vertices)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > py) != (yj > py):
            intersect_x = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < intersect_x:
                inside = not inside
        j = i
    return inside


def validate_polygon(vertices: Vertices) -> None:
    """Raise ValueError unless ``vertices`` form a simple ring with area."""
    if len(vertices) < 3:
        raise ValueError(
            f"Boundary needs at least 3 vertices, got {len(vertices)}"
        )
    poly = ShapelyPolygon(vertices)
    if not poly.is_valid:
        raise ValueError("Boundary polygon is self-intersecting or malformed")
    if poly.area <= 0:
        raise ValueError("Boundary polygon has zero area")


class BoundaryMask:
    """Immutable even-odd containment test over a fixed outline."""

    def __init__(self, vertices: list[Point] | Vertices) -> None:
        verts = [
            (v.x, v.y) if isinstance(v, Point) else (float(v[0]), float(v[1]))
            for v in vertices
        ]
        validate_polygon(verts)
        self._vertices: tuple[tuple[float, float], ...] = tuple(verts)

    @property
    def vertices(self) -> Vertices:
        return list(self._vertices)

    def contains(self, p: Point) -> bool:
        return point_in_polygon(p.x, p.y, self.vertices)
