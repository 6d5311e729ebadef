"""Geographic primitives shared across bounded contexts.

Coordinates follow GeoJSON order: longitude first, then latitude, both in
degrees. Distances are in meters on a spherical earth.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

EARTH_RADIUS_METERS = 6378137.0


@dataclass(frozen=True)
class Point:
    """A WGS84 position."""

    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")

    def to_coordinates(self) -> list[float]:
        """Return ``[longitude, latitude]``."""
        return [self.longitude, self.latitude]

    @classmethod
    def from_coordinates(cls, coordinates: Sequence[float]) -> Point:
        """Build a point from a ``[longitude, latitude]`` pair.

        Raises:
            ValueError: If the pair is malformed or out of range
        """
        if len(coordinates) != 2:
            raise ValueError(f"expected [longitude, latitude], got {coordinates!r}")
        return cls(longitude=float(coordinates[0]), latitude=float(coordinates[1]))


@dataclass(frozen=True)
class Circle:
    """A center point and a radius in meters."""

    center: Point
    radius: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.radius) and self.radius > 0):
            raise ValueError(
                f"circle radius must be positive and finite, got {self.radius}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"center": self.center.to_coordinates(), "radius": self.radius}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Circle:
        return cls(
            center=Point.from_coordinates(data["center"]),
            radius=float(data["radius"]),
        )


@dataclass(frozen=True)
class Polygon:
    """An ordered ring of points.

    The ring is kept open as supplied; ``to_geojson()`` closes it.
    """

    points: tuple[Point, ...]

    def __post_init__(self) -> None:
        if len(self.points) < 3:
            raise ValueError(
                f"polygon needs at least 3 points, got {len(self.points)}"
            )

    def to_coordinates(self) -> list[list[float]]:
        return [point.to_coordinates() for point in self.points]

    @classmethod
    def from_coordinates(cls, coordinates: Sequence[Sequence[float]]) -> Polygon:
        return cls(points=tuple(Point.from_coordinates(c) for c in coordinates))

    def ring(self) -> list[list[float]]:
        """Return the coordinates as a closed linear ring."""
        coordinates = self.to_coordinates()
        if coordinates[0] != coordinates[-1]:
            coordinates.append(list(coordinates[0]))
        return coordinates

    def to_geojson(self) -> dict[str, Any]:
        """Render as a GeoJSON Polygon geometry."""
        return {"type": "Polygon", "coordinates": [self.ring()]}


def destination(origin: Point, bearing: float, distance: float) -> Point:
    """Return the point ``distance`` meters from ``origin`` along ``bearing``.

    Args:
        origin: Starting point
        bearing: Initial bearing in radians, clockwise from north
        distance: Distance in meters
    """
    angular = distance / EARTH_RADIUS_METERS
    lat1 = math.radians(origin.latitude)
    lon1 = math.radians(origin.longitude)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )

    longitude = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    latitude = max(-90.0, min(90.0, math.degrees(lat2)))
    return Point(longitude=longitude, latitude=latitude)


def circle_to_polygon(circle: Circle, segments: int = 32) -> Polygon:
    """Approximate a circle by a regular polygon.

    Vertices are placed counterclockwise, as GeoJSON expects for an
    exterior ring.

    Args:
        circle: Circle to approximate
        segments: Number of vertices, at least 3

    Returns:
        Open polygon whose vertices lie on the circle
    """
    if segments < 3:
        raise ValueError(f"segments must be at least 3, got {segments}")

    step = 2 * math.pi / segments
    return Polygon(
        points=tuple(
            destination(circle.center, -step * i, circle.radius)
            for i in range(segments)
        )
    )
