"""Place geometry normalization.

The store's spatial index only understands polygons, while callers may
describe a place as a circle for convenience. Before a place is written its
geometry is reduced to one authoritative shape plus a polygon used purely for
indexing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from shared_kernel.geo import circle_to_polygon
from tracking.domain.aggregates import Place
from tracking.domain.exceptions import MissingGeometryError, ValidationError
from tracking.domain.value_objects import Polygon


@dataclass(frozen=True)
class NormalizedPlace:
    """A place ready to be written, and the polygon to index it by."""

    place: Place
    index_geometry: Polygon


def normalize_place_geometry(place: Place, segments: int = 32) -> NormalizedPlace:
    """Pick the authoritative shape of a place and derive its index polygon.

    1. A circle wins: the polygon is dropped and the index is the circle's
       polygon approximation.
    2. Otherwise a polygon is kept as is and indexed unchanged.
    3. Otherwise the place cannot be written.

    Args:
        place: Place as supplied by the caller
        segments: Vertices used to approximate a circle

    Returns:
        The cleaned place and its index geometry

    Raises:
        MissingGeometryError: If the place has neither a circle nor a polygon
        ValidationError: If the circle cannot be turned into a polygon
    """
    if place.circle is not None:
        try:
            index_geometry = circle_to_polygon(place.circle, segments)
        except ValueError as e:
            raise ValidationError(
                f"place {place.id or '<new>'} has an unusable circle: {e}"
            ) from e
        return NormalizedPlace(
            place=replace(place, polygon=None),
            index_geometry=index_geometry,
        )
    if place.polygon is not None:
        return NormalizedPlace(
            place=replace(place, circle=None),
            index_geometry=place.polygon,
        )
    raise MissingGeometryError(
        f"place {place.id or '<new>'} needs a circle or a polygon"
    )
