"""
Parsing of the string-encoded vertices used in isochrone results.

This is the only place the ``"lat,lng"`` wire encoding is understood; every
other module works on GeoPoint instances.
"""

from typing import Iterable, List

from .exceptions import DegenerateComponent, MalformedCoordinate
from .models import GeoPoint

COORDINATE_SEPARATOR = ","
MIN_RING_POINTS = 3


def parse_coordinate(token: str) -> GeoPoint:
    """
    Parse one ``"lat,lng"`` token.

    Args:
        token: Serialized vertex, e.g. ``"48.1,11.6"``

    Returns:
        GeoPoint with the two halves converted to float

    Raises:
        MalformedCoordinate: wrong field count, non-numeric field or non-string token
    """
    if not isinstance(token, str):
        raise MalformedCoordinate(token, f"expected a string, got {type(token).__name__}")

    fields = token.split(COORDINATE_SEPARATOR)
    if len(fields) != 2:
        raise MalformedCoordinate(token, f"expected 2 fields, got {len(fields)}")

    try:
        lat, lng = (float(value) for value in fields)
    except ValueError as e:
        raise MalformedCoordinate(token, "non-numeric field") from e

    return GeoPoint(lat=lat, lng=lng)


def parse_ring(shape: Iterable[str]) -> List[GeoPoint]:
    """
    Parse every token of one isochrone component into an ordered polygon ring.

    Raises:
        MalformedCoordinate: if any token fails to parse
        DegenerateComponent: if fewer than three points remain
    """
    ring = [parse_coordinate(token) for token in shape]
    if len(ring) < MIN_RING_POINTS:
        raise DegenerateComponent(len(ring), MIN_RING_POINTS)
    return ring
