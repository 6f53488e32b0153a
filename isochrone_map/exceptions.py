"""
Error types raised while turning isochrone wire data into map geometry.

All of them are scoped to a single geometry: the layer renderers catch them,
log them and carry on with the rest of the snapshot.
"""

from typing import Any


class IsochroneRenderError(ValueError):
    """Base class for per-geometry rendering failures."""


class MalformedCoordinate(IsochroneRenderError):
    """A coordinate token could not be parsed into a latitude/longitude pair."""

    def __init__(self, token: Any, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Malformed coordinate {token!r}: {reason}")


class DegenerateComponent(IsochroneRenderError):
    """An isochrone component has too few points to form a polygon."""

    def __init__(self, point_count: int, minimum: int = 3):
        self.point_count = point_count
        self.minimum = minimum
        super().__init__(
            f"Component has {point_count} point(s), at least {minimum} are required"
        )
