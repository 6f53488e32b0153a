"""
Plain data structures read by the isochrone rendering pipeline.

The state store owns the data; these classes are immutable views built from
its snapshot so the renderers never touch the raw mapping directly.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 point."""

    lat: float
    lng: float

    def to_location(self) -> List[float]:
        """Return the ``[lat, lng]`` pair folium expects."""
        return [self.lat, self.lng]


@dataclass(frozen=True)
class BoundingBox:
    """Geographic box given by its south-west and north-east corners."""

    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_total_bounds(cls, total_bounds) -> "BoundingBox":
        """
        Build a box from geopandas ``total_bounds``.

        Args:
            total_bounds: Sequence ``(minx, miny, maxx, maxy)`` in lng/lat order

        Returns:
            BoundingBox
        """
        minx, miny, maxx, maxy = (float(v) for v in total_bounds)
        return cls(south=miny, west=minx, north=maxy, east=maxx)

    def to_leaflet(self) -> List[List[float]]:
        return [[self.south, self.west], [self.north, self.east]]


@dataclass(frozen=True)
class QueryCenter:
    """The point the isochrones were computed from, absent before any query."""

    lat: Optional[float] = None
    lng: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "QueryCenter":
        if not data:
            return cls()
        return cls(lat=_optional_float(data.get("lat")), lng=_optional_float(data.get("lng")))

    @property
    def is_present(self) -> bool:
        if self.lat is None or self.lng is None:
            return False
        return not (math.isnan(self.lat) or math.isnan(self.lng))

    def to_point(self) -> GeoPoint:
        if not self.is_present:
            raise ValueError("Query center is absent")
        return GeoPoint(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class IsochroneComponent:
    """One disjoint polygon piece, vertices still encoded as ``"lat,lng"`` tokens."""

    shape: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IsochroneComponent":
        shape = data.get("shape") or ()
        if isinstance(shape, str):
            raise TypeError(f"shape must be a list of tokens, got {shape!r}")
        return cls(shape=tuple(shape))


@dataclass(frozen=True)
class IsochroneGroup:
    """One travel-time band made of any number of components."""

    components: Tuple[IsochroneComponent, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IsochroneGroup":
        # wire format uses the singular key
        raw_components = data.get("component") or ()
        if isinstance(raw_components, (str, Mapping)):
            raise TypeError(f"component must be a list, got {type(raw_components).__name__}")

        components = []
        for index, raw in enumerate(raw_components):
            try:
                components.append(IsochroneComponent.from_dict(raw))
            except (AttributeError, TypeError) as e:
                logger.warning(f"Unreadable isochrone component {index}, drawing nothing for it: {e}")
                components.append(IsochroneComponent())
        return cls(components=tuple(components))


IsochroneResult = Tuple[IsochroneGroup, ...]


def parse_isochrone_results(results: Optional[List[Mapping[str, Any]]]) -> IsochroneResult:
    """
    Convert the store's ``isochrones.results`` list into groups, keeping order.

    An unreadable group entry becomes an empty group so that the groups after
    it keep their position and colour.
    """
    if not results:
        return ()
    if not isinstance(results, (list, tuple)):
        logger.warning(f"Isochrone results must be a list, got {type(results).__name__}")
        return ()

    groups = []
    for index, raw in enumerate(results):
        try:
            groups.append(IsochroneGroup.from_dict(raw))
        except (AttributeError, TypeError) as e:
            logger.warning(f"Unreadable isochrone group {index}, drawing nothing for it: {e}")
            groups.append(IsochroneGroup())
    return tuple(groups)


def _read_center(data: Any) -> QueryCenter:
    try:
        return QueryCenter.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Unreadable isochrone center {data!r}, treating it as absent: {e}")
        return QueryCenter()


def _section(state: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = state.get(key) or {}
    if not isinstance(value, Mapping):
        logger.warning(f"State section '{key}' is not a mapping, reading it as empty")
        return {}
    return value


@dataclass(frozen=True)
class StateSnapshot:
    """Everything the rendering core reads from the store for one rebuild."""

    center: QueryCenter = field(default_factory=QueryCenter)
    isochrones: IsochroneResult = ()

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> "StateSnapshot":
        """
        Build a snapshot from the store shape.

        The center and each isochrone group are read independently: an
        unreadable center is treated as absent and an unreadable group as
        empty, each with a warning, while the rest of the state is kept.

        Args:
            state: ``{"settings": {"isochronesCenter": {...}},
                    "isochrones": {"results": [...]}}``; missing keys are read
                   as an absent center and an empty result set

        Returns:
            StateSnapshot

        Raises:
            AttributeError: If ``state`` itself is not a mapping
        """
        settings = _section(state, "settings")
        isochrones = _section(state, "isochrones")
        return cls(
            center=_read_center(settings.get("isochronesCenter")),
            isochrones=parse_isochrone_results(isochrones.get("results")),
        )
