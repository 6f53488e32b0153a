"""
Isochrone Map - keeps a folium map in sync with isochrone query results.

The package renders the query center and the isochrone polygons of a state
snapshot onto long-lived overlay layers, colouring each isochrone band along
a red/amber/green gradient and fitting the viewport to the result.
"""

from .coordinates import parse_coordinate, parse_ring
from .exceptions import DegenerateComponent, IsochroneRenderError, MalformedCoordinate
from .gradient import ColorGradientGenerator
from .layers import CenterMarkerRenderer, IsochroneLayerRenderer, OverlayLayer, RenderedIsochrones
from .map_config import IsochroneMapConfig
from .map_surface import MapSurface
from .models import (
    BoundingBox,
    GeoPoint,
    IsochroneComponent,
    IsochroneGroup,
    QueryCenter,
    StateSnapshot,
)
from .sync import MapSyncOrchestrator, SyncReport
from .viewport import ViewportController, ViewportState

__all__ = [
    'BoundingBox',
    'CenterMarkerRenderer',
    'ColorGradientGenerator',
    'DegenerateComponent',
    'GeoPoint',
    'IsochroneComponent',
    'IsochroneGroup',
    'IsochroneLayerRenderer',
    'IsochroneMapConfig',
    'IsochroneRenderError',
    'MalformedCoordinate',
    'MapSurface',
    'MapSyncOrchestrator',
    'OverlayLayer',
    'QueryCenter',
    'RenderedIsochrones',
    'StateSnapshot',
    'SyncReport',
    'ViewportController',
    'ViewportState',
    'parse_coordinate',
    'parse_ring',
]
