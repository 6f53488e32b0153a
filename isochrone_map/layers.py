"""
Overlay layers and the renderers that rebuild them from a state snapshot.

Both renderers follow the same cycle: build the new geometry, replace the
layer contents in one call, then hand the viewport request to the
ViewportController.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import folium
import geopandas as gpd
from shapely.geometry import Polygon as ShapelyPolygon
from jinja2 import Template
import logging

from .coordinates import parse_ring
from .exceptions import DegenerateComponent, MalformedCoordinate
from .gradient import ColorGradientGenerator
from .models import BoundingBox, IsochroneResult, QueryCenter
from .viewport import ViewportController

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"
DEFAULT_NEIGHBORHOOD_ZOOM = 7


class CenterTooltip(folium.Tooltip):
    """Tooltip that can be opened as soon as its marker is on the map."""

    _template = Template(
        """
        {% macro script(this, kwargs) %}
            {{ this._parent.get_name() }}.bindTooltip(
                `<div>
                     {{ this.text }}
                 </div>`,
                {{ this.options|tojson }}
            );
            {% if this.show %}
                {{ this._parent.get_name() }}.openTooltip();
            {% endif %}
        {% endmacro %}
        """
    )

    def __init__(self, text: str, show: bool = True, **kwargs):
        super().__init__(text, **kwargs)
        self._name = "CenterTooltip"
        self.show = show


class OverlayLayer:
    """
    Long-lived container for one set of map overlays.

    Wraps a ``folium.FeatureGroup`` whose identity never changes; only its
    contents are replaced on each rebuild.
    """

    def __init__(self, name: str):
        self.name = name
        self.feature_group = folium.FeatureGroup(name=name)
        self._elements: List[folium.MacroElement] = []

    def add_to(self, map_obj: folium.Map) -> "OverlayLayer":
        self.feature_group.add_to(map_obj)
        return self

    @property
    def elements(self) -> Tuple[folium.MacroElement, ...]:
        return tuple(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def clear(self) -> None:
        for element in self._elements:
            self.feature_group._children.pop(element.get_name(), None)
        self._elements = []

    def replace(self, elements: Iterable[folium.MacroElement]) -> None:
        """Clear the layer and populate it with ``elements``."""
        self.clear()
        for element in elements:
            self.feature_group.add_child(element)
            self._elements.append(element)


class CenterMarkerRenderer:
    """Rebuilds the single-point layer showing the query center."""

    def __init__(self, viewport: ViewportController,
                 neighborhood_zoom: int = DEFAULT_NEIGHBORHOOD_ZOOM,
                 marker_radius: float = 10):
        self.viewport = viewport
        self.neighborhood_zoom = neighborhood_zoom
        self.marker_radius = marker_radius

    def render(self, center: QueryCenter, target_layer: OverlayLayer) -> Optional[folium.CircleMarker]:
        """
        Show ``center`` on ``target_layer`` and recenter the map on it.

        Args:
            center: Query center from the snapshot
            target_layer: Marker layer to rebuild

        Returns:
            The marker added, or None when the center is absent
        """
        if not center.is_present:
            target_layer.clear()
            logger.debug("No query center, marker layer cleared")
            return None

        point = center.to_point()
        marker = folium.CircleMarker(
            location=point.to_location(),
            radius=self.marker_radius,
            tooltip=CenterTooltip(
                f"latitude: {point.lat}, longitude: {point.lng}",
                permanent=False
            )
        )
        target_layer.replace([marker])

        self.viewport.center(point, self.neighborhood_zoom)
        return marker


@dataclass
class RenderedIsochrones:
    """Outcome of one isochrone layer rebuild."""

    palette: List[str] = field(default_factory=list)
    features: Optional[gpd.GeoDataFrame] = None
    skipped_components: int = 0
    bounds: Optional[BoundingBox] = None

    @property
    def polygon_count(self) -> int:
        return 0 if self.features is None else len(self.features)


class IsochroneLayerRenderer:
    """Rebuilds the polygon layer, one gradient colour per isochrone group."""

    def __init__(self, viewport: ViewportController,
                 gradient: Optional[ColorGradientGenerator] = None,
                 style: Optional[Dict] = None):
        self.viewport = viewport
        self.gradient = gradient or ColorGradientGenerator()

        style = style or {}
        self.weight = style.get('weight', 2)
        self.opacity = style.get('opacity', 1.0)
        self.border_color = style.get('color', 'white')
        self.pane = style.get('pane', 'isochronesPane')

    def render(self, result: IsochroneResult, target_layer: OverlayLayer) -> RenderedIsochrones:
        """
        Draw every component of every group in ``result`` onto ``target_layer``.

        Components that fail to parse or have fewer than three points are
        skipped and logged; they never abort the rest of the render.

        Args:
            result: Ordered isochrone groups from the snapshot
            target_layer: Polygon layer to rebuild

        Returns:
            RenderedIsochrones describing what was drawn
        """
        if not result:
            target_layer.clear()
            logger.debug("Empty isochrone result, polygon layer cleared")
            return RenderedIsochrones()

        palette = self.gradient.generate(len(result))

        polygons = []
        records = {'group': [], 'component': [], 'fill_color': []}
        geometries = []
        skipped = 0

        for group_index, group in enumerate(result):
            fill_color = palette[group_index]

            for component_index, component in enumerate(group.components):
                try:
                    ring = parse_ring(component.shape)
                except (MalformedCoordinate, DegenerateComponent) as e:
                    skipped += 1
                    logger.warning(
                        f"Skipping component {component_index} of isochrone group {group_index}: {e}"
                    )
                    continue

                polygon = folium.Polygon(
                    locations=[point.to_location() for point in ring],
                    fill_color=fill_color,
                    weight=self.weight,
                    opacity=self.opacity,
                    color=self.border_color
                )
                # path_options drops unknown keys such as pane
                polygon.options["pane"] = self.pane
                polygons.append(polygon)
                records['group'].append(group_index)
                records['component'].append(component_index)
                records['fill_color'].append(fill_color)
                geometries.append(ShapelyPolygon([(point.lng, point.lat) for point in ring]))

        target_layer.replace(polygons)

        features = gpd.GeoDataFrame(records, geometry=gpd.GeoSeries(geometries, crs=WGS84))
        rendered = RenderedIsochrones(palette=palette, features=features, skipped_components=skipped)

        if not features.empty:
            rendered.bounds = BoundingBox.from_total_bounds(features.total_bounds)
            self.viewport.fit(rendered.bounds)

        logger.info(
            f"Rendered {len(polygons)} isochrone polygons from {len(result)} groups "
            f"({skipped} components skipped)"
        )
        return rendered
