"""
One-time construction of the folium map the isochrone layers live on.

The surface is built once per map instance: tiles, world bounds, zoom
control, branding, the isochrone pane and the two overlay layers. Rebuild
cycles only touch the layer contents and the viewport.
"""

from typing import Optional

from branca.element import Figure
import folium
from folium.map import CustomPane
from jinja2 import Template
import logging

from .layers import OverlayLayer
from .map_config import IsochroneMapConfig
from .viewport import ViewportController

logger = logging.getLogger(__name__)


class IsochronePane(CustomPane):
    """Custom pane with a fixed opacity applied to everything drawn in it."""

    _template = Template(
        """
        {% macro script(this, kwargs) %}
            var {{ this.get_name() }} = {{ this._parent.get_name() }}.createPane(
                {{ this.name|tojson }});
            {{ this.get_name() }}.style.zIndex = {{ this.z_index|tojson }};
            {{ this.get_name() }}.style.opacity = {{ this.opacity|tojson }};
            {% if not this.pointer_events %}
                {{ this.get_name() }}.style.pointerEvents = 'none';
            {% endif %}
        {% endmacro %}
        """
    )

    def __init__(self, name: str, z_index: int = 450, opacity: float = 0.9,
                 pointer_events: bool = True):
        super().__init__(name, z_index=z_index, pointer_events=pointer_events)
        self.opacity = opacity


class BrandControl(folium.MacroElement):
    """Static text control pinned to a map corner."""

    _template = Template(
        """
        {% macro script(this, kwargs) %}
            var {{ this.get_name() }} = L.control({position: {{ this.position|tojson }}});
            {{ this.get_name() }}.onAdd = function (map) {
                var div = L.DomUtil.create('div', 'brand');
                div.innerHTML = {{ this.text|tojson }};
                return div;
            };
            {{ this._parent.get_name() }}.addControl({{ this.get_name() }});
        {% endmacro %}
        """
    )

    def __init__(self, text: str, position: str = "bottomright"):
        super().__init__()
        self._name = "BrandControl"
        self.text = text
        self.position = position


class MapSurface:
    """Folium map plus the long-lived overlay layers and viewport controller."""

    def __init__(self, config: Optional[IsochroneMapConfig] = None):
        self.config = config or IsochroneMapConfig()

        map_settings = self.config.get_map_settings()
        style = self.config.get_isochrone_style()
        branding = self.config.get_branding()
        (min_lat, min_lon), (max_lat, max_lon) = map_settings["world_bounds"]

        self.map = folium.Map(
            location=map_settings["initial_center"],
            zoom_start=map_settings["initial_zoom"],
            tiles=map_settings["tiles"],
            attr=map_settings["attribution"],
            min_lat=min_lat,
            max_lat=max_lat,
            min_lon=min_lon,
            max_lon=max_lon,
            max_bounds=True,
            zoom_control=map_settings["zoom_control_position"]
        )

        self.isochrone_pane = IsochronePane(
            style["pane"],
            z_index=style["pane_z_index"],
            opacity=style["pane_opacity"]
        ).add_to(self.map)

        if branding.get("text"):
            BrandControl(branding["text"], branding.get("position", "bottomright")).add_to(self.map)

        self.marker_layer = OverlayLayer("Isochrone center").add_to(self.map)
        self.isochrone_layer = OverlayLayer("Isochrones").add_to(self.map)

        self.viewport = ViewportController(
            self.map, fit_padding=self.config.get_viewport_settings().get("fit_padding")
        )

        logger.debug(f"Created map surface centered at {map_settings['initial_center']}")

    def to_html(self) -> str:
        """
        Render the complete standalone HTML document for the map.

        Renders into a new Figure on every call: a Figure retains the scripts
        of elements removed from the map since it was last rendered.
        """
        figure = Figure()
        figure.add_child(self.map)
        return figure.render()

    def render_to_streamlit(self, height: Optional[int] = None) -> None:
        """
        Embed the map in the running Streamlit page.

        Args:
            height: Map height in pixels, defaults to the configured height
        """
        import streamlit.components.v1 as components

        height = height or self.config.get_map_settings()["height"]
        components.html(self.to_html(), height=height)
