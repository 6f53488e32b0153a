"""
Viewport control for the folium map surface.

Each call fully replaces the viewport left by the previous one, so within a
rebuild cycle only the most recent call decides what the user sees.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import folium
import logging

from .models import BoundingBox, GeoPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewportState:
    """Last viewport request applied to the map."""

    mode: str
    center: Optional[GeoPoint] = None
    zoom: Optional[int] = None
    bounds: Optional[BoundingBox] = None


class ViewportController:
    """Moves or fits the visible region of one folium map."""

    def __init__(self, map_obj: folium.Map, fit_padding: Optional[Sequence[int]] = None):
        self.map = map_obj
        self.fit_padding = tuple(fit_padding) if fit_padding else None
        self.state: Optional[ViewportState] = None
        self._fit_element: Optional[folium.FitBounds] = None

    def center(self, point: GeoPoint, zoom_level: int) -> None:
        """Move the viewport to ``point`` at ``zoom_level``."""
        self._drop_fit()
        self.map.location = point.to_location()
        self.map.options["zoom"] = zoom_level
        self.state = ViewportState(mode="center", center=point, zoom=zoom_level)
        logger.debug(f"Viewport centered on {point} at zoom {zoom_level}")

    def fit(self, bounds: BoundingBox) -> None:
        """Pan and zoom so that ``bounds`` is fully visible."""
        self._drop_fit()
        self._fit_element = folium.FitBounds(bounds.to_leaflet(), padding=self.fit_padding)
        self.map.add_child(self._fit_element)
        self.state = ViewportState(mode="fit", bounds=bounds)
        logger.debug(f"Viewport fitted to {bounds}")

    def _drop_fit(self) -> None:
        if self._fit_element is not None:
            self.map._children.pop(self._fit_element.get_name(), None)
            self._fit_element = None
