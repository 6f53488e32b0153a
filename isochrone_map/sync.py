"""
Keeps the map layers in step with the application state.

The host calls ``MapSyncOrchestrator.on_snapshot_changed`` whenever the store
publishes a new snapshot; each call runs one complete rebuild cycle: center
marker first, isochrone polygons second, so the polygon fit wins over the
center recenter whenever both apply.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

import logging

from .gradient import ColorGradientGenerator
from .layers import (
    CenterMarkerRenderer,
    IsochroneLayerRenderer,
    OverlayLayer,
    RenderedIsochrones,
)
from .map_config import IsochroneMapConfig
from .models import StateSnapshot

logger = logging.getLogger(__name__)

SnapshotLike = Union[StateSnapshot, Mapping[str, Any]]


@dataclass
class SyncReport:
    """Summary of one rebuild cycle."""

    snapshot: StateSnapshot
    marker_rendered: bool = False
    isochrones: RenderedIsochrones = field(default_factory=RenderedIsochrones)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class MapSyncOrchestrator:
    """Runs the center and isochrone renderers against injected layers."""

    def __init__(self, marker_layer: OverlayLayer, isochrone_layer: OverlayLayer,
                 center_renderer: CenterMarkerRenderer,
                 isochrone_renderer: IsochroneLayerRenderer):
        self.marker_layer = marker_layer
        self.isochrone_layer = isochrone_layer
        self.center_renderer = center_renderer
        self.isochrone_renderer = isochrone_renderer

        self._lock = threading.Lock()
        self._last_seen: Optional[SnapshotLike] = None
        self.last_report: Optional[SyncReport] = None

    @classmethod
    def for_surface(cls, surface, config: Optional[IsochroneMapConfig] = None) -> "MapSyncOrchestrator":
        """
        Wire the default renderers to a MapSurface.

        Args:
            surface: MapSurface providing the layers and viewport
            config: Configuration, defaults to the surface's own

        Returns:
            MapSyncOrchestrator bound to ``surface``
        """
        config = config or surface.config
        marker_settings = config.get_center_marker_settings()

        center_renderer = CenterMarkerRenderer(
            surface.viewport,
            neighborhood_zoom=marker_settings["neighborhood_zoom"],
            marker_radius=marker_settings["radius"]
        )
        isochrone_renderer = IsochroneLayerRenderer(
            surface.viewport,
            gradient=ColorGradientGenerator(config.get_gradient_settings()["stops"]),
            style=config.get_isochrone_style()
        )
        return cls(surface.marker_layer, surface.isochrone_layer,
                   center_renderer, isochrone_renderer)

    def on_snapshot_changed(self, snapshot: SnapshotLike) -> Optional[SyncReport]:
        """
        Host callback for store updates.

        Rebuilds only when ``snapshot`` is a different object from the last one
        seen; returns None when nothing changed.
        """
        if snapshot is self._last_seen:
            logger.debug("Snapshot unchanged, skipping rebuild")
            return None

        self._last_seen = snapshot
        return self.sync(snapshot)

    def sync(self, snapshot: SnapshotLike) -> SyncReport:
        """Run one full rebuild cycle. Never raises."""
        if not isinstance(snapshot, StateSnapshot):
            try:
                snapshot = StateSnapshot.from_state(snapshot)
            except (AttributeError, TypeError, ValueError) as e:
                logger.error(f"Unreadable state snapshot, rendering empty map: {e}")
                report = self._run(StateSnapshot())
                report.errors.insert(0, f"snapshot: {e}")
                return report

        return self._run(snapshot)

    def _run(self, snapshot: StateSnapshot) -> SyncReport:
        with self._lock:
            report = SyncReport(snapshot=snapshot)

            try:
                marker = self.center_renderer.render(snapshot.center, self.marker_layer)
                report.marker_rendered = marker is not None
            except Exception as e:
                logger.exception("Center marker rebuild failed")
                report.errors.append(f"center: {e}")

            try:
                report.isochrones = self.isochrone_renderer.render(
                    snapshot.isochrones, self.isochrone_layer
                )
            except Exception as e:
                logger.exception("Isochrone layer rebuild failed")
                report.errors.append(f"isochrones: {e}")

            self.last_report = report
            logger.info(
                f"Map synced: marker={'yes' if report.marker_rendered else 'no'}, "
                f"polygons={report.isochrones.polygon_count}, groups={len(snapshot.isochrones)}"
            )
            return report
