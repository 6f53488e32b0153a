"""
Isochrone Map Viewer - Streamlit host application

This module hosts the isochrone map: it keeps the query state in the
Streamlit session, replaces it whenever the user sets a new center or loads
new isochrone results, and lets the map synchronizer rebuild the layers.
"""

import copy
import json
import logging
from typing import Any, Dict, List

import streamlit as st

from isochrone_map import IsochroneMapConfig, MapSurface, MapSyncOrchestrator, SyncReport

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

EMPTY_STATE: Dict[str, Any] = {
    "settings": {"isochronesCenter": {}},
    "isochrones": {"results": []}
}


def initialize_session_state() -> None:
    """Create the state snapshot, the map surface and its synchronizer once per session."""
    if 'isochrone_state' not in st.session_state:
        st.session_state.isochrone_state = copy.deepcopy(EMPTY_STATE)

    if 'map_surface' not in st.session_state:
        config = IsochroneMapConfig()
        surface = MapSurface(config)
        st.session_state.map_surface = surface
        st.session_state.map_sync = MapSyncOrchestrator.for_surface(surface, config)


def replace_state(center: Dict[str, Any] = None, results: List[Dict[str, Any]] = None) -> None:
    """Publish a new snapshot object; untouched parts are carried over."""
    current = st.session_state.isochrone_state
    st.session_state.isochrone_state = {
        "settings": {
            "isochronesCenter": center if center is not None else current["settings"]["isochronesCenter"]
        },
        "isochrones": {
            "results": results if results is not None else current["isochrones"]["results"]
        }
    }


def extract_results(document: Any) -> List[Dict[str, Any]]:
    """
    Pull the isochrone result list out of an uploaded JSON document.

    Args:
        document: Either the results list itself or the full store shape

    Returns:
        List of isochrone groups
    """
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        isochrones = document.get("isochrones")
        if isinstance(isochrones, dict) and isinstance(isochrones.get("results"), list):
            return isochrones["results"]
    raise ValueError("Expected a list of isochrones or an object with isochrones.results")


def render_sidebar() -> None:
    """Query center and isochrone inputs."""
    with st.sidebar:
        st.markdown("### Query center")
        center = st.session_state.isochrone_state["settings"]["isochronesCenter"]

        lat = st.number_input("Latitude", min_value=-90.0, max_value=90.0,
                              value=float(center.get("lat") or 0.0), format="%.6f")
        lng = st.number_input("Longitude", min_value=-180.0, max_value=180.0,
                              value=float(center.get("lng") or 0.0), format="%.6f")

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Set center", use_container_width=True):
                replace_state(center={"lat": lat, "lng": lng})
        with col2:
            if st.button("Clear center", use_container_width=True):
                replace_state(center={})

        st.markdown("---")
        st.markdown("### Isochrones")
        uploaded_file = st.file_uploader("Isochrone results (JSON)", type=["json"])

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Load", use_container_width=True, disabled=uploaded_file is None):
                try:
                    results = extract_results(json.load(uploaded_file))
                    replace_state(results=results)
                    logger.info(f"Loaded {len(results)} isochrone groups from {uploaded_file.name}")
                except ValueError as e:
                    st.error(f"❌ Could not read isochrones: {e}")
        with col2:
            if st.button("Clear", use_container_width=True):
                replace_state(results=[])


def render_summary(report: SyncReport) -> None:
    """Colour key and rebuild diagnostics for the last sync."""
    rendered = report.isochrones
    with st.sidebar:
        if rendered.palette:
            st.markdown("---")
            st.markdown("### Bands")
            for index, color in enumerate(rendered.palette):
                st.markdown(
                    f'<span style="background-color: {color}; width: 20px; height: 12px; '
                    f'display: inline-block; margin-right: 8px; border: 1px solid #ccc;"></span>'
                    f'Isochrone {index + 1}',
                    unsafe_allow_html=True
                )

        if rendered.skipped_components:
            st.warning(f"⚠️ {rendered.skipped_components} isochrone component(s) could not be drawn")

        for error in report.errors:
            st.error(f"❌ {error}")


def main():
    """Main Streamlit application entry point"""
    st.set_page_config(
        page_title="Isochrone Map Viewer",
        page_icon="🗺️",
        layout="wide",
        initial_sidebar_state="expanded"
    )
    st.title("🗺️ Isochrone Map")

    initialize_session_state()
    render_sidebar()

    map_sync: MapSyncOrchestrator = st.session_state.map_sync
    map_sync.on_snapshot_changed(st.session_state.isochrone_state)

    if map_sync.last_report is not None:
        render_summary(map_sync.last_report)

    st.session_state.map_surface.render_to_streamlit()


if __name__ == "__main__":
    main()
