"""
Pytest configuration and fixtures for isochrone map tests.
"""

import os
import sys
from unittest.mock import Mock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from isochrone_map.map_config import IsochroneMapConfig
from isochrone_map.map_surface import MapSurface
from isochrone_map.sync import MapSyncOrchestrator
from isochrone_map.viewport import ViewportController


def make_state(center=None, results=None):
    """Build a store-shaped snapshot dict."""
    return {
        "settings": {"isochronesCenter": center if center is not None else {}},
        "isochrones": {"results": results if results is not None else []}
    }


@pytest.fixture
def state_factory():
    """Factory producing a new snapshot dict on every call."""
    return make_state


@pytest.fixture
def munich_center():
    """Query center used in the single-marker scenario."""
    return {"lat": 48.1, "lng": 11.6}


@pytest.fixture
def two_band_results():
    """Two isochrone groups with one triangle each."""
    return [
        {"component": [{"shape": ["0,0", "0,1", "1,1"]}]},
        {"component": [{"shape": ["2,2", "2,3", "3,3"]}]}
    ]


@pytest.fixture
def results_with_degenerate_component():
    """One group holding a two-point component next to a valid triangle."""
    return [
        {"component": [
            {"shape": ["1,1", "2,2"]},
            {"shape": ["10,10", "10,11", "11,11"]}
        ]}
    ]


@pytest.fixture
def map_config(tmp_path):
    """Default configuration that never reads a file from the working directory."""
    return IsochroneMapConfig(config_path=str(tmp_path / "isochrone_map_config.json"))


@pytest.fixture
def map_surface(map_config):
    """Fresh map surface per test."""
    return MapSurface(map_config)


@pytest.fixture
def map_sync(map_surface, map_config):
    """Orchestrator wired to the map surface fixture."""
    return MapSyncOrchestrator.for_surface(map_surface, map_config)


@pytest.fixture
def mock_viewport():
    """Viewport controller double that records center/fit calls."""
    return Mock(spec=ViewportController)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
