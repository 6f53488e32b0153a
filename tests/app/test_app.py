"""
Tests for the Streamlit host helpers that build and replace the state snapshot.
"""

import importlib
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest

import app


class TestExtractResults:
    """Test reading isochrone results from an uploaded JSON document."""

    def test_results_list(self, two_band_results):
        assert app.extract_results(two_band_results) is two_band_results

    def test_store_shape(self, state_factory, two_band_results):
        document = state_factory(results=two_band_results)

        assert app.extract_results(document) == two_band_results

    @pytest.mark.parametrize("document", [
        {"isochrones": []},
        {"isochrones": "results"},
        {"isochrones": {"results": {"component": []}}},
        {"isochrones": {}},
        {},
        "isochrones",
        42,
        None,
    ])
    def test_unexpected_shapes_raise_value_error(self, document):
        with pytest.raises(ValueError, match="isochrones.results"):
            app.extract_results(document)


class TestReplaceState:
    """Test that every change publishes a new snapshot object."""

    def setup_method(self):
        self.session_state = SimpleNamespace(isochrone_state=app.EMPTY_STATE)
        self.patcher = patch.object(app.st, "session_state", self.session_state)
        self.patcher.start()

    def teardown_method(self):
        self.patcher.stop()

    def test_new_center_creates_new_snapshot(self, munich_center):
        before = self.session_state.isochrone_state

        app.replace_state(center=munich_center)

        after = self.session_state.isochrone_state
        assert after is not before
        assert after["settings"]["isochronesCenter"] == munich_center
        assert after["isochrones"]["results"] == []

    def test_untouched_parts_are_carried_over(self, munich_center, two_band_results):
        app.replace_state(center=munich_center)
        app.replace_state(results=two_band_results)

        state = self.session_state.isochrone_state
        assert state["settings"]["isochronesCenter"] == munich_center
        assert state["isochrones"]["results"] == two_band_results

    def test_clearing_center(self, munich_center):
        app.replace_state(center=munich_center)
        app.replace_state(center={})

        assert self.session_state.isochrone_state["settings"]["isochronesCenter"] == {}

    def test_empty_state_is_not_mutated(self, munich_center):
        app.replace_state(center=munich_center)

        assert app.EMPTY_STATE["settings"]["isochronesCenter"] == {}


class TestProjectSetup:
    """Test how the Streamlit script is packaged."""

    def test_app_script_is_not_installed_as_module(self):
        setup_py = Path(__file__).resolve().parents[2] / "setup.py"

        assert "py_modules" not in setup_py.read_text(encoding="utf-8")

    def test_import_has_no_page_side_effects(self):
        with patch.object(app.st, "set_page_config") as mock_page_config:
            importlib.reload(app)

        mock_page_config.assert_not_called()
