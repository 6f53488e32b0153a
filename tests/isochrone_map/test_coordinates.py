"""
Tests for coordinate token parsing.
"""

import pytest

from isochrone_map.coordinates import parse_coordinate, parse_ring
from isochrone_map.exceptions import DegenerateComponent, IsochroneRenderError, MalformedCoordinate
from isochrone_map.models import GeoPoint


class TestParseCoordinate:
    """Test parse_coordinate."""

    def test_parses_lat_lng_pair(self):
        """Test basic token parsing."""
        assert parse_coordinate("48.1,11.6") == GeoPoint(lat=48.1, lng=11.6)

    def test_negative_and_integer_values(self):
        """Test signs and integer notation."""
        point = parse_coordinate("-33,-70.5")

        assert point.lat == -33.0
        assert point.lng == -70.5

    def test_surrounding_whitespace_is_accepted(self):
        """Test that float conversion tolerates spaces around fields."""
        assert parse_coordinate(" 1.5, 2.5 ") == GeoPoint(lat=1.5, lng=2.5)

    @pytest.mark.parametrize("lat,lng", [
        (0.0, 0.0),
        (48.137154, 11.576124),
        (-89.999999, 179.999999),
        (1e-7, -1e-7),
    ])
    def test_formatted_point_parses_back(self, lat, lng):
        """Test that formatting a point and parsing it again gives the same point."""
        point = parse_coordinate(f"{lat!r},{lng!r}")

        assert point.lat == pytest.approx(lat)
        assert point.lng == pytest.approx(lng)

    @pytest.mark.parametrize("token", ["48.1", "1,2,3", "", "a,b", "1,", ",2", "48.1;11.6"])
    def test_malformed_tokens_raise(self, token):
        """Test that malformed tokens raise MalformedCoordinate."""
        with pytest.raises(MalformedCoordinate) as exc_info:
            parse_coordinate(token)

        assert exc_info.value.token == token

    @pytest.mark.parametrize("token", [None, 48.1, ["48.1", "11.6"]])
    def test_non_string_tokens_raise(self, token):
        """Test that non-string tokens are rejected."""
        with pytest.raises(MalformedCoordinate):
            parse_coordinate(token)

    def test_malformed_coordinate_is_value_error(self):
        """Test the error hierarchy."""
        with pytest.raises(ValueError):
            parse_coordinate("oops")

        assert issubclass(MalformedCoordinate, IsochroneRenderError)


class TestParseRing:
    """Test parse_ring."""

    def test_parses_ordered_ring(self):
        """Test that vertex order is preserved."""
        ring = parse_ring(["0,0", "0,1", "1,1"])

        assert ring == [GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0), GeoPoint(1.0, 1.0)]

    def test_two_points_are_degenerate(self):
        """Test that a two-point component cannot form a polygon."""
        with pytest.raises(DegenerateComponent) as exc_info:
            parse_ring(["1,1", "2,2"])

        assert exc_info.value.point_count == 2

    def test_empty_shape_is_degenerate(self):
        """Test empty components."""
        with pytest.raises(DegenerateComponent):
            parse_ring([])

    def test_malformed_token_propagates(self):
        """Test that a single bad token fails the whole ring."""
        with pytest.raises(MalformedCoordinate):
            parse_ring(["0,0", "zero,one", "1,1", "2,2"])
