"""
Tests for tile coordinate validation and provider fallback.
"""

from unittest.mock import Mock

import pytest
import requests

from terrain_party.exceptions import InvalidArgumentError, UpstreamUnavailableError
from terrain_party.tiles import (
    DEFAULT_PROVIDERS,
    TileCache,
    TileProvider,
    TileProxy,
    validate_tile_coordinates,
)

PROVIDERS = [
    TileProvider("first", "https://first.example/{z}/{x}/{y}.png"),
    TileProvider("second", "https://second.example/{z}/{x}/{y}.png"),
]


def ok_response(content=b"tile"):
    response = Mock()
    response.content = content
    response.raise_for_status.return_value = None
    return response


class TestValidateTileCoordinates:
    """Test slippy-map coordinate checks."""

    def test_valid(self):
        assert validate_tile_coordinates("10", "301", "384") == (10, 301, 384)
        assert validate_tile_coordinates(0, 0, 0) == (0, 0, 0)

    @pytest.mark.parametrize("z,x,y", [("abc", "1", "1"), ("1", "x", "0"), ("1", "0", ""), ("1.5", "0", "0")])
    def test_non_numeric(self, z, x, y):
        with pytest.raises(InvalidArgumentError, match="Invalid tile coordinates"):
            validate_tile_coordinates(z, x, y)

    @pytest.mark.parametrize("z,x,y", [("10", "9999", "9999"), ("1", "2", "0"), ("1", "0", "-1"), ("-1", "0", "0"), ("25", "0", "0")])
    def test_out_of_range(self, z, x, y):
        with pytest.raises(InvalidArgumentError, match="out of range"):
            validate_tile_coordinates(z, x, y)

    def test_upper_bound_is_exclusive(self):
        assert validate_tile_coordinates("2", "3", "3") == (2, 3, 3)
        with pytest.raises(InvalidArgumentError):
            validate_tile_coordinates("2", "4", "3")


class TestTileProxy:
    """Test ordered provider fallback."""

    def test_default_provider_order(self):
        assert [p.name for p in DEFAULT_PROVIDERS] == ["cartodb-voyager", "openstreetmap"]
        assert DEFAULT_PROVIDERS[1].url(10, 301, 384) == "https://tile.openstreetmap.org/10/301/384.png"

    def test_first_provider_success(self):
        session = Mock()
        session.get.return_value = ok_response(b"png-bytes")
        proxy = TileProxy(PROVIDERS, session=session, referer="https://example.test/")

        assert proxy.fetch(3, 1, 2) == b"png-bytes"
        session.get.assert_called_once()
        url = session.get.call_args.args[0]
        headers = session.get.call_args.kwargs["headers"]
        assert url == "https://first.example/3/1/2.png"
        assert headers["User-Agent"] == "TerrainParty/1.0"
        assert headers["Referer"] == "https://example.test/"

    def test_falls_back_to_next_provider(self):
        session = Mock()
        session.get.side_effect = [requests.ConnectionError("down"), ok_response(b"fallback")]
        proxy = TileProxy(PROVIDERS, session=session)

        assert proxy.fetch(3, 1, 2) == b"fallback"
        urls = [call.args[0] for call in session.get.call_args_list]
        assert urls == ["https://first.example/3/1/2.png", "https://second.example/3/1/2.png"]

    def test_http_error_status_triggers_fallback(self):
        bad = Mock()
        bad.raise_for_status.side_effect = requests.HTTPError("503")
        session = Mock()
        session.get.side_effect = [bad, ok_response(b"fallback")]

        assert TileProxy(PROVIDERS, session=session).fetch(1, 0, 0) == b"fallback"

    def test_all_providers_fail(self):
        session = Mock()
        last = requests.Timeout("slow")
        session.get.side_effect = [requests.ConnectionError("down"), last]
        proxy = TileProxy(PROVIDERS, session=session)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            proxy.fetch(1, 0, 0)
        assert exc_info.value.last_error is last
        # Single pass, no retries
        assert session.get.call_count == 2

    def test_cache_short_circuits_upstream(self):
        session = Mock()
        session.get.return_value = ok_response(b"cached")
        cache = TileCache(max_entries=8)
        proxy = TileProxy(PROVIDERS, cache=cache, session=session)

        assert proxy.fetch(5, 3, 4) == b"cached"
        assert proxy.fetch(5, 3, 4) == b"cached"
        assert session.get.call_count == 1
        assert (5, 3, 4) in cache

    def test_failures_are_not_cached(self):
        session = Mock()
        session.get.side_effect = requests.ConnectionError("down")
        cache = TileCache(max_entries=8)
        proxy = TileProxy(PROVIDERS, cache=cache, session=session)

        with pytest.raises(UpstreamUnavailableError):
            proxy.fetch(5, 3, 4)
        assert len(cache) == 0

    def test_requires_provider(self):
        with pytest.raises(ValueError):
            TileProxy([])


class TestUpstreamUnavailableError:
    """Test the error raised when every provider fails."""

    def test_last_error_optional(self):
        assert UpstreamUnavailableError("down").last_error is None
