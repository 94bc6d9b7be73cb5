"""Error types raised by heightmap synthesis and the tile proxy."""

from typing import Optional


class TerrainPartyError(Exception):
    """Base exception for all terrain_party errors."""


class InvalidArgumentError(TerrainPartyError):
    """Malformed input: missing fields, bad scale, grid size below 2."""


class UpstreamUnavailableError(TerrainPartyError):
    """Every tile provider failed for a request."""

    def __init__(self, message: str, last_error: Optional[Exception] = None):
        self.last_error = last_error
        super().__init__(message)


class EncodingFailureError(TerrainPartyError):
    """The raster could not be converted to PNG."""
