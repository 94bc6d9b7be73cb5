"""
Map tile proxy.

Forwards slippy-map tile requests to upstream tile servers with ordered
provider fallback and an in-memory LRU cache.
"""

from .cache import TileCache
from .proxy import (
    DEFAULT_PROVIDERS,
    TileProvider,
    TileProxy,
    validate_tile_coordinates,
)

__all__ = ['TileCache', 'DEFAULT_PROVIDERS', 'TileProvider', 'TileProxy', 'validate_tile_coordinates']
