"""Tile fetching with ordered provider fallback."""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import requests
import structlog

from ..exceptions import InvalidArgumentError, UpstreamUnavailableError
from .cache import TileCache

logger = structlog.get_logger()


@dataclass(frozen=True)
class TileProvider:
    """An upstream tile server addressed by a ``{z}/{x}/{y}`` URL template."""

    name: str
    url_template: str

    def url(self, z: int, x: int, y: int) -> str:
        return self.url_template.format(z=z, x=x, y=y)


DEFAULT_PROVIDERS = (
    # No API key required
    TileProvider("cartodb-voyager", "https://a.basemaps.cartocdn.com/rastertiles/voyager/{z}/{x}/{y}.png"),
    TileProvider("openstreetmap", "https://tile.openstreetmap.org/{z}/{x}/{y}.png"),
)


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, int):
        return value
    text = str(value).strip()
    # int() would also accept "1_0"
    if not text.lstrip("+-").isdigit():
        raise ValueError(value)
    return int(text)


def validate_tile_coordinates(z: Any, x: Any, y: Any, max_zoom: int = 19) -> Tuple[int, int, int]:
    """
    Parse and range-check slippy-map tile coordinates.

    Args:
        z: Zoom level
        x: Tile column
        y: Tile row
        max_zoom: Highest zoom level accepted

    Returns:
        (zoom, x, y) as integers

    Raises:
        InvalidArgumentError: Non-numeric or out-of-range coordinates
    """
    try:
        zoom, tile_x, tile_y = _parse_int(z), _parse_int(x), _parse_int(y)
    except ValueError:
        raise InvalidArgumentError("Invalid tile coordinates")

    if zoom < 0 or zoom > max_zoom:
        raise InvalidArgumentError("Tile coordinates out of range")

    max_tile = 2 ** zoom
    if not (0 <= tile_x < max_tile and 0 <= tile_y < max_tile):
        raise InvalidArgumentError("Tile coordinates out of range")

    return zoom, tile_x, tile_y


class TileProxy:
    """
    Fetches tiles from an ordered list of providers.

    Each request makes a single pass over the providers; a provider that
    fails is not retried. The first successful response is cached and
    returned.
    """

    def __init__(
        self,
        providers: Sequence[TileProvider] = DEFAULT_PROVIDERS,
        cache: Optional[TileCache] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        user_agent: str = "TerrainParty/1.0",
        referer: Optional[str] = None,
    ):
        if not providers:
            raise ValueError("At least one tile provider is required")
        self.providers: List[TileProvider] = list(providers)
        self.cache = cache
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent}
        if referer:
            self.headers["Referer"] = referer

    def fetch(self, z: int, x: int, y: int) -> bytes:
        """
        Get tile image bytes for validated coordinates.

        Raises:
            UpstreamUnavailableError: Every provider failed
        """
        key = (z, x, y)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Tile cache hit", z=z, x=x, y=y)
                return cached

        last_error: Optional[Exception] = None
        for provider in self.providers:
            url = provider.url(z, x, y)
            try:
                response = self.session.get(url, headers=self.headers, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                last_error = e
                logger.warning(
                    "Tile provider failed, trying next provider",
                    provider=provider.name,
                    z=z,
                    x=x,
                    y=y,
                    error=str(e),
                )
                continue

            data = response.content
            if self.cache is not None:
                self.cache.put(key, data)
            logger.debug("Fetched tile", provider=provider.name, z=z, x=x, y=y, bytes=len(data))
            return data

        logger.error("All tile providers failed", z=z, x=x, y=y, error=str(last_error))
        raise UpstreamUnavailableError(
            f"All {len(self.providers)} tile providers failed: {last_error}", last_error=last_error
        )
