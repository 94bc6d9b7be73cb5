"""
Heightmap synthesis.

Maps a geographic bounding box onto a fixed ``size x size`` grid and fills
it with byte elevations. Row 0 is the northern edge and column 0 the western
edge; the buffer is row-major, which is the orientation terrain editors
expect for a single-channel grayscale import.
"""

import hashlib
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
import structlog

from ..exceptions import InvalidArgumentError
from .elevation import DEFAULT_SCALE, elevation, validate_scale

logger = structlog.get_logger()

# Standard heightmap resolution for Cities: Skylines II imports
CANONICAL_GRID_SIZE = 1081

KM_PER_DEGREE_LAT = 111.32

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class BoundingBox:
    """Geographic rectangle in degrees."""

    north: float
    south: float
    east: float
    west: float

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lon_span(self) -> float:
        return self.east - self.west

    def approximate_extent_km(self) -> Tuple[float, float]:
        """Approximate (north-south, east-west) extent in kilometres."""
        mean_lat = (self.north + self.south) / 2
        lat_km = abs(self.lat_span) * KM_PER_DEGREE_LAT
        lon_km = abs(self.lon_span) * KM_PER_DEGREE_LAT * math.cos(math.radians(mean_lat))
        return lat_km, lon_km


@dataclass(frozen=True)
class GridSpec:
    """Output raster resolution; the raster is always square."""

    size: int = CANONICAL_GRID_SIZE

    def validate(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, (int, np.integer)):
            raise InvalidArgumentError(f"Grid size must be an integer, got {self.size!r}")
        if self.size < 2:
            raise InvalidArgumentError(f"Grid size must be at least 2, got {self.size}")

    @property
    def steps(self) -> int:
        return self.size - 1


class HeightmapBuffer:
    """Row-major ``size x size`` byte raster owned by a single request."""

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 2 or pixels.shape[0] != pixels.shape[1]:
            raise ValueError(f"Heightmap must be square, got shape {pixels.shape}")
        self.pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    @property
    def size(self) -> int:
        return self.pixels.shape[0]

    def __len__(self) -> int:
        return self.pixels.size

    def __getitem__(self, index: int) -> int:
        """Byte at flat index ``y * size + x``."""
        return int(self.pixels.reshape(-1)[index])

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def sha256(self) -> str:
        return hashlib.sha256(self.pixels.tobytes()).hexdigest()

    def value_range(self) -> Tuple[int, int]:
        return int(self.pixels.min()), int(self.pixels.max())


class HeightmapSynthesizer:
    """
    Evaluates the elevation function over a regular lat/lon grid.

    Rows are produced in bands so progress can be logged while a large grid
    is filled. With ``workers > 1`` bands run on a thread pool; each band
    writes its own slice of the output array, so the result does not depend
    on the number of workers.
    """

    def __init__(
        self,
        grid: Optional[GridSpec] = None,
        scale: float = DEFAULT_SCALE,
        band_rows: int = 100,
        workers: int = 1,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the synthesizer.

        Args:
            grid: Output resolution, defaults to the canonical 1081x1081
            scale: Regional octave frequency
            band_rows: Rows evaluated per band
            workers: Number of threads evaluating bands
            progress_callback: Called with (rows_done, total_rows) after each band
        """
        self.grid = grid or GridSpec()
        self.grid.validate()
        if band_rows < 1:
            raise InvalidArgumentError(f"band_rows must be at least 1, got {band_rows}")
        if workers < 1:
            raise InvalidArgumentError(f"workers must be at least 1, got {workers}")

        self.scale = validate_scale(scale)
        self.band_rows = band_rows
        self.workers = workers
        self.progress_callback = progress_callback

    def sample_axes(self, box: BoundingBox) -> Tuple[np.ndarray, np.ndarray]:
        """Latitudes of each row (north to south) and longitudes of each column (west to east)."""
        size = self.grid.size
        lat_step = box.lat_span / self.grid.steps
        lon_step = box.lon_span / self.grid.steps

        indices = np.arange(size, dtype=np.float64)
        lats = box.north - indices * lat_step
        lons = box.west + indices * lon_step
        return lats, lons

    def _fill_band(self, pixels: np.ndarray, lats: np.ndarray, lons: np.ndarray, start: int, stop: int) -> int:
        pixels[start:stop, :] = elevation(lats[start:stop, np.newaxis], lons[np.newaxis, :], self.scale)
        return stop

    def _report(self, rows_done: int, total: int) -> None:
        logger.debug(
            "Heightmap progress",
            rows=rows_done,
            total=total,
            percent=int(rows_done / total * 100),
        )
        if self.progress_callback is not None:
            self.progress_callback(rows_done, total)

    def synthesize(self, box: BoundingBox) -> HeightmapBuffer:
        """
        Generate the heightmap for a bounding box.

        Args:
            box: Geographic area; north should exceed south

        Returns:
            Completed HeightmapBuffer of ``size * size`` bytes
        """
        size = self.grid.size
        lat_km, lon_km = box.approximate_extent_km()
        logger.info(
            "Generating heightmap",
            north=box.north,
            south=box.south,
            east=box.east,
            west=box.west,
            size=size,
            scale=self.scale,
            extent_km=f"{lat_km:.2f}x{lon_km:.2f}",
        )

        lats, lons = self.sample_axes(box)
        pixels = np.empty((size, size), dtype=np.uint8)
        bands = [(start, min(start + self.band_rows, size)) for start in range(0, size, self.band_rows)]

        if self.workers == 1:
            for start, stop in bands:
                self._report(self._fill_band(pixels, lats, lons, start, stop), size)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                futures = [
                    executor.submit(self._fill_band, pixels, lats, lons, start, stop)
                    for start, stop in bands
                ]
                rows_done = 0
                for future, (start, stop) in zip(futures, bands):
                    future.result()
                    rows_done += stop - start
                    self._report(rows_done, size)

        buffer = HeightmapBuffer(pixels)
        low, high = buffer.value_range()
        logger.info("Heightmap generation complete", size=size, min=low, max=high)
        return buffer


def synthesize(box: BoundingBox, grid: Optional[GridSpec] = None, scale: float = DEFAULT_SCALE) -> HeightmapBuffer:
    """Generate a heightmap sequentially with default banding."""
    return HeightmapSynthesizer(grid, scale).synthesize(box)
