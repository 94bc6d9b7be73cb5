"""FastAPI main application."""

import logging
import math
from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..config import settings
from ..core.encoding import encode_png
from ..core.synthesizer import BoundingBox, GridSpec, HeightmapSynthesizer
from ..exceptions import InvalidArgumentError, UpstreamUnavailableError
from ..tiles import TileCache, TileProxy, validate_tile_coordinates


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Configure structlog on top of the standard library logger."""
    logging.basicConfig(format="%(message)s", level=log_level.upper())
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Terrain Party API",
    description="Synthetic heightmap downloads for map-selected areas",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

COORDINATE_FIELDS = ("north", "south", "east", "west")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


# Request/Response models
class HeightmapRequest(BaseModel):
    """Validated heightmap request."""

    north: float = Field(..., description="Northern edge latitude in degrees")
    south: float = Field(..., description="Southern edge latitude in degrees")
    east: float = Field(..., description="Eastern edge longitude in degrees")
    west: float = Field(..., description="Western edge longitude in degrees")
    scale: float = Field(50.0, gt=0, description="Regional noise frequency")

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(north=self.north, south=self.south, east=self.east, west=self.west)

    def filename(self) -> str:
        return f"heightmap_{self.north:.4f}_{self.west:.4f}.png"


class VersionResponse(BaseModel):
    """Deployed build information."""

    version: str
    fullVersion: str
    timestamp: str


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # JSON integers can exceed the float range
        return False


def parse_heightmap_request(body: Any, default_scale: float = 50.0) -> HeightmapRequest:
    """
    Validate a raw JSON body for heightmap generation.

    Raises:
        InvalidArgumentError: With the client-facing error message
    """
    if not isinstance(body, dict):
        raise InvalidArgumentError("Invalid request body")

    if any(body.get(name) is None for name in COORDINATE_FIELDS):
        raise InvalidArgumentError("Missing coordinates")

    if not all(_is_number(body[name]) for name in COORDINATE_FIELDS):
        raise InvalidArgumentError("Invalid coordinates")

    scale = body.get("scale")
    if scale is None:
        scale = default_scale
    elif not _is_number(scale) or scale <= 0:
        raise InvalidArgumentError("Invalid scale parameter")

    if body["north"] <= body["south"]:
        raise InvalidArgumentError("Invalid bounding box")

    return HeightmapRequest(
        north=body["north"],
        south=body["south"],
        east=body["east"],
        west=body["west"],
        scale=scale,
    )


def generate_heightmap_png(request: HeightmapRequest) -> bytes:
    """Synthesize and encode the heightmap for a validated request."""
    synthesizer = HeightmapSynthesizer(
        GridSpec(settings.grid_size),
        scale=request.scale,
        band_rows=settings.band_rows,
        workers=settings.synthesis_workers,
    )
    buffer = synthesizer.synthesize(request.bounding_box())
    return encode_png(buffer)


def build_tile_proxy() -> TileProxy:
    return TileProxy(
        cache=TileCache(settings.tile_cache_entries),
        timeout=settings.tile_timeout_seconds,
        user_agent=settings.tile_user_agent,
        referer=settings.tile_referer,
    )


app.state.tile_proxy = build_tile_proxy()


def get_tile_proxy(request: Request) -> TileProxy:
    """Tile proxy owned by the application instance."""
    return request.app.state.tile_proxy


# Exception handlers
@app.exception_handler(InvalidArgumentError)
async def invalid_argument_handler(request: Request, exc: InvalidArgumentError):
    logger.info("Rejected request", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=400, content={"error": str(exc)})


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Terrain Party API",
        "version": __version__,
        "status": "running",
        "grid_size": settings.grid_size,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/api/generate-heightmap")
async def generate_heightmap(request: Request):
    """
    Generate a grayscale PNG heightmap for a bounding box.

    Body: ``{north, south, east, west, scale?}`` in degrees.
    """
    try:
        body = await request.json()
    except ValueError:
        raise InvalidArgumentError("Invalid request body")

    heightmap_request = parse_heightmap_request(body, default_scale=settings.default_scale)
    logger.info("Heightmap requested", **heightmap_request.model_dump())

    try:
        png = await run_in_threadpool(generate_heightmap_png, heightmap_request)
    except Exception as e:
        logger.error("Error generating heightmap", error=str(e), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate heightmap", "details": str(e)},
        )

    headers = {
        "Content-Disposition": f'attachment; filename="{heightmap_request.filename()}"',
        **NO_CACHE_HEADERS,
    }
    return Response(content=png, media_type="image/png", headers=headers)


@app.api_route("/api/generate-heightmap", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def generate_heightmap_wrong_method():
    return JSONResponse(status_code=405, content={"error": "Method not allowed"}, headers={"Allow": "POST"})


@app.get("/api/tiles/{z}/{x}/{y}.png")
def get_tile(z: str, x: str, y: str, proxy: TileProxy = Depends(get_tile_proxy)):
    """Proxy a map tile from the upstream providers."""
    try:
        zoom, tile_x, tile_y = validate_tile_coordinates(z, x, y, max_zoom=settings.tile_max_zoom)
    except InvalidArgumentError as e:
        return PlainTextResponse(str(e), status_code=400)

    try:
        data = proxy.fetch(zoom, tile_x, tile_y)
    except UpstreamUnavailableError as e:
        logger.error("Error fetching tile", z=zoom, x=tile_x, y=tile_y, error=str(e))
        return PlainTextResponse("Failed to fetch tile", status_code=500)

    return Response(
        content=data,
        media_type="image/png",
        headers={"Cache-Control": "public, max-age=86400"},
    )


@app.get("/api/version", response_model=VersionResponse)
async def get_version():
    """Deployed commit information."""
    full_version = settings.commit_hash or "dev"
    payload = VersionResponse(
        version=full_version[:7],
        fullVersion=full_version,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
    return JSONResponse(content=payload.model_dump(), headers={"Cache-Control": "public, max-age=60"})


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
