"""Configuration management."""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import dotenv_values
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env for local/dev environments only where values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    for key, value in file_env.items():
        if key not in os.environ and value is not None:
            os.environ[key] = value


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=3000, description="API port")
    allowed_origins: str = Field(default="*", description="Comma separated CORS origins")

    # Heightmap Configuration
    grid_size: int = Field(default=1081, ge=2, description="Output raster width and height")
    default_scale: float = Field(default=50.0, gt=0, description="Regional octave frequency")
    band_rows: int = Field(default=100, ge=1, description="Rows per synthesis band")
    synthesis_workers: int = Field(default=1, ge=1, description="Threads used per heightmap")

    # Tile Proxy Configuration
    tile_timeout_seconds: float = Field(default=10.0, gt=0, description="Upstream tile timeout")
    tile_user_agent: str = Field(default="TerrainParty/1.0", description="User-Agent sent upstream")
    tile_referer: str = Field(
        default="https://terrainparty.vercel.app/", description="Referer sent upstream"
    )
    tile_cache_entries: int = Field(default=512, ge=0, description="Tiles kept in memory")
    tile_max_zoom: int = Field(default=19, ge=0, description="Highest zoom level accepted")

    # Version
    commit_hash: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("VERCEL_GIT_COMMIT_SHA", "GIT_COMMIT_HASH", "commit_hash"),
        description="Deployed commit hash",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    @property
    def cors_origins(self) -> List[str]:
        """Split the configured origins."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
