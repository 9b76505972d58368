"""FastAPI application settings."""

from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache
import os


def _parse_list(env_name: str, default: list[str]) -> list[str]:
    """Parse a comma-separated environment variable."""
    raw = os.getenv(env_name, "")
    if raw:
        return [item.strip() for item in raw.split(",") if item.strip()]
    return default


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # App info
    app_name: str = "TCG Trends API"
    version: str = "1.0.0"
    debug: bool = os.getenv("TCG_DEBUG", "false").lower() == "true"

    # Database
    database_path: Path = Path(
        os.getenv("TCG_DB_PATH", str(Path(__file__).parent.parent / "data" / "catalog.duckdb"))
    )

    # CORS - configurable via environment variable
    cors_origins: list[str] = _parse_list(
        "TCG_CORS_ALLOW_ORIGINS", ["http://localhost:3000", "http://localhost:5173"]
    )

    # Facet option cache (disabled when debug is on)
    cache_ttl_seconds: int = int(os.getenv("TCG_CACHE_TTL", "3600"))

    # Entitlements: when enforced, only bearer tokens listed here see full data
    enforce_entitlements: bool = os.getenv("TCG_ENFORCE_ENTITLEMENTS", "false").lower() == "true"
    entitled_tokens: list[str] = _parse_list("TCG_ACCESS_TOKENS", [])

    class Config:
        env_prefix = "TCG_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
