"""Application settings and configuration."""

from pathlib import Path
from dataclasses import dataclass, field
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    path: Path = field(
        default_factory=lambda: Path(
            os.getenv("TCG_DB_PATH", str(PROJECT_ROOT / "data" / "catalog.duckdb"))
        )
    )
    read_only: bool = False
    memory_limit: str = "2GB"
    threads: int = -1  # Use all available threads


@dataclass
class BrowsingConfig:
    """Browsing session settings."""

    api_base_url: str = field(
        default_factory=lambda: os.getenv("TCG_API_BASE_URL", "http://localhost:8000")
    )
    products_endpoint: str = "/api/daily-products"
    search_debounce_seconds: float = field(
        default_factory=lambda: float(os.getenv("TCG_SEARCH_DEBOUNCE_MS", "300")) / 1000
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("TCG_REQUEST_TIMEOUT_SECONDS", "30"))
    )


@dataclass
class AppConfig:
    """Application configuration settings."""

    name: str = field(default_factory=lambda: os.getenv("APP_NAME", "TCG Trends"))
    version: str = field(default_factory=lambda: os.getenv("APP_VERSION", "1.0.0"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    cache_ttl: int = field(
        default_factory=lambda: int(os.getenv("CACHE_TTL_SECONDS", "3600"))
    )
    cache_enabled: bool = field(
        default_factory=lambda: os.getenv("TCG_DEBUG", "false").lower() != "true"
    )


@dataclass
class Config:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    browsing: BrowsingConfig = field(default_factory=BrowsingConfig)
    app: AppConfig = field(default_factory=AppConfig)


# Global config instance
config = Config()
