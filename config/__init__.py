"""Configuration module for TCG Trends."""

from .settings import config, DatabaseConfig, BrowsingConfig, AppConfig, Config
from .config_loader import (
    ConfigurationError,
    CategoryConfig,
    FacetConfig,
    get_facet_config,
    reload_all_config,
)

__all__ = [
    # Settings
    "config",
    "DatabaseConfig",
    "BrowsingConfig",
    "AppConfig",
    "Config",
    # Facet configuration
    "ConfigurationError",
    "CategoryConfig",
    "FacetConfig",
    "get_facet_config",
    "reload_all_config",
]
