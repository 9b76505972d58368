"""YAML Configuration Loader for TCG Trends.

Loads and caches facet configuration from YAML with fallback to defaults.
Provides type-safe access to configuration values.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from functools import lru_cache
import yaml

# Get config directory
CONFIG_DIR = Path(__file__).parent


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""

    pass


def _load_yaml_file(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of YAML file in config directory

    Returns:
        Parsed YAML content as dictionary

    Raises:
        ConfigurationError: If file cannot be loaded
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise ConfigurationError(f"Configuration file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing {filename}: {e}")
    except IOError as e:
        raise ConfigurationError(f"Error reading {filename}: {e}")


@lru_cache(maxsize=1)
def load_facet_config() -> Dict[str, Any]:
    """Load facets.yaml configuration."""
    try:
        return _load_yaml_file("facets.yaml")
    except ConfigurationError:
        # Minimal fallback: a single category with singles only
        return {
            "default_category": 3,
            "categories": [{"category_id": 3, "label": "Pokémon"}],
            "product_types": {3: [{"value": "card", "label": "Singles"}]},
            "top_tier_rarities": [],
            "price_ranges": [{"value": "any", "label": "Any"}],
            "pagination": {"default_page_size": 25, "page_size_options": [10, 25, 50, 100]},
        }


def clear_config_cache() -> None:
    """Clear all cached configuration data."""
    load_facet_config.cache_clear()


@dataclass(frozen=True)
class CategoryConfig:
    """One selectable game category."""

    category_id: int
    label: str
    image_src: Optional[str] = None
    disabled: bool = False


@dataclass
class FacetConfig:
    """Facet configuration accessor."""

    _data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self._data = load_facet_config()

    @property
    def categories(self) -> List[CategoryConfig]:
        """Get configured categories in display order."""
        return [
            CategoryConfig(
                category_id=int(c["category_id"]),
                label=c["label"],
                image_src=c.get("image_src"),
                disabled=bool(c.get("disabled", False)),
            )
            for c in self._data.get("categories", [])
        ]

    @property
    def selectable_category_ids(self) -> List[int]:
        """Get ids of categories a user can select."""
        return [c.category_id for c in self.categories if not c.disabled]

    @property
    def default_category(self) -> int:
        """Get the default category id."""
        default = int(self._data.get("default_category", 3))
        if default not in self.selectable_category_ids:
            raise ConfigurationError(f"Default category {default} is not selectable")
        return default

    @property
    def product_types(self) -> Dict[int, List[Dict[str, str]]]:
        """Get product type options keyed by category id."""
        raw = self._data.get("product_types", {})
        return {int(k): list(v) for k, v in raw.items()}

    @property
    def top_tier_rarities(self) -> List[str]:
        """Get the fixed top-tier rarity ordering."""
        return list(self._data.get("top_tier_rarities", []))

    @property
    def price_ranges(self) -> List[Dict[str, str]]:
        """Get price bucket options."""
        return list(self._data.get("price_ranges", []))

    @property
    def default_page_size(self) -> int:
        """Get default page size."""
        return int(self._data.get("pagination", {}).get("default_page_size", 25))

    @property
    def page_size_options(self) -> List[int]:
        """Get available page size options."""
        return [int(n) for n in self._data.get("pagination", {}).get("page_size_options", [10, 25, 50, 100])]


@lru_cache(maxsize=1)
def get_facet_config() -> FacetConfig:
    """Get cached facet configuration."""
    return FacetConfig()


def reload_all_config() -> None:
    """Clear caches so configuration is re-read on next access."""
    clear_config_cache()
    get_facet_config.cache_clear()
