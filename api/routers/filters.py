"""Filter options API router.

Provides the option lists for the browser's facet controls.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.models.schemas import FilterOptionsResponse
from api.services.database import get_facets
from catalog.facets import FacetCatalog
from config.constants import DEFAULT_CATEGORY_ID

router = APIRouter()


def _requested_category(raw: Optional[str]) -> int:
    """Missing or non-numeric means the default; any other id is used as given."""
    try:
        return int(raw.strip())
    except (AttributeError, ValueError):
        return DEFAULT_CATEGORY_ID


@router.get("/options", response_model=FilterOptionsResponse)
async def get_filter_options(
    category: Optional[str] = Query(None, description="Category id (defaults to Pokémon)"),
    facets: FacetCatalog = Depends(get_facets),
):
    """Get categories, product types, price ranges, rarities and set eras.

    Unknown categories get empty types, rarities and set eras.
    """
    return facets.get_options(_requested_category(category))
