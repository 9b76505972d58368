"""Daily products API router.

The read endpoint behind the catalog browser. Query parameters use the
same names and encodings as the browser URL (see browsing.url_codec).
"""

import math

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models.schemas import ErrorResponse, ProductsResponse, RestrictedProductsResponse
from api.services.database import get_store
from api.services.entitlements import create_preview_products, has_full_access
from browsing.errors import ValidationError
from browsing.query_compiler import compile_query
from browsing.url_codec import from_url_params
from catalog.store import CatalogStore
from config.logging_config import get_logger

logger = get_logger("api.products")

router = APIRouter()


@router.get(
    "/daily-products",
    response_model=ProductsResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": RestrictedProductsResponse},
        500: {"model": ErrorResponse},
    },
)
async def list_daily_products(
    request: Request,
    full_access: bool = Depends(has_full_access),
    store: CatalogStore = Depends(get_store),
):
    """
    Get one page of products with their daily price changes.

    Parameters: category, groups, type, price, rarity, q, sort_by, sort_dir,
    limit, page. Unknown or malformed values fall back to defaults; only an
    unknown product type is rejected.
    """
    if not full_access:
        preview = create_preview_products()
        return JSONResponse(
            status_code=403,
            content={
                "error": "Access denied",
                "details": "A subscription is required to view price trends",
                "products": preview,
                "totalCount": len(preview),
                "totalPages": 1,
                "canAccessCompetitive": False,
            },
        )

    state = from_url_params(dict(request.query_params))

    try:
        query = compile_query(state)
        result = store.execute(query)
    except ValidationError as e:
        logger.warning(f"Rejected products request: {e}")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": str(e)},
        )
    except Exception as e:
        logger.error(f"Error fetching products: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to load products",
                "details": "An unexpected error occurred",
            },
        )

    return {
        "products": result.items,
        "totalCount": result.total_count,
        "page": state.page,
        "pageSize": state.page_size,
        "totalPages": math.ceil(result.total_count / state.page_size),
        "canAccessCompetitive": True,
    }
