"""API Pydantic models."""

from api.models.schemas import (
    Product,
    ProductsResponse,
    ErrorResponse,
    RestrictedProductsResponse,
    FilterOptionsResponse,
)

__all__ = [
    "Product",
    "ProductsResponse",
    "ErrorResponse",
    "RestrictedProductsResponse",
    "FilterOptionsResponse",
]
