"""Pydantic schemas for API responses."""

from pydantic import BaseModel, Field
from typing import Optional, Union


class Product(BaseModel):
    """One priced catalog item."""
    id: int
    productId: int
    name: Optional[str] = None
    cleanName: Optional[str] = None
    subTypeName: Optional[str] = None
    productType: Optional[str] = None
    rarity: Optional[str] = None
    groupId: Optional[int] = None
    setName: Optional[str] = None
    category: Optional[int] = None
    imageUrl: Optional[str] = None
    url: Optional[str] = None
    marketPrice: Optional[float] = None
    prevMarketPrice: Optional[float] = None
    diffMarketPrice: Optional[float] = Field(None, description="Fractional daily change (0.25 == +25%)")
    dollarDiffMarketPrice: Optional[float] = None
    updatedAt: Optional[str] = None


class ProductsResponse(BaseModel):
    """A page of products."""
    products: list[Product]
    totalCount: int
    page: int
    pageSize: int
    totalPages: int
    canAccessCompetitive: bool = True


class ErrorResponse(BaseModel):
    """Error body returned for 400 and 500 responses."""
    error: str
    details: Optional[str] = None


class RestrictedProductsResponse(ErrorResponse):
    """403 body: an error plus a placeholder preview."""
    products: list[Product]
    totalCount: int
    totalPages: int
    canAccessCompetitive: bool = False


class FacetOption(BaseModel):
    value: Union[int, str]
    label: str


class CategoryOption(FacetOption):
    image_src: Optional[str] = None
    category_id: int
    disabled: bool = False


class SetEraOption(FacetOption):
    subgroups: list[FacetOption] = []


class FilterOptionsResponse(BaseModel):
    """Option lists for every facet of one category."""
    categories: list[CategoryOption]
    types: list[FacetOption]
    priceRanges: list[FacetOption]
    rarities: list[FacetOption]
    setEras: list[SetEraOption]
