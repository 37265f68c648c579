"""
Pydantic 스키마 모듈
"""

from catalog.schemas.product import (
    ProductFilter,
    ProductCreateRequest,
    ProductUpdateRequest,
    ProductResponse,
    ProductPage,
    StockCheckResponse,
)

__all__ = [
    "ProductFilter",
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "ProductResponse",
    "ProductPage",
    "StockCheckResponse",
]
