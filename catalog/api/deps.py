"""
FastAPI 의존성 주입 함수들

데이터베이스 세션, 검색 필터 등의 의존성을 제공합니다.
"""

from decimal import Decimal
from typing import Optional

from fastapi import HTTPException, Query, status
from pydantic import ValidationError

from catalog.db.database import get_db
from catalog.models.enums import Gender, Season
from catalog.schemas.product import ProductFilter

__all__ = ["get_db", "get_product_filter"]


def get_product_filter(
    search_term: Optional[str] = Query(None, description="상품명/설명 검색어"),
    min_price: Optional[Decimal] = Query(None, description="최소 가격"),
    max_price: Optional[Decimal] = Query(None, description="최대 가격"),
    category: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    gender: Optional[Gender] = Query(None),
    season: Optional[Season] = Query(None),
    in_stock: Optional[bool] = Query(None),
    has_discount: Optional[bool] = Query(None),
    include_inactive: Optional[bool] = Query(None),
) -> ProductFilter:
    """
    쿼리 파라미터로 ProductFilter를 만드는 의존성 함수

    Raises:
        HTTPException: 음수 가격, min_price > max_price 등 잘못된 필터일 때 400 Bad Request

    Example:
        GET /api/v1/products/search?search_term=jacket&min_price=10000&in_stock=true
    """
    try:
        return ProductFilter(
            search_term=search_term,
            min_price=min_price,
            max_price=max_price,
            category=category,
            brand=brand,
            gender=gender,
            season=season,
            in_stock=in_stock,
            has_discount=has_discount,
            include_inactive=include_inactive,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=[error["msg"] for error in e.errors()],
        )
