"""
상품 카탈로그 API 엔드포인트

상품 생성, 수정, 조회, 검색, 삭제, 조회수 증가, 이미지 교체, 재고 확인 기능을 제공합니다.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from redis import Redis
from sqlalchemy.orm import Session

from catalog.api.deps import get_db, get_product_filter
from catalog.core.config import Settings, get_settings
from catalog.core.exceptions import (
    DuplicateSkuException,
    InsufficientStockException,
    ProductNotFoundException,
    ProductValidationException,
    StoreUnavailableException,
    VersionConflictException,
)
from catalog.db.redis_client import get_redis_client
from catalog.schemas.product import (
    ProductCreateRequest,
    ProductFilter,
    ProductPage,
    ProductResponse,
    ProductUpdateRequest,
    StockCheckResponse,
)
from catalog.services.product_service import ProductService


router = APIRouter()

HTTP_STATUS_BY_EXCEPTION = {
    ProductNotFoundException: status.HTTP_404_NOT_FOUND,
    VersionConflictException: status.HTTP_409_CONFLICT,
    DuplicateSkuException: status.HTTP_409_CONFLICT,
    InsufficientStockException: status.HTTP_400_BAD_REQUEST,
    ProductValidationException: status.HTTP_400_BAD_REQUEST,
    StoreUnavailableException: status.HTTP_503_SERVICE_UNAVAILABLE,
}

CATALOG_ERRORS = tuple(HTTP_STATUS_BY_EXCEPTION)


def _http_error(e: Exception) -> HTTPException:
    """서비스 예외를 HTTP 상태 코드로 변환합니다."""
    return HTTPException(status_code=HTTP_STATUS_BY_EXCEPTION[type(e)], detail=str(e))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductCreateRequest,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
):
    """
    새 상품을 생성합니다.

    Example:
        Request:
        ```json
        {
            "name": "Winter Jacket",
            "price": "129000",
            "stock_quantity": 10,
            "category": "Outerwear",
            "brand": "Northwind",
            "gender": "UNISEX"
        }
        ```

        Response (201): sku가 "OUT-XXXXXXXX" 형식으로 생성된 상품 정보
    """
    try:
        return ProductService.create_product(product_data, db, redis, settings)
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.get("", response_model=ProductPage)
def list_products(
    include_inactive: bool = Query(False, description="비활성 상품 포함 여부"),
    page: int = Query(0, description="페이지 번호 (0부터 시작)"),
    size: Optional[int] = Query(None, description="페이지 크기"),
    sort_by: str = Query("id", description="정렬 컬럼"),
    sort_direction: str = Query("desc", description="asc 또는 desc"),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
):
    """
    상품 목록을 페이지 단위로 조회합니다.
    """
    try:
        return ProductService.list_products(
            db,
            redis,
            settings,
            include_inactive=include_inactive,
            page=page,
            size=size,
            sort_by=sort_by,
            sort_direction=sort_direction,
        )
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.get("/search", response_model=ProductPage)
def search_products(
    product_filter: ProductFilter = Depends(get_product_filter),
    page: int = Query(0),
    size: Optional[int] = Query(None),
    sort_by: str = Query("id"),
    sort_direction: str = Query("desc"),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
):
    """
    필터 조건으로 상품을 검색합니다.

    Example:
        GET /api/v1/products/search?search_term=jacket&has_discount=true&page=0&size=20
    """
    try:
        return ProductService.search_products(
            product_filter,
            db,
            redis,
            settings,
            page=page,
            size=size,
            sort_by=sort_by,
            sort_direction=sort_direction,
        )
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.get("/category/{category}", response_model=ProductPage)
def list_by_category(
    category: str,
    page: int = Query(0),
    size: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
):
    """카테고리별 활성 상품 목록을 조회합니다."""
    try:
        return ProductService.list_by_category(
            category, db, redis, settings, page=page, size=size
        )
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.get("/brand/{brand}", response_model=ProductPage)
def list_by_brand(
    brand: str,
    page: int = Query(0),
    size: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
    settings: Settings = Depends(get_settings),
):
    """브랜드별 활성 상품 목록을 조회합니다."""
    try:
        return ProductService.list_by_brand(
            brand, db, redis, settings, page=page, size=size
        )
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
):
    """
    상품 상세 정보를 조회합니다.

    Raises:
        HTTPException 404: 상품을 찾을 수 없는 경우
    """
    try:
        return ProductService.get_product(product_id, db, redis)
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    product_data: ProductUpdateRequest,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
):
    """
    상품을 수정합니다.

    본문에 version을 포함하면 해당 버전일 때만 수정합니다.

    Raises:
        HTTPException 404: 상품을 찾을 수 없는 경우
        HTTPException 409: 다른 요청이 먼저 수정한 경우 (최신 데이터로 재시도 필요)
    """
    try:
        return ProductService.update_product(
            product_id, product_data, db, redis, expected_version=product_data.version
        )
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.delete(
    "/{product_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None
)
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
):
    """상품을 소프트 삭제합니다 (이미 삭제된 상품이면 그대로 204)."""
    try:
        ProductService.delete_product(product_id, db, redis)
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.post("/{product_id}/view", response_model=ProductResponse)
def increment_view_count(
    product_id: str,
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
):
    """조회수를 1 증가시킵니다 (동시 요청 시 409가 반환될 수 있음)."""
    try:
        return ProductService.increment_view_count(product_id, db, redis)
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.put(
    "/{product_id}/images", status_code=status.HTTP_204_NO_CONTENT, response_model=None
)
def replace_images(
    product_id: str,
    image_urls: list[str] = Body(..., description="새 이미지 URL 목록"),
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
):
    """상품 이미지 목록을 교체합니다."""
    try:
        ProductService.replace_images(product_id, image_urls, db, redis)
    except CATALOG_ERRORS as e:
        raise _http_error(e)


@router.get("/{product_id}/stock", response_model=StockCheckResponse)
def check_stock(
    product_id: str,
    quantity: int = Query(1, description="필요 수량"),
    db: Session = Depends(get_db),
):
    """
    요청 수량만큼 재고가 있는지 확인합니다.

    Raises:
        HTTPException 404: 상품을 찾을 수 없는 경우
        HTTPException 400: 재고가 부족하거나 수량이 잘못된 경우
    """
    try:
        return ProductService.check_stock(product_id, quantity, db)
    except CATALOG_ERRORS as e:
        raise _http_error(e)
