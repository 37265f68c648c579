"""
상품 카탈로그 관련 Pydantic 스키마

필터, 요청/응답 모델을 정의합니다.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from catalog.models.enums import Gender, Season


class ProductFilter(BaseModel):
    """
    상품 검색 필터

    모든 필드는 선택 사항이며, 값이 없으면 해당 조건을 적용하지 않습니다.
    빈 문자열은 값이 없는 것으로 취급합니다.

    Example:
        {
            "search_term": "jacket",
            "min_price": "50000",
            "gender": "MEN",
            "in_stock": true
        }
    """

    model_config = ConfigDict(frozen=True)

    search_term: Optional[str] = Field(None, description="상품명/설명 부분 일치 검색어")
    min_price: Optional[Decimal] = Field(None, ge=0, description="최소 가격 (포함)")
    max_price: Optional[Decimal] = Field(None, ge=0, description="최대 가격 (포함)")
    category: Optional[str] = Field(None, description="카테고리")
    brand: Optional[str] = Field(None, description="브랜드")
    gender: Optional[Gender] = Field(None, description="대상 성별")
    season: Optional[Season] = Field(None, description="판매 시즌")
    in_stock: Optional[bool] = Field(None, description="재고 있는 상품만")
    has_discount: Optional[bool] = Field(None, description="할인 중인 상품만")
    include_inactive: Optional[bool] = Field(None, description="비활성 상품 포함 여부")

    @field_validator("search_term", "category", "brand")
    @classmethod
    def empty_string_as_none(cls, value: Optional[str]) -> Optional[str]:
        return value if value else None

    @model_validator(mode="after")
    def check_price_range(self) -> "ProductFilter":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price must be less than or equal to max_price")
        return self


class ProductCreateRequest(BaseModel):
    """
    상품 생성 요청 스키마

    Example:
        {
            "name": "Winter Jacket",
            "price": "129000",
            "stock_quantity": 10,
            "category": "Outerwear",
            "brand": "Northwind",
            "gender": "UNISEX"
        }
    """

    name: str = Field(..., min_length=1, max_length=200, description="상품명")
    description: Optional[str] = Field(None, description="상품 설명")
    price: Decimal = Field(..., ge=0, description="가격 (0 이상)")
    stock_quantity: int = Field(..., ge=0, description="재고 수량 (0 이상)")
    category: str = Field("", max_length=100, description="카테고리")
    brand: str = Field("", max_length=100, description="브랜드")
    material: Optional[str] = Field(None, max_length=100, description="소재")
    gender: Gender = Field(..., description="대상 성별")
    season: Optional[Season] = Field(None, description="판매 시즌")
    image_urls: list[str] = Field(default_factory=list, description="이미지 URL 목록")
    available_sizes: list[str] = Field(default_factory=list, description="사이즈 목록")
    available_colors: list[str] = Field(default_factory=list, description="색상 목록")
    discount_percentage: Optional[Decimal] = Field(
        None, ge=0, le=100, description="할인율 (%)"
    )
    sku: Optional[str] = Field(
        None, min_length=1, max_length=32, description="SKU (없으면 자동 생성)"
    )


class ProductUpdateRequest(BaseModel):
    """
    상품 수정 요청 스키마

    전달된 필드만 변경합니다. SKU와 ID는 변경할 수 없습니다.
    version을 함께 보내면 해당 버전일 때만 수정합니다 (낙관적 락).
    """

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=100)
    brand: Optional[str] = Field(None, max_length=100)
    material: Optional[str] = Field(None, max_length=100)
    gender: Optional[Gender] = None
    season: Optional[Season] = None
    image_urls: Optional[list[str]] = None
    available_sizes: Optional[list[str]] = None
    available_colors: Optional[list[str]] = None
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    active: Optional[bool] = None
    version: Optional[int] = Field(None, ge=1, description="클라이언트가 알고 있는 버전")


class ProductResponse(BaseModel):
    """
    상품 정보 응답 스키마 (캐시에도 이 형태로 저장)
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="상품 ID")
    name: str = Field(..., description="상품명")
    description: Optional[str] = Field(None, description="상품 설명")
    price: Decimal = Field(..., description="가격")
    stock_quantity: int = Field(..., description="재고 수량")
    category: str = Field(..., description="카테고리")
    brand: str = Field(..., description="브랜드")
    material: Optional[str] = Field(None, description="소재")
    gender: Gender = Field(..., description="대상 성별")
    season: Optional[Season] = Field(None, description="판매 시즌")
    image_urls: list[str] = Field(default_factory=list)
    available_sizes: list[str] = Field(default_factory=list)
    available_colors: list[str] = Field(default_factory=list)
    discount_percentage: Optional[Decimal] = Field(None, description="할인율")
    view_count: int = Field(..., description="조회수")
    sku: str = Field(..., description="SKU")
    active: bool = Field(..., description="활성 여부")
    deleted: bool = Field(..., description="소프트 삭제 여부")
    created_at: datetime = Field(..., description="생성 일시")
    updated_at: datetime = Field(..., description="수정 일시")
    deleted_at: Optional[datetime] = Field(None, description="삭제 일시")
    version: int = Field(..., description="낙관적 락 버전")


class ProductPage(BaseModel):
    """
    페이지 단위 상품 목록 응답 스키마

    Example:
        {
            "items": [...],
            "page": 0,
            "size": 10,
            "total_elements": 42,
            "total_pages": 5
        }
    """

    items: list[ProductResponse] = Field(default_factory=list)
    page: int = Field(..., description="현재 페이지 (0부터 시작)")
    size: int = Field(..., description="페이지 크기")
    total_elements: int = Field(..., description="전체 상품 수")
    total_pages: int = Field(..., description="전체 페이지 수")


class StockCheckResponse(BaseModel):
    """
    재고 확인 응답 스키마

    Example:
        {
            "product_id": "2f1c...",
            "requested": 2,
            "available": 10
        }
    """

    product_id: str = Field(..., description="상품 ID")
    requested: int = Field(..., description="요청 수량")
    available: int = Field(..., description="현재 재고")
