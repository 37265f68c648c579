"""
Product 모델
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    Integer,
    Numeric,
    String,
    Text,
)

from catalog.db.database import Base
from catalog.models.enums import Gender, Season

SKU_PLACEHOLDER_PREFIX = "XXX"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_product_id() -> str:
    return str(uuid.uuid4())


def generate_sku(category: str | None) -> str:
    """
    카테고리 기반 SKU 생성

    카테고리 앞 3글자 + "-" + 8자리 랜덤 문자열을 대문자로 만듭니다.
    카테고리가 비어 있으면 "XXX"를 사용합니다.

    Example:
        >>> generate_sku("Outerwear")[:4]
        'OUT-'
        >>> generate_sku("")[:4]
        'XXX-'
    """
    prefix = category[:3] if category else SKU_PLACEHOLDER_PREFIX
    suffix = uuid.uuid4().hex[:8]
    return f"{prefix}-{suffix}".upper()


def unique_labels(values) -> list[str]:
    """순서를 유지하면서 중복을 제거합니다 (이미지 URL, 사이즈, 색상은 집합 의미)."""
    if not values:
        return []
    return list(dict.fromkeys(values))


class Product(Base):
    """
    상품 모델

    Attributes:
        id: 상품 고유 ID (UUID 문자열, 생성 후 변경 불가)
        name: 상품명 (Not Null)
        description: 상품 설명 (Nullable)
        price: 가격 (0 이상)
        stock_quantity: 재고 수량 (0 이상)
        category / brand / material: 분류 정보
        gender / season: 대상 성별, 판매 시즌
        image_urls / available_sizes / available_colors: 중복 없는 문자열 목록
        discount_percentage: 할인율 (Nullable, 0 이상)
        view_count: 조회수 (단조 증가)
        sku: 재고 관리 코드 (Unique, 생성 후 변경 불가)
        active: 기본 목록 노출 여부
        deleted: 소프트 삭제 여부 (한 번 True가 되면 되돌릴 수 없음)
        deleted_at: 삭제 일시
        version: 낙관적 락 버전 (쓰기 성공마다 1씩 증가)
    """

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_product_id)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    category = Column(String(100), nullable=False, default="", index=True)
    brand = Column(String(100), nullable=False, default="", index=True)
    material = Column(String(100), nullable=True)
    gender = Column(Enum(Gender), nullable=False)
    season = Column(Enum(Season), nullable=True)
    image_urls = Column(JSON, nullable=False, default=list)
    available_sizes = Column(JSON, nullable=False, default=list)
    available_colors = Column(JSON, nullable=False, default=list)
    discount_percentage = Column(Numeric(5, 2), nullable=True)
    view_count = Column(Integer, nullable=False, default=0)
    sku = Column(String(32), nullable=False, unique=True, index=True)
    active = Column(Boolean, nullable=False, default=True)
    deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    version = Column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        """Product 객체의 문자열 표현"""
        return (
            f"<Product(id={self.id}, sku='{self.sku}', "
            f"name='{self.name}', version={self.version})>"
        )

    def __str__(self) -> str:
        return f"Product: {self.name}"
