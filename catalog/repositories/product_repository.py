"""
상품 저장소 (Catalog Store)

SQLAlchemy 세션 위에서 상품 조회/저장/검색을 담당합니다.
save()는 버전 비교 후 쓰기(compare-and-swap)로 낙관적 락을 구현합니다.
"""

from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from catalog.core.exceptions import (
    ProductNotFoundException,
    ProductValidationException,
    StoreUnavailableException,
    VersionConflictException,
)
from catalog.models.product import Product, utcnow
from catalog.query.predicates import Predicate
from catalog.query.sql import to_sql_clause

# save()가 덮어쓰는 컬럼 (id, sku, created_at, version은 제외)
MUTABLE_FIELDS = (
    "name",
    "description",
    "price",
    "stock_quantity",
    "category",
    "brand",
    "material",
    "gender",
    "season",
    "image_urls",
    "available_sizes",
    "available_colors",
    "discount_percentage",
    "view_count",
    "active",
    "deleted",
    "deleted_at",
)

SORTABLE_FIELDS = frozenset(
    {
        "id",
        "name",
        "price",
        "stock_quantity",
        "category",
        "brand",
        "created_at",
        "updated_at",
        "view_count",
        "discount_percentage",
    }
)

SORT_DIRECTIONS = frozenset({"asc", "desc"})


class ProductRepository:
    """상품 영속성 계층"""

    @staticmethod
    def get(product_id: str, db: Session) -> Optional[Product]:
        """
        ID로 상품을 조회합니다 (삭제된 상품 포함).

        Args:
            product_id: 상품 ID
            db: DB 세션

        Returns:
            Product 객체 또는 None

        Raises:
            StoreUnavailableException: DB 접근 실패
        """
        try:
            return db.get(Product, product_id)
        except OperationalError as e:
            raise StoreUnavailableException(str(e.orig)) from e

    @staticmethod
    def exists_by_sku(sku: str, db: Session) -> bool:
        """SKU 사용 여부를 확인합니다."""
        try:
            stmt = select(Product.id).where(Product.sku == sku).limit(1)
            return db.execute(stmt).first() is not None
        except OperationalError as e:
            raise StoreUnavailableException(str(e.orig)) from e

    @staticmethod
    def add(product: Product, db: Session) -> Product:
        """
        새 상품을 저장합니다 (version = 1).

        Args:
            product: 저장할 Product 객체 (id, sku가 채워져 있어야 함)
            db: DB 세션

        Returns:
            저장된 Product 객체
        """
        product.version = 1
        try:
            db.add(product)
            db.commit()
        except OperationalError as e:
            db.rollback()
            raise StoreUnavailableException(str(e.orig)) from e
        db.refresh(product)
        return product

    @staticmethod
    def save(product: Product, expected_version: int, db: Session) -> Product:
        """
        버전이 일치할 때만 상품을 갱신합니다 (compare-and-swap).

        UPDATE products SET ..., version = :expected + 1
        WHERE id = :id AND version = :expected

        갱신된 행이 없으면 상품이 삭제(물리)되었거나 다른 요청이 먼저 수정한 것입니다.
        락을 잡지 않으므로 대기하지 않고 즉시 충돌을 반환합니다.

        Args:
            product: 변경 내용이 반영된 Product 객체
            expected_version: 변경 전 읽어 둔 버전
            db: DB 세션

        Returns:
            갱신 후 DB에서 다시 읽은 Product 객체

        Raises:
            ProductNotFoundException: 상품이 존재하지 않는 경우
            VersionConflictException: 저장된 버전이 expected_version과 다른 경우
            StoreUnavailableException: DB 접근 실패
        """
        product_id = product.id
        values = {field: getattr(product, field) for field in MUTABLE_FIELDS}
        values["updated_at"] = utcnow()
        values["version"] = expected_version + 1

        # 세션의 변경 추적에서 분리하여 commit 시 별도 UPDATE가 나가지 않게 함
        if product in db:
            db.expunge(product)

        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.version == expected_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        try:
            result = db.execute(stmt)
            if result.rowcount != 1:
                db.rollback()
                current = db.get(Product, product_id)
                if current is None:
                    raise ProductNotFoundException(product_id)
                raise VersionConflictException(
                    product_id, expected_version, current.version
                )
            db.commit()
        except OperationalError as e:
            db.rollback()
            raise StoreUnavailableException(str(e.orig)) from e

        saved = db.get(Product, product_id, populate_existing=True)
        if saved is None:
            raise ProductNotFoundException(product_id)
        return saved

    @staticmethod
    def query(
        predicate: Predicate,
        page: int,
        size: int,
        sort_by: str,
        sort_direction: str,
        db: Session,
    ) -> tuple[list[Product], int]:
        """
        조건식에 맞는 상품을 페이지 단위로 조회합니다.

        정렬 키가 같은 행은 id로 순서를 고정합니다.

        Args:
            predicate: compile_filter()가 만든 조건식
            page: 페이지 번호 (0부터 시작)
            size: 페이지 크기
            sort_by: 정렬 컬럼
            sort_direction: "asc" 또는 "desc"
            db: DB 세션

        Returns:
            (해당 페이지 상품 목록, 조건에 맞는 전체 상품 수)

        Raises:
            ProductValidationException: 정렬 키/방향이 허용되지 않는 경우
            StoreUnavailableException: DB 접근 실패
        """
        if sort_by not in SORTABLE_FIELDS:
            raise ProductValidationException("sort_by", f"cannot sort by '{sort_by}'")
        direction = sort_direction.lower()
        if direction not in SORT_DIRECTIONS:
            raise ProductValidationException(
                "sort_direction", "must be 'asc' or 'desc'"
            )

        where_clause = to_sql_clause(predicate)
        sort_column = getattr(Product, sort_by)
        order = sort_column.asc() if direction == "asc" else sort_column.desc()
        tie_break = Product.id.asc() if direction == "asc" else Product.id.desc()

        stmt = (
            select(Product)
            .where(where_clause)
            .order_by(order, tie_break)
            .offset(page * size)
            .limit(size)
        )
        count_stmt = select(func.count()).select_from(Product).where(where_clause)

        try:
            items = list(db.scalars(stmt).all())
            total = db.execute(count_stmt).scalar_one()
        except OperationalError as e:
            raise StoreUnavailableException(str(e.orig)) from e

        return items, total
