"""상품 카탈로그 서비스."""

import math
from typing import Optional

import structlog
from redis import Redis
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog.core.config import Settings
from catalog.core.exceptions import (
    DuplicateSkuException,
    InsufficientStockException,
    ProductNotFoundException,
    ProductValidationException,
    VersionConflictException,
)
from catalog.models.product import (
    Product,
    generate_sku,
    new_product_id,
    unique_labels,
    utcnow,
)
from catalog.query.compiler import compile_filter
from catalog.repositories.product_repository import ProductRepository
from catalog.schemas.product import (
    ProductCreateRequest,
    ProductFilter,
    ProductPage,
    ProductResponse,
    ProductUpdateRequest,
    StockCheckResponse,
)
from catalog.services import cache_keys
from catalog.services.cache_service import CacheService

logger = structlog.get_logger()

DEFAULT_SORT_BY = "id"
DEFAULT_SORT_DIRECTION = "desc"

# 수정 요청에서 None으로 지울 수 없는 필드
NON_NULLABLE_FIELDS = frozenset(
    {"name", "price", "stock_quantity", "category", "brand", "gender", "active"}
)
LABEL_FIELDS = ("image_urls", "available_sizes", "available_colors")


class ProductService:
    """
    상품 생성/수정/조회 서비스

    - 조회는 모두 CacheService를 거칩니다 (캐시 미스 시 필터 컴파일 + DB 조회).
    - 쓰기는 모두 버전 검증(ProductRepository.save) 후 캐시를 무효화합니다.
    """

    @staticmethod
    def create_product(
        request: ProductCreateRequest,
        db: Session,
        redis: Optional[Redis],
        settings: Settings,
    ) -> ProductResponse:
        """
        상품을 생성합니다.

        SKU가 없으면 카테고리 기반으로 생성하며, 이미 사용 중이면 다시 생성합니다.

        Args:
            request: 상품 생성 정보
            db: DB 세션
            redis: Redis 클라이언트 (None이면 캐시 미사용)
            settings: 애플리케이션 설정

        Returns:
            생성된 상품 정보

        Raises:
            DuplicateSkuException: 지정한 SKU가 이미 존재하거나 SKU 생성에 계속 실패한 경우
        """
        sku = ProductService._resolve_sku(request, db, settings)

        product = Product(
            id=new_product_id(),
            name=request.name,
            description=request.description,
            price=request.price,
            stock_quantity=request.stock_quantity,
            category=request.category,
            brand=request.brand,
            material=request.material,
            gender=request.gender,
            season=request.season,
            image_urls=unique_labels(request.image_urls),
            available_sizes=unique_labels(request.available_sizes),
            available_colors=unique_labels(request.available_colors),
            discount_percentage=request.discount_percentage,
            view_count=0,
            sku=sku,
            active=True,
            deleted=False,
        )

        try:
            product = ProductRepository.add(product, db)
        except IntegrityError:
            # 동시에 같은 SKU로 생성된 경우 (유니크 제약 위반)
            db.rollback()
            raise DuplicateSkuException(sku)

        CacheService.invalidate_all(redis)
        logger.info("product_created", product_id=product.id, sku=product.sku)
        return ProductResponse.model_validate(product)

    @staticmethod
    def update_product(
        product_id: str,
        request: ProductUpdateRequest,
        db: Session,
        redis: Optional[Redis],
        expected_version: Optional[int] = None,
    ) -> ProductResponse:
        """
        상품을 수정합니다 (낙관적 락).

        현재 버전을 읽고, 변경 후 같은 버전일 때만 저장합니다.
        expected_version을 주면 읽은 버전과 다를 때 저장 전에 바로 충돌로 처리합니다.

        Args:
            product_id: 상품 ID
            request: 변경할 필드 (전달된 필드만 반영)
            db: DB 세션
            redis: Redis 클라이언트
            expected_version: 클라이언트가 알고 있는 버전 (선택)

        Returns:
            수정된 상품 정보 (version + 1)

        Raises:
            ProductNotFoundException: 상품이 없는 경우
            VersionConflictException: 다른 요청이 먼저 수정한 경우
            ProductValidationException: 필수 필드를 비우거나 삭제된 상품을 활성화하려는 경우
        """
        product = ProductService._get_product_entity(product_id, db)
        read_version = product.version

        if expected_version is not None and expected_version != read_version:
            raise VersionConflictException(product_id, expected_version, read_version)

        changes = request.model_dump(exclude_unset=True, exclude={"version"})
        for field, value in changes.items():
            if value is None and field in NON_NULLABLE_FIELDS:
                raise ProductValidationException(field, "must not be null")
        if changes.get("active") is True and product.deleted:
            raise ProductValidationException(
                "active", "a deleted product cannot be re-activated"
            )

        for field, value in changes.items():
            if field in LABEL_FIELDS:
                value = unique_labels(value)
            setattr(product, field, value)

        saved = ProductRepository.save(product, read_version, db)
        CacheService.invalidate_all(redis)

        logger.info("product_updated", product_id=product_id, version=saved.version)
        return ProductResponse.model_validate(saved)

    @staticmethod
    def get_product(
        product_id: str, db: Session, redis: Optional[Redis]
    ) -> ProductResponse:
        """
        상품을 조회합니다 (삭제된 상품도 deleted=True 상태로 반환).

        Raises:
            ProductNotFoundException: 상품이 없는 경우
        """

        def load() -> ProductResponse:
            product = ProductService._get_product_entity(product_id, db)
            return ProductResponse.model_validate(product)

        return CacheService.get_or_load(
            cache_keys.product_key(product_id), load, ProductResponse, redis
        )

    @staticmethod
    def list_products(
        db: Session,
        redis: Optional[Redis],
        settings: Settings,
        include_inactive: bool = False,
        page: int = 0,
        size: Optional[int] = None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_direction: str = DEFAULT_SORT_DIRECTION,
    ) -> ProductPage:
        """
        전체 상품 목록을 조회합니다 (기본은 활성 상품만).

        Returns:
            ProductPage
        """
        size = ProductService._validate_paging(page, size, settings)
        product_filter = ProductFilter(include_inactive=include_inactive)
        key = cache_keys.list_all_key(include_inactive, page, size, sort_by, sort_direction)

        return CacheService.get_or_load(
            key,
            lambda: ProductService._query_page(
                product_filter, page, size, sort_by, sort_direction, db
            ),
            ProductPage,
            redis,
        )

    @staticmethod
    def search_products(
        product_filter: ProductFilter,
        db: Session,
        redis: Optional[Redis],
        settings: Settings,
        page: int = 0,
        size: Optional[int] = None,
        sort_by: str = DEFAULT_SORT_BY,
        sort_direction: str = DEFAULT_SORT_DIRECTION,
    ) -> ProductPage:
        """
        필터 조건으로 상품을 검색합니다.

        Args:
            product_filter: 검색 필터
            db: DB 세션
            redis: Redis 클라이언트
            settings: 애플리케이션 설정
            page: 페이지 번호 (0부터 시작)
            size: 페이지 크기 (None이면 기본값)
            sort_by: 정렬 컬럼
            sort_direction: "asc" 또는 "desc"

        Returns:
            ProductPage
        """
        size = ProductService._validate_paging(page, size, settings)
        key = cache_keys.search_key(product_filter, page, size, sort_by, sort_direction)

        return CacheService.get_or_load(
            key,
            lambda: ProductService._query_page(
                product_filter, page, size, sort_by, sort_direction, db
            ),
            ProductPage,
            redis,
        )

    @staticmethod
    def list_by_category(
        category: str,
        db: Session,
        redis: Optional[Redis],
        settings: Settings,
        page: int = 0,
        size: Optional[int] = None,
    ) -> ProductPage:
        """카테고리별 활성 상품 목록"""
        size = ProductService._validate_paging(page, size, settings)
        product_filter = ProductFilter(category=category)

        return CacheService.get_or_load(
            cache_keys.category_key(category, page, size),
            lambda: ProductService._query_page(
                product_filter, page, size, DEFAULT_SORT_BY, DEFAULT_SORT_DIRECTION, db
            ),
            ProductPage,
            redis,
        )

    @staticmethod
    def list_by_brand(
        brand: str,
        db: Session,
        redis: Optional[Redis],
        settings: Settings,
        page: int = 0,
        size: Optional[int] = None,
    ) -> ProductPage:
        """브랜드별 활성 상품 목록"""
        size = ProductService._validate_paging(page, size, settings)
        product_filter = ProductFilter(brand=brand)

        return CacheService.get_or_load(
            cache_keys.brand_key(brand, page, size),
            lambda: ProductService._query_page(
                product_filter, page, size, DEFAULT_SORT_BY, DEFAULT_SORT_DIRECTION, db
            ),
            ProductPage,
            redis,
        )

    @staticmethod
    def delete_product(product_id: str, db: Session, redis: Optional[Redis]) -> None:
        """
        상품을 소프트 삭제합니다.

        active=False, deleted=True, deleted_at=현재 시각으로 변경하며 행은 지우지 않습니다.
        이미 삭제된 상품이면 아무것도 하지 않습니다 (멱등).

        Raises:
            ProductNotFoundException: 상품이 없는 경우
            VersionConflictException: 삭제 도중 다른 요청이 먼저 수정한 경우
        """
        product = ProductService._get_product_entity(product_id, db)
        if product.deleted:
            logger.debug("product_already_deleted", product_id=product_id)
            return

        read_version = product.version
        product.deleted = True
        product.active = False
        product.deleted_at = utcnow()

        ProductRepository.save(product, read_version, db)
        CacheService.invalidate_all(redis)
        logger.info("product_deleted", product_id=product_id)

    @staticmethod
    def increment_view_count(
        product_id: str, db: Session, redis: Optional[Redis]
    ) -> ProductResponse:
        """
        조회수를 1 증가시킵니다.

        일반 수정과 같은 버전 검증을 거치므로 동시 요청이 몰리면 일부는
        VersionConflictException으로 거절될 수 있습니다 (정확한 카운터가 아님).

        Raises:
            ProductNotFoundException: 상품이 없는 경우
            VersionConflictException: 다른 요청이 먼저 수정한 경우
        """
        product = ProductService._get_product_entity(product_id, db)
        read_version = product.version
        product.view_count = product.view_count + 1

        saved = ProductRepository.save(product, read_version, db)
        CacheService.invalidate_all(redis)

        logger.debug("product_viewed", product_id=product_id, view_count=saved.view_count)
        return ProductResponse.model_validate(saved)

    @staticmethod
    def replace_images(
        product_id: str, image_urls: list[str], db: Session, redis: Optional[Redis]
    ) -> None:
        """
        상품 이미지 목록을 교체합니다.

        단건 조회 캐시(product:<id>)만 삭제합니다. 목록/검색 캐시는 유지됩니다.

        Raises:
            ProductNotFoundException: 상품이 없는 경우
            VersionConflictException: 다른 요청이 먼저 수정한 경우
        """
        product = ProductService._get_product_entity(product_id, db)
        read_version = product.version
        product.image_urls = unique_labels(image_urls)

        ProductRepository.save(product, read_version, db)
        CacheService.evict(cache_keys.product_key(product_id), redis)
        logger.info("product_images_replaced", product_id=product_id, count=len(image_urls))

    @staticmethod
    def check_stock(
        product_id: str, requested_quantity: int, db: Session
    ) -> StockCheckResponse:
        """
        요청 수량만큼 재고가 있는지 확인합니다 (캐시를 거치지 않음).

        Raises:
            ProductValidationException: 요청 수량이 1 미만인 경우
            ProductNotFoundException: 상품이 없는 경우
            InsufficientStockException: 재고가 부족한 경우
        """
        if requested_quantity < 1:
            raise ProductValidationException("quantity", "must be at least 1")

        product = ProductService._get_product_entity(product_id, db)
        if product.stock_quantity < requested_quantity:
            raise InsufficientStockException(
                product_id, requested_quantity, product.stock_quantity
            )

        return StockCheckResponse(
            product_id=product_id,
            requested=requested_quantity,
            available=product.stock_quantity,
        )

    @staticmethod
    def validate_product_exists(product_id: str, db: Session) -> None:
        """
        상품 존재 여부를 검증합니다.

        Raises:
            ProductNotFoundException: 상품이 없는 경우
        """
        ProductService._get_product_entity(product_id, db)

    @staticmethod
    def _get_product_entity(product_id: str, db: Session) -> Product:
        product = ProductRepository.get(product_id, db)
        if product is None:
            raise ProductNotFoundException(product_id)
        return product

    @staticmethod
    def _resolve_sku(
        request: ProductCreateRequest, db: Session, settings: Settings
    ) -> str:
        if request.sku:
            if ProductRepository.exists_by_sku(request.sku, db):
                raise DuplicateSkuException(request.sku)
            return request.sku

        candidate = generate_sku(request.category)
        for _ in range(settings.sku_generation_attempts):
            if not ProductRepository.exists_by_sku(candidate, db):
                return candidate
            candidate = generate_sku(request.category)
        raise DuplicateSkuException(candidate)

    @staticmethod
    def _validate_paging(page: int, size: Optional[int], settings: Settings) -> int:
        """
        페이지 파라미터를 검증하고 실제 페이지 크기를 반환합니다.

        Raises:
            ProductValidationException: page < 0, size < 1 또는 size > max_page_size
        """
        if size is None:
            size = settings.default_page_size
        if page < 0:
            raise ProductValidationException("page", "must be zero or greater")
        if size < 1 or size > settings.max_page_size:
            raise ProductValidationException(
                "size", f"must be between 1 and {settings.max_page_size}"
            )
        return size

    @staticmethod
    def _query_page(
        product_filter: ProductFilter,
        page: int,
        size: int,
        sort_by: str,
        sort_direction: str,
        db: Session,
    ) -> ProductPage:
        predicate = compile_filter(product_filter)
        items, total = ProductRepository.query(
            predicate, page, size, sort_by, sort_direction, db
        )
        return ProductPage(
            items=[ProductResponse.model_validate(item) for item in items],
            page=page,
            size=size,
            total_elements=total,
            total_pages=math.ceil(total / size) if total else 0,
        )
