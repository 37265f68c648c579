"""
커스텀 예외 정의

카탈로그 서비스 전역에서 사용되는 커스텀 예외 클래스들입니다.
캐시 장애를 제외한 모든 오류는 호출자에게 그대로 전달됩니다.
"""

from typing import Optional


class ProductNotFoundException(Exception):
    """
    상품을 찾을 수 없을 때 발생하는 예외

    HTTP Status Code: 404 Not Found
    """

    def __init__(self, product_id: str):
        self.product_id = product_id
        self.message = f"Product with id {product_id} not found"
        super().__init__(self.message)


class VersionConflictException(Exception):
    """
    낙관적 락 검증 실패 시 발생하는 예외

    다른 요청이 먼저 상품을 수정하여 버전이 달라진 경우입니다.
    호출자는 최신 데이터를 다시 조회한 뒤 재시도해야 합니다.

    HTTP Status Code: 409 Conflict
    """

    def __init__(
        self,
        product_id: str,
        expected_version: int,
        current_version: Optional[int] = None,
    ):
        self.product_id = product_id
        self.expected_version = expected_version
        self.current_version = current_version
        self.message = (
            f"Product {product_id} was modified concurrently: "
            f"expected version {expected_version}, current version {current_version}"
        )
        super().__init__(self.message)


class InsufficientStockException(Exception):
    """
    재고 부족 시 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        self.message = (
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )
        super().__init__(self.message)


class ProductValidationException(Exception):
    """
    잘못된 입력(페이지 번호, 정렬 키, 수량 등)으로 요청했을 때 발생하는 예외

    HTTP Status Code: 400 Bad Request
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = f"Invalid value for '{field}': {message}"
        super().__init__(self.message)


class DuplicateSkuException(Exception):
    """
    이미 사용 중인 SKU로 상품을 생성하려 할 때 발생하는 예외

    HTTP Status Code: 409 Conflict
    """

    def __init__(self, sku: str):
        self.sku = sku
        self.message = f"Product with SKU '{sku}' already exists"
        super().__init__(self.message)


class StoreUnavailableException(Exception):
    """
    데이터베이스에 접근할 수 없을 때 발생하는 예외

    HTTP Status Code: 503 Service Unavailable
    """

    def __init__(self, message: str = "Catalog store is unavailable"):
        self.message = message
        super().__init__(self.message)
