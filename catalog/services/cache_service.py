"""Redis 기반 조회 캐시 서비스."""

from typing import Callable, Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError
from redis import Redis
from redis.exceptions import RedisError

from catalog.services.cache_keys import PRODUCT_KEY_PATTERN, PRODUCTS_KEY_PATTERN

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)

# SCAN 한 번에 확인할 키 개수 / DEL 한 번에 지울 키 개수
SCAN_BATCH_SIZE = 500


class CacheService:
    """
    조회 결과 캐시 (write-through-invalidate)

    - 조회: 캐시 적중 시 그대로 반환, 미스 시 loader로 계산 후 저장 (만료 없음)
    - 변경: 성공한 쓰기 이후 관련 키 삭제
    - Redis 장애: 경고 로그만 남기고 DB 조회로 우회 (캐시는 정합성의 필수 요소가 아님)

    redis 인자가 None이면 캐시를 사용하지 않습니다.
    """

    @staticmethod
    def get_or_load(
        key: str,
        loader: Callable[[], T],
        model: type[T],
        redis: Optional[Redis],
    ) -> T:
        """
        캐시에서 조회하고, 없으면 loader 결과를 저장 후 반환합니다.

        Args:
            key: 캐시 키
            loader: 캐시 미스 시 호출할 함수 (DB 조회)
            model: 캐시 값을 역직렬화할 Pydantic 모델
            redis: Redis 클라이언트 (None이면 캐시 미사용)

        Returns:
            model 인스턴스
        """
        if redis is None:
            return loader()

        cached = CacheService._read(key, redis)
        if cached is not None:
            try:
                value = model.model_validate_json(cached)
                logger.debug("cache_hit", key=key)
                return value
            except ValidationError:
                # 스키마가 바뀌었거나 손상된 값: 지우고 다시 계산
                logger.warning("cache_entry_invalid", key=key)
                CacheService.evict(key, redis)

        logger.debug("cache_miss", key=key)
        value = loader()
        CacheService._write(key, value, redis)
        return value

    @staticmethod
    def evict(key: str, redis: Optional[Redis]) -> None:
        """
        단일 키를 삭제합니다.

        Args:
            key: 삭제할 캐시 키
            redis: Redis 클라이언트
        """
        if redis is None:
            return
        try:
            redis.delete(key)
        except RedisError as e:
            logger.warning("cache_evict_failed", key=key, error=str(e))

    @staticmethod
    def invalidate_all(redis: Optional[Redis]) -> int:
        """
        모든 상품 캐시(product:*, products:*)를 삭제합니다.

        상품 하나가 바뀌어도 어떤 목록/검색 결과에 포함될지 알 수 없으므로 전부 지웁니다.

        Args:
            redis: Redis 클라이언트

        Returns:
            삭제한 키 개수 (Redis 장애 시 0)
        """
        if redis is None:
            return 0

        deleted = 0
        try:
            # SCAN 도중 삭제하면 커서가 밀릴 수 있으므로 키를 모두 모은 뒤 삭제
            keys = []
            for pattern in (PRODUCT_KEY_PATTERN, PRODUCTS_KEY_PATTERN):
                keys.extend(redis.scan_iter(match=pattern, count=SCAN_BATCH_SIZE))
            for start in range(0, len(keys), SCAN_BATCH_SIZE):
                deleted += redis.delete(*keys[start : start + SCAN_BATCH_SIZE])
        except RedisError as e:
            logger.warning("cache_invalidate_failed", error=str(e))
            return deleted

        logger.debug("cache_invalidated", deleted=deleted)
        return deleted

    @staticmethod
    def _read(key: str, redis: Redis) -> Optional[str]:
        try:
            return redis.get(key)
        except RedisError as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            return None

    @staticmethod
    def _write(key: str, value: BaseModel, redis: Redis) -> None:
        try:
            redis.set(key, value.model_dump_json())
        except RedisError as e:
            logger.warning("cache_write_failed", key=key, error=str(e))
