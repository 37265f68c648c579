"""
CacheService 테스트

캐시 적중/미스, 손상된 값 처리, 전체 무효화, Redis 장애 시 우회를 검증합니다.
"""

from unittest.mock import MagicMock

import pytest
from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from catalog.schemas.product import StockCheckResponse
from catalog.services.cache_service import CacheService


def make_value(available: int = 3) -> StockCheckResponse:
    return StockCheckResponse(product_id="p1", requested=1, available=available)


class CountingLoader:
    """호출 횟수를 세는 loader"""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


def broken_redis() -> MagicMock:
    """모든 명령이 연결 오류를 내는 Redis"""
    client = MagicMock(spec=Redis)
    error = RedisConnectionError("Connection refused")
    client.get.side_effect = error
    client.set.side_effect = error
    client.delete.side_effect = error
    client.scan_iter.side_effect = error
    return client


class TestGetOrLoad:
    """Test: read-through 조회"""

    def test_miss_then_hit(self, redis_client: Redis):
        """Test: 첫 조회는 loader 호출 후 저장, 두 번째는 캐시 적중"""
        loader = CountingLoader(make_value())

        first = CacheService.get_or_load("product:p1", loader, StockCheckResponse, redis_client)
        second = CacheService.get_or_load("product:p1", loader, StockCheckResponse, redis_client)

        assert first == second == make_value()
        assert loader.calls == 1
        assert redis_client.get("product:p1") is not None

    def test_no_expiry(self, redis_client: Redis):
        """Test: 캐시 값은 만료 시간이 없음 (쓰기 시 무효화만)"""
        CacheService.get_or_load(
            "product:p1", CountingLoader(make_value()), StockCheckResponse, redis_client
        )

        assert redis_client.ttl("product:p1") == -1

    def test_invalid_entry_is_replaced(self, redis_client: Redis):
        """Test: 역직렬화할 수 없는 값은 지우고 다시 계산"""
        redis_client.set("product:p1", "not-json")
        loader = CountingLoader(make_value())

        value = CacheService.get_or_load("product:p1", loader, StockCheckResponse, redis_client)

        assert value == make_value()
        assert loader.calls == 1
        assert StockCheckResponse.model_validate_json(redis_client.get("product:p1")) == value

    def test_none_redis_calls_loader_every_time(self):
        """Test: 캐시 비활성화(None) 시 매번 loader 호출"""
        loader = CountingLoader(make_value())

        CacheService.get_or_load("product:p1", loader, StockCheckResponse, None)
        CacheService.get_or_load("product:p1", loader, StockCheckResponse, None)

        assert loader.calls == 2

    def test_redis_failure_falls_back_to_loader(self):
        """Test: Redis 장애 시 예외 없이 loader 결과 반환"""
        loader = CountingLoader(make_value())

        value = CacheService.get_or_load(
            "product:p1", loader, StockCheckResponse, broken_redis()
        )

        assert value == make_value()
        assert loader.calls == 1

    def test_loader_errors_propagate(self, redis_client: Redis):
        """Test: loader 예외는 그대로 전달되고 캐시에 저장되지 않음"""

        def failing_loader():
            raise LookupError("missing")

        with pytest.raises(LookupError):
            CacheService.get_or_load("product:p1", failing_loader, StockCheckResponse, redis_client)

        assert redis_client.get("product:p1") is None


class TestInvalidation:
    """Test: 캐시 무효화"""

    def test_invalidate_all_removes_product_keys_only(self, redis_client: Redis):
        """Test: product:*, products:* 키만 삭제하고 다른 키는 유지"""
        redis_client.set("product:1", "a")
        redis_client.set("products:all:false:page:0:size:10:sort:id:desc", "b")
        redis_client.set("products:search:{}:page:0:size:10:sort:id:desc", "c")
        redis_client.set("session:42", "keep")

        deleted = CacheService.invalidate_all(redis_client)

        assert deleted == 3
        assert redis_client.keys("product*") == []
        assert redis_client.get("session:42") == "keep"

    def test_invalidate_all_handles_many_keys(self, redis_client: Redis):
        """Test: 배치 크기보다 많은 키도 모두 삭제"""
        for i in range(1200):
            redis_client.set(f"products:category:c{i}:page:0:size:10", "x")

        assert CacheService.invalidate_all(redis_client) == 1200
        assert redis_client.dbsize() == 0

    def test_evict_single_key(self, redis_client: Redis):
        """Test: evict는 지정한 키만 삭제"""
        redis_client.set("product:1", "a")
        redis_client.set("product:2", "b")

        CacheService.evict("product:1", redis_client)

        assert redis_client.get("product:1") is None
        assert redis_client.get("product:2") == "b"

    def test_redis_failure_is_not_raised(self):
        """Test: Redis 장애 시 무효화/삭제는 예외 없이 넘어감"""
        client = broken_redis()

        assert CacheService.invalidate_all(client) == 0
        CacheService.evict("product:1", client)

    def test_none_redis_is_noop(self):
        """Test: 캐시 비활성화 시 무효화는 아무것도 하지 않음"""
        assert CacheService.invalidate_all(None) == 0
        CacheService.evict("product:1", None)
