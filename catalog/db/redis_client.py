"""
Redis 클라이언트 연결 관리

Redis는 조회 결과 캐시로만 사용합니다. 캐시가 꺼져 있으면 클라이언트 대신 None을 넘깁니다.
"""

from typing import Generator, Optional

from fastapi import Depends
from redis import Redis

from catalog.core.config import Settings, get_settings


def create_redis_client(settings: Settings) -> Redis:
    """
    Redis 클라이언트 생성

    소켓 타임아웃을 짧게 두어 Redis 장애 시 요청이 DB로 빠르게 우회되도록 합니다.

    Args:
        settings: 애플리케이션 설정 객체

    Returns:
        Redis 클라이언트 인스턴스
    """
    return Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        password=settings.redis_password if settings.redis_password else None,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds,
    )


def get_redis_client(
    settings: Settings = Depends(get_settings),
) -> Generator[Optional[Redis], None, None]:
    """
    FastAPI 의존성 주입용 Redis 클라이언트 생성 함수

    Args:
        settings: 애플리케이션 설정 (의존성 주입)

    Yields:
        Redis 클라이언트 인스턴스, 캐시 비활성화 시 None
    """
    if not settings.cache_enabled:
        yield None
        return

    client = create_redis_client(settings)
    try:
        yield client
    finally:
        client.close()
