"""
pytest 픽스처 정의
"""

from decimal import Decimal

import fakeredis
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

import catalog.models  # noqa: F401  (테이블 등록)
from catalog.core.config import Settings
from catalog.db.database import Base, register_sqlite_functions
from catalog.models import Gender
from catalog.schemas.product import ProductCreateRequest


@pytest.fixture(scope="session")
def settings():
    """테스트용 설정 객체 픽스처"""
    return Settings(
        redis_host="localhost",
        redis_port=6379,
        redis_db=1,  # 테스트용 DB 프로덕션과 분리
        redis_password="",
        cache_enabled=True,
        database_url="sqlite:///:memory:",
        default_page_size=10,
        max_page_size=100,
        sku_generation_attempts=5,
    )


@pytest.fixture(scope="function")
def redis_client():
    """
    테스트용 Redis 클라이언트 픽스처

    fakeredis로 Redis 서버 없이 캐시 동작을 검증합니다.
    각 테스트 전후로 데이터를 비웁니다.
    """
    client = fakeredis.FakeRedis(decode_responses=True)
    client.flushall()

    yield client

    client.flushall()
    client.close()


@pytest.fixture(scope="function")
def test_db() -> Session:
    """
    테스트용 in-memory SQLite 데이터베이스 세션 픽스처

    각 테스트 함수마다 새로운 데이터베이스를 생성합니다.
    TestClient가 다른 스레드에서 요청을 처리해도 같은 DB를 보도록 StaticPool을 사용합니다.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(engine)

    # 모든 테이블 생성
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def file_session_factory(tmp_path):
    """
    파일 기반 SQLite 세션 팩토리 픽스처

    여러 세션(스레드)이 각자 연결을 갖고 같은 DB에 동시에 쓰는 상황을 재현합니다.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'catalog.db'}",
        connect_args={"check_same_thread": False},
    )
    register_sqlite_functions(engine)
    Base.metadata.create_all(bind=engine)

    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)

    engine.dispose()


@pytest.fixture
def make_request():
    """상품 생성 요청 팩토리 픽스처 (기본값 + 필요한 필드만 덮어쓰기)"""

    def _make(**overrides) -> ProductCreateRequest:
        data = {
            "name": "Winter Jacket",
            "description": "Warm down jacket",
            "price": Decimal("129000"),
            "stock_quantity": 10,
            "category": "Outerwear",
            "brand": "Northwind",
            "gender": Gender.UNISEX,
        }
        data.update(overrides)
        return ProductCreateRequest(**data)

    return _make
