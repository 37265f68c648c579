"""
SQLAlchemy 데이터베이스 설정

SQLAlchemy 엔진, 세션, Base 클래스를 정의합니다.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from catalog.core.config import get_settings

settings = get_settings()


def create_db_engine(database_url: str) -> Engine:
    """
    데이터베이스 URL에 맞는 엔진 생성

    SQLite 사용 시 check_same_thread를 비활성화합니다 (요청마다 다른 스레드에서 세션 사용).
    그 외 DB는 동시 요청을 위해 connection pool을 넉넉하게 설정합니다.
    """
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )
        register_sqlite_functions(sqlite_engine)
        return sqlite_engine

    return create_engine(
        database_url,
        pool_size=20,
        max_overflow=40,
        pool_timeout=30,
        pool_pre_ping=True,  # connection 유효성 자동 체크
        pool_recycle=3600,  # 1시간마다 connection 재생성 (stale connection 방지)
    )


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(sqlite_engine: Engine) -> None:
    """
    SQLite 연결마다 유니코드 lower() 등록

    SQLite 내장 lower()는 ASCII 문자만 변환하므로 "ÉTÉ"를 "été"로 바꾸지 못합니다.
    대소문자 무시 검색이 파이썬 str.lower()와 같은 결과를 내도록 덮어씁니다.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    FastAPI 의존성 주입용 데이터베이스 세션 제너레이터

    사용 예:
        @app.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
