from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.api.middleware import RequestLoggingMiddleware
from catalog.api.routes import products
from catalog.core.config import get_settings
from catalog.core.logging import configure_logging
from catalog.db.database import Base, engine

settings = get_settings()
configure_logging(settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """시작 시 테이블 생성"""
    Base.metadata.create_all(bind=engine)
    logger.info(
        "catalog_started",
        app_env=settings.app_env,
        cache_enabled=settings.cache_enabled,
    )
    yield
    logger.info("catalog_stopped")


app = FastAPI(
    title="Garment Catalog API",
    description="필터 검색, Redis 조회 캐시, 낙관적 락을 갖춘 의류 상품 카탈로그",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# 라우터 등록
app.include_router(products.router, prefix="/api/v1/products", tags=["products"])


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "Garment Catalog API",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """헬스체크 엔드포인트 (Docker 헬스체크용)"""
    return {"status": "healthy"}
