# app/main.py

"""
FastAPI 애플리케이션 진입점입니다.

- 수명 주기(lifespan): 로깅 구성, 테이블 생성, 종료 시 DB 연결 풀 정리
- 미들웨어(CORS)와 전역 예외 처리기 등록
- 도메인 라우터(cst, flt, whs, shp) 포함
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from app import API_PREFIX, APP_VERSION
from app.core.config import settings
from app.core.database import create_db_and_tables, engine, get_session
from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logging

from app.domains.cst.routers import router as cst_router
from app.domains.flt.routers import router as flt_router
from app.domains.whs.routers import router as whs_router
from app.domains.shp.routers import router as shp_router

logger = logging.getLogger(__name__)


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 시작/종료 작업을 처리합니다.
    """
    setup_logging(settings.LOG_LEVEL)
    logger.info("FastAPI 애플리케이션 시작 중... (env=%s)", settings.APP_ENV)
    await create_db_and_tables()

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# -- CORS 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 전역 예외 처리기 ({"errors": [...]} 형식) --
register_exception_handlers(app)

# -- 도메인 라우터 포함 --
app.include_router(cst_router, prefix=f"{API_PREFIX}/cst", tags=["Customer Management (고객 관리)"])
app.include_router(flt_router, prefix=f"{API_PREFIX}/flt", tags=["Fleet Management (차량/운전자 관리)"])
app.include_router(whs_router, prefix=f"{API_PREFIX}/whs", tags=["Warehouse Management (창고 관리)"])
app.include_router(shp_router, prefix=f"{API_PREFIX}/shp", tags=["Shipping Management (배송 관리)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    API의 시작점을 알리고 문서 링크를 제공합니다.
    """
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        value = result.first()
    except Exception as e:
        logger.exception("Health check query failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Database connection error during health check: {e}"
        )
    if not value:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database health check failed: No result from test query"
        )
    return {"status": "ok", "database_connection": "successful"}
