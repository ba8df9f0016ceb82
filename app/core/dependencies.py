# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
"""

from typing import AsyncGenerator
from sqlmodel.ext.asyncio.session import AsyncSession

# 실제 데이터베이스 세션 제너레이터 임포트
from app.core.database import get_session as get_main_app_session


# --- 데이터베이스 세션 의존성 주입 ---
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 라우터에서 사용할 비동기 데이터베이스 세션 의존성입니다.
    테스트에서는 app.dependency_overrides로 교체됩니다.
    """
    async for session in get_main_app_session():
        yield session
