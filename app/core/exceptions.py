# app/core/exceptions.py

"""
애플리케이션 공통 예외와 FastAPI 예외 핸들러를 정의하는 모듈입니다.

서비스 계층은 비즈니스 규칙 위반 시 아래 예외를 발생시키고,
main.py에 등록된 핸들러가 이를 일관된 오류 응답 형식으로 변환합니다.

    {"errors": [{"status": 400, "title": "BadRequest", "detail": "<메시지>"}]}
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 애플리케이션 예외
# =============================================================================
class AppError(Exception):
    """모든 애플리케이션 예외의 기본 클래스. 사람이 읽을 수 있는 메시지를 항상 포함합니다."""
    status_code: int = status.HTTP_400_BAD_REQUEST
    title: str = "BadRequest"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """참조한 ID/조회 키에 해당하는 레코드가 없을 때 발생합니다. (HTTP 404)"""
    status_code = status.HTTP_404_NOT_FOUND
    title = "NotFound"


class BusinessRuleError(AppError):
    """비즈니스 규칙(중복, 한도 초과, 잘못된 상태 전이 등) 위반 시 발생합니다. (HTTP 400)"""
    status_code = status.HTTP_400_BAD_REQUEST
    title = "BadRequest"


# =============================================================================
# 2. 오류 응답 생성
# =============================================================================
def error_body(status_code: int, title: str, details: List[str]) -> Dict[str, Any]:
    return {
        "errors": [
            {"status": status_code, "title": title, "detail": detail}
            for detail in details
        ]
    }


async def application_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """AppError 계열 예외를 처리합니다."""
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.title, [exc.message]),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 본문/쿼리 파라미터의 형식 오류(Pydantic)를 400 응답으로 변환합니다."""
    details = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ()))
        details.append(f"{field}: {error.get('msg')}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(status.HTTP_400_BAD_REQUEST, "BadRequest", details),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """그 외 모든 예외를 500 응답으로 변환합니다."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.DEBUG_MODE else "Ocurrió un error inesperado en el servidor"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "InternalServerError", [detail]),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, application_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
