# tests/test_main.py

"""
FastAPI 애플리케이션의 메인 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 애플리케이션의 루트 경로 (`/`) 응답을 테스트합니다.
- 데이터베이스 연결 헬스 체크 엔드포인트 (`/health-check`)를 테스트합니다.
- 공통 오류 응답 형식 ({"errors": [...]})을 테스트합니다.
"""

import pytest
from httpx import AsyncClient

from app.core.config import settings


@pytest.mark.asyncio
async def test_read_root(client: AsyncClient):
    """루트 엔드포인트 (`GET /`)가 환영 메시지를 반환하는지 테스트합니다."""
    print("\n--- Running test_read_root ---")
    response = await client.get("/")
    print(f"Response status code: {response.status_code}")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 200
    assert response.json() == {
        "message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."
    }
    print("test_read_root passed.")


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """헬스 체크 엔드포인트가 데이터베이스 연결 상태를 올바르게 반환하는지 테스트합니다."""
    print("\n--- Running test_health_check ---")
    response = await client.get("/health-check")
    print(f"Response status code: {response.status_code}")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database_connection": "successful"}
    print("test_health_check passed.")


@pytest.mark.asyncio
async def test_not_found_error_envelope(client: AsyncClient):
    """존재하지 않는 리소스 조회 시 404와 오류 봉투 형식을 반환하는지 테스트합니다."""
    print("\n--- Running test_not_found_error_envelope ---")
    response = await client.get("/api/v1/cst/customers/999")
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 404
    assert response.json() == {
        "errors": [{"status": 404, "title": "NotFound", "detail": "El cliente con ID 999 no existe"}]
    }
    print("test_not_found_error_envelope passed.")


@pytest.mark.asyncio
async def test_business_rule_error_envelope(client: AsyncClient):
    """ID가 0 이하이면 400 BadRequest 봉투를 반환하는지 테스트합니다."""
    print("\n--- Running test_business_rule_error_envelope ---")
    response = await client.get("/api/v1/shp/routes/0")

    assert response.status_code == 400
    error = response.json()["errors"][0]
    assert error["status"] == 400
    assert error["title"] == "BadRequest"
    assert error["detail"] == "El ID de la ruta debe ser mayor a 0"
    print("test_business_rule_error_envelope passed.")


@pytest.mark.asyncio
async def test_request_validation_error_envelope(client: AsyncClient):
    """요청 본문 형식 오류(필수 필드 누락)는 400 BadRequest 봉투로 변환되는지 테스트합니다."""
    print("\n--- Running test_request_validation_error_envelope ---")
    response = await client.post("/api/v1/cst/customers", json={"name": "Ana"})

    assert response.status_code == 400
    body = response.json()
    assert len(body["errors"]) >= 1
    assert all(error["title"] == "BadRequest" for error in body["errors"])
    assert any("email" in error["detail"] for error in body["errors"])
    print("test_request_validation_error_envelope passed.")
