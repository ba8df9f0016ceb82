# app/domains/whs/__init__.py

"""
FastAPI 애플리케이션의 'whs' 도메인 패키지입니다.

'whs' 도메인은 창고(Warehouse)와 배송물의 창고 입출고 기록(ShipmentWarehouse)을 관리하며,
창고 점유 용량 계산과 '배송물은 한 번에 하나의 창고에만 존재' 규칙을 보장합니다.

주요 서브모듈:
- `models.py`: 'whs' 도메인의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 및 목록 필터에 대한 Pydantic(SQLModel) 스키마.
- `crud.py`: 'whs' 도메인 테이블에 대한 비동기 CRUD 로직.
- `services.py`: 비즈니스 규칙 검증과 워크플로우를 담당하는 서비스 함수.
- `routers.py`: 'whs' 도메인 데이터에 접근하기 위한 FastAPI API 엔드포인트 정의.
"""

__title__ = "Logistics Warehouse Domain"
__version__ = "0.1.0"
__all__ = []
