# app/domains/flt/__init__.py

"""
FastAPI 애플리케이션의 'flt' 도메인 패키지입니다.

'flt' 도메인은 운전자(Driver)와 차량(Vehicle) 정보를 관리하며,
운전자-차량 배정의 양방향 일관성을 보장합니다.

주요 서브모듈:
- `models.py`: 'flt' 도메인의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청/응답 및 목록 필터에 대한 Pydantic(SQLModel) 스키마.
- `crud.py`: 'flt' 도메인 테이블에 대한 비동기 CRUD 로직.
- `services.py`: 비즈니스 규칙 검증과 워크플로우를 담당하는 서비스 함수.
- `routers.py`: 'flt' 도메인 데이터에 접근하기 위한 FastAPI API 엔드포인트 정의.
"""

__title__ = "Logistics Fleet Domain"
__version__ = "0.1.0"
__all__ = []
