# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

이 패키지는 애플리케이션 전반에 걸쳐 사용되는 공통적이고 핵심적인 기능들을 캡슐화합니다.
주요 서브모듈은 다음과 같습니다:

- `config.py`: 애플리케이션의 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `dependencies.py`: FastAPI의 의존성 주입 시스템에서 사용될 공통 의존성 함수들.
- `crud_base.py`: 도메인별 저장소(CRUD)가 상속하는 제네릭 기본 클래스.
- `exceptions.py`: NotFound / BusinessRule 예외와 FastAPI 예외 핸들러.
- `pagination.py`: 페이지네이션 및 목록 응답 봉투(ResponseData).
- `validation.py`: 도메인 간 공유되는 입력 검증 규칙 (주/전화번호/이메일 등).
- `logging.py`: 로깅 초기화.
"""

__title__ = "Logistics Core"
__description__ = "Core components for the Shipping & Logistics Management API."
__version__ = "0.1.0"
__all__ = []
