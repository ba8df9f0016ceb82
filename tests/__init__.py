# tests/__init__.py

"""
물류/배송 관리 API의 테스트 스위트 패키지입니다.

- `core/`: 페이지네이션, 입력 검증 등 공용 모듈 단위 테스트
- `domains/`: 도메인(cst, flt, whs, shp)별 API 통합 테스트
- `conftest.py`: 테스트 DB 세션, 테스트 클라이언트, 엔티티 팩토리 픽스처
"""
