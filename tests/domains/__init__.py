# tests/domains/__init__.py

"""
도메인별 API 통합 테스트 패키지입니다.

- `test_cst_n.py`: 고객/주소 ('cst')
- `test_flt_n.py`: 운전자/차량 및 배정 ('flt')
- `test_whs_n.py`: 창고/입출고 ('whs')
- `test_shp_n.py`: 노선/배송/소포 ('shp')
"""
