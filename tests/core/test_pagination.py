# tests/core/test_pagination.py

"""
페이지네이션 유틸리티(paginate, build_response)에 대한 단위 테스트 모듈입니다.
"""

import math

import pytest

from app.core.pagination import EMPTY_PAGE_MESSAGE, build_response, paginate


@pytest.mark.parametrize(
    "count, page_number, page_size",
    [
        (0, 1, 10),
        (1, 1, 1),
        (25, 1, 10),
        (25, 3, 10),
        (25, 4, 10),
        (30, 3, 10),
        (7, 2, 3),
    ],
)
def test_paginate_slices_and_total_pages(count, page_number, page_size):
    print("\n--- Running test_paginate_slices_and_total_pages ---")
    page = paginate(list(range(count)), page_number, page_size)

    assert page.total_count == count
    assert page.total_pages == math.ceil(count / page_size)
    assert len(page.items) == min(page_size, max(0, count - (page_number - 1) * page_size))
    if page.items:
        assert page.items[0] == (page_number - 1) * page_size
    print("test_paginate_slices_and_total_pages passed.")


def test_paginate_normalizes_invalid_page_values():
    """0 이하의 페이지 번호/크기는 1/10으로 보정됩니다."""
    print("\n--- Running test_paginate_normalizes_invalid_page_values ---")
    page = paginate(list(range(15)), 0, -5)

    assert page.current_page == 1
    assert page.page_size == 10
    assert len(page.items) == 10
    assert page.has_next is True
    assert page.has_previous is False
    print("test_paginate_normalizes_invalid_page_values passed.")


def test_build_response_messages():
    print("\n--- Running test_build_response_messages ---")
    filled = build_response(["a", "b", "c"], 1, 2, "clientes")
    assert filled.status_code == 200
    assert filled.data == ["a", "b"]
    assert filled.pagination.total_pages == 2
    assert filled.messages[0].type == "Information"
    assert filled.messages[0].description == "Se recuperaron 2 clientes correctamente"

    empty = build_response(["a"], 5, 10, "clientes")
    assert empty.data == []
    assert empty.pagination.has_previous is True
    assert empty.messages[0].type == "Warning"
    assert empty.messages[0].description == EMPTY_PAGE_MESSAGE
    print("test_build_response_messages passed.")
