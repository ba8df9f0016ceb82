# app/core/pagination.py

"""
목록 조회 결과에 대한 페이지네이션 및 공통 응답 봉투(envelope)를 정의하는 모듈입니다.

모든 목록 엔드포인트는 필터링을 먼저 수행한 뒤, 후보 목록을 메모리에서 잘라
`ResponseData` 형식으로 반환합니다.
"""

import math
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from app.core.config import settings

T = TypeVar("T")

DEFAULT_PAGE_NUMBER = 1
EMPTY_PAGE_MESSAGE = "No fue posible recuperar la cantidad de registros"


class MessageType:
    INFORMATION = "Information"
    WARNING = "Warning"


class Message(BaseModel):
    type: str
    description: str


class Pagination(BaseModel):
    total_count: int
    page_size: int
    current_page: int
    total_pages: int
    has_next: bool
    has_previous: bool


class PagedList(Generic[T]):
    """필터링된 후보 목록에서 잘라낸 한 페이지와 그 메타데이터."""

    def __init__(self, items: List[T], count: int, page_number: int, page_size: int):
        self.items = items
        self.total_count = count
        self.page_size = page_size
        self.current_page = page_number
        self.total_pages = math.ceil(count / page_size) if page_size > 0 else 0

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def pagination(self) -> Pagination:
        return Pagination(
            total_count=self.total_count,
            page_size=self.page_size,
            current_page=self.current_page,
            total_pages=self.total_pages,
            has_next=self.has_next,
            has_previous=self.has_previous,
        )


class ResponseData(BaseModel, Generic[T]):
    """목록 응답 봉투: 페이지 항목, 페이지 메타데이터, 메시지, 상태 코드."""
    data: List[T] = Field(default_factory=list)
    pagination: Optional[Pagination] = None
    messages: List[Message] = Field(default_factory=list)
    status_code: int = 200


def normalize_page(page_number: Optional[int], page_size: Optional[int]) -> tuple[int, int]:
    """0 이하(또는 누락된) 페이지 번호/크기를 기본값 1/DEFAULT_PAGE_SIZE로 보정합니다."""
    number = page_number if page_number and page_number > 0 else DEFAULT_PAGE_NUMBER
    size = page_size if page_size and page_size > 0 else settings.DEFAULT_PAGE_SIZE
    return number, size


def paginate(source: Sequence[T], page_number: Optional[int], page_size: Optional[int]) -> PagedList[T]:
    """
    후보 목록을 `[(page-1)*size, page*size)` 구간으로 잘라 PagedList로 감쌉니다.
    범위를 벗어난 페이지는 오류 없이 빈 목록을 반환합니다.
    """
    number, size = normalize_page(page_number, page_size)
    items = list(source)
    start = (number - 1) * size
    return PagedList(items[start:start + size], len(items), number, size)


def build_response(
    source: Sequence[Any],
    page_number: Optional[int],
    page_size: Optional[int],
    entity_label: str,
) -> ResponseData:
    """
    후보 목록을 페이지로 자르고 사람이 읽을 수 있는 건수 메시지를 붙여 응답 봉투를 만듭니다.
    - `entity_label`: 메시지에 들어갈 복수형 명칭 (예: "direcciones")
    """
    page = paginate(source, page_number, page_size)
    if page.items:
        message = Message(
            type=MessageType.INFORMATION,
            description=f"Se recuperaron {len(page.items)} {entity_label} correctamente",
        )
    else:
        message = Message(type=MessageType.WARNING, description=EMPTY_PAGE_MESSAGE)

    return ResponseData(
        data=page.items,
        pagination=page.pagination(),
        messages=[message],
        status_code=200,
    )


class PaginationQueryFilter(BaseModel):
    """모든 목록 필터 스키마가 상속하는 페이지 파라미터. 0 이하 값은 기본값(1/10)으로 보정됩니다."""
    page_number: int = 1
    page_size: int = 10
