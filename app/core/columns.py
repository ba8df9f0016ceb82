# app/core/columns.py

"""
여러 도메인 모델이 공유하는 SQLAlchemy 컬럼 생성 헬퍼 모듈입니다.
Column 객체는 테이블 간에 공유할 수 없으므로, 필드마다 새 컬럼을 생성합니다.
"""

from enum import Enum
from typing import Type

from sqlalchemy import Column, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


def enum_column(enum_cls: Type[Enum], *, nullable: bool = False, index: bool = False, **kwargs) -> Column:
    """
    Enum 멤버의 '값'(예: "In transit")을 문자열 컬럼으로 저장하는 컬럼을 만듭니다.
    DB 네이티브 ENUM 타입은 사용하지 않습니다.
    """
    return Column(
        SAEnum(
            enum_cls,
            values_callable=lambda members: [member.value for member in members],
            native_enum=False,
            length=30,
            validate_strings=True,
        ),
        nullable=nullable,
        index=index,
        **kwargs,
    )


def created_at_column() -> Column:
    return Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)


def timestamp_column(*, nullable: bool = True, index: bool = False) -> Column:
    return Column(TIMESTAMP(timezone=True), nullable=nullable, index=index)
