# app/utils/dates.py

"""
날짜/시간 관련 공용 유틸리티 함수 모듈입니다.

SQLite 등 일부 드라이버는 timezone 정보가 없는(naive) datetime을 반환하므로,
비교 전에 ensure_aware()로 UTC 기준 aware datetime으로 정규화합니다.
"""

from datetime import date, datetime, UTC
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(UTC)


def today() -> date:
    return utc_now().date()


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """naive datetime은 UTC로 간주하여 tzinfo를 부여합니다."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def age_on(birth_date: date, reference: date) -> int:
    """기준일 현재의 만 나이를 계산합니다."""
    years = reference.year - birth_date.year
    if (reference.month, reference.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def hours_between(start: datetime, end: datetime) -> float:
    return round((ensure_aware(end) - ensure_aware(start)).total_seconds() / 3600, 2)
