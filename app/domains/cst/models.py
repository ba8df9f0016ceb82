# app/domains/cst/models.py

"""
'cst' 도메인 (고객 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 고객(customers)과 고객 주소(addresses) 테이블에 대한 SQLModel 클래스를 포함합니다.
고객별/유형별(Pickup, Delivery) 활성 기본 주소는 최대 하나이며, 이 규칙은 서비스 계층에서 보장합니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum
from sqlmodel import Field, SQLModel

from app.core.columns import created_at_column, enum_column


class AddressType(str, Enum):
    """주소 용도 (픽업지 / 배송지)"""
    PICKUP = "Pickup"
    DELIVERY = "Delivery"


# =============================================================================
# 1. customers 테이블 모델
# =============================================================================
class Customer(SQLModel, table=True):
    """
    고객 정보 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "customers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, description="고객명")
    email: str = Field(max_length=100, unique=True, index=True, description="이메일 (고유)")
    phone: str = Field(max_length=20, description="연락처")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=created_at_column(),
        description="레코드 생성 일시"
    )


# =============================================================================
# 2. addresses 테이블 모델
# =============================================================================
class Address(SQLModel, table=True):
    """
    고객의 픽업/배송 주소 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "addresses"

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="customers.id", index=True, description="고객 ID (FK)")
    street: str = Field(max_length=200, description="도로명 주소")
    city: str = Field(max_length=100, description="도시")
    department: str = Field(max_length=50, description="주(Departamento)")
    zone: Optional[str] = Field(default=None, max_length=100, description="구역")
    postal_code: Optional[str] = Field(default=None, max_length=20, description="우편번호")
    reference: Optional[str] = Field(default=None, max_length=500, description="찾아오는 길 등 참고 사항")
    alias: Optional[str] = Field(default=None, max_length=50, description="별칭 (예: 집, 사무실)")
    type: AddressType = Field(sa_column=enum_column(AddressType), description="주소 유형")
    is_default: bool = Field(default=False, description="유형별 기본 주소 여부")
    is_active: bool = Field(default=True, description="활성 여부")
    latitude: Optional[float] = Field(default=None, description="위도")
    longitude: Optional[float] = Field(default=None, description="경도")
    contact_name: Optional[str] = Field(default=None, max_length=100, description="현장 담당자명")
    contact_phone: Optional[str] = Field(default=None, max_length=20, description="현장 담당자 연락처")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=created_at_column(),
        description="레코드 생성 일시"
    )
