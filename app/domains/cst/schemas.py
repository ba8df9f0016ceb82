# app/domains/cst/schemas.py

"""
'cst' 도메인 (고객 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
응답 스키마는 '...Read' 패턴을 사용합니다.

필드 형식(타입)만 스키마에서 검사하고, 길이/형식/중복 등 비즈니스 규칙은
services.py의 엔티티별 검증 함수에서 한 번에 검사합니다.
"""

from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel

from app.core.pagination import PaginationQueryFilter
from .models import AddressType


# =============================================================================
# 1. 고객 (Customer) 스키마
# =============================================================================
class CustomerBase(SQLModel):
    name: str
    email: str
    phone: str


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(SQLModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class CustomerRead(CustomerBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:  # Pydantic이 ORM 객체의 속성에서 데이터를 가져와 스키마를 구성
        from_attributes = True


class CustomerQueryFilter(PaginationQueryFilter):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    has_active_shipments: Optional[bool] = None


class CustomerShipmentHistoryRead(SQLModel):
    """고객의 배송 이력 한 건 (노선 및 소포 집계 포함)"""
    shipment_id: int
    tracking_number: str
    shipping_date: datetime
    state: str
    total_cost: float
    route_origin: str
    route_destination: str
    route_distance_km: float
    package_count: int
    total_weight: float
    total_value: float


# =============================================================================
# 2. 주소 (Address) 스키마
# =============================================================================
class AddressBase(SQLModel):
    customer_id: int
    street: str
    city: str
    department: str
    zone: Optional[str] = None
    postal_code: Optional[str] = None
    reference: Optional[str] = None
    alias: Optional[str] = None
    type: AddressType = AddressType.DELIVERY
    is_default: bool = False
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None


class AddressCreate(AddressBase):
    pass


class AddressUpdate(SQLModel):
    customer_id: Optional[int] = None
    street: Optional[str] = None
    city: Optional[str] = None
    department: Optional[str] = None
    zone: Optional[str] = None
    postal_code: Optional[str] = None
    reference: Optional[str] = None
    alias: Optional[str] = None
    type: Optional[AddressType] = None
    is_default: Optional[bool] = None
    is_active: Optional[bool] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None


class AddressRead(AddressBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AddressQueryFilter(PaginationQueryFilter):
    customer_id: Optional[int] = None
    city: Optional[str] = None
    department: Optional[str] = None
    zone: Optional[str] = None
    type: Optional[AddressType] = None
    is_default: Optional[bool] = None
    is_active: Optional[bool] = None
    search_text: Optional[str] = None  # 도로명/참고 사항/별칭 부분 일치 검색
