# app/domains/shp/schemas.py

"""
'shp' 도메인 (배송 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
응답 스키마는 '...Read' 패턴을 사용합니다.
"""

from typing import Optional
from datetime import date, datetime
from sqlmodel import SQLModel

from app.core.pagination import PaginationQueryFilter
from .models import ShipmentState


# =============================================================================
# 1. 노선 (Route) 스키마
# =============================================================================
class RouteBase(SQLModel):
    origin: str
    destination: str
    distance_km: float
    base_cost: float = 0
    is_active: bool = True


class RouteCreate(RouteBase):
    pass


class RouteUpdate(SQLModel):
    origin: Optional[str] = None
    destination: Optional[str] = None
    distance_km: Optional[float] = None
    base_cost: Optional[float] = None
    is_active: Optional[bool] = None


class RouteRead(RouteBase):
    id: int

    class Config:
        from_attributes = True


class RouteQueryFilter(PaginationQueryFilter):
    origin: Optional[str] = None
    destination: Optional[str] = None
    min_distance_km: Optional[float] = None
    max_distance_km: Optional[float] = None
    min_base_cost: Optional[float] = None
    max_base_cost: Optional[float] = None
    is_active: Optional[bool] = None


class RouteRankingRead(SQLModel):
    """노선별 이용 실적 순위"""
    route_id: int
    origin: str
    destination: str
    distance_km: float
    base_cost: float
    is_active: bool
    total_shipments: int
    active_shipments: int
    completed_shipments: int
    total_revenue: float
    average_revenue: float
    cost_per_km: float
    rank: int


# =============================================================================
# 2. 배송 (Shipment) 스키마
# =============================================================================
class ShipmentBase(SQLModel):
    customer_id: int
    route_id: int
    tracking_number: str
    state: ShipmentState = ShipmentState.PENDING
    shipping_date: Optional[datetime] = None
    total_cost: float


class ShipmentCreate(ShipmentBase):
    pass


class ShipmentUpdate(SQLModel):
    customer_id: Optional[int] = None
    route_id: Optional[int] = None
    tracking_number: Optional[str] = None
    state: Optional[ShipmentState] = None
    shipping_date: Optional[datetime] = None
    total_cost: Optional[float] = None


class ShipmentRead(SQLModel):
    id: int
    customer_id: Optional[int] = None
    route_id: int
    tracking_number: str
    state: ShipmentState
    shipping_date: Optional[datetime] = None
    total_cost: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ShipmentQueryFilter(PaginationQueryFilter):
    customer_id: Optional[int] = None
    route_id: Optional[int] = None
    state: Optional[ShipmentState] = None
    shipping_date: Optional[date] = None  # 해당 일자에 발송된 배송
    tracking_number: Optional[str] = None
    min_total_cost: Optional[float] = None
    max_total_cost: Optional[float] = None


class ShipmentCustomerRouteRead(SQLModel):
    """배송 + 고객명 + 노선 정보 결합 조회 결과"""
    shipment_id: int
    tracking_number: str
    customer_name: Optional[str] = None
    route_id: int
    origin: str
    destination: str
    shipping_date: Optional[datetime] = None
    state: ShipmentState
    total_cost: float


# =============================================================================
# 3. 소포 (Package) 스키마
# =============================================================================
class PackageBase(SQLModel):
    shipment_id: int
    description: str
    weight: float
    price: float


class PackageCreate(PackageBase):
    pass


class PackageUpdate(SQLModel):
    description: Optional[str] = None
    weight: Optional[float] = None
    price: Optional[float] = None


class PackageRead(PackageBase):
    id: int

    class Config:
        from_attributes = True


class PackageQueryFilter(PaginationQueryFilter):
    shipment_id: Optional[int] = None
    description: Optional[str] = None
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None


class PackageSummaryRead(SQLModel):
    """배송별 소포 집계"""
    shipment_id: int
    total_packages: int
    total_weight: float
    total_value: float
    avg_weight: float
    avg_value: float


class PackageDetailRead(SQLModel):
    """소포 + 배송 + 고객 + 노선 결합 조회 결과"""
    package_id: int
    description: str
    weight: float
    price: float
    shipment_id: int
    tracking_number: str
    shipment_state: ShipmentState
    shipping_date: Optional[datetime] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    route_id: int
    route_origin: str
    route_destination: str
