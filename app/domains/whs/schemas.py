# app/domains/whs/schemas.py

"""
'whs' 도메인 (창고 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
응답 스키마는 '...Read' 패턴을 사용합니다.
"""

from typing import Optional
from datetime import date, datetime
from sqlmodel import SQLModel

from app.core.pagination import PaginationQueryFilter
from .models import MovementStatus, WarehouseType


# =============================================================================
# 1. 창고 (Warehouse) 스키마
# =============================================================================
class WarehouseBase(SQLModel):
    name: str
    code: str
    address: str
    city: str
    department: str
    phone: str
    email: Optional[str] = None
    max_capacity_m3: float
    type: WarehouseType = WarehouseType.LOCAL
    is_active: bool = True
    operating_hours: Optional[str] = None
    manager_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    opening_date: Optional[date] = None
    notes: Optional[str] = None


class WarehouseCreate(WarehouseBase):
    # 입력값과 무관하게 0으로 시작합니다.
    current_capacity_m3: Optional[float] = None


class WarehouseUpdate(SQLModel):
    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    department: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    max_capacity_m3: Optional[float] = None
    type: Optional[WarehouseType] = None
    is_active: Optional[bool] = None
    operating_hours: Optional[str] = None
    manager_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    opening_date: Optional[date] = None
    notes: Optional[str] = None


class WarehouseRead(WarehouseBase):
    id: int
    current_capacity_m3: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WarehouseQueryFilter(PaginationQueryFilter):
    name: Optional[str] = None
    code: Optional[str] = None
    city: Optional[str] = None
    department: Optional[str] = None
    type: Optional[WarehouseType] = None
    is_active: Optional[bool] = None
    min_available_capacity: Optional[float] = None
    max_occupancy_percentage: Optional[float] = None


class WarehouseStatisticsRead(SQLModel):
    """창고 운영 통계"""
    warehouse_id: int
    warehouse_name: str
    code: str
    city: str
    total_shipments: int
    current_shipments: int
    dispatched_shipments: int
    occupancy_percentage: float
    available_capacity: float
    average_stay_time_hours: Optional[float] = None


# =============================================================================
# 2. 배송 입출고 (ShipmentWarehouse) 스키마
# =============================================================================
class ShipmentWarehouseEntry(SQLModel):
    """입고 등록 요청. entry_date를 생략하면 현재 시각으로 기록됩니다."""
    shipment_id: int
    warehouse_id: int
    entry_date: Optional[datetime] = None
    received_by: Optional[str] = None
    storage_location: Optional[str] = None
    notes: Optional[str] = None


class ShipmentWarehouseExit(SQLModel):
    """출고 등록 요청. dispatched_by를 생략하면 'Sistema'로 기록됩니다."""
    exit_date: Optional[datetime] = None
    dispatched_by: Optional[str] = None


class ShipmentWarehouseRead(SQLModel):
    id: int
    shipment_id: int
    warehouse_id: int
    entry_date: datetime
    exit_date: Optional[datetime] = None
    status: MovementStatus
    received_by: Optional[str] = None
    dispatched_by: Optional[str] = None
    storage_location: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class ShipmentWarehouseQueryFilter(PaginationQueryFilter):
    shipment_id: Optional[int] = None
    warehouse_id: Optional[int] = None
    status: Optional[MovementStatus] = None
    has_exited: Optional[bool] = None
    entry_date_from: Optional[datetime] = None
    entry_date_to: Optional[datetime] = None


class ShipmentWarehouseHistoryRead(SQLModel):
    """배송의 창고 경유 이력"""
    shipment_id: int
    tracking_number: str
    warehouse_id: int
    warehouse_name: str
    city: str
    entry_date: datetime
    exit_date: Optional[datetime] = None
    status: MovementStatus
    stay_time_hours: Optional[float] = None
    storage_location: Optional[str] = None
