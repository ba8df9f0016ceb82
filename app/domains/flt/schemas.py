# app/domains/flt/schemas.py

"""
'flt' 도메인 (차량/운전자 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
응답 스키마는 '...Read' 패턴을 사용합니다.

운전자-차량 배정 관계(current_vehicle_id / assigned_driver_id)는 수정 스키마에 포함하지 않으며,
배정/해제 엔드포인트로만 변경합니다.
"""

from typing import Optional
from datetime import date, datetime
from sqlmodel import SQLModel

from app.core.pagination import PaginationQueryFilter
from .models import DriverStatus, FuelType, VehicleStatus, VehicleType


# =============================================================================
# 1. 운전자 (Driver) 스키마
# =============================================================================
class DriverBase(SQLModel):
    full_name: str
    identity_document: str
    license_number: str
    license_category: str
    license_issue_date: date
    license_expiry_date: date
    phone: str
    alternative_phone: Optional[str] = None
    email: str
    address: Optional[str] = None
    city: Optional[str] = None
    date_of_birth: date
    hire_date: date
    contract_end_date: Optional[date] = None
    years_of_experience: int = 0
    average_rating: Optional[float] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    blood_type: Optional[str] = None
    notes: Optional[str] = None


class DriverCreate(DriverBase):
    pass


class DriverUpdate(SQLModel):
    full_name: Optional[str] = None
    identity_document: Optional[str] = None
    license_number: Optional[str] = None
    license_category: Optional[str] = None
    license_issue_date: Optional[date] = None
    license_expiry_date: Optional[date] = None
    phone: Optional[str] = None
    alternative_phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    date_of_birth: Optional[date] = None
    hire_date: Optional[date] = None
    contract_end_date: Optional[date] = None
    years_of_experience: Optional[int] = None
    status: Optional[DriverStatus] = None
    is_active: Optional[bool] = None
    average_rating: Optional[float] = None
    total_deliveries: Optional[int] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    blood_type: Optional[str] = None
    notes: Optional[str] = None


class DriverRead(DriverBase):
    id: int
    status: DriverStatus
    is_active: bool
    current_vehicle_id: Optional[int] = None
    total_deliveries: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DriverQueryFilter(PaginationQueryFilter):
    full_name: Optional[str] = None
    license_number: Optional[str] = None
    license_category: Optional[str] = None
    status: Optional[DriverStatus] = None
    is_active: Optional[bool] = None
    current_vehicle_id: Optional[int] = None
    license_expiring_in_days: Optional[int] = None  # N일 이내 면허 만료 예정
    min_years_of_experience: Optional[int] = None
    min_average_rating: Optional[float] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class DriverStatisticsRead(SQLModel):
    """운전자 실적/면허 현황"""
    driver_id: int
    full_name: str
    license_number: str
    total_deliveries: int
    on_time_deliveries: int
    late_deliveries: int
    on_time_percentage: float
    average_rating: Optional[float] = None
    years_of_experience: int
    days_until_license_expiry: int
    license_expiring_soon: bool


# =============================================================================
# 2. 차량 (Vehicle) 스키마
# =============================================================================
class VehicleBase(SQLModel):
    plate_number: str
    brand: str
    model: str
    year: int
    color: Optional[str] = None
    type: VehicleType
    max_weight_capacity_kg: float
    max_volume_capacity_m3: float
    last_maintenance_date: Optional[date] = None
    next_maintenance_date: Optional[date] = None
    current_mileage: int = 0
    last_maintenance_mileage: Optional[int] = None
    fuel_type: Optional[FuelType] = None
    fuel_consumption_per_100km: Optional[float] = None
    vin: Optional[str] = None
    insurance_policy_number: Optional[str] = None
    insurance_expiry_date: Optional[date] = None
    base_warehouse_id: Optional[int] = None
    purchase_date: Optional[date] = None
    notes: Optional[str] = None


class VehicleCreate(VehicleBase):
    # 등록 시 배정할 운전자 (선택). 등록 후 변경은 배정/해제 엔드포인트를 사용합니다.
    assigned_driver_id: Optional[int] = None


class VehicleUpdate(SQLModel):
    plate_number: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    type: Optional[VehicleType] = None
    max_weight_capacity_kg: Optional[float] = None
    max_volume_capacity_m3: Optional[float] = None
    status: Optional[VehicleStatus] = None
    is_active: Optional[bool] = None
    last_maintenance_date: Optional[date] = None
    next_maintenance_date: Optional[date] = None
    current_mileage: Optional[int] = None
    last_maintenance_mileage: Optional[int] = None
    fuel_type: Optional[FuelType] = None
    fuel_consumption_per_100km: Optional[float] = None
    vin: Optional[str] = None
    insurance_policy_number: Optional[str] = None
    insurance_expiry_date: Optional[date] = None
    base_warehouse_id: Optional[int] = None
    purchase_date: Optional[date] = None
    notes: Optional[str] = None


class VehicleRead(VehicleBase):
    id: int
    status: VehicleStatus
    is_active: bool
    current_weight_kg: float
    current_volume_m3: float
    assigned_driver_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VehicleLoadUpdate(SQLModel):
    """현재 적재량 변경 요청"""
    current_weight_kg: float
    current_volume_m3: float


class VehicleQueryFilter(PaginationQueryFilter):
    plate_number: Optional[str] = None
    brand: Optional[str] = None
    type: Optional[VehicleType] = None
    status: Optional[VehicleStatus] = None
    is_active: Optional[bool] = None
    base_warehouse_id: Optional[int] = None
    assigned_driver_id: Optional[int] = None
    min_available_weight_kg: Optional[float] = None
    requires_maintenance: Optional[bool] = None


class VehicleStatisticsRead(SQLModel):
    """차량 적재율/정비 현황"""
    vehicle_id: int
    plate_number: str
    weight_occupancy_percentage: float
    volume_occupancy_percentage: float
    available_weight_kg: float
    available_volume_m3: float
    current_mileage: int
    km_since_last_maintenance: Optional[int] = None
    days_since_last_maintenance: Optional[int] = None
    days_until_next_maintenance: Optional[int] = None
    requires_maintenance: bool
