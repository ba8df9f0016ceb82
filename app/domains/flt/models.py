# app/domains/flt/models.py

"""
'flt' 도메인 (차량/운전자 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 운전자(drivers)와 차량(vehicles) 테이블에 대한 SQLModel 클래스를 포함합니다.
Driver.current_vehicle_id와 Vehicle.assigned_driver_id는 서로를 가리키며,
배정/해제 서비스가 두 값을 하나의 트랜잭션에서 함께 변경합니다.
"""

from typing import Optional
from datetime import date, datetime, UTC
from enum import Enum
from sqlmodel import Field, SQLModel

from app.core.columns import created_at_column, enum_column


class DriverStatus(str, Enum):
    """운전자 근무 상태"""
    AVAILABLE = "Available"
    ON_ROUTE = "OnRoute"
    OFF_DUTY = "OffDuty"
    ON_LEAVE = "OnLeave"


class VehicleType(str, Enum):
    """차량 유형 (유형별 최대 적재 중량 상한이 다름)"""
    MOTORCYCLE = "Motorcycle"
    VAN = "Van"
    PICKUP = "Pickup"
    TRUCK = "Truck"


class VehicleStatus(str, Enum):
    """차량 운행 상태"""
    AVAILABLE = "Available"
    IN_TRANSIT = "InTransit"
    UNDER_MAINTENANCE = "UnderMaintenance"
    OUT_OF_SERVICE = "OutOfService"


class FuelType(str, Enum):
    GASOLINE = "Gasoline"
    DIESEL = "Diesel"
    GNV = "GNV"
    ELECTRIC = "Electric"
    HYBRID = "Hybrid"


# =============================================================================
# 1. drivers 테이블 모델
# =============================================================================
class Driver(SQLModel, table=True):
    """
    운전자 정보 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    신분증 번호와 면허 번호는 각각 고유합니다.
    """
    __tablename__ = "drivers"

    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str = Field(max_length=100, description="성명")
    identity_document: str = Field(max_length=20, unique=True, index=True, description="신분증 번호 (고유)")
    license_number: str = Field(max_length=50, unique=True, index=True, description="운전면허 번호 (고유)")
    license_category: str = Field(max_length=20, description="면허 종류")
    license_issue_date: date = Field(description="면허 발급일")
    license_expiry_date: date = Field(description="면허 만료일")
    phone: str = Field(max_length=20, description="연락처")
    alternative_phone: Optional[str] = Field(default=None, max_length=20, description="보조 연락처")
    email: str = Field(max_length=100, description="이메일")
    address: Optional[str] = Field(default=None, max_length=300, description="거주지 주소")
    city: Optional[str] = Field(default=None, max_length=100, description="거주 도시")
    date_of_birth: date = Field(description="생년월일")
    hire_date: date = Field(description="입사일")
    contract_end_date: Optional[date] = Field(default=None, description="계약 종료일")
    years_of_experience: int = Field(default=0, description="운전 경력 (년)")
    is_active: bool = Field(default=True, description="활성 여부")
    status: DriverStatus = Field(sa_column=enum_column(DriverStatus, index=True), description="근무 상태")
    # vehicles.assigned_driver_id와 순환 FK가 되지 않도록 FK 제약은 두지 않습니다.
    current_vehicle_id: Optional[int] = Field(default=None, index=True, description="현재 배정된 차량 ID")
    average_rating: Optional[float] = Field(default=None, description="평균 평점 (1~5)")
    total_deliveries: int = Field(default=0, description="누적 배송 완료 건수")
    emergency_contact_name: Optional[str] = Field(default=None, max_length=100, description="비상 연락처 이름")
    emergency_contact_phone: Optional[str] = Field(default=None, max_length=20, description="비상 연락처 번호")
    blood_type: Optional[str] = Field(default=None, max_length=5, description="혈액형")
    notes: Optional[str] = Field(default=None, max_length=500, description="비고")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=created_at_column(),
        description="레코드 생성 일시"
    )


# =============================================================================
# 2. vehicles 테이블 모델
# =============================================================================
class Vehicle(SQLModel, table=True):
    """
    차량 정보 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    현재 적재량(중량/부피)은 최대 적재량을 넘을 수 없습니다.
    """
    __tablename__ = "vehicles"

    id: Optional[int] = Field(default=None, primary_key=True)
    plate_number: str = Field(max_length=20, unique=True, index=True, description="차량 번호판 (고유)")
    brand: str = Field(max_length=50, description="제조사")
    model: str = Field(max_length=50, description="모델명")
    year: int = Field(description="연식")
    color: Optional[str] = Field(default=None, max_length=30, description="색상")
    type: VehicleType = Field(sa_column=enum_column(VehicleType), description="차량 유형")
    max_weight_capacity_kg: float = Field(description="최대 적재 중량 (kg)")
    max_volume_capacity_m3: float = Field(description="최대 적재 부피 (m³)")
    current_weight_kg: float = Field(default=0, description="현재 적재 중량 (kg)")
    current_volume_m3: float = Field(default=0, description="현재 적재 부피 (m³)")
    status: VehicleStatus = Field(sa_column=enum_column(VehicleStatus, index=True), description="운행 상태")
    last_maintenance_date: Optional[date] = Field(default=None, description="최근 정비일")
    next_maintenance_date: Optional[date] = Field(default=None, description="다음 정비 예정일")
    current_mileage: int = Field(default=0, description="현재 주행거리 (km)")
    last_maintenance_mileage: Optional[int] = Field(default=None, description="최근 정비 시 주행거리 (km)")
    fuel_type: Optional[FuelType] = Field(
        default=None, sa_column=enum_column(FuelType, nullable=True), description="연료 종류"
    )
    fuel_consumption_per_100km: Optional[float] = Field(default=None, description="100km당 연료 소비량 (L)")
    vin: Optional[str] = Field(default=None, max_length=17, unique=True, description="차대번호 (고유)")
    insurance_policy_number: Optional[str] = Field(default=None, max_length=50, description="보험 증권 번호")
    insurance_expiry_date: Optional[date] = Field(default=None, description="보험 만료일")
    is_active: bool = Field(default=True, description="활성 여부")
    base_warehouse_id: Optional[int] = Field(
        default=None, foreign_key="warehouses.id", ondelete="SET NULL", index=True, description="소속 창고 ID (FK)"
    )
    assigned_driver_id: Optional[int] = Field(
        default=None, foreign_key="drivers.id", ondelete="SET NULL", index=True, description="배정된 운전자 ID (FK)"
    )
    purchase_date: Optional[date] = Field(default=None, description="구입일")
    notes: Optional[str] = Field(default=None, max_length=500, description="비고")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=created_at_column(),
        description="레코드 생성 일시"
    )
