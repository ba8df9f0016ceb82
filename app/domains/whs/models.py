# app/domains/whs/models.py

"""
'whs' 도메인 (창고 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 창고(warehouses)와 배송 입출고 기록(shipment_warehouses) 테이블에 대한 SQLModel 클래스를 포함합니다.
창고의 current_capacity_m3는 보관 중인 배송 1건당 1 단위씩 증감하는 점유 카운터입니다.
출고일(exit_date)이 없는 입출고 기록은 배송이 현재 그 창고에 있음을 뜻하며, 배송당 최대 하나입니다.
"""

from typing import Optional
from datetime import date, datetime, UTC
from enum import Enum
from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from app.core.columns import created_at_column, enum_column, timestamp_column


class WarehouseType(str, Enum):
    """창고 유형"""
    CENTRAL = "Central"
    REGIONAL = "Regional"
    LOCAL = "Local"


class MovementStatus(str, Enum):
    """입출고 기록 상태 (입고 시 Received, 출고 시 Dispatched)"""
    RECEIVED = "Received"
    IN_STORAGE = "InStorage"
    PROCESSING = "Processing"
    DISPATCHED = "Dispatched"


# =============================================================================
# 1. warehouses 테이블 모델
# =============================================================================
class Warehouse(SQLModel, table=True):
    """
    창고 정보 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "warehouses"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, description="창고명")
    code: str = Field(max_length=20, unique=True, index=True, description="창고 코드 (고유)")
    address: str = Field(max_length=300, description="주소")
    city: str = Field(max_length=100, description="도시")
    department: str = Field(max_length=50, description="주(Departamento)")
    phone: str = Field(max_length=20, description="연락처")
    email: Optional[str] = Field(default=None, max_length=100, description="이메일")
    max_capacity_m3: float = Field(description="최대 수용량")
    current_capacity_m3: float = Field(default=0, description="현재 점유량 (배송 1건당 1 단위)")
    type: WarehouseType = Field(sa_column=enum_column(WarehouseType), description="창고 유형")
    is_active: bool = Field(default=True, description="활성 여부")
    operating_hours: Optional[str] = Field(default=None, max_length=100, description="운영 시간")
    manager_name: Optional[str] = Field(default=None, max_length=100, description="책임자명")
    latitude: Optional[float] = Field(default=None, description="위도")
    longitude: Optional[float] = Field(default=None, description="경도")
    opening_date: Optional[date] = Field(default=None, description="개설일")
    notes: Optional[str] = Field(default=None, max_length=500, description="비고")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=created_at_column(),
        description="레코드 생성 일시"
    )


# =============================================================================
# 2. shipment_warehouses 테이블 모델
# =============================================================================
class ShipmentWarehouse(SQLModel, table=True):
    """
    배송의 창고 입고/출고 기록 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "shipment_warehouses"
    __table_args__ = (
        # 배송당 미출고(exit_date IS NULL) 기록은 하나만 허용
        Index(
            "uq_shipment_warehouses_open_shipment",
            "shipment_id",
            unique=True,
            sqlite_where=text("exit_date IS NULL"),
            postgresql_where=text("exit_date IS NULL"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    shipment_id: int = Field(foreign_key="shipments.id", ondelete="CASCADE", index=True, description="배송 ID (FK)")
    warehouse_id: int = Field(foreign_key="warehouses.id", index=True, description="창고 ID (FK)")
    entry_date: Optional[datetime] = Field(
        default=None, sa_column=timestamp_column(nullable=False), description="입고 일시"
    )
    exit_date: Optional[datetime] = Field(
        default=None, sa_column=timestamp_column(index=True), description="출고 일시 (없으면 보관 중)"
    )
    status: MovementStatus = Field(sa_column=enum_column(MovementStatus), description="입출고 상태")
    received_by: Optional[str] = Field(default=None, max_length=100, description="입고 담당자")
    dispatched_by: Optional[str] = Field(default=None, max_length=100, description="출고 담당자")
    storage_location: Optional[str] = Field(default=None, max_length=50, description="보관 위치")
    notes: Optional[str] = Field(default=None, max_length=500, description="비고")
