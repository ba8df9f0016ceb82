# app/domains/shp/models.py

"""
'shp' 도메인 (배송 관리)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 노선(routes), 배송(shipments), 소포(packages) 테이블에 대한 SQLModel 클래스를 포함합니다.
배송 상태는 Pending → In transit → Delivered 순서로 진행되며, 상태 전이 규칙은 서비스 계층에서 보장합니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.columns import created_at_column, enum_column, timestamp_column


class ShipmentState(str, Enum):
    """배송 상태 (Pending: 초기 상태, Delivered: 최종 상태)"""
    PENDING = "Pending"
    IN_TRANSIT = "In transit"
    DELIVERED = "Delivered"


# =============================================================================
# 1. routes 테이블 모델
# =============================================================================
class Route(SQLModel, table=True):
    """
    출발지-도착지 노선 정보 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    (출발지, 도착지) 쌍은 고유합니다.
    """
    __tablename__ = "routes"
    __table_args__ = (UniqueConstraint("origin", "destination", name="uq_routes_origin_destination"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    origin: str = Field(max_length=100, description="출발지")
    destination: str = Field(max_length=100, description="도착지")
    distance_km: float = Field(description="거리 (km)")
    base_cost: float = Field(default=0, description="기본 요금")
    is_active: bool = Field(default=True, description="활성 여부")


# =============================================================================
# 2. shipments 테이블 모델
# =============================================================================
class Shipment(SQLModel, table=True):
    """
    배송 정보 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    고객이 삭제되면 배송 완료 이력은 유지되고 고객 참조만 해제됩니다.
    """
    __tablename__ = "shipments"

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: Optional[int] = Field(
        default=None, foreign_key="customers.id", ondelete="SET NULL", index=True, description="고객 ID (FK)"
    )
    route_id: int = Field(foreign_key="routes.id", index=True, description="노선 ID (FK)")
    tracking_number: str = Field(max_length=50, unique=True, index=True, description="추적 번호 (고유)")
    state: ShipmentState = Field(sa_column=enum_column(ShipmentState, index=True), description="배송 상태")
    shipping_date: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=timestamp_column(nullable=False),
        description="발송 일시"
    )
    total_cost: float = Field(description="총 배송 비용")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=created_at_column(),
        description="레코드 생성 일시"
    )


# =============================================================================
# 3. packages 테이블 모델
# =============================================================================
class Package(SQLModel, table=True):
    """
    배송에 포함된 소포 정보 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "packages"

    id: Optional[int] = Field(default=None, primary_key=True)
    shipment_id: int = Field(foreign_key="shipments.id", ondelete="CASCADE", index=True, description="배송 ID (FK)")
    description: str = Field(max_length=200, description="내용물 설명")
    weight: float = Field(description="무게 (kg)")
    price: float = Field(description="신고 가격")
