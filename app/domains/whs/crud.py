# app/domains/whs/crud.py

"""
'whs' 도메인 (창고/입출고 기록)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.shp.models import Shipment
from . import models as whs_models
from . import schemas as whs_schemas


logger = logging.getLogger(__name__)


# =============================================================================
# 1. 창고 (Warehouse) CRUD
# =============================================================================
class CRUDWarehouse(
    CRUDBase[
        whs_models.Warehouse,
        whs_schemas.WarehouseCreate,
        whs_schemas.WarehouseUpdate
    ]
):
    def __init__(self):
        super().__init__(model=whs_models.Warehouse)

    async def get_by_code(
        self, db: AsyncSession, *, code: str, exclude_id: Optional[int] = None
    ) -> Optional[whs_models.Warehouse]:
        """창고 코드(대소문자 무시)로 조회합니다."""
        conditions = [func.lower(self.model.code) == code.strip().lower()]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.get_one_filtered(db, conditions=conditions)

    async def get_active(self, db: AsyncSession) -> List[whs_models.Warehouse]:
        return await self.get_filtered(
            db, conditions=[self.model.is_active.is_(True)], order_by=[self.model.name]
        )

    async def get_available(self, db: AsyncSession, *, required_capacity: float) -> List[whs_models.Warehouse]:
        """여유 용량(최대 - 현재)이 요구량 이상인 활성 창고, 여유 용량 내림차순"""
        free = self.model.max_capacity_m3 - self.model.current_capacity_m3
        return await self.get_filtered(
            db,
            conditions=[self.model.is_active.is_(True), free >= required_capacity],
            order_by=[free.desc(), self.model.id],
        )

    async def search(
        self, db: AsyncSession, *, filters: whs_schemas.WarehouseQueryFilter
    ) -> List[whs_models.Warehouse]:
        conditions = []
        if filters.name:
            conditions.append(self.model.name.ilike(f"%{filters.name}%"))
        if filters.code:
            conditions.append(self.model.code.ilike(f"%{filters.code}%"))
        if filters.city:
            conditions.append(self.model.city.ilike(f"%{filters.city}%"))
        if filters.department:
            conditions.append(func.lower(self.model.department) == filters.department.strip().lower())
        if filters.type is not None:
            conditions.append(self.model.type == filters.type)
        if filters.is_active is not None:
            conditions.append(self.model.is_active.is_(filters.is_active))
        if filters.min_available_capacity is not None:
            conditions.append(
                self.model.max_capacity_m3 - self.model.current_capacity_m3 >= filters.min_available_capacity
            )
        if filters.max_occupancy_percentage is not None:
            conditions.append(
                self.model.current_capacity_m3 * 100 <= self.model.max_capacity_m3 * filters.max_occupancy_percentage
            )
        return await self.get_filtered(db, conditions=conditions)


# =============================================================================
# 2. 배송 입출고 (ShipmentWarehouse) CRUD
# =============================================================================
class CRUDShipmentWarehouse(
    CRUDBase[
        whs_models.ShipmentWarehouse,
        whs_schemas.ShipmentWarehouseEntry,
        whs_schemas.ShipmentWarehouseExit
    ]
):
    def __init__(self):
        super().__init__(model=whs_models.ShipmentWarehouse)

    async def get_open_for_shipment(
        self, db: AsyncSession, *, shipment_id: int
    ) -> Optional[whs_models.ShipmentWarehouse]:
        """배송의 출고되지 않은(보관 중) 기록"""
        return await self.get_one_filtered(
            db, conditions=[self.model.shipment_id == shipment_id, self.model.exit_date.is_(None)]
        )

    async def get_open_in_warehouse(
        self, db: AsyncSession, *, warehouse_id: int
    ) -> List[whs_models.ShipmentWarehouse]:
        return await self.get_filtered(
            db,
            conditions=[self.model.warehouse_id == warehouse_id, self.model.exit_date.is_(None)],
            order_by=[self.model.entry_date, self.model.id],
        )

    async def get_by_shipment(self, db: AsyncSession, *, shipment_id: int) -> List[whs_models.ShipmentWarehouse]:
        return await self.get_filtered(db, conditions=[self.model.shipment_id == shipment_id])

    async def get_by_warehouse(self, db: AsyncSession, *, warehouse_id: int) -> List[whs_models.ShipmentWarehouse]:
        return await self.get_filtered(db, conditions=[self.model.warehouse_id == warehouse_id])

    async def history_for_shipment(self, db: AsyncSession, *, shipment_id: int) -> List[Dict[str, Any]]:
        """배송의 창고 경유 기록 (창고명/도시 포함), 최근 입고순"""
        warehouse = whs_models.Warehouse
        statement = (
            select(
                self.model.shipment_id,
                Shipment.tracking_number,
                self.model.warehouse_id,
                warehouse.name.label("warehouse_name"),
                warehouse.city,
                self.model.entry_date,
                self.model.exit_date,
                self.model.status,
                self.model.storage_location,
            )
            .join(Shipment, Shipment.id == self.model.shipment_id)
            .join(warehouse, warehouse.id == self.model.warehouse_id)
            .where(self.model.shipment_id == shipment_id)
            .order_by(self.model.entry_date.desc(), self.model.id.desc())
        )
        result = await db.execute(statement)
        return [dict(row._mapping) for row in result.all()]

    async def search(
        self, db: AsyncSession, *, filters: whs_schemas.ShipmentWarehouseQueryFilter
    ) -> List[whs_models.ShipmentWarehouse]:
        conditions = []
        if filters.shipment_id is not None:
            conditions.append(self.model.shipment_id == filters.shipment_id)
        if filters.warehouse_id is not None:
            conditions.append(self.model.warehouse_id == filters.warehouse_id)
        if filters.status is not None:
            conditions.append(self.model.status == filters.status)
        if filters.has_exited is True:
            conditions.append(self.model.exit_date.is_not(None))
        elif filters.has_exited is False:
            conditions.append(self.model.exit_date.is_(None))
        if filters.entry_date_from is not None:
            conditions.append(self.model.entry_date >= filters.entry_date_from)
        if filters.entry_date_to is not None:
            conditions.append(self.model.entry_date <= filters.entry_date_to)
        return await self.get_filtered(db, conditions=conditions)


warehouse = CRUDWarehouse()
shipment_warehouse = CRUDShipmentWarehouse()
