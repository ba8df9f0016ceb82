# app/domains/flt/crud.py

"""
'flt' 도메인 (운전자/차량)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import List, Optional
from datetime import date, timedelta
import logging

from sqlalchemy import and_, func, or_, update
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from . import models as flt_models
from . import schemas as flt_schemas


logger = logging.getLogger(__name__)

MAINTENANCE_DUE_DAYS = 7
MAINTENANCE_DUE_KM = 10000


# =============================================================================
# 1. 운전자 (Driver) CRUD
# =============================================================================
class CRUDDriver(
    CRUDBase[
        flt_models.Driver,
        flt_schemas.DriverCreate,
        flt_schemas.DriverUpdate
    ]
):
    def __init__(self):
        super().__init__(model=flt_models.Driver)

    async def get_by_license_number(
        self, db: AsyncSession, *, license_number: str, exclude_id: Optional[int] = None
    ) -> Optional[flt_models.Driver]:
        conditions = [func.lower(self.model.license_number) == license_number.strip().lower()]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.get_one_filtered(db, conditions=conditions)

    async def get_by_identity_document(
        self, db: AsyncSession, *, identity_document: str, exclude_id: Optional[int] = None
    ) -> Optional[flt_models.Driver]:
        conditions = [func.lower(self.model.identity_document) == identity_document.strip().lower()]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.get_one_filtered(db, conditions=conditions)

    async def get_available(self, db: AsyncSession, *, reference: date) -> List[flt_models.Driver]:
        """배정 가능한 운전자: 활성, Available, 차량 미배정, 면허 유효. 경력/평점 내림차순"""
        return await self.get_filtered(
            db,
            conditions=[
                self.model.is_active.is_(True),
                self.model.status == flt_models.DriverStatus.AVAILABLE,
                self.model.current_vehicle_id.is_(None),
                self.model.license_expiry_date > reference,
            ],
            order_by=[
                self.model.years_of_experience.desc(),
                self.model.average_rating.desc().nulls_last(),
                self.model.id,
            ],
        )

    async def search(
        self, db: AsyncSession, *, filters: flt_schemas.DriverQueryFilter, reference: date
    ) -> List[flt_models.Driver]:
        conditions = []
        if filters.full_name:
            conditions.append(self.model.full_name.ilike(f"%{filters.full_name}%"))
        if filters.license_number:
            conditions.append(self.model.license_number.ilike(f"%{filters.license_number}%"))
        if filters.license_category:
            conditions.append(func.lower(self.model.license_category) == filters.license_category.strip().lower())
        if filters.status is not None:
            conditions.append(self.model.status == filters.status)
        if filters.is_active is not None:
            conditions.append(self.model.is_active.is_(filters.is_active))
        if filters.current_vehicle_id is not None:
            conditions.append(self.model.current_vehicle_id == filters.current_vehicle_id)
        if filters.license_expiring_in_days is not None:
            conditions.append(self.model.license_expiry_date >= reference)
            conditions.append(
                self.model.license_expiry_date <= reference + timedelta(days=filters.license_expiring_in_days)
            )
        if filters.min_years_of_experience is not None:
            conditions.append(self.model.years_of_experience >= filters.min_years_of_experience)
        if filters.min_average_rating is not None:
            conditions.append(self.model.average_rating >= filters.min_average_rating)
        if filters.email:
            conditions.append(self.model.email.ilike(f"%{filters.email}%"))
        if filters.phone:
            conditions.append(self.model.phone.contains(filters.phone))
        return await self.get_filtered(db, conditions=conditions)


# =============================================================================
# 2. 차량 (Vehicle) CRUD
# =============================================================================
class CRUDVehicle(
    CRUDBase[
        flt_models.Vehicle,
        flt_schemas.VehicleCreate,
        flt_schemas.VehicleUpdate
    ]
):
    def __init__(self):
        super().__init__(model=flt_models.Vehicle)

    async def get_by_plate_number(
        self, db: AsyncSession, *, plate_number: str, exclude_id: Optional[int] = None
    ) -> Optional[flt_models.Vehicle]:
        conditions = [func.upper(self.model.plate_number) == plate_number.strip().upper()]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.get_one_filtered(db, conditions=conditions)

    async def get_by_vin(
        self, db: AsyncSession, *, vin: str, exclude_id: Optional[int] = None
    ) -> Optional[flt_models.Vehicle]:
        conditions = [func.upper(self.model.vin) == vin.strip().upper()]
        if exclude_id is not None:
            conditions.append(self.model.id != exclude_id)
        return await self.get_one_filtered(db, conditions=conditions)

    async def get_available(self, db: AsyncSession) -> List[flt_models.Vehicle]:
        """배정 가능한 차량: 활성, Available, 운전자 미배정"""
        return await self.get_filtered(
            db,
            conditions=[
                self.model.is_active.is_(True),
                self.model.status == flt_models.VehicleStatus.AVAILABLE,
                self.model.assigned_driver_id.is_(None),
            ],
        )

    async def get_by_capacity(
        self, db: AsyncSession, *, required_weight: float, required_volume: float
    ) -> List[flt_models.Vehicle]:
        """여유 중량/부피가 요구량 이상인 운행 가능 차량, 여유 중량 내림차순"""
        free_weight = self.model.max_weight_capacity_kg - self.model.current_weight_kg
        free_volume = self.model.max_volume_capacity_m3 - self.model.current_volume_m3
        return await self.get_filtered(
            db,
            conditions=[
                self.model.is_active.is_(True),
                self.model.status == flt_models.VehicleStatus.AVAILABLE,
                free_weight >= required_weight,
                free_volume >= required_volume,
            ],
            order_by=[free_weight.desc(), self.model.id],
        )

    async def clear_base_warehouse(self, db: AsyncSession, *, warehouse_id: int) -> None:
        """삭제되는 창고를 소속 창고로 가진 차량의 참조를 해제합니다. (커밋은 호출자가 수행)"""
        statement = (
            update(self.model)
            .where(self.model.base_warehouse_id == warehouse_id)
            .values(base_warehouse_id=None)
            .execution_options(synchronize_session="fetch")
        )
        await db.execute(statement)
        await db.flush()

    def _maintenance_due(self, reference: date):
        return or_(
            and_(
                self.model.next_maintenance_date.is_not(None),
                self.model.next_maintenance_date <= reference + timedelta(days=MAINTENANCE_DUE_DAYS),
            ),
            and_(
                self.model.last_maintenance_mileage.is_not(None),
                self.model.current_mileage - self.model.last_maintenance_mileage >= MAINTENANCE_DUE_KM,
            ),
        )

    async def search(
        self, db: AsyncSession, *, filters: flt_schemas.VehicleQueryFilter, reference: date
    ) -> List[flt_models.Vehicle]:
        conditions = []
        if filters.plate_number:
            conditions.append(self.model.plate_number.ilike(f"%{filters.plate_number}%"))
        if filters.brand:
            conditions.append(self.model.brand.ilike(f"%{filters.brand}%"))
        if filters.type is not None:
            conditions.append(self.model.type == filters.type)
        if filters.status is not None:
            conditions.append(self.model.status == filters.status)
        if filters.is_active is not None:
            conditions.append(self.model.is_active.is_(filters.is_active))
        if filters.base_warehouse_id is not None:
            conditions.append(self.model.base_warehouse_id == filters.base_warehouse_id)
        if filters.assigned_driver_id is not None:
            conditions.append(self.model.assigned_driver_id == filters.assigned_driver_id)
        if filters.min_available_weight_kg is not None:
            conditions.append(
                self.model.max_weight_capacity_kg - self.model.current_weight_kg >= filters.min_available_weight_kg
            )
        if filters.requires_maintenance is True:
            conditions.append(self._maintenance_due(reference))
        elif filters.requires_maintenance is False:
            conditions.append(~self._maintenance_due(reference))
        return await self.get_filtered(db, conditions=conditions)


driver = CRUDDriver()
vehicle = CRUDVehicle()
