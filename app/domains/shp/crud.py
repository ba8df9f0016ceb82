# app/domains/shp/crud.py

"""
'shp' 도메인 (노선/배송/소포)과 관련된 CRUD 로직을 담당하는 모듈입니다.
"""

from typing import Any, Dict, List, Optional, Set
from datetime import datetime, time, timedelta
import logging

from sqlalchemy import case, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.cst.models import Customer
from . import models as shp_models
from . import schemas as shp_schemas


logger = logging.getLogger(__name__)

_NOT_DELIVERED = shp_models.Shipment.state != shp_models.ShipmentState.DELIVERED


# =============================================================================
# 1. 노선 (Route) CRUD
# =============================================================================
class CRUDRoute(
    CRUDBase[
        shp_models.Route,
        shp_schemas.RouteCreate,
        shp_schemas.RouteUpdate
    ]
):
    def __init__(self):
        super().__init__(model=shp_models.Route)

    async def get_by_origin_destination(
        self, db: AsyncSession, *, origin: str, destination: str
    ) -> Optional[shp_models.Route]:
        """출발지/도착지(대소문자 무시)로 노선을 조회합니다."""
        return await self.get_one_filtered(
            db,
            conditions=[
                func.lower(self.model.origin) == origin.strip().lower(),
                func.lower(self.model.destination) == destination.strip().lower(),
            ],
        )

    async def get_active(self, db: AsyncSession) -> List[shp_models.Route]:
        return await self.get_filtered(
            db,
            conditions=[self.model.is_active.is_(True)],
            order_by=[self.model.origin, self.model.destination],
        )

    async def search(self, db: AsyncSession, *, filters: shp_schemas.RouteQueryFilter) -> List[shp_models.Route]:
        conditions = []
        if filters.origin:
            conditions.append(self.model.origin.ilike(f"%{filters.origin}%"))
        if filters.destination:
            conditions.append(self.model.destination.ilike(f"%{filters.destination}%"))
        if filters.min_distance_km is not None:
            conditions.append(self.model.distance_km >= filters.min_distance_km)
        if filters.max_distance_km is not None:
            conditions.append(self.model.distance_km <= filters.max_distance_km)
        if filters.min_base_cost is not None:
            conditions.append(self.model.base_cost >= filters.min_base_cost)
        if filters.max_base_cost is not None:
            conditions.append(self.model.base_cost <= filters.max_base_cost)
        if filters.is_active is not None:
            conditions.append(self.model.is_active.is_(filters.is_active))
        return await self.get_filtered(db, conditions=conditions)

    async def usage_ranking(self, db: AsyncSession, *, limit: int) -> List[Dict[str, Any]]:
        """노선별 배송 건수/매출 집계를 배송 건수, 매출 내림차순으로 반환합니다."""
        shipment = shp_models.Shipment
        total_shipments = func.count(shipment.id)
        total_revenue = func.coalesce(func.sum(shipment.total_cost), 0)
        statement = (
            select(
                self.model,
                total_shipments.label("total_shipments"),
                func.coalesce(func.sum(case((_NOT_DELIVERED, 1), else_=0)), 0).label("active_shipments"),
                func.coalesce(
                    func.sum(case((shipment.state == shp_models.ShipmentState.DELIVERED, 1), else_=0)), 0
                ).label("completed_shipments"),
                total_revenue.label("total_revenue"),
                func.coalesce(func.avg(shipment.total_cost), 0).label("average_revenue"),
            )
            .outerjoin(shipment, shipment.route_id == self.model.id)
            .group_by(self.model.id)
            .order_by(total_shipments.desc(), total_revenue.desc(), self.model.id)
            .limit(limit)
        )
        result = await db.execute(statement)
        return [dict(row._mapping) for row in result.all()]


# =============================================================================
# 2. 배송 (Shipment) CRUD
# =============================================================================
class CRUDShipment(
    CRUDBase[
        shp_models.Shipment,
        shp_schemas.ShipmentCreate,
        shp_schemas.ShipmentUpdate
    ]
):
    def __init__(self):
        super().__init__(model=shp_models.Shipment)

    async def get_by_tracking_number(
        self, db: AsyncSession, *, tracking_number: str
    ) -> Optional[shp_models.Shipment]:
        return await self.get_by_attribute(db, attribute="tracking_number", value=tracking_number)

    async def count_active_by_customer(self, db: AsyncSession, *, customer_id: int) -> int:
        """고객의 배송 완료되지 않은(활성) 배송 수"""
        return await self.count(db, conditions=[self.model.customer_id == customer_id, _NOT_DELIVERED])

    async def customer_ids_with_active(self, db: AsyncSession) -> Set[int]:
        statement = select(self.model.customer_id).where(_NOT_DELIVERED, self.model.customer_id.is_not(None)).distinct()
        result = await db.execute(statement)
        return set(result.scalars().all())

    async def exists_for_route(self, db: AsyncSession, *, route_id: int) -> bool:
        return await self.exists(db, conditions=[self.model.route_id == route_id])

    async def clear_customer(self, db: AsyncSession, *, customer_id: int) -> None:
        """고객 참조를 해제합니다. 커밋은 호출자가 수행합니다."""
        statement = (
            update(self.model)
            .where(self.model.customer_id == customer_id)
            .values(customer_id=None)
            .execution_options(synchronize_session="fetch")
        )
        await db.execute(statement)
        await db.flush()

    async def search(
        self, db: AsyncSession, *, filters: shp_schemas.ShipmentQueryFilter
    ) -> List[shp_models.Shipment]:
        conditions = []
        if filters.customer_id is not None:
            conditions.append(self.model.customer_id == filters.customer_id)
        if filters.route_id is not None:
            conditions.append(self.model.route_id == filters.route_id)
        if filters.state is not None:
            conditions.append(self.model.state == filters.state)
        if filters.shipping_date is not None:
            day_start = datetime.combine(filters.shipping_date, time.min)
            conditions.append(self.model.shipping_date >= day_start)
            conditions.append(self.model.shipping_date < day_start + timedelta(days=1))
        if filters.tracking_number:
            conditions.append(self.model.tracking_number.ilike(f"%{filters.tracking_number}%"))
        if filters.min_total_cost is not None:
            conditions.append(self.model.total_cost >= filters.min_total_cost)
        if filters.max_total_cost is not None:
            conditions.append(self.model.total_cost <= filters.max_total_cost)
        return await self.get_filtered(db, conditions=conditions)

    async def with_customer_and_route(self, db: AsyncSession) -> List[Dict[str, Any]]:
        """배송, 고객명, 노선 정보를 결합하여 최신 발송순으로 조회합니다."""
        route = shp_models.Route
        statement = (
            select(
                self.model.id.label("shipment_id"),
                self.model.tracking_number,
                Customer.name.label("customer_name"),
                route.id.label("route_id"),
                route.origin,
                route.destination,
                self.model.shipping_date,
                self.model.state,
                self.model.total_cost,
            )
            .join(route, route.id == self.model.route_id)
            .outerjoin(Customer, Customer.id == self.model.customer_id)
            .order_by(self.model.shipping_date.desc(), self.model.id.desc())
        )
        result = await db.execute(statement)
        return [dict(row._mapping) for row in result.all()]

    async def history_for_customer(self, db: AsyncSession, *, customer_id: int) -> List[Dict[str, Any]]:
        """고객의 배송 이력 (노선 정보 + 소포 집계), 최신순"""
        route = shp_models.Route
        package = shp_models.Package
        statement = (
            select(
                self.model.id.label("shipment_id"),
                self.model.tracking_number,
                self.model.shipping_date,
                self.model.state,
                self.model.total_cost,
                route.origin.label("route_origin"),
                route.destination.label("route_destination"),
                route.distance_km.label("route_distance_km"),
                func.count(package.id).label("package_count"),
                func.coalesce(func.sum(package.weight), 0).label("total_weight"),
                func.coalesce(func.sum(package.price), 0).label("total_value"),
            )
            .join(route, route.id == self.model.route_id)
            .outerjoin(package, package.shipment_id == self.model.id)
            .where(self.model.customer_id == customer_id)
            .group_by(
                self.model.id, self.model.tracking_number, self.model.shipping_date, self.model.state,
                self.model.total_cost, route.origin, route.destination, route.distance_km,
            )
            .order_by(self.model.shipping_date.desc(), self.model.id.desc())
        )
        result = await db.execute(statement)
        return [dict(row._mapping) for row in result.all()]


# =============================================================================
# 3. 소포 (Package) CRUD
# =============================================================================
class CRUDPackage(
    CRUDBase[
        shp_models.Package,
        shp_schemas.PackageCreate,
        shp_schemas.PackageUpdate
    ]
):
    def __init__(self):
        super().__init__(model=shp_models.Package)

    async def count_by_shipment(self, db: AsyncSession, *, shipment_id: int) -> int:
        return await self.count(db, conditions=[self.model.shipment_id == shipment_id])

    async def get_by_shipment(self, db: AsyncSession, *, shipment_id: int) -> List[shp_models.Package]:
        return await self.get_filtered(db, conditions=[self.model.shipment_id == shipment_id])

    async def get_heavy(self, db: AsyncSession, *, min_weight: float) -> List[shp_models.Package]:
        return await self.get_filtered(
            db,
            conditions=[self.model.weight >= min_weight],
            order_by=[self.model.weight.desc(), self.model.id],
        )

    async def summary_for_shipment(self, db: AsyncSession, *, shipment_id: int) -> Dict[str, Any]:
        statement = select(
            func.count(self.model.id).label("total_packages"),
            func.coalesce(func.sum(self.model.weight), 0).label("total_weight"),
            func.coalesce(func.sum(self.model.price), 0).label("total_value"),
            func.coalesce(func.avg(self.model.weight), 0).label("avg_weight"),
            func.coalesce(func.avg(self.model.price), 0).label("avg_value"),
        ).where(self.model.shipment_id == shipment_id)
        result = await db.execute(statement)
        return dict(result.one()._mapping)

    def _conditions(self, filters: shp_schemas.PackageQueryFilter) -> List[Any]:
        conditions = []
        if filters.shipment_id is not None:
            conditions.append(self.model.shipment_id == filters.shipment_id)
        if filters.description:
            conditions.append(self.model.description.ilike(f"%{filters.description}%"))
        if filters.min_weight is not None:
            conditions.append(self.model.weight >= filters.min_weight)
        if filters.max_weight is not None:
            conditions.append(self.model.weight <= filters.max_weight)
        if filters.min_price is not None:
            conditions.append(self.model.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(self.model.price <= filters.max_price)
        return conditions

    async def search(
        self, db: AsyncSession, *, filters: shp_schemas.PackageQueryFilter
    ) -> List[shp_models.Package]:
        return await self.get_filtered(db, conditions=self._conditions(filters))

    async def details(
        self, db: AsyncSession, *, filters: shp_schemas.PackageQueryFilter
    ) -> List[Dict[str, Any]]:
        """소포별 배송, 고객, 노선 정보를 결합하여 조회합니다. (고객이 해제된 배송도 포함)"""
        shipment = shp_models.Shipment
        route = shp_models.Route
        statement = (
            select(
                self.model.id.label("package_id"),
                self.model.description,
                self.model.weight,
                self.model.price,
                shipment.id.label("shipment_id"),
                shipment.tracking_number,
                shipment.state.label("shipment_state"),
                shipment.shipping_date,
                Customer.id.label("customer_id"),
                Customer.name.label("customer_name"),
                route.id.label("route_id"),
                route.origin.label("route_origin"),
                route.destination.label("route_destination"),
            )
            .join(shipment, shipment.id == self.model.shipment_id)
            .join(route, route.id == shipment.route_id)
            .outerjoin(Customer, Customer.id == shipment.customer_id)
            .where(*self._conditions(filters))
            .order_by(self.model.id)
        )
        result = await db.execute(statement)
        return [dict(row._mapping) for row in result.all()]


route = CRUDRoute()
shipment = CRUDShipment()
package = CRUDPackage()
