# app/domains/shp/services.py

"""
'shp' 도메인 (노선/배송/소포)의 비즈니스 로직을 담당하는 서비스 모듈입니다.

- 노선: 출발지/도착지 검증 및 (출발지, 도착지) 중복 금지, 배송이 연결된 노선의 출발지/도착지 변경 금지.
- 배송: 상태 머신 Pending → In transit → Delivered.
  'Delivered'로의 전이는 현재 저장된 상태가 'In transit'일 때만 허용합니다. (그 외 전이는 검사하지 않음)
  고객당 활성(미배송 완료) 배송은 최대 3건입니다.
- 소포: 배송당 최대 50개, 배송 완료된 배송의 소포는 추가/수정/삭제할 수 없습니다.

고객/창고 도메인의 정보는 해당 도메인의 서비스 함수를 통해서만 조회/변경합니다.
"""

import logging
from typing import Any, Dict, List, Optional, Set

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.core.pagination import ResponseData, build_response
from app.core import validation
from app.domains.cst import services as cst_services
from app.domains.whs import services as whs_services
from . import crud as shp_crud
from . import models as shp_models
from . import schemas as shp_schemas

logger = logging.getLogger(__name__)

MAX_ACTIVE_SHIPMENTS_PER_CUSTOMER = 3
MAX_PACKAGES_PER_SHIPMENT = 50
MAX_PACKAGE_WEIGHT_KG = 100
DEFAULT_HEAVY_PACKAGE_KG = 50
DEFAULT_RANKING_LIMIT = 10


# =============================================================================
# 1. 노선 (Route) 서비스
# =============================================================================
def _validate_route(data: Dict[str, Any]) -> Dict[str, Any]:
    """노선 필드 규칙 집합. 통과하면 정규화된 값을 반환합니다."""
    origin = (data.get("origin") or "").strip()
    destination = (data.get("destination") or "").strip()
    validation.require_length(origin, 3, 100, "El origen debe tener entre 3 y 100 caracteres")
    validation.require_length(destination, 3, 100, "El destino debe tener entre 3 y 100 caracteres")
    if origin.lower() == destination.lower():
        raise BusinessRuleError("El origen y destino deben ser diferentes")

    if data.get("distance_km") is None or data["distance_km"] <= 0:
        raise BusinessRuleError("La distancia debe ser mayor a 0 km")
    if data.get("base_cost") is None or data["base_cost"] < 0:
        raise BusinessRuleError("El costo base no puede ser negativo")

    data["origin"] = origin
    data["destination"] = destination
    return data


async def list_routes(db: AsyncSession, filters: shp_schemas.RouteQueryFilter) -> ResponseData:
    routes = await shp_crud.route.search(db, filters=filters)
    return build_response(routes, filters.page_number, filters.page_size, "rutas")


async def get_route(db: AsyncSession, route_id: int) -> shp_models.Route:
    if route_id <= 0:
        raise BusinessRuleError("El ID de la ruta debe ser mayor a 0")
    db_route = await shp_crud.route.get(db, id=route_id)
    if db_route is None:
        raise NotFoundError(f"La ruta con ID {route_id} no existe")
    return db_route


async def get_active_routes(db: AsyncSession) -> List[shp_models.Route]:
    return await shp_crud.route.get_active(db)


async def get_most_used_routes(
    db: AsyncSession, limit: int = DEFAULT_RANKING_LIMIT
) -> List[shp_schemas.RouteRankingRead]:
    """배송 건수(동률이면 매출) 기준 노선 이용 순위"""
    if limit <= 0:
        limit = DEFAULT_RANKING_LIMIT
    rows = await shp_crud.route.usage_ranking(db, limit=limit)

    ranking = []
    for rank, row in enumerate(rows, start=1):
        db_route = row["Route"]
        cost_per_km = round(db_route.base_cost / db_route.distance_km, 2) if db_route.distance_km else 0.0
        ranking.append(
            shp_schemas.RouteRankingRead(
                route_id=db_route.id,
                origin=db_route.origin,
                destination=db_route.destination,
                distance_km=db_route.distance_km,
                base_cost=db_route.base_cost,
                is_active=db_route.is_active,
                total_shipments=row["total_shipments"],
                active_shipments=row["active_shipments"],
                completed_shipments=row["completed_shipments"],
                total_revenue=round(float(row["total_revenue"]), 2),
                average_revenue=round(float(row["average_revenue"]), 2),
                cost_per_km=cost_per_km,
                rank=rank,
            )
        )
    return ranking


async def create_route(db: AsyncSession, obj_in: shp_schemas.RouteCreate) -> shp_models.Route:
    data = _validate_route(obj_in.model_dump())
    if await shp_crud.route.get_by_origin_destination(
        db, origin=data["origin"], destination=data["destination"]
    ):
        raise BusinessRuleError(f"Ya existe una ruta de {data['origin']} a {data['destination']}")

    db_route = await shp_crud.route.create(db, obj_in=data)
    logger.info("Route %s created (%s -> %s)", db_route.id, db_route.origin, db_route.destination)
    return db_route


async def update_route(db: AsyncSession, route_id: int, obj_in: shp_schemas.RouteUpdate) -> shp_models.Route:
    db_route = await get_route(db, route_id)

    merged = db_route.model_dump(exclude={"id"})
    merged.update(obj_in.model_dump(exclude_unset=True, exclude_none=True))
    data = _validate_route(merged)

    endpoints_changed = (
        data["origin"].lower() != db_route.origin.lower()
        or data["destination"].lower() != db_route.destination.lower()
    )
    if endpoints_changed:
        if await shp_crud.shipment.exists_for_route(db, route_id=route_id):
            raise BusinessRuleError("No se puede modificar origen/destino de una ruta con envíos asociados")
        duplicate = await shp_crud.route.get_by_origin_destination(
            db, origin=data["origin"], destination=data["destination"]
        )
        if duplicate and duplicate.id != route_id:
            raise BusinessRuleError(f"Ya existe otra ruta de {data['origin']} a {data['destination']}")

    db_route = await shp_crud.route.update(db, db_obj=db_route, obj_in=data)
    logger.info("Route %s updated", route_id)
    return db_route


async def delete_route(db: AsyncSession, route_id: int) -> None:
    await get_route(db, route_id)
    if await shp_crud.shipment.exists_for_route(db, route_id=route_id):
        raise BusinessRuleError("No se puede eliminar una ruta con envíos asociados")
    await shp_crud.route.delete(db, id=route_id)
    logger.info("Route %s deleted", route_id)


# =============================================================================
# 2. 배송 (Shipment) 서비스
# =============================================================================
async def _check_route_usable(db: AsyncSession, route_id: int) -> None:
    db_route = await shp_crud.route.get(db, id=route_id)
    if db_route is None:
        raise BusinessRuleError("La ruta asignada no existe")
    if not db_route.is_active:
        raise BusinessRuleError("No se pueden registrar envios en una ruta inactiva")


def _validate_tracking_and_cost(data: Dict[str, Any]) -> None:
    if data.get("total_cost") is None or data["total_cost"] <= 0:
        raise BusinessRuleError("El costo total debe ser mayor que 0")
    if validation.is_blank(data.get("tracking_number")):
        raise BusinessRuleError("El número de seguimiento no puede estar vacío")
    validation.max_length(data["tracking_number"], 50, "El número de seguimiento no puede exceder 50 caracteres")


async def _check_active_limit(db: AsyncSession, customer_id: int) -> None:
    active = await shp_crud.shipment.count_active_by_customer(db, customer_id=customer_id)
    if active >= MAX_ACTIVE_SHIPMENTS_PER_CUSTOMER:
        raise BusinessRuleError(
            f"El cliente ya tiene {MAX_ACTIVE_SHIPMENTS_PER_CUSTOMER} envíos activos. No puede registrar mas"
        )


async def list_shipments(db: AsyncSession, filters: shp_schemas.ShipmentQueryFilter) -> ResponseData:
    shipments = await shp_crud.shipment.search(db, filters=filters)
    return build_response(shipments, filters.page_number, filters.page_size, "envíos")


async def find_shipment(db: AsyncSession, shipment_id: int) -> Optional[shp_models.Shipment]:
    """배송을 조회합니다. 없으면 None (다른 도메인의 존재 확인용)."""
    return await shp_crud.shipment.get(db, id=shipment_id)


async def get_shipment(db: AsyncSession, shipment_id: int) -> shp_models.Shipment:
    if shipment_id <= 0:
        raise BusinessRuleError("El ID del envío debe ser mayor a 0")
    db_shipment = await shp_crud.shipment.get(db, id=shipment_id)
    if db_shipment is None:
        raise NotFoundError(f"El envío con ID {shipment_id} no existe")
    return db_shipment


async def get_shipments_with_customer_and_route(db: AsyncSession) -> List[shp_schemas.ShipmentCustomerRouteRead]:
    rows = await shp_crud.shipment.with_customer_and_route(db)
    return [shp_schemas.ShipmentCustomerRouteRead(**row) for row in rows]


async def create_shipment(db: AsyncSession, obj_in: shp_schemas.ShipmentCreate) -> shp_models.Shipment:
    """
    배송을 등록합니다. 초기 상태는 반드시 'Pending'이어야 합니다.
    """
    data = obj_in.model_dump(exclude_none=True)
    data["tracking_number"] = (data.get("tracking_number") or "").strip()

    if await cst_services.find_customer(db, obj_in.customer_id) is None:
        raise BusinessRuleError("El cliente no existe")
    await _check_route_usable(db, obj_in.route_id)

    if data["tracking_number"] and await shp_crud.shipment.get_by_tracking_number(
        db, tracking_number=data["tracking_number"]
    ):
        raise BusinessRuleError("El codigo de seguimiento ya existe. Debe ser unico")
    _validate_tracking_and_cost(data)
    await _check_active_limit(db, obj_in.customer_id)

    if obj_in.state != shp_models.ShipmentState.PENDING:
        raise BusinessRuleError("El estado inicial del envio debe ser 'Pending'.")

    db_shipment = await shp_crud.shipment.create(db, obj_in=data)
    logger.info(
        "Shipment %s created (tracking=%s, customer=%s, route=%s)",
        db_shipment.id, db_shipment.tracking_number, db_shipment.customer_id, db_shipment.route_id,
    )
    return db_shipment


async def update_shipment(
    db: AsyncSession, shipment_id: int, obj_in: shp_schemas.ShipmentUpdate
) -> shp_models.Shipment:
    """
    배송을 부분 업데이트합니다.
    요청에 `state='Delivered'`가 포함되면 현재 저장된 상태가 'In transit'이어야 합니다.
    """
    db_shipment = await get_shipment(db, shipment_id)
    changes = obj_in.model_dump(exclude_unset=True, exclude_none=True)

    new_state = changes.get("state")
    if new_state == shp_models.ShipmentState.DELIVERED and db_shipment.state != shp_models.ShipmentState.IN_TRANSIT:
        raise BusinessRuleError("El envio no puede pasar a 'Delivered' sin haber estado 'In transit'")

    if "tracking_number" in changes:
        changes["tracking_number"] = changes["tracking_number"].strip()
    merged = db_shipment.model_dump(include={"tracking_number", "total_cost"})
    merged.update(changes)
    _validate_tracking_and_cost(merged)

    if merged["tracking_number"] != db_shipment.tracking_number:
        existing = await shp_crud.shipment.get_by_tracking_number(db, tracking_number=merged["tracking_number"])
        if existing and existing.id != shipment_id:
            raise BusinessRuleError("El codigo de seguimiento ya existe. Debe ser unico")

    if "route_id" in changes and changes["route_id"] != db_shipment.route_id:
        await _check_route_usable(db, changes["route_id"])

    customer_changed = "customer_id" in changes and changes["customer_id"] != db_shipment.customer_id
    if customer_changed and await cst_services.find_customer(db, changes["customer_id"]) is None:
        raise BusinessRuleError("El cliente no existe")

    # 고객의 활성 배송 수에 새로 포함되는 경우 (고객 변경 또는 Delivered → 활성 상태 복귀)
    target_customer_id = changes.get("customer_id", db_shipment.customer_id)
    active_after = (new_state or db_shipment.state) != shp_models.ShipmentState.DELIVERED
    already_counted = not customer_changed and db_shipment.state != shp_models.ShipmentState.DELIVERED
    if active_after and not already_counted and target_customer_id is not None:
        await _check_active_limit(db, target_customer_id)

    previous_state = db_shipment.state
    db_shipment = await shp_crud.shipment.update(db, db_obj=db_shipment, obj_in=changes)
    if new_state is not None and new_state != previous_state:
        logger.info(
            "Shipment %s state changed: %s -> %s",
            shipment_id, shp_models.ShipmentState(previous_state).value, shp_models.ShipmentState(new_state).value,
        )
    else:
        logger.info("Shipment %s updated", shipment_id)
    return db_shipment


async def delete_shipment(db: AsyncSession, shipment_id: int) -> None:
    """
    배송을 삭제합니다. 배송 완료된 배송은 삭제할 수 없습니다.
    소포와 창고 입출고 기록도 함께 삭제되며, 창고에 보관 중이면 점유 용량을 반환합니다.
    """
    db_shipment = await get_shipment(db, shipment_id)
    if db_shipment.state == shp_models.ShipmentState.DELIVERED:
        raise BusinessRuleError("No se puede eliminar un envio entregado")

    for db_package in await shp_crud.package.get_by_shipment(db, shipment_id=shipment_id):
        await db.delete(db_package)
    await db.flush()
    await whs_services.release_shipment(db, shipment_id)
    await shp_crud.shipment.delete(db, id=shipment_id)
    logger.info("Shipment %s deleted", shipment_id)


# -----------------------------------------------------------------------------
# 다른 도메인에서 사용하는 배송 조회/변경 함수
# -----------------------------------------------------------------------------
async def count_active_shipments(db: AsyncSession, *, customer_id: int) -> int:
    return await shp_crud.shipment.count_active_by_customer(db, customer_id=customer_id)


async def customer_ids_with_active_shipments(db: AsyncSession) -> Set[int]:
    return await shp_crud.shipment.customer_ids_with_active(db)


async def shipment_history_for_customer(db: AsyncSession, customer_id: int) -> List[Dict[str, Any]]:
    rows = await shp_crud.shipment.history_for_customer(db, customer_id=customer_id)
    for row in rows:
        row["state"] = shp_models.ShipmentState(row["state"]).value
    return rows


async def detach_customer(db: AsyncSession, customer_id: int) -> None:
    """삭제되는 고객의 배송 이력에서 고객 참조를 해제합니다. (커밋은 호출자가 수행)"""
    await shp_crud.shipment.clear_customer(db, customer_id=customer_id)


# =============================================================================
# 3. 소포 (Package) 서비스
# =============================================================================
def _validate_package(data: Dict[str, Any]) -> Dict[str, Any]:
    description = (data.get("description") or "").strip()
    if len(description) < 3 or len(description) > 200:
        raise BusinessRuleError("La descripcion es invalida")
    weight = data.get("weight")
    if weight is None or weight <= 0 or weight > MAX_PACKAGE_WEIGHT_KG:
        raise BusinessRuleError(
            f"Peso invalido. Debe ser mayor que 0 y menor o igual a {MAX_PACKAGE_WEIGHT_KG} kg"
        )
    if data.get("price") is None or data["price"] <= 0:
        raise BusinessRuleError("El precio debe ser mayor que 0")
    data["description"] = description
    return data


async def list_packages(db: AsyncSession, filters: shp_schemas.PackageQueryFilter) -> ResponseData:
    packages = await shp_crud.package.search(db, filters=filters)
    return build_response(packages, filters.page_number, filters.page_size, "paquetes")


async def get_package_details(db: AsyncSession, filters: shp_schemas.PackageQueryFilter) -> ResponseData:
    rows = await shp_crud.package.details(db, filters=filters)
    details = [shp_schemas.PackageDetailRead(**row) for row in rows]
    return build_response(details, filters.page_number, filters.page_size, "paquetes")


async def get_package(db: AsyncSession, package_id: int) -> shp_models.Package:
    if package_id <= 0:
        raise BusinessRuleError("El ID del paquete debe ser mayor a 0")
    db_package = await shp_crud.package.get(db, id=package_id)
    if db_package is None:
        raise NotFoundError(f"El paquete con ID {package_id} no existe")
    return db_package


async def get_heavy_packages(db: AsyncSession, min_weight: float = DEFAULT_HEAVY_PACKAGE_KG) -> List[shp_models.Package]:
    return await shp_crud.package.get_heavy(db, min_weight=min_weight)


async def get_package_summary(db: AsyncSession, shipment_id: int) -> shp_schemas.PackageSummaryRead:
    await get_shipment(db, shipment_id)
    row = await shp_crud.package.summary_for_shipment(db, shipment_id=shipment_id)
    return shp_schemas.PackageSummaryRead(
        shipment_id=shipment_id,
        total_packages=row["total_packages"],
        total_weight=round(float(row["total_weight"]), 2),
        total_value=round(float(row["total_value"]), 2),
        avg_weight=round(float(row["avg_weight"]), 2),
        avg_value=round(float(row["avg_value"]), 2),
    )


async def create_package(db: AsyncSession, obj_in: shp_schemas.PackageCreate) -> shp_models.Package:
    data = _validate_package(obj_in.model_dump())

    db_shipment = await shp_crud.shipment.get(db, id=obj_in.shipment_id)
    if db_shipment is None:
        raise BusinessRuleError("El envio asociado no existe")
    if db_shipment.state == shp_models.ShipmentState.DELIVERED:
        raise BusinessRuleError("No se pueden agregar paquetes a un envio entregado")
    if await shp_crud.package.count_by_shipment(db, shipment_id=obj_in.shipment_id) >= MAX_PACKAGES_PER_SHIPMENT:
        raise BusinessRuleError("El envio alcanzó el numero máximo de paquetes permitidos")

    db_package = await shp_crud.package.create(db, obj_in=data)
    logger.info("Package %s added to shipment %s", db_package.id, db_package.shipment_id)
    return db_package


async def _ensure_shipment_open(db: AsyncSession, shipment_id: int, message: str) -> None:
    db_shipment = await shp_crud.shipment.get(db, id=shipment_id)
    if db_shipment is not None and db_shipment.state == shp_models.ShipmentState.DELIVERED:
        raise BusinessRuleError(message)


async def update_package(
    db: AsyncSession, package_id: int, obj_in: shp_schemas.PackageUpdate
) -> shp_models.Package:
    db_package = await get_package(db, package_id)
    await _ensure_shipment_open(db, db_package.shipment_id, "No se puede modificar un paquete de un envio entregado")

    merged = db_package.model_dump(include={"description", "weight", "price"})
    merged.update(obj_in.model_dump(exclude_unset=True, exclude_none=True))
    data = _validate_package(merged)

    db_package = await shp_crud.package.update(db, db_obj=db_package, obj_in=data)
    logger.info("Package %s updated", package_id)
    return db_package


async def delete_package(db: AsyncSession, package_id: int) -> None:
    db_package = await get_package(db, package_id)
    await _ensure_shipment_open(db, db_package.shipment_id, "No se puede eliminar un paquete de un envio entregado")
    await shp_crud.package.delete(db, id=package_id)
    logger.info("Package %s deleted", package_id)
