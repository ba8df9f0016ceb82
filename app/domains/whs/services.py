# app/domains/whs/services.py

"""
'whs' 도메인 (창고/입출고)의 비즈니스 로직을 담당하는 서비스 모듈입니다.

- 창고: 필드 검증, 코드 중복 금지, 현재 사용량 아래로 최대 용량 축소 금지, 보관 중인 배송이 있는 창고 삭제 금지.
- 입출고: 배송은 동시에 최대 하나의 창고에만 있을 수 있습니다 (출고일이 없는 기록이 '현재 위치').
  입고 시 창고 점유량 +1, 출고 시 -1 (0 미만으로 내려가지 않음). 배송 1건을 1 단위로 계산합니다.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.core.pagination import ResponseData, build_response
from app.core import validation
from app.domains.flt import services as flt_services
from app.domains.shp import services as shp_services
from app.utils.dates import ensure_aware, hours_between, utc_now
from . import crud as whs_crud
from . import models as whs_models
from . import schemas as whs_schemas

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"^[a-zA-Z0-9\-]+$")
MAX_WAREHOUSE_CAPACITY_M3 = 100000
SHIPMENT_SLOT = 1
DEFAULT_DISPATCHER = "Sistema"


# =============================================================================
# 1. 창고 (Warehouse) 서비스
# =============================================================================
def _validate_warehouse(data: Dict[str, Any]) -> Dict[str, Any]:
    """창고 필드 규칙 집합. 통과하면 정규화된 값을 반환합니다."""
    name = data.get("name")
    if validation.is_blank(name) or len(name.strip()) < 5:
        raise BusinessRuleError("El nombre del almacén debe tener al menos 5 caracteres")
    validation.max_length(name, 100, "El nombre del almacén no puede exceder 100 caracteres")

    code = data.get("code")
    if validation.is_blank(code):
        raise BusinessRuleError("El código del almacén es requerido")
    code = code.strip()
    if len(code) < 3 or len(code) > 20:
        raise BusinessRuleError("El código debe tener entre 3 y 20 caracteres")
    if not CODE_PATTERN.match(code):
        raise BusinessRuleError("El código solo puede contener letras, números y guiones")

    address = data.get("address")
    if validation.is_blank(address) or len(address) < 10:
        raise BusinessRuleError("La dirección debe tener al menos 10 caracteres")
    validation.max_length(address, 300, "La dirección no puede exceder 300 caracteres")

    city = data.get("city")
    if validation.is_blank(city) or len(city) < 3:
        raise BusinessRuleError("La ciudad debe tener al menos 3 caracteres")
    validation.max_length(city, 100, "La ciudad no puede exceder 100 caracteres")

    data["department"] = validation.validate_department(data.get("department"))

    if validation.is_blank(data.get("phone")):
        raise BusinessRuleError("El teléfono es requerido")
    validation.validate_phone(data["phone"])

    if validation.is_blank(data.get("email")):
        data["email"] = None
    else:
        data["email"] = validation.validate_email_format(data["email"])
        validation.max_length(data["email"], 100, "El email no puede exceder 100 caracteres")

    max_capacity = data.get("max_capacity_m3")
    if max_capacity is None or max_capacity <= 0:
        raise BusinessRuleError("La capacidad máxima debe ser mayor a 0")
    if max_capacity > MAX_WAREHOUSE_CAPACITY_M3:
        raise BusinessRuleError("La capacidad máxima no puede exceder 100,000 m³")

    validation.validate_coordinates(data.get("latitude"), data.get("longitude"))

    data["code"] = code
    return data


async def list_warehouses(db: AsyncSession, filters: whs_schemas.WarehouseQueryFilter) -> ResponseData:
    warehouses = await whs_crud.warehouse.search(db, filters=filters)
    return build_response(warehouses, filters.page_number, filters.page_size, "almacenes")


async def find_warehouse(db: AsyncSession, warehouse_id: int) -> Optional[whs_models.Warehouse]:
    """창고를 조회합니다. 없으면 None (다른 도메인의 존재 확인용)."""
    return await whs_crud.warehouse.get(db, id=warehouse_id)


async def get_warehouse(db: AsyncSession, warehouse_id: int) -> whs_models.Warehouse:
    if warehouse_id <= 0:
        raise BusinessRuleError("El ID del almacén debe ser mayor a 0")
    db_warehouse = await whs_crud.warehouse.get(db, id=warehouse_id)
    if db_warehouse is None:
        raise NotFoundError(f"El almacén con ID {warehouse_id} no existe")
    return db_warehouse


async def get_warehouse_by_code(db: AsyncSession, code: str) -> whs_models.Warehouse:
    if validation.is_blank(code):
        raise BusinessRuleError("El código del almacén es requerido")
    db_warehouse = await whs_crud.warehouse.get_by_code(db, code=code)
    if db_warehouse is None:
        raise NotFoundError(f"No existe un almacén con código {code}")
    return db_warehouse


async def get_active_warehouses(db: AsyncSession) -> List[whs_models.Warehouse]:
    return await whs_crud.warehouse.get_active(db)


async def get_available_warehouses(db: AsyncSession, required_capacity: float) -> List[whs_models.Warehouse]:
    if required_capacity <= 0:
        raise BusinessRuleError("La capacidad requerida debe ser mayor a 0")
    return await whs_crud.warehouse.get_available(db, required_capacity=required_capacity)


async def get_warehouse_statistics(db: AsyncSession, warehouse_id: int) -> whs_schemas.WarehouseStatisticsRead:
    """
    창고 운영 통계를 계산합니다.
    평균 보관 시간은 출고가 완료된 기록만으로 계산하며, 없으면 None입니다.
    """
    db_warehouse = await get_warehouse(db, warehouse_id)
    records = await whs_crud.shipment_warehouse.get_by_warehouse(db, warehouse_id=warehouse_id)

    dispatched = [record for record in records if record.exit_date is not None]
    stays = [hours_between(record.entry_date, record.exit_date) for record in dispatched]
    occupancy = db_warehouse.current_capacity_m3 / db_warehouse.max_capacity_m3 * 100

    return whs_schemas.WarehouseStatisticsRead(
        warehouse_id=db_warehouse.id,
        warehouse_name=db_warehouse.name,
        code=db_warehouse.code,
        city=db_warehouse.city,
        total_shipments=len(records),
        current_shipments=len(records) - len(dispatched),
        dispatched_shipments=len(dispatched),
        occupancy_percentage=round(occupancy, 2),
        available_capacity=db_warehouse.max_capacity_m3 - db_warehouse.current_capacity_m3,
        average_stay_time_hours=round(sum(stays) / len(stays), 2) if stays else None,
    )


async def create_warehouse(db: AsyncSession, obj_in: whs_schemas.WarehouseCreate) -> whs_models.Warehouse:
    data = _validate_warehouse(obj_in.model_dump())
    if await whs_crud.warehouse.get_by_code(db, code=data["code"]):
        raise BusinessRuleError(f"Ya existe un almacén con el código {data['code']}")

    data["current_capacity_m3"] = 0
    data["is_active"] = True
    db_warehouse = await whs_crud.warehouse.create(db, obj_in=data)
    logger.info("Warehouse %s created (code=%s)", db_warehouse.id, db_warehouse.code)
    return db_warehouse


async def update_warehouse(
    db: AsyncSession, warehouse_id: int, obj_in: whs_schemas.WarehouseUpdate
) -> whs_models.Warehouse:
    """
    창고 정보를 업데이트합니다. 현재 점유량은 입출고로만 변경됩니다.
    """
    db_warehouse = await get_warehouse(db, warehouse_id)

    merged = db_warehouse.model_dump(exclude={"id", "created_at", "current_capacity_m3"})
    merged.update(obj_in.model_dump(exclude_unset=True))
    for key in ("name", "code", "address", "city", "department", "phone", "max_capacity_m3", "type", "is_active"):
        if merged.get(key) is None:
            merged[key] = getattr(db_warehouse, key)
    data = _validate_warehouse(merged)

    if await whs_crud.warehouse.get_by_code(db, code=data["code"], exclude_id=warehouse_id):
        raise BusinessRuleError(f"Ya existe otro almacén con el código {data['code']}")

    if data["max_capacity_m3"] < db_warehouse.current_capacity_m3:
        raise BusinessRuleError(
            "No se puede reducir la capacidad máxima por debajo de la capacidad actual utilizada "
            f"({db_warehouse.current_capacity_m3:g} m³)"
        )

    db_warehouse = await whs_crud.warehouse.update(db, db_obj=db_warehouse, obj_in=data)
    logger.info("Warehouse %s updated", warehouse_id)
    return db_warehouse


async def delete_warehouse(db: AsyncSession, warehouse_id: int) -> None:
    await get_warehouse(db, warehouse_id)

    current = await whs_crud.shipment_warehouse.get_open_in_warehouse(db, warehouse_id=warehouse_id)
    if current:
        raise BusinessRuleError(
            f"No se puede eliminar el almacén porque tiene {len(current)} envíos activos. "
            "Primero despache todos los envíos."
        )

    await flt_services.detach_base_warehouse(db, warehouse_id)
    # 출고 완료된 기록은 창고와 함께 삭제합니다.
    for record in await whs_crud.shipment_warehouse.get_by_warehouse(db, warehouse_id=warehouse_id):
        await db.delete(record)
    await db.flush()
    await whs_crud.warehouse.delete(db, id=warehouse_id)
    logger.info("Warehouse %s deleted", warehouse_id)


# =============================================================================
# 2. 배송 입출고 (ShipmentWarehouse) 서비스
# =============================================================================
async def list_movements(db: AsyncSession, filters: whs_schemas.ShipmentWarehouseQueryFilter) -> ResponseData:
    records = await whs_crud.shipment_warehouse.search(db, filters=filters)
    return build_response(records, filters.page_number, filters.page_size, "registros")


async def get_movement(db: AsyncSession, movement_id: int) -> whs_models.ShipmentWarehouse:
    if movement_id <= 0:
        raise BusinessRuleError("El ID debe ser mayor a 0")
    record = await whs_crud.shipment_warehouse.get(db, id=movement_id)
    if record is None:
        raise NotFoundError(f"El registro con ID {movement_id} no existe")
    return record


async def register_entry(
    db: AsyncSession, obj_in: whs_schemas.ShipmentWarehouseEntry
) -> whs_models.ShipmentWarehouse:
    """
    배송의 창고 입고를 등록합니다.
    - 배송이 이미 다른 창고(출고 전)에 있으면 거부합니다.
    - 창고 여유 용량이 1 단위 미만이면 거부합니다.
    입고 기록 생성과 창고 점유량 증가는 하나의 트랜잭션으로 커밋됩니다.
    """
    if await shp_services.find_shipment(db, obj_in.shipment_id) is None:
        raise BusinessRuleError("El envío no existe")

    db_warehouse = await whs_crud.warehouse.get(db, id=obj_in.warehouse_id)
    if db_warehouse is None:
        raise BusinessRuleError("El almacén no existe")
    if not db_warehouse.is_active:
        raise BusinessRuleError("El almacén está inactivo")

    if await whs_crud.shipment_warehouse.get_open_for_shipment(db, shipment_id=obj_in.shipment_id):
        raise BusinessRuleError("El envío ya está en un almacén. Primero debe registrar su salida.")

    if db_warehouse.max_capacity_m3 - db_warehouse.current_capacity_m3 < SHIPMENT_SLOT:
        raise BusinessRuleError("El almacén no tiene capacidad disponible")

    data = obj_in.model_dump()
    data["entry_date"] = ensure_aware(obj_in.entry_date) or utc_now()
    data["exit_date"] = None
    data["status"] = whs_models.MovementStatus.RECEIVED

    record = await whs_crud.shipment_warehouse.create(db, obj_in=data, commit=False)
    await whs_crud.warehouse.update(
        db,
        db_obj=db_warehouse,
        obj_in={"current_capacity_m3": db_warehouse.current_capacity_m3 + SHIPMENT_SLOT},
        commit=False,
    )
    await db.commit()
    await db.refresh(record)
    logger.info(
        "Shipment %s received at warehouse %s (occupied=%s/%s)",
        record.shipment_id, record.warehouse_id, db_warehouse.current_capacity_m3, db_warehouse.max_capacity_m3,
    )
    return record


async def register_exit(
    db: AsyncSession, movement_id: int, obj_in: whs_schemas.ShipmentWarehouseExit
) -> whs_models.ShipmentWarehouse:
    """
    입고 기록의 출고를 등록하고 창고 점유량을 1 단위 반환합니다.
    """
    record = await get_movement(db, movement_id)
    if record.exit_date is not None:
        raise BusinessRuleError("Este envío ya fue despachado anteriormente")

    exit_date = ensure_aware(obj_in.exit_date) or utc_now()
    if exit_date < ensure_aware(record.entry_date):
        raise BusinessRuleError("La fecha de salida no puede ser anterior a la entrada")

    dispatched_by = obj_in.dispatched_by if not validation.is_blank(obj_in.dispatched_by) else DEFAULT_DISPATCHER
    await whs_crud.shipment_warehouse.update(
        db,
        db_obj=record,
        obj_in={
            "exit_date": exit_date,
            "dispatched_by": dispatched_by,
            "status": whs_models.MovementStatus.DISPATCHED,
        },
        commit=False,
    )

    db_warehouse = await whs_crud.warehouse.get(db, id=record.warehouse_id)
    if db_warehouse is not None:
        await whs_crud.warehouse.update(
            db,
            db_obj=db_warehouse,
            obj_in={"current_capacity_m3": max(0, db_warehouse.current_capacity_m3 - SHIPMENT_SLOT)},
            commit=False,
        )
    await db.commit()
    await db.refresh(record)
    logger.info("Shipment %s dispatched from warehouse %s by %s", record.shipment_id, record.warehouse_id, dispatched_by)
    return record


async def get_shipment_history(db: AsyncSession, shipment_id: int) -> List[whs_schemas.ShipmentWarehouseHistoryRead]:
    if shipment_id <= 0:
        raise BusinessRuleError("El ID debe ser mayor a 0")
    if await shp_services.find_shipment(db, shipment_id) is None:
        raise NotFoundError("El envío no existe")

    history = []
    for row in await whs_crud.shipment_warehouse.history_for_shipment(db, shipment_id=shipment_id):
        stay = hours_between(row["entry_date"], row["exit_date"]) if row["exit_date"] is not None else None
        history.append(whs_schemas.ShipmentWarehouseHistoryRead(**row, stay_time_hours=stay))
    return history


async def get_current_shipments_in_warehouse(
    db: AsyncSession, warehouse_id: int
) -> List[whs_models.ShipmentWarehouse]:
    await get_warehouse(db, warehouse_id)
    return await whs_crud.shipment_warehouse.get_open_in_warehouse(db, warehouse_id=warehouse_id)


async def get_current_location(db: AsyncSession, shipment_id: int) -> Optional[whs_models.ShipmentWarehouse]:
    """배송이 현재 보관된 창고의 입고 기록. 창고에 없으면 None."""
    if shipment_id <= 0:
        raise BusinessRuleError("El ID debe ser mayor a 0")
    return await whs_crud.shipment_warehouse.get_open_for_shipment(db, shipment_id=shipment_id)


async def is_shipment_in_warehouse(db: AsyncSession, shipment_id: int) -> bool:
    return await get_current_location(db, shipment_id) is not None


async def delete_movement(db: AsyncSession, movement_id: int) -> None:
    record = await get_movement(db, movement_id)
    if record.exit_date is None:
        raise BusinessRuleError("No se puede eliminar un registro activo. Primero registre la salida del envío.")
    await whs_crud.shipment_warehouse.delete(db, id=movement_id)
    logger.info("Movement record %s deleted", movement_id)


async def release_shipment(db: AsyncSession, shipment_id: int) -> None:
    """
    삭제되는 배송의 입출고 기록을 제거합니다.
    보관 중인 기록이 있으면 해당 창고의 점유량을 1 단위 반환합니다. (커밋은 호출자가 수행)
    """
    for record in await whs_crud.shipment_warehouse.get_by_shipment(db, shipment_id=shipment_id):
        if record.exit_date is None:
            db_warehouse = await whs_crud.warehouse.get(db, id=record.warehouse_id)
            if db_warehouse is not None:
                await whs_crud.warehouse.update(
                    db,
                    db_obj=db_warehouse,
                    obj_in={"current_capacity_m3": max(0, db_warehouse.current_capacity_m3 - SHIPMENT_SLOT)},
                    commit=False,
                )
                logger.info("Warehouse %s slot released by deleted shipment %s", db_warehouse.id, shipment_id)
        await db.delete(record)
    await db.flush()
