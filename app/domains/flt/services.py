# app/domains/flt/services.py

"""
'flt' 도메인 (운전자/차량)의 비즈니스 로직을 담당하는 서비스 모듈입니다.

- 운전자: 성명/연락처/이메일 검증, 신분증·면허 번호 중복 금지, 면허 유효기간, 만 18세 이상.
- 차량: 번호판/차대번호 중복 금지, 차량 유형별 최대 적재 중량 상한, 현재 적재량 ≤ 최대 적재량,
  정비 일정/주행거리 검증, 운행 중(InTransit) 차량은 운전자가 배정되어 있어야 함.
- 배정: 운전자 1명 ↔ 차량 1대. Driver.current_vehicle_id와 Vehicle.assigned_driver_id를
  하나의 트랜잭션에서 함께 변경하여 항상 서로 일치하도록 유지합니다.
"""

import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.core.pagination import ResponseData, build_response
from app.core import validation
from app.domains.whs import services as whs_services
from app.utils.dates import age_on, today
from . import crud as flt_crud
from . import models as flt_models
from . import schemas as flt_schemas

logger = logging.getLogger(__name__)

FULL_NAME_PATTERN = re.compile(r"^[a-zA-ZáéíóúÁÉÍÓÚñÑüÜ\s]+$")
PLATE_PATTERN = re.compile(r"^[A-Z0-9\-]+$")
VIN_PATTERN = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")
BLOOD_TYPES = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")

MIN_DRIVER_AGE = 18
LICENSE_EXPIRY_WARNING_DAYS = 30

MAX_VEHICLE_WEIGHT_KG = 50000
MAX_VEHICLE_VOLUME_M3 = 200
MIN_VEHICLE_YEAR = 1900

# 차량 유형별 최대 적재 중량 상한
TYPE_WEIGHT_LIMITS = {
    flt_models.VehicleType.MOTORCYCLE: (300, "Una motocicleta no puede superar los 300 kg"),
    flt_models.VehicleType.VAN: (3000, "Una van no puede superar los 3,000 kg"),
    flt_models.VehicleType.PICKUP: (5000, "Una pickup no puede superar los 5,000 kg"),
    flt_models.VehicleType.TRUCK: (50000, "Un camión no puede superar los 50,000 kg"),
}


def _non_clearable_changes(obj_in, create_schema, extra_keys) -> Dict[str, Any]:
    """수정 요청 중 적용할 값만 추립니다. 필수 항목과 상태 항목은 null로 지울 수 없습니다."""
    protected = {name for name, field in create_schema.model_fields.items() if field.is_required()}
    protected.update(extra_keys)
    return {
        key: value
        for key, value in obj_in.model_dump(exclude_unset=True).items()
        if value is not None or key not in protected
    }


# =============================================================================
# 1. 운전자 (Driver) 서비스
# =============================================================================
def _validate_driver(data: Dict[str, Any]) -> Dict[str, Any]:
    """운전자 필드 규칙 집합. 통과하면 정규화된 값을 반환합니다."""
    current = today()

    full_name = (data.get("full_name") or "").strip()
    if len(full_name) < 5:
        raise BusinessRuleError("El nombre completo debe tener al menos 5 caracteres")
    if len(full_name) > 100:
        raise BusinessRuleError("El nombre completo no puede exceder 100 caracteres")
    if not FULL_NAME_PATTERN.match(full_name):
        raise BusinessRuleError("El nombre completo solo puede contener letras y espacios")

    if validation.is_blank(data.get("identity_document")):
        raise BusinessRuleError("El documento de identidad es requerido")
    validation.max_length(data["identity_document"], 20, "El documento de identidad no puede exceder 20 caracteres")

    if validation.is_blank(data.get("license_number")):
        raise BusinessRuleError("El número de licencia es requerido")
    validation.max_length(data["license_number"], 50, "El número de licencia no puede exceder 50 caracteres")
    if validation.is_blank(data.get("license_category")):
        raise BusinessRuleError("La categoría de licencia es requerida")
    validation.max_length(data["license_category"], 20, "La categoría de licencia no puede exceder 20 caracteres")

    issue_date, expiry_date = data.get("license_issue_date"), data.get("license_expiry_date")
    if issue_date > current:
        raise BusinessRuleError("La fecha de emisión de la licencia no puede ser futura")
    if expiry_date <= issue_date:
        raise BusinessRuleError("La fecha de vencimiento de la licencia debe ser posterior a la fecha de emisión")
    if expiry_date <= current:
        raise BusinessRuleError("La licencia de conducir está vencida")

    validation.validate_phone(data.get("phone"))
    if not validation.is_blank(data.get("alternative_phone")):
        validation.validate_phone(data["alternative_phone"], subject="El teléfono alternativo")
    data["email"] = validation.validate_email_format(data.get("email"))

    birth_date = data.get("date_of_birth")
    if birth_date >= current:
        raise BusinessRuleError("La fecha de nacimiento debe ser pasada")
    if age_on(birth_date, current) < MIN_DRIVER_AGE:
        raise BusinessRuleError(f"El conductor debe ser mayor de {MIN_DRIVER_AGE} años")

    if data.get("hire_date") > current:
        raise BusinessRuleError("La fecha de contratación no puede ser futura")
    if data.get("contract_end_date") is not None and data["contract_end_date"] <= data["hire_date"]:
        raise BusinessRuleError("La fecha de fin de contrato debe ser posterior a la fecha de contratación")

    if (data.get("years_of_experience") or 0) < 0:
        raise BusinessRuleError("Los años de experiencia no pueden ser negativos")
    if data.get("average_rating") is not None and not 1 <= data["average_rating"] <= 5:
        raise BusinessRuleError("La calificación promedio debe estar entre 1 y 5")
    if (data.get("total_deliveries") or 0) < 0:
        raise BusinessRuleError("El total de entregas no puede ser negativo")

    validation.max_length(data.get("address"), 300, "La dirección no puede exceder 300 caracteres")
    validation.max_length(data.get("city"), 100, "La ciudad no puede exceder 100 caracteres")
    validation.max_length(
        data.get("emergency_contact_name"), 100, "El nombre del contacto de emergencia no puede exceder 100 caracteres"
    )
    if not validation.is_blank(data.get("emergency_contact_phone")):
        validation.validate_phone(data["emergency_contact_phone"], subject="El teléfono de emergencia")
    if not validation.is_blank(data.get("blood_type")) and data["blood_type"].strip().upper() not in BLOOD_TYPES:
        raise BusinessRuleError(f"El tipo de sangre no es válido. Debe ser uno de: {', '.join(BLOOD_TYPES)}")
    validation.max_length(data.get("notes"), 500, "Las notas no pueden exceder 500 caracteres")

    data["full_name"] = full_name
    data["identity_document"] = data["identity_document"].strip()
    data["license_number"] = data["license_number"].strip()
    return data


async def _check_driver_uniqueness(db: AsyncSession, data: Dict[str, Any], *, exclude_id: Optional[int] = None) -> None:
    if await flt_crud.driver.get_by_license_number(db, license_number=data["license_number"], exclude_id=exclude_id):
        if exclude_id is None:
            raise BusinessRuleError("Ya existe un conductor con ese número de licencia")
        raise BusinessRuleError("Ya existe otro conductor con ese número de licencia")
    if await flt_crud.driver.get_by_identity_document(
        db, identity_document=data["identity_document"], exclude_id=exclude_id
    ):
        if exclude_id is None:
            raise BusinessRuleError("Ya existe un conductor con ese documento de identidad")
        raise BusinessRuleError("Ya existe otro conductor con ese documento de identidad")


async def list_drivers(db: AsyncSession, filters: flt_schemas.DriverQueryFilter) -> ResponseData:
    drivers = await flt_crud.driver.search(db, filters=filters, reference=today())
    return build_response(drivers, filters.page_number, filters.page_size, "conductores")


async def get_driver(db: AsyncSession, driver_id: int) -> flt_models.Driver:
    if driver_id <= 0:
        raise BusinessRuleError("El ID del conductor debe ser mayor a 0")
    db_driver = await flt_crud.driver.get(db, id=driver_id)
    if db_driver is None:
        raise NotFoundError(f"El conductor con ID {driver_id} no existe")
    return db_driver


async def get_available_drivers(db: AsyncSession) -> List[flt_models.Driver]:
    return await flt_crud.driver.get_available(db, reference=today())


async def get_driver_statistics(db: AsyncSession, driver_id: int) -> flt_schemas.DriverStatisticsRead:
    """
    운전자 실적 및 면허 만료 현황을 계산합니다.
    정시/지연 배송은 배송-운전자 연결 정보가 없으므로 0으로 보고합니다.
    """
    db_driver = await get_driver(db, driver_id)
    days_left = (db_driver.license_expiry_date - today()).days
    return flt_schemas.DriverStatisticsRead(
        driver_id=db_driver.id,
        full_name=db_driver.full_name,
        license_number=db_driver.license_number,
        total_deliveries=db_driver.total_deliveries,
        on_time_deliveries=0,
        late_deliveries=0,
        on_time_percentage=0.0,
        average_rating=db_driver.average_rating,
        years_of_experience=db_driver.years_of_experience,
        days_until_license_expiry=days_left,
        license_expiring_soon=days_left <= LICENSE_EXPIRY_WARNING_DAYS,
    )


async def create_driver(db: AsyncSession, obj_in: flt_schemas.DriverCreate) -> flt_models.Driver:
    data = _validate_driver(obj_in.model_dump())
    await _check_driver_uniqueness(db, data)

    data.update(
        status=flt_models.DriverStatus.AVAILABLE,
        is_active=True,
        total_deliveries=0,
        current_vehicle_id=None,
    )
    db_driver = await flt_crud.driver.create(db, obj_in=data)
    logger.info("Driver %s created (license=%s)", db_driver.id, db_driver.license_number)
    return db_driver


async def update_driver(db: AsyncSession, driver_id: int, obj_in: flt_schemas.DriverUpdate) -> flt_models.Driver:
    db_driver = await get_driver(db, driver_id)

    merged = db_driver.model_dump(exclude={"id", "created_at", "current_vehicle_id"})
    merged.update(_non_clearable_changes(obj_in, flt_schemas.DriverCreate, ("status", "is_active", "total_deliveries")))
    data = _validate_driver(merged)
    await _check_driver_uniqueness(db, data, exclude_id=driver_id)

    if data["is_active"] is False and db_driver.current_vehicle_id is not None:
        raise BusinessRuleError("No se puede desactivar un conductor con vehículo asignado. Primero remueva la asignación.")

    db_driver = await flt_crud.driver.update(db, db_obj=db_driver, obj_in=data)
    logger.info("Driver %s updated", driver_id)
    return db_driver


async def delete_driver(db: AsyncSession, driver_id: int) -> None:
    db_driver = await get_driver(db, driver_id)
    if db_driver.current_vehicle_id is not None:
        raise BusinessRuleError(
            "No se puede eliminar un conductor con vehículo asignado. Primero remueva la asignación."
        )
    await flt_crud.driver.delete(db, id=driver_id)
    logger.info("Driver %s deleted", driver_id)


# =============================================================================
# 2. 차량 (Vehicle) 서비스
# =============================================================================
def _validate_vehicle(data: Dict[str, Any]) -> Dict[str, Any]:
    """차량 필드 규칙 집합. 통과하면 정규화된 값을 반환합니다."""
    current = today()

    if validation.is_blank(data.get("plate_number")):
        raise BusinessRuleError("El número de placa es requerido")
    plate = data["plate_number"].strip().upper()
    if len(plate) < 5 or len(plate) > 20:
        raise BusinessRuleError("El número de placa debe tener entre 5 y 20 caracteres")
    if not PLATE_PATTERN.match(plate):
        raise BusinessRuleError("El número de placa solo puede contener letras, números y guiones")

    validation.require_length(data.get("brand"), 2, 50, "La marca debe tener entre 2 y 50 caracteres")
    validation.require_length(data.get("model"), 1, 50, "El modelo debe tener entre 1 y 50 caracteres")

    max_year = current.year + 1
    if data.get("year") is None or not MIN_VEHICLE_YEAR <= data["year"] <= max_year:
        raise BusinessRuleError(f"El año debe estar entre {MIN_VEHICLE_YEAR} y {max_year}")

    max_weight = data.get("max_weight_capacity_kg")
    if max_weight is None or max_weight <= 0:
        raise BusinessRuleError("La capacidad máxima de peso debe ser mayor a 0")
    if max_weight > MAX_VEHICLE_WEIGHT_KG:
        raise BusinessRuleError("La capacidad máxima de peso no puede exceder 50,000 kg")
    type_limit, type_message = TYPE_WEIGHT_LIMITS[flt_models.VehicleType(data["type"])]
    if max_weight > type_limit:
        raise BusinessRuleError(type_message)

    max_volume = data.get("max_volume_capacity_m3")
    if max_volume is None or max_volume <= 0:
        raise BusinessRuleError("La capacidad máxima de volumen debe ser mayor a 0")
    if max_volume > MAX_VEHICLE_VOLUME_M3:
        raise BusinessRuleError("La capacidad máxima de volumen no puede exceder 200 m³")

    _validate_load(data.get("current_weight_kg") or 0, data.get("current_volume_m3") or 0, max_weight, max_volume)

    mileage = data.get("current_mileage") or 0
    if mileage < 0:
        raise BusinessRuleError("El kilometraje actual no puede ser negativo")
    last_mileage = data.get("last_maintenance_mileage")
    if last_mileage is not None:
        if last_mileage < 0:
            raise BusinessRuleError("El kilometraje del último mantenimiento no puede ser negativo")
        if last_mileage > mileage:
            raise BusinessRuleError("El kilometraje del último mantenimiento no puede ser mayor al kilometraje actual")

    last_date, next_date = data.get("last_maintenance_date"), data.get("next_maintenance_date")
    if last_date is not None and last_date > current:
        raise BusinessRuleError("La fecha del último mantenimiento no puede ser futura")
    if last_date is not None and next_date is not None and next_date <= last_date:
        raise BusinessRuleError("La fecha del próximo mantenimiento debe ser posterior al último mantenimiento")

    if data.get("fuel_consumption_per_100km") is not None and data["fuel_consumption_per_100km"] <= 0:
        raise BusinessRuleError("El consumo de combustible debe ser mayor a 0")

    if validation.is_blank(data.get("vin")):
        data["vin"] = None
    else:
        data["vin"] = data["vin"].strip().upper()
        if not VIN_PATTERN.match(data["vin"]):
            raise BusinessRuleError("El VIN debe tener exactamente 17 caracteres válidos (sin I, O, Q)")

    if data.get("purchase_date") is not None and data["purchase_date"] > current:
        raise BusinessRuleError("La fecha de compra no puede ser futura")
    validation.max_length(data.get("color"), 30, "El color no puede exceder 30 caracteres")
    validation.max_length(data.get("notes"), 500, "Las notas no pueden exceder 500 caracteres")

    data["plate_number"] = plate
    return data


def _validate_load(weight: float, volume: float, max_weight: float, max_volume: float) -> None:
    if weight < 0:
        raise BusinessRuleError("El peso actual no puede ser negativo")
    if weight > max_weight:
        raise BusinessRuleError(f"El peso actual no puede exceder la capacidad máxima ({max_weight:g} kg)")
    if volume < 0:
        raise BusinessRuleError("El volumen actual no puede ser negativo")
    if volume > max_volume:
        raise BusinessRuleError(f"El volumen actual no puede exceder la capacidad máxima ({max_volume:g} m³)")


def _validate_insurance(expiry: Optional[date]) -> None:
    if expiry is not None and expiry <= today():
        raise BusinessRuleError("La fecha de vencimiento del seguro debe ser futura")


async def _check_vehicle_uniqueness(
    db: AsyncSession, data: Dict[str, Any], *, exclude_id: Optional[int] = None
) -> None:
    if await flt_crud.vehicle.get_by_plate_number(db, plate_number=data["plate_number"], exclude_id=exclude_id):
        if exclude_id is None:
            raise BusinessRuleError(f"Ya existe un vehículo con la placa {data['plate_number']}")
        raise BusinessRuleError(f"Ya existe otro vehículo con la placa {data['plate_number']}")
    if data.get("vin") and await flt_crud.vehicle.get_by_vin(db, vin=data["vin"], exclude_id=exclude_id):
        raise BusinessRuleError(f"Ya existe un vehículo con el VIN {data['vin']}")


async def _check_base_warehouse(db: AsyncSession, warehouse_id: Optional[int]) -> None:
    if warehouse_id is None:
        return
    db_warehouse = await whs_services.find_warehouse(db, warehouse_id)
    if db_warehouse is None:
        raise BusinessRuleError("El almacén base no existe")
    if not db_warehouse.is_active:
        raise BusinessRuleError("El almacén base está inactivo")


async def list_vehicles(db: AsyncSession, filters: flt_schemas.VehicleQueryFilter) -> ResponseData:
    vehicles = await flt_crud.vehicle.search(db, filters=filters, reference=today())
    return build_response(vehicles, filters.page_number, filters.page_size, "vehículos")


async def get_vehicle(db: AsyncSession, vehicle_id: int) -> flt_models.Vehicle:
    if vehicle_id <= 0:
        raise BusinessRuleError("El ID del vehículo debe ser mayor a 0")
    db_vehicle = await flt_crud.vehicle.get(db, id=vehicle_id)
    if db_vehicle is None:
        raise NotFoundError(f"El vehículo con ID {vehicle_id} no existe")
    return db_vehicle


async def get_available_vehicles(db: AsyncSession) -> List[flt_models.Vehicle]:
    return await flt_crud.vehicle.get_available(db)


async def get_vehicles_by_capacity(
    db: AsyncSession, required_weight: float, required_volume: float
) -> List[flt_models.Vehicle]:
    if required_weight < 0:
        raise BusinessRuleError("El peso requerido no puede ser negativo")
    if required_volume < 0:
        raise BusinessRuleError("El volumen requerido no puede ser negativo")
    return await flt_crud.vehicle.get_by_capacity(
        db, required_weight=required_weight, required_volume=required_volume
    )


async def get_vehicle_statistics(db: AsyncSession, vehicle_id: int) -> flt_schemas.VehicleStatisticsRead:
    """
    차량 적재율과 정비 필요 여부를 계산합니다.
    다음 정비일이 7일 이내이거나 최근 정비 이후 10,000km 이상 주행하면 정비가 필요합니다.
    """
    db_vehicle = await get_vehicle(db, vehicle_id)
    current = today()

    km_since = None
    if db_vehicle.last_maintenance_mileage is not None:
        km_since = db_vehicle.current_mileage - db_vehicle.last_maintenance_mileage
    days_since = (current - db_vehicle.last_maintenance_date).days if db_vehicle.last_maintenance_date else None
    days_until = (db_vehicle.next_maintenance_date - current).days if db_vehicle.next_maintenance_date else None
    requires_maintenance = (
        (days_until is not None and days_until <= flt_crud.MAINTENANCE_DUE_DAYS)
        or (km_since is not None and km_since >= flt_crud.MAINTENANCE_DUE_KM)
    )

    return flt_schemas.VehicleStatisticsRead(
        vehicle_id=db_vehicle.id,
        plate_number=db_vehicle.plate_number,
        weight_occupancy_percentage=round(db_vehicle.current_weight_kg / db_vehicle.max_weight_capacity_kg * 100, 2),
        volume_occupancy_percentage=round(db_vehicle.current_volume_m3 / db_vehicle.max_volume_capacity_m3 * 100, 2),
        available_weight_kg=db_vehicle.max_weight_capacity_kg - db_vehicle.current_weight_kg,
        available_volume_m3=db_vehicle.max_volume_capacity_m3 - db_vehicle.current_volume_m3,
        current_mileage=db_vehicle.current_mileage,
        km_since_last_maintenance=km_since,
        days_since_last_maintenance=days_since,
        days_until_next_maintenance=days_until,
        requires_maintenance=requires_maintenance,
    )


async def create_vehicle(db: AsyncSession, obj_in: flt_schemas.VehicleCreate) -> flt_models.Vehicle:
    """
    차량을 등록합니다. 상태는 Available, 현재 적재량은 0으로 시작합니다.
    등록과 함께 운전자를 배정하면 운전자의 current_vehicle_id도 같은 트랜잭션에서 설정됩니다.
    """
    data = _validate_vehicle(obj_in.model_dump())
    _validate_insurance(data.get("insurance_expiry_date"))
    await _check_vehicle_uniqueness(db, data)
    await _check_base_warehouse(db, data.get("base_warehouse_id"))

    db_driver = None
    if obj_in.assigned_driver_id is not None:
        db_driver = await flt_crud.driver.get(db, id=obj_in.assigned_driver_id)
        if db_driver is None:
            raise BusinessRuleError("El conductor asignado no existe")
        if not db_driver.is_active:
            raise BusinessRuleError("El conductor asignado no está activo")
        if db_driver.current_vehicle_id is not None:
            raise BusinessRuleError("El conductor ya está asignado a otro vehículo")

    data.update(
        status=flt_models.VehicleStatus.AVAILABLE,
        is_active=True,
        current_weight_kg=0,
        current_volume_m3=0,
    )
    db_vehicle = await flt_crud.vehicle.create(db, obj_in=data, commit=False)
    if db_driver is not None:
        await flt_crud.driver.update(db, db_obj=db_driver, obj_in={"current_vehicle_id": db_vehicle.id}, commit=False)
    await db.commit()
    await db.refresh(db_vehicle)
    logger.info("Vehicle %s created (plate=%s, driver=%s)", db_vehicle.id, db_vehicle.plate_number, db_vehicle.assigned_driver_id)
    return db_vehicle


async def update_vehicle(db: AsyncSession, vehicle_id: int, obj_in: flt_schemas.VehicleUpdate) -> flt_models.Vehicle:
    db_vehicle = await get_vehicle(db, vehicle_id)

    merged = db_vehicle.model_dump(exclude={"id", "created_at", "assigned_driver_id"})
    merged.update(_non_clearable_changes(obj_in, flt_schemas.VehicleCreate, ("status", "is_active", "current_mileage")))
    data = _validate_vehicle(merged)

    if data["insurance_expiry_date"] != db_vehicle.insurance_expiry_date:
        _validate_insurance(data["insurance_expiry_date"])
    await _check_vehicle_uniqueness(db, data, exclude_id=vehicle_id)
    if data.get("base_warehouse_id") != db_vehicle.base_warehouse_id:
        await _check_base_warehouse(db, data.get("base_warehouse_id"))

    if data["status"] == flt_models.VehicleStatus.IN_TRANSIT and db_vehicle.assigned_driver_id is None:
        raise BusinessRuleError("Un vehículo 'En Tránsito' debe tener un conductor asignado")

    db_vehicle = await flt_crud.vehicle.update(db, db_obj=db_vehicle, obj_in=data)
    logger.info("Vehicle %s updated", vehicle_id)
    return db_vehicle


async def update_current_load(
    db: AsyncSession, vehicle_id: int, obj_in: flt_schemas.VehicleLoadUpdate
) -> flt_models.Vehicle:
    db_vehicle = await get_vehicle(db, vehicle_id)
    if obj_in.current_weight_kg > db_vehicle.max_weight_capacity_kg:
        raise BusinessRuleError(
            f"La carga excede la capacidad máxima de peso del vehículo ({db_vehicle.max_weight_capacity_kg:g} kg)"
        )
    if obj_in.current_volume_m3 > db_vehicle.max_volume_capacity_m3:
        raise BusinessRuleError(
            f"La carga excede la capacidad máxima de volumen del vehículo ({db_vehicle.max_volume_capacity_m3:g} m³)"
        )
    _validate_load(
        obj_in.current_weight_kg, obj_in.current_volume_m3,
        db_vehicle.max_weight_capacity_kg, db_vehicle.max_volume_capacity_m3,
    )

    db_vehicle = await flt_crud.vehicle.update(db, db_obj=db_vehicle, obj_in=obj_in)
    logger.info(
        "Vehicle %s load set to %s kg / %s m3", vehicle_id, db_vehicle.current_weight_kg, db_vehicle.current_volume_m3
    )
    return db_vehicle


async def delete_vehicle(db: AsyncSession, vehicle_id: int) -> None:
    db_vehicle = await get_vehicle(db, vehicle_id)
    if db_vehicle.assigned_driver_id is not None:
        raise BusinessRuleError(
            "No se puede eliminar un vehículo con conductor asignado. Primero remueva la asignación."
        )
    if db_vehicle.status == flt_models.VehicleStatus.IN_TRANSIT:
        raise BusinessRuleError("No se puede eliminar un vehículo en tránsito")
    await flt_crud.vehicle.delete(db, id=vehicle_id)
    logger.info("Vehicle %s deleted", vehicle_id)


async def detach_base_warehouse(db: AsyncSession, warehouse_id: int) -> None:
    """삭제되는 창고를 소속 창고로 가진 차량의 참조를 해제합니다. (커밋은 호출자가 수행)"""
    await flt_crud.vehicle.clear_base_warehouse(db, warehouse_id=warehouse_id)


# =============================================================================
# 3. 운전자 ↔ 차량 배정
# =============================================================================
async def _assign(db: AsyncSession, db_driver: flt_models.Driver, db_vehicle: flt_models.Vehicle) -> None:
    """양쪽 조건을 확인한 뒤 두 포인터를 함께 설정하고 한 번에 커밋합니다."""
    if not db_driver.is_active:
        raise BusinessRuleError("El conductor no está activo")
    if db_driver.status != flt_models.DriverStatus.AVAILABLE:
        raise BusinessRuleError("El conductor no está disponible")
    if db_driver.license_expiry_date <= today():
        raise BusinessRuleError("La licencia del conductor está vencida")
    if db_driver.current_vehicle_id is not None:
        raise BusinessRuleError("El conductor ya tiene un vehículo asignado")

    if not db_vehicle.is_active:
        raise BusinessRuleError("El vehículo no está activo")
    if db_vehicle.status != flt_models.VehicleStatus.AVAILABLE:
        raise BusinessRuleError("El vehículo no está disponible")
    if db_vehicle.assigned_driver_id is not None:
        raise BusinessRuleError("El vehículo ya tiene un conductor asignado")

    await flt_crud.driver.update(db, db_obj=db_driver, obj_in={"current_vehicle_id": db_vehicle.id}, commit=False)
    await flt_crud.vehicle.update(db, db_obj=db_vehicle, obj_in={"assigned_driver_id": db_driver.id}, commit=False)
    await db.commit()
    await db.refresh(db_driver)
    await db.refresh(db_vehicle)
    logger.info("Driver %s assigned to vehicle %s", db_driver.id, db_vehicle.id)


async def _unassign(
    db: AsyncSession, db_driver: Optional[flt_models.Driver], db_vehicle: Optional[flt_models.Vehicle]
) -> None:
    if db_vehicle is not None and db_vehicle.status == flt_models.VehicleStatus.IN_TRANSIT:
        raise BusinessRuleError("No se puede remover la asignación de un vehículo en tránsito")

    if db_driver is not None:
        await flt_crud.driver.update(db, db_obj=db_driver, obj_in={"current_vehicle_id": None}, commit=False)
    if db_vehicle is not None:
        await flt_crud.vehicle.update(db, db_obj=db_vehicle, obj_in={"assigned_driver_id": None}, commit=False)
    await db.commit()
    logger.info(
        "Assignment removed (driver=%s, vehicle=%s)",
        db_driver.id if db_driver else None, db_vehicle.id if db_vehicle else None,
    )


async def assign_vehicle_to_driver(db: AsyncSession, driver_id: int, vehicle_id: int) -> flt_models.Driver:
    db_driver = await get_driver(db, driver_id)
    db_vehicle = await get_vehicle(db, vehicle_id)
    await _assign(db, db_driver, db_vehicle)
    return db_driver


async def unassign_vehicle_from_driver(db: AsyncSession, driver_id: int) -> flt_models.Driver:
    db_driver = await get_driver(db, driver_id)
    if db_driver.current_vehicle_id is None:
        raise BusinessRuleError("El conductor no tiene un vehículo asignado")
    db_vehicle = await flt_crud.vehicle.get(db, id=db_driver.current_vehicle_id)
    await _unassign(db, db_driver, db_vehicle)
    await db.refresh(db_driver)
    return db_driver


async def assign_driver_to_vehicle(db: AsyncSession, vehicle_id: int, driver_id: int) -> flt_models.Vehicle:
    db_vehicle = await get_vehicle(db, vehicle_id)
    db_driver = await get_driver(db, driver_id)
    await _assign(db, db_driver, db_vehicle)
    return db_vehicle


async def unassign_driver_from_vehicle(db: AsyncSession, vehicle_id: int) -> flt_models.Vehicle:
    db_vehicle = await get_vehicle(db, vehicle_id)
    if db_vehicle.assigned_driver_id is None:
        raise BusinessRuleError("El vehículo no tiene un conductor asignado")
    db_driver = await flt_crud.driver.get(db, id=db_vehicle.assigned_driver_id)
    await _unassign(db, db_driver, db_vehicle)
    await db.refresh(db_vehicle)
    return db_vehicle
