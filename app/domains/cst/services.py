# app/domains/cst/services.py

"""
'cst' 도메인 (고객/주소)의 비즈니스 로직을 담당하는 서비스 모듈입니다.

- 고객: 이름/이메일/전화번호 검증, 이메일 중복 및 도메인별 고객 수 제한, 활성 배송이 있는 고객 삭제 금지.
- 주소: 주소 필드 검증, 고객당 활성 주소 10개 제한,
  (고객, 유형)별 활성 기본 주소를 정확히 하나로 유지하는 기본 주소 선택 규칙.

다른 도메인(배송)의 정보는 해당 도메인의 서비스 함수를 통해서만 조회/변경합니다.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.core.pagination import ResponseData, build_response
from app.core import validation
from app.domains.shp import services as shp_services
from . import crud as cst_crud
from . import models as cst_models
from . import schemas as cst_schemas

logger = logging.getLogger(__name__)

MAX_ACTIVE_ADDRESSES = 10
MAX_CUSTOMERS_PER_EMAIL_DOMAIN = 5


# =============================================================================
# 1. 고객 (Customer) 서비스
# =============================================================================
def _validate_customer(data: Dict[str, Any]) -> Dict[str, Any]:
    """고객 필드 규칙 집합. 통과하면 정규화된 값을 반환합니다."""
    validation.require_length(data.get("name"), 3, 100, "El nombre debe tener entre 3 y 100 caracteres")
    data["email"] = validation.validate_email_format(data.get("email")).lower()
    validation.validate_phone(data.get("phone"))
    return data


async def _check_email_rules(db: AsyncSession, email: str, *, exclude_id: Optional[int] = None) -> None:
    if await cst_crud.customer.get_by_email(db, email=email, exclude_id=exclude_id):
        if exclude_id is None:
            raise BusinessRuleError("Ya existe un cliente con ese email")
        raise BusinessRuleError("Ya existe otro cliente con ese email")

    domain = validation.email_domain(email)
    same_domain = await cst_crud.customer.count_by_email_domain(db, domain=domain, exclude_id=exclude_id)
    if same_domain >= MAX_CUSTOMERS_PER_EMAIL_DOMAIN:
        raise BusinessRuleError(
            f"Se alcanzó el límite de {MAX_CUSTOMERS_PER_EMAIL_DOMAIN} clientes con el dominio @{domain}"
        )


async def list_customers(db: AsyncSession, filters: cst_schemas.CustomerQueryFilter) -> ResponseData:
    with_ids = without_ids = None
    if filters.has_active_shipments is not None:
        active_ids = await shp_services.customer_ids_with_active_shipments(db)
        if filters.has_active_shipments:
            with_ids = active_ids
        else:
            without_ids = active_ids

    customers = await cst_crud.customer.search(db, filters=filters, with_ids=with_ids, without_ids=without_ids)
    return build_response(customers, filters.page_number, filters.page_size, "clientes")


async def find_customer(db: AsyncSession, customer_id: int) -> Optional[cst_models.Customer]:
    """고객을 조회합니다. 없으면 None (다른 도메인의 존재 확인용)."""
    return await cst_crud.customer.get(db, id=customer_id)


async def get_customer(db: AsyncSession, customer_id: int) -> cst_models.Customer:
    if customer_id <= 0:
        raise BusinessRuleError("El ID del cliente debe ser mayor a 0")
    db_customer = await cst_crud.customer.get(db, id=customer_id)
    if db_customer is None:
        raise NotFoundError(f"El cliente con ID {customer_id} no existe")
    return db_customer


async def get_customer_shipment_history(
    db: AsyncSession, customer_id: int
) -> List[cst_schemas.CustomerShipmentHistoryRead]:
    await get_customer(db, customer_id)
    rows = await shp_services.shipment_history_for_customer(db, customer_id)
    return [cst_schemas.CustomerShipmentHistoryRead(**row) for row in rows]


async def create_customer(db: AsyncSession, obj_in: cst_schemas.CustomerCreate) -> cst_models.Customer:
    data = _validate_customer(obj_in.model_dump())
    await _check_email_rules(db, data["email"])

    db_customer = await cst_crud.customer.create(db, obj_in=data)
    logger.info("Customer %s created (%s)", db_customer.id, db_customer.email)
    return db_customer


async def update_customer(
    db: AsyncSession, customer_id: int, obj_in: cst_schemas.CustomerUpdate
) -> cst_models.Customer:
    db_customer = await get_customer(db, customer_id)

    merged = db_customer.model_dump(include={"name", "email", "phone"})
    merged.update(obj_in.model_dump(exclude_unset=True, exclude_none=True))
    data = _validate_customer(merged)
    if data["email"] != db_customer.email.lower():
        await _check_email_rules(db, data["email"], exclude_id=customer_id)

    db_customer = await cst_crud.customer.update(db, db_obj=db_customer, obj_in=data)
    logger.info("Customer %s updated", customer_id)
    return db_customer


async def delete_customer(db: AsyncSession, customer_id: int) -> None:
    db_customer = await get_customer(db, customer_id)

    if await shp_services.count_active_shipments(db, customer_id=customer_id) > 0:
        raise BusinessRuleError(
            "No se puede eliminar un cliente con envíos activos. Complete o cancele los envíos primero."
        )

    # 주소는 고객과 함께 삭제되고, 완료된 배송 이력은 고객 참조만 해제됩니다.
    for db_address in await cst_crud.address.get_by_customer(db, customer_id=customer_id):
        await db.delete(db_address)
    await db.flush()
    await shp_services.detach_customer(db, customer_id)
    await cst_crud.customer.delete(db, id=db_customer.id)
    logger.info("Customer %s deleted", customer_id)


# =============================================================================
# 2. 주소 (Address) 서비스
# =============================================================================
def _validate_address(data: Dict[str, Any]) -> Dict[str, Any]:
    """주소 필드 규칙 집합. 통과하면 정규화된 값을 반환합니다."""
    street = data.get("street")
    if validation.is_blank(street) or len(street) < 5:
        raise BusinessRuleError("La dirección debe tener al menos 5 caracteres")
    validation.max_length(street, 200, "La dirección no puede exceder 200 caracteres")

    city = data.get("city")
    if validation.is_blank(city) or len(city) < 3:
        raise BusinessRuleError("La ciudad debe tener al menos 3 caracteres")
    validation.max_length(city, 100, "La ciudad no puede exceder 100 caracteres")

    data["department"] = validation.validate_department(data.get("department"))

    validation.max_length(data.get("zone"), 100, "La zona no puede exceder 100 caracteres")
    validation.max_length(data.get("postal_code"), 20, "El código postal no puede exceder 20 caracteres")
    validation.max_length(data.get("reference"), 500, "La referencia no puede exceder 500 caracteres")
    validation.max_length(data.get("alias"), 50, "El alias no puede exceder 50 caracteres")
    validation.max_length(data.get("contact_name"), 100, "El nombre de contacto no puede exceder 100 caracteres")
    if not validation.is_blank(data.get("contact_phone")):
        validation.validate_phone(data["contact_phone"], subject="El teléfono de contacto")

    validation.validate_coordinates(data.get("latitude"), data.get("longitude"))
    return data


async def list_addresses(db: AsyncSession, filters: cst_schemas.AddressQueryFilter) -> ResponseData:
    addresses = await cst_crud.address.search(db, filters=filters)
    return build_response(addresses, filters.page_number, filters.page_size, "direcciones")


async def get_address(db: AsyncSession, address_id: int) -> cst_models.Address:
    if address_id <= 0:
        raise BusinessRuleError("El ID de la dirección debe ser mayor a 0")
    db_address = await cst_crud.address.get(db, id=address_id)
    if db_address is None:
        raise NotFoundError(f"La dirección con ID {address_id} no existe")
    return db_address


async def get_addresses_by_customer(db: AsyncSession, customer_id: int) -> List[cst_models.Address]:
    await get_customer(db, customer_id)
    return await cst_crud.address.get_by_customer(db, customer_id=customer_id)


async def get_default_address(
    db: AsyncSession, customer_id: int, address_type: cst_models.AddressType
) -> cst_models.Address:
    await get_customer(db, customer_id)
    db_address = await cst_crud.address.get_default(db, customer_id=customer_id, address_type=address_type)
    if db_address is None:
        raise NotFoundError(
            f"El cliente no tiene una dirección predeterminada de tipo {cst_models.AddressType(address_type).value}"
        )
    return db_address


async def create_address(db: AsyncSession, obj_in: cst_schemas.AddressCreate) -> cst_models.Address:
    """
    주소를 검증한 뒤 기본 주소 규칙을 적용하여 생성합니다.
    - 기본 주소로 요청하면 같은 유형의 다른 기본 주소를 해제합니다.
    - 기본 주소로 요청하지 않았지만 해당 유형의 기본 주소가 없으면 이 주소를 기본 주소로 지정합니다.
    """
    if await find_customer(db, obj_in.customer_id) is None:
        raise NotFoundError(f"El cliente con ID {obj_in.customer_id} no existe")

    data = _validate_address(obj_in.model_dump())

    if await cst_crud.address.count_active(db, customer_id=obj_in.customer_id) >= MAX_ACTIVE_ADDRESSES:
        raise BusinessRuleError(
            f"El cliente ha alcanzado el límite máximo de {MAX_ACTIVE_ADDRESSES} direcciones activas"
        )

    if data["is_default"]:
        await cst_crud.address.unset_defaults(db, customer_id=obj_in.customer_id, address_type=obj_in.type)
    elif not await cst_crud.address.has_default(db, customer_id=obj_in.customer_id, address_type=obj_in.type):
        data["is_default"] = True

    data["is_active"] = True
    db_address = await cst_crud.address.create(db, obj_in=data)
    logger.info(
        "Address %s created for customer %s (type=%s, default=%s)",
        db_address.id, db_address.customer_id, db_address.type, db_address.is_default,
    )
    return db_address


async def update_address(
    db: AsyncSession, address_id: int, obj_in: cst_schemas.AddressUpdate
) -> cst_models.Address:
    """
    주소를 부분 업데이트합니다. 기존 값과 병합한 전체 레코드를 다시 검증합니다.
    - 기본 주소로 전환 시: 같은 (고객, 유형)의 다른 기본 주소를 해제합니다.
    - 기본 주소 해제(또는 비활성화) 시: 다른 기본 주소가 이미 있어야 합니다.
    """
    db_address = await get_address(db, address_id)

    merged = db_address.model_dump(exclude={"id", "created_at"})
    merged.update(obj_in.model_dump(exclude_unset=True))
    for key in ("customer_id", "street", "city", "department", "type", "is_default", "is_active"):
        if merged.get(key) is None:
            merged[key] = getattr(db_address, key)

    if merged["customer_id"] != db_address.customer_id and await find_customer(db, merged["customer_id"]) is None:
        raise NotFoundError(f"El cliente con ID {merged['customer_id']} no existe")

    data = _validate_address(merged)
    customer_id = data["customer_id"]
    address_type = cst_models.AddressType(data["type"])
    same_slot = db_address.customer_id == customer_id and db_address.type == address_type
    held_default = db_address.is_default and db_address.is_active
    holds_default = data["is_default"] and data["is_active"]

    # 기존 (고객, 유형)의 유일한 기본 주소가 그 자리를 떠나는 경우
    if held_default and not (holds_default and same_slot):
        has_other = await cst_crud.address.has_default(
            db, customer_id=db_address.customer_id, address_type=db_address.type, exclude_id=address_id
        )
        if not has_other:
            raise BusinessRuleError(
                "No se puede desmarcar la única dirección predeterminada. "
                "Primero marque otra dirección como predeterminada."
            )

    if data["is_active"] and (not db_address.is_active or db_address.customer_id != customer_id):
        active = await cst_crud.address.count_active(db, customer_id=customer_id)
        if active >= MAX_ACTIVE_ADDRESSES:
            raise BusinessRuleError(
                f"El cliente ha alcanzado el límite máximo de {MAX_ACTIVE_ADDRESSES} direcciones activas"
            )

    if holds_default and not (held_default and same_slot):
        await cst_crud.address.unset_defaults(
            db, customer_id=customer_id, address_type=address_type, exclude_id=address_id
        )
    elif data["is_active"] and not holds_default:
        # 옮겨 간 (고객, 유형)에 기본 주소가 없으면 이 주소가 기본 주소가 됩니다.
        if not await cst_crud.address.has_default(
            db, customer_id=customer_id, address_type=address_type, exclude_id=address_id
        ):
            data["is_default"] = True

    db_address = await cst_crud.address.update(db, db_obj=db_address, obj_in=data)
    logger.info("Address %s updated", address_id)
    return db_address


async def _ensure_not_sole_default(db: AsyncSession, db_address: cst_models.Address, message: str) -> None:
    if not (db_address.is_default and db_address.is_active):
        return
    has_other = await cst_crud.address.has_default(
        db, customer_id=db_address.customer_id, address_type=db_address.type, exclude_id=db_address.id
    )
    if not has_other:
        raise BusinessRuleError(message)


async def delete_address(db: AsyncSession, address_id: int) -> None:
    db_address = await get_address(db, address_id)
    await _ensure_not_sole_default(
        db,
        db_address,
        "No se puede eliminar la única dirección predeterminada activa. "
        "Primero marque otra dirección como predeterminada.",
    )
    await cst_crud.address.delete(db, id=address_id)
    logger.info("Address %s deleted", address_id)


async def deactivate_address(db: AsyncSession, address_id: int) -> cst_models.Address:
    db_address = await get_address(db, address_id)
    if not db_address.is_active:
        raise BusinessRuleError("La dirección ya está inactiva")
    await _ensure_not_sole_default(
        db,
        db_address,
        "No se puede desactivar la única dirección predeterminada activa. "
        "Primero marque otra dirección como predeterminada.",
    )
    db_address = await cst_crud.address.update(db, db_obj=db_address, obj_in={"is_active": False})
    logger.info("Address %s deactivated", address_id)
    return db_address


async def set_default_address(db: AsyncSession, address_id: int) -> cst_models.Address:
    """주소를 (고객, 유형)의 기본 주소로 지정하고 기존 기본 주소를 해제합니다."""
    db_address = await get_address(db, address_id)
    if not db_address.is_active:
        raise BusinessRuleError("No se puede marcar como predeterminada una dirección inactiva")
    if db_address.is_default:
        raise BusinessRuleError("La dirección ya es la predeterminada")

    await cst_crud.address.unset_defaults(
        db, customer_id=db_address.customer_id, address_type=db_address.type, exclude_id=address_id
    )
    db_address = await cst_crud.address.update(db, db_obj=db_address, obj_in={"is_default": True})
    logger.info("Address %s set as default for customer %s", address_id, db_address.customer_id)
    return db_address
