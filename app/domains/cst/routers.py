# app/domains/cst/routers.py

"""
'cst' 도메인 (고객 관리)의 API 엔드포인트를 정의하는 모듈입니다.

이 라우터는 고객(Customer)과 고객 주소(Address)에 대한 CRUD 및
기본 주소 지정/비활성화 엔드포인트를 제공합니다.
비즈니스 규칙 위반은 서비스 계층에서 예외로 발생하며, main.py의 예외 핸들러가 응답으로 변환합니다.
"""

from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.pagination import ResponseData

from app.domains.cst import models as cst_models
from app.domains.cst import schemas as cst_schemas
from app.domains.cst import services as cst_services

router = APIRouter(
    tags=["Customer Management (고객 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. customers 엔드포인트 (고객 관리)
# =============================================================================
@router.get("/customers", response_model=ResponseData[cst_schemas.CustomerRead], summary="고객 목록 조회 (필터/페이지)")
async def read_customers(
    filters: cst_schemas.CustomerQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    필터 조건에 맞는 고객 목록을 페이지 단위로 조회합니다.
    - `name`, `email`, `phone`: 부분 일치 검색
    - `has_active_shipments`: 활성(미배송 완료) 배송 보유 여부
    """
    return await cst_services.list_customers(db, filters)


@router.post("/customers", response_model=cst_schemas.CustomerRead, status_code=status.HTTP_201_CREATED, summary="새 고객 생성")
async def create_customer(
    customer_create: cst_schemas.CustomerCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await cst_services.create_customer(db, customer_create)


@router.get("/customers/{customer_id}", response_model=cst_schemas.CustomerRead, summary="특정 고객 정보 조회")
async def read_customer(customer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await cst_services.get_customer(db, customer_id)


@router.get(
    "/customers/{customer_id}/shipment-history",
    response_model=List[cst_schemas.CustomerShipmentHistoryRead],
    summary="고객 배송 이력 조회",
)
async def read_customer_shipment_history(customer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """고객의 배송 이력을 최신순으로 조회합니다. (노선 정보 및 소포 집계 포함)"""
    return await cst_services.get_customer_shipment_history(db, customer_id)


@router.put("/customers/{customer_id}", response_model=cst_schemas.CustomerRead, summary="고객 정보 업데이트")
async def update_customer(
    customer_id: int,
    customer_update: cst_schemas.CustomerUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await cst_services.update_customer(db, customer_id, customer_update)


@router.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, summary="고객 삭제")
async def delete_customer(customer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """
    고객을 삭제합니다. 배송 완료되지 않은 배송이 있으면 삭제할 수 없습니다.
    """
    await cst_services.delete_customer(db, customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. addresses 엔드포인트 (주소 관리)
# =============================================================================
@router.get("/addresses", response_model=ResponseData[cst_schemas.AddressRead], summary="주소 목록 조회 (필터/페이지)")
async def read_addresses(
    filters: cst_schemas.AddressQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await cst_services.list_addresses(db, filters)


@router.post("/addresses", response_model=cst_schemas.AddressRead, status_code=status.HTTP_201_CREATED, summary="새 주소 등록")
async def create_address(
    address_create: cst_schemas.AddressCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    새 주소를 등록합니다.
    - `is_default=true`: 같은 유형의 기존 기본 주소가 해제됩니다.
    - 해당 유형의 기본 주소가 없으면 자동으로 기본 주소가 됩니다.
    """
    return await cst_services.create_address(db, address_create)


@router.get("/addresses/customer/{customer_id}", response_model=List[cst_schemas.AddressRead], summary="고객별 주소 목록 조회")
async def read_addresses_by_customer(customer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await cst_services.get_addresses_by_customer(db, customer_id)


@router.get(
    "/addresses/customer/{customer_id}/default/{address_type}",
    response_model=cst_schemas.AddressRead,
    summary="고객의 유형별 기본 주소 조회",
)
async def read_default_address(
    customer_id: int,
    address_type: cst_models.AddressType,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await cst_services.get_default_address(db, customer_id, address_type)


@router.get("/addresses/{address_id}", response_model=cst_schemas.AddressRead, summary="특정 주소 조회")
async def read_address(address_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await cst_services.get_address(db, address_id)


@router.put("/addresses/{address_id}", response_model=cst_schemas.AddressRead, summary="주소 정보 업데이트")
async def update_address(
    address_id: int,
    address_update: cst_schemas.AddressUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await cst_services.update_address(db, address_id, address_update)


@router.post("/addresses/{address_id}/set-default", response_model=cst_schemas.AddressRead, summary="기본 주소로 지정")
async def set_default_address(address_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await cst_services.set_default_address(db, address_id)


@router.post("/addresses/{address_id}/deactivate", response_model=cst_schemas.AddressRead, summary="주소 비활성화")
async def deactivate_address(address_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await cst_services.deactivate_address(db, address_id)


@router.delete("/addresses/{address_id}", status_code=status.HTTP_204_NO_CONTENT, summary="주소 삭제")
async def delete_address(address_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await cst_services.delete_address(db, address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
