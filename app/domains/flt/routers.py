# app/domains/flt/routers.py

"""
'flt' 도메인 (차량/운전자 관리)의 API 엔드포인트를 정의하는 모듈입니다.

운전자/차량 CRUD, 가용 목록, 통계 조회와 함께
운전자 ↔ 차량 배정/해제 엔드포인트를 제공합니다.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.pagination import ResponseData

from app.domains.flt import schemas as flt_schemas
from app.domains.flt import services as flt_services

router = APIRouter(
    tags=["Fleet Management (차량/운전자 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. drivers 엔드포인트 (운전자 관리)
# =============================================================================
@router.get("/drivers", response_model=ResponseData[flt_schemas.DriverRead], summary="운전자 목록 조회 (필터/페이지)")
async def read_drivers(
    filters: flt_schemas.DriverQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    필터 조건에 맞는 운전자 목록을 페이지 단위로 조회합니다.
    - `license_expiring_in_days`: N일 이내 면허가 만료되는 운전자만 조회
    """
    return await flt_services.list_drivers(db, filters)


@router.post("/drivers", response_model=flt_schemas.DriverRead, status_code=status.HTTP_201_CREATED, summary="새 운전자 등록")
async def create_driver(
    driver_create: flt_schemas.DriverCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """새 운전자를 등록합니다. 상태는 Available, 누적 배송은 0으로 시작합니다."""
    return await flt_services.create_driver(db, driver_create)


@router.get("/drivers/available", response_model=List[flt_schemas.DriverRead], summary="배정 가능한 운전자 조회")
async def read_available_drivers(db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.get_available_drivers(db)


@router.get("/drivers/{driver_id}", response_model=flt_schemas.DriverRead, summary="특정 운전자 조회")
async def read_driver(driver_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.get_driver(db, driver_id)


@router.get("/drivers/{driver_id}/statistics", response_model=flt_schemas.DriverStatisticsRead, summary="운전자 통계 조회")
async def read_driver_statistics(driver_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.get_driver_statistics(db, driver_id)


@router.put("/drivers/{driver_id}", response_model=flt_schemas.DriverRead, summary="운전자 정보 업데이트")
async def update_driver(
    driver_id: int,
    driver_update: flt_schemas.DriverUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await flt_services.update_driver(db, driver_id, driver_update)


@router.delete("/drivers/{driver_id}", status_code=status.HTTP_204_NO_CONTENT, summary="운전자 삭제")
async def delete_driver(driver_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """차량이 배정된 운전자는 삭제할 수 없습니다."""
    await flt_services.delete_driver(db, driver_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/drivers/{driver_id}/assign-vehicle/{vehicle_id}",
    response_model=flt_schemas.DriverRead,
    summary="운전자에게 차량 배정",
)
async def assign_vehicle(driver_id: int, vehicle_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.assign_vehicle_to_driver(db, driver_id, vehicle_id)


@router.post("/drivers/{driver_id}/unassign-vehicle", response_model=flt_schemas.DriverRead, summary="운전자의 차량 배정 해제")
async def unassign_vehicle(driver_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.unassign_vehicle_from_driver(db, driver_id)


# =============================================================================
# 2. vehicles 엔드포인트 (차량 관리)
# =============================================================================
@router.get("/vehicles", response_model=ResponseData[flt_schemas.VehicleRead], summary="차량 목록 조회 (필터/페이지)")
async def read_vehicles(
    filters: flt_schemas.VehicleQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await flt_services.list_vehicles(db, filters)


@router.post("/vehicles", response_model=flt_schemas.VehicleRead, status_code=status.HTTP_201_CREATED, summary="새 차량 등록")
async def create_vehicle(
    vehicle_create: flt_schemas.VehicleCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    새 차량을 등록합니다.
    - `assigned_driver_id`를 지정하면 등록과 동시에 운전자를 배정합니다.
    """
    return await flt_services.create_vehicle(db, vehicle_create)


@router.get("/vehicles/available", response_model=List[flt_schemas.VehicleRead], summary="배정 가능한 차량 조회")
async def read_available_vehicles(db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.get_available_vehicles(db)


@router.get("/vehicles/by-capacity", response_model=List[flt_schemas.VehicleRead], summary="여유 적재량으로 차량 조회")
async def read_vehicles_by_capacity(
    required_weight: float = Query(0, description="필요한 여유 중량 (kg)"),
    required_volume: float = Query(0, description="필요한 여유 부피 (m³)"),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await flt_services.get_vehicles_by_capacity(db, required_weight, required_volume)


@router.get("/vehicles/{vehicle_id}", response_model=flt_schemas.VehicleRead, summary="특정 차량 조회")
async def read_vehicle(vehicle_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.get_vehicle(db, vehicle_id)


@router.get("/vehicles/{vehicle_id}/statistics", response_model=flt_schemas.VehicleStatisticsRead, summary="차량 통계 조회")
async def read_vehicle_statistics(vehicle_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.get_vehicle_statistics(db, vehicle_id)


@router.put("/vehicles/{vehicle_id}", response_model=flt_schemas.VehicleRead, summary="차량 정보 업데이트")
async def update_vehicle(
    vehicle_id: int,
    vehicle_update: flt_schemas.VehicleUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await flt_services.update_vehicle(db, vehicle_id, vehicle_update)


@router.patch("/vehicles/{vehicle_id}/current-load", response_model=flt_schemas.VehicleRead, summary="차량 현재 적재량 변경")
async def update_current_load(
    vehicle_id: int,
    load_update: flt_schemas.VehicleLoadUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await flt_services.update_current_load(db, vehicle_id, load_update)


@router.delete("/vehicles/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT, summary="차량 삭제")
async def delete_vehicle(vehicle_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """운전자가 배정되었거나 운행 중인 차량은 삭제할 수 없습니다."""
    await flt_services.delete_vehicle(db, vehicle_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/vehicles/{vehicle_id}/assign-driver/{driver_id}",
    response_model=flt_schemas.VehicleRead,
    summary="차량에 운전자 배정",
)
async def assign_driver(vehicle_id: int, driver_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.assign_driver_to_vehicle(db, vehicle_id, driver_id)


@router.post("/vehicles/{vehicle_id}/unassign-driver", response_model=flt_schemas.VehicleRead, summary="차량의 운전자 배정 해제")
async def unassign_driver(vehicle_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await flt_services.unassign_driver_from_vehicle(db, vehicle_id)
