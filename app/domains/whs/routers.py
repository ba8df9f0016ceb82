# app/domains/whs/routers.py

"""
'whs' 도메인 (창고 관리)의 API 엔드포인트를 정의하는 모듈입니다.

이 라우터는 창고(Warehouse) CRUD 및 통계 조회와,
배송의 창고 입고/출고(ShipmentWarehouse) 등록 및 위치/이력 조회 엔드포인트를 제공합니다.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.pagination import ResponseData

from app.domains.whs import schemas as whs_schemas
from app.domains.whs import services as whs_services

router = APIRouter(
    tags=["Warehouse Management (창고 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. warehouses 엔드포인트 (창고 관리)
# =============================================================================
@router.get("/warehouses", response_model=ResponseData[whs_schemas.WarehouseRead], summary="창고 목록 조회 (필터/페이지)")
async def read_warehouses(
    filters: whs_schemas.WarehouseQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    필터 조건에 맞는 창고 목록을 페이지 단위로 조회합니다.
    - `min_available_capacity`: 여유 용량 하한
    - `max_occupancy_percentage`: 점유율(%) 상한
    """
    return await whs_services.list_warehouses(db, filters)


@router.post("/warehouses", response_model=whs_schemas.WarehouseRead, status_code=status.HTTP_201_CREATED, summary="새 창고 생성")
async def create_warehouse(
    warehouse_create: whs_schemas.WarehouseCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """새 창고를 생성합니다. 현재 점유량은 항상 0으로 시작합니다."""
    return await whs_services.create_warehouse(db, warehouse_create)


@router.get("/warehouses/active", response_model=List[whs_schemas.WarehouseRead], summary="활성 창고 목록 조회")
async def read_active_warehouses(db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.get_active_warehouses(db)


@router.get("/warehouses/available", response_model=List[whs_schemas.WarehouseRead], summary="여유 용량이 있는 창고 조회")
async def read_available_warehouses(
    required_capacity: float = Query(1, description="필요한 여유 용량"),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await whs_services.get_available_warehouses(db, required_capacity)


@router.get("/warehouses/code/{code}", response_model=whs_schemas.WarehouseRead, summary="창고 코드로 조회")
async def read_warehouse_by_code(code: str, db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.get_warehouse_by_code(db, code)


@router.get("/warehouses/{warehouse_id}", response_model=whs_schemas.WarehouseRead, summary="특정 창고 조회")
async def read_warehouse(warehouse_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.get_warehouse(db, warehouse_id)


@router.get(
    "/warehouses/{warehouse_id}/statistics",
    response_model=whs_schemas.WarehouseStatisticsRead,
    summary="창고 운영 통계 조회",
)
async def read_warehouse_statistics(warehouse_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.get_warehouse_statistics(db, warehouse_id)


@router.get(
    "/warehouses/{warehouse_id}/current-shipments",
    response_model=List[whs_schemas.ShipmentWarehouseRead],
    summary="창고에 보관 중인 배송 조회",
)
async def read_current_shipments(warehouse_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.get_current_shipments_in_warehouse(db, warehouse_id)


@router.put("/warehouses/{warehouse_id}", response_model=whs_schemas.WarehouseRead, summary="창고 정보 업데이트")
async def update_warehouse(
    warehouse_id: int,
    warehouse_update: whs_schemas.WarehouseUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await whs_services.update_warehouse(db, warehouse_id, warehouse_update)


@router.delete("/warehouses/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT, summary="창고 삭제")
async def delete_warehouse(warehouse_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """보관 중인 배송이 있는 창고는 삭제할 수 없습니다."""
    await whs_services.delete_warehouse(db, warehouse_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. movements 엔드포인트 (배송 입출고)
# =============================================================================
@router.get("/movements", response_model=ResponseData[whs_schemas.ShipmentWarehouseRead], summary="입출고 기록 조회 (필터/페이지)")
async def read_movements(
    filters: whs_schemas.ShipmentWarehouseQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await whs_services.list_movements(db, filters)


@router.post("/movements/entry", response_model=whs_schemas.ShipmentWarehouseRead, status_code=status.HTTP_201_CREATED, summary="창고 입고 등록")
async def register_entry(
    entry: whs_schemas.ShipmentWarehouseEntry,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    배송의 창고 입고를 등록합니다.
    - 배송이 이미 다른 창고에 있으면 먼저 출고를 등록해야 합니다.
    - 성공 시 창고 점유량이 1 증가합니다.
    """
    return await whs_services.register_entry(db, entry)


@router.get(
    "/movements/shipment/{shipment_id}/history",
    response_model=List[whs_schemas.ShipmentWarehouseHistoryRead],
    summary="배송의 창고 경유 이력 조회",
)
async def read_shipment_history(shipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.get_shipment_history(db, shipment_id)


@router.get(
    "/movements/shipment/{shipment_id}/current-location",
    response_model=Optional[whs_schemas.ShipmentWarehouseRead],
    summary="배송의 현재 창고 위치 조회",
)
async def read_current_location(shipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """배송이 현재 보관된 창고의 입고 기록을 반환합니다. 창고에 없으면 null입니다."""
    return await whs_services.get_current_location(db, shipment_id)


@router.get("/movements/shipment/{shipment_id}/in-warehouse", response_model=bool, summary="배송의 창고 보관 여부")
async def read_in_warehouse(shipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.is_shipment_in_warehouse(db, shipment_id)


@router.get("/movements/{movement_id}", response_model=whs_schemas.ShipmentWarehouseRead, summary="특정 입출고 기록 조회")
async def read_movement(movement_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await whs_services.get_movement(db, movement_id)


@router.post("/movements/{movement_id}/exit", response_model=whs_schemas.ShipmentWarehouseRead, summary="창고 출고 등록")
async def register_exit(
    movement_id: int,
    exit_in: whs_schemas.ShipmentWarehouseExit,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """출고를 등록합니다. 성공 시 창고 점유량이 1 감소합니다 (0 미만으로 내려가지 않음)."""
    return await whs_services.register_exit(db, movement_id, exit_in)


@router.delete("/movements/{movement_id}", status_code=status.HTTP_204_NO_CONTENT, summary="입출고 기록 삭제")
async def delete_movement(movement_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """출고되지 않은(보관 중) 기록은 삭제할 수 없습니다."""
    await whs_services.delete_movement(db, movement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
