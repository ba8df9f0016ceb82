# app/domains/shp/routers.py

"""
'shp' 도메인 (배송 관리)의 API 엔드포인트를 정의하는 모듈입니다.

이 라우터는 노선(Route), 배송(Shipment), 소포(Package)에 대한 CRUD 및
노선 이용 순위, 배송-고객-노선 결합 조회, 소포 집계 엔드포인트를 제공합니다.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.pagination import ResponseData

from app.domains.shp import schemas as shp_schemas
from app.domains.shp import services as shp_services

router = APIRouter(
    tags=["Shipping Management (배송 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. routes 엔드포인트 (노선 관리)
# =============================================================================
@router.get("/routes", response_model=ResponseData[shp_schemas.RouteRead], summary="노선 목록 조회 (필터/페이지)")
async def read_routes(
    filters: shp_schemas.RouteQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await shp_services.list_routes(db, filters)


@router.post("/routes", response_model=shp_schemas.RouteRead, status_code=status.HTTP_201_CREATED, summary="새 노선 생성")
async def create_route(
    route_create: shp_schemas.RouteCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await shp_services.create_route(db, route_create)


@router.get("/routes/active", response_model=List[shp_schemas.RouteRead], summary="활성 노선 목록 조회")
async def read_active_routes(db: AsyncSession = Depends(deps.get_db_session)):
    return await shp_services.get_active_routes(db)


@router.get("/routes/most-used", response_model=List[shp_schemas.RouteRankingRead], summary="노선 이용 순위 조회")
async def read_most_used_routes(
    limit: int = Query(shp_services.DEFAULT_RANKING_LIMIT, description="조회할 노선 수"),
    db: AsyncSession = Depends(deps.get_db_session)
):
    """배송 건수가 많은 순(동률이면 총 매출 순)으로 노선 순위를 조회합니다."""
    return await shp_services.get_most_used_routes(db, limit)


@router.get("/routes/{route_id}", response_model=shp_schemas.RouteRead, summary="특정 노선 조회")
async def read_route(route_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await shp_services.get_route(db, route_id)


@router.put("/routes/{route_id}", response_model=shp_schemas.RouteRead, summary="노선 정보 업데이트")
async def update_route(
    route_id: int,
    route_update: shp_schemas.RouteUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    노선 정보를 업데이트합니다.
    배송이 연결된 노선은 출발지/도착지를 변경할 수 없습니다.
    """
    return await shp_services.update_route(db, route_id, route_update)


@router.delete("/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT, summary="노선 삭제")
async def delete_route(route_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await shp_services.delete_route(db, route_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 2. shipments 엔드포인트 (배송 관리)
# =============================================================================
@router.get("/shipments", response_model=ResponseData[shp_schemas.ShipmentRead], summary="배송 목록 조회 (필터/페이지)")
async def read_shipments(
    filters: shp_schemas.ShipmentQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    필터 조건에 맞는 배송 목록을 페이지 단위로 조회합니다.
    - `shipping_date`: 해당 일자에 발송된 배송
    - `tracking_number`: 부분 일치 검색
    """
    return await shp_services.list_shipments(db, filters)


@router.post("/shipments", response_model=shp_schemas.ShipmentRead, status_code=status.HTTP_201_CREATED, summary="새 배송 등록")
async def create_shipment(
    shipment_create: shp_schemas.ShipmentCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    새 배송을 등록합니다.
    - 초기 상태는 'Pending'이어야 합니다.
    - 고객당 활성 배송은 최대 3건입니다.
    """
    return await shp_services.create_shipment(db, shipment_create)


@router.get(
    "/shipments/customer-route",
    response_model=List[shp_schemas.ShipmentCustomerRouteRead],
    summary="배송-고객-노선 결합 조회",
)
async def read_shipments_with_customer_and_route(db: AsyncSession = Depends(deps.get_db_session)):
    return await shp_services.get_shipments_with_customer_and_route(db)


@router.get("/shipments/{shipment_id}", response_model=shp_schemas.ShipmentRead, summary="특정 배송 조회")
async def read_shipment(shipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await shp_services.get_shipment(db, shipment_id)


@router.put("/shipments/{shipment_id}", response_model=shp_schemas.ShipmentRead, summary="배송 정보 업데이트")
async def update_shipment(
    shipment_id: int,
    shipment_update: shp_schemas.ShipmentUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """'Delivered'로 변경하려면 현재 상태가 'In transit'이어야 합니다."""
    return await shp_services.update_shipment(db, shipment_id, shipment_update)


@router.delete("/shipments/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT, summary="배송 삭제")
async def delete_shipment(shipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await shp_services.delete_shipment(db, shipment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# 3. packages 엔드포인트 (소포 관리)
# =============================================================================
@router.get("/packages", response_model=ResponseData[shp_schemas.PackageRead], summary="소포 목록 조회 (필터/페이지)")
async def read_packages(
    filters: shp_schemas.PackageQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await shp_services.list_packages(db, filters)


@router.post("/packages", response_model=shp_schemas.PackageRead, status_code=status.HTTP_201_CREATED, summary="새 소포 등록")
async def create_package(
    package_create: shp_schemas.PackageCreate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await shp_services.create_package(db, package_create)


@router.get("/packages/heavy", response_model=List[shp_schemas.PackageRead], summary="중량 소포 조회")
async def read_heavy_packages(
    min_weight: float = Query(shp_services.DEFAULT_HEAVY_PACKAGE_KG, description="최소 무게 (kg)"),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await shp_services.get_heavy_packages(db, min_weight)


@router.get(
    "/packages/details",
    response_model=ResponseData[shp_schemas.PackageDetailRead],
    summary="소포-배송-고객-노선 결합 조회 (필터/페이지)",
)
async def read_package_details(
    filters: shp_schemas.PackageQueryFilter = Depends(),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await shp_services.get_package_details(db, filters)


@router.get(
    "/packages/shipment/{shipment_id}/summary",
    response_model=shp_schemas.PackageSummaryRead,
    summary="배송별 소포 집계",
)
async def read_package_summary(shipment_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await shp_services.get_package_summary(db, shipment_id)


@router.get("/packages/{package_id}", response_model=shp_schemas.PackageRead, summary="특정 소포 조회")
async def read_package(package_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return await shp_services.get_package(db, package_id)


@router.put("/packages/{package_id}", response_model=shp_schemas.PackageRead, summary="소포 정보 업데이트")
async def update_package(
    package_id: int,
    package_update: shp_schemas.PackageUpdate,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await shp_services.update_package(db, package_id, package_update)


@router.delete("/packages/{package_id}", status_code=status.HTTP_204_NO_CONTENT, summary="소포 삭제")
async def delete_package(package_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await shp_services.delete_package(db, package_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
