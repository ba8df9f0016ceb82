# tests/conftest.py

from typing import AsyncGenerator, Awaitable, Callable
from datetime import date, timedelta

import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app
from app.core import dependencies as deps
from app.core.database import create_db_and_tables, get_session

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모든 모델이 한 번 이상 임포트되어야 합니다.
from app.domains.cst import models as cst_models
from app.domains.flt import models as flt_models
from app.domains.whs import models as whs_models
from app.domains.shp import models as shp_models


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 새 인메모리 SQLite DB를 사용합니다. (StaticPool: 하나의 연결을 공유해야 같은 DB를 봄)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    각 테스트 함수마다 빈 데이터베이스를 만들고 세션을 제공합니다.
    테스트가 끝나면 엔진을 폐기하여 데이터가 다음 테스트로 넘어가지 않게 합니다.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_db_and_tables(bind=test_engine)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        await session.close()
        await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """테스트 세션을 주입한 AsyncClient를 반환합니다."""
    async def override_get_session():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides.update({
            get_session: override_get_session,
            deps.get_db_session: override_get_session,
        })
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as test_client:
            yield test_client
    finally:
        # 테스트가 끝난 후 원래 의존성 상태로 되돌립니다.
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- 엔티티 팩토리 픽스처 ---
# 서비스 규칙을 거치지 않고 DB에 직접 레코드를 만들어 테스트 전제 조건을 준비합니다.
async def _persist(db_session: AsyncSession, obj):
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


@pytest_asyncio.fixture(scope="function")
def customer_factory(db_session: AsyncSession) -> Callable[..., Awaitable[cst_models.Customer]]:
    async def _create_customer(name: str = "Juan Pérez", email: str = "juan@example.com", **kwargs) -> cst_models.Customer:
        data = {"name": name, "email": email, "phone": "+591 71234567", **kwargs}
        return await _persist(db_session, cst_models.Customer(**data))
    return _create_customer


@pytest_asyncio.fixture(scope="function")
def route_factory(db_session: AsyncSession) -> Callable[..., Awaitable[shp_models.Route]]:
    async def _create_route(origin: str = "La Paz", destination: str = "Oruro", **kwargs) -> shp_models.Route:
        data = {
            "origin": origin,
            "destination": destination,
            "distance_km": 230.0,
            "base_cost": 150.0,
            "is_active": True,
            **kwargs,
        }
        return await _persist(db_session, shp_models.Route(**data))
    return _create_route


@pytest_asyncio.fixture(scope="function")
def shipment_factory(db_session: AsyncSession) -> Callable[..., Awaitable[shp_models.Shipment]]:
    async def _create_shipment(
        customer_id: int, route_id: int, tracking_number: str, **kwargs
    ) -> shp_models.Shipment:
        data = {
            "customer_id": customer_id,
            "route_id": route_id,
            "tracking_number": tracking_number,
            "state": shp_models.ShipmentState.PENDING,
            "total_cost": 200.0,
            **kwargs,
        }
        return await _persist(db_session, shp_models.Shipment(**data))
    return _create_shipment


@pytest_asyncio.fixture(scope="function")
def warehouse_factory(db_session: AsyncSession) -> Callable[..., Awaitable[whs_models.Warehouse]]:
    async def _create_warehouse(code: str = "LPZ-01", **kwargs) -> whs_models.Warehouse:
        data = {
            "name": "Almacén Central La Paz",
            "code": code,
            "address": "Av. Mariscal Santa Cruz 1234",
            "city": "La Paz",
            "department": "La Paz",
            "phone": "+591 22123456",
            "max_capacity_m3": 100.0,
            "current_capacity_m3": 0.0,
            "type": whs_models.WarehouseType.CENTRAL,
            "is_active": True,
            **kwargs,
        }
        return await _persist(db_session, whs_models.Warehouse(**data))
    return _create_warehouse


@pytest_asyncio.fixture(scope="function")
def driver_factory(db_session: AsyncSession) -> Callable[..., Awaitable[flt_models.Driver]]:
    async def _create_driver(license_number: str = "LIC-1001", identity_document: str = "1234567", **kwargs) -> flt_models.Driver:
        today = date.today()
        data = {
            "full_name": "Carlos Mamani",
            "identity_document": identity_document,
            "license_number": license_number,
            "license_category": "C",
            "license_issue_date": today - timedelta(days=365 * 3),
            "license_expiry_date": today + timedelta(days=365 * 2),
            "phone": "+591 70000001",
            "email": f"{license_number.lower()}@example.com",
            "date_of_birth": date(1985, 5, 20),
            "hire_date": today - timedelta(days=365),
            "years_of_experience": 8,
            "status": flt_models.DriverStatus.AVAILABLE,
            "is_active": True,
            **kwargs,
        }
        return await _persist(db_session, flt_models.Driver(**data))
    return _create_driver


@pytest_asyncio.fixture(scope="function")
def vehicle_factory(db_session: AsyncSession) -> Callable[..., Awaitable[flt_models.Vehicle]]:
    async def _create_vehicle(plate_number: str = "2345-ABC", **kwargs) -> flt_models.Vehicle:
        data = {
            "plate_number": plate_number,
            "brand": "Toyota",
            "model": "Hilux",
            "year": 2020,
            "type": flt_models.VehicleType.PICKUP,
            "max_weight_capacity_kg": 1000.0,
            "max_volume_capacity_m3": 5.0,
            "status": flt_models.VehicleStatus.AVAILABLE,
            "is_active": True,
            **kwargs,
        }
        return await _persist(db_session, flt_models.Vehicle(**data))
    return _create_vehicle
