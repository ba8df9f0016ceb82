# tests/domains/test_flt_n.py

"""
'flt' 도메인 (운전자/차량) 관련 API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 운전자: 등록 검증(나이/면허/중복), 배정 가능 목록, 통계
- 차량: 번호판 정규화, 유형별 적재 상한, 소속 창고 확인, 적재량 변경, 통계
- 배정: 운전자 ↔ 차량 포인터가 항상 양방향으로 일치하는지 확인
"""

from datetime import date, timedelta
from typing import Callable

import pytest
from httpx import AsyncClient

from app.domains.flt import models as flt_models

FLT_URL = "/api/v1/flt"
DRIVERS_URL = f"{FLT_URL}/drivers"
VEHICLES_URL = f"{FLT_URL}/vehicles"


def _driver_payload(**overrides) -> dict:
    today = date.today()
    payload = {
        "full_name": "Ana María Quispe",
        "identity_document": "7654321",
        "license_number": "LIC-2001",
        "license_category": "B",
        "license_issue_date": (today - timedelta(days=400)).isoformat(),
        "license_expiry_date": (today + timedelta(days=900)).isoformat(),
        "phone": "+591 71112233",
        "email": "ana.quispe@example.com",
        "date_of_birth": "1990-03-15",
        "hire_date": (today - timedelta(days=30)).isoformat(),
        "years_of_experience": 5,
        "blood_type": "O+",
    }
    payload.update(overrides)
    return payload


def _vehicle_payload(**overrides) -> dict:
    payload = {
        "plate_number": "4567-xyz",
        "brand": "Nissan",
        "model": "Frontier",
        "year": 2021,
        "type": "Pickup",
        "max_weight_capacity_kg": 1200,
        "max_volume_capacity_m3": 6,
        "fuel_type": "Diesel",
    }
    payload.update(overrides)
    return payload


def _detail(response) -> str:
    return response.json()["errors"][0]["detail"]


# =============================================================================
# 1. 운전자 (Driver) 테스트
# =============================================================================
@pytest.mark.asyncio
async def test_create_driver_success(client: AsyncClient):
    print("\n--- Running test_create_driver_success ---")
    response = await client.post(DRIVERS_URL, json=_driver_payload(full_name="  Ana María Quispe "))
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    created = response.json()
    assert created["full_name"] == "Ana María Quispe"
    assert created["status"] == "Available"
    assert created["is_active"] is True
    assert created["total_deliveries"] == 0
    assert created["current_vehicle_id"] is None
    print("test_create_driver_success passed.")


@pytest.mark.asyncio
async def test_create_driver_validation(client: AsyncClient, driver_factory: Callable):
    print("\n--- Running test_create_driver_validation ---")
    today = date.today()
    await driver_factory(license_number="LIC-1001", identity_document="1234567")

    minor_birth = today - timedelta(days=365 * 17)
    response = await client.post(DRIVERS_URL, json=_driver_payload(date_of_birth=minor_birth.isoformat()))
    assert response.status_code == 400
    assert _detail(response) == "El conductor debe ser mayor de 18 años"

    response = await client.post(
        DRIVERS_URL,
        json=_driver_payload(
            license_issue_date=(today - timedelta(days=2000)).isoformat(),
            license_expiry_date=(today - timedelta(days=1)).isoformat(),
        ),
    )
    assert _detail(response) == "La licencia de conducir está vencida"

    response = await client.post(DRIVERS_URL, json=_driver_payload(full_name="Ana 123"))
    assert _detail(response) == "El nombre completo solo puede contener letras y espacios"

    response = await client.post(DRIVERS_URL, json=_driver_payload(blood_type="Z+"))
    assert _detail(response).startswith("El tipo de sangre no es válido")

    response = await client.post(DRIVERS_URL, json=_driver_payload(license_number="LIC-1001"))
    assert _detail(response) == "Ya existe un conductor con ese número de licencia"

    response = await client.post(DRIVERS_URL, json=_driver_payload(identity_document="1234567"))
    assert _detail(response) == "Ya existe un conductor con ese documento de identidad"
    print("test_create_driver_validation passed.")


@pytest.mark.asyncio
async def test_get_driver_not_found(client: AsyncClient):
    response = await client.get(f"{DRIVERS_URL}/999")
    assert response.status_code == 404
    assert _detail(response) == "El conductor con ID 999 no existe"

    response = await client.get(f"{DRIVERS_URL}/0")
    assert response.status_code == 400
    assert _detail(response) == "El ID del conductor debe ser mayor a 0"


@pytest.mark.asyncio
async def test_available_drivers(client: AsyncClient, driver_factory: Callable, vehicle_factory: Callable):
    print("\n--- Running test_available_drivers ---")
    today = date.today()
    junior = await driver_factory(license_number="LIC-1", identity_document="1001", years_of_experience=2)
    senior = await driver_factory(license_number="LIC-2", identity_document="1002", years_of_experience=15)
    await driver_factory(license_number="LIC-3", identity_document="1003", is_active=False)
    await driver_factory(license_number="LIC-4", identity_document="1004", status=flt_models.DriverStatus.OFF_DUTY)
    await driver_factory(
        license_number="LIC-5", identity_document="1005", license_expiry_date=today - timedelta(days=1)
    )
    vehicle = await vehicle_factory()
    await driver_factory(license_number="LIC-6", identity_document="1006", current_vehicle_id=vehicle.id)

    response = await client.get(f"{DRIVERS_URL}/available")
    print(f"Response JSON: {response.json()}")
    assert [item["id"] for item in response.json()] == [senior.id, junior.id]
    print("test_available_drivers passed.")


@pytest.mark.asyncio
async def test_driver_statistics(client: AsyncClient, driver_factory: Callable):
    today = date.today()
    driver = await driver_factory(license_expiry_date=today + timedelta(days=10), total_deliveries=12, average_rating=4.5)

    response = await client.get(f"{DRIVERS_URL}/{driver.id}/statistics")
    assert response.status_code == 200
    stats = response.json()
    assert stats["total_deliveries"] == 12
    assert stats["days_until_license_expiry"] == 10
    assert stats["license_expiring_soon"] is True
    assert stats["on_time_deliveries"] == 0
    assert stats["average_rating"] == 4.5


@pytest.mark.asyncio
async def test_update_driver(client: AsyncClient, driver_factory: Callable):
    print("\n--- Running test_update_driver ---")
    driver = await driver_factory(license_number="LIC-1", identity_document="1001")
    await driver_factory(license_number="LIC-2", identity_document="1002")

    response = await client.put(f"{DRIVERS_URL}/{driver.id}", json={"phone": "+591 76543210", "full_name": None})
    assert response.status_code == 200
    assert response.json()["phone"] == "+591 76543210"
    assert response.json()["full_name"] == "Carlos Mamani"

    response = await client.put(f"{DRIVERS_URL}/{driver.id}", json={"license_number": "LIC-2"})
    assert response.status_code == 400
    assert _detail(response) == "Ya existe otro conductor con ese número de licencia"
    print("test_update_driver passed.")


# =============================================================================
# 2. 차량 (Vehicle) 테스트
# =============================================================================
@pytest.mark.asyncio
async def test_create_vehicle_success(client: AsyncClient, warehouse_factory: Callable):
    print("\n--- Running test_create_vehicle_success ---")
    warehouse = await warehouse_factory()
    response = await client.post(VEHICLES_URL, json=_vehicle_payload(base_warehouse_id=warehouse.id))
    print(f"Response JSON: {response.json()}")

    assert response.status_code == 201
    created = response.json()
    assert created["plate_number"] == "4567-XYZ"
    assert created["status"] == "Available"
    assert created["current_weight_kg"] == 0
    assert created["current_volume_m3"] == 0
    assert created["assigned_driver_id"] is None
    assert created["base_warehouse_id"] == warehouse.id
    print("test_create_vehicle_success passed.")


@pytest.mark.asyncio
async def test_create_vehicle_validation(
    client: AsyncClient, vehicle_factory: Callable, warehouse_factory: Callable
):
    print("\n--- Running test_create_vehicle_validation ---")
    await vehicle_factory(plate_number="2345-ABC")
    inactive = await warehouse_factory(is_active=False)

    response = await client.post(VEHICLES_URL, json=_vehicle_payload(type="Motorcycle", max_weight_capacity_kg=500))
    assert response.status_code == 400
    assert _detail(response) == "Una motocicleta no puede superar los 300 kg"

    response = await client.post(VEHICLES_URL, json=_vehicle_payload(plate_number="2345-abc"))
    assert _detail(response) == "Ya existe un vehículo con la placa 2345-ABC"

    response = await client.post(VEHICLES_URL, json=_vehicle_payload(plate_number="AB 12"))
    assert _detail(response) == "El número de placa solo puede contener letras, números y guiones"

    response = await client.post(VEHICLES_URL, json=_vehicle_payload(base_warehouse_id=999))
    assert _detail(response) == "El almacén base no existe"

    response = await client.post(VEHICLES_URL, json=_vehicle_payload(base_warehouse_id=inactive.id))
    assert _detail(response) == "El almacén base está inactivo"

    response = await client.post(
        VEHICLES_URL, json=_vehicle_payload(insurance_expiry_date=(date.today() - timedelta(days=1)).isoformat())
    )
    assert _detail(response) == "La fecha de vencimiento del seguro debe ser futura"
    print("test_create_vehicle_validation passed.")


@pytest.mark.asyncio
async def test_create_vehicle_with_driver(client: AsyncClient, driver_factory: Callable):
    print("\n--- Running test_create_vehicle_with_driver ---")
    driver = await driver_factory()

    response = await client.post(VEHICLES_URL, json=_vehicle_payload(assigned_driver_id=driver.id))
    assert response.status_code == 201
    vehicle_id = response.json()["id"]
    assert response.json()["assigned_driver_id"] == driver.id

    response = await client.get(f"{DRIVERS_URL}/{driver.id}")
    assert response.json()["current_vehicle_id"] == vehicle_id

    response = await client.post(
        VEHICLES_URL, json=_vehicle_payload(plate_number="9999-QQQ", assigned_driver_id=driver.id)
    )
    assert response.status_code == 400
    assert _detail(response) == "El conductor ya está asignado a otro vehículo"
    print("test_create_vehicle_with_driver passed.")


@pytest.mark.asyncio
async def test_vehicles_by_capacity(client: AsyncClient, vehicle_factory: Callable):
    print("\n--- Running test_vehicles_by_capacity ---")
    light = await vehicle_factory(plate_number="1111-AAA", current_weight_kg=800.0)
    roomy = await vehicle_factory(plate_number="2222-BBB", max_weight_capacity_kg=3000.0, type=flt_models.VehicleType.VAN)
    await vehicle_factory(plate_number="3333-CCC", max_weight_capacity_kg=5000.0, status=flt_models.VehicleStatus.UNDER_MAINTENANCE)

    response = await client.get(f"{VEHICLES_URL}/by-capacity", params={"required_weight": 500, "required_volume": 2})
    assert [item["id"] for item in response.json()] == [roomy.id]

    response = await client.get(f"{VEHICLES_URL}/by-capacity")
    assert [item["id"] for item in response.json()] == [roomy.id, light.id]

    response = await client.get(f"{VEHICLES_URL}/by-capacity", params={"required_weight": -1})
    assert response.status_code == 400
    assert _detail(response) == "El peso requerido no puede ser negativo"
    print("test_vehicles_by_capacity passed.")


@pytest.mark.asyncio
async def test_update_current_load(client: AsyncClient, vehicle_factory: Callable):
    vehicle = await vehicle_factory()

    response = await client.patch(
        f"{VEHICLES_URL}/{vehicle.id}/current-load", json={"current_weight_kg": 1500, "current_volume_m3": 1}
    )
    assert response.status_code == 400
    assert _detail(response) == "La carga excede la capacidad máxima de peso del vehículo (1000 kg)"

    response = await client.patch(
        f"{VEHICLES_URL}/{vehicle.id}/current-load", json={"current_weight_kg": -5, "current_volume_m3": 1}
    )
    assert _detail(response) == "El peso actual no puede ser negativo"

    response = await client.patch(
        f"{VEHICLES_URL}/{vehicle.id}/current-load", json={"current_weight_kg": 250, "current_volume_m3": 2.5}
    )
    assert response.status_code == 200
    assert response.json()["current_weight_kg"] == 250
    assert response.json()["current_volume_m3"] == 2.5


@pytest.mark.asyncio
async def test_vehicle_statistics(client: AsyncClient, vehicle_factory: Callable):
    print("\n--- Running test_vehicle_statistics ---")
    vehicle = await vehicle_factory(
        current_weight_kg=250.0,
        current_volume_m3=1.0,
        current_mileage=62000,
        last_maintenance_mileage=50000,
        last_maintenance_date=date.today() - timedelta(days=90),
    )

    response = await client.get(f"{VEHICLES_URL}/{vehicle.id}/statistics")
    print(f"Response JSON: {response.json()}")
    stats = response.json()
    assert stats["weight_occupancy_percentage"] == 25.0
    assert stats["volume_occupancy_percentage"] == 20.0
    assert stats["available_weight_kg"] == 750.0
    assert stats["km_since_last_maintenance"] == 12000
    assert stats["days_since_last_maintenance"] == 90
    assert stats["days_until_next_maintenance"] is None
    assert stats["requires_maintenance"] is True

    response = await client.get(VEHICLES_URL, params={"requires_maintenance": True})
    assert [item["id"] for item in response.json()["data"]] == [vehicle.id]
    print("test_vehicle_statistics passed.")


@pytest.mark.asyncio
async def test_in_transit_requires_driver(client: AsyncClient, vehicle_factory: Callable):
    vehicle = await vehicle_factory()

    response = await client.put(f"{VEHICLES_URL}/{vehicle.id}", json={"status": "InTransit"})
    assert response.status_code == 400
    assert _detail(response) == "Un vehículo 'En Tránsito' debe tener un conductor asignado"


# =============================================================================
# 3. 운전자 ↔ 차량 배정 테스트
# =============================================================================
@pytest.mark.asyncio
async def test_assignment_is_symmetric(client: AsyncClient, driver_factory: Callable, vehicle_factory: Callable):
    print("\n--- Running test_assignment_is_symmetric ---")
    driver = await driver_factory(license_number="LIC-1", identity_document="1001")
    other_driver = await driver_factory(license_number="LIC-2", identity_document="1002")
    vehicle = await vehicle_factory(plate_number="1111-AAA")
    other_vehicle = await vehicle_factory(plate_number="2222-BBB")

    response = await client.post(f"{DRIVERS_URL}/{driver.id}/assign-vehicle/{vehicle.id}")
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 200
    assert response.json()["current_vehicle_id"] == vehicle.id
    response = await client.get(f"{VEHICLES_URL}/{vehicle.id}")
    assert response.json()["assigned_driver_id"] == driver.id

    response = await client.post(f"{DRIVERS_URL}/{driver.id}/assign-vehicle/{other_vehicle.id}")
    assert response.status_code == 400
    assert _detail(response) == "El conductor ya tiene un vehículo asignado"

    response = await client.post(f"{VEHICLES_URL}/{vehicle.id}/assign-driver/{other_driver.id}")
    assert response.status_code == 400
    assert _detail(response) == "El vehículo ya tiene un conductor asignado"

    response = await client.delete(f"{DRIVERS_URL}/{driver.id}")
    assert response.status_code == 400
    response = await client.delete(f"{VEHICLES_URL}/{vehicle.id}")
    assert response.status_code == 400

    response = await client.post(f"{VEHICLES_URL}/{vehicle.id}/unassign-driver")
    assert response.status_code == 200
    assert response.json()["assigned_driver_id"] is None
    response = await client.get(f"{DRIVERS_URL}/{driver.id}")
    assert response.json()["current_vehicle_id"] is None

    response = await client.post(f"{DRIVERS_URL}/{driver.id}/unassign-vehicle")
    assert response.status_code == 400
    assert _detail(response) == "El conductor no tiene un vehículo asignado"

    response = await client.delete(f"{DRIVERS_URL}/{driver.id}")
    assert response.status_code == 204
    print("test_assignment_is_symmetric passed.")


@pytest.mark.asyncio
async def test_assignment_preconditions(client: AsyncClient, driver_factory: Callable, vehicle_factory: Callable):
    today = date.today()
    expired = await driver_factory(
        license_number="LIC-1", identity_document="1001", license_expiry_date=today - timedelta(days=1)
    )
    resting = await driver_factory(license_number="LIC-2", identity_document="1002", status=flt_models.DriverStatus.ON_LEAVE)
    ready = await driver_factory(license_number="LIC-3", identity_document="1003")
    vehicle = await vehicle_factory(plate_number="1111-AAA")
    broken = await vehicle_factory(plate_number="2222-BBB", status=flt_models.VehicleStatus.UNDER_MAINTENANCE)

    response = await client.post(f"{DRIVERS_URL}/{expired.id}/assign-vehicle/{vehicle.id}")
    assert _detail(response) == "La licencia del conductor está vencida"

    response = await client.post(f"{DRIVERS_URL}/{resting.id}/assign-vehicle/{vehicle.id}")
    assert _detail(response) == "El conductor no está disponible"

    response = await client.post(f"{VEHICLES_URL}/{broken.id}/assign-driver/{ready.id}")
    assert _detail(response) == "El vehículo no está disponible"

    response = await client.post(f"{VEHICLES_URL}/{vehicle.id}/assign-driver/999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unassign_blocked_while_in_transit(
    client: AsyncClient, driver_factory: Callable, vehicle_factory: Callable
):
    print("\n--- Running test_unassign_blocked_while_in_transit ---")
    driver = await driver_factory()
    vehicle = await vehicle_factory()
    await client.post(f"{VEHICLES_URL}/{vehicle.id}/assign-driver/{driver.id}")

    response = await client.put(f"{VEHICLES_URL}/{vehicle.id}", json={"status": "InTransit"})
    assert response.status_code == 200
    assert response.json()["status"] == "InTransit"

    response = await client.post(f"{DRIVERS_URL}/{driver.id}/unassign-vehicle")
    assert response.status_code == 400
    assert _detail(response) == "No se puede remover la asignación de un vehículo en tránsito"

    response = await client.put(f"{DRIVERS_URL}/{driver.id}", json={"is_active": False})
    assert response.status_code == 400

    response = await client.get(f"{VEHICLES_URL}/{vehicle.id}")
    assert response.json()["assigned_driver_id"] == driver.id
    print("test_unassign_blocked_while_in_transit passed.")
