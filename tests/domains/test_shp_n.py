# tests/domains/test_shp_n.py

"""
'shp' 도메인 (노선/배송/소포) 관련 API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 노선: 생성/중복/수정 제한/삭제 제한/이용 순위
- 배송: 초기 상태 규칙, 'Delivered' 전이 규칙, 고객당 활성 배송 제한, 삭제 시 연관 데이터 정리
- 소포: 필드 검증, 배송 완료 후 변경 금지, 중량 소포/집계 조회
"""

from typing import Callable

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.shp import models as shp_models
from app.domains.whs import models as whs_models

ROUTES_URL = "/api/v1/shp/routes"
SHIPMENTS_URL = "/api/v1/shp/shipments"
PACKAGES_URL = "/api/v1/shp/packages"


def _shipment_payload(customer_id: int, route_id: int, tracking_number: str, **overrides) -> dict:
    payload = {
        "customer_id": customer_id,
        "route_id": route_id,
        "tracking_number": tracking_number,
        "total_cost": 250.0,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# 1. 노선 (Route) 테스트
# =============================================================================
@pytest.mark.asyncio
async def test_create_route_and_duplicate(client: AsyncClient):
    print("\n--- Running test_create_route_and_duplicate ---")
    route_data = {"origin": "La Paz", "destination": "Cochabamba", "distance_km": 380, "base_cost": 190}
    response = await client.post(ROUTES_URL, json=route_data)
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 201
    assert response.json()["is_active"] is True

    response = await client.post(ROUTES_URL, json={**route_data, "origin": "la paz", "destination": "COCHABAMBA"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"].startswith("Ya existe una ruta de")
    print("test_create_route_and_duplicate passed.")


@pytest.mark.asyncio
async def test_create_route_invalid(client: AsyncClient):
    print("\n--- Running test_create_route_invalid ---")
    response = await client.post(ROUTES_URL, json={"origin": "Sucre", "destination": "sucre", "distance_km": 10})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El origen y destino deben ser diferentes"

    response = await client.post(ROUTES_URL, json={"origin": "Sucre", "destination": "Potosí", "distance_km": 0})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "La distancia debe ser mayor a 0 km"

    response = await client.post(
        ROUTES_URL, json={"origin": "Sucre", "destination": "Potosí", "distance_km": 150, "base_cost": -1}
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El costo base no puede ser negativo"
    print("test_create_route_invalid passed.")


@pytest.mark.asyncio
async def test_route_with_shipments_cannot_change_endpoints_or_be_deleted(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    print("\n--- Running test_route_with_shipments_cannot_change_endpoints_or_be_deleted ---")
    customer = await customer_factory()
    route = await route_factory()
    await shipment_factory(customer.id, route.id, "TRK-R1")

    response = await client.put(f"{ROUTES_URL}/{route.id}", json={"destination": "Potosí"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "No se puede modificar origen/destino de una ruta con envíos asociados"

    # 거리/요금 변경은 허용
    response = await client.put(f"{ROUTES_URL}/{route.id}", json={"base_cost": 175})
    assert response.status_code == 200
    assert response.json()["base_cost"] == 175

    response = await client.delete(f"{ROUTES_URL}/{route.id}")
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "No se puede eliminar una ruta con envíos asociados"
    print("test_route_with_shipments_cannot_change_endpoints_or_be_deleted passed.")


@pytest.mark.asyncio
async def test_delete_route_without_shipments(client: AsyncClient, route_factory: Callable):
    route = await route_factory()
    response = await client.delete(f"{ROUTES_URL}/{route.id}")
    assert response.status_code == 204
    response = await client.get(f"{ROUTES_URL}/{route.id}")
    assert response.status_code == 404
    assert response.json()["errors"][0]["detail"] == f"La ruta con ID {route.id} no existe"


@pytest.mark.asyncio
async def test_active_routes_and_filters(client: AsyncClient, route_factory: Callable):
    print("\n--- Running test_active_routes_and_filters ---")
    await route_factory(origin="La Paz", destination="Oruro", distance_km=230)
    await route_factory(origin="Santa Cruz", destination="Trinidad", distance_km=550, is_active=False)

    response = await client.get(f"{ROUTES_URL}/active")
    assert response.status_code == 200
    assert [item["destination"] for item in response.json()] == ["Oruro"]

    response = await client.get(ROUTES_URL, params={"min_distance_km": 300})
    assert [item["destination"] for item in response.json()["data"]] == ["Trinidad"]
    print("test_active_routes_and_filters passed.")


@pytest.mark.asyncio
async def test_most_used_routes_ranking(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    print("\n--- Running test_most_used_routes_ranking ---")
    customer = await customer_factory()
    other = await customer_factory(name="Ana Flores", email="ana@correo.bo")
    busy = await route_factory(origin="La Paz", destination="El Alto", distance_km=20, base_cost=30)
    quiet = await route_factory(origin="Sucre", destination="Potosí", distance_km=160, base_cost=120)
    await route_factory(origin="Tarija", destination="Yacuiba", distance_km=250)

    await shipment_factory(customer.id, busy.id, "TRK-B1", total_cost=100.0)
    await shipment_factory(customer.id, busy.id, "TRK-B2", total_cost=300.0, state=shp_models.ShipmentState.DELIVERED)
    await shipment_factory(other.id, quiet.id, "TRK-Q1", total_cost=500.0)

    response = await client.get(f"{ROUTES_URL}/most-used", params={"limit": 2})
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 200
    ranking = response.json()
    assert len(ranking) == 2
    first, second = ranking
    assert first["route_id"] == busy.id
    assert first["rank"] == 1
    assert first["total_shipments"] == 2
    assert first["active_shipments"] == 1
    assert first["completed_shipments"] == 1
    assert first["total_revenue"] == pytest.approx(400.0)
    assert first["average_revenue"] == pytest.approx(200.0)
    assert first["cost_per_km"] == pytest.approx(1.5)
    assert second["route_id"] == quiet.id
    assert second["rank"] == 2
    print("test_most_used_routes_ranking passed.")


# =============================================================================
# 2. 배송 (Shipment) 테스트
# =============================================================================
@pytest.mark.asyncio
async def test_create_shipment_success(client: AsyncClient, customer_factory: Callable, route_factory: Callable):
    print("\n--- Running test_create_shipment_success ---")
    customer = await customer_factory()
    route = await route_factory()

    response = await client.post(SHIPMENTS_URL, json=_shipment_payload(customer.id, route.id, " TRK-1001 "))
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 201
    created = response.json()
    assert created["state"] == "Pending"
    assert created["tracking_number"] == "TRK-1001"
    assert created["shipping_date"] is not None
    print("test_create_shipment_success passed.")


@pytest.mark.asyncio
async def test_create_shipment_must_start_pending(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable
):
    print("\n--- Running test_create_shipment_must_start_pending ---")
    customer = await customer_factory()
    route = await route_factory()

    response = await client.post(
        SHIPMENTS_URL, json=_shipment_payload(customer.id, route.id, "TRK-2001", state="In transit")
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El estado inicial del envio debe ser 'Pending'."
    print("test_create_shipment_must_start_pending passed.")


@pytest.mark.asyncio
async def test_create_shipment_reference_checks(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    print("\n--- Running test_create_shipment_reference_checks ---")
    customer = await customer_factory()
    route = await route_factory()
    inactive = await route_factory(origin="Oruro", destination="Uyuni", is_active=False)
    await shipment_factory(customer.id, route.id, "TRK-DUP")

    response = await client.post(SHIPMENTS_URL, json=_shipment_payload(999, route.id, "TRK-X1"))
    assert response.json()["errors"][0]["detail"] == "El cliente no existe"

    response = await client.post(SHIPMENTS_URL, json=_shipment_payload(customer.id, 999, "TRK-X2"))
    assert response.json()["errors"][0]["detail"] == "La ruta asignada no existe"

    response = await client.post(SHIPMENTS_URL, json=_shipment_payload(customer.id, inactive.id, "TRK-X3"))
    assert response.json()["errors"][0]["detail"] == "No se pueden registrar envios en una ruta inactiva"

    response = await client.post(SHIPMENTS_URL, json=_shipment_payload(customer.id, route.id, "TRK-DUP"))
    assert response.json()["errors"][0]["detail"] == "El codigo de seguimiento ya existe. Debe ser unico"

    response = await client.post(SHIPMENTS_URL, json=_shipment_payload(customer.id, route.id, "TRK-X4", total_cost=0))
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El costo total debe ser mayor que 0"
    print("test_create_shipment_reference_checks passed.")


@pytest.mark.asyncio
async def test_create_shipment_active_limit(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    print("\n--- Running test_create_shipment_active_limit ---")
    customer = await customer_factory()
    route = await route_factory()
    await shipment_factory(customer.id, route.id, "TRK-A1")
    await shipment_factory(customer.id, route.id, "TRK-A2", state=shp_models.ShipmentState.IN_TRANSIT)
    await shipment_factory(customer.id, route.id, "TRK-A3")
    # 배송 완료 건은 활성 배송 수에 포함되지 않습니다.
    await shipment_factory(customer.id, route.id, "TRK-A0", state=shp_models.ShipmentState.DELIVERED)

    response = await client.post(SHIPMENTS_URL, json=_shipment_payload(customer.id, route.id, "TRK-A4"))
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El cliente ya tiene 3 envíos activos. No puede registrar mas"
    print("test_create_shipment_active_limit passed.")


@pytest.mark.asyncio
async def test_reactivating_delivered_shipment_respects_active_limit(
    client: AsyncClient,
    db_session: AsyncSession,
    customer_factory: Callable,
    route_factory: Callable,
    shipment_factory: Callable,
):
    print("\n--- Running test_reactivating_delivered_shipment_respects_active_limit ---")
    customer = await customer_factory()
    route = await route_factory()
    for number in ("TRK-R1", "TRK-R2", "TRK-R3"):
        await shipment_factory(customer.id, route.id, number)
    delivered = await shipment_factory(customer.id, route.id, "TRK-R0", state=shp_models.ShipmentState.DELIVERED)

    for state in ("Pending", "In transit"):
        response = await client.put(f"{SHIPMENTS_URL}/{delivered.id}", json={"state": state})
        assert response.status_code == 400
        assert response.json()["errors"][0]["detail"] == "El cliente ya tiene 3 envíos activos. No puede registrar mas"

    await db_session.refresh(delivered)
    assert delivered.state == shp_models.ShipmentState.DELIVERED

    # 활성 배송은 상태를 바꿔도 이미 집계되어 있으므로 허용됩니다.
    response = await client.get(SHIPMENTS_URL, params={"tracking_number": "TRK-R1"})
    active_id = response.json()["data"][0]["id"]
    response = await client.put(f"{SHIPMENTS_URL}/{active_id}", json={"state": "In transit"})
    assert response.status_code == 200
    print("test_reactivating_delivered_shipment_respects_active_limit passed.")


@pytest.mark.asyncio
async def test_reactivating_delivered_shipment_below_limit(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    customer = await customer_factory()
    route = await route_factory()
    await shipment_factory(customer.id, route.id, "TRK-R5")
    delivered = await shipment_factory(customer.id, route.id, "TRK-R6", state=shp_models.ShipmentState.DELIVERED)

    response = await client.put(f"{SHIPMENTS_URL}/{delivered.id}", json={"state": "Pending"})
    assert response.status_code == 200
    assert response.json()["state"] == "Pending"


@pytest.mark.asyncio
async def test_shipment_delivered_requires_in_transit(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    print("\n--- Running test_shipment_delivered_requires_in_transit ---")
    customer = await customer_factory()
    route = await route_factory()
    shipment = await shipment_factory(customer.id, route.id, "TRK-S1")

    response = await client.put(f"{SHIPMENTS_URL}/{shipment.id}", json={"state": "Delivered"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El envio no puede pasar a 'Delivered' sin haber estado 'In transit'"

    response = await client.put(f"{SHIPMENTS_URL}/{shipment.id}", json={"state": "In transit"})
    assert response.status_code == 200
    assert response.json()["state"] == "In transit"

    response = await client.put(f"{SHIPMENTS_URL}/{shipment.id}", json={"state": "Delivered"})
    assert response.status_code == 200
    assert response.json()["state"] == "Delivered"

    # Delivered → Delivered 도 거부됩니다.
    response = await client.put(f"{SHIPMENTS_URL}/{shipment.id}", json={"state": "Delivered"})
    assert response.status_code == 400
    print("test_shipment_delivered_requires_in_transit passed.")


@pytest.mark.asyncio
async def test_update_shipment_tracking_conflict(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    customer = await customer_factory()
    route = await route_factory()
    first = await shipment_factory(customer.id, route.id, "TRK-U1")
    await shipment_factory(customer.id, route.id, "TRK-U2")

    response = await client.put(f"{SHIPMENTS_URL}/{first.id}", json={"tracking_number": "TRK-U2"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El codigo de seguimiento ya existe. Debe ser unico"

    response = await client.put(f"{SHIPMENTS_URL}/{first.id}", json={"total_cost": 320.5})
    assert response.status_code == 200
    assert response.json()["total_cost"] == 320.5


@pytest.mark.asyncio
async def test_delete_shipment_rules(
    client: AsyncClient,
    db_session: AsyncSession,
    customer_factory: Callable,
    route_factory: Callable,
    shipment_factory: Callable,
    warehouse_factory: Callable,
):
    print("\n--- Running test_delete_shipment_rules ---")
    customer = await customer_factory()
    route = await route_factory()
    delivered = await shipment_factory(customer.id, route.id, "TRK-D1", state=shp_models.ShipmentState.DELIVERED)
    pending = await shipment_factory(customer.id, route.id, "TRK-D2")
    warehouse = await warehouse_factory()

    response = await client.delete(f"{SHIPMENTS_URL}/{delivered.id}")
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "No se puede eliminar un envio entregado"

    # 소포와 창고 보관 기록이 있는 배송 삭제 → 창고 점유량 반환
    await client.post(PACKAGES_URL, json={"shipment_id": pending.id, "description": "Caja pequeña", "weight": 2, "price": 40})
    response = await client.post("/api/v1/whs/movements/entry", json={"shipment_id": pending.id, "warehouse_id": warehouse.id})
    assert response.status_code == 201

    response = await client.delete(f"{SHIPMENTS_URL}/{pending.id}")
    assert response.status_code == 204

    await db_session.refresh(warehouse)
    assert warehouse.current_capacity_m3 == 0
    response = await client.get(PACKAGES_URL, params={"shipment_id": pending.id})
    assert response.json()["data"] == []
    response = await client.get("/api/v1/whs/movements", params={"shipment_id": pending.id})
    assert response.json()["data"] == []
    print("test_delete_shipment_rules passed.")


@pytest.mark.asyncio
async def test_shipments_with_customer_and_route(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    customer = await customer_factory(name="Rosa Condori", email="rosa@correo.bo")
    route = await route_factory(origin="Cochabamba", destination="Sucre")
    await shipment_factory(customer.id, route.id, "TRK-J1")

    response = await client.get(f"{SHIPMENTS_URL}/customer-route")
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["customer_name"] == "Rosa Condori"
    assert rows[0]["origin"] == "Cochabamba"
    assert rows[0]["destination"] == "Sucre"
    assert rows[0]["state"] == "Pending"


@pytest.mark.asyncio
async def test_list_shipments_filters(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    customer = await customer_factory()
    route = await route_factory()
    await shipment_factory(customer.id, route.id, "TRK-F1", total_cost=100.0)
    await shipment_factory(customer.id, route.id, "TRK-F2", total_cost=900.0, state=shp_models.ShipmentState.IN_TRANSIT)

    response = await client.get(SHIPMENTS_URL, params={"state": "In transit"})
    assert [item["tracking_number"] for item in response.json()["data"]] == ["TRK-F2"]

    response = await client.get(SHIPMENTS_URL, params={"max_total_cost": 500})
    assert [item["tracking_number"] for item in response.json()["data"]] == ["TRK-F1"]


# =============================================================================
# 3. 소포 (Package) 테스트
# =============================================================================
@pytest.mark.asyncio
async def test_package_lifecycle_and_summary(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    print("\n--- Running test_package_lifecycle_and_summary ---")
    customer = await customer_factory()
    route = await route_factory()
    shipment = await shipment_factory(customer.id, route.id, "TRK-P1")

    light = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Documentos", "weight": 10, "price": 20})
    heavy = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Motor eléctrico", "weight": 70, "price": 180})
    assert light.status_code == 201
    assert heavy.status_code == 201

    response = await client.get(f"{PACKAGES_URL}/shipment/{shipment.id}/summary")
    print(f"Response JSON: {response.json()}")
    summary = response.json()
    assert summary["total_packages"] == 2
    assert summary["total_weight"] == pytest.approx(80.0)
    assert summary["total_value"] == pytest.approx(200.0)
    assert summary["avg_weight"] == pytest.approx(40.0)
    assert summary["avg_value"] == pytest.approx(100.0)

    response = await client.get(f"{PACKAGES_URL}/heavy")
    assert [item["id"] for item in response.json()] == [heavy.json()["id"]]

    response = await client.put(f"{PACKAGES_URL}/{light.json()['id']}", json={"weight": 12})
    assert response.status_code == 200
    assert response.json()["weight"] == 12
    print("test_package_lifecycle_and_summary passed.")


@pytest.mark.asyncio
async def test_read_package_details(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    print("\n--- Running test_read_package_details ---")
    customer = await customer_factory(name="Ana Quispe", email="ana@example.com")
    route = await route_factory("La Paz", "Cochabamba")
    shipment = await shipment_factory(customer.id, route.id, "TRK-D1", state=shp_models.ShipmentState.IN_TRANSIT)
    orphan = await shipment_factory(None, route.id, "TRK-D2")

    box = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Libros", "weight": 8, "price": 50})
    await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Zapatos", "weight": 3, "price": 90})
    await client.post(PACKAGES_URL, json={"shipment_id": orphan.id, "description": "Ropa", "weight": 5, "price": 40})

    response = await client.get(f"{PACKAGES_URL}/details")
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total_count"] == 3
    first = body["data"][0]
    assert first["package_id"] == box.json()["id"]
    assert first["description"] == "Libros"
    assert first["shipment_id"] == shipment.id
    assert first["tracking_number"] == "TRK-D1"
    assert first["shipment_state"] == "In transit"
    assert first["customer_id"] == customer.id
    assert first["customer_name"] == "Ana Quispe"
    assert first["route_id"] == route.id
    assert first["route_origin"] == "La Paz"
    assert first["route_destination"] == "Cochabamba"

    # 고객이 없는 배송의 소포도 포함됩니다.
    assert body["data"][2]["customer_id"] is None
    assert body["data"][2]["customer_name"] is None

    response = await client.get(f"{PACKAGES_URL}/details", params={"min_price": 60, "page_size": 1})
    body = response.json()
    assert [item["description"] for item in body["data"]] == ["Zapatos"]
    assert body["pagination"]["total_count"] == 1
    print("test_read_package_details passed.")


@pytest.mark.asyncio
async def test_package_validation(
    client: AsyncClient, customer_factory: Callable, route_factory: Callable, shipment_factory: Callable
):
    customer = await customer_factory()
    route = await route_factory()
    shipment = await shipment_factory(customer.id, route.id, "TRK-P2")

    response = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "ab", "weight": 1, "price": 1})
    assert response.json()["errors"][0]["detail"] == "La descripcion es invalida"

    response = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Caja", "weight": 101, "price": 1})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"].startswith("Peso invalido")

    response = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Caja", "weight": 1, "price": 0})
    assert response.json()["errors"][0]["detail"] == "El precio debe ser mayor que 0"

    response = await client.post(PACKAGES_URL, json={"shipment_id": 999, "description": "Caja", "weight": 1, "price": 1})
    assert response.json()["errors"][0]["detail"] == "El envio asociado no existe"


@pytest.mark.asyncio
async def test_package_of_delivered_shipment_is_frozen(
    client: AsyncClient,
    db_session: AsyncSession,
    customer_factory: Callable,
    route_factory: Callable,
    shipment_factory: Callable,
):
    print("\n--- Running test_package_of_delivered_shipment_is_frozen ---")
    customer = await customer_factory()
    route = await route_factory()
    shipment = await shipment_factory(customer.id, route.id, "TRK-P3", state=shp_models.ShipmentState.DELIVERED)
    package = shp_models.Package(shipment_id=shipment.id, description="Caja sellada", weight=5, price=50)
    db_session.add(package)
    await db_session.commit()
    await db_session.refresh(package)

    response = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Otra caja", "weight": 1, "price": 1})
    assert response.json()["errors"][0]["detail"] == "No se pueden agregar paquetes a un envio entregado"

    response = await client.put(f"{PACKAGES_URL}/{package.id}", json={"price": 60})
    assert response.json()["errors"][0]["detail"] == "No se puede modificar un paquete de un envio entregado"

    response = await client.delete(f"{PACKAGES_URL}/{package.id}")
    assert response.json()["errors"][0]["detail"] == "No se puede eliminar un paquete de un envio entregado"
    print("test_package_of_delivered_shipment_is_frozen passed.")


@pytest.mark.asyncio
async def test_package_limit_per_shipment(
    client: AsyncClient,
    db_session: AsyncSession,
    customer_factory: Callable,
    route_factory: Callable,
    shipment_factory: Callable,
):
    customer = await customer_factory()
    route = await route_factory()
    shipment = await shipment_factory(customer.id, route.id, "TRK-P4")
    for i in range(50):
        db_session.add(shp_models.Package(shipment_id=shipment.id, description=f"Caja {i}", weight=1, price=1))
    await db_session.commit()

    response = await client.post(PACKAGES_URL, json={"shipment_id": shipment.id, "description": "Caja 51", "weight": 1, "price": 1})
    assert response.status_code == 400
    assert response.json()["errors"][0]["detail"] == "El envio alcanzó el numero máximo de paquetes permitidos"


def test_shipment_state_values():
    """상태 값은 API에 표시되는 문자열 그대로 저장됩니다."""
    assert shp_models.ShipmentState.IN_TRANSIT.value == "In transit"
    assert whs_models.MovementStatus.IN_STORAGE.value == "InStorage"
