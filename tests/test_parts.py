"""
Parts inventory: listing, low-stock alerts and stock adjustments.
"""
import pytest

from tests.conftest import API


async def test_list_sorted_by_name(client, stock):
    response = await client.get(f"{API}/parts/")
    assert response.status_code == 200
    assert [p["code"] for p in response.json()] == ["AMD-01", "BAT-60", "FO-123", "OLT-5W30"]


async def test_sort_by_quantity_descending(client, stock):
    response = await client.get(f"{API}/parts/", params={"sort": "quantity", "direction": "desc"})
    assert [p["quantity"] for p in response.json()] == [15, 8, 2, 2]


async def test_search_by_code_or_name(client, stock):
    response = await client.get(f"{API}/parts/", params={"search": "fo-1"})
    assert [p["code"] for p in response.json()] == ["FO-123"]

    response = await client.get(f"{API}/parts/", params={"search": "bateria"})
    assert [p["code"] for p in response.json()] == ["BAT-60"]


async def test_filter_by_category(client, stock):
    response = await client.get(f"{API}/parts/", params={"category": "Filtros"})
    assert [p["code"] for p in response.json()] == ["FO-123"]

    response = await client.get(f"{API}/parts/", params={"category": "Todas"})
    assert len(response.json()) == 4


async def test_summary_and_low_stock(client, stock):
    response = await client.get(f"{API}/parts/summary")
    assert response.json() == {"total_items": 27, "part_count": 4, "low_stock_count": 1}

    response = await client.get(f"{API}/parts/low-stock")
    low = response.json()
    assert [p["code"] for p in low] == ["BAT-60"]
    assert low[0]["is_low_stock"] is True


async def test_create_part_with_comma_prices(client):
    response = await client.post(f"{API}/parts/", json={
        "code": "PF-001",
        "name": "Pastilha de Freio",
        "category": "Freios",
        "purchase_price": "45,00",
        "price": "89,90",
        "quantity": 10,
        "min_quantity": 4,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["price"] == pytest.approx(89.90)
    assert data["is_low_stock"] is False


async def test_part_code_is_unique_ignoring_case(client, stock):
    response = await client.post(f"{API}/parts/", json={
        "code": "fo-123",
        "name": "Filtro de Ar",
        "category": "Filtros",
        "purchase_price": 10,
        "price": 20,
        "quantity": 1,
    })
    assert response.status_code == 400


async def test_stock_adjustment(client, stock):
    battery = stock["BAT-60"]
    response = await client.post(
        f"{API}/parts/{battery.id}/stock", json={"delta": 5, "reason": "Compra fornecedor"}
    )
    assert response.status_code == 200
    assert response.json()["quantity"] == 7
    assert response.json()["is_low_stock"] is False

    response = await client.post(f"{API}/parts/{battery.id}/stock", json={"delta": -8})
    assert response.status_code == 422

    response = await client.get(f"{API}/parts/{battery.id}")
    assert response.json()["quantity"] == 7


async def test_update_part(client, stock):
    oil = stock["OLT-5W30"]
    response = await client.put(f"{API}/parts/{oil.id}", json={"price": "39,90", "min_quantity": 20})
    assert response.status_code == 200
    data = response.json()
    assert data["price"] == pytest.approx(39.90)
    assert data["is_low_stock"] is True


async def test_delete_unused_part(client, stock):
    response = await client.delete(f"{API}/parts/{stock['AMD-01'].id}")
    assert response.status_code == 204

    response = await client.get(f"{API}/parts/{stock['AMD-01'].id}")
    assert response.status_code == 404


async def test_part_used_on_order_cannot_be_deleted(client, customer, car, stock):
    oil = stock["OLT-5W30"]
    await client.post(f"{API}/service-orders/", json={
        "client_id": customer.id,
        "vehicle_id": car.id,
        "service_type": "troca_oleo",
        "labor_cost": 50,
        "parts": [{"part_id": oil.id, "quantity": 1}],
    })

    response = await client.delete(f"{API}/parts/{oil.id}")
    assert response.status_code == 400


@pytest.mark.parametrize("field", ["code", "name", "category", "price", "quantity"])
async def test_update_part_rejects_null_required_fields(client, stock, field):
    response = await client.put(f"{API}/parts/{stock['FO-123'].id}", json={field: None})
    assert response.status_code == 422
