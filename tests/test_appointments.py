"""
Agenda: scheduling, day and week views, and conversion into service orders.
"""
from datetime import date, timedelta

import pytest

from oficina.routers.appointments import week_of
from tests.conftest import API

TOMORROW = date.today() + timedelta(days=1)


def appointment_payload(customer, car, slot="09:00", day=TOMORROW, service="Troca de Óleo"):
    return {
        "client_id": customer.id if customer else None,
        "vehicle_id": car.id,
        "service_type": service,
        "scheduled_at": f"{day.isoformat()}T{slot}:00",
        "description": "Cliente aguarda no local",
    }


def test_week_starts_on_sunday():
    days = week_of(date(2024, 3, 6))  # Wednesday
    assert days[0] == date(2024, 3, 3)
    assert days[-1] == date(2024, 3, 9)
    assert week_of(date(2024, 3, 3))[0] == date(2024, 3, 3)


async def test_schedule_and_list_day_in_time_order(client, customer, car):
    for slot in ("14:00", "08:30", "10:00"):
        response = await client.post(
            f"{API}/appointments/", json=appointment_payload(customer, car, slot)
        )
        assert response.status_code == 201

    response = await client.get(f"{API}/appointments/", params={"day": TOMORROW.isoformat()})
    assert response.status_code == 200
    appointments = response.json()
    assert [a["time"] for a in appointments] == ["08:30", "10:00", "14:00"]
    assert appointments[0]["client"]["name"] == "João Silva"
    assert appointments[0]["vehicle"]["plate"] == "ABC-1234"
    assert appointments[0]["status"] == "scheduled"


async def test_time_outside_slots_is_rejected(client, customer, car):
    response = await client.post(
        f"{API}/appointments/", json=appointment_payload(customer, car, "12:00")
    )
    assert response.status_code == 422


async def test_same_vehicle_same_slot_conflicts(client, customer, car):
    await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    assert response.status_code == 400


async def test_vehicle_must_belong_to_client(client, car):
    response = await client.post(
        f"{API}/clients/", json={"name": "Maria Santos", "phone": "11988887777"}
    )
    other = response.json()
    payload = {**appointment_payload(None, car), "client_id": other["id"]}
    response = await client.post(f"{API}/appointments/", json=payload)
    assert response.status_code == 422


async def test_week_counts(client, customer, car):
    await client.post(f"{API}/appointments/", json=appointment_payload(customer, car, "09:00"))
    await client.post(f"{API}/appointments/", json=appointment_payload(customer, car, "15:30"))

    response = await client.get(f"{API}/appointments/week", params={"day": TOMORROW.isoformat()})
    assert response.status_code == 200
    week = response.json()
    assert len(week["days"]) == 7
    counts = {d["day"]: d["count"] for d in week["days"]}
    assert counts[TOMORROW.isoformat()] == 2
    assert sum(counts.values()) == 2
    assert [d["day"] for d in week["days"] if d["has_appointments"]] == [TOMORROW.isoformat()]


async def test_options(client):
    response = await client.get(f"{API}/appointments/options")
    data = response.json()
    assert data["time_slots"][0] == "08:00"
    assert "12:00" not in data["time_slots"]
    assert "Troca de Óleo" in data["service_types"]


async def test_reschedule_and_cancel(client, customer, car):
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]

    response = await client.put(
        f"{API}/appointments/{appointment_id}",
        json={"scheduled_at": f"{TOMORROW.isoformat()}T16:30:00"},
    )
    assert response.status_code == 200
    assert response.json()["time"] == "16:30"

    response = await client.put(f"{API}/appointments/{appointment_id}", json={"status": "cancelled"})
    assert response.json()["status"] == "cancelled"

    response = await client.get(f"{API}/appointments/week", params={"day": TOMORROW.isoformat()})
    assert all(d["count"] == 0 for d in response.json()["days"])


async def test_delete_appointment(client, customer, car):
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]

    response = await client.delete(f"{API}/appointments/{appointment_id}")
    assert response.status_code == 204

    response = await client.get(f"{API}/appointments/{appointment_id}")
    assert response.status_code == 404


async def test_convert_uses_catalog_price(client, customer, car):
    await client.post(f"{API}/services/", json={"name": "Troca de Óleo", "default_price": "80,00"})
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]

    response = await client.post(f"{API}/appointments/{appointment_id}/service-order")
    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "open"
    assert order["service_type"] == "Troca de Óleo"
    assert order["labor_cost"] == pytest.approx(80.0)
    assert order["total_cost"] == pytest.approx(80.0)
    assert order["vehicle"]["id"] == car.id

    response = await client.get(f"{API}/appointments/{appointment_id}")
    assert response.json()["status"] == "converted"

    response = await client.post(f"{API}/appointments/{appointment_id}/service-order")
    assert response.status_code == 422


async def test_convert_with_explicit_labor(client, customer, car):
    response = await client.post(
        f"{API}/appointments/", json=appointment_payload(customer, car, service="Motor")
    )
    appointment_id = response.json()["id"]

    response = await client.post(
        f"{API}/appointments/{appointment_id}/service-order", json={"labor_cost": "450,00"}
    )
    assert response.status_code == 201
    assert response.json()["total_cost"] == pytest.approx(450.0)


async def test_convert_with_blank_labor_uses_catalog_price(client, customer, car):
    await client.post(f"{API}/services/", json={"name": "Troca de Óleo", "default_price": "80,00"})
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]

    response = await client.post(
        f"{API}/appointments/{appointment_id}/service-order", json={"labor_cost": ""}
    )
    assert response.status_code == 201
    assert response.json()["labor_cost"] == pytest.approx(80.0)


@pytest.mark.parametrize("target", ["scheduled", "converted"])
async def test_update_can_only_cancel(client, customer, car, target):
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]

    response = await client.put(f"{API}/appointments/{appointment_id}", json={"status": target})
    assert response.status_code == 422

    response = await client.get(f"{API}/appointments/{appointment_id}")
    assert response.json()["status"] == "scheduled"


async def test_converted_appointment_cannot_be_reopened_or_edited(client, customer, car):
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]
    await client.post(f"{API}/appointments/{appointment_id}/service-order", json={"labor_cost": 100})

    response = await client.put(f"{API}/appointments/{appointment_id}", json={"status": "cancelled"})
    assert response.status_code == 422
    response = await client.put(
        f"{API}/appointments/{appointment_id}", json={"description": "Remarcado"}
    )
    assert response.status_code == 422

    response = await client.post(f"{API}/appointments/{appointment_id}/service-order")
    assert response.status_code == 422
    response = await client.get(f"{API}/service-orders/")
    assert len(response.json()) == 1


async def test_cancelled_appointment_cannot_be_converted(client, customer, car):
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]
    await client.put(f"{API}/appointments/{appointment_id}", json={"status": "cancelled"})

    response = await client.post(f"{API}/appointments/{appointment_id}/service-order")
    assert response.status_code == 422


@pytest.mark.parametrize("field", ["client_id", "vehicle_id", "scheduled_at", "status"])
async def test_update_rejects_null_required_fields(client, customer, car, field):
    response = await client.post(f"{API}/appointments/", json=appointment_payload(customer, car))
    appointment_id = response.json()["id"]

    response = await client.put(f"{API}/appointments/{appointment_id}", json={field: None})
    assert response.status_code == 422
