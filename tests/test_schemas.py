"""
Validation rules enforced by the request schemas.
"""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from oficina.models.financial import TransactionType
from oficina.schemas import (
    AppointmentCreate,
    AppointmentUpdate,
    ClientCreate,
    ClientUpdate,
    PartCreate,
    ServiceCreate,
    ServiceOrderCreate,
    ServiceOrderDraft,
    ShopProfileUpdate,
    Transaction,
    TransactionCreate,
    UserCreate,
    VehicleCreate,
)
from oficina.schemas.appointment import ConvertAppointment


def test_client_name_needs_three_characters():
    with pytest.raises(ValidationError):
        ClientCreate(name="Jo")


def test_client_blank_optional_fields_become_none():
    client = ClientCreate(name="  Maria Santos ", phone="", email="")
    assert client.name == "Maria Santos"
    assert client.phone is None
    assert client.email is None


def test_vehicle_plate_is_upper_cased():
    vehicle = VehicleCreate(client_id=1, model="Civic", plate="abc-1234", year=2020)
    assert vehicle.plate == "ABC-1234"
    assert vehicle.year == "2020"


@pytest.mark.parametrize("year", ["20", "year", "20201"])
def test_vehicle_year_must_have_four_digits(year):
    with pytest.raises(ValidationError):
        VehicleCreate(client_id=1, model="Civic", plate="ABC1234", year=year)


def test_appointment_must_use_an_agenda_slot():
    with pytest.raises(ValidationError):
        AppointmentCreate(
            client_id=1, vehicle_id=1, service_type="Motor",
            scheduled_at=datetime(2024, 3, 5, 12, 0),
        )


def test_appointment_drops_timezone():
    appointment = AppointmentCreate(
        client_id=1, vehicle_id=1, service_type="Troca de Óleo",
        scheduled_at=datetime(2024, 3, 5, 9, 30, tzinfo=timezone.utc),
    )
    assert appointment.scheduled_at == datetime(2024, 3, 5, 9, 30)


def test_appointment_service_must_be_known():
    with pytest.raises(ValidationError):
        AppointmentCreate(
            client_id=1, vehicle_id=1, service_type="Pintura",
            scheduled_at=datetime(2024, 3, 5, 9, 30),
        )


def test_part_accepts_brazilian_prices():
    part = PartCreate(
        code="FO-123", name="Filtro de Óleo", category="Filtros",
        purchase_price="18,50", price="R$ 25,50", quantity=8, min_quantity=3,
    )
    assert part.purchase_price == Decimal("18.50")
    assert part.price == Decimal("25.50")


def test_part_category_must_be_known():
    with pytest.raises(ValidationError):
        PartCreate(code="X-1", name="Peça", category="Pintura", purchase_price=1, price=2, quantity=1)


def test_part_price_cannot_be_negative():
    with pytest.raises(ValidationError):
        PartCreate(code="X-1", name="Peça", category="Outros", purchase_price=1, price=-2, quantity=1)


def test_service_order_needs_client_reference_or_inline_client():
    with pytest.raises(ValidationError):
        ServiceOrderCreate(vehicle_id=1, service_type="revisao", labor_cost=100)
    with pytest.raises(ValidationError):
        ServiceOrderCreate(
            client_id=1, client={"name": "Ana Paula", "phone": "11999998888"},
            vehicle_id=1, service_type="revisao", labor_cost=100,
        )


def test_service_order_rejects_zero_quantity():
    with pytest.raises(ValidationError):
        ServiceOrderCreate(
            client_id=1, vehicle_id=1, service_type="revisao", labor_cost=100,
            parts=[{"part_id": 1, "quantity": 0}],
        )


def test_service_order_labor_is_required():
    with pytest.raises(ValidationError):
        ServiceOrderCreate(client_id=1, vehicle_id=1, service_type="revisao", labor_cost="")


def test_transaction_category_must_match_type():
    with pytest.raises(ValidationError):
        TransactionCreate(
            type=TransactionType.EXPENSE, category="Serviço", description="Compra",
            amount=10, date=date(2024, 3, 5),
        )


def test_transaction_amount_must_be_positive():
    with pytest.raises(ValidationError):
        TransactionCreate(
            type=TransactionType.EXPENSE, category="Fornecedor", description="Compra de peças",
            amount="0,00", date=date(2024, 3, 5),
        )


def test_transaction_amount_accepts_comma():
    transaction = TransactionCreate(
        type="income", category="Venda de Peças", description="Venda balcão",
        amount="1.234,56", date=date(2024, 3, 5),
    )
    assert transaction.amount == Decimal("1234.56")


def test_user_passwords_must_match():
    with pytest.raises(ValidationError):
        UserCreate(
            username="carlos", email="carlos@oficina.com.br", name="Carlos Souza",
            password="segredo1", confirm_password="segredo2",
        )


def test_shop_state_is_two_letters():
    data = {
        "name": "Auto Center", "cnpj": "12.345.678/0001-90", "phone": "(11) 3333-4444",
        "email": "contato@autocenter.com.br", "address": "Rua das Flores, 100",
        "city": "São Paulo", "cep": "01234-567",
    }
    assert ShopProfileUpdate(**data, state="sp").state == "SP"
    with pytest.raises(ValidationError):
        ShopProfileUpdate(**data, state="SPX")


@pytest.mark.parametrize("labor", ["", "abc", None])
def test_draft_keeps_raw_labor_input(labor):
    draft = ServiceOrderDraft(labor_cost=labor)
    assert draft.labor_cost == labor


def test_blank_amounts_become_none():
    assert ConvertAppointment(labor_cost="").labor_cost is None
    assert ServiceCreate(name="Diagnóstico", default_price=" ").default_price is None


def test_update_rejects_explicit_null_but_allows_omission():
    assert ClientUpdate(address="Rua A, 1").name is None
    with pytest.raises(ValidationError):
        ClientUpdate(name=None)


def test_appointment_update_only_cancels():
    assert AppointmentUpdate(status="cancelled").status.value == "cancelled"
    for status in ("scheduled", "converted", None):
        with pytest.raises(ValidationError):
            AppointmentUpdate(status=status)


def test_transaction_response_accepts_zero_amount():
    transaction = Transaction(
        id=1, type="income", category="Serviço", description="OS #1 - Revisão",
        amount=0, date=date(2024, 3, 5), created_at=datetime(2024, 3, 5, tzinfo=timezone.utc),
    )
    assert transaction.amount == Decimal("0.00")
