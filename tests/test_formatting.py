"""
Tests for the Portuguese presentation helpers.
"""
from datetime import date, datetime, timedelta
from decimal import Decimal

from oficina.formatting import (
    format_currency,
    format_date,
    get_initials,
    status_label,
    time_ago,
    truncate_text,
)
from oficina.models.service_order import ServiceOrderStatus


def test_format_currency():
    assert format_currency(Decimal("1234.56")) == "R$ 1.234,56"
    assert format_currency(0) == "R$ 0,00"
    assert format_currency(35.9) == "R$ 35,90"
    assert format_currency(Decimal("-1500")) == "-R$ 1.500,00"


def test_format_date():
    assert format_date(date(2024, 3, 5)) == "05/03/2024"
    assert format_date(datetime(2024, 3, 5, 14, 30), long=True) == "05/03/2024 14:30"


def test_truncate_text():
    assert truncate_text("Troca de óleo", 50) == "Troca de óleo"
    assert truncate_text("abcdefghij", 4) == "abcd..."
    assert truncate_text(None, 10) == ""


def test_get_initials():
    assert get_initials("João da Silva") == "JS"
    assert get_initials("maria") == "M"
    assert get_initials("") == ""


def test_time_ago():
    now = datetime(2024, 3, 5, 12, 0, 0)
    assert time_ago(now - timedelta(seconds=30), now) == "30 segundos atrás"
    assert time_ago(now - timedelta(minutes=5), now) == "5 minutos atrás"
    assert time_ago(now - timedelta(hours=3), now) == "3 horas atrás"
    assert time_ago(now - timedelta(days=2), now) == "2 dias atrás"
    assert time_ago(datetime(2023, 12, 1, 9, 0), now) == "01/12/2023"


def test_status_label():
    assert status_label(ServiceOrderStatus.IN_PROGRESS) == "Em andamento"
    assert status_label("completed") == "Concluído"
    assert status_label("unknown") == "unknown"
