"""
Presentation helpers for Brazilian Portuguese output.
"""
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from oficina.models.service_order import ServiceOrderStatus

STATUS_LABELS = {
    ServiceOrderStatus.OPEN: "Aberta",
    ServiceOrderStatus.IN_PROGRESS: "Em andamento",
    ServiceOrderStatus.COMPLETED: "Concluído",
    ServiceOrderStatus.CANCELLED: "Cancelado",
}


def format_currency(value: Union[Decimal, float, int]) -> str:
    """Format a value as Brazilian reais, e.g. ``R$ 1.234,56``."""
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    # Format with US separators then swap them
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def format_date(value: Union[date, datetime], long: bool = False) -> str:
    if long and isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M")
    return value.strftime("%d/%m/%Y")


def truncate_text(text: Optional[str], max_length: int) -> str:
    if not text:
        return ""
    if len(text) > max_length:
        return f"{text[:max_length]}..."
    return text


def get_initials(name: Optional[str]) -> str:
    """Initials of the first and last names, upper-cased."""
    if not name:
        return ""
    names = name.split()
    if not names:
        return ""
    if len(names) == 1:
        return names[0][0].upper()
    return (names[0][0] + names[-1][0]).upper()


def time_ago(value: datetime, now: Optional[datetime] = None) -> str:
    """Human readable elapsed time in Portuguese."""
    now = now or datetime.now(value.tzinfo)
    diff = int((now - value).total_seconds())

    if diff < 60:
        return f"{diff} segundos atrás"
    if diff < 3600:
        return f"{diff // 60} minutos atrás"
    if diff < 86400:
        return f"{diff // 3600} horas atrás"
    if diff < 2592000:
        return f"{diff // 86400} dias atrás"
    return format_date(value)


def status_label(status: Union[ServiceOrderStatus, str]) -> str:
    try:
        return STATUS_LABELS[ServiceOrderStatus(status)]
    except ValueError:
        return str(status)
