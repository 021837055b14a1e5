"""
Money parsing and service-order totals.

All amounts are ``Decimal`` quantized to cents. A service order's total is the
sum of its part subtotals plus the labor cost.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional, Protocol, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


class PricedLine(Protocol):
    price: Decimal
    quantity: int


def D(value: Optional[Number]) -> Decimal:
    """Coerce to a cent-quantized ``Decimal``; ``None`` is zero."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(value: Optional[Number]) -> Optional[Decimal]:
    """
    Parse a user-entered amount.

    Accepts numbers and strings such as ``"35,90"``, ``"R$ 1.234,56"`` or
    ``"1234.56"``. Returns ``None`` for empty or unparseable input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return D(value)

    text = value.strip().replace("R$", "").replace(" ", "")
    if not text:
        return None
    if "," in text:
        # Brazilian notation: dots group thousands, comma separates cents
        text = text.replace(".", "").replace(",", ".")
    elif re.fullmatch(r"-?\d{1,3}(\.\d{3})+", text):
        text = text.replace(".", "")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return D(amount)


def line_subtotal(price: Number, quantity: int) -> Decimal:
    return D(D(price) * quantity)


def parts_total(lines: Iterable[PricedLine]) -> Decimal:
    """Sum of ``price * quantity`` over the lines; zero for no lines."""
    return sum((line_subtotal(line.price, line.quantity) for line in lines), start=ZERO)


def order_total(lines: Iterable[PricedLine], labor_cost: Optional[Number]) -> Decimal:
    """Parts total plus labor. Missing or invalid labor counts as zero."""
    labor = parse_money(labor_cost) or ZERO
    return D(parts_total(lines) + labor)
