"""Currency helpers.

Amounts travel through the engine as ``Decimal`` pounds so the additive
surcharge/discount chain never drifts. Rounding to pence happens once, at
the VAT step.
"""
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0")
PENNY = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


def round_pence(amount: Decimal) -> Decimal:
    return amount.quantize(PENNY, rounding=ROUND_HALF_UP)


def to_pounds(amount: Decimal) -> float:
    return float(amount)


def to_pence(amount) -> int:
    """Integer minor units for callers that settle in pence (checkout, payment)"""
    return int(round_pence(to_decimal(amount)) * 100)
