"""Promo code lookup.

The engine only depends on ``PromoCodeLookup``; any object with a
``get(code)`` method (an in-memory table, a database-backed repository)
can be injected.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Optional, Protocol

from pricing_service.core.enums import PromoKind
from pricing_service.schemas.promo import PromoCode
from pricing_service.services.money import ZERO, to_decimal
from pricing_service.services.rates import RateTable

HUNDRED = Decimal("100")


class PromoCodeLookup(Protocol):
    def get(self, code: str) -> Optional[PromoCode]: ...


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class InMemoryPromoTable:
    """Read-only promo table keyed by normalised code"""

    def __init__(self, codes: Iterable[PromoCode]):
        self._codes = MappingProxyType({normalize_code(p.code): p for p in codes})

    def get(self, code: str) -> Optional[PromoCode]:
        return self._codes.get(normalize_code(code))

    def __contains__(self, code: str) -> bool:
        return normalize_code(code) in self._codes

    def __len__(self) -> int:
        return len(self._codes)


@dataclass(frozen=True)
class PromoCheck:
    code: str
    valid: bool
    reason: Optional[str] = None
    promo: Optional[PromoCode] = None


def check_promo_code(
    lookup: PromoCodeLookup,
    code: str,
    *,
    on_date: date,
    is_first_time_customer: bool,
) -> PromoCheck:
    normalized = normalize_code(code)
    promo = lookup.get(normalized) if normalized else None

    if promo is None:
        return PromoCheck(normalized, False, "Invalid promo code")
    if promo.valid_until is not None and on_date > promo.valid_until:
        return PromoCheck(normalized, False, "Promo code has expired", promo)
    if promo.usage_limit is not None and promo.used_count >= promo.usage_limit:
        return PromoCheck(normalized, False, "Promo code usage limit reached", promo)
    if promo.first_time_only and not is_first_time_customer:
        return PromoCheck(normalized, False, "This code is for first-time customers only", promo)

    return PromoCheck(normalized, True, None, promo)


def promo_discount(promo: PromoCode, order_value: Decimal, rates: RateTable) -> Decimal:
    value = to_decimal(promo.value)
    if promo.kind == PromoKind.PERCENTAGE:
        discount = order_value * value / HUNDRED
    else:
        # fixed and free_service codes are both a flat amount off
        discount = value

    if promo.max_discount is not None:
        discount = min(discount, to_decimal(promo.max_discount))
    discount = min(discount, rates.max_promo_discount)
    discount = min(discount, order_value * rates.max_promo_discount_rate)
    return max(discount, ZERO)


DEFAULT_PROMO_CODES = (
    PromoCode(
        code="FIRST20",
        kind=PromoKind.PERCENTAGE,
        value=20,
        description="20% off your first booking",
        max_discount=50.0,
        first_time_only=True,
    ),
    PromoCode(
        code="SAVE15",
        kind=PromoKind.PERCENTAGE,
        value=15,
        description="15% off any booking",
        max_discount=75.0,
    ),
    PromoCode(
        code="FREEPACKING",
        kind=PromoKind.FREE_SERVICE,
        value=25.0,
        description="Free packing materials",
    ),
    PromoCode(
        code="STUDENT10",
        kind=PromoKind.PERCENTAGE,
        value=10,
        description="Student discount",
        max_discount=30.0,
    ),
)

DEFAULT_PROMO_TABLE = InMemoryPromoTable(DEFAULT_PROMO_CODES)
