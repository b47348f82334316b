"""Rule plumbing shared by the surcharge and discount lists.

A rule is a plain function ``(ctx, running_subtotal) -> Optional[Charge]``.
Rules run in list order, each against the same running subtotal, so none
of them sees another's output.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, Sequence, Tuple

from pricing_service.schemas.quote import QuoteRequest
from pricing_service.services.components import Charge, Load
from pricing_service.services.money import ZERO
from pricing_service.services.promo import PromoCodeLookup
from pricing_service.services.rates import RateTable


@dataclass(frozen=True)
class RuleContext:
    request: QuoteRequest
    load: Load
    rates: RateTable
    promo_codes: PromoCodeLookup


Rule = Callable[[RuleContext, Decimal], Optional[Charge]]


def charge(name: str, amount: Decimal) -> Optional[Charge]:
    if amount <= ZERO:
        return None
    return Charge(name, amount)


def apply_rules(rules: Sequence[Rule], ctx: RuleContext, running_subtotal: Decimal) -> Tuple[Charge, ...]:
    charges = (rule(ctx, running_subtotal) for rule in rules)
    return tuple(c for c in charges if c is not None)


def total_of(charges: Sequence[Charge]) -> Decimal:
    return sum((c.amount for c in charges), ZERO)
