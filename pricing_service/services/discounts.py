from decimal import Decimal
from typing import Optional

from pricing_service.services.components import Charge
from pricing_service.services.money import to_decimal
from pricing_service.services.promo import check_promo_code, promo_discount
from pricing_service.services.rules import RuleContext, charge

ONE = Decimal("1")


def first_time_customer(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    if not ctx.request.is_first_time_customer:
        return None
    return charge("First-Time Customer Discount", subtotal * ctx.rates.first_time_discount_rate)


def off_peak_slot(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    multiplier = to_decimal(ctx.request.time_slot.multiplier)
    if multiplier >= ONE:
        return None
    rate = min(ONE - multiplier, ctx.rates.max_off_peak_saving_rate)
    return charge("Off-Peak Slot Saving", subtotal * rate)


def promo_code(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    # An unknown, expired or exhausted code contributes nothing; it never
    # blocks the quote.
    if not ctx.request.promo_code:
        return None
    check = check_promo_code(
        ctx.promo_codes,
        ctx.request.promo_code,
        on_date=ctx.request.date,
        is_first_time_customer=ctx.request.is_first_time_customer,
    )
    if not check.valid:
        return None
    return charge(f"Promo Code {check.code}", promo_discount(check.promo, subtotal, ctx.rates))


DISCOUNT_RULES = (
    first_time_customer,
    off_peak_slot,
    promo_code,
)
