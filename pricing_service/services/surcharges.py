from decimal import Decimal
from typing import Optional

from pricing_service.core.enums import DemandLevel
from pricing_service.schemas.quote import Property
from pricing_service.services.components import Charge
from pricing_service.services.money import to_decimal
from pricing_service.services.rules import RuleContext, charge

ONE = Decimal("1")


def fragile_items(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    return charge("Fragile Items", ctx.rates.fragile_unit_fee * ctx.load.fragile_count)


def valuable_items(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    return charge("Valuable Items", ctx.rates.valuable_unit_fee * ctx.load.valuable_count)


def piano_items(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    units = sum(item.quantity for item in ctx.request.items if "piano" in item.name.lower())
    return charge("Piano", ctx.rates.piano_unit_fee * units)


def heavy_items(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    threshold = ctx.rates.heavy_item_threshold_kg
    units = sum(
        item.quantity for item in ctx.request.items if to_decimal(item.weight) > threshold
    )
    return charge("Heavy Items", ctx.rates.heavy_unit_fee * units)


def _floor_charge(label: str, prop: Property, ctx: RuleContext) -> Optional[Charge]:
    if prop.floor <= 0 or prop.has_lift:
        return None
    return charge(f"Floor Surcharge - {label}", ctx.rates.no_lift_floor_fee * prop.floor)


def pickup_floor(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    return _floor_charge("Pickup", ctx.request.pickup_property, ctx)


def dropoff_floor(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    return _floor_charge("Dropoff", ctx.request.dropoff_property, ctx)


def narrow_access(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    addresses = [ctx.request.pickup_property, ctx.request.dropoff_property]
    affected = sum(1 for prop in addresses if prop.narrow_access)
    return charge("Narrow Access", ctx.rates.narrow_access_fee * affected)


def long_carry(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    addresses = [ctx.request.pickup_property, ctx.request.dropoff_property]
    affected = sum(1 for prop in addresses if prop.long_carry)
    return charge("Long Carry", ctx.rates.long_carry_fee * affected)


def long_distance(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    extra_miles = to_decimal(ctx.request.distance_miles) - ctx.rates.long_distance_threshold_miles
    if extra_miles <= 0:
        return None
    return charge("Long Distance", extra_miles * ctx.rates.long_distance_rate)


def is_peak(ctx: RuleContext) -> bool:
    slot = ctx.request.time_slot
    if slot.demand == DemandLevel.HIGH:
        return True
    is_weekday = ctx.request.date.weekday() < 5
    return is_weekday and slot.type in ctx.rates.peak_weekday_periods


def peak_time(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    if not is_peak(ctx):
        return None
    return charge("Peak Time", subtotal * ctx.rates.peak_rate)


def weekend(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    if ctx.request.date.weekday() < 5:
        return None
    return charge("Weekend", subtotal * ctx.rates.weekend_rate)


def seasonal(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    month = ctx.request.date.month
    if month in ctx.rates.peak_season_months:
        return charge("Peak Season", subtotal * ctx.rates.peak_season_rate)
    if month in ctx.rates.high_season_months:
        return charge("High Season", subtotal * ctx.rates.high_season_rate)
    return None


def time_slot_premium(ctx: RuleContext, subtotal: Decimal) -> Optional[Charge]:
    multiplier = to_decimal(ctx.request.time_slot.multiplier)
    if multiplier <= ONE:
        return None
    return charge("Time Slot Premium", subtotal * (multiplier - ONE))


SURCHARGE_RULES = (
    fragile_items,
    valuable_items,
    piano_items,
    heavy_items,
    pickup_floor,
    dropoff_floor,
    narrow_access,
    long_carry,
    long_distance,
    peak_time,
    weekend,
    seasonal,
    time_slot_premium,
)
