"""Priced components: base price, load summary, distance, service multiplier, volume."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from pricing_service.core.errors import ConfigurationError
from pricing_service.schemas.quote import Item, QuoteRequest
from pricing_service.services.money import ZERO, to_decimal
from pricing_service.services.rates import RateTable


@dataclass(frozen=True)
class Charge:
    """A named surcharge or discount amount, always positive"""
    name: str
    amount: Decimal


@dataclass(frozen=True)
class Load:
    total_volume: Decimal
    total_weight: Decimal
    fragile_count: int
    valuable_count: int


def resolve_base_price(request: QuoteRequest, rates: RateTable) -> Decimal:
    slot_price = to_decimal(request.time_slot.price)
    if slot_price != ZERO:
        return slot_price

    rate = rates.services.get(request.service_type)
    if rate is None or rate.base_price is None:
        raise ConfigurationError(
            f"No base price configured for service type '{request.service_type}'"
        )
    return rate.base_price


def aggregate_load(items: Iterable[Item]) -> Load:
    total_volume = ZERO
    total_weight = ZERO
    fragile = 0
    valuable = 0
    for item in items:
        total_volume += to_decimal(item.volume) * item.quantity
        total_weight += to_decimal(item.weight) * item.quantity
        if item.fragile:
            fragile += item.quantity
        if item.valuable:
            valuable += item.quantity
    return Load(total_volume, total_weight, fragile, valuable)


def price_distance(distance_miles: float, rates: RateTable) -> Decimal:
    chargeable = max(ZERO, to_decimal(distance_miles) - rates.free_threshold_miles)
    return chargeable * rates.per_mile_rate


def apply_service_multiplier(
    base_price: Decimal, distance_price: Decimal, service_type: str, rates: RateTable
) -> Decimal:
    rate = rates.service_rate(service_type)
    return (base_price + distance_price) * rate.multiplier


def price_volume(total_volume: Decimal, rates: RateTable) -> Decimal:
    # The large-load reduction only applies to the volume above the
    # threshold, so adding volume never lowers the price.
    standard = min(total_volume, rates.large_load_threshold)
    large = max(ZERO, total_volume - rates.large_load_threshold)
    return (
        standard * rates.volume_rate
        + large * rates.volume_rate * (Decimal("1") - rates.large_load_discount)
    )
