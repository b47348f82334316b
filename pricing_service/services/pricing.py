"""Quote pricing engine.

One linear pass per call:

    validate -> base price -> load summary -> distance -> service multiplier
    -> surcharges -> discounts -> minimum-price floor -> VAT

The engine keeps no state between calls and never mutates the request,
so a single instance can be shared across threads.
"""
from typing import Dict, Optional, Sequence

from pricing_service.schemas.quote import LineItem, LoadSummary, QuoteRequest, QuoteResult
from pricing_service.services.components import (
    Charge,
    aggregate_load,
    apply_service_multiplier,
    price_distance,
    price_volume,
    resolve_base_price,
)
from pricing_service.services.discounts import DISCOUNT_RULES
from pricing_service.services.money import round_pence, to_pounds
from pricing_service.services.promo import DEFAULT_PROMO_TABLE, PromoCodeLookup
from pricing_service.services.rates import RateTable, get_rate_table
from pricing_service.services.rules import Rule, RuleContext, apply_rules, total_of
from pricing_service.services.surcharges import SURCHARGE_RULES
from pricing_service.services.validation import validate_request


def _line_items(charges: Sequence[Charge]):
    return tuple(LineItem(name=c.name, amount=to_pounds(c.amount)) for c in charges)


class PricingEngine:

    def __init__(
        self,
        rates: Optional[RateTable] = None,
        promo_codes: Optional[PromoCodeLookup] = None,
        surcharge_rules: Sequence[Rule] = SURCHARGE_RULES,
        discount_rules: Sequence[Rule] = DISCOUNT_RULES,
    ):
        # rates=None follows the process-wide table so hot swaps are picked up
        self._rates = rates
        self._promo_codes = promo_codes if promo_codes is not None else DEFAULT_PROMO_TABLE
        self.surcharge_rules = tuple(surcharge_rules)
        self.discount_rules = tuple(discount_rules)

    @property
    def promo_codes(self) -> PromoCodeLookup:
        return self._promo_codes

    @property
    def rates(self) -> RateTable:
        return self._rates if self._rates is not None else get_rate_table()

    def calculate_pricing(self, request: QuoteRequest) -> QuoteResult:
        validate_request(request)
        rates = self.rates  # one table for the whole call

        base_price = resolve_base_price(request, rates)
        load = aggregate_load(request.items)
        distance_price = price_distance(request.distance_miles, rates)
        service_price = apply_service_multiplier(
            base_price, distance_price, request.service_type, rates
        )
        volume_price = price_volume(load.total_volume, rates)
        component_subtotal = service_price + volume_price

        ctx = RuleContext(request=request, load=load, rates=rates, promo_codes=self._promo_codes)

        surcharges = apply_rules(self.surcharge_rules, ctx, component_subtotal)
        pre_discount = component_subtotal + total_of(surcharges)

        discounts = apply_rules(self.discount_rules, ctx, pre_discount)
        pre_floor = pre_discount - total_of(discounts)

        floor_applied = pre_floor < rates.minimum_price
        subtotal = rates.minimum_price if floor_applied else pre_floor

        vat = round_pence(subtotal * rates.vat_rate)
        total = subtotal + vat

        return QuoteResult(
            service_type=request.service_type,
            base_price=to_pounds(base_price),
            distance_price=to_pounds(distance_price),
            service_price=to_pounds(service_price),
            volume_price=to_pounds(volume_price),
            load=LoadSummary(
                total_volume=to_pounds(load.total_volume),
                total_weight=to_pounds(load.total_weight),
                fragile_count=load.fragile_count,
                valuable_count=load.valuable_count,
            ),
            surcharges=_line_items(surcharges),
            discounts=_line_items(discounts),
            pre_floor_subtotal=to_pounds(pre_floor),
            minimum_price=to_pounds(rates.minimum_price),
            minimum_price_applied=floor_applied,
            subtotal=to_pounds(subtotal),
            vat=to_pounds(vat),
            total=to_pounds(total),
        )

    def with_rates(self, rates: RateTable) -> "PricingEngine":
        """Same rules and promo codes, pinned to one table"""
        return PricingEngine(rates, self._promo_codes, self.surcharge_rules, self.discount_rules)

    def compare_service_types(self, request: QuoteRequest) -> Dict[str, QuoteResult]:
        """Price the same move once per service type in the active table"""
        rates = self.rates
        engine = self.with_rates(rates)
        return {
            service_type: engine.calculate_pricing(
                request.model_copy(update={"service_type": service_type})
            )
            for service_type in rates.services
        }


default_engine = PricingEngine()


def calculate_pricing(request: QuoteRequest) -> QuoteResult:
    return default_engine.calculate_pricing(request)


def compare_service_types(request: QuoteRequest) -> Dict[str, QuoteResult]:
    return default_engine.compare_service_types(request)
