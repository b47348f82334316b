"""Invariants that must hold for every valid quote"""
import itertools
import pytest
from datetime import date
from decimal import Decimal

from pricing_service.core.enums import DemandLevel, SlotPeriod, ServiceType
from pricing_service.core.errors import ValidationError
from pricing_service.schemas.quote import Item, Property, QuoteRequest
from pricing_service.services.money import round_pence
from pricing_service.services.pricing import calculate_pricing
from pricing_service.services.rates import DEFAULT_RATE_TABLE

pytestmark = pytest.mark.pricing

DATES = [date(2024, 1, 10), date(2024, 1, 13), date(2024, 4, 17), date(2024, 7, 20)]
DISTANCES = [0, 0.5, 1, 2, 2.01, 3.3, 10, 25, 49.9, 120, 400]


@pytest.fixture
def variants(make_request, make_slot):
    """A spread of requests across slots, customers and promo codes"""
    slots = [
        make_slot(),
        make_slot(price=0, demand=DemandLevel.HIGH),
        make_slot(type=SlotPeriod.MORNING, multiplier=1.15),
        make_slot(demand=DemandLevel.LOW, multiplier=0.85),
        make_slot(price=9.99, multiplier=0.4),
    ]
    customers = [
        {"is_first_time_customer": False, "promo_code": None},
        {"is_first_time_customer": True, "promo_code": "SAVE15"},
        {"is_first_time_customer": True, "promo_code": "FIRST20"},
        {"is_first_time_customer": False, "promo_code": "FREEPACKING"},
    ]
    out = []
    for slot, customer, day in itertools.product(slots, customers, DATES):
        out.append(make_request(time_slot=slot, date=day, **customer))
    return out


def _vat_of(subtotal: float) -> float:
    return float(round_pence(Decimal(str(subtotal)) * Decimal("0.20")))


class TestInvariants:

    def test_non_negative(self, variants):
        for req in variants:
            res = calculate_pricing(req)
            for value in (res.base_price, res.service_price, res.distance_price,
                          res.subtotal, res.vat, res.total):
                assert value >= 0
            for line in res.surcharges + res.discounts:
                assert line.amount > 0

    def test_floor_and_vat(self, variants):
        for req in variants:
            res = calculate_pricing(req)
            assert res.subtotal >= res.minimum_price
            assert res.vat == _vat_of(res.subtotal)
            if res.minimum_price_applied:
                assert res.pre_floor_subtotal < res.minimum_price
                assert res.total == 66.0
            else:
                assert res.pre_floor_subtotal == res.subtotal

    def test_monotonic_in_distance(self, variants):
        for req in variants:
            totals = [
                calculate_pricing(req.model_copy(update={"distance_miles": d})).total
                for d in DISTANCES
            ]
            assert totals == sorted(totals)

    def test_monotonic_in_quantity(self, variants):
        for req in variants:
            totals = []
            for qty in [1, 2, 5, 20, 80, 200]:
                boxes = req.items[1].model_copy(update={"quantity": qty})
                totals.append(
                    calculate_pricing(req.model_copy(update={"items": (req.items[0], boxes)})).total
                )
            assert totals == sorted(totals)

    def test_service_tier_ordering(self, variants):
        tiers = [
            ServiceType.MAN_AND_VAN.value,
            ServiceType.TWO_PERSON.value,
            ServiceType.VAN_WITH_2_MEN.value,
        ]
        for req in variants:
            totals = [
                calculate_pricing(req.model_copy(update={"service_type": tier})).total
                for tier in tiers
            ]
            assert totals == sorted(totals)

    def test_every_default_tier_ordered(self, make_request):
        totals = [
            calculate_pricing(make_request(service_type=name)).total
            for name in DEFAULT_RATE_TABLE.services
        ]
        assert totals == sorted(totals)


class TestValidation:

    @pytest.mark.parametrize("overrides", [
        {"items": ()},
        {"distance_miles": -0.1},
        {"estimated_duration_hours": -1},
        {"distance_miles": float("nan")},
        {"pickup_property": Property(floor=-1)},
    ])
    def test_rejected_before_pricing(self, make_request, overrides):
        with pytest.raises(ValidationError):
            calculate_pricing(make_request(**overrides))

    def test_zero_quantity(self, make_request):
        item = Item(id="x", name="Chair", volume=0.3, quantity=0)
        with pytest.raises(ValidationError):
            calculate_pricing(make_request(items=(item,)))

    def test_negative_volume(self, make_request):
        item = Item(id="x", name="Chair", volume=-0.3)
        with pytest.raises(ValidationError):
            calculate_pricing(make_request(items=(item,)))

    @pytest.mark.parametrize("multiplier", [0, -1.0])
    def test_non_positive_slot_multiplier(self, make_request, make_slot, multiplier):
        with pytest.raises(ValidationError):
            calculate_pricing(make_request(time_slot=make_slot(multiplier=multiplier)))

    def test_negative_slot_price(self, make_request, make_slot):
        with pytest.raises(ValidationError):
            calculate_pricing(make_request(time_slot=make_slot(price=-5)))

    def test_invalid_date(self, make_request):
        valid = make_request()
        fields = dict(valid)
        fields["date"] = "next tuesday"
        req = QuoteRequest.model_construct(**fields)
        with pytest.raises(ValidationError):
            calculate_pricing(req)

    def test_empty_items_checked_before_configuration(self, make_request):
        with pytest.raises(ValidationError):
            calculate_pricing(make_request(items=(), service_type="helicopter"))
