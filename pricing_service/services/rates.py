"""Static rate tables.

A table is loaded once and never mutated. Hot reloads go through
``set_rate_table`` which swaps the whole reference, so a calculation that
already grabbed the previous table finishes against it.
"""
import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, model_validator

from pricing_service.core.enums import ServiceType, SlotPeriod
from pricing_service.core.errors import ConfigurationError
from pricing_service.utils.hashing import model_hash

logger = logging.getLogger(__name__)

# Cheapest tier first
TIER_ORDER = [st.value for st in ServiceType]

ONE = Decimal("1")


def _fee(default: str):
    return Field(default=Decimal(default), ge=0)


def _rate(default: str):
    return Field(default=Decimal(default), ge=0, le=1)


class ServiceRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_price: Optional[Decimal] = Field(default=None, ge=0)
    multiplier: Decimal = Field(gt=0)


class RateTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    services: Dict[str, ServiceRate]

    free_threshold_miles: Decimal = _fee("2")
    per_mile_rate: Decimal = _fee("2.50")
    long_distance_threshold_miles: Decimal = _fee("50")
    long_distance_rate: Decimal = _fee("0.25")    # per mile beyond the threshold

    volume_rate: Decimal = _fee("10.00")          # per m³
    large_load_threshold: Decimal = _fee("10")    # m³
    large_load_discount: Decimal = _rate("0.10")  # on the volume above the threshold

    fragile_unit_fee: Decimal = _fee("15.00")
    valuable_unit_fee: Decimal = _fee("20.00")
    piano_unit_fee: Decimal = _fee("50.00")
    heavy_item_threshold_kg: Decimal = _fee("50")
    heavy_unit_fee: Decimal = _fee("10.00")
    no_lift_floor_fee: Decimal = _fee("15.00")    # per floor
    narrow_access_fee: Decimal = _fee("20.00")    # per address
    long_carry_fee: Decimal = _fee("25.00")       # per address
    peak_rate: Decimal = _rate("0.10")
    peak_weekday_periods: Tuple[SlotPeriod, ...] = (SlotPeriod.MORNING,)
    weekend_rate: Decimal = _rate("0.15")
    peak_season_months: Tuple[int, ...] = (6, 7, 8, 12)
    peak_season_rate: Decimal = _rate("0.20")
    high_season_months: Tuple[int, ...] = (3, 4, 5, 9, 10, 11)
    high_season_rate: Decimal = _rate("0.10")

    first_time_discount_rate: Decimal = _rate("0.10")
    max_off_peak_saving_rate: Decimal = _rate("0.20")
    max_promo_discount: Decimal = _fee("100.00")
    max_promo_discount_rate: Decimal = _rate("0.30")

    minimum_price: Decimal = Field(default=Decimal("55.00"), gt=0)
    vat_rate: Decimal = _rate("0.20")

    @model_validator(mode="after")
    def check_tier_ordering(self):
        tiers = [self.services[name] for name in TIER_ORDER if name in self.services]
        for lower, higher in zip(tiers, tiers[1:]):
            if higher.multiplier < lower.multiplier:
                raise ValueError("service multipliers must not decrease across tiers")
            if (
                lower.base_price is not None
                and higher.base_price is not None
                and higher.base_price < lower.base_price
            ):
                raise ValueError("service base prices must not decrease across tiers")
        return self

    @model_validator(mode="after")
    def check_discount_headroom(self):
        # All three discounts can stack on one order
        combined = (
            self.first_time_discount_rate
            + self.max_off_peak_saving_rate
            + self.max_promo_discount_rate
        )
        if combined >= ONE:
            raise ValueError("combined discount rates must stay below 100%")
        return self

    @model_validator(mode="after")
    def check_season_months(self):
        months = self.peak_season_months + self.high_season_months
        if any(month < 1 or month > 12 for month in months):
            raise ValueError("season months must be between 1 and 12")
        if set(self.peak_season_months) & set(self.high_season_months):
            raise ValueError("a month cannot be both peak and high season")
        return self

    def service_rate(self, service_type: str) -> ServiceRate:
        rate = self.services.get(service_type)
        if rate is None:
            raise ConfigurationError(f"No rate table entry for service type '{service_type}'")
        return rate


DEFAULT_RATE_TABLE = RateTable(
    services={
        ServiceType.VAN_ONLY.value: ServiceRate(base_price=Decimal("35.00"), multiplier=Decimal("0.80")),
        ServiceType.MAN_AND_VAN.value: ServiceRate(base_price=Decimal("45.00"), multiplier=Decimal("1.00")),
        ServiceType.TWO_PERSON.value: ServiceRate(base_price=Decimal("55.00"), multiplier=Decimal("1.20")),
        ServiceType.VAN_WITH_2_MEN.value: ServiceRate(base_price=Decimal("65.00"), multiplier=Decimal("1.30")),
        ServiceType.LARGE_VAN.value: ServiceRate(base_price=Decimal("75.00"), multiplier=Decimal("1.40")),
        ServiceType.PREMIUM.value: ServiceRate(base_price=Decimal("95.00"), multiplier=Decimal("1.50")),
    }
)

# Table and its fingerprint travel together so one read sees a matching pair
_active: Tuple[RateTable, str] = (DEFAULT_RATE_TABLE, model_hash(DEFAULT_RATE_TABLE))


def active_rate_table() -> Tuple[RateTable, str]:
    return _active


def get_rate_table() -> RateTable:
    return _active[0]


def rate_table_fingerprint() -> str:
    return _active[1]


def set_rate_table(table: RateTable) -> RateTable:
    """Replace the active table, returning the previous one"""
    global _active
    previous = _active[0]
    _active = (table, model_hash(table))
    logger.info(f"Rate table swapped ({len(table.services)} service types)")
    return previous


def load_rate_table(path: str) -> RateTable:
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read rate table {path}: {e}") from e
    try:
        return RateTable.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid rate table {path}: {e}") from e
