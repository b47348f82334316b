from datetime import date as date_type, time
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pricing_service.core.enums import DemandLevel, SlotPeriod


class QuoteModel(BaseModel):
    """camelCase on the wire, snake_case in Python, immutable everywhere"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Item(QuoteModel):
    id: str
    name: str
    category: str = "other"
    volume: float        # m³ per unit
    weight: float = 0.0  # kg per unit
    quantity: int = 1
    fragile: bool = False
    valuable: bool = False


class TimeSlot(QuoteModel):
    start_time: time
    end_time: time
    price: float = 0.0   # 0 means "use the service type's base price"
    multiplier: float = 1.0
    demand: DemandLevel = DemandLevel.MEDIUM
    type: SlotPeriod


class Property(QuoteModel):
    type: str = "house"
    floor: int = 0
    has_lift: bool = False
    narrow_access: bool = False
    long_carry: bool = False


class QuoteRequest(QuoteModel):
    items: Tuple[Item, ...]
    service_type: str
    distance_miles: float
    estimated_duration_hours: float = 0.0
    time_slot: TimeSlot
    date: date_type
    pickup_property: Property
    dropoff_property: Property
    is_first_time_customer: bool = False
    promo_code: Optional[str] = None


class LineItem(QuoteModel):
    name: str
    amount: float


class LoadSummary(QuoteModel):
    total_volume: float
    total_weight: float
    fragile_count: int
    valuable_count: int


class QuoteResult(QuoteModel):
    service_type: str
    currency: str = "GBP"
    base_price: float
    distance_price: float
    service_price: float
    volume_price: float
    load: LoadSummary
    surcharges: Tuple[LineItem, ...] = ()
    discounts: Tuple[LineItem, ...] = ()
    pre_floor_subtotal: float
    minimum_price: float
    minimum_price_applied: bool
    subtotal: float
    vat: float
    total: float


class QuoteComparison(QuoteModel):
    quotes: Dict[str, QuoteResult]
