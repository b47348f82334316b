import math
from datetime import date, datetime

from pricing_service.core.errors import ValidationError
from pricing_service.schemas.quote import Property, QuoteRequest


def _check_non_negative(value, field: str) -> None:
    if value is None or not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number")
    if value < 0:
        raise ValidationError(f"{field} must be >= 0")


def _check_property(prop: Property, field: str) -> None:
    if prop.floor < 0:
        raise ValidationError(f"{field}.floor must be >= 0")


def validate_request(request: QuoteRequest) -> None:
    """Reject unusable requests before any pricing rule runs"""
    if not request.items:
        raise ValidationError("items must not be empty")

    for index, item in enumerate(request.items):
        if item.quantity < 1:
            raise ValidationError(f"items[{index}].quantity must be >= 1")
        _check_non_negative(item.volume, f"items[{index}].volume")
        _check_non_negative(item.weight, f"items[{index}].weight")

    _check_non_negative(request.distance_miles, "distanceMiles")
    _check_non_negative(request.estimated_duration_hours, "estimatedDurationHours")

    slot = request.time_slot
    _check_non_negative(slot.price, "timeSlot.price")
    if not math.isfinite(slot.multiplier) or slot.multiplier <= 0:
        raise ValidationError("timeSlot.multiplier must be > 0")

    if isinstance(request.date, datetime) or not isinstance(request.date, date):
        raise ValidationError("date must be a calendar date")

    _check_property(request.pickup_property, "pickupProperty")
    _check_property(request.dropoff_property, "dropoffProperty")
