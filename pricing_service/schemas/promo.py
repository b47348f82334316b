from datetime import date as date_type
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pricing_service.core.enums import PromoKind


class PromoCode(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    code: str
    kind: PromoKind
    value: float
    description: str = ""
    max_discount: Optional[float] = None
    valid_until: Optional[date_type] = None
    usage_limit: Optional[int] = None
    used_count: int = 0
    first_time_only: bool = False


class PromoCheckRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str
    date: Optional[date_type] = None
    is_first_time_customer: bool = False


class PromoCheckResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str
    valid: bool
    reason: Optional[str] = None
    description: Optional[str] = None
