from datetime import date

from fastapi import APIRouter

from pricing_service.schemas.promo import PromoCheckRequest, PromoCheckResponse
from pricing_service.services.pricing import default_engine
from pricing_service.services.promo import check_promo_code

router = APIRouter(prefix="/api/promo-codes", tags=["promo-codes"])


@router.post("/validate", response_model=PromoCheckResponse)
async def validate_promo_code(payload: PromoCheckRequest):
    check = check_promo_code(
        default_engine.promo_codes,
        payload.code,
        on_date=payload.date or date.today(),
        is_first_time_customer=payload.is_first_time_customer,
    )
    return PromoCheckResponse(
        code=check.code,
        valid=check.valid,
        reason=check.reason,
        description=check.promo.description if check.promo else None,
    )
