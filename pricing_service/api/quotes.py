"""Quote endpoints with Redis caching"""
import logging
from fastapi import APIRouter

from pricing_service.schemas.quote import QuoteComparison, QuoteRequest, QuoteResult
from pricing_service.services.pricing import compare_service_types, default_engine
from pricing_service.services.rates import RateTable, active_rate_table
from pricing_service.core.redis import get_redis
from pricing_service.core.config import settings
from pricing_service.core.metrics import cache_hits, cache_misses, track_quote
from pricing_service.utils.hashing import model_hash

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/quote", tags=["quotes"])

CACHE_PREFIX = "quote"


@track_quote
def price_quote(req: QuoteRequest, rates: RateTable) -> QuoteResult:
    return default_engine.with_rates(rates).calculate_pricing(req)


def _generate_cache_key(req: QuoteRequest, table_fingerprint: str) -> str:
    # Scoped to the rate table the result was priced with
    return f"{CACHE_PREFIX}:{table_fingerprint[:16]}:{model_hash(req)}"


async def _cached_result(cache_key: str):
    redis = get_redis()
    if redis is None:
        return None
    try:
        cached = await redis.get(cache_key)
    except Exception as e:
        logger.warning(f"Cache retrieval failed: {e}")
        return None
    if not cached:
        cache_misses.labels(cache_key=CACHE_PREFIX).inc()
        return None
    cache_hits.labels(cache_key=CACHE_PREFIX).inc()
    return QuoteResult.model_validate_json(cached)


async def _store_result(cache_key: str, result: QuoteResult) -> None:
    redis = get_redis()
    if redis is None:
        return
    try:
        await redis.set(
            cache_key,
            result.model_dump_json(by_alias=True),
            ex=settings.PRICE_CACHE_TTL
        )
    except Exception as e:
        logger.warning(f"Cache write failed: {e}")


@router.post("", response_model=QuoteResult)
async def calc_quote(req: QuoteRequest):

    rates, fingerprint = active_rate_table()
    cache_key = _generate_cache_key(req, fingerprint)
    cached = await _cached_result(cache_key)
    if cached is not None:
        return cached

    result = price_quote(req, rates)
    logger.info(
        f"Quoted {result.service_type}: subtotal={result.subtotal} vat={result.vat} "
        f"total={result.total} floor={result.minimum_price_applied}"
    )

    await _store_result(cache_key, result)
    return result


@router.post("/compare", response_model=QuoteComparison)
async def compare_quotes(req: QuoteRequest):
    quotes = compare_service_types(req)
    return QuoteComparison(quotes=quotes)
