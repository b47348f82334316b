import pytest
from datetime import date, time
from httpx import ASGITransport, AsyncClient

from pricing_service.main import app
from pricing_service.api import quotes as quotes_api
from pricing_service.core.enums import DemandLevel, SlotPeriod, ServiceType
from pricing_service.schemas.quote import Item, Property, QuoteRequest, TimeSlot
from pricing_service.services.pricing import PricingEngine
from pricing_service.services.rates import get_rate_table, set_rate_table


SATURDAY = date(2024, 1, 13)
WEDNESDAY = date(2024, 1, 10)


@pytest.fixture
def sofa():
    return Item(id="sofa", name="Sofa", category="furniture", volume=2.5, weight=50, quantity=1)


@pytest.fixture
def small_boxes():
    return Item(id="box", name="Small box", category="boxes", volume=0.1, weight=5, quantity=10)


@pytest.fixture
def make_slot():
    def _make_slot(**kwargs):
        data = {
            "start_time": time(13, 0),
            "end_time": time(17, 0),
            "price": 25.0,
            "multiplier": 1.0,
            "demand": DemandLevel.MEDIUM,
            "type": SlotPeriod.AFTERNOON,
        }
        data.update(kwargs)
        return TimeSlot(**data)

    return _make_slot


@pytest.fixture
def make_request(sofa, small_boxes, make_slot):
    """Scenario baseline: sofa + 10 small boxes, man-and-van, 10 miles, Saturday afternoon"""
    def _make_request(**kwargs):
        slot = kwargs.pop("time_slot", None) or make_slot()
        data = {
            "items": (sofa, small_boxes),
            "service_type": ServiceType.MAN_AND_VAN.value,
            "distance_miles": 10.0,
            "estimated_duration_hours": 3.0,
            "time_slot": slot,
            "date": SATURDAY,
            "pickup_property": Property(type="house"),
            "dropoff_property": Property(type="house"),
            "is_first_time_customer": False,
            "promo_code": None,
        }
        data.update(kwargs)
        return QuoteRequest(**data)

    return _make_request


@pytest.fixture
def engine():
    return PricingEngine()


@pytest.fixture
def valid_quote_payload():
    return {
        "items": [
            {"id": "sofa", "name": "Sofa", "category": "furniture",
             "volume": 2.5, "weight": 50, "quantity": 1},
            {"id": "box", "name": "Small box", "category": "boxes",
             "volume": 0.1, "weight": 5, "quantity": 10},
        ],
        "serviceType": "man-and-van",
        "distanceMiles": 10,
        "estimatedDurationHours": 3,
        "timeSlot": {
            "startTime": "13:00",
            "endTime": "17:00",
            "price": 25,
            "multiplier": 1.0,
            "demand": "medium",
            "type": "afternoon",
        },
        "date": "2024-01-13",
        "pickupProperty": {"type": "house", "floor": 0, "hasLift": False, "narrowAccess": False},
        "dropoffProperty": {"type": "flat", "floor": 0, "hasLift": True, "narrowAccess": False},
        "isFirstTimeCustomer": False,
    }


@pytest.fixture
async def test_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.set_calls = []

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.set_calls.append((key, ex))
        self.store[key] = value.encode() if isinstance(value, str) else value


@pytest.fixture
def fake_redis(monkeypatch):
    redis = FakeRedis()
    monkeypatch.setattr(quotes_api, "get_redis", lambda: redis)
    return redis


@pytest.fixture
def restore_rate_table():
    previous = get_rate_table()
    yield
    set_rate_table(previous)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "api: marks tests that go through the HTTP layer"
    )
    config.addinivalue_line(
        "markers", "cache: marks tests related to quote caching"
    )
