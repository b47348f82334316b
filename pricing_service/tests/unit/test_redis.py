import pytest

from pricing_service.core import redis as redis_module

pytestmark = pytest.mark.unit


class StubClient:
    def __init__(self, ping_error=None):
        self.ping_error = ping_error
        self.closed = False

    async def ping(self):
        if self.ping_error is not None:
            raise self.ping_error
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def redis_url(monkeypatch):
    monkeypatch.setattr(redis_module.settings, "REDIS_URL", "redis://cache:6379/0")
    monkeypatch.setattr(redis_module, "redis", None)


@pytest.mark.asyncio
async def test_failed_ping_closes_client(monkeypatch, redis_url):
    client = StubClient(ping_error=ConnectionError("connection refused"))
    monkeypatch.setattr(redis_module.Redis, "from_url", lambda *args, **kwargs: client)

    with pytest.raises(ConnectionError):
        await redis_module.init_redis()

    assert client.closed
    assert redis_module.get_redis() is None


@pytest.mark.asyncio
async def test_connect_and_close(monkeypatch, redis_url):
    client = StubClient()
    monkeypatch.setattr(redis_module.Redis, "from_url", lambda *args, **kwargs: client)

    assert await redis_module.init_redis() is client
    assert redis_module.get_redis() is client
    assert not client.closed

    await redis_module.close_redis()
    assert client.closed
    assert redis_module.get_redis() is None


@pytest.mark.asyncio
async def test_no_url_disables_cache(monkeypatch):
    monkeypatch.setattr(redis_module.settings, "REDIS_URL", None)
    assert await redis_module.init_redis() is None
