import httpx
import pytest
from httpx import ASGITransport

from app.schemas.lookup import FetchedDocument


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Stands in for a fetch strategy; records calls."""

    name = "fake"

    def __init__(self, html: str = "", title: str | None = None, exc: Exception | None = None):
        self.html = html
        self.title = title
        self.exc = exc
        self.calls: list[str] = []

    async def fetch(self, phone: str) -> FetchedDocument:
        self.calls.append(phone)
        if self.exc is not None:
            raise self.exc
        return FetchedDocument(url=f"https://zalo.me/{phone}", html=self.html, title=self.title)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("FETCH_STRATEGY", "static")
    monkeypatch.setenv("PROFILE_BASE_URL", "https://zalo.me")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "21600")


async def _asgi_client(app):
    from app.main import lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


@pytest.fixture
async def client(mock_env):
    from app.main import app

    async for c in _asgi_client(app):
        yield c


@pytest.fixture
async def rendered_client(mock_env, monkeypatch):
    from app.main import app

    monkeypatch.setenv("FETCH_STRATEGY", "rendered")
    async for c in _asgi_client(app):
        yield c


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()
