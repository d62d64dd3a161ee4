import pytest

from route_matrix import create_app
from route_matrix.cache import CacheStore
from route_matrix.proxy import RouteMatrixProxy


class FakeClock:
    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class DummyResponse:
    def __init__(self, status_code, payload=None, reason="", text=None):
        self.status_code = status_code
        self._payload = payload
        self.reason = reason
        self._text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._text is not None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class RecordingFetcher:
    """Stands in for the Routes API call and remembers every request body."""

    def __init__(self, response):
        self.response = response
        self.calls = []

    def __call__(self, body, api_key, timeout=None):
        self.calls.append({"body": body, "api_key": api_key, "timeout": timeout})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


SAMPLE_MATRIX = [
    {"originIndex": 0, "destinationIndex": 0, "distanceMeters": 15230, "duration": "1104s", "condition": "ROUTE_EXISTS"},
    {"originIndex": 0, "destinationIndex": 1, "distanceMeters": 30877, "duration": "1931s", "condition": "ROUTE_EXISTS"},
]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    return CacheStore(clock=clock)


@pytest.fixture()
def fetcher():
    return RecordingFetcher(DummyResponse(200, SAMPLE_MATRIX))


@pytest.fixture()
def api_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "test-key")
    return "test-key"


@pytest.fixture()
def proxy(cache, fetcher, api_key):
    return RouteMatrixProxy(cache, fetcher=fetcher)


@pytest.fixture()
def app(proxy):
    return create_app(
        {
            "TESTING": True,
            "CACHE_SWEEP_ENABLED": False,
            "AUTH_REQUIRED": False,
            "ROUTE_MATRIX_PROXY": proxy,
        }
    )


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_response():
    return DummyResponse


@pytest.fixture()
def sample_matrix():
    return [dict(element) for element in SAMPLE_MATRIX]
