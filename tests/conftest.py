"""
Pytest configuration and fixtures for listings tests
"""
import httpx
import pytest

from listings.config import ApiConfig

BASE_URL = "https://api.example.test/api/v1"


class FakeUpstream:
    """
    httpx transport that answers from a {path: response} table and records
    every request. Unknown paths get a 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get(request.url.path)
        if answer is None:
            return httpx.Response(404, json={"message": "not here"})
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        return httpx.Response(200, json=answer)

    @property
    def paths(self):
        return [r.url.path for r in self.requests]


@pytest.fixture
def live_config():
    """Live mode, guest (no credentials)."""
    return ApiConfig(base_url=BASE_URL, mock_search_delay=0, mock_detail_delay=0)


@pytest.fixture
def mock_config():
    """Sample-data-only mode without the artificial delay."""
    return ApiConfig(base_url=BASE_URL, use_mock_data=True, mock_search_delay=0, mock_detail_delay=0)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def upstream_record():
    """A marketplace item using none of our canonical key names."""
    return {
        "propertyId": 9001,
        "name": "Penthouse on King Fahd Road",
        "details": "Top floor, city views",
        "priceAmount": "2750000",
        "location": {"city": "الرياض", "coordinates": [46.6753, 24.7136]},
        "category": "شقة",
        "bedroomCount": 4,
        "bathroomCount": 3,
        "squareMeters": 240.5,
        "images": ["https://img.example.test/a.jpg", "https://img.example.test/b.jpg"],
        "forRent": False,
        "features": ["pool", "gym"],
        "created": "2025-01-02T10:00:00Z",
    }
