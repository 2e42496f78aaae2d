import pytest
import respx
from datetime import datetime
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.api.quotes import get_quote_service
from app.core.config import settings
from app.services.directory import DriverDirectoryClient
from app.services.quote import QuoteService
from app.services.routing import MajorRoadClassifier, RouteAnalyzer


DRIVERS_URL = "http://drivers.test/esr_drivers"
DIRECTIONS_URL = "http://directions.test/esr_directions"


def make_roster(rates: dict) -> dict:
    """Roster body as the driver directory serves it"""
    return {
        name: {"Id": f"user-{i}", "Name": name, "Rate": rate}
        for i, (name, rate) in enumerate(rates.items())
    }


def make_step(distance: float, instructions: str) -> dict:
    return {
        "distance": {"text": f"{distance / 1000:.1f} km", "value": distance},
        "html_instructions": instructions,
    }


def make_directions(total: float, steps: list) -> dict:
    """Directions body with a single route and a single leg"""
    return {
        "geocoded_waypoints": [],
        "routes": [
            {
                "summary": "A40",
                "legs": [
                    {
                        "distance": {"text": f"{total / 1000:.1f} km", "value": total},
                        "duration": {"text": "20 mins", "value": 1200},
                        "steps": steps,
                    }
                ],
            }
        ],
        "status": "OK",
    }


def fixed_clock(hour: int):
    return lambda: datetime(2024, 3, 14, hour, 30)


@pytest.fixture
def mock_upstreams():
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def directory_client():
    return DriverDirectoryClient(base_url=DRIVERS_URL, api_key="drivers-key", timeout=2.0)


@pytest.fixture
def route_analyzer():
    return RouteAnalyzer(
        base_url=DIRECTIONS_URL,
        api_key="directions-key",
        timeout=2.0,
        classifier=MajorRoadClassifier(),
    )


@pytest.fixture
def quote_service_factory(directory_client, route_analyzer):
    def _make(hour: int = 14) -> QuoteService:
        return QuoteService(directory_client, route_analyzer, clock=fixed_clock(hour))

    return _make


@pytest.fixture
def valid_journey_data():
    return {"start": "Dublin Airport", "end": "Galway City"}


@pytest.fixture
def sample_roster():
    return make_roster({"alice": 10.0, "bob": 7.0, "carol": 12.0})


@pytest.fixture
def sample_directions():
    # 10km leg, 6km of it on A roads
    return make_directions(
        10000,
        [
            make_step(2500, "Head <b>north</b> on <b>Main St</b>"),
            make_step(6000, "Merge onto <b>A40</b>"),
            make_step(1500, "Turn <b>left</b> onto <b>High St</b>"),
        ],
    )


@pytest.fixture
async def test_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def quote_client(quote_service_factory):
    """Client whose quote service reads a fixed afternoon hour"""
    app.dependency_overrides[get_quote_service] = lambda: quote_service_factory(14)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_quote_service, None)


@pytest.fixture
def app_settings():
    """Return application settings"""
    return settings


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "routing: marks tests related to route analysis"
    )
    config.addinivalue_line(
        "markers", "directory: marks tests related to driver selection"
    )
