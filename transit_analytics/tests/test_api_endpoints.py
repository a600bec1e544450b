"""Integration tests for API endpoints."""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from transit_analytics import main
from transit_analytics.errors import StoreError
from transit_analytics.main import create_app
from transit_analytics.services.transit_service import TransitService

INCIDENT = {
    "line": "Circle Line",
    "station": "Bishan",
    "timestamp": "2024-03-01T08:00:00Z",
    "duration_minutes": 15,
    "incident_type": "signal",
}


async def _create_line(client: AsyncClient, name: str = "Circle Line") -> dict:
    response = await client.post("/api/lines", json={"name": name})
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test the root endpoint."""
    response = await client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert "name" in data
    assert "version" in data
    assert data["status"] == "operational"


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_import_does_not_build_an_app():
    """Importing the module must not load settings or configure logging."""
    assert not hasattr(main, "app")


@pytest.mark.asyncio
async def test_ready_check(client: AsyncClient):
    response = await client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready"}


@pytest.mark.asyncio
async def test_ready_check_unavailable(settings, mock_repository):
    mock_repository.ping.side_effect = StoreError("database is unreachable")
    app = create_app(settings)
    app.state.service = TransitService(mock_repository, settings)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/ready")

    assert response.status_code == 503
    assert response.json() == {"detail": "failed to reach the database"}


# Lines


@pytest.mark.asyncio
async def test_line_lifecycle(client: AsyncClient):
    """Create, read, rename, list and delete a line."""
    line = await _create_line(client)
    assert line["name"] == "Circle Line"
    assert uuid.UUID(line["id"])

    response = await client.get(f"/api/lines/{line['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == line["id"]

    response = await client.put(f"/api/lines/{line['id']}", json={"name": "Circle Line Extension"})
    assert response.status_code == 200
    assert response.json()["name"] == "Circle Line Extension"

    response = await client.get("/api/lines")
    assert [item["name"] for item in response.json()["lines"]] == ["Circle Line Extension"]

    response = await client.delete(f"/api/lines/{line['id']}")
    assert response.status_code == 200
    assert response.json() == {}

    response = await client.get(f"/api/lines/{line['id']}")
    assert response.status_code == 404
    assert response.json() == {"detail": "line not found"}


@pytest.mark.asyncio
async def test_create_line_twice_returns_same_line(client: AsyncClient):
    first = await _create_line(client, "Downtown Line")
    second = await _create_line(client, "  Downtown Line ")

    assert first["id"] == second["id"]


@pytest.mark.asyncio
async def test_create_line_validation(client: AsyncClient):
    response = await client.post("/api/lines", json={"name": "   "})
    assert response.status_code == 400
    assert response.json() == {"detail": "name must not be empty"}

    response = await client.post("/api/lines", json={"name": "x" * 101})
    assert response.status_code == 400
    assert response.json() == {"detail": "name must not exceed 100 characters"}


@pytest.mark.asyncio
async def test_malformed_line_id(client: AsyncClient):
    response = await client.get("/api/lines/not-a-uuid")

    assert response.status_code == 400
    assert response.json() == {"detail": "invalid line ID"}


# Stations


@pytest.mark.asyncio
async def test_station_lifecycle(client: AsyncClient):
    line = await _create_line(client)

    response = await client.post("/api/stations", json={"name": "Bishan", "line_id": line["id"]})
    assert response.status_code == 201
    station = response.json()
    assert station["status"] == "active"
    assert station["line_name"] == "Circle Line"

    response = await client.patch(f"/api/stations/{station['id']}", json={"status": "maintenance"})
    assert response.status_code == 200
    assert response.json()["status"] == "maintenance"
    assert response.json()["name"] == "Bishan"

    response = await client.put(f"/api/stations/{station['id']}", json={"name": "Bishan Interchange"})
    assert response.status_code == 200
    assert response.json()["name"] == "Bishan Interchange"
    assert response.json()["status"] == "maintenance"

    response = await client.get("/api/stations", params={"line_id": line["id"]})
    assert [item["id"] for item in response.json()["stations"]] == [station["id"]]

    response = await client.delete(f"/api/stations/{station['id']}")
    assert response.status_code == 200

    response = await client.get(f"/api/stations/{station['id']}")
    assert response.status_code == 404
    assert response.json() == {"detail": "station not found"}


@pytest.mark.asyncio
async def test_create_station_on_unknown_line(client: AsyncClient):
    response = await client.post("/api/stations", json={"name": "Bishan", "line_id": str(uuid.uuid4())})

    assert response.status_code == 404
    assert response.json() == {"detail": "line not found"}


@pytest.mark.asyncio
async def test_station_validation(client: AsyncClient):
    line = await _create_line(client)

    response = await client.post(
        "/api/stations",
        json={"name": "Bishan", "line_id": line["id"], "status": "broken"},
    )
    assert response.status_code == 400
    assert response.json()["detail"].startswith("status must be one of")

    response = await client.get("/api/stations", params={"line_id": "nope"})
    assert response.status_code == 400
    assert response.json() == {"detail": "invalid line ID"}

    response = await client.patch(f"/api/stations/{uuid.uuid4()}", json={})
    assert response.status_code == 400
    assert response.json() == {"detail": "at least one field (name or status) must be provided"}


# Incidents


@pytest.mark.asyncio
async def test_create_incident(client: AsyncClient):
    response = await client.post("/api/incidents", json=INCIDENT)

    assert response.status_code == 201
    data = response.json()
    assert data["line"] == "Circle Line"
    assert data["station"] == "Bishan"
    assert data["duration_minutes"] == 15
    assert data["incident_type"] == "signal"
    assert data["status"] == "open"
    assert data["timestamp"].startswith("2024-03-01T08:00:00")

    response = await client.get(f"/api/incidents/{data['id']}")
    assert response.status_code == 200
    assert response.json() == data


@pytest.mark.asyncio
async def test_resubmitted_incident_updates_in_place(client: AsyncClient):
    first = (await client.post("/api/incidents", json=INCIDENT)).json()
    second = (await client.post("/api/incidents", json={**INCIDENT, "duration_minutes": 40})).json()

    assert second["id"] == first["id"]
    assert second["duration_minutes"] == 40


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override, detail",
    [
        ({"line": ""}, "line must not be empty"),
        ({"station": "  "}, "station must not be empty"),
        ({"timestamp": None}, "timestamp is required"),
        ({"timestamp": "2999-01-01T00:00:00Z"}, "timestamp cannot be in the future"),
        ({"duration_minutes": 1441}, "duration_minutes must be between 0 and 1440"),
        (
            {"incident_type": "flood"},
            "incident_type must be one of: mechanical, power, signal, weather, other",
        ),
    ],
)
async def test_create_incident_validation(client: AsyncClient, override, detail):
    response = await client.post("/api/incidents", json={**INCIDENT, **override})

    assert response.status_code == 400
    assert response.json() == {"detail": detail}


@pytest.mark.asyncio
async def test_get_unknown_incident(client: AsyncClient):
    response = await client.get(f"/api/incidents/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"detail": "incident not found"}


# Analytics


@pytest.mark.asyncio
async def test_analytics_endpoints(client: AsyncClient):
    for timestamp, station in (
        ("2024-03-01T08:00:00Z", "Bishan"),
        ("2024-03-01T08:10:00Z", "Stadium"),
        ("2024-03-01T08:30:00Z", "Bishan"),
    ):
        response = await client.post("/api/incidents", json={**INCIDENT, "timestamp": timestamp, "station": station})
        assert response.status_code == 201
    await client.post("/api/incidents", json={**INCIDENT, "line": "Downtown Line", "station": "Bugis"})

    response = await client.get("/api/analytics/top_breakdowns", params={"scope": "line"})
    assert response.status_code == 200
    assert response.json() == {
        "scope": "line",
        "items": [{"name": "Circle Line", "count": 3}, {"name": "Downtown Line", "count": 1}],
    }

    response = await client.get("/api/analytics/top_breakdowns", params={"scope": "station", "limit": 1})
    assert response.json()["items"] == [{"name": "Bishan", "count": 2}]

    response = await client.get("/api/analytics/mean_time_between_failures")
    assert response.status_code == 200
    assert response.json() == {"lines": [{"name": "Circle Line", "mtbf_minutes": 15.0}]}

    response = await client.get("/api/analytics/recent_disruptions", params={"line": "Circle Line", "limit": 2})
    assert response.status_code == 200
    items = response.json()["items"]
    assert [item["station"] for item in items] == ["Bishan", "Stadium"]
    assert items[0]["timestamp"].startswith("2024-03-01T08:30:00")


@pytest.mark.asyncio
async def test_top_breakdowns_requires_scope(client: AsyncClient):
    response = await client.get("/api/analytics/top_breakdowns", params={"scope": "network"})

    assert response.status_code == 400
    assert response.json() == {"detail": "scope must be 'line' or 'station'"}
