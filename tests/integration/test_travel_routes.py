"""Integration tests for the HTTP routes."""

from collections.abc import Generator
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from twintravel.app.api.deps import get_indexer, get_store
from twintravel.app.db.inmemory import InMemoryDocumentStore
from twintravel.app.main import app

BASE = "/twins/twin-a"


class FailingIndexer:
    """Indexer that always fails."""

    def __init__(self) -> None:
        self.calls = 0

    async def index_travel(self, travel: object, ctx: object) -> None:
        self.calls += 1
        raise RuntimeError("index unavailable")

    async def remove_travel(self, travel_id: str, ctx: object) -> None:
        self.calls += 1
        raise RuntimeError("index unavailable")


@pytest.fixture
def indexer() -> FailingIndexer:
    return FailingIndexer()


@pytest.fixture
def client(indexer: FailingIndexer) -> Generator[TestClient, None, None]:
    """Test client over a fresh in-memory store."""
    store = InMemoryDocumentStore()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_indexer] = lambda: indexer
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_travel(client: TestClient, **fields: object) -> dict:
    response = client.post(f"{BASE}/travels", json={"title": "Trip", **fields})
    assert response.status_code == 201
    return response.json()["data"]


class TestTravelRoutes:
    """Root travel endpoints."""

    def test_create_and_get(self, client: TestClient, indexer: FailingIndexer) -> None:
        """Index failures never change the outcome of the write."""
        travel = _create_travel(
            client, start_date="2025-06-15", end_date="2025-06-22", budget=2500, currency="EUR"
        )

        response = client.get(f"{BASE}/travels/{travel['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["duration_days"] == 8
        assert body["data"]["currency"] == "EUR"
        assert body["data"]["twin_id"] == "twin-a"
        assert indexer.calls == 1

    def test_create_validation_error(self, client: TestClient) -> None:
        response = client.post(f"{BASE}/travels", json={"title": ""})
        assert response.status_code == 422

    def test_get_missing_is_404_with_level(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/travels/nope")

        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["error"] == "not_found"
        assert detail["missing"] == {"resource": "travel", "id": "nope"}

    def test_patch_merges_fields(self, client: TestClient) -> None:
        travel = _create_travel(client, budget=100)

        response = client.patch(f"{BASE}/travels/{travel['id']}", json={"notes": "window seat"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["notes"] == "window seat"
        assert data["budget"] == 100

    def test_delete(self, client: TestClient) -> None:
        travel = _create_travel(client)

        assert client.delete(f"{BASE}/travels/{travel['id']}").status_code == 200
        assert client.get(f"{BASE}/travels/{travel['id']}").status_code == 404

    def test_list_with_filters_and_stats(self, client: TestClient) -> None:
        _create_travel(client, title="Tokyo", destination_country="Japan", status="completed")
        _create_travel(client, title="Osaka", destination_country="Japan")
        _create_travel(client, title="Lima", destination_country="Peru", status="completed")

        response = client.get(
            f"{BASE}/travels",
            params={
                "destination-country": "japan",
                "status": "completed",
                "include-stats": "true",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert [t["title"] for t in body["data"]] == ["Tokyo"]
        assert body["total_count"] == 1
        assert body["stats"]["by_status"]["completed"] == 1

    def test_list_paging_and_sort(self, client: TestClient) -> None:
        for title in ["b", "c", "a"]:
            _create_travel(client, title=title)

        response = client.get(
            f"{BASE}/travels",
            params={"sort-by": "title", "sort-direction": "asc", "page-size": 2, "page": 2},
        )

        body = response.json()
        assert [t["title"] for t in body["data"]] == ["c"]
        assert body["total_pages"] == 2

    def test_list_rejects_page_zero(self, client: TestClient) -> None:
        assert client.get(f"{BASE}/travels", params={"page": 0}).status_code == 422

    def test_stats_endpoint(self, client: TestClient) -> None:
        _create_travel(client, budget=10, currency="EUR")
        _create_travel(client, budget=5, currency="EUR")

        response = client.get(f"{BASE}/travels/stats")

        assert response.status_code == 200
        assert response.json()["data"]["budget_by_currency"] == {"EUR": 15.0}

    def test_other_twin_token_is_forbidden(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/travels", headers={"Authorization": "Bearer twin-b"})
        assert response.status_code == 403

    def test_twins_are_isolated(self, client: TestClient) -> None:
        travel = _create_travel(client)
        assert client.get(f"/twins/twin-b/travels/{travel['id']}").status_code == 404


class TestNestedRoutes:
    """Itinerary, booking and activity endpoints."""

    def test_itinerary_booking_activity_flow(self, client: TestClient) -> None:
        travel = _create_travel(client, title="Peru")
        itineraries = f"{BASE}/travels/{travel['id']}/itineraries"

        created = client.post(itineraries, json={"title": "Lima to Cusco"})
        assert created.status_code == 201
        assert created.json()["travel"]["itineraries"][0]["travel_info"]["title"] == "Peru"
        itinerary_id = created.json()["data"]["id"]

        booking = client.post(
            f"{itineraries}/{itinerary_id}/bookings",
            json={"title": "Train", "start_date": "2025-03-01", "price": 80},
        )
        assert booking.status_code == 201
        booking_id = booking.json()["data"]["id"]

        patched = client.patch(
            f"{itineraries}/{itinerary_id}/bookings/{booking_id}", json={"status": "confirmed"}
        )
        assert patched.json()["data"]["status"] == "confirmed"
        assert patched.json()["data"]["price"] == 80

        activity = client.post(
            f"{itineraries}/{itinerary_id}/activities",
            json={"activity_date": "2025-03-02", "title": "Sacred Valley"},
        )
        assert activity.status_code == 201

        listed = client.get(f"{itineraries}/{itinerary_id}/bookings").json()
        assert listed["total"] == 1
        assert client.get(f"{itineraries}/{itinerary_id}/activities").json()["total"] == 1
        assert client.get(f"{itineraries}/{itinerary_id}").json()["data"]["title"] == "Lima to Cusco"

        assert client.delete(f"{itineraries}/{itinerary_id}").status_code == 200
        missing = client.get(f"{itineraries}/{itinerary_id}/bookings/{booking_id}")
        assert missing.status_code == 404
        assert missing.json()["detail"]["missing"]["resource"] == "itinerary"

    def test_booking_without_start_date_is_422(self, client: TestClient) -> None:
        travel = _create_travel(client)
        itineraries = f"{BASE}/travels/{travel['id']}/itineraries"
        itinerary_id = client.post(itineraries, json={}).json()["data"]["id"]

        response = client.post(f"{itineraries}/{itinerary_id}/bookings", json={"title": "x"})

        assert response.status_code == 422


class TestDocumentRoutes:
    """Travel document endpoints."""

    def test_save_list_analytics_delete(self, client: TestClient) -> None:
        docs = f"{BASE}/travel-documents"
        saved = client.post(
            docs, json={"title": "Dinner", "vendor_name": "Bistro", "total_amount": 40}
        )
        assert saved.status_code == 201
        document_id = saved.json()["data"]["id"]
        client.post(docs, json={"title": "Taxi", "vendor_name": "Cab", "total_amount": 15})

        listed = client.get(docs, params={"min-amount": 20}).json()
        assert [d["title"] for d in listed["data"]] == ["Dinner"]
        assert listed["stats"]["total_amount"] == 40.0

        analytics = client.get(f"{docs}/analytics").json()
        assert analytics["data"]["overview"]["unique_vendors"] == 2

        assert client.delete(f"{docs}/{document_id}").status_code == 200
        assert client.get(f"{docs}/{document_id}").status_code == 404


class TestHealthAndMetrics:
    """Operational endpoints."""

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "ok"}

    def test_healthz_in_memory(self, client: TestClient) -> None:
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["components"]["store"] == "in_memory"

    def test_healthz_returns_503_when_store_fails(self, client: TestClient) -> None:
        with patch(
            "twintravel.app.api.routes.health.check_store",
            AsyncMock(return_value=(False, "error: OperationalError")),
        ):
            response = client.get("/healthz")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"

    def test_metrics_exposes_write_metrics(self, client: TestClient) -> None:
        _create_travel(client)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "store_write_latency_ms" in response.text
