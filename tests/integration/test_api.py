"""Integration tests for API endpoints"""

from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from loan_ops.domain.exceptions import BackendAPIError


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.get("/v1/applications")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "loan_ops_query_total" in response.text


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_classify_endpoint(client: TestClient):
    response = client.get("/v1/status/classify", params={"raw_status": "SCORING RAD ETDI"})

    assert response.status_code == 200
    assert response.json() == {
        "raw_status": "SCORING RAD ETDI",
        "category": "REJECTED",
        "rule": "rejected_fragment",
    }


def test_list_applications_with_facets(client: TestClient):
    response = client.get("/v1/applications", params={"region": "TOSHKENT", "status": "FINISHED"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 6
    assert data["matched"] == 1
    assert [item["id"] for item in data["items"]] == [2]
    assert data["items"][0]["category"] == "FINISHED"
    assert data["stats"]["approved_paid_amount"] == 500_000


def test_list_applications_unknown_agent_matches_nothing(client: TestClient):
    response = client.get("/v1/applications", params={"agent_id": 7})

    assert response.status_code == 200
    assert response.json()["matched"] == 0


def test_list_applications_inverted_dates(client: TestClient):
    response = client.get(
        "/v1/applications",
        params={"start_date": "2024-02-01", "end_date": "2024-01-01"},
    )

    assert response.status_code == 422


def test_list_applications_negative_amount(client: TestClient):
    response = client.get("/v1/applications", params={"amount_min": -100})

    assert response.status_code == 422


def test_application_debt(client: TestClient):
    response = client.get("/v1/applications/5/debt", params={"as_of": "2024-03-15"})

    assert response.status_code == 200
    data = response.json()
    assert data["application_id"] == 5
    assert data["remaining_debt"] == 600_000
    assert data["overdue_amount"] == 300_000
    assert data["next_payment_date"] == "2024-03-01"
    assert [e["status"] for e in data["schedule"]] == ["COMPLETED", "OVERDUE", "PENDING"]
    assert data["schedule"][1]["days_past_due"] == 14


def test_application_debt_without_term(client: TestClient):
    response = client.get("/v1/applications/6/debt", params={"as_of": "2024-03-15"})

    assert response.status_code == 200
    data = response.json()
    assert data["schedule"] == []
    assert data["remaining_debt"] == 0
    assert data["next_payment_date"] is None


def test_application_debt_not_found(client: TestClient):
    response = client.get("/v1/applications/999/debt", params={"as_of": "2024-03-15"})

    assert response.status_code == 404


def test_by_entity_endpoint(client: TestClient):
    response = client.get("/v1/statistics/by-entity", params={"dimension": "merchant", "status": "CONFIRMED"})

    assert response.status_code == 200
    assert response.json() == [{"id": 1, "label": "Texnomart", "value": 1}]


def test_by_entity_rejects_unknown_dimension(client: TestClient):
    response = client.get("/v1/statistics/by-entity", params={"dimension": "region"})

    assert response.status_code == 422


def test_status_distribution_endpoint(client: TestClient):
    response = client.get("/v1/statistics/status-distribution", params={"merchant_id": 2})

    assert response.status_code == 200
    assert response.json() == {
        "labels": ["CANCELED_BY_CLIENT", "WAITING_BANK_CONFIRM"],
        "series": [1, 1],
    }


def test_over_time_endpoint(client: TestClient):
    response = client.get(
        "/v1/statistics/over-time",
        params={"granularity": "week", "start_date": "2024-01-15", "end_date": "2024-01-16"},
    )

    assert response.status_code == 200
    assert response.json() == {"categories": ["2024-W03"], "series": [2]}


def test_debts_endpoint(client: TestClient):
    response = client.get("/v1/debts", params={"dimension": "merchant", "as_of": "2024-03-15"})

    assert response.status_code == 200
    data = response.json()
    assert data["as_of"] == "2024-03-15"
    assert [(d["id"], d["remaining_debt"]) for d in data["items"]] == [(1, 1_700_000), (-1, 600_000)]


@patch("loan_ops.infrastructure.repository.InMemoryRepository.get_applications", new_callable=AsyncMock)
def test_backend_failure_maps_to_503(mock_get: AsyncMock, client: TestClient):
    mock_get.side_effect = BackendAPIError("Backend timeout after 5.0s")

    response = client.get("/v1/applications")

    assert response.status_code == 503
    assert response.json()["detail"] == "Backend service unavailable"
