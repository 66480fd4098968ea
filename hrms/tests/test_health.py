"""
Tests for health and version endpoints
"""
from fastapi import status


def test_health_endpoint(client):
    """Test health endpoint returns correct response"""
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "ok"
    assert data["service"] == "hrms-leave"


def test_version_endpoint_returns_version(client):
    response = client.get("/api/v1/version")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert data["service"] == "hrms-leave"
    assert "version" in data
    assert data["env"] in ["local", "staging", "prod"]


def test_leave_policy_is_public(client):
    response = client.get("/api/v1/policy/leave")

    assert response.status_code == status.HTTP_200_OK
    entitlements = response.json()["entitlements"]
    assert entitlements["annual"] == 20
    assert entitlements["casual"] == 12
    assert entitlements["sick"] == 10
    assert entitlements["maternity"] == 180
    assert entitlements["paternity"] == 7
    assert entitlements["unpaid"] is None
