"""Tests for farm, marketplace and health endpoints."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from carboniq.api.dependencies import (
    get_auth_provider,
    get_farm_store,
    get_verification_engine,
)
from carboniq.app import app
from carboniq.config.constants import (
    FARMING_PRACTICES,
    REASON_COORDINATES,
    REASON_IMAGERY,
    REASON_LAND_SIZE_INVALID,
)
from carboniq.infrastructure.auth import StaticTokenAuthProvider
from carboniq.services.verification import VerificationEngine

PASS = 0.5
FAIL = 0.05
AUTH = {"Authorization": "Bearer farmer-token"}
OTHER_AUTH = {"Authorization": "Bearer other-token"}


@pytest.fixture
def draws():
    """Pinned draws consumed by the engine, appended to per test."""
    return []


@pytest.fixture
def client(store, scripted_rng, draws):
    """Provide a FastAPI test client wired to an in-memory store."""
    engine = VerificationEngine(rng=scripted_rng([]))
    engine.rng.draws = draws
    app.dependency_overrides[get_farm_store] = lambda: store
    app.dependency_overrides[get_verification_engine] = lambda: engine
    app.dependency_overrides[get_auth_provider] = lambda: StaticTokenAuthProvider(
        {"farmer-token": "user-1", "other-token": "user-2"}
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


# ==========================================
#  Health / catalog
# ==========================================


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_catalog(client):
    data = client.get("/api/catalog").json()
    assert len(data["crop_types"]) == 22
    assert "Cotton" in data["crop_types"]
    assert data["farming_practices"][0] == "No-till farming"


# ==========================================
#  Authentication
# ==========================================


@pytest.mark.parametrize(
    "method, path",
    [("get", "/api/farms"), ("post", "/api/farms"), ("get", "/api/farms/x"), ("post", "/api/farms/x/verify")],
)
def test_farm_endpoints_require_token(client, method, path):
    response = client.request(method.upper(), path)
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_unknown_token(client):
    response = client.get("/api/farms", headers={"Authorization": "Bearer stolen"})
    assert response.status_code == 401


# ==========================================
#  POST /api/farms
# ==========================================


def test_submit_verified(client, valid_farm, draws):
    draws.extend([PASS, PASS])
    response = client.post("/api/farms", json=valid_farm, headers=AUTH)
    assert response.status_code == 201
    data = response.json()
    assert data["verification"]["status"] == "verified"
    assert data["verification"]["carbon_credits"] == 1.2
    assert data["verification"]["rejection_reasons"] is None
    assert data["farm"]["verification_status"] == "verified"
    assert data["farm"]["user_id"] == "user-1"


def test_submit_rejected(client, valid_farm, draws):
    draws.extend([FAIL])
    payload = {**valid_farm, "coordinates": [0, 0]}
    response = client.post("/api/farms", json=payload, headers=AUTH)
    assert response.status_code == 201
    data = response.json()
    assert data["verification"]["status"] == "rejected"
    assert data["verification"]["rejection_reasons"] == [REASON_COORDINATES, REASON_IMAGERY]
    assert data["verification"]["carbon_credits"] is None
    assert data["message"].startswith("Verification failed: ")


def test_submit_incomplete(client, store):
    response = client.post("/api/farms", json={"name": "Half done"}, headers=AUTH)
    assert response.status_code == 422
    assert "Farm location is required" in response.json()["detail"]


def test_submit_invalid_latitude(client, valid_farm):
    response = client.post(
        "/api/farms", json={**valid_farm, "coordinates": [120, 10]}, headers=AUTH
    )
    assert response.status_code == 422


@pytest.mark.parametrize("land_size", [float("nan"), float("inf"), float("-inf")])
def test_submit_non_finite_land_size(client, store, valid_farm, land_size):
    # json.dumps writes NaN and Infinity literals, which the body parser accepts.
    response = client.post(
        "/api/farms",
        content=json.dumps({**valid_farm, "land_size": land_size}),
        headers={**AUTH, "Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert response.json()["detail"] == ["Land size must be a finite number"]
    assert asyncio.run(store.list_farms()) == []


def test_submit_huge_land_size(client, valid_farm, draws):
    draws.extend([PASS, PASS])
    response = client.post(
        "/api/farms", json={**valid_farm, "land_size": 1e308}, headers=AUTH
    )
    assert response.status_code == 201
    assert response.json()["verification"]["carbon_credits"] == pytest.approx(6e307)


def test_submit_land_size_that_overflows_credits(client, valid_farm, draws):
    draws.extend([PASS])
    payload = {**valid_farm, "land_size": 1.7e308, "farming_practices": list(FARMING_PRACTICES)}
    response = client.post("/api/farms", json=payload, headers=AUTH)
    assert response.status_code == 201
    assert response.json()["verification"]["rejection_reasons"] == [REASON_LAND_SIZE_INVALID]


# ==========================================
#  POST /api/farms/validate
# ==========================================


def test_validate_step(client):
    response = client.post(
        "/api/farms/validate?step=1",
        json={"name": "Farm", "land_size": 1.5, "crop_types": []},
        headers=AUTH,
    )
    assert response.status_code == 200
    assert response.json() == {
        "step": 1,
        "valid": False,
        "errors": ["Select at least one crop type"],
    }


def test_validate_unknown_step(client):
    response = client.post("/api/farms/validate?step=4", json={}, headers=AUTH)
    assert response.status_code == 422


# ==========================================
#  Dashboard / detail / verify
# ==========================================


def test_dashboard_lists_only_own_farms(client, valid_farm, draws):
    draws.extend([PASS, PASS, PASS, PASS])
    client.post("/api/farms", json=valid_farm, headers=AUTH)
    client.post("/api/farms", json={**valid_farm, "name": "Other"}, headers=OTHER_AUTH)

    data = client.get("/api/farms", headers=AUTH).json()
    assert [f["name"] for f in data["farms"]] == ["Green Valley Farm"]
    assert data["total_credits"] == 1.2
    assert data["verified_count"] == 1


def test_get_farm_detail_and_ownership(client, valid_farm, draws):
    draws.extend([PASS, PASS])
    farm_id = client.post("/api/farms", json=valid_farm, headers=AUTH).json()["farm"]["id"]

    assert client.get(f"/api/farms/{farm_id}", headers=AUTH).json()["id"] == farm_id
    assert client.get(f"/api/farms/{farm_id}", headers=OTHER_AUTH).status_code == 404


def test_verify_pending_farm(client, store, valid_farm, draws):
    created = asyncio.run(store.create_farm({**valid_farm, "user_id": "user-1"}))
    draws.extend([PASS, PASS])

    response = client.post(f"/api/farms/{created['id']}/verify", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["verification"]["status"] == "verified"

    again = client.post(f"/api/farms/{created['id']}/verify", headers=AUTH)
    assert again.json()["verification"] == response.json()["verification"]
    assert draws == []


# ==========================================
#  GET /api/marketplace
# ==========================================


def test_marketplace_is_public(client, valid_farm, draws):
    draws.extend([PASS, PASS, FAIL, PASS, PASS])
    client.post("/api/farms", json=valid_farm, headers=AUTH)
    client.post("/api/farms", json={**valid_farm, "name": "Unlucky"}, headers=AUTH)
    client.post(
        "/api/farms",
        json={**valid_farm, "name": "Big Estate", "land_size": 10, "crop_types": ["Coffee"]},
        headers=AUTH,
    )

    data = client.get("/api/marketplace?sort=credits-high").json()
    assert [f["name"] for f in data["farms"]] == ["Big Estate", "Green Valley Farm"]
    assert data["total_farms"] == 2
    assert data["total_credits"] == 7.2
    assert data["crop_types"] == ["Coffee", "Maize"]

    coffee = client.get("/api/marketplace?crop=Coffee").json()
    assert [f["name"] for f in coffee["farms"]] == ["Big Estate"]


def test_marketplace_rejects_unknown_sort(client):
    assert client.get("/api/marketplace?sort=cheapest").status_code == 422


def test_marketplace_limit(client, valid_farm, draws):
    draws.extend([PASS, PASS, PASS, PASS])
    client.post("/api/farms", json=valid_farm, headers=AUTH)
    client.post("/api/farms", json={**valid_farm, "name": "Second"}, headers=AUTH)

    data = client.get("/api/marketplace?limit=1").json()
    assert len(data["farms"]) == 1
    assert data["total_farms"] == 2


@pytest.mark.parametrize("limit", [0, 201])
def test_marketplace_limit_out_of_range(client, limit):
    assert client.get(f"/api/marketplace?limit={limit}").status_code == 422
