"""Application wiring tests."""

from crypto_ramp_service.app.main import app


def test_root(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Crypto ramp service running"}


def test_routes_registered():
    paths = {route.path for route in app.routes}

    assert "/api/transactions" in paths
    assert "/api/transactions/{transaction_id}" in paths
    assert "/api/webhook/moonpay" in paths
