"""HTTP tests for the MoonPay webhook."""

import hashlib
import hmac
import json
from decimal import Decimal

from crypto_ramp_service.app.core.config import settings
from crypto_ramp_service.app.services import transaction_service


def _payload(external_id, status="completed", crypto_amount=0.0012):
    return {"type": "transaction_updated", "data": {"id": external_id, "status": status, "cryptoAmount": crypto_amount}}


def test_webhook_updates_matching_transaction_only(client, make_transaction, stored):
    target = make_transaction(status="waitingPayment", moonpay_transaction_id="ext_1")
    other = make_transaction(status="waitingPayment", moonpay_transaction_id="ext_2")

    resp = client.post("/api/webhook/moonpay", json=_payload("ext_1"))

    assert resp.status_code == 200
    assert resp.text == "OK"

    rows = {row.id: row for row in stored()}
    assert rows[target.id].status == "completed"
    assert rows[target.id].crypto_amount == Decimal("0.0012")
    assert rows[other.id].status == "waitingPayment"
    assert rows[other.id].crypto_amount is None


def test_webhook_for_unknown_transaction_is_ignored(client, make_transaction, stored):
    make_transaction(status="waitingPayment", moonpay_transaction_id="ext_1")

    resp = client.post("/api/webhook/moonpay", json=_payload("ext_unknown"))

    assert resp.status_code == 200
    assert resp.text == "OK"
    assert stored()[0].status == "waitingPayment"


def test_webhook_without_crypto_amount_keeps_existing(client, make_transaction, stored):
    make_transaction(status="pending", moonpay_transaction_id="ext_1", crypto_amount=Decimal("0.5"))

    resp = client.post("/api/webhook/moonpay", json={"data": {"id": "ext_1", "status": "failed"}})

    assert resp.status_code == 200
    row = stored()[0]
    assert row.status == "failed"
    assert row.crypto_amount == Decimal("0.5")


def test_webhook_malformed_payload(client):
    resp = client.post("/api/webhook/moonpay", json={"id": "ext_1"})

    assert resp.status_code == 400


def test_webhook_internal_error_returns_500(client, make_transaction, monkeypatch):
    make_transaction(moonpay_transaction_id="ext_1")

    def boom(db, data):
        raise RuntimeError("database is gone")

    monkeypatch.setattr(transaction_service, "apply_webhook", boom)

    resp = client.post("/api/webhook/moonpay", json=_payload("ext_1"))

    assert resp.status_code == 500
    assert resp.text == "Error processing webhook"


def _signed_headers(body: bytes, key: str) -> dict:
    timestamp = "1700000000"
    digest = hmac.new(key.encode(), timestamp.encode() + b"." + body, hashlib.sha256).hexdigest()
    return {"Moonpay-Signature-V2": f"t={timestamp},s={digest}", "Content-Type": "application/json"}


def test_webhook_signature_enforced_when_key_configured(client, make_transaction, stored, monkeypatch):
    monkeypatch.setattr(settings, "MOONPAY_WEBHOOK_KEY", "whk_test")
    make_transaction(status="waitingPayment", moonpay_transaction_id="ext_1")
    body = json.dumps(_payload("ext_1")).encode()

    resp = client.post("/api/webhook/moonpay", content=body, headers=_signed_headers(body, "wrong"))
    assert resp.status_code == 400
    assert stored()[0].status == "waitingPayment"

    resp = client.post("/api/webhook/moonpay", content=body, headers=_signed_headers(body, "whk_test"))
    assert resp.status_code == 200
    assert stored()[0].status == "completed"


def test_webhook_with_null_crypto_amount_clears_it(client, make_transaction, stored):
    make_transaction(status="waitingPayment", moonpay_transaction_id="ext_1", crypto_amount=Decimal("0.5"))

    resp = client.post("/api/webhook/moonpay", json=_payload("ext_1", status="failed", crypto_amount=None))

    assert resp.status_code == 200
    row = stored()[0]
    assert row.status == "failed"
    assert row.crypto_amount is None
