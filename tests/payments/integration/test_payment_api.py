"""Integration tests for the payments endpoints via TestClient."""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.order.order import Order, OrderStatus
from payments.api.routes import payment_router
from protean import current_domain
from shared.api import register_error_handlers

CUSTOMER = {"X-User-Id": "user-001"}
SIGNED = {"Stripe-Signature": "test-signature"}


@pytest.fixture()
def client(gateway):  # noqa: ARG001
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(payment_router)
    return TestClient(app)


def _webhook_payload(order_id, amount=9250, event_type="payment_intent.succeeded"):
    return json.dumps(
        {
            "id": "evt_1",
            "type": event_type,
            "data": {
                "object": {
                    "id": "pi_123",
                    "amount_received": amount,
                    "metadata": {"order_id": order_id, "user_id": "user-001"},
                }
            },
        }
    )


def _load(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestConfigEndpoint:
    def test_returns_publishable_key(self, client):
        response = client.get("/payments/config")

        assert response.status_code == 200
        assert response.json() == {"publishable_key": "pk_test_storefront"}


class TestCreatePaymentIntentEndpoint:
    def test_creates_intent_for_order_total(self, client, order):
        response = client.post("/payments/create-payment-intent", json={"order_id": str(order.id)}, headers=CUSTOMER)

        assert response.status_code == 201
        body = response.json()
        assert body["amount"] == 9250
        assert body["currency"] == "usd"
        assert body["client_secret"]

    def test_other_users_order_is_forbidden(self, client, order, gateway):
        response = client.post(
            "/payments/create-payment-intent",
            json={"order_id": str(order.id)},
            headers={"X-User-Id": "user-002"},
        )

        assert response.status_code == 403
        assert gateway.calls == []

    def test_processor_timeout(self, client, order, gateway):
        gateway.configure(should_time_out=True)

        response = client.post("/payments/create-payment-intent", json={"order_id": str(order.id)}, headers=CUSTOMER)

        assert response.status_code == 503
        assert response.json()["retryable"] is True


class TestWebhookEndpoint:
    def test_bad_signature_is_rejected(self, client, order):
        response = client.post(
            "/payments/webhook",
            content=_webhook_payload(str(order.id)),
            headers={"Stripe-Signature": "forged"},
        )

        assert response.status_code == 401
        assert _load(order.id).is_paid is False

    def test_succeeded_intent_confirms_payment(self, client, order):
        response = client.post("/payments/webhook", content=_webhook_payload(str(order.id)), headers=SIGNED)

        assert response.status_code == 200
        assert response.json() == {"status": "confirmed", "order_id": str(order.id)}
        paid = _load(order.id)
        assert paid.is_paid is True
        assert paid.payment_reference == "pi_123"

    def test_duplicate_delivery_is_acknowledged(self, client, order):
        client.post("/payments/webhook", content=_webhook_payload(str(order.id)), headers=SIGNED)
        paid_at = _load(order.id).paid_at

        response = client.post("/payments/webhook", content=_webhook_payload(str(order.id)), headers=SIGNED)

        assert response.status_code == 200
        assert response.json()["status"] == "already_confirmed"
        assert _load(order.id).paid_at == paid_at

    def test_other_event_types_are_ignored(self, client, order):
        payload = _webhook_payload(str(order.id), event_type="payment_intent.payment_failed")

        response = client.post("/payments/webhook", content=payload, headers=SIGNED)

        assert response.json()["status"] == "ignored"
        assert _load(order.id).is_paid is False

    def test_amount_mismatch_is_conflict(self, client, order):
        response = client.post(
            "/payments/webhook",
            content=_webhook_payload(str(order.id), amount=100),
            headers=SIGNED,
        )

        assert response.status_code == 409
        assert _load(order.id).is_paid is False

    def test_late_duplicate_after_cancellation_is_acknowledged(self, client, order):
        client.post("/payments/webhook", content=_webhook_payload(str(order.id)), headers=SIGNED)
        paid = _load(order.id)
        paid.change_status(OrderStatus.CANCELLED.value)
        current_domain.repository_for(Order).add(paid)

        response = client.post("/payments/webhook", content=_webhook_payload(str(order.id)), headers=SIGNED)

        assert response.status_code == 200
        assert response.json()["status"] == "already_confirmed"

    def test_payload_that_is_not_utf8_is_bad_request(self, client, order):
        response = client.post("/payments/webhook", content=b"\xff\xfe{bad", headers=SIGNED)

        assert response.status_code == 400
        assert _load(order.id).is_paid is False
