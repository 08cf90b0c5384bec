"""
Component tests for the payment-intent endpoint. The Stripe resource is
replaced by FakePaymentIntents (see conftest).
"""
import stripe
from fastapi.testclient import TestClient


def payment(**overrides):
    body = {"payment_method_id": "pm_card_visa", "amount": 4999.6, "currency": "INR", "email": "ada@example.com"}
    body.update(overrides)
    return body


class TestPaymentValidation:

    def test_missing_payment_method(self, test_client: TestClient, payment_intents):
        response = test_client.post("/api/create-payment-intent", json=payment(payment_method_id=None))

        assert response.status_code == 400
        assert response.json() == {"error": "Payment method ID is required"}
        assert payment_intents.calls == []

    def test_non_positive_amount(self, test_client: TestClient, payment_intents):
        for amount in (0, -5, None):
            response = test_client.post("/api/create-payment-intent", json=payment(amount=amount))
            assert response.status_code == 400
            assert response.json() == {"error": "Valid amount is required"}
        assert payment_intents.calls == []


class TestPaymentStatusMapping:

    def test_succeeded(self, test_client: TestClient, payment_intents):
        response = test_client.post("/api/create-payment-intent", json=payment())

        assert response.status_code == 200
        assert response.json() == {"success": True, "payment_intent_id": "pi_test_123", "status": "succeeded"}

        params = payment_intents.calls[0]
        assert params["amount"] == 5000
        assert params["currency"] == "inr"
        assert params["payment_method"] == "pm_card_visa"
        assert params["confirm"] is True
        assert params["receipt_email"] == "ada@example.com"
        assert "idempotency_key" not in params

    def test_requires_action_echoes_client_secret(self, test_client: TestClient, payment_intents):
        payment_intents.status = "requires_action"

        response = test_client.post("/api/create-payment-intent", json=payment())

        assert response.status_code == 200
        assert response.json() == {
            "requires_action": True,
            "payment_intent_client_secret": "pi_test_123_secret_abc",
            "status": "requires_action",
        }

    def test_requires_payment_method(self, test_client: TestClient, payment_intents):
        payment_intents.status = "requires_payment_method"

        response = test_client.post("/api/create-payment-intent", json=payment())

        assert response.status_code == 400
        assert response.json() == {
            "error": "Payment failed. Please try with a different payment method.",
            "status": "requires_payment_method",
        }

    def test_other_status(self, test_client: TestClient, payment_intents):
        payment_intents.status = "processing"

        response = test_client.post("/api/create-payment-intent", json=payment())

        assert response.status_code == 400
        assert response.json() == {"error": "Payment status: processing. Please try again.", "status": "processing"}

    def test_processor_error_is_500_with_message(self, test_client: TestClient, payment_intents):
        payment_intents.error = stripe.APIConnectionError("Network is unreachable")

        response = test_client.post("/api/create-payment-intent", json=payment())

        assert response.status_code == 500
        assert "Network is unreachable" in response.json()["error"]
        assert len(payment_intents.calls) == 1

    def test_half_amounts_round_up(self, test_client: TestClient, payment_intents):
        for amount in (100.5, 2.5):
            test_client.post("/api/create-payment-intent", json=payment(amount=amount))

        assert [c["amount"] for c in payment_intents.calls] == [101, 3]

    def test_default_currency_and_idempotency_key(self, test_client: TestClient, payment_intents):
        response = test_client.post(
            "/api/create-payment-intent",
            json=payment(currency=None),
            headers={"Idempotency-Key": "checkout-42"},
        )

        assert response.status_code == 200
        params = payment_intents.calls[0]
        assert params["currency"] == "inr"
        assert params["idempotency_key"] == "checkout-42"
