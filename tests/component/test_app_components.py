"""
Component tests for app construction and the app-wide error handling.
"""
import pytest
from fastapi.testclient import TestClient

import storefront.api
from storefront.api import create_app
from storefront.services.cart_service import CartService


def test_app_refuses_to_start_without_signing_secret(engine, redis_client, monkeypatch):
    monkeypatch.setattr(storefront.api, "JWT_SECRET", "")

    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        create_app(engine=engine, redis_client=redis_client)


def test_unexpected_error_is_json_500(app, auth_headers, monkeypatch):
    def broken(self, user_id):
        raise KeyError("items")

    monkeypatch.setattr(CartService, "get_items", broken)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/cart", headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}
