from decimal import Decimal

import pytest
from cart.models import CartLine
from catalog.tests.factories import ProductFactory
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db

SESSION = "c0ffee00-1111-4222-8333-444455556666"


def test_cart_endpoints_set_update_remove_clear():
    wagyu = ProductFactory(name="Wagyu", selling_price=Decimal("2450.00"))
    salmon = ProductFactory(name="Salmon", selling_price=Decimal("520.50"))
    client = APIClient()

    r_empty = client.get("/api/v1/cart/", HTTP_X_SESSION_ID=SESSION)
    assert r_empty.status_code == 200
    assert r_empty.json()["items"] == []
    assert r_empty.json()["subtotal"] == "0.00"
    assert r_empty.json()["total_units"] == 0

    r_set = client.put(f"/api/v1/cart/lines/{wagyu.id}/", {"qty": 2}, format="json", HTTP_X_SESSION_ID=SESSION)
    assert r_set.status_code == 200
    assert r_set.json() == {"product_id": str(wagyu.id), "qty": 2}
    client.put(f"/api/v1/cart/lines/{salmon.id}/", {"qty": 1}, format="json", HTTP_X_SESSION_ID=SESSION)

    body = client.get("/api/v1/cart/", HTTP_X_SESSION_ID=SESSION).json()
    assert [item["product_id"] for item in body["items"]] == [str(wagyu.id), str(salmon.id)]
    assert body["total_units"] == 3
    assert Decimal(body["subtotal"]) == Decimal("5420.50")

    r_remove = client.put(f"/api/v1/cart/lines/{wagyu.id}/", {"qty": 0}, format="json", HTTP_X_SESSION_ID=SESSION)
    assert r_remove.status_code == 200
    assert r_remove.json()["qty"] == 0
    body = client.get("/api/v1/cart/", HTTP_X_SESSION_ID=SESSION).json()
    assert [item["name"] for item in body["items"]] == ["Salmon"]

    r_clear = client.post("/api/v1/cart/clear/", HTTP_X_SESSION_ID=SESSION)
    assert r_clear.status_code == 200
    assert r_clear.json()["status"] == "cleared"
    assert CartLine.objects.count() == 0


def test_carts_are_isolated_per_session():
    product = ProductFactory()
    client = APIClient()
    client.put(f"/api/v1/cart/lines/{product.id}/", {"qty": 1}, format="json", HTTP_X_SESSION_ID=SESSION)

    other = client.get("/api/v1/cart/", HTTP_X_SESSION_ID="another-session-0001")
    assert other.json()["items"] == []


def test_negative_qty_is_rejected_by_validation():
    product = ProductFactory()

    resp = APIClient().put(f"/api/v1/cart/lines/{product.id}/", {"qty": -1}, format="json", HTTP_X_SESSION_ID=SESSION)
    assert resp.status_code == 400
    assert "qty" in resp.json()


def test_unknown_product_returns_generic_error():
    resp = APIClient().put("/api/v1/cart/lines/999999/", {"qty": 1}, format="json", HTTP_X_SESSION_ID=SESSION)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Unable to update cart."}


def test_server_sentinel_header_is_never_used_as_cart_owner():
    resp = APIClient().get("/api/v1/cart/", HTTP_X_SESSION_ID="server")

    assert resp.status_code == 200
    assert resp.json()["session_id"] != "server"
    assert len(resp.json()["session_id"]) > 10


def test_session_endpoint_is_stable_for_a_client():
    client = APIClient()

    first = client.get("/api/v1/cart/session/").json()["session_id"]
    second = client.get("/api/v1/cart/session/").json()["session_id"]

    assert first == second
    assert len(first) > 10
    assert APIClient().get("/api/v1/cart/session/").json()["session_id"] != first


def test_cart_without_header_uses_django_session():
    product = ProductFactory()
    client = APIClient()

    client.put(f"/api/v1/cart/lines/{product.id}/", {"qty": 2}, format="json")
    body = client.get("/api/v1/cart/").json()

    assert body["total_units"] == 2
    assert body["session_id"] == client.get("/api/v1/cart/session/").json()["session_id"]


def test_over_long_session_header_is_rejected():
    product = ProductFactory()
    client = APIClient()
    header = "s" * 65

    write = client.put(f"/api/v1/cart/lines/{product.id}/", {"qty": 1}, format="json", HTTP_X_SESSION_ID=header)
    read = client.get("/api/v1/cart/", HTTP_X_SESSION_ID=header)
    session = client.get("/api/v1/cart/session/", HTTP_X_SESSION_ID=header)

    assert write.status_code == 400
    assert write.json() == {"detail": "Invalid session id."}
    assert read.status_code == 400
    assert session.status_code == 400
    assert CartLine.objects.count() == 0
