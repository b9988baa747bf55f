import json

import httpx
import pytest
import respx
from orders.emails import (
    OrderEmailConfigurationError,
    OrderEmailDeliveryError,
    OrderEmailRequest,
    OrderEmailValidationError,
    build_order_url,
    notify_order_placed,
    render_order_email,
    send_order_email,
)
from orders.tests.factories import OrderFactory
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db

ORDER_ID = "0f4b2a8e-3f1d-4a55-9a8e-1c2d3e4f5a6b"


@pytest.fixture
def resend(settings):
    settings.RESEND_API_KEY = "re_test"
    settings.RESEND_FROM = "Tasty Protein <orders@example.com>"
    settings.ADMIN_CC_EMAILS = ["ops@example.com", ""]
    with respx.mock(assert_all_called=False) as mock:
        yield mock


def test_build_order_url_uses_origin_or_default(settings):
    settings.STOREFRONT_ORIGIN = "https://tastyprotein.example"

    assert build_order_url("https://preview.example.com/", "a b") == "https://preview.example.com/order?id=a%20b"
    assert build_order_url(None, ORDER_ID) == f"https://tastyprotein.example/order?id={ORDER_ID}"
    assert build_order_url("  ", "x/y") == "https://tastyprotein.example/order?id=x%2Fy"


def test_render_uses_order_number_and_name():
    rendered = render_order_email(OrderEmailRequest(email="a@b.c", order_id=ORDER_ID, name="Ana", order_number="TP-1"))
    anonymous = render_order_email(OrderEmailRequest(email="a@b.c", order_id=ORDER_ID))

    assert rendered["subject"] == "Order TP-1 has been placed"
    assert "Ana" in rendered["html"]
    assert anonymous["subject"] == "Your order has been placed"


def test_send_posts_to_resend_with_cc(resend, settings):
    route = resend.post(settings.RESEND_API_URL).respond(200, json={"id": "email_1"})

    send_order_email(OrderEmailRequest(email="juan@example.com", order_id=ORDER_ID, order_number="TP-9"))

    request = route.calls.last.request
    sent = json.loads(request.content)
    assert request.headers["Authorization"] == "Bearer re_test"
    assert sent["to"] == "juan@example.com"
    assert sent["from"] == "Tasty Protein <orders@example.com>"
    assert sent["cc"] == ["ops@example.com"]
    assert sent["subject"] == "Order TP-9 has been placed"


def test_send_omits_cc_when_not_configured(resend, settings):
    settings.ADMIN_CC_EMAILS = []
    route = resend.post(settings.RESEND_API_URL).respond(200, json={"id": "email_1"})

    send_order_email(OrderEmailRequest(email="juan@example.com", order_id=ORDER_ID))

    assert "cc" not in json.loads(route.calls.last.request.content)


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"orderId": ORDER_ID}, "Missing email."),
        ({"email": "juan@example.com"}, "Missing order id."),
    ],
)
def test_validation_happens_before_any_call(resend, settings, payload, message):
    route = resend.post(settings.RESEND_API_URL).respond(200)

    with pytest.raises(OrderEmailValidationError) as exc:
        send_order_email(OrderEmailRequest.from_payload(payload))

    assert exc.value.message == message
    assert not route.called


def test_missing_api_key_is_configuration_error(resend, settings):
    settings.RESEND_API_KEY = ""
    route = resend.post(settings.RESEND_API_URL).respond(200)

    with pytest.raises(OrderEmailConfigurationError):
        send_order_email(OrderEmailRequest(email="juan@example.com", order_id=ORDER_ID))
    assert not route.called


def test_provider_rejection_carries_details(resend, settings):
    resend.post(settings.RESEND_API_URL).respond(422, text='{"message": "invalid from"}')

    with pytest.raises(OrderEmailDeliveryError) as exc:
        send_order_email(OrderEmailRequest(email="juan@example.com", order_id=ORDER_ID))

    assert exc.value.status_code == 502
    assert "invalid from" in exc.value.details


def test_transport_error_is_delivery_error(resend, settings):
    resend.post(settings.RESEND_API_URL).mock(side_effect=httpx.ConnectError("down"))

    with pytest.raises(OrderEmailDeliveryError):
        send_order_email(OrderEmailRequest(email="juan@example.com", order_id=ORDER_ID))


def test_notify_order_placed_reports_failure_without_raising(resend, settings):
    resend.post(settings.RESEND_API_URL).respond(503)
    order = OrderFactory()

    assert notify_order_placed(order) is False


def test_endpoint_success(resend, settings):
    resend.post(settings.RESEND_API_URL).respond(200, json={"id": "email_1"})

    resp = APIClient().post(
        "/api/v1/orders/send-order-email/",
        {"email": "juan@example.com", "orderId": ORDER_ID, "orderNumber": "TP-1", "name": "Juan"},
        format="json",
    )

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_endpoint_maps_errors_to_status_codes(resend, settings):
    resend.post(settings.RESEND_API_URL).respond(400, text="bad sender")
    client = APIClient()

    invalid = client.post("/api/v1/orders/send-order-email/", {"orderId": ORDER_ID}, format="json")
    rejected = client.post(
        "/api/v1/orders/send-order-email/", {"email": "juan@example.com", "order_id": ORDER_ID}, format="json"
    )

    assert invalid.status_code == 400
    assert invalid.json() == {"ok": False, "error": "Missing email."}
    assert rejected.status_code == 502
    assert rejected.json() == {"ok": False, "error": "Resend request failed.", "details": "bad sender"}
