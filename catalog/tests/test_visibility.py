import pytest
from catalog.tests.factories import ProductFactory, StaffUserFactory
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_product_list_hides_inactive():
    ProductFactory(status="Active", name="Visible One")
    ProductFactory(status="Disabled", name="Hidden One")

    client = APIClient()
    resp = client.get("/api/v1/catalog/products/")
    assert resp.status_code == 200
    names = [r["name"] for r in resp.data["results"]]
    assert "Visible One" in names
    assert "Hidden One" not in names


@pytest.mark.django_db
def test_product_list_accepts_lowercase_active_status():
    ProductFactory(status="active", name="Lowercase Active")

    resp = APIClient().get("/api/v1/catalog/products/")
    assert [r["name"] for r in resp.data["results"]] == ["Lowercase Active"]


@pytest.mark.django_db
def test_product_detail_inactive_returns_404():
    p = ProductFactory(status="Archived")

    client = APIClient()
    resp = client.get(f"/api/v1/catalog/products/{p.id}/")
    assert resp.status_code == 404


@pytest.mark.django_db
def test_include_inactive_ignored_for_anonymous():
    ProductFactory(status="Disabled", name="Hidden One")

    resp = APIClient().get("/api/v1/catalog/products/?include_inactive=1")
    assert resp.data["count"] == 0


@pytest.mark.django_db
def test_staff_can_include_inactive_products():
    ProductFactory(status="Active", name="Visible One")
    ProductFactory(status="Disabled", name="Hidden One")
    client = APIClient()
    client.force_authenticate(user=StaffUserFactory())

    resp = client.get("/api/v1/catalog/products/?include_inactive=1")
    assert resp.status_code == 200
    names = {r["name"] for r in resp.data["results"]}
    assert names == {"Visible One", "Hidden One"}
