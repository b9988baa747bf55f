from types import SimpleNamespace

import pytest
from catalog.selectors import (
    fetch_active_products,
    fetch_product_images,
    fetch_products,
    get_product,
    matches_product_query,
)
from catalog.tests.factories import ProductFactory, ProductImageFactory
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_fetch_products_orders_by_sort_with_nulls_last():
    unsorted = ProductFactory(name="Unsorted", sort_order=None)
    third = ProductFactory(name="Third", sort_order=3)
    first = ProductFactory(name="First", sort_order=1)

    assert list(fetch_products()) == [first, third, unsorted]


@pytest.mark.django_db
def test_fetch_products_filters_status_unless_inactive_requested():
    active = ProductFactory(status="ACTIVE", sort_order=1)
    disabled = ProductFactory(status="Disabled", sort_order=2)

    assert list(fetch_active_products()) == [active]
    assert list(fetch_products(include_inactive=True)) == [active, disabled]


@pytest.mark.django_db
def test_get_product_respects_visibility():
    disabled = ProductFactory(status="Disabled")

    assert get_product(disabled.id) is None
    assert get_product(disabled.id, include_inactive=True) == disabled
    assert get_product("not-a-number") is None


@pytest.mark.django_db
def test_fetch_product_images_groups_by_sort_order():
    a = ProductFactory()
    b = ProductFactory()
    a_second = ProductImageFactory(product=a, sort_order=2)
    a_first = ProductImageFactory(product=a, sort_order=1)
    b_only = ProductImageFactory(product=b, sort_order=0)
    ProductImageFactory(sort_order=0)

    images = fetch_product_images([a.id, b.id, "", None])
    assert set(images) == {a_first, a_second, b_only}
    a_images = [img for img in images if img.product_id == a.id]
    assert a_images == [a_first, a_second]


@pytest.mark.django_db
def test_fetch_product_images_without_ids_skips_query(django_assert_num_queries):
    with django_assert_num_queries(0):
        assert fetch_product_images([]) == []
        assert fetch_product_images(["", None]) == []


def _product(**fields):
    defaults = dict(name="", long_name="", size="", temperature="", country_of_origin="", keywords="")
    defaults.update(fields)
    return SimpleNamespace(**defaults)


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_query_matches_everything(query):
    assert matches_product_query(_product(name="Wagyu"), query) is True


def test_query_matches_any_searchable_field_case_insensitively():
    product = _product(name="Ribeye", country_of_origin="Argentina", keywords="grass-fed steak")

    assert matches_product_query(product, "  ARGENT ")
    assert matches_product_query(product, "grass-fed")
    assert not matches_product_query(product, "salmon")


def test_query_ignores_missing_fields():
    product = _product(name="Salmon", long_name=None, size=None)

    assert matches_product_query(product, "salmon")
    assert not matches_product_query(product, "none")


@pytest.mark.django_db
def test_catalog_search_endpoint_uses_free_text_match():
    ProductFactory(name="Wagyu Striploin", country_of_origin="Japan")
    ProductFactory(name="Pork Belly", country_of_origin="Spain", keywords="samgyup")

    resp = APIClient().get("/api/v1/catalog/products/?q=SAMGYUP")
    assert resp.status_code == 200
    assert [r["name"] for r in resp.data["results"]] == ["Pork Belly"]


@pytest.mark.django_db
def test_product_images_endpoint():
    product = ProductFactory()
    ProductImageFactory(product=product, sort_order=5, url="https://cdn.example.com/b.jpg")
    ProductImageFactory(product=product, sort_order=1, url="https://cdn.example.com/a.jpg")

    resp = APIClient().get(f"/api/v1/catalog/products/{product.id}/images/")
    assert resp.status_code == 200
    assert [img["url"] for img in resp.data] == ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]
