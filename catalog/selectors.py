"""Selectors for the catalog domain.

Read-only query helpers shared by views and the checkout flow. Data access
errors are not caught here; callers decide how to surface them.
"""

from typing import Iterable, List, Optional

from django.db.models import F, QuerySet

from .models import Product, ProductImage

SEARCHABLE_FIELDS = ("name", "long_name", "size", "temperature", "country_of_origin", "keywords")


def fetch_products(*, include_inactive: bool = False) -> QuerySet[Product]:
    """Return products by ``sort_order`` (nulls last) then id.

    Unless ``include_inactive`` is set, only products whose status equals
    ``active`` in any letter case are returned.
    """

    qs = Product.objects.all()
    if not include_inactive:
        qs = qs.filter(status__iexact="active")
    return qs.order_by(F("sort_order").asc(nulls_last=True), "id")


def fetch_active_products() -> QuerySet[Product]:
    return fetch_products(include_inactive=False)


def get_product(product_id, *, include_inactive: bool = False) -> Optional[Product]:
    """Return a single product by id, or None if missing or hidden."""

    try:
        return fetch_products(include_inactive=include_inactive).get(id=product_id)
    except (Product.DoesNotExist, ValueError, TypeError):
        return None


def fetch_product_images(product_ids: Iterable) -> List[ProductImage]:
    """Return images for the given products ordered by ``sort_order``.

    Blank ids are ignored; with nothing left no query is issued.
    """

    ids = {pid for pid in (product_ids or []) if pid not in (None, "")}
    if not ids:
        return []
    return list(ProductImage.objects.filter(product_id__in=ids).order_by("sort_order", "id"))


def matches_product_query(product, query: Optional[str]) -> bool:
    """Case-insensitive substring match over the product's searchable text.

    A blank query matches every product.
    """

    needle = (query or "").strip().lower()
    if not needle:
        return True
    values = (getattr(product, field, None) for field in SEARCHABLE_FIELDS)
    haystack = " ".join(str(v) for v in values if v not in (None, "")).lower()
    return needle in haystack


def search_products(query: Optional[str], *, include_inactive: bool = False) -> List[Product]:
    return [p for p in fetch_products(include_inactive=include_inactive) if matches_product_query(p, query)]
