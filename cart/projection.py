"""Cart view projection.

Turns raw cart view rows into normalized ``CartItem`` values and reduces them
to totals. Rows may come from the ORM or from a client payload, so field
names are read through a table of accepted source keys. Bad values never
raise; they coerce to zero and the row is dropped when it cannot represent a
cart line.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional

ZERO = Decimal("0.00")

# Logical field -> source keys in priority order.
FIELD_SOURCES = {
    "product_id": ("product_id", "productId"),
    "name": ("name",),
    "country": ("country", "country_of_origin"),
    "type": ("type",),
    "size": ("size",),
    "temperature": ("temperature",),
    "thumbnail_url": ("thumbnail_url", "thumbnailUrl"),
    "unlimited_stock": ("unlimited_stock", "unlimitedStock"),
    "qty_available": ("qty_available", "qtyAvailable"),
    "out_of_stock": ("out_of_stock", "outOfStock"),
    "price": ("price",),
    "qty": ("qty",),
    "line_total": ("line_total", "lineTotal"),
}


@dataclass(frozen=True)
class CartItem:
    product_id: str
    name: str
    country: Optional[str]
    type: Optional[str]
    size: Optional[str]
    temperature: Optional[str]
    thumbnail_url: Optional[str]
    unlimited_stock: bool
    qty_available: Optional[int]
    out_of_stock: bool
    price: Decimal
    qty: int
    line_total: Decimal


@dataclass(frozen=True)
class CartTotals:
    total_units: int
    subtotal: Decimal


def _pick(row: Mapping, field: str) -> Any:
    for key in FIELD_SOURCES[field]:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _to_decimal(value) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def _to_int(value) -> int:
    number = _to_decimal(value)
    return int(number)


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def normalize_row(row: Mapping) -> Optional[CartItem]:
    """Return a ``CartItem`` for ``row`` or None when it is not a valid line."""

    product_id = _pick(row, "product_id")
    product_id = "" if product_id is None else str(product_id).strip()
    qty = _to_int(_pick(row, "qty"))
    if not product_id or qty <= 0:
        return None

    qty_available = _pick(row, "qty_available")
    return CartItem(
        product_id=product_id,
        name=_text(_pick(row, "name")) or "",
        country=_text(_pick(row, "country")),
        type=_text(_pick(row, "type")),
        size=_text(_pick(row, "size")),
        temperature=_text(_pick(row, "temperature")),
        thumbnail_url=_text(_pick(row, "thumbnail_url")),
        unlimited_stock=_to_bool(_pick(row, "unlimited_stock")),
        qty_available=None if qty_available is None else _to_int(qty_available),
        out_of_stock=_to_bool(_pick(row, "out_of_stock")),
        price=_to_decimal(_pick(row, "price")),
        qty=qty,
        line_total=_to_decimal(_pick(row, "line_total")),
    )


def build_cart_items(rows: Any) -> List[CartItem]:
    """Project raw cart view rows into ``CartItem`` values.

    Anything that is not a list or tuple is treated as no rows.
    """

    if not isinstance(rows, (list, tuple)):
        return []
    items = []
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        item = normalize_row(row)
        if item is not None:
            items.append(item)
    return items


def cart_totals(items: Iterable[CartItem]) -> CartTotals:
    total_units = 0
    subtotal = ZERO
    for item in items:
        total_units += item.qty
        subtotal += item.line_total
    return CartTotals(total_units=total_units, subtotal=subtotal)
