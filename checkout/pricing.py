"""Checkout pricing engine.

Pure functions: given a cart subtotal, the customer's delivery details and
the configured delivery rules, compute delivery, express and thermal bag
fees. Nothing here touches the database; callers load the rules first.
"""

import re
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from django.conf import settings

ZERO = Decimal("0.00")

NEAR_1700_AREAS = ("san dionisio", "tambo", "baclaran")
MEDIUM_ZONE_POSTALS = ("1711", "1715", "1720")
MEDIUM_ZONE_PATTERN = re.compile(r"^130\d$")
AREA_WORD_SPLIT = re.compile(r"[,\s/]+")


def normalize_postal_code(value) -> str:
    return re.sub(r"\D", "", str(value or ""))


@dataclass(frozen=True)
class DeliveryRule:
    postal_code: str
    area_name: str
    min_order_free_delivery: Decimal
    delivery_fee_below_min: Decimal


@dataclass(frozen=True)
class PricingConfig:
    free_delivery_threshold: Decimal = Decimal("4000.00")
    express_surcharge: Decimal = Decimal("100.00")
    thermal_bag_fee: Decimal = Decimal("200.00")

    @classmethod
    def from_settings(cls) -> "PricingConfig":
        return cls(
            free_delivery_threshold=Decimal(str(settings.CHECKOUT_FREE_DELIVERY_THRESHOLD)),
            express_surcharge=Decimal(str(settings.CHECKOUT_EXPRESS_SURCHARGE)),
            thermal_bag_fee=Decimal(str(settings.CHECKOUT_THERMAL_BAG_FEE)),
        )


@dataclass
class CustomerDraft:
    """Contact, address and delivery preferences captured at checkout."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    placed_for_someone_else: bool = False
    attention_to: str = ""
    line1: str = ""
    line2: str = ""
    barangay: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""
    country: str = "Philippines"
    notes: str = ""
    delivery_date: Optional[date] = None
    delivery_slot: str = ""
    express_delivery: bool = False
    add_refer_bag: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping) -> "CustomerDraft":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @property
    def normalized_postal_code(self) -> str:
        return normalize_postal_code(self.postal_code)

    @property
    def normalized_area(self) -> str:
        return f"{self.barangay or ''} {self.city or ''}".strip().lower()

    def snapshot(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        if self.delivery_date is not None:
            data["delivery_date"] = self.delivery_date.isoformat()
        return data


@dataclass(frozen=True)
class CheckoutPricing:
    subtotal: Decimal
    delivery_fee: Decimal
    express_surcharge: Decimal
    thermal_bag_fee: Decimal
    postal_supported: bool
    free_delivery_target: Decimal
    rule: Optional[DeliveryRule] = None

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.delivery_fee + self.thermal_bag_fee


def fallback_delivery_rule(postal_code: str, area: str) -> Optional[DeliveryRule]:
    """Built-in zone table used when no delivery rules are configured."""

    postal = normalize_postal_code(postal_code)
    area = (area or "").lower()
    if not postal:
        return None

    if postal == "1709":
        return DeliveryRule(postal, "Merville/Moonwalk", Decimal("2000.00"), Decimal("100.00"))
    if postal == "1700":
        if any(name in area for name in NEAR_1700_AREAS):
            return DeliveryRule(postal, "San Dionisio/Tambo/Baclaran", Decimal("2000.00"), Decimal("100.00"))
        return DeliveryRule(postal, "Sucat/Marcelo Green", Decimal("3000.00"), Decimal("150.00"))
    if postal in ("1701", "1702"):
        return DeliveryRule(postal, "Paranaque near", Decimal("2000.00"), Decimal("100.00"))
    if postal in MEDIUM_ZONE_POSTALS or MEDIUM_ZONE_PATTERN.match(postal):
        return DeliveryRule(postal, "Medium zone", Decimal("3000.00"), Decimal("150.00"))
    return DeliveryRule(postal, "Far zone", Decimal("4000.00"), Decimal("200.00"))


def _area_words(area_name: str):
    return [word for word in AREA_WORD_SPLIT.split(area_name.lower()) if len(word) > 3]


def select_delivery_rule(rules: Sequence[DeliveryRule], postal_code: str, area: str) -> Optional[DeliveryRule]:
    """Pick the delivery rule for a postal code and free-text area.

    A single postal match wins outright. Among several, prefer a rule whose
    area name appears in the area, then one sharing a significant word with
    it, then the lowest free-delivery minimum.
    """

    if not rules:
        return fallback_delivery_rule(postal_code, area)
    postal = normalize_postal_code(postal_code)
    if not postal:
        return None
    area = (area or "").strip().lower()

    candidates = [rule for rule in rules if normalize_postal_code(rule.postal_code) == postal]
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    for rule in candidates:
        if rule.area_name.lower() in area:
            return rule
    for rule in candidates:
        if any(word in area for word in _area_words(rule.area_name)):
            return rule
    return min(candidates, key=lambda rule: rule.min_order_free_delivery)


def compute_checkout_pricing(
    subtotal: Decimal,
    draft: CustomerDraft,
    rules: Sequence[DeliveryRule] = (),
    config: Optional[PricingConfig] = None,
) -> CheckoutPricing:
    """Price a checkout.

    The base delivery fee is waived when no rule applies, when the subtotal
    reaches the global free-delivery threshold, or when it reaches the
    rule's own minimum. Express delivery adds a surcharge on top of the base
    fee. ``total`` is always derived from the components.
    """

    config = config or PricingConfig()
    subtotal = Decimal(subtotal)
    rule = select_delivery_rule(rules, draft.postal_code, draft.normalized_area)

    if rule is None or subtotal >= config.free_delivery_threshold or subtotal >= rule.min_order_free_delivery:
        base_fee = ZERO
    else:
        base_fee = rule.delivery_fee_below_min
    express_surcharge = config.express_surcharge if draft.express_delivery else ZERO
    thermal_bag_fee = config.thermal_bag_fee if draft.add_refer_bag else ZERO

    return CheckoutPricing(
        subtotal=subtotal,
        delivery_fee=base_fee + express_surcharge,
        express_surcharge=express_surcharge,
        thermal_bag_fee=thermal_bag_fee,
        postal_supported=bool(draft.normalized_postal_code) and rule is not None,
        free_delivery_target=rule.min_order_free_delivery if rule else ZERO,
        rule=rule,
    )
