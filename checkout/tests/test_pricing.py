from decimal import Decimal

import pytest
from checkout.pricing import (
    CustomerDraft,
    DeliveryRule,
    PricingConfig,
    compute_checkout_pricing,
    fallback_delivery_rule,
    select_delivery_rule,
)

D = Decimal
CONFIG = PricingConfig(free_delivery_threshold=D("4000"), express_surcharge=D("150"), thermal_bag_fee=D("200"))


def _rule(postal, area, minimum, fee):
    return DeliveryRule(postal, area, D(minimum), D(fee))


PARANAQUE_RULES = [
    _rule("1700", "Sucat, Marcelo Green", "3000", "150"),
    _rule("1700", "San Dionisio", "2000", "100"),
    _rule("1709", "Merville", "2000", "100"),
]


@pytest.mark.parametrize(
    "postal,area,minimum,fee",
    [
        ("1709", "", "2000", "100"),
        ("1700", "san dionisio paranaque", "2000", "100"),
        ("1700", "tambo paranaque", "2000", "100"),
        ("1700", "sucat muntinlupa", "3000", "150"),
        ("1701", "", "2000", "100"),
        ("1702", "", "2000", "100"),
        ("1711", "", "3000", "150"),
        ("1715", "", "3000", "150"),
        ("1720", "", "3000", "150"),
        ("1300", "", "3000", "150"),
        ("1309", "", "3000", "150"),
        ("1310", "", "4000", "200"),
        ("4027", "", "4000", "200"),
    ],
)
def test_fallback_zone_table(postal, area, minimum, fee):
    rule = fallback_delivery_rule(postal, area)

    assert rule.postal_code == postal
    assert rule.min_order_free_delivery == D(minimum)
    assert rule.delivery_fee_below_min == D(fee)


def test_fallback_without_postal_has_no_rule():
    assert fallback_delivery_rule("", "tambo") is None
    assert fallback_delivery_rule("n/a", "tambo") is None


def test_fallback_used_only_when_no_rules_configured():
    assert select_delivery_rule([], "1709", "").area_name == "Merville/Moonwalk"
    assert select_delivery_rule(PARANAQUE_RULES, "4027", "") is None


def test_postal_code_is_normalized_to_digits():
    assert select_delivery_rule(PARANAQUE_RULES, " 17-09 ", "").area_name == "Merville"


def test_single_postal_match_wins_regardless_of_area():
    assert select_delivery_rule(PARANAQUE_RULES, "1709", "somewhere else").area_name == "Merville"


def test_area_name_contained_in_area_is_preferred():
    rule = select_delivery_rule(PARANAQUE_RULES, "1700", "san dionisio paranaque")

    assert rule.area_name == "San Dionisio"


def test_partial_area_word_match():
    rule = select_delivery_rule(PARANAQUE_RULES, "1700", "marcelo paranaque")

    assert rule.area_name == "Sucat, Marcelo Green"


def test_short_words_do_not_count_as_partial_matches():
    rules = [_rule("1700", "BF Resort", "2000", "100"), _rule("1700", "Moonwalk Village", "3000", "150")]

    rule = select_delivery_rule(rules, "1700", "bf moonwalk")

    assert rule.area_name == "Moonwalk Village"


def test_lowest_minimum_when_area_is_ambiguous():
    rule = select_delivery_rule(PARANAQUE_RULES, "1700", "unknown place")

    assert rule.min_order_free_delivery == D("2000")


def test_no_postal_means_no_rule():
    assert select_delivery_rule(PARANAQUE_RULES, "", "san dionisio") is None


def test_fee_charged_below_rule_minimum():
    draft = CustomerDraft(postal_code="1709")

    pricing = compute_checkout_pricing(D("1500.00"), draft, PARANAQUE_RULES, CONFIG)

    assert pricing.delivery_fee == D("100")
    assert pricing.total == D("1600.00")
    assert pricing.postal_supported
    assert pricing.free_delivery_target == D("2000")


def test_fee_waived_at_rule_minimum():
    pricing = compute_checkout_pricing(D("2000.00"), CustomerDraft(postal_code="1709"), PARANAQUE_RULES, CONFIG)

    assert pricing.delivery_fee == D("0.00")


def test_fee_waived_at_global_threshold_even_if_rule_minimum_is_higher():
    rules = [_rule("4027", "Calamba", "6000", "300")]

    pricing = compute_checkout_pricing(D("4000.00"), CustomerDraft(postal_code="4027"), rules, CONFIG)

    assert pricing.delivery_fee == D("0.00")


def test_unsupported_postal_has_no_fee_and_is_flagged():
    pricing = compute_checkout_pricing(D("100.00"), CustomerDraft(postal_code="9999"), PARANAQUE_RULES, CONFIG)

    assert pricing.delivery_fee == D("0.00")
    assert not pricing.postal_supported
    assert pricing.rule is None


def test_express_adds_surcharge_on_top_of_base_fee():
    standard = compute_checkout_pricing(D("1500.00"), CustomerDraft(postal_code="1709"), PARANAQUE_RULES, CONFIG)
    express = compute_checkout_pricing(
        D("1500.00"), CustomerDraft(postal_code="1709", express_delivery=True), PARANAQUE_RULES, CONFIG
    )

    assert express.delivery_fee == standard.delivery_fee + D("150")
    assert express.express_surcharge == D("150")


def test_express_surcharge_applies_when_base_fee_is_waived():
    pricing = compute_checkout_pricing(
        D("5000.00"), CustomerDraft(postal_code="1709", express_delivery=True), PARANAQUE_RULES, CONFIG
    )

    assert pricing.delivery_fee == D("150")


def test_thermal_bag_fee():
    with_bag = compute_checkout_pricing(D("5000.00"), CustomerDraft(postal_code="1709", add_refer_bag=True), [], CONFIG)
    without = compute_checkout_pricing(D("5000.00"), CustomerDraft(postal_code="1709"), [], CONFIG)

    assert with_bag.thermal_bag_fee == D("200")
    assert without.thermal_bag_fee == D("0.00")


@pytest.mark.parametrize("subtotal", ["0.00", "999.99", "1999.99", "2000.00", "3999.99", "4000.00", "12345.67"])
@pytest.mark.parametrize("express", [False, True])
@pytest.mark.parametrize("bag", [False, True])
def test_total_is_sum_of_components(subtotal, express, bag):
    draft = CustomerDraft(
        postal_code="1700", barangay="Tambo", city="Paranaque", express_delivery=express, add_refer_bag=bag
    )

    pricing = compute_checkout_pricing(D(subtotal), draft, [], CONFIG)

    assert pricing.total == pricing.subtotal + pricing.delivery_fee + pricing.thermal_bag_fee


def test_pricing_is_deterministic():
    draft = CustomerDraft(postal_code="1700", barangay="Sucat", express_delivery=True, add_refer_bag=True)

    first = compute_checkout_pricing(D("2500.00"), draft, PARANAQUE_RULES, CONFIG)
    second = compute_checkout_pricing(D("2500.00"), draft, PARANAQUE_RULES, CONFIG)

    assert first == second


def test_config_from_settings(settings):
    settings.CHECKOUT_FREE_DELIVERY_THRESHOLD = "5000"
    settings.CHECKOUT_EXPRESS_SURCHARGE = "120.50"
    settings.CHECKOUT_THERMAL_BAG_FEE = 180

    config = PricingConfig.from_settings()

    assert config == PricingConfig(D("5000"), D("120.50"), D("180"))


def test_draft_from_mapping_ignores_unknown_keys():
    draft = CustomerDraft.from_mapping({"postal_code": "1709", "unexpected": "x"})

    assert draft.postal_code == "1709"
    assert draft.normalized_area == ""
