"""Serializers for checkout drafts and pricing quotes."""

from datetime import datetime, time, timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

from .pricing import CustomerDraft, select_delivery_rule

DAYTIME_SLOT_START = time(10, 0)
DAYTIME_SLOT_END = time(21, 0)
SLOT_MINUTES = (0, 30)


class CustomerDraftSerializer(serializers.Serializer):
    """Lenient draft used for live quotes; every field is optional."""

    full_name = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    placed_for_someone_else = serializers.BooleanField(required=False, default=False)
    attention_to = serializers.CharField(required=False, allow_blank=True, default="")
    line1 = serializers.CharField(required=False, allow_blank=True, default="")
    line2 = serializers.CharField(required=False, allow_blank=True, default="")
    barangay = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(required=False, allow_blank=True, default="")
    province = serializers.CharField(required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(required=False, allow_blank=True, default="")
    country = serializers.CharField(required=False, allow_blank=True, default="Philippines")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    delivery_date = serializers.DateField(required=False, allow_null=True, default=None)
    delivery_slot = serializers.CharField(required=False, allow_blank=True, default="")
    express_delivery = serializers.BooleanField(required=False, default=False)
    add_refer_bag = serializers.BooleanField(required=False, default=False)

    def to_draft(self) -> CustomerDraft:
        return CustomerDraft.from_mapping(self.validated_data)


class CheckoutSubmissionSerializer(CustomerDraftSerializer):
    """Strict draft required to place an order.

    Expects ``rules`` (the configured delivery rules) in the serializer
    context to check that the postal code is served.
    """

    full_name = serializers.CharField(min_length=2)
    email = serializers.EmailField()
    phone = serializers.CharField(min_length=7)
    line1 = serializers.CharField(min_length=4)
    barangay = serializers.CharField(min_length=2)
    city = serializers.CharField(min_length=2)
    province = serializers.CharField(min_length=2)
    postal_code = serializers.CharField(min_length=3)
    delivery_date = serializers.DateField()
    delivery_slot = serializers.CharField()

    def validate_delivery_slot(self, value: str) -> str:
        try:
            slot = datetime.strptime(value, "%H:%M").time()
        except ValueError:
            raise serializers.ValidationError("Use HH:MM.")
        if slot.minute not in SLOT_MINUTES or not (DAYTIME_SLOT_START <= slot <= DAYTIME_SLOT_END):
            raise serializers.ValidationError("Choose a half-hour slot between 10:00 and 21:00.")
        return value

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs.get("placed_for_someone_else") and not attrs.get("attention_to", "").strip():
            raise serializers.ValidationError({"attention_to": "Tell us who will receive the order."})

        area = f"{attrs.get('barangay', '')} {attrs.get('city', '')}".strip().lower()
        rule = select_delivery_rule(self.context.get("rules") or [], attrs["postal_code"], area)
        if rule is None:
            raise serializers.ValidationError({"postal_code": "We do not deliver to this postal code yet."})

        slot = datetime.strptime(attrs["delivery_slot"], "%H:%M").time()
        delivery_at = timezone.make_aware(datetime.combine(attrs["delivery_date"], slot))
        lead = timedelta(minutes=int(settings.CHECKOUT_MIN_LEAD_TIME_MINUTES))
        now = timezone.now()
        if delivery_at < now:
            raise serializers.ValidationError({"delivery_date": "Delivery time is in the past."})
        if delivery_at < now + lead and not attrs.get("express_delivery"):
            raise serializers.ValidationError(
                {"express_delivery": "Deliveries within the lead time require express delivery."}
            )
        return attrs


class DeliveryRuleSerializer(serializers.Serializer):
    postal_code = serializers.CharField()
    area_name = serializers.CharField()
    min_order_free_delivery = serializers.DecimalField(max_digits=12, decimal_places=2)
    delivery_fee_below_min = serializers.DecimalField(max_digits=12, decimal_places=2)


class CheckoutPricingSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    delivery_fee = serializers.DecimalField(max_digits=12, decimal_places=2)
    express_surcharge = serializers.DecimalField(max_digits=12, decimal_places=2)
    thermal_bag_fee = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    postal_supported = serializers.BooleanField()
    free_delivery_target = serializers.DecimalField(max_digits=12, decimal_places=2)
    rule = DeliveryRuleSerializer(allow_null=True)
