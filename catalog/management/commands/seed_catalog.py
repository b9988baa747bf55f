"""Seed storefront data for local development.

Creates a handful of products with images, the Paranaque delivery rules and
a branding row. Re-running is idempotent; existing rows are reused by name
or postal code and area.
"""

from decimal import Decimal

from branding.models import UiBranding
from catalog.models import Product, ProductImage
from checkout.models import DeliveryPricing
from django.core.management.base import BaseCommand
from django.db import transaction

PRODUCTS = [
    {
        "name": "Wagyu Striploin MB5",
        "description": "Australian wagyu striploin, marble score 5, steak cut.",
        "type": "Beef",
        "cut": "Striploin",
        "size": "300g",
        "size_g": 300,
        "temperature": "Frozen",
        "country_of_origin": "Australia",
        "selling_price": Decimal("1450.00"),
        "product_cost": Decimal("980.00"),
        "keywords": "steak wagyu",
        "qty_on_hand": 25,
        "images": [
            "https://images.example.com/wagyu-striploin-1.jpg",
            "https://images.example.com/wagyu-striploin-2.jpg",
        ],
    },
    {
        "name": "Pork Belly Samgyupsal",
        "description": "Skin-off pork belly sliced for Korean barbecue.",
        "type": "Pork",
        "cut": "Belly",
        "preparation": "Sliced",
        "size": "500g",
        "size_g": 500,
        "temperature": "Frozen",
        "country_of_origin": "Spain",
        "selling_price": Decimal("395.00"),
        "product_cost": Decimal("250.00"),
        "keywords": "samgyup kbbq",
        "unlimited_stock": True,
        "images": ["https://images.example.com/pork-belly.jpg"],
    },
    {
        "name": "Norwegian Salmon Fillet",
        "description": "Skin-on Atlantic salmon portion.",
        "type": "Seafood",
        "size": "250g",
        "size_g": 250,
        "temperature": "Chilled",
        "country_of_origin": "Norway",
        "selling_price": Decimal("520.00"),
        "product_cost": Decimal("360.00"),
        "qty_on_hand": 12,
        "images": [],
    },
]

DELIVERY_RULES = [
    ("1709", "Merville/Moonwalk", Decimal("2000.00"), Decimal("100.00")),
    ("1700", "San Dionisio/Tambo/Baclaran", Decimal("2000.00"), Decimal("100.00")),
    ("1700", "Sucat/Marcelo Green", Decimal("3000.00"), Decimal("150.00")),
    ("1711", "BF Homes", Decimal("3000.00"), Decimal("150.00")),
]


class Command(BaseCommand):
    help = "Seed development data (products, images, delivery rules, branding)"

    def add_arguments(self, parser):
        parser.add_argument("--logo-url", default="https://images.example.com/tastyprotein-logo.png")

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding storefront data...")

        for position, row in enumerate(PRODUCTS):
            data = dict(row)
            images = data.pop("images")
            product, created = Product.objects.get_or_create(
                name=data.pop("name"), defaults={**data, "sort_order": position}
            )
            if created:
                ProductImage.objects.bulk_create(
                    ProductImage(product=product, url=url, sort_order=i) for i, url in enumerate(images)
                )

        for postal_code, area_name, minimum, fee in DELIVERY_RULES:
            DeliveryPricing.objects.get_or_create(
                postal_code=postal_code,
                area_name=area_name,
                defaults={"min_order_free_delivery_php": minimum, "delivery_fee_below_min_php": fee},
            )

        if not UiBranding.objects.exists():
            UiBranding.objects.create(logo_url=options["logo_url"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed complete: {Product.objects.count()} products, "
                f"{DeliveryPricing.objects.count()} delivery rules."
            )
        )
