"""Serializers for the catalog app (read-only)."""

from rest_framework import serializers

from .models import Product, ProductImage


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ["id", "product", "url", "sort_order"]


class ProductListSerializer(serializers.ModelSerializer):
    qty_available = serializers.IntegerField(read_only=True)
    out_of_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "long_name",
            "type",
            "size",
            "temperature",
            "country_of_origin",
            "selling_price",
            "thumbnail_url",
            "status",
            "unlimited_stock",
            "qty_available",
            "out_of_stock",
            "sort_order",
        ]


class ProductDetailSerializer(ProductListSerializer):
    images = ProductImageSerializer(many=True, read_only=True)

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + [
            "description",
            "cut",
            "preparation",
            "packaging",
            "size_g",
            "keywords",
            "images",
        ]
