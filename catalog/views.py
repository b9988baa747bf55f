"""Read-only viewsets for the product catalog."""

from common.throttling import SessionScopedRateThrottle
from django.http import Http404
from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

from . import selectors
from .models import Product
from .serializers import ProductDetailSerializer, ProductImageSerializer, ProductListSerializer

TRUTHY = {"1", "true", "yes", "on"}


class ProductFilterSet(filters.FilterSet):
    type = filters.CharFilter(field_name="type", lookup_expr="iexact")
    temperature = filters.CharFilter(field_name="temperature", lookup_expr="iexact")
    country = filters.CharFilter(field_name="country_of_origin", lookup_expr="iexact")

    class Meta:
        model = Product
        fields = ["type", "temperature", "country"]


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description=(
            "Returns active products ordered by `sort_order` (unset last). "
            "`q` performs a case-insensitive substring search over name, long name, size, "
            "temperature, country of origin and keywords. Staff may pass `include_inactive=1`."
        ),
        tags=["Catalog Endpoints"],
        parameters=[
            OpenApiParameter("q", OpenApiTypes.STR, location="query", description="Free-text search"),
            OpenApiParameter("type", OpenApiTypes.STR, location="query", description="Filter by product type"),
            OpenApiParameter("temperature", OpenApiTypes.STR, location="query", description="Frozen / Chilled"),
            OpenApiParameter("country", OpenApiTypes.STR, location="query", description="Country of origin"),
            OpenApiParameter(
                "include_inactive", OpenApiTypes.BOOL, location="query", description="Staff only: include inactive"
            ),
        ],
        examples=[
            OpenApiExample(
                "Product list",
                value={
                    "count": 1,
                    "next": None,
                    "previous": None,
                    "results": [
                        {
                            "id": 1,
                            "name": "Wagyu Striploin",
                            "long_name": "A5 Wagyu Striploin Steak",
                            "type": "Beef",
                            "size": "300g",
                            "temperature": "Frozen",
                            "country_of_origin": "Japan",
                            "selling_price": "2450.00",
                            "thumbnail_url": "https://cdn.example.com/wagyu.jpg",
                            "status": "Active",
                            "unlimited_stock": False,
                            "qty_available": 12,
                            "out_of_stock": False,
                            "sort_order": 1,
                        }
                    ],
                },
                response_only=True,
            )
        ],
    ),
    retrieve=extend_schema(
        summary="Get product",
        description="Returns a single active product with its image gallery",
        tags=["Catalog Endpoints"],
    ),
)
class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    filterset_class = ProductFilterSet
    filter_backends = [filters.DjangoFilterBackend]
    throttle_scope = "catalog"
    throttle_classes = [SessionScopedRateThrottle, UserRateThrottle, AnonRateThrottle]

    def include_inactive(self) -> bool:
        user = getattr(self.request, "user", None)
        if not getattr(user, "is_staff", False):
            return False
        return str(self.request.query_params.get("include_inactive", "")).lower() in TRUTHY

    def get_queryset(self):
        if self.action == "list":
            include_inactive = self.include_inactive()
        else:
            include_inactive = getattr(self.request.user, "is_staff", False)
        qs = selectors.fetch_products(include_inactive=include_inactive)
        if self.action == "retrieve":
            qs = qs.prefetch_related("images")
        return qs

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        if self.action != "list":
            return queryset
        query = self.request.query_params.get("q")
        if not (query or "").strip():
            return queryset
        return [p for p in queryset if selectors.matches_product_query(p, query)]

    def get_serializer_class(self):
        return ProductDetailSerializer if self.action == "retrieve" else ProductListSerializer

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List product images",
        description="Returns the image gallery of an active product ordered by sort order",
    )
    @action(detail=True, methods=["get"], url_path="images")
    def images(self, request, pk=None):
        product = selectors.get_product(pk, include_inactive=getattr(request.user, "is_staff", False))
        if product is None:
            raise Http404
        images = selectors.fetch_product_images([product.id])
        return Response(ProductImageSerializer(images, many=True).data)
