from common.choices import ThemeMode
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .services import read_theme_mode, resolve_logo_url


class LogoView(APIView):
    """Return the storefront logo for a display mode."""

    permission_classes = [AllowAny]
    throttle_scope = "branding"

    @extend_schema(
        tags=["Branding"],
        summary="Resolve logo",
        description=(
            "Per-mode overrides stored in the session win; otherwise the configured logo is returned. "
            "Without `mode` the session's theme mode is used (dark by default)."
        ),
        parameters=[
            OpenApiParameter(name="mode", description="dark or light", required=False, type=str, enum=ThemeMode.values)
        ],
        responses={
            200: inline_serializer(
                name="LogoResponse",
                fields={"mode": serializers.CharField(), "logo_url": serializers.CharField(allow_null=True)},
            )
        },
        examples=[OpenApiExample("Logo", value={"mode": "dark", "logo_url": "https://cdn.example.com/logo.png"})],
    )
    def get(self, request):
        storage = getattr(request, "session", None)
        mode = (request.query_params.get("mode") or "").strip().lower()
        if mode not in ThemeMode.values:
            mode = read_theme_mode(storage)
        return Response({"mode": mode, "logo_url": resolve_logo_url(storage, mode)})
