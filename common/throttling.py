"""Scoped throttle keyed by the storefront session.

Rates are read from Django settings at request time so tests using
``override_settings`` take effect. Anonymous shoppers are identified by their
storefront session id instead of the client IP.
"""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle

from .session import SESSION_HEADER, is_cart_session


class SessionScopedRateThrottle(ScopedRateThrottle):
    def get_rate(self):
        rates = getattr(settings, "REST_FRAMEWORK", {}).get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)

    def get_ident(self, request):
        header = (request.headers.get(SESSION_HEADER) or "").strip()
        if is_cart_session(header):
            return f"session:{header}"
        return super().get_ident(request)
