import pytest


@pytest.fixture(autouse=True)
def _reset_process_caches():
    """Throttle counters and the logo cache outlive a test's DB rollback."""

    from branding.services import logo_cache
    from django.core.cache import cache

    cache.clear()
    logo_cache.invalidate()
    yield
    logo_cache.invalidate()
