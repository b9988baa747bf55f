"""Branding logo lookup.

The remote logo URL is loaded once per process and shared through a
single-flight cache: callers arriving while a load is running wait on the
same result instead of issuing another query. Per-mode overrides kept in
client-local storage (the Django session) take precedence.
"""

import json
import logging
import threading
from concurrent.futures import Future
from typing import Callable, Generic, Mapping, Optional, TypeVar

from common.choices import ThemeMode

logger = logging.getLogger("storefront.branding")

THEME_MODE_KEY = "tp_theme_mode"
LOGO_URLS_BY_MODE_KEY = "tp_logo_urls_by_mode"

T = TypeVar("T")


class SingleFlightCache(Generic[T]):
    """Memoize one value, coalescing concurrent loads.

    States: unresolved (no future), in flight (future pending) and resolved
    (future done with a result). A failed load is handed to every waiter and
    leaves the cache unresolved.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._future: Optional[Future] = None

    @property
    def state(self) -> str:
        future = self._future
        if future is None:
            return "unresolved"
        return "resolved" if future.done() else "in_flight"

    def get(self, loader: Callable[[], T]) -> T:
        with self._lock:
            future = self._future
            owner = future is None
            if owner:
                future = self._future = Future()
        if not owner:
            return future.result()

        try:
            value = loader()
        except BaseException as exc:
            with self._lock:
                if self._future is future:
                    self._future = None
            future.set_exception(exc)
            raise
        future.set_result(value)
        return value

    def invalidate(self) -> None:
        with self._lock:
            self._future = None


logo_cache: SingleFlightCache[Optional[str]] = SingleFlightCache()


def fetch_logo_url() -> Optional[str]:
    from .models import UiBranding

    url = UiBranding.objects.order_by("id").values_list("logo_url", flat=True).first()
    return url or None


def load_logo_url() -> Optional[str]:
    """Return the configured logo URL, querying at most once until invalidated."""

    return logo_cache.get(fetch_logo_url)


def _storage_get(storage: Optional[Mapping], key: str):
    if storage is None:
        return None
    try:
        return storage.get(key)
    except Exception:
        logger.warning("branding.storage_unreadable", extra={"event": "branding.storage_unreadable", "key": key})
        return None


def read_theme_mode(storage: Optional[Mapping]) -> str:
    value = _storage_get(storage, THEME_MODE_KEY)
    if isinstance(value, str) and value.strip().lower() in ThemeMode.values:
        return value.strip().lower()
    return ThemeMode.DARK


def read_mode_logo(storage: Optional[Mapping], mode: str) -> Optional[str]:
    """Return the locally stored logo for ``mode``; None when absent or corrupt."""

    raw = _storage_get(storage, LOGO_URLS_BY_MODE_KEY)
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, Mapping):
        return None
    url = raw.get(mode)
    if isinstance(url, str) and url.strip():
        return url.strip()
    return None


def resolve_logo_url(storage: Optional[Mapping] = None, mode: Optional[str] = None) -> Optional[str]:
    """Pick the logo for the current display mode.

    A per-mode override from ``storage`` wins, otherwise the cached remote
    value is used.
    """

    mode = mode if mode in ThemeMode.values else read_theme_mode(storage)
    return read_mode_logo(storage, mode) or load_logo_url()
