"""Storefront session identity.

Every anonymous visitor gets an opaque session id that scopes their cart and
orders. The id lives in client-local storage: the Django session in
production, any mutable mapping in tests. Outside a client context (no
storage) the sentinel ``"server"`` is returned and nothing is persisted.
"""

import logging
import random
import time
import uuid
from typing import MutableMapping, Optional

SESSION_STORAGE_KEY = "tastyprotein_session_id"
SESSION_HEADER = "X-Session-Id"
SERVER_SESSION_ID = "server"

# Stored values at or below this length are treated as corrupt and replaced.
MIN_SESSION_ID_LENGTH = 11
# Matches the session_id columns on carts and orders.
MAX_SESSION_ID_LENGTH = 64

logger = logging.getLogger("storefront.session")


def is_plausible_session_id(value) -> bool:
    return isinstance(value, str) and MIN_SESSION_ID_LENGTH <= len(value) <= MAX_SESSION_ID_LENGTH


def is_cart_session(value) -> bool:
    """Return True when ``value`` may own a cart (plausible and not the sentinel)."""

    return is_plausible_session_id(value) and value != SERVER_SESSION_ID


def _fallback_session_id() -> str:
    millis = int(time.time() * 1000)
    return f"sess_{millis}_{random.getrandbits(48):012x}"


def generate_session_id() -> str:
    """Return a new random id, preferring a UUID4 from the OS entropy source."""

    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        return _fallback_session_id()


def get_session_id(storage: Optional[MutableMapping] = None) -> str:
    """Return the stable session id for the client owning ``storage``.

    Reuses a plausible stored value, otherwise generates and persists a new
    one. Storage failures never propagate: the caller gets an ephemeral id
    that is not persisted.
    """

    if storage is None:
        return SERVER_SESSION_ID
    try:
        existing = storage.get(SESSION_STORAGE_KEY)
        if is_plausible_session_id(existing):
            return existing
        session_id = generate_session_id()
        storage[SESSION_STORAGE_KEY] = session_id
        return session_id
    except Exception:
        logger.warning(
            "session.storage_unavailable",
            extra={"event": "session.storage_unavailable"},
            exc_info=True,
        )
        return _fallback_session_id()


def resolve_session_id(request) -> str:
    """Session id for an API request.

    An explicit ``X-Session-Id`` header of at least the minimum length wins;
    otherwise the id is kept in the Django session of the caller. Headers
    longer than ``MAX_SESSION_ID_LENGTH`` are returned as-is so callers
    reject them with ``is_cart_session``.
    """

    header = (request.headers.get(SESSION_HEADER) or "").strip()
    if len(header) >= MIN_SESSION_ID_LENGTH:
        return header
    return get_session_id(getattr(request, "session", None))
