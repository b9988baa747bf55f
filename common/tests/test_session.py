import uuid
from unittest.mock import patch

import pytest
from common.session import (
    MAX_SESSION_ID_LENGTH,
    SERVER_SESSION_ID,
    SESSION_STORAGE_KEY,
    generate_session_id,
    get_session_id,
    is_cart_session,
    resolve_session_id,
)
from django.test import RequestFactory


class BrokenStorage(dict):
    def get(self, key, default=None):
        raise OSError("storage disabled")


class ReadOnlyStorage(dict):
    def __setitem__(self, key, value):
        raise PermissionError("quota exceeded")


def test_server_context_returns_sentinel_without_persisting():
    assert get_session_id(None) == SERVER_SESSION_ID


def test_generates_and_persists_uuid():
    storage = {}

    session_id = get_session_id(storage)

    assert storage[SESSION_STORAGE_KEY] == session_id
    assert str(uuid.UUID(session_id)) == session_id


def test_reuses_existing_plausible_value():
    storage = {SESSION_STORAGE_KEY: "sess_already_here"}

    assert get_session_id(storage) == "sess_already_here"
    assert get_session_id(storage) == "sess_already_here"


@pytest.mark.parametrize("stored", ["", "short", "0123456789", "s" * 65, 12345678901, None])
def test_replaces_implausible_values(stored):
    storage = {SESSION_STORAGE_KEY: stored}

    session_id = get_session_id(storage)

    assert session_id != stored
    assert len(session_id) > 10
    assert storage[SESSION_STORAGE_KEY] == session_id


def test_repeated_calls_are_stable():
    storage = {}

    assert get_session_id(storage) == get_session_id(storage)


@pytest.mark.parametrize("storage", [BrokenStorage(), ReadOnlyStorage()])
def test_storage_failure_returns_ephemeral_id(storage):
    session_id = get_session_id(storage)

    assert session_id.startswith("sess_")
    assert is_cart_session(session_id)
    assert SESSION_STORAGE_KEY not in storage


def test_fallback_id_when_secure_random_is_unavailable():
    with patch("common.session.uuid.uuid4", side_effect=NotImplementedError):
        session_id = generate_session_id()

    assert session_id.startswith("sess_")
    assert len(session_id) > 10


def test_sentinel_is_not_a_cart_session():
    assert not is_cart_session(SERVER_SESSION_ID)
    assert not is_cart_session(None)
    assert is_cart_session("sess_1700000000000_abc123")


def test_resolve_prefers_plausible_header():
    request = RequestFactory().get("/", HTTP_X_SESSION_ID="header-session-0001")
    request.session = {}

    assert resolve_session_id(request) == "header-session-0001"
    assert request.session == {}


def test_resolve_falls_back_to_request_session():
    request = RequestFactory().get("/", HTTP_X_SESSION_ID="tiny")
    request.session = {}

    session_id = resolve_session_id(request)

    assert request.session[SESSION_STORAGE_KEY] == session_id


def test_ids_longer_than_the_column_are_not_cart_sessions():
    assert is_cart_session("s" * MAX_SESSION_ID_LENGTH)
    assert not is_cart_session("s" * (MAX_SESSION_ID_LENGTH + 1))


def test_resolve_returns_over_long_header_for_rejection():
    request = RequestFactory().get("/", HTTP_X_SESSION_ID="s" * 65)
    request.session = {}

    assert not is_cart_session(resolve_session_id(request))
    assert request.session == {}
