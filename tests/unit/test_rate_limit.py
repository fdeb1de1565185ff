"""Tests for the rate limit key."""

from unittest.mock import MagicMock

import pytest

from src.rosterhub.core.config import get_settings
from src.rosterhub.core.rate_limit import get_client_ip, get_rate_limit_key, limiter

pytestmark = pytest.mark.unit

PROXY = "10.0.0.2"


@pytest.fixture
def trusted_proxy(monkeypatch):
    monkeypatch.setattr(get_settings(), "trusted_proxy_ips", [PROXY])


def make_request(client_host: str | None, forwarded_for: str | None = None) -> MagicMock:
    request = MagicMock()
    request.client = MagicMock(host=client_host) if client_host else None
    request.headers = {"x-forwarded-for": forwarded_for} if forwarded_for else {}
    return request


def test_direct_connection_uses_peer_address():
    assert get_client_ip(None, "203.0.113.7") == "203.0.113.7"


def test_forwarded_header_ignored_from_untrusted_peer():
    assert get_client_ip("198.51.100.1", "203.0.113.7") == "203.0.113.7"


def test_forwarded_header_honoured_from_trusted_proxy(trusted_proxy):
    assert get_client_ip("198.51.100.1, 10.0.0.1", PROXY) == "198.51.100.1"


def test_key_from_request(trusted_proxy):
    assert get_rate_limit_key(make_request(PROXY, "198.51.100.1")) == "198.51.100.1"
    assert get_rate_limit_key(make_request("203.0.113.7", "198.51.100.1")) == "203.0.113.7"


def test_limiter_disabled_in_testing():
    assert limiter.enabled is False
