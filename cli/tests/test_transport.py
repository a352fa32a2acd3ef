from __future__ import annotations

import ssl

import pytest

from e37_client import ConfigError
from e37_client.transport import build_ssl_context, normalize_url


def test_normalize_url_prepends_http_without_scheme() -> None:
    assert normalize_url("172.38.30.2:8443") == "http://172.38.30.2:8443"


def test_normalize_url_keeps_https() -> None:
    assert normalize_url("https://e37.example.test:8443") == "https://e37.example.test:8443"


def test_normalize_url_strips_trailing_slash() -> None:
    assert normalize_url("http://host:8443/") == "http://host:8443"


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "ftp://host", "http://", "https://:8443", "host:notaport", "http://[::1"],
)
def test_normalize_url_rejects_invalid(raw: str) -> None:
    with pytest.raises(ConfigError):
        normalize_url(raw)


def test_ssl_context_insecure_skips_verification() -> None:
    ctx = build_ssl_context(insecure=True)
    assert ctx.verify_mode == ssl.CERT_NONE
    assert ctx.check_hostname is False
    assert ctx.minimum_version == ssl.TLSVersion.TLSv1_2


def test_ssl_context_secure_verifies() -> None:
    ctx = build_ssl_context(insecure=False)
    assert ctx.verify_mode == ssl.CERT_REQUIRED
    assert ctx.check_hostname is True
    assert ctx.minimum_version == ssl.TLSVersion.TLSv1_2
