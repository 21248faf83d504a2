"""Shared fixtures: the RFC 4226 / RFC 6238 reference secrets."""

from __future__ import annotations

import pytest

# RFC 4226 Appendix D and RFC 6238 Appendix B seeds (ASCII bytes)
RFC_SECRET = b"12345678901234567890"
RFC_SECRET_SHA256 = b"12345678901234567890123456789012"
RFC_SECRET_SHA512 = b"1234567890123456789012345678901234567890123456789012345678901234"


@pytest.fixture
def rfc_secret() -> bytes:
    return RFC_SECRET
