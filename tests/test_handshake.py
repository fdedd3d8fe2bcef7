"""Tests for greeting resolution and the MD5 auth prefix."""

import hashlib

import pytest

from pjlink_client import PJLinkAuthError, PJLinkProtocolError
from pjlink_client.protocol import (
    PJLinkResponse,
    compute_auth_prefix,
    resolve_auth_prefix,
)


def test_compute_auth_prefix():
    expected = hashlib.md5(b"abc123secret").hexdigest()
    assert compute_auth_prefix("abc123", "secret") == expected
    assert expected == expected.lower()
    assert len(expected) == 32


def test_compute_auth_prefix_without_password():
    assert compute_auth_prefix("abc123", None) == hashlib.md5(b"abc123").hexdigest()


def test_challenge_greeting():
    prefix = resolve_auth_prefix("PJLINK 1 abc123", "secret")
    assert prefix == hashlib.md5(b"abc123secret").hexdigest()


def test_no_auth_greeting():
    assert resolve_auth_prefix("PJLINK 0", "ignored") == ""
    assert resolve_auth_prefix(PJLinkResponse.parse("PJLINK 0"), None) == ""


def test_rejected_greeting():
    with pytest.raises(PJLinkAuthError):
        resolve_auth_prefix("PJLINK ERRA", "secret")


def test_not_a_greeting():
    with pytest.raises(PJLinkProtocolError):
        resolve_auth_prefix("%1POWR=1", "secret")
