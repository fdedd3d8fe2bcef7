"""Tests for classification of received lines."""

import pytest

from pjlink_client.protocol import ResponseKind, parse_response_line


@pytest.mark.parametrize("line,kind", [
    ("PJLINK ERRA", ResponseKind.AUTH_REJECTED),
    ("PJLINK 0", ResponseKind.NO_AUTH),
    ("PJLINK 1 498e4a67", ResponseKind.AUTH_CHALLENGE),
    ("%1POWR=OK", ResponseKind.ACK),
    ("%2FREZ=OK", ResponseKind.ACK),
    ("%1POWR=ERR3", ResponseKind.ERROR),
    ("%1INPT=ERR2", ResponseKind.ERROR),
    ("%1POWR=1", ResponseKind.STATUS),
    ("%1INF1=Acme", ResponseKind.STATUS),
    ("%2SNUM=AB1234", ResponseKind.STATUS),
    ("%1NAME=", ResponseKind.STATUS),
    ("", ResponseKind.UNKNOWN),
    ("hello", ResponseKind.UNKNOWN),
    ("%3XXXX=1", ResponseKind.UNKNOWN),
    ("PJLINK 1", ResponseKind.UNKNOWN),
])
def test_classification(line, kind):
    assert parse_response_line(line).kind == kind


def test_challenge_nonce():
    response = parse_response_line("PJLINK 1 498e4a67")
    assert response.nonce == "498e4a67"
    assert response.is_greeting


def test_status_key_and_value():
    response = parse_response_line("%1LAMP=1200 1")
    assert response.key == "%1LAMP"
    assert response.value == "1200 1"
    assert response.pjlink_class == 1
    assert not response.is_greeting


def test_error_description():
    response = parse_response_line("%1POWR=ERR3")
    assert response.key == "%1POWR"
    assert response.value == "ERR3"
    assert response.error_description() == "unavailable time"
    assert parse_response_line("%1POWR=1").error_description() is None


def test_name_starting_with_err_is_status():
    response = parse_response_line("%1NAME=ERRATIC")
    assert response.kind == ResponseKind.STATUS
    assert response.value == "ERRATIC"


def test_leading_linefeed_is_ignored():
    response = parse_response_line("\n%1POWR=0")
    assert response.kind == ResponseKind.STATUS
    assert response.key == "%1POWR"
