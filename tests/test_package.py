"""Tests for the package's public surface."""

import pjlink_client
import pjlink_client.protocol as protocol


def test_public_names():
    for name in ("PJLinkClient", "PJLinkSession", "PJLinkClientConfig", "pjlink_connect",
                 "PJLinkError", "LineFramer", "compute_auth_prefix", "__version__"):
        assert hasattr(pjlink_client, name), name
    assert not hasattr(pjlink_client, "Jsonable")
    assert not hasattr(pjlink_client, "JsonableDict")


def test_protocol_exports_handshake():
    assert protocol.PJLINK_NO_AUTH == "PJLINK 0"
    assert protocol.PJLINK_AUTH == "PJLINK 1"
    assert protocol.PJLINK_ERRA == "PJLINK ERRA"
    assert callable(protocol.resolve_auth_prefix)
