# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import hashlib

from ..internal_types import *
from ..exceptions import PJLinkAuthError, PJLinkProtocolError
from .response import PJLinkResponse, ResponseKind

# Initial connection handshake:
#   Projector: "PJLINK 0" if no password is set, or "PJLINK 1 <nonce>" if a password is set
#   Client: <command>, or md5(<nonce> + <password>) + <command> if challenged
#   Projector: "PJLINK ERRA" if the digest is wrong, otherwise the reply to <command>
#   <Normal command/response session continues; the digest prefixes every command>

PJLINK_NO_AUTH = "PJLINK 0"
"""Sent by the projector immediately on connecting when no password is set."""

PJLINK_AUTH = "PJLINK 1"
"""Sent by the projector immediately on connecting when a password is set, followed by
   a space and a random nonce."""

PJLINK_ERRA = "PJLINK ERRA"
"""Sent by the projector when the digest accompanying a command is wrong. The projector
   closes the connection afterwards."""

def compute_auth_prefix(nonce: str, password: Optional[str]) -> str:
    """Returns the lowercase hex MD5 digest of nonce + password.

    A password of None is treated as empty; the projector will then reject
    the digest unless it really has an empty password.
    """
    digest_input = nonce + ('' if password is None else password)
    return hashlib.md5(digest_input.encode('utf-8')).hexdigest()

def resolve_auth_prefix(greeting: Union[PJLinkResponse, str], password: Optional[str]) -> str:
    """Determines the prefix that must precede every command written on this connection.

    Returns '' if the projector does not require authentication, or the digest
    of the challenge nonce and password.

    Raises PJLinkAuthError if the greeting is an authentication rejection, and
    PJLinkProtocolError if it is not a greeting at all.
    """
    if isinstance(greeting, str):
        greeting = PJLinkResponse.parse(greeting)
    if greeting.kind == ResponseKind.AUTH_REJECTED:
        raise PJLinkAuthError("Authentication error. Password not accepted by projector")
    if greeting.kind == ResponseKind.NO_AUTH:
        return ''
    if greeting.kind == ResponseKind.AUTH_CHALLENGE:
        assert greeting.nonce is not None
        return compute_auth_prefix(greeting.nonce, password)
    raise PJLinkProtocolError(f"Handshake: Expected PJLINK greeting, got: {greeting.line!r}")
