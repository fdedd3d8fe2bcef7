# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import re
from enum import Enum

from ..internal_types import *
from .command_meta import error_code_map

class ResponseKind(Enum):
    """Classification of a single line received from the projector."""
    AUTH_REJECTED = 'auth_rejected'
    NO_AUTH = 'no_auth'
    AUTH_CHALLENGE = 'auth_challenge'
    ACK = 'ack'
    ERROR = 'error'
    STATUS = 'status'
    UNKNOWN = 'unknown'

AUTH_REJECTED_RE = re.compile(r'^PJLINK ERRA')
NO_AUTH_RE = re.compile(r'^PJLINK 0')
AUTH_CHALLENGE_RE = re.compile(r'^PJLINK 1 (\S+)')
ACK_RE = re.compile(r'^(%[1-2][a-zA-Z0-9]{4})=OK$')
# ERR1-ERR4 and ERRA are the only error codes; a longer value such as 'ERRATIC' is a status.
ERROR_RE = re.compile(r'^(%[1-2][a-zA-Z0-9]{4})=(ERR[0-9A-Z])$')
STATUS_RE = re.compile(r'^(%[1-2][a-zA-Z0-9]{4})=(.*)$')

class PJLinkResponse:
    """A line received from a PJLink projector.

    Lines are one of:

        PJLINK ERRA                 authentication rejected
        PJLINK 0                    greeting, no authentication
        PJLINK 1 <nonce>            greeting, authentication challenge
        %<c><CODE>=OK               acknowledgement of a set command
        %<c><CODE>=ERR<x>           command error
        %<c><CODE>=<value>          status

    Anything else is UNKNOWN and should be ignored, so that parameters added by
    newer firmware do not break older clients.

    Replies are keyed by parameter, not correlated with the command that
    caused them.
    """
    line: str
    kind: ResponseKind
    key: Optional[str] = None
    value: Optional[str] = None
    nonce: Optional[str] = None

    def __init__(
            self,
            line: str,
            kind: ResponseKind,
            key: Optional[str]=None,
            value: Optional[str]=None,
            nonce: Optional[str]=None,
          ):
        self.line = line
        self.kind = kind
        self.key = key
        self.value = value
        self.nonce = nonce

    @classmethod
    def parse(cls, line: str) -> Self:
        """Classifies a single line (without its terminating CR)."""
        # Some firmware terminates lines with CR LF; the LF ends up leading the next line.
        line = line.lstrip('\n')
        if AUTH_REJECTED_RE.match(line):
            return cls(line, ResponseKind.AUTH_REJECTED)
        if NO_AUTH_RE.match(line):
            return cls(line, ResponseKind.NO_AUTH)
        m = AUTH_CHALLENGE_RE.match(line)
        if m:
            return cls(line, ResponseKind.AUTH_CHALLENGE, nonce=m.group(1))
        m = ACK_RE.match(line)
        if m:
            return cls(line, ResponseKind.ACK, key=m.group(1), value='OK')
        m = ERROR_RE.match(line)
        if m:
            return cls(line, ResponseKind.ERROR, key=m.group(1), value=m.group(2))
        m = STATUS_RE.match(line)
        if m:
            return cls(line, ResponseKind.STATUS, key=m.group(1), value=m.group(2))
        return cls(line, ResponseKind.UNKNOWN)

    @property
    def is_greeting(self) -> bool:
        """True iff this line resolves or rejects authentication."""
        return self.kind in (ResponseKind.AUTH_REJECTED, ResponseKind.NO_AUTH, ResponseKind.AUTH_CHALLENGE)

    @property
    def pjlink_class(self) -> Optional[int]:
        """The PJLink class digit of a command response, or None for greetings and unknown lines."""
        if self.key is None:
            return None
        return int(self.key[1])

    def error_description(self) -> Optional[str]:
        """Friendly description of an error response, if any"""
        if self.kind != ResponseKind.ERROR:
            return None
        assert self.value is not None
        return error_code_map.get(self.value, "unknown error")

    def __str__(self) -> str:
        return f"PJLinkResponse({self.kind.value}: {self.line!r})"

    def __repr__(self) -> str:
        return str(self)

def parse_response_line(line: str) -> PJLinkResponse:
    """Classifies a single line received from the projector."""
    return PJLinkResponse.parse(line)
