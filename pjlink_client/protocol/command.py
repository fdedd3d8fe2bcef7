# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import re

from ..internal_types import *
from ..exceptions import PJLinkCommandError
from ..constants import DEFAULT_ENCODING
from .constants import (
    COMMAND_HEADER,
    PARAM_SEPARATOR,
    QUERY_PARAM,
    END_OF_LINE,
  )
from .command_meta import parameter_label

COMMAND_RE = re.compile(r'^%[1-2][a-zA-Z0-9]{4}( .*)?$')

class PJLinkCommand:
    """A command to a PJLink projector

    Raw commands are of the form:

        %<class><CODE>[ <param>]

    and are written to the projector as

        [<auth_digest>]%<class><CODE>[ <param>]\\r

    Commands are opaque to the session; the reply, if any, arrives later as a
    separate line keyed by %<class><CODE>.
    """
    text: str

    def __init__(self, text: str):
        if text.endswith(END_OF_LINE):
            text = text[:-1]
        if '\r' in text or '\n' in text:
            raise PJLinkCommandError(f"PJLink command may not contain line terminators: {text!r}")
        if not COMMAND_RE.match(text):
            raise PJLinkCommandError(f"Invalid PJLink command: {text!r}")
        self.text = text

    @property
    def key(self) -> str:
        """The parameter the projector will key its reply by, e.g. '%1POWR'"""
        return self.text[:6]

    @property
    def code(self) -> str:
        """The four character command code, e.g. 'POWR'"""
        return self.text[2:6]

    @property
    def pjlink_class(self) -> int:
        return int(self.text[1])

    @property
    def param(self) -> str:
        """The parameter following the separator; '' if there is none"""
        return self.text[7:]

    @property
    def is_query(self) -> bool:
        """True iff this is a get command (parameter starts with '?')"""
        return self.param.startswith(QUERY_PARAM)

    @property
    def label(self) -> str:
        return parameter_label(self.key)

    def to_wire(self, auth_prefix: str='', encoding: str=DEFAULT_ENCODING) -> bytes:
        """Returns the raw bytes to write, including the auth digest and terminating CR."""
        return (auth_prefix + self.text + END_OF_LINE).encode(encoding)

    @classmethod
    def query(cls, code: str, pjlink_class: int=1, param: str='') -> Self:
        """Creates a get command, e.g. query('POWR') -> '%1POWR ?'"""
        return cls(f"{COMMAND_HEADER}{pjlink_class}{code.upper()}{PARAM_SEPARATOR}{QUERY_PARAM}{param}")

    @classmethod
    def set(cls, code: str, param: str, pjlink_class: int=1) -> Self:
        """Creates a set command, e.g. set('POWR', '1') -> '%1POWR 1'"""
        return cls(f"{COMMAND_HEADER}{pjlink_class}{code.upper()}{PARAM_SEPARATOR}{param}")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PJLinkCommand):
            return self.text == other.text
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"PJLinkCommand({self.text!r})"

def format_command(command: Union[PJLinkCommand, str], auth_prefix: str='', encoding: str=DEFAULT_ENCODING) -> bytes:
    """Returns the raw bytes for a command string, validating it first."""
    if not isinstance(command, PJLinkCommand):
        command = PJLinkCommand(command)
    return command.to_wire(auth_prefix, encoding=encoding)
