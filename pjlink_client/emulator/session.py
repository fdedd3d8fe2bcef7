# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink projector emulator session.

One instance per client connection accepted by the emulator.
"""

from __future__ import annotations

import asyncio
import secrets

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    LineFramer,
    END_OF_LINE,
    PJLINK_NO_AUTH,
    PJLINK_AUTH,
  )

if TYPE_CHECKING:
    from .emulator_impl import PJLinkProjectorEmulator

class PJLinkProjectorEmulatorSession(asyncio.Protocol):
    emulator: PJLinkProjectorEmulator
    session_id: int = -1
    transport: Optional[asyncio.Transport] = None
    framer: LineFramer
    nonce: Optional[str] = None
    """The challenge sent in the greeting, or None if the emulator has no password."""

    authenticated: bool = False
    closed: bool = False

    def __init__(self, emulator: PJLinkProjectorEmulator):
        self.emulator = emulator
        self.framer = LineFramer()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        assert isinstance(transport, asyncio.Transport)
        self.transport = transport
        self.session_id = self.emulator.register_session(self)
        logger.debug(f"{self}: Connection made")
        if self.emulator.password is None:
            self.authenticated = True
            self.write_line(PJLINK_NO_AUTH)
        else:
            self.nonce = self.emulator.nonce if self.emulator.nonce is not None else secrets.token_hex(4)
            self.write_line(f"{PJLINK_AUTH} {self.nonce}")

    def data_received(self, data: bytes) -> None:
        for line in self.framer.feed(data):
            self.emulator.on_line_received(self, line)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        logger.debug(f"{self}: Connection lost: {exc}")
        self.closed = True
        self.emulator.unregister_session(self.session_id)

    def write_line(self, line: str) -> None:
        """Sends one CR-terminated line to the client."""
        if self.closed or self.transport is None:
            logger.debug(f"{self}: Not writing to closed session: {line!r}")
            return
        logger.debug(f"{self}: > {line}")
        self.transport.write((line + END_OF_LINE).encode('utf-8'))

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            if self.transport is not None:
                self.transport.close()

    def __str__(self) -> str:
        return f"PJLinkProjectorEmulatorSession({self.session_id})"

    def __repr__(self) -> str:
        return str(self)
