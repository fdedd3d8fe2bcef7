# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink projector emulator.

Provides a simple emulation of a PJLink projector on TCP/IP.
"""

from __future__ import annotations

import asyncio
import re

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    AUTH_DIGEST_LENGTH,
    PJLINK_ERRA,
    compute_auth_prefix,
  )
from ..constants import DEFAULT_PORT
from ..exceptions import PJLinkError

from .session import PJLinkProjectorEmulatorSession

EMULATED_COMMAND_RE = re.compile(r'^%([1-2])([A-Z0-9]{4}) (.*)$')
HEX_DIGEST_RE = re.compile(r'^[0-9a-f]{32}%')

default_class1_values: Dict[str, str] = {
    "%1POWR": "0",
    "%1INPT": "31",
    "%1AVMT": "30",
    "%1ERST": "000000",
    "%1LAMP": "1200 1",
    "%1INST": "11 12 31 32",
    "%1NAME": "Emulated Projector",
    "%1INF1": "PJLINK",
    "%1INF2": "EMULATOR",
    "%1INFO": "pjlink_client emulator",
  }

default_class2_values: Dict[str, str] = {
    "%2SNUM": "EMU0000001",
    "%2SVER": "1.0.0",
    "%2IRES": "1920x1080",
    "%2RRES": "1920x1080",
    "%2FILT": "100",
    "%2RLMP": "LMP-EMU",
    "%2RFIL": "FLT-EMU",
    "%2FREZ": "0",
  }

default_input_names: Dict[str, str] = {
    "11": "RGB 1",
    "12": "RGB 2",
    "31": "DVI-D",
    "32": "HDMI",
  }

settable_values: Dict[str, Tuple[str, ...]] = {
    "%1POWR": ("0", "1"),
    "%1AVMT": ("10", "11", "20", "21", "30", "31"),
    "%2FREZ": ("0", "1"),
  }
"""Parameters the emulator accepts set commands for, and their valid values.
   %1INPT is also settable, to any input in %1INST."""

class PJLinkProjectorEmulator(AsyncContextManager['PJLinkProjectorEmulator']):
    password: Optional[str]
    nonce: Optional[str]
    """Fixed challenge nonce; if None, a random nonce is used per connection."""

    pjlink_class: int
    silent: bool
    """If True, commands are recorded but never answered."""

    bind_addr: str
    port: int
    values: Dict[str, str]
    input_names: Dict[str, str]
    received_lines: List[str]
    """Every line received from any client, exactly as received (including digests)."""

    commands: List[str]
    """Every accepted command, with the digest removed."""

    sessions: Dict[int, PJLinkProjectorEmulatorSession]
    connection_count: int = 0
    requests: asyncio.Queue[Optional[Tuple[PJLinkProjectorEmulatorSession, str]]]
    server: Optional[asyncio.Server] = None
    handler_task: Optional[asyncio.Task[None]] = None
    stopped: bool = False

    def __init__(
            self,
            password: Optional[str] = None,
            bind_addr: Optional[str] = None,
            port: int = DEFAULT_PORT,
            pjlink_class: int = 1,
            silent: bool = False,
            nonce: Optional[str] = None,
          ):
        if pjlink_class not in (1, 2):
            raise PJLinkError(f"Unsupported PJLink class {pjlink_class}")
        self.password = password
        self.nonce = nonce
        self.pjlink_class = pjlink_class
        self.silent = silent
        self.bind_addr = '127.0.0.1' if bind_addr is None else bind_addr
        self.port = port
        self.values = dict(default_class1_values)
        self.values["%1CLSS"] = str(pjlink_class)
        if pjlink_class >= 2:
            self.values.update(default_class2_values)
        self.input_names = dict(default_input_names)
        self.received_lines = []
        self.commands = []
        self.sessions = {}
        self.requests = asyncio.Queue()

    def register_session(self, session: PJLinkProjectorEmulatorSession) -> int:
        """Tracks a newly accepted connection and returns its id."""
        session_id = self.connection_count
        self.connection_count += 1
        self.sessions[session_id] = session
        return session_id

    def unregister_session(self, session_id: int) -> None:
        self.sessions.pop(session_id, None)

    def on_line_received(self, session: PJLinkProjectorEmulatorSession, line: str) -> None:
        """Called when a line is received from a session."""
        self.received_lines.append(line)
        self.requests.put_nowait((session, line))

    def strip_auth(self, session: PJLinkProjectorEmulatorSession, line: str) -> Optional[str]:
        """Verifies and removes the auth digest. Returns None if authentication fails.

        The first command after a challenge must carry the digest. Later commands
        may omit it, but a wrong digest is always rejected.
        """
        if session.nonce is None:
            return line
        expected = compute_auth_prefix(session.nonce, self.password)
        if line.startswith(expected):
            session.authenticated = True
            return line[AUTH_DIGEST_LENGTH:]
        if not session.authenticated or HEX_DIGEST_RE.match(line):
            return None
        return line

    def handle_command(self, session: PJLinkProjectorEmulatorSession, command: str) -> Optional[str]:
        """Handles a single command, and returns the response line, if any."""
        m = EMULATED_COMMAND_RE.match(command)
        if m is None:
            logger.debug(f"{session}: Ignoring malformed command {command!r}")
            return None
        pjlink_class, code, param = int(m.group(1)), m.group(2), m.group(3)
        key = f"%{pjlink_class}{code}"
        if pjlink_class > self.pjlink_class:
            return f"{key}=ERR1"
        if param.startswith('?'):
            if key == "%2INNM":
                name = self.input_names.get(param[1:])
                return f"{key}=ERR2" if name is None else f"{key}={name}"
            value = self.values.get(key)
            return f"{key}=ERR1" if value is None else f"{key}={value}"
        if key == "%1INPT":
            if not param in self.values["%1INST"].split():
                return f"{key}=ERR2"
        elif key in settable_values:
            if not param in settable_values[key]:
                return f"{key}=ERR2"
        else:
            return f"{key}=ERR1"
        self.values[key] = param
        return f"{key}=OK"

    def handle_request_line(self, session: PJLinkProjectorEmulatorSession, line: str) -> None:
        command = self.strip_auth(session, line)
        if command is None:
            logger.debug(f"{session}: Authentication failed; hanging up")
            session.write_line(PJLINK_ERRA)
            session.close()
            return
        self.commands.append(command)
        logger.debug(f"{session}: Received command: {command}")
        if self.silent:
            return
        response = self.handle_command(session, command)
        if response is not None:
            session.write_line(response)

    async def handle_requests(self) -> None:
        """Serves queued lines in arrival order until the stop sentinel is queued."""
        while True:
            item = await self.requests.get()
            try:
                if item is None:
                    logger.debug(f"{self}: Request handler stopping")
                    return
                session, line = item
                if session.closed:
                    continue
                try:
                    self.handle_request_line(session, line)
                except Exception as e:
                    logger.exception(f"{session}: Failed handling {line!r}; hanging up: {e}")
                    session.close()
            finally:
                self.requests.task_done()

    async def start(self) -> None:
        """Starts listening. If port is 0, an ephemeral port is chosen and stored in self.port."""
        self.handler_task = asyncio.create_task(self.handle_requests())
        try:
            self.server = await asyncio.get_running_loop().create_server(
                lambda: PJLinkProjectorEmulatorSession(self),
                host=self.bind_addr,
                port=self.port,
              )
        except BaseException:
            await self.stop()
            raise
        if self.port == 0:
            self.port = self.server.sockets[0].getsockname()[1]
        logger.debug(f"{self}: Listening")

    def disconnect_all(self) -> None:
        """Hangs up every connected client, as a projector does when it times out a session."""
        for session in list(self.sessions.values()):
            session.close()

    async def stop(self) -> None:
        """Hangs up all clients, stops listening and waits for the request handler to exit."""
        if self.stopped:
            return
        self.stopped = True
        server = self.server
        self.server = None
        if server is not None:
            server.close()
        self.disconnect_all()
        self.requests.put_nowait(None)
        if server is not None:
            await server.wait_closed()
        handler_task = self.handler_task
        self.handler_task = None
        if handler_task is not None:
            await handler_task

    async def __aenter__(self) -> PJLinkProjectorEmulator:
        await self.start()
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        await self.stop()

    def __str__(self) -> str:
        return f"PJLinkProjectorEmulator({self.bind_addr}:{self.port})"

    def __repr__(self) -> str:
        return str(self)
