# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink client session.

Owns the TCP connection to one projector: connects lazily on the first
command, resolves authentication from the greeting, writes at most one
command at a time, feeds received lines to the response parser and the
status store, and runs the polling loop that drains queued commands,
refreshes status, and drops the connection when it goes idle.

PJLink projectors silently close connections that are idle for a few
seconds, and offer no request/response correlation: a reply is a status
line keyed by parameter, and a command that fails cannot be told apart
from one whose reply is merely late. The session therefore never waits on
individual replies; it only tracks whether a write is outstanding.
"""

from __future__ import annotations

import asyncio
import time
from enum import Enum

from ..internal_types import *
from ..exceptions import PJLinkError, PJLinkAuthError, PJLinkCommandError
from ..constants import READ_CHUNK_SIZE, AUTH_PROBE_COMMAND
from ..pkg_logging import logger
from ..protocol import (
    LineFramer,
    PJLinkCommand,
    PJLinkResponse,
    ResponseKind,
    ParameterKey,
    CLASS_INFO_KEY,
    INPUT_KEY,
    format_command,
    resolve_auth_prefix,
    parse_class_level,
    class2_static_query_commands,
    poll_query_commands,
  )

from .command_queue import CommandQueue
from .status_store import StatusStore, StatusListener
from .client_config import PJLinkClientConfig
from .connector import PJLinkConnector
from .tcp_connector import TcpPJLinkConnector

class SessionState(Enum):
    """Lifecycle state of a session.

    Authentication is not a separate state; it is resolved by the first line
    received while CONNECTING.
    """
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    READY_IDLE = 'ready_idle'
    READY_AWAITING = 'ready_awaiting'
    AUTH_FAILED = 'auth_failed'

    @property
    def is_ready(self) -> bool:
        return self in (SessionState.READY_IDLE, SessionState.READY_AWAITING)

class ConnectionStatus(Enum):
    """Connectivity reported to collaborators through on_connection_state_changed."""
    CONNECTING = 'connecting'
    OK = 'ok'
    DISCONNECTED = 'disconnected'
    TRANSPORT_ERROR = 'transport_error'
    AUTH_ERROR = 'auth_error'

ConnectionStateCallback = Callable[[ConnectionStatus, Optional[str]], None]
"""Called with (status, detail) when connectivity or authentication status changes."""

class Connection:
    """Everything belonging to one TCP connection. Discarded on teardown; a
       reconnect creates a new one."""

    password: Optional[str]
    encoding: str
    framer: LineFramer
    reader: Optional[asyncio.StreamReader] = None
    writer: Optional[asyncio.StreamWriter] = None
    auth_prefix: str = ''
    """Prefixed to every write once the greeting has been resolved."""

    first_command: Optional[str] = None
    """The command that caused the connection to be opened. It is written along
       with the greeting resolution rather than going through the queue."""

    last_activity: float = 0.0
    """time.monotonic() of the last line received or command written."""

    refresh_armed: bool = True
    """True until the status refresh has fired for the current quiet period."""

    io_task: Optional[asyncio.Task[None]] = None
    ticker_task: Optional[asyncio.Task[None]] = None
    closed: bool = False

    def __init__(
            self,
            password: Optional[str]=None,
            encoding: str='utf-8',
            first_command: Optional[str]=None,
          ) -> None:
        self.password = password
        self.encoding = encoding
        self.framer = LineFramer(encoding=encoding)
        self.first_command = first_command

    def touch(self, now: float) -> None:
        """Records activity; re-arms the refresh for the next quiet period."""
        self.last_activity = now
        self.refresh_armed = True

    def close(self) -> None:
        """Closes the socket and cancels the connection's tasks. Does not wait.

        Safe to call from one of the connection's own tasks; that task is
        left to finish on its own.
        """
        if self.closed:
            return
        self.closed = True
        try:
            if self.writer is not None:
                self.writer.close()
        except Exception as e:
            logger.debug("Exception while closing writer", exc_info=True)
        for task in (self.io_task, self.ticker_task):
            if task is not None and not task.done() and task is not asyncio.current_task():
                task.cancel()

    async def wait_closed(self) -> None:
        """Waits for the connection's tasks to finish and the socket to close."""
        tasks = [t for t in (self.io_task, self.ticker_task) if t is not None and t is not asyncio.current_task()]
        if len(tasks) > 0:
            await asyncio.gather(*tasks, return_exceptions=True)
        try:
            if self.writer is not None:
                await self.writer.wait_closed()
        except Exception as e:
            logger.debug("Exception while waiting for writer to close", exc_info=True)

class PJLinkSession:
    """PJLink session state machine for one projector.

        DISCONNECTED --request_command--> CONNECTING --greeting--> READY_IDLE
        READY_IDLE --write--> READY_AWAITING --any reply--> READY_IDLE
        any connected state --socket error/EOF/idle timeout--> DISCONNECTED
        any connected state --PJLINK ERRA--> AUTH_FAILED

    All I/O for the session runs on one event loop; nothing here needs a lock.
    """

    config: PJLinkClientConfig
    connector: PJLinkConnector
    queue: CommandQueue
    store: StatusStore
    state: SessionState = SessionState.DISCONNECTED
    connection: Optional[Connection] = None
    on_connection_state_changed: Optional[ConnectionStateCallback] = None
    closing: bool = False

    def __init__(
            self,
            config: Optional[PJLinkClientConfig]=None,
            connector: Optional[PJLinkConnector]=None,
            store: Optional[StatusStore]=None,
            on_status_changed: Optional[StatusListener]=None,
            on_connection_state_changed: Optional[ConnectionStateCallback]=None,
          ) -> None:
        self.config = PJLinkClientConfig(base_config=config)
        if connector is None:
            connector = TcpPJLinkConnector(config=self.config)
        self.connector = connector
        self.queue = CommandQueue()
        self.store = StatusStore() if store is None else store
        if on_status_changed is not None:
            self.store.add_listener(on_status_changed)
        self.on_connection_state_changed = on_connection_state_changed

    def request_command(self, command: Union[PJLinkCommand, str]) -> None:
        """Queues a command for transmission, connecting first if necessary.

        Fire-and-forget: there is no return value and no way to learn whether
        this particular command succeeded. Replies update the status store.

        Raises PJLinkCommandError if the command string is malformed.
        """
        text = command.text if isinstance(command, PJLinkCommand) else PJLinkCommand(command).text
        if self.closing:
            raise PJLinkError(f"{self}: Session is closed")
        state = self.state
        if state == SessionState.AUTH_FAILED:
            logger.error(f"{self}: Authentication failed; dropping command {text!r} until credentials are updated")
        elif state == SessionState.DISCONNECTED:
            self._start_connection(text)
        elif state == SessionState.READY_IDLE:
            conn = self.connection
            assert conn is not None
            self.queue.enqueue(text)
            self._transmit_next(conn, time.monotonic())
        else:
            self.queue.enqueue(text)

    def connect(self) -> None:
        """Opens a connection without a command to send. No effect unless DISCONNECTED."""
        if self.closing:
            raise PJLinkError(f"{self}: Session is closed")
        if self.state == SessionState.DISCONNECTED:
            self._start_connection(None)

    def update_credentials(self, password: Optional[str]) -> None:
        """Replaces the password used for future connections.

        Clears AUTH_FAILED, so that the next command reconnects.
        """
        self.config.password = password
        if self.state == SessionState.AUTH_FAILED:
            self._set_state(SessionState.DISCONNECTED, ConnectionStatus.DISCONNECTED, "Credentials updated")

    def poll_commands(self) -> List[str]:
        """The full status poll set for what is currently known about the projector.

        Queries built from reported values that don't form a valid command are
        left out.
        """
        result: List[str] = []
        for command in poll_query_commands(self.store.class_level, self.store.get(INPUT_KEY)):
            try:
                PJLinkCommand(command)
            except PJLinkCommandError as e:
                logger.warning(f"{self}: Skipping poll query: {e}")
                continue
            result.append(command)
        return result

    @property
    def is_connected(self) -> bool:
        return self.connection is not None

    @property
    def awaiting_reply(self) -> bool:
        return self.state == SessionState.READY_AWAITING

    def _start_connection(self, first_command: Optional[str]) -> None:
        conn = Connection(
            password=self.config.password,
            encoding=self.config.encoding,
            first_command=first_command,
          )
        self.queue.clear()
        self.connection = conn
        self._set_state(SessionState.CONNECTING, ConnectionStatus.CONNECTING, "Connecting")
        conn.io_task = asyncio.get_running_loop().create_task(self._run_connection(conn))

    async def _run_connection(self, conn: Connection) -> None:
        """Opens the socket, then reads and dispatches lines until the connection ends."""
        try:
            reader, writer = await self.connector.open()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"{self}: Network error: {e}")
            self._teardown(conn, SessionState.DISCONNECTED, ConnectionStatus.TRANSPORT_ERROR, str(e))
            return
        if conn is not self.connection:
            # torn down while connecting
            writer.close()
            return
        conn.reader = reader
        conn.writer = writer
        self.on_connected(conn, time.monotonic())
        conn.ticker_task = asyncio.get_running_loop().create_task(self._run_ticker(conn))
        try:
            while conn is self.connection:
                chunk = await reader.read(READ_CHUNK_SIZE)
                if len(chunk) == 0:
                    logger.debug(f"{self}: Disconnected")
                    self._teardown(conn, SessionState.DISCONNECTED, ConnectionStatus.DISCONNECTED, "Connection closed by projector")
                    break
                for line in conn.framer.feed(chunk):
                    self.handle_line(conn, line, time.monotonic())
                    if conn is not self.connection:
                        break
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"{self}: Network error: {e}")
            self._teardown(conn, SessionState.DISCONNECTED, ConnectionStatus.TRANSPORT_ERROR, str(e))

    async def _run_ticker(self, conn: Connection) -> None:
        """Runs on_tick every poll interval for as long as the connection lasts."""
        while conn is self.connection:
            await asyncio.sleep(self.config.poll_interval_secs)
            if conn is not self.connection:
                break
            try:
                self.on_tick(conn, time.monotonic())
            except Exception as e:
                logger.exception(f"{self}: Exception in polling loop; disconnecting: {e}")
                self._teardown(conn, SessionState.DISCONNECTED, ConnectionStatus.TRANSPORT_ERROR, str(e))

    def on_connected(self, conn: Connection, now: float) -> None:
        """Called when the socket is open. The greeting has not arrived yet."""
        conn.framer.reset()
        conn.touch(now)
        logger.debug(f"{self}: Connected to projector")
        self._notify(ConnectionStatus.OK, "Connected")

    def handle_line(self, conn: Connection, line: str, now: float) -> None:
        """Handles one line received from the projector."""
        if conn is not self.connection:
            return
        conn.touch(now)
        logger.debug(f"{self}: < {line}")
        response = PJLinkResponse.parse(line)
        if response.is_greeting:
            self._handle_greeting(conn, response, now)
            return

        if self.state == SessionState.READY_AWAITING:
            # Any reply frees the wire; replies are not matched to commands.
            self._set_state(SessionState.READY_IDLE)

        if response.kind == ResponseKind.ACK:
            logger.debug(f"{self}: Command accepted: {response.key}")
        elif response.kind == ResponseKind.ERROR:
            logger.error(f"{self}: Command Error: {response.line} ({response.error_description()})")
        elif response.kind == ResponseKind.STATUS:
            assert response.key is not None and response.value is not None
            self._apply_status(response.key, response.value)
        else:
            logger.debug(f"{self}: Ignoring unrecognized line: {line!r}")

        if self.state == SessionState.READY_IDLE:
            self._transmit_next(conn, now)

    def _handle_greeting(self, conn: Connection, response: PJLinkResponse, now: float) -> None:
        try:
            prefix = resolve_auth_prefix(response, conn.password)
        except PJLinkAuthError as e:
            logger.error(f"{self}: {e}")
            self._teardown(conn, SessionState.AUTH_FAILED, ConnectionStatus.AUTH_ERROR, "Authentication error")
            return
        if self.state != SessionState.CONNECTING:
            logger.warning(f"{self}: Ignoring unexpected greeting: {response.line!r}")
            return
        conn.auth_prefix = prefix
        if response.kind == ResponseKind.NO_AUTH:
            logger.debug(f"{self}: Projector does not need password")
        elif conn.password is None or conn.password == '':
            logger.warning(f"{self}: Projector requires a password, but none is configured")
        logger.info(f"Handshake: {self} connected")
        self._set_state(SessionState.READY_IDLE)
        first_command = conn.first_command
        conn.first_command = None
        if first_command is not None:
            self._transmit(conn, first_command, now)
        elif not self._transmit_next(conn, now) and response.kind == ResponseKind.AUTH_CHALLENGE:
            # The projector only checks the digest when it arrives with a command
            self._transmit(conn, AUTH_PROBE_COMMAND, now)

    def _apply_status(self, key: ParameterKey, value: str) -> None:
        self.store.set(key, value)
        if key == CLASS_INFO_KEY and parse_class_level(value) >= 2 and self.store.expand_to_class2():
            logger.info(f"{self}: Projector supports PJLink class {value}")
            for command in class2_static_query_commands():
                self.request_command(command)

    def on_tick(self, conn: Connection, now: float) -> None:
        """One tick of the polling loop."""
        if conn is not self.connection:
            return
        if self.drain_tick(conn, now):
            return
        self.liveness_tick(conn, now)

    def drain_tick(self, conn: Connection, now: float) -> bool:
        """Transmits the head of the queue if nothing is in flight.

        Returns True if a command was transmitted, in which case the rest of the
        tick is skipped.
        """
        if self.state != SessionState.READY_IDLE:
            return False
        return self._transmit_next(conn, now)

    def liveness_tick(self, conn: Connection, now: float) -> None:
        """Refreshes status after a quiet period, and disconnects after a long one."""
        elapsed = now - conn.last_activity
        if self.state == SessionState.READY_IDLE and conn.refresh_armed and elapsed > self.config.refresh_secs:
            conn.refresh_armed = False
            logger.debug(f"{self}: No activity for {elapsed:.1f} seconds; refreshing status")
            for command in self.poll_commands():
                self.queue.enqueue(command)
        if elapsed > self.config.idle_disconnect_secs:
            logger.debug(f"{self}: No activity for {elapsed:.1f} seconds; disconnecting per protocol definition")
            self._teardown(conn, SessionState.DISCONNECTED, ConnectionStatus.DISCONNECTED, "Idle timeout")

    def _transmit(self, conn: Connection, command: str, now: float) -> None:
        assert conn.writer is not None
        logger.debug(f"{self}: > {command}")
        data = format_command(command, conn.auth_prefix, encoding=conn.encoding)
        try:
            conn.writer.write(data)
        except Exception as e:
            logger.error(f"{self}: Network error while writing: {e}")
            self._teardown(conn, SessionState.DISCONNECTED, ConnectionStatus.TRANSPORT_ERROR, str(e))
            return
        conn.touch(now)
        self._set_state(SessionState.READY_AWAITING)

    def _transmit_next(self, conn: Connection, now: float) -> bool:
        """Transmits the head of the queue, if any. Returns True if a command was transmitted."""
        command = self.queue.dequeue_next()
        if command is None:
            return False
        self._transmit(conn, command, now)
        return True

    def _teardown(
            self,
            conn: Connection,
            state: SessionState,
            status: ConnectionStatus,
            detail: Optional[str]=None,
          ) -> None:
        """Discards the connection and its queued commands. No effect if conn is already gone."""
        if conn is not self.connection:
            return
        self.connection = None
        n = self.queue.clear()
        if n > 0:
            logger.debug(f"{self}: Discarded {n} queued commands")
        conn.close()
        self._set_state(state, status, detail)

    def _set_state(
            self,
            state: SessionState,
            status: Optional[ConnectionStatus]=None,
            detail: Optional[str]=None,
          ) -> None:
        if state != self.state:
            logger.debug(f"{self}: {self.state.value} -> {state.value}")
            self.state = state
        if status is not None:
            self._notify(status, detail)

    def _notify(self, status: ConnectionStatus, detail: Optional[str]) -> None:
        if self.on_connection_state_changed is not None:
            try:
                self.on_connection_state_changed(status, detail)
            except Exception as e:
                logger.exception(f"{self}: Connection state callback raised an exception: {e}")

    async def aclose(self) -> None:
        """Closes any open connection, discarding queued commands, and waits for cleanup.
           The session cannot be used afterwards."""
        self.closing = True
        conn = self.connection
        if conn is not None:
            self._teardown(conn, SessionState.DISCONNECTED, ConnectionStatus.DISCONNECTED, "Closed")
            await conn.wait_closed()

    async def __aenter__(self) -> PJLinkSession:
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType],
          ) -> None:
        await self.aclose()

    def __str__(self) -> str:
        return f"PJLinkSession({self.connector})"

    def __repr__(self) -> str:
        return str(self)
