# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink high-level client.

Wraps a PJLinkSession with the initial status queries and convenience
commands for common projector operations.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import PJLinkError
from ..pkg_logging import logger
from ..protocol import (
    PJLinkCommand,
    ParameterKey,
    POWER_KEY,
    power_status_map,
    static_query_commands,
  )

from .client_config import PJLinkClientConfig
from .connector import PJLinkConnector
from .status_store import StatusStore, StatusListener
from .session import (
    PJLinkSession,
    SessionState,
    ConnectionStateCallback,
  )

class PJLinkClient:
    """PJLink TCP/IP client."""

    session: PJLinkSession

    def __init__(
            self,
            session: Optional[PJLinkSession]=None,
            config: Optional[PJLinkClientConfig]=None,
            connector: Optional[PJLinkConnector]=None,
            on_status_changed: Optional[StatusListener]=None,
            on_connection_state_changed: Optional[ConnectionStateCallback]=None,
          ):
        if session is None:
            session = PJLinkSession(
                config=config,
                connector=connector,
                on_status_changed=on_status_changed,
                on_connection_state_changed=on_connection_state_changed,
              )
        else:
            if on_status_changed is not None:
                session.store.add_listener(on_status_changed)
            if on_connection_state_changed is not None:
                session.on_connection_state_changed = on_connection_state_changed
        self.session = session

    @property
    def store(self) -> StatusStore:
        return self.session.store

    @property
    def config(self) -> PJLinkClientConfig:
        return self.session.config

    @property
    def state(self) -> SessionState:
        return self.session.state

    def request_command(self, command: Union[PJLinkCommand, str]) -> None:
        """Sends a raw PJLink command such as '%1POWR 1'. Fire-and-forget."""
        self.session.request_command(command)

    def start(self) -> None:
        """Queries the static projector information followed by the full status poll set.

        The first command opens the connection; the rest are queued behind it.
        """
        for command in static_query_commands():
            self.request_command(command)
        self.refresh()

    def refresh(self) -> None:
        """Queries every status parameter that is polled periodically."""
        for command in self.session.poll_commands():
            self.request_command(command)

    def get_status(self, key: ParameterKey) -> Optional[str]:
        """Returns the last known value of a parameter, or None if it has not been reported."""
        return self.store.get(key)

    @property
    def status(self) -> Dict[ParameterKey, Optional[str]]:
        return self.store.snapshot()

    def power_state_str(self) -> Optional[str]:
        """Returns the friendly power state ("Standby", "On", "Cooling", "Warming"), if known."""
        value = self.store.get(POWER_KEY)
        if value is None:
            return None
        return power_status_map.get(value, f"Unknown ({value})")

    def power_on(self) -> None:
        self.request_command(PJLinkCommand.set("POWR", "1"))

    def power_off(self) -> None:
        self.request_command(PJLinkCommand.set("POWR", "0"))

    def toggle_power(self) -> bool:
        """Switches power based on the last reported power state.

        Only acts when the projector is known to be on or in standby; while warming,
        cooling or unknown, nothing is sent and False is returned.
        """
        value = self.store.get(POWER_KEY)
        if value == "1":
            self.power_off()
        elif value == "0":
            self.power_on()
        else:
            logger.debug(f"{self}: Not toggling power; power state is {value!r}")
            return False
        return True

    def open_shutter(self) -> None:
        self.request_command(PJLinkCommand.set("AVMT", "30"))

    def close_shutter(self) -> None:
        self.request_command(PJLinkCommand.set("AVMT", "31"))

    def freeze(self) -> None:
        """Freezes the picture. Class 2 only."""
        self.request_command(PJLinkCommand.set("FREZ", "1", pjlink_class=2))

    def unfreeze(self) -> None:
        """Unfreezes the picture. Class 2 only."""
        self.request_command(PJLinkCommand.set("FREZ", "0", pjlink_class=2))

    def select_input(self, input_id: str) -> None:
        """Switches input, e.g. select_input("32"). See input_choice_map for common values."""
        if len(input_id) != 2 or not input_id.isalnum():
            raise PJLinkError(f"Invalid PJLink input id: {input_id!r}")
        self.request_command(PJLinkCommand.set("INPT", input_id))

    def update_credentials(self, password: Optional[str]) -> None:
        self.session.update_credentials(password)

    async def _async_dispose(self) -> None:
        await self.session.aclose()

    async def __aenter__(self) -> PJLinkClient:
        logger.debug(f"{self}: Entering async context manager")
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType]
          ) -> None:
        logger.debug(f"{self}: Exiting async context manager, exc={exc_val}")
        await self._async_dispose()

    @classmethod
    async def create(
            cls,
            host: Optional[str]=None,
            password: Optional[str]=None,
            port: Optional[int]=None,
            config: Optional[PJLinkClientConfig]=None,
            on_status_changed: Optional[StatusListener]=None,
            on_connection_state_changed: Optional[ConnectionStateCallback]=None,
          ) -> Self:
        """Creates a client and starts the initial status queries.

        Must be called from a running event loop. Connection failures are not
        raised here; they are reported through on_connection_state_changed.
        """
        config = PJLinkClientConfig(
            default_host=host,
            password=password,
            default_port=port,
            base_config=config,
          )
        self = cls(
            config=config,
            on_status_changed=on_status_changed,
            on_connection_state_changed=on_connection_state_changed,
          )
        try:
            self.start()
        except BaseException:
            await self.aclose()
            raise
        return self

    def __str__(self) -> str:
        return f"PJLinkClient(session={self.session})"

    def __repr__(self) -> str:
       return str(self)

    async def aclose(self) -> None:
       await self._async_dispose()
