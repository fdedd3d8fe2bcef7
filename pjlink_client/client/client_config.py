# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink client configuration.

Provides the config object shared by the connector, the session and the
high-level client.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import PJLinkError
from ..constants import (
    DEFAULT_PORT,
    DEFAULT_ENCODING,
    CONNECT_TIMEOUT,
    POLL_INTERVAL,
    REFRESH_INTERVAL,
    IDLE_DISCONNECT_TIMEOUT,
  )

class PJLinkClientConfig:
    """PJLink client configuration."""
    default_host: Optional[str]
    default_port: int
    password: Optional[str]
    connect_timeout_secs: float
    poll_interval_secs: float
    refresh_secs: float
    idle_disconnect_secs: float
    encoding: str

    def __init__(
            self,
            default_host: Optional[str]=None,
            password: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            connect_timeout_secs: Optional[float]=None,
            poll_interval_secs: Optional[float]=None,
            refresh_secs: Optional[float]=None,
            idle_disconnect_secs: Optional[float]=None,
            encoding: Optional[str]=None,
            base_config: Optional[PJLinkClientConfig]=None
          ) -> None:
        """Creates a configuration for a PJLink client.

           Args:
             default_host: The hostname or IPV4 address of the projector.
                   may optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, the default host will be taken from the
                     PJLINK_HOST environment variable.
             password:
                   The PJLink password. If None, the password
                   will be taken from the PJLINK_PASSWORD
                   environment variable. If an empty string or the
                   environment variable is not found, no password
                   will be used.
             default_port: The TCP/IP port number to use.
                    If None, the port will be taken from PJLINK_PORT.
                    If that environment variable is not found, the PJLink
                    port (4352) will be used.
             connect_timeout_secs:
                   The timeout for opening the TCP/IP connection, in seconds.
             poll_interval_secs:
                   Seconds between ticks of the session polling loop.
             refresh_secs:
                   Seconds of inactivity after which the full status poll
                   set is re-issued.
             idle_disconnect_secs:
                   Seconds of inactivity after which the session closes the
                   connection itself.
             encoding:
                   Encoding of lines on the wire.
             base_config:
                     An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults()
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if password is not None:
            self.password = password

        if connect_timeout_secs is not None:
            self.connect_timeout_secs = connect_timeout_secs

        if poll_interval_secs is not None:
            if poll_interval_secs <= 0:
                raise PJLinkError(f"Poll interval must be positive: {poll_interval_secs}")
            self.poll_interval_secs = poll_interval_secs

        if refresh_secs is not None:
            self.refresh_secs = refresh_secs

        if idle_disconnect_secs is not None:
            self.idle_disconnect_secs = idle_disconnect_secs

        if encoding is not None:
            self.encoding = encoding

    def init_from_defaults(self) -> None:
        """Initializes the configuration from defaults."""
        default_host: Optional[str] = os.environ.get('PJLINK_HOST')
        if default_host == '':
            default_host = None
        self.default_host = default_host
        default_port_str = os.environ.get('PJLINK_PORT')
        if default_port_str is None or default_port_str == '':
            default_port = DEFAULT_PORT
        else:
            try:
                default_port = int(default_port_str)
            except ValueError as e:
                raise PJLinkError(f"Invalid PJLINK_PORT environment variable: {default_port_str!r}") from e
        self.default_port = default_port
        password = os.environ.get('PJLINK_PASSWORD')
        if password == '':
            password = None
        self.password = password
        self.connect_timeout_secs = CONNECT_TIMEOUT
        self.poll_interval_secs = POLL_INTERVAL
        self.refresh_secs = REFRESH_INTERVAL
        self.idle_disconnect_secs = IDLE_DISCONNECT_TIMEOUT
        self.encoding = DEFAULT_ENCODING

    def init_from_base_config(self, base_config: PJLinkClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.password = base_config.password
        self.connect_timeout_secs = base_config.connect_timeout_secs
        self.poll_interval_secs = base_config.poll_interval_secs
        self.refresh_secs = base_config.refresh_secs
        self.idle_disconnect_secs = base_config.idle_disconnect_secs
        self.encoding = base_config.encoding

    @property
    def has_password(self) -> bool:
        return self.password is not None and self.password != ''

    def __str__(self) -> str:
        return (
            f"PJLinkClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"idle_disconnect_secs={self.idle_disconnect_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
