# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink TCP/IP client connector.

Provides a connector that opens a TCP/IP socket to the projector.
"""

from __future__ import annotations

import asyncio

from ..internal_types import *
from ..exceptions import PJLinkTransportError
from ..pkg_logging import logger
from .connector import PJLinkConnector, StreamPair
from .client_config import PJLinkClientConfig
from .resolve_host import resolve_projector_tcp_host

class TcpPJLinkConnector(PJLinkConnector):
    """PJLink TCP/IP stream connector."""

    config: PJLinkClientConfig

    def __init__(
            self,
            host: Optional[str]=None,
            password: Optional[str]=None,
            port: Optional[int]=None,
            connect_timeout_secs: Optional[float]=None,
            config: Optional[PJLinkClientConfig]=None,
          ) -> None:
        """Creates a connector that can open streams to
           a PJLink projector that is reachable over TCP/IP.

              Args:
                host: The hostname or IPV4 address of the projector.
                      may optionally be prefixed with "tcp://".
                      May be suffixed with ":<port>" to specify a
                      non-default port, which will override the port argument.
                      If None, the host will be taken from the config.
                password:
                      The PJLink password. Not used by the connector itself,
                      but carried in its config for the session.
                port: The default TCP/IP port number to use. If None, the port
                      will be taken from the config.
                connect_timeout_secs: The timeout for opening the connection.
                config: A PJLinkClientConfig object that specifies
                        the default host, port, password, etc to use.
                        If None, a default config will be created.
        """
        super().__init__()
        self.config = PJLinkClientConfig(
            default_host=host,
            default_port=port,
            connect_timeout_secs=connect_timeout_secs,
            password=password,
            base_config=config
          )

    # @abstractmethod
    async def open(self) -> StreamPair:
        """Open a TCP/IP connection to the projector associated with this
           connector, with timeout.
        """
        host, port = resolve_projector_tcp_host(self.config.default_host, self.config.default_port)
        logger.debug(f"Connecting to projector at {host}:{port}")
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                self.config.connect_timeout_secs
              )
        except asyncio.TimeoutError as e:
            raise PJLinkTransportError(
                f"Timed out after {self.config.connect_timeout_secs} seconds connecting to {host}:{port}"
              ) from e
        except OSError as e:
            raise PJLinkTransportError(f"Unable to connect to {host}:{port}: {e}") from e
        return (reader, writer)

    def __str__(self) -> str:
        return f"TcpPJLinkConnector(host='{self.config.default_host}', port={self.config.default_port})"

    def __repr__(self) -> str:
        return str(self)
