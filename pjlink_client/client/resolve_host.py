# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink projector host IP/Port resolver.

Provides a method that can resolve host specifiers and environment variables
into a projector address and port.
"""

from __future__ import annotations

import os

from ..internal_types import *
from ..exceptions import PJLinkError
from ..constants import DEFAULT_PORT

def resolve_projector_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
      ) -> Tuple[str, int]:
    """Resolves a projector host string into a hostname and port.

        Args:
            host: The hostname or IPV4 address of the projector.
                    may optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    If None, the host will be taken from the
                    PJLINK_HOST environment variable.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from PJLINK_PORT. If that
                    environment variable is not found, the PJLink
                    port (4352) will be used.

        Returns:
            A tuple of (hostname: str, port: int) where:
                hostname: The resolved host name or IP address.
                port:     The resolved port number.
    """
    if host is None or host == '':
        host = os.environ.get('PJLINK_HOST')
        if host is None or host == '':
            raise PJLinkError("No projector host configured; set PJLINK_HOST or pass a host")

    if default_port is None or default_port <= 0:
        default_port_str = os.environ.get('PJLINK_PORT')
        if default_port_str is None or default_port_str == '':
            default_port = DEFAULT_PORT
        else:
            default_port = int(default_port_str)

    if '://' in host and not host.startswith('tcp://'):
        raise PJLinkError(f"Unsupported protocol in host specifier: '{host}'")
    if host.startswith('tcp://'):
        host = host[6:]
    port: int
    if ':' in host:
        host, port_str = host.rsplit(':', 1)
        try:
            port = int(port_str)
        except ValueError as e:
            raise PJLinkError(f"Invalid port in host specifier: '{port_str}'") from e
    else:
        port = default_port
    if host == '':
        raise PJLinkError("Empty projector host name")

    return (host, port)
