# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink projector client.

Provides the session state machine, its configuration and connectors, and a
high-level client.
"""

from .resolve_host import resolve_projector_tcp_host
from .connector import PJLinkConnector
from .tcp_connector import TcpPJLinkConnector
from .client_config import PJLinkClientConfig
from .command_queue import CommandQueue
from .status_store import StatusStore, StatusListener
from .session import (
    PJLinkSession,
    SessionState,
    ConnectionStatus,
    Connection,
    ConnectionStateCallback,
  )
from .simple import pjlink_connect
from .client_impl import (
    PJLinkClient,
  )
