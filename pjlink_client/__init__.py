# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package pjlink_client provides an asyncio API for controlling
networked projectors via the PJLink TCP/IP protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .exceptions import (
    PJLinkError,
    PJLinkTransportError,
    PJLinkAuthError,
    PJLinkProtocolError,
    PJLinkCommandError,
  )

from .constants import (
    DEFAULT_PORT,
    CONNECT_TIMEOUT,
    POLL_INTERVAL,
    REFRESH_INTERVAL,
    IDLE_DISCONNECT_TIMEOUT,
  )

from .client import (
    PJLinkClient,
    PJLinkSession,
    SessionState,
    ConnectionStatus,
    Connection,
    CommandQueue,
    StatusStore,
    resolve_projector_tcp_host,
    PJLinkConnector,
    TcpPJLinkConnector,
    PJLinkClientConfig,
    pjlink_connect,
  )

from .protocol import (
    LineFramer,
    PJLinkCommand,
    PJLinkResponse,
    ResponseKind,
    ParameterMeta,
    parse_response_line,
    compute_auth_prefix,
    resolve_auth_prefix,
    name_to_parameter_meta,
    static_query_commands,
    class2_static_query_commands,
    poll_query_commands,
  )
