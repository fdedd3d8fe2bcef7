# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink simple client connection API.
"""

from __future__ import annotations

from ..internal_types import *
from .client_config import PJLinkClientConfig
from .client_impl import PJLinkClient
from .session import ConnectionStateCallback
from .status_store import StatusListener

async def pjlink_connect(
        host: Optional[str]=None,
        password: Optional[str]=None,
        config: Optional[PJLinkClientConfig]=None,
        on_status_changed: Optional[StatusListener]=None,
        on_connection_state_changed: Optional[ConnectionStateCallback]=None,
      ) -> PJLinkClient:
    """Create a PJLink client from a configuration and start querying
       the projector's status.

    Args:
        host: The hostname or IPV4 address of the projector.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port.
                If None, the host will be taken from the config, or from the
                PJLINK_HOST environment variable.
        password:
                The password to use to authenticate with the projector.
                If None, the password will be taken from the
                config.
        config: A PJLinkClientConfig object that specifies
                the default host, port, password and timing to use.
                If None, a default config will be created.
        on_status_changed:
                Called with (key, value) whenever a status value is set.
        on_connection_state_changed:
                Called with (status, detail) when connectivity changes.
    """
    config = PJLinkClientConfig(
        default_host=host,
        password=password,
        base_config=config
      )
    client = await PJLinkClient.create(
        config=config,
        on_status_changed=on_status_changed,
        on_connection_state_changed=on_connection_state_changed,
      )
    return client
