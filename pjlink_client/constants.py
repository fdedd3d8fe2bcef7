# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by pjlink_client"""

DEFAULT_PORT = 4352
"""The listen port number used by the projector for PJLink TCP/IP control."""

CONNECT_TIMEOUT = 5.0
"""The timeout for opening the TCP/IP connection to the projector, in seconds."""

POLL_INTERVAL = 0.1
"""Seconds between ticks of the session polling loop."""

REFRESH_INTERVAL = 1.0
"""Seconds of inactivity after which the full status poll set is re-issued.
   Determined empirically; not mandated by PJLink."""

IDLE_DISCONNECT_TIMEOUT = 4.0
"""Seconds of inactivity after which the client drops the connection itself.
   PJLink projectors silently close idle connections after a few seconds."""

READ_CHUNK_SIZE = 4096
"""Maximum number of bytes requested from the socket per read."""

DEFAULT_ENCODING = 'utf-8'
"""Encoding used for lines on the wire. PJLink class 1 is pure ASCII; class 2 names may be UTF-8."""

AUTH_PROBE_COMMAND = '%1POWR ?'
"""Command sent with the auth digest when a challenge arrives and nothing else is waiting
   to be sent. The projector only checks the digest when it arrives with a command."""
