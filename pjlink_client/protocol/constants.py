# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Wire-level constants for the PJLink protocol."""

from __future__ import annotations

END_OF_LINE = '\r'
"""Every line in either direction is terminated by a single CR."""

END_OF_LINE_BYTES = END_OF_LINE.encode('ascii')

COMMAND_HEADER = '%'
"""First character of every command and every command response."""

PARAM_SEPARATOR = ' '
"""Separates the command code from its parameter in an outbound command."""

RESPONSE_SEPARATOR = '='
"""Separates the command code from its value in an inbound response."""

ACK_VALUE = 'OK'
"""Value of a response acknowledging a set command."""

QUERY_PARAM = '?'
"""Parameter of a query (get) command."""

AUTH_DIGEST_LENGTH = 32
"""Length of the lowercase hex MD5 digest prefixed to authenticated commands."""
