# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink client abstract stream connector interface.

Provides a low-level abstract interface for objects that can open a raw
byte stream to a PJLink projector. Handshake and authentication are left to
the session, which sees the greeting as the first received line.
This abstraction allows for the implementation of proxies and alternate
transports in tests.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from ..internal_types import *

StreamPair = Tuple[asyncio.StreamReader, asyncio.StreamWriter]

class PJLinkConnector(ABC):
    """Abstract base class for PJLink stream connectors."""

    @abstractmethod
    async def open(self) -> StreamPair:
        """Open a new byte stream to the projector associated with this
           connector.

        Must be implemented by subclasses. Raises an exception if the
        stream cannot be opened.
        """
        raise NotImplementedError()
