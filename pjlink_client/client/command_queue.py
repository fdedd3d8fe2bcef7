# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink outbound command queue.

PJLink forbids pipelining: a command may only be written after the reply to
the previous one has arrived. Commands requested in the meantime wait here.
"""

from __future__ import annotations

from collections import deque

from ..internal_types import *

class CommandQueue:
    """First-in, first-out queue of command strings awaiting transmission.

    No deduplication and no priority; commands are sent in the order enqueued.
    """

    _commands: Deque[str]

    def __init__(self) -> None:
        self._commands = deque()

    def enqueue(self, command: str) -> None:
        """Appends a command to the tail of the queue."""
        self._commands.append(command)

    def dequeue_next(self) -> Optional[str]:
        """Removes and returns the command at the head of the queue, or None if it is empty."""
        if len(self._commands) == 0:
            return None
        return self._commands.popleft()

    def clear(self) -> int:
        """Discards all queued commands. Returns the number discarded."""
        n = len(self._commands)
        self._commands.clear()
        return n

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._commands))

    def __str__(self) -> str:
        return f"CommandQueue({list(self._commands)})"

    def __repr__(self) -> str:
        return str(self)
