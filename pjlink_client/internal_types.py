# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Type hints used internally by this package"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Dict,
    List,
    Optional,
    Union,
    Any,
    Tuple,
    Type,
    Set,
    Callable,
    Iterable,
    Iterator,
    Deque,
    Awaitable,
    Coroutine,
    AsyncContextManager,
  )

from types import TracebackType

from typing_extensions import Self
