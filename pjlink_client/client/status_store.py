# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
PJLink status store.

Holds the last known value of every status parameter reported by the projector,
and notifies listeners whenever a value is set.
"""

from __future__ import annotations

from ..internal_types import *
from ..pkg_logging import logger
from ..protocol import (
    ParameterKey,
    CLASS_INFO_KEY,
    class1_keys,
    class2_keys,
    parameter_label,
    parse_class_level,
  )

StatusListener = Callable[[ParameterKey, Optional[str]], None]
"""Called with (key, value) every time a value is set."""

class StatusStore:
    """Mapping from parameter key to last known value.

    A value of None means the parameter has not been observed yet. Keys are
    never removed, and values are not cleared on disconnect; stale values
    remain until overwritten.
    """

    _values: Dict[ParameterKey, Optional[str]]
    _listeners: List[StatusListener]
    class2_enabled: bool = False
    """True once the known key set has been expanded with class 2 parameters."""

    def __init__(self) -> None:
        self._values = {}
        self._listeners = []
        self.define(class1_keys)

    def define(self, keys: Iterable[ParameterKey]) -> None:
        """Adds keys to the known set as unset. Keys already known keep their values."""
        for key in keys:
            if not key in self._values:
                self._values[key] = None

    def expand_to_class2(self) -> bool:
        """Adds the class 2 parameters to the known set.

        Returns True if the set was expanded, False if it already included them.
        """
        if self.class2_enabled:
            return False
        self.class2_enabled = True
        self.define(class2_keys)
        logger.debug(f"{self}: Expanded known parameters to class 2")
        return True

    def set(self, key: ParameterKey, value: Optional[str]) -> None:
        """Sets a value and notifies all listeners, even if the value is unchanged."""
        self._values[key] = value
        for listener in list(self._listeners):
            try:
                listener(key, value)
            except Exception as e:
                logger.exception(f"{self}: Status listener raised an exception for {key}: {e}")

    def get(self, key: ParameterKey) -> Optional[str]:
        """Returns the last known value, or None if unset."""
        return self._values.get(key)

    def __getitem__(self, key: ParameterKey) -> Optional[str]:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    @property
    def known_keys(self) -> List[ParameterKey]:
        return list(self._values.keys())

    @property
    def class_level(self) -> int:
        """The projector's PJLink class, from %1CLSS; 0 if not known yet"""
        return parse_class_level(self._values.get(CLASS_INFO_KEY))

    def snapshot(self) -> Dict[ParameterKey, Optional[str]]:
        """Returns a copy of all known values."""
        return dict(self._values)

    def labeled_snapshot(self) -> Dict[str, Optional[str]]:
        """Returns a copy of all known values, keyed by friendly label."""
        return dict((parameter_label(k), v) for k, v in self._values.items())

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def __str__(self) -> str:
        return f"StatusStore(n={len(self._values)}, class2={self.class2_enabled})"

    def __repr__(self) -> str:
        return str(self)
