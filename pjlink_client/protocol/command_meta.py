#!/usr/bin/env python3

"""
PJLink known parameters and metadata.

This module contains the known status parameters of the PJLink protocol, the
query sets used to keep them current, and the friendly names of their values.
The information is derived from the JBMIA PJLink specification:

https://pjlink.jbmia.or.jp/english/data_cl2/PJLink_5-1.pdf

There is no protocol implementation here; only metadata about the protocol.
"""
from __future__ import annotations

from ..internal_types import *

ParameterKey = str
"""A protocol parameter name including header and class, e.g. '%1POWR'."""


power_status_map: Dict[str, str] = {
    "0": "Standby",
    "1": "On",
    "2": "Cooling",
    "3": "Warming",
  }
"""Values of %1POWR, and the projector power states they correspond to."""

mute_status_map: Dict[str, str] = {
    "11": "Video mute on",
    "21": "Audio mute on",
    "31": "Video and audio mute on",
    "30": "Video and audio mute off",
  }
"""Values of %1AVMT, and the mute states they correspond to. Also used as parameters
   of the AVMT set command; the shutter closes with 31 and opens with 30."""

input_type_map: Dict[str, str] = {
    "1": "RGB",
    "2": "Video",
    "3": "Digital",
    "4": "Storage",
    "5": "Network",
    "6": "Internal",
  }
"""First digit of an %1INPT value, and the input type it corresponds to."""

input_choice_map: Dict[str, str] = {
    "11": "RGB1",
    "12": "RGB2",
    "31": "DVI-D",
    "32": "HDMI",
    "33": "Digital link",
    "34": "SDI1",
    "35": "SDI2",
  }
"""Common %1INPT values and the inputs they usually select."""

error_code_map: Dict[str, str] = {
    "ERR1": "undefined command",
    "ERR2": "out of parameter",
    "ERR3": "unavailable time",
    "ERR4": "projector failure",
    "ERRA": "authorization error",
  }
"""Error values a projector may answer a command with."""

CLASS_INFO_KEY: ParameterKey = "%1CLSS"
"""The parameter that reports the highest PJLink class the projector supports."""

POWER_KEY: ParameterKey = "%1POWR"

INPUT_KEY: ParameterKey = "%1INPT"

class ParameterMeta:
    """Metadata for a single PJLink status parameter"""
    key: ParameterKey
    label: str
    is_static: bool
    """True iff the value never changes during a session (e.g. serial number), so it is
       queried once rather than on every poll."""

    def __init__(self, key: ParameterKey, label: str, is_static: bool=False):
        self.key = key
        self.label = label
        self.is_static = is_static

    @property
    def pjlink_class(self) -> int:
        return int(self.key[1])

    @property
    def code(self) -> str:
        """The four character command code, e.g. 'POWR'"""
        return self.key[2:]

    def __str__(self) -> str:
        return f"ParameterMeta({self.key}: {self.label!r})"

    def __repr__(self) -> str:
        return str(self)

_P = ParameterMeta

class1_parameter_metas: List[ParameterMeta] = [
    _P("%1POWR", "Power status"),
    _P("%1INPT", "Input switch"),
    _P("%1AVMT", "Mute Status"),
    _P("%1ERST", "Error Status"),
    _P("%1LAMP", "Lamp Hours"),
    _P("%1INST", "Input List", is_static=True),
    _P("%1NAME", "Projector Name", is_static=True),
    _P("%1INF1", "Manufacturer Name", is_static=True),
    _P("%1INF2", "Product Name", is_static=True),
    _P("%1INFO", "Other Info", is_static=True),
    _P("%1CLSS", "Class Info", is_static=True),
  ]
"""Parameters every PJLink projector supports."""

class2_parameter_metas: List[ParameterMeta] = [
    _P("%2SNUM", "Serial Number", is_static=True),
    _P("%2SVER", "Software Version", is_static=True),
    _P("%2INNM", "Input Terminal Name"),
    _P("%2IRES", "Input Resolution"),
    _P("%2RRES", "Recommend Resolution", is_static=True),
    _P("%2FILT", "Filter Usage Time"),
    _P("%2RLMP", "Lamp Model Number", is_static=True),
    _P("%2RFIL", "Filter Model Number", is_static=True),
    _P("%2FREZ", "Freeze Status"),
  ]
"""Additional parameters of projectors that report %1CLSS=2."""

parameter_metas: Dict[ParameterKey, ParameterMeta] = {}
for _meta in class1_parameter_metas + class2_parameter_metas:
    assert not _meta.key in parameter_metas
    parameter_metas[_meta.key] = _meta

class1_keys: List[ParameterKey] = [meta.key for meta in class1_parameter_metas]

class2_keys: List[ParameterKey] = [meta.key for meta in class2_parameter_metas]

def name_to_parameter_meta(key: ParameterKey) -> Optional[ParameterMeta]:
    """Returns metadata for a known parameter, or None for parameters this package doesn't know."""
    return parameter_metas.get(key)

def parameter_label(key: ParameterKey) -> str:
    """Returns a friendly label for a parameter; unknown parameters are labeled with their key."""
    meta = parameter_metas.get(key)
    return key if meta is None else meta.label

def parse_class_level(value: Optional[str]) -> int:
    """Converts a %1CLSS value to an integer class level. Unset or garbled values are 0."""
    if value is None:
        return 0
    value = value.strip()
    if not value.isdigit():
        return 0
    return int(value)

def _query(key: ParameterKey, param: str='') -> str:
    return f"{key} ?{param}"

def static_query_commands() -> List[str]:
    """Queries for the class 1 parameters that don't change during a session.

    %1CLSS is last; its reply decides whether class 2 parameters are queried.
    """
    return [
        _query("%1NAME"),
        _query("%1INST"),
        _query("%1INF1"),
        _query("%1INF2"),
        _query("%1INFO"),
        _query("%1CLSS"),
      ]

def class2_static_query_commands() -> List[str]:
    """Queries for the class 2 parameters that don't change during a session."""
    return [
        _query("%2SNUM"),
        _query("%2SVER"),
        _query("%2RRES"),
        _query("%2RLMP"),
        _query("%2RFIL"),
      ]

def poll_query_commands(class_level: int=1, current_input: Optional[str]=None) -> List[str]:
    """Queries for the parameters that are re-polled periodically.

    Args:
        class_level: The projector's class level (from %1CLSS). Class 2
              parameters are only polled when this is 2 or more.
        current_input: The current %1INPT value. %2INNM takes the input
              as its parameter, so it is skipped while the input is unknown.
    """
    result = [
        _query("%1POWR"),
        _query("%1INPT"),
        _query("%1AVMT"),
        _query("%1ERST"),
        _query("%1LAMP"),
      ]
    if class_level > 1:
        if current_input is not None and current_input != '':
            result.append(_query("%2INNM", current_input))
        result.extend([
            _query("%2IRES"),
            _query("%2FILT"),
            _query("%2FREZ"),
          ])
    return result
