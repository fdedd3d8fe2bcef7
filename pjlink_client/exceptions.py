# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from typing import Optional

class PJLinkError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class PJLinkTransportError(PJLinkError):
  """The TCP connection to the projector could not be opened or failed."""
  pass

class PJLinkAuthError(PJLinkError):
  """The projector rejected the authentication digest (wrong password)."""
  pass

class PJLinkProtocolError(PJLinkError):
  """A line received from the projector was not what the protocol allows at that point."""
  pass

class PJLinkCommandError(PJLinkError):
  """A command string is malformed, or the projector answered it with =ERR<x>."""
  error_code: Optional[str]

  def __init__(self, msg: str, error_code: Optional[str]=None):
    super().__init__(msg)
    self.error_code = error_code
