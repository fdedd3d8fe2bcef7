# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Low-level protocol definitions for PJLink projectors.

Refer to https://pjlink.jbmia.or.jp/english/data_cl2/PJLink_5-1.pdf
for the official protocol documentation.
"""

from .constants import (
    END_OF_LINE,
    END_OF_LINE_BYTES,
    AUTH_DIGEST_LENGTH,
  )

from .framer import (
    LineFramer,
  )

from .response import (
    PJLinkResponse,
    ResponseKind,
    parse_response_line,
  )

from .command import (
    PJLinkCommand,
    format_command,
  )

from .handshake import (
    PJLINK_NO_AUTH,
    PJLINK_AUTH,
    PJLINK_ERRA,
    compute_auth_prefix,
    resolve_auth_prefix,
  )

from .command_meta import (
    ParameterKey,
    ParameterMeta,
    CLASS_INFO_KEY,
    POWER_KEY,
    INPUT_KEY,
    class1_keys,
    class2_keys,
    power_status_map,
    mute_status_map,
    input_type_map,
    input_choice_map,
    error_code_map,
    name_to_parameter_meta,
    parameter_label,
    parse_class_level,
    static_query_commands,
    class2_static_query_commands,
    poll_query_commands,
  )
