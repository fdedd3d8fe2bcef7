"""Tests for parameter metadata and query sets."""

from pjlink_client.protocol import (
    class1_keys,
    class2_keys,
    class2_static_query_commands,
    name_to_parameter_meta,
    parameter_label,
    parse_class_level,
    poll_query_commands,
    static_query_commands,
)


def test_static_queries_end_with_class_info():
    commands = static_query_commands()
    assert commands[-1] == "%1CLSS ?"
    assert "%1NAME ?" in commands
    assert "%1INF1 ?" in commands


def test_class2_static_queries():
    assert class2_static_query_commands() == [
        "%2SNUM ?",
        "%2SVER ?",
        "%2RRES ?",
        "%2RLMP ?",
        "%2RFIL ?",
    ]


def test_class1_poll_set():
    assert poll_query_commands() == [
        "%1POWR ?",
        "%1INPT ?",
        "%1AVMT ?",
        "%1ERST ?",
        "%1LAMP ?",
    ]


def test_class2_poll_set_includes_input_name():
    commands = poll_query_commands(2, "31")
    assert commands[:5] == poll_query_commands(1)
    assert commands[5:] == ["%2INNM ?31", "%2IRES ?", "%2FILT ?", "%2FREZ ?"]


def test_class2_poll_set_without_known_input():
    commands = poll_query_commands(2, None)
    assert not any(c.startswith("%2INNM") for c in commands)
    assert "%2FREZ ?" in commands


def test_parse_class_level():
    assert parse_class_level(None) == 0
    assert parse_class_level("") == 0
    assert parse_class_level("1") == 1
    assert parse_class_level("2") == 2
    assert parse_class_level("ERR") == 0


def test_parameter_metadata():
    assert "%1POWR" in class1_keys
    assert "%2SNUM" in class2_keys and "%2FREZ" in class2_keys
    meta = name_to_parameter_meta("%2SNUM")
    assert meta is not None
    assert meta.is_static
    assert meta.pjlink_class == 2
    assert meta.code == "SNUM"
    assert parameter_label("%2FILT") == "Filter Usage Time"
    assert parameter_label("%2XXXX") == "%2XXXX"
