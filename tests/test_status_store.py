"""Tests for the status store."""

from pjlink_client import StatusStore


def test_known_keys_start_unset():
    store = StatusStore()
    assert "%1POWR" in store.known_keys
    assert "%2SNUM" not in store.known_keys
    assert store.get("%1POWR") is None


def test_set_notifies_even_when_unchanged():
    store = StatusStore()
    calls = []
    store.add_listener(lambda key, value: calls.append((key, value)))
    store.set("%1POWR", "1")
    store.set("%1POWR", "1")
    assert store.get("%1POWR") == "1"
    assert calls == [("%1POWR", "1"), ("%1POWR", "1")]


def test_unknown_keys_are_defined_on_set():
    store = StatusStore()
    store.set("%2LKUP", "00-11-22-33-44-55")
    assert "%2LKUP" in store
    assert store["%2LKUP"] == "00-11-22-33-44-55"


def test_remove_listener():
    store = StatusStore()
    calls = []
    listener = lambda key, value: calls.append(key)
    store.add_listener(listener)
    store.remove_listener(listener)
    store.set("%1POWR", "0")
    assert calls == []


def test_failing_listener_does_not_stop_others():
    store = StatusStore()
    calls = []

    def bad_listener(key, value):
        raise RuntimeError("boom")

    store.add_listener(bad_listener)
    store.add_listener(lambda key, value: calls.append(key))
    store.set("%1POWR", "0")
    assert calls == ["%1POWR"]
    assert store.get("%1POWR") == "0"


def test_expand_to_class2_once():
    store = StatusStore()
    store.set("%1POWR", "1")
    assert store.expand_to_class2()
    assert not store.expand_to_class2()
    assert store.class2_enabled
    assert "%2SNUM" in store.known_keys
    assert "%2FREZ" in store.known_keys
    assert store.get("%2SNUM") is None
    assert store.get("%1POWR") == "1"


def test_class_level():
    store = StatusStore()
    assert store.class_level == 0
    store.set("%1CLSS", "2")
    assert store.class_level == 2


def test_snapshots():
    store = StatusStore()
    store.set("%1NAME", "Hall")
    assert store.snapshot()["%1NAME"] == "Hall"
    assert store.labeled_snapshot()["Projector Name"] == "Hall"
