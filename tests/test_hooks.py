from __future__ import annotations

from optvault.hooks import Hooks
from optvault.reporting import ErrorLog
from optvault.translation import StringRegistry


def test_apply_without_filters_is_identity():
    assert Hooks().apply("anything", {"a": 1}, "x") == {"a": 1}


def test_filters_run_in_priority_order():
    hooks = Hooks()
    hooks.add_filter("name", lambda v: v + "b", priority=20)
    hooks.add_filter("name", lambda v: v + "a")
    hooks.add_filter("name", lambda v: v + "c", priority=20)
    assert hooks.apply("name", "") == "abc"


def test_remove_filter():
    hooks = Hooks()

    def shout(value):
        return value.upper()

    hooks.add_filter("name", shout)
    assert hooks.has_filter("name")
    assert hooks.remove_filter("name", shout)
    assert not hooks.remove_filter("name", shout)
    assert hooks.apply("name", "quiet") == "quiet"


def test_error_log(caplog):
    log = ErrorLog()
    with caplog.at_level("WARNING", logger="optvault.errors"):
        log.report("optvault", "invalid_hex", "bad color")
    log.report("other", "oops", "msg", "warning")
    assert len(log) == 2
    assert [e.code for e in log.for_scope("optvault")] == ["invalid_hex"]
    assert "invalid_hex" in caplog.text
    log.clear()
    assert list(log) == []


def test_string_registry():
    reg = StringRegistry()
    reg.register_string("a", "A")
    assert dict(reg) == {"a": "A"}
    reg.unregister_string("a")
    reg.unregister_string("missing")
    assert len(reg) == 0
