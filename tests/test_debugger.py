from fmesdk.debugger import DebuggerService


def test_standard_props_apply_to_every_category():
    svc = DebuggerService()
    svc.add_standard_debug_props({"a": 1, "b": 2})
    svc.add_standard_debug_prop("c", 3)
    assert svc.get_debug_event_props("network") == {"a": 1, "b": 2, "c": 3}
    assert svc.get_debug_event_props("retry") == {"a": 1, "b": 2, "c": 3}
    assert svc.standard_debug_props == {"a": 1, "b": 2, "c": 3}


def test_category_props_override_standard():
    svc = DebuggerService()
    svc.add_standard_debug_props({"a": 1, "b": 2})
    svc.add_category_debug_prop("network", "b", "override")
    svc.add_category_debug_prop("network", "x", True)
    assert svc.get_debug_event_props("network") == {"a": 1, "b": "override", "x": True}
    assert svc.get_debug_event_props("other") == {"a": 1, "b": 2}


def test_add_category_props_replaces_existing():
    svc = DebuggerService()
    svc.add_category_debug_prop("cat", "old", 1)
    svc.add_category_debug_props("cat", {"new": 2})
    assert svc.get_debug_event_props("cat") == {"new": 2}


def test_returned_props_are_a_copy():
    svc = DebuggerService()
    svc.add_standard_debug_prop("k", "v")
    result = svc.get_debug_event_props("cat")
    result["extra"] = 1
    assert svc.get_debug_event_props("cat") == {"k": "v"}


def test_clear_removes_everything():
    svc = DebuggerService()
    svc.add_standard_debug_prop("k", "v")
    svc.add_category_debug_prop("cat", "x", 1)
    svc.clear()
    assert svc.get_debug_event_props("cat") == {}
    assert svc.standard_debug_props == {}