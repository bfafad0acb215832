import pytest

from qresults.config import Settings
from qresults.exceptions import (
    DuplicateNameError,
    InvalidEventError,
    NotFoundError,
    UnknownEventError,
)
from qresults.plugin import LifecyclePlugin, build_plugin, event_method
from qresults.registry import ResultRegistry
from qresults.sinks import MemorySink


def _plugin(**options):
    sink = MemorySink()
    plugin = LifecyclePlugin(ResultRegistry(), sink, settings=Settings(**options))
    return plugin, sink


def _finished(lines):
    return [line for line in lines if line.startswith("Test '")]


def test_end_to_end_single_module():
    plugin, sink = _plugin()
    plugin.module_start("Suite")
    plugin.test_start("t1")
    plugin.test_done("t1", 0, 4)
    plugin.module_done(0, 4)
    plugin.done(0, 4)
    assert sink.lines == [
        "Starting test: t1",
        "Test 't1' finished: No failures, 4 total",
    ]


def test_done_skips_top_level_tests_by_default():
    plugin, sink = _plugin()
    plugin.test_start("loose")
    plugin.test_done("loose", 0, 1)
    plugin.done(0, 1)
    assert _finished(sink.lines) == []
    assert plugin.registry.get_test_by_name("loose").total == 1


def test_done_includes_top_level_tests_when_enabled():
    plugin, sink = _plugin(include_top_level_tests=True)
    plugin.test_start("loose")
    plugin.test_done("loose", 1, 1)
    plugin.module_start("M")
    plugin.test_start("inner")
    plugin.test_done("inner", 0, 2)
    plugin.module_done(0, 2)
    plugin.done(1, 3)
    assert _finished(sink.lines) == [
        "Test 'inner' finished: No failures, 2 total",
        "Test 'loose' finished: 1 failure, 1 total",
    ]


def test_done_walks_modules_and_tests_in_order():
    plugin, sink = _plugin(progress=False)
    for module, tests in [("B", ["b2", "b1"]), ("A", ["a1"])]:
        plugin.module_start(module)
        for name in tests:
            plugin.test_start(name)
            plugin.test_done(name, 0, 1)
        plugin.module_done(0, len(tests))
    plugin.done(0, 3)
    assert [line.split("'")[1] for line in sink.lines] == ["b2", "b1", "a1"]


def test_module_done_accepts_qunit_signature():
    plugin, _ = _plugin()
    plugin.module_start("M")
    plugin.module_done("M", 2, 7)
    module = plugin.registry.get_module_by_name("M")
    assert (module.failures, module.total) == (2, 7)
    assert plugin.registry.current_module_name is None


def test_errors_propagate():
    plugin, _ = _plugin()
    plugin.module_start("M")
    with pytest.raises(DuplicateNameError):
        plugin.module_start("M")
    with pytest.raises(NotFoundError):
        plugin.test_done("ghost", 0, 0)


def test_log_is_noop():
    plugin, sink = _plugin()
    plugin.log(True, "ok")
    assert sink.lines == []


def test_on_registers_ordered_handlers():
    plugin, sink = _plugin()
    seen = []

    def first(proceed, name):
        seen.append(("first", name))
        proceed(name)
        seen.append(("after", plugin.registry.get_test_by_name(name) is not None))

    plugin.on("testStart", first)
    plugin.on("test_start", lambda proceed, name: (seen.append(("second", name)), proceed(name)))
    plugin.test_start("t")
    assert seen == [("first", "t"), ("second", "t"), ("after", True)]
    assert sink.lines == ["Starting test: t"]


def test_handler_can_suppress_notification():
    plugin, sink = _plugin()
    plugin.on("log", lambda proceed, result, message: None)
    plugin.on("test_start", lambda proceed, name: None)
    plugin.test_start("t")
    assert plugin.registry.get_test_by_name("t") is None
    assert sink.lines == []


def test_extend_layers_listeners():
    plugin, sink = _plugin()
    calls = []

    class First:
        def test_done(self, previous, name, failures, total):
            calls.append("first")
            previous(name, failures, total)

    class Second:
        def test_done(self, previous, name, failures, total):
            calls.append("second")
            previous(name, failures, total)

    plugin.extend(First()).extend(Second())
    plugin.test_start("t")
    plugin.test_done("t", 0, 1)
    assert calls == ["second", "first"]
    assert plugin.registry.get_test_by_name("t").total == 1


def test_extend_keeps_data_attributes():
    plugin, _ = _plugin()
    registry = plugin.registry
    plugin.extend({"registry": "other", "label": "extra"})
    assert plugin.registry is registry
    assert plugin.label == "extra"


def test_dispatch_by_event_name():
    plugin, sink = _plugin()
    plugin.dispatch("moduleStart", "M")
    plugin.dispatch("testStart", "t")
    plugin.dispatch("test_done", "t", 0, 2)
    plugin.dispatch("moduleDone", "M", 0, 2)
    plugin.dispatch("done", 0, 2)
    assert _finished(sink.lines) == ["Test 't' finished: No failures, 2 total"]
    with pytest.raises(UnknownEventError):
        plugin.dispatch("testBegin", "t")


def test_dispatch_rejects_wrong_arguments():
    plugin, sink = _plugin()
    plugin.dispatch("testStart", "t")
    with pytest.raises(InvalidEventError):
        plugin.dispatch("testDone", "t")
    with pytest.raises(InvalidEventError):
        plugin.dispatch("moduleDone", 0)
    with pytest.raises(InvalidEventError):
        plugin.dispatch("done", 0, 1, 2)
    assert plugin.registry.get_test_by_name("t").total == 0


def test_dispatch_checks_arguments_through_listeners():
    plugin, sink = _plugin()
    plugin.extend({"test_start": lambda previous, name: previous(name)})
    with pytest.raises(InvalidEventError):
        plugin.dispatch("testStart")
    plugin.dispatch("testStart", "t")
    assert plugin.registry.get_test_by_name("t") is not None


def test_event_method_names():
    assert event_method("moduleDone") == "module_done"
    assert event_method("log") == "log"
    assert event_method("module_start") == "module_start"


def test_build_plugin_wires_reporters():
    sink = MemorySink()
    plugin = build_plugin(
        Settings(module_status=True, run_summary=True, auto_release_modules=True),
        emit=sink,
    )
    assert plugin.registry.auto_release_modules is True
    plugin.module_start("M")
    plugin.test_start("t")
    plugin.test_done("t", 0, 1)
    plugin.module_done(0, 1)
    plugin.done(0, 1)
    assert sink.lines[0] == "Module started: M"
    assert sink.lines[-1] == "Run completed: No failures, 1 total"
