"""Listeners adding status output on top of :class:`LifecyclePlugin`.

Each reporter method receives the previous behavior of the notification as
its first argument and forwards to it, so several reporters can be layered
with :meth:`LifecyclePlugin.extend` without replacing one another.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Callable

from .config import Settings
from .entities import Module, Test
from .registry import ResultRegistry, format_results

Emit = Callable[[str], None]


def module_completed_message(module: Module) -> str:
    """Return the status line for a released ``module``."""
    secs = (module.total_time or 0) // 1000
    message = (
        f"Module completed: {module.name}"
        f"({module.total} total, {module.failures} failed, "
        f"{module.passed} passed) {secs} secs."
    )
    if module.failures:
        message += " <<<<<<<<<< FAILED!"
    return message


class ModuleStatusReporter:
    """Emit a line when a module starts and when it completes."""

    def __init__(self, registry: ResultRegistry, emit: Emit) -> None:
        self._registry = registry
        self._emit = emit

    def module_start(self, previous: Callable[..., Any], name: str | None) -> None:
        previous(name)
        if name is not None:
            self._emit(f"Module started: {name}")

    def module_done(self, previous: Callable[..., Any], *args: Any) -> None:
        # Resolve before releasing, the registry clears the scope.
        module = self._registry.current_module
        previous(*args)
        if module is not None:
            self._emit(module_completed_message(module))


def test_completed_message(test: Test) -> str:
    """Return the status line for a released ``test``."""
    secs = (test.total_time or 0) // 1000
    message = (
        f"Tests run: {test.total}, Failures: {test.failures}, "
        f"Passed: {test.passed}, Time elapsed: {secs} secs."
    )
    if test.failures:
        message += " <<<<<<<<<< TEST FAILED!"
    return message


class TestStatusReporter:
    """Emit a line when a test starts and when it completes."""

    __test__ = False  # keep pytest from collecting this class

    def __init__(self, registry: ResultRegistry, emit: Emit) -> None:
        self._registry = registry
        self._emit = emit

    def test_start(self, previous: Callable[..., Any], name: str) -> None:
        previous(name)
        self._emit(f"Running {name}")

    def test_done(
        self, previous: Callable[..., Any], name: str, failures: int, total: int
    ) -> None:
        previous(name, failures, total)
        test = self._registry.get_test_by_name(name)
        if test is not None:
            self._emit(test_completed_message(test))


class AssertionTraceReporter:
    """Emit one line per assertion result."""

    def __init__(self, emit: Emit) -> None:
        self._emit = emit

    def log(self, previous: Callable[..., Any], result: bool, message: str) -> None:
        status = "PASS" if result else "FAIL"
        self._emit(f"{status}: {message}")
        previous(result, message)


class RunSummaryReporter:
    """Emit the overall outcome once the run is done."""

    def __init__(self, emit: Emit) -> None:
        self._emit = emit

    def done(self, previous: Callable[..., Any], failures: int, total: int) -> None:
        previous(failures, total)
        results = format_results(failures, total)
        if not failures:
            self._emit(f"Run completed: {results}")
        else:
            self._emit(f"Run aborted: There're tests in failure. {results}")


def _count(value: object) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def _seconds(milliseconds: object) -> str:
    return f"{_count(milliseconds) / 1000:.3f}"


def build_xml_report(
    registry: ResultRegistry, include_top_level: bool = False
) -> ET.ElementTree:
    """Return a JUnit-style XML tree describing the tests in ``registry``.

    Tests are grouped into one ``testsuite`` per module. Top-level tests are
    grouped under a suite named ``default`` when ``include_top_level`` is set.
    Each ``testcase`` carries its assertion count and, when any assertion
    failed, a ``failure`` element.
    """

    suites: dict[str, list[Test]] = {}
    for test in registry.iter_tests(include_top_level=include_top_level):
        suite_name = test.module.name if test.module is not None else "default"
        suites.setdefault(suite_name, []).append(test)

    root = ET.Element("testsuites", name="qunit")
    all_tests = 0
    all_failed = 0
    all_time = 0
    for suite_name, tests in suites.items():
        failed = sum(1 for t in tests if _count(t.failures) > 0)
        elapsed = sum(_count(t.total_time) for t in tests)
        suite = ET.SubElement(
            root,
            "testsuite",
            name=suite_name,
            tests=str(len(tests)),
            failures=str(failed),
            time=_seconds(elapsed),
        )
        for test in tests:
            case = ET.SubElement(
                suite,
                "testcase",
                name=test.name,
                classname=suite_name,
                assertions=str(_count(test.total)),
                time=_seconds(test.total_time),
            )
            if _count(test.failures) > 0:
                failure = ET.SubElement(
                    case,
                    "failure",
                    message=f"{test.failures} of {_count(test.total)} assertions failed",
                )
                failure.text = format_results(test.failures, test.total)
        all_tests += len(tests)
        all_failed += failed
        all_time += elapsed

    root.set("tests", str(all_tests))
    root.set("failures", str(all_failed))
    root.set("time", _seconds(all_time))
    tree = ET.ElementTree(root)
    ET.indent(tree)
    return tree


class XmlReportReporter:
    """Write a JUnit-style XML report once the run is done."""

    def __init__(
        self, registry: ResultRegistry, path: str, include_top_level: bool = False
    ) -> None:
        self._registry = registry
        self._path = path
        self._include_top_level = include_top_level

    def done(self, previous: Callable[..., Any], failures: int, total: int) -> None:
        previous(failures, total)
        tree = build_xml_report(self._registry, self._include_top_level)
        tree.write(self._path, encoding="utf-8", xml_declaration=True)


def build_reporters(
    settings: Settings, registry: ResultRegistry, emit: Emit
) -> list[object]:
    """Return the reporters enabled in ``settings``."""

    reporters: list[object] = []
    if settings.module_status:
        reporters.append(ModuleStatusReporter(registry, emit))
    if settings.test_status:
        reporters.append(TestStatusReporter(registry, emit))
    if settings.trace_assertions:
        reporters.append(AssertionTraceReporter(emit))
    if settings.run_summary:
        reporters.append(RunSummaryReporter(emit))
    if settings.xml_report:
        reporters.append(
            XmlReportReporter(
                registry, settings.xml_report, settings.include_top_level_tests
            )
        )
    return reporters
