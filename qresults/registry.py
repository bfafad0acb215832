"""Registry tracking modules, tests and the current module scope."""

from __future__ import annotations

import math
import numbers
from typing import Iterator

import structlog

from .entities import Module, Test, create_module, create_test
from .exceptions import DuplicateNameError, NotFoundError
from .metrics import (
    ASSERTION_FAILURES,
    ASSERTIONS,
    MODULES_STARTED,
    TESTS_STARTED,
)

logger = structlog.get_logger(__name__)


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return not math.isnan(value)


def format_results(failures: object, total: object) -> str:
    """Return a human readable summary of ``failures`` and ``total``.

    Zero is rendered ("No failures", "No tests to run") while ``None`` or
    non-numeric values produce an empty segment, so
    ``format_results(None, None)`` is ``", "``.
    """

    failure_str = ""
    assert_str = ""

    if _is_number(failures):
        if failures == 0:
            failure_str = "No failures"
        elif failures == 1:
            failure_str = "1 failure"
        elif failures > 1:
            failure_str = f"{failures} failures"

    if _is_number(total):
        if total == 0:
            assert_str = "No tests to run"
        elif total > 0:
            assert_str = f"{total} total"

    return failure_str + ", " + assert_str


def _count(counter, value: object) -> None:
    if _is_number(value) and value > 0:
        counter.inc(value)


class ResultRegistry:
    """Hold the modules and top-level tests of a single run.

    Parameters
    ----------
    auto_release_modules:
        If ``True``, starting a module while another one is current releases
        the previous module first. By default the previous module is left
        unreleased and keeps ``total_time == 0``.
    """

    def __init__(self, auto_release_modules: bool = False) -> None:
        self.modules: dict[str, Module] = {}
        self.tests: dict[str, Test] = {}
        self.current_module_name: str | None = None
        self.auto_release_modules = auto_release_modules

    @property
    def current_module(self) -> Module | None:
        """Module receiving new tests, if any."""
        if self.current_module_name is None:
            return None
        return self.modules.get(self.current_module_name)

    def add_module(self, name: str | None) -> Module | None:
        """Register module ``name`` and make it the current module.

        ``None`` only clears the current module.
        """
        if name is None:
            self.current_module_name = None
            return None

        if self.get_module_by_name(name) is not None:
            raise DuplicateNameError(name, "module")

        previous = self.current_module
        if previous is not None:
            if self.auto_release_modules:
                self.release_current_module(previous.failures, previous.total)
            else:
                logger.warning(
                    "module_orphaned", module=previous.name, replaced_by=name
                )

        module = create_module(name)
        self.modules[name] = module
        self.current_module_name = name
        MODULES_STARTED.inc()
        logger.debug("module_added", module=name)
        return module

    def release_current_module(self, failures: int, total: int) -> Module | None:
        """Store results on the current module and clear the scope."""
        module = self.current_module
        if module is None:
            return None

        module.failures = failures
        module.total = total
        module.done()
        self.current_module_name = None
        logger.debug(
            "module_released",
            module=module.name,
            failures=failures,
            total=total,
            total_time=module.total_time,
        )
        return module

    def add_test(self, name: str) -> Test:
        """Create test ``name`` in the current module or at top level."""
        test = create_test(name)
        module = self.current_module
        if module is not None:
            module.add_test(test)
        else:
            if name in self.tests:
                raise DuplicateNameError(name, "test")
            self.tests[name] = test
        TESTS_STARTED.inc()
        logger.debug(
            "test_added", test=name, module=module.name if module else None
        )
        return test

    def release_test(self, name: str, failures: int, total: int) -> Test:
        """Store results on test ``name`` wherever it was registered."""
        test = self.get_test_by_name(name)
        if test is None:
            raise NotFoundError(name)

        test.failures = failures
        test.total = total
        test.done()
        _count(ASSERTIONS, total)
        _count(ASSERTION_FAILURES, failures)
        logger.debug(
            "test_released",
            test=name,
            failures=failures,
            total=total,
            total_time=test.total_time,
        )
        return test

    def get_module_by_name(self, name: str) -> Module | None:
        return self.modules.get(name)

    def get_test_by_name(self, name: str) -> Test | None:
        """Return test ``name``, preferring top-level tests over module tests."""
        test = self.tests.get(name)
        if test is not None:
            return test
        for module in self.modules.values():
            if module.has_test(name):
                return module.get_test_by_name(name)
        return None

    def iter_tests(self, include_top_level: bool = False) -> Iterator[Test]:
        """Yield tests in report order.

        Module tests come first, following module creation order. Top-level
        tests follow only when ``include_top_level`` is set.
        """
        for module in self.modules.values():
            yield from module.get_tests()
        if include_top_level:
            yield from self.tests.values()

    def format_results(self, failures: object, total: object) -> str:
        return format_results(failures, total)

    def summary(self) -> dict[str, int]:
        """Return counts describing the registry contents."""
        tests = list(self.iter_tests(include_top_level=True))
        return {
            "modules": len(self.modules),
            "tests": len(tests),
            "top_level_tests": len(self.tests),
            "assertions": sum(t.total for t in tests if _is_number(t.total)),
            "failures": sum(t.failures for t in tests if _is_number(t.failures)),
        }
