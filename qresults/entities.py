"""Tests and modules tracked by the result registry."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import DuplicateNameError


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


@dataclass
class ReportEntry:
    """Named unit with assertion counters and elapsed time.

    Attributes
    ----------
    name:
        Identifier of the unit.
    failures:
        Number of failed assertions.
    total:
        Number of assertions evaluated.
    total_time:
        Milliseconds between construction and :meth:`done`.
    """

    name: str
    failures: int = 0
    total: int = 0
    total_time: int = 0
    start_time: float = field(default_factory=_now_ms, repr=False, compare=False)

    @property
    def passed(self) -> int:
        """Number of assertions that did not fail."""
        return (self.total or 0) - (self.failures or 0)

    def done(self) -> None:
        """Record the elapsed time since construction.

        Calling this twice overwrites ``total_time`` with the newer value.
        """
        self.total_time = max(int(_now_ms() - self.start_time), 0)


@dataclass
class Test(ReportEntry):
    """A batch of assertions, optionally owned by a :class:`Module`."""

    __test__ = False  # keep pytest from collecting this class

    module: Optional["Module"] = field(default=None, repr=False, compare=False)
    executions: int = 0
    last_result: bool = False


@dataclass
class Module(ReportEntry):
    """Named group of tests with aggregate counters."""

    tests: dict[str, Test] = field(default_factory=dict, repr=False)

    def add_test(self, test: Test) -> Test:
        """Attach ``test`` to this module.

        Raises
        ------
        DuplicateNameError
            If a test with the same name already belongs to the module.
        """
        if test.name in self.tests:
            raise DuplicateNameError(test.name, f"test in module '{self.name}'")
        test.module = self
        self.tests[test.name] = test
        return test

    def get_test_by_name(self, name: str) -> Test | None:
        return self.tests.get(name)

    def get_tests(self) -> list[Test]:
        """Return the tests of this module in insertion order."""
        return list(self.tests.values())

    def has_test(self, name: str) -> bool:
        return name in self.tests


def create_test(name: str) -> Test:
    """Return a new top-level :class:`Test` with zeroed counters."""
    return Test(name)


def create_module(name: str) -> Module:
    """Return a new :class:`Module` without tests."""
    return Module(name)
