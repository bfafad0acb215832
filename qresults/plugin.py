"""Adapter mapping test-runner lifecycle notifications onto the registry."""

from __future__ import annotations

import inspect
from typing import Any, Callable

import structlog

from .compose import Hook, compose
from . import config
from .config import Settings
from .exceptions import InvalidEventError, UnknownEventError
from .registry import ResultRegistry, format_results

logger = structlog.get_logger(__name__)

Emit = Callable[[str], None]

# Notification names as emitted by QUnit mapped to adapter methods.
EVENTS = {
    "testStart": "test_start",
    "testDone": "test_done",
    "moduleStart": "module_start",
    "moduleDone": "module_done",
    "log": "log",
    "done": "done",
}


def event_method(event: str) -> str:
    """Return the adapter method name for ``event``.

    Both the QUnit spelling (``testStart``) and the method name
    (``test_start``) are accepted.
    """
    if event in EVENTS:
        return EVENTS[event]
    if event in EVENTS.values():
        return event
    raise UnknownEventError(f"Unknown lifecycle event: {event}")


class LifecyclePlugin:
    """Receive the six lifecycle notifications and report results.

    Parameters
    ----------
    registry:
        :class:`ResultRegistry` holding the run state.
    emit:
        Callable receiving each output line.
    settings:
        Options controlling progress lines and the final walk. Defaults to
        the package settings.
    """

    def __init__(
        self,
        registry: ResultRegistry | None = None,
        emit: Emit = print,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or config.settings
        self.registry = registry or ResultRegistry(
            auto_release_modules=self.settings.auto_release_modules
        )
        self.emit = emit
        self.hooks: dict[str, Hook] = {
            "test_start": Hook("test_start", self._test_start),
            "test_done": Hook("test_done", self._test_done),
            "module_start": Hook("module_start", self._module_start),
            "module_done": Hook("module_done", self._module_done),
            "log": Hook("log", self._log),
            "done": Hook("done", self._done),
        }

    # Extension

    def on(self, event: str, handler: Callable[..., Any]) -> Callable[..., Any]:
        """Register ``handler`` on the hook for ``event``.

        The handler is called as ``handler(proceed, *args)`` before the
        registry operation runs at the end of the chain.
        """
        return self.hooks[event_method(event)].register(handler)

    def extend(self, source: Any) -> "LifecyclePlugin":
        """Layer the callables of ``source`` onto this adapter.

        Methods of ``source`` named after a notification receive the
        previous behavior as first argument.
        """
        compose(self, source)
        return self

    def dispatch(self, event: str, *args: Any) -> Any:
        """Invoke the notification named ``event`` with ``args``.

        Raises
        ------
        InvalidEventError
            If ``args`` do not match the notification signature.
        """
        method = getattr(self, event_method(event))
        try:
            inspect.signature(method).bind(*args)
        except TypeError as exc:
            raise InvalidEventError(f"Invalid arguments for {event}: {exc}") from exc
        return method(*args)

    # Notifications

    def test_start(self, name: str) -> None:
        self.hooks["test_start"](name)

    def test_done(self, name: str, failures: int, total: int) -> None:
        self.hooks["test_done"](name, failures, total)

    def module_start(self, name: str | None) -> None:
        self.hooks["module_start"](name)

    def module_done(self, *args: Any) -> None:
        """Release the current module.

        Accepts ``(failures, total)`` or QUnit's ``(name, failures, total)``.
        """
        if len(args) == 3:
            args = args[1:]
        if len(args) != 2:
            raise InvalidEventError(
                f"module_done expects 2 or 3 arguments, got {len(args)}"
            )
        failures, total = args
        self.hooks["module_done"](failures, total)

    def log(self, result: bool, message: str) -> None:
        self.hooks["log"](result, message)

    def done(self, failures: int, total: int) -> None:
        self.hooks["done"](failures, total)

    # Registry operations at the end of each hook

    def _test_start(self, name: str) -> None:
        self.registry.add_test(name)
        if self.settings.progress:
            self.emit("Starting test: " + name)

    def _test_done(self, name: str, failures: int, total: int) -> None:
        self.registry.release_test(name, failures, total)

    def _module_start(self, name: str | None) -> None:
        self.registry.add_module(name)

    def _module_done(self, failures: int, total: int) -> None:
        self.registry.release_current_module(failures, total)

    def _log(self, result: bool, message: str) -> None:
        pass

    def _done(self, failures: int, total: int) -> None:
        # Top-level tests are skipped unless explicitly requested.
        include = self.settings.include_top_level_tests
        for test in self.registry.iter_tests(include_top_level=include):
            self.emit(
                "Test '" + test.name + "' finished: "
                + format_results(test.failures, test.total)
            )
        logger.info(
            "run_done",
            run_failures=failures,
            run_total=total,
            **self.registry.summary(),
        )


def build_plugin(
    settings: Settings | None = None, emit: Emit | None = None
) -> LifecyclePlugin:
    """Return a :class:`LifecyclePlugin` wired according to ``settings``.

    ``emit`` defaults to the sink built by :func:`qresults.sinks.build_sink`.
    Reporters enabled in ``settings`` are layered onto the adapter.
    """
    from .reporters import build_reporters
    from .sinks import build_sink

    settings = settings or config.settings
    if emit is None:
        emit = build_sink(settings)
    plugin = LifecyclePlugin(emit=emit, settings=settings)
    for reporter in build_reporters(settings, plugin.registry, emit):
        plugin.extend(reporter)
    return plugin
