"""Helpers for layering callables onto named hooks."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Iterator


_MISSING = object()


def _members(source: Any) -> Iterator[tuple[str, Any]]:
    """Yield ``(name, value)`` pairs exposed by ``source``."""

    if isinstance(source, Mapping):
        yield from list(source.items())
        return
    for name in dir(source):
        if name.startswith("_"):
            continue
        yield name, getattr(source, name)


def _get(target: Any, name: str) -> Any:
    if isinstance(target, MutableMapping):
        return target.get(name, _MISSING)
    return getattr(target, name, _MISSING)


def _set(target: Any, name: str, value: Any) -> None:
    if isinstance(target, MutableMapping):
        target[name] = value
    else:
        setattr(target, name, value)


def chain(previous: Callable[..., Any], wrapper: Callable[..., Any]) -> Callable[..., Any]:
    """Return a callable invoking ``wrapper(previous, *args, **kwargs)``.

    ``wrapper`` decides whether and when to call ``previous``. The returned
    callable keeps a reference to both so chains can be inspected.
    """

    def proxy(*args: Any, **kwargs: Any) -> Any:
        return wrapper(previous, *args, **kwargs)

    proxy.__name__ = getattr(wrapper, "__name__", "proxy")
    proxy.__doc__ = getattr(wrapper, "__doc__", None)
    proxy.__wrapped__ = previous  # type: ignore[attr-defined]
    return proxy


def compose(target: Any, source: Any) -> Any:
    """Copy every member of ``source`` into ``target`` and return ``target``.

    Both arguments may be mappings or plain objects. Members missing from
    ``target`` are copied as-is. When ``target`` already holds a callable
    under the same name it is replaced by a proxy that calls the source
    callable with the previous one as first argument. An existing
    non-callable value is kept and the source value is dropped. Presence
    decides, so an existing falsy value such as ``0`` or ``""`` is kept too.
    """

    for name, value in _members(source):
        existing = _get(target, name)
        if existing is _MISSING:
            _set(target, name, value)
        elif callable(existing) and callable(value):
            _set(target, name, chain(existing, value))
    return target


class Hook:
    """Named hook running handlers in registration order.

    Every handler is called as ``handler(proceed, *args, **kwargs)``.
    Calling ``proceed`` continues with the next handler and finally with
    ``base``. A handler that does not call ``proceed`` stops the chain.
    """

    def __init__(self, name: str, base: Callable[..., Any] | None = None) -> None:
        self.name = name
        self.base = base
        self.handlers: list[Callable[..., Any]] = []

    def register(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        """Append ``handler`` and return it so this works as a decorator."""
        self.handlers.append(handler)
        return handler

    def unregister(self, handler: Callable[..., Any]) -> None:
        self.handlers.remove(handler)

    def __len__(self) -> int:
        return len(self.handlers)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._dispatch(0, args, kwargs)

    def _dispatch(self, index: int, args: tuple, kwargs: dict) -> Any:
        if index >= len(self.handlers):
            if self.base is None:
                return None
            return self.base(*args, **kwargs)

        def proceed(*a: Any, **kw: Any) -> Any:
            return self._dispatch(index + 1, a, kw)

        return self.handlers[index](proceed, *args, **kwargs)

    def __repr__(self) -> str:
        return f"Hook({self.name!r}, handlers={len(self.handlers)})"
