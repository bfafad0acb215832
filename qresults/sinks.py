"""Output devices receiving report lines."""

from __future__ import annotations

from typing import Callable, TextIO

import structlog
import typer

from .config import Settings

logger = structlog.get_logger(__name__)


class ConsoleSink:
    """Write lines to standard output."""

    def __call__(self, line: str) -> None:
        typer.echo(line)


class LogSink:
    """Forward lines to the structured logger."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def __call__(self, line: str) -> None:
        if line:
            logger.info("report_line", line=self.prefix + line)


class FileSink:
    """Append lines to a plain-text report file.

    The file is opened on the first line and released by :meth:`close`.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._fh: TextIO | None = None

    def __call__(self, line: str) -> None:
        if self._fh is None:
            self._fh = open(self.path, "a", encoding="utf-8")
        self._fh.write(line + "\n")

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "FileSink":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class MemorySink:
    """Keep emitted lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, line: str) -> None:
        self.lines.append(line)


class TeeSink:
    """Send every line to several sinks."""

    def __init__(self, *sinks: Callable[[str], None]) -> None:
        self.sinks = list(sinks)

    def __call__(self, line: str) -> None:
        for sink in self.sinks:
            sink(line)

    def close(self) -> None:
        for sink in self.sinks:
            close = getattr(sink, "close", None)
            if close is not None:
                close()


def build_sink(settings: Settings) -> TeeSink:
    """Return the sink described by ``settings``.

    Lines always go to the console. A report file and the logger are added
    when ``output_file`` or ``log_lines`` are set.
    """

    sinks: list[Callable[[str], None]] = [ConsoleSink()]
    if settings.output_file:
        sinks.append(FileSink(settings.output_file))
    if settings.log_lines:
        sinks.append(LogSink(settings.log_prefix))
    return TeeSink(*sinks)
