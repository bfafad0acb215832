"""Command line interface for replaying recorded QUnit notifications."""

from enum import Enum

import typer
import json
import logging
import sys

from qresults import (
    QResultsError,
    build_plugin,
    build_sink,
    configure_logging,
)
from qresults.config import Settings, load_settings


class Verbosity(str, Enum):
    """Logging verbosity levels."""

    QUIET = "quiet"
    INFO = "info"
    DEBUG = "debug"


app = typer.Typer(help="qresults command line interface")


def _load_events(path: str) -> list[tuple[str, list[object]]]:
    """Return ``(event, args)`` pairs read from the JSON-lines file ``path``."""

    events = []
    with open(path, "r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise SystemExit(f"Invalid event record on line {lineno}: {exc}") from exc
            if not isinstance(record, dict) or "event" not in record:
                raise SystemExit(f"Invalid event record on line {lineno}: missing 'event'")
            events.append((record["event"], list(record.get("args", []))))
    return events


def _log_level(verbosity: Verbosity, cfg: Settings) -> int:
    if verbosity == Verbosity.DEBUG:
        return logging.DEBUG
    if verbosity == Verbosity.QUIET:
        return logging.WARNING
    return logging.getLevelName(cfg.log_level)


@app.command()
def replay(
    events: str = typer.Argument(..., help="JSON-lines file of recorded notifications"),
    config: str | None = typer.Option(None, help="YAML settings file"),
    output_file: str | None = typer.Option(None, help="Append report lines to this file"),
    include_top_level: bool = typer.Option(False, help="Report tests run outside any module"),
    module_status: bool = typer.Option(False, help="Emit module started/completed lines"),
    trace_assertions: bool = typer.Option(False, help="Emit one line per assertion"),
    test_status: bool = typer.Option(False, help="Emit test running/completed lines"),
    summary: bool = typer.Option(False, help="Emit the overall run outcome"),
    xml_report: str | None = typer.Option(None, help="Write a JUnit-style XML report"),
    verbosity: Verbosity = typer.Option(Verbosity.INFO, help="Logging verbosity"),
) -> None:
    """Feed recorded lifecycle notifications through the reporter."""

    cfg = load_settings(config)
    updates: dict[str, object] = {}
    if output_file is not None:
        updates["output_file"] = output_file
    if include_top_level:
        updates["include_top_level_tests"] = True
    if module_status:
        updates["module_status"] = True
    if trace_assertions:
        updates["trace_assertions"] = True
    if test_status:
        updates["test_status"] = True
    if summary:
        updates["run_summary"] = True
    if xml_report is not None:
        updates["xml_report"] = xml_report
    cfg = cfg.model_copy(update=updates)

    configure_logging(_log_level(verbosity, cfg))

    records = _load_events(events)
    sink = build_sink(cfg)
    plugin = build_plugin(cfg, emit=sink)
    run_failures = 0
    try:
        for event, args in records:
            plugin.dispatch(event, *args)
            if event == "done" and args:
                run_failures = args[0] or 0
    except QResultsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)
    finally:
        sink.close()

    if run_failures:
        raise typer.Exit(code=1)


@app.command("show-config")
def show_config(
    config: str | None = typer.Option(None, help="YAML settings file"),
) -> None:
    """Print the effective settings as JSON."""

    cfg = load_settings(config)
    print(json.dumps(cfg.model_dump(), indent=2))


def main(argv: list[str] | None = None) -> int | None:
    """Entry point for programmatic invocation."""

    from typer.main import get_command

    return get_command(app).main(args=argv or sys.argv[1:], standalone_mode=False)


if __name__ == "__main__":
    from typer.main import get_command

    get_command(app).main(args=sys.argv[1:])
