"""Aggregation of QUnit-style lifecycle notifications into test results."""

from .compose import Hook, chain, compose
from .config import Settings, load_settings
from .entities import Module, ReportEntry, Test, create_module, create_test
from .exceptions import (
    DuplicateNameError,
    InvalidEventError,
    NotFoundError,
    QResultsError,
    UnknownEventError,
)
from .logging_config import configure_logging
from .plugin import EVENTS, LifecyclePlugin, build_plugin
from .registry import ResultRegistry, format_results
from .reporters import (
    AssertionTraceReporter,
    ModuleStatusReporter,
    RunSummaryReporter,
    TestStatusReporter,
    XmlReportReporter,
    build_reporters,
    build_xml_report,
)
from .sinks import ConsoleSink, FileSink, LogSink, MemorySink, TeeSink, build_sink

__all__ = [
    "Hook",
    "chain",
    "compose",
    "Settings",
    "load_settings",
    "Module",
    "ReportEntry",
    "Test",
    "create_module",
    "create_test",
    "DuplicateNameError",
    "InvalidEventError",
    "NotFoundError",
    "QResultsError",
    "UnknownEventError",
    "configure_logging",
    "EVENTS",
    "LifecyclePlugin",
    "build_plugin",
    "ResultRegistry",
    "format_results",
    "AssertionTraceReporter",
    "ModuleStatusReporter",
    "RunSummaryReporter",
    "TestStatusReporter",
    "XmlReportReporter",
    "build_reporters",
    "build_xml_report",
    "ConsoleSink",
    "FileSink",
    "LogSink",
    "MemorySink",
    "TeeSink",
    "build_sink",
]
