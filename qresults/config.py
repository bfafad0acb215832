from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

import logging
import os
import yaml


class Settings(BaseModel):
    """Configuration options loaded from YAML or environment variables."""

    # Logging
    log_level: str = "INFO"
    log_lines: bool = False
    log_prefix: str = ""

    # Report output
    progress: bool = True
    output_file: Optional[str] = None
    include_top_level_tests: bool = False

    # Registry behavior
    auto_release_modules: bool = False

    # Optional reporters
    module_status: bool = False
    test_status: bool = False
    trace_assertions: bool = False
    run_summary: bool = False
    xml_report: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        """Ensure the log level names a standard logging level."""
        name = value.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown log level: {value}")
        return name


def _env_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def load_settings(path: str | None = None) -> Settings:
    """Return :class:`Settings` from ``path`` and environment variables."""

    data: dict[str, object] = {}
    if path:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    env = os.getenv
    if "log_level" not in data and env("QRESULTS_LOG_LEVEL"):
        data["log_level"] = env("QRESULTS_LOG_LEVEL")
    if "log_lines" not in data and env("QRESULTS_LOG_LINES"):
        data["log_lines"] = _env_bool(env("QRESULTS_LOG_LINES"))
    if "log_prefix" not in data and env("QRESULTS_LOG_PREFIX"):
        data["log_prefix"] = env("QRESULTS_LOG_PREFIX")
    if "progress" not in data and env("QRESULTS_PROGRESS"):
        data["progress"] = _env_bool(env("QRESULTS_PROGRESS"))
    if "output_file" not in data and env("QRESULTS_OUTPUT_FILE"):
        data["output_file"] = env("QRESULTS_OUTPUT_FILE")
    if "include_top_level_tests" not in data and env("QRESULTS_INCLUDE_TOP_LEVEL"):
        data["include_top_level_tests"] = _env_bool(env("QRESULTS_INCLUDE_TOP_LEVEL"))
    if "auto_release_modules" not in data and env("QRESULTS_AUTO_RELEASE"):
        data["auto_release_modules"] = _env_bool(env("QRESULTS_AUTO_RELEASE"))
    if "module_status" not in data and env("QRESULTS_MODULE_STATUS"):
        data["module_status"] = _env_bool(env("QRESULTS_MODULE_STATUS"))
    if "trace_assertions" not in data and env("QRESULTS_TRACE_ASSERTIONS"):
        data["trace_assertions"] = _env_bool(env("QRESULTS_TRACE_ASSERTIONS"))
    if "run_summary" not in data and env("QRESULTS_RUN_SUMMARY"):
        data["run_summary"] = _env_bool(env("QRESULTS_RUN_SUMMARY"))
    if "test_status" not in data and env("QRESULTS_TEST_STATUS"):
        data["test_status"] = _env_bool(env("QRESULTS_TEST_STATUS"))
    if "xml_report" not in data and env("QRESULTS_XML_REPORT"):
        data["xml_report"] = env("QRESULTS_XML_REPORT")

    try:
        settings_obj = Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
    globals()["settings"] = settings_obj
    return settings_obj


# Global settings instance used by the package
settings = load_settings()
