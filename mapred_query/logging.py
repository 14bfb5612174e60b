import os
import sys
from typing import Any, Literal

import structlog

LogFormat = Literal["json", "plain", "auto"]


def _should_use_json_format() -> bool:
    ci_vars = ["CI", "CONTINUOUS_INTEGRATION", "GITHUB_ACTIONS", "JENKINS_URL"]
    if any(os.environ.get(var) for var in ci_vars):
        return True
    return bool(not sys.stderr.isatty())


def setup_logging(format_type: LogFormat = "auto") -> None:
    """
    Configure structured logging for query validation and flow creation.

    Args:
        format_type: "json" for JSON lines, "plain" for console output,
                "auto" to pick based on TTY/CI.
    """
    use_json = format_type == "json" or (format_type == "auto" and _should_use_json_format())

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
