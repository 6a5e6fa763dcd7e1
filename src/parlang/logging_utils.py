"""Process-level logging setup for applications embedding the checker.

Library modules only emit through `loguru.logger`; sinks are installed here,
by the host application, through `configure_logging`.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Literal

from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "console"]

LOG_FILTER_ENV = "PARLANG_LOG_FILTER"

_STDERR_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"
_CONFIGURED_PROFILE: LogProfile | None = None


@dataclass(frozen=True)
class LogFilter:
    """A parsed PARLANG_LOG_FILTER value.

    Format: "level" or "level,module=level,..."; a module level of "false"
    silences that module.

    Examples:
        - "info"
        - "debug,parlang.core.unify=info"
        - "info,parlang.core.checker=false"
    """

    level: str = "INFO"
    modules: dict[str | None, str | bool] = field(default_factory=dict)

    @classmethod
    def parse(cls, value: str) -> "LogFilter":
        level = "INFO"
        modules: dict[str | None, str | bool] = {}
        for part in value.split(","):
            part = part.strip()
            if not part:
                continue
            module, sep, module_level = part.partition("=")
            if not sep:
                level = part.upper()
            elif module_level.strip().lower() == "false":
                modules[module.strip()] = False
            else:
                modules[module.strip()] = module_level.strip().upper()
        return cls(level, modules)

    @classmethod
    def from_env(cls) -> "LogFilter":
        return cls.parse(os.getenv(LOG_FILTER_ENV, "info"))


class InterceptHandler(logging.Handler):
    """Route stdlib `logging` records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip frames inside the logging module so loguru reports the caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _sink_options(profile: LogProfile) -> dict[str, Any]:
    if profile == "console":
        handler = RichHandler(
            console=get_console(),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )
        return {"sink": handler, "format": "{message}"}
    return {"sink": sys.stderr, "format": _STDERR_FORMAT}


def configure_logging(*, profile: LogProfile = "default", log_filter: LogFilter | None = None) -> None:
    """Install the loguru sink for `profile`.

    Calling again with the profile already in place does nothing. The
    filter defaults to the one read from PARLANG_LOG_FILTER.
    """
    global _CONFIGURED_PROFILE
    if profile == _CONFIGURED_PROFILE:
        return

    log_filter = log_filter if log_filter is not None else LogFilter.from_env()

    logger.remove()
    logger.add(
        **_sink_options(profile),
        level=log_filter.level,
        filter=log_filter.modules,
        backtrace=False,
        diagnose=False,
    )
    if not any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers):
        logging.getLogger().addHandler(InterceptHandler())

    _CONFIGURED_PROFILE = profile
    logger.debug("logging.configured profile={} level={}", profile, log_filter.level)
