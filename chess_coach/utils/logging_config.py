# chess_coach/utils/logging_config.py
"""
Configures application-wide structured logging using structlog.

Log records from our own modules and from third-party libraries (Qt, httpx,
google-genai) share one processor chain, so the console shows a single
consistent format and the optional log file holds one JSON object per line.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

import structlog
from structlog.types import Processor

# Libraries that log every HTTP round trip at INFO level.
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "urllib3")


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    extra_processors: Optional[Iterable[Processor]] = None,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configures structlog and the standard library root logger.

    Args:
        log_level: Minimum level for the root logger, e.g. "DEBUG".
        log_file: When given, records are also appended to this file as JSON.
        extra_processors: Processors inserted before rendering, e.g. the
                          `QtSignalProcessor` that forwards GUI messages.
        quiet_loggers: Third-party loggers raised to WARNING.
    """
    shared = _shared_processors()

    structlog.configure(
        processors=shared + list(extra_processors or []) + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processor=structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
    ))
    handlers: List[logging.Handler] = [console_handler]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processor=structlog.processors.JSONRenderer(),
        ))
        handlers.append(file_handler)

    logging.basicConfig(handlers=handlers, level=log_level.upper(), force=True)
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
