from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TextIO

import structlog

_STREAMS = ("stdout", "stderr")


@dataclass
class LoggingConfig:
    json_output: bool = True
    log_level: str = "INFO"
    stream: str = "stdout"
    # Handlers carrying this name are replaced when logging is configured again
    handler_name: str = "blendsearch"

    def __post_init__(self) -> None:
        if self.stream not in _STREAMS:
            raise ValueError(f"'logging.stream' must be one of {', '.join(_STREAMS)}, got '{self.stream}'")
        if not self.handler_name:
            raise ValueError("'logging.handler_name' must not be empty")


def _resolve_stream(name: str) -> TextIO:
    # Looked up on every call so redirected std streams are honoured
    match name:
        case "stderr":
            return sys.stderr
        case _:
            return sys.stdout


def configure_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """Route structlog through a named stdlib handler and return that handler.

    Records go to ``config.stream`` rendered as JSON lines, or with the
    console renderer when ``json_output`` is off (colours only on a tty).
    Request context bound with ``structlog.contextvars`` is merged into every
    event. An unknown ``log_level`` falls back to INFO.
    """
    config = config or LoggingConfig()
    stream = _resolve_stream(config.stream)

    shared_processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor
    if config.json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    for existing in [h for h in root_logger.handlers if h.get_name() == config.handler_name]:
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream)
    handler.set_name(config.handler_name)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))
    root_logger.addHandler(handler)
    return handler
