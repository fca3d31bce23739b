"""structlog configuration for the API server and the CLI.

Two renderers share one processor chain: a ConsoleRenderer (coloured only
on a TTY) and a JSONRenderer, picked when ``json_output`` is set or when
``APP_ENV=production``.  The stdlib root logger gets a
``ProcessorFormatter`` over the same chain, so lines from uvicorn, chromadb
and the HTTP SDKs come out in the same shape as ours.
"""

import logging
import os
import sys

import structlog

# Third-party loggers held at WARNING unless we run at DEBUG.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "chromadb", "fastembed")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _renderer(use_json: bool) -> structlog.types.Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _route_stdlib(level: str, processors: list, renderer: structlog.types.Processor) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *processors,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    library_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Set up structlog and the stdlib bridge; safe to call more than once.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (case-insensitive).
        json_output: Emit JSON lines even outside production.

    Returns:
        The root structlog logger.
    """
    level = log_level.upper()
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"
    processors = _shared_processors()
    renderer = _renderer(use_json)

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _route_stdlib(level, processors, renderer)
    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Named logger; applies the default configuration if none is in place yet."""
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)
