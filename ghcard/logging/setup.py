"""Structlog configuration for ghcard."""

import logging
import sys

import structlog

from ghcard.config import CardConfig, LogFormat

# Client libraries that log every upstream request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "PIL")


def _renderer_chain(log_format: LogFormat) -> list:
    if log_format == LogFormat.JSON:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    # The CLI prints its own results to stdout, so colors only when stderr is a tty
    return [
        structlog.dev.set_exc_info,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def configure_logging(config: CardConfig | None = None) -> None:
    """
    Configure structlog for the card service.

    Log lines go to stderr, leaving stdout to the CLI. Upstream client
    loggers are held at WARNING unless the level is DEBUG.

    Args:
        config: CardConfig instance, uses defaults if None
    """
    if config is None:
        config = CardConfig()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(log_level if log_level <= logging.DEBUG else max(log_level, logging.WARNING))

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer_chain(config.log_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str | None = None) -> structlog.BoundLogger:
    """
    Get a logger, optionally bound to a pipeline component.

    Args:
        component: Name such as ``fetcher`` or ``renderer``

    Returns:
        structlog BoundLogger
    """
    logger = structlog.get_logger("ghcard")
    if component:
        logger = logger.bind(component=component)
    return logger
