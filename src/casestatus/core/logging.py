"""Structured logging: structlog JSON events, request IDs, and stdlib routing.

Public lookups carry a respondent's registration number and nationality in
the query string. Our own events never log query strings, and the
``StripQueryString`` filter removes them from uvicorn's access log lines.
"""

import contextvars
import logging
import logging.config
import os

import structlog

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID for this context and bind it to every later event."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


class StripQueryString(logging.Filter):
    """Drop the query string from uvicorn access records (args: addr, method, path, version, status)."""

    def filter(self, record: logging.LogRecord) -> bool:
        args = record.args
        if isinstance(args, tuple) and len(args) == 5 and isinstance(args[2], str):
            record.args = (args[0], args[1], args[2].split("?", 1)[0], args[3], args[4])
        return True


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
    ]


def _renderer(log_format: str):
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging(level: str = "INFO", log_format: str | None = None) -> None:
    """Configure structlog and route stdlib loggers (uvicorn, sqlalchemy) through it.

    Args:
        level: Minimum level for stdlib loggers
        log_format: "json" (default) or "console"; falls back to LOG_FORMAT
    """
    log_format = (log_format or os.getenv("LOG_FORMAT", "json")).lower()

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "strip_query": {"()": StripQueryString},
            },
            "formatters": {
                "structured": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": _shared_processors(),
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "default": {
                    "level": level,
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "filters": ["strip_query"],
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {"handlers": ["default"], "level": level, "propagate": True},
                "uvicorn.access": {"handlers": ["default"], "level": level, "propagate": False},
            },
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger tagged with the module name."""
    return structlog.get_logger(name).bind(logger=name)
