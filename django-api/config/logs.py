import logging
import os
import sys
import threading

import structlog

from config.env import get_from_env, str_to_bool

DEBUG = get_from_env("DEBUG", False, type_cast=str_to_bool)
TEST = get_from_env(
    "TEST",
    "test" in sys.argv or sys.argv[0].endswith("pytest") or "pytest" in sys.modules,
    type_cast=str_to_bool,
)

LOGGING_FORMATTER_NAME = os.getenv("LOGGING_FORMATTER_NAME", "default")
DEFAULT_LOG_LEVEL = os.getenv("DJANGO_LOG_LEVEL", "ERROR" if TEST else "INFO")


def add_pid_and_tid(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    event_dict["pid"] = os.getpid()
    event_dict["tid"] = threading.get_ident()
    return event_dict


# Standard library records pass through the same chain so both render alike.
foreign_pre_chain: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    add_pid_and_tid,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        *foreign_pre_chain,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": True,
    "formatters": {
        "default": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.dev.ConsoleRenderer(colors=DEBUG),
            "foreign_pre_chain": foreign_pre_chain,
        },
        "json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.JSONRenderer(),
            "foreign_pre_chain": foreign_pre_chain,
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": LOGGING_FORMATTER_NAME,
        },
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {"handlers": ["console"], "level": DEFAULT_LOG_LEVEL},
    "loggers": {
        "django": {"handlers": ["console"], "level": DEFAULT_LOG_LEVEL, "propagate": False},
        "django.server": {"handlers": ["null"], "propagate": False},
        "festivals": {"handlers": ["console"], "level": DEFAULT_LOG_LEVEL, "propagate": False},
        "urllib3": {"level": "WARN"},
    },
}
