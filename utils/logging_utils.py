"""
Process-wide logging setup for the AgriConnect assist service.

Entrypoints call ``setup_logging`` once; modules grab a tagged adapter:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="weather_service")
    logger.info("Serving cached weather", extra={"key": key})

Every record carries ``job_name`` and ``tag`` fields so a single formatter can
render them. INFO and below go to stdout, WARNING and above to stderr.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Mapping, Optional


# Early records (before setup_logging) still get a timestamp and level.
BOOTSTRAP_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
BOOTSTRAP_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    level=logging.INFO,
    format=BOOTSTRAP_FORMAT,
    datefmt=BOOTSTRAP_DATEFMT,
)

DEFAULT_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(job_name)s | %(tag)s | %(name)s | %(message)s"
)
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONFIGURED: bool = False


class MaxLevelFilter(logging.Filter):
    """Pass only records at or below ``max_level``."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """
    Give every record a ``tag``.

    Adapters from ``get_tagged_logger`` set it already; plain loggers (uvicorn,
    requests) get the last segment of their dotted name.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            logger_name = getattr(record, "name", "")
            record.tag = logger_name.split(".")[-1] if logger_name else "-"
        return True


class JobNameFilter(logging.Filter):
    """Stamp records with the process-level ``job_name`` (default ``-``)."""

    def __init__(self, job_name: Optional[str] = None) -> None:
        super().__init__()
        self._job_name = job_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "job_name"):
            record.job_name = self._job_name
        return True


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Build the ``dictConfig`` mapping used by ``setup_logging``.

    Parameters
    ----------
    level:
        Root logger level (e.g., "DEBUG", "INFO", logging.INFO).
    log_format:
        Formatter pattern for log messages. May reference ``job_name`` and
        ``tag``; both handlers attach the filters that set them.
    date_format:
        Formatter pattern for timestamps.
    job_name:
        Optional process name (e.g. "agriconnect-assist") stamped on every
        record as ``job_name``.

    Returns
    -------
    dict suitable for logging.config.dictConfig(). DEBUG/INFO records go to
    stdout, WARNING and above to stderr.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "job_name": {"()": JobNameFilter, "job_name": job_name},
            "stdout_max_info": {
                "()": MaxLevelFilter,
                "max_level": logging.INFO,
            },
        },
        "formatters": {
            "standard": {
                "format": log_format,
                "datefmt": date_format,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name", "stdout_max_info"],
                "level": "DEBUG",
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "job_name"],
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["stdout", "stderr"],
        },
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    job_name: Optional[str] = None,
    override_existing: bool = False,
) -> None:
    """
    Apply the logging configuration once per process.

    Call this from the entrypoint (``run_server.py``) before the app starts
    serving requests.

    Parameters
    ----------
    level:
        Root logger level (e.g., "DEBUG", "INFO"); normally
        ``settings.log_level``.
    log_format:
        Formatter pattern for log messages. By default includes:
            - asctime
            - levelname
            - job_name
            - tag
            - logger name
            - message
    date_format:
        Timestamp format for ``asctime``.
    job_name:
        Logical name for this process. Appears in ``%(job_name)s``.
    override_existing:
        If False (default), repeated calls are no-ops after the first. If
        True, the configuration is reapplied each time (used by tests).
    """
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    logging.config.dictConfig(
        build_logging_config(
            level=level,
            log_format=log_format,
            date_format=date_format,
            job_name=job_name,
        )
    )
    _CONFIGURED = True


def get_tagged_logger(name: str, *, tag: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Return a LoggerAdapter that always carries a ``tag`` field.

    Parameters
    ----------
    name:
        Base logger name (usually __name__).
    tag:
        Component tag. If omitted, defaults to the last segment of the logger
        name, e.g. "agriconnect.weather_service" -> "weather_service".

    Returns
    -------
    logging.LoggerAdapter
        Used like a normal logger:

            logger = get_tagged_logger(__name__, tag="openweather_client")
            logger.info("Fetching forecast")

        Records emitted through it carry ``tag`` for the formatter.
    """
    base_logger = logging.getLogger(name)
    if tag is None:
        tag = name.split(".")[-1]
    return logging.LoggerAdapter(base_logger, {"tag": tag})


def mask_secret(value: Optional[str], *, visible: int = 4) -> str:
    """Mask an API key for logs, keeping only the last ``visible`` characters.

    Examples
    --------
    - ``sk-abcdef123456`` -> ``***3456``
    - ``abc`` -> ``***``
    - ``None`` or ``""`` -> ``<unset>``
    """
    if not value:
        return "<unset>"
    if len(value) <= visible * 2:
        return "***"
    return f"***{value[-visible:]}"
