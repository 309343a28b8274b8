"""
Logging infrastructure for Picton.

Console (stderr) and rotating-file output in JSON or text form, driven by
the ``logging`` section of the Picton configuration. Storage credentials
(account keys, SAS signatures, SharedKey headers) are scrubbed from the
message, its arguments and any context attached with ``log_with_context``
before a record reaches a handler.
"""

import json
import logging
import logging.handlers
import re
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .config_manager import REDACTED, LoggingConfig

# Set once per CLI invocation; attached to every JSON record
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

_CREDENTIAL_PATTERNS = [
    re.compile(r'(Authorization:\s+(?:Bearer\s+|SharedKey\s+)?)\S+', re.IGNORECASE),
    re.compile(r'(AccountKey=)[^;]+', re.IGNORECASE),
    re.compile(r'(SharedAccessSignature=)[^;&]+', re.IGNORECASE),
    re.compile(r'([?&]sig=)[^;&\s]+', re.IGNORECASE),
    re.compile(r'(account_key["\']?\s*[:=]\s*["\']?)[^"\'\s,}]+', re.IGNORECASE),
]

_SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([KMG]?B)?\s*$', re.IGNORECASE)
_SIZE_UNITS = {None: 1, 'B': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}


def redact(value: Any) -> Any:
    """Scrub credentials from a string; other values are returned unchanged."""
    if not isinstance(value, str):
        return value
    for pattern in _CREDENTIAL_PATTERNS:
        value = pattern.sub(rf'\g<1>{REDACTED}', value)
    return value


class SensitiveDataFilter(logging.Filter):
    """Redact storage credentials from the message, its args and its context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(redact(arg) for arg in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: redact(arg) for key, arg in record.args.items()}

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            record.context = {key: redact(item) for key, item in context.items()}
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; lease context is carried under ``context``."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if corr_id := correlation_id.get():
            entry["correlation_id"] = corr_id
        if context := getattr(record, "context", None):
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _formatter(format_type: str) -> logging.Formatter:
    if format_type == "json":
        return JSONFormatter()
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _attach(root_logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setFormatter(formatter)
    handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(handler)


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Configure the root logger from a LoggingConfig.

    Existing root handlers are replaced. Console output goes to stderr so
    lease ids and SAS URIs printed on stdout stay machine-readable.

    Args:
        config: Logging settings; defaults to INFO-level JSON on stderr
    """
    config = config or LoggingConfig()
    level = str(getattr(config.level, "value", config.level)).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = _formatter(config.format)
    _attach(root_logger, logging.StreamHandler(sys.stderr), formatter)

    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=config.file,
            maxBytes=parse_size(config.rotation_size),
            backupCount=config.rotation_count,
            encoding='utf-8'
        )
        _attach(root_logger, file_handler, formatter)

    for module_name, module_level in (config.module_levels or {}).items():
        logging.getLogger(module_name).setLevel(module_level.upper())

    log_with_context(
        root_logger,
        logging.DEBUG,
        "Logging configured",
        level=level,
        format=config.format,
        file=config.file,
    )


def parse_size(size: str) -> int:
    """
    Convert a rotation size such as "512KB" or "1.5MB" to bytes.

    Raises:
        ValueError: If the size is not a number with an optional B/KB/MB/GB unit
    """
    match = _SIZE_PATTERN.match(size)
    if not match:
        raise ValueError(f"Invalid size '{size}': expected a number with an optional B, KB, MB or GB unit")
    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[unit.upper() if unit else None])


def set_correlation_id(corr_id: Optional[str]) -> Token:
    """Bind a correlation id to the current context; returns the reset token."""
    return correlation_id.set(corr_id)


def log_with_context(logger: logging.Logger, level: int, message: str, /, **context: Any) -> None:
    """Log ``message`` with keyword fields attached as ``record.context``."""
    extra = {"context": context} if context else {}
    logger.log(level, message, extra=extra)
