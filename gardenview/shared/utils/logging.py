# 📄 File: gardenview/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Sets up a smart logging system that records what the garden app does in a structured way,
# so failed uploads, missing tables and slow AI calls are easy to find later.

# 🧪 Purpose (Technical Summary):
# Structured logging with python-json-logger JSON output, contextual fields (user id,
# correlation id) carried through contextvars, and a thin StructuredLogger wrapper
# that turns keyword arguments into extra fields.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: Per-command context tracking
# - pydantic: settings validation errors

# 🔄 Connected Modules / Calls From:
# Used by: every gardenview module; handler commands run inside log_context()

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
from uuid import uuid4

from pydantic import ValidationError as SettingsValidationError
from pythonjsonlogger import jsonlogger

from gardenview.shared.config.settings import get_settings

user_id_var: ContextVar[str] = ContextVar('user_id', default='')
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')

SERVICE_NAME = 'gardenview'
HOSTNAME = os.uname().nodename if hasattr(os, 'uname') else 'unknown'

# Loud third-party loggers kept at WARNING
QUIET_LOGGERS = ('httpx', 'httpcore', 'hpack', 'aiohttp', 'asyncio', 'PIL')

_SPECIAL_KWARGS = frozenset({'exc_info', 'stack_info', 'stacklevel'})

_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}


def _context_fields() -> Dict[str, str]:
    """Command context of the current task, empty values left out."""
    fields = {'user_id': user_id_var.get(), 'correlation_id': correlation_id_var.get()}
    return {key: value for key, value in fields.items() if value}


class ContextualFormatter(logging.Formatter):
    """Plain-text formatter; context and extra fields become record attributes."""

    def format(self, record):
        record.timestamp = datetime.now(timezone.utc).isoformat()
        record.service = SERVICE_NAME
        record.hostname = HOSTNAME
        record.user_id = user_id_var.get()
        record.correlation_id = correlation_id_var.get()
        for key, value in (getattr(record, 'extra_fields', None) or {}).items():
            setattr(record, key, value)
        return super().format(record)


class JSONFormatter(jsonlogger.JsonFormatter):
    """
    One JSON object per record.

    StructuredLogger fields arrive nested under ``extra_fields`` and are emitted
    as ``extra``; the command context is added at top level.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('json_ensure_ascii', False)
        super().__init__(*args, **kwargs)

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)
        log_record.update({
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
            'service': SERVICE_NAME,
            'hostname': HOSTNAME,
        })
        log_record.update(_context_fields())

        extra_fields = log_record.pop('extra_fields', None)
        if extra_fields:
            log_record['extra'] = extra_fields


class StructuredLogger:
    """
    Logger wrapper: ``logger.info("Saved", plant_id=...)`` puts ``plant_id`` in the
    record's extra fields instead of requiring an ``extra=`` dict.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def critical(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.CRITICAL, message, extra, exc_info=exc_info, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        if not self.logger.isEnabledFor(level):
            return
        passthrough = {key: kwargs.pop(key) for key in list(kwargs) if key in _SPECIAL_KWARGS}
        fields = {**(extra or {}), **kwargs}
        if fields:
            passthrough['extra'] = {'extra_fields': fields}
        self.logger.log(level, message, **passthrough)

    def log_user_action(self, action: str, user_id: str, resource: str = None,
                        result: str = 'success', **fields):
        """Audit line for something the signed-in gardener did."""
        target = f" on {resource}" if resource else ""
        self.info(
            f"User {user_id} performed {action}{target}",
            event_type='user_action',
            action=action,
            user_id=user_id,
            result=result,
            **({'resource': resource} if resource else {}),
            **fields,
        )

    def log_business_event(self, event_type: str, description: str, entity_id: str = None,
                           entity_type: str = None, **fields):
        """Domain event such as a plant being added."""
        entity = {key: value for key, value in (('entity_id', entity_id), ('entity_type', entity_type)) if value}
        self.info(description, event_type='business_event', business_event_type=event_type, **entity, **fields)


def _handlers(formatter: logging.Formatter, level: int, log_file: Optional[str],
              enable_console: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    log_level: str = None,
    log_format: str = None,
    log_file: str = None,
    enable_console: bool = True
) -> logging.Logger:
    """
    Configure the root logger once per process.

    Args:
        log_level: Logging level (defaults to settings.LOG_LEVEL)
        log_format: 'json' or 'text' (defaults to settings.LOG_FORMAT)
        log_file: Optional file to mirror log output into
        enable_console: Whether to log to stdout

    Returns:
        The "startup" logger
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger("startup")

    try:
        settings = get_settings()
        log_level = log_level or settings.LOG_LEVEL
        log_format = log_format or settings.LOG_FORMAT
        log_file = log_file or settings.LOG_FILE
    except SettingsValidationError:
        # Logging must come up even before the environment is complete.
        log_level = log_level or 'INFO'
        log_format = log_format or 'json'

    level = getattr(logging, log_level.upper(), logging.INFO)
    if log_format.lower() == 'json':
        formatter = JSONFormatter('%(message)s')
    else:
        formatter = ContextualFormatter('%(timestamp)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in _handlers(formatter, level, log_file, enable_console):
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True
    return logging.getLogger("startup")


def get_logger(name: str) -> StructuredLogger:
    """Cached StructuredLogger for ``name`` (usually ``__name__``)."""
    if name not in _loggers_cache:
        _loggers_cache[name] = StructuredLogger(name)
    return _loggers_cache[name]


@contextmanager
def log_context(user_id: str = None, correlation_id: str = None) -> Iterator[Dict[str, Optional[str]]]:
    """
    Tag every log line emitted inside the block with the user and a correlation id.

    Args:
        user_id: Signed-in user identifier
        correlation_id: Identifier tying together the log lines of one command
    """
    correlation_id = correlation_id or str(uuid4())
    user_token = user_id_var.set(user_id or '')
    correlation_token = correlation_id_var.set(correlation_id)
    try:
        yield {'user_id': user_id, 'correlation_id': correlation_id}
    finally:
        user_id_var.reset(user_token)
        correlation_id_var.reset(correlation_token)


__all__ = [
    "ContextualFormatter",
    "JSONFormatter",
    "StructuredLogger",
    "setup_logging",
    "get_logger",
    "log_context",
    "user_id_var",
    "correlation_id_var",
]
