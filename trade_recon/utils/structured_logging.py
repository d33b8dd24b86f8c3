"""
Structured logging configuration for import runs

Provides JSON-formatted logging with structured fields for:
- Import file lifecycle (start, row/group problems, finish)
- Journal merge outcomes per account
- Operation timing
"""

import json
import logging
import logging.config
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message',
}


@dataclass
class ImportContext:
    """Context attached to every event of one import run"""
    session_id: str
    source_file: Optional[str] = None
    account_id: Optional[str] = None

    @classmethod
    def create(cls, **kwargs) -> 'ImportContext':
        session_id = kwargs.get(
            'session_id',
            f"import_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
        )
        return cls(
            session_id=session_id,
            source_file=kwargs.get('source_file'),
            account_id=kwargs.get('account_id'),
        )


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def __init__(self, extra_fields: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.thread and record.thread != threading.main_thread().ident:
            log_data['thread_id'] = record.thread

        log_data.update(self.extra_fields)

        extra_data = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            try:
                # Only include JSON-serializable values
                json.dumps(value)
                extra_data[key] = value
            except (TypeError, ValueError):
                extra_data[key] = str(value)

        if extra_data:
            log_data['extra'] = extra_data

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=str, separators=(',', ':'))


class ImportLogger:
    """
    Structured logger for import runs

    Emits events with a consistent shape (event_type plus context fields)
    """

    def __init__(self, logger_name: str, context: Optional[ImportContext] = None):
        self.logger = logging.getLogger(logger_name)
        self.context = context or ImportContext.create()

    def _log_structured(self, level: int, event_type: str, message: str, **kwargs):
        log_data = {
            'event_type': event_type,
            'session_id': self.context.session_id,
            **kwargs
        }
        if self.context.source_file:
            log_data['source_file'] = self.context.source_file
        if self.context.account_id:
            log_data['account_id'] = self.context.account_id

        self.logger.log(level, message, extra=log_data)

    def import_event(self, status: str, message: str, **kwargs):
        """Log import lifecycle event"""
        level = logging.ERROR if status == 'failed' else logging.INFO
        self._log_structured(level, f"import.{status}", message, **kwargs)

    def merge_event(self, account: str, appended: int, message: str, **kwargs):
        """Log journal merge outcome"""
        self._log_structured(logging.INFO, "journal.merge", message,
                             account=account, appended=appended, **kwargs)

    def performance_event(self, metric_name: str, value: float, unit: str,
                          message: str, **kwargs):
        """Log performance metric"""
        self._log_structured(logging.INFO, "performance.metric", message,
                             metric_name=metric_name, metric_value=value,
                             metric_unit=unit, **kwargs)


@contextmanager
def import_timer(logger: ImportLogger, operation: str, **context):
    """Context manager to time an import operation"""
    start_time = time.perf_counter()
    success = True
    error_msg = None

    try:
        yield
    except Exception as e:
        success = False
        error_msg = str(e)
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.performance_event(
            metric_name=f"{operation}_duration",
            value=duration_ms,
            unit="milliseconds",
            message=f"Completed {operation}",
            operation=operation,
            success=success,
            error_message=error_msg,
            **context
        )


def configure_structured_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    json_format: bool = True,
    extra_fields: Optional[Dict[str, Any]] = None
):
    """
    Configure logging for the application

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        console_output: Whether to output to console (stderr)
        json_format: Whether to use JSON formatting
        extra_fields: Extra fields to include in all log messages
    """
    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {},
        'handlers': {},
        'loggers': {
            'trade_recon': {
                'level': log_level,
                'handlers': [],
                'propagate': False
            }
        }
    }

    if json_format:
        config['formatters']['structured'] = {
            '()': StructuredLogFormatter,
            'extra_fields': extra_fields or {}
        }
        formatter_name = 'structured'
    else:
        config['formatters']['standard'] = {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
        formatter_name = 'standard'

    if console_output:
        config['handlers']['console'] = {
            'class': 'logging.StreamHandler',
            'level': log_level,
            'formatter': formatter_name,
            'stream': 'ext://sys.stderr'
        }
        config['loggers']['trade_recon']['handlers'].append('console')

    if log_file:
        config['handlers']['file'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': log_level,
            'formatter': formatter_name,
            'filename': log_file,
            'maxBytes': 10 * 1024 * 1024,  # 10MB
            'backupCount': 5
        }
        config['loggers']['trade_recon']['handlers'].append('file')

    logging.config.dictConfig(config)


def get_import_logger(name: str, context: Optional[ImportContext] = None) -> ImportLogger:
    """Get an import logger with optional context"""
    return ImportLogger(name, context)
