"""
Logging configuration for proofspec.

Structured JSON logging for validation outcomes. The library only emits
records; handlers are installed by configure_logging() when an
application asks for them.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import List, Optional

from .config import ValidatorSettings, load_settings

# Caller-supplied id tying log records of one request together
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class ValidationAuditLogger:
    """
    Logger for validation outcomes.

    Records which specifications were accepted (by digest) and why others
    were rejected, without echoing opaque key material.
    """

    def __init__(self, name: str = "proofspec.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {"event_type": event_type, **kwargs}
        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def spec_validated(self, spec_hash: str, clause_count: int, attribute_count: int) -> None:
        self._log(
            logging.INFO,
            "SPEC_VALIDATED",
            spec_hash=spec_hash,
            clause_count=clause_count,
            attribute_count=attribute_count,
            message=f"Specification accepted with {clause_count} clause(s)"
        )

    def spec_rejected(self, issue_kinds: List[str], locations: List[str]) -> None:
        self._log(
            logging.WARNING,
            "SPEC_REJECTED",
            issue_count=len(issue_kinds),
            issue_kinds=sorted(set(issue_kinds)),
            locations=locations,
            message=f"Specification rejected with {len(issue_kinds)} issue(s)"
        )


def configure_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
    log_file: Optional[str] = None,
    settings: Optional[ValidatorSettings] = None
) -> None:
    """
    Configure root logging for an application embedding proofspec.

    Args:
        level: Log level; defaults to settings.log_level
        json_format: Use StructuredFormatter; defaults to settings.log_json
        log_file: Optional file path for log output
        settings: Settings to take defaults from; defaults to load_settings()
    """
    settings = settings or load_settings()
    level = level or settings.log_level
    json_format = settings.log_json if json_format is None else json_format

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Set the correlation id for the current context, generating one if needed."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    return correlation_id_var.get()


audit_log = ValidationAuditLogger()
