"""
Logging configuration for the Health Report Registry.

Provides structured JSON logging and an audit logger for every state
change and every rejected call.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable for request ID tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in a consistent JSON format suitable for
    log aggregation systems.
    """

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

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Specialized logger for registry audit events.

    Hashes are logged as hex; contact info is never logged.
    """

    def __init__(self, name: str = "healthreport.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        extra = {
            "event_type": event_type,
            "request_id": request_id_var.get(),
            **kwargs
        }

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

    def authority_bound(self, authority: str) -> None:
        self._log(
            logging.INFO,
            "AUTHORITY_BOUND",
            authority=authority,
            message=f"Authority bound to {authority}"
        )

    def config_changed(self, setting: str, old_value: int, new_value: int) -> None:
        self._log(
            logging.INFO,
            "CONFIG_CHANGED",
            setting=setting,
            old_value=old_value,
            new_value=new_value,
            message=f"{setting} changed from {old_value} to {new_value}"
        )

    def reporter_banned(self, authority: str, reporter: str) -> None:
        self._log(
            logging.WARNING,
            "REPORTER_BANNED",
            authority=authority,
            reporter=reporter,
            message=f"Reporter {reporter} banned"
        )

    def report_submitted(
        self,
        report_id: int,
        reporter: str,
        report_type: str,
        severity: int,
        category: str
    ) -> None:
        self._log(
            logging.INFO,
            "REPORT_SUBMITTED",
            report_id=report_id,
            reporter=reporter,
            report_type=report_type,
            severity=severity,
            category=category,
            message=f"Report {report_id} submitted by {reporter}"
        )

    def report_updated(self, report_id: int, updater: str, timestamp: int) -> None:
        self._log(
            logging.INFO,
            "REPORT_UPDATED",
            report_id=report_id,
            updater=updater,
            timestamp=timestamp,
            message=f"Report {report_id} hashes revised"
        )

    def report_status_changed(
        self,
        report_id: int,
        old_status: str,
        new_status: str,
        authority: str
    ) -> None:
        self._log(
            logging.INFO,
            "REPORT_STATUS_CHANGED",
            report_id=report_id,
            old_status=old_status,
            new_status=new_status,
            authority=authority,
            message=f"Report {report_id}: {old_status} -> {new_status}"
        )

    def fee_charged(self, amount: int, sender: str, recipient: str) -> None:
        self._log(
            logging.INFO,
            "FEE_CHARGED",
            amount=amount,
            sender=sender,
            recipient=recipient,
            message=f"Fee {amount} charged to {sender}"
        )

    def request_rejected(
        self,
        operation: str,
        error_code: int,
        error_name: str,
        caller: Optional[str] = None
    ) -> None:
        """Log a call refused by a guard check."""
        self._log(
            logging.WARNING,
            "REQUEST_REJECTED",
            operation=operation,
            error_code=error_code,
            error_name=error_name,
            caller=caller,
            message=f"{operation} rejected: {error_name}"
        )

    def rate_limit_exceeded(self, client_id: str, endpoint: str) -> None:
        self._log(
            logging.WARNING,
            "RATE_LIMIT_EXCEEDED",
            client_id=client_id,
            endpoint=endpoint,
            message=f"Rate limit exceeded for {client_id} on {endpoint}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID for the current context.

    Args:
        request_id: Request ID to set, or None to generate one

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


# Global audit logger instance
audit_log = AuditLogger()
