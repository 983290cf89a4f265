"""
Audit Logger

DESIGN DECISION: Every ledger computation that produces a user-visible
number is logged. This provides:
1. Traceability from a "who owes whom" answer back to its inputs
2. Debugging capability
3. A hook for the caller to persist the trail

The audit logger:
- Is synchronous, like the calculators it wraps
- Gracefully handles failures (a broken sink never breaks a calculation)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from splitledger.config import get_settings
from splitledger.models.audit import AuditEvent, AuditSeverity

AuditSink = Callable[[AuditEvent], None]


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog on top of the standard library logger.

    Defaults come from LoggingSettings (LOG_LEVEL, LOG_JSON_OUTPUT).
    """
    log_settings = get_settings().logging
    level = level or log_settings.level
    json_output = log_settings.json_output if json_output is None else json_output

    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional sink supplied by the caller (for persistence)
    """

    def __init__(self, sink: Optional[AuditSink] = None):
        """
        Initialize audit logger.

        Args:
            sink: Callable receiving every event.
                  If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("splitledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Forwards to the sink if one is configured.

        Returns True if the sink accepted the event (or no sink is configured).
        """
        log_dict = event.to_log_dict()
        # structlog uses `event` for the message itself
        log_dict.pop("event_type")

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error(event.event_type.value, **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning(event.event_type.value, **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug(event.event_type.value, **log_dict)
        else:
            self._logger.info(event.event_type.value, **log_dict)

        if self._sink is not None:
            try:
                self._sink(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a settle-up view).
    Pass it through all subsequent operations.
    """
    return uuid4()
