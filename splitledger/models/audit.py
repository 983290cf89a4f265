"""
Audit Models for splitledger

Every computation that feeds a user-visible number is logged for audit
purposes. This provides:
1. Traceability of who-owes-whom answers back to their inputs
2. Debugging information when a balance looks wrong
3. Ability to reconstruct why a split was rejected

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the split -> balance -> settle-up pipeline has its own
    event type.
    """
    # Splitting
    SPLIT_CALCULATED = "split_calculated"
    SPLIT_REJECTED = "split_rejected"

    # Aggregation
    BALANCES_COMPUTED = "balances_computed"
    DEBTS_SIMPLIFIED = "debts_simplified"

    # Settlement checks
    SETTLEMENT_VALIDATED = "settlement_validated"
    SETTLEMENT_REJECTED = "settlement_rejected"
    EXPENSE_FLAGGED = "expense_flagged"

    # Membership
    DEPARTURE_ALLOWED = "departure_allowed"
    DEPARTURE_BLOCKED = "departure_blocked"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'group', 'settlement')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one settle-up)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.split_calculated("equal", total, 3, correlation_id)
        event = AuditEventBuilder.debts_simplified(group_id, 2, correlation_id)
    """

    @staticmethod
    def split_calculated(
        method: str,
        total: Decimal,
        participant_count: int,
        correlation_id: UUID,
        expense_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_CALCULATED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Split {total} {method} among {participant_count} participants",
            details={
                "method": method,
                "total": str(total),
                "participant_count": participant_count,
            },
        )

    @staticmethod
    def split_rejected(
        method: str,
        error_code: str,
        message: str,
        correlation_id: UUID,
        expense_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Split rejected: {error_code}",
            details={"method": method},
            error_code=error_code,
            error_message=message,
        )

    @staticmethod
    def balances_computed(
        group_id: Optional[str],
        expense_count: int,
        settlement_count: int,
        participant_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCES_COMPUTED,
            entity_type="group",
            entity_id=group_id,
            correlation_id=correlation_id,
            description=(
                f"Balances computed for {participant_count} participants "
                f"from {expense_count} expenses and {settlement_count} settlements"
            ),
            details={
                "expense_count": expense_count,
                "settlement_count": settlement_count,
                "participant_count": participant_count,
            },
        )

    @staticmethod
    def debts_simplified(
        group_id: Optional[str],
        transfer_count: int,
        total_transferred: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBTS_SIMPLIFIED,
            entity_type="group",
            entity_id=group_id,
            correlation_id=correlation_id,
            description=f"Debts simplified to {transfer_count} transfers",
            details={
                "transfer_count": transfer_count,
                "total_transferred": str(total_transferred),
            },
        )

    @staticmethod
    def settlement_checked(
        from_id: str,
        to_id: str,
        amount: Decimal,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        if issues:
            return AuditEvent(
                event_type=AuditEventType.SETTLEMENT_REJECTED,
                severity=AuditSeverity.WARNING,
                entity_type="settlement",
                correlation_id=correlation_id,
                description=f"Settlement {from_id} -> {to_id} rejected with {len(issues)} issues",
                details={
                    "from_id": from_id,
                    "to_id": to_id,
                    "amount": str(amount),
                    "issues": issues,
                },
            )
        return AuditEvent(
            event_type=AuditEventType.SETTLEMENT_VALIDATED,
            entity_type="settlement",
            correlation_id=correlation_id,
            description=f"Settlement {from_id} -> {to_id} of {amount} accepted",
            details={
                "from_id": from_id,
                "to_id": to_id,
                "amount": str(amount),
            },
        )

    @staticmethod
    def expense_flagged(
        payer_id: str,
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_FLAGGED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description=f"Expense paid by {payer_id} flagged with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def departure_checked(
        participant_id: Optional[str],
        group_id: Optional[str],
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        """participant_id is None when the whole group is being closed."""
        subject = participant_id or "group"
        if issues:
            return AuditEvent(
                event_type=AuditEventType.DEPARTURE_BLOCKED,
                severity=AuditSeverity.WARNING,
                entity_type="group",
                entity_id=group_id,
                correlation_id=correlation_id,
                description=f"Departure of {subject} blocked by unsettled balances",
                details={"participant_id": participant_id, "issues": issues},
            )
        return AuditEvent(
            event_type=AuditEventType.DEPARTURE_ALLOWED,
            entity_type="group",
            entity_id=group_id,
            correlation_id=correlation_id,
            description=f"Departure of {subject} allowed",
            details={"participant_id": participant_id},
        )
