"""
Data Models Package

This package contains all Pydantic models used in splitledger.
All data flowing through the calculators must conform to these schemas.
"""

from splitledger.models.split import (
    SplitErrorKind,
    SplitInput,
    SplitMethod,
    SplitOutcome,
    SplitResult,
)
from splitledger.models.ledger import (
    Balance,
    ExpenseRecord,
    SettlementRecord,
    SettleUpPlan,
    SimplifiedDebt,
    SplitShare,
    UserDebts,
    ValidationIssue,
    ValidationResult,
)
from splitledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Split models
    "SplitErrorKind",
    "SplitInput",
    "SplitMethod",
    "SplitOutcome",
    "SplitResult",
    # Ledger models
    "Balance",
    "ExpenseRecord",
    "SettlementRecord",
    "SettleUpPlan",
    "SimplifiedDebt",
    "SplitShare",
    "UserDebts",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
