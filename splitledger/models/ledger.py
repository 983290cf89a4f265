"""
Ledger Models for splitledger

These models define the records flowing through balance aggregation and
debt simplification:

    ExpenseRecord / SettlementRecord  ->  Balance  ->  SimplifiedDebt

DESIGN DECISION: None of these are stored. They are recomputed from the
caller's expense and settlement rows on every query, so none of them carry
identity or timestamps.

The aggregator trusts its caller: negative amounts and unknown participant
ids are accepted as-is. Only structurally broken records (non-numeric
amounts, empty ids) are rejected here.
"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from splitledger.models.split import coerce_decimal


# =============================================================================
# AGGREGATION INPUT
# =============================================================================

class SplitShare(BaseModel):
    """How much of one expense a participant is responsible for."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    participant_id: str = Field(..., min_length=1)
    amount: Decimal

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)


class ExpenseRecord(BaseModel):
    """
    One shared expense.

    `payer_id` fronted `amount`. `splits` describes who owes what; the
    payer may or may not appear among them.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    payer_id: str = Field(
        ...,
        min_length=1,
        description="Participant who paid"
    )
    amount: Decimal = Field(
        ...,
        description="Total amount paid"
    )
    splits: list[SplitShare] = Field(
        default_factory=list,
        description="Per-participant shares of the amount"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=200,
        description="What the expense was for"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @property
    def split_total(self) -> Decimal:
        return sum((split.amount for split in self.splits), Decimal("0"))


class SettlementRecord(BaseModel):
    """
    A direct repayment made outside the expense-splitting flow.

    Reduces `from_id`'s debt and `to_id`'s credit.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    from_id: str = Field(
        ...,
        min_length=1,
        description="Participant who paid"
    )
    to_id: str = Field(
        ...,
        min_length=1,
        description="Participant who received"
    )
    amount: Decimal
    notes: Optional[str] = Field(
        default=None,
        max_length=500,
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)


# =============================================================================
# AGGREGATION OUTPUT
# =============================================================================

class Balance(BaseModel):
    """
    A participant's net position.

    Positive: the group owes them. Negative: they owe the group.

    `total_paid` and `total_owed` break the expense side down: what they
    fronted and what their own shares add up to. Settlements are not in
    either. Both are None when the balance was built by hand.
    """
    model_config = ConfigDict(frozen=True)

    participant_id: str
    amount: Decimal
    total_paid: Optional[Decimal] = Field(
        default=None,
        description="Sum of expenses this participant paid for"
    )
    total_owed: Optional[Decimal] = Field(
        default=None,
        description="Sum of this participant's split shares"
    )

    @field_validator('amount', 'total_paid', 'total_owed', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        return coerce_decimal(v)

    @property
    def is_settled(self) -> bool:
        return abs(self.amount) <= Decimal("0.01")


class SimplifiedDebt(BaseModel):
    """A directed payment instruction: `from_id` pays `to_id`."""
    model_config = ConfigDict(frozen=True)

    from_id: str
    to_id: str
    amount: Decimal = Field(..., gt=0, decimal_places=2)


class UserDebts(BaseModel):
    """One participant's view of a simplified debt list."""
    model_config = ConfigDict(frozen=True)

    participant_id: str
    owes: list[SimplifiedDebt] = Field(
        default_factory=list,
        description="Payments this participant must make"
    )
    owed_by: list[SimplifiedDebt] = Field(
        default_factory=list,
        description="Payments this participant will receive"
    )


class SettleUpPlan(BaseModel):
    """Net balances together with the transfers that clear them."""
    model_config = ConfigDict(frozen=True)

    balances: list[Balance] = Field(default_factory=list)
    debts: list[SimplifiedDebt] = Field(default_factory=list)

    @property
    def is_settled(self) -> bool:
        return not self.debts

    @property
    def total_transferred(self) -> Decimal:
        return sum((debt.amount for debt in self.debts), Decimal("0.00"))


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'self_settlement', 'exceeds_debt')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a settlement or expense before it is recorded.

    Warnings don't block but should be shown.
    """

    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
