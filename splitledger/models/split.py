"""
Split Models for splitledger

These models describe how one expense is divided among participants.
They are designed to:
1. Accept user-entered numbers (int, float, str, Decimal) without drift
2. Carry calculator failures as data, never as exceptions
3. Be serializable for logging and for the caller's write path

DESIGN DECISION: Every amount is a Decimal. Floats are converted through
str() so 0.1 stays 0.1 instead of 0.1000000000000000055511151231257827.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def coerce_decimal(value: Any) -> Any:
    """Convert floats to Decimal through their shortest repr."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value


# =============================================================================
# ENUMS
# =============================================================================

class SplitMethod(str, Enum):
    """
    Supported ways of dividing an expense.

    EQUAL needs only participant ids. The other methods need one
    SplitInput per participant.
    """
    EQUAL = "equal"
    EXACT = "exact"
    PERCENTAGE = "percentage"
    SHARES = "shares"


class SplitErrorKind(str, Enum):
    """
    Why a split could not be calculated.

    The form layer re-prompts the user on any of these.
    Retrying the same call is pointless: the calculator is deterministic.
    """
    NO_PARTICIPANTS = "no_participants"
    MISSING_SPLIT_VALUES = "missing_split_values"
    AMOUNT_MISMATCH = "amount_mismatch"
    PERCENTAGE_MISMATCH = "percentage_mismatch"
    INVALID_SHARES = "invalid_shares"
    NEGATIVE_SHARES = "negative_shares"
    INVALID_METHOD = "invalid_method"


# =============================================================================
# CALCULATOR INPUT / OUTPUT
# =============================================================================

class SplitInput(BaseModel):
    """
    A per-participant value entered by the user.

    Meaning of `value` depends on the method:
    - exact: absolute amount
    - percentage: percentage points (0-100)
    - shares: share count (>= 0, checked by the calculator)
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    participant_id: str = Field(
        ...,
        min_length=1,
        description="Participant identifier"
    )
    value: Decimal = Field(
        ...,
        description="Amount, percentage points or share count"
    )

    @field_validator('value', mode='before')
    @classmethod
    def coerce_value(cls, v: Any) -> Any:
        return coerce_decimal(v)


class SplitResult(BaseModel):
    """One participant's portion of a split expense."""
    model_config = ConfigDict(frozen=True)

    participant_id: str
    amount: Decimal = Field(
        ...,
        decimal_places=2,
        description="Amount this participant owes for the expense"
    )
    shares: Optional[Decimal] = Field(
        default=None,
        description="Share count (equal and shares methods only)"
    )
    percentage: Optional[Decimal] = Field(
        default=None,
        description="Share of the total in percentage points"
    )


class SplitOutcome(BaseModel):
    """
    Result of calculate_split.

    CRITICAL: Callers must check `error` before trusting `splits`.
    When `error` is set, `splits` is always empty.
    """
    model_config = ConfigDict(frozen=True)

    splits: list[SplitResult] = Field(default_factory=list)
    error: Optional[SplitErrorKind] = None
    message: Optional[str] = Field(
        default=None,
        description="Human-readable error message for display"
    )
    gap: Optional[Decimal] = Field(
        default=None,
        description="Signed shortfall (positive) or excess (negative) for mismatch errors"
    )

    @property
    def is_valid(self) -> bool:
        return self.error is None

    @property
    def total(self) -> Decimal:
        """Sum of all split amounts."""
        return sum((split.amount for split in self.splits), Decimal("0.00"))

    @classmethod
    def failure(
        cls,
        kind: SplitErrorKind,
        message: str,
        gap: Optional[Decimal] = None,
    ) -> "SplitOutcome":
        return cls(error=kind, message=message, gap=gap)
