"""
Settlement and Expense Validation

DESIGN DECISION: The calculators trust their inputs. Checks against
business rules happen here, before a record is written, so that a bad
settlement is caught while the user can still fix it.

SETTLEMENT CHECKS (against current group balances):
- Cannot settle with yourself
- Amount must be positive
- Payer must currently owe money
- Recipient must currently be owed money
- Amount cannot exceed what the payer owes (one cent of slack)

DEPARTURE CHECKS:
- A participant may only leave or be removed once their balance is
  within one cent of zero
- A group may only be closed once every balance is

EXPENSE CHECKS:
- Amount must be positive
- Split shares should add up to the amount
- A participant should appear only once among the splits

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to correct.
"""

from decimal import Decimal
from typing import Iterable

from splitledger.ledger.balances import balance_map
from splitledger.ledger.money import format_currency, round_money
from splitledger.models.ledger import (
    Balance,
    ExpenseRecord,
    SettlementRecord,
    ValidationIssue,
    ValidationResult,
)

TOLERANCE = Decimal("0.01")


def _result(issues: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(
        is_valid=not any(issue.severity == "error" for issue in issues),
        issues=issues,
        warnings=[issue.message for issue in issues if issue.severity == "warning"],
    )


class SettlementValidator:
    """
    Validates proposed settlements and expense records.

    Participants missing from the balance list are not checked; a brand
    new member has no balance yet.
    """

    def __init__(self, currency_symbol: str = "$"):
        self._currency_symbol = currency_symbol

    def validate(
        self,
        proposal: SettlementRecord,
        balances: Iterable[Balance],
    ) -> ValidationResult:
        """
        Check a settlement against the balances it would change.

        Args:
            proposal: The repayment the user wants to record
            balances: Current net balances of the group

        Returns:
            ValidationResult with all issues found
        """
        issues = []

        if proposal.from_id == proposal.to_id:
            issues.append(ValidationIssue(
                field="to_id",
                issue_type="self_settlement",
                message="Cannot record a settlement to yourself",
                severity="error",
            ))

        if proposal.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than 0",
                severity="error",
            ))

        current = balance_map(balances)
        payer_balance = current.get(proposal.from_id)
        recipient_balance = current.get(proposal.to_id)

        if payer_balance is not None and payer_balance >= 0:
            issues.append(ValidationIssue(
                field="from_id",
                issue_type="not_in_debt",
                message="You don't owe any money to settle.",
                severity="error",
            ))

        if recipient_balance is not None and recipient_balance <= 0:
            issues.append(ValidationIssue(
                field="to_id",
                issue_type="not_owed",
                message="This member is not owed any money.",
                severity="error",
            ))

        if (
            payer_balance is not None
            and payer_balance < 0
            and proposal.amount > abs(payer_balance) + TOLERANCE
        ):
            max_amount = format_currency(abs(payer_balance), self._currency_symbol)
            issues.append(ValidationIssue(
                field="amount",
                issue_type="exceeds_debt",
                message=(
                    "Amount exceeds your total debt. "
                    f"Maximum you can settle: {max_amount}"
                ),
                severity="error",
                suggested_fix=f"Enter {max_amount} or less",
            ))

        return _result(issues)

    def validate_departure(
        self,
        participant_id: str,
        balances: Iterable[Balance],
    ) -> ValidationResult:
        """
        Check that a participant can leave (or be removed from) a group.

        Any balance beyond one cent either way blocks the departure.
        Participants missing from `balances` have nothing to settle.
        """
        issues = []
        balance = balance_map(balances).get(participant_id)

        if balance is not None and abs(balance) > TOLERANCE:
            amount = format_currency(abs(balance), self._currency_symbol)
            if balance > 0:
                direction = f"Others owe them {amount}."
            else:
                direction = f"They owe {amount}."
            issues.append(ValidationIssue(
                field="participant_id",
                issue_type="unsettled_balance",
                message=(
                    f"{participant_id} has unsettled debts. {direction} "
                    "Please settle first."
                ),
                severity="error",
                suggested_fix=(
                    "Settle the balance of "
                    f"{format_currency(balance, self._currency_symbol)} first"
                ),
            ))

        return _result(issues)

    def validate_group_closure(self, balances: Iterable[Balance]) -> ValidationResult:
        """Check that every balance in a group is settled before closing it."""
        unsettled = [
            balance.participant_id
            for balance in balances
            if abs(balance.amount) > TOLERANCE
        ]
        if not unsettled:
            return _result([])

        return _result([ValidationIssue(
            field="balances",
            issue_type="unsettled_balance",
            message=(
                "Cannot close the group with unsettled debts. "
                "Please settle all balances first."
            ),
            severity="error",
            suggested_fix=f"Unsettled: {', '.join(unsettled)}",
        )])

    def validate_expense(self, expense: ExpenseRecord) -> ValidationResult:
        """Sanity-check an expense before its splits are stored."""
        issues = []

        if expense.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than 0",
                severity="error",
            ))

        if expense.splits:
            split_total = round_money(expense.split_total)
            if abs(split_total - round_money(expense.amount)) > TOLERANCE:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="inconsistent",
                    message=(
                        f"Splits add up to {format_currency(split_total, self._currency_symbol)} "
                        f"but the expense is {format_currency(expense.amount, self._currency_symbol)}"
                    ),
                    severity="warning",
                    suggested_fix="Recalculate the split before saving",
                ))

        seen = set()
        for split in expense.splits:
            if split.participant_id in seen:
                issues.append(ValidationIssue(
                    field="splits",
                    issue_type="duplicate_participant",
                    message=f"{split.participant_id} appears more than once in the split",
                    severity="warning",
                ))
            seen.add(split.participant_id)

        return _result(issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("This can't be recorded yet:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
