"""
Main Orchestrator for splitledger

This module ties together all the components and defines the
end-to-end flows for:
1. Expense creation (total + method -> per-participant splits -> record)
2. Settle-up (records -> net balances -> simplified transfers)
3. Settlement recording (proposal -> check against current balances)
4. Leaving or closing a group (balances -> unsettled-balance guard)

DESIGN DECISION: The orchestrator is the only layer that reads settings
or writes audit events. The calculators underneath stay pure, so the
same inputs always give the same numbers.

Fetching consistent snapshots of expenses and settlements is the caller's
job. Nothing here re-reads a data source mid-computation.
"""

from typing import Iterable, Optional, Sequence, Union
from uuid import UUID

from splitledger.audit import AuditLogger, create_correlation_id
from splitledger.config import LedgerSettings, get_settings
from splitledger.ledger import (
    calculate_split,
    compute_net_balances,
    get_user_debts,
    simplify_debts,
)
from splitledger.ledger.money import Number, round_money
from splitledger.ledger.split_calculator import InputLike
from splitledger.models.audit import AuditEventBuilder
from splitledger.models.ledger import (
    Balance,
    ExpenseRecord,
    SettlementRecord,
    SettleUpPlan,
    SplitShare,
    UserDebts,
    ValidationResult,
)
from splitledger.models.split import SplitMethod, SplitOutcome
from splitledger.validation import SettlementValidator


class LedgerService:
    """
    Orchestrates the split -> balance -> settle-up flows.

    Every call accepts an optional correlation id so the audit trail of
    one user action can be followed across calls.
    """

    def __init__(
        self,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[SettlementValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().ledger
        self._validator = validator or SettlementValidator(self._settings.currency_symbol)
        if audit_logger is None and self._settings.audit_enabled:
            audit_logger = AuditLogger()
        self._audit_logger = audit_logger

    def _audit(self, event) -> None:
        if self._audit_logger:
            self._audit_logger.log(event)

    def split_expense(
        self,
        payer_id: str,
        total: Number,
        method: Union[SplitMethod, str],
        participant_ids: Sequence[str],
        inputs: Optional[Sequence[InputLike]] = None,
        description: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[SplitOutcome, Optional[ExpenseRecord]]:
        """
        Split a new expense and build the record to persist.

        Returns:
            (outcome, expense)

        `expense` is None whenever `outcome.error` is set.

        Raises:
            ValueError: if more participants are given than
                        LedgerSettings.max_participants allows.
        """
        correlation_id = correlation_id or create_correlation_id()

        if len(participant_ids) > self._settings.max_participants:
            raise ValueError(
                f"Too many participants: {len(participant_ids)} "
                f"(maximum {self._settings.max_participants})"
            )

        outcome = calculate_split(
            method,
            total,
            participant_ids,
            inputs,
            currency_symbol=self._settings.currency_symbol,
        )

        method_name = method.value if isinstance(method, SplitMethod) else str(method)

        if not outcome.is_valid:
            self._audit(AuditEventBuilder.split_rejected(
                method=method_name,
                error_code=outcome.error.value,
                message=outcome.message or "",
                correlation_id=correlation_id,
            ))
            return outcome, None

        expense = ExpenseRecord(
            payer_id=payer_id,
            amount=outcome.total,
            splits=[
                SplitShare(participant_id=split.participant_id, amount=split.amount)
                for split in outcome.splits
            ],
            description=description,
        )

        self._audit(AuditEventBuilder.split_calculated(
            method=method_name,
            total=expense.amount,
            participant_count=len(outcome.splits),
            correlation_id=correlation_id,
        ))

        return outcome, expense

    def group_balances(
        self,
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord] = (),
        group_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[Balance]:
        """Net balance of every participant in a group."""
        correlation_id = correlation_id or create_correlation_id()
        expenses = list(expenses)
        settlements = list(settlements)

        balances = compute_net_balances(expenses, settlements)

        self._audit(AuditEventBuilder.balances_computed(
            group_id=group_id,
            expense_count=len(expenses),
            settlement_count=len(settlements),
            participant_count=len(balances),
            correlation_id=correlation_id,
        ))

        return balances

    def settle_up(
        self,
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord] = (),
        group_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SettleUpPlan:
        """
        Compute balances and the transfers that clear them.

        This is the "who owes whom" view of a group.
        """
        correlation_id = correlation_id or create_correlation_id()

        balances = self.group_balances(
            expenses, settlements, group_id=group_id, correlation_id=correlation_id
        )
        plan = SettleUpPlan(balances=balances, debts=simplify_debts(balances))

        self._audit(AuditEventBuilder.debts_simplified(
            group_id=group_id,
            transfer_count=len(plan.debts),
            total_transferred=plan.total_transferred,
            correlation_id=correlation_id,
        ))

        return plan

    def participant_view(self, participant_id: str, plan: SettleUpPlan) -> UserDebts:
        """What one participant pays and receives under a settle-up plan."""
        return get_user_debts(participant_id, plan.debts)

    def check_settlement(
        self,
        from_id: str,
        to_id: str,
        amount: Number,
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord] = (),
        correlation_id: Optional[UUID] = None,
    ) -> tuple[ValidationResult, Optional[SettlementRecord]]:
        """
        Validate a repayment before it is recorded.

        The amount is rounded to cents first, so the returned record is
        what gets stored and what the balances were checked against.

        Returns:
            (result, settlement)

        `settlement` is None unless the result is valid.
        """
        correlation_id = correlation_id or create_correlation_id()
        amount = round_money(amount)

        proposal = SettlementRecord(from_id=from_id, to_id=to_id, amount=amount)
        balances = self.group_balances(expenses, settlements, correlation_id=correlation_id)
        result = self._validator.validate(proposal, balances)

        self._audit(AuditEventBuilder.settlement_checked(
            from_id=from_id,
            to_id=to_id,
            amount=amount,
            issues=[issue.model_dump() for issue in result.issues if issue.severity == "error"],
            correlation_id=correlation_id,
        ))

        return result, proposal if result.is_valid else None

    def check_departure(
        self,
        participant_id: str,
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord] = (),
        group_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """Check that a participant has settled up before leaving or being removed."""
        correlation_id = correlation_id or create_correlation_id()

        balances = self.group_balances(
            expenses, settlements, group_id=group_id, correlation_id=correlation_id
        )
        result = self._validator.validate_departure(participant_id, balances)

        self._audit(AuditEventBuilder.departure_checked(
            participant_id=participant_id,
            group_id=group_id,
            issues=[issue.model_dump() for issue in result.issues],
            correlation_id=correlation_id,
        ))

        return result

    def check_group_closure(
        self,
        expenses: Iterable[ExpenseRecord],
        settlements: Iterable[SettlementRecord] = (),
        group_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """Check that every balance is settled before a group is closed."""
        correlation_id = correlation_id or create_correlation_id()

        balances = self.group_balances(
            expenses, settlements, group_id=group_id, correlation_id=correlation_id
        )
        result = self._validator.validate_group_closure(balances)

        self._audit(AuditEventBuilder.departure_checked(
            participant_id=None,
            group_id=group_id,
            issues=[issue.model_dump() for issue in result.issues],
            correlation_id=correlation_id,
        ))

        return result

    def check_expense(
        self,
        expense: ExpenseRecord,
        correlation_id: Optional[UUID] = None,
    ) -> ValidationResult:
        """Sanity-check an expense record before it is stored."""
        correlation_id = correlation_id or create_correlation_id()
        result = self._validator.validate_expense(expense)

        if result.issues:
            self._audit(AuditEventBuilder.expense_flagged(
                payer_id=expense.payer_id,
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            ))

        return result


def create_ledger_service(audit_logger: Optional[AuditLogger] = None) -> LedgerService:
    """
    Create a LedgerService from environment settings.

    Use this at application startup.
    """
    return LedgerService(settings=get_settings().ledger, audit_logger=audit_logger)
