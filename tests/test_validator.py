"""
Tests for settlement and expense validation.
"""

import pytest
from decimal import Decimal

from splitledger.models.ledger import Balance, ExpenseRecord, SettlementRecord, SplitShare
from splitledger.validation import SettlementValidator

BALANCES = [
    Balance(participant_id="a", amount=Decimal("50.00")),
    Balance(participant_id="b", amount=Decimal("-50.00")),
]


def issue_types(result):
    return [issue.issue_type for issue in result.issues]


def settlement(from_id, to_id, amount):
    return SettlementRecord(from_id=from_id, to_id=to_id, amount=amount)


class TestSettlementValidator:
    """Tests for SettlementValidator.validate."""

    def setup_method(self):
        self.validator = SettlementValidator()

    def test_valid_full_settlement(self):
        result = self.validator.validate(settlement("b", "a", 50), BALANCES)
        assert result.is_valid is True
        assert result.issues == []

    def test_partial_settlement(self):
        result = self.validator.validate(settlement("b", "a", Decimal("12.50")), BALANCES)
        assert result.is_valid is True

    def test_one_cent_slack(self):
        result = self.validator.validate(settlement("b", "a", Decimal("50.01")), BALANCES)
        assert result.is_valid is True

    def test_exceeds_debt(self):
        result = self.validator.validate(settlement("b", "a", 60), BALANCES)
        assert result.is_valid is False
        assert issue_types(result) == ["exceeds_debt"]
        assert result.issues[0].message == (
            "Amount exceeds your total debt. Maximum you can settle: $50.00"
        )

    def test_self_settlement(self):
        result = self.validator.validate(settlement("b", "b", 10), BALANCES)
        assert result.is_valid is False
        assert "self_settlement" in issue_types(result)

    def test_non_positive_amount(self):
        result = self.validator.validate(settlement("b", "a", 0), BALANCES)
        assert issue_types(result) == ["invalid_value"]

    def test_wrong_direction(self):
        """The creditor cannot settle with the debtor."""
        result = self.validator.validate(settlement("a", "b", 10), BALANCES)
        assert issue_types(result) == ["not_in_debt", "not_owed"]
        assert result.error_count == 2

    def test_unknown_participants_not_checked(self):
        result = self.validator.validate(settlement("x", "y", 10), BALANCES)
        assert result.is_valid is True

    def test_currency_symbol(self):
        validator = SettlementValidator(currency_symbol="£")
        result = validator.validate(settlement("b", "a", 80), BALANCES)
        assert "£50.00" in result.issues[0].message


class TestDepartureValidation:
    """Tests for validate_departure and validate_group_closure."""

    def setup_method(self):
        self.validator = SettlementValidator()

    def test_creditor_blocked(self):
        result = self.validator.validate_departure("a", BALANCES)
        assert result.is_valid is False
        assert issue_types(result) == ["unsettled_balance"]
        assert result.issues[0].message == (
            "a has unsettled debts. Others owe them $50.00. Please settle first."
        )
        assert result.issues[0].suggested_fix == "Settle the balance of $50.00 first"

    def test_debtor_blocked(self):
        result = self.validator.validate_departure("b", BALANCES)
        assert result.is_valid is False
        assert result.issues[0].message == (
            "b has unsettled debts. They owe $50.00. Please settle first."
        )
        assert result.issues[0].suggested_fix == "Settle the balance of -$50.00 first"

    @pytest.mark.parametrize("amount", ["0.01", "-0.01", "0", "0.00"])
    def test_within_one_cent_allowed(self, amount):
        balances = [Balance(participant_id="a", amount=Decimal(amount))]
        assert self.validator.validate_departure("a", balances).is_valid is True

    @pytest.mark.parametrize("amount", ["0.02", "-0.02"])
    def test_just_past_one_cent_blocked(self, amount):
        balances = [Balance(participant_id="a", amount=Decimal(amount))]
        assert self.validator.validate_departure("a", balances).is_valid is False

    def test_unknown_participant_allowed(self):
        assert self.validator.validate_departure("z", BALANCES).is_valid is True

    def test_currency_symbol(self):
        validator = SettlementValidator(currency_symbol="€")
        result = validator.validate_departure("b", BALANCES)
        assert "They owe €50.00." in result.issues[0].message

    def test_group_closure_blocked(self):
        result = self.validator.validate_group_closure(BALANCES)
        assert result.is_valid is False
        assert issue_types(result) == ["unsettled_balance"]
        assert result.issues[0].suggested_fix == "Unsettled: a, b"

    def test_group_closure_allowed(self):
        balances = [
            Balance(participant_id="a", amount=Decimal("0.01")),
            Balance(participant_id="b", amount=Decimal("-0.01")),
        ]
        result = self.validator.validate_group_closure(balances)
        assert result.is_valid is True
        assert result.issues == []

    def test_empty_group_can_close(self):
        assert self.validator.validate_group_closure([]).is_valid is True


class TestExpenseValidation:
    """Tests for SettlementValidator.validate_expense."""

    def setup_method(self):
        self.validator = SettlementValidator()

    def test_consistent_expense(self):
        expense = ExpenseRecord(payer_id="a", amount=90, splits=[
            SplitShare(participant_id=p, amount=30) for p in ("a", "b", "c")
        ])
        result = self.validator.validate_expense(expense)
        assert result.is_valid is True
        assert result.issues == []

    def test_non_positive_amount(self):
        expense = ExpenseRecord(payer_id="a", amount=0)
        result = self.validator.validate_expense(expense)
        assert result.is_valid is False
        assert issue_types(result) == ["invalid_value"]

    def test_split_mismatch_is_warning(self):
        expense = ExpenseRecord(payer_id="a", amount=90, splits=[
            SplitShare(participant_id="a", amount=30),
            SplitShare(participant_id="b", amount=30),
        ])
        result = self.validator.validate_expense(expense)
        assert result.is_valid is True
        assert issue_types(result) == ["inconsistent"]
        assert result.warnings == ["Splits add up to $60.00 but the expense is $90.00"]

    def test_duplicate_participant(self):
        expense = ExpenseRecord(payer_id="a", amount=20, splits=[
            SplitShare(participant_id="b", amount=10),
            SplitShare(participant_id="b", amount=10),
        ])
        result = self.validator.validate_expense(expense)
        assert issue_types(result) == ["duplicate_participant"]


class TestSummary:
    """Tests for the user-facing summary text."""

    def test_all_passed(self):
        validator = SettlementValidator()
        result = validator.validate(settlement("b", "a", 50), BALANCES)
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    def test_errors_listed_with_fix(self):
        validator = SettlementValidator()
        result = validator.validate(settlement("b", "a", 60), BALANCES)
        summary = validator.get_user_friendly_summary(result)
        assert summary.startswith("This can't be recorded yet:")
        assert "Maximum you can settle: $50.00" in summary
        assert "Enter $50.00 or less" in summary

    def test_warnings_listed(self):
        validator = SettlementValidator()
        expense = ExpenseRecord(payer_id="a", amount=20, splits=[
            SplitShare(participant_id="b", amount=10),
            SplitShare(participant_id="b", amount=10),
        ])
        summary = validator.get_user_friendly_summary(validator.validate_expense(expense))
        assert summary.startswith("Please verify the following:")
        assert "b appears more than once in the split" in summary
