"""
Tests for debt simplification.

The greedy matcher must re-sort after every transfer; several tests below
would produce a different transfer list without it.
"""

from decimal import Decimal

from splitledger.ledger.balances import compute_net_balances
from splitledger.ledger.debt_simplifier import (
    get_user_debts,
    get_user_total_balance,
    simplify_debts,
)
from splitledger.models.ledger import (
    Balance,
    ExpenseRecord,
    SettlementRecord,
    SimplifiedDebt,
    SplitShare,
)


def balances(**amounts):
    return [Balance(participant_id=pid, amount=amount) for pid, amount in amounts.items()]


def as_tuples(debts):
    return [(d.from_id, d.to_id, d.amount) for d in debts]


def replay(start, debts):
    """Apply transfers to balances and return what is left."""
    remaining = {b.participant_id: b.amount for b in start}
    for debt in debts:
        remaining[debt.from_id] += debt.amount
        remaining[debt.to_id] -= debt.amount
    return remaining


class TestSimplifyDebts:
    """Tests for simplify_debts."""

    def test_two_party(self):
        debts = simplify_debts(balances(a=50, b=-50))
        assert debts == [SimplifiedDebt(from_id="b", to_id="a", amount=Decimal("50"))]

    def test_one_creditor_largest_debtor_first(self):
        debts = simplify_debts(balances(a=100, b=-60, c=-40))
        assert as_tuples(debts) == [
            ("b", "a", Decimal("60.00")),
            ("c", "a", Decimal("40.00")),
        ]
        assert sum(d.amount for d in debts) == Decimal("100")

    def test_one_debtor_many_creditors(self):
        debts = simplify_debts(balances(a=-90, b=20, c=70))
        assert as_tuples(debts) == [
            ("a", "c", Decimal("70.00")),
            ("a", "b", Decimal("20.00")),
        ]

    def test_near_zero_noise_filtered(self):
        assert simplify_debts(balances(a=Decimal("0.005"), b=Decimal("-0.005"))) == []

    def test_one_cent_balances_are_settled(self):
        assert simplify_debts(balances(a=Decimal("0.01"), b=Decimal("-0.01"))) == []

    def test_empty(self):
        assert simplify_debts([]) == []

    def test_all_settled(self):
        assert simplify_debts(balances(a=0, b=0, c=0)) == []

    def test_resorts_after_every_transfer(self):
        """
        After c pays a 50, b (30) is the largest creditor, not a (20).
        Matching in the original order would send d's money to a first.
        """
        debts = simplify_debts(balances(a=70, b=30, c=-50, d=-50))
        assert as_tuples(debts) == [
            ("c", "a", Decimal("50.00")),
            ("d", "b", Decimal("30.00")),
            ("d", "a", Decimal("20.00")),
        ]

    def test_ties_keep_input_order(self):
        debts = simplify_debts(balances(x=-10, y=-10, z=20))
        assert as_tuples(debts) == [
            ("x", "z", Decimal("10.00")),
            ("y", "z", Decimal("10.00")),
        ]

    def test_one_cent_transfer_not_emitted(self):
        """A leftover transfer of exactly one cent is dropped."""
        debts = simplify_debts(balances(a=Decimal("1.01"), b=Decimal("-1.00"), c=Decimal("-0.02")))
        assert as_tuples(debts) == [("b", "a", Decimal("1.00"))]

    def test_sub_cent_residue_dropped(self):
        """Balances off by a cent still settle to within a cent each."""
        start = balances(a=Decimal("1.00"), b=Decimal("-0.50"), c=Decimal("-0.49"))
        debts = simplify_debts(start)
        assert as_tuples(debts) == [
            ("b", "a", Decimal("0.50")),
            ("c", "a", Decimal("0.49")),
        ]
        assert all(abs(v) <= Decimal("0.01") for v in replay(start, debts).values())

    def test_balances_rounded_before_matching(self):
        debts = simplify_debts(balances(a=Decimal("10.004"), b=Decimal("-10.004")))
        assert as_tuples(debts) == [("b", "a", Decimal("10.00"))]

    def test_replay_settles_group(self):
        """Executing every transfer drives every balance to within a cent of zero."""
        expenses = [
            ExpenseRecord(payer_id="ann", amount=120, splits=[
                SplitShare(participant_id=p, amount=30) for p in ("ann", "bob", "cy", "dee")
            ]),
            ExpenseRecord(payer_id="bob", amount=Decimal("75.50"), splits=[
                SplitShare(participant_id="ann", amount=Decimal("25.17")),
                SplitShare(participant_id="cy", amount=Decimal("25.17")),
                SplitShare(participant_id="dee", amount=Decimal("25.16")),
            ]),
            ExpenseRecord(payer_id="cy", amount=18, splits=[
                SplitShare(participant_id="bob", amount=9),
                SplitShare(participant_id="cy", amount=9),
            ]),
        ]
        settlements = [SettlementRecord(from_id="dee", to_id="ann", amount=20)]
        start = compute_net_balances(expenses, settlements)

        debts = simplify_debts(start)

        assert all(abs(v) <= Decimal("0.01") for v in replay(start, debts).values())
        assert len(debts) <= len(start) - 1
        total_credit = sum(b.amount for b in start if b.amount > 0)
        assert abs(sum(d.amount for d in debts) - total_credit) <= Decimal("0.01") * len(start)

    def test_deterministic(self):
        start = balances(a=40, b=-15, c=-25, d=10, e=-10)
        assert simplify_debts(start) == simplify_debts(start)


class TestUserDebts:
    """Tests for the per-participant helpers."""

    DEBTS = [
        SimplifiedDebt(from_id="b", to_id="a", amount=Decimal("60.00")),
        SimplifiedDebt(from_id="c", to_id="a", amount=Decimal("40.00")),
        SimplifiedDebt(from_id="c", to_id="b", amount=Decimal("5.00")),
    ]

    def test_get_user_debts(self):
        view = get_user_debts("c", self.DEBTS)
        assert view.participant_id == "c"
        assert [d.to_id for d in view.owes] == ["a", "b"]
        assert view.owed_by == []

    def test_get_user_debts_creditor(self):
        view = get_user_debts("a", self.DEBTS)
        assert view.owes == []
        assert len(view.owed_by) == 2

    def test_get_user_total_balance(self):
        assert get_user_total_balance("a", self.DEBTS) == Decimal("100.00")
        assert get_user_total_balance("b", self.DEBTS) == Decimal("-55.00")
        assert get_user_total_balance("c", self.DEBTS) == Decimal("-45.00")
        assert get_user_total_balance("nobody", self.DEBTS) == Decimal("0.00")
