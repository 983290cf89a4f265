"""
Balance Aggregator

Turns expense and settlement records into one signed balance per
participant. Positive means the group owes them; negative means they owe
the group.

This component trusts its caller. Unknown ids and negative amounts are
summed as given.
"""

from decimal import Decimal
from typing import Iterable, Optional

from splitledger.ledger.money import round_money
from splitledger.models.ledger import Balance, ExpenseRecord, SettlementRecord


def compute_net_balances(
    expenses: Iterable[ExpenseRecord],
    settlements: Optional[Iterable[SettlementRecord]] = None,
) -> list[Balance]:
    """
    Compute each participant's net balance.

    - The payer is credited the full amount they fronted.
    - Every split participant is debited their share. A payer who also
      appears in the splits ends up credited amount minus own share.
    - A settlement credits the sender and debits the receiver.

    Balances are summed exactly and rounded to cents once at the end.
    Participants appear in order of first mention. Each balance also
    carries `total_paid` and `total_owed` from the expenses alone.
    """
    running: dict[str, Decimal] = {}
    paid: dict[str, Decimal] = {}
    owed: dict[str, Decimal] = {}

    for expense in expenses:
        running[expense.payer_id] = running.get(expense.payer_id, Decimal("0")) + expense.amount
        paid[expense.payer_id] = paid.get(expense.payer_id, Decimal("0")) + expense.amount
        for split in expense.splits:
            running[split.participant_id] = (
                running.get(split.participant_id, Decimal("0")) - split.amount
            )
            owed[split.participant_id] = owed.get(split.participant_id, Decimal("0")) + split.amount

    for settlement in settlements or ():
        running[settlement.from_id] = (
            running.get(settlement.from_id, Decimal("0")) + settlement.amount
        )
        running[settlement.to_id] = running.get(settlement.to_id, Decimal("0")) - settlement.amount

    return [
        Balance(
            participant_id=participant_id,
            amount=round_money(amount),
            total_paid=round_money(paid.get(participant_id, Decimal("0"))),
            total_owed=round_money(owed.get(participant_id, Decimal("0"))),
        )
        for participant_id, amount in running.items()
    ]


def balance_map(balances: Iterable[Balance]) -> dict[str, Decimal]:
    """Index balances by participant id."""
    return {balance.participant_id: balance.amount for balance in balances}
