"""
Debt Simplification

Given net balances, produce a short list of payments that settles
everyone.

Uses a greedy approach: match the largest debtor with the largest
creditor, pay the smaller of the two amounts, repeat. This usually gives
the fewest transfers but is not guaranteed to be optimal for every graph
(the true minimum is NP-hard). Output is deterministic: ties keep input
order.

IMPORTANT: both lists are re-sorted after EVERY transfer. Matching against
a stale order (or a heap without re-insertion) produces different
transfer lists.
"""

from decimal import Decimal
from typing import Iterable

from splitledger.ledger.money import ONE_CENT, from_cents, round_money, to_cents
from splitledger.models.ledger import Balance, SimplifiedDebt, UserDebts


def _by_amount_desc(parties: list[list]) -> None:
    parties.sort(key=lambda party: party[1], reverse=True)


def simplify_debts(balances: Iterable[Balance]) -> list[SimplifiedDebt]:
    """
    Reduce balances to directed payments.

    Balances within one cent of zero count as settled. Residues under one
    cent left over by rounding are dropped.
    """
    # [participant_id, outstanding cents], magnitudes only
    debtors: list[list] = []
    creditors: list[list] = []

    for balance in balances:
        cents = to_cents(balance.amount)
        if cents < -ONE_CENT:
            debtors.append([balance.participant_id, -cents])
        elif cents > ONE_CENT:
            creditors.append([balance.participant_id, cents])

    _by_amount_desc(debtors)
    _by_amount_desc(creditors)

    debts: list[SimplifiedDebt] = []

    while debtors and creditors:
        debtor = debtors[0]
        creditor = creditors[0]

        transfer = min(debtor[1], creditor[1])
        if transfer > ONE_CENT:
            debts.append(SimplifiedDebt(
                from_id=debtor[0],
                to_id=creditor[0],
                amount=from_cents(transfer),
            ))

        debtor[1] -= transfer
        creditor[1] -= transfer

        if debtor[1] < ONE_CENT:
            debtors.pop(0)
        if creditor[1] < ONE_CENT:
            creditors.pop(0)

        _by_amount_desc(debtors)
        _by_amount_desc(creditors)

    return debts


def get_user_debts(participant_id: str, debts: Iterable[SimplifiedDebt]) -> UserDebts:
    """Split a debt list into what one participant pays and receives."""
    debts = list(debts)
    return UserDebts(
        participant_id=participant_id,
        owes=[debt for debt in debts if debt.from_id == participant_id],
        owed_by=[debt for debt in debts if debt.to_id == participant_id],
    )


def get_user_total_balance(participant_id: str, debts: Iterable[SimplifiedDebt]) -> Decimal:
    """Net amount a participant is owed (positive) or owes (negative)."""
    total = Decimal("0")
    for debt in debts:
        if debt.from_id == participant_id:
            total -= debt.amount
        if debt.to_id == participant_id:
            total += debt.amount
    return round_money(total)
