"""Pure split, balance and settle-up calculations."""

from splitledger.ledger.balances import balance_map, compute_net_balances
from splitledger.ledger.debt_simplifier import (
    get_user_debts,
    get_user_total_balance,
    simplify_debts,
)
from splitledger.ledger.money import format_currency, round_money
from splitledger.ledger.split_calculator import calculate_split, validate_split

__all__ = [
    "balance_map",
    "calculate_split",
    "compute_net_balances",
    "format_currency",
    "get_user_debts",
    "get_user_total_balance",
    "round_money",
    "simplify_debts",
    "validate_split",
]
