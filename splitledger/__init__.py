"""
splitledger - Source Package

Multi-party debt computation for a shared expense tracker: split an
expense, aggregate net balances, and reduce them to a short list of
settle-up transfers.

DESIGN PRINCIPLES:
1. Amounts are exact: integer cents inside, Decimal at the edges
2. Every valid split sums to its total, to the cent
3. Bad user input comes back as data, never as an exception
4. Same inputs, same outputs: no hidden state in the calculators
5. Every computation is auditable
"""

from splitledger.ledger import (
    calculate_split,
    compute_net_balances,
    get_user_debts,
    get_user_total_balance,
    simplify_debts,
    validate_split,
)
from splitledger.models import (
    Balance,
    ExpenseRecord,
    SettlementRecord,
    SettleUpPlan,
    SimplifiedDebt,
    SplitErrorKind,
    SplitInput,
    SplitMethod,
    SplitOutcome,
    SplitResult,
    SplitShare,
    UserDebts,
)
from splitledger.orchestrator import LedgerService, create_ledger_service
from splitledger.validation import SettlementValidator

__version__ = "1.0.0"

__all__ = [
    "Balance",
    "ExpenseRecord",
    "LedgerService",
    "SettlementRecord",
    "SettlementValidator",
    "SettleUpPlan",
    "SimplifiedDebt",
    "SplitErrorKind",
    "SplitInput",
    "SplitMethod",
    "SplitOutcome",
    "SplitResult",
    "SplitShare",
    "UserDebts",
    "calculate_split",
    "compute_net_balances",
    "create_ledger_service",
    "get_user_debts",
    "get_user_total_balance",
    "simplify_debts",
    "validate_split",
]
