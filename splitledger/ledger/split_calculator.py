"""
Split Calculator

Divides one expense total among participants.

GUARANTEES:
- For every valid call, the result amounts sum EXACTLY to the total,
  to the cent.
- Failures come back as a SplitOutcome with `error` set. Nothing here
  raises for bad user input, including totals past the default 28-digit
  Decimal precision (see money.MONEY_PRECISION).

REMAINDER POLICY (user-visible, do not "improve"):
- equal: the first N participants, in the order given, get one extra cent
- exact / percentage / shares: the LAST input absorbs all rounding drift
"""

from decimal import Decimal
from typing import Optional, Sequence, Union

from splitledger.ledger.money import (
    ONE_CENT,
    Number,
    format_currency,
    from_cents,
    money_context,
    round_cents,
    round_money,
    to_cents,
    to_decimal,
)
from splitledger.models.split import (
    SplitErrorKind,
    SplitInput,
    SplitMethod,
    SplitOutcome,
    SplitResult,
)

HUNDRED = Decimal("100")

InputLike = Union[SplitInput, dict]


def _coerce_inputs(inputs: Sequence[InputLike]) -> list[SplitInput]:
    return [
        item if isinstance(item, SplitInput) else SplitInput.model_validate(item)
        for item in inputs
    ]


def calculate_equal_split(total: Number, participant_ids: Sequence[str]) -> list[SplitResult]:
    """
    Split evenly, handing leftover cents to the first participants.

    100.00 among [a, b, c] gives a=33.34, b=33.33, c=33.33.
    """
    count = len(participant_ids)
    if count == 0:
        return []

    total_cents = to_cents(total)
    base = total_cents // count
    remainder = total_cents - base * count
    percentage = round_money(HUNDRED / count)

    return [
        SplitResult(
            participant_id=participant_id,
            amount=from_cents(base + ONE_CENT if index < remainder else base),
            shares=Decimal(1),
            percentage=percentage,
        )
        for index, participant_id in enumerate(participant_ids)
    ]


def _absorb_into_last(total_cents: int, leading_cents: list[int]) -> list[int]:
    """Append the amount that makes the list sum to total_cents."""
    return leading_cents + [total_cents - sum(leading_cents)]


def calculate_exact_split(
    total: Number,
    inputs: Sequence[InputLike],
    currency_symbol: str = "$",
) -> SplitOutcome:
    """
    Take each participant's amount as entered.

    The entered amounts may be off by at most one cent; the last input
    absorbs that cent so the result still sums to the total.
    """
    inputs = _coerce_inputs(inputs)
    if not inputs:
        return SplitOutcome.failure(SplitErrorKind.NO_PARTICIPANTS, "No members selected")

    total_dec = to_decimal(total)
    total_cents = to_cents(total_dec)
    sum_cents = to_cents(sum((item.value for item in inputs), Decimal("0")))

    if abs(sum_cents - total_cents) > ONE_CENT:
        gap_cents = total_cents - sum_cents
        gap = from_cents(gap_cents)
        if gap_cents > 0:
            message = f"Amounts don't add up. {format_currency(gap, currency_symbol)} remaining"
        else:
            message = f"Amounts don't add up. {format_currency(-gap, currency_symbol)} over budget"
        return SplitOutcome.failure(SplitErrorKind.AMOUNT_MISMATCH, message, gap)

    amounts = _absorb_into_last(
        total_cents, [to_cents(item.value) for item in inputs[:-1]]
    )

    splits = []
    for item, cents in zip(inputs, amounts):
        if total_dec > 0:
            percentage = round_money(item.value / total_dec * HUNDRED)
        else:
            percentage = Decimal("0.00")
        splits.append(SplitResult(
            participant_id=item.participant_id,
            amount=from_cents(cents),
            shares=None,
            percentage=percentage,
        ))

    return SplitOutcome(splits=splits)


def calculate_percentage_split(total: Number, inputs: Sequence[InputLike]) -> SplitOutcome:
    """
    Split by percentage points, which must add up to 100 (within 0.01).
    """
    inputs = _coerce_inputs(inputs)
    if not inputs:
        return SplitOutcome.failure(SplitErrorKind.NO_PARTICIPANTS, "No members selected")

    rounded_sum = round_money(sum((item.value for item in inputs), Decimal("0")))
    if abs(rounded_sum - HUNDRED) > Decimal("0.01"):
        gap = HUNDRED - rounded_sum
        if gap > 0:
            detail = f"{gap:.2f}% remaining"
        else:
            detail = f"{abs(gap):.2f}% over"
        return SplitOutcome.failure(
            SplitErrorKind.PERCENTAGE_MISMATCH,
            f"Percentages must add up to 100%. Currently: {rounded_sum:.2f}% ({detail})",
            gap,
        )

    total_cents = to_cents(total)
    amounts = _absorb_into_last(
        total_cents,
        [round_cents(Decimal(total_cents) * item.value / HUNDRED) for item in inputs[:-1]],
    )

    return SplitOutcome(splits=[
        SplitResult(
            participant_id=item.participant_id,
            amount=from_cents(cents),
            shares=None,
            percentage=round_money(item.value),
        )
        for item, cents in zip(inputs, amounts)
    ])


def calculate_shares_split(total: Number, inputs: Sequence[InputLike]) -> SplitOutcome:
    """
    Split proportionally to share counts.

    2 shares + 1 share gives 2/3 and 1/3 of the total.
    """
    inputs = _coerce_inputs(inputs)
    if not inputs:
        return SplitOutcome.failure(SplitErrorKind.NO_PARTICIPANTS, "No members selected")

    total_shares = sum((item.value for item in inputs), Decimal("0"))
    if total_shares <= 0:
        return SplitOutcome.failure(
            SplitErrorKind.INVALID_SHARES, "Total shares must be greater than 0"
        )
    if any(item.value < 0 for item in inputs):
        return SplitOutcome.failure(SplitErrorKind.NEGATIVE_SHARES, "Shares cannot be negative")

    total_cents = to_cents(total)
    amounts = _absorb_into_last(
        total_cents,
        [round_cents(Decimal(total_cents) * item.value / total_shares) for item in inputs[:-1]],
    )

    return SplitOutcome(splits=[
        SplitResult(
            participant_id=item.participant_id,
            amount=from_cents(cents),
            shares=item.value,
            percentage=round_money(item.value / total_shares * HUNDRED),
        )
        for item, cents in zip(inputs, amounts)
    ])


def calculate_split(
    method: Union[SplitMethod, str],
    total: Number,
    participant_ids: Sequence[str],
    inputs: Optional[Sequence[InputLike]] = None,
    currency_symbol: str = "$",
) -> SplitOutcome:
    """
    Calculate per-participant amounts for one expense.

    Args:
        method: equal, exact, percentage or shares
        total: Expense total. Totals <= 0 are not rejected here; the
               caller validates them.
        participant_ids: Participants, in display order. For equal splits
                         this order decides who gets the leftover cents.
        inputs: Per-participant values, required for every method but
                equal. Results follow the order of `inputs`.
        currency_symbol: Used in mismatch messages only.

    Returns:
        SplitOutcome. Check `error` before using `splits`.
    """
    try:
        method = SplitMethod(method)
    except ValueError:
        return SplitOutcome.failure(SplitErrorKind.INVALID_METHOD, "Invalid split method")

    if not participant_ids:
        return SplitOutcome.failure(SplitErrorKind.NO_PARTICIPANTS, "No members selected")

    if method == SplitMethod.EQUAL:
        return SplitOutcome(splits=calculate_equal_split(total, participant_ids))

    if inputs is None:
        return SplitOutcome.failure(
            SplitErrorKind.MISSING_SPLIT_VALUES,
            f"{_VALUE_LABELS[method]} are required",
        )

    with money_context():
        if method == SplitMethod.EXACT:
            return calculate_exact_split(total, inputs, currency_symbol)
        if method == SplitMethod.PERCENTAGE:
            return calculate_percentage_split(total, inputs)
        return calculate_shares_split(total, inputs)


_VALUE_LABELS = {
    SplitMethod.EXACT: "Exact amounts",
    SplitMethod.PERCENTAGE: "Percentages",
    SplitMethod.SHARES: "Shares",
}


def validate_split(
    method: Union[SplitMethod, str],
    total: Number,
    participant_ids: Sequence[str],
    inputs: Optional[Sequence[InputLike]] = None,
) -> tuple[bool, Optional[str]]:
    """
    Check a split configuration without keeping the amounts.

    Returns: (is_valid, error_message)
    """
    outcome = calculate_split(method, total, participant_ids, inputs)
    return outcome.is_valid and len(outcome.splits) > 0, outcome.message
