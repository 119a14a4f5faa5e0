"""Balance calculation: turn a group's expenses into per-member net balances."""

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from ..models import Balance, BalanceSummary, Expense, Settlement

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Amounts within a cent of zero count as settled
SETTLED_THRESHOLD = CENT

# User IDs produced by upstream ID propagation bugs. Dropping them is a
# data-quality workaround; revisit once the upstream source is fixed.
INVALID_USER_IDS = frozenset({"", "undefined", "null"})


def to_cents(amount: Decimal) -> Decimal:
    """
    Round a money amount to 2 decimal places.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Amount as Decimal

    Returns:
        Amount quantized to cents
    """
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def is_settled(amount: Decimal) -> bool:
    """True when an amount is within a cent of zero."""
    return abs(amount) <= SETTLED_THRESHOLD


def is_valid_user_id(user_id: str) -> bool:
    """False for empty or sentinel user IDs."""
    return user_id not in INVALID_USER_IDS


def owed_share(expense: Expense, participant_amount: Decimal | None) -> Decimal:
    """
    Amount a participant owes for an expense.

    An unspecified (None or zero) amount falls back to an equal share of the
    expense total.
    """
    if participant_amount:
        return participant_amount
    return expense.amount / len(expense.participants)


def _to_balances(totals: dict[str, Decimal]) -> list[Balance]:
    """Round running totals and drop sentinel user IDs."""
    balances = []
    for user_id, total in totals.items():
        if not is_valid_user_id(user_id):
            logger.warning(
                f"Dropping balance for invalid user id {user_id!r} ({total})"
            )
            continue
        balances.append(Balance(user_id=user_id, amount=to_cents(total)))
    return balances


def calculate_balances(expenses: Iterable[Expense]) -> list[Balance]:
    """
    Calculate the net balance of every user in a set of expenses.

    Steps:
    1. Credit each expense's full amount to whoever paid it
    2. Debit each participant by their owed amount (equal share if unspecified)
    3. Round every total to cents and drop invalid user IDs

    Args:
        expenses: Expenses of a single group, in any order

    Returns:
        One balance per user seen as payer or participant (positive = owed
        money, negative = owes money)
    """
    totals: dict[str, Decimal] = {}

    for expense in expenses:
        totals[expense.paid_by] = totals.get(expense.paid_by, ZERO) + expense.amount

        for participant in expense.participants:
            share = owed_share(expense, participant.amount)
            totals[participant.user_id] = (
                totals.get(participant.user_id, ZERO) - share
            )

    balances = _to_balances(totals)
    logger.debug(f"Calculated {len(balances)} balances")
    return balances


def apply_recorded_settlements(
    balances: Iterable[Balance], settlements: Iterable[Settlement]
) -> list[Balance]:
    """
    Fold payments that have already been made into a set of balances.

    The payer's balance rises by the payment and the recipient's falls by it.
    Users that only appear in settlements get a balance entry of their own.

    Args:
        balances: Balances computed from expenses
        settlements: Recorded settlements for the same group

    Returns:
        New list of balances; the inputs are not modified
    """
    totals: dict[str, Decimal] = {}
    for balance in balances:
        totals[balance.user_id] = totals.get(balance.user_id, ZERO) + balance.amount

    count = 0
    for settlement in settlements:
        totals[settlement.from_user_id] = (
            totals.get(settlement.from_user_id, ZERO) + settlement.amount
        )
        totals[settlement.to_user_id] = (
            totals.get(settlement.to_user_id, ZERO) - settlement.amount
        )
        count += 1

    if count:
        logger.info(f"Applied {count} recorded settlements to balances")

    return _to_balances(totals)


def get_user_balance(balances: Iterable[Balance], user_id: str) -> Decimal:
    """Balance for one user, zero if the user has none."""
    for balance in balances:
        if balance.user_id == user_id:
            return balance.amount
    return ZERO


def calculate_balance_summary(balance: Decimal) -> BalanceSummary:
    """
    Split a user's balance into what they are owed and what they owe.

    Args:
        balance: The user's net balance

    Returns:
        Summary with the total balance and its non-negative owed/owing parts
    """
    return BalanceSummary(
        total_balance=balance,
        total_owed=max(ZERO, balance),
        total_owing=max(ZERO, -balance),
    )


def verify_split_totals(expenses: Iterable[Expense]) -> list[str]:
    """
    Find expenses whose explicit participant amounts don't add up.

    Expenses relying on the equal-split fallback for any participant are
    skipped.

    Args:
        expenses: Expenses to check

    Returns:
        IDs of expenses whose shares differ from the total by more than a cent
        (a warning is logged for each)
    """
    mismatched = []
    for expense in expenses:
        if not expense.participants:
            continue
        if not all(p.amount for p in expense.participants):
            continue

        allocated = sum((p.amount or ZERO for p in expense.participants), ZERO)
        residual = expense.amount - allocated
        if abs(residual) > SETTLED_THRESHOLD:
            logger.warning(
                f"Expense {expense.id} shares total {allocated}, "
                f"expected {expense.amount} (residual {residual})"
            )
            mismatched.append(expense.id)

    return mismatched
