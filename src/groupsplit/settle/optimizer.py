"""Settlement optimization: suggest payments that bring every balance to zero."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from ..models import Balance, SettlementSuggestion
from .calculator import SETTLED_THRESHOLD, ZERO, is_settled

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Party:
    """A debtor or creditor with the positive amount still to pay or receive."""

    user_id: str
    remaining: Decimal


def _partition(
    balances: Iterable[Balance], sort_by_magnitude: bool
) -> tuple[list[_Party], list[_Party]]:
    """
    Split unsettled balances into debtor and creditor queues.

    Queues keep input order unless sort_by_magnitude is set, in which
    case they are stably sorted largest first.
    """
    debtors: list[_Party] = []
    creditors: list[_Party] = []
    for balance in balances:
        if is_settled(balance.amount):
            continue
        if balance.amount < 0:
            debtors.append(_Party(balance.user_id, -balance.amount))
        else:
            creditors.append(_Party(balance.user_id, balance.amount))

    if sort_by_magnitude:
        debtors.sort(key=lambda party: party.remaining, reverse=True)
        creditors.sort(key=lambda party: party.remaining, reverse=True)

    return debtors, creditors


def compute_settlements(
    balances: Iterable[Balance], sort_by_magnitude: bool = False
) -> list[SettlementSuggestion]:
    """
    Compute payments that settle every outstanding balance.

    Greedy matching:
    1. Drop balances within a cent of zero
    2. Queue debtors and creditors
    3. Match the first debtor with the first creditor for the smaller of the
       two remaining amounts
    4. Remove whoever is paid off, repeat until either queue is empty

    This keeps the number of payments low but does not guarantee the
    minimum possible count.

    Args:
        balances: Balances satisfying the conservation invariant
        sort_by_magnitude: Match the largest debts and credits first instead
                           of using input order

    Returns:
        Suggested payments, in the order they were matched. Amounts are the
        exact transfers; round them only for display.
    """
    debtors, creditors = _partition(balances, sort_by_magnitude)
    suggestions = []

    while debtors and creditors:
        debtor = debtors[0]
        creditor = creditors[0]

        transfer = min(debtor.remaining, creditor.remaining)

        if transfer > SETTLED_THRESHOLD:
            suggestions.append(
                SettlementSuggestion(
                    from_user_id=debtor.user_id,
                    to_user_id=creditor.user_id,
                    amount=transfer,
                )
            )

        debtor.remaining -= transfer
        creditor.remaining -= transfer

        if debtor.remaining < SETTLED_THRESHOLD:
            debtors.pop(0)
        if creditor.remaining < SETTLED_THRESHOLD:
            creditors.pop(0)

    if debtors or creditors:
        logger.debug(
            f"Unmatched after settlement: {len(debtors)} debtors, "
            f"{len(creditors)} creditors (balances do not net to zero)"
        )

    logger.debug(f"Computed {len(suggestions)} settlement suggestions")
    return suggestions


def apply_suggestions(
    balances: Iterable[Balance], suggestions: Iterable[SettlementSuggestion]
) -> dict[str, Decimal]:
    """
    Apply suggested payments to balances.

    Each payment reduces the payer's debt and the recipient's credit by the
    payment amount.

    Returns:
        Mapping of user ID to remaining balance
    """
    remaining: dict[str, Decimal] = {}
    for balance in balances:
        remaining[balance.user_id] = remaining.get(balance.user_id, ZERO) + balance.amount

    for suggestion in suggestions:
        remaining[suggestion.from_user_id] = (
            remaining.get(suggestion.from_user_id, ZERO) + suggestion.amount
        )
        remaining[suggestion.to_user_id] = (
            remaining.get(suggestion.to_user_id, ZERO) - suggestion.amount
        )

    return remaining


def total_debt(balances: Iterable[Balance]) -> Decimal:
    """Total amount owed by all debtors."""
    return sum((-b.amount for b in balances if b.amount < 0), ZERO)
