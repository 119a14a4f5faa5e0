"""Build expense participant shares for equal, unequal and percentage splits."""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Literal

from ..exceptions import SplitValidationError
from ..models import ExpenseParticipant
from .calculator import SETTLED_THRESHOLD, ZERO, to_cents

logger = logging.getLogger(__name__)

SplitType = Literal["equal", "unequal", "percentage"]

HUNDRED = Decimal("100")
PERCENTAGE_TOLERANCE = Decimal("0.1")


def split_type_for_api(split_type: SplitType) -> Literal["equal", "unequal"]:
    """Percentage splits are stored as unequal splits."""
    return "unequal" if split_type == "percentage" else split_type


def _absorb_residual(shares: list[Decimal], target: Decimal) -> list[Decimal]:
    """Push the rounding residual onto the largest share so shares sum to target."""
    residual = target - sum(shares, ZERO)
    if residual != 0:
        largest_idx = max(range(len(shares)), key=lambda i: abs(shares[i]))
        shares[largest_idx] += residual
        logger.debug(f"Applied rounding adjustment of {residual} to share {largest_idx}")
    return shares


def build_participants(
    amount: Decimal,
    user_ids: Sequence[str],
    split_type: SplitType,
    custom_amounts: Mapping[str, Decimal] | None = None,
    percentages: Mapping[str, Decimal] | None = None,
) -> list[ExpenseParticipant]:
    """
    Compute each participant's share of an expense.

    Split types:
    - equal: amount / n each, rounded to cents
    - unequal: the given custom amounts (missing users owe 0)
    - percentage: amount * percentage / 100 each

    Equal and percentage shares are adjusted so they sum exactly to the
    amount (rounded to cents).

    Args:
        amount: Expense total
        user_ids: Participants, in display order
        split_type: How to divide the amount
        custom_amounts: Per-user amounts for unequal splits
        percentages: Per-user percentages for percentage splits

    Returns:
        One participant per user ID

    Raises:
        SplitValidationError: If there are no participants, the split type is
                              unknown, or the shares don't add up
    """
    if not user_ids:
        raise SplitValidationError("At least one participant is required")

    target = to_cents(amount)

    if split_type == "equal":
        share = to_cents(amount / len(user_ids))
        shares = _absorb_residual([share] * len(user_ids), target)
        return [
            ExpenseParticipant(user_id=user_id, amount=share)
            for user_id, share in zip(user_ids, shares)
        ]

    if split_type == "unequal":
        custom_amounts = custom_amounts or {}
        shares = [custom_amounts.get(user_id) or ZERO for user_id in user_ids]
        remaining = amount - sum(shares, ZERO)
        if abs(remaining) > SETTLED_THRESHOLD:
            raise SplitValidationError(
                f"Custom amounts total {sum(shares, ZERO)}, "
                f"expected {amount} (remaining {remaining})"
            )
        return [
            ExpenseParticipant(user_id=user_id, amount=share)
            for user_id, share in zip(user_ids, shares)
        ]

    if split_type == "percentage":
        percentages = percentages or {}
        pcts = [percentages.get(user_id) or ZERO for user_id in user_ids]
        total_pct = sum(pcts, ZERO)
        if abs(total_pct - HUNDRED) > PERCENTAGE_TOLERANCE:
            raise SplitValidationError(
                f"Percentages total {total_pct}%, expected 100%"
            )
        shares = _absorb_residual(
            [to_cents(amount * pct / HUNDRED) for pct in pcts], target
        )
        return [
            ExpenseParticipant(user_id=user_id, amount=share, percentage=pct)
            for user_id, share, pct in zip(user_ids, shares, pcts)
        ]

    raise SplitValidationError(f"Unknown split type: {split_type!r}")
