"""Service layer that composes balance calculation and settlement optimization.

This module provides a higher-level API over a group snapshot, composing the
pure calculator and optimizer functions without modifying their inputs.
"""

import logging

from ..config import Settings
from ..exceptions import UnknownMemberError
from ..models import (
    Balance,
    BalanceSummary,
    GroupReport,
    GroupSnapshot,
    NamedSuggestion,
    SettlementSuggestion,
)
from .calculator import (
    apply_recorded_settlements,
    calculate_balance_summary,
    calculate_balances,
    get_user_balance,
)
from .optimizer import compute_settlements, total_debt

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"


class SettlementService:
    """Service for computing balances and settlement suggestions for a group."""

    def __init__(self, settings: Settings):
        """Initialize the settlement service."""
        self.settings = settings

    def compute_balances(self, snapshot: GroupSnapshot) -> list[Balance]:
        """
        Compute current balances for a group.

        Recorded settlements are folded in when
        include_recorded_settlements is enabled.
        """
        balances = calculate_balances(snapshot.expenses)

        if self.settings.include_recorded_settlements and snapshot.settlements:
            balances = apply_recorded_settlements(balances, snapshot.settlements)

        return balances

    def get_member_name(self, snapshot: GroupSnapshot, user_id: str) -> str:
        """Display name for a user, or 'Unknown User' if not in the roster."""
        member = snapshot.get_member(user_id)
        if member is None:
            return UNKNOWN_USER
        return member.display_name or UNKNOWN_USER

    def name_suggestions(
        self,
        snapshot: GroupSnapshot,
        suggestions: list[SettlementSuggestion],
    ) -> list[NamedSuggestion]:
        """Attach member display names to settlement suggestions."""
        return [
            NamedSuggestion(
                from_user_id=s.from_user_id,
                to_user_id=s.to_user_id,
                amount=s.amount,
                from_name=self.get_member_name(snapshot, s.from_user_id),
                to_name=self.get_member_name(snapshot, s.to_user_id),
            )
            for s in suggestions
        ]

    def build_report(
        self, snapshot: GroupSnapshot, sort_by_magnitude: bool | None = None
    ) -> GroupReport:
        """
        Compute balances and suggested payments for a group.

        Args:
            snapshot: The group's members, expenses and recorded settlements
            sort_by_magnitude: Override the configured optimizer ordering

        Returns:
            Report with balances, named suggestions and the total debt
        """
        if sort_by_magnitude is None:
            sort_by_magnitude = self.settings.sort_by_magnitude

        balances = self.compute_balances(snapshot)
        suggestions = compute_settlements(balances, sort_by_magnitude=sort_by_magnitude)

        report = GroupReport(
            group_id=snapshot.group_id,
            balances=balances,
            suggestions=self.name_suggestions(snapshot, suggestions),
            total_debt=total_debt(balances),
        )

        logger.info(
            f"Built report with {len(report.balances)} balances and "
            f"{len(report.suggestions)} suggestions, "
            f"total debt: ${report.total_debt:.2f}"
        )

        return report

    def member_summary(self, snapshot: GroupSnapshot, user_id: str) -> BalanceSummary:
        """
        Summarize one member's position in the group.

        Raises:
            UnknownMemberError: If user_id is not in the member roster
        """
        if snapshot.get_member(user_id) is None:
            raise UnknownMemberError(user_id)

        balance = get_user_balance(self.compute_balances(snapshot), user_id)
        return calculate_balance_summary(balance)
