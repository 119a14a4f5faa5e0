"""Tests for SettlementService layer."""

from decimal import Decimal

import pytest

from groupsplit.config import Settings
from groupsplit.exceptions import UnknownMemberError
from groupsplit.models import (
    Expense,
    ExpenseParticipant,
    GroupSnapshot,
    Member,
    Settlement,
    SettlementSuggestion,
)
from groupsplit.settle.service import SettlementService


@pytest.fixture
def settings():
    """Create settings with defaults."""
    return Settings(sort_by_magnitude=False, include_recorded_settlements=True)


@pytest.fixture
def service(settings):
    """Create a SettlementService instance."""
    return SettlementService(settings)


@pytest.fixture
def snapshot():
    """A three-member group with two expenses and no settlements."""
    return GroupSnapshot(
        group_id="group-1",
        members=[
            Member(id="u1", name="Alice", email="alice@example.com"),
            Member(id="u2", name="Bob", email="bob@example.com"),
            Member(id="u3", email="carol@example.com"),
        ],
        expenses=[
            Expense(
                id="e1",
                group_id="group-1",
                amount=Decimal("60"),
                description="Dinner",
                paid_by="u1",
                participants=[
                    ExpenseParticipant(user_id="u1", amount=Decimal("20")),
                    ExpenseParticipant(user_id="u2", amount=Decimal("20")),
                    ExpenseParticipant(user_id="u3", amount=Decimal("20")),
                ],
            ),
            Expense(
                id="e2",
                group_id="group-1",
                amount=Decimal("30"),
                description="Taxi",
                paid_by="u2",
                participants=[
                    ExpenseParticipant(user_id="u1", amount=Decimal("15")),
                    ExpenseParticipant(user_id="u2", amount=Decimal("15")),
                ],
            ),
        ],
    )


class TestComputeBalances:
    """Tests for compute_balances."""

    def test_expenses_only(self, service, snapshot):
        balances = {b.user_id: b.amount for b in service.compute_balances(snapshot)}

        assert balances == {"u1": Decimal("25"), "u2": Decimal("-5"), "u3": Decimal("-20")}

    def test_includes_recorded_settlements(self, service, snapshot):
        """Recorded payments reduce outstanding balances."""
        snapshot.settlements = [
            Settlement(id="s1", from_user_id="u3", to_user_id="u1", amount=Decimal("20"))
        ]

        balances = {b.user_id: b.amount for b in service.compute_balances(snapshot)}

        assert balances == {"u1": Decimal("5"), "u2": Decimal("-5"), "u3": Decimal("0")}

    def test_recorded_settlements_disabled(self, snapshot):
        service = SettlementService(Settings(include_recorded_settlements=False))
        snapshot.settlements = [
            Settlement(id="s1", from_user_id="u3", to_user_id="u1", amount=Decimal("20"))
        ]

        balances = {b.user_id: b.amount for b in service.compute_balances(snapshot)}

        assert balances["u3"] == Decimal("-20")


class TestBuildReport:
    """Tests for build_report."""

    def test_report_contents(self, service, snapshot):
        report = service.build_report(snapshot)

        assert report.group_id == "group-1"
        assert len(report.balances) == 3
        assert report.total_debt == Decimal("25")
        assert [(s.from_name, s.to_name, s.amount) for s in report.suggestions] == [
            ("Bob", "Alice", Decimal("5")),
            ("carol@example.com", "Alice", Decimal("20")),
        ]

    def test_sort_override(self, service, snapshot):
        """Explicit sort_by_magnitude overrides the configured default."""
        report = service.build_report(snapshot, sort_by_magnitude=True)

        assert report.suggestions[0].from_user_id == "u3"

    def test_configured_sort(self, snapshot):
        service = SettlementService(Settings(sort_by_magnitude=True))

        report = service.build_report(snapshot)

        assert report.suggestions[0].from_user_id == "u3"

    def test_settled_group(self, service, snapshot):
        """Paying off every suggestion leaves nothing to suggest."""
        snapshot.settlements = [
            Settlement(from_user_id="u2", to_user_id="u1", amount=Decimal("5")),
            Settlement(from_user_id="u3", to_user_id="u1", amount=Decimal("20")),
        ]

        report = service.build_report(snapshot)

        assert report.suggestions == []
        assert report.total_debt == 0

    def test_empty_group(self, service):
        report = service.build_report(GroupSnapshot(group_id="empty"))

        assert report.balances == []
        assert report.suggestions == []


class TestNames:
    """Tests for member name resolution."""

    def test_unknown_user(self, service, snapshot):
        suggestions = [
            SettlementSuggestion(from_user_id="ghost", to_user_id="u1", amount=Decimal("1"))
        ]

        named = service.name_suggestions(snapshot, suggestions)

        assert named[0].from_name == "Unknown User"
        assert named[0].to_name == "Alice"

    def test_member_without_name_or_email(self, service):
        snapshot = GroupSnapshot(members=[Member(id="u1")])

        assert service.get_member_name(snapshot, "u1") == "Unknown User"


class TestMemberSummary:
    """Tests for member_summary."""

    def test_creditor(self, service, snapshot):
        summary = service.member_summary(snapshot, "u1")

        assert summary.total_balance == Decimal("25")
        assert summary.total_owed == Decimal("25")
        assert summary.total_owing == 0

    def test_debtor(self, service, snapshot):
        summary = service.member_summary(snapshot, "u3")

        assert summary.total_owing == Decimal("20")

    def test_member_without_expenses(self, service, snapshot):
        snapshot.members.append(Member(id="u4", name="Dan"))

        summary = service.member_summary(snapshot, "u4")

        assert summary.total_balance == 0

    def test_unknown_member(self, service, snapshot):
        with pytest.raises(UnknownMemberError) as exc_info:
            service.member_summary(snapshot, "u9")

        assert exc_info.value.user_id == "u9"
