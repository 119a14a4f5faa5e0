"""groupsplit - Group expense balances and settle-up suggestions."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .models import (
    Balance,
    Expense,
    ExpenseParticipant,
    GroupSnapshot,
    Member,
    Settlement,
    SettlementSuggestion,
)
from .settle.calculator import calculate_balances
from .settle.optimizer import compute_settlements
from .settle.service import SettlementService
from .settle.splits import build_participants
from .snapshot import load_snapshot

__all__ = [
    "Settings",
    "load_settings",
    "Balance",
    "Expense",
    "ExpenseParticipant",
    "GroupSnapshot",
    "Member",
    "Settlement",
    "SettlementSuggestion",
    "calculate_balances",
    "compute_settlements",
    "SettlementService",
    "build_participants",
    "load_snapshot",
]
