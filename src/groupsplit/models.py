"""Pydantic domain models for groupsplit."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _to_decimal_or_none(value: Any) -> Decimal | None:
    """
    Coerce a loosely-typed numeric field to Decimal.

    Missing, null, blank and non-numeric values all come back as None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def _to_id(value: Any) -> str:
    """Normalize a user/entity identifier to a string ('' when missing)."""
    if value is None:
        return ""
    return str(value)


EntityId = Annotated[str, BeforeValidator(_to_id)]
OptionalAmount = Annotated[Decimal | None, BeforeValidator(_to_decimal_or_none)]


class ApiModel(BaseModel):
    """Base model accepting the REST API's camelCase keys or snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Group Models
# ============================================================================


class Member(ApiModel):
    """A member of a group, used only for display-name resolution."""

    id: EntityId
    name: str | None = None
    email: str = ""

    @property
    def display_name(self) -> str:
        """Member name, falling back to email."""
        return self.name or self.email


class ExpenseParticipant(ApiModel):
    """One member's owed share of an expense.

    An amount of None (or zero) means the share was not specified and the
    balance calculator falls back to an equal split.
    """

    user_id: EntityId = ""
    amount: OptionalAmount = None
    percentage: OptionalAmount = None


class Expense(ApiModel):
    """An expense paid by one member and shared among participants."""

    id: EntityId = ""
    group_id: EntityId = ""
    amount: Decimal = Decimal("0")
    description: str = ""
    category: str = ""
    paid_by: EntityId = ""
    participants: list[ExpenseParticipant] = Field(default_factory=list)
    split_type: Literal["equal", "unequal"] = "equal"
    created_at: datetime | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def default_amount(cls, value: Any) -> Decimal:
        """Treat a missing or non-numeric amount as zero."""
        amount = _to_decimal_or_none(value)
        return amount if amount is not None else Decimal("0")

    @field_validator("participants", mode="before")
    @classmethod
    def default_participants(cls, value: Any) -> Any:
        """Treat a missing participant list as empty."""
        return [] if value is None else value

    @field_validator("split_type", mode="before")
    @classmethod
    def map_split_type(cls, value: Any) -> Any:
        """Percentage splits are stored as unequal splits."""
        if value is None:
            return "equal"
        if value == "percentage":
            return "unequal"
        return value


# ============================================================================
# Balance & Settlement Models
# ============================================================================


class Balance(ApiModel):
    """A member's net position: positive is owed money, negative owes money."""

    user_id: str
    amount: Decimal


class SettlementSuggestion(ApiModel):
    """A recommended payment from a debtor to a creditor."""

    from_user_id: str
    to_user_id: str
    amount: Decimal


class Settlement(ApiModel):
    """A payment that has already been made and recorded."""

    id: EntityId = ""
    group_id: EntityId = ""
    from_user_id: EntityId
    to_user_id: EntityId
    amount: Decimal
    description: str | None = None
    created_at: datetime | None = None


class GroupSnapshot(ApiModel):
    """Everything known about a group at one point in time."""

    group_id: EntityId = ""
    members: list[Member] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    settlements: list[Settlement] = Field(default_factory=list)

    def get_member(self, user_id: str) -> Member | None:
        """Look up a member by ID."""
        for member in self.members:
            if member.id == user_id:
                return member
        return None


# ============================================================================
# Report Models
# ============================================================================


class BalanceSummary(ApiModel):
    """Owed/owing breakdown of a single member's balance."""

    total_balance: Decimal
    total_owed: Decimal
    total_owing: Decimal


class NamedSuggestion(SettlementSuggestion):
    """A settlement suggestion with member display names resolved."""

    from_name: str
    to_name: str


class GroupReport(ApiModel):
    """Balances and suggested payments for a group."""

    group_id: str
    balances: list[Balance]
    suggestions: list[NamedSuggestion]
    total_debt: Decimal
