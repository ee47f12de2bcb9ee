"""Pydantic models for aggregator wire data, budget state and tool inputs."""

import math
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_number(value: Any) -> float:
    """Coerce a loosely-typed numeric field to a finite float, defaulting to 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0.0
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return 0.0


def coerce_text(value: Any) -> str:
    """Coerce a loosely-typed text field to str, defaulting to empty."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# --- Enums ---

class CoreCategory(str, Enum):
    HOUSING = "Housing"
    FOOD_AND_DINING = "Food & Dining"
    TRANSPORTATION = "Transportation"
    HEALTH_AND_FITNESS = "Health & Fitness"
    LIFESTYLE = "Lifestyle"
    OTHER = "Other"


class TransactionKind(str, Enum):
    INCOME = "income"
    SPENDING = "spending"


class PlaidEnvironment(str, Enum):
    SANDBOX = "sandbox"
    DEVELOPMENT = "development"
    PRODUCTION = "production"


# --- Aggregator Models ---

class PersonalFinanceCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    primary: str = ""
    detailed: str = ""

    @field_validator("primary", "detailed", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)


class RawTransaction(BaseModel):
    """A transaction as delivered by Plaid's ``/transactions/get``."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    transaction_id: str = ""
    amount: float = 0.0  # upstream sign convention, not trusted
    name: str = ""
    date: str = ""
    personal_finance_category: Optional[PersonalFinanceCategory] = None
    category: list[str] = []
    iso_currency_code: Optional[str] = None

    @field_validator("transaction_id", "name", "date", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> float:
        return coerce_number(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> list[str]:
        if not isinstance(v, (list, tuple)):
            return []
        return [coerce_text(c) for c in v if c is not None]

    @field_validator("personal_finance_category", mode="before")
    @classmethod
    def _pfc(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, PersonalFinanceCategory)) else None

    @field_validator("iso_currency_code", mode="before")
    @classmethod
    def _currency(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @property
    def primary_label(self) -> str:
        """Primary category label, falling back to the legacy category list."""
        if self.personal_finance_category and self.personal_finance_category.primary:
            return self.personal_finance_category.primary
        return self.category[0] if self.category else ""


# --- Budget State ---

class BudgetCategory(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    planned: float = 0.0

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("planned", mode="before")
    @classmethod
    def _planned(cls, v: Any) -> float:
        return coerce_number(v)


class Goal(BaseModel):
    """A savings goal owned by the caller's budget state."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    target_amount: float = Field(0.0, alias="targetAmount")
    current_amount: float = Field(0.0, alias="currentAmount")
    monthly_contribution: Optional[float] = Field(None, alias="monthlyContribution")

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("target_amount", "current_amount", mode="before")
    @classmethod
    def _amounts(cls, v: Any) -> float:
        return coerce_number(v)

    @field_validator("monthly_contribution", mode="before")
    @classmethod
    def _contribution(cls, v: Any) -> Optional[float]:
        # Only an explicit number counts as a contribution
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
            return None
        return float(v)


class BudgetState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    income: float = 0.0
    categories: list[BudgetCategory] = []
    goals: list[Goal] = []

    @field_validator("income", mode="before")
    @classmethod
    def _income(cls, v: Any) -> float:
        return coerce_number(v)

    @field_validator("categories", "goals", mode="before")
    @classmethod
    def _items(cls, v: Any) -> list:
        if not isinstance(v, (list, tuple)):
            return []
        return [item for item in v if isinstance(item, (dict, BaseModel))]


# --- MCP Tool Input Models ---


class SnapshotInput(BaseModel):
    """Input for building a financial snapshot."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    access_token: str = Field(..., description="Plaid access token for the user's item", min_length=1)
    start_date: Optional[str] = Field(
        None, description="Window start (YYYY-MM-DD). Defaults to one month before end_date."
    )
    end_date: Optional[str] = Field(
        None, description="Window end, inclusive (YYYY-MM-DD). Defaults to today."
    )
    days: Optional[int] = Field(
        None, ge=1, le=730, description="Window length in days, used when start_date is omitted"
    )


class ListTransactionsInput(BaseModel):
    """Input for the per-transaction listing used for charting."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    access_token: str = Field(..., description="Plaid access token for the user's item", min_length=1)
    start_date: Optional[str] = Field(None, description="Window start (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Window end, inclusive (YYYY-MM-DD)")
    days: Optional[int] = Field(None, ge=1, le=730, description="Window length in days")
    limit: int = Field(default=100, ge=1, le=500, description="Max transactions to return")


class ComposePlanInput(BaseModel):
    """Input for composing a budget plan."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    budget_state: Optional[Any] = Field(
        None,
        description="Object with 'income', 'categories' [{name, planned}] and "
                    "'goals' [{name, targetAmount, currentAmount, monthlyContribution}]",
    )
    access_token: Optional[str] = Field(
        None, description="Plaid access token. When given, a snapshot of the last month is attached."
    )
    days: Optional[int] = Field(None, ge=1, le=730, description="Snapshot window length in days")


class AskCoachInput(BaseModel):
    """Input for a free-form question to the AI coach."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    message: str = Field(..., description="Question for the coach", min_length=1, max_length=2000)
    context: Optional[dict[str, Any]] = Field(
        None, description="Optional app context (income, needs/wants/savings, goals)"
    )
