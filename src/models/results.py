"""Result dataclasses for the classification, snapshot and plan engine.

These are internal types consumed by formatters — lightweight dataclasses
rather than Pydantic models since they don't need validation. ``to_dict``
produces the external (camelCase) wire shape.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from src.models.schemas import BudgetCategory, CoreCategory, Goal, TransactionKind


def empty_category_totals() -> dict[CoreCategory, float]:
    return {c: 0.0 for c in CoreCategory}


@dataclass(frozen=True)
class NormalizedTransaction:
    """A sign-consistent transaction (negative = spending)."""
    id: str
    name: str
    date: str
    amount: float                       # dollars, signed
    kind: TransactionKind
    category: CoreCategory | None = None  # None for income

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "amount": round(self.amount, 2),
            "type": self.kind.value,
            "category": self.category.value if self.category else None,
        }


@dataclass(frozen=True)
class SampleTransaction:
    """Raw fields of a transaction kept for display, not normalized."""
    name: str
    amount: float       # upstream signed amount
    date: str
    category: str       # primary provider label

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount,
            "date": self.date,
            "category": self.category,
        }


@dataclass
class Snapshot:
    """Rolling-window summary of income, spending and category totals."""
    start_date: date
    end_date: date
    total_income_estimate: float = 0.0     # dollars, magnitude
    total_spending_estimate: float = 0.0   # dollars, magnitude
    category_totals: dict[CoreCategory, float] = field(default_factory=empty_category_totals)
    sample: list[SampleTransaction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "totalIncomeEstimate": round(self.total_income_estimate, 2),
            "totalSpendingEstimate": round(self.total_spending_estimate, 2),
            "categoryTotals": {
                c.value: round(self.category_totals.get(c, 0.0), 2) for c in CoreCategory
            },
            "sample": [s.to_dict() for s in self.sample],
        }


@dataclass(frozen=True)
class GoalForecast:
    """Months to reach a goal and the projected completion date."""
    months_to_goal: int = 0
    projected_completion_date: date | None = None


@dataclass
class PlannedGoal:
    """A caller-owned goal with the derived forecast attached."""
    goal: Goal
    monthly_contribution: float | None
    forecast: GoalForecast

    def to_dict(self) -> dict[str, Any]:
        data = self.goal.model_dump(by_alias=True, exclude_unset=True)
        completion = self.forecast.projected_completion_date
        data.update({
            "monthlyContribution": self.monthly_contribution,
            "monthsToGoal": self.forecast.months_to_goal,
            "projectedCompletionDate": completion.isoformat() if completion else None,
        })
        return data


@dataclass
class PlanResponse:
    """Budget plan combining planned categories, goals and an optional snapshot."""
    categories: list[BudgetCategory]
    goals: list[PlannedGoal]
    surplus: float
    planned_spending: float
    narration: str
    narration_augmented: bool = False
    snapshot: Snapshot | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "categories": [c.model_dump(exclude_unset=True) for c in self.categories],
            "goals": [g.to_dict() for g in self.goals],
            "surplus": round(self.surplus, 2),
            "plannedSpending": round(self.planned_spending, 2),
            "snapshot": self.snapshot.to_dict() if self.snapshot else None,
            "narration": self.narration,
        }
