"""Budget plan composition.

Combines a caller's budget state with an optional snapshot and per-goal
forecasts. Nested fields degrade to zero rather than failing; only the
top-level budget state is validated.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Mapping

from src.core.analyzers import forecast_goal
from src.models.results import PlannedGoal, PlanResponse, Snapshot
from src.models.schemas import BudgetState

DEFAULT_SAVINGS_RATE = 0.2

FALLBACK_NARRATION = (
    "Rule-of-thumb plan: no AI coach is configured, so goals without a "
    "monthly contribution share 20% of the monthly surplus equally."
)
PLAIN_NARRATION = (
    "Rule-of-thumb plan: no AI coach is configured. Goal contributions are "
    "kept as provided because there is no surplus to share or no goal needs one."
)
AUGMENTED_NARRATION = (
    "Coach-assisted plan: goal contributions are kept as provided and the "
    "AI coach narrates the result."
)


class InvalidInputError(Exception):
    """Raised when the budget state is missing or not a structured object."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


def parse_budget_state(budget_state: Any) -> BudgetState:
    """Validate the top-level budget state.

    Raises :class:`InvalidInputError` unless *budget_state* is a mapping
    or an already-parsed :class:`BudgetState`.
    """
    if isinstance(budget_state, BudgetState):
        return budget_state
    if not isinstance(budget_state, Mapping):
        raise InvalidInputError(
            "Budget state must be an object with income, categories and goals."
        )
    return BudgetState.model_validate(dict(budget_state))


def _half_up(value: float) -> int:
    return math.floor(value + 0.5)


def default_contribution(surplus: float, goals_needing_default: int) -> float:
    """Equal share of ``DEFAULT_SAVINGS_RATE`` of the surplus, never negative."""
    if goals_needing_default <= 0:
        return 0.0
    return float(max(_half_up(surplus * DEFAULT_SAVINGS_RATE / goals_needing_default), 0))


def _narration(narration_available: bool, fallback: float | None) -> str:
    if narration_available:
        return AUGMENTED_NARRATION
    return FALLBACK_NARRATION if fallback is not None else PLAIN_NARRATION


def compose_plan(
    budget_state: BudgetState | Mapping[str, Any] | None,
    snapshot: Snapshot | None = None,
    narration_available: bool = False,
    reference_date: date | None = None,
) -> PlanResponse:
    """Compose a plan: planned spending, surplus and forecast goals.

    Without a narration service, goals lacking an explicit contribution
    get a rule-of-thumb default when there is a positive surplus. With
    one, contributions are left untouched for the narrator to address.
    """
    state = parse_budget_state(budget_state)

    planned_spending = sum(c.planned for c in state.categories)
    surplus = state.income - planned_spending

    missing = [g for g in state.goals if g.monthly_contribution is None]
    fallback = None
    if not narration_available and surplus > 0 and missing:
        fallback = default_contribution(surplus, len(missing))

    goals: list[PlannedGoal] = []
    for goal in state.goals:
        contribution = goal.monthly_contribution
        if contribution is None:
            contribution = fallback
        goals.append(PlannedGoal(
            goal=goal,
            monthly_contribution=contribution,
            forecast=forecast_goal(
                goal.target_amount,
                goal.current_amount,
                contribution,
                reference_date=reference_date,
            ),
        ))

    return PlanResponse(
        categories=list(state.categories),
        goals=goals,
        surplus=surplus,
        planned_spending=planned_spending,
        narration=_narration(narration_available, fallback),
        narration_augmented=narration_available,
        snapshot=snapshot,
    )
