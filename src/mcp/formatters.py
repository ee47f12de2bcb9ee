"""Markdown formatters for MCP tool responses.

Pure functions that take result objects and return human-readable Markdown
strings. Structured payloads are appended as a fenced JSON block so callers
can consume the wire shape directly.
"""

from __future__ import annotations

import json
from typing import Any

from src.models.results import NormalizedTransaction, PlanResponse, Snapshot
from src.models.schemas import CoreCategory, TransactionKind


def format_json_block(payload: Any) -> str:
    return "```json\n" + json.dumps(payload, indent=2) + "\n```"


def _money(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_snapshot(snapshot: Snapshot) -> str:
    lines = [
        f"## Financial Snapshot ({snapshot.start_date.isoformat()} to "
        f"{snapshot.end_date.isoformat()})\n",
        f"**Income:** {_money(snapshot.total_income_estimate)} | "
        f"**Spending:** {_money(snapshot.total_spending_estimate)}",
        "\n### Spending by Category",
    ]
    for cat in CoreCategory:
        lines.append(f"- {cat.value}: {_money(snapshot.category_totals.get(cat, 0.0))}")

    if snapshot.sample:
        lines.append(f"\n### Sample ({len(snapshot.sample)} transactions)")
        for s in snapshot.sample:
            lines.append(
                f"- {s.date or '?'} | {s.name or 'Unknown'} | {s.amount:,.2f} "
                f"| {s.category or 'Uncategorized'}"
            )
    else:
        lines.append("\nNo transactions in this window.")

    lines.append("")
    lines.append(format_json_block(snapshot.to_dict()))
    return "\n".join(lines)


def format_transaction_list(transactions: list[NormalizedTransaction], limit: int) -> str:
    shown = transactions[:limit]
    if not shown:
        return "No transactions found in this window."

    lines = [f"## Transactions ({len(shown)} of {len(transactions)} shown)\n"]
    for t in shown:
        direction = "IN" if t.kind is TransactionKind.INCOME else "OUT"
        category = t.category.value if t.category else "Income"
        lines.append(
            f"- {t.date} [{direction}] **{_money(t.amount)}** "
            f"| {t.name or 'Unknown'} | {category}"
        )

    lines.append("")
    lines.append(format_json_block([t.to_dict() for t in shown]))
    return "\n".join(lines)


def format_plan(plan: PlanResponse) -> str:
    status = "surplus" if plan.surplus >= 0 else "shortfall"
    lines = [
        "## Budget Plan\n",
        f"**Planned spending:** {_money(plan.planned_spending)} | "
        f"**Monthly {status}:** {_money(plan.surplus)}",
    ]

    if plan.goals:
        lines.append("\n### Goals")
        for g in plan.goals:
            name = g.goal.name or "Goal"
            contribution = (
                f"{_money(g.monthly_contribution)}/mo"
                if g.monthly_contribution is not None else "no contribution set"
            )
            completion = g.forecast.projected_completion_date
            if completion:
                eta = f"{g.forecast.months_to_goal} months (by {completion.isoformat()})"
            elif g.forecast.months_to_goal:
                eta = f"{g.forecast.months_to_goal:,} months"
            elif g.goal.current_amount >= g.goal.target_amount:
                eta = "already reached"
            else:
                eta = "no projection"
            lines.append(
                f"- **{name}**: {_money(g.goal.current_amount)} of "
                f"{_money(g.goal.target_amount)} | {contribution} | {eta}"
            )

    if plan.snapshot:
        lines.append(
            f"\n_Last window: {_money(plan.snapshot.total_income_estimate)} in, "
            f"{_money(plan.snapshot.total_spending_estimate)} out._"
        )

    lines.append(f"\n{plan.narration}")
    lines.append("")
    lines.append(format_json_block(plan.to_dict()))
    return "\n".join(lines)
