"""Pure analysis functions for aggregator transaction data.

All functions take already-fetched records and return result
dataclasses. No I/O — keeps business logic testable without mocking.
"""

import math
import sys
from datetime import date
from typing import Any, Iterable, Mapping

from src.core.categorizer import classify, is_income
from src.core.resolvers import add_months, utc_today
from src.models.results import (
    GoalForecast,
    NormalizedTransaction,
    SampleTransaction,
    Snapshot,
)
from src.models.schemas import RawTransaction, TransactionKind, coerce_number

SAMPLE_SIZE = 10


def to_raw_transaction(record: RawTransaction | Mapping[str, Any]) -> RawTransaction:
    """Accept either a parsed record or a wire dict."""
    if isinstance(record, RawTransaction):
        return record
    return RawTransaction.model_validate(dict(record))


def _iter_raw(records: Iterable[Any]) -> Iterable[RawTransaction]:
    for record in records or ():
        if isinstance(record, (RawTransaction, Mapping)):
            yield to_raw_transaction(record)


# --- Normalization ---


def normalize_transaction(record: RawTransaction | Mapping[str, Any]) -> NormalizedTransaction:
    """Normalize a raw transaction into the signed listing shape.

    Income is detected from label and description before classification
    and the sign is re-derived from it: income is positive, spending is
    negative, whatever sign the provider sent.

    A record that is not income with amount 0 normalizes to spending with
    amount 0.0. That is the only spending entry with a non-negative amount.
    """
    raw = to_raw_transaction(record)
    label = raw.primary_label
    magnitude = abs(raw.amount)

    if is_income(label, raw.name):
        return NormalizedTransaction(
            id=raw.transaction_id,
            name=raw.name,
            date=raw.date,
            amount=magnitude,
            kind=TransactionKind.INCOME,
        )

    return NormalizedTransaction(
        id=raw.transaction_id,
        name=raw.name,
        date=raw.date,
        amount=-magnitude or 0.0,  # no negative zero
        kind=TransactionKind.SPENDING,
        category=classify(label, raw.name),
    )


def list_transactions(records: Iterable[Any]) -> list[NormalizedTransaction]:
    """Normalize each record independently, in input order."""
    return [normalize_transaction(raw) for raw in _iter_raw(records)]


# --- Snapshot Aggregation ---


def build_snapshot(
    records: Iterable[Any],
    start_date: date,
    end_date: date,
) -> Snapshot:
    """Aggregate a window of transactions into income, spending and category totals.

    Totals are unsigned magnitudes. The sample keeps the first
    ``SAMPLE_SIZE`` records as the provider sent them, income included.
    """
    snapshot = Snapshot(start_date=start_date, end_date=end_date)

    for raw in _iter_raw(records):
        if len(snapshot.sample) < SAMPLE_SIZE:
            snapshot.sample.append(SampleTransaction(
                name=raw.name,
                amount=raw.amount,
                date=raw.date,
                category=raw.primary_label,
            ))

        txn = normalize_transaction(raw)
        magnitude = abs(txn.amount)
        if txn.kind is TransactionKind.INCOME:
            snapshot.total_income_estimate += magnitude
        else:
            snapshot.total_spending_estimate += magnitude
            snapshot.category_totals[txn.category] += magnitude

    return snapshot


# --- Goal Forecasting ---


def forecast_goal(
    target_amount: Any,
    current_amount: Any,
    monthly_contribution: Any,
    reference_date: date | None = None,
) -> GoalForecast:
    """Project when a savings goal completes under a fixed monthly contribution.

    A goal already met, or one with no positive contribution, yields
    ``GoalForecast(0, None)``. When the projection falls past the last
    representable date, ``months_to_goal`` is kept and the date is None.
    """
    remaining = coerce_number(target_amount) - coerce_number(current_amount)
    contribution = coerce_number(monthly_contribution)

    if remaining <= 0 or contribution <= 0:
        return GoalForecast()

    months = max(math.ceil(min(remaining / contribution, sys.float_info.max)), 1)
    today = reference_date or utc_today()
    try:
        completion = add_months(today, months)
    except (ValueError, OverflowError):
        completion = None  # past date.max
    return GoalForecast(months_to_goal=months, projected_completion_date=completion)
