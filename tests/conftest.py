"""Shared test fixtures for budget coach tests."""

from datetime import date

from src.models.schemas import PersonalFinanceCategory, RawTransaction

REFERENCE_DATE = date(2025, 3, 15)


def make_raw_transaction(
    name: str = "Starbucks",
    amount: float = 12.5,
    label: str | None = "FOOD_AND_DRINK",
    legacy: list[str] | None = None,
    date: str = "2025-03-10",
    transaction_id: str | None = None,
) -> RawTransaction:
    return RawTransaction(
        transaction_id=transaction_id or f"txn-{name.lower().replace(' ', '-')}-{date}",
        amount=amount,
        name=name,
        date=date,
        personal_finance_category=(
            PersonalFinanceCategory(primary=label) if label is not None else None
        ),
        category=legacy or [],
        iso_currency_code="USD",
    )


def make_wire_transaction(
    name: str = "Starbucks",
    amount: float = 12.5,
    label: str | None = "FOOD_AND_DRINK",
    date: str = "2025-03-10",
) -> dict:
    """A transaction dict shaped like Plaid's /transactions/get payload."""
    return {
        "transaction_id": f"txn-{name.lower().replace(' ', '-')}-{date}",
        "account_id": "acc-1",
        "amount": amount,
        "iso_currency_code": "USD",
        "name": name,
        "merchant_name": name,
        "date": date,
        "pending": False,
        "category": None,
        "personal_finance_category": (
            {"primary": label, "detailed": f"{label}_OTHER", "confidence_level": "HIGH"}
            if label is not None else None
        ),
    }


def make_goal(
    name: str = "Emergency Fund",
    target: float = 1200,
    current: float = 0,
    contribution: float | None = None,
) -> dict:
    goal = {"name": name, "targetAmount": target, "currentAmount": current}
    if contribution is not None:
        goal["monthlyContribution"] = contribution
    return goal


def make_budget_state(
    income: float = 5000,
    planned: list[float] | None = None,
    goals: list[dict] | None = None,
) -> dict:
    planned = planned if planned is not None else [2500, 1500]
    return {
        "income": income,
        "categories": [
            {"name": f"Category {i + 1}", "planned": p} for i, p in enumerate(planned)
        ],
        "goals": goals if goals is not None else [],
    }
