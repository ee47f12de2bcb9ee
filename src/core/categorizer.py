"""Rule-based categorization for aggregator transactions.

Maps a provider category label and a free-text merchant name onto one of
the six core budget categories. Rules form a priority-ordered decision
list: they are checked top to bottom and the first match wins.
"""

from dataclasses import dataclass
from typing import Optional

from src.models.schemas import CoreCategory


@dataclass(frozen=True)
class CategoryRule:
    """Keywords matched (case-insensitive substring) against label or name."""
    category: CoreCategory
    label_keywords: tuple[str, ...] = ()
    name_keywords: tuple[str, ...] = ()

    def matches(self, label: str, name: str) -> bool:
        return (
            any(k in label for k in self.label_keywords)
            or any(k in name for k in self.name_keywords)
        )


# Order matters: a label holding both "rent" and "food" is Housing.
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        CoreCategory.HOUSING,
        label_keywords=("rent", "mortgage", "housing", "utilities", "home"),
    ),
    CategoryRule(
        CoreCategory.FOOD_AND_DINING,
        label_keywords=("food", "restaurant", "dining", "groceries", "fast food"),
        name_keywords=("grill", "cafe"),
    ),
    CategoryRule(
        CoreCategory.TRANSPORTATION,
        label_keywords=("transportation", "gas", "fuel", "auto", "ride share", "rideshare"),
        name_keywords=("uber", "lyft"),
    ),
    CategoryRule(
        CoreCategory.HEALTH_AND_FITNESS,
        label_keywords=("health", "medical", "pharmacy", "gym", "fitness"),
    ),
    CategoryRule(
        CoreCategory.LIFESTYLE,
        label_keywords=("shopping", "entertainment", "subscription", "travel", "recreation", "hobby"),
    ),
)

INCOME_LABEL_KEYWORDS = ("income", "payroll")
INCOME_NAME_KEYWORDS = ("payroll", "salary", "deposit")


def classify(primary_label: Optional[str], name: Optional[str]) -> CoreCategory:
    """Return the core category for a spending transaction. Never raises."""
    label = (primary_label or "").lower()
    merchant = (name or "").lower()
    for rule in CATEGORY_RULES:
        if rule.matches(label, merchant):
            return rule.category
    return CoreCategory.OTHER


def is_income(primary_label: Optional[str], name: Optional[str]) -> bool:
    """Whether a transaction is income, judged from its label and description only."""
    label = (primary_label or "").lower()
    merchant = (name or "").lower()
    return (
        any(k in label for k in INCOME_LABEL_KEYWORDS)
        or any(k in merchant for k in INCOME_NAME_KEYWORDS)
    )
