# fintrack/utils/classifier.py
from enum import Enum
from typing import Dict, Mapping, Optional


class Category(str, Enum):
    income = "income"
    expense = "expense"
    savings = "savings"
    bonus = "bonus"
    debt = "debt"
    goal_log = "goal_log"
    unrecognized = "unrecognized"


# Tagging schemes seen over the life of the data. Keep them separate so a new
# scheme never silently re-labels records written under an older one.
KIND_SCHEMES: Dict[str, Dict[str, Category]] = {
    "v1": {
        "Income": Category.income,
        "Salary": Category.income,
        "Expense": Category.expense,
        "Savings_Deposit": Category.savings,
        "Credit_Payment": Category.debt,
        "Debt_Added": Category.debt,
        "GoalLog": Category.goal_log,
    },
    "v2": {
        "Bonus": Category.bonus,
        "Expense": Category.expense,
        "Savings": Category.savings,
        "Debt": Category.debt,
        "GoalLog": Category.goal_log,
    },
}
KIND_SCHEMES["unified"] = {**KIND_SCHEMES["v1"], **KIND_SCHEMES["v2"]}


class KindClassifier:
    """Maps raw record kinds to a Category through a swappable table."""

    def __init__(self, mapping: Mapping[str, Category]):
        self.mapping = {kind: Category(category) for kind, category in mapping.items()}

    @classmethod
    def from_scheme(cls, scheme: str = "unified", overrides: Optional[Mapping[str, str]] = None) -> "KindClassifier":
        if scheme not in KIND_SCHEMES:
            raise ValueError(f"Unknown kind scheme '{scheme}', expected one of {sorted(KIND_SCHEMES)}")
        mapping = dict(KIND_SCHEMES[scheme])
        for kind, category in (overrides or {}).items():
            mapping[kind] = Category(category)
        return cls(mapping)

    def classify(self, kind) -> Category:
        if not isinstance(kind, str):
            return Category.unrecognized
        return self.mapping.get(kind, Category.unrecognized)

    def kinds_for(self, category: Category):
        return sorted(kind for kind, mapped in self.mapping.items() if mapped == category)

    def __contains__(self, kind) -> bool:
        return kind in self.mapping


def get_classifier() -> KindClassifier:
    """Classifier configured from application settings."""
    from fintrack.core.config import settings
    return KindClassifier.from_scheme(settings.KIND_SCHEME, settings.KIND_OVERRIDES)
