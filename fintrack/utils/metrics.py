# fintrack/utils/metrics.py
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Optional, Tuple

from fintrack.utils.aggregation import field, numeric, totals_by_category
from fintrack.utils.classifier import Category, KindClassifier

FIXED_TERMS = ("fixed_salary", "fixed_debt", "fixed_savings")


@dataclass(frozen=True)
class FixedBaseline:
    fixed_salary: float = 0.0
    fixed_debt: float = 0.0
    fixed_savings: float = 0.0

    @classmethod
    def from_settings(cls, settings_doc) -> "FixedBaseline":
        """Build from a FixedSettings row or dict; anything missing is 0."""
        if settings_doc is None:
            return cls()
        return cls(**{name: numeric(field(settings_doc, name)) for name in FIXED_TERMS})


@dataclass(frozen=True)
class MetricsFormula:
    """
    Which terms add up to total income and total expense.
    A term is either a Category value or one of the fixed baseline fields.
    """
    name: str
    income_terms: Tuple[str, ...]
    expense_terms: Tuple[str, ...]

    def __post_init__(self):
        valid = set(FIXED_TERMS) | {c.value for c in Category}
        unknown = [t for t in self.income_terms + self.expense_terms if t not in valid]
        if unknown:
            raise ValueError(f"Unknown formula terms: {unknown}")


FORMULAS: Dict[str, MetricsFormula] = {
    "ledger": MetricsFormula(
        "ledger",
        income_terms=("income",),
        expense_terms=("expense",),
    ),
    "fixed": MetricsFormula(
        "fixed",
        income_terms=("fixed_salary", "bonus"),
        expense_terms=("fixed_debt", "fixed_savings", "expense"),
    ),
    "combined": MetricsFormula(
        "combined",
        income_terms=("fixed_salary", "income", "bonus"),
        expense_terms=("fixed_debt", "fixed_savings", "expense"),
    ),
}


def formula_by_name(name: str) -> MetricsFormula:
    try:
        return FORMULAS[name]
    except KeyError:
        raise ValueError(f"Unknown metrics formula '{name}', expected one of {sorted(FORMULAS)}")


def get_formula() -> MetricsFormula:
    """Formula selected by the METRICS_FORMULA setting."""
    from fintrack.core.config import settings
    return formula_by_name(settings.METRICS_FORMULA)


@dataclass(frozen=True)
class SummaryMetrics:
    total_income: float = 0.0
    total_expense: float = 0.0
    net_flow: float = 0.0
    savings: float = 0.0
    debt: float = 0.0
    bonus: float = 0.0
    # Unclamped; use display_remaining_balance() for charts and cards
    remaining_balance: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def _term_value(term: str, totals: Dict[Category, float], baseline: FixedBaseline) -> float:
    if term in FIXED_TERMS:
        return getattr(baseline, term)
    return totals[Category(term)]


def derive_metrics(
    records: Iterable = (),
    settings=None,
    formula: Optional[MetricsFormula] = None,
    classifier: Optional[KindClassifier] = None,
) -> SummaryMetrics:
    """Summary scalars for a record set plus the owner's fixed settings."""
    formula = formula or FORMULAS["combined"]
    classifier = classifier or KindClassifier.from_scheme("unified")
    baseline = settings if isinstance(settings, FixedBaseline) else FixedBaseline.from_settings(settings)
    totals = totals_by_category(records, classifier)

    total_income = sum(_term_value(t, totals, baseline) for t in formula.income_terms)
    total_expense = sum(_term_value(t, totals, baseline) for t in formula.expense_terms)
    net_flow = total_income - total_expense
    savings = totals[Category.savings]
    debt = totals[Category.debt]

    return SummaryMetrics(
        total_income=total_income,
        total_expense=total_expense,
        net_flow=net_flow,
        savings=savings,
        debt=debt,
        bonus=totals[Category.bonus],
        remaining_balance=net_flow - savings - debt,
    )


def display_remaining_balance(metrics: SummaryMetrics) -> float:
    return max(0.0, metrics.remaining_balance)


def repayment_percentage(initial_debt, current_debt) -> float:
    initial = numeric(initial_debt)
    if initial <= 0:
        return 0.0
    return (initial - numeric(current_debt)) / initial * 100


def apply_repayment(current_debt, amount) -> float:
    """Debt left after a repayment, clamped at zero."""
    return max(0.0, numeric(current_debt) - numeric(amount))
