"""Budget feasibility - projected month income vs obligations, less a safety reserve"""

from datetime import date
from decimal import Decimal
from typing import Sequence

from smart_ledger.domain.aggregation import period_totals
from smart_ledger.domain.models import (
    BudgetItem,
    BudgetVerdict,
    InstallmentDebt,
    PeriodTotals,
    RecurringExpense,
    Transaction,
    TransactionKind,
)
from smart_ledger.domain.money import ZERO, quiet_decimal, to_decimal, total
from smart_ledger.utils.date_utils import month_bounds

DEFAULT_SAFETY_MARGIN_RATE = Decimal("0.10")


def current_month_totals(transactions: Sequence[Transaction], today: date) -> PeriodTotals:
    start, end = month_bounds(today)
    return period_totals(transactions, start, end)


def pending_debts(debts: Sequence[InstallmentDebt]) -> list[InstallmentDebt]:
    """Debts still expecting this period's installment"""
    return [d for d in debts if not d.paid_this_period]


@quiet_decimal
def evaluate_budget(
    month_totals: PeriodTotals,
    budget_items: Sequence[BudgetItem],
    recurring_expenses: Sequence[RecurringExpense],
    debts: Sequence[InstallmentDebt],
    unbilled_card_total: Decimal,
    safety_margin_rate: Decimal = DEFAULT_SAFETY_MARGIN_RATE,
) -> BudgetVerdict:
    """
    Binary can-I-afford-it verdict for the current month.

    income   = actual month income + planned income
    expense  = actual month expense + planned expense + recurring
               + unpaid installments + unbilled card spend
    margin   = income * safety_margin_rate
    balanced = income - expense - margin >= 0
    """
    planned_income = total(i.amount for i in budget_items if i.kind == TransactionKind.INCOME)
    planned_expense = total(i.amount for i in budget_items if i.kind == TransactionKind.EXPENSE)
    recurring = total(r.amount for r in recurring_expenses)
    installments = total(d.monthly_amount for d in pending_debts(debts))

    projected_income = month_totals.income + planned_income
    projected_expense = month_totals.expense + planned_expense + recurring + installments + unbilled_card_total
    margin = projected_income * to_decimal(safety_margin_rate)
    remaining = projected_income - projected_expense - margin

    return BudgetVerdict(
        total_projected_income=projected_income,
        total_projected_expense=projected_expense,
        safety_margin=margin,
        remaining=remaining,
        balanced=remaining >= ZERO,
    )
