"""Aggregation engine - balance sheet and category views over the transaction history"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, Optional, Sequence

from smart_ledger.domain.billing_cycle import current_cycle
from smart_ledger.domain.models import (
    BalanceSheet,
    CreditCard,
    DailyTotals,
    DashboardSummary,
    InitialPosition,
    InstallmentDebt,
    MonthlyTotals,
    PaymentMethod,
    PeriodTotals,
    Transaction,
    TransactionKind,
)
from smart_ledger.domain.money import ZERO, quiet_decimal, total
from smart_ledger.domain.options import ALL_TIME, CYCLE
from smart_ledger.utils.date_utils import generate_date_range, month_key, shift_months


def _cash_effect(txn: Transaction) -> Decimal:
    if txn.kind == TransactionKind.INCOME:
        return txn.amount
    if txn.payment_method == PaymentMethod.CASH:
        return -txn.amount
    # Card expenses leave cash untouched until the card is paid
    return ZERO


@quiet_decimal
def cash_position(transactions: Iterable[Transaction], initial: InitialPosition) -> Decimal:
    """Starting cash plus income, minus cash-paid expenses"""
    return initial.starting_cash_balance + total(_cash_effect(t) for t in transactions)


@quiet_decimal
def unbilled_credit_card_total(transactions: Iterable[Transaction]) -> Decimal:
    """
    Running total of every credit-card expense ever recorded.

    Not partitioned by billing cycle; see card_balances(scope="cycle") for
    the cycle-scoped figure.
    """
    return total(t.amount for t in transactions if t.is_card_expense)


@quiet_decimal
def fixed_assets_total(initial: InitialPosition) -> Decimal:
    return total(asset.value for asset in initial.fixed_assets)


@quiet_decimal
def total_debt_remaining(debts: Iterable[InstallmentDebt]) -> Decimal:
    return total(d.remaining_amount for d in debts)


@quiet_decimal
def net_worth(
    transactions: Sequence[Transaction],
    debts: Sequence[InstallmentDebt],
    initial: InitialPosition,
    unbilled: Optional[Decimal] = None,
) -> Decimal:
    """
    (cash + fixed assets) - (opening liabilities + unbilled card spend + remaining debt)

    ``unbilled`` overrides the all-time card total, e.g. with a cycle-scoped figure.
    """
    if unbilled is None:
        unbilled = unbilled_credit_card_total(transactions)
    assets = cash_position(transactions, initial) + fixed_assets_total(initial)
    liabilities = initial.starting_liabilities + unbilled + total_debt_remaining(debts)
    return assets - liabilities


@quiet_decimal
def balance_sheet(
    transactions: Sequence[Transaction],
    debts: Sequence[InstallmentDebt],
    initial: InitialPosition,
    unbilled: Optional[Decimal] = None,
) -> BalanceSheet:
    if unbilled is None:
        unbilled = unbilled_credit_card_total(transactions)
    return BalanceSheet(
        cash_position=cash_position(transactions, initial),
        net_worth=net_worth(transactions, debts, initial, unbilled=unbilled),
        unbilled_credit_card_total=unbilled,
        total_debt_remaining=total_debt_remaining(debts),
        fixed_assets_total=fixed_assets_total(initial),
    )


@quiet_decimal
def expense_by_category(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """Sum of expense amounts grouped by category label"""
    breakdown: Dict[str, Decimal] = {}
    for txn in transactions:
        if txn.kind != TransactionKind.EXPENSE:
            continue
        breakdown[txn.category] = breakdown.get(txn.category, ZERO) + txn.amount
    return breakdown


@quiet_decimal
def period_totals(transactions: Iterable[Transaction], start: date, end: date) -> PeriodTotals:
    """Income and expense totals for transactions dated within [start, end]"""
    income = ZERO
    expense = ZERO
    for txn in transactions:
        if not (start <= txn.date <= end):
            continue
        if txn.kind == TransactionKind.INCOME:
            income += txn.amount
        else:
            expense += txn.amount
    return PeriodTotals(income=income, expense=expense)


@quiet_decimal
def card_balances(
    transactions: Sequence[Transaction],
    cards: Iterable[CreditCard],
    today: Optional[date] = None,
    scope: str = ALL_TIME,
) -> Dict[str, Decimal]:
    """
    Per-card sum of transactions charged to that card.

    Transactions pointing at a card that no longer exists are skipped.
    With scope="cycle" only the open billing cycle (previous closing day
    exclusive, next closing day inclusive) is summed.
    """
    balances: Dict[str, Decimal] = {}
    for card in cards:
        charged = [
            t
            for t in transactions
            if t.payment_method == PaymentMethod.CREDIT_CARD and t.credit_card_id == card.id
        ]
        if scope == CYCLE and today is not None:
            start, end = current_cycle(today, card.closing_day)
            charged = [t for t in charged if start <= t.date <= end]
        balances[card.id] = total(t.amount for t in charged)
    return balances


@quiet_decimal
def scoped_unbilled_total(
    transactions: Sequence[Transaction],
    cards: Sequence[CreditCard],
    today: date,
    scope: str = ALL_TIME,
) -> Decimal:
    """Unbilled card spend in the configured scope"""
    if scope == CYCLE:
        expenses = [t for t in transactions if t.is_card_expense]
        return total(card_balances(expenses, cards, today=today, scope=CYCLE).values())
    return unbilled_credit_card_total(transactions)


@quiet_decimal
def daily_series(transactions: Sequence[Transaction], today: date, days: int = 7) -> tuple:
    """Income/expense per day for the last ``days`` days, oldest first"""
    start = today - timedelta(days=days - 1)
    series = []
    for day in generate_date_range(start, today):
        totals = period_totals(transactions, day, day)
        series.append(DailyTotals(day=day, income=totals.income, expense=totals.expense))
    return tuple(series)


@quiet_decimal
def monthly_history(transactions: Sequence[Transaction], today: date, months: int = 6) -> tuple:
    """Income/expense per calendar month for the last ``months`` months, oldest first"""
    history = []
    for offset in range(months - 1, -1, -1):
        key = month_key(shift_months(today, -offset))
        income = ZERO
        expense = ZERO
        for txn in transactions:
            if month_key(txn.date) != key:
                continue
            if txn.kind == TransactionKind.INCOME:
                income += txn.amount
            else:
                expense += txn.amount
        history.append(MonthlyTotals(month=key, income=income, expense=expense))
    return tuple(history)


@quiet_decimal
def dashboard_summary(transactions: Sequence[Transaction], today: date) -> DashboardSummary:
    income = total(t.amount for t in transactions if t.kind == TransactionKind.INCOME)
    expense = total(t.amount for t in transactions if t.kind == TransactionKind.EXPENSE)
    return DashboardSummary(
        total_income=income,
        total_expense=expense,
        daily=daily_series(transactions, today),
        monthly=monthly_history(transactions, today),
    )
