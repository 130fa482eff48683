"""Unit tests for reminders and the rolling cash-flow forecast"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from smart_ledger.domain.forecast import CashFlowForecast, weekly_reminders
from smart_ledger.domain.installments import confirm_payment, create_debt, reset_period
from smart_ledger.domain.models import (
    BudgetItem,
    ForecastLineKind,
    InstallmentDebt,
    PaymentMethod,
    RecurringExpense,
    ReminderKind,
    TransactionKind,
)
from smart_ledger.domain.options import CALENDAR


def _recurring(rec_id, amount, day, card_id=None):
    return RecurringExpense(
        id=rec_id,
        label=rec_id.title(),
        amount=Decimal(amount),
        day_of_month=day,
        category="Utilities",
        payment_method=PaymentMethod.CREDIT_CARD if card_id else PaymentMethod.CASH,
        credit_card_id=card_id,
    )


def _debt(debt_id="loan", due_day=12, paid=0, count=10):
    return InstallmentDebt(
        id=debt_id,
        label="Loan",
        total_principal=Decimal("1000"),
        remaining_amount=Decimal("1000") - Decimal("100") * paid,
        installment_count=count,
        installments_paid=paid,
        monthly_amount=Decimal("100"),
        due_day=due_day,
    )


def test_reminders_sorted_by_day_with_total(visa, sample_transactions):
    today = date(2024, 3, 29)
    recurring = [_recurring("internet", "60", 2), _recurring("gym", "40", 30), _recurring("rent", "900", 15)]

    result = weekly_reminders(today, [visa], sample_transactions, recurring)

    assert [r.day for r in result.items] == [2, 5, 30]
    assert [r.kind for r in result.items] == [ReminderKind.RECURRING, ReminderKind.CARD, ReminderKind.RECURRING]
    assert result.items[1].amount == Decimal("500")
    assert result.total == Decimal("600")


def test_reminders_skip_cards_without_balance(visa):
    result = weekly_reminders(date(2024, 3, 1), [visa], [], [])

    assert result.items == ()
    assert result.total == Decimal("0")


def test_reminders_rollover_case():
    today = date(2024, 3, 26)
    recurring = [_recurring("early", "10", 2), _recurring("mid", "10", 15)]

    result = weekly_reminders(today, [], [], recurring)

    assert [r.source_id for r in result.items] == ["early"]


def test_reminders_use_supplied_balances(visa):
    result = weekly_reminders(date(2024, 3, 1), [visa], [], [], balances={visa.id: Decimal("75")})

    assert len(result.items) == 1
    assert result.items[0].amount == Decimal("75")


def test_reminders_calendar_mode():
    today = date(2024, 2, 26)
    recurring = [_recurring("fee", "5", 4), _recurring("late", "5", 5)]

    fixed = weekly_reminders(today, [], [], recurring)
    real = weekly_reminders(today, [], [], recurring, calendar_mode=CALENDAR)

    # Fixed 30-day window from the 26th only reaches day 2
    assert fixed.items == ()
    assert [r.source_id for r in real.items] == ["fee"]
    wider = weekly_reminders(today, [], [], recurring, window_days=8, calendar_mode=CALENDAR)
    assert [r.source_id for r in wider.items] == ["fee", "late"]


def test_forecast_has_eight_weekly_periods():
    today = date(2024, 3, 1)
    forecast = list(CashFlowForecast(today, [], [], [], [], []))

    assert len(forecast) == 8
    assert forecast[0].start == today
    assert forecast[0].end == today + timedelta(days=6)
    assert forecast[7].start == today + timedelta(days=49)
    assert all(p.total == Decimal("0") for p in forecast)


def test_forecast_planned_cash_expenses_by_date():
    today = date(2024, 3, 1)
    items = [
        BudgetItem(id="trip", label="Trip", amount=Decimal("300"), kind=TransactionKind.EXPENSE, date=date(2024, 3, 9)),
        BudgetItem(id="bonus", label="Bonus", amount=Decimal("999"), kind=TransactionKind.INCOME, date=date(2024, 3, 9)),
        BudgetItem(
            id="tv",
            label="TV",
            amount=Decimal("800"),
            kind=TransactionKind.EXPENSE,
            date=date(2024, 3, 9),
            payment_method=PaymentMethod.CREDIT_CARD,
            credit_card_id="card_visa",
        ),
    ]

    periods = list(CashFlowForecast(today, items, [], [], [], []))

    assert periods[0].total == Decimal("0")
    assert [line.label for line in periods[1].items] == ["Trip"]
    assert periods[1].items[0].kind == ForecastLineKind.PLANNED
    assert periods[1].total == Decimal("300")


def test_forecast_debt_matched_by_due_day():
    periods = list(CashFlowForecast(date(2024, 3, 10), [], [_debt(due_day=12)], [], [], []))

    assert periods[0].total == Decimal("100")
    assert periods[0].items[0].label == "Loan (installment)"
    assert periods[0].items[0].due_date == date(2024, 3, 12)
    # Next due day falls in period 4 (Apr 7 - Apr 13)
    assert periods[4].total == Decimal("100")


def test_forecast_window_spanning_month_boundary_counts_due_day_twice():
    # 35-day window from Mar 10 contains Mar 12 and Apr 12
    forecast = CashFlowForecast(date(2024, 3, 10), [], [_debt(due_day=12)], [], [], [], periods=1, period_days=35)
    period = next(iter(forecast))

    assert [line.due_date for line in period.items] == [date(2024, 3, 12), date(2024, 4, 12)]
    assert period.total == Decimal("200")


def test_forecast_keeps_settled_debts_on_their_due_day():
    debt = create_debt("Phone", Decimal("1200"), 12, installments_already_paid=11, due_day=5)
    debt = reset_period(confirm_payment(debt, date(2024, 3, 5)).debt)
    assert debt.settled is True

    [period] = CashFlowForecast(date(2024, 4, 1), [], [debt], [], [], [], periods=1)

    assert [(line.due_date, line.amount) for line in period.items] == [(date(2024, 4, 5), Decimal("100"))]
    assert period.total == Decimal("100")


def test_forecast_card_recurring_uses_card_payment_day(visa):
    recurring = [_recurring("streaming", "15", 20, card_id=visa.id), _recurring("water", "30", 20)]
    periods = list(CashFlowForecast(date(2024, 3, 1), [], [], recurring, [visa], []))

    lines = [line for p in periods for line in p.items]
    card_lines = [line for line in lines if line.kind == ForecastLineKind.CREDIT_CARD]
    cash_lines = [line for line in lines if line.kind == ForecastLineKind.RECURRING]

    assert {line.due_date.day for line in card_lines} == {visa.payment_day}
    assert card_lines[0].label == "Streaming (card)"
    assert {line.due_date.day for line in cash_lines} == {20}


def test_forecast_card_recurring_with_missing_card_is_skipped():
    recurring = [_recurring("streaming", "15", 20, card_id="gone")]
    periods = list(CashFlowForecast(date(2024, 3, 1), [], [], recurring, [], []))

    assert all(p.items == () for p in periods)


def test_forecast_card_bill_on_payment_day(visa, sample_transactions):
    periods = list(CashFlowForecast(date(2024, 3, 1), [], [], [], [visa], sample_transactions))

    bills = [line for p in periods for line in p.items]
    assert [line.due_date for line in bills] == [date(2024, 3, 5), date(2024, 4, 5)]
    assert all(line.label == "Visa (card bill)" and line.amount == Decimal("500") for line in bills)


def test_forecast_is_restartable(visa, sample_transactions):
    forecast = CashFlowForecast(
        date(2024, 3, 1), [], [_debt()], [_recurring("rent", "900", 1)], [visa], sample_transactions
    )

    assert len(forecast) == 8
    assert list(forecast) == list(forecast)


@pytest.mark.parametrize("period_days", [1, 7, 14])
def test_forecast_periods_are_contiguous(period_days):
    periods = list(CashFlowForecast(date(2024, 1, 30), [], [], [], [], [], period_days=period_days))

    for before, after in zip(periods, periods[1:]):
        assert after.start == before.end + timedelta(days=1)
