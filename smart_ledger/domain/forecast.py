"""Forecast engine - due-soon reminders and the rolling multi-week cash-flow projection"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Sequence

from smart_ledger.domain.aggregation import card_balances
from smart_ledger.domain.billing_cycle import due_soon
from smart_ledger.domain.models import (
    BudgetItem,
    CreditCard,
    ForecastLineItem,
    ForecastLineKind,
    ForecastPeriod,
    InstallmentDebt,
    PaymentMethod,
    RecurringExpense,
    Reminder,
    ReminderKind,
    Transaction,
    TransactionKind,
    WeeklyReminders,
)
from smart_ledger.domain.money import ZERO, quiet_decimal, total
from smart_ledger.domain.options import FIXED_30
from smart_ledger.utils.date_utils import generate_date_range


@quiet_decimal
def weekly_reminders(
    today: date,
    cards: Sequence[CreditCard],
    transactions: Sequence[Transaction],
    recurring_expenses: Sequence[RecurringExpense],
    window_days: int = 7,
    calendar_mode: str = FIXED_30,
    balances: Optional[Dict[str, Decimal]] = None,
) -> WeeklyReminders:
    """
    Card bills and recurring expenses falling due within the reminder window.

    A card is only listed when its balance is positive. Items are sorted by
    due day of month.
    """
    if balances is None:
        balances = card_balances(transactions, cards)

    reminders: List[Reminder] = []
    for card in cards:
        amount = balances.get(card.id, ZERO)
        if amount > ZERO and due_soon(today, card.payment_day, window_days, calendar_mode):
            reminders.append(
                Reminder(
                    source_id=card.id,
                    label=card.name,
                    amount=amount,
                    day=card.payment_day,
                    kind=ReminderKind.CARD,
                )
            )

    for rec in recurring_expenses:
        if due_soon(today, rec.day_of_month, window_days, calendar_mode):
            reminders.append(
                Reminder(
                    source_id=rec.id,
                    label=rec.label,
                    amount=rec.amount,
                    day=rec.day_of_month,
                    kind=ReminderKind.RECURRING,
                )
            )

    reminders.sort(key=lambda r: r.day)
    return WeeklyReminders(items=tuple(reminders), total=total(r.amount for r in reminders))


class CashFlowForecast:
    """
    Rolling projection of upcoming outflows in fixed-length periods.

    Iterating recomputes every period from the inputs, so the same instance
    can be iterated any number of times.
    """

    def __init__(
        self,
        today: date,
        budget_items: Sequence[BudgetItem],
        debts: Sequence[InstallmentDebt],
        recurring_expenses: Sequence[RecurringExpense],
        cards: Sequence[CreditCard],
        transactions: Sequence[Transaction],
        periods: int = 8,
        period_days: int = 7,
        balances: Optional[Dict[str, Decimal]] = None,
    ):
        self.today = today
        self.budget_items = budget_items
        self.debts = debts
        self.recurring_expenses = recurring_expenses
        self.cards = cards
        self.transactions = transactions
        self.periods = periods
        self.period_days = period_days
        self.balances = balances

    def __iter__(self) -> Iterator[ForecastPeriod]:
        balances = self.balances
        if balances is None:
            balances = card_balances(self.transactions, self.cards)
        for index in range(self.periods):
            yield self.period(index, balances)

    def __len__(self) -> int:
        return self.periods

    @quiet_decimal
    def period(self, index: int, balances: Dict[str, Decimal]) -> ForecastPeriod:
        start = self.today + timedelta(days=index * self.period_days)
        end = start + timedelta(days=self.period_days - 1)
        days = generate_date_range(start, end)
        cards_by_id = {card.id: card for card in self.cards}
        items: List[ForecastLineItem] = []

        # 1. Planned one-off cash expenses, matched by exact date
        for item in self.budget_items:
            if item.kind != TransactionKind.EXPENSE or item.payment_method != PaymentMethod.CASH:
                continue
            if start <= item.date <= end:
                items.append(ForecastLineItem(item.label, item.amount, ForecastLineKind.PLANNED, item.date))

        # 2. Installments, once per matching day (a window can hit the same due day twice)
        for debt in self.debts:
            for day in days:
                if day.day == debt.due_day:
                    items.append(
                        ForecastLineItem(f"{debt.label} (installment)", debt.monthly_amount, ForecastLineKind.DEBT, day)
                    )

        # 3. Recurring expenses: cash on their own day, card-paid on the card's payment day
        for rec in self.recurring_expenses:
            if rec.payment_method == PaymentMethod.CASH:
                for day in days:
                    if day.day == rec.day_of_month:
                        items.append(
                            ForecastLineItem(f"{rec.label} (recurring)", rec.amount, ForecastLineKind.RECURRING, day)
                        )
                continue
            card = cards_by_id.get(rec.credit_card_id)
            if card is None:
                continue
            for day in days:
                if day.day == card.payment_day:
                    items.append(
                        ForecastLineItem(f"{rec.label} (card)", rec.amount, ForecastLineKind.CREDIT_CARD, day)
                    )

        # 4. Outstanding card balances on each card's payment day
        for card in self.cards:
            amount = balances.get(card.id, ZERO)
            if not amount > ZERO:
                continue
            for day in days:
                if day.day == card.payment_day:
                    items.append(
                        ForecastLineItem(f"{card.name} (card bill)", amount, ForecastLineKind.CREDIT_CARD, day)
                    )

        return ForecastPeriod(
            index=index,
            start=start,
            end=end,
            items=tuple(items),
            total=total(line.amount for line in items),
        )
