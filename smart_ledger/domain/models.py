"""Domain models - immutable dataclasses representing ledger records and derived views"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import NewType, Optional, Tuple

# Free-form user label, validated against the CategoryRegistry at entry time
Category = NewType("Category", str)


class TransactionKind(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"


@dataclass(frozen=True)
class Transaction:
    """Recorded income or expense. Never updated in place, only deleted."""

    id: str
    amount: Decimal
    kind: TransactionKind
    category: Category
    date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    note: str = ""
    credit_card_id: Optional[str] = None

    @property
    def is_card_expense(self) -> bool:
        return self.kind == TransactionKind.EXPENSE and self.payment_method == PaymentMethod.CREDIT_CARD


@dataclass(frozen=True)
class CreditCard:
    """Credit card with its monthly closing and payment days"""

    id: str
    name: str
    closing_day: int
    payment_day: int
    color_tag: str = "#4f46e5"


@dataclass(frozen=True)
class InstallmentDebt:
    """Fixed-principal obligation repaid in equal monthly installments"""

    id: str
    label: str
    total_principal: Decimal
    remaining_amount: Decimal
    installment_count: int
    installments_paid: int
    monthly_amount: Decimal
    due_day: int
    paid_this_period: bool = False

    @property
    def settled(self) -> bool:
        return self.installments_paid >= self.installment_count

    @property
    def progress_percent(self) -> float:
        if self.installment_count <= 0:
            return 0.0
        return round(self.installments_paid / self.installment_count * 100, 1)


@dataclass(frozen=True)
class BudgetItem:
    """One-off planned income or expense. Never turned into a Transaction."""

    id: str
    label: str
    amount: Decimal
    kind: TransactionKind
    date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    credit_card_id: Optional[str] = None


@dataclass(frozen=True)
class RecurringExpense:
    """Standing monthly obligation, used only as a forecasting input"""

    id: str
    label: str
    amount: Decimal
    day_of_month: int
    category: Category
    payment_method: PaymentMethod = PaymentMethod.CASH
    credit_card_id: Optional[str] = None


@dataclass(frozen=True)
class FixedAsset:
    id: str
    name: str
    value: Decimal


@dataclass(frozen=True)
class InitialPosition:
    """Opening balance-sheet snapshot"""

    starting_cash_balance: Decimal = Decimal("0")
    starting_liabilities: Decimal = Decimal("0")
    fixed_assets: Tuple[FixedAsset, ...] = ()


# Derived views


@dataclass(frozen=True)
class PeriodTotals:
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Point-in-time financial position"""

    cash_position: Decimal
    net_worth: Decimal
    unbilled_credit_card_total: Decimal
    total_debt_remaining: Decimal
    fixed_assets_total: Decimal


class ReminderKind(str, Enum):
    CARD = "card"
    RECURRING = "recurring"


@dataclass(frozen=True)
class Reminder:
    source_id: str
    label: str
    amount: Decimal
    day: int
    kind: ReminderKind


@dataclass(frozen=True)
class WeeklyReminders:
    items: Tuple[Reminder, ...]
    total: Decimal


class ForecastLineKind(str, Enum):
    PLANNED = "planned"
    DEBT = "debt"
    RECURRING = "recurring"
    CREDIT_CARD = "credit_card"


@dataclass(frozen=True)
class ForecastLineItem:
    label: str
    amount: Decimal
    kind: ForecastLineKind
    due_date: date


@dataclass(frozen=True)
class ForecastPeriod:
    """One window of the rolling cash-flow projection"""

    index: int
    start: date
    end: date
    items: Tuple[ForecastLineItem, ...]
    total: Decimal


@dataclass(frozen=True)
class BudgetVerdict:
    """Can-I-afford-this verdict for the current month"""

    total_projected_income: Decimal
    total_projected_expense: Decimal
    safety_margin: Decimal
    remaining: Decimal
    balanced: bool


class PaymentOutcome(str, Enum):
    APPLIED = "applied"
    ALREADY_PAID = "already_paid"
    SETTLED = "settled"


@dataclass(frozen=True)
class PaymentResult:
    """Result of confirming an installment payment"""

    debt: InstallmentDebt
    transaction: Optional[Transaction]
    outcome: PaymentOutcome

    @property
    def applied(self) -> bool:
        return self.outcome == PaymentOutcome.APPLIED


@dataclass(frozen=True)
class CardCycleStatus:
    card_id: str
    name: str
    days_to_closing: int
    days_to_payment: int
    balance: Decimal


@dataclass(frozen=True)
class DailyTotals:
    day: date
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class MonthlyTotals:
    month: str  # YYYY-MM
    income: Decimal
    expense: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class DashboardSummary:
    total_income: Decimal
    total_expense: Decimal
    daily: Tuple[DailyTotals, ...]
    monthly: Tuple[MonthlyTotals, ...]

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class LedgerSnapshot:
    """Every collection one owner holds, as loaded from a repository"""

    transactions: Tuple[Transaction, ...] = ()
    cards: Tuple[CreditCard, ...] = ()
    debts: Tuple[InstallmentDebt, ...] = ()
    budget_items: Tuple[BudgetItem, ...] = ()
    recurring_expenses: Tuple[RecurringExpense, ...] = ()
    initial: InitialPosition = field(default_factory=InitialPosition)
    income_categories: Tuple[str, ...] = ()
    expense_categories: Tuple[str, ...] = ()
