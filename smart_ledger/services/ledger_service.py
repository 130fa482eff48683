"""Ledger commands and read views for one owner, wired to a LedgerRepository"""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from smart_ledger.domain import aggregation, installments
from smart_ledger.domain.billing_cycle import distance_to
from smart_ledger.domain.categories import CategoryRegistry
from smart_ledger.domain.exceptions import DanglingCardReferenceError, RecordNotFoundError
from smart_ledger.domain.feasibility import current_month_totals, evaluate_budget
from smart_ledger.domain.forecast import CashFlowForecast, weekly_reminders
from smart_ledger.domain.models import (
    BalanceSheet,
    BudgetItem,
    BudgetVerdict,
    CardCycleStatus,
    CreditCard,
    DashboardSummary,
    FixedAsset,
    ForecastPeriod,
    InitialPosition,
    InstallmentDebt,
    LedgerSnapshot,
    PaymentMethod,
    PaymentResult,
    RecurringExpense,
    Transaction,
    TransactionKind,
    WeeklyReminders,
)
from smart_ledger.domain.money import to_decimal
from smart_ledger.domain.options import EngineOptions
from smart_ledger.domain.ports import (
    BUDGET_ITEMS,
    CARDS,
    DEBTS,
    RECURRING_EXPENSES,
    TRANSACTIONS,
    LedgerRepository,
)

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class LedgerService:
    """
    Applies commands to an owner's ledger and recomputes derived views.

    Every view is recomputed from a freshly loaded snapshot; nothing is cached.
    Each command is one unit of work: it commits on success and rolls back
    on any error, so a failed command leaves no partial writes.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        options: Optional[EngineOptions] = None,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.repository = repository
        self.options = options or EngineOptions()
        self.id_factory = id_factory

    # Commands

    def record_transaction(
        self,
        owner_id: str,
        amount: Decimal,
        kind: TransactionKind,
        category: str,
        on: date,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        note: str = "",
        credit_card_id: Optional[str] = None,
    ) -> Transaction:
        """
        Raises:
            InvalidCategoryError: label not registered for this kind
            DanglingCardReferenceError: card payment without an existing card
        """
        snapshot = self.repository.load_snapshot(owner_id)
        label = CategoryRegistry.from_snapshot(snapshot).validate(kind, category)
        card_id = self._card_reference(snapshot, payment_method, credit_card_id)

        txn = Transaction(
            id=self.id_factory(),
            amount=to_decimal(amount),
            kind=kind,
            category=label,
            date=on,
            payment_method=payment_method,
            note=note,
            credit_card_id=card_id,
        )
        self._commit(lambda: self.repository.add_record(owner_id, txn))
        return txn

    def delete_transaction(self, owner_id: str, transaction_id: str) -> None:
        self._delete(owner_id, TRANSACTIONS, transaction_id)

    def add_card(self, owner_id: str, name: str, closing_day: int, payment_day: int, color_tag: str = "#4f46e5") -> CreditCard:
        card = CreditCard(
            id=self.id_factory(),
            name=name,
            closing_day=closing_day,
            payment_day=payment_day,
            color_tag=color_tag,
        )
        self._commit(lambda: self.repository.add_record(owner_id, card))
        return card

    def delete_card(self, owner_id: str, card_id: str) -> None:
        """Transactions charged to the card keep their now-dangling reference"""
        self._delete(owner_id, CARDS, card_id)

    def create_debt(
        self,
        owner_id: str,
        label: str,
        total_principal: Decimal,
        installment_count: int,
        installments_already_paid: int = 0,
        due_day: int = 15,
    ) -> InstallmentDebt:
        debt = installments.create_debt(
            label=label,
            total_principal=total_principal,
            installment_count=installment_count,
            installments_already_paid=installments_already_paid,
            due_day=due_day,
            debt_id=self.id_factory(),
        )
        self._commit(lambda: self.repository.add_record(owner_id, debt))
        return debt

    def confirm_debt_payment(self, owner_id: str, debt_id: str, today: Optional[date] = None) -> PaymentResult:
        """
        Pay this period's installment of a debt.

        The debt row is locked, re-validated, updated and the generated
        expense inserted before a single commit. Settled or already-paid
        debts come back unchanged with no transaction.

        Raises:
            RecordNotFoundError: unknown debt id
        """
        today = today or date.today()
        try:
            debt = self.repository.lock_debt(owner_id, debt_id)
            if debt is None:
                raise RecordNotFoundError(DEBTS, debt_id)

            result = installments.confirm_payment(
                debt,
                today,
                category=self.options.debt_payment_category,
                id_factory=self.id_factory,
            )
            if result.applied:
                self.repository.replace_debt(owner_id, result.debt)
                self.repository.add_record(owner_id, result.transaction)
            self.repository.commit()
        except Exception:
            self.repository.rollback()
            raise

        if not result.applied:
            logger.info(
                f"Debt payment skipped: {result.outcome.value}",
                extra={"owner_id": owner_id, "debt_id": debt_id},
            )
        return result

    def reset_debt_period(self, owner_id: str, debt_id: str) -> InstallmentDebt:
        """Mark a debt as awaiting this period's installment again"""
        try:
            debt = self.repository.lock_debt(owner_id, debt_id)
            if debt is None:
                raise RecordNotFoundError(DEBTS, debt_id)
            reset = installments.reset_period(debt)
            if reset is not debt:
                self.repository.replace_debt(owner_id, reset)
            self.repository.commit()
        except Exception:
            self.repository.rollback()
            raise
        return reset

    def reset_all_debt_periods(self, owner_id: str) -> Tuple[InstallmentDebt, ...]:
        """Period rollover for every debt; the host decides when a new period starts"""
        snapshot = self.repository.load_snapshot(owner_id)
        reset = installments.reset_all_periods(snapshot.debts)

        def write():
            for before, after in zip(snapshot.debts, reset):
                if after is not before:
                    self.repository.replace_debt(owner_id, after)

        self._commit(write)
        return reset

    def delete_debt(self, owner_id: str, debt_id: str) -> None:
        self._delete(owner_id, DEBTS, debt_id)

    def add_budget_item(
        self,
        owner_id: str,
        label: str,
        amount: Decimal,
        kind: TransactionKind,
        on: date,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        credit_card_id: Optional[str] = None,
    ) -> BudgetItem:
        snapshot = self.repository.load_snapshot(owner_id)
        card_id = self._card_reference(snapshot, payment_method, credit_card_id)
        item = BudgetItem(
            id=self.id_factory(),
            label=label,
            amount=to_decimal(amount),
            kind=kind,
            date=on,
            payment_method=payment_method,
            credit_card_id=card_id,
        )
        self._commit(lambda: self.repository.add_record(owner_id, item))
        return item

    def delete_budget_item(self, owner_id: str, item_id: str) -> None:
        self._delete(owner_id, BUDGET_ITEMS, item_id)

    def add_recurring_expense(
        self,
        owner_id: str,
        label: str,
        amount: Decimal,
        day_of_month: int,
        category: str = "Other",
        payment_method: PaymentMethod = PaymentMethod.CASH,
        credit_card_id: Optional[str] = None,
    ) -> RecurringExpense:
        snapshot = self.repository.load_snapshot(owner_id)
        label_category = CategoryRegistry.from_snapshot(snapshot).validate(TransactionKind.EXPENSE, category)
        card_id = self._card_reference(snapshot, payment_method, credit_card_id)
        rec = RecurringExpense(
            id=self.id_factory(),
            label=label,
            amount=to_decimal(amount),
            day_of_month=day_of_month,
            category=label_category,
            payment_method=payment_method,
            credit_card_id=card_id,
        )
        self._commit(lambda: self.repository.add_record(owner_id, rec))
        return rec

    def delete_recurring_expense(self, owner_id: str, recurring_id: str) -> None:
        self._delete(owner_id, RECURRING_EXPENSES, recurring_id)

    def set_initial_position(
        self,
        owner_id: str,
        starting_cash_balance: Decimal,
        starting_liabilities: Decimal,
        fixed_assets: Iterable[Tuple[str, Decimal]] = (),
    ) -> InitialPosition:
        """fixed_assets is an ordered collection of (name, value) pairs"""
        initial = InitialPosition(
            starting_cash_balance=to_decimal(starting_cash_balance),
            starting_liabilities=to_decimal(starting_liabilities),
            fixed_assets=tuple(
                FixedAsset(id=self.id_factory(), name=name, value=to_decimal(value)) for name, value in fixed_assets
            ),
        )
        self._commit(lambda: self.repository.save_initial_position(owner_id, initial))
        return initial

    def add_category(self, owner_id: str, kind: TransactionKind, label: str) -> CategoryRegistry:
        registry = self.categories(owner_id).with_label(kind, label)
        self._commit(lambda: self.repository.save_categories(owner_id, kind, registry.labels_for(kind)))
        return registry

    def remove_category(self, owner_id: str, kind: TransactionKind, label: str) -> CategoryRegistry:
        registry = self.categories(owner_id).without_label(kind, label)
        self._commit(lambda: self.repository.save_categories(owner_id, kind, registry.labels_for(kind)))
        return registry

    # Views

    def snapshot(self, owner_id: str) -> LedgerSnapshot:
        return self.repository.load_snapshot(owner_id)

    def categories(self, owner_id: str) -> CategoryRegistry:
        return CategoryRegistry.from_snapshot(self.repository.load_snapshot(owner_id))

    def balance_sheet(self, owner_id: str, today: Optional[date] = None) -> BalanceSheet:
        snapshot = self.repository.load_snapshot(owner_id)
        unbilled = self._unbilled(snapshot, today or date.today())
        return aggregation.balance_sheet(snapshot.transactions, snapshot.debts, snapshot.initial, unbilled=unbilled)

    def category_breakdown(self, owner_id: str) -> Dict[str, Decimal]:
        return aggregation.expense_by_category(self.repository.load_snapshot(owner_id).transactions)

    def dashboard(self, owner_id: str, today: Optional[date] = None) -> DashboardSummary:
        snapshot = self.repository.load_snapshot(owner_id)
        return aggregation.dashboard_summary(snapshot.transactions, today or date.today())

    def reminders(self, owner_id: str, today: Optional[date] = None) -> WeeklyReminders:
        today = today or date.today()
        snapshot = self.repository.load_snapshot(owner_id)
        return weekly_reminders(
            today,
            snapshot.cards,
            snapshot.transactions,
            snapshot.recurring_expenses,
            window_days=self.options.reminder_window_days,
            calendar_mode=self.options.calendar_mode,
            balances=self._card_balances(snapshot, today),
        )

    def forecast(self, owner_id: str, today: Optional[date] = None) -> List[ForecastPeriod]:
        today = today or date.today()
        snapshot = self.repository.load_snapshot(owner_id)
        return list(
            CashFlowForecast(
                today,
                snapshot.budget_items,
                snapshot.debts,
                snapshot.recurring_expenses,
                snapshot.cards,
                snapshot.transactions,
                periods=self.options.forecast_periods,
                period_days=self.options.forecast_period_days,
                balances=self._card_balances(snapshot, today),
            )
        )

    def feasibility(self, owner_id: str, today: Optional[date] = None) -> BudgetVerdict:
        today = today or date.today()
        snapshot = self.repository.load_snapshot(owner_id)
        return evaluate_budget(
            current_month_totals(snapshot.transactions, today),
            snapshot.budget_items,
            snapshot.recurring_expenses,
            snapshot.debts,
            self._unbilled(snapshot, today),
            safety_margin_rate=self.options.safety_margin_rate,
        )

    def card_statuses(self, owner_id: str, today: Optional[date] = None) -> List[CardCycleStatus]:
        today = today or date.today()
        snapshot = self.repository.load_snapshot(owner_id)
        balances = self._card_balances(snapshot, today)
        return [
            CardCycleStatus(
                card_id=card.id,
                name=card.name,
                days_to_closing=distance_to(today, card.closing_day, self.options.calendar_mode),
                days_to_payment=distance_to(today, card.payment_day, self.options.calendar_mode),
                balance=balances[card.id],
            )
            for card in snapshot.cards
        ]

    def debt_schedule(self, owner_id: str, debt_id: str, today: Optional[date] = None) -> List[Tuple[date, Decimal]]:
        snapshot = self.repository.load_snapshot(owner_id)
        debt = next((d for d in snapshot.debts if d.id == debt_id), None)
        if debt is None:
            raise RecordNotFoundError(DEBTS, debt_id)
        return installments.installment_schedule(debt, today or date.today())

    # Helpers

    def _card_balances(self, snapshot: LedgerSnapshot, today: date) -> Dict[str, Decimal]:
        return aggregation.card_balances(
            snapshot.transactions, snapshot.cards, today=today, scope=self.options.card_balance_scope
        )

    def _unbilled(self, snapshot: LedgerSnapshot, today: date) -> Decimal:
        return aggregation.scoped_unbilled_total(
            snapshot.transactions, snapshot.cards, today, scope=self.options.card_balance_scope
        )

    @staticmethod
    def _card_reference(
        snapshot: LedgerSnapshot, payment_method: PaymentMethod, credit_card_id: Optional[str]
    ) -> Optional[str]:
        if payment_method != PaymentMethod.CREDIT_CARD:
            return None
        if not credit_card_id or all(card.id != credit_card_id for card in snapshot.cards):
            raise DanglingCardReferenceError(f"Credit card '{credit_card_id}' does not exist")
        return credit_card_id

    def _delete(self, owner_id: str, collection: str, record_id: str) -> None:
        def write():
            if not self.repository.delete_record(owner_id, collection, record_id):
                raise RecordNotFoundError(collection, record_id)

        self._commit(write)

    def _commit(self, write: Callable[[], None]) -> None:
        try:
            write()
            self.repository.commit()
        except Exception:
            self.repository.rollback()
            raise
