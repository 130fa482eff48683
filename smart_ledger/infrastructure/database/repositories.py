"""Data access layer for ledger records"""

from decimal import Decimal
from typing import Dict, Optional, Tuple, Type

from sqlalchemy.orm import Session

from smart_ledger.domain.models import (
    BudgetItem,
    Category,
    CreditCard,
    FixedAsset,
    InitialPosition,
    InstallmentDebt,
    LedgerSnapshot,
    PaymentMethod,
    RecurringExpense,
    Transaction,
    TransactionKind,
)
from smart_ledger.domain.ports import (
    BUDGET_ITEMS,
    CARDS,
    DEBTS,
    RECURRING_EXPENSES,
    TRANSACTIONS,
    LedgerRecord,
)
from smart_ledger.infrastructure.database.models import (
    Base,
    BudgetItemRow,
    CategoryLabelRow,
    CreditCardRow,
    FixedAssetRow,
    InitialPositionRow,
    InstallmentDebtRow,
    RecurringExpenseRow,
    TransactionRow,
)

ROW_TYPES: Dict[str, Type[Base]] = {
    TRANSACTIONS: TransactionRow,
    CARDS: CreditCardRow,
    DEBTS: InstallmentDebtRow,
    BUDGET_ITEMS: BudgetItemRow,
    RECURRING_EXPENSES: RecurringExpenseRow,
}


def _money(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_transaction(row: TransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        amount=_money(row.amount),
        kind=TransactionKind(row.kind),
        category=Category(row.category),
        date=row.date,
        payment_method=PaymentMethod(row.payment_method),
        note=row.note or "",
        credit_card_id=row.credit_card_id,
    )


def _to_card(row: CreditCardRow) -> CreditCard:
    return CreditCard(
        id=row.id,
        name=row.name,
        closing_day=row.closing_day,
        payment_day=row.payment_day,
        color_tag=row.color_tag,
    )


def _to_debt(row: InstallmentDebtRow) -> InstallmentDebt:
    return InstallmentDebt(
        id=row.id,
        label=row.label,
        total_principal=_money(row.total_principal),
        remaining_amount=_money(row.remaining_amount),
        installment_count=row.installment_count,
        installments_paid=row.installments_paid,
        monthly_amount=_money(row.monthly_amount),
        due_day=row.due_day,
        paid_this_period=row.paid_this_period,
    )


def _to_budget_item(row: BudgetItemRow) -> BudgetItem:
    return BudgetItem(
        id=row.id,
        label=row.label,
        amount=_money(row.amount),
        kind=TransactionKind(row.kind),
        date=row.date,
        payment_method=PaymentMethod(row.payment_method),
        credit_card_id=row.credit_card_id,
    )


def _to_recurring(row: RecurringExpenseRow) -> RecurringExpense:
    return RecurringExpense(
        id=row.id,
        label=row.label,
        amount=_money(row.amount),
        day_of_month=row.day_of_month,
        category=Category(row.category),
        payment_method=PaymentMethod(row.payment_method),
        credit_card_id=row.credit_card_id,
    )


def _to_row(owner_id: str, record: LedgerRecord) -> Base:
    if isinstance(record, Transaction):
        return TransactionRow(
            id=record.id,
            owner_id=owner_id,
            amount=record.amount,
            kind=record.kind.value,
            category=str(record.category),
            note=record.note,
            date=record.date,
            payment_method=record.payment_method.value,
            credit_card_id=record.credit_card_id,
        )
    if isinstance(record, CreditCard):
        return CreditCardRow(
            id=record.id,
            owner_id=owner_id,
            name=record.name,
            closing_day=record.closing_day,
            payment_day=record.payment_day,
            color_tag=record.color_tag,
        )
    if isinstance(record, InstallmentDebt):
        return InstallmentDebtRow(
            id=record.id,
            owner_id=owner_id,
            label=record.label,
            total_principal=record.total_principal,
            remaining_amount=record.remaining_amount,
            installment_count=record.installment_count,
            installments_paid=record.installments_paid,
            monthly_amount=record.monthly_amount,
            due_day=record.due_day,
            paid_this_period=record.paid_this_period,
        )
    if isinstance(record, BudgetItem):
        return BudgetItemRow(
            id=record.id,
            owner_id=owner_id,
            label=record.label,
            amount=record.amount,
            kind=record.kind.value,
            date=record.date,
            payment_method=record.payment_method.value,
            credit_card_id=record.credit_card_id,
        )
    if isinstance(record, RecurringExpense):
        return RecurringExpenseRow(
            id=record.id,
            owner_id=owner_id,
            label=record.label,
            amount=record.amount,
            day_of_month=record.day_of_month,
            category=str(record.category),
            payment_method=record.payment_method.value,
            credit_card_id=record.credit_card_id,
        )
    raise TypeError(f"Unsupported ledger record: {type(record).__name__}")


class SqlLedgerRepository:
    """SQLAlchemy-backed LedgerRepository; the caller owns the session lifetime"""

    def __init__(self, db: Session):
        self.db = db

    def load_snapshot(self, owner_id: str) -> LedgerSnapshot:
        """Fetch every collection the owner holds"""
        transactions = (
            self.db.query(TransactionRow)
            .filter(TransactionRow.owner_id == owner_id)
            .order_by(TransactionRow.date.desc(), TransactionRow.created_at.desc())
            .all()
        )
        cards = self._ordered(CreditCardRow, owner_id)
        debts = self._ordered(InstallmentDebtRow, owner_id)
        budget_items = self._ordered(BudgetItemRow, owner_id)
        recurring = self._ordered(RecurringExpenseRow, owner_id)
        labels = (
            self.db.query(CategoryLabelRow)
            .filter(CategoryLabelRow.owner_id == owner_id)
            .order_by(CategoryLabelRow.position)
            .all()
        )

        return LedgerSnapshot(
            transactions=tuple(_to_transaction(r) for r in transactions),
            cards=tuple(_to_card(r) for r in cards),
            debts=tuple(_to_debt(r) for r in debts),
            budget_items=tuple(_to_budget_item(r) for r in budget_items),
            recurring_expenses=tuple(_to_recurring(r) for r in recurring),
            initial=self._load_initial_position(owner_id),
            income_categories=tuple(r.label for r in labels if r.kind == TransactionKind.INCOME.value),
            expense_categories=tuple(r.label for r in labels if r.kind == TransactionKind.EXPENSE.value),
        )

    def add_record(self, owner_id: str, record: LedgerRecord) -> None:
        self.db.add(_to_row(owner_id, record))
        self.db.flush()

    def lock_debt(self, owner_id: str, debt_id: str) -> Optional[InstallmentDebt]:
        row = (
            self.db.query(InstallmentDebtRow)
            .filter(InstallmentDebtRow.owner_id == owner_id, InstallmentDebtRow.id == debt_id)
            .with_for_update()
            .first()
        )
        return _to_debt(row) if row else None

    def replace_debt(self, owner_id: str, debt: InstallmentDebt) -> None:
        row = (
            self.db.query(InstallmentDebtRow)
            .filter(InstallmentDebtRow.owner_id == owner_id, InstallmentDebtRow.id == debt.id)
            .one()
        )
        row.remaining_amount = debt.remaining_amount
        row.installments_paid = debt.installments_paid
        row.paid_this_period = debt.paid_this_period
        self.db.flush()

    def delete_record(self, owner_id: str, collection: str, record_id: str) -> bool:
        row_type = ROW_TYPES[collection]
        deleted = (
            self.db.query(row_type)
            .filter(row_type.owner_id == owner_id, row_type.id == record_id)
            .delete(synchronize_session=False)
        )
        return deleted > 0

    def save_initial_position(self, owner_id: str, initial: InitialPosition) -> None:
        row = self.db.get(InitialPositionRow, owner_id)
        if row is None:
            row = InitialPositionRow(owner_id=owner_id)
            self.db.add(row)
        row.starting_cash_balance = initial.starting_cash_balance
        row.starting_liabilities = initial.starting_liabilities

        # Fixed assets are replaced wholesale to keep their order
        self.db.query(FixedAssetRow).filter(FixedAssetRow.owner_id == owner_id).delete(synchronize_session=False)
        for position, asset in enumerate(initial.fixed_assets):
            self.db.add(
                FixedAssetRow(id=asset.id, owner_id=owner_id, name=asset.name, value=asset.value, position=position)
            )
        self.db.flush()

    def save_categories(self, owner_id: str, kind: TransactionKind, labels: Tuple[str, ...]) -> None:
        self.db.query(CategoryLabelRow).filter(
            CategoryLabelRow.owner_id == owner_id, CategoryLabelRow.kind == kind.value
        ).delete(synchronize_session=False)
        for position, label in enumerate(labels):
            self.db.add(CategoryLabelRow(owner_id=owner_id, kind=kind.value, label=label, position=position))
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def _ordered(self, row_type, owner_id: str):
        return (
            self.db.query(row_type)
            .filter(row_type.owner_id == owner_id)
            .order_by(row_type.created_at, row_type.id)
            .all()
        )

    def _load_initial_position(self, owner_id: str) -> InitialPosition:
        row = self.db.get(InitialPositionRow, owner_id)
        assets = (
            self.db.query(FixedAssetRow)
            .filter(FixedAssetRow.owner_id == owner_id)
            .order_by(FixedAssetRow.position)
            .all()
        )
        fixed_assets = tuple(FixedAsset(id=a.id, name=a.name, value=_money(a.value)) for a in assets)
        if row is None:
            return InitialPosition(fixed_assets=fixed_assets)
        return InitialPosition(
            starting_cash_balance=_money(row.starting_cash_balance),
            starting_liabilities=_money(row.starting_liabilities),
            fixed_assets=fixed_assets,
        )
