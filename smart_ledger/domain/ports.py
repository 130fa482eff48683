"""Persistence port the service layer is wired to. The pure engine never touches it."""

from typing import Optional, Protocol, Tuple, Union

from smart_ledger.domain.models import (
    BudgetItem,
    CreditCard,
    InitialPosition,
    InstallmentDebt,
    LedgerSnapshot,
    RecurringExpense,
    Transaction,
    TransactionKind,
)

LedgerRecord = Union[Transaction, CreditCard, InstallmentDebt, BudgetItem, RecurringExpense]

# Collection names shared by repositories, the document-store sink and error messages
TRANSACTIONS = "transactions"
CARDS = "cards"
DEBTS = "debts"
BUDGET_ITEMS = "budget_items"
RECURRING_EXPENSES = "recurring_expenses"
INITIAL_POSITION = "initial_position"
CATEGORIES = "categories"


class LedgerRepository(Protocol):
    """Storage for one owner's collections, with unit-of-work semantics"""

    def load_snapshot(self, owner_id: str) -> LedgerSnapshot:  # pragma: no cover - interface
        ...

    def add_record(self, owner_id: str, record: LedgerRecord) -> None:  # pragma: no cover - interface
        ...

    def replace_debt(self, owner_id: str, debt: InstallmentDebt) -> None:  # pragma: no cover - interface
        ...

    def lock_debt(self, owner_id: str, debt_id: str) -> Optional[InstallmentDebt]:  # pragma: no cover - interface
        """Fetch a debt and hold it against concurrent writers until commit/rollback"""
        ...

    def delete_record(self, owner_id: str, collection: str, record_id: str) -> bool:  # pragma: no cover - interface
        ...

    def save_initial_position(self, owner_id: str, initial: InitialPosition) -> None:  # pragma: no cover - interface
        ...

    def save_categories(
        self, owner_id: str, kind: TransactionKind, labels: Tuple[str, ...]
    ) -> None:  # pragma: no cover - interface
        ...

    def commit(self) -> None:  # pragma: no cover - interface
        ...

    def rollback(self) -> None:  # pragma: no cover - interface
        ...
