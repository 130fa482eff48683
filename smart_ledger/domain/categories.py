"""User-managed category labels, one ordered set per transaction kind"""

from dataclasses import dataclass
from typing import Tuple

from smart_ledger.domain.exceptions import InvalidCategoryError
from smart_ledger.domain.models import Category, LedgerSnapshot, TransactionKind

DEFAULT_INCOME_CATEGORIES: Tuple[str, ...] = ("Salary", "Bonus", "Investment", "Other")
DEFAULT_EXPENSE_CATEGORIES: Tuple[str, ...] = (
    "Food",
    "Transport",
    "Housing",
    "Utilities",
    "Entertainment",
    "Shopping",
    "Health",
    "Debt",
    "Other",
)


@dataclass(frozen=True)
class CategoryRegistry:
    income: Tuple[str, ...] = DEFAULT_INCOME_CATEGORIES
    expense: Tuple[str, ...] = DEFAULT_EXPENSE_CATEGORIES

    @classmethod
    def from_snapshot(cls, snapshot: LedgerSnapshot) -> "CategoryRegistry":
        """Owners who never customised their labels get the defaults"""
        return cls(
            income=snapshot.income_categories or DEFAULT_INCOME_CATEGORIES,
            expense=snapshot.expense_categories or DEFAULT_EXPENSE_CATEGORIES,
        )

    def labels_for(self, kind: TransactionKind) -> Tuple[str, ...]:
        return self.income if kind == TransactionKind.INCOME else self.expense

    def validate(self, kind: TransactionKind, label: str) -> Category:
        label = label.strip()
        if label not in self.labels_for(kind):
            raise InvalidCategoryError(f"'{label}' is not a registered {kind.value.lower()} category")
        return Category(label)

    def with_label(self, kind: TransactionKind, label: str) -> "CategoryRegistry":
        label = label.strip()
        if not label:
            raise InvalidCategoryError("Category label must not be blank")
        labels = self.labels_for(kind)
        if label in labels:
            return self
        return self._replace(kind, labels + (label,))

    def without_label(self, kind: TransactionKind, label: str) -> "CategoryRegistry":
        """Existing transactions keep the label; only new entries are affected"""
        labels = self.labels_for(kind)
        if label not in labels:
            raise InvalidCategoryError(f"'{label}' is not a registered {kind.value.lower()} category")
        return self._replace(kind, tuple(existing for existing in labels if existing != label))

    def _replace(self, kind: TransactionKind, labels: Tuple[str, ...]) -> "CategoryRegistry":
        if kind == TransactionKind.INCOME:
            return CategoryRegistry(income=labels, expense=self.expense)
        return CategoryRegistry(income=self.income, expense=labels)
