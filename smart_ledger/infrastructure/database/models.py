"""SQLAlchemy ORM models - one row per record, every row keyed by its owner"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

MONEY = Numeric(18, 4, asdecimal=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionRow(Base):
    """Recorded income or expense"""

    __tablename__ = "ledger_transaction"

    id = Column(String(36), primary_key=True)
    owner_id = Column(Text, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    kind = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    note = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    payment_method = Column(Text, nullable=False)
    credit_card_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class CreditCardRow(Base):
    __tablename__ = "credit_card"

    id = Column(String(36), primary_key=True)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    closing_day = Column(Integer, nullable=False)
    payment_day = Column(Integer, nullable=False)
    color_tag = Column(Text, nullable=False, default="#4f46e5")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class InstallmentDebtRow(Base):
    """Installment debt with its amortization state"""

    __tablename__ = "installment_debt"

    id = Column(String(36), primary_key=True)
    owner_id = Column(Text, nullable=False, index=True)
    label = Column(Text, nullable=False)
    total_principal = Column(MONEY, nullable=False)
    remaining_amount = Column(MONEY, nullable=False)
    installment_count = Column(Integer, nullable=False)
    installments_paid = Column(Integer, nullable=False, default=0)
    monthly_amount = Column(MONEY, nullable=False)
    due_day = Column(Integer, nullable=False)
    paid_this_period = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class BudgetItemRow(Base):
    """One-off planned income or expense"""

    __tablename__ = "budget_item"

    id = Column(String(36), primary_key=True)
    owner_id = Column(Text, nullable=False, index=True)
    label = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    kind = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    payment_method = Column(Text, nullable=False)
    credit_card_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class RecurringExpenseRow(Base):
    __tablename__ = "recurring_expense"

    id = Column(String(36), primary_key=True)
    owner_id = Column(Text, nullable=False, index=True)
    label = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    day_of_month = Column(Integer, nullable=False)
    category = Column(Text, nullable=False)
    payment_method = Column(Text, nullable=False)
    credit_card_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class InitialPositionRow(Base):
    """Opening balance sheet, one per owner"""

    __tablename__ = "initial_position"

    owner_id = Column(Text, primary_key=True)
    starting_cash_balance = Column(MONEY, nullable=False, default=0)
    starting_liabilities = Column(MONEY, nullable=False, default=0)


class FixedAssetRow(Base):
    __tablename__ = "fixed_asset"

    id = Column(String(36), primary_key=True)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    value = Column(MONEY, nullable=False)
    position = Column(Integer, nullable=False, default=0)


class CategoryLabelRow(Base):
    """User-managed category label, ordered per owner and kind"""

    __tablename__ = "category_label"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Text, nullable=False, index=True)
    kind = Column(Text, nullable=False)
    label = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)
