"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from smart_ledger.domain.models import ForecastLineKind, PaymentMethod, ReminderKind, TransactionKind

DayOfMonth = Annotated[int, Field(ge=1, le=31)]


class RecordSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def _require_card(payment_method: PaymentMethod, credit_card_id: Optional[str]) -> None:
    if payment_method == PaymentMethod.CREDIT_CARD and not credit_card_id:
        raise ValueError("credit_card_id is required for credit card payments")


# Requests


class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    amount: Decimal = Field(..., gt=0)
    kind: TransactionKind
    category: str = Field(..., min_length=1)
    date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    note: str = ""
    credit_card_id: Optional[str] = None

    @model_validator(mode="after")
    def check_card(self):
        _require_card(self.payment_method, self.credit_card_id)
        return self


class CardCreate(BaseModel):
    name: str = Field(..., min_length=1)
    closing_day: DayOfMonth
    payment_day: DayOfMonth
    color_tag: str = "#4f46e5"


class DebtCreate(BaseModel):
    """Request body for POST /v1/debts"""

    label: str = Field(..., min_length=1)
    total_principal: Decimal = Field(..., gt=0)
    installment_count: int = Field(..., gt=0)
    installments_already_paid: int = Field(0, ge=0)
    due_day: DayOfMonth

    @model_validator(mode="after")
    def check_paid(self):
        if self.installments_already_paid > self.installment_count:
            raise ValueError("installments_already_paid cannot exceed installment_count")
        return self


class BudgetItemCreate(BaseModel):
    label: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    kind: TransactionKind
    date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    credit_card_id: Optional[str] = None

    @model_validator(mode="after")
    def check_card(self):
        _require_card(self.payment_method, self.credit_card_id)
        return self


class RecurringExpenseCreate(BaseModel):
    label: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    day_of_month: DayOfMonth
    category: str = "Other"
    payment_method: PaymentMethod = PaymentMethod.CASH
    credit_card_id: Optional[str] = None

    @model_validator(mode="after")
    def check_card(self):
        _require_card(self.payment_method, self.credit_card_id)
        return self


class FixedAssetIn(BaseModel):
    name: str = Field(..., min_length=1)
    value: Decimal


class InitialPositionIn(BaseModel):
    starting_cash_balance: Decimal = Decimal("0")
    starting_liabilities: Decimal = Decimal("0")
    fixed_assets: List[FixedAssetIn] = []


class CategoryIn(BaseModel):
    kind: TransactionKind
    label: str = Field(..., min_length=1)


# Records


class TransactionSchema(RecordSchema):
    id: str
    amount: Decimal
    kind: TransactionKind
    category: str
    date: date
    payment_method: PaymentMethod
    note: str
    credit_card_id: Optional[str] = None


class CardSchema(RecordSchema):
    id: str
    name: str
    closing_day: int
    payment_day: int
    color_tag: str


class CardStatusSchema(RecordSchema):
    card_id: str
    name: str
    days_to_closing: int
    days_to_payment: int
    balance: Decimal


class DebtSchema(RecordSchema):
    id: str
    label: str
    total_principal: Decimal
    remaining_amount: Decimal
    installment_count: int
    installments_paid: int
    monthly_amount: Decimal
    due_day: int
    paid_this_period: bool
    settled: bool
    progress_percent: float


class PaymentResponse(BaseModel):
    """Response for POST /v1/debts/{debt_id}/payments"""

    outcome: str
    applied: bool
    debt: DebtSchema
    transaction: Optional[TransactionSchema] = None


class ScheduledInstallment(BaseModel):
    due_date: date
    amount: Decimal


class BudgetItemSchema(RecordSchema):
    id: str
    label: str
    amount: Decimal
    kind: TransactionKind
    date: date
    payment_method: PaymentMethod
    credit_card_id: Optional[str] = None


class RecurringExpenseSchema(RecordSchema):
    id: str
    label: str
    amount: Decimal
    day_of_month: int
    category: str
    payment_method: PaymentMethod
    credit_card_id: Optional[str] = None


class FixedAssetSchema(RecordSchema):
    id: str
    name: str
    value: Decimal


class InitialPositionSchema(RecordSchema):
    starting_cash_balance: Decimal
    starting_liabilities: Decimal
    fixed_assets: List[FixedAssetSchema]


class CategoriesSchema(RecordSchema):
    income: List[str]
    expense: List[str]


# Reports


class BalanceSheetSchema(RecordSchema):
    cash_position: Decimal
    net_worth: Decimal
    unbilled_credit_card_total: Decimal
    total_debt_remaining: Decimal
    fixed_assets_total: Decimal


class ReminderSchema(RecordSchema):
    source_id: str
    label: str
    amount: Decimal
    day: int
    kind: ReminderKind


class RemindersSchema(RecordSchema):
    items: List[ReminderSchema]
    total: Decimal


class ForecastLineSchema(RecordSchema):
    label: str
    amount: Decimal
    kind: ForecastLineKind
    due_date: date


class ForecastPeriodSchema(RecordSchema):
    index: int
    start: date
    end: date
    items: List[ForecastLineSchema]
    total: Decimal


class ForecastSchema(BaseModel):
    periods: List[ForecastPeriodSchema]


class CategoryBreakdownSchema(BaseModel):
    expenses: Dict[str, Decimal]


class FeasibilitySchema(RecordSchema):
    total_projected_income: Decimal
    total_projected_expense: Decimal
    safety_margin: Decimal
    remaining: Decimal
    balanced: bool


class DailyTotalsSchema(RecordSchema):
    day: date
    income: Decimal
    expense: Decimal


class MonthlyTotalsSchema(RecordSchema):
    month: str
    income: Decimal
    expense: Decimal
    balance: Decimal


class DashboardSchema(RecordSchema):
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    daily: List[DailyTotalsSchema]
    monthly: List[MonthlyTotalsSchema]
