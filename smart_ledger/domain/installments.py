"""Installment debt state transitions and repayment schedules"""

import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional, Sequence, Tuple

from smart_ledger.domain.billing_cycle import next_occurrence
from smart_ledger.domain.models import (
    Category,
    InstallmentDebt,
    PaymentMethod,
    PaymentOutcome,
    PaymentResult,
    Transaction,
    TransactionKind,
)
from smart_ledger.domain.money import ZERO, clamp_non_negative, quiet_decimal, round_half_up, to_decimal
from smart_ledger.utils.date_utils import clamp_day, shift_months


def _new_id() -> str:
    return str(uuid.uuid4())


@quiet_decimal
def create_debt(
    label: str,
    total_principal: Decimal,
    installment_count: int,
    installments_already_paid: int = 0,
    due_day: int = 15,
    debt_id: Optional[str] = None,
) -> InstallmentDebt:
    """
    Open a new installment debt.

    monthly_amount = round(total_principal / installment_count), half up
    remaining      = total_principal - monthly_amount * installments_already_paid (floored at 0)

    Example:
        12000 over 12 installments, 3 already paid → 1000/month, 9000 remaining
    """
    principal = to_decimal(total_principal)
    monthly = round_half_up(principal / Decimal(installment_count))
    remaining = clamp_non_negative(principal - monthly * installments_already_paid)

    return InstallmentDebt(
        id=debt_id or _new_id(),
        label=label,
        total_principal=principal,
        remaining_amount=remaining,
        installment_count=installment_count,
        installments_paid=installments_already_paid,
        monthly_amount=monthly,
        due_day=due_day,
        paid_this_period=False,
    )


@quiet_decimal
def confirm_payment(
    debt: InstallmentDebt,
    today: date,
    category: str = "Debt",
    id_factory: Callable[[], str] = _new_id,
) -> PaymentResult:
    """
    Apply one installment payment and emit the matching cash expense.

    No-op when the debt is settled or already paid this period: the same
    debt comes back unchanged and no transaction is produced. Callers must
    persist the debt update and the transaction together or not at all.
    """
    if debt.settled:
        return PaymentResult(debt=debt, transaction=None, outcome=PaymentOutcome.SETTLED)
    if debt.paid_this_period:
        return PaymentResult(debt=debt, transaction=None, outcome=PaymentOutcome.ALREADY_PAID)

    installment_number = debt.installments_paid + 1
    updated = replace(
        debt,
        installments_paid=installment_number,
        remaining_amount=clamp_non_negative(debt.remaining_amount - debt.monthly_amount),
        paid_this_period=True,
    )
    transaction = Transaction(
        id=id_factory(),
        amount=debt.monthly_amount,
        kind=TransactionKind.EXPENSE,
        category=Category(category),
        date=today,
        payment_method=PaymentMethod.CASH,
        note=f"Debt payment: {debt.label} (installment {installment_number}/{debt.installment_count})",
    )
    return PaymentResult(debt=updated, transaction=transaction, outcome=PaymentOutcome.APPLIED)


def reset_period(debt: InstallmentDebt) -> InstallmentDebt:
    """Clear the paid-this-period flag. The host decides when a new period starts."""
    if not debt.paid_this_period:
        return debt
    return replace(debt, paid_this_period=False)


def reset_all_periods(debts: Sequence[InstallmentDebt]) -> Tuple[InstallmentDebt, ...]:
    return tuple(reset_period(d) for d in debts)


def delete_debt(debts: Sequence[InstallmentDebt], debt_id: str) -> Tuple[InstallmentDebt, ...]:
    """Drop a debt. Transactions already emitted for it are kept."""
    return tuple(d for d in debts if d.id != debt_id)


@quiet_decimal
def installment_schedule(debt: InstallmentDebt, today: date) -> List[Tuple[date, Decimal]]:
    """
    Remaining installments as (due_date, amount) pairs.

    The first due date is the next due day on or after today, or next
    month's if this period is already paid. The last installment absorbs
    rounding drift so the amounts add up to remaining_amount exactly.

    Example:
        remaining 1000, monthly 333, 3 left → [333, 333, 334]
    """
    left = debt.installment_count - debt.installments_paid
    if left <= 0 or not debt.remaining_amount > ZERO:
        return []

    first = next_occurrence(today, debt.due_day)
    if debt.paid_this_period and first.month == today.month and first.year == today.year:
        following = shift_months(today, 1)
        first = clamp_day(following.year, following.month, debt.due_day)

    schedule = []
    scheduled = ZERO
    for i in range(left):
        month = shift_months(first, i)
        due_date = clamp_day(month.year, month.month, debt.due_day)
        if i == left - 1:
            # Last installment absorbs remainder to ensure exact total
            amount = debt.remaining_amount - scheduled
        else:
            amount = min(debt.monthly_amount, debt.remaining_amount - scheduled)
        schedule.append((due_date, amount))
        scheduled += amount
    return schedule
