"""Unit tests for LedgerService commands over the SQLite repository"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch
from smart_ledger.domain.exceptions import (
    DanglingCardReferenceError,
    InvalidCategoryError,
    RecordNotFoundError,
)
from smart_ledger.domain.models import (
    InstallmentDebt,
    LedgerSnapshot,
    PaymentMethod,
    PaymentOutcome,
    TransactionKind,
)
from smart_ledger.domain.options import CYCLE, EngineOptions
from smart_ledger.services.ledger_service import LedgerService

OWNER = "owner_1"
TODAY = date(2024, 3, 10)


def test_record_transaction_persists(service: LedgerService):
    txn = service.record_transaction(OWNER, Decimal("42.50"), TransactionKind.EXPENSE, "Food", TODAY, note="Lunch")

    stored = service.snapshot(OWNER).transactions
    assert stored == (txn,)
    assert stored[0].amount == Decimal("42.50")


def test_record_transaction_rejects_unknown_category(service: LedgerService):
    with pytest.raises(InvalidCategoryError):
        service.record_transaction(OWNER, Decimal("10"), TransactionKind.INCOME, "Food", TODAY)

    assert service.snapshot(OWNER).transactions == ()


def test_record_transaction_rejects_unknown_card(service: LedgerService):
    with pytest.raises(DanglingCardReferenceError):
        service.record_transaction(
            OWNER,
            Decimal("10"),
            TransactionKind.EXPENSE,
            "Food",
            TODAY,
            payment_method=PaymentMethod.CREDIT_CARD,
            credit_card_id="missing",
        )


def test_owners_are_isolated(service: LedgerService):
    service.add_card(OWNER, "Visa", 25, 5)

    assert len(service.snapshot(OWNER).cards) == 1
    assert service.snapshot("someone_else").cards == ()


def test_confirm_debt_payment_commits_debt_and_transaction(service: LedgerService):
    debt = service.create_debt(OWNER, "Laptop", Decimal("1200"), 12, due_day=15)

    result = service.confirm_debt_payment(OWNER, debt.id, TODAY)

    snapshot = service.snapshot(OWNER)
    assert result.outcome == PaymentOutcome.APPLIED
    assert snapshot.debts[0].installments_paid == 1
    assert snapshot.debts[0].remaining_amount == Decimal("1100")
    assert snapshot.debts[0].paid_this_period is True
    assert len(snapshot.transactions) == 1
    assert snapshot.transactions[0].category == "Debt"


def test_confirm_debt_payment_twice_writes_once(service: LedgerService):
    debt = service.create_debt(OWNER, "Laptop", Decimal("1200"), 12)

    service.confirm_debt_payment(OWNER, debt.id, TODAY)
    second = service.confirm_debt_payment(OWNER, debt.id, TODAY)

    assert second.outcome == PaymentOutcome.ALREADY_PAID
    assert len(service.snapshot(OWNER).transactions) == 1


def test_confirm_debt_payment_is_atomic(service: LedgerService):
    """A failed transaction insert leaves the debt untouched"""
    debt = service.create_debt(OWNER, "Laptop", Decimal("1200"), 12)

    with patch.object(service.repository, "add_record", side_effect=RuntimeError("disk full")):
        with pytest.raises(RuntimeError):
            service.confirm_debt_payment(OWNER, debt.id, TODAY)

    snapshot = service.snapshot(OWNER)
    assert snapshot.debts[0] == debt
    assert snapshot.transactions == ()


def test_confirm_debt_payment_unknown_debt(service: LedgerService):
    with pytest.raises(RecordNotFoundError):
        service.confirm_debt_payment(OWNER, "missing", TODAY)


def test_rollback_on_failed_commit():
    repository = MagicMock()
    repository.load_snapshot.return_value = LedgerSnapshot()
    repository.commit.side_effect = RuntimeError("connection lost")
    service = LedgerService(repository)

    with pytest.raises(RuntimeError):
        service.add_card(OWNER, "Visa", 25, 5)

    repository.rollback.assert_called_once()


def test_reset_debt_period_allows_next_payment(service: LedgerService):
    debt = service.create_debt(OWNER, "Laptop", Decimal("1200"), 12)
    service.confirm_debt_payment(OWNER, debt.id, TODAY)

    reset = service.reset_debt_period(OWNER, debt.id)
    again = service.confirm_debt_payment(OWNER, debt.id, TODAY)

    assert reset.paid_this_period is False
    assert again.debt.installments_paid == 2
    assert len(service.snapshot(OWNER).transactions) == 2


def test_reset_all_debt_periods(service: LedgerService):
    first = service.create_debt(OWNER, "A", Decimal("100"), 2)
    service.create_debt(OWNER, "B", Decimal("100"), 2)
    service.confirm_debt_payment(OWNER, first.id, TODAY)

    service.reset_all_debt_periods(OWNER)

    assert all(not d.paid_this_period for d in service.snapshot(OWNER).debts)


def test_delete_debt_keeps_emitted_transactions(service: LedgerService):
    debt = service.create_debt(OWNER, "Laptop", Decimal("1200"), 12)
    service.confirm_debt_payment(OWNER, debt.id, TODAY)

    service.delete_debt(OWNER, debt.id)

    snapshot = service.snapshot(OWNER)
    assert snapshot.debts == ()
    assert len(snapshot.transactions) == 1


def test_delete_missing_record(service: LedgerService):
    with pytest.raises(RecordNotFoundError):
        service.delete_transaction(OWNER, "missing")


def test_categories_default_and_custom(service: LedgerService):
    assert "Salary" in service.categories(OWNER).income

    service.add_category(OWNER, TransactionKind.EXPENSE, "Pets")
    txn = service.record_transaction(OWNER, Decimal("30"), TransactionKind.EXPENSE, "Pets", TODAY)
    service.remove_category(OWNER, TransactionKind.EXPENSE, "Pets")

    assert "Pets" not in service.categories(OWNER).expense
    # Existing entries keep the removed label
    assert service.snapshot(OWNER).transactions[0].category == txn.category == "Pets"


def test_set_initial_position_keeps_asset_order(service: LedgerService):
    service.set_initial_position(
        OWNER, Decimal("10000"), Decimal("2000"), fixed_assets=[("Car", Decimal("5000")), ("Bike", Decimal("300"))]
    )

    initial = service.snapshot(OWNER).initial
    assert initial.starting_cash_balance == Decimal("10000")
    assert [a.name for a in initial.fixed_assets] == ["Car", "Bike"]

    service.set_initial_position(OWNER, Decimal("1"), Decimal("0"))
    assert service.snapshot(OWNER).initial.fixed_assets == ()


def test_balance_sheet_view(service: LedgerService):
    service.set_initial_position(OWNER, Decimal("10000"), Decimal("2000"), fixed_assets=[("Car", Decimal("5000"))])
    card = service.add_card(OWNER, "Visa", 25, 5)
    service.record_transaction(OWNER, Decimal("3000"), TransactionKind.INCOME, "Salary", TODAY)
    service.record_transaction(OWNER, Decimal("1000"), TransactionKind.EXPENSE, "Food", TODAY)
    service.record_transaction(
        OWNER,
        Decimal("500"),
        TransactionKind.EXPENSE,
        "Shopping",
        TODAY,
        payment_method=PaymentMethod.CREDIT_CARD,
        credit_card_id=card.id,
    )

    sheet = service.balance_sheet(OWNER, TODAY)

    assert sheet.cash_position == Decimal("12000")
    assert sheet.net_worth == Decimal("14500")


def test_cycle_scoped_unbilled_total(db):
    from smart_ledger.infrastructure.database.repositories import SqlLedgerRepository

    service = LedgerService(SqlLedgerRepository(db), EngineOptions(card_balance_scope=CYCLE))
    card = service.add_card(OWNER, "Visa", 25, 5)
    for on in (date(2024, 1, 10), TODAY):
        service.record_transaction(
            OWNER,
            Decimal("100"),
            TransactionKind.EXPENSE,
            "Shopping",
            on,
            payment_method=PaymentMethod.CREDIT_CARD,
            credit_card_id=card.id,
        )

    assert service.balance_sheet(OWNER, TODAY).unbilled_credit_card_total == Decimal("100")


def test_card_statuses(service: LedgerService):
    card = service.add_card(OWNER, "Visa", 25, 5)

    [status] = service.card_statuses(OWNER, date(2024, 3, 28))

    assert status.card_id == card.id
    assert status.days_to_closing == 27
    assert status.days_to_payment == 7
    assert status.balance == Decimal("0")


def test_debt_schedule_unknown_debt(service: LedgerService):
    with pytest.raises(RecordNotFoundError):
        service.debt_schedule(OWNER, "missing", TODAY)


def test_forecast_and_feasibility_views(service: LedgerService):
    debt = service.create_debt(OWNER, "Loan", Decimal("1000"), 10, due_day=12)
    service.record_transaction(OWNER, Decimal("5000"), TransactionKind.INCOME, "Salary", TODAY)

    forecast = service.forecast(OWNER, TODAY)
    verdict = service.feasibility(OWNER, TODAY)

    assert len(forecast) == 8
    assert forecast[0].total == debt.monthly_amount
    assert verdict.total_projected_expense == Decimal("100")
    assert verdict.balanced is True


def test_debt_rows_round_trip_exactly(service: LedgerService):
    debt = service.create_debt(OWNER, "Odd", Decimal("1000.25"), 3)

    [stored] = service.snapshot(OWNER).debts

    assert isinstance(stored, InstallmentDebt)
    assert stored.total_principal == Decimal("1000.25")
    assert stored.monthly_amount == debt.monthly_amount


def test_add_budget_item_checks_card_reference(service: LedgerService):
    card = service.add_card(OWNER, "Visa", 25, 5)

    for card_id in (None, "missing"):
        with pytest.raises(DanglingCardReferenceError):
            service.add_budget_item(
                OWNER,
                "Flight",
                Decimal("800"),
                TransactionKind.EXPENSE,
                TODAY,
                payment_method=PaymentMethod.CREDIT_CARD,
                credit_card_id=card_id,
            )
    assert service.snapshot(OWNER).budget_items == ()

    item = service.add_budget_item(
        OWNER,
        "Flight",
        Decimal("800"),
        TransactionKind.EXPENSE,
        TODAY,
        payment_method=PaymentMethod.CREDIT_CARD,
        credit_card_id=card.id,
    )
    cash = service.add_budget_item(OWNER, "Trip", Decimal("50"), TransactionKind.EXPENSE, TODAY, credit_card_id=card.id)

    assert item.credit_card_id == card.id
    assert cash.credit_card_id is None
