"""/v1/debts - installment debts, payment confirmation and period rollover"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, Response

from smart_ledger.api.dependencies import (
    get_document_store_client,
    get_ledger_service,
    get_owner_id,
    get_request_id,
)
from smart_ledger.api.v1.schemas import (
    DebtCreate,
    DebtSchema,
    PaymentResponse,
    ScheduledInstallment,
    TransactionSchema,
)
from smart_ledger.api.v1.sync import schedule_sync
from smart_ledger.domain.exceptions import RecordNotFoundError
from smart_ledger.domain.ports import DEBTS, TRANSACTIONS
from smart_ledger.infrastructure.clients.document_store import DocumentStoreClient
from smart_ledger.infrastructure.observability.logging import log_payment_confirmed
from smart_ledger.infrastructure.observability.metrics import record_debt_payment, record_transaction
from smart_ledger.services.ledger_service import LedgerService

router = APIRouter()


@router.post("/debts", response_model=DebtSchema, status_code=201)
def create_debt(
    body: DebtCreate,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    debt = service.create_debt(
        owner_id,
        label=body.label,
        total_principal=body.total_principal,
        installment_count=body.installment_count,
        installments_already_paid=body.installments_already_paid,
        due_day=body.due_day,
    )
    schedule_sync(background_tasks, store, service, owner_id, DEBTS)
    return DebtSchema.model_validate(debt)


@router.get("/debts", response_model=List[DebtSchema])
def list_debts(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return [DebtSchema.model_validate(d) for d in service.snapshot(owner_id).debts]


@router.post("/debts/{debt_id}/payments", response_model=PaymentResponse)
def confirm_payment(
    debt_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    today: Optional[date] = Query(None, description="Payment date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    """
    Pay this period's installment.

    Flow:
    1. Lock the debt and check it is neither settled nor already paid
    2. Advance the installment count and reduce the remaining amount
    3. Record the matching cash expense
    4. Commit both together, then sync debts and transactions

    Settled or already-paid debts return 200 with applied=false and no transaction.
    """
    request_id = get_request_id(request)

    try:
        result = service.confirm_debt_payment(owner_id, debt_id, today)
    except RecordNotFoundError as e:
        logging.warning(f"Debt not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    record_debt_payment(result.outcome.value)
    log_payment_confirmed(
        request_id,
        owner_id,
        debt_id,
        result.outcome.value,
        result.debt.installments_paid,
        result.debt.remaining_amount,
    )

    if result.applied:
        record_transaction(result.transaction.kind.value, result.transaction.payment_method.value)
        schedule_sync(background_tasks, store, service, owner_id, DEBTS, TRANSACTIONS)

    return PaymentResponse(
        outcome=result.outcome.value,
        applied=result.applied,
        debt=DebtSchema.model_validate(result.debt),
        transaction=TransactionSchema.model_validate(result.transaction) if result.transaction else None,
    )


@router.post("/debts/{debt_id}/reset", response_model=DebtSchema)
def reset_period(
    debt_id: str,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    """Allow one more installment payment for this debt"""
    debt = service.reset_debt_period(owner_id, debt_id)
    schedule_sync(background_tasks, store, service, owner_id, DEBTS)
    return DebtSchema.model_validate(debt)


@router.post("/debts/reset", response_model=List[DebtSchema])
def reset_all_periods(
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    """Period rollover for every debt, invoked by the host at the start of a billing month"""
    debts = service.reset_all_debt_periods(owner_id)
    schedule_sync(background_tasks, store, service, owner_id, DEBTS)
    return [DebtSchema.model_validate(d) for d in debts]


@router.get("/debts/{debt_id}/schedule", response_model=List[ScheduledInstallment])
def debt_schedule(
    debt_id: str,
    today: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Remaining installments with due dates"""
    return [
        ScheduledInstallment(due_date=due_date, amount=amount)
        for due_date, amount in service.debt_schedule(owner_id, debt_id, today)
    ]


@router.delete("/debts/{debt_id}", status_code=204)
def delete_debt(
    debt_id: str,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    """Transactions already emitted for the debt are kept"""
    service.delete_debt(owner_id, debt_id)
    schedule_sync(background_tasks, store, service, owner_id, DEBTS)
    return Response(status_code=204)
