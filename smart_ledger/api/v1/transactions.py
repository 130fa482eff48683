"""/v1/transactions - record, list and delete income and expenses"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Response

from smart_ledger.api.dependencies import get_document_store_client, get_ledger_service, get_owner_id
from smart_ledger.api.v1.schemas import TransactionCreate, TransactionSchema
from smart_ledger.api.v1.sync import schedule_sync
from smart_ledger.domain.ports import TRANSACTIONS
from smart_ledger.infrastructure.clients.document_store import DocumentStoreClient
from smart_ledger.infrastructure.observability.metrics import record_transaction
from smart_ledger.services.ledger_service import LedgerService

router = APIRouter()


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def create_transaction(
    body: TransactionCreate,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    """Record an income or expense; card payments must name an existing card"""
    txn = service.record_transaction(
        owner_id,
        amount=body.amount,
        kind=body.kind,
        category=body.category,
        on=body.date,
        payment_method=body.payment_method,
        note=body.note,
        credit_card_id=body.credit_card_id,
    )
    record_transaction(txn.kind.value, txn.payment_method.value)
    schedule_sync(background_tasks, store, service, owner_id, TRANSACTIONS)
    return TransactionSchema.model_validate(txn)


@router.get("/transactions", response_model=List[TransactionSchema])
def list_transactions(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Newest first"""
    return [TransactionSchema.model_validate(t) for t in service.snapshot(owner_id).transactions]


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    service.delete_transaction(owner_id, transaction_id)
    schedule_sync(background_tasks, store, service, owner_id, TRANSACTIONS)
    return Response(status_code=204)
