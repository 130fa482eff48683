"""/v1/cards - credit cards and their billing-cycle status"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response

from smart_ledger.api.dependencies import get_document_store_client, get_ledger_service, get_owner_id
from smart_ledger.api.v1.schemas import CardCreate, CardSchema, CardStatusSchema
from smart_ledger.api.v1.sync import schedule_sync
from smart_ledger.domain.ports import CARDS
from smart_ledger.infrastructure.clients.document_store import DocumentStoreClient
from smart_ledger.services.ledger_service import LedgerService

router = APIRouter()


@router.post("/cards", response_model=CardSchema, status_code=201)
def create_card(
    body: CardCreate,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    card = service.add_card(owner_id, body.name, body.closing_day, body.payment_day, body.color_tag)
    schedule_sync(background_tasks, store, service, owner_id, CARDS)
    return CardSchema.model_validate(card)


@router.get("/cards", response_model=List[CardSchema])
def list_cards(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return [CardSchema.model_validate(c) for c in service.snapshot(owner_id).cards]


@router.get("/cards/status", response_model=List[CardStatusSchema])
def card_status(
    today: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Days until each card's closing and payment day, with its running balance"""
    return [CardStatusSchema.model_validate(s) for s in service.card_statuses(owner_id, today)]


@router.delete("/cards/{card_id}", status_code=204)
def delete_card(
    card_id: str,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    service.delete_card(owner_id, card_id)
    schedule_sync(background_tasks, store, service, owner_id, CARDS)
    return Response(status_code=204)
