"""/v1 planning inputs - budget items, recurring expenses, opening position and categories"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Response

from smart_ledger.api.dependencies import get_document_store_client, get_ledger_service, get_owner_id
from smart_ledger.api.v1.schemas import (
    BudgetItemCreate,
    BudgetItemSchema,
    CategoriesSchema,
    CategoryIn,
    InitialPositionIn,
    InitialPositionSchema,
    RecurringExpenseCreate,
    RecurringExpenseSchema,
)
from smart_ledger.api.v1.sync import schedule_sync
from smart_ledger.domain.ports import BUDGET_ITEMS, CATEGORIES, INITIAL_POSITION, RECURRING_EXPENSES
from smart_ledger.infrastructure.clients.document_store import DocumentStoreClient
from smart_ledger.services.ledger_service import LedgerService

router = APIRouter()


@router.post("/budget-items", response_model=BudgetItemSchema, status_code=201)
def create_budget_item(
    body: BudgetItemCreate,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    item = service.add_budget_item(
        owner_id,
        label=body.label,
        amount=body.amount,
        kind=body.kind,
        on=body.date,
        payment_method=body.payment_method,
        credit_card_id=body.credit_card_id,
    )
    schedule_sync(background_tasks, store, service, owner_id, BUDGET_ITEMS)
    return BudgetItemSchema.model_validate(item)


@router.get("/budget-items", response_model=List[BudgetItemSchema])
def list_budget_items(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return [BudgetItemSchema.model_validate(i) for i in service.snapshot(owner_id).budget_items]


@router.delete("/budget-items/{item_id}", status_code=204)
def delete_budget_item(
    item_id: str,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    service.delete_budget_item(owner_id, item_id)
    schedule_sync(background_tasks, store, service, owner_id, BUDGET_ITEMS)
    return Response(status_code=204)


@router.post("/recurring-expenses", response_model=RecurringExpenseSchema, status_code=201)
def create_recurring_expense(
    body: RecurringExpenseCreate,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    rec = service.add_recurring_expense(
        owner_id,
        label=body.label,
        amount=body.amount,
        day_of_month=body.day_of_month,
        category=body.category,
        payment_method=body.payment_method,
        credit_card_id=body.credit_card_id,
    )
    schedule_sync(background_tasks, store, service, owner_id, RECURRING_EXPENSES)
    return RecurringExpenseSchema.model_validate(rec)


@router.get("/recurring-expenses", response_model=List[RecurringExpenseSchema])
def list_recurring_expenses(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return [RecurringExpenseSchema.model_validate(r) for r in service.snapshot(owner_id).recurring_expenses]


@router.delete("/recurring-expenses/{recurring_id}", status_code=204)
def delete_recurring_expense(
    recurring_id: str,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    service.delete_recurring_expense(owner_id, recurring_id)
    schedule_sync(background_tasks, store, service, owner_id, RECURRING_EXPENSES)
    return Response(status_code=204)


@router.put("/initial-position", response_model=InitialPositionSchema)
def set_initial_position(
    body: InitialPositionIn,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    """Replace the opening balance sheet, fixed assets in the given order"""
    initial = service.set_initial_position(
        owner_id,
        starting_cash_balance=body.starting_cash_balance,
        starting_liabilities=body.starting_liabilities,
        fixed_assets=[(asset.name, asset.value) for asset in body.fixed_assets],
    )
    schedule_sync(background_tasks, store, service, owner_id, INITIAL_POSITION)
    return InitialPositionSchema.model_validate(initial)


@router.get("/initial-position", response_model=InitialPositionSchema)
def get_initial_position(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return InitialPositionSchema.model_validate(service.snapshot(owner_id).initial)


@router.get("/categories", response_model=CategoriesSchema)
def list_categories(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return CategoriesSchema.model_validate(service.categories(owner_id))


@router.post("/categories", response_model=CategoriesSchema, status_code=201)
def add_category(
    body: CategoryIn,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    registry = service.add_category(owner_id, body.kind, body.label)
    schedule_sync(background_tasks, store, service, owner_id, CATEGORIES)
    return CategoriesSchema.model_validate(registry)


@router.delete("/categories", response_model=CategoriesSchema)
def remove_category(
    body: CategoryIn,
    background_tasks: BackgroundTasks,
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
    store: DocumentStoreClient = Depends(get_document_store_client),
):
    """Existing transactions keep the removed label"""
    registry = service.remove_category(owner_id, body.kind, body.label)
    schedule_sync(background_tasks, store, service, owner_id, CATEGORIES)
    return CategoriesSchema.model_validate(registry)
