"""GET /v1/reports/* - derived views, recomputed in full on every request"""

import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from smart_ledger.api.dependencies import get_ledger_service, get_owner_id, get_request_id
from smart_ledger.api.v1.schemas import (
    BalanceSheetSchema,
    CategoryBreakdownSchema,
    DashboardSchema,
    FeasibilitySchema,
    ForecastPeriodSchema,
    ForecastSchema,
    RemindersSchema,
)
from smart_ledger.infrastructure.observability.logging import log_feasibility
from smart_ledger.infrastructure.observability.metrics import record_feasibility
from smart_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/reports")


@router.get("/balance-sheet", response_model=BalanceSheetSchema)
def balance_sheet(
    today: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return BalanceSheetSchema.model_validate(service.balance_sheet(owner_id, today))


@router.get("/reminders", response_model=RemindersSchema)
def reminders(
    today: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Card bills and recurring expenses due within the reminder window"""
    return RemindersSchema.model_validate(service.reminders(owner_id, today))


@router.get("/forecast", response_model=ForecastSchema)
def forecast(
    today: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """Rolling weekly cash-outflow projection"""
    return ForecastSchema(periods=[ForecastPeriodSchema.model_validate(p) for p in service.forecast(owner_id, today)])


@router.get("/categories", response_model=CategoryBreakdownSchema)
def categories(
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    return CategoryBreakdownSchema(expenses=service.category_breakdown(owner_id))


@router.get("/feasibility", response_model=FeasibilitySchema)
def feasibility(
    request: Request,
    today: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    start_time = time.time()
    verdict = service.feasibility(owner_id, today)

    duration_ms = (time.time() - start_time) * 1000
    record_feasibility(verdict.balanced)
    log_feasibility(get_request_id(request), owner_id, verdict.balanced, verdict.remaining, duration_ms)

    return FeasibilitySchema.model_validate(verdict)


@router.get("/dashboard", response_model=DashboardSchema)
def dashboard(
    today: Optional[date] = Query(None, description="Evaluation date (defaults to today)"),
    owner_id: str = Depends(get_owner_id),
    service: LedgerService = Depends(get_ledger_service),
):
    """All-time totals, last 7 days and last 6 months"""
    return DashboardSchema.model_validate(service.dashboard(owner_id, today))
