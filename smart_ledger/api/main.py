"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from smart_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from smart_ledger.api.v1 import cards, debts, planning, reports, transactions
from smart_ledger.config import settings
from smart_ledger.domain.exceptions import (
    DanglingCardReferenceError,
    InvalidCategoryError,
    RecordNotFoundError,
)
from smart_ledger.infrastructure.database.session import init_db
from smart_ledger.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Smart Ledger",
        description="Personal ledger with balance sheet, reminders, cash-flow forecast and budget checks",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RecordNotFoundError)
    async def not_found(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidCategoryError)
    @app.exception_handler(DanglingCardReferenceError)
    async def unprocessable(request: Request, exc: Exception):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(cards.router, prefix="/v1", tags=["cards"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(planning.router, prefix="/v1", tags=["planning"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
