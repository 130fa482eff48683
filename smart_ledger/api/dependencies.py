"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from smart_ledger.config import settings
from smart_ledger.domain.options import EngineOptions
from smart_ledger.infrastructure.clients.document_store import DocumentStoreClient
from smart_ledger.infrastructure.database.repositories import SqlLedgerRepository
from smart_ledger.infrastructure.database.session import get_db
from smart_ledger.services.ledger_service import LedgerService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_owner_id(x_owner_id: str = Header(..., min_length=1, description="Ledger owner identifier")) -> str:
    """Owner of the ledger being read or changed"""
    return x_owner_id


def get_ledger_service(db: Session = Depends(get_db)) -> LedgerService:
    """Provide a LedgerService bound to the request's database session"""
    return LedgerService(SqlLedgerRepository(db), EngineOptions.from_settings(settings))


def get_document_store_client() -> DocumentStoreClient:
    """Provide the remote document-store sink"""
    return DocumentStoreClient()
