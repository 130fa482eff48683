"""Remote document-store sink with exponential backoff retry logic"""

import asyncio
import dataclasses
import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from smart_ledger.config import settings
from smart_ledger.domain.exceptions import DocumentStoreError
from smart_ledger.domain.models import LedgerSnapshot
from smart_ledger.domain.ports import (
    BUDGET_ITEMS,
    CARDS,
    CATEGORIES,
    DEBTS,
    INITIAL_POSITION,
    RECURRING_EXPENSES,
    TRANSACTIONS,
)
from smart_ledger.infrastructure.observability.metrics import sync_failure_counter, sync_latency_histogram

logger = logging.getLogger(__name__)


def _encode(value: Any) -> Any:
    if dataclasses.is_dataclass(value):
        return {f.name: _encode(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return value


def collection_documents(snapshot: LedgerSnapshot, collection: str) -> List[Dict[str, Any]] | Dict[str, Any]:
    """JSON-ready documents for one collection of an owner's snapshot"""
    if collection == INITIAL_POSITION:
        return _encode(snapshot.initial)
    if collection == CATEGORIES:
        return {"income": list(snapshot.income_categories), "expense": list(snapshot.expense_categories)}
    records = {
        TRANSACTIONS: snapshot.transactions,
        CARDS: snapshot.cards,
        DEBTS: snapshot.debts,
        BUDGET_ITEMS: snapshot.budget_items,
        RECURRING_EXPENSES: snapshot.recurring_expenses,
    }[collection]
    return [_encode(r) for r in records]


class DocumentStoreClient:
    """Pushes whole-collection snapshots per owner to a remote document store"""

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url or settings.document_store_url
        self.timeout = settings.http_timeout_seconds
        self.max_retries = settings.sync_max_retries
        self.backoff_base = settings.sync_backoff_base

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    async def push_collection(self, owner_id: str, collection: str, documents: Any) -> None:
        """
        Write one collection for an owner, retrying until acknowledged.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^attempt)
        - Retries on 5xx errors and network failures; 4xx fails at once
        - Writes are whole-collection replacements, so redelivery is harmless

        Raises:
            DocumentStoreError: when every attempt failed or the store rejected the write
        """
        url = f"{self.base_url}/owners/{owner_id}/{collection}"
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with sync_latency_histogram.time():
                        response = await client.put(url, json={"documents": documents})
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    sync_failure_counter.inc()

                    # Client errors will not succeed on resend
                    if isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500:
                        logger.error(
                            f"Document store rejected sync: {e}",
                            extra={"owner_id": owner_id, "collection": collection, "attempts": attempt},
                        )
                        raise DocumentStoreError(f"Sync of {collection} rejected with {e.response.status_code}") from e

                    if attempt >= self.max_retries:
                        logger.error(
                            f"Document store sync failed: {e}",
                            extra={"owner_id": owner_id, "collection": collection, "attempts": attempt},
                        )
                        raise DocumentStoreError(f"Sync of {collection} failed after {attempt} attempts") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
